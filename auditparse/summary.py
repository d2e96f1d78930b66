"""Batch summaries and status-code categories."""

import json
from collections import Counter
from typing import Iterable

from auditparse.models import LogEntry, ParseResult, result_to_dict

NO_ENTRIES_MESSAGE = "No audit entries found matching the criteria."


def _section(title: str, counter: Counter) -> str:
    items = ", ".join(f"{key} ({count})" for key, count in counter.items())
    return f". {title}: {items}"


def generate_summary(entries: Iterable[LogEntry]) -> str:
    """One-paragraph digest: entry count, then users, status codes, actions and resources."""
    entries = list(entries)
    if not entries:
        return NO_ENTRIES_MESSAGE

    # Counter preserves first-seen order
    users = Counter(e.username for e in entries if e.username)
    codes = Counter(e.status_code for e in entries if e.status_code)
    verbs = Counter(e.verb for e in entries if e.verb)
    resources = Counter(e.resource for e in entries if e.resource)

    summary = f"Found {len(entries)} audit entries"
    if users:
        summary += _section("Users involved", users)
    if codes:
        summary += _section("Status codes", codes)
    if verbs:
        summary += _section("Actions", verbs)
    if resources:
        summary += _section("Resources", resources)
    return summary


def categorize_status_code(code: int) -> str:
    if 200 <= code < 300:
        return "success"
    if 400 <= code < 500:
        return "client_error"
    if 500 <= code < 600:
        return "server_error"
    return "other"


def count_status_categories(entries: Iterable[LogEntry]) -> dict[str, int]:
    """Count entries per status category, skipping entries without a status code."""
    counter = Counter(
        categorize_status_code(e.status_code) for e in entries if e.status_code
    )
    return dict(counter)


def format_report_text(result: ParseResult, max_errors: int = 10) -> str:
    """Human-readable batch report."""
    lines = [generate_summary(result.entries), ""]
    lines.append(f"Total lines:   {result.total_lines}")
    lines.append(f"Parsed lines:  {result.parsed_lines}")
    lines.append(f"Error lines:   {result.error_lines}")
    lines.append(
        f"By tier:       json={result.json_parsed_lines} "
        f"structured={result.structured_parsed_lines} grep={result.grep_parsed_lines}"
    )
    lines.append(f"Accuracy est.: {result.accuracy_estimate:.2f} (heuristic)")
    lines.append(
        f"Throughput:    {result.performance.lines_per_second:.0f} lines/s, "
        f"avg {result.performance.average_line_size} bytes/line"
    )

    categories = count_status_categories(result.entries)
    if categories:
        lines.append("")
        lines.append("Status categories:")
        for category, count in sorted(categories.items()):
            lines.append(f"  {category:13s} {count}")

    if result.parse_errors:
        lines.append("")
        shown = result.parse_errors[:max_errors]
        lines.append(f"Errors ({len(result.parse_errors)} recorded, {result.error_lines} lines):")
        for msg in shown:
            lines.append(f"  - {msg}")
        if len(result.parse_errors) > len(shown):
            lines.append(f"  ... {len(result.parse_errors) - len(shown)} more")

    return "\n".join(lines)


def format_report_json(result: ParseResult) -> str:
    data = result_to_dict(result)
    data["summary"] = generate_summary(result.entries)
    data["status_categories"] = count_status_categories(result.entries)
    return json.dumps(data, indent=2)
