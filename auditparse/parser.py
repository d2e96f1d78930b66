"""Batch driver — runs every line through the extractor chain under a deadline.

Per-line policy:
  1. JSON tier (strict or permissive) when enabled.
  2. On JSON failure under the "basic" policy, a line holding both '{' and '}'
     is treated as broken producer output and rejected outright.
  3. Structured-regex tier when enabled (always yields a record).
  4. Grep tier when enabled.
  5. Otherwise the line fails with "all parsing methods failed".
"""

import logging
import time
from dataclasses import replace
from typing import Callable, Iterable

from auditparse.config import ParserConfig
from auditparse.errors import LineParseError
from auditparse.json_extractor import extract_json
from auditparse.models import LogEntry, ParsePerformance, ParseResult, Tier
from auditparse.regex_extractor import extract_grep, extract_structured
from auditparse.validator import validation_warning

logger = logging.getLogger(__name__)

# Heuristic per-tier confidence weights; not a measured accuracy.
TIER_WEIGHTS = {
    Tier.JSON: 0.95,
    Tier.STRUCTURED: 0.85,
    Tier.GREP: 0.70,
}


def _build_entry(line: str, fields: dict, config: ParserConfig) -> LogEntry:
    entry = LogEntry(raw_line=line, **fields)
    if config.enable_validation:
        warning = validation_warning(entry)
        if warning:
            entry = replace(entry, warnings=entry.warnings + (warning,))
    return entry


def _looks_like_json(line: str) -> bool:
    return "{" in line and "}" in line


def parse_line(line: str, config: ParserConfig | None = None) -> tuple[LogEntry, Tier]:
    """Parse one line into a LogEntry, returning the tier that produced it.

    Raises LineParseError when the policy gives up on the line.
    """
    config = config or ParserConfig()

    if config.enable_json:
        try:
            fields = extract_json(line, permissive=config.enable_permissive_json)
        except (ValueError, RecursionError) as e:
            if config.fallback_policy == "basic" and _looks_like_json(line):
                raise LineParseError(f"malformed JSON: {e}") from e
        else:
            return _build_entry(line, fields, config), Tier.JSON

    if config.enable_structured_regex:
        return _build_entry(line, extract_structured(line), config), Tier.STRUCTURED

    if config.enable_grep_fallback:
        return _build_entry(line, extract_grep(line), config), Tier.GREP

    raise LineParseError("all parsing methods failed")


def estimate_accuracy(parsed_lines: int, json_lines: int, grep_lines: int) -> float:
    """Weighted confidence over a batch, based on which tier produced each record.

    A heuristic signal for consumers, not a statistically validated accuracy.
    Returns 0.0 when nothing was parsed.
    """
    if parsed_lines <= 0:
        return 0.0
    structured_lines = parsed_lines - json_lines - grep_lines
    total = (
        json_lines * TIER_WEIGHTS[Tier.JSON]
        + structured_lines * TIER_WEIGHTS[Tier.STRUCTURED]
        + grep_lines * TIER_WEIGHTS[Tier.GREP]
    )
    return min(1.0, max(0.0, total / parsed_lines))


def _line_size(line: str) -> int:
    return len(line.encode("utf-8", errors="surrogatepass"))


def parse_lines(
    lines: Iterable[str],
    config: ParserConfig | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> ParseResult:
    """Parse a batch of raw lines into a ParseResult.

    Never raises for bad input: oversized lines, unparseable lines and the
    deadline all degrade to error counts and messages.
    """
    config = config or ParserConfig()
    lines = list(lines)
    start = clock()

    entries: list[LogEntry] = []
    errors: list[str] = []
    error_lines = 0
    tier_counts = {tier: 0 for tier in Tier}
    total_size = 0

    def record_error(message: str):
        nonlocal error_lines
        error_lines += 1
        if len(errors) < config.max_parse_errors:
            errors.append(message)

    for i, line in enumerate(lines, start=1):
        if clock() - start > config.timeout:
            errors.append(f"parsing timeout after {config.timeout:g}s")
            logger.warning(
                "Parsing timeout after %gs: %d of %d lines processed",
                config.timeout, i - 1, len(lines),
            )
            break

        size = _line_size(line)
        if size > config.max_line_length:
            record_error(f"line {i}: exceeds max length ({size} > {config.max_line_length})")
            continue

        try:
            entry, tier = parse_line(line, config)
        except LineParseError as e:
            logger.debug("Line %d rejected: %s", i, e)
            record_error(f"line {i}: {e}")
            continue

        entries.append(entry)
        tier_counts[tier] += 1
        total_size += size

    elapsed = clock() - start
    parsed = len(entries)
    performance = ParsePerformance(
        lines_per_second=parsed / elapsed if elapsed > 0 else 0.0,
        average_line_size=total_size // parsed if parsed else 0,
    )

    logger.debug(
        "Parsed %d/%d lines (%d errors) in %.3fs", parsed, len(lines), error_lines, elapsed
    )

    return ParseResult(
        entries=tuple(entries),
        total_lines=len(lines),
        parsed_lines=parsed,
        error_lines=error_lines,
        json_parsed_lines=tier_counts[Tier.JSON],
        structured_parsed_lines=tier_counts[Tier.STRUCTURED],
        grep_parsed_lines=tier_counts[Tier.GREP],
        parse_errors=tuple(errors),
        parse_time=elapsed,
        performance=performance,
        accuracy_estimate=estimate_accuracy(parsed, tier_counts[Tier.JSON], tier_counts[Tier.GREP]),
    )
