"""Semantic checks on extracted audit entries.

Violations are advisory: they become a warning on the entry and never turn a
parsed line into an error line.
"""

import re
from datetime import datetime

from auditparse.models import LogEntry

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

# RFC 3339 date-time: full date, 'T', full time, optional fraction, mandatory offset.
_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$",
    re.ASCII,
)


def is_rfc3339(value: str) -> bool:
    """True if *value* is a syntactically and calendrically valid RFC 3339 timestamp."""
    if not _RFC3339_RE.match(value):
        return False
    normalized = value.upper()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    date_part, _, rest = normalized.partition("T")
    clock, frac = rest[:8], ""
    tail = rest[8:]
    if tail.startswith("."):
        digits = re.match(r"\.(\d+)", tail).group(1)
        frac = "." + digits[:6].ljust(6, "0")
        tail = tail[1 + len(digits):]
    try:
        datetime.fromisoformat(f"{date_part}T{clock}{frac}{tail}")
    except ValueError:
        return False
    return True


def validate_entry(entry: LogEntry) -> list[str]:
    """Return every validation problem found on *entry* (empty list when clean)."""
    problems = []

    if entry.timestamp and not is_rfc3339(entry.timestamp):
        problems.append(f"invalid timestamp format: {entry.timestamp}")

    if entry.status_code and not MIN_STATUS_CODE <= entry.status_code <= MAX_STATUS_CODE:
        problems.append(f"invalid status code: {entry.status_code}")

    if not entry.username and not entry.uid:
        problems.append("missing user identification")

    return problems


def validation_warning(entry: LogEntry) -> str | None:
    """All problems joined into a single warning string, or None when the entry is clean."""
    problems = validate_entry(entry)
    if not problems:
        return None
    return "validation errors: " + "; ".join(problems)
