"""Normalized audit record and per-batch result envelope."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Tier(Enum):
    JSON = "json"
    STRUCTURED = "structured"
    GREP = "grep"


@dataclass(frozen=True)
class LogEntry:
    raw_line: str
    warnings: tuple[str, ...] = ()
    parse_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Identity / context
    timestamp: str = ""
    username: str = ""
    uid: str = ""
    groups: tuple[str, ...] = ()
    impersonated_user: str = ""

    # Action
    verb: str = ""
    resource: str = ""
    namespace: str = ""
    name: str = ""
    api_group: str = ""
    api_version: str = ""

    # Outcome
    status_code: int = 0  # 0 = unknown
    status_message: str = ""
    status_reason: str = ""

    # Request context
    request_uri: str = ""
    user_agent: str = ""
    source_ips: tuple[str, ...] = ()

    # Policy decisions
    auth_decision: str = ""
    authz_decision: str = ""

    # Opaque JSON bags
    annotations: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, Any] = field(default_factory=dict)

    # Immutable but unhashable: the JSON bags are plain dicts.
    __hash__ = None


@dataclass(frozen=True)
class ParsePerformance:
    lines_per_second: float = 0.0
    average_line_size: int = 0


@dataclass(frozen=True)
class ParseResult:
    entries: tuple[LogEntry, ...] = ()
    total_lines: int = 0
    parsed_lines: int = 0
    error_lines: int = 0
    json_parsed_lines: int = 0
    structured_parsed_lines: int = 0
    grep_parsed_lines: int = 0
    parse_errors: tuple[str, ...] = ()
    parse_time: float = 0.0
    performance: ParsePerformance = field(default_factory=ParsePerformance)
    accuracy_estimate: float = 0.0

    __hash__ = None

    @property
    def fallback_used(self) -> bool:
        return self.structured_parsed_lines > 0 or self.grep_parsed_lines > 0

    @property
    def timed_out(self) -> bool:
        return self.parsed_lines + self.error_lines < self.total_lines


def entry_to_dict(entry: LogEntry) -> dict[str, Any]:
    """Convert a LogEntry to a dict, dropping empty values for cleaner JSON.

    ``raw_line`` is always kept; ``parse_time`` is rendered as RFC3339.
    """
    out: dict[str, Any] = {}
    for f in fields(entry):
        value = getattr(entry, f.name)
        if f.name == "parse_time":
            out[f.name] = value.isoformat().replace("+00:00", "Z")
        elif f.name == "raw_line":
            out[f.name] = value
        elif value:
            out[f.name] = list(value) if isinstance(value, tuple) else value
    return out


def result_to_dict(result: ParseResult) -> dict[str, Any]:
    return {
        "entries": [entry_to_dict(e) for e in result.entries],
        "total_lines": result.total_lines,
        "parsed_lines": result.parsed_lines,
        "error_lines": result.error_lines,
        "json_parsed_lines": result.json_parsed_lines,
        "structured_parsed_lines": result.structured_parsed_lines,
        "grep_parsed_lines": result.grep_parsed_lines,
        "fallback_used": result.fallback_used,
        "parse_errors": list(result.parse_errors),
        "parse_time_seconds": round(result.parse_time, 6),
        "performance": {
            "lines_per_second": round(result.performance.lines_per_second, 2),
            "average_line_size": result.performance.average_line_size,
        },
        "accuracy_estimate": round(result.accuracy_estimate, 4),
    }
