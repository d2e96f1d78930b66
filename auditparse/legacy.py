"""Single-field lookup and conversion of flat legacy records."""

import re
from typing import Any

from auditparse.fields import TAXONOMY, lookup_field
from auditparse.json_extractor import load_json_object, strict_value, to_int
from auditparse.models import LogEntry

_LEGACY_STRING_FIELDS = (
    "timestamp", "username", "verb", "resource", "namespace", "status_message",
    "request_uri", "user_agent", "auth_decision", "authz_decision", "impersonated_user",
)


def extract_field(line: str, field_name: str) -> str | None:
    """Extract one field from a raw line as a string.

    Tries the strict JSON layout first and falls back to a "key":"value"
    regex on the raw text. Returns None for unknown fields or no match.
    """
    field = lookup_field(field_name)
    if field is None:
        return None
    spec = TAXONOMY[field]

    try:
        doc = load_json_object(line)
    except (ValueError, RecursionError):
        doc = None

    if doc is not None:
        value = strict_value(doc, spec)
        if isinstance(value, (str, int)):
            return str(value)

    m = re.search(rf'"{re.escape(spec.strict_key)}"\s*:\s*"([^"]+)"', line)
    return m.group(1) if m else None


def convert_legacy_entries(records: list[dict[str, Any]]) -> list[LogEntry]:
    """Convert flat snake_case dict records into LogEntry values."""
    entries = []
    for record in records:
        kwargs = {
            key: record[key] for key in _LEGACY_STRING_FIELDS
            if isinstance(record.get(key), str)
        }
        kwargs["status_code"] = to_int(record.get("status_code")) or 0
        ips = record.get("source_ips")
        if isinstance(ips, (list, tuple)):
            kwargs["source_ips"] = tuple(ip for ip in ips if isinstance(ip, str))
        entries.append(LogEntry(raw_line=repr(record), **kwargs))
    return entries
