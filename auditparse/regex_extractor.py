"""Structured-regex and grep extractors for lines that are not valid JSON.

Each field has its own pattern and is searched independently against the raw
line; the first capture group of the first matching pattern wins. A field
that is not found is simply left out.
"""

import re
from typing import Any

from auditparse.fields import Field


def _quoted(*keys: str) -> str:
    """Pattern for a "key": "value" pair, tolerant of whitespace around the colon."""
    alternatives = "|".join(re.escape(k) for k in keys)
    return rf'"(?:{alternatives})"\s*:\s*"([^"]+)"'


# ---------------------------------------------------------------------------
# Structured tier: wider field set, flexible whitespace
# ---------------------------------------------------------------------------

STRUCTURED_PATTERNS: dict[Field, tuple[re.Pattern, ...]] = {
    Field.TIMESTAMP: (re.compile(_quoted("requestReceivedTimestamp")),
                      re.compile(_quoted("timestamp", "stageTimestamp"))),
    Field.USERNAME: (re.compile(_quoted("username")),),
    Field.UID: (re.compile(_quoted("uid")),),
    Field.IMPERSONATED_USER: (re.compile(_quoted("impersonatedUser")),),
    Field.VERB: (re.compile(_quoted("verb")),),
    Field.RESOURCE: (re.compile(_quoted("resource")),),
    Field.NAMESPACE: (re.compile(_quoted("namespace")),),
    Field.NAME: (re.compile(_quoted("name")),),
    Field.STATUS_CODE: (re.compile(r'"responseStatus"\s*:\s*\{[^}]*?"code"\s*:\s*([0-9]+)'),
                        re.compile(r'"code"\s*:\s*"?([0-9]+)')),
    Field.STATUS_MESSAGE: (re.compile(r'"responseStatus"\s*:\s*\{[^}]*?"message"\s*:\s*"([^"]+)"'),
                           re.compile(_quoted("message"))),
    Field.REQUEST_URI: (re.compile(_quoted("requestURI")),),
    Field.USER_AGENT: (re.compile(_quoted("userAgent")),),
    Field.SOURCE_IPS: (re.compile(r'"sourceIPs"\s*:\s*\[([^\]]+)\]'),),
    Field.AUTH_DECISION: (re.compile(_quoted("authentication.openshift.io/decision",
                                             "authenticationDecision", "authDecision")),),
    Field.AUTHZ_DECISION: (re.compile(_quoted("authorization.k8s.io/decision",
                                              "authorizationDecision", "authzDecision")),),
}

# ---------------------------------------------------------------------------
# Grep tier: exact key spelling, no whitespace
# ---------------------------------------------------------------------------

GREP_PATTERNS: dict[Field, re.Pattern] = {
    Field.TIMESTAMP: re.compile(r"(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?Z)", re.ASCII),
    Field.USERNAME: re.compile(r'"username":"([^"]+)"'),
    Field.VERB: re.compile(r'"verb":"([^"]+)"'),
    Field.RESOURCE: re.compile(r'"resource":"([^"]+)"'),
    Field.NAMESPACE: re.compile(r'"namespace":"([^"]+)"'),
    Field.STATUS_CODE: re.compile(r'"code":([0-9]+)'),
}


def _split_ip_list(captured: str) -> tuple[str, ...]:
    """'"10.0.0.1", "10.0.0.2"' -> ("10.0.0.1", "10.0.0.2")."""
    ips = (part.strip().strip('"').strip() for part in captured.split(","))
    return tuple(ip for ip in ips if ip)


def _convert(field: Field, captured: str) -> Any:
    if field is Field.STATUS_CODE:
        try:
            return int(captured) or None
        except ValueError:  # digit run past the int conversion limit
            return None
    if field is Field.SOURCE_IPS:
        return _split_ip_list(captured) or None
    return captured


def extract_structured(line: str) -> dict[str, Any]:
    fields = {}
    for field, patterns in STRUCTURED_PATTERNS.items():
        for pattern in patterns:
            m = pattern.search(line)
            if not m:
                continue
            value = _convert(field, m.group(1))
            if value is not None:
                fields[field.value] = value
                break
    return fields


def extract_grep(line: str) -> dict[str, Any]:
    fields = {}
    for field, pattern in GREP_PATTERNS.items():
        m = pattern.search(line)
        if m:
            value = _convert(field, m.group(1))
            if value is not None:
                fields[field.value] = value
    return fields
