"""Strict and permissive JSON extractors.

Both decode the line as a JSON object and map its keys onto LogEntry fields
through the taxonomy in ``auditparse.fields``. Decoding success means the
extractor succeeds, even when no field is recoverable.
"""

import json
import re
from typing import Any

from auditparse.fields import SECTION_PARENTS, TAXONOMY, FieldSpec, Section, ValueKind

# ASCII digits only: no "_" separators, no non-Latin digits.
_INT_RE = re.compile(r"[+-]?[0-9]+")


def load_json_object(line: str) -> dict[str, Any]:
    """Decode *line* as a JSON object.

    Raises ValueError (json.JSONDecodeError included) when the line is not
    JSON or decodes to something other than an object.
    """
    data = json.loads(line)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


def to_int(value: Any) -> int | None:
    """Integer from a JSON number or an ASCII-digit string; None for zero, bools and anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value or None
    if isinstance(value, float):
        return int(value) if value.is_integer() and value else None
    if isinstance(value, str):
        value = value.strip()
        if not _INT_RE.fullmatch(value):
            return None
        try:
            return int(value) or None
        except ValueError:  # past the int conversion limit
            return None
    return None


def _to_string_list(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    items = tuple(v for v in value if isinstance(v, str))
    return items or None


def coerce(value: Any, kind: ValueKind) -> Any:
    """Return *value* converted for a field of *kind*, or None when empty or mistyped."""
    if kind is ValueKind.STRING:
        return value if isinstance(value, str) and value else None
    if kind is ValueKind.INT:
        return to_int(value)
    if kind is ValueKind.STRING_LIST:
        return _to_string_list(value)
    if kind is ValueKind.IP_LIST:
        if isinstance(value, str):
            return (value,) if value else None
        return _to_string_list(value)
    if kind is ValueKind.MAPPING:
        return value if isinstance(value, dict) and value else None
    if kind is ValueKind.USER_REF:
        if isinstance(value, dict):
            value = value.get("username")
        return value if isinstance(value, str) and value else None
    raise ValueError(f"Unsupported value kind: {kind}")


def _first_match(container: dict, keys: tuple[str, ...], kind: ValueKind) -> Any:
    for key in keys:
        value = coerce(container.get(key), kind)
        if value is not None:
            return value
    return None


def strict_value(doc: dict, spec: FieldSpec) -> Any:
    parent = spec.strict_parent
    container = doc if parent is None else doc.get(parent)
    if not isinstance(container, dict):
        return None
    return coerce(container.get(spec.strict_key), spec.kind)


def _permissive_value(doc: dict, spec: FieldSpec) -> Any:
    if spec.section is Section.TOP_LEVEL:
        containers = [doc]
    else:
        containers = [doc[p] for p in SECTION_PARENTS[spec.section] if isinstance(doc.get(p), dict)]

    for container in containers:
        value = _first_match(container, spec.keys, spec.kind)
        if value is not None:
            return value

    if spec.top_level_keys:
        return _first_match(doc, spec.top_level_keys, spec.kind)
    return None


def extract_strict(doc: dict[str, Any]) -> dict[str, Any]:
    """Read exactly one literal key per field, from the primary producer's layout."""
    fields = {}
    for field, spec in TAXONOMY.items():
        value = strict_value(doc, spec)
        if value is not None:
            fields[field.value] = value
    return fields


def extract_permissive(doc: dict[str, Any]) -> dict[str, Any]:
    """Try every candidate key per field, nested parents first, then the top level."""
    fields = {}
    for field, spec in TAXONOMY.items():
        value = _permissive_value(doc, spec)
        if value is not None:
            fields[field.value] = value
    return fields


def extract_json(line: str, permissive: bool = True) -> dict[str, Any]:
    """Decode *line* and extract fields. Raises ValueError when the line is not a JSON object."""
    doc = load_json_object(line)
    return extract_permissive(doc) if permissive else extract_strict(doc)
