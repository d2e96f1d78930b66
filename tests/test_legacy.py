"""Tests for auditparse/legacy.py"""

import pytest

from auditparse.legacy import convert_legacy_entries, extract_field


class TestExtractField:
    @pytest.mark.parametrize("field, expected", [
        ("RequestReceivedTimestamp", "2024-01-15T10:30:00Z"),
        ("Timestamp", "2024-01-15T10:30:00Z"),
        ("Username", "admin"),
        ("UID", "123"),
        ("Verb", "create"),
        ("Resource", "pods"),
        ("Namespace", "default"),
        ("Name", "test-pod"),
        ("StatusCode", "201"),
        ("StatusMessage", "Created"),
        ("InvalidField", None),
    ])
    def test_json_line(self, reference_line, field, expected):
        assert extract_field(reference_line, field) == expected

    def test_regex_fallback_for_broken_json(self):
        line = '{"verb":"get","username":"bob"'
        assert extract_field(line, "verb") == "get"
        assert extract_field(line, "username") == "bob"

    def test_absent(self, reference_line):
        assert extract_field(reference_line, "user_agent") is None

    def test_non_string_list_field_not_returned_from_json(self):
        line = '{"user":{"groups":["a","b"]}}'
        assert extract_field(line, "groups") is None


class TestConvertLegacyEntries:
    def test_converts_fields(self):
        records = [{
            "timestamp": "2024-01-15T10:30:00Z",
            "username": "admin",
            "verb": "create",
            "resource": "pods",
            "namespace": "default",
            "status_code": "201",
            "status_message": "Created",
            "request_uri": "/api/v1/pods",
            "user_agent": "kubectl",
            "source_ips": ["10.0.0.1"],
            "auth_decision": "allow",
            "authz_decision": "allow",
            "impersonated_user": "bob",
        }]
        entry = convert_legacy_entries(records)[0]
        assert entry.timestamp == "2024-01-15T10:30:00Z"
        assert entry.username == "admin"
        assert entry.status_code == 201
        assert entry.source_ips == ("10.0.0.1",)
        assert entry.impersonated_user == "bob"
        assert entry.raw_line == repr(records[0])

    def test_integer_status_code(self):
        assert convert_legacy_entries([{"status_code": 404}])[0].status_code == 404

    def test_bad_values_ignored(self):
        entry = convert_legacy_entries([{"status_code": "n/a", "username": 5}])[0]
        assert entry.status_code == 0
        assert entry.username == ""

    @pytest.mark.parametrize("code", ["\u0664\u0660\u0664", "4_04", True])
    def test_non_numeric_status_codes_become_zero(self, code):
        assert convert_legacy_entries([{"status_code": code}])[0].status_code == 0

    def test_empty(self):
        assert convert_legacy_entries([]) == []
