"""Tests for auditparse/summary.py"""

import json
import unittest

from auditparse.models import LogEntry, ParseResult
from auditparse.summary import (
    NO_ENTRIES_MESSAGE,
    categorize_status_code,
    count_status_categories,
    format_report_json,
    format_report_text,
    generate_summary,
)


def _entry(username="admin", verb="get", resource="pods", status_code=200) -> LogEntry:
    return LogEntry(
        raw_line="raw",
        username=username,
        verb=verb,
        resource=resource,
        status_code=status_code,
    )


class TestGenerateSummary(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(generate_summary([]), NO_ENTRIES_MESSAGE)

    def test_counts(self):
        entries = [
            _entry(username="admin", verb="create", status_code=201),
            _entry(username="admin", verb="delete", status_code=200),
            _entry(username="user1", verb="create", status_code=403, resource="secrets"),
        ]
        summary = generate_summary(entries)
        self.assertTrue(summary.startswith("Found 3 audit entries"))
        self.assertIn("Users involved: admin (2), user1 (1)", summary)
        self.assertIn("Status codes: 201 (1), 200 (1), 403 (1)", summary)
        self.assertIn("Actions: create (2), delete (1)", summary)
        self.assertIn("Resources: pods (2), secrets (1)", summary)

    def test_skips_empty_dimensions(self):
        summary = generate_summary([LogEntry(raw_line="x", verb="list")])
        self.assertEqual(summary, "Found 1 audit entries. Actions: list (1)")


class TestStatusCategories(unittest.TestCase):
    def test_categorize(self):
        cases = [
            (200, "success"), (204, "success"),
            (404, "client_error"), (499, "client_error"),
            (500, "server_error"), (503, "server_error"),
            (301, "other"), (100, "other"), (999, "other"),
        ]
        for code, expected in cases:
            self.assertEqual(categorize_status_code(code), expected,
                             f"Status {code} should be {expected}")

    def test_count_skips_unknown(self):
        entries = [_entry(status_code=200), _entry(status_code=0),
                   _entry(status_code=404), _entry(status_code=201)]
        self.assertEqual(count_status_categories(entries),
                         {"success": 2, "client_error": 1})


class TestReports(unittest.TestCase):
    def setUp(self):
        self.result = ParseResult(
            entries=(_entry(),),
            total_lines=3,
            parsed_lines=1,
            error_lines=2,
            json_parsed_lines=1,
            parse_errors=("line 2: malformed JSON", "line 3: malformed JSON"),
            accuracy_estimate=0.95,
        )

    def test_text_report(self):
        text = format_report_text(self.result)
        self.assertIn("Found 1 audit entries", text)
        self.assertIn("Error lines:   2", text)
        self.assertIn("Accuracy est.: 0.95 (heuristic)", text)
        self.assertIn("line 2: malformed JSON", text)
        self.assertIn("success", text)

    def test_text_report_truncates_errors(self):
        text = format_report_text(self.result, max_errors=1)
        self.assertIn("... 1 more", text)
        self.assertNotIn("line 3: malformed JSON", text)

    def test_json_report(self):
        data = json.loads(format_report_json(self.result))
        self.assertEqual(data["summary"], generate_summary(self.result.entries))
        self.assertEqual(data["status_categories"], {"success": 1})
        self.assertEqual(data["error_lines"], 2)


if __name__ == "__main__":
    unittest.main()
