"""audit-parse: turn audit log lines into normalized records and a quality report."""

import json
import logging
import sys
from argparse import ArgumentParser
from dataclasses import replace

from auditparse.config import POLICIES, load_config
from auditparse.errors import ConfigError
from auditparse.models import entry_to_dict, result_to_dict
from auditparse.parser import parse_lines
from auditparse.reader import expand_paths, read_lines
from auditparse.summary import format_report_json, format_report_text, generate_summary

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="audit-parse",
        description="Parse audit log lines (JSON or semi-structured) into normalized records.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Log file path(s), glob pattern(s), or '-' for stdin",
    )
    parser.add_argument("--config", help="YAML config file (parser: section)")
    parser.add_argument(
        "--policy",
        choices=POLICIES,
        help="Fallback policy for lines that fail JSON decoding",
    )
    parser.add_argument(
        "--strict-json",
        action="store_true",
        help="Use the strict single-key JSON extractor",
    )
    parser.add_argument("--no-validation", action="store_true", help="Skip semantic validation")
    parser.add_argument("--no-json", action="store_true", help="Skip the JSON tier")
    parser.add_argument(
        "--no-structured",
        action="store_true",
        help="Disable the structured-regex tier so unparsed lines reach grep",
    )
    parser.add_argument("--no-grep", action="store_true", help="Disable the grep fallback tier")
    parser.add_argument("--timeout", type=float, help="Batch deadline in seconds")
    parser.add_argument("--max-line-length", type=int, help="Maximum line size in bytes")
    parser.add_argument("--max-errors", type=int, help="Maximum error messages to keep")
    parser.add_argument(
        "--output",
        choices=["text", "json", "ndjson"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print only the report, not the individual entries",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def build_config(args):
    """Config file and env first, then CLI flags on top."""
    config = load_config(args.config)
    overrides = {}
    if args.policy:
        overrides["fallback_policy"] = args.policy
    if args.strict_json:
        overrides["enable_permissive_json"] = False
    if args.no_validation:
        overrides["enable_validation"] = False
    if args.no_json:
        overrides["enable_json"] = False
    if args.no_structured:
        overrides["enable_structured_regex"] = False
    if args.no_grep:
        overrides["enable_grep_fallback"] = False
    if args.timeout is not None:
        overrides["timeout"] = args.timeout
    if args.max_line_length is not None:
        overrides["max_line_length"] = args.max_line_length
    if args.max_errors is not None:
        overrides["max_parse_errors"] = args.max_errors
    return replace(config, **overrides) if overrides else config


def run(args, out=None) -> int:
    """Run one batch and print it. Returns the process exit code."""
    out = out or sys.stdout
    try:
        config = build_config(args)
        paths = expand_paths(args.files)
    except (ConfigError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = parse_lines(read_lines(paths), config)
    logger.info(
        "Parsed %d/%d lines, %d errors, accuracy %.2f",
        result.parsed_lines, result.total_lines, result.error_lines, result.accuracy_estimate,
    )

    if args.output == "json":
        if args.summary:
            print(format_report_json(result), file=out)
        else:
            data = result_to_dict(result)
            data["summary"] = generate_summary(result.entries)
            print(json.dumps(data, indent=2), file=out)
    elif args.output == "ndjson":
        if not args.summary:
            for entry in result.entries:
                print(json.dumps(entry_to_dict(entry)), file=out)
        trailer = result_to_dict(result)
        del trailer["entries"]
        print(json.dumps({"result": trailer}), file=out)
    else:
        if not args.summary:
            for entry in result.entries:
                print(_format_entry_text(entry), file=out)
            print("", file=out)
        print(format_report_text(result), file=out)

    if result.total_lines and not result.parsed_lines:
        return 1
    return 0


def _format_entry_text(entry) -> str:
    status = entry.status_code or "-"
    who = entry.username or entry.uid or "-"
    target = "/".join(p for p in (entry.namespace, entry.resource, entry.name) if p) or "-"
    line = f"[{entry.timestamp or '-'}] {who} {entry.verb or '-'} {target} {status}"
    if entry.warnings:
        line += f"  ({'; '.join(entry.warnings)})"
    return line


def main():
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [AUDITPARSE] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    sys.exit(run(args))


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
