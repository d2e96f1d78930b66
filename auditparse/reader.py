"""Line sources for the CLI: glob expansion, files and stdin."""

import glob
import os
import sys
from typing import Generator, TextIO

STDIN_MARKER = "-"


def expand_paths(raw_paths: list[str]) -> list[str]:
    """Expand globs to regular files, deduplicate, and validate that files exist.

    ``-`` is passed through untouched and means stdin.
    Raises FileNotFoundError if a non-glob path doesn't exist or nothing matches.
    """
    expanded = []
    seen = set()

    for raw in raw_paths:
        if raw == STDIN_MARKER:
            candidates = [raw]
        elif any(c in raw for c in ("*", "?", "[")):
            candidates = sorted(p for p in glob.glob(raw) if os.path.isfile(p))
        else:
            if not os.path.isfile(raw):
                raise FileNotFoundError(f"File not found: {raw}")
            candidates = [raw]
        for path in candidates:
            if path not in seen:
                seen.add(path)
                expanded.append(path)

    if not expanded:
        raise FileNotFoundError("No log files found matching the given paths")

    return expanded


def _stream_lines(stream: TextIO) -> Generator[str, None, None]:
    for line in stream:
        line = line.rstrip("\r\n")
        if line.strip():
            yield line


def read_lines(paths: list[str], stdin: TextIO | None = None) -> Generator[str, None, None]:
    """Yield non-blank lines, without trailing newlines, from each path in order."""
    for path in paths:
        if path == STDIN_MARKER:
            yield from _stream_lines(stdin or sys.stdin)
            continue
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            yield from _stream_lines(f)
