"""
File operation tools - read, write, edit.

Paths are resolved against the agent's working directory, so the model can
use the same relative paths it sees in glob/grep output.
"""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Optional, Sequence

from ...errors import ForgeError, FileNotFound, PatternNotFound
from ..registry import BaseTool


def resolve_path(path: str, working_dir: Optional[Path] = None) -> Path:
    """Resolve path relative to the working directory."""
    p = Path(path).expanduser()
    if not p.is_absolute() and working_dir is not None:
        p = working_dir / p
    return p


def _parse_line_arg(value: str, name: str) -> Optional[int]:
    if not value:
        return None
    try:
        n = int(value)
    except ValueError:
        raise ForgeError(f"Invalid {name}: {value!r} (expected a number)")
    return max(n, 0)


def read_file(path: str, offset: Optional[int] = None, limit: Optional[int] = None,
              working_dir: Optional[Path] = None) -> str:
    """
    Read a text file with line numbers.

    `offset` is the number of lines to skip (0-based), `limit` the maximum
    number of lines returned. Each line is rendered as "{n:>6}\\t{line}".
    """
    p = resolve_path(path, working_dir)
    if not path or not p.is_file():
        raise FileNotFound(path)

    lines = p.read_text(encoding="utf-8", errors="replace").splitlines()

    start = min(offset or 0, len(lines))
    end = len(lines) if limit is None else min(start + limit, len(lines))

    return "\n".join(
        f"{start + i + 1:>6}\t{line}" for i, line in enumerate(lines[start:end])
    )


def write_file(path: str, content: str, working_dir: Optional[Path] = None) -> None:
    """Create or overwrite a file, creating parent directories as needed."""
    if not path:
        raise FileNotFound(path)
    p = resolve_path(path, working_dir)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def edit_file(path: str, search: str, replace: str, all_occurrences: bool = False,
              working_dir: Optional[Path] = None) -> str:
    """
    Replace `search` with `replace` in a file and return a unified diff.

    Only the first occurrence is replaced unless `all_occurrences` is set.
    Fails with PatternNotFound when the file would be left unchanged.
    """
    p = resolve_path(path, working_dir)
    if not path or not p.is_file():
        raise FileNotFound(path)

    original = p.read_text(encoding="utf-8")
    if not search or search not in original:
        raise PatternNotFound("Pattern not found in file")

    count = -1 if all_occurrences else 1
    modified = original.replace(search, replace, count)
    if modified == original:
        raise PatternNotFound("Pattern not found in file")

    diff = difflib.unified_diff(
        original.splitlines(),
        modified.splitlines(),
        fromfile=f"a/{path}",
        tofile=f"b/{path}",
        lineterm="",
    )

    p.write_text(modified, encoding="utf-8")
    return "\n".join(diff)


class ReadTool(BaseTool):
    name = "read"
    usage = "read <path> [offset] [limit]"
    summary = "Read a file with line numbers"

    def __init__(self, working_dir: str = "."):
        self.working_dir = Path(working_dir).resolve()

    def run(self, args: Sequence[str]) -> str:
        offset = _parse_line_arg(self.arg(args, 1), "offset")
        limit = _parse_line_arg(self.arg(args, 2), "limit")
        return read_file(self.arg(args, 0), offset, limit, self.working_dir)


class WriteTool(BaseTool):
    name = "write"
    usage = "write <path> <content>"
    summary = "Write/create a file"

    def __init__(self, working_dir: str = "."):
        self.working_dir = Path(working_dir).resolve()

    def run(self, args: Sequence[str]) -> str:
        path = self.arg(args, 0)
        write_file(path, self.rest(args, 1), self.working_dir)
        return f"Wrote to {path}"


class EditTool(BaseTool):
    name = "edit"
    usage = "edit <path> <search> <replace> [all]"
    summary = "Replace text in a file (first occurrence, or every one with 'all')"

    def __init__(self, working_dir: str = "."):
        self.working_dir = Path(working_dir).resolve()

    def run(self, args: Sequence[str]) -> str:
        path = self.arg(args, 0)
        all_occurrences = self.arg(args, 3).lower() in ("all", "true")
        diff = edit_file(path, self.arg(args, 1), self.arg(args, 2),
                         all_occurrences, self.working_dir)
        return f"Edited {path}\n{diff}"
