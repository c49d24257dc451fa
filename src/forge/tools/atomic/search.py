"""
Search tools - find files (glob) and search file contents (grep).

Both walk the tree below a base path with recursive glob, so hidden
directories such as .git are skipped.
"""

from __future__ import annotations

import glob as glob_module
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ...defaults import GREP_PREVIEW_LIMIT
from ...errors import FileNotFound, PatternNotFound
from ..registry import BaseTool


@dataclass
class GrepMatch:
    file: str
    line_number: int
    content: str

    def __str__(self) -> str:
        return f"{self.file}:{self.line_number} {self.content}"


def find_files(pattern: str, base_path: Optional[str] = None) -> List[str]:
    """
    Find files matching a glob pattern below `base_path`.

    Patterns without "**" are matched at any depth. Results are sorted by
    modification time, newest first.
    """
    if not pattern:
        raise PatternNotFound("No glob pattern provided")

    base = base_path or "."
    if os.path.isabs(pattern) or "**" in pattern:
        search_pattern = pattern if os.path.isabs(pattern) else os.path.join(base, pattern)
    else:
        search_pattern = os.path.join(base, "**", pattern)

    files = [f for f in glob_module.glob(search_pattern, recursive=True) if os.path.isfile(f)]

    # Sort by modification time (newest first)
    files.sort(key=lambda f: os.path.getmtime(f), reverse=True)
    return files


def _iter_search_files(path: str) -> List[str]:
    if os.path.isfile(path):
        return [path]
    files = glob_module.glob(os.path.join(path, "**", "*"), recursive=True)
    return sorted(f for f in files if os.path.isfile(f))


def search_text(pattern: str, path: str = ".", case_insensitive: bool = False) -> List[GrepMatch]:
    """Search file contents for a regex. Matches come back in file order."""
    try:
        regex = re.compile(pattern, re.IGNORECASE if case_insensitive else 0)
    except re.error as e:
        raise PatternNotFound(f"Invalid pattern '{pattern}': {e}") from e

    if not os.path.exists(path):
        raise FileNotFound(path)

    matches: List[GrepMatch] = []
    for file_path in _iter_search_files(path):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                for i, line in enumerate(f, 1):
                    if regex.search(line):
                        matches.append(GrepMatch(file_path, i, line.rstrip()))
        except (UnicodeDecodeError, OSError):
            # binary or unreadable file
            continue

    return matches


def _display_path(path: str, working_dir: Path) -> str:
    try:
        return str(Path(path).resolve().relative_to(working_dir))
    except ValueError:
        return path


class GlobTool(BaseTool):
    name = "glob"
    usage = "glob <pattern> [base]"
    summary = "Find files by pattern, newest first"

    def __init__(self, working_dir: str = "."):
        self.working_dir = Path(working_dir).resolve()

    def run(self, args: Sequence[str]) -> str:
        base = self.arg(args, 1)
        base_path = str(self.working_dir / base) if base else str(self.working_dir)
        files = [_display_path(f, self.working_dir)
                 for f in find_files(self.arg(args, 0), base_path)]
        return f"Found {len(files)} files:\n" + "\n".join(files)


class GrepTool(BaseTool):
    name = "grep"
    usage = "grep <pattern> [path] [-i]"
    summary = f"Search file contents by regex (first {GREP_PREVIEW_LIMIT} matches shown)"

    def __init__(self, working_dir: str = "."):
        self.working_dir = Path(working_dir).resolve()

    def run(self, args: Sequence[str]) -> str:
        path = self.arg(args, 1, ".") or "."
        case_insensitive = "-i" in args[2:]
        matches = search_text(self.arg(args, 0), str(self.working_dir / path), case_insensitive)

        preview = "\n".join(
            str(GrepMatch(_display_path(m.file, self.working_dir), m.line_number, m.content))
            for m in matches[:GREP_PREVIEW_LIMIT]
        )
        return f"Found {len(matches)} matches:\n{preview}"
