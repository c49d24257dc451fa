"""
Audit trail for side-effecting tool calls.

Every shell execution and every web request is appended to a JSONL file
under the log directory, so a run can be checked afterwards against what
the model claims it did.

Log files:
    <log_dir>/exec_log.jsonl   shell commands
    <log_dir>/fetch_log.jsonl  web fetches and searches

Exec entry:
{
    "timestamp": "2025-01-15T10:30:00",
    "command": "pytest -q",
    "exit_code": 0,
    "success": true,
    "duration_seconds": 3.2,
    "output_preview": "first 500 chars...",
    "output_size": 1234,
    "timeout": false,
    "working_dir": "/path/to/dir",
    "error": null
}
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .defaults import LOG_DIR

LOGGER = logging.getLogger(__name__)

PREVIEW_CHARS = 500


class AuditLog:
    """Append-only JSONL audit trail."""

    EXEC_FILE = "exec_log.jsonl"
    FETCH_FILE = "fetch_log.jsonl"

    def __init__(self, log_dir: Optional[str] = None):
        self._log_dir = Path(log_dir or LOG_DIR)

    @property
    def exec_log_path(self) -> Path:
        return self._log_dir / self.EXEC_FILE

    @property
    def fetch_log_path(self) -> Path:
        return self._log_dir / self.FETCH_FILE

    def log_execution(
        self,
        command: str,
        exit_code: Optional[int],
        output: str,
        duration_seconds: float,
        timeout: bool = False,
        working_dir: Optional[str] = None,
        error: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Record one shell run. Returns the entry written."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "command": command,
            "exit_code": exit_code,
            "success": exit_code == 0 and not timeout and error is None,
            "duration_seconds": round(duration_seconds, 2),
            "output_preview": output[:PREVIEW_CHARS] if output else "",
            "output_size": len(output) if output else 0,
            "timeout": timeout,
            "working_dir": working_dir,
            "error": error,
        }
        self._append(self.exec_log_path, entry)
        return entry

    def log_fetch(
        self,
        url: str,
        final_url: Optional[str],
        status_code: Optional[int],
        content: str,
        success: bool,
        kind: str = "fetch",
        error: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Record one web request (kind is "fetch" or "search")."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "kind": kind,
            "url": url,
            "final_url": final_url,
            "status_code": status_code,
            "content_length": len(content) if content else 0,
            "content_preview": content[:200] if content else "",
            "success": success,
            "error": error,
        }
        self._append(self.fetch_log_path, entry)
        return entry

    def read_entries(self, path: Path, limit: int = 100) -> List[Dict[str, Any]]:
        """Read the most recent entries of one log file."""
        entries = []
        if not path.exists():
            return entries
        with open(path, "r") as f:
            for line in f:
                line = line.strip()
                if line:
                    entries.append(json.loads(line))
        return entries[-limit:] if limit else entries

    def _append(self, path: Path, entry: Dict[str, Any]) -> None:
        # A broken audit trail must not fail the tool call it describes.
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            LOGGER.warning("Failed to write audit log %s: %s", path, e)
