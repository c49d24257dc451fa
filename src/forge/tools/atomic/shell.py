"""
Shell execution tool.

Runs a command through `sh -c` in the working directory. stdout and stderr
are drained by one reader thread each; every line is echoed to the terminal
as it arrives and appended to a single combined capture, so the captured
text is interleaved in arrival order. Both readers finish before the exit
status is collected.

A non-zero exit status is reported in the output but is not a tool failure:
the model reads the output and decides. Only a spawn failure or a timeout
fails the call.

Execution Logging:
- Every run is appended to <log_dir>/exec_log.jsonl (see forge.audit)
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, List, Optional, Sequence

from ...audit import AuditLog
from ...errors import CommandFailed
from ..registry import BaseTool

KILL_GRACE = 2.0  # seconds to wait for pipes to close after a kill


@dataclass
class ShellOutput:
    output: str
    exit_code: Optional[int]

    def to_text(self) -> str:
        if self.exit_code in (0, None):
            return self.output
        # captured output is empty or newline-terminated
        return f"{self.output}[exit code: {self.exit_code}]"


class _LineCapture:
    """Combined, thread-safe capture of both output streams."""

    def __init__(self, echo: bool):
        self._lines: List[str] = []
        self._lock = threading.Lock()
        self._echo = echo

    def drain(self, stream: IO[str], sink: IO[str]) -> None:
        for line in iter(stream.readline, ""):
            line = line.rstrip("\n")
            with self._lock:
                self._lines.append(line)
                if self._echo:
                    print(line, file=sink, flush=True)
        stream.close()

    def text(self) -> str:
        with self._lock:
            return "".join(f"{line}\n" for line in self._lines)


def _kill_group(proc: subprocess.Popen) -> None:
    """Kill the shell and every child it started (they share its session)."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass  # already exited


def run_shell(
    command: str,
    timeout: Optional[float] = None,
    echo: bool = True,
    cwd: Optional[str] = None,
    audit: Optional[AuditLog] = None,
) -> ShellOutput:
    """
    Run `command` with `sh -c`, streaming output live.

    Raises CommandFailed if the process cannot be started or exceeds
    `timeout` seconds (the shell and everything it started are killed).
    """
    if not command or not command.strip():
        raise CommandFailed("No command provided")

    start_time = time.time()
    try:
        proc = subprocess.Popen(
            ["sh", "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
            bufsize=1,
            cwd=cwd,
            start_new_session=True,
        )
    except OSError as e:
        if audit:
            audit.log_execution(command, None, "", time.time() - start_time,
                                working_dir=cwd, error=str(e))
        raise CommandFailed(f"Failed to start command: {e}") from e

    capture = _LineCapture(echo)
    readers = [
        threading.Thread(target=capture.drain, args=(proc.stdout, sys.stdout), daemon=True),
        threading.Thread(target=capture.drain, args=(proc.stderr, sys.stderr), daemon=True),
    ]
    for reader in readers:
        reader.start()

    deadline = None if timeout is None else time.time() + timeout
    for reader in readers:
        reader.join(None if deadline is None else max(0.0, deadline - time.time()))

    timed_out = any(reader.is_alive() for reader in readers)
    if timed_out:
        _kill_group(proc)
        for reader in readers:
            reader.join(KILL_GRACE)

    # both pipes are drained (EOF) before the exit status is collected
    exit_code = proc.wait(KILL_GRACE) if timed_out else proc.wait()

    output = capture.text()
    duration = time.time() - start_time

    if timed_out:
        error = f"Command timed out after {timeout}s"
        if audit:
            audit.log_execution(command, exit_code, output, duration,
                                timeout=True, working_dir=cwd, error=error)
        raise CommandFailed(error)

    if audit:
        audit.log_execution(command, exit_code, output, duration, working_dir=cwd)

    return ShellOutput(output=output, exit_code=exit_code)


class BashTool(BaseTool):
    name = "bash"
    usage = "bash <command>"
    summary = "Run a shell command (output streamed, exit code reported)"
    streams_output = True

    def __init__(
        self,
        working_dir: str = ".",
        audit: Optional[AuditLog] = None,
        timeout: Optional[float] = None,
        echo: bool = True,
    ):
        self.working_dir = str(Path(working_dir).resolve())
        self.audit = audit
        self.timeout = timeout
        self.echo = echo
        self.streams_output = echo

    def run(self, args: Sequence[str]) -> str:
        result = run_shell(
            " ".join(args),
            timeout=self.timeout,
            echo=self.echo,
            cwd=self.working_dir,
            audit=self.audit,
        )
        return result.to_text()
