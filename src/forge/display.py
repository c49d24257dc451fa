"""
Display Module - terminal output for the agent loop

Section headers ("→ Thinking", "→ Executing", ...), numbered action
previews, per-action results with diff colouring, and a spinner while the
model is thinking.
"""
import itertools
import sys
import threading
import time
from typing import Optional


# =============================================================================
# ANSI Color Codes
# =============================================================================

class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    BRIGHT_GREEN = "\033[92m"


C = Colors

ICONS = {
    "success": f"{C.BRIGHT_GREEN}✓{C.RESET}",
    "error": f"{C.RED}✗{C.RESET}",
    "tool": f"{C.CYAN}→{C.RESET}",
}


# =============================================================================
# Spinner - shown while waiting on the model
# =============================================================================

class Spinner:
    """
    Elapsed-time spinner, used as a context manager around inference.

        with display.spinner("Thinking"):
            reply = llm.infer(system, turns)

    Animates only when stdout is a terminal.
    """

    FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    INTERVAL = 0.1

    def __init__(self, message: str = "Working", quiet: bool = False):
        self.message = message
        self.quiet = quiet
        self._done = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._width = 0

    def _run(self):
        started = time.time()
        for frame in itertools.cycle(self.FRAMES):
            if self._done.wait(self.INTERVAL):
                break
            line = f"\r{C.CYAN}{frame}{C.RESET} {C.DIM}{self.message} ({int(time.time() - started)}s){C.RESET}"
            self._width = max(self._width, len(line))
            sys.stdout.write(line)
            sys.stdout.flush()

    def __enter__(self):
        if not self.quiet and sys.stdout.isatty():
            self._done.clear()
            self._thread = threading.Thread(target=self._run, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *exc):
        if self._thread is not None:
            self._done.set()
            self._thread.join(timeout=1.0)
            self._thread = None
            sys.stdout.write("\r" + " " * self._width + "\r")
            sys.stdout.flush()


# =============================================================================
# Display Class
# =============================================================================

class Display:
    """
    Centralized display manager for clean terminal output.

    Errors always go to stderr; everything else is suppressed in quiet mode.
    """

    def __init__(self, verbose: bool = True, quiet: bool = False):
        self.verbose = verbose
        self.quiet = quiet

    def _out(self, text: str = ""):
        if not self.quiet:
            print(text)

    def blank(self):
        self._out()

    def tool_header(self, label: str):
        """Section header, e.g. "→ Thinking"."""
        self._out(f"{ICONS['tool']} {C.BOLD}{label}{C.RESET}")

    def info(self, message: str):
        self._out(f"{C.BLUE}{message}{C.RESET}")

    def success(self, message: str):
        self._out(f"{C.GREEN}{C.BOLD}{message}{C.RESET}")

    def error(self, message: str):
        """Display error message (always shown)."""
        print(f"{C.RED}{C.BOLD}{message}{C.RESET}", file=sys.stderr)

    def warning(self, message: str):
        self._out(f"{C.YELLOW}⚠ {message}{C.RESET}")

    def list_item(self, index: int, content: str):
        self._out(f"{C.CYAN}{C.BOLD}{index}.{C.RESET} {content}")

    def reasoning(self, text: str):
        if text:
            self._out(text)
            self._out()

    def step(self, index: int, total: int, description: str):
        self.info(f"\n[{index}/{total}] {description}")

    def tool_output(self, text: str):
        """Print tool output; unified diff lines are coloured."""
        if self.quiet or not self.verbose or not text:
            return
        for line in text.splitlines():
            if line.startswith(("+++", "---")):
                print(f"{C.BOLD}{line}{C.RESET}")
            elif line.startswith("+"):
                print(f"{C.GREEN}{line}{C.RESET}")
            elif line.startswith("-"):
                print(f"{C.RED}{line}{C.RESET}")
            elif line.startswith("@"):
                print(f"{C.CYAN}{line}{C.RESET}")
            else:
                print(line)

    def result(self, success: bool, error: Optional[str] = None):
        if success:
            self.success(f"{ICONS['success']} Done")
        else:
            self.error(f"{ICONS['error']} Error: {error}")

    def spinner(self, message: str = "Thinking") -> Spinner:
        return Spinner(message, quiet=self.quiet)


def create_display(verbose: bool = True, quiet: bool = False) -> Display:
    return Display(verbose=verbose, quiet=quiet)
