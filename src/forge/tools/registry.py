"""
Tool Registry - name to tool dispatch.

Tools take their input positionally from an Action's argument list.
Missing positional arguments default to "" so that validation happens in
the tool itself, never at dispatch time.
"""

from __future__ import annotations

import logging
from typing import Dict, Any, Optional, Sequence

from ..errors import ForgeError, UnknownTool

LOGGER = logging.getLogger(__name__)


class ToolResult:
    """Result from tool execution."""

    def __init__(self, success: bool, output: Any, error: Optional[str] = None):
        self.success = success
        self.output = output
        self.error = error

    @classmethod
    def ok(cls, output: Any) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, output=None, error=error)

    def to_message(self) -> str:
        """Format for LLM consumption."""
        if self.success:
            return "" if self.output is None else str(self.output)
        return f"Error: {self.error}"

    def __repr__(self) -> str:
        if self.success:
            return f"ToolResult(success=True, output={self.output!r})"
        return f"ToolResult(success=False, error={self.error!r})"


class BaseTool:
    """Base class for tools.

    Subclasses define:
    - name: str - the name the model uses in TOOL_CALLS
    - usage: str - one line shown to the model, e.g. "read <path>"
    - summary: str - what the tool does
    - run(args) -> Any - the implementation; raise ForgeError on failure
    """

    name: str = ""
    usage: str = ""
    summary: str = ""
    streams_output: bool = False  # output already shown live while running

    @staticmethod
    def arg(args: Sequence[str], index: int, default: str = "") -> str:
        """Positional argument with permissive defaulting."""
        return args[index] if index < len(args) else default

    @staticmethod
    def rest(args: Sequence[str], start: int) -> str:
        """Remaining arguments joined with single spaces."""
        return " ".join(args[start:])

    def run(self, args: Sequence[str]) -> Any:
        raise NotImplementedError("Subclasses must implement run()")

    def execute(self, args: Sequence[str]) -> ToolResult:
        try:
            return ToolResult.ok(self.run(args))
        except ForgeError as e:
            return ToolResult.fail(str(e))

    def describe(self) -> str:
        return f"- {self.usage}: {self.summary}"


class ToolRegistry:
    """Central registry for tools."""

    def __init__(self):
        self._tools: Dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool instance."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[BaseTool]:
        return self._tools.get(name)

    def usage_lines(self) -> str:
        """Tool list as shown in prompts, one tool per line."""
        return "\n".join(tool.describe() for tool in self._tools.values())

    def execute(self, name: str, args: Sequence[str]) -> ToolResult:
        """Execute a tool by name. Never raises."""
        tool = self.get(name)
        if tool is None:
            return ToolResult.fail(str(UnknownTool(name)))

        try:
            result = tool.execute(list(args))
        except Exception as e:
            LOGGER.exception("Tool %s raised", name)
            return ToolResult.fail(f"{type(e).__name__}: {e}")

        # Normalize result
        if isinstance(result, ToolResult):
            return result
        return ToolResult.ok(result)


def create_default_registry(
    working_dir: str = ".",
    audit=None,
    bash_timeout: Optional[float] = None,
    echo: bool = True,
) -> ToolRegistry:
    """
    Create registry with the built-in tools.

    - read/write/edit: files, relative to working_dir
    - bash: shell commands, streamed live
    - glob/grep: find files and search content
    - webfetch/websearch: read the web
    - ask: put a question to the user
    """
    from ..audit import AuditLog
    from .atomic.file_ops import ReadTool, WriteTool, EditTool
    from .atomic.shell import BashTool
    from .atomic.search import GlobTool, GrepTool
    from .atomic.web import WebFetchTool, WebSearchTool
    from .atomic.ask_user import AskTool

    audit = audit or AuditLog()

    registry = ToolRegistry()
    registry.register(ReadTool(working_dir))
    registry.register(WriteTool(working_dir))
    registry.register(EditTool(working_dir))
    registry.register(BashTool(working_dir, audit=audit, timeout=bash_timeout, echo=echo))
    registry.register(GlobTool(working_dir))
    registry.register(GrepTool(working_dir))
    registry.register(WebFetchTool(audit=audit))
    registry.register(WebSearchTool(audit=audit))
    registry.register(AskTool())
    return registry
