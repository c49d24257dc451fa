from __future__ import annotations

import json
from typing import Any, Optional

import pytest

from forge.agent import Agent, AgentConfig
from forge.display import Display
from forge.errors import ForgeError
from forge.state import ConversationStore
from forge.tools.registry import BaseTool, ToolRegistry


def reply(reasoning: str, actions: list[dict[str, Any]]) -> str:
    """A planning reply in the TOOL_CALLS format."""
    return f"{reasoning}\n\nTOOL_CALLS:\n{json.dumps(actions)}"


def call(tool: str, *args: str, description: Optional[str] = None) -> dict[str, Any]:
    return {"tool": tool, "args": list(args), "description": description or f"{tool} step"}


class FakeLLM:
    """Returns scripted replies and records what each call saw."""

    def __init__(self, replies: list[str] | None = None, default: str | None = None) -> None:
        self.replies = list(replies or [])
        self.default = default
        self.calls: list[tuple[str, list[str]]] = []

    def infer(self, system_instructions: str, turns) -> str:
        self.calls.append((system_instructions, [t.text for t in turns]))
        if self.replies:
            return self.replies.pop(0)
        if self.default is not None:
            return self.default
        raise AssertionError("FakeLLM ran out of scripted replies")


class RecordingTool(BaseTool):
    """Records invocations; fails when the first argument is in `fail_on`."""

    usage = "echo <text>"
    summary = "Echo text back"

    def __init__(self, name: str = "echo", fail_on: tuple[str, ...] = ()) -> None:
        self.name = name
        self.fail_on = fail_on
        self.invocations: list[list[str]] = []

    def run(self, args):
        self.invocations.append(list(args))
        if args and args[0] in self.fail_on:
            raise ForgeError(f"cannot echo {args[0]}")
        return " ".join(args)


@pytest.fixture
def display() -> Display:
    return Display(verbose=False, quiet=True)


@pytest.fixture
def conversation() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def echo_tool() -> RecordingTool:
    return RecordingTool(fail_on=("bad",))


@pytest.fixture
def echo_registry(echo_tool) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(echo_tool)
    return registry


@pytest.fixture
def make_agent(tmp_path, display):
    def factory(llm: FakeLLM, tools: ToolRegistry | None = None, **config) -> Agent:
        config.setdefault("working_dir", str(tmp_path))
        config.setdefault("log_dir", str(tmp_path / "_logs"))
        config.setdefault("verbose", False)
        return Agent(config=AgentConfig(**config), tools=tools, llm=llm, display=display)

    return factory
