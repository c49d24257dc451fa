"""
Response Parser - split a planning reply into reasoning and actions

A planning reply looks like:

    [free-form reasoning]

    TOOL_CALLS:
    [{"tool": "read", "args": ["path"], "description": "what this does"}]

The block after the marker may be wrapped in a ```json (or plain ```) fence.
Malformed blocks never raise: they degrade to "no actions" and the decode
error is returned as a diagnostic.
"""
import json
import logging
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass, field

from .defaults import TOOL_CALLS_MARKER
from .errors import ParseFailure

LOGGER = logging.getLogger(__name__)

FENCE = "```"


@dataclass(frozen=True)
class Action:
    """One requested tool invocation."""
    tool_name: str
    arguments: Tuple[str, ...] = ()
    description: str = ""

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Action":
        if not isinstance(d, dict):
            raise ParseFailure(f"expected an object, got {type(d).__name__}")
        tool = d.get("tool")
        if not isinstance(tool, str) or not tool:
            raise ParseFailure("missing 'tool' name")
        args = d.get("args") or []
        if not isinstance(args, list):
            raise ParseFailure(f"'args' must be a list, got {type(args).__name__}")
        return cls(
            tool_name=tool,
            arguments=tuple(a if isinstance(a, str) else str(a) for a in args),
            description=str(d.get("description") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tool": self.tool_name,
            "args": list(self.arguments),
            "description": self.description,
        }

    def preview(self) -> str:
        return " ".join([self.tool_name, *self.arguments])


@dataclass
class ParsedResponse:
    reasoning: str
    actions: List[Action] = field(default_factory=list)
    diagnostic: Optional[str] = None

    @property
    def has_actions(self) -> bool:
        return len(self.actions) > 0


def strip_fence(block: str) -> str:
    """Remove an optional leading ```lang fence and trailing ``` fence."""
    text = block.strip()
    if text.startswith(FENCE):
        newline = text.find("\n")
        # ```json [...]``` on one line: drop just the tag
        if newline == -1:
            text = text[len(FENCE):]
            if text.startswith("json"):
                text = text[len("json"):]
        else:
            text = text[newline + 1:]
    if text.endswith(FENCE):
        text = text[:-len(FENCE)]
    return text.strip()


def decode_actions(block: str) -> List[Action]:
    """Decode the structured block. Raises ParseFailure on any problem."""
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise ParseFailure(str(e)) from e

    if not isinstance(data, list):
        raise ParseFailure(f"expected a JSON array, got {type(data).__name__}")

    return [Action.from_dict(item) for item in data]


def parse_response(raw: str) -> ParsedResponse:
    """
    Parse a planning reply.

    - No marker: the whole reply is reasoning, no actions.
    - Valid block: reasoning is the trimmed text before the marker.
    - Malformed block: no actions, reasoning is the full original reply,
      and `diagnostic` carries the decode error and the offending text.

    An explicit [] and a malformed block both come back with no actions;
    callers treat both as "task complete".
    """
    pos = raw.find(TOOL_CALLS_MARKER)
    if pos == -1:
        return ParsedResponse(reasoning=raw)

    reasoning = raw[:pos].strip()
    block = strip_fence(raw[pos + len(TOOL_CALLS_MARKER):])

    try:
        actions = decode_actions(block)
    except ParseFailure as e:
        diagnostic = f"Failed to parse tool calls: {e}. JSON was:\n{block}"
        LOGGER.warning("Unparseable tool calls", extra={"error": str(e), "block": block[:500]})
        return ParsedResponse(reasoning=raw, actions=[], diagnostic=diagnostic)

    return ParsedResponse(reasoning=reasoning, actions=actions)
