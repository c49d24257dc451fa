"""
Ask tool - put a question to the user and wait for the answer.

Use for genuinely ambiguous requests only; the agent should otherwise act
autonomously.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from prompt_toolkit import prompt as pt_prompt

from ...errors import ForgeError
from ..registry import BaseTool

MAX_ATTEMPTS = 5  # Prevent infinite loops on bad input
MULTI_FLAG = "--multi"


@dataclass
class AskResult:
    kind: str                         # "single" | "multi" | "text"
    answers: List[str] = field(default_factory=list)

    @property
    def value(self) -> str:
        return ", ".join(self.answers)


def _pick_one(choice: str, choices: List[str]) -> Optional[str]:
    """Match a numeric index or (a prefix of) an option's text."""
    if choice.isdigit():
        idx = int(choice)
        return choices[idx - 1] if 1 <= idx <= len(choices) else None
    lowered = choice.lower()
    for opt in choices:
        if opt.lower() == lowered or opt.lower().startswith(lowered):
            return opt
    return None


def prompt_user(question: str, choices: Optional[List[str]] = None,
                allow_multiple: bool = False) -> AskResult:
    """
    Ask the user a question on the terminal.

    - no choices: free text answer
    - choices: pick one by number or text
    - choices + allow_multiple: comma-separated picks
    """
    if not question or not question.strip():
        raise ForgeError("Question cannot be empty")

    print(f"\n{question.strip()}")

    try:
        if not choices:
            answer = pt_prompt("> ").strip()
            return AskResult(kind="text", answers=[answer])

        for i, opt in enumerate(choices, 1):
            print(f"  [{i}] {opt}")

        hint = "comma-separated numbers" if allow_multiple else f"1-{len(choices)}"
        for _ in range(MAX_ATTEMPTS):
            raw = pt_prompt(f"Your choice [{hint}]: ").strip()
            if not raw:
                continue

            if allow_multiple:
                picked = [_pick_one(part.strip(), choices) for part in raw.split(",") if part.strip()]
                if picked and all(picked):
                    return AskResult(kind="multi", answers=picked)
            else:
                picked = _pick_one(raw, choices)
                if picked:
                    return AskResult(kind="single", answers=[picked])

            print(f"'{raw}' is not a valid option.")
    except (EOFError, KeyboardInterrupt):
        raise ForgeError("User did not answer the question")

    raise ForgeError(f"No valid answer after {MAX_ATTEMPTS} attempts")


class AskTool(BaseTool):
    name = "ask"
    usage = "ask <question> [choice...] [--multi]"
    summary = "Ask the user a question (free text, or pick from choices)"

    def run(self, args: Sequence[str]) -> str:
        choices = [a for a in args[1:] if a != MULTI_FLAG]
        allow_multiple = MULTI_FLAG in args[1:]
        result = prompt_user(self.arg(args, 0), choices or None, allow_multiple)
        return f"User responded: {result.value}"
