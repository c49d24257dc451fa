"""
Planner - one planning call: instruction in, reasoning and actions out
"""
from typing import Sequence

from .display import Display
from .llm import LLMClient
from .parser import Action, ParsedResponse, parse_response
from .state import ConversationStore


class Planner:
    """
    Runs a planning call against the shared conversation.

    The instruction is appended as a permanent user turn and the raw reply
    as an assistant turn, so later calls see both.
    """

    def __init__(self, llm: LLMClient, conversation: ConversationStore,
                 display: Display, system_prompt: str):
        self.llm = llm
        self.conversation = conversation
        self.display = display
        self.system_prompt = system_prompt

    def plan(self, instruction: str) -> ParsedResponse:
        self.display.tool_header("Thinking")
        self.conversation.add_user(instruction)

        with self.display.spinner("Thinking"):
            reply = self.llm.infer(self.system_prompt, self.conversation.snapshot())
        self.conversation.add_assistant(reply)

        parsed = parse_response(reply)
        if parsed.diagnostic:
            self.display.warning(parsed.diagnostic)
        self.display.reasoning(parsed.reasoning)
        return parsed

    def preview(self, actions: Sequence[Action]) -> None:
        self.display.tool_header("Executing")
        for i, action in enumerate(actions, 1):
            self.display.list_item(i, action.preview())
        self.display.blank()
