"""
Turn Executor - run one action list against the tool registry

Actions run strictly in order. Every attempted action yields one result
line, and the lines are appended to the conversation as a single
"Tool execution results:" user turn before any recovery decision is made.

While retry budget remains (depth < max_retries) the first failure halts
the list; once it is spent, failures are recorded and execution continues.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .defaults import MAX_RETRIES
from .display import Display
from .parser import Action
from .state import ConversationStore
from .tools.registry import ToolRegistry, ToolResult

RESULTS_HEADER = "Tool execution results:"


class ExecutionStatus(Enum):
    COMPLETED = "completed"
    HALTED = "halted"
    COMPLETED_WITH_ERRORS = "completed_with_errors"


@dataclass
class Failure:
    """A failed action and the error it produced."""
    action: Action
    error: str
    depth: int


@dataclass
class ExecutionOutcome:
    results: List[Tuple[Action, ToolResult]] = field(default_factory=list)
    failure: Optional[Failure] = None          # halting failure, recoverable
    unrecovered: List[Failure] = field(default_factory=list)

    @property
    def status(self) -> ExecutionStatus:
        if self.failure is not None:
            return ExecutionStatus.HALTED
        if self.unrecovered:
            return ExecutionStatus.COMPLETED_WITH_ERRORS
        return ExecutionStatus.COMPLETED

    @property
    def result_lines(self) -> List[str]:
        return [format_result_line(action, result) for action, result in self.results]


def format_result_line(action: Action, result: ToolResult) -> str:
    if result.success:
        return f"{action.description}: {result.to_message()}"
    return f"{action.description}: Error - {result.error}"


class TurnExecutor:
    def __init__(
        self,
        registry: ToolRegistry,
        conversation: ConversationStore,
        display: Display,
        max_retries: int = MAX_RETRIES,
    ):
        self.registry = registry
        self.conversation = conversation
        self.display = display
        self.max_retries = max_retries

    def execute(self, actions: Sequence[Action], retry_depth: int = 0) -> ExecutionOutcome:
        outcome = ExecutionOutcome()
        self.display.tool_header("Executing")

        for i, action in enumerate(actions, 1):
            self.display.step(i, len(actions), action.description)
            result = self.registry.execute(action.tool_name, action.arguments)
            outcome.results.append((action, result))

            if result.success:
                tool = self.registry.get(action.tool_name)
                if not (tool and tool.streams_output):
                    self.display.tool_output(result.to_message())
                self.display.result(True)
                continue

            self.display.result(False, result.error)
            failure = Failure(action=action, error=result.error or "", depth=retry_depth)
            if retry_depth < self.max_retries:
                outcome.failure = failure
                break
            outcome.unrecovered.append(failure)

        if outcome.results:
            self.conversation.add_user(RESULTS_HEADER + "\n" + "\n".join(outcome.result_lines))

        if outcome.status == ExecutionStatus.COMPLETED:
            self.display.success("All tasks completed!")
        return outcome
