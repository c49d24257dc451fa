"""
Recovery Controller - bounded retry after a tool failure

    Planning -> Executing -> Success
                          -> Failed -> Planning (depth + 1) while budget remains
                                    -> Abandoned

A failure that halts a recovery attempt becomes the pending error context,
with its own depth, so a whole recovery chain runs in one loop
whatever its length. At most max_retries planning calls are made per chain.
"""
import json
from dataclasses import dataclass
from enum import Enum

from .defaults import MAX_RETRIES
from .display import Display
from .executor import Failure, TurnExecutor
from .planner import Planner
from .prompts import RECOVERY, build_instruction
from .state import ConversationStore

MAX_RETRIES_REACHED = "Max retries reached"
NO_ALTERNATIVE = "No alternative approach found"


class RecoveryStatus(Enum):
    RECOVERED = "recovered"
    NO_ALTERNATIVE = "no_alternative"
    ABANDONED = "abandoned"


@dataclass
class RecoveryOutcome:
    status: RecoveryStatus
    planning_calls: int
    depth: int


def format_error_turn(failure: Failure) -> str:
    return (
        f"ERROR: The tool call '{failure.action.tool_name}' with args "
        f"{json.dumps(list(failure.action.arguments))} failed with error: {failure.error}\n\n"
        "Please analyze why this failed and try a different approach."
    )


class RecoveryController:
    def __init__(
        self,
        planner: Planner,
        executor: TurnExecutor,
        conversation: ConversationStore,
        display: Display,
        tool_usage: str,
        max_retries: int = MAX_RETRIES,
    ):
        self.planner = planner
        self.executor = executor
        self.conversation = conversation
        self.display = display
        self.instruction = build_instruction(RECOVERY, tool_usage)
        self.max_retries = max_retries

    def recover(self, failure: Failure) -> RecoveryOutcome:
        current = failure
        planning_calls = 0

        while True:
            depth = current.depth + 1

            self.display.tool_header("Error Recovery")
            self.conversation.add_user(format_error_turn(current))

            if depth > self.max_retries:
                self.display.error(MAX_RETRIES_REACHED)
                return RecoveryOutcome(RecoveryStatus.ABANDONED, planning_calls, depth)

            self.display.info(f"Retry attempt {depth}/{self.max_retries}")
            parsed = self.planner.plan(self.instruction)
            planning_calls += 1

            if not parsed.has_actions:
                self.display.info(NO_ALTERNATIVE)
                return RecoveryOutcome(RecoveryStatus.NO_ALTERNATIVE, planning_calls, depth)

            self.planner.preview(parsed.actions)
            outcome = self.executor.execute(parsed.actions, depth)

            if outcome.failure is not None:
                # halted below the budget: recover from the new failure one level deeper
                current = outcome.failure
                continue

            if outcome.unrecovered:
                # last attempt still failing, budget spent
                self.display.error(MAX_RETRIES_REACHED)
                return RecoveryOutcome(RecoveryStatus.ABANDONED, planning_calls, depth)

            return RecoveryOutcome(RecoveryStatus.RECOVERED, planning_calls, depth)
