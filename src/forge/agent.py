"""
Core Agent Loop - the orchestration engine

Each user request runs:
    for turn in 1..max_turns:
        plan()                  # reasoning + actions
        if no actions: done
        execute(actions)        # depth 0
        if a failure halted it: recover()
"""
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .audit import AuditLog
from .defaults import (
    DEFAULT_MODEL, MAX_TOKENS, TEMPERATURE, MAX_TURNS, MAX_RETRIES, LLM_TIMEOUT, LOG_DIR,
)
from .display import Display, create_display
from .executor import TurnExecutor
from .llm import LLMClient
from .planner import Planner
from .prompts import FIRST_TURN, FOLLOW_UP, build_instruction, build_system_prompt
from .recovery import RecoveryController, RecoveryOutcome
from .state import ConversationStore
from .tools import ToolRegistry, create_default_registry

LOGGER = logging.getLogger(__name__)

TASK_COMPLETE = "Task complete"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Ignoring invalid %s=%r", name, value)
        return default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        LOGGER.warning("Ignoring invalid %s=%r", name, value)
        return default


@dataclass
class AgentConfig:
    """Configuration for the agent"""
    model: str = DEFAULT_MODEL
    temperature: float = TEMPERATURE
    max_tokens: int = MAX_TOKENS
    max_turns: int = MAX_TURNS
    max_retries: int = MAX_RETRIES
    working_dir: str = "."
    verbose: bool = True
    llm_timeout: float = LLM_TIMEOUT
    bash_timeout: Optional[float] = None
    log_dir: Optional[str] = None  # default: <working_dir>/_logs

    @classmethod
    def from_env(cls, **overrides) -> "AgentConfig":
        """Defaults, then FORGE_* environment variables, then explicit overrides."""
        config = cls(
            model=os.getenv("FORGE_MODEL") or DEFAULT_MODEL,
            max_turns=_env_int("FORGE_MAX_TURNS", MAX_TURNS),
            max_retries=_env_int("FORGE_MAX_RETRIES", MAX_RETRIES),
            llm_timeout=_env_float("FORGE_LLM_TIMEOUT", LLM_TIMEOUT),
            bash_timeout=_env_float("FORGE_BASH_TIMEOUT", None),
            log_dir=os.getenv("FORGE_LOG_DIR") or None,
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config

    @property
    def resolved_log_dir(self) -> str:
        return self.log_dir or os.path.join(self.working_dir, LOG_DIR)


class ProcessStatus(Enum):
    COMPLETE = "complete"
    MAX_TURNS = "max_turns"


@dataclass
class ProcessOutcome:
    status: ProcessStatus
    turns: int
    recoveries: List[RecoveryOutcome] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.status == ProcessStatus.COMPLETE


class Agent:
    """
    The conversational agent.

    Owns the conversation for the lifetime of the process; every request
    adds to the same history.
    """

    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        tools: Optional[ToolRegistry] = None,
        llm: Optional[LLMClient] = None,
        display: Optional[Display] = None,
        system_prompt: Optional[str] = None,
    ):
        self.config = config or AgentConfig()
        self.display = display or create_display(
            verbose=self.config.verbose,
            quiet=not self.config.verbose,
        )
        self.tools = tools or create_default_registry(
            self.config.working_dir,
            audit=AuditLog(self.config.resolved_log_dir),
            bash_timeout=self.config.bash_timeout,
        )
        self.llm = llm or LLMClient(
            model=self.config.model,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
            timeout=self.config.llm_timeout,
        )
        self.conversation = ConversationStore()

        tool_usage = self.tools.usage_lines()
        self.system_prompt = system_prompt or build_system_prompt(
            working_dir=os.path.abspath(self.config.working_dir),
            tool_usage=tool_usage,
        )
        self._first_turn = build_instruction(FIRST_TURN, tool_usage)
        self._follow_up = build_instruction(FOLLOW_UP, tool_usage)

        self.planner = Planner(self.llm, self.conversation, self.display, self.system_prompt)
        self.executor = TurnExecutor(
            self.tools, self.conversation, self.display, self.config.max_retries
        )
        self.recovery = RecoveryController(
            self.planner, self.executor, self.conversation, self.display,
            tool_usage, self.config.max_retries,
        )

    def add_user_message(self, text: str) -> None:
        self.conversation.add_user(text)

    def process(self) -> ProcessOutcome:
        """
        Work on the request most recently added with add_user_message.

        NetworkError from the model API propagates to the caller.
        """
        recoveries = []
        for turn in range(1, self.config.max_turns + 1):
            if turn > 1:
                self.display.tool_header(f"Turn {turn}")
                self.display.blank()

            instruction = self._first_turn if turn == 1 else self._follow_up
            parsed = self.planner.plan(instruction)

            if not parsed.has_actions:
                self.display.info(TASK_COMPLETE)
                return ProcessOutcome(ProcessStatus.COMPLETE, turn, recoveries)

            self.planner.preview(parsed.actions)
            outcome = self.executor.execute(parsed.actions, retry_depth=0)
            if outcome.failure is not None:
                self.display.blank()
                recoveries.append(self.recovery.recover(outcome.failure))
            self.display.blank()

        self.display.info(f"Reached max turns ({self.config.max_turns})")
        return ProcessOutcome(ProcessStatus.MAX_TURNS, self.config.max_turns, recoveries)

    def handle(self, request: str) -> ProcessOutcome:
        """Add a user request and process it."""
        self.add_user_message(request)
        return self.process()


def create_agent(**kwargs) -> Agent:
    """Agent configured from the environment; kwargs override config fields."""
    return Agent(config=AgentConfig.from_env(**kwargs))
