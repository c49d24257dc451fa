"""
Forge - a conversational coding agent

Quick Start:
    from forge import create_agent

    agent = create_agent(working_dir="my-project")
    outcome = agent.handle("Find the TODOs in src/ and list them")
"""
# Suppress pydantic serialization warnings BEFORE any imports
# These occur when litellm's pydantic models serialize LLM responses
# with fields that don't match schema (e.g., thinking_blocks for Claude)
import warnings

warnings.filterwarnings("ignore", message=".*Pydantic serializer warnings.*")
warnings.filterwarnings("ignore", message=".*PydanticSerializationUnexpectedValue.*")
warnings.filterwarnings("ignore", category=UserWarning, module="pydantic.*")

from .agent import Agent, AgentConfig, ProcessOutcome, ProcessStatus, create_agent
from .errors import (
    ForgeError, FileNotFound, PatternNotFound, CommandFailed,
    UnknownTool, ParseFailure, NetworkError,
)
from .executor import TurnExecutor, ExecutionOutcome, ExecutionStatus
from .llm import LLMClient
from .parser import Action, ParsedResponse, parse_response
from .recovery import RecoveryController, RecoveryOutcome, RecoveryStatus
from .state import ConversationStore, Role, Turn
from .tools import ToolRegistry, ToolResult, create_default_registry
from .defaults import DEFAULT_MODEL

__version__ = "0.1.0"
__all__ = [
    "DEFAULT_MODEL",
    # Agent
    "Agent", "AgentConfig", "ProcessOutcome", "ProcessStatus", "create_agent",
    # Errors
    "ForgeError", "FileNotFound", "PatternNotFound", "CommandFailed",
    "UnknownTool", "ParseFailure", "NetworkError",
    # Loop parts
    "TurnExecutor", "ExecutionOutcome", "ExecutionStatus",
    "RecoveryController", "RecoveryOutcome", "RecoveryStatus",
    "Action", "ParsedResponse", "parse_response",
    "ConversationStore", "Role", "Turn",
    # LLM / tools
    "LLMClient", "ToolRegistry", "ToolResult", "create_default_registry",
]
