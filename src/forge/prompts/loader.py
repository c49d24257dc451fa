"""
Prompt Loader - system prompt and planning instructions from .md files

Placeholders ({working_dir}, {tool_usage}) are filled with plain string
replacement, since the instruction files contain literal JSON braces.
"""

from pathlib import Path

PROMPTS_DIR = Path(__file__).parent

FIRST_TURN = "first_turn"
FOLLOW_UP = "follow_up"
RECOVERY = "recovery"


def load_prompt(name: str) -> str:
    """
    Load a prompt section by name (without .md extension).

    Raises FileNotFoundError if the section does not exist.
    """
    path = PROMPTS_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def build_system_prompt(working_dir: str, tool_usage: str) -> str:
    prompt = load_prompt("system")
    prompt = prompt.replace("{working_dir}", working_dir)
    prompt = prompt.replace("{tool_usage}", tool_usage)
    return prompt


def build_instruction(name: str, tool_usage: str) -> str:
    """Planning instruction for a turn: FIRST_TURN, FOLLOW_UP or RECOVERY."""
    return load_prompt(name).replace("{tool_usage}", tool_usage)
