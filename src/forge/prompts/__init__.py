"""
Prompts - system prompt and the three planning instructions.
"""

from .loader import (
    load_prompt, build_system_prompt, build_instruction,
    FIRST_TURN, FOLLOW_UP, RECOVERY,
)

__all__ = [
    "load_prompt", "build_system_prompt", "build_instruction",
    "FIRST_TURN", "FOLLOW_UP", "RECOVERY",
]
