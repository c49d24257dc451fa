"""
Provider keys and the interactive session banner.

litellm reads provider credentials from the environment; this module only
tells the user up front which variable the configured model needs.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from .display import Colors as C


@dataclass(frozen=True)
class ProviderKey:
    provider: str
    env: str
    url: str
    markers: Tuple[str, ...]  # substrings of the model string

    @property
    def is_set(self) -> bool:
        value = os.getenv(self.env)
        return bool(value and value.strip())


PROVIDER_KEYS = (
    ProviderKey("Anthropic", "ANTHROPIC_API_KEY",
                "https://console.anthropic.com/settings/keys", ("anthropic", "claude")),
    ProviderKey("OpenAI", "OPENAI_API_KEY",
                "https://platform.openai.com/api-keys", ("openai", "gpt")),
    ProviderKey("Google AI", "GEMINI_API_KEY",
                "https://aistudio.google.com/apikey", ("gemini",)),
)


def provider_key_for_model(model: str) -> Optional[ProviderKey]:
    """The key a model needs, or None for providers we don't know (local models etc.)."""
    model_lower = model.lower()
    for key in PROVIDER_KEYS:
        if any(marker in model_lower for marker in key.markers):
            return key
    return None


def check_configuration_ready(model: str) -> Tuple[bool, List[str]]:
    """Return (ready, issues) for the configured model."""
    key = provider_key_for_model(model)
    if key is not None and not key.is_set:
        return False, [f"{key.env} not found in environment"]
    return True, []


def show_startup_banner(model: str, project_dir: Path, verbose: bool = True) -> None:
    if not verbose:
        return

    width = 58
    print()
    print(f"{C.CYAN}╭{'─' * width}╮{C.RESET}")
    print(f"{C.CYAN}│{C.RESET}{C.BOLD}{'Forge'.center(width)}{C.RESET}{C.CYAN}│{C.RESET}")
    print(f"{C.CYAN}╰{'─' * width}╯{C.RESET}")
    print(f"  model    {model}")
    print(f"  project  {project_dir}")

    key = provider_key_for_model(model)
    if key is not None:
        state = f"{C.GREEN}set{C.RESET}" if key.is_set else f"{C.RED}missing{C.RESET}"
        print(f"  key      {key.env} ({state})")
    print(f"\n{C.DIM}Type 'exit' or 'quit' to leave.{C.RESET}\n")


def show_key_help(model: str) -> None:
    key = provider_key_for_model(model)
    if key is None:
        return
    print(f"\n{key.provider} models need {key.env}.")
    print(f"  export {key.env}=...   (or put it in a .env file)")
    print(f"  Get a key at {key.url}")
