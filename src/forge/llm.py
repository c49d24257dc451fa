"""
LLM Interface - the planning oracle, via litellm

The agent sees a single operation: infer(system_instructions, turns) -> text.
Provider, authentication and transport retries are litellm's business.
"""
# Suppress pydantic serialization warnings BEFORE any imports
# These warnings occur when litellm's pydantic models serialize responses
# and fields don't match expected schema (e.g., thinking_blocks for Claude)
import warnings

warnings.filterwarnings("ignore", message=".*Pydantic serializer warnings.*")
warnings.filterwarnings("ignore", message=".*PydanticSerializationUnexpectedValue.*")
warnings.filterwarnings("ignore", message=".*Expected.*fields but got.*")
warnings.filterwarnings("ignore", message=".*serialized value may not be as expected.*")
warnings.filterwarnings("ignore", category=UserWarning, module="pydantic.*")

import logging
import os
from typing import List, Dict, Any, Optional, Sequence

import litellm
from litellm import completion

from .defaults import DEFAULT_MODEL, MAX_TOKENS, TEMPERATURE, LLM_TIMEOUT, LLM_NUM_RETRIES
from .errors import NetworkError
from .startup import provider_key_for_model
from .state import Turn

LOGGER = logging.getLogger(__name__)

NO_RESPONSE = "No response"

litellm.drop_params = True  # Ignore unsupported params


class LLMClient:
    """
    Model-agnostic LLM client using litellm

    Supports: Anthropic, OpenAI, Google, Mistral, local models, etc.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        temperature: float = TEMPERATURE,
        max_tokens: int = MAX_TOKENS,
        timeout: float = LLM_TIMEOUT,
        num_retries: int = LLM_NUM_RETRIES,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.num_retries = num_retries
        self.base_url = base_url

        # litellm picks the provider from the model name and reads its key from the environment
        key = provider_key_for_model(model)
        if api_key and key is not None:
            os.environ[key.env] = api_key
        self._cache_system_prompt = key is not None and key.env == "ANTHROPIC_API_KEY"

    def _system_message(self, system_instructions: str) -> Dict[str, Any]:
        # The system prompt never changes within a session: let Anthropic cache it
        if self._cache_system_prompt:
            return {
                "role": "system",
                "content": [{
                    "type": "text",
                    "text": system_instructions,
                    "cache_control": {"type": "ephemeral"},
                }],
            }
        return {"role": "system", "content": system_instructions}

    def build_messages(self, system_instructions: str, turns: Sequence[Turn]) -> List[Dict[str, Any]]:
        return [self._system_message(system_instructions)] + [t.to_dict() for t in turns]

    def infer(self, system_instructions: str, turns: Sequence[Turn]) -> str:
        """
        Send the system prompt plus the full turn log, return the reply text.

        Raises NetworkError on any transport or provider failure. A reply
        without text content comes back as "No response".
        """
        call_kwargs = {
            "model": self.model,
            "messages": self.build_messages(system_instructions, turns),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
            "num_retries": self.num_retries,
        }
        if self.base_url:
            call_kwargs["base_url"] = self.base_url

        try:
            response = completion(**call_kwargs)
        except Exception as e:
            LOGGER.error("Inference failed", extra={"model": self.model, "error": str(e)})
            raise NetworkError(f"LLM request failed: {e}") from e

        return extract_text(response)


def extract_text(response: Any) -> str:
    """Pull the reply text out of a completion envelope."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        LOGGER.warning("Malformed completion envelope", extra={"response": repr(response)[:500]})
        return NO_RESPONSE
    return content if content else NO_RESPONSE
