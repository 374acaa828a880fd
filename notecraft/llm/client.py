from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol, TYPE_CHECKING
import time
import logging

from notecraft.errors import ConfigurationError, TransformError

if TYPE_CHECKING:
    import anthropic

logger = logging.getLogger(__name__)


class TextTransformer(Protocol):
    """
    The transform collaborator.

    Returns the complete transformed text, or raises. The drivers treat an
    empty string and an exception the same way.
    """

    def transform(
        self,
        system_prompt: str,
        user_text: str,
        *,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> str:
        ...


@dataclass
class LLMConfig:
    """Configuration for Claude API client."""
    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 4096
    temperature: float = 0.1   # Low temp: the model should edit, not invent
    top_p: Optional[float] = None


class ClaudeClient:
    """Thin wrapper around Anthropic's Claude API implementing TextTransformer."""

    def __init__(self, config: LLMConfig):
        if not config.api_key:
            raise ConfigurationError(
                "Anthropic API key not found. "
                "Set ANTHROPIC_API_KEY or api_key in the config file."
            )
        self.config = config
        self._client: Optional["anthropic.Anthropic"] = None

    @property
    def client(self) -> "anthropic.Anthropic":
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            try:
                import anthropic
                self._client = anthropic.Anthropic(api_key=self.config.api_key)
            except ImportError:
                raise ImportError(
                    "anthropic library not installed. "
                    "Run: pip install anthropic"
                )
        return self._client

    def transform(
        self,
        system_prompt: str,
        user_text: str,
        *,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> str:
        """Send one chunk to Claude and return the text of the reply."""
        if not user_text:
            raise TransformError("Prompt is empty")

        params = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature if temperature is None else temperature,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_text}],
        }
        top_p = self.config.top_p if top_p is None else top_p
        if top_p is not None:
            params["top_p"] = top_p

        start_time = time.time()
        try:
            message = self.client.messages.create(**params)
        except Exception as e:
            logger.warning(f"Transform request failed: {type(e).__name__}: {e}")
            raise TransformError(str(e)) from e

        result = ""
        for block in message.content:
            if hasattr(block, "text"):
                result += block.text

        latency = (time.time() - start_time) * 1000
        logger.info(f"Transform returned {len(result)} chars in {latency:.0f}ms")
        return result.strip()
