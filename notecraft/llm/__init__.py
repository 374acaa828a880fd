from __future__ import annotations

from notecraft.llm.client import ClaudeClient, LLMConfig, TextTransformer
from notecraft.llm.prompts import DEFAULT_PROMPTS

__all__ = ["ClaudeClient", "LLMConfig", "TextTransformer", "DEFAULT_PROMPTS"]
