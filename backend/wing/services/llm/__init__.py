"""
LLM Client

RESPONSIBILITIES:
    - OpenAI / Anthropic clients behind one interface
    - Primary provider with automatic fallback
    - Keyword -> ticker inference for the symbol resolver

CRITICAL RULES:
    - LLM only names a ticker; everything numeric stays in code
    - Malformed answers fail explicitly, nothing is guessed
"""

from wing.services.llm.client import (
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    close_llm_client,
    get_llm_client,
)
from wing.services.llm.symbol_inference import LLMSymbolInference

__all__ = [
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "close_llm_client",
    "get_llm_client",
    "LLMSymbolInference",
]
