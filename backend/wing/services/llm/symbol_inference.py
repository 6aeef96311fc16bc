"""
LLM-backed symbol inference.

Sends the keyword set in JSON mode and decodes the JSON answer.
"""

import json
import logging
from typing import Any, Optional

from wing.services.base import ResolutionFailedError
from wing.services.llm.client import LLMClient, get_llm_client
from wing.services.llm.prompts import SYMBOL_INSTRUCTIONS, SYMBOL_SYSTEM_PROMPT
from wing.services.symbols.resolver import SymbolInference

logger = logging.getLogger(__name__)

SERVICE_NAME = "SymbolInference"


def decode_response(content: str) -> dict[str, Any]:
    """Parse the model output as a JSON object."""
    try:
        parsed = json.loads(content or "")
    except json.JSONDecodeError as e:
        raise ResolutionFailedError(
            SERVICE_NAME, "Failed to parse model response as JSON", {"content": content}
        ) from e
    if not isinstance(parsed, dict):
        raise ResolutionFailedError(
            SERVICE_NAME, "Model response is not a JSON object", {"content": content}
        )
    return parsed


class LLMSymbolInference(SymbolInference):
    """Symbol inference through the shared LLM client."""

    def __init__(self, client: Optional[LLMClient] = None):
        self._client = client

    @property
    def client(self) -> LLMClient:
        return self._client or get_llm_client()

    async def infer(self, main_keyword: str, all_keywords: list[str]) -> dict[str, Any]:
        payload = {
            "main_keyword": main_keyword,
            "all_keywords": all_keywords,
            "instructions": SYMBOL_INSTRUCTIONS,
        }
        try:
            response = await self.client.generate(
                system_prompt=SYMBOL_SYSTEM_PROMPT,
                user_prompt=json.dumps(payload, ensure_ascii=False),
                response_format="json",
            )
        except Exception as e:
            logger.error(f"Symbol inference failed for '{main_keyword}': {e}")
            raise ResolutionFailedError(
                SERVICE_NAME, f"Language model unavailable: {e}"
            ) from e

        return decode_response(response.content)
