"""
Sub-keyword suggestion service.

The graph-building flow starts here: a main keyword is expanded into the
related keywords whose news co-occurrence later becomes the graph edges.
"""

import json
import logging
from typing import Optional

from pydantic import BaseModel

from wing.schemas.graph import SubkeywordSuggestion
from wing.services.base import BaseService, ExternalAPIError, InvalidArgumentError
from wing.services.llm.client import LLMClient, get_llm_client
from wing.services.llm.prompts import SUBKEYWORD_INSTRUCTIONS, SUBKEYWORD_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

SERVICE_NAME = "KeywordSuggester"

DEFAULT_COUNT = 8
MAX_COUNT = 20


class SubkeywordRequest(BaseModel):
    main_keyword: str
    count: int = DEFAULT_COUNT


def parse_subkeywords(content: str, main_keyword: str, count: int) -> SubkeywordSuggestion:
    """
    Decode the model answer. A malformed answer yields no sub-keywords
    rather than an error.
    """
    try:
        parsed = json.loads(content or "")
    except json.JSONDecodeError:
        logger.warning(f"Sub-keyword answer for '{main_keyword}' is not JSON, returning none")
        parsed = {}
    if not isinstance(parsed, dict):
        parsed = {}

    echoed = parsed.get("mainKeyword")
    raw = parsed.get("subKeywords")

    sub_keywords = []
    for item in raw if isinstance(raw, list) else []:
        if not isinstance(item, str):
            continue
        name = item.strip()
        if name and name != main_keyword and name not in sub_keywords:
            sub_keywords.append(name)

    return SubkeywordSuggestion(
        main_keyword=echoed.strip() if isinstance(echoed, str) and echoed.strip() else main_keyword,
        sub_keywords=sub_keywords[:count],
    )


class KeywordSuggester(BaseService[SubkeywordRequest, SubkeywordSuggestion]):
    """Main keyword -> related sub-keywords."""

    def __init__(self, client: Optional[LLMClient] = None):
        self._client = client

    @property
    def name(self) -> str:
        return SERVICE_NAME

    @property
    def client(self) -> LLMClient:
        return self._client or get_llm_client()

    async def execute(self, input_data: SubkeywordRequest) -> SubkeywordSuggestion:
        return await self.suggest(input_data.main_keyword, input_data.count)

    async def suggest(self, main_keyword: str, count: int = DEFAULT_COUNT) -> SubkeywordSuggestion:
        main_keyword = (main_keyword or "").strip()
        if not main_keyword:
            raise InvalidArgumentError(SERVICE_NAME, "mainKeyword is required")
        if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_COUNT:
            raise InvalidArgumentError(
                SERVICE_NAME, f"count must be between 1 and {MAX_COUNT}, got {count!r}"
            )

        payload = {
            "main_keyword": main_keyword,
            "count": count,
            "instructions": SUBKEYWORD_INSTRUCTIONS,
        }
        try:
            response = await self.client.generate(
                system_prompt=SUBKEYWORD_SYSTEM_PROMPT,
                user_prompt=json.dumps(payload, ensure_ascii=False),
                temperature=0.3,
                response_format="json",
            )
        except Exception as e:
            logger.error(f"Sub-keyword suggestion failed for '{main_keyword}': {e}")
            raise ExternalAPIError(SERVICE_NAME, f"Language model unavailable: {e}") from e

        suggestion = parse_subkeywords(response.content, main_keyword, count)
        logger.info(
            f"Suggested {len(suggestion.sub_keywords)}/{count} sub-keywords for '{main_keyword}'"
        )
        return suggestion

    async def health_check(self) -> bool:
        return self.client.is_configured


# Singleton instance
_keyword_suggester: Optional[KeywordSuggester] = None


def get_keyword_suggester() -> KeywordSuggester:
    """Get or create keyword suggester singleton."""
    global _keyword_suggester
    if _keyword_suggester is None:
        _keyword_suggester = KeywordSuggester()
    return _keyword_suggester
