"""
Tests for wing.services.keywords

The language model is an AsyncMock-backed LLMClient.
"""
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from wing.services.base import ExternalAPIError, InvalidArgumentError
from wing.services.keywords import KeywordSuggester, SubkeywordRequest, parse_subkeywords
from wing.services.llm.client import LLMClient, LLMProvider, LLMResponse


# ── Helpers ───────────────────────────────────────────────────────────────────

def _client(content: str = "", error: Exception = None) -> MagicMock:
    client = MagicMock(spec=LLMClient)
    if error is not None:
        client.generate = AsyncMock(side_effect=error)
    else:
        client.generate = AsyncMock(
            return_value=LLMResponse(content=content, model="test", provider=LLMProvider.OPENAI, usage={})
        )
    return client


# ── Parsing ───────────────────────────────────────────────────────────────────

def test_parse_caps_at_count():
    content = json.dumps({"mainKeyword": "엔비디아", "subKeywords": ["젠슨황", "HBM", "TSMC", "AI"]})

    result = parse_subkeywords(content, "엔비디아", 2)

    assert result.main_keyword == "엔비디아"
    assert result.sub_keywords == ["젠슨황", "HBM"]


def test_malformed_answer_yields_empty_list():
    result = parse_subkeywords("not json {", "엔비디아", 5)

    assert result.main_keyword == "엔비디아"
    assert result.sub_keywords == []


def test_parse_drops_blanks_duplicates_and_main_keyword():
    content = json.dumps({"subKeywords": [" HBM ", "", 3, "HBM", "엔비디아", "TSMC"]})

    result = parse_subkeywords(content, "엔비디아", 8)

    assert result.main_keyword == "엔비디아"
    assert result.sub_keywords == ["HBM", "TSMC"]


@pytest.mark.parametrize("content", ["[]", '{"subKeywords": "HBM"}', ""])
def test_parse_wrong_shapes_yield_empty_list(content):
    assert parse_subkeywords(content, "엔비디아", 3).sub_keywords == []


# ── Service ───────────────────────────────────────────────────────────────────

async def test_suggest_uses_json_mode_and_sends_count():
    client = _client(json.dumps({"mainKeyword": "테슬라", "subKeywords": ["일론머스크", "전기차"]}))

    result = await KeywordSuggester(client).execute(SubkeywordRequest(main_keyword=" 테슬라 ", count=2))

    assert result.sub_keywords == ["일론머스크", "전기차"]
    kwargs = client.generate.await_args.kwargs
    assert kwargs["response_format"] == "json"
    payload = json.loads(kwargs["user_prompt"])
    assert (payload["main_keyword"], payload["count"]) == ("테슬라", 2)


async def test_default_count_is_eight():
    words = [f"k{i}" for i in range(12)]
    client = _client(json.dumps({"subKeywords": words}))

    result = await KeywordSuggester(client).suggest("반도체")

    assert result.sub_keywords == words[:8]


@pytest.mark.parametrize("main_keyword, count", [("", 5), ("   ", 5), ("AI", 0), ("AI", 21), ("AI", True)])
async def test_bad_input_rejected_before_model_call(main_keyword, count):
    client = _client("{}")

    with pytest.raises(InvalidArgumentError):
        await KeywordSuggester(client).suggest(main_keyword, count)

    client.generate.assert_not_awaited()


async def test_provider_failure_is_external_error():
    client = _client(error=RuntimeError("No LLM providers configured"))

    with pytest.raises(ExternalAPIError):
        await KeywordSuggester(client).suggest("AI", 3)
