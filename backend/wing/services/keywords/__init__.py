"""
Sub-keyword Suggestion

CONTRACT:
    Input:  SubkeywordRequest (main keyword, count 1..20, default 8)
    Output: SubkeywordSuggestion {mainKeyword, subKeywords}

RESPONSIBILITIES:
    - Ask the language model for related search keywords in JSON mode
    - Degrade a malformed answer to an empty list
    - Trim, de-duplicate and cap the list at the requested count
"""

from wing.services.keywords.service import (
    KeywordSuggester,
    SubkeywordRequest,
    get_keyword_suggester,
    parse_subkeywords,
)

__all__ = [
    "KeywordSuggester",
    "SubkeywordRequest",
    "get_keyword_suggester",
    "parse_subkeywords",
]
