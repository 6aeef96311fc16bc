"""
LLM Prompt Templates

Symbol resolution and sub-keyword suggestion prompts.

RULES:
- LLM only names a ticker; domestic/foreign and suffix handling stay in code
- Sub-keyword lists are trimmed to the requested count in code
- Response must be strict JSON
"""

# =============================================================================
# SYMBOL RESOLUTION
# =============================================================================

SYMBOL_SYSTEM_PROMPT = (
    "You are a stock symbol resolver. You receive Korean or English keywords "
    "and must output the single most relevant stock ticker symbol "
    "(e.g. NVDA, TSLA, 005930). Always respond with strict JSON."
)

SYMBOL_INSTRUCTIONS = [
    "1. Decide whether main_keyword directly names a listed company.",
    "2. If it does, put that company's ticker in chosen_symbol "
    "(e.g. \"엔비디아\" -> \"NVDA\", \"테슬라\" -> \"TSLA\", \"삼성전자\" -> \"005930\").",
    "3. If main_keyword is a theme or industry (AI, semiconductors, EVs), "
    "pick the single most relevant listed company using all_keywords.",
    "4. Prefer widely known US/global listings unless the keywords point to a Korean company.",
    "5. Set is_domestic to true only for companies listed on KOSPI/KOSDAQ.",
    "6. Answer only with JSON: {\"chosen_symbol\": str, \"is_domestic\": bool}.",
]


# =============================================================================
# SUB-KEYWORD SUGGESTION
# =============================================================================

SUBKEYWORD_SYSTEM_PROMPT = (
    "You suggest search keywords for Korean news and stock articles. "
    "Given a main keyword, propose sub-keywords that are frequently mentioned "
    "together with it in the news and that form one tightly related cluster. "
    "Always respond with strict JSON and nothing else."
)

SUBKEYWORD_INSTRUCTIONS = [
    "1. Every sub-keyword must be strongly related to main_keyword.",
    "2. Each sub-keyword is a single noun phrase written in Korean "
    "(e.g. \"젠슨황\", \"데이터센터\").",
    "3. Prefer companies, people, countries, products and technologies over generic words.",
    "4. Do not append filler words such as \"관련\", \"이슈\", \"기사\", \"뉴스\".",
    "5. Return exactly count sub-keywords.",
    "6. Answer only with JSON: {\"mainKeyword\": str, \"subKeywords\": [str, ...]}, "
    "repeating main_keyword unchanged in mainKeyword.",
]
