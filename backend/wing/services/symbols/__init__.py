"""
Symbol Resolution Bridge

CONTRACT:
    Input:  SymbolRequest (owner id, graph id)
    Output: SymbolResolution {graphId, mainKeyword, allKeywords, symbol, isDomestic}

RESPONSIBILITIES:
    - MAIN keyword selection and keyword de-duplication
    - Korean exchange suffix stripping (.KS, .KQ, .KRX, .KOSPI, .KOSDAQ)
    - Domestic/foreign inference when the model gives no flag
    - Explicit failure on malformed or empty model answers
"""

from wing.services.symbols.resolver import (
    SymbolInference,
    SymbolRequest,
    SymbolResolver,
    get_symbol_resolver,
    normalize_symbol,
)

__all__ = [
    "SymbolInference",
    "SymbolRequest",
    "SymbolResolver",
    "get_symbol_resolver",
    "normalize_symbol",
]
