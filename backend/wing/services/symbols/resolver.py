"""
Symbol Resolution Bridge

Maps a keyword graph to one tradable symbol plus a domestic/foreign flag.
The inference collaborator picks the ticker; this module owns keyword
selection, ticker normalization and the domestic decision.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from wing.graphs.store import GraphStore
from wing.schemas.graph import GraphNode, NodeKind, SymbolResolution
from wing.services.base import BaseService, ResolutionFailedError

logger = logging.getLogger(__name__)

SERVICE_NAME = "SymbolResolver"

EXCHANGE_SUFFIX = re.compile(r"\.(KS|KQ|KRX|KOSPI|KOSDAQ)$", re.IGNORECASE)
DOMESTIC_CODE = re.compile(r"^\d{6}$")


class SymbolInference(ABC):
    """Language-model collaborator that names a ticker for a keyword set."""

    @abstractmethod
    async def infer(self, main_keyword: str, all_keywords: list[str]) -> dict[str, Any]:
        """
        Returns the decoded response object, e.g.
        {"chosen_symbol": "NVDA", "is_domestic": false}.

        Raises:
            ResolutionFailedError: unreachable model or malformed response
        """
        pass


# =============================================================================
# PURE HELPERS
# =============================================================================


def normalize_symbol(raw: str) -> tuple[str, bool]:
    """Strip a Korean exchange suffix and upper-case. Returns (symbol, had_suffix)."""
    text = (raw or "").strip()
    stripped = EXCHANGE_SUFFIX.sub("", text)
    return stripped.strip().upper(), stripped != text


def parse_domestic_flag(value: Any) -> Optional[bool]:
    """Explicit flag from the model, if it gave a usable one."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def infer_domestic(symbol: str, had_suffix: bool) -> bool:
    """Six-digit KRX code or a Korean exchange suffix means domestic."""
    return had_suffix or bool(DOMESTIC_CODE.match(symbol))


def select_keywords(nodes: Sequence[GraphNode]) -> tuple[str, list[str]]:
    """
    Main keyword plus all distinct non-empty keyword names in node order.

    Nodes are expected MAIN first, then by weight descending.
    """
    if not nodes:
        raise ResolutionFailedError(SERVICE_NAME, "Graph has no nodes")

    main = next((n for n in nodes if n.kind == NodeKind.MAIN), nodes[0])
    main_keyword = main.name.strip()
    if not main_keyword:
        raise ResolutionFailedError(SERVICE_NAME, "Main keyword is empty")

    seen = set()
    all_keywords = []
    for node in nodes:
        name = node.name.strip()
        if name and name not in seen:
            seen.add(name)
            all_keywords.append(name)
    return main_keyword, all_keywords


def symbol_from_response(response: dict[str, Any]) -> tuple[str, bool]:
    """(symbol, is_domestic) from a decoded inference response."""
    raw = response.get("chosen_symbol") or response.get("symbol") or ""
    symbol, had_suffix = normalize_symbol(str(raw))
    if not symbol:
        raise ResolutionFailedError(
            SERVICE_NAME, "Model did not return a stock symbol", {"response": response}
        )

    explicit = parse_domestic_flag(response.get("is_domestic"))
    is_domestic = explicit if explicit is not None else infer_domestic(symbol, had_suffix)
    return symbol, is_domestic


# =============================================================================
# SERVICE
# =============================================================================


class SymbolRequest(BaseModel):
    owner_id: str
    graph_id: int


class SymbolResolver(BaseService[SymbolRequest, SymbolResolution]):
    """Graph -> symbol."""

    def __init__(self, store: GraphStore, inference: SymbolInference):
        self.store = store
        self.inference = inference

    @property
    def name(self) -> str:
        return SERVICE_NAME

    async def execute(self, input_data: SymbolRequest) -> SymbolResolution:
        return await self.resolve(input_data.owner_id, input_data.graph_id)

    async def resolve(self, owner_id: str, graph_id: int) -> SymbolResolution:
        nodes = await self.store.list_nodes(owner_id, graph_id)
        main_keyword, all_keywords = select_keywords(nodes)

        response = await self.inference.infer(main_keyword, all_keywords)
        symbol, is_domestic = symbol_from_response(response)

        logger.info(
            f"Resolved graph {graph_id} '{main_keyword}' -> {symbol} "
            f"({'domestic' if is_domestic else 'foreign'})"
        )
        return SymbolResolution(
            graph_id=graph_id,
            main_keyword=main_keyword,
            all_keywords=all_keywords,
            symbol=symbol,
            is_domestic=is_domestic,
        )

    async def health_check(self) -> bool:
        return True


# Singleton instance
_symbol_resolver: Optional[SymbolResolver] = None


def get_symbol_resolver() -> SymbolResolver:
    """Get or create symbol resolver singleton."""
    global _symbol_resolver
    if _symbol_resolver is None:
        from wing.graphs.store import get_graph_store
        from wing.services.llm.symbol_inference import LLMSymbolInference

        _symbol_resolver = SymbolResolver(get_graph_store(), LLMSymbolInference())
    return _symbol_resolver
