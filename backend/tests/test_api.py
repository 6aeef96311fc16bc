"""
HTTP API tests

Routes run through FastAPI's TestClient; every service dependency is
overridden with an AsyncMock-backed fake.
"""
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from wing.graphs import get_graph_store
from wing.main import app
from wing.schemas.graph import (
    GraphSummary,
    SubkeywordSuggestion,
    NewsArticle,
    NewsPage,
    SaveGraphResult,
    SymbolResolution,
    WingScoreResult,
)
from wing.schemas.market import RecommendationSummary, RsiPoint
from wing.services.base import (
    ExternalAPIError,
    GraphNotFoundError,
    InsufficientHistoryError,
    NoDataError,
    ResolutionFailedError,
)
from wing.services.keywords import KeywordSuggester, get_keyword_suggester
from wing.services.news import ArticleBody, get_article_enricher
from wing.services.router import get_indicator_router
from wing.services.scoring import get_wing_score_service
from wing.services.symbols import get_symbol_resolver

HEADERS = {"X-User-Id": "owner-1"}


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def fakes():
    store = MagicMock()
    scorer = MagicMock()
    resolver = MagicMock()
    indicator_router = MagicMock()
    enricher = MagicMock()
    suggester = MagicMock()

    app.dependency_overrides[get_graph_store] = lambda: store
    app.dependency_overrides[get_wing_score_service] = lambda: scorer
    app.dependency_overrides[get_symbol_resolver] = lambda: resolver
    app.dependency_overrides[get_indicator_router] = lambda: indicator_router
    app.dependency_overrides[get_article_enricher] = lambda: enricher
    app.dependency_overrides[get_keyword_suggester] = lambda: suggester
    yield {
        "store": store,
        "scorer": scorer,
        "resolver": resolver,
        "router": indicator_router,
        "enricher": enricher,
        "suggester": suggester,
    }
    app.dependency_overrides.clear()


@pytest.fixture
def client(fakes):
    return TestClient(app)


# ── Health ────────────────────────────────────────────────────────────────────

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


# ── Graphs ────────────────────────────────────────────────────────────────────

def test_owner_header_is_required(client, fakes):
    resp = client.get("/api/v1/graphs")

    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidArgumentError"
    fakes["store"].list_graphs.assert_not_called()


def test_list_graphs_uses_camel_case(client, fakes):
    fakes["store"].list_graphs = AsyncMock(
        return_value=[GraphSummary(id=3, name="Tesla", created_at=datetime(2024, 3, 1, 9, 0))]
    )

    resp = client.get("/api/v1/graphs", headers=HEADERS)

    assert resp.status_code == 200
    assert resp.json() == [{"id": 3, "name": "Tesla", "createdAt": "2024-03-01T09:00:00"}]
    fakes["store"].list_graphs.assert_awaited_once_with("owner-1")


def test_save_graph(client, fakes):
    fakes["store"].save_graph = AsyncMock(
        return_value=SaveGraphResult(graph_id=7, saved_nodes=2, saved_edges=1, saved_news=1)
    )
    body = {
        "nodes": [{"name": "Tesla", "weight": 1.0, "kind": "MAIN"}, {"name": "EV", "weight": 0.5}],
        "edges": [{"startPoint": "Tesla", "endPoint": "EV", "sentiment_label": "positive", "sentiment_score": 0.7}],
        "articles": [{"startPoint": "Tesla", "endPoint": "EV", "link": "https://n.test/1", "pubDate": "2024-03-01T00:00:00"}],
    }

    resp = client.post("/api/v1/graphs", json=body, headers=HEADERS)

    assert resp.status_code == 201
    assert resp.json() == {"graphId": 7, "savedNodes": 2, "savedEdges": 1, "savedNews": 1}
    args = fakes["store"].save_graph.await_args.args
    assert args[0] == "owner-1"
    assert args[2][0].start_point == "Tesla"


def test_save_graph_without_nodes_is_rejected(client):
    resp = client.post("/api/v1/graphs", json={"nodes": []}, headers=HEADERS)
    assert resp.status_code == 422


def test_wing_score(client, fakes):
    fakes["scorer"].execute = AsyncMock(return_value=WingScoreResult(graph_id=7, wing_score=15))

    resp = client.get("/api/v1/graphs/7/wing-score", headers=HEADERS)

    assert resp.json() == {"graphId": 7, "wingScore": 15}
    request = fakes["scorer"].execute.await_args.args[0]
    assert (request.owner_id, request.graph_id) == ("owner-1", 7)


def test_unknown_graph_is_404(client, fakes):
    fakes["store"].list_nodes = AsyncMock(
        side_effect=GraphNotFoundError("GraphStore", "Graph 9 not found", {"graph_id": 9})
    )

    resp = client.get("/api/v1/graphs/9/nodes", headers=HEADERS)

    assert resp.status_code == 404
    assert resp.json() == {
        "error": "GraphNotFoundError",
        "message": "Graph 9 not found",
        "details": {"graph_id": 9},
    }


def test_news_by_edge_passes_query(client, fakes):
    fakes["store"].list_news_by_edge = AsyncMock(
        return_value=NewsPage(
            items=[NewsArticle(id=1, start_point="EV", end_point="Tesla", link="https://n.test/1")],
            next_cursor=1,
            has_more=True,
        )
    )

    resp = client.get(
        "/api/v1/graphs/7/news/by-edge",
        params={"startPoint": "Tesla", "endPoint": "EV", "take": 1},
        headers=HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["hasMore"] is True
    assert resp.json()["nextCursor"] == 1
    fakes["store"].list_news_by_edge.assert_awaited_once_with("owner-1", 7, "Tesla", "EV", 1, None)


def test_rename_and_delete(client, fakes):
    fakes["store"].rename_graph = AsyncMock(
        return_value=GraphSummary(id=7, name="EV cycle", created_at=datetime(2024, 3, 1))
    )
    fakes["store"].delete_graph = AsyncMock(
        return_value={"graphId": 7, "deletedNews": 3, "deletedEdges": 1, "deletedNodes": 2}
    )

    renamed = client.patch("/api/v1/graphs/7", json={"name": "EV cycle"}, headers=HEADERS)
    deleted = client.delete("/api/v1/graphs/7", headers=HEADERS)

    assert renamed.json()["name"] == "EV cycle"
    assert deleted.json()["deletedNews"] == 3


def test_top_keywords_route_is_not_shadowed(client, fakes):
    fakes["store"].top_keywords = AsyncMock(return_value=[{"name": "AI", "count": 4}])

    resp = client.get("/api/v1/graphs/top-keywords", params={"limit": 3})

    assert resp.json() == [{"name": "AI", "count": 4}]
    fakes["store"].top_keywords.assert_awaited_once_with(3)


# ── Analysis ──────────────────────────────────────────────────────────────────

def test_resolve_symbol(client, fakes):
    fakes["resolver"].resolve = AsyncMock(
        return_value=SymbolResolution(
            graph_id=7,
            main_keyword="Samsung",
            all_keywords=["Samsung", "HBM"],
            symbol="005930",
            is_domestic=True,
        )
    )

    resp = client.get("/api/v1/analysis/graphs/7/symbol", headers=HEADERS)

    assert resp.json() == {
        "graphId": 7,
        "mainKeyword": "Samsung",
        "allKeywords": ["Samsung", "HBM"],
        "symbol": "005930",
        "isDomestic": True,
    }


@pytest.mark.parametrize("flag, expected", [("true", True), ("false", False), ("True", False), (None, False)])
def test_is_domestic_only_for_literal_true(client, fakes, flag, expected):
    fakes["router"].rsi = AsyncMock(return_value=[RsiPoint(date="2024-03-20", rsi=55.5)])
    params = {"symbol": "005930", "period": 14}
    if flag is not None:
        params["isDomestic"] = flag

    resp = client.get("/api/v1/analysis/rsi", params=params)

    assert resp.json() == [{"date": "2024-03-20", "rsi": 55.5}]
    fakes["router"].rsi.assert_awaited_once_with("005930", expected, 14)


def test_recommendation_can_be_null(client, fakes):
    fakes["router"].recommendation = AsyncMock(return_value=None)

    resp = client.get("/api/v1/analysis/recommendation", params={"symbol": "NVDA"})

    assert resp.status_code == 200
    assert resp.json() is None


def test_recommendation_uses_camel_case(client, fakes):
    fakes["router"].recommendation = AsyncMock(
        return_value=RecommendationSummary(symbol="NVDA", period="2024-03-01", buy=3, strong_buy=2)
    )

    resp = client.get("/api/v1/analysis/recommendation", params={"symbol": "NVDA"})

    assert resp.json()["strongBuy"] == 2


@pytest.mark.parametrize(
    "error, status",
    [
        (InsufficientHistoryError("IndicatorEngine", required=14, available=9), 422),
        (NoDataError("IndicatorRouter", "No RSI data for NVDA"), 404),
        (ExternalAPIError("AlphaVantage", "rate limited"), 502),
        (ResolutionFailedError("SymbolResolver", "no symbol"), 502),
    ],
)
def test_service_errors_map_to_status(client, fakes, error, status):
    fakes["router"].momentum = AsyncMock(side_effect=error)

    resp = client.get("/api/v1/analysis/momentum", params={"symbol": "NVDA"})

    assert resp.status_code == status
    assert resp.json()["error"] == type(error).__name__


def test_insufficient_history_reports_counts(client, fakes):
    fakes["router"].rsi = AsyncMock(
        side_effect=InsufficientHistoryError("IndicatorEngine", required=14, available=9)
    )

    resp = client.get("/api/v1/analysis/rsi", params={"symbol": "005930", "isDomestic": "true"})

    assert resp.json()["details"] == {"required": 14, "available": 9}


# ── News enrichment ───────────────────────────────────────────────────────────

def test_enrich_returns_bodies(client, fakes):
    fakes["enricher"].enrich = AsyncMock(
        return_value=[ArticleBody(link="https://n.test/1", title="t", description="body")]
    )

    resp = client.post(
        "/api/v1/news/enrich",
        json={"items": [{"link": "https://n.test/1", "title": "t"}, {"link": "https://n.test/2"}]},
    )

    data = resp.json()
    assert (data["requested"], data["enriched"]) == (2, 1)
    assert data["items"][0]["description"] == "body"
    items, = fakes["enricher"].enrich.await_args.args
    assert [i.link for i in items] == ["https://n.test/1", "https://n.test/2"]


# ── Keywords ──────────────────────────────────────────────────────────────────

def test_suggest_subkeywords(client, fakes):
    fakes["suggester"].suggest = AsyncMock(
        return_value=SubkeywordSuggestion(main_keyword="엔비디아", sub_keywords=["젠슨황", "HBM"])
    )

    resp = client.post("/api/v1/keywords/subkeywords", json={"mainKeyword": "엔비디아", "count": 2})

    assert resp.status_code == 201
    assert resp.json() == {"mainKeyword": "엔비디아", "subKeywords": ["젠슨황", "HBM"]}
    fakes["suggester"].suggest.assert_awaited_once_with("엔비디아", 2)


def test_suggest_subkeywords_default_count(client, fakes):
    fakes["suggester"].suggest = AsyncMock(
        return_value=SubkeywordSuggestion(main_keyword="AI", sub_keywords=[])
    )

    client.post("/api/v1/keywords/subkeywords", json={"mainKeyword": "AI"})

    fakes["suggester"].suggest.assert_awaited_once_with("AI", 8)


def test_suggest_subkeywords_blank_keyword_is_400(client):
    model = MagicMock()
    model.generate = AsyncMock()
    app.dependency_overrides[get_keyword_suggester] = lambda: KeywordSuggester(model)

    resp = client.post("/api/v1/keywords/subkeywords", json={"mainKeyword": " ", "count": 3})

    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidArgumentError"
    model.generate.assert_not_awaited()
