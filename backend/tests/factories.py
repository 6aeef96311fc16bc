"""Test data builders."""
from datetime import date, timedelta

from wing.schemas.graph import GraphEdge, GraphNode, NewsArticle, NodeKind
from wing.schemas.market import Candle


def make_candles(closes, start: date = date(2024, 1, 1)) -> list[Candle]:
    """One candle per consecutive day with open/high/low pinned to the close."""
    return [
        Candle(
            date=start + timedelta(days=i),
            open=close,
            high=close,
            low=close,
            close=close,
            volume=1000,
        )
        for i, close in enumerate(closes)
    ]


def node(name: str, weight: float = 1.0, main: bool = False) -> GraphNode:
    return GraphNode(name=name, weight=weight, kind=NodeKind.MAIN if main else NodeKind.SUB)


def edge(a: str, b: str, label: str = "positive", score: float = 0.8) -> GraphEdge:
    return GraphEdge(start_point=a, end_point=b, sentiment_label=label, sentiment_score=score)


def articles(a: str, b: str, count: int, prefix: str = "") -> list[NewsArticle]:
    return [
        NewsArticle(
            start_point=a,
            end_point=b,
            link=f"https://news.example.com/{prefix}{a}-{b}/{i}",
            title=f"{a} {b} #{i}",
        )
        for i in range(count)
    ]
