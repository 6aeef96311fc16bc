"""
WING-Score Calculation

Reduces a sentiment-labelled keyword graph to one integer in [-100, 100].

    sum        = Σ sign(label) * min(1, |score|) * articles(e) / total
    base       = clamp(sum * edge_scale, -1, 1)
    graph_w    = mean(node_weight / max_node_weight)           (0.5 if undefined)
    volume     = min(1, total / max(1, nodes * news_per_node)) ** volume_exponent
    confidence = min_confidence + (1 - min_confidence) * graph_w * volume
    wing       = round(clamp(base * confidence, -1, 1) * 100)

Neutral or unrecognised labels and edges without articles are skipped.
Thin evidence shrinks the score toward 0 but never below the confidence floor.
"""

import math
from dataclasses import dataclass, asdict
from typing import Iterable, Mapping, Optional, Sequence

from wing.schemas.graph import edge_key

LABEL_SIGNS = {
    "positive": 1,
    "negative": -1,
}


@dataclass(frozen=True)
class WingScoreParameters:
    """Tunable constants of the score."""

    edge_scale: float = 2.5
    volume_exponent: float = 2.0
    min_confidence: float = 0.15
    news_per_node: int = 100

    @classmethod
    def from_settings(cls, settings) -> "WingScoreParameters":
        return cls(
            edge_scale=settings.wing_edge_scale,
            volume_exponent=settings.wing_volume_exponent,
            min_confidence=settings.wing_min_confidence,
            news_per_node=settings.wing_news_per_node,
        )


@dataclass
class WingScoreBreakdown:
    """Intermediate terms, kept for logging and diagnostics."""

    raw_sum: float
    base_score: float
    graph_weight: float
    volume_factor: float
    confidence: float
    wing_score: int
    total_articles: int
    counted_edges: int

    def to_dict(self) -> dict:
        return asdict(self)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Nearest integer, halves toward +inf (12.5 -> 13, -12.5 -> -12)."""
    return math.floor(value + 0.5)


def label_sign(label: Optional[str]) -> int:
    """+1 / -1 for positive / negative, 0 for anything else."""
    if not label:
        return 0
    return LABEL_SIGNS.get(label.strip().lower(), 0)


def edge_magnitude(score: Optional[float]) -> float:
    """Score gives strength, clamped to 1. Zero or non-finite means full strength."""
    if score is None or not math.isfinite(score) or score == 0:
        return 1.0
    return min(1.0, abs(score))


def graph_weight(node_weights: Iterable[float]) -> float:
    """Mean of node weights normalised by the heaviest node."""
    weights = [w for w in node_weights if w is not None and math.isfinite(w)]
    if not weights:
        return 0.5
    max_weight = max(weights)
    if max_weight <= 0:
        return 0.5
    normalized = [_clamp(w / max_weight, 0.0, 1.0) for w in weights]
    return sum(normalized) / len(normalized)


def compute_wing_score(
    nodes: Sequence,
    edges: Sequence,
    article_counts: Mapping[tuple[str, str], int],
    total_articles: int,
    params: Optional[WingScoreParameters] = None,
) -> WingScoreBreakdown:
    """
    Compute the WING-Score of one graph.

    Args:
        nodes: objects with a `weight` attribute
        edges: objects with `start_point`, `end_point`, `sentiment_label`
            and `sentiment_score` attributes
        article_counts: articles per unordered pair, keyed by `edge_key`
        total_articles: graph-wide article count
        params: constants, defaults when omitted
    """
    params = params or WingScoreParameters()

    if not edges or total_articles <= 0:
        return WingScoreBreakdown(
            raw_sum=0.0,
            base_score=0.0,
            graph_weight=0.0,
            volume_factor=0.0,
            confidence=0.0,
            wing_score=0,
            total_articles=max(total_articles, 0),
            counted_edges=0,
        )

    raw_sum = 0.0
    counted = 0
    for edge in edges:
        sign = label_sign(edge.sentiment_label)
        if sign == 0:
            continue
        count = article_counts.get(edge_key(edge.start_point, edge.end_point), 0)
        if count <= 0:
            continue
        raw_sum += sign * edge_magnitude(edge.sentiment_score) * (count / total_articles)
        counted += 1

    base_score = _clamp(raw_sum * params.edge_scale, -1.0, 1.0)

    g_weight = graph_weight(node.weight for node in nodes)

    max_news = max(1, len(nodes) * params.news_per_node)
    volume_norm = min(1.0, total_articles / max_news)
    volume_factor = volume_norm ** params.volume_exponent

    reliability = g_weight * volume_factor
    confidence = params.min_confidence + (1 - params.min_confidence) * reliability

    wing = round_half_up(_clamp(base_score * confidence, -1.0, 1.0) * 100)

    return WingScoreBreakdown(
        raw_sum=raw_sum,
        base_score=base_score,
        graph_weight=g_weight,
        volume_factor=volume_factor,
        confidence=confidence,
        wing_score=int(wing),
        total_articles=total_articles,
        counted_edges=counted,
    )
