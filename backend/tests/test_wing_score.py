"""
Tests for wing.services.scoring

compute_wing_score is pure; WingScoreService is exercised against a
real in-memory store.
"""
import pytest

from factories import articles, edge, node
from wing.schemas.graph import edge_key
from wing.services.base import GraphNotFoundError
from wing.services.scoring import (
    WingScoreParameters,
    WingScoreRequest,
    WingScoreService,
    compute_wing_score,
)
from wing.services.scoring.wing_score import edge_magnitude, graph_weight, label_sign, round_half_up


# ── Helpers ───────────────────────────────────────────────────────────────────

def _score(nodes, edges, counts, total, params=None) -> int:
    return compute_wing_score(nodes, edges, counts, total, params).wing_score


# ── Worked examples ───────────────────────────────────────────────────────────

def test_symmetric_evidence_cancels():
    nodes = [node("a"), node("b")]
    edges = [edge("a", "b", "positive", 0.8), edge("a", "c", "negative", 0.8)]
    counts = {edge_key("a", "b"): 10, edge_key("a", "c"): 10}

    assert _score(nodes, edges, counts, 20) == 0


def test_thin_evidence_decays_toward_neutral():
    result = compute_wing_score(
        [node("a")], [edge("a", "b", "positive", 1.0)], {edge_key("a", "b"): 5}, 5
    )

    assert result.base_score == 1.0
    assert result.graph_weight == 1.0
    assert result.volume_factor == pytest.approx(0.0025)
    assert result.confidence == pytest.approx(0.152125)
    assert result.wing_score == 15


# ── Degenerate inputs ─────────────────────────────────────────────────────────

def test_no_edges_is_neutral():
    assert _score([node("a")], [], {}, 10) == 0


def test_no_articles_is_neutral():
    assert _score([node("a")], [edge("a", "b")], {edge_key("a", "b"): 0}, 0) == 0


def test_neutral_labels_are_excluded():
    nodes = [node("a"), node("b")]
    counts = {edge_key("a", "b"): 50, edge_key("a", "c"): 50}
    with_neutral = [edge("a", "b", "positive", 0.5), edge("a", "c", "neutral", 0.9)]
    with_other = [edge("a", "b", "positive", 0.5), edge("a", "c", "mixed", 0.9)]

    assert _score(nodes, with_neutral, counts, 100) == _score(nodes, with_other, counts, 100)
    assert compute_wing_score(nodes, with_neutral, counts, 100).counted_edges == 1


def test_edge_lookup_ignores_orientation():
    counts = {edge_key("a", "b"): 100}

    forward = _score([node("a")], [edge("a", "b")], counts, 100)
    backward = _score([node("a")], [edge("b", "a")], counts, 100)

    assert forward == backward != 0


# ── Properties ────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("label", ["positive", "negative"])
@pytest.mark.parametrize("total", [1, 10, 100, 10_000])
@pytest.mark.parametrize("score", [0.0, 0.3, 1.0, 5.0, -2.0])
def test_score_is_bounded(label, total, score):
    result = _score([node("a")], [edge("a", "b", label, score)], {edge_key("a", "b"): total}, total)
    assert -100 <= result <= 100


def test_more_evidence_never_lowers_positive_score():
    nodes = [node("a"), node("b")]
    edges = [edge("a", "b", "positive", 0.6)]

    scores = [_score(nodes, edges, {edge_key("a", "b"): n}, n) for n in (1, 10, 50, 100, 200, 500)]

    assert scores == sorted(scores)
    assert scores[-1] > scores[0]


def test_sign_follows_label():
    counts = {edge_key("a", "b"): 100}
    assert _score([node("a")], [edge("a", "b", "positive")], counts, 100) > 0
    assert _score([node("a")], [edge("a", "b", "negative")], counts, 100) < 0


def test_parameters_are_configurable():
    counts = {edge_key("a", "b"): 5}
    floor_only = WingScoreParameters(min_confidence=1.0)

    assert _score([node("a")], [edge("a", "b", "positive", 1.0)], counts, 5, floor_only) == 100


# ── Helpers under test ────────────────────────────────────────────────────────

def test_label_sign_normalizes_case_and_whitespace():
    assert label_sign(" Positive ") == 1
    assert label_sign("NEGATIVE") == -1
    assert label_sign("neutral") == 0
    assert label_sign(None) == 0


def test_edge_magnitude():
    assert edge_magnitude(0.4) == 0.4
    assert edge_magnitude(-0.4) == 0.4
    assert edge_magnitude(3.0) == 1.0
    assert edge_magnitude(0) == 1.0
    assert edge_magnitude(None) == 1.0
    assert edge_magnitude(float("nan")) == 1.0


def test_graph_weight_normalizes_by_heaviest_node():
    assert graph_weight([2.0, 1.0]) == pytest.approx(0.75)
    assert graph_weight([]) == 0.5
    assert graph_weight([0.0, 0.0]) == 0.5


# ── Service ───────────────────────────────────────────────────────────────────

async def test_service_scores_saved_graph(store):
    saved = await store.save_graph(
        "owner-1",
        [node("a", main=True), node("b")],
        [edge("a", "b", "positive", 0.8), edge("b", "c", "negative", 0.8)],
        articles("a", "b", 10) + articles("c", "b", 10),
    )
    service = WingScoreService(store)

    result = await service.execute(WingScoreRequest(owner_id="owner-1", graph_id=saved.graph_id))

    assert result.graph_id == saved.graph_id
    assert result.wing_score == 0


async def test_service_rejects_foreign_graph(store):
    saved = await store.save_graph("owner-1", [node("a", main=True)])
    service = WingScoreService(store)

    with pytest.raises(GraphNotFoundError):
        await service.breakdown("owner-2", saved.graph_id)


@pytest.mark.parametrize(
    "value, expected",
    [(12.5, 13), (13.5, 14), (-12.5, -12), (-12.51, -13), (0.49, 0), (100.0, 100), (-100.0, -100)],
)
def test_final_score_rounds_halves_up(value, expected):
    assert round_half_up(value) == expected
