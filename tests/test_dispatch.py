from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import get_args

import pytest

from scoring_core import config
from scoring_core.scoring import SUPPORTED_KINDS, score_item, score_items
from scoring_core.types import (
    AttemptResponse,
    DragDropPlacement,
    EssayItem,
    HotspotPoint,
    ItemKind,
    MatchPair,
    NumericAnswer,
    ScenarioTaskItem,
    ScoringResult,
    ScoringRule,
    ShortAnswerItem,
)

from tests.conftest import build_sample_items


def _full_responses() -> dict[str, AttemptResponse]:
    return {
        "mcq-1": AttemptResponse(item_id="mcq-1", answer_indexes=[1]),
        "tf-1": AttemptResponse(item_id="tf-1", answer_indexes=[1]),
        "fb-1": AttemptResponse(item_id="fb-1", text_answers=["SKY"]),
        "match-1": AttemptResponse(item_id="match-1", matching_answers=[MatchPair("p-1", "t-1"), MatchPair("p-2", "t-1")]),
        "order-1": AttemptResponse(item_id="order-1", ordering_answer=["c", "a", "b"]),
        "num-1": AttemptResponse(item_id="num-1", numeric_answer=NumericAnswer(4.05)),
        "hot-1": AttemptResponse(item_id="hot-1", hotspot_answers=[HotspotPoint(0.25, 0.25)]),
        "dd-1": AttemptResponse(item_id="dd-1", drag_drop_answers=[DragDropPlacement("t1", "z1")]),
    }


def test_every_kind_has_a_scorer():
    assert set(SUPPORTED_KINDS) == set(get_args(ItemKind))
    assert len(SUPPORTED_KINDS) == 11


def test_dispatch_routes_by_kind(sample_items):
    responses = _full_responses()
    got = {it.id: score_item(it, responses[it.id]) for it in sample_items}
    assert got == {
        "mcq-1": ScoringResult(1, 1),
        "tf-1": ScoringResult(0, 1),
        "fb-1": ScoringResult(1, 1),
        "match-1": ScoringResult(1, 2),
        "order-1": ScoringResult(1, 3),
        "num-1": ScoringResult(1, 1),
        "hot-1": ScoringResult(1, 1),
        "dd-1": ScoringResult(1, 2),
    }


def test_missing_response_scores_zero_for_every_kind(sample_items):
    for item in sample_items:
        absent = score_item(item, None)
        blank = score_item(item, AttemptResponse(item_id=item.id))
        assert absent.score == 0 and blank.score == 0, item.kind
        assert absent.max_score == blank.max_score


def test_score_never_exceeds_max(sample_items):
    responses = _full_responses()
    for item in sample_items:
        res = score_item(item, responses[item.id])
        assert 0 <= res.score <= res.max_score, item.kind


def test_scoring_is_idempotent_and_thread_safe(sample_items):
    responses = _full_responses()
    baseline = [score_item(it, responses[it.id]) for it in sample_items]

    def run(_):
        return [score_item(it, responses[it.id]) for it in sample_items]

    with ThreadPoolExecutor(max_workers=8) as pool:
        for outcome in pool.map(run, range(32)):
            assert outcome == baseline


def test_max_score_depends_only_on_item(sample_items):
    responses = _full_responses()
    for item in sample_items:
        assert score_item(item, responses[item.id]).max_score == score_item(item, None).max_score


@pytest.mark.parametrize(
    "item, expected_max",
    [
        (ShortAnswerItem(id="sa"), config.SHORT_ANSWER_DEFAULT_MAX),
        (ShortAnswerItem(id="sa", scoring=ScoringRule(mode="ai_rubric", max_score=3)), 3),
        (EssayItem(id="es"), config.ESSAY_DEFAULT_MAX),
        (ScenarioTaskItem(id="sc", scoring=ScoringRule(mode="manual", max_score=25)), 25),
    ],
)
def test_free_text_kinds_are_deferred(item, expected_max):
    res = score_item(item, AttemptResponse(item_id=item.id, text_answers=["long answer"], essay_answer="text"))
    assert res == ScoringResult(0, expected_max, deferred=True)


def test_score_items_matches_responses_by_item_id(sample_items):
    responses = list(_full_responses().values())
    responses.reverse()
    results = score_items(sample_items, responses)
    assert [r.score for r in results] == [1, 0, 1, 1, 1, 1, 1, 1]
    assert score_items(sample_items) == [score_item(it, None) for it in sample_items]


def test_unknown_kind_logs_and_scores_nothing(caplog):
    class Odd:
        id = "odd-1"
        kind = "TWELFTH_KIND"

    with caplog.at_level(logging.WARNING, logger="scoring_core.scoring"):
        assert score_item(Odd(), None) == ScoringResult(0, 0)
    assert "TWELFTH_KIND" in caplog.text


def test_trace_lines_only_when_enabled(sample_items, monkeypatch, caplog):
    item = sample_items[0]
    with caplog.at_level(logging.INFO, logger="scoring_core.scoring"):
        score_item(item, None)
    assert "trace" not in caplog.text

    monkeypatch.setattr(config, "DEBUG_TRACE", True)
    with caplog.at_level(logging.INFO, logger="scoring_core.scoring"):
        score_item(item, AttemptResponse(item_id=item.id, answer_indexes=[1]))
    assert "item_id=mcq-1" in caplog.text
    assert "score=1" in caplog.text
