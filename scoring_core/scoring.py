from __future__ import annotations
import logging
import math
from typing import Callable, Dict, Iterable, List, Optional, Sequence, get_args

from . import config
from .geometry import point_in_polygon
from .text_match import matches_answer
from .types import (
    AttemptResponse,
    ChoiceItem,
    DragDropItem,
    DragDropPlacement,
    DragDropZone,
    EssayItem,
    FillBlankItem,
    HotspotItem,
    HotspotPoint,
    Item,
    ItemKind,
    MatchingItem,
    MatchPair,
    NumericAnswer,
    NumericEntryItem,
    OrderingItem,
    ScenarioTaskItem,
    ScoringResult,
    ShortAnswerItem,
)

log = logging.getLogger(__name__)


def _emit_trace(**values: object) -> None:
    if not config.DEBUG_TRACE:
        return
    ordered = []
    for key in config.TRACE_FIELDS:
        if key in values:
            ordered.append(f"{key}={values[key]}")
    if ordered:
        log.info("trace %s", " ".join(ordered))


def _binary(ok: bool) -> ScoringResult:
    return ScoringResult(score=1 if ok else 0, max_score=1)


def simple_score(correct: int, total: int) -> ScoringResult:
    return ScoringResult(score=correct, max_score=total)


# ---- MCQ / TRUE_FALSE ----
def score_choice(item: ChoiceItem, answer_indexes: Optional[Sequence[int]] = None) -> ScoringResult:
    """Order-insensitive exact set match; single and multiple answer modes share it."""

    answers = sorted(set(answer_indexes or []))
    if not answers:
        return _binary(False)
    expected = sorted(set(item.correct_indexes))
    if item.answer_mode == "single" and len(answers) != 1:
        return _binary(False)
    return _binary(answers == expected)


score_mcq = score_choice
score_true_false = score_choice


# ---- FILL_IN_THE_BLANK ----
def score_fill_blank(item: FillBlankItem, text_answers: Optional[Sequence[str]] = None) -> ScoringResult:
    provided = list(text_answers or [])
    correct = 0
    for idx, blank in enumerate(item.blanks):
        raw = provided[idx] if idx < len(provided) else None
        candidate = raw.strip() if isinstance(raw, str) else ""
        if not candidate:
            continue
        if any(matches_answer(candidate, m) for m in blank.acceptable_answers):
            correct += 1
    if item.scoring.mode == "partial":
        return ScoringResult(score=correct, max_score=len(item.blanks))
    return _binary(bool(item.blanks) and correct == len(item.blanks))


# ---- MATCHING ----
def score_matching(item: MatchingItem, matching_answers: Optional[Sequence[MatchPair]] = None) -> ScoringResult:
    chosen: Dict[str, str] = {}
    for pair in matching_answers or []:
        chosen.setdefault(pair.prompt_id, pair.target_id)
    correct = sum(1 for p in item.prompts if chosen.get(p.id) == p.correct_target_id)
    if item.scoring.mode == "partial":
        return ScoringResult(score=correct, max_score=len(item.prompts))
    if not item.prompts:
        return ScoringResult(score=0, max_score=0)
    return _binary(correct == len(item.prompts))


# ---- ORDERING ----
def _in_order_pairs(expected: Sequence[str], submitted: Sequence[str]) -> int:
    position: Dict[str, int] = {}
    for idx, option_id in enumerate(submitted):
        position.setdefault(option_id, idx)
    credited = 0
    for i, earlier in enumerate(expected):
        for later in expected[i + 1:]:
            a, b = position.get(earlier), position.get(later)
            if a is None or b is None:
                continue
            if a < b:
                credited += 1
    return credited


def score_ordering(item: OrderingItem, ordering_answer: Optional[Sequence[str]] = None) -> ScoringResult:
    expected = list(item.correct_order)
    n = len(expected)
    if item.scoring.mode == "partial_pairs":
        max_score = n * (n - 1) // 2
    else:
        max_score = 1 if n else 0
    if item.scoring.custom_evaluator_id:
        log.debug("ordering item %s deferred to evaluator %s", item.id, item.scoring.custom_evaluator_id)
        return ScoringResult(score=0, max_score=max_score, deferred=True)

    submitted = list(ordering_answer or [])
    if not submitted:
        return ScoringResult(score=0, max_score=max_score)
    if item.scoring.mode == "partial_pairs":
        return ScoringResult(score=_in_order_pairs(expected, submitted), max_score=max_score)
    ok = n > 0 and submitted == expected
    return ScoringResult(score=1 if ok else 0, max_score=max_score)


# ---- NUMERIC_ENTRY ----
def _as_number(value: object) -> Optional[float]:
    if isinstance(value, NumericAnswer):
        value = value.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    v = float(value)
    return v if math.isfinite(v) else None


def score_numeric(item: NumericEntryItem, numeric_answer: object = None) -> ScoringResult:
    v = _as_number(numeric_answer)
    if v is None:
        return _binary(False)
    rule = item.validation
    if rule.mode == "range":
        if rule.min is None or rule.max is None:
            return _binary(False)
        return _binary(rule.min <= v <= rule.max)
    if rule.value is None:
        return _binary(False)
    tolerance = rule.tolerance if rule.tolerance is not None else config.NUMERIC_DEFAULT_TOLERANCE
    return _binary(abs(v - rule.value) <= tolerance)


# ---- HOTSPOT ----
def selection_budget(item: HotspotItem) -> int:
    total = len(item.hotspots)
    cap = item.scoring.max_selections
    return min(total, max(1, cap if cap is not None else total))


def score_hotspot(item: HotspotItem, hotspot_answers: Optional[Sequence[HotspotPoint]] = None) -> ScoringResult:
    if not item.hotspots:
        return ScoringResult(score=0, max_score=0)
    budget = selection_budget(item)
    matched: set[str] = set()
    # selections past the budget are ignored, not penalised
    for point in list(hotspot_answers or [])[:budget]:
        region = next((r for r in item.hotspots if point_in_polygon(point, r.points)), None)
        if region is not None:
            matched.add(region.id)
    if item.scoring.mode == "partial":
        return ScoringResult(score=len(matched), max_score=budget)
    return _binary(all(r.id in matched for r in item.hotspots))


# ---- DRAG_AND_DROP ----
def _zone_tokens(zone: DragDropZone, placed: List[DragDropPlacement]) -> List[str]:
    if zone.evaluation == "ordered":
        placed = sorted(placed, key=lambda p: (p.position is None, p.position or 0))
    if zone.max_tokens is not None:
        placed = placed[: zone.max_tokens]
    return [p.token_id for p in placed]


def _score_zone(zone: DragDropZone, placed: List[DragDropPlacement]) -> tuple[bool, int]:
    """Return ``(zone_correct, per_token_credit)``."""

    tokens = _zone_tokens(zone, placed)
    expected = list(zone.correct_token_ids)
    if zone.evaluation == "ordered":
        credit = sum(1 for idx, tok in enumerate(expected) if idx < len(tokens) and tokens[idx] == tok)
        return tokens == expected, credit
    submitted = set(tokens)
    wanted = set(expected)
    return submitted == wanted, len(wanted & submitted)


def score_drag_drop(item: DragDropItem, drag_drop_answers: Optional[Sequence[DragDropPlacement]] = None) -> ScoringResult:
    zones = item.zones
    if not zones:
        return ScoringResult(score=0, max_score=0)
    mode = item.scoring.mode
    if mode == "per_zone":
        max_score = len(zones)
    elif mode == "per_token":
        max_score = sum(len(z.correct_token_ids) for z in zones)
    else:
        max_score = 1

    zone_ids = {z.id for z in zones}
    token_ids = {t.id for t in item.tokens}
    by_zone: Dict[str, List[DragDropPlacement]] = {zid: [] for zid in zone_ids}
    for placement in drag_drop_answers or []:
        if placement.drop_zone_id in zone_ids and placement.token_id in token_ids:
            by_zone[placement.drop_zone_id].append(placement)
    if not any(by_zone.values()):
        return ScoringResult(score=0, max_score=max_score)

    outcomes = [_score_zone(z, by_zone[z.id]) for z in zones]
    if mode == "per_zone":
        score = sum(1 for ok, _ in outcomes if ok)
    elif mode == "per_token":
        score = sum(credit for _, credit in outcomes)
    else:
        score = 1 if all(ok for ok, _ in outcomes) else 0
    return ScoringResult(score=score, max_score=max_score)


# ---- free text: graded outside the engine ----
def _deferred(item: Item, default_max: float) -> ScoringResult:
    rule = getattr(item, "scoring", None)
    max_score = getattr(rule, "max_score", None)
    if max_score is None:
        max_score = default_max
    return ScoringResult(score=0, max_score=max(0.0, float(max_score)), deferred=True)


def score_short_answer(item: ShortAnswerItem, text_answers: object = None) -> ScoringResult:
    return _deferred(item, config.SHORT_ANSWER_DEFAULT_MAX)


def score_essay(item: EssayItem, essay_answer: object = None) -> ScoringResult:
    return _deferred(item, config.ESSAY_DEFAULT_MAX)


def score_scenario(item: ScenarioTaskItem, scenario_answer: object = None) -> ScoringResult:
    return _deferred(item, config.SCENARIO_DEFAULT_MAX)


# ---- dispatch ----
_Scorer = Callable[[Item, Optional[AttemptResponse]], ScoringResult]


def _field(name: str) -> Callable[[Optional[AttemptResponse]], object]:
    return lambda resp: getattr(resp, name, None) if resp is not None else None


_SCORERS: Dict[str, _Scorer] = {
    "MCQ": lambda it, r: score_choice(it, _field("answer_indexes")(r)),
    "TRUE_FALSE": lambda it, r: score_choice(it, _field("answer_indexes")(r)),
    "FILL_IN_THE_BLANK": lambda it, r: score_fill_blank(it, _field("text_answers")(r)),
    "MATCHING": lambda it, r: score_matching(it, _field("matching_answers")(r)),
    "ORDERING": lambda it, r: score_ordering(it, _field("ordering_answer")(r)),
    "SHORT_ANSWER": lambda it, r: score_short_answer(it, _field("text_answers")(r)),
    "ESSAY": lambda it, r: score_essay(it, _field("essay_answer")(r)),
    "NUMERIC_ENTRY": lambda it, r: score_numeric(it, _field("numeric_answer")(r)),
    "HOTSPOT": lambda it, r: score_hotspot(it, _field("hotspot_answers")(r)),
    "DRAG_AND_DROP": lambda it, r: score_drag_drop(it, _field("drag_drop_answers")(r)),
    "SCENARIO_TASK": lambda it, r: score_scenario(it, _field("scenario_answer")(r)),
}

_missing = set(get_args(ItemKind)) - set(_SCORERS)
if _missing:
    raise RuntimeError(f"no scorer registered for item kinds: {sorted(_missing)}")

SUPPORTED_KINDS: tuple[str, ...] = tuple(get_args(ItemKind))


def score_item(item: Item, response: Optional[AttemptResponse] = None) -> ScoringResult:
    """Score one item against one response (``None`` means unanswered)."""

    kind = str(getattr(item, "kind", ""))
    scorer = _SCORERS.get(kind)
    if scorer is None:
        log.warning("no scorer for item %s kind=%r", getattr(item, "id", "?"), kind)
        return ScoringResult(score=0, max_score=0)
    result = scorer(item, response)
    _emit_trace(
        item_id=item.id,
        kind=kind,
        mode=getattr(getattr(item, "scoring", None), "mode", getattr(item, "answer_mode", "")),
        score=result.score,
        max_score=result.max_score,
        deferred=result.deferred,
    )
    return result


def score_items(items: Iterable[Item], responses: Iterable[AttemptResponse] = ()) -> List[ScoringResult]:
    """One result per item, in item order. Totals are the caller's business."""

    by_item: Dict[str, AttemptResponse] = {}
    for resp in responses:
        by_item.setdefault(resp.item_id, resp)
    return [score_item(it, by_item.get(it.id)) for it in items]


__all__ = [
    "SUPPORTED_KINDS",
    "score_choice",
    "score_mcq",
    "score_true_false",
    "score_fill_blank",
    "score_matching",
    "score_ordering",
    "score_numeric",
    "score_hotspot",
    "score_drag_drop",
    "score_short_answer",
    "score_essay",
    "score_scenario",
    "score_item",
    "score_items",
    "selection_budget",
    "simple_score",
]
