"""Pydantic models for the camelCase wire format of items and responses.

Each model converts itself into the plain dataclasses in ``types`` that the
scorers consume.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, TypeAdapter
from pydantic.alias_generators import to_camel

from .normalize import dedupe_indexes, normalize_ordering, normalize_text_answers
from .types import (
    AttemptResponse,
    Blank,
    ChoiceItem,
    DragDropItem,
    DragDropPlacement,
    DragDropToken,
    DragDropZone,
    EssayItem,
    ExactMatcher,
    FillBlankItem,
    HotspotImage,
    HotspotItem,
    HotspotPoint,
    HotspotRegion,
    Item,
    MatchingItem,
    MatchingPrompt,
    MatchingTarget,
    MatchPair,
    NumericAnswer,
    NumericEntryItem,
    NumericUnits,
    NumericValidation,
    OrderingItem,
    OrderingOption,
    RegexMatcher,
    Rubric,
    ScenarioTaskItem,
    ScoringRule,
    ShortAnswerItem,
)

# JSON numbers only: no numeric strings, no booleans
Number = Union[StrictInt, StrictFloat]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- answer-key parts ----
class RuleIn(WireModel):
    mode: Optional[str] = None
    max_selections: Optional[StrictInt] = None
    custom_evaluator_id: Optional[str] = None
    max_score: Optional[Number] = None
    ai_evaluator_id: Optional[str] = None

    def to_rule(self, default_mode: str = "all") -> ScoringRule:
        return ScoringRule(
            mode=self.mode or default_mode,
            max_selections=self.max_selections,
            custom_evaluator_id=self.custom_evaluator_id,
            max_score=self.max_score,
            ai_evaluator_id=self.ai_evaluator_id,
        )


def _rule(rule: Optional[RuleIn], default_mode: str = "all") -> ScoringRule:
    return rule.to_rule(default_mode) if rule is not None else ScoringRule(mode=default_mode)


class ExactIn(WireModel):
    type: Literal["exact"]
    value: str
    case_sensitive: StrictBool = False


class RegexIn(WireModel):
    type: Literal["regex"]
    pattern: str
    flags: Optional[str] = None


MatcherIn = Annotated[Union[ExactIn, RegexIn], Field(discriminator="type")]


def _matcher(m: Union[ExactIn, RegexIn]):
    if isinstance(m, RegexIn):
        return RegexMatcher(pattern=m.pattern, flags=m.flags)
    return ExactMatcher(value=m.value, case_sensitive=m.case_sensitive)


class BlankIn(WireModel):
    id: str
    acceptable_answers: List[MatcherIn] = []


class ChoiceTextIn(WireModel):
    text: str = ""


class PromptIn(WireModel):
    id: str
    correct_target_id: str
    text: str = ""


class OptionIn(WireModel):
    id: str
    text: str = ""


class ValidationIn(WireModel):
    mode: Literal["exact", "range"]
    value: Optional[Number] = None
    tolerance: Optional[Number] = None
    min: Optional[Number] = None
    max: Optional[Number] = None


class UnitsIn(WireModel):
    label: Optional[str] = None
    symbol: Optional[str] = None
    precision: Optional[StrictInt] = None


class PointIn(WireModel):
    x: Number
    y: Number


# a point may also arrive as an [x, y] pair
PointLike = Union[PointIn, Tuple[Number, Number]]


def _point(p: PointLike) -> HotspotPoint:
    if isinstance(p, PointIn):
        return HotspotPoint(x=float(p.x), y=float(p.y))
    return HotspotPoint(x=float(p[0]), y=float(p[1]))


class RegionIn(WireModel):
    id: str
    points: List[PointIn] = []
    label: Optional[str] = None


class ImageIn(WireModel):
    url: str = ""
    width: StrictInt = 0
    height: StrictInt = 0
    alt: Optional[str] = None


class TokenIn(WireModel):
    id: str
    label: str = ""
    category: Optional[str] = None


class ZoneIn(WireModel):
    id: str
    correct_token_ids: List[str] = []
    evaluation: Literal["set", "ordered"] = "set"
    max_tokens: Optional[StrictInt] = Field(default=None, ge=0)
    label: Optional[str] = None
    accepts_token_ids: Optional[List[str]] = None
    accepts_categories: Optional[List[str]] = None


class RubricIn(WireModel):
    keywords: Optional[List[str]] = None
    guidance: Optional[str] = None
    sample_answer: Optional[str] = None
    sections: Optional[List[Dict[str, Any]]] = None

    def to_rubric(self) -> Rubric:
        return Rubric(keywords=self.keywords, guidance=self.guidance, sample_answer=self.sample_answer, sections=self.sections)


# ---- items ----
class ItemIn(WireModel):
    id: str
    prompt: str = ""
    tenant_id: Optional[str] = None
    categories: List[str] = []
    tags: List[str] = []
    metadata: Dict[str, Any] = {}

    def _base(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "tenant_id": self.tenant_id,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "metadata": dict(self.metadata),
        }


class ChoiceItemIn(ItemIn):
    kind: Literal["MCQ", "TRUE_FALSE"]
    choices: List[Union[str, ChoiceTextIn]] = []
    answer_mode: Literal["single", "multiple"] = "single"
    correct_indexes: List[StrictInt]

    def to_item(self) -> ChoiceItem:
        return ChoiceItem(
            **self._base(),
            kind=self.kind,
            choices=[c if isinstance(c, str) else c.text for c in self.choices],
            answer_mode=self.answer_mode,
            correct_indexes=list(self.correct_indexes),
        )


class FillBlankItemIn(ItemIn):
    kind: Literal["FILL_IN_THE_BLANK"]
    blanks: List[BlankIn]
    scoring: Optional[RuleIn] = None

    def to_item(self) -> FillBlankItem:
        blanks = [Blank(id=b.id, acceptable_answers=[_matcher(m) for m in b.acceptable_answers]) for b in self.blanks]
        return FillBlankItem(**self._base(), blanks=blanks, scoring=_rule(self.scoring))


class MatchingItemIn(ItemIn):
    kind: Literal["MATCHING"]
    prompts: List[PromptIn]
    targets: List[OptionIn] = []
    scoring: Optional[RuleIn] = None

    def to_item(self) -> MatchingItem:
        return MatchingItem(
            **self._base(),
            prompts=[MatchingPrompt(id=p.id, correct_target_id=p.correct_target_id, text=p.text) for p in self.prompts],
            targets=[MatchingTarget(id=t.id, text=t.text) for t in self.targets],
            scoring=_rule(self.scoring),
        )


class OrderingItemIn(ItemIn):
    kind: Literal["ORDERING"]
    options: List[OptionIn] = []
    correct_order: List[str]
    scoring: Optional[RuleIn] = None

    def to_item(self) -> OrderingItem:
        return OrderingItem(
            **self._base(),
            options=[OrderingOption(id=o.id, text=o.text) for o in self.options],
            correct_order=list(self.correct_order),
            scoring=_rule(self.scoring),
        )


class ShortAnswerItemIn(ItemIn):
    kind: Literal["SHORT_ANSWER"]
    rubric: Optional[RubricIn] = None
    scoring: Optional[RuleIn] = None

    def to_item(self) -> ShortAnswerItem:
        return ShortAnswerItem(
            **self._base(),
            rubric=self.rubric.to_rubric() if self.rubric else None,
            scoring=_rule(self.scoring, "manual"),
        )


class EssayItemIn(ItemIn):
    kind: Literal["ESSAY"]
    rubric: Optional[RubricIn] = None
    length: Optional[Dict[str, StrictInt]] = None
    scoring: Optional[RuleIn] = None

    def to_item(self) -> EssayItem:
        return EssayItem(
            **self._base(),
            rubric=self.rubric.to_rubric() if self.rubric else None,
            length=self.length,
            scoring=_rule(self.scoring, "manual"),
        )


class NumericItemIn(ItemIn):
    kind: Literal["NUMERIC_ENTRY"]
    validation: ValidationIn
    units: Optional[UnitsIn] = None

    def to_item(self) -> NumericEntryItem:
        v = self.validation
        units = self.units
        return NumericEntryItem(
            **self._base(),
            validation=NumericValidation(mode=v.mode, value=v.value, tolerance=v.tolerance, min=v.min, max=v.max),
            units=NumericUnits(label=units.label, symbol=units.symbol, precision=units.precision) if units else None,
        )


class HotspotItemIn(ItemIn):
    kind: Literal["HOTSPOT"]
    hotspots: List[RegionIn]
    image: Optional[ImageIn] = None
    scoring: Optional[RuleIn] = None

    def to_item(self) -> HotspotItem:
        img = self.image
        return HotspotItem(
            **self._base(),
            hotspots=[HotspotRegion(id=r.id, points=[_point(p) for p in r.points], label=r.label) for r in self.hotspots],
            image=HotspotImage(url=img.url, width=img.width, height=img.height, alt=img.alt) if img else None,
            scoring=_rule(self.scoring),
        )


class DragDropItemIn(ItemIn):
    kind: Literal["DRAG_AND_DROP"]
    tokens: List[TokenIn]
    zones: List[ZoneIn]
    scoring: Optional[RuleIn] = None

    def to_item(self) -> DragDropItem:
        return DragDropItem(
            **self._base(),
            tokens=[DragDropToken(id=t.id, label=t.label, category=t.category) for t in self.tokens],
            zones=[
                DragDropZone(
                    id=z.id,
                    correct_token_ids=list(z.correct_token_ids),
                    evaluation=z.evaluation,
                    max_tokens=z.max_tokens,
                    label=z.label,
                    accepts_token_ids=z.accepts_token_ids,
                    accepts_categories=z.accepts_categories,
                )
                for z in self.zones
            ],
            scoring=_rule(self.scoring),
        )


class ScenarioItemIn(ItemIn):
    kind: Literal["SCENARIO_TASK"]
    brief: str = ""
    evaluation: Optional[Dict[str, Any]] = None
    attachments: List[Dict[str, Any]] = []
    scoring: Optional[RuleIn] = None

    def to_item(self) -> ScenarioTaskItem:
        return ScenarioTaskItem(
            **self._base(),
            brief=self.brief,
            evaluation=dict(self.evaluation or {"mode": "manual"}),
            attachments=list(self.attachments),
            scoring=_rule(self.scoring, "manual"),
        )


WireItem = Annotated[
    Union[
        ChoiceItemIn,
        FillBlankItemIn,
        MatchingItemIn,
        OrderingItemIn,
        ShortAnswerItemIn,
        EssayItemIn,
        NumericItemIn,
        HotspotItemIn,
        DragDropItemIn,
        ScenarioItemIn,
    ],
    Field(discriminator="kind"),
]


# ---- responses ----
class PairIn(WireModel):
    prompt_id: str
    target_id: str


class NumericAnswerIn(WireModel):
    value: Optional[Number] = None
    unit: Optional[str] = None


class PlacementIn(WireModel):
    token_id: str
    drop_zone_id: str
    position: Optional[StrictInt] = None


class ResponseIn(WireModel):
    item_id: str
    answer_index: Optional[StrictInt] = None
    answer_indexes: Optional[List[StrictInt]] = None
    text_answer: Optional[str] = None
    text_answers: Optional[List[str]] = None
    matching_answers: Optional[List[PairIn]] = None
    ordering_answer: Optional[List[str]] = None
    essay_answer: Optional[str] = None
    numeric_answer: Optional[Union[Number, NumericAnswerIn]] = None
    hotspot_answers: Optional[List[PointLike]] = None
    drag_drop_answers: Optional[List[PlacementIn]] = None
    scenario_answer: Optional[Dict[str, Any]] = None

    def to_response(self, item_id: Optional[str] = None) -> AttemptResponse:
        numeric = self.numeric_answer
        if isinstance(numeric, NumericAnswerIn):
            numeric_answer = NumericAnswer(value=numeric.value, unit=numeric.unit)
        elif numeric is not None:
            numeric_answer = NumericAnswer(value=numeric)
        else:
            numeric_answer = None
        return AttemptResponse(
            item_id=self.item_id or item_id or "",
            answer_indexes=dedupe_indexes(self.answer_indexes, self.answer_index),
            text_answers=normalize_text_answers(self.text_answer, self.text_answers),
            matching_answers=[MatchPair(prompt_id=m.prompt_id, target_id=m.target_id) for m in self.matching_answers]
            if self.matching_answers else None,
            ordering_answer=normalize_ordering(self.ordering_answer),
            essay_answer=self.essay_answer,
            numeric_answer=numeric_answer,
            hotspot_answers=[_point(p) for p in self.hotspot_answers] if self.hotspot_answers else None,
            drag_drop_answers=[
                DragDropPlacement(token_id=p.token_id, drop_zone_id=p.drop_zone_id, position=p.position)
                for p in self.drag_drop_answers
            ] if self.drag_drop_answers else None,
            scenario_answer=self.scenario_answer,
        )


class SingleResponseIn(ResponseIn):
    # the item is already known when a single response travels with it
    item_id: Optional[str] = None


ITEM_ADAPTER: TypeAdapter = TypeAdapter(WireItem)


def parse_item(payload: Any) -> Item:
    """Validate one wire item; raises ``pydantic.ValidationError`` (a ``ValueError``)."""

    return ITEM_ADAPTER.validate_python(payload).to_item()


def parse_response(payload: Any) -> AttemptResponse:
    return ResponseIn.model_validate(payload).to_response()


__all__ = [
    "WireItem",
    "ResponseIn",
    "SingleResponseIn",
    "parse_item",
    "parse_response",
]
