from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

ItemKind = Literal[
    "MCQ",
    "TRUE_FALSE",
    "FILL_IN_THE_BLANK",
    "MATCHING",
    "ORDERING",
    "SHORT_ANSWER",
    "ESSAY",
    "NUMERIC_ENTRY",
    "HOTSPOT",
    "DRAG_AND_DROP",
    "SCENARIO_TASK",
]
AnswerMode = Literal["single", "multiple"]
ZoneEvaluation = Literal["set", "ordered"]


@dataclass(frozen=True)
class ScoringResult:
    score: float
    max_score: float
    # score is a placeholder until an external grader reports back
    deferred: bool = False


@dataclass
class ScoringRule:
    """Per-item scoring configuration.

    ``mode`` is kind specific: ``all``/``partial`` (fill-in, matching, hotspot),
    ``all``/``partial_pairs`` (ordering), ``all``/``per_zone``/``per_token``
    (drag-and-drop), ``manual``/``ai_rubric`` (free text).
    """
    mode: str = "all"
    max_selections: Optional[int] = None
    custom_evaluator_id: Optional[str] = None
    max_score: Optional[float] = None
    ai_evaluator_id: Optional[str] = None


# ---- answer-key building blocks ----
@dataclass
class ExactMatcher:
    value: str
    case_sensitive: bool = False
    type: Literal["exact"] = "exact"

@dataclass
class RegexMatcher:
    pattern: str
    flags: Optional[str] = None  # None -> config.REGEX_DEFAULT_FLAGS
    type: Literal["regex"] = "regex"

Matcher = Union[ExactMatcher, RegexMatcher]

@dataclass
class Blank:
    id: str
    acceptable_answers: List[Matcher] = field(default_factory=list)

@dataclass
class MatchingPrompt:
    id: str; correct_target_id: str; text: str = ""

@dataclass
class MatchingTarget:
    id: str; text: str = ""

@dataclass
class OrderingOption:
    id: str; text: str = ""

@dataclass
class NumericValidation:
    mode: Literal["exact", "range"] = "exact"
    value: Optional[float] = None
    tolerance: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None

@dataclass
class NumericUnits:
    label: Optional[str] = None
    symbol: Optional[str] = None
    precision: Optional[int] = None

@dataclass
class HotspotPoint:
    x: float; y: float

@dataclass
class HotspotRegion:
    id: str
    points: List[HotspotPoint] = field(default_factory=list)
    label: Optional[str] = None

@dataclass
class HotspotImage:
    url: str; width: int; height: int
    alt: Optional[str] = None

@dataclass
class DragDropToken:
    id: str; label: str = ""
    category: Optional[str] = None

@dataclass
class DragDropZone:
    id: str
    correct_token_ids: List[str] = field(default_factory=list)
    evaluation: ZoneEvaluation = "set"
    max_tokens: Optional[int] = None
    label: Optional[str] = None
    accepts_token_ids: Optional[List[str]] = None
    accepts_categories: Optional[List[str]] = None

@dataclass
class Rubric:
    keywords: Optional[List[str]] = None
    guidance: Optional[str] = None
    sample_answer: Optional[str] = None
    sections: Optional[List[Dict[str, Any]]] = None


# ---- items: a closed set of variants tagged by ``kind`` ----
@dataclass
class BaseItem:
    id: str
    prompt: str = ""
    tenant_id: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

@dataclass
class ChoiceItem(BaseItem):
    kind: Literal["MCQ", "TRUE_FALSE"] = "MCQ"
    choices: List[str] = field(default_factory=list)
    answer_mode: AnswerMode = "single"
    correct_indexes: List[int] = field(default_factory=list)

@dataclass
class FillBlankItem(BaseItem):
    kind: Literal["FILL_IN_THE_BLANK"] = "FILL_IN_THE_BLANK"
    blanks: List[Blank] = field(default_factory=list)
    scoring: ScoringRule = field(default_factory=ScoringRule)

@dataclass
class MatchingItem(BaseItem):
    kind: Literal["MATCHING"] = "MATCHING"
    prompts: List[MatchingPrompt] = field(default_factory=list)
    targets: List[MatchingTarget] = field(default_factory=list)
    scoring: ScoringRule = field(default_factory=ScoringRule)

@dataclass
class OrderingItem(BaseItem):
    kind: Literal["ORDERING"] = "ORDERING"
    options: List[OrderingOption] = field(default_factory=list)
    correct_order: List[str] = field(default_factory=list)
    scoring: ScoringRule = field(default_factory=ScoringRule)

@dataclass
class ShortAnswerItem(BaseItem):
    kind: Literal["SHORT_ANSWER"] = "SHORT_ANSWER"
    rubric: Optional[Rubric] = None
    scoring: ScoringRule = field(default_factory=lambda: ScoringRule(mode="manual"))

@dataclass
class EssayItem(BaseItem):
    kind: Literal["ESSAY"] = "ESSAY"
    rubric: Optional[Rubric] = None
    length: Optional[Dict[str, int]] = None
    scoring: ScoringRule = field(default_factory=lambda: ScoringRule(mode="manual"))

@dataclass
class NumericEntryItem(BaseItem):
    kind: Literal["NUMERIC_ENTRY"] = "NUMERIC_ENTRY"
    validation: NumericValidation = field(default_factory=NumericValidation)
    units: Optional[NumericUnits] = None

@dataclass
class HotspotItem(BaseItem):
    kind: Literal["HOTSPOT"] = "HOTSPOT"
    hotspots: List[HotspotRegion] = field(default_factory=list)
    image: Optional[HotspotImage] = None
    scoring: ScoringRule = field(default_factory=ScoringRule)

@dataclass
class DragDropItem(BaseItem):
    kind: Literal["DRAG_AND_DROP"] = "DRAG_AND_DROP"
    tokens: List[DragDropToken] = field(default_factory=list)
    zones: List[DragDropZone] = field(default_factory=list)
    scoring: ScoringRule = field(default_factory=ScoringRule)

@dataclass
class ScenarioTaskItem(BaseItem):
    kind: Literal["SCENARIO_TASK"] = "SCENARIO_TASK"
    brief: str = ""
    evaluation: Dict[str, Any] = field(default_factory=lambda: {"mode": "manual"})
    attachments: List[Dict[str, Any]] = field(default_factory=list)
    scoring: ScoringRule = field(default_factory=lambda: ScoringRule(mode="manual"))

Item = Union[
    ChoiceItem,
    FillBlankItem,
    MatchingItem,
    OrderingItem,
    ShortAnswerItem,
    EssayItem,
    NumericEntryItem,
    HotspotItem,
    DragDropItem,
    ScenarioTaskItem,
]


# ---- responses ----
@dataclass
class MatchPair:
    prompt_id: str; target_id: str

@dataclass
class NumericAnswer:
    value: Any
    unit: Optional[str] = None

@dataclass
class DragDropPlacement:
    token_id: str; drop_zone_id: str
    position: Optional[int] = None

@dataclass
class AttemptResponse:
    item_id: str
    answer_indexes: Optional[List[int]] = None
    text_answers: Optional[List[str]] = None
    matching_answers: Optional[List[MatchPair]] = None
    ordering_answer: Optional[List[str]] = None
    essay_answer: Optional[str] = None
    numeric_answer: Optional[NumericAnswer] = None
    hotspot_answers: Optional[List[HotspotPoint]] = None
    drag_drop_answers: Optional[List[DragDropPlacement]] = None
    scenario_answer: Optional[Dict[str, Any]] = None
