from __future__ import annotations

import pytest

from scoring_core.types import (
    Blank,
    ChoiceItem,
    DragDropItem,
    DragDropToken,
    DragDropZone,
    ExactMatcher,
    FillBlankItem,
    HotspotItem,
    HotspotPoint,
    HotspotRegion,
    MatchingItem,
    MatchingPrompt,
    MatchingTarget,
    NumericEntryItem,
    NumericValidation,
    OrderingItem,
    OrderingOption,
    RegexMatcher,
    ScoringRule,
)


def square(x0: float, y0: float, size: float) -> list[HotspotPoint]:
    return [
        HotspotPoint(x0, y0),
        HotspotPoint(x0 + size, y0),
        HotspotPoint(x0 + size, y0 + size),
        HotspotPoint(x0, y0 + size),
    ]


def build_sample_items() -> list:
    """One deterministic item per auto-scored kind, used across tests."""

    return [
        ChoiceItem(id="mcq-1", prompt="2+2?", choices=["3", "4"], correct_indexes=[1]),
        ChoiceItem(id="tf-1", kind="TRUE_FALSE", prompt="Sky is blue", choices=["True", "False"], correct_indexes=[0]),
        FillBlankItem(
            id="fb-1",
            prompt="The [blank] is blue",
            blanks=[
                Blank(
                    id="b1",
                    acceptable_answers=[
                        ExactMatcher(value="sky"),
                        RegexMatcher(pattern="^ocean$", flags="i"),
                    ],
                )
            ],
        ),
        MatchingItem(
            id="match-1",
            prompts=[
                MatchingPrompt(id="p-1", correct_target_id="t-1"),
                MatchingPrompt(id="p-2", correct_target_id="t-2"),
            ],
            targets=[MatchingTarget(id="t-1"), MatchingTarget(id="t-2")],
            scoring=ScoringRule(mode="partial"),
        ),
        OrderingItem(
            id="order-1",
            options=[OrderingOption(id=v) for v in ("a", "b", "c")],
            correct_order=["a", "b", "c"],
            scoring=ScoringRule(mode="partial_pairs"),
        ),
        NumericEntryItem(id="num-1", validation=NumericValidation(mode="exact", value=4, tolerance=0.1)),
        HotspotItem(
            id="hot-1",
            hotspots=[HotspotRegion(id="square", points=square(0, 0, 0.5))],
            scoring=ScoringRule(mode="all"),
        ),
        DragDropItem(
            id="dd-1",
            tokens=[DragDropToken(id="t1"), DragDropToken(id="t2")],
            zones=[
                DragDropZone(id="z1", correct_token_ids=["t1"]),
                DragDropZone(id="z2", correct_token_ids=["t2"]),
            ],
            scoring=ScoringRule(mode="per_zone"),
        ),
    ]


@pytest.fixture
def sample_items() -> list:
    return build_sample_items()


WIRE_ITEMS = [
    {
        "id": "mcq-1",
        "tenantId": "t1",
        "kind": "MCQ",
        "prompt": "2+2?",
        "choices": [{"text": "3"}, {"text": "4"}],
        "answerMode": "single",
        "correctIndexes": [1],
    },
    {
        "id": "fb-1",
        "kind": "FILL_IN_THE_BLANK",
        "prompt": "The [blank] is blue",
        "blanks": [
            {
                "id": "b1",
                "acceptableAnswers": [
                    {"type": "exact", "value": "sky", "caseSensitive": False},
                    {"type": "regex", "pattern": "^ocean$"},
                ],
            }
        ],
        "scoring": {"mode": "all"},
    },
    {
        "id": "order-1",
        "kind": "ORDERING",
        "prompt": "Order steps",
        "options": [{"id": "a", "text": "A"}, {"id": "b", "text": "B"}, {"id": "c", "text": "C"}],
        "correctOrder": ["a", "b", "c"],
        "scoring": {"mode": "partial_pairs", "customEvaluatorId": None},
    },
    {
        "id": "num-1",
        "kind": "NUMERIC_ENTRY",
        "prompt": "Pi to two places",
        "validation": {"mode": "exact", "value": 3.14, "tolerance": 0.005},
        "units": {"label": "radians"},
    },
    {
        "id": "hot-1",
        "kind": "HOTSPOT",
        "prompt": "Click the square",
        "image": {"url": "http://example.com/img.png", "width": 100, "height": 100},
        "hotspots": [{"id": "square", "points": [{"x": 0, "y": 0}, {"x": 0.5, "y": 0}, {"x": 0.5, "y": 0.5}, {"x": 0, "y": 0.5}]}],
        "scoring": {"mode": "partial", "maxSelections": 2},
    },
    {
        "id": "dd-1",
        "kind": "DRAG_AND_DROP",
        "prompt": "Sort",
        "tokens": [{"id": "t1", "label": "One"}, {"id": "t2", "label": "Two"}],
        "zones": [{"id": "z1", "correctTokenIds": ["t1", "t2"], "evaluation": "ordered", "maxTokens": 2}],
        "scoring": {"mode": "per_token"},
    },
    {
        "id": "sa-1",
        "kind": "SHORT_ANSWER",
        "prompt": "Explain",
        "rubric": {"keywords": ["photosynthesis"], "sampleAnswer": "Plants...", "guidance": "mention light"},
        "scoring": {"mode": "ai_rubric", "maxScore": 4, "aiEvaluatorId": "grader"},
    },
]
