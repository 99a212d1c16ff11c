from __future__ import annotations

import json

import scoring_core.audit_items as audit_items_mod
from scoring_core import config
from scoring_core.types import (
    Blank,
    ChoiceItem,
    DragDropItem,
    DragDropToken,
    DragDropZone,
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
    FillBlankItem,
    ScoringRule,
)


def _broken_items() -> list:
    return [
        ChoiceItem(id="c1", choices=["a", "b"], correct_indexes=[0, 5]),
        ChoiceItem(id="c2", kind="TRUE_FALSE", choices=["yes", "no", "maybe"], correct_indexes=[0]),
        FillBlankItem(id="f1", blanks=[Blank(id="b1", acceptable_answers=[RegexMatcher(pattern="(oops")]), Blank(id="b2")]),
        MatchingItem(id="m1", prompts=[MatchingPrompt(id="p1", correct_target_id="zz")], targets=[MatchingTarget(id="t1")]),
        OrderingItem(id="o1", options=[OrderingOption(id="a")], correct_order=["a", "a", "q"]),
        NumericEntryItem(id="n1", validation=NumericValidation(mode="range", min=5, max=1)),
        HotspotItem(
            id="h1",
            hotspots=[
                HotspotRegion(id="line", points=[HotspotPoint(0, 0), HotspotPoint(1.2, 1)]),
                HotspotRegion(id="ok", points=[HotspotPoint(0, 0), HotspotPoint(1, 0), HotspotPoint(1, 1)]),
            ],
            scoring=ScoringRule(mode="all", max_selections=1),
        ),
        DragDropItem(
            id="d1",
            tokens=[DragDropToken(id="t1")],
            zones=[
                DragDropZone(id="z1", correct_token_ids=["t1", "t9"], max_tokens=1),
                DragDropZone(id="z1"),
            ],
        ),
    ]


def test_clean_sample_bank_has_no_warnings(sample_items):
    summary = audit_items_mod.audit_items(sample_items)
    assert summary["warnings"] == []
    assert summary["coverage"]["MCQ"] == 1
    assert summary["coverage"]["ESSAY"] == 0
    assert summary["total"] == len(sample_items)


def test_audit_flags_broken_answer_keys():
    summary = audit_items_mod.audit_items(_broken_items())
    joined = "\n".join(summary["warnings"])
    for fragment in (
        "c1: correct index out of range [5]",
        "c1: single-answer item lists 2 correct indexes",
        "c2: TRUE_FALSE has 3 choices",
        "f1/b1: regex '(oops'",
        "f1/b2: no acceptable answers",
        "m1/p1: correct target 'zz'",
        "o1: correct order repeats an option",
        "o1: correct order references unknown options ['q']",
        "n1: range min 5 > max 1",
        "h1/line: polygon has 2 vertices",
        "h1/line: vertex outside the unit square",
        "h1: all-or-nothing with 1 selections for 2 hotspots",
        "d1: duplicate zone id 'z1'",
        "d1/z1: correct tokens not in item ['t9']",
        "d1/z1: max_tokens 1 < 2 correct tokens",
        "d1/z1: empty correct token set",
    ):
        assert fragment in joined, fragment


def test_main_exit_codes(tmp_path, capsys):
    clean = tmp_path / "clean.json"
    clean.write_text(
        json.dumps([{"id": "m", "kind": "MCQ", "choices": [{"text": "a"}, {"text": "b"}], "correctIndexes": [0]}]),
        encoding="utf-8",
    )
    out = tmp_path / "summary.json"
    assert audit_items_mod.main([str(clean), "--out", str(out)]) == 0
    assert json.loads(out.read_text(encoding="utf-8"))["warnings"] == []

    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps([{"id": "m", "kind": "MCQ", "choices": [], "correctIndexes": [3]}]), encoding="utf-8")
    assert audit_items_mod.main([str(broken)]) == config.AUDIT_WARN_EXIT_CODE
    assert "out of range" in capsys.readouterr().out

    assert audit_items_mod.main([str(tmp_path / "missing.json")]) == 1
