from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Iterable

from . import config
from .item_bank import load_items
from .scoring import SUPPORTED_KINDS, selection_budget
from .text_match import compile_pattern
from .types import (
    ChoiceItem,
    DragDropItem,
    FillBlankItem,
    HotspotItem,
    Item,
    MatchingItem,
    NumericEntryItem,
    OrderingItem,
    RegexMatcher,
)


def _check_choice(item: ChoiceItem) -> list[str]:
    out: list[str] = []
    n = len(item.choices)
    if item.kind == "TRUE_FALSE" and n != 2:
        out.append(f"{item.id}: TRUE_FALSE has {n} choices (expected 2)")
    elif n < 2:
        out.append(f"{item.id}: only {n} choice(s)")
    if not item.correct_indexes:
        out.append(f"{item.id}: no correct index")
    bad = [i for i in item.correct_indexes if i < 0 or i >= n]
    if bad:
        out.append(f"{item.id}: correct index out of range {bad}")
    if item.answer_mode == "single" and len(set(item.correct_indexes)) > 1:
        out.append(f"{item.id}: single-answer item lists {len(set(item.correct_indexes))} correct indexes")
    return out


def _check_fill_blank(item: FillBlankItem) -> list[str]:
    out: list[str] = []
    if not item.blanks:
        out.append(f"{item.id}: no blanks")
    for blank in item.blanks:
        if not blank.acceptable_answers:
            out.append(f"{item.id}/{blank.id}: no acceptable answers")
        for m in blank.acceptable_answers:
            if isinstance(m, RegexMatcher) and compile_pattern(m.pattern, m.flags) is None:
                out.append(f"{item.id}/{blank.id}: regex {m.pattern!r} flags={m.flags!r} never matches")
    return out


def _check_matching(item: MatchingItem) -> list[str]:
    out: list[str] = []
    if not item.prompts:
        out.append(f"{item.id}: no prompts")
    target_ids = {t.id for t in item.targets}
    for p in item.prompts:
        if target_ids and p.correct_target_id not in target_ids:
            out.append(f"{item.id}/{p.id}: correct target {p.correct_target_id!r} is not a target")
    return out


def _check_ordering(item: OrderingItem) -> list[str]:
    out: list[str] = []
    if len(item.correct_order) < 2:
        out.append(f"{item.id}: correct order has {len(item.correct_order)} entries")
    if len(set(item.correct_order)) != len(item.correct_order):
        out.append(f"{item.id}: correct order repeats an option")
    option_ids = {o.id for o in item.options}
    unknown = [v for v in item.correct_order if option_ids and v not in option_ids]
    if unknown:
        out.append(f"{item.id}: correct order references unknown options {unknown}")
    return out


def _check_numeric(item: NumericEntryItem) -> list[str]:
    rule = item.validation
    if rule.mode == "range":
        if rule.min is None or rule.max is None:
            return [f"{item.id}: range needs both min and max"]
        if rule.min > rule.max:
            return [f"{item.id}: range min {rule.min} > max {rule.max}"]
        return []
    if rule.value is None:
        return [f"{item.id}: exact validation without a value"]
    if rule.tolerance is not None and rule.tolerance < 0:
        return [f"{item.id}: negative tolerance {rule.tolerance}"]
    return []


def _check_hotspot(item: HotspotItem) -> list[str]:
    out: list[str] = []
    if not item.hotspots:
        out.append(f"{item.id}: no hotspots")
    for region in item.hotspots:
        if len(region.points) < config.POLYGON_MIN_VERTICES:
            out.append(f"{item.id}/{region.id}: polygon has {len(region.points)} vertices")
        if any(not (0.0 <= p.x <= 1.0 and 0.0 <= p.y <= 1.0) for p in region.points):
            out.append(f"{item.id}/{region.id}: vertex outside the unit square")
    cap = item.scoring.max_selections
    if cap is not None and cap < 1:
        out.append(f"{item.id}: max_selections {cap} is treated as 1")
    if item.scoring.mode == "all" and item.hotspots and selection_budget(item) < len(item.hotspots):
        out.append(f"{item.id}: all-or-nothing with {selection_budget(item)} selections for {len(item.hotspots)} hotspots can never score")
    return out


def _check_drag_drop(item: DragDropItem) -> list[str]:
    out: list[str] = []
    if not item.zones:
        out.append(f"{item.id}: no zones")
    token_ids = {t.id for t in item.tokens}
    seen: set[str] = set()
    for zone in item.zones:
        if zone.id in seen:
            out.append(f"{item.id}: duplicate zone id {zone.id!r}")
        seen.add(zone.id)
        if not zone.correct_token_ids:
            out.append(f"{item.id}/{zone.id}: empty correct token set")
        unknown = [t for t in zone.correct_token_ids if t not in token_ids]
        if unknown:
            out.append(f"{item.id}/{zone.id}: correct tokens not in item {unknown}")
        if zone.max_tokens is not None and zone.max_tokens < len(zone.correct_token_ids):
            out.append(f"{item.id}/{zone.id}: max_tokens {zone.max_tokens} < {len(zone.correct_token_ids)} correct tokens")
    return out


_CHECKS: dict[str, Callable[..., list[str]]] = {
    "MCQ": _check_choice,
    "TRUE_FALSE": _check_choice,
    "FILL_IN_THE_BLANK": _check_fill_blank,
    "MATCHING": _check_matching,
    "ORDERING": _check_ordering,
    "NUMERIC_ENTRY": _check_numeric,
    "HOTSPOT": _check_hotspot,
    "DRAG_AND_DROP": _check_drag_drop,
}


def audit_items(items: Iterable[Item]) -> dict[str, object]:
    coverage: dict[str, int] = {kind: 0 for kind in SUPPORTED_KINDS}
    warnings: list[str] = []
    for item in items:
        coverage[item.kind] = coverage.get(item.kind, 0) + 1
        check = _CHECKS.get(item.kind)
        if check is not None:
            warnings.extend(check(item))
    return {"coverage": coverage, "warnings": warnings, "total": sum(coverage.values())}


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, int] = summary["coverage"]  # type: ignore[assignment]
    print("=== Item Coverage ===")
    for kind in SUPPORTED_KINDS:
        print(f"  {kind:<18} {coverage.get(kind, 0):4d}")

    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")
    print("\nTotal:", summary["total"])


def write_summary(summary: dict[str, object], path: Path) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Flag answer keys that cannot score as intended.")
    ap.add_argument("items", help="JSON file holding an array of items")
    ap.add_argument("--out", help="write the JSON summary here")
    args = ap.parse_args(argv)
    try:
        items = load_items(args.items)
    except (OSError, ValueError) as exc:
        print(f"cannot load {args.items}: {exc}", file=sys.stderr)
        return 1
    summary = audit_items(items)
    print_report(summary)
    if args.out:
        write_summary(summary, Path(args.out))
    return config.AUDIT_WARN_EXIT_CODE if summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
