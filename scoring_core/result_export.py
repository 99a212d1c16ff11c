"""Per-item scoring results as JSON or CSV."""
from __future__ import annotations

from typing import Any, Dict, Iterable
import csv
import io

from .types import Item, ScoringResult

_FIELDS: tuple[str, ...] = ("item_id", "kind", "score", "max_score", "deferred")


def _num(value: float) -> float | int:
    # whole numbers print as 1, not 1.0
    return int(value) if float(value).is_integer() else float(value)


def result_row(item: Item, result: ScoringResult) -> Dict[str, Any]:
    return {
        "item_id": item.id,
        "kind": item.kind,
        "score": _num(result.score),
        "max_score": _num(result.max_score),
        "deferred": result.deferred,
    }


def to_json(rows: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    return {"results": list(rows)}


def to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS, extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue()


__all__ = ["result_row", "to_json", "to_csv"]
