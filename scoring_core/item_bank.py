from __future__ import annotations
import copy
import json
from pathlib import Path
from typing import Any, Dict, List

from .types import AttemptResponse, Item
from .wire import parse_item, parse_response

# Wire payloads use the camelCase keys of the authoring API; ``wire`` holds
# the models that validate them.


def item_from_dict(payload: Any) -> Item:
    """Build a typed item; raises ``ValueError`` on malformed payloads."""

    return parse_item(payload)


def response_from_dict(payload: Any) -> AttemptResponse:
    return parse_response(payload)


def load_items(path: str | Path) -> List[Item]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("items") or []
    return [item_from_dict(r) for r in raw]


def load_responses(path: str | Path) -> List[AttemptResponse]:
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = raw.get("responses") or []
    return [response_from_dict(r) for r in raw]


def _strip(d: Dict[str, Any], *keys: str) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if k not in keys}


def sanitize_for_learner(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a wire item with every answer-key field removed."""

    out = copy.deepcopy(payload)
    kind = out.get("kind")
    if kind in ("MCQ", "TRUE_FALSE"):
        out.pop("correctIndexes", None)
    elif kind == "FILL_IN_THE_BLANK":
        out["blanks"] = [_strip(b, "acceptableAnswers") for b in out.get("blanks") or []]
    elif kind == "MATCHING":
        out["prompts"] = [_strip(p, "correctTargetId") for p in out.get("prompts") or []]
    elif kind == "ORDERING":
        out.pop("correctOrder", None)
    elif kind in ("SHORT_ANSWER", "ESSAY"):
        rubric = out.get("rubric")
        if isinstance(rubric, dict):
            rubric = _strip(rubric, "keywords", "sampleAnswer")
            if kind == "ESSAY" and rubric.get("sections"):
                rubric["sections"] = [_strip(s, "keywords") for s in rubric["sections"]]
            out["rubric"] = rubric
    elif kind == "NUMERIC_ENTRY":
        out.pop("validation", None)
    elif kind == "HOTSPOT":
        # every region is a correct target, so the regions themselves are the key
        out.pop("hotspots", None)
    elif kind == "DRAG_AND_DROP":
        out["zones"] = [_strip(z, "correctTokenIds") for z in out.get("zones") or []]
    elif kind == "SCENARIO_TASK":
        out.pop("scoring", None)
    return out


__all__ = [
    "item_from_dict",
    "response_from_dict",
    "load_items",
    "load_responses",
    "sanitize_for_learner",
]
