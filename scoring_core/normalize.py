"""Clean up raw learner responses before they reach the scorers."""
from __future__ import annotations

from typing import Any, Iterable, List, Optional


def dedupe_indexes(answer_indexes: Optional[Iterable[Any]] = None, answer_index: Any = None) -> Optional[List[int]]:
    if answer_indexes:
        out: List[int] = []
        for raw in answer_indexes:
            if isinstance(raw, bool) or not isinstance(raw, int):
                continue
            if raw not in out:
                out.append(raw)
        return out or None
    if isinstance(answer_index, int) and not isinstance(answer_index, bool):
        return [answer_index]
    return None


def normalize_text_answers(text_answer: Any = None, text_answers: Optional[Iterable[Any]] = None) -> Optional[List[str]]:
    if text_answers:
        cleaned = [v.strip() if isinstance(v, str) else "" for v in text_answers]
        return cleaned if any(cleaned) else None
    if isinstance(text_answer, str):
        trimmed = text_answer.strip()
        return [trimmed] if trimmed else None
    return None


def normalize_ordering(ordering_answer: Optional[Iterable[Any]] = None) -> Optional[List[str]]:
    if not ordering_answer:
        return None
    out: List[str] = []
    for raw in ordering_answer:
        if not isinstance(raw, str):
            continue
        value = raw.strip()
        if value and value not in out:
            out.append(value)
    return out or None


__all__ = ["dedupe_indexes", "normalize_text_answers", "normalize_ordering"]
