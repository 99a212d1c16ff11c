from __future__ import annotations
import logging
import re
import unicodedata
from typing import Optional, Tuple

from . import config
from .types import ExactMatcher, Matcher, RegexMatcher

log = logging.getLogger(__name__)

_FLAG_BITS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,  # str patterns are unicode already
    "g": 0,  # single test per candidate, global has no effect
    "y": 0,  # sticky: anchored at 0, handled in matches_answer
}


def _fold(text: str) -> str:
    return unicodedata.normalize("NFC", text).casefold()


def _parse_flags(flags: str) -> Tuple[int, bool]:
    if len(set(flags)) != len(flags):
        raise ValueError(f"repeated regex flag in {flags!r}")
    bits = 0
    for ch in flags:
        if ch not in config.REGEX_ALLOWED_FLAGS or ch not in _FLAG_BITS:
            raise ValueError(f"unsupported regex flag {ch!r}")
        bits |= _FLAG_BITS[ch]
    return bits, "y" in flags


def compile_pattern(pattern: str, flags: Optional[str] = None) -> Optional[Tuple[re.Pattern[str], bool]]:
    """Return ``(compiled, sticky)`` or ``None`` when the pattern or flags are unusable."""

    effective = config.REGEX_DEFAULT_FLAGS if flags is None else flags
    try:
        bits, sticky = _parse_flags(effective)
        return re.compile(pattern, bits), sticky
    except (re.error, ValueError, TypeError) as exc:
        log.debug("regex matcher rejected pattern=%r flags=%r: %s", pattern, effective, exc)
        return None


def _matches_exact(candidate: str, matcher: ExactMatcher) -> bool:
    if matcher.case_sensitive:
        return candidate == matcher.value
    return _fold(candidate) == _fold(matcher.value)


def _matches_regex(candidate: str, matcher: RegexMatcher) -> bool:
    compiled = compile_pattern(matcher.pattern, matcher.flags)
    if compiled is None:
        return False
    rx, sticky = compiled
    hit = rx.match(candidate) if sticky else rx.search(candidate)
    return hit is not None


def matches_answer(candidate: Optional[str], matcher: Matcher) -> bool:
    """True when a trimmed learner answer satisfies one acceptable-answer matcher."""

    if not candidate:
        return False
    if isinstance(matcher, RegexMatcher):
        return _matches_regex(candidate, matcher)
    return _matches_exact(candidate, matcher)


__all__ = ["matches_answer", "compile_pattern"]
