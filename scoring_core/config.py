from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


# text matching
REGEX_DEFAULT_FLAGS: str = "i"
REGEX_ALLOWED_FLAGS: str = "gimsuy"

# numeric entry
NUMERIC_DEFAULT_TOLERANCE: float = 0.0

# hotspot
POLYGON_MIN_VERTICES: int = 3

# free-text kinds are graded elsewhere; these only size max_score
SHORT_ANSWER_DEFAULT_MAX: float = 1.0
ESSAY_DEFAULT_MAX: float = 10.0
SCENARIO_DEFAULT_MAX: float = 10.0

RESULT_EXPORT_ENABLED: bool = True
AUDIT_WARN_EXIT_CODE: int = 2

ALLOWED_ORIGINS: list[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
]

DEBUG_TRACE: bool = False
TRACE_FIELDS: tuple[str, ...] = (
    "item_id",
    "kind",
    "mode",
    "score",
    "max_score",
    "deferred",
)
# // env overrides for staging/ops; defaults remain conservative.
SHORT_ANSWER_DEFAULT_MAX = _env_float("SHORT_ANSWER_DEFAULT_MAX", SHORT_ANSWER_DEFAULT_MAX)
ESSAY_DEFAULT_MAX = _env_float("ESSAY_DEFAULT_MAX", ESSAY_DEFAULT_MAX)
SCENARIO_DEFAULT_MAX = _env_float("SCENARIO_DEFAULT_MAX", SCENARIO_DEFAULT_MAX)
RESULT_EXPORT_ENABLED = _env_bool("RESULT_EXPORT_ENABLED", RESULT_EXPORT_ENABLED)
AUDIT_WARN_EXIT_CODE = _env_int("AUDIT_WARN_EXIT_CODE", AUDIT_WARN_EXIT_CODE)
ALLOWED_ORIGINS = _env_list("ALLOWED_ORIGINS", ALLOWED_ORIGINS)
DEBUG_TRACE = _env_bool("DEBUG_TRACE", False)
