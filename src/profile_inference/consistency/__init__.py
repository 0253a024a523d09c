"""Score sanitization and summary/score consistency enforcement."""

from profile_inference.consistency.engine import (
    ALIGNMENT_NOTICE,
    ConsistencyEngine,
    SummaryConflict,
    get_consistency_engine,
)
from profile_inference.consistency.scores import (
    DEFAULT_SCORE,
    SCORE_MAX,
    SCORE_MIN,
    clamp_score,
    dedupe_orientations,
    is_numeric_score,
    sanitize_score,
)

__all__ = [
    "ConsistencyEngine",
    "SummaryConflict",
    "ALIGNMENT_NOTICE",
    "get_consistency_engine",
    "DEFAULT_SCORE",
    "SCORE_MIN",
    "SCORE_MAX",
    "clamp_score",
    "dedupe_orientations",
    "is_numeric_score",
    "sanitize_score",
]
