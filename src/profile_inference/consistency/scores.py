"""
Score sanitization and value-orientation deduplication.

Every score that leaves the pipeline is finite and inside [-1, 1]. Missing
or unparseable scores fall back to DEFAULT_SCORE (0.5), matching what the
response normalizer has always produced.
"""

import math
from typing import Any, Iterable

from profile_inference.labels.canonicalizer import normalize_label_id
from profile_inference.models.profile_models import ValueOrientation

SCORE_MIN = -1.0
SCORE_MAX = 1.0
DEFAULT_SCORE = 0.5


def clamp_score(score: float) -> float:
    """Clamp a numeric score into [-1, 1] (NaN maps to DEFAULT_SCORE)."""
    if math.isnan(score):
        return DEFAULT_SCORE
    return max(SCORE_MIN, min(SCORE_MAX, float(score)))


def is_numeric_score(value: Any) -> bool:
    """True for real numbers that are not NaN; booleans are not scores."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def sanitize_score(value: Any, default: float = DEFAULT_SCORE) -> float:
    """
    Coerce an arbitrary value into a valid score.

    Args:
        value: Candidate score (any JSON value)
        default: Replacement for missing, non-numeric or NaN values

    Returns:
        Score in [-1, 1]
    """
    if not is_numeric_score(value):
        return default
    return clamp_score(value)


def dedupe_orientations(orientations: Iterable[ValueOrientation]) -> list[ValueOrientation]:
    """
    Canonicalize labels, clamp scores and collapse duplicate labels.

    For labels appearing more than once the entry with the larger |score|
    wins; on an exact tie the first one is kept. Output keeps the order in
    which each label was first seen.

    Args:
        orientations: Draft value orientations

    Returns:
        New list with unique canonical labels
    """
    merged: dict[str, float] = {}
    for vo in orientations:
        label = normalize_label_id(vo.label)
        score = clamp_score(vo.score)
        if label not in merged or abs(score) > abs(merged[label]):
            merged[label] = score
    return [ValueOrientation(label=label, score=score) for label, score in merged.items()]
