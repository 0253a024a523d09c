"""
Tolerant repair of raw LLM output.

The normalizer turns arbitrary model text into a JSON object with the profile
fields present: markdown fences are stripped, JSON embedded in prose is
extracted, legacy field names are migrated, value_orientation entries are
coerced into `{label, score}` objects with canonical labels, and missing
fields are default-filled.

It never raises. Text with no recoverable JSON object is replaced by the
canonical failure object and flagged with `recovered=False`; callers parse it like any other reply.
"""

import copy
import json
from dataclasses import dataclass
from typing import Any

import structlog

from profile_inference.consistency.scores import DEFAULT_SCORE, sanitize_score
from profile_inference.labels.canonicalizer import is_canonical_label_id, normalize_label_id
from profile_inference.llm.text_utils import extract_json_object_span, strip_code_fences
from profile_inference.monitoring.metrics import labels_canonicalized_total

logger = structlog.get_logger(__name__)


FAILURE_SUMMARY = "Analysis Failed"
DEFAULT_SUMMARY = "Analysis completed."
UNKNOWN_TOPIC = "Unknown"
UNKNOWN_LABEL = "Unknown"

FAILURE_OBJECT: dict[str, Any] = {
    "nickname": "",
    "topic_classification": UNKNOWN_TOPIC,
    "value_orientation": [],
    "summary": FAILURE_SUMMARY,
    "evidence": [],
}


@dataclass(frozen=True)
class NormalizedResponse:
    """
    Repaired response.

    Attributes:
        data: Repaired JSON object
        recovered: False when no JSON object could be extracted and `data`
            is the canonical failure object
    """

    data: dict[str, Any]
    recovered: bool

    def to_json(self) -> str:
        return json.dumps(self.data, ensure_ascii=False, indent=2)


def _parse_object(text: str) -> dict[str, Any] | None:
    """Parse text as a JSON object, falling back to the greedy {...} span."""
    try:
        parsed = json.loads(text)
    except (json.JSONDecodeError, RecursionError):
        span = extract_json_object_span(text)
        if span is None:
            return None
        try:
            parsed = json.loads(span)
        except (json.JSONDecodeError, RecursionError):
            return None
        logger.debug("response_json_extracted_from_text", span_length=len(span))

    return parsed if isinstance(parsed, dict) else None


def _is_missing(value: Any) -> bool:
    """Absent, null, false, zero or empty string; empty containers count as present."""
    if value is None:
        return True
    if isinstance(value, (list, dict)):
        return False
    return not value


def _canonical_label(raw: Any) -> str:
    label = normalize_label_id(str(raw).strip())
    labels_canonicalized_total.labels(
        outcome="canonical" if is_canonical_label_id(label) else "opaque"
    ).inc()
    return label


def _repair_entry(index: int, item: Any) -> dict[str, Any]:
    if isinstance(item, str):
        logger.debug("value_orientation_string_entry", index=index, item=item)
        return {"label": _canonical_label(item), "score": DEFAULT_SCORE}

    if isinstance(item, dict) and item.get("label"):
        raw_score = item.get("score", DEFAULT_SCORE)
        score = sanitize_score(raw_score)
        if score != raw_score:
            logger.debug("value_orientation_score_repaired", index=index, raw=raw_score, score=score)
        return {"label": _canonical_label(item["label"]), "score": score}

    logger.warning("value_orientation_invalid_entry", index=index, item_type=type(item).__name__)
    return {"label": UNKNOWN_LABEL, "score": DEFAULT_SCORE}


def normalize_response(raw: Any) -> NormalizedResponse:
    """
    Repair raw LLM text into a profile-shaped JSON object.

    Args:
        raw: Raw transport output (expected str; anything else is unrecoverable)

    Returns:
        NormalizedResponse with repaired data and recovery flag
    """
    if not isinstance(raw, str):
        logger.warning("response_not_text", raw_type=type(raw).__name__)
        return NormalizedResponse(data=copy.deepcopy(FAILURE_OBJECT), recovered=False)

    parsed = _parse_object(strip_code_fences(raw))
    if parsed is None:
        logger.warning("response_unrecoverable", content_snippet=raw[:200])
        return NormalizedResponse(data=copy.deepcopy(FAILURE_OBJECT), recovered=False)

    if _is_missing(parsed.get("value_orientation")) and not _is_missing(parsed.get("political_leaning")):
        parsed["value_orientation"] = parsed["political_leaning"]
        logger.debug("response_legacy_field_migrated", field="political_leaning")
    parsed.pop("political_leaning", None)

    orientations = parsed.get("value_orientation")
    if isinstance(orientations, list):
        parsed["value_orientation"] = [_repair_entry(i, item) for i, item in enumerate(orientations)]
    else:
        if orientations is not None:
            logger.warning("value_orientation_not_list", value_type=type(orientations).__name__)
        parsed["value_orientation"] = []

    if _is_missing(parsed.get("nickname")):
        parsed["nickname"] = ""
    if _is_missing(parsed.get("topic_classification")):
        parsed["topic_classification"] = UNKNOWN_TOPIC
    if _is_missing(parsed.get("summary")):
        parsed["summary"] = DEFAULT_SUMMARY
    if _is_missing(parsed.get("evidence")):
        parsed["evidence"] = []

    return NormalizedResponse(data=parsed, recovered=True)


def normalize_and_fix_response(raw: Any) -> str:
    """
    Repair raw LLM text and return it as pretty-printed JSON text.

    Never raises; unrecoverable input yields the canonical failure object.
    """
    return normalize_response(raw).to_json()
