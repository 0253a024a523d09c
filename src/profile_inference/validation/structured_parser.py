"""
Schema-validated parsing of profile JSON.

`parse_output` is strict: it never coerces. Malformed JSON, wrong types,
out-of-range scores and missing required fields all produce a `ParseErr`
carrying the offending path. Repair of raw model text is the response
normalizer's job and happens before this stage.
"""

import json
from dataclasses import dataclass
from typing import Union

import structlog

from profile_inference.models.enums import AnalysisMode
from profile_inference.models.profile_models import Evidence, ProfileDraft, ValueOrientation
from profile_inference.monitoring.metrics import validation_failures_total
from profile_inference.validation.exceptions import JSONParseError, SchemaValidationError, ValidationError
from profile_inference.validation.schemas import get_validator, schema_name_for_mode

logger = structlog.get_logger(__name__)

MAX_REPORTED_ERRORS = 10


@dataclass(frozen=True)
class ParseOk:
    """Successful parse."""

    profile: ProfileDraft

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class ParseErr:
    """Failed parse; `error` is a JSONParseError or SchemaValidationError."""

    error: ValidationError

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[ParseOk, ParseErr]


def _format_path(path) -> str:
    return ".".join(str(p) for p in path) if path else "root"


def _load_json(raw_json_text: str) -> dict:
    """
    Parse text into a JSON object.

    Raises:
        JSONParseError: Empty text, invalid JSON, or a non-object top level
    """
    if not isinstance(raw_json_text, str) or not raw_json_text.strip():
        validation_failures_total.labels(stage="parse", error_type="empty_content").inc()
        raise JSONParseError(
            "Failed to parse LLM output: content is empty",
            raw_content=raw_json_text if isinstance(raw_json_text, str) else None,
            parse_error="Empty content",
        )

    try:
        parsed = json.loads(raw_json_text)
    except json.JSONDecodeError as e:
        validation_failures_total.labels(stage="parse", error_type="json_decode_error").inc()
        raise JSONParseError(
            f"Failed to parse LLM output as JSON: {e.msg}",
            raw_content=raw_json_text,
            parse_error=f"{e.msg} at line {e.lineno} col {e.colno}",
        ) from e

    if not isinstance(parsed, dict):
        validation_failures_total.labels(stage="parse", error_type="not_json_object").inc()
        raise JSONParseError(
            f"Failed to parse LLM output: expected a JSON object, got {type(parsed).__name__}",
            raw_content=raw_json_text,
            parse_error=f"Expected dict, got {type(parsed).__name__}",
        )

    return parsed


def _validate(data: dict, mode: AnalysisMode) -> None:
    """
    Validate data against the mode's schema.

    Raises:
        SchemaValidationError: With every violation (first 10) and the first path
    """
    errors = list(get_validator(mode).iter_errors(data))
    if not errors:
        return

    messages = [f"{_format_path(error.absolute_path)}: {error.message}" for error in errors[:MAX_REPORTED_ERRORS]]
    validation_failures_total.labels(stage="schema", error_type=errors[0].validator).inc()
    raise SchemaValidationError(
        f"JSON Schema validation failed with {len(errors)} error(s)",
        validation_errors=messages,
        path=_format_path(errors[0].absolute_path),
        schema_name=schema_name_for_mode(mode),
    )


def _build_draft(data: dict, mode: AnalysisMode) -> ProfileDraft:
    orientations = [ValueOrientation(label=vo["label"], score=vo["score"]) for vo in data["value_orientation"]]

    if not mode.is_rich:
        # Fast drafts never carry reasoning/evidence, even if the model emitted them
        return ProfileDraft(
            nickname=data["nickname"],
            topic_classification=data["topic_classification"],
            value_orientation=orientations,
            summary=data["summary"],
        )

    return ProfileDraft(
        nickname=data["nickname"],
        topic_classification=data["topic_classification"],
        reasoning=data["reasoning"],
        value_orientation=orientations,
        summary=data["summary"],
        evidence=[
            Evidence(
                quote=e["quote"],
                analysis=e["analysis"],
                source_title=e["source_title"],
                source_id=e.get("source_id"),
            )
            for e in data["evidence"]
        ],
    )


def parse_output(raw_json_text: str, mode: AnalysisMode) -> ParseResult:
    """
    Parse and validate profile JSON for a mode.

    Args:
        raw_json_text: JSON text (normally the response normalizer's output)
        mode: Analysis mode selecting the schema

    Returns:
        ParseOk with a ProfileDraft, or ParseErr with the validation error
    """
    try:
        data = _load_json(raw_json_text)
        _validate(data, mode)
    except (JSONParseError, SchemaValidationError) as e:
        logger.info(
            "profile_parse_failed",
            mode=mode.value,
            error_type=type(e).__name__,
            path=e.details.get("path"),
            message=e.message,
        )
        return ParseErr(error=e)

    return ParseOk(profile=_build_draft(data, mode))
