"""
JSON Schemas (Draft 7) for LLM profile output.

Two schemas are selected by analysis mode:
- fast: nickname, topic_classification, value_orientation, summary
- balanced/deep: fast fields plus required reasoning and evidence

The same schema dicts drive validation and the format instructions embedded
in the system prompt, so the two cannot drift apart.
"""

import json
from functools import lru_cache

from jsonschema import Draft7Validator

from profile_inference.models.enums import AnalysisMode

_VALUE_ORIENTATION_SCHEMA = {
    "type": "object",
    "properties": {
        "label": {"type": "string"},
        "score": {"type": "number", "minimum": -1, "maximum": 1},
    },
    "required": ["label", "score"],
}

_EVIDENCE_SCHEMA = {
    "type": "object",
    "properties": {
        "quote": {"type": "string"},
        "analysis": {"type": "string"},
        "source_title": {"type": "string"},
        "source_id": {"type": "string"},
    },
    "required": ["quote", "analysis", "source_title"],
}

FAST_PROFILE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "FastProfile",
    "type": "object",
    "properties": {
        "nickname": {"type": "string"},
        "topic_classification": {"type": "string"},
        "value_orientation": {"type": "array", "items": _VALUE_ORIENTATION_SCHEMA},
        "summary": {"type": "string"},
    },
    "required": ["nickname", "topic_classification", "value_orientation", "summary"],
}

BALANCED_DEEP_PROFILE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "BalancedDeepProfile",
    "type": "object",
    "properties": {
        "nickname": {"type": "string"},
        "topic_classification": {"type": "string"},
        "reasoning": {"type": "string"},
        "value_orientation": {"type": "array", "items": _VALUE_ORIENTATION_SCHEMA},
        "summary": {"type": "string"},
        "evidence": {"type": "array", "items": _EVIDENCE_SCHEMA},
    },
    "required": [
        "nickname",
        "topic_classification",
        "reasoning",
        "value_orientation",
        "summary",
        "evidence",
    ],
}


def schema_name_for_mode(mode: AnalysisMode) -> str:
    return "balanced_deep" if mode.is_rich else "fast"


def get_schema(mode: AnalysisMode) -> dict:
    """Schema dict for a mode."""
    return BALANCED_DEEP_PROFILE_SCHEMA if mode.is_rich else FAST_PROFILE_SCHEMA


@lru_cache(maxsize=None)
def get_validator(mode: AnalysisMode) -> Draft7Validator:
    """Compiled validator for a mode (cached, read-only)."""
    schema = get_schema(mode)
    Draft7Validator.check_schema(schema)
    return Draft7Validator(schema)


@lru_cache(maxsize=None)
def get_format_instructions(mode: AnalysisMode) -> str:
    """
    Machine-readable output instructions derived from the mode's schema.

    Args:
        mode: Analysis mode

    Returns:
        Instruction text embedding the JSON Schema
    """
    schema = {k: v for k, v in get_schema(mode).items() if k not in ("$schema", "title")}
    return (
        'You must format your output as a JSON value that adheres to a given "JSON Schema" instance.\n'
        "\n"
        '"JSON Schema" is a declarative language that allows you to annotate and validate JSON documents.\n'
        "\n"
        'For example, the example "JSON Schema" instance {"properties": {"foo": {"description": '
        '"a list of test words", "type": "array", "items": {"type": "string"}}}, "required": ["foo"]}\n'
        'would match an object with one required property, "foo". The "type" property specifies "foo" '
        'must be an "array", and the "description" property semantically describes it as '
        '"a list of test words". The items within "foo" must be strings.\n'
        'Thus, the object {"foo": ["bar", "baz"]} is a well-formatted instance of this example '
        '"JSON Schema". The object {"properties": {"foo": ["bar", "baz"]}} is not well-formatted.\n'
        "\n"
        "Your output will be parsed and type-checked according to the provided schema instance, "
        "so make sure all fields in your output match the schema exactly and there are no trailing commas!\n"
        "\n"
        "Here is the JSON Schema instance your output must adhere to. Include the enclosing markdown "
        "codeblock:\n"
        "```json\n"
        f"{json.dumps(schema, ensure_ascii=False)}\n"
        "```"
    )
