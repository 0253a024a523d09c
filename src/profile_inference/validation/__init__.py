"""
Output validation: tolerant response repair and strict schema parsing.

Flow:
1. normalize_response: repair raw model text (never raises)
2. parse_output: validate against the mode's JSON Schema (ParseOk / ParseErr)
"""

from profile_inference.validation.exceptions import (
    JSONParseError,
    SchemaValidationError,
    ValidationError,
)
from profile_inference.validation.response_normalizer import (
    FAILURE_OBJECT,
    NormalizedResponse,
    normalize_and_fix_response,
    normalize_response,
)
from profile_inference.validation.schemas import get_format_instructions, get_schema
from profile_inference.validation.structured_parser import ParseErr, ParseOk, ParseResult, parse_output

__all__ = [
    "ValidationError",
    "JSONParseError",
    "SchemaValidationError",
    "FAILURE_OBJECT",
    "NormalizedResponse",
    "normalize_and_fix_response",
    "normalize_response",
    "get_format_instructions",
    "get_schema",
    "ParseOk",
    "ParseErr",
    "ParseResult",
    "parse_output",
]
