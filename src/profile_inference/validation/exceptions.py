"""
Validation exceptions for LLM profile output.

These are carried inside ParseErr results by the StructuredParser and raised
by the orchestrator so the RetryController can decide whether a corrective
retry is allowed. Messages deliberately contain the words "parse" or
"schema"; the retry policy matches on them.
"""

from typing import Any


class ValidationError(Exception):
    """
    Base exception for all output validation errors.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize validation error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class JSONParseError(ValidationError):
    """
    LLM output could not be parsed as a JSON object.
    """

    def __init__(
        self,
        message: str,
        raw_content: str | None = None,
        parse_error: str | None = None,
        path: str = "root",
    ):
        """
        Initialize JSON parse error.

        Args:
            message: Error description
            raw_content: First 500 chars of malformed content (for debugging)
            parse_error: Original json.JSONDecodeError message
            path: Offending location (always `root` for parse failures)
        """
        details: dict[str, Any] = {"path": path}
        if raw_content:
            details["content_snippet"] = raw_content[:500]
        if parse_error:
            details["parse_error"] = parse_error

        super().__init__(message, details)
        self.path = path


class SchemaValidationError(ValidationError):
    """
    Parsed JSON does not conform to the mode's profile schema.
    """

    def __init__(
        self,
        message: str,
        validation_errors: list[str] | None = None,
        path: str | None = None,
        schema_name: str | None = None,
    ):
        """
        Initialize schema validation error.

        Args:
            message: Error description
            validation_errors: `path: message` strings, first 10 violations
            path: Dotted path of the first violation (e.g. `value_orientation.0.score`)
            schema_name: Name of the schema used (`fast` or `balanced_deep`)
        """
        details: dict[str, Any] = {}
        if validation_errors:
            details["validation_errors"] = validation_errors
        if path:
            details["path"] = path
        if schema_name:
            details["schema_name"] = schema_name

        super().__init__(message, details)
        self.path = path or "root"
        self.validation_errors = validation_errors or []
