"""
Custom exceptions for the LLM client layer.

These exceptions let the retry controller and the API layer distinguish
between failure modes: transport problems and timeouts are surfaced
immediately, content-filter refusals produce a degraded profile.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to connect to the LLM provider.

    Includes network errors, DNS failures, refused connections, etc.
    The client retries these internally with backoff before raising.
    """

    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the provider returns an error during generation.

    Examples:
    - Model not found
    - Invalid parameters
    - Authentication failure
    - Malformed provider response envelope
    """

    pass


class LLMContentFilterError(LLMGenerationError):
    """
    Raised when the provider refuses the request on policy grounds.

    Detected from `finish_reason == "content_filter"` or from provider
    error bodies (e.g. `data_inspection_failed`). Never retried: the
    orchestrator returns a degraded profile instead.
    """

    pass


class LLMRateLimitError(LLMClientError):
    """
    Raised when the provider rate-limits the request (HTTP 429).
    """

    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when an LLM invocation exceeds the request timeout.

    Separate from generic connection errors so it can be surfaced as a
    gateway timeout and is never retried.
    """

    pass


class LLMModelNotAvailableError(LLMGenerationError):
    """
    Raised when the requested model is not available on the server.
    """

    pass


# Lower-cased fragments that identify a provider policy refusal in error
# messages or response bodies.
CONTENT_FILTER_SIGNATURES: tuple[str, ...] = (
    "content_filter",
    "content filter",
    "content_policy",
    "content policy",
    "data_inspection_failed",
    "inappropriate content",
    "safety system",
    "responsible_ai_policy",
    "sensitive content",
    "内容安全",
)


def is_content_filter_message(text: str) -> bool:
    """True if text carries a known content-filter signature."""
    lowered = text.lower()
    return any(signature in lowered for signature in CONTENT_FILTER_SIGNATURES)
