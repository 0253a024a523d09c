"""
Retry controller exceptions.

ProfileGenerationError is the terminal error callers see when the model's
output still fails validation after the corrective retry (or fails in a way
that is never retried but arrived as a tagged parse result).
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from profile_inference.validation.exceptions import ValidationError


class ProfileGenerationError(Exception):
    """
    Raised when no valid profile could be produced.

    Attributes:
        last_error: Validation error of the final attempt
        attempts: LLM invocations made (1 or 2)
        validation_failures: error.details dicts of failed attempts, in order
    """

    def __init__(
        self,
        last_error: "ValidationError",
        attempts: int,
        validation_failures: Optional[list[dict]] = None,
    ) -> None:
        self.last_error = last_error
        self.attempts = attempts
        self.validation_failures = validation_failures or []
        self.message = (
            f"Profile generation failed after {attempts} attempt(s): "
            f"{type(last_error).__name__}: {getattr(last_error, 'message', str(last_error))}"
        )
        self.details = {
            "attempts": attempts,
            "error_type": type(last_error).__name__,
            "validation_failures": self.validation_failures,
        }
        super().__init__(self.message)
