"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to HTTP status codes:
- Output validation / generation failures: 422
- LLM timeout: 504
- LLM connection and other provider errors: 502
"""

from datetime import datetime

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from profile_inference.llm.exceptions import LLMClientError, LLMConnectionError, LLMTimeoutError
from profile_inference.retry.exceptions import ProfileGenerationError
from profile_inference.validation.exceptions import ValidationError

logger = structlog.get_logger(__name__)


def _error_body(error: str, message: str, details: dict | None = None) -> dict:
    body = {
        "error": error,
        "message": message,
        "timestamp": datetime.utcnow().isoformat(),
    }
    if details:
        body["details"] = details
    return body


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """
    Handle output validation errors that survived the corrective retry.

    Maps to 422 Unprocessable Entity (invalid LLM response).
    """
    logger.warning("Validation error", error_type=type(exc).__name__, details=exc.details)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("validation_failed", exc.message, exc.details),
    )


async def profile_generation_error_handler(request: Request, exc: ProfileGenerationError) -> JSONResponse:
    """
    Handle terminal profile generation failures.

    Maps to 422 Unprocessable Entity.
    """
    logger.error("Profile generation failed", attempts=exc.attempts, details=exc.details)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("generation_failed", exc.message, exc.details),
    )


async def llm_timeout_error_handler(request: Request, exc: LLMTimeoutError) -> JSONResponse:
    """
    Handle LLM timeout errors.

    Maps to 504 Gateway Timeout (upstream service timeout).
    """
    logger.error("LLM timeout error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content=_error_body("llm_timeout", "LLM request timed out"),
    )


async def llm_connection_error_handler(request: Request, exc: LLMConnectionError) -> JSONResponse:
    """
    Handle LLM connection errors.

    Maps to 502 Bad Gateway (upstream service unavailable).
    """
    logger.error("LLM connection error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body("llm_connection_failed", "Unable to connect to the LLM provider"),
    )


async def llm_error_handler(request: Request, exc: LLMClientError) -> JSONResponse:
    """
    Handle any other provider error (rate limit, bad request, missing model).

    Maps to 502 Bad Gateway.
    """
    logger.error("LLM provider error", error_type=type(exc).__name__, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=_error_body("llm_error", exc.message, exc.details),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_error", "An unexpected error occurred"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    ValidationError: validation_error_handler,
    ProfileGenerationError: profile_generation_error_handler,
    LLMTimeoutError: llm_timeout_error_handler,
    LLMConnectionError: llm_connection_error_handler,
    LLMClientError: llm_error_handler,
    Exception: generic_error_handler,
}
