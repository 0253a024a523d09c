"""
Abstract base client for LLM inference.

Defines the interface that all LLM transports (OpenAI-compatible APIs,
Ollama) adhere to, plus the shared httpx plumbing: a pooled AsyncClient and
a POST helper with connection-level retries and exponential backoff.

The profile pipeline only needs `invoke(system_prompt, user_text) -> str`;
`generate` exposes the full request/response models for callers that want
token counts and latency.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from profile_inference.llm.exceptions import (
    LLMConnectionError,
    LLMContentFilterError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    is_content_filter_message,
)
from profile_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse

logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for LLM inference clients.

    Responsibilities:
    - Send generation requests to the provider
    - Parse responses into LLMGenerationResponse
    - Map transport failures onto LLMClientError subclasses
    - Provide health checks

    Does NOT handle:
    - Prompt construction (PromptBuilder)
    - Response repair and validation (validation package)
    - Corrective retries for bad output (RetryController)

    One HTTP attempt per call unless `max_retries` asks for more; profile
    generation relies on that so transport failures surface immediately.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        timeout: int = 600,
        max_retries: int = 1,
        temperature: float = 0.3,
        max_tokens: int = 2048,
        connection_limits: Optional[httpx.Limits] = None,
        **kwargs,
    ):
        """
        Initialize base client.

        Args:
            base_url: Provider base URL (e.g., https://api.openai.com/v1)
            model: Default model used by `invoke`
            timeout: HTTP request timeout in seconds
            max_retries: HTTP attempts for network errors and 5xx responses
                (1 = no transport retry)
            temperature: Default sampling temperature for `invoke`
            max_tokens: Default completion budget for `invoke`
            connection_limits: httpx connection pool limits
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.extra_config = kwargs

        self._connection_limits = connection_limits or httpx.Limits(
            max_keepalive_connections=5,
            max_connections=10,
            keepalive_expiry=30.0,
        )
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            model=model,
            timeout=timeout,
            max_retries=self.max_retries,
        )

    def _default_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the pooled async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                headers=self._default_headers(),
                follow_redirects=True,
            )
            logger.debug("Created new httpx AsyncClient", base_url=self.base_url)
        return self._client

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON body.

        With `max_retries > 1`, network errors, timeouts and 5xx responses
        are retried with exponential backoff (2s, 4s, ...). 4xx responses are
        never retried.

        Raises:
            LLMTimeoutError: Every attempt timed out
            LLMConnectionError: Network failure on every attempt
            LLMContentFilterError: Provider refused on policy grounds
            LLMRateLimitError: HTTP 429
            LLMModelNotAvailableError: HTTP 404
            LLMGenerationError: Other HTTP errors or an undecodable body
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                client = await self._get_client()
                response = await client.post(path, json=payload)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                logger.warning(
                    "LLM request timeout",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    timeout=self.timeout,
                    error=str(e),
                )
                last_error = LLMTimeoutError(
                    f"Request timeout after {self.timeout}s",
                    details={"attempt": attempt, "timeout": self.timeout},
                )

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                error_text = e.response.text

                logger.error(
                    "LLM HTTP error",
                    status_code=status_code,
                    error_text=error_text[:500],
                    attempt=attempt,
                )

                if is_content_filter_message(error_text):
                    raise LLMContentFilterError(
                        "Provider refused the request (content filter)",
                        details={"status": status_code, "error": error_text[:500]},
                    ) from e
                if status_code == 404:
                    raise LLMModelNotAvailableError(
                        f"Model not found: {payload.get('model')}",
                        details={"model": payload.get("model"), "status": status_code},
                    ) from e
                if status_code == 429:
                    raise LLMRateLimitError(
                        "Provider rate limit exceeded",
                        details={"status": status_code, "error": error_text[:500]},
                    ) from e
                if status_code < 500:
                    raise LLMGenerationError(
                        f"LLM client error: {status_code}",
                        details={"status": status_code, "error": error_text[:500]},
                    ) from e

                last_error = LLMGenerationError(
                    f"LLM server error: {status_code}",
                    details={"status": status_code, "error": error_text[:500]},
                )

            except httpx.TransportError as e:
                logger.warning(
                    "LLM network error",
                    attempt=attempt,
                    max_retries=self.max_retries,
                    error=str(e),
                )
                last_error = LLMConnectionError(
                    f"Network error: {str(e)}",
                    details={"attempt": attempt, "error_type": type(e).__name__},
                )

            except json.JSONDecodeError as e:
                raise LLMGenerationError(
                    "Invalid JSON envelope from LLM provider",
                    details={"parse_error": str(e)},
                ) from e

            if attempt < self.max_retries:
                backoff = 2 ** attempt
                logger.info("Retrying LLM request after backoff", backoff_seconds=backoff, attempt=attempt)
                await asyncio.sleep(backoff)

        raise last_error

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion from the provider.

        Args:
            request: Standardized generation request

        Returns:
            LLMGenerationResponse with generated text and metadata

        Raises:
            LLMConnectionError: Network errors
            LLMTimeoutError: Request exceeded timeout
            LLMContentFilterError: Provider refused the content
            LLMGenerationError: Provider-side generation errors
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the provider is reachable.

        Returns:
            True if healthy, False otherwise (never raises)
        """
        pass

    def build_request(self, system_prompt: str, user_text: str, json_mode: bool = True) -> LLMGenerationRequest:
        """Request with this client's default model and sampling settings."""
        return LLMGenerationRequest(
            system_prompt=system_prompt,
            user_text=user_text,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            json_mode=json_mode,
        )

    async def invoke(self, system_prompt: str, user_text: str, json_mode: bool = True) -> str:
        """
        Send one system + user exchange and return the raw text.

        Args:
            system_prompt: Rendered system prompt
            user_text: User content
            json_mode: Request JSON output when the provider supports it

        Returns:
            Raw, possibly malformed, model text
        """
        response = await self.generate(self.build_request(system_prompt, user_text, json_mode=json_mode))
        return response.content

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed LLM client connection", client_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"model={self.model}, "
            f"timeout={self.timeout}s)"
        )
