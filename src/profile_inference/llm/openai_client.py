"""
OpenAI-compatible chat completions client.

Works with any provider exposing POST {base_url}/chat/completions in the
OpenAI wire format (OpenAI, DeepSeek, Qwen/DashScope compatible mode, local
gateways). Policy refusals surface either as `finish_reason: content_filter`
or as an error body carrying a filter code; both raise LLMContentFilterError.
"""

import time
from typing import Any, Dict, Optional

import httpx
import structlog

from profile_inference.llm.base_client import BaseLLMClient
from profile_inference.llm.exceptions import (
    LLMContentFilterError,
    LLMGenerationError,
    LLMClientError,
)
from profile_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from profile_inference.monitoring.metrics import llm_latency_seconds, llm_tokens_total

logger = structlog.get_logger(__name__)


class OpenAICompatibleClient(BaseLLMClient):
    """
    Chat-completions client using httpx.

    API Endpoints:
    - POST /chat/completions: Generate completion (system + user messages)
    - GET /models: Health check
    """

    def __init__(
        self,
        base_url: str = "https://api.openai.com/v1",
        api_key: str = "",
        model: str = "gpt-4o-mini",
        timeout: int = 600,
        max_retries: int = 1,
        **kwargs,
    ):
        """
        Initialize the client.

        Args:
            base_url: Provider base URL including the API version segment
            api_key: Bearer token (may be empty for local gateways)
            model: Default model name
            timeout: Request timeout in seconds
            max_retries: HTTP attempts per call (1 = no transport retry)
            **kwargs: Forwarded to BaseLLMClient (temperature, max_tokens, ...)
        """
        self.api_key = api_key
        super().__init__(base_url, model, timeout=timeout, max_retries=max_retries, **kwargs)

    def _default_headers(self) -> Dict[str, str]:
        headers = super()._default_headers()
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_text},
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }
        if request.json_mode:
            payload["response_format"] = {"type": "json_object"}
        if request.seed is not None:
            payload["seed"] = request.seed
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate a completion via POST /chat/completions.

        Response (abridged):
        {
            "model": "gpt-4o-mini-2024-07-18",
            "choices": [{"message": {"content": "..."}, "finish_reason": "stop"}],
            "usage": {"prompt_tokens": 812, "completion_tokens": 230, "total_tokens": 1042}
        }
        """
        start_time = time.time()

        logger.info(
            "Sending chat completion request",
            model=request.model,
            system_prompt_length=len(request.system_prompt),
            user_text_length=len(request.user_text),
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            json_mode=request.json_mode,
        )

        try:
            data = await self._post_json("/chat/completions", self._build_payload(request))
        except LLMClientError:
            llm_latency_seconds.labels(model=request.model, success="false").observe(time.time() - start_time)
            raise

        latency_ms = int((time.time() - start_time) * 1000)
        model_version = data.get("model") or request.model

        choices = data.get("choices") or []
        if not choices:
            raise LLMGenerationError(
                "Chat completion response has no choices",
                details={"response_keys": sorted(data.keys())},
            )

        choice = choices[0]
        finish_reason = choice.get("finish_reason") or "unknown"
        content = (choice.get("message") or {}).get("content") or ""

        if finish_reason == "content_filter":
            logger.warning("Provider content filter triggered", model=model_version)
            raise LLMContentFilterError(
                "Provider refused the request (content_filter)",
                details={"model": model_version, "finish_reason": finish_reason},
            )

        if not content:
            raise LLMGenerationError(
                "Empty completion from provider",
                details={"model": model_version, "finish_reason": finish_reason},
            )

        usage = data.get("usage") or {}
        prompt_tokens: Optional[int] = usage.get("prompt_tokens")
        completion_tokens: Optional[int] = usage.get("completion_tokens")

        logger.info(
            "Chat completion successful",
            model=model_version,
            latency_ms=latency_ms,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            finish_reason=finish_reason,
        )

        llm_latency_seconds.labels(model=model_version, success="true").observe(latency_ms / 1000.0)
        if prompt_tokens:
            llm_tokens_total.labels(model=model_version, token_type="prompt").inc(prompt_tokens)
        if completion_tokens:
            llm_tokens_total.labels(model=model_version, token_type="completion").inc(completion_tokens)

        return LLMGenerationResponse(
            content=content,
            model_version=model_version,
            finish_reason=finish_reason,
            usage_tokens=usage.get("total_tokens"),
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            raw_metadata={"id": data.get("id"), "system_fingerprint": data.get("system_fingerprint")},
        )

    async def health_check(self) -> bool:
        """
        Check provider reachability via GET /models.

        Returns True if the provider responds, False otherwise.
        """
        try:
            client = await self._get_client()
            response = await client.get("/models", timeout=5.0)
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("OpenAI-compatible health check failed", error=str(e))
            return False
