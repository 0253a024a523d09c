"""
Ollama client implementation for LLM inference.

Communicates with the Ollama chat API using httpx AsyncClient. Supports:
- JSON output format (`format: "json"`)
- Connection pooling and retry logic (inherited)
- Health checks and model listing
"""

import time
from typing import Any, Dict

import httpx
import structlog

from profile_inference.llm.base_client import BaseLLMClient
from profile_inference.llm.exceptions import LLMClientError, LLMConnectionError, LLMGenerationError
from profile_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from profile_inference.monitoring.metrics import llm_latency_seconds, llm_tokens_total

logger = structlog.get_logger(__name__)


class OllamaClient(BaseLLMClient):
    """
    Ollama-specific LLM client.

    API Endpoints:
    - POST /api/chat: Chat completion with optional JSON format
    - GET /api/tags: List available models (also used as health check)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "qwen2.5:7b",
        timeout: int = 600,
        max_retries: int = 1,
        **kwargs,
    ):
        super().__init__(base_url, model, timeout=timeout, max_retries=max_retries, **kwargs)

    def _build_payload(self, request: LLMGenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_text},
            ],
            "stream": False,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_tokens,
            },
        }
        if request.seed is not None:
            payload["options"]["seed"] = request.seed
        if request.json_mode:
            payload["format"] = "json"
        return payload

    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Generate completion using POST /api/chat.

        Response:
        {
            "model": "qwen2.5:7b",
            "created_at": "2026-02-19T...",
            "message": {"role": "assistant", "content": "..."},
            "done": true,
            "total_duration": 5000000000,
            "eval_count": 150,
            "prompt_eval_count": 50
        }
        """
        start_time = time.time()

        logger.info(
            "Sending generation request to Ollama",
            model=request.model,
            system_prompt_length=len(request.system_prompt),
            user_text_length=len(request.user_text),
            temperature=request.temperature,
            max_tokens=request.max_tokens,
        )

        try:
            data = await self._post_json("/api/chat", self._build_payload(request))
        except LLMClientError:
            llm_latency_seconds.labels(model=request.model, success="false").observe(time.time() - start_time)
            raise

        latency_ms = int((time.time() - start_time) * 1000)

        content = (data.get("message") or {}).get("content", "")
        if not content:
            raise LLMGenerationError(
                "Empty response from Ollama",
                details={"response_keys": sorted(data.keys())},
            )

        model_version = data.get("model", request.model)
        finish_reason = data.get("done_reason") or ("stop" if data.get("done") else "incomplete")

        prompt_tokens = data.get("prompt_eval_count")
        completion_tokens = data.get("eval_count")
        total_tokens = None
        if prompt_tokens and completion_tokens:
            total_tokens = prompt_tokens + completion_tokens

        logger.info(
            "Ollama generation successful",
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
            usage_tokens=total_tokens,
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            latency_ms=latency_ms,
            raw_metadata={
                "created_at": data.get("created_at"),
                "total_duration": data.get("total_duration"),
                "load_duration": data.get("load_duration"),
                "eval_duration": data.get("eval_duration"),
            },
        )

    async def health_check(self) -> bool:
        """
        Check Ollama server health via GET /api/tags.

        Returns True if server responds, False otherwise.
        """
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=5.0)
            response.raise_for_status()
            logger.debug("Ollama health check passed")
            return True
        except httpx.HTTPError as e:
            logger.warning("Ollama health check failed", error=str(e))
            return False

    async def list_models(self) -> list[str]:
        """
        List all available models via GET /api/tags.

        Returns:
            List of model names (e.g., ["qwen2.5:7b", "llama3.1:8b"])
        """
        try:
            client = await self._get_client()
            response = await client.get("/api/tags", timeout=10.0)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error("Failed to list models", error=str(e))
            raise LLMConnectionError(
                f"Failed to list models: {str(e)}",
                details={"error": str(e)},
            ) from e

        models = [m["name"] for m in data.get("models", [])]
        logger.debug("Listed available models", count=len(models), models=models)
        return models
