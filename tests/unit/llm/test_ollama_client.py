"""
Unit tests for OllamaClient (httpx MockTransport, no network).
"""

import json

import httpx
import pytest

from profile_inference.llm.exceptions import LLMConnectionError, LLMGenerationError
from profile_inference.llm.ollama_client import OllamaClient
from profile_inference.models.llm_models import LLMGenerationRequest


def _client(handler) -> OllamaClient:
    client = OllamaClient(base_url="http://ollama.test:11434", max_retries=1)
    client._client = httpx.AsyncClient(base_url=client.base_url, transport=httpx.MockTransport(handler))
    return client


class TestOllamaClient:
    """Test suite for OllamaClient."""

    @pytest.mark.asyncio
    async def test_generate_success(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "model": "qwen2.5:7b",
                "message": {"role": "assistant", "content": '{"summary": "ok"}'},
                "done": True,
                "done_reason": "stop",
                "prompt_eval_count": 50,
                "eval_count": 150,
            })

        request = LLMGenerationRequest(
            system_prompt="sys", user_text="user", model="qwen2.5:7b", temperature=0.2, max_tokens=256
        )
        response = await _client(handler).generate(request)

        assert response.content == '{"summary": "ok"}'
        assert response.finish_reason == "stop"
        assert response.usage_tokens == 200
        assert captured["path"] == "/api/chat"
        body = captured["body"]
        assert body["stream"] is False
        assert body["format"] == "json"
        assert body["options"] == {"temperature": 0.2, "num_predict": 256}
        assert body["messages"][0] == {"role": "system", "content": "sys"}

    @pytest.mark.asyncio
    async def test_empty_content(self):
        client = _client(lambda request: httpx.Response(200, json={"message": {"content": ""}, "done": True}))
        request = LLMGenerationRequest(system_prompt="s", user_text="u", model="qwen2.5:7b")

        with pytest.raises(LLMGenerationError):
            await client.generate(request)

    @pytest.mark.asyncio
    async def test_list_models(self):
        client = _client(lambda request: httpx.Response(200, json={"models": [{"name": "qwen2.5:7b"}, {"name": "llama3.1:8b"}]}))
        assert await client.list_models() == ["qwen2.5:7b", "llama3.1:8b"]

    @pytest.mark.asyncio
    async def test_list_models_failure(self):
        client = _client(lambda request: httpx.Response(503))
        with pytest.raises(LLMConnectionError):
            await client.list_models()

    @pytest.mark.asyncio
    async def test_health_check(self):
        assert await _client(lambda request: httpx.Response(200, json={"models": []})).health_check() is True
        assert await _client(lambda request: httpx.Response(503)).health_check() is False
