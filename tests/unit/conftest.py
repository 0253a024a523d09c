"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from typing import Callable
from unittest.mock import AsyncMock, Mock

import pytest

from profile_inference.llm.prompt_builder import PromptBuilder
from profile_inference.models.llm_models import LLMGenerationResponse


def make_llm_response(content: str, model_version: str = "gpt-4o-mini-2024-07-18") -> LLMGenerationResponse:
    return LLMGenerationResponse(
        content=content,
        model_version=model_version,
        finish_reason="stop",
        usage_tokens=750,
        prompt_tokens=500,
        completion_tokens=250,
        latency_ms=1500,
        raw_metadata={},
    )


@pytest.fixture
def llm_response_factory() -> Callable[..., LLMGenerationResponse]:
    """Factory for LLMGenerationResponse with the given content."""
    return make_llm_response


@pytest.fixture
def mock_llm_client(balanced_json):
    """Mock LLM transport returning a valid balanced profile."""
    mock = AsyncMock()
    mock.model = "gpt-4o-mini"
    mock.generate = AsyncMock(return_value=make_llm_response(balanced_json))
    mock.invoke = AsyncMock(return_value="politics")
    mock.health_check = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def mock_async_redis():
    """Mock AsyncRedis client for unit tests (async)."""
    mock = AsyncMock()
    mock.get = AsyncMock(return_value=None)
    mock.setex = AsyncMock(return_value=True)
    mock.sadd = AsyncMock(return_value=1)
    mock.srem = AsyncMock(return_value=1)
    mock.expire = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.smembers = AsyncMock(return_value=set())
    mock.ping = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    """PromptBuilder on the bundled templates, English by default."""
    return PromptBuilder(locale="en-US")


@pytest.fixture
def mock_prompt_builder():
    """Mock PromptBuilder for unit tests."""
    mock = Mock()
    mock.build_system_prompt = Mock(return_value="System prompt")
    mock.build_retry_prompt = Mock(return_value="Retry prompt")
    mock.build_topic_prompt = Mock(return_value="Topic prompt")
    mock.default_model = "gpt-4o-mini"
    return mock
