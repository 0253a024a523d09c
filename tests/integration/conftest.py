"""Integration test fixtures (service checks and prerequisites).

Provides fixtures for checking if external services are available.
Tests needing a live service are skipped if it is not running.
"""

import httpx
import pytest
import pytest_asyncio
from redis.asyncio import Redis as AsyncRedis

from profile_inference.llm.ollama_client import OllamaClient


@pytest.fixture(scope="session")
def check_ollama():
    """Check if Ollama is available at localhost:11434.

    Skips tests if Ollama is not reachable.
    """
    try:
        response = httpx.get("http://localhost:11434/api/tags", timeout=5)
        if response.status_code != 200:
            pytest.skip("Ollama not available (non-200 status)")
    except httpx.HTTPError as e:
        pytest.skip(f"Ollama not available: {e}")


@pytest_asyncio.fixture
async def real_ollama_client(check_ollama):
    """Real OllamaClient instance for integration tests.

    Requires Ollama to be running (checked by check_ollama fixture).
    """
    client = OllamaClient(
        base_url="http://localhost:11434",
        model="qwen2.5:7b",
        timeout=120,
        max_retries=2,
    )
    yield client
    await client.close()


@pytest_asyncio.fixture
async def real_async_redis_client():
    """Real AsyncRedis client instance for integration tests.

    Uses database 15 (test database). Skips if Redis is not reachable.
    """
    client = AsyncRedis.from_url("redis://localhost:6379/15", decode_responses=True)
    try:
        await client.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available: {e}")

    # Clear test database before test
    await client.flushdb()

    yield client

    # Clear test database after test
    await client.flushdb()
    await client.aclose()
