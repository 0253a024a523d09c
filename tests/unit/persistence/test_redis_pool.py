"""
Unit tests for Redis client and connection pooling.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from profile_inference.config import Settings
from profile_inference.persistence.redis_client import RedisClient


@pytest.fixture
def mock_settings():
    """Mock settings for testing."""
    settings = MagicMock(spec=Settings)
    settings.REDIS_URL = "redis://localhost:6379/0"
    settings.REDIS_MAX_CONNECTIONS = 50
    return settings


@pytest.fixture(autouse=True)
def reset_pool():
    """Reset the shared pool before each test."""
    RedisClient._pool = None
    yield
    RedisClient._pool = None


def test_get_client_creates_pool_once(mock_settings):
    """The pool is created on first call and reused afterwards."""
    with patch("profile_inference.persistence.redis_client.ConnectionPool") as mock_pool:
        mock_pool.from_url.return_value = MagicMock()

        RedisClient.get_client(mock_settings)
        RedisClient.get_client(mock_settings)

        mock_pool.from_url.assert_called_once_with(
            mock_settings.REDIS_URL,
            max_connections=mock_settings.REDIS_MAX_CONNECTIONS,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
            retry_on_timeout=True,
        )


@pytest.mark.asyncio
async def test_close_pool():
    """Closing disconnects and forgets the pool."""
    mock_pool = MagicMock()
    mock_pool.disconnect = AsyncMock(return_value=None)
    RedisClient._pool = mock_pool

    await RedisClient.close_pool()

    mock_pool.disconnect.assert_awaited_once()
    assert RedisClient._pool is None


@pytest.mark.asyncio
async def test_close_pool_without_pool_is_noop():
    await RedisClient.close_pool()
    assert RedisClient._pool is None


@pytest.mark.asyncio
async def test_ping_success(mock_settings):
    client = MagicMock()
    client.ping = AsyncMock(return_value=True)

    with patch.object(RedisClient, "get_client", return_value=client):
        assert await RedisClient.ping(mock_settings) is True


@pytest.mark.asyncio
async def test_ping_failure_returns_false(mock_settings):
    client = MagicMock()
    client.ping = AsyncMock(side_effect=ConnectionError("Connection refused"))

    with patch.object(RedisClient, "get_client", return_value=client):
        assert await RedisClient.ping(mock_settings) is False
