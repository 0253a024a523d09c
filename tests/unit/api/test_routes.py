"""
Unit tests for the FastAPI routes.

Dependencies are overridden with a real orchestrator on a mocked LLM
transport and a repository on a mocked Redis client.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from profile_inference.api.dependencies import (
    get_llm_client,
    get_orchestrator,
    get_repository,
    get_settings,
)
from profile_inference.llm.exceptions import (
    LLMConnectionError,
    LLMContentFilterError,
    LLMTimeoutError,
)
from profile_inference.main import app
from profile_inference.models.enums import MacroCategory
from profile_inference.orchestrator import ProfileOrchestrator
from profile_inference.persistence.repository import ProfileRepository
from profile_inference.topics.classifier import category_name

POLITICS_TEXT = "政府应该减少对市场的干预，让个人有更多自由。"


@pytest.fixture
def orchestrator(mock_llm_client, prompt_builder):
    return ProfileOrchestrator(
        mock_llm_client,
        prompt_builder=prompt_builder,
        timeout_seconds=5,
        default_mode="balanced",
        default_locale="en-US",
        enable_llm_topic_fallback=False,
    )


@pytest.fixture
def client(orchestrator, mock_llm_client, mock_async_redis, test_settings):
    """TestClient with all external resources replaced."""
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_repository] = lambda: ProfileRepository(mock_async_redis, ttl_seconds=3600)
    app.dependency_overrides[get_llm_client] = lambda: mock_llm_client
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestClassifyEndpoint:
    def test_keyword_classification(self, client, mock_llm_client):
        response = client.post("/classify", json={"text": "The stock market crashed again"})

        assert response.status_code == 200
        data = response.json()
        assert data["category"] == "economy"
        assert data["method"] == "keyword"
        assert data["name"] == category_name(MacroCategory.ECONOMY, "en-US")
        mock_llm_client.invoke.assert_not_called()

    def test_llm_fallback(self, client, mock_llm_client):
        response = client.post("/classify", json={"text": "quiet thoughts", "use_llm": True})

        assert response.status_code == 200
        assert response.json()["category"] == "politics"
        assert response.json()["method"] == "llm"
        mock_llm_client.invoke.assert_awaited_once()


class TestProfileEndpoints:
    """Test suite for profile generation and lookup."""

    def test_generate_profile(self, client, mock_async_redis):
        response = client.post("/profiles", json={"text": POLITICS_TEXT})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["cached"] is False
        assert data["result"]["category"] == "politics"
        assert data["result"]["mode"] == "balanced"
        assert data["result"]["metadata"]["total_attempts"] == 1
        # No user_id, nothing stored
        mock_async_redis.setex.assert_not_called()

    def test_generate_and_store(self, client, mock_async_redis):
        response = client.post(
            "/profiles",
            json={"text": POLITICS_TEXT, "user_id": "u1", "category": "politics", "mode": "fast"},
        )

        assert response.status_code == 200
        mock_async_redis.get.assert_awaited_once_with("profile:u1:politics")
        assert mock_async_redis.setex.await_args.args[0] == "profile:u1:politics"

    def test_cache_hit_skips_generation(self, client, mock_llm_client, mock_async_redis):
        generated = client.post("/profiles", json={"text": POLITICS_TEXT}).json()["result"]
        mock_llm_client.generate.reset_mock()
        mock_async_redis.get.return_value = json.dumps(generated)

        response = client.post("/profiles", json={"text": POLITICS_TEXT, "user_id": "u1", "context": "politics"})

        assert response.status_code == 200
        assert response.json()["cached"] is True
        mock_llm_client.generate.assert_not_called()

    def test_generate_from_platform_items(self, client, mock_llm_client):
        response = client.post(
            "/profiles",
            json={
                "platform": "reddit",
                "user": {"name": "river_walker"},
                "items": [
                    {
                        "id": "a-1",
                        "title": "On permits",
                        "content": "<p>Nobody should need permission from the state.</p>",
                        "is_relevant": True,
                    }
                ],
            },
        )

        assert response.status_code == 200
        request = mock_llm_client.generate.await_args.args[0]
        assert "Nobody should need permission from the state." in request.user_text

    def test_missing_content_rejected(self, client):
        response = client.post("/profiles", json={"mode": "fast"})
        assert response.status_code == 422

    def test_reconcile_option(self, client):
        response = client.post("/profiles", json={"text": POLITICS_TEXT, "reconcile": True})

        assert response.status_code == 200
        assert "strong Libertarian" in response.json()["result"]["profile"]["summary"]

    def test_content_filter_returns_degraded(self, client, mock_llm_client):
        mock_llm_client.generate = AsyncMock(side_effect=LLMContentFilterError("refused"))

        response = client.post("/profiles", json={"text": POLITICS_TEXT})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["result"]["degraded"] is True
        assert data["result"]["profile"]["value_orientation"] == []

    def test_get_stored_profile(self, client, mock_async_redis):
        generated = client.post("/profiles", json={"text": POLITICS_TEXT}).json()["result"]
        mock_async_redis.get.return_value = json.dumps(generated)

        response = client.get("/profiles/u1/politics")

        assert response.status_code == 200
        assert response.json()["cached"] is True
        assert response.json()["result"]["category"] == "politics"

    def test_get_missing_profile(self, client):
        response = client.get("/profiles/u1/politics")

        assert response.status_code == 404
        assert response.json()["detail"] == "Profile not found"


class TestReconcileEndpoint:
    def test_conflict_resolved(self, client, sample_draft):
        profile = sample_draft.model_dump()
        profile["summary"] = "A Libertarian at heart."

        response = client.post("/profiles/reconcile", json={"profile": profile, "mode": "balanced"})

        assert response.status_code == 200
        data = response.json()
        authority = next(c for c in data["conflicts"] if c["label"] == "authority")
        assert authority["conflict"] is True
        assert authority["expected"] == "Authoritarian"
        summary = data["profile"]["summary"]
        assert summary.startswith("[Summary adjusted for consistency with scores]")
        assert "Libertarian" not in summary
        assert "strong Authoritarian" in summary
        assert data["report"].startswith("=== Consistency Report ===")


class TestErrorHandling:
    """Domain errors map to structured error responses."""

    def test_timeout_maps_to_504(self, client, mock_llm_client):
        mock_llm_client.generate = AsyncMock(side_effect=LLMTimeoutError("timed out"))

        response = client.post("/profiles", json={"text": POLITICS_TEXT})

        assert response.status_code == 504
        assert response.json()["error"] == "llm_timeout"

    def test_connection_error_maps_to_502(self, client, mock_llm_client):
        mock_llm_client.generate = AsyncMock(side_effect=LLMConnectionError("refused"))

        response = client.post("/profiles", json={"text": POLITICS_TEXT})

        assert response.status_code == 502
        assert response.json()["error"] == "llm_connection_failed"

    def test_generation_failure_maps_to_422(self, client, mock_llm_client, fast_payload, llm_response_factory):
        mock_llm_client.generate = AsyncMock(return_value=llm_response_factory(json.dumps(fast_payload)))

        response = client.post("/profiles", json={"text": POLITICS_TEXT, "mode": "deep"})

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "generation_failed"
        assert data["details"]["attempts"] == 2

    def test_request_id_header(self, client):
        response = client.post("/classify", json={"text": "hello"}, headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestHealthEndpoint:
    @pytest.mark.parametrize(
        "llm_ok,redis_ok,expected",
        [
            (True, True, "healthy"),
            (True, False, "degraded"),
            (False, True, "unhealthy"),
        ],
    )
    def test_health(self, client, mock_llm_client, llm_ok, redis_ok, expected):
        mock_llm_client.health_check = AsyncMock(return_value=llm_ok)

        with patch("profile_inference.api.routes.RedisClient.ping", AsyncMock(return_value=redis_ok)):
            response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == expected
        assert data["version"] == "0.1.0"
        assert data["services"]["llm"] == ("ok" if llm_ok else "unavailable")
