"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
from typing import Any, Dict

import pytest

from profile_inference.config import Settings
from profile_inference.models.profile_models import Evidence, ProfileDraft, ValueOrientation


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.LOCALE = "zh-CN"
    """
    return Settings(
        # === Application ===
        APP_NAME="Profile Inference Layer (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Analysis ===
        LOCALE="en-US",
        ANALYSIS_MODE="balanced",
        ENABLE_LLM_TOPIC_FALLBACK=False,

        # === LLM ===
        LLM_PROVIDER="openai",
        OPENAI_BASE_URL="http://llm.test/v1",
        OPENAI_API_KEY="test-key",
        OPENAI_MODEL="gpt-4o-mini",
        LLM_TIMEOUT_SECONDS=30,

        # === Redis ===
        REDIS_URL="redis://localhost:6379/0",
        REDIS_MAX_CONNECTIONS=10,

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def balanced_payload() -> Dict[str, Any]:
    """Schema-valid balanced/deep model output (evidence supports 'authority')."""
    return {
        "nickname": "river_walker",
        "topic_classification": "Politics",
        "reasoning": "The author repeatedly argues for individual liberty and distrusts state control.",
        "value_orientation": [
            {"label": "authority", "score": -0.8},
            {"label": "market_vs_gov", "score": 0.5},
        ],
        "summary": "The user values personal freedom and is wary of concentrated power.",
        "evidence": [
            {
                "quote": "Nobody should need permission from the state to live their life.",
                "analysis": "A libertarian rejection of state control.",
                "source_title": "On permits",
                "source_id": "a-1",
            }
        ],
    }


@pytest.fixture
def fast_payload() -> Dict[str, Any]:
    """Schema-valid fast-mode model output."""
    return {
        "nickname": "river_walker",
        "topic_classification": "Politics",
        "value_orientation": [{"label": "ideology", "score": 0.4}],
        "summary": "A measured commentator on public policy.",
    }


@pytest.fixture
def balanced_json(balanced_payload: Dict[str, Any]) -> str:
    return json.dumps(balanced_payload)


@pytest.fixture
def sample_draft() -> ProfileDraft:
    """Balanced-mode draft with one strongly scored label and supporting evidence."""
    return ProfileDraft(
        nickname="river_walker",
        topic_classification="Politics",
        reasoning="Argues for deregulation.",
        value_orientation=[
            ValueOrientation(label="authority", score=0.8),
            ValueOrientation(label="market_vs_gov", score=0.5),
        ],
        summary="The user writes about public order.",
        evidence=[
            Evidence(
                quote="We need a firm hand to keep order.",
                analysis="Authoritarian preference for order.",
                source_title="Thread",
            )
        ],
    )
