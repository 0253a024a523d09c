"""Integration tests against a live Ollama server.

These tests require a running Ollama server with the model pulled.
Run: docker-compose up ollama
Or: ollama serve (if installed locally)

Tests are skipped if Ollama is not reachable.
"""

import pytest

from profile_inference.llm.prompt_builder import PromptBuilder
from profile_inference.models.enums import AnalysisMode, MacroCategory
from profile_inference.orchestrator import ProfileOrchestrator

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_ollama_health_check(real_ollama_client):
    assert await real_ollama_client.health_check() is True


@pytest.mark.asyncio
async def test_fast_profile_end_to_end(real_ollama_client):
    """A small model may need the corrective retry but must end with a valid profile."""
    orchestrator = ProfileOrchestrator(
        real_ollama_client,
        prompt_builder=PromptBuilder(locale="en-US"),
        timeout_seconds=120,
        default_locale="en-US",
        enable_llm_topic_fallback=False,
    )

    result = await orchestrator.generate_profile(
        "Taxes on small businesses are far too high. The government should get out of the way "
        "and let the free market decide which companies survive.",
        mode=AnalysisMode.FAST,
    )

    assert result.category is MacroCategory.ECONOMY
    assert result.metadata.total_attempts in (1, 2)
    assert result.profile.evidence is None
    for vo in result.profile.value_orientation:
        assert -1.0 <= vo.score <= 1.0
