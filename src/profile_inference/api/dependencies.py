"""
FastAPI dependency injection for the profile inference layer.

Provides singleton instances of expensive resources (LLM client, prompt
builder, orchestrator) and factory functions for per-request components.
"""

from functools import lru_cache

from fastapi import Depends

from profile_inference.config import Settings, settings
from profile_inference.llm.base_client import BaseLLMClient
from profile_inference.llm.ollama_client import OllamaClient
from profile_inference.llm.openai_client import OpenAICompatibleClient
from profile_inference.llm.prompt_builder import PromptBuilder, get_prompt_builder
from profile_inference.orchestrator import ProfileOrchestrator
from profile_inference.persistence.redis_client import RedisClient
from profile_inference.persistence.repository import ProfileRepository


def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


def create_llm_client(config: Settings) -> BaseLLMClient:
    """
    Build the transport selected by LLM_PROVIDER.

    Args:
        config: Application settings

    Returns:
        OpenAICompatibleClient or OllamaClient

    Raises:
        ValueError: Unknown provider
    """
    provider = config.LLM_PROVIDER.lower()
    common = dict(
        timeout=config.LLM_TIMEOUT_SECONDS,
        temperature=config.LLM_TEMPERATURE,
        max_tokens=config.LLM_MAX_TOKENS,
    )
    if provider == "openai":
        return OpenAICompatibleClient(
            base_url=config.OPENAI_BASE_URL,
            api_key=config.OPENAI_API_KEY,
            model=config.OPENAI_MODEL,
            **common,
        )
    if provider == "ollama":
        return OllamaClient(base_url=config.OLLAMA_BASE_URL, model=config.OLLAMA_MODEL, **common)
    raise ValueError(f"Unsupported LLM provider: {config.LLM_PROVIDER}")


@lru_cache()
def get_llm_client() -> BaseLLMClient:
    """
    Get singleton LLM client with connection pooling.

    The client maintains an internal connection pool for efficiency.

    Returns:
        BaseLLMClient for the configured provider
    """
    return create_llm_client(settings)


def get_builder() -> PromptBuilder:
    """Shared prompt builder (templates are loaded once)."""
    return get_prompt_builder()


@lru_cache()
def get_orchestrator() -> ProfileOrchestrator:
    """
    Get singleton orchestrator.

    The orchestrator is stateless per request; all heavy resources it holds
    (client, builder) are singletons themselves.
    """
    return ProfileOrchestrator(get_llm_client(), get_prompt_builder())


def get_repository(
    config: Settings = Depends(get_settings),
) -> ProfileRepository:
    """
    Create profile repository on the shared Redis pool.

    Args:
        config: Application settings (injected)

    Returns:
        ProfileRepository instance
    """
    return ProfileRepository(RedisClient.get_client(config), ttl_seconds=config.PROFILE_TTL_SECONDS)
