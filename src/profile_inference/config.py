"""
Configuration settings for the profile inference layer.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Profile Inference Layer"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # === Locale & Analysis ===
    LOCALE: str = "en-US"  # en-US | zh-CN
    ANALYSIS_MODE: str = "balanced"  # fast | balanced | deep
    ENABLE_LLM_TOPIC_FALLBACK: bool = False  # Ask the LLM when keywords yield "general"

    # === LLM Provider ===
    LLM_PROVIDER: str = "openai"  # openai (any OpenAI-compatible API) | ollama
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OLLAMA_BASE_URL: str = "http://ollama:11434"
    OLLAMA_MODEL: str = "qwen2.5:7b"

    # === LLM Generation Parameters ===
    LLM_TIMEOUT_SECONDS: int = 600  # Upper bound for one invocation
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 2048

    # === Retry ===
    MAX_CORRECTIVE_RETRIES: int = 1  # Format/schema feedback retries (never more than one)
    RETRY_FEEDBACK_MAX_CHARS: int = 600  # Fast mode truncates error feedback to this length

    # === Prompt ===
    PROMPT_TEMPLATES_DIR: Optional[str] = None  # None = templates shipped with the package
    USER_TEXT_LIMIT: int = 20000  # chars sent to the LLM as user text

    # === Redis / Persistence ===
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50
    PROFILE_TTL_SECONDS: int = 7 * 86400  # Stored profiles expire after a week

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
