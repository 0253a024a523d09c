"""
LLM-specific data models for the request/response cycle.

These models are internal to the LLM layer and describe the raw exchange with
a chat-style provider (OpenAI-compatible APIs, Ollama). They are separate from
the profile models so the transport can change without touching parsing.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class LLMGenerationRequest(BaseModel):
    """
    Provider-agnostic generation request.

    The system prompt and the user text travel as separate chat messages.
    """

    model_config = ConfigDict(frozen=True)

    system_prompt: str = Field(..., description="Rendered system prompt")
    user_text: str = Field(..., description="User content to analyze")
    model: str = Field(..., description="Model name/identifier (e.g., 'gpt-4o-mini')")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(default=2048, ge=1, le=32768, description="Maximum tokens to generate")
    json_mode: bool = Field(
        default=True,
        description="Ask the provider for a JSON object response when supported",
    )
    seed: Optional[int] = Field(default=None, description="Random seed for reproducibility")


class LLMGenerationResponse(BaseModel):
    """
    Raw provider response plus metadata.

    `content` is free text; it is repaired and validated downstream.
    """

    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Generated text (usually JSON, possibly malformed)")
    model_version: str = Field(..., description="Model reported by the provider")
    finish_reason: str = Field(..., description="Why generation stopped: 'stop', 'length', ...")
    usage_tokens: Optional[int] = Field(default=None, description="Total tokens used")
    prompt_tokens: Optional[int] = Field(default=None, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Generation latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (for debugging)",
    )
