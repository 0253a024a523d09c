"""
LLM client abstraction and implementations.

Components:
- BaseLLMClient: Abstract base class for LLM transports
- OpenAICompatibleClient: Any OpenAI-compatible chat completions API
- OllamaClient: Ollama inference server
- PromptBuilder: Renders system, retry and topic prompts
- text_utils: Text processing utilities (fences, truncation)
- exceptions: LLM-specific exceptions
"""

from profile_inference.llm.base_client import BaseLLMClient
from profile_inference.llm.exceptions import (
    LLMClientError,
    LLMConnectionError,
    LLMContentFilterError,
    LLMGenerationError,
    LLMModelNotAvailableError,
    LLMRateLimitError,
    LLMTimeoutError,
    is_content_filter_message,
)
from profile_inference.llm.ollama_client import OllamaClient
from profile_inference.llm.openai_client import OpenAICompatibleClient
from profile_inference.llm.prompt_builder import PromptBuilder, get_prompt_builder

__all__ = [
    "BaseLLMClient",
    "OpenAICompatibleClient",
    "OllamaClient",
    "PromptBuilder",
    "get_prompt_builder",
    "LLMClientError",
    "LLMConnectionError",
    "LLMContentFilterError",
    "LLMGenerationError",
    "LLMModelNotAvailableError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "is_content_filter_message",
]
