"""
Data models for the profile inference layer.

Includes:
- Enums (AnalysisMode, MacroCategory, Locale, Platform)
- Profile models (ValueOrientation, Evidence, ProfileDraft, ProfileResult)
- Generation metadata (RetryMetadata)
- LLM models (LLMGenerationRequest, LLMGenerationResponse)
- Content models (UserInfo, ContentItem)
"""

from profile_inference.models.content_models import ContentItem, UserInfo
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory, Platform
from profile_inference.models.generation_metadata import RetryMetadata
from profile_inference.models.llm_models import LLMGenerationRequest, LLMGenerationResponse
from profile_inference.models.profile_models import (
    Evidence,
    ProfileDraft,
    ProfileResult,
    ValueOrientation,
)

__all__ = [
    # Enums
    "AnalysisMode",
    "Locale",
    "MacroCategory",
    "Platform",
    # Profile models
    "ValueOrientation",
    "Evidence",
    "ProfileDraft",
    "ProfileResult",
    # Metadata
    "RetryMetadata",
    # LLM models
    "LLMGenerationRequest",
    "LLMGenerationResponse",
    # Content models
    "UserInfo",
    "ContentItem",
]
