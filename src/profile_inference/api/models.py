"""
API-specific request and response models for FastAPI endpoints.

These models wrap the core domain models (ProfileDraft, ProfileResult)
with API-specific metadata and status information.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from profile_inference.models.content_models import ContentItem, UserInfo
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory, Platform
from profile_inference.models.profile_models import ProfileDraft, ProfileResult


class ClassifyRequest(BaseModel):
    """Request for topic classification."""

    text: str = Field(description="Text to classify")
    use_llm: bool = Field(
        default=False,
        description="Ask the LLM when keyword matching yields 'general'",
    )


class ClassifyResponse(BaseModel):
    """Response for topic classification."""

    category: MacroCategory
    name: str = Field(description="Localized display name")
    method: str = Field(description="keyword or llm", examples=["keyword", "llm"])


class ProfileRequest(BaseModel):
    """
    Request for profile generation.

    Either `text` (already formatted) or `platform` + `items` (formatted
    server-side) must be given.
    """

    text: Optional[str] = Field(default=None, description="Preformatted user content")
    platform: Optional[Platform] = Field(default=None, description="Source platform of `items`")
    items: list[ContentItem] = Field(default_factory=list, description="Scraped content items")
    user: Optional[UserInfo] = Field(default=None, description="Public identity of the user")

    user_id: Optional[str] = Field(default=None, description="Cache key part; no caching without it")
    context: Optional[str] = Field(default=None, description="Cache key part (defaults to the category)")
    use_cache: bool = Field(default=True, description="Return a stored profile when available")

    category: Optional[MacroCategory] = Field(default=None, description="Skip classification")
    mode: Optional[AnalysisMode] = None
    locale: Optional[Locale] = None
    reconcile: bool = Field(
        default=False,
        description="Align the summary with the scores before returning",
    )

    @model_validator(mode="after")
    def _require_content(self) -> "ProfileRequest":
        if self.text is None and self.platform is None:
            raise ValueError("either 'text' or 'platform' (with 'items') is required")
        return self


class ProfileResponse(BaseModel):
    """Response for profile generation and lookup."""

    status: str = Field(description="Request status", examples=["success", "degraded"])
    result: ProfileResult
    cached: bool = Field(default=False, description="Served from the profile store")


class ReconcileRequest(BaseModel):
    """Request to align a profile's summary with its scores."""

    profile: ProfileDraft
    mode: AnalysisMode = AnalysisMode.BALANCED
    locale: Optional[Locale] = None


class ConflictInfo(BaseModel):
    label: str
    conflict: bool
    expected: str
    opposite: str


class ReconcileResponse(BaseModel):
    """Reconciled profile plus the conflicts found before reconciliation."""

    profile: ProfileDraft
    conflicts: list[ConflictInfo] = Field(default_factory=list)
    report: str = Field(description="Plain-text consistency report of the reconciled profile")


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy", "degraded"],
    )
    version: str = Field(description="Service version", examples=["0.1.0"])
    services: dict[str, str] = Field(
        description="Service-specific health status",
        examples=[{"llm": "ok", "redis": "ok"}],
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="Health check timestamp (UTC)",
    )
