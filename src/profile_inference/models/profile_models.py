"""
Profile data models.

These models carry the structured profile produced from an LLM response.
Schema conformance is checked by the StructuredParser before a ProfileDraft
is built; the models themselves stay lenient on score range so that the
consistency layer can sanitize out-of-range values instead of rejecting them.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from profile_inference.models.enums import AnalysisMode, MacroCategory
from profile_inference.models.generation_metadata import RetryMetadata


class ValueOrientation(BaseModel):
    """
    A single bipolar-label score.

    Positive scores lean towards the label's right phrase, negative scores
    towards its left phrase.
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Canonical label id (or opaque string if unknown)")
    score: float = Field(..., description="Position on the axis, sanitized into [-1, 1]")


class Evidence(BaseModel):
    """A quote from the user's content with the model's reading of it."""

    model_config = ConfigDict(frozen=True)

    quote: str
    analysis: str
    source_title: str
    source_id: Optional[str] = None


class ProfileDraft(BaseModel):
    """
    Transient profile produced for one request.

    `reasoning` and `evidence` are populated in balanced/deep mode only;
    fast-mode drafts keep both as None.
    """

    model_config = ConfigDict(frozen=True)

    nickname: str = ""
    topic_classification: str = "Unknown"
    reasoning: Optional[str] = None
    value_orientation: list[ValueOrientation] = Field(default_factory=list)
    summary: str = ""
    evidence: Optional[list[Evidence]] = None

    def label_ids(self) -> list[str]:
        """Labels in draft order."""
        return [vo.label for vo in self.value_orientation]

    def evidence_text(self) -> str:
        """All evidence quotes and analyses joined into one lower-cased string."""
        if not self.evidence:
            return ""
        return " ".join(f"{e.quote} {e.analysis}" for e in self.evidence).lower()

    def to_output(self) -> dict[str, Any]:
        """Serialize in the wire schema (None fields omitted)."""
        return self.model_dump(exclude_none=True)


class ProfileResult(BaseModel):
    """Profile plus generation audit data, as returned by the orchestrator."""

    profile: ProfileDraft
    category: MacroCategory
    mode: AnalysisMode
    locale: str
    metadata: RetryMetadata
    degraded: bool = Field(
        default=False,
        description="True when the provider refused the content and a placeholder profile was returned",
    )
