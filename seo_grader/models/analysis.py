"""Grading report models."""
from enum import Enum
from typing import List, Literal, Optional
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from .metadata import CamelModel, VideoMetadata


class FrozenCamelModel(CamelModel):
    """Immutable camelCase model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class GradingDetails(FrozenCamelModel):
    """Score and advice for one part of the metadata (title, description or tags)."""
    score: int = Field(..., ge=0, le=100)
    feedback: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    specific_tags: Optional[List[str]] = None
    structural_suggestions: Optional[List[str]] = None  # "Category | Title | Suggestion | Template: [...]"


class CompetitiveAudit(FrozenCamelModel):
    """Comparison against a competitor video."""
    user_strengths: List[str] = Field(default_factory=list)
    competitor_strengths: List[str] = Field(default_factory=list)
    gap_analysis: str = ""
    strategic_move: str = ""


class AnalysisResult(FrozenCamelModel):
    """Complete SEO grading report."""
    overall_score: int = Field(..., ge=0, le=100)
    summary: str
    title: GradingDetails
    description: GradingDetails
    tags: GradingDetails
    competitive_audit: Optional[CompetitiveAudit] = None

    def all_recommendations(self) -> List[str]:
        """Title, description and tag recommendations in that order."""
        return [
            *self.title.recommendations,
            *self.description.recommendations,
            *self.tags.recommendations,
        ]


class SavedGrading(FrozenCamelModel):
    """Snapshot of one metadata/report pair kept in history."""
    id: str
    timestamp: int  # epoch milliseconds
    metadata: VideoMetadata
    analysis: AnalysisResult


class SuggestionItem(FrozenCamelModel):
    """One parsed structural suggestion."""
    category: str
    title: str
    description: str
    template: str = ""
    original_index: int


class IntelligenceSource(FrozenCamelModel):
    """Web citation backing a market intelligence report."""
    uri: str
    title: Optional[str] = None


class IntelligenceResult(FrozenCamelModel):
    """Search-grounded niche report."""
    text: str
    sources: List[IntelligenceSource] = Field(default_factory=list)


class ChatMessage(FrozenCamelModel):
    """One turn of the strategy conversation."""
    role: Literal["user", "model"]
    text: str


class ThemePreference(str, Enum):
    """Display theme of the editor."""
    LIGHT = "light"
    DARK = "dark"
