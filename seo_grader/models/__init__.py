"""Data models for the SEO Grader Service."""
from .metadata import CamelModel, VideoMetadata
from .analysis import (
    FrozenCamelModel, GradingDetails, CompetitiveAudit, AnalysisResult,
    SavedGrading, SuggestionItem, IntelligenceSource, IntelligenceResult,
    ChatMessage, ThemePreference
)
from .session import SessionState, SessionSnapshot
from .requests import (
    MetadataUpdateRequest, AddTagRequest, AppendSectionRequest,
    IntelligenceRequest, ChatRequest, ThemeRequest
)
from .responses import (
    ResponseMetadata, ErrorDetails, ErrorInfo, SuccessResponse, ErrorResponse,
    TagState, SuggestionsData, DependencyStatus, HealthMetrics, HealthData
)

__all__ = [
    "CamelModel", "VideoMetadata",
    "FrozenCamelModel", "GradingDetails", "CompetitiveAudit", "AnalysisResult",
    "SavedGrading", "SuggestionItem", "IntelligenceSource", "IntelligenceResult",
    "ChatMessage", "ThemePreference",
    "SessionState", "SessionSnapshot",
    "MetadataUpdateRequest", "AddTagRequest", "AppendSectionRequest",
    "IntelligenceRequest", "ChatRequest", "ThemeRequest",
    "ResponseMetadata", "ErrorDetails", "ErrorInfo", "SuccessResponse", "ErrorResponse",
    "TagState", "SuggestionsData", "DependencyStatus", "HealthMetrics", "HealthData"
]
