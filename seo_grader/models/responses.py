"""Response models for the SEO Grader Service."""
from typing import Any, Optional, List, Dict
from pydantic import BaseModel, ConfigDict

from .analysis import FrozenCamelModel, SuggestionItem

class ResponseMetadata(BaseModel):
    """Standard response metadata."""
    request_id: str
    api_version: str = "1.0.0"
    timestamp: Optional[str] = None
    processing_time_ms: Optional[int] = None

class ErrorDetails(BaseModel):
    """Detailed error information; keys depend on the error code."""
    model_config = ConfigDict(extra="allow")

    reason: Optional[str] = None

class ErrorInfo(BaseModel):
    """Error information structure."""
    code: str
    message: str
    details: Optional[ErrorDetails] = None

class SuccessResponse(BaseModel):
    """Standard success response."""
    success: bool = True
    data: Any
    metadata: ResponseMetadata

class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: ErrorInfo
    metadata: ResponseMetadata

class TagState(FrozenCamelModel):
    """Recommended tag and whether the draft already carries it."""
    tag: str
    added: bool

class SuggestionsData(FrozenCamelModel):
    """Display-ready suggestions for the current analysis."""
    groups: Optional[Dict[str, List[SuggestionItem]]] = None
    tags: List[TagState] = []

class DependencyStatus(BaseModel):
    """Service dependency status."""
    openai: str
    storage: str

class HealthMetrics(BaseModel):
    """Service health metrics."""
    uptime_seconds: int
    requests_processed: int
    saved_gradings: int

class HealthData(BaseModel):
    """Complete health check response."""
    status: str
    timestamp: str
    version: str
    dependencies: DependencyStatus
    metrics: HealthMetrics
