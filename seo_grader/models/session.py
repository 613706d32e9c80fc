"""Analysis session state models."""
from enum import Enum
from typing import List, Optional

from .metadata import VideoMetadata
from .analysis import AnalysisResult, ChatMessage, FrozenCamelModel, IntelligenceResult


class SessionState(str, Enum):
    """Lifecycle of the analysis session."""
    IDLE = "idle"
    SUBMITTING = "submitting"
    GRADED = "graded"
    FAILED = "failed"
    REWRITING = "rewriting"


class SessionSnapshot(FrozenCamelModel):
    """Read-only view of the session handed to the HTTP layer."""
    state: SessionState
    metadata: VideoMetadata
    analysis: Optional[AnalysisResult] = None
    improved_description: Optional[str] = None
    intelligence: Optional[IntelligenceResult] = None
    error: Optional[str] = None
    is_already_saved: bool = False
    history_count: int = 0
    chat_history: List[ChatMessage] = []
