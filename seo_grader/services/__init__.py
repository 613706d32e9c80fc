"""Service layer modules for the SEO Grader Service."""
from .storage_service import (
    KeyValueStore, MemoryKeyValueStore, FileKeyValueStore, DraftHistoryStore
)
from .grading_service import GradingService
from .strategy_chat import StrategyChatService
from .analysis_session import AnalysisSession

__all__ = [
    "KeyValueStore", "MemoryKeyValueStore", "FileKeyValueStore", "DraftHistoryStore",
    "GradingService", "StrategyChatService", "AnalysisSession"
]
