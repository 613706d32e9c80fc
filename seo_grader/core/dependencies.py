"""Dependency injection setup for FastAPI."""
from functools import lru_cache
from fastapi import Security
from fastapi.security import APIKeyHeader

from .config import settings
from .exceptions import APIKeyInvalidError, ConfigurationError
from seo_grader.services import (
    AnalysisSession, DraftHistoryStore, FileKeyValueStore, GradingService,
    KeyValueStore, MemoryKeyValueStore, StrategyChatService
)

# Security dependency
api_key_header = APIKeyHeader(name="x-api-key")

# Service instances cache
@lru_cache()
def get_key_value_store() -> KeyValueStore:
    """Get the configured key/value backend."""
    if settings.storage_backend == "memory":
        return MemoryKeyValueStore()
    if settings.storage_backend == "file":
        return FileKeyValueStore(settings.storage_dir)
    raise ConfigurationError("STORAGE_BACKEND", f"Unknown backend '{settings.storage_backend}'")

@lru_cache()
def get_draft_history_store() -> DraftHistoryStore:
    """Get DraftHistoryStore instance."""
    return DraftHistoryStore(get_key_value_store())

@lru_cache()
def get_grading_service() -> GradingService:
    """Get GradingService instance."""
    return GradingService()

@lru_cache()
def get_strategy_chat_service() -> StrategyChatService:
    """Get StrategyChatService instance."""
    return StrategyChatService()

@lru_cache()
def get_analysis_session() -> AnalysisSession:
    """Get the process-wide AnalysisSession."""
    return AnalysisSession(
        get_draft_history_store(),
        get_grading_service(),
        get_strategy_chat_service()
    )

# Authentication dependency
async def verify_api_key(api_key: str = Security(api_key_header)) -> str:
    """Verify API key from request header."""
    if api_key != settings.api_key:
        raise APIKeyInvalidError()
    return api_key
