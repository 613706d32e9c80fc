"""API module initialization."""
from .health import router as health_router
from .draft import router as draft_router
from .analysis import router as analysis_router
from .history import router as history_router
from .assistant import router as assistant_router

__all__ = ["health_router", "draft_router", "analysis_router", "history_router", "assistant_router"]
