"""Health check and monitoring endpoints."""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from seo_grader.core.config import settings
from seo_grader.core.dependencies import get_analysis_session
from seo_grader.models.responses import HealthData, DependencyStatus, HealthMetrics
from seo_grader.services import AnalysisSession, FileKeyValueStore

router = APIRouter(tags=["health"])

# Process-local statistics
service_start_time = datetime.now()
request_count = 0

@router.get("/")
async def root():
    """Root endpoint."""
    return {"message": "SEO Grader Service is running"}

@router.get("/health")
async def health_check(session: AnalysisSession = Depends(get_analysis_session)):
    """
    Health check endpoint with dependency status and metrics
    """
    uptime = int((datetime.now() - service_start_time).total_seconds())

    backend = session.store.store
    dependencies = DependencyStatus(
        openai="healthy" if session.grading_service.is_configured else "not_configured",
        storage=f"file:{backend.directory}" if isinstance(backend, FileKeyValueStore) else "memory"
    )

    health_data = HealthData(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=settings.api_version,
        dependencies=dependencies,
        metrics=HealthMetrics(
            uptime_seconds=uptime,
            requests_processed=request_count,
            saved_gradings=len(session.history)
        )
    )

    return JSONResponse(
        status_code=200,
        content=health_data.model_dump()
    )

def increment_request_count():
    """Increment total request count."""
    global request_count
    request_count += 1
