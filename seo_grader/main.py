"""Main FastAPI application with modular architecture."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from seo_grader.core.config import settings
from seo_grader.core.exceptions import GraderBaseException
from seo_grader.api import (
    analysis_router, assistant_router, draft_router, health_router, history_router
)
from seo_grader.api.health import increment_request_count
from seo_grader.utils.logging import CorrelatedLogger, LoggerSetup
from seo_grader.utils.response_helpers import ResponseHelper

# Setup logging
LoggerSetup.setup_logging()
logger = CorrelatedLogger(__name__)

# Endpoints that require the x-api-key header
PROTECTED_ENDPOINTS = {
    "/preferences/theme": ["put"],
    "/draft": ["patch", "delete"],
    "/draft/tags": ["post"],
    "/draft/description/sections": ["post"],
    "/draft/description/groups/{group_name}": ["post"],
    "/analysis": ["post"],
    "/analysis/rewrite": ["post"],
    "/analysis/rewrite/apply": ["post"],
    "/analysis/reset": ["post"],
    "/history": ["post"],
    "/history/{grading_id}": ["delete"],
    "/history/{grading_id}/load": ["post"],
    "/intelligence": ["post"],
    "/chat": ["post"],
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"{settings.api_title} v{settings.api_version} starting up...")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; grading requests will fail")
    yield
    # Shutdown
    logger.info("Application shutting down...")

# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
    swagger_ui_parameters={
        "defaultModelsExpandDepth": -1,
        "tryItOutEnabled": True,
    }
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def count_requests(request: Request, call_next):
    """Count processed requests for the health metrics."""
    increment_request_count()
    return await call_next(request)

# Configure OpenAPI security scheme
def custom_openapi():
    """Custom OpenAPI configuration with security."""
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi
    openapi_schema = get_openapi(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        routes=app.routes,
    )

    # Add security scheme
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "ApiKeyAuth": {
            "type": "apiKey",
            "in": "header",
            "name": "x-api-key"
        }
    }

    # Apply security to protected endpoints
    for path, methods in PROTECTED_ENDPOINTS.items():
        for method in methods:
            operation = openapi_schema["paths"].get(path, {}).get(method)
            if operation is not None:
                operation["security"] = [{"ApiKeyAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi

# Global exception handler for custom exceptions
@app.exception_handler(GraderBaseException)
async def grader_exception_handler(request, exc: GraderBaseException):
    """Handle custom grader exceptions."""
    return ResponseHelper.create_error_from_exception(exc)

@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    return ResponseHelper.create_error_response(
        error_code="VALIDATION_ERROR",
        message="Invalid request body",
        status_code=422
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions."""
    return ResponseHelper.create_error_response(
        error_code="HTTP_ERROR",
        message=exc.detail,
        status_code=exc.status_code
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}")

    return ResponseHelper.create_error_response(
        error_code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        status_code=500
    )

# Include routers
app.include_router(health_router)
app.include_router(draft_router)
app.include_router(analysis_router)
app.include_router(history_router)
app.include_router(assistant_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "seo_grader.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
