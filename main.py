"""Entry point for the SEO Grader Service."""

if __name__ == "__main__":
    import uvicorn
    from seo_grader.core.config import settings

    print(f"🚀 Starting {settings.api_title} v{settings.api_version}")
    print(f"🤖 Grading model: {settings.grading_model}")
    print(f"💾 Storage: {settings.storage_backend} ({settings.storage_dir})")
    print(f"📝 Log level: {settings.log_level}")

    uvicorn.run(
        "seo_grader.main:app",  # Use string import for hot reload
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
