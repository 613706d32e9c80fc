"""
Configuration management for the SEO Grader Service.
Centralizes environment variable handling and application settings.
"""
import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        # API Configuration
        self.api_title = "YouTube SEO Grader Service"
        self.api_description = "Grades video metadata for YouTube SEO with a hosted LLM and keeps drafts and saved reports"
        self.api_version = "1.0.0"
        self.debug_mode = os.getenv("DEBUG_MODE", "false").lower() == "true"

        # Security
        self.api_key = os.getenv("API_KEY", "your-default-api-key-here")
        self.allowed_origins = [
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        # LLM provider
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")
        self.openai_base_url: Optional[str] = os.getenv("OPENAI_BASE_URL") or None
        self.grading_model = os.getenv("GRADING_MODEL", "gpt-4o")
        self.rewrite_model = os.getenv("REWRITE_MODEL", "gpt-4o-mini")
        self.intelligence_model = os.getenv("INTELLIGENCE_MODEL", "gpt-4o")
        self.chat_model = os.getenv("CHAT_MODEL", "gpt-4o")
        self.llm_timeout = int(os.getenv("LLM_TIMEOUT", "60"))  # seconds
        self.llm_temperature = float(os.getenv("LLM_TEMPERATURE", "0.4"))
        self.max_rewrite_recommendations = int(os.getenv("MAX_REWRITE_RECOMMENDATIONS", "10"))

        # Local state
        self.storage_backend = os.getenv("STORAGE_BACKEND", "file").lower()
        self.storage_dir = os.getenv("STORAGE_DIR", ".grader_state")

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")


class StorageKeys:
    """Fixed identifiers of the persisted local records."""

    DRAFT = "yt_boost_grader_draft_v1"
    HISTORY = "yt_boost_grader_saves_v4"
    THEME = "yt_boost_grader_theme"

# Create global settings instance
settings = Settings()
