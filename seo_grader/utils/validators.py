"""Input validation utilities."""
from typing import Optional

from seo_grader.core.exceptions import MissingFieldsError, ValidationError
from seo_grader.models.metadata import VideoMetadata

MAX_NICHE_LENGTH = 200
MAX_CHAT_MESSAGE_LENGTH = 4000

class MetadataValidator:
    """Validation of the draft before it is sent for grading."""

    @staticmethod
    def validate_for_submission(metadata: VideoMetadata) -> None:
        """Raise MissingFieldsError when title or description is blank."""
        missing = metadata.missing_required_fields()
        if missing:
            raise MissingFieldsError(missing)

class TextInputValidator:
    """Validation of free-text inputs."""

    @staticmethod
    def require_text(value: Optional[str], field: str, max_length: int) -> str:
        """Return the stripped value or raise ValidationError."""
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValidationError(f"{field} must not be empty", {"field": field})
        if len(cleaned) > max_length:
            raise ValidationError(
                f"{field} is too long (max {max_length} characters)",
                {"field": field, "max_length": max_length}
            )
        return cleaned

    @staticmethod
    def validate_niche(niche: Optional[str]) -> str:
        """Validate a market intelligence niche."""
        return TextInputValidator.require_text(niche, "niche", MAX_NICHE_LENGTH)

    @staticmethod
    def validate_chat_message(message: Optional[str]) -> str:
        """Validate a strategy assistant message."""
        return TextInputValidator.require_text(message, "message", MAX_CHAT_MESSAGE_LENGTH)
