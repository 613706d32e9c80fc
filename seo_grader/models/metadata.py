"""Video metadata models."""
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, as the browser editor stores them."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoMetadata(CamelModel):
    """Editable metadata of one video (the draft)."""
    title: str = ""
    description: str = ""
    tags: str = ""  # comma separated, see TagReconciler
    duration: str = ""  # display text only, never parsed
    script: str = ""
    competitor_url: str = ""
    competitor_notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        """Stored drafts may carry nulls for optional fields."""
        return "" if v is None else v

    def has_competitor_context(self) -> bool:
        """Whether competitor URL or notes were provided."""
        return bool(self.competitor_url.strip() or self.competitor_notes.strip())

    def missing_required_fields(self) -> list[str]:
        """Names of the required fields that are blank."""
        missing = []
        if not self.title.strip():
            missing.append("title")
        if not self.description.strip():
            missing.append("description")
        return missing
