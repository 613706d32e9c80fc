"""Request models for the SEO Grader Service."""
from typing import Optional
from pydantic import BaseModel

from .metadata import CamelModel
from .analysis import ThemePreference

class MetadataUpdateRequest(CamelModel):
    """Partial update of the draft; omitted fields are left unchanged."""
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[str] = None
    duration: Optional[str] = None
    script: Optional[str] = None
    competitor_url: Optional[str] = None
    competitor_notes: Optional[str] = None

class AddTagRequest(BaseModel):
    """Request model for adding a recommended tag to the draft."""
    tag: str

class AppendSectionRequest(BaseModel):
    """Request model for appending a template block to the description."""
    text: str

class IntelligenceRequest(BaseModel):
    """Request model for a market intelligence report."""
    niche: str

class ChatRequest(BaseModel):
    """Request model for one strategy assistant turn."""
    message: str

class ThemeRequest(BaseModel):
    """Request model for the display theme preference."""
    theme: ThemePreference
