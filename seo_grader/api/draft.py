"""Draft editing and preference endpoints."""
from fastapi import APIRouter, Depends, Security

from seo_grader.core.dependencies import get_analysis_session, verify_api_key
from seo_grader.models.requests import (
    AddTagRequest, AppendSectionRequest, MetadataUpdateRequest, ThemeRequest
)
from seo_grader.services import AnalysisSession
from seo_grader.utils.response_helpers import ResponseHelper

router = APIRouter(tags=["draft"])


@router.get("/preferences/theme")
async def get_theme(session: AnalysisSession = Depends(get_analysis_session)):
    """Get the persisted display theme."""
    theme = session.store.load_theme()
    return ResponseHelper.create_success_response({"theme": theme.value})


@router.put("/preferences/theme")
async def set_theme(
    request: ThemeRequest,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Persist the display theme."""
    session.store.save_theme(request.theme)
    return ResponseHelper.create_success_response({"theme": request.theme.value})


@router.get("/draft")
async def get_draft(session: AnalysisSession = Depends(get_analysis_session)):
    """Get the current draft metadata."""
    return ResponseHelper.create_success_response(session.metadata.model_dump(by_alias=True))


@router.patch("/draft")
async def update_draft(
    request: MetadataUpdateRequest,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Update draft fields; omitted fields are left unchanged."""
    metadata = session.update_metadata(**request.model_dump(exclude_unset=True))
    return ResponseHelper.create_success_response(metadata.model_dump(by_alias=True))


@router.delete("/draft")
async def clear_draft(
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Start a new analysis: clears the draft and every derived result."""
    session.new_analysis()
    return ResponseHelper.create_success_response(session.snapshot().model_dump(by_alias=True, mode="json"))


@router.post("/draft/tags")
async def add_tag(
    request: AddTagRequest,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Add a recommended tag to the draft."""
    metadata = session.add_tag(request.tag)
    return ResponseHelper.create_success_response(metadata.model_dump(by_alias=True))


@router.post("/draft/description/sections")
async def append_description_section(
    request: AppendSectionRequest,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Append a template block to the draft description."""
    metadata = session.append_to_description(request.text)
    return ResponseHelper.create_success_response(metadata.model_dump(by_alias=True))


@router.post("/draft/description/groups/{group_name}")
async def append_suggestion_group(
    group_name: str,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Append every template of a suggestion group to the draft description."""
    metadata = session.append_group(group_name)
    return ResponseHelper.create_success_response(metadata.model_dump(by_alias=True))
