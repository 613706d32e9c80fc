"""Grading, suggestion and rewrite endpoints."""
import time
from fastapi import APIRouter, Depends, Security

from seo_grader.core.dependencies import get_analysis_session, verify_api_key
from seo_grader.services import AnalysisSession
from seo_grader.utils.response_helpers import ResponseHelper

router = APIRouter(tags=["analysis"])


@router.get("/session")
async def get_session(session: AnalysisSession = Depends(get_analysis_session)):
    """Get the session state, current analysis and derived results."""
    return ResponseHelper.create_success_response(session.snapshot().model_dump(by_alias=True, mode="json"))


@router.post("/analysis")
async def submit_analysis(
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Grade the current draft."""
    request_id = ResponseHelper.generate_request_id()
    start_time = time.time()

    result = await session.submit(request_id=request_id)

    return ResponseHelper.create_success_response(
        data=result.model_dump(by_alias=True),
        request_id=request_id,
        processing_time_ms=int((time.time() - start_time) * 1000)
    )


@router.get("/analysis/suggestions")
async def get_suggestions(session: AnalysisSession = Depends(get_analysis_session)):
    """Grouped structural suggestions and recommended tag states."""
    return ResponseHelper.create_success_response(session.suggestions().model_dump(by_alias=True))


@router.post("/analysis/rewrite")
async def rewrite_description(
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Rewrite the draft description from the current recommendations."""
    request_id = ResponseHelper.generate_request_id()
    start_time = time.time()

    improved = await session.rewrite(request_id=request_id)

    return ResponseHelper.create_success_response(
        data={"improvedDescription": improved},
        request_id=request_id,
        processing_time_ms=int((time.time() - start_time) * 1000)
    )


@router.post("/analysis/rewrite/apply")
async def apply_rewrite(
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Copy the rewritten description into the draft."""
    metadata = session.apply_improved_description()
    return ResponseHelper.create_success_response(metadata.model_dump(by_alias=True))


@router.post("/analysis/reset")
async def reset_analysis(
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Start a new analysis. Saved gradings are kept."""
    session.new_analysis()
    return ResponseHelper.create_success_response(session.snapshot().model_dump(by_alias=True, mode="json"))
