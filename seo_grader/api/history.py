"""Saved grading endpoints."""
from fastapi import APIRouter, Depends, Security

from seo_grader.core.dependencies import get_analysis_session, verify_api_key
from seo_grader.services import AnalysisSession
from seo_grader.utils.response_helpers import ResponseHelper

router = APIRouter(prefix="/history", tags=["history"])


def _dump_history(session: AnalysisSession) -> list:
    return [entry.model_dump(by_alias=True) for entry in session.history]


@router.get("")
async def list_history(session: AnalysisSession = Depends(get_analysis_session)):
    """Saved gradings, newest first."""
    return ResponseHelper.create_success_response(_dump_history(session))


@router.post("")
async def save_current(
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Save the current draft and analysis. Repeated saves are ignored."""
    entry = session.save_current()
    return ResponseHelper.create_success_response({
        "saved": entry.model_dump(by_alias=True) if entry else None,
        "history": _dump_history(session),
    })


@router.delete("/{grading_id}")
async def delete_saved(
    grading_id: str,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Delete a saved grading; unknown ids are ignored."""
    session.delete_saved(grading_id)
    return ResponseHelper.create_success_response(_dump_history(session))


@router.post("/{grading_id}/load")
async def load_saved(
    grading_id: str,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Restore a saved grading as the draft and current analysis."""
    session.load_saved(grading_id)
    return ResponseHelper.create_success_response(session.snapshot().model_dump(by_alias=True, mode="json"))
