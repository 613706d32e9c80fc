"""Market intelligence and strategy chat endpoints."""
import time
from typing import AsyncIterator
from fastapi import APIRouter, Depends, Security
from fastapi.responses import StreamingResponse

from seo_grader.core.dependencies import get_analysis_session, verify_api_key
from seo_grader.core.exceptions import GraderBaseException
from seo_grader.models.requests import ChatRequest, IntelligenceRequest
from seo_grader.services import AnalysisSession
from seo_grader.services.analysis_session import CHAT_FAILED_MESSAGE
from seo_grader.utils.response_helpers import ResponseHelper

router = APIRouter(tags=["assistant"])


@router.post("/intelligence")
async def market_intelligence(
    request: IntelligenceRequest,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """Web-search grounded research report for a niche."""
    request_id = ResponseHelper.generate_request_id()
    start_time = time.time()

    result = await session.fetch_intelligence(request.niche, request_id=request_id)

    return ResponseHelper.create_success_response(
        data=result.model_dump(by_alias=True),
        request_id=request_id,
        processing_time_ms=int((time.time() - start_time) * 1000)
    )


@router.get("/chat")
async def chat_transcript(session: AnalysisSession = Depends(get_analysis_session)):
    """Strategy conversation so far."""
    return ResponseHelper.create_success_response(
        [message.model_dump(by_alias=True) for message in session.chat_history]
    )


@router.post("/chat")
async def chat(
    request: ChatRequest,
    session: AnalysisSession = Depends(get_analysis_session),
    api_key: str = Security(verify_api_key)
):
    """
    Stream the strategist reply as plain text.

    Errors raised before the first chunk become regular error responses.
    A failure after streaming started ends the body with the service error text.
    """
    request_id = ResponseHelper.generate_request_id()
    replies = session.stream_chat(request.message, request_id=request_id)

    try:
        first = await replies.__anext__()
    except StopAsyncIteration:
        first = ""

    async def body() -> AsyncIterator[str]:
        if first:
            yield first
        try:
            async for delta in replies:
                yield delta
        except GraderBaseException:
            yield f"\n\n{CHAT_FAILED_MESSAGE}"

    return StreamingResponse(
        body(),
        media_type="text/plain; charset=utf-8",
        headers={"x-request-id": request_id}
    )
