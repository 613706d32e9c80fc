"""Shared fixtures."""
import pytest
from unittest.mock import AsyncMock, Mock

from seo_grader.models.analysis import AnalysisResult
from seo_grader.models.metadata import VideoMetadata
from seo_grader.services.analysis_session import AnalysisSession
from seo_grader.services.storage_service import DraftHistoryStore, MemoryKeyValueStore


def make_analysis_payload(overall_score: int = 72) -> dict:
    """Grading report as the model returns it."""
    return {
        "overallScore": overall_score,
        "summary": "Solid start, the description needs structure.",
        "title": {
            "score": 80,
            "feedback": ["Clear topic"],
            "recommendations": ["Add a number to the title"],
            "suggestions": ["10 Cat Facts You Never Knew"],
        },
        "description": {
            "score": 60,
            "feedback": ["Hook is weak"],
            "recommendations": ["Open with the main benefit", "Add chapters"],
            "suggestions": [],
            "structuralSuggestions": [
                "ABOUT | About the Video | Add a summary | Template: [This video covers cats.]",
                "SOCIAL | Connect | Add handles | Template: [@[YourHandle]]",
                "TIMESTAMPS | Chapters | Add chapters | Template: [00:00 Intro]",
            ],
        },
        "tags": {
            "score": 70,
            "feedback": [],
            "recommendations": ["Add long-tail tags"],
            "suggestions": [],
            "specificTags": ["cats", "funny cats", "cat facts"],
        },
    }


@pytest.fixture
def make_analysis():
    """Factory for validated reports with a given overall score."""
    return lambda overall_score=72: AnalysisResult.model_validate(make_analysis_payload(overall_score))


@pytest.fixture
def analysis_payload():
    """Raw grading payload."""
    return make_analysis_payload()


@pytest.fixture
def analysis(analysis_payload):
    """Validated grading report."""
    return AnalysisResult.model_validate(analysis_payload)


@pytest.fixture
def memory_store():
    """Draft/history store over an in-memory backend."""
    return DraftHistoryStore(MemoryKeyValueStore())


@pytest.fixture
def grading_service(analysis):
    """Grading collaborator returning the sample report."""
    service = Mock()
    service.is_configured = True
    service.analyze_metadata = AsyncMock(return_value=analysis)
    service.improve_description = AsyncMock(return_value="A much better description.")
    service.fetch_market_intelligence = AsyncMock()
    return service


@pytest.fixture
def chat_service():
    """Strategy chat collaborator streaming two chunks."""
    async def stream_reply(history, message, metadata, analysis=None, request_id=None):
        for delta in ["Try a ", "shorter title."]:
            yield delta

    service = Mock()
    service.stream_reply = Mock(side_effect=stream_reply)
    return service


@pytest.fixture
def session(memory_store, grading_service, chat_service):
    """Analysis session wired to mocked collaborators."""
    return AnalysisSession(memory_store, grading_service, chat_service)


@pytest.fixture
def cat_metadata():
    """Submittable draft."""
    return VideoMetadata(title="My Video", description="A great video about cats", tags="cats")
