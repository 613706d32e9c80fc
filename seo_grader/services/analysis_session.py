"""Analysis session: the editor state machine around grading, rewrite and research."""
import time
import uuid
from typing import AsyncIterator, Dict, List, Optional

from ..core.config import settings
from ..core.exceptions import (
    ConfigurationError, GraderBaseException, MissingFieldsError, NoAnalysisError,
    NotFoundError, OperationInProgressError, ServiceUnavailableError, ValidationError
)
from ..models.analysis import AnalysisResult, ChatMessage, IntelligenceResult, SavedGrading, SuggestionItem
from ..models.metadata import VideoMetadata
from ..models.responses import SuggestionsData, TagState
from ..models.session import SessionSnapshot, SessionState
from ..utils.logging import CorrelatedLogger, MetricsLogger
from ..utils.suggestions import SuggestionGrouper
from ..utils.tags import DescriptionEditor, TagReconciler
from ..utils.validators import MetadataValidator, TextInputValidator
from .grading_service import GradingService
from .storage_service import DraftHistoryStore
from .strategy_chat import StrategyChatService

ANALYSIS_FAILED_MESSAGE = "Analysis failed. Please check your API key or connection."
REWRITE_FAILED_MESSAGE = "Generation failed. The model might be busy, please try again."
INTELLIGENCE_FAILED_MESSAGE = "Market Research failed. Please try again."
CHAT_FAILED_MESSAGE = "Service error. Please try again."

BUSY_STATES = (SessionState.SUBMITTING, SessionState.REWRITING)


class AnalysisSession:
    """
    Owns the editable draft, the current analysis and the derived results.

    Grading and rewrite are gated: only one of them may be in flight at a
    time. ``new_analysis`` works from any state; responses of requests
    started before it are dropped.
    """

    def __init__(
        self,
        store: DraftHistoryStore,
        grading_service: GradingService,
        chat_service: Optional[StrategyChatService] = None
    ):
        self.store = store
        self.grading_service = grading_service
        self.chat_service = chat_service
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

        self.state = SessionState.IDLE
        self.metadata: VideoMetadata = store.load_draft()
        self.analysis: Optional[AnalysisResult] = None
        self.improved_description: Optional[str] = None
        self.intelligence: Optional[IntelligenceResult] = None
        self.error: Optional[str] = None
        self.chat_history: List[ChatMessage] = []

        self._generation = 0
        self._researching = False
        self._chatting = False

    @property
    def history(self) -> List[SavedGrading]:
        """Saved gradings, newest first."""
        return self.store.history()

    # Draft editing

    def update_metadata(self, **fields) -> VideoMetadata:
        """Merge field changes into the draft and persist it."""
        unknown = sorted(set(fields) - set(VideoMetadata.model_fields))
        if unknown:
            raise ValidationError(f"Unknown metadata fields: {', '.join(unknown)}", {"fields": unknown})

        merged = {**self.metadata.model_dump(), **fields}
        return self.replace_metadata(VideoMetadata.model_validate(merged))

    def replace_metadata(self, metadata: VideoMetadata) -> VideoMetadata:
        """Replace the whole draft and persist it."""
        self.metadata = metadata
        self.store.save_draft(metadata)
        return metadata

    def add_tag(self, tag: str) -> VideoMetadata:
        """Add a recommended tag to the draft unless it is already present."""
        return self.update_metadata(tags=TagReconciler.add_tag(tag, self.metadata.tags))

    def append_to_description(self, text: str) -> VideoMetadata:
        """Append a template block to the draft description."""
        if not (text or "").strip():
            raise ValidationError("text must not be empty", {"field": "text"})
        return self.update_metadata(
            description=DescriptionEditor.append_section(self.metadata.description, text)
        )

    def append_group(self, group_name: str) -> VideoMetadata:
        """Append every template of a suggestion group to the description."""
        if self.analysis is None:
            raise NoAnalysisError("adding a suggestion group")
        items = (self.grouped_suggestions() or {}).get(group_name)
        if not items:
            raise NotFoundError("Suggestion group", group_name)

        text = SuggestionGrouper.combine_templates(items)
        if not text:
            raise ValidationError(f"Suggestion group '{group_name}' has no templates", {"group": group_name})
        return self.append_to_description(text)

    # Grading and rewrite

    async def submit(self, request_id: Optional[str] = None) -> AnalysisResult:
        """Grade the current draft."""
        self._ensure_not_busy("analysis")
        try:
            MetadataValidator.validate_for_submission(self.metadata)
        except MissingFieldsError as e:
            self.error = e.message
            raise

        metadata = self.metadata
        generation = self._generation
        self.error = None
        self.improved_description = None
        self._set_state(SessionState.SUBMITTING, request_id)

        try:
            result = await self.grading_service.analyze_metadata(metadata, request_id=request_id)
        except Exception as e:
            error = self._as_grader_error(e, "grading")
            if generation == self._generation:
                self.error = ANALYSIS_FAILED_MESSAGE
                self._set_state(
                    SessionState.GRADED if self.analysis is not None else SessionState.FAILED,
                    request_id
                )
            raise error

        if generation != self._generation:
            self.logger.info("Discarding grading result of a reset session")
            return result

        self.analysis = result
        self._set_state(SessionState.GRADED, request_id)
        return result

    async def rewrite(self, request_id: Optional[str] = None) -> str:
        """Rewrite the draft description from the current recommendations."""
        self._ensure_not_busy("rewrite")
        if self.analysis is None:
            raise NoAnalysisError("rewrite")

        metadata = self.metadata
        recommendations = self.analysis.all_recommendations()[:settings.max_rewrite_recommendations]
        generation = self._generation
        self.error = None
        self._set_state(SessionState.REWRITING, request_id)

        try:
            improved = await self.grading_service.improve_description(
                metadata.description,
                metadata.title,
                recommendations,
                duration=metadata.duration,
                request_id=request_id
            )
        except Exception as e:
            error = self._as_grader_error(e, "rewrite")
            if generation == self._generation:
                self.error = REWRITE_FAILED_MESSAGE
                self._set_state(SessionState.GRADED, request_id)
            raise error

        if generation != self._generation:
            self.logger.info("Discarding rewrite result of a reset session")
            return improved

        self.improved_description = improved
        self._set_state(SessionState.GRADED, request_id)
        return improved

    def apply_improved_description(self) -> VideoMetadata:
        """Copy the rewritten description into the draft."""
        if self.improved_description is None:
            raise ValidationError("No improved description to apply")

        metadata = self.update_metadata(description=self.improved_description)
        self.improved_description = None
        return metadata

    # History

    def is_already_saved(self) -> bool:
        """Whether history holds an entry with this title and overall score."""
        if self.analysis is None:
            return False
        return any(
            saved.metadata.title == self.metadata.title
            and saved.analysis.overall_score == self.analysis.overall_score
            for saved in self.history
        )

    def save_current(self) -> Optional[SavedGrading]:
        """Snapshot the draft and analysis into history; None when nothing was saved."""
        if self.analysis is None or self.is_already_saved():
            return None

        entry = SavedGrading(
            id=uuid.uuid4().hex,
            timestamp=int(time.time() * 1000),
            metadata=self.metadata.model_copy(deep=True),
            analysis=self.analysis.model_copy(deep=True)
        )
        self.store.append_saved(entry)
        return entry

    def delete_saved(self, grading_id: str) -> List[SavedGrading]:
        """Remove a saved grading; unknown ids are ignored."""
        return self.store.remove_saved(grading_id)

    def load_saved(self, grading_id: str, request_id: Optional[str] = None) -> SavedGrading:
        """Restore a saved grading as the draft and current analysis."""
        self._ensure_not_busy("loading a saved grading")
        entry = self.store.find_saved(grading_id)
        if entry is None:
            raise NotFoundError("Saved grading", grading_id)

        self.replace_metadata(entry.metadata.model_copy(deep=True))
        self.analysis = entry.analysis.model_copy(deep=True)
        self.improved_description = None
        self.error = None
        self._set_state(SessionState.GRADED, request_id)
        return entry

    def new_analysis(self, request_id: Optional[str] = None) -> None:
        """Start over with an empty draft. History is kept."""
        self._generation += 1
        self.analysis = None
        self.improved_description = None
        self.intelligence = None
        self.error = None
        self.chat_history = []
        self.metadata = VideoMetadata()
        self.store.clear_draft()
        self._set_state(SessionState.IDLE, request_id)

    # Market intelligence and strategy chat

    async def fetch_intelligence(self, niche: str, request_id: Optional[str] = None) -> IntelligenceResult:
        """Research a niche; the analysis and state are not touched."""
        niche = TextInputValidator.validate_niche(niche)
        if self._researching:
            raise OperationInProgressError("market intelligence", "researching")

        generation = self._generation
        self._researching = True
        self.error = None
        try:
            result = await self.grading_service.fetch_market_intelligence(niche, request_id=request_id)
        except Exception as e:
            error = self._as_grader_error(e, "market intelligence")
            if generation == self._generation:
                self.error = INTELLIGENCE_FAILED_MESSAGE
            raise error
        finally:
            self._researching = False

        if generation == self._generation:
            self.intelligence = result
        return result

    async def stream_chat(self, message: str, request_id: Optional[str] = None) -> AsyncIterator[str]:
        """Yield the strategist reply as it arrives, recording both turns."""
        text = TextInputValidator.validate_chat_message(message)
        if self.chat_service is None:
            raise ConfigurationError("strategy chat", "Chat service is not configured")
        if self._chatting:
            raise OperationInProgressError("chat", "streaming a reply")

        history = list(self.chat_history)
        generation = self._generation
        self._chatting = True
        self.chat_history.append(ChatMessage(role="user", text=text))

        reply = ""
        reply_index: Optional[int] = None
        try:
            async for delta in self.chat_service.stream_reply(
                history, text, self.metadata, self.analysis, request_id=request_id
            ):
                reply += delta
                if generation == self._generation:
                    if reply_index is None:
                        self.chat_history.append(ChatMessage(role="model", text=reply))
                        reply_index = len(self.chat_history) - 1
                    else:
                        self.chat_history[reply_index] = ChatMessage(role="model", text=reply)
                yield delta
        except Exception as e:
            error = self._as_grader_error(e, "strategy chat")
            self.logger.error(f"Strategy chat failed after {len(reply)} chars: {error.message}")
            if generation == self._generation:
                self.chat_history.append(ChatMessage(role="model", text=CHAT_FAILED_MESSAGE))
            raise error
        finally:
            self._chatting = False

    # Derived views

    def grouped_suggestions(self) -> Optional[Dict[str, List[SuggestionItem]]]:
        """Structural suggestions of the description, grouped for display."""
        if self.analysis is None:
            return None
        return SuggestionGrouper.group(self.analysis.description.structural_suggestions)

    def tag_states(self) -> List[TagState]:
        """Recommended tags with their presence in the draft."""
        if self.analysis is None:
            return []
        return [
            TagState(tag=tag, added=TagReconciler.is_added(tag, self.metadata.tags))
            for tag in self.analysis.tags.specific_tags or []
        ]

    def suggestions(self) -> SuggestionsData:
        """Grouped suggestions and tag states of the current analysis."""
        if self.analysis is None:
            raise NoAnalysisError("suggestions")
        return SuggestionsData(groups=self.grouped_suggestions(), tags=self.tag_states())

    def snapshot(self) -> SessionSnapshot:
        """Immutable view of the session."""
        return SessionSnapshot(
            state=self.state,
            metadata=self.metadata.model_copy(deep=True),
            analysis=self.analysis,
            improved_description=self.improved_description,
            intelligence=self.intelligence,
            error=self.error,
            is_already_saved=self.is_already_saved(),
            history_count=len(self.history),
            chat_history=list(self.chat_history)
        )

    def _ensure_not_busy(self, operation: str) -> None:
        if self.state in BUSY_STATES:
            raise OperationInProgressError(operation, self.state.value)

    def _set_state(self, new_state: SessionState, request_id: Optional[str] = None) -> None:
        previous = self.state
        self.state = new_state
        self.metrics.log_session_transition(request_id or "-", previous.value, new_state.value)

    def _as_grader_error(self, error: Exception, operation: str) -> GraderBaseException:
        """Typed error for the HTTP layer; unexpected failures become SERVICE_UNAVAILABLE."""
        if isinstance(error, GraderBaseException):
            self.logger.warning(f"{operation} failed: {error.error_code} - {error.message}")
            return error
        self.logger.error(f"{operation} failed unexpectedly: {str(error)}")
        return ServiceUnavailableError(operation, str(error))
