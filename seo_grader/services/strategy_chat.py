"""Streaming conversational strategy assistant."""
import asyncio
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional

import openai
from openai import OpenAI

from ..core.config import settings
from ..core.exceptions import ConfigurationError, ServiceUnavailableError, TimeoutError
from ..models.analysis import AnalysisResult, ChatMessage
from ..models.metadata import VideoMetadata
from ..utils.logging import CorrelatedLogger, MetricsLogger
from ..config.templates import get_template_engine
from .grading_service import create_openai_client

# Conversation roles of the editor mapped to OpenAI chat roles
ROLE_MAPPING = {"user": "user", "model": "assistant"}


class StrategyChatService:
    """Streams strategist replies contextualised with the current video."""

    def __init__(self, client: Optional[OpenAI] = None):
        self.client = client if client is not None else create_openai_client()
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()
        self.template_engine = get_template_engine()

    def build_messages(
        self,
        history: List[ChatMessage],
        message: str,
        metadata: VideoMetadata,
        analysis: Optional[AnalysisResult]
    ) -> List[Dict[str, str]]:
        """System instruction, prior turns and the new user message."""
        system_prompt = "\n".join([
            self.template_engine.render_system_role("strategy_chat"),
            self.template_engine.render_prompt(
                "strategy_chat",
                title=metadata.title,
                tags=metadata.tags,
                overall_score=analysis.overall_score if analysis else None,
                summary=analysis.summary if analysis else ""
            ),
        ])

        messages = [{"role": "system", "content": system_prompt}]
        for turn in history:
            if turn.text:
                messages.append({"role": ROLE_MAPPING[turn.role], "content": turn.text})
        messages.append({"role": "user", "content": message})
        return messages

    async def stream_reply(
        self,
        history: List[ChatMessage],
        message: str,
        metadata: VideoMetadata,
        analysis: Optional[AnalysisResult] = None,
        request_id: Optional[str] = None
    ) -> AsyncIterator[str]:
        """Yield the model reply as text deltas, in arrival order."""
        if self.client is None:
            raise ConfigurationError("OPENAI_API_KEY", "OpenAI API key is not configured")
        if request_id:
            self.logger.request_id = request_id

        messages = self.build_messages(history, message, metadata, analysis)
        start_time = datetime.now()
        error_code = None
        stream = None
        try:
            stream = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=settings.chat_model,
                messages=messages,
                temperature=settings.llm_temperature,
                stream=True
            )
            chunks = iter(stream)
            while True:
                chunk = await asyncio.to_thread(next, chunks, None)
                if chunk is None:
                    break
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.APITimeoutError:
            error_code = "TIMEOUT"
            raise TimeoutError("strategy chat", settings.llm_timeout)
        except openai.APIError as e:
            error_code = "SERVICE_UNAVAILABLE"
            self.logger.error(f"OpenAI strategy chat error: {str(e)}")
            raise ServiceUnavailableError("openai", str(e))
        except Exception as e:
            error_code = "UNEXPECTED_ERROR"
            self.logger.error(f"Strategy chat stream failed: {str(e)}")
            raise
        finally:
            if stream is not None and hasattr(stream, "close"):
                stream.close()
            processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
            self.metrics.log_llm_call_metrics(
                request_id=request_id or "-",
                operation="strategy_chat",
                model=settings.chat_model,
                success=error_code is None,
                processing_time_ms=processing_time,
                error_code=error_code
            )
