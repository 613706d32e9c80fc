"""Grading, rewrite and market intelligence calls to the OpenAI API."""
import asyncio
from datetime import datetime
from typing import Any, Callable, List, Optional

import openai
from openai import OpenAI

from ..core.config import settings
from ..core.exceptions import (
    ConfigurationError, MalformedResponseError,
    ServiceUnavailableError, TimeoutError
)
from ..models.analysis import AnalysisResult, IntelligenceResult, IntelligenceSource
from ..models.metadata import VideoMetadata
from ..utils.logging import CorrelatedLogger, MetricsLogger
from ..config.templates import get_template_engine
from ..config.schemas import get_response_validator

REWRITE_FALLBACK_TEXT = "Failed to generate optimized description."
INTELLIGENCE_FALLBACK_TEXT = "No intelligence data found."


def create_openai_client() -> Optional[OpenAI]:
    """OpenAI client if an API key is configured."""
    if not settings.openai_api_key:
        return None

    try:
        return OpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.llm_timeout,
        )
    except Exception as e:
        raise ConfigurationError("OpenAI client", str(e))


class GradingService:
    """Service wrapping the hosted model for grading, rewriting and niche research."""

    def __init__(self, client: Optional[OpenAI] = None):
        self.client = client if client is not None else create_openai_client()
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()
        self.template_engine = get_template_engine()
        self.validator = get_response_validator()

    @property
    def is_configured(self) -> bool:
        """Whether an OpenAI client is available."""
        return self.client is not None

    async def analyze_metadata(
        self,
        metadata: VideoMetadata,
        request_id: Optional[str] = None
    ) -> AnalysisResult:
        """Grade video metadata and return the validated report."""
        include_competitor = metadata.has_competitor_context()
        system_prompt = self.template_engine.render_system_role("grading")
        prompt_text = self.template_engine.render_prompt(
            "grading",
            metadata=metadata,
            include_competitor=include_competitor
        )

        self.logger.info(
            f"Starting grading for: {metadata.title[:60]!r} "
            f"(competitor context: {include_competitor})"
        )

        response = await self._call(
            "grading",
            settings.grading_model,
            request_id,
            self._client().chat.completions.create,
            model=settings.grading_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt_text},
            ],
            response_format={"type": "json_object"},
            temperature=settings.llm_temperature,
        )

        content = self._message_content(response)
        if not content:
            self.logger.warning("Grading response content is empty")
            raise MalformedResponseError("grading", "Empty response")

        result = self.validator.parse_analysis(content)
        self.logger.info(f"Grading completed with overall score {result.overall_score}")
        return result

    async def improve_description(
        self,
        current_description: str,
        title: str,
        recommendations: List[str],
        duration: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> str:
        """Rewrite a description applying the given recommendations."""
        system_prompt = self.template_engine.render_system_role("rewrite")
        prompt_text = self.template_engine.render_prompt(
            "rewrite",
            title=title,
            description=current_description,
            recommendations=recommendations,
            duration=(duration or "").strip()
        )

        response = await self._call(
            "rewrite",
            settings.rewrite_model,
            request_id,
            self._client().chat.completions.create,
            model=settings.rewrite_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt_text},
            ],
            temperature=settings.llm_temperature,
        )

        content = (self._message_content(response) or "").strip()
        return content or REWRITE_FALLBACK_TEXT

    async def fetch_market_intelligence(
        self,
        niche: str,
        request_id: Optional[str] = None
    ) -> IntelligenceResult:
        """Produce a web-search grounded report for a niche."""
        response = await self._call(
            "intelligence",
            settings.intelligence_model,
            request_id,
            self._client().responses.create,
            model=settings.intelligence_model,
            instructions=self.template_engine.render_system_role("intelligence"),
            input=self.template_engine.render_prompt("intelligence", niche=niche),
            tools=[{"type": "web_search_preview"}],
        )

        text = (getattr(response, "output_text", None) or "").strip()
        sources = self._extract_sources(response)
        self.logger.info(f"Market intelligence for {niche!r} with {len(sources)} sources")
        return IntelligenceResult(
            text=text or INTELLIGENCE_FALLBACK_TEXT,
            sources=sources
        )

    def _client(self) -> OpenAI:
        if self.client is None:
            raise ConfigurationError("OPENAI_API_KEY", "OpenAI API key is not configured")
        return self.client

    async def _call(
        self,
        operation: str,
        model_name: str,
        request_id: Optional[str],
        func: Callable[..., Any],
        **kwargs
    ) -> Any:
        """Run a blocking SDK call off the event loop, mapping SDK errors."""
        if request_id:
            self.logger.request_id = request_id

        start_time = datetime.now()
        error_code = None
        try:
            return await asyncio.to_thread(func, **kwargs)
        except openai.APITimeoutError:
            error_code = "TIMEOUT"
            raise TimeoutError(operation, settings.llm_timeout)
        except openai.APIError as e:
            error_code = "SERVICE_UNAVAILABLE"
            self.logger.error(f"OpenAI {operation} error: {str(e)}")
            raise ServiceUnavailableError("openai", str(e))
        except Exception:
            error_code = "UNEXPECTED_ERROR"
            raise
        finally:
            processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
            self.metrics.log_llm_call_metrics(
                request_id=request_id or "-",
                operation=operation,
                model=model_name,
                success=error_code is None,
                processing_time_ms=processing_time,
                error_code=error_code
            )

    @staticmethod
    def _message_content(response: Any) -> Optional[str]:
        """Text of the first chat completion choice."""
        choices = getattr(response, "choices", None) or []
        if not choices:
            return None
        return choices[0].message.content

    @staticmethod
    def _extract_sources(response: Any) -> List[IntelligenceSource]:
        """URL citations of a Responses API result, first occurrence order."""
        sources: List[IntelligenceSource] = []
        seen = set()
        for item in getattr(response, "output", None) or []:
            if getattr(item, "type", None) != "message":
                continue
            for content in getattr(item, "content", None) or []:
                for annotation in getattr(content, "annotations", None) or []:
                    if getattr(annotation, "type", None) != "url_citation":
                        continue
                    uri = getattr(annotation, "url", None)
                    if not uri or uri in seen:
                        continue
                    seen.add(uri)
                    sources.append(IntelligenceSource(uri=uri, title=getattr(annotation, "title", None) or None))
        return sources
