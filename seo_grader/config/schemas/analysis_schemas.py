"""
Validation of grading responses returned by the model.
Turns raw model text into a typed AnalysisResult or a MalformedResponseError.
"""
import json
import math
from typing import Any, Dict, List

from pydantic import ValidationError as PydanticValidationError

from seo_grader.core.exceptions import MalformedResponseError
from seo_grader.models.analysis import AnalysisResult
from seo_grader.utils.logging import CorrelatedLogger

SECTION_KEYS = ("title", "description", "tags")
LIST_KEYS = (
    "feedback", "recommendations", "suggestions",
    "specificTags", "specific_tags", "structuralSuggestions", "structural_suggestions",
    "userStrengths", "user_strengths", "competitorStrengths", "competitor_strengths",
)
MAX_ERRORS_REPORTED = 5


class ResponseValidator:
    """
    Validator for grading responses.

    Features:
    - JSON extraction from fenced or chatty model output
    - Score normalisation (rounding and clamping into 0-100)
    - List cleaning (stripping, dropping empty and non-text items)
    - Typed error reporting through MalformedResponseError
    """

    def __init__(self):
        self.logger = CorrelatedLogger(__name__)

    def extract_json(self, content: str, operation: str = "grading") -> Dict[str, Any]:
        """Extract and parse the JSON object from model response content."""
        if not content or not content.strip():
            raise MalformedResponseError(operation, "Empty response")

        json_content = content.strip()

        # Remove markdown code blocks if present
        if json_content.startswith('```json'):
            json_content = json_content[7:]
        elif json_content.startswith('```'):
            json_content = json_content[3:]

        if json_content.endswith('```'):
            json_content = json_content[:-3]

        json_content = json_content.strip()

        # Try to find JSON within the content if it's still not clean
        if not json_content.startswith('{'):
            start_idx = json_content.find('{')
            end_idx = json_content.rfind('}')
            if start_idx != -1 and end_idx != -1 and end_idx > start_idx:
                json_content = json_content[start_idx:end_idx + 1]

        try:
            data = json.loads(json_content)
        except json.JSONDecodeError as e:
            self.logger.warning(f"JSON decode error: {str(e)}, content: {json_content[:200]}...")
            raise MalformedResponseError(operation, f"Invalid JSON: {e.msg}")

        if not isinstance(data, dict):
            raise MalformedResponseError(operation, f"Expected a JSON object, got {type(data).__name__}")

        return data

    def validate_analysis(self, data: Dict[str, Any]) -> AnalysisResult:
        """
        Validate a decoded grading payload.

        Args:
            data: Decoded JSON object from the model

        Returns:
            Validated AnalysisResult

        Raises:
            MalformedResponseError: If the payload does not match the schema
        """
        cleaned = self._clean_response_data(data)

        try:
            result = AnalysisResult.model_validate(cleaned)
        except PydanticValidationError as e:
            reason = self._summarize_errors(e)
            self.logger.warning(f"Grading response validation failed: {reason}")
            raise MalformedResponseError("grading", reason)

        self.logger.debug("Grading response validation successful")
        return result

    def parse_analysis(self, content: str) -> AnalysisResult:
        """Extract and validate a grading response in one step."""
        return self.validate_analysis(self.extract_json(content))

    def _clean_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Clean and normalize response data."""
        cleaned = self._clean_value(data)

        for score_key in ("overallScore", "overall_score"):
            if score_key in cleaned:
                cleaned[score_key] = self._normalize_score(cleaned[score_key])

        for section_key in SECTION_KEYS:
            section = cleaned.get(section_key)
            if isinstance(section, dict) and "score" in section:
                section["score"] = self._normalize_score(section["score"])

        return cleaned

    def _clean_value(self, value: Any, key: str = "") -> Any:
        """Recursively strip strings and clean text lists."""
        if isinstance(value, dict):
            return {k: self._clean_value(v, k) for k, v in value.items()}
        if isinstance(value, list) and key in LIST_KEYS:
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        if isinstance(value, list):
            return [self._clean_value(item) for item in value]
        if isinstance(value, str):
            return value.strip()
        return value

    def _normalize_score(self, value: Any) -> Any:
        """Round numeric scores and clamp them into 0-100."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            try:
                value = float(value.strip().rstrip('%'))
            except ValueError:
                return value
        if isinstance(value, float) and not math.isfinite(value):
            return value
        if isinstance(value, (int, float)):
            return max(0, min(100, int(round(value))))
        return value

    def _summarize_errors(self, error: PydanticValidationError) -> str:
        """Short human-readable summary of validation errors."""
        messages: List[str] = []
        for item in error.errors()[:MAX_ERRORS_REPORTED]:
            location = ".".join(str(part) for part in item.get("loc", ())) or "response"
            messages.append(f"{location}: {item.get('msg', 'invalid')}")
        return "; ".join(messages)


# Global validator instance
_response_validator = None

def get_response_validator() -> ResponseValidator:
    """Get global response validator instance (singleton pattern)."""
    global _response_validator
    if _response_validator is None:
        _response_validator = ResponseValidator()
    return _response_validator
