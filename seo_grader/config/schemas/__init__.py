"""Schema validation system for model responses."""

from .analysis_schemas import (
    ResponseValidator,
    get_response_validator
)

__all__ = [
    'ResponseValidator',
    'get_response_validator'
]
