"""Utility modules for the SEO Grader Service."""
from .validators import MetadataValidator, TextInputValidator
from .response_helpers import ResponseHelper
from .logging import LoggerSetup, CorrelatedLogger, MetricsLogger
from .suggestions import SuggestionParser, SuggestionGrouper
from .tags import TagReconciler, DescriptionEditor

__all__ = [
    "MetadataValidator", "TextInputValidator", "ResponseHelper",
    "LoggerSetup", "CorrelatedLogger", "MetricsLogger",
    "SuggestionParser", "SuggestionGrouper", "TagReconciler", "DescriptionEditor"
]
