"""Custom exceptions for the SEO Grader Service."""
from typing import List, Optional

class GraderBaseException(Exception):
    """Base exception for the SEO grader service."""

    def __init__(self, message: str, error_code: str, details: Optional[dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(GraderBaseException):
    """Exception raised for input validation errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, "VALIDATION_ERROR", details)

class MissingFieldsError(GraderBaseException):
    """Exception raised when required metadata fields are blank at submit time."""

    def __init__(self, fields: List[str]):
        message = "Please provide at least a title and description."
        details = {"fields": fields}
        super().__init__(message, "MISSING_FIELDS", details)

class NoAnalysisError(GraderBaseException):
    """Exception raised when an operation needs a current analysis and there is none."""

    def __init__(self, operation: str):
        message = f"No analysis available for {operation}. Run an analysis first."
        details = {"operation": operation}
        super().__init__(message, "NO_ANALYSIS", details)

class OperationInProgressError(GraderBaseException):
    """Exception raised when a gated request is already in flight."""

    def __init__(self, operation: str, state: str):
        message = f"Cannot start {operation} while the session is {state}"
        details = {"operation": operation, "state": state}
        super().__init__(message, "OPERATION_IN_PROGRESS", details)

class NotFoundError(GraderBaseException):
    """Exception raised when a saved grading does not exist."""

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} not found: {identifier}"
        details = {"resource": resource, "id": identifier}
        super().__init__(message, "NOT_FOUND", details)

class MalformedResponseError(GraderBaseException):
    """Exception raised when the model returns data that does not match the schema."""

    def __init__(self, operation: str, reason: str = "Response could not be parsed"):
        message = f"Malformed response from {operation}: {reason}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, "MALFORMED_RESPONSE", details)

class APIKeyInvalidError(GraderBaseException):
    """Exception raised for invalid API key."""

    def __init__(self):
        message = "Invalid or missing API key"
        super().__init__(message, "API_KEY_INVALID")

class ServiceUnavailableError(GraderBaseException):
    """Exception raised when external service is unavailable."""

    def __init__(self, service: str, reason: str = "Service temporarily unavailable"):
        message = f"Service unavailable: {service} - {reason}"
        details = {"service": service, "reason": reason}
        super().__init__(message, "SERVICE_UNAVAILABLE", details)

class TimeoutError(GraderBaseException):
    """Exception raised when operation times out."""

    def __init__(self, operation: str, timeout_seconds: int):
        message = f"Operation timed out: {operation} (timeout: {timeout_seconds}s)"
        details = {"operation": operation, "timeout_seconds": timeout_seconds}
        super().__init__(message, "TIMEOUT", details)

class StorageError(GraderBaseException):
    """Exception raised when local state cannot be written."""

    def __init__(self, operation: str, reason: str):
        message = f"Storage error during {operation}: {reason}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, "STORAGE_ERROR", details)

class ConfigurationError(GraderBaseException):
    """Exception raised for configuration errors."""

    def __init__(self, setting: str, reason: str):
        message = f"Configuration error for {setting}: {reason}"
        details = {"setting": setting, "reason": reason}
        super().__init__(message, "CONFIGURATION_ERROR", details)
