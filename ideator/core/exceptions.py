"""Custom exceptions for the Content Ideator service."""
from typing import Optional

class IdeatorBaseException(Exception):
    """Base exception for the content ideator service."""

    def __init__(self, message: str, error_code: str, details: Optional[dict] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(IdeatorBaseException):
    """Exception raised for input validation errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, "VALIDATION_ERROR", details)

class ConfigError(IdeatorBaseException):
    """Exception raised when a required credential is missing or invalid."""

    def __init__(self, setting: str, reason: str = "Credential is not configured"):
        message = f"Configuration error for {setting}: {reason}"
        details = {"setting": setting, "reason": reason}
        super().__init__(message, "CONFIG_ERROR", details)

class AuthError(IdeatorBaseException):
    """Exception raised when a backend rejects the configured credential."""

    def __init__(self, service: str, reason: str = "Invalid API key"):
        message = f"{service} rejected the credential: {reason}"
        details = {"service": service, "reason": reason}
        super().__init__(message, "AUTH_ERROR", details)

class EmptyInputError(IdeatorBaseException):
    """Exception raised when there is no content to analyze."""

    def __init__(self, subject: str, reason: str = "No content available to analyze"):
        message = f"Nothing to analyze for {subject}: {reason}"
        details = {"subject": subject, "reason": reason}
        super().__init__(message, "EMPTY_INPUT", details)

class UpstreamError(IdeatorBaseException):
    """Exception raised for backend failures, quota errors or malformed responses."""

    def __init__(self, service: str, reason: str):
        message = f"{service} request failed: {reason}"
        details = {"service": service, "reason": reason}
        super().__init__(message, "UPSTREAM_ERROR", details)

class GenerationError(IdeatorBaseException):
    """Exception raised when a successful response lacks the expected payload."""

    def __init__(self, operation: str, reason: str = "Expected payload missing from response"):
        message = f"Generation failed during {operation}: {reason}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, "GENERATION_ERROR", details)

class AssemblyError(IdeatorBaseException):
    """Exception raised when local media assembly fails."""

    def __init__(self, reason: str):
        message = f"Video assembly failed: {reason}"
        details = {"reason": reason}
        super().__init__(message, "ASSEMBLY_ERROR", details)

class PackagingError(IdeatorBaseException):
    """Exception raised when building the export archive fails."""

    def __init__(self, reason: str):
        message = f"Export packaging failed: {reason}"
        details = {"reason": reason}
        super().__init__(message, "PACKAGING_ERROR", details)

class NotFoundError(IdeatorBaseException):
    """Exception raised when a workspace, production or favorite does not exist."""

    def __init__(self, resource: str, resource_id: str):
        message = f"{resource} not found: {resource_id}"
        details = {"resource": resource, "resource_id": resource_id}
        super().__init__(message, "NOT_FOUND", details)

class ConflictError(IdeatorBaseException):
    """Exception raised when an operation is already in progress."""

    def __init__(self, operation: str, reason: str = "Operation already in progress"):
        message = f"Cannot run {operation}: {reason}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, "CONFLICT", details)
