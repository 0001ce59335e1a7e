"""
Error Handling Module

Defines domain exceptions and error categories for the export service.
Domain exceptions depend on nothing outside this module.
Application exceptions carry user-facing messaging for API responses.
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ErrorCategory(Enum):
    """Why an export or an API request failed; the value is sent to clients."""

    DATA_LOAD_FAILED = "data_load_failed"
    RENDER_FAILED = "render_failed"
    PACK_FAILED = "pack_failed"
    STATUS_PERSIST_FAILED = "status_persist_failed"
    EXPORT_NOT_FOUND = "export_not_found"
    EXPORT_PENDING = "export_pending"
    EXPORT_FAILED = "export_failed"
    DUPLICATE_EXPORT = "duplicate_export"
    INVALID_REQUEST = "invalid_request"
    FILE_NOT_FOUND = "file_not_found"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.DATA_LOAD_FAILED: {
        "title": "Build Not Available",
        "message": "The build data for this export could not be loaded.",
        "action": "Check that the build exists and has been saved, then try again.",
    },
    ErrorCategory.RENDER_FAILED: {
        "title": "Rendering Failed",
        "message": "The static site files could not be generated.",
        "action": "Please try again. If the problem persists, contact support.",
    },
    ErrorCategory.PACK_FAILED: {
        "title": "Packaging Failed",
        "message": "The export archive could not be created.",
        "action": "Please try again later.",
    },
    ErrorCategory.STATUS_PERSIST_FAILED: {
        "title": "Status Not Saved",
        "message": "The export finished but the build status could not be updated.",
        "action": "The download is still available. Refresh the dashboard later.",
    },
    ErrorCategory.EXPORT_NOT_FOUND: {
        "title": "Export Not Found",
        "message": "Export not found. The export may have expired or never started.",
        "action": "Please start a new export.",
    },
    ErrorCategory.EXPORT_PENDING: {
        "title": "Export In Progress",
        "message": "Export still in progress. Please wait...",
        "action": "Poll the export status and download once it has completed.",
    },
    ErrorCategory.EXPORT_FAILED: {
        "title": "Export Failed",
        "message": "The export could not be completed.",
        "action": "Please start a new export.",
    },
    ErrorCategory.DUPLICATE_EXPORT: {
        "title": "Export Already Running",
        "message": "An export with this name is already in progress.",
        "action": "Wait for it to finish or choose a different export name.",
    },
    ErrorCategory.INVALID_REQUEST: {
        "title": "Invalid Request",
        "message": "The request is missing required information or contains invalid data.",
        "action": "Please check your input and try again.",
    },
    ErrorCategory.FILE_NOT_FOUND: {
        "title": "File Not Found",
        "message": "Export file not found on disk.",
        "action": "Please start a new export.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}




# Domain exceptions. Each one names the category it is reported under.

class DomainError(Exception):
    """
    Base exception for failures inside an export pipeline step.

    ``original_error`` keeps the low-level exception (HTTP error, OSError,
    ...) that the step translated.
    """

    category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class DataLoadError(DomainError):
    """Raised when build data cannot be fetched from the data store."""

    category = ErrorCategory.DATA_LOAD_FAILED


class RenderError(DomainError):
    """Raised when the output tree cannot be written."""

    category = ErrorCategory.RENDER_FAILED


class PackError(DomainError):
    """Raised when the archive stream fails."""

    category = ErrorCategory.PACK_FAILED


class StatusPersistError(DomainError):
    """
    Raised when the Build record's publish status cannot be updated.

    A soft failure: logged and reported next to the export result, but it
    never changes whether the export itself succeeded.
    """

    category = ErrorCategory.STATUS_PERSIST_FAILED


class InvalidExportNameError(DomainError):
    """Raised when an export name cannot be used as a bundle file name."""

    category = ErrorCategory.INVALID_REQUEST


# Application exceptions, rendered into API error bodies.

class ApplicationError(Exception):
    """
    Error carrying the user-facing title, message and action of its category.

    ``str(error)`` is the user-facing message; ``technical_message`` is
    only exposed as ``details`` in the response body.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        info = ERROR_MESSAGES.get(category) or ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]

        self.category = category
        self.title = info["title"]
        self.message = info["message"]
        self.action = info["action"]
        self.technical_message = technical_message or ""
        self.context = dict(context or {})

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }
        if self.technical_message:
            body["details"] = self.technical_message
        if self.context:
            body["context"] = self.context
        return body


def categorize_error(error: Exception) -> ErrorCategory:
    """Category for an exception raised by a pipeline step (SYSTEM_ERROR if unknown)."""
    if isinstance(error, DomainError):
        return error.category
    return ErrorCategory.SYSTEM_ERROR


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 400,
) -> Tuple[Dict[str, Any], int]:
    """Build the ``(body, status)`` pair flask-restx resources return on error."""
    body = ApplicationError(category, technical_message, context).to_dict()
    return body, status_code
