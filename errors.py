"""
Exception classes for the Interview Assistant.

Every error carries a user-facing message and the HTTP status the API
reports it with. None of them are fatal: the UI and API surface the
message and the candidate record is left unchanged.
"""
from typing import Any, Dict, Optional

from fastapi import status


class InterviewAssistantError(Exception):
    """Base exception for all Interview Assistant errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Upload / ingest
# =============================================================================

class UploadRejectedError(InterviewAssistantError):
    """Raised when an upload is refused before any parsing is attempted."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code, details)


class UnsupportedFileError(UploadRejectedError):
    """Raised when the uploaded file is not a PDF or DOCX."""

    def __init__(self, file_name: str):
        super().__init__("Please upload a PDF or DOCX file.", details={"file_name": file_name})
        self.file_name = file_name


class FileTooLargeError(UploadRejectedError):
    """Raised when the uploaded file exceeds the size cap."""

    def __init__(self, size: int, max_size: int):
        message = f"File size must be less than {max_size // (1024 * 1024)}MB."
        super().__init__(
            message,
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            {"size": size, "max_size": max_size},
        )
        self.size = size
        self.max_size = max_size


class TextExtractionError(InterviewAssistantError):
    """Raised when text cannot be extracted from an accepted document."""

    def __init__(self, message: str = "Error processing the file. Please try again.",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


# =============================================================================
# Evaluator
# =============================================================================

class EvaluatorError(InterviewAssistantError):
    """Raised when the hosted evaluator fails or returns malformed output."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY, details)


class QuestionGenerationError(EvaluatorError):
    """Raised when interview questions could not be generated."""

    def __init__(self, message: str = "Failed to generate interview questions. Please try again.",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


# =============================================================================
# State machine / store
# =============================================================================

class InvalidTransitionError(InterviewAssistantError):
    """Raised when an action is not valid in the current interview step."""

    def __init__(self, action: str, step: str):
        message = f"Cannot {action} while in step '{step}'"
        super().__init__(message, status.HTTP_409_CONFLICT, {"action": action, "step": step})
        self.action = action
        self.step = step


class CandidateNotFoundError(InterviewAssistantError):
    """Raised when a candidate id is not in the store."""

    def __init__(self, candidate_id: str):
        super().__init__(f"Candidate not found: {candidate_id}", status.HTTP_404_NOT_FOUND)
        self.candidate_id = candidate_id
