"""
Custom exception hierarchy for the Pipedrive client.

Provides specific exception types for transport failures, API errors
and resource precondition checks.
"""

from typing import Optional


class PipedriveError(Exception):
    """Base exception for all Pipedrive client errors."""
    pass


class TransportError(PipedriveError):
    """Raised when the underlying network call fails before any HTTP status is obtained."""
    pass


class ApiError(PipedriveError):
    """Raised when the API answers with a 4xx/5xx status."""

    def __init__(self, status_code: int, message: Optional[str] = None, response: Optional[dict] = None):
        super().__init__(f"API HTTP Error {status_code}. Message {message}")
        self.status_code = status_code
        self.message = message
        self.response = response


class MissingFieldError(PipedriveError):
    """Raised by resource wrappers when a required field is missing."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class SessionBusyError(PipedriveError):
    """Raised when a session is asked to start a request while another is in flight."""
    pass
