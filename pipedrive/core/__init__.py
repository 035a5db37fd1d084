"""
Core module providing foundational components for the client.

Includes interfaces and exceptions.
"""

from .interfaces import IValidator, IRequester
from .exceptions import (
    PipedriveError,
    TransportError,
    ApiError,
    MissingFieldError,
    SessionBusyError,
)

__all__ = [
    'IValidator',
    'IRequester',
    'PipedriveError',
    'TransportError',
    'ApiError',
    'MissingFieldError',
    'SessionBusyError',
]
