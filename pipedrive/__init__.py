"""
Python client for the Pipedrive CRM REST API.
"""

from .client import Pipedrive
from .clients.executor import RequestExecutor, AsyncRequestExecutor
from .core.exceptions import (
    PipedriveError,
    TransportError,
    ApiError,
    MissingFieldError,
    SessionBusyError,
)

__version__ = "0.1.0"

__all__ = [
    'Pipedrive',
    'RequestExecutor',
    'AsyncRequestExecutor',
    'PipedriveError',
    'TransportError',
    'ApiError',
    'MissingFieldError',
    'SessionBusyError',
]
