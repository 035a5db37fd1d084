"""
Pipedrive client entry point.

Owns one request executor and exposes the resource wrappers that share
it. Use one client per thread.
"""

from typing import Any, Callable, Optional

import httpx

from .clients.executor import RequestExecutor
from .core.logging_config import get_logger
from .resources import Deals, Organizations, Persons

logger = get_logger(__name__)


class Pipedrive:
    """
    Client for the Pipedrive REST API.

    Usage:
        with Pipedrive(api_token) as pipedrive:
            pipedrive.persons.add({'name': 'Jane Doe'})
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        url: Optional[str] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
        **options: Any,
    ):
        """
        Initialize the client.

        Args:
            api_token: API token (default from PIPEDRIVE_API_TOKEN)
            url: API root (default from PIPEDRIVE_URL)
            transport: Optional httpx transport, e.g. a MockTransport in tests
            sleep: Optional replacement for time.sleep during rate limit backoff
            **options: Extra executor settings (timeout, rate_limit_retries, ...)

        Raises:
            ValueError: If no API token is available
        """
        self._executor = RequestExecutor(url, api_token, transport=transport, sleep=sleep, **options)

        self.persons = Persons(self._executor)
        self.deals = Deals(self._executor)
        self.organizations = Organizations(self._executor)

        logger.info(f"Pipedrive client initialized for {self._executor.url}")

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def close(self):
        self._executor.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
