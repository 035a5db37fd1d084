"""
Pipedrive Request Executor Module

Performs every network call of the client: builds the endpoint with the
API token, encodes request bodies, sends them over httpx, parses the
response headers and JSON envelope, backs off on 429 and raises typed
errors for transport failures and 4xx/5xx statuses.
"""

import asyncio
import json
import os
import threading
import time
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Tuple

import httpx

from .encoding import EncodedPayload, FileMarker, encode_payload
from .endpoint import build_endpoint
from .headers import parse_headers, raw_header_block
from ..config.settings import get_settings
from ..core.exceptions import ApiError, SessionBusyError, TransportError
from ..core.logging_config import get_logger, redact_token
from ..core.metrics import MetricsCollector, Timer
from ..core.retry import RateLimitRetry

logger = get_logger(__name__)

USER_AGENT = 'Pipedrive-Python/0.1'
DEFAULT_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}


@dataclass(frozen=True)
class RequestDescriptor:
    """A single API call; built per call and replayed unchanged on retry."""
    verb: str
    method: str
    url: str
    payload: Optional[EncodedPayload] = None


def decode_body(body: str) -> Any:
    """Decode a JSON body, returning None when it is not valid JSON."""
    try:
        return json.loads(body)
    except ValueError:
        return None


class _BaseExecutor:
    """
    State and response handling shared by the sync and async executors.

    An executor is one session: a base URL, an API token and one httpx
    client that only one call may use at a time.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_token: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        rate_limit_retries: Optional[int] = None,
        rate_limit_backoff: Optional[int] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize the session.

        Args:
            url: API root (default from settings)
            api_token: API token (default from settings)
            timeout: Request timeout in seconds (default from settings)
            rate_limit_retries: Replays allowed for a 429 response (default from settings)
            rate_limit_backoff: Backoff when no reset header is sent (default from settings)
            metrics: Collector to record into; one is created when metrics are enabled

        Raises:
            ValueError: If no API token is available
        """
        settings = get_settings()
        self._url = url or settings.api_url
        self._api_token = api_token or settings.api_token

        if not self._api_token:
            raise ValueError(
                "Missing Pipedrive API token. Pass api_token or set "
                "PIPEDRIVE_API_TOKEN in your .env file."
            )

        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.rate_limit_retries = (
            rate_limit_retries if rate_limit_retries is not None else settings.rate_limit_retries
        )
        self.rate_limit_backoff = (
            rate_limit_backoff if rate_limit_backoff is not None else settings.rate_limit_backoff
        )
        if metrics is None and settings.enable_metrics:
            metrics = MetricsCollector()
        self.metrics = metrics
        self._lock = threading.Lock()

    @property
    def url(self) -> str:
        return self._url

    @property
    def api_token(self) -> str:
        return self._api_token

    def build_endpoint(self, method: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build the request URL for an API method, token included."""
        return build_endpoint(self._url, self._api_token, method, params)

    def _describe(self, verb: str, method: str, params: Optional[Mapping[str, Any]] = None,
                  data: Optional[Mapping[str, Any]] = None, has_body: bool = False) -> RequestDescriptor:
        payload = encode_payload(data) if has_body else None
        return RequestDescriptor(verb, method, self.build_endpoint(method, params), payload)

    @property
    def busy(self) -> bool:
        """True while a call holds the session."""
        return self._lock.locked()

    @contextmanager
    def _exclusive(self):
        # never blocks: a second caller on any thread or task fails at once
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError("Session is already executing a request")
        try:
            yield
        finally:
            self._lock.release()

    def _request_kwargs(self, request: RequestDescriptor, stack: ExitStack) -> Dict[str, Any]:
        payload = request.payload
        if payload is None:
            return {}
        if payload.is_multipart:
            return {
                'data': payload.fields,
                'files': {
                    name: (os.path.basename(marker.path), self._open_attachment(marker, stack))
                    for name, marker in payload.files.items()
                },
            }
        return {
            'content': payload.content,
            'headers': {'Content-Type': payload.content_type},
        }

    def _open_attachment(self, marker: FileMarker, stack: ExitStack):
        try:
            return stack.enter_context(open(marker.path, 'rb'))
        except OSError as e:
            logger.error(f"Cannot open attachment {marker.path}: {str(e)}")
            raise TransportError(f"API call failed: cannot open {marker.path}: {str(e)}") from e

    def _log_attempt(self, request: RequestDescriptor):
        logger.debug(f"{request.verb} {redact_token(request.url, self._api_token)}")
        if self.metrics:
            self.metrics.increment('requests', tags={'verb': request.verb})

    def _transport_failure(self, request: RequestDescriptor, error: Exception) -> TransportError:
        logger.error(f"{request.verb} {request.method} failed: {str(error)}")
        if self.metrics:
            self.metrics.record_error('request', 'transport')
        return TransportError(f"API call failed: {str(error)}")

    def _evaluate(self, request: RequestDescriptor, response: httpx.Response,
                  budget: RateLimitRetry) -> Tuple[Any, Optional[int]]:
        """
        Classify a response.

        Returns:
            (decoded envelope, backoff) where backoff is None unless the
            request should be replayed

        Raises:
            ApiError: For 4xx/5xx statuses once no retry applies
        """
        headers = parse_headers(raw_header_block(response))
        body = response.text
        result = decode_body(body)
        status = response.status_code

        if budget.should_retry(status):
            if self.metrics:
                self.metrics.increment('rate_limited')
            return result, budget.next_backoff(headers, request.method)

        if status // 100 >= 4:
            message = result.get('error') if isinstance(result, dict) else body
            logger.error(f"{request.verb} {request.method} returned HTTP {status}: {message}")
            if self.metrics:
                self.metrics.record_error('request', 'api')
            raise ApiError(status, message, result if isinstance(result, dict) else None)

        return result, None


class RequestExecutor(_BaseExecutor):
    """
    Blocking executor backed by ``httpx.Client``.

    Rate limit backoff blocks the calling thread. Use one executor per
    thread when issuing requests concurrently.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_token: Optional[str] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Optional[Callable[[float], None]] = None,
        **options: Any,
    ):
        super().__init__(url, api_token, **options)
        self._sleep = sleep or time.sleep
        self._client = httpx.Client(
            headers=DEFAULT_HEADERS,
            timeout=self.timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def close(self):
        """Close the underlying httpx client."""
        self._client.close()

    def get(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._execute(self._describe('GET', method, params))

    def post(self, method: str, data: Mapping[str, Any]) -> Any:
        return self._execute(self._describe('POST', method, data=data, has_body=True))

    def put(self, method: str, data: Mapping[str, Any]) -> Any:
        return self._execute(self._describe('PUT', method, data=data, has_body=True))

    def delete(self, method: str) -> Any:
        return self._execute(self._describe('DELETE', method))

    def _execute(self, request: RequestDescriptor) -> Any:
        budget = RateLimitRetry(self.rate_limit_retries, self.rate_limit_backoff)
        with self._exclusive():
            while True:
                response = self._send(request)
                result, backoff = self._evaluate(request, response, budget)
                if backoff is None:
                    return result
                self._sleep(backoff)

    def _send(self, request: RequestDescriptor) -> httpx.Response:
        self._log_attempt(request)
        with ExitStack() as stack:
            kwargs = self._request_kwargs(request, stack)
            try:
                with Timer('request', self.metrics, {'verb': request.verb}):
                    return self._client.request(request.verb, request.url, **kwargs)
            except (httpx.RequestError, httpx.InvalidURL) as e:
                raise self._transport_failure(request, e) from e


class AsyncRequestExecutor(_BaseExecutor):
    """
    Asyncio executor backed by ``httpx.AsyncClient``.

    Backoff awaits ``asyncio.sleep``, so cancelling the calling task (for
    example through ``asyncio.wait_for``) aborts a pending retry.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_token: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
        **options: Any,
    ):
        super().__init__(url, api_token, **options)
        self._sleep = sleep or asyncio.sleep
        self._client = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    async def aclose(self):
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def get(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return await self._execute(self._describe('GET', method, params))

    async def post(self, method: str, data: Mapping[str, Any]) -> Any:
        return await self._execute(self._describe('POST', method, data=data, has_body=True))

    async def put(self, method: str, data: Mapping[str, Any]) -> Any:
        return await self._execute(self._describe('PUT', method, data=data, has_body=True))

    async def delete(self, method: str) -> Any:
        return await self._execute(self._describe('DELETE', method))

    async def _execute(self, request: RequestDescriptor) -> Any:
        budget = RateLimitRetry(self.rate_limit_retries, self.rate_limit_backoff)
        with self._exclusive():
            while True:
                response = await self._send(request)
                result, backoff = self._evaluate(request, response, budget)
                if backoff is None:
                    return result
                try:
                    await self._sleep(backoff)
                except asyncio.CancelledError:
                    logger.info(f"{request.verb} {request.method} cancelled during rate limit backoff")
                    raise

    async def _send(self, request: RequestDescriptor) -> httpx.Response:
        self._log_attempt(request)
        with ExitStack() as stack:
            kwargs = self._request_kwargs(request, stack)
            try:
                with Timer('request', self.metrics, {'verb': request.verb}):
                    return await self._client.request(request.verb, request.url, **kwargs)
            except (httpx.RequestError, httpx.InvalidURL) as e:
                raise self._transport_failure(request, e) from e
