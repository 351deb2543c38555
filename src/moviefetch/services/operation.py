"""Network operation with a three-state lifecycle.

A NetworkOperation issues one HTTP GET, classifies the outcome, decodes the
body into a typed value and reports completion exactly once. Operations are
executed by a TaskQueue worker; they perform no caching of their own.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar
from urllib.parse import urlsplit

import orjson
import requests
from pydantic import TypeAdapter
from requests.adapters import HTTPAdapter

from moviefetch.shared.constants import NetworkConfig
from moviefetch.shared.errors import ErrorContext, NetworkError, NetworkErrorKind
from moviefetch.shared.logging import log_api_call, log_operation_error

logger = logging.getLogger(__name__)

T = TypeVar("T")

Decoder = Callable[[bytes], T]


class OperationState(Enum):
    """Lifecycle states of a NetworkOperation."""

    IDLE = "idle"
    EXECUTING = "executing"
    FINISHED = "finished"


@dataclass(frozen=True)
class NetworkOutcome(Generic[T]):
    """Result of a finished operation: a decoded value or a NetworkError."""

    value: T | None = None
    error: NetworkError | None = None

    @classmethod
    def success(cls, value: T) -> NetworkOutcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: NetworkError) -> NetworkOutcome[T]:
        return cls(error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the error of a failed outcome."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


Completion = Callable[[NetworkOutcome[T]], None]


def decode_bytes(data: bytes) -> bytes:
    """Pass-through decoder for raw assets such as images."""
    return data


def json_decoder(model: type[T]) -> Decoder[T]:
    """Create a decoder that parses JSON and validates it as ``model``.

    Args:
        model: Any type pydantic can validate, typically an OMDb model

    Returns:
        Decoder raising ValueError on malformed or invalid payloads
    """
    adapter: TypeAdapter[T] = TypeAdapter(model)

    def decode(data: bytes) -> T:
        return adapter.validate_python(orjson.loads(data))

    return decode


def create_session(pool_size: int = NetworkConfig.POOL_SIZE) -> requests.Session:
    """Create an HTTP session shared by the operations of one service.

    Args:
        pool_size: Connections kept per host, at least the total worker count

    Returns:
        Configured requests session
    """
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update(
        {
            "User-Agent": NetworkConfig.USER_AGENT,
            "Accept": NetworkConfig.ACCEPT_ANY,
        }
    )
    return session


def redact_url(url: str) -> str:
    """Strip the query string (and with it the API key) from a URL."""
    try:
        return urlsplit(url)._replace(query="").geturl()
    except ValueError:
        return "<unparseable url>"


class NetworkOperation(Generic[T]):
    """A single asynchronous unit of network work.

    State machine: IDLE -> EXECUTING -> FINISHED. ``start()`` performs the
    request on the calling thread (a queue worker) and invokes the completion
    exactly once before the operation is marked FINISHED.

    Cancellation before ``start()`` prevents execution entirely. Cancellation
    during execution does not abort the HTTP call; the result is discarded,
    the completion is not invoked and ``outcome()`` raises CancelledError.

    Args:
        url: Fully-qualified request URL
        decode: Decoder turning the response body into a value
        completion: Callback receiving the NetworkOutcome
        session: HTTP session used for the request
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        url: str,
        decode: Decoder[T],
        completion: Completion[T] | None = None,
        session: requests.Session | None = None,
        timeout: float = NetworkConfig.DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url
        self._decode = decode
        self._completion = completion
        self._session = session or requests.Session()
        self._timeout = timeout

        self._lock = threading.Lock()
        self._state = OperationState.IDLE
        self._cancelled = False
        self._completing = False
        self._future: Future[NetworkOutcome[T]] = Future()

    @property
    def state(self) -> OperationState:
        with self._lock:
            return self._state

    @property
    def is_cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    @property
    def is_finished(self) -> bool:
        return self.state is OperationState.FINISHED

    def cancel(self) -> None:
        """Mark the operation as cancelled.

        Has no effect once the outcome is being delivered or the operation
        has finished.
        """
        with self._lock:
            if self._completing or self._state is OperationState.FINISHED:
                return
            self._cancelled = True
            not_started = self._state is OperationState.IDLE

        if not_started:
            self._future.cancel()

    def start(self) -> None:
        """Execute the request and deliver the outcome.

        Returns immediately if the operation was cancelled or already started.
        """
        with self._lock:
            if self._cancelled or self._state is not OperationState.IDLE:
                return
            self._state = OperationState.EXECUTING

        outcome = self._perform()

        # Deliver or discard is decided once; cancel() is a no-op afterwards
        with self._lock:
            cancelled = self._cancelled
            self._completing = not cancelled

        try:
            if not cancelled and self._completion is not None:
                self._completion(outcome)
        finally:
            with self._lock:
                self._state = OperationState.FINISHED
            if cancelled:
                logger.debug("Discarding result of cancelled request to %s", redact_url(self.url))
                self._future.cancel()
            else:
                self._future.set_result(outcome)

    def outcome(self, timeout: float | None = None) -> NetworkOutcome[T]:
        """Block until the operation has finished and return its outcome.

        Raises:
            concurrent.futures.CancelledError: If the operation was cancelled
            concurrent.futures.TimeoutError: If the timeout expires
        """
        return self._future.result(timeout=timeout)

    def add_done_callback(self, callback: Callable[[Future[Any]], None]) -> None:
        """Register a callback run once the operation is finished or cancelled."""
        self._future.add_done_callback(callback)

    def _perform(self) -> NetworkOutcome[T]:
        endpoint = redact_url(self.url)
        context = ErrorContext(operation="network_request", url=endpoint)
        started = time.perf_counter()

        try:
            response = self._session.get(self.url, timeout=self._timeout)
        except requests.RequestException as e:
            return self._fail(
                NetworkError(
                    NetworkErrorKind.NETWORK_FAILURE,
                    f"Request failed: {e}",
                    context,
                    original_error=e,
                )
            )

        duration_ms = (time.perf_counter() - started) * 1000
        status_code = response.status_code
        log_api_call(logger, endpoint, status_code=status_code, duration_ms=duration_ms)

        if not NetworkConfig.SUCCESS_STATUS_MIN <= status_code <= NetworkConfig.SUCCESS_STATUS_MAX:
            return self._fail(
                NetworkError(
                    NetworkErrorKind.REMOTE_FAILURE,
                    f"Remote host returned status {status_code}",
                    context,
                    status_code=status_code,
                )
            )

        data = response.content
        if not data:
            return self._fail(
                NetworkError(
                    NetworkErrorKind.MISSING_DATA,
                    "Remote host returned an empty body",
                    context,
                    status_code=status_code,
                )
            )

        try:
            value = self._decode(data)
        except (ValueError, TypeError) as e:
            return self._fail(
                NetworkError(
                    NetworkErrorKind.DECODING_FAILURE,
                    f"Could not decode response: {e}",
                    context,
                    original_error=e,
                    status_code=status_code,
                )
            )

        return NetworkOutcome.success(value)

    def _fail(self, error: NetworkError) -> NetworkOutcome[T]:
        log_operation_error(logger, error, level=logging.WARNING)
        return NetworkOutcome.failure(error)

    def __repr__(self) -> str:
        return f"NetworkOperation(url={redact_url(self.url)!r}, state={self.state.value})"
