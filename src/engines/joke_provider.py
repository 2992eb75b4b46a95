"""Joke provider protocol, fetch context and the shared HTTP GET."""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import requests

from src.engines.errors import NetworkError, RequestConstructionError
from src.engines.joke_normalizer import JokeRecord


logger = logging.getLogger(__name__)


# Bytes read between cancellation checks
CHUNK_SIZE = 1024


@dataclass
class FetchContext:
    """Deadline and cancellation signal handed to a provider fetch.

    A context derived from a parent never outlives it: its deadline is the
    earlier of the two and cancelling the parent cancels the child.

    Attributes:
        deadline: time.monotonic() value after which the fetch is abandoned
        parent: Optional enclosing context
    """
    deadline: float
    parent: "FetchContext | None" = None
    _cancel_event: threading.Event = field(default_factory=threading.Event, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float, parent: "FetchContext | None" = None) -> "FetchContext":
        """Create a context expiring ``seconds`` from now.

        Args:
            seconds: Time budget for the fetch
            parent: Optional caller context bounding this one

        Returns:
            A new FetchContext
        """
        deadline = time.monotonic() + seconds
        if parent is not None:
            deadline = min(deadline, parent.deadline)
        return cls(deadline=deadline, parent=parent)

    @property
    def cancelled(self) -> bool:
        if self._cancel_event.is_set():
            return True
        return self.parent is not None and self.parent.cancelled

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def cancel(self) -> None:
        self._cancel_event.set()

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline - time.monotonic())

    def check(self, source: str) -> None:
        """Raise NetworkError if the context was cancelled or has expired."""
        if self.cancelled:
            raise NetworkError(source, "context canceled")
        if self.expired:
            raise NetworkError(source, "context deadline exceeded")

    def request_timeout(self, source: str) -> float:
        """Return the socket timeout for the next network operation."""
        self.check(source)
        return self.remaining()


@dataclass(frozen=True)
class FetchedPage:
    """Raw response handed from the transport to a normalizer.

    Attributes:
        status_code: HTTP status code
        content_type: Content-Type header value, None if absent
        body: Raw response bytes
    """
    status_code: int
    content_type: str | None
    body: bytes


@runtime_checkable
class JokeProvider(Protocol):
    """Protocol implemented by every joke source.

    Providers are stateless. A fetch performs exactly one outbound request,
    honours the context's deadline and cancellation and never retries.

    Attributes:
        name: Source identifier (e.g. "rzhunemogu.ru")
        is_native_language: Whether the source serves the primary language
    """

    @property
    def name(self) -> str:
        """Return the source identifier."""
        ...

    @property
    def is_native_language(self) -> bool:
        """Return whether jokes from this source are in the native language."""
        ...

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        """Fetch one joke.

        Args:
            ctx: Deadline and cancellation for this attempt

        Returns:
            A JokeRecord with non-empty text

        Raises:
            JokeFetchError: On any failure; never retried by the provider.
        """
        ...


def http_get(
    ctx: FetchContext,
    url: str,
    source: str,
    headers: dict[str, str] | None = None,
    raise_for_status: bool = True,
) -> FetchedPage:
    """Perform one GET request bounded by the fetch context.

    The socket timeout is the context's remaining budget and the body is
    read in chunks with the context checked between them, so a cancelled
    or expired context abandons the transfer.

    Args:
        ctx: Deadline and cancellation for this request
        url: URL to fetch
        source: Provider identifier for error context
        headers: Extra request headers
        raise_for_status: If False, error statuses are returned with their
            body so the caller can read an error payload

    Returns:
        FetchedPage with status, content type and body

    Raises:
        RequestConstructionError: If the URL cannot be turned into a request
        NetworkError: On transport errors, timeouts, cancellation or, when
            raise_for_status is set, an HTTP error status
    """
    timeout = ctx.request_timeout(source)
    try:
        response = requests.get(url, headers=headers, timeout=timeout, stream=True)
    except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema, requests.exceptions.InvalidHeader) as e:
        raise RequestConstructionError(source, f"cannot build request for {url}: {e}") from e
    except requests.Timeout as e:
        raise NetworkError(source, f"request to {url} timed out: {e}") from e
    except requests.RequestException as e:
        raise NetworkError(source, f"request to {url} failed: {e}") from e

    with response:
        if raise_for_status and response.status_code >= 400:
            raise NetworkError(source, f"{url} answered with HTTP {response.status_code}")

        chunks: list[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                ctx.check(source)
                chunks.append(chunk)
        except requests.RequestException as e:
            raise NetworkError(source, f"reading response from {url} failed: {e}") from e

        body = b"".join(chunks)
        logger.debug(f"GET {url} -> {response.status_code}, {len(body)} bytes")
        return FetchedPage(
            status_code=response.status_code,
            content_type=response.headers.get("Content-Type"),
            body=body,
        )
