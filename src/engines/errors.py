"""Exception hierarchy for joke fetching failures.

Every failure of a single fetch attempt is a JokeFetchError subclass carrying
the source name and a description of the cause. Underlying exceptions are
chained with ``raise ... from`` so callers can inspect the full cause chain
while showing end users only a generic message.
"""


class JokeFetchError(Exception):
    """Base class for a failed joke fetch.

    Attributes:
        source: Identifier of the provider that failed
        reason: Human readable description of the failure

    Example:
        >>> raise JokeFetchError("baneks.ru", "meta description not found")
        JokeFetchError: baneks.ru: meta description not found
    """

    def __init__(self, source: str, reason: str) -> None:
        """Initialize the error.

        Args:
            source: Provider identifier, used as log context.
            reason: Description of why the fetch failed.
        """
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class RequestConstructionError(JokeFetchError):
    """Raised when the outbound request cannot be built."""


class NetworkError(JokeFetchError):
    """Raised on transport failures, HTTP error statuses and deadline expiry."""


class UnexpectedContentTypeError(JokeFetchError):
    """Raised when a JSON source answers with a non-JSON content type."""

    def __init__(self, source: str, content_type: str | None) -> None:
        self.content_type = content_type
        super().__init__(source, f"expected JSON, got Content-Type: {content_type!r}")


class DecodingError(JokeFetchError):
    """Raised when transcoding or JSON parsing of a response fails."""


class ExtractionError(JokeFetchError):
    """Raised when a marker is missing or the extracted joke is empty."""


class UpstreamError(JokeFetchError):
    """Raised when a JSON API reports an error explicitly.

    The upstream message is kept for logging only; it is not safe to show
    to end users as-is.
    """

    def __init__(self, source: str, upstream_message: str) -> None:
        self.upstream_message = upstream_message
        super().__init__(source, f"upstream reported error: {upstream_message}")
