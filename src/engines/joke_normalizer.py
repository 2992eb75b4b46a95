"""Joke data model and per-source content normalization.

Every joke source speaks a different wire format, so each one gets its own
extraction routine here. All routines share one contract: return a clean,
trimmed, non-empty joke string or raise a JokeFetchError subclass. HTML pages
are scraped with plain string markers.
"""

import json
import logging
import random
from dataclasses import dataclass
from typing import Any

from src.engines.errors import (
    DecodingError,
    ExtractionError,
    UnexpectedContentTypeError,
    UpstreamError,
)


logger = logging.getLogger(__name__)


# Charsets accepted alongside an application/json content type
ACCEPTED_JSON_CHARSETS = frozenset({
    "utf-8",
    "windows-1251",
    "cp1251",
    "iso-8859-1",
    "us-ascii",
})

LEGACY_ENCODING = "windows-1251"
UTF8_BOM = b"\xef\xbb\xbf"

SCRIPT_ARRAY_START = "JSON.parse('["
SCRIPT_ARRAY_END = "]')"
SCRIPT_ARRAY_QUOTE = '\\"'
SCRIPT_ARRAY_DELIMITER = '\\",\\"'

META_DESCRIPTION_START = '<meta name="description" content="'
META_DESCRIPTION_END = '">'

# Applied in order; &amp; must come last so "&amp;lt;" stays "&lt;"
SCRIPT_ENTITY_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ('\\"', '"'),
    ("<br>", "\n"),
    ("&quot;", '"'),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
)


@dataclass(frozen=True)
class JokeRecord:
    """A normalized joke ready to be served.

    Attributes:
        text: Joke text, newline-normalized and trimmed, never empty
        source: Identifier of the originating provider (e.g. "baneks.ru")
        is_native_language: Whether the provider serves the primary
            audience's language. Fixed per provider.

    Raises:
        ExtractionError: If text is empty after trimming.
    """
    text: str
    source: str
    is_native_language: bool

    def __post_init__(self) -> None:
        if not self.text or not self.text.strip():
            raise ExtractionError(self.source, "refusing to build a record from an empty joke")

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape served over HTTP."""
        return {
            "joke": self.text,
            "source": self.source,
            "is_native_language": self.is_native_language,
        }


def finish_text(text: str) -> str:
    """Normalize line endings and trim surrounding whitespace."""
    return text.replace("\r\n", "\n").strip()


def decode_body(body: bytes) -> str:
    """Decode an HTML page body as UTF-8, replacing invalid bytes."""
    return body.decode("utf-8", errors="replace")


def is_json_content_type(content_type: str | None) -> bool:
    """Check whether a Content-Type header declares JSON.

    Accepts a bare ``application/json`` or one carrying a charset from
    ACCEPTED_JSON_CHARSETS. Matching is case-insensitive and tolerant of
    whitespace around the separators.

    Example:
        >>> is_json_content_type("application/json; charset=utf-8")
        True
        >>> is_json_content_type("text/html; charset=utf-8")
        False
    """
    if not content_type:
        return False

    media_type, *params = [part.strip() for part in content_type.split(";")]
    if media_type.lower() != "application/json":
        return False

    for param in params:
        if not param:
            continue
        name, _, value = param.partition("=")
        if name.strip().lower() != "charset":
            return False
        if value.strip().strip('"').lower() not in ACCEPTED_JSON_CHARSETS:
            return False
    return True


def _load_json_object(payload: str | bytes, source: str) -> dict[str, Any]:
    try:
        data = json.loads(payload)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodingError(source, f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodingError(source, f"expected a JSON object, got {type(data).__name__}")
    return data


def _string_field(data: dict[str, Any], name: str) -> str:
    value = data.get(name)
    return value if isinstance(value, str) else ""


def parse_plain_json_joke(body: bytes, content_type: str | None, source: str) -> str:
    """Extract the ``joke`` field from a JSON API response.

    Args:
        body: Raw response body
        content_type: Value of the Content-Type response header
        source: Provider identifier for error context

    Returns:
        The trimmed joke text

    Raises:
        UnexpectedContentTypeError: If the response is not declared as JSON
        DecodingError: If the body is not a JSON object
        ExtractionError: If the joke field is missing or empty
    """
    if not is_json_content_type(content_type):
        raise UnexpectedContentTypeError(source, content_type)

    data = _load_json_object(body, source)
    if "joke" not in data:
        raise ExtractionError(source, "response has no 'joke' field")

    text = finish_text(_string_field(data, "joke"))
    if not text:
        raise ExtractionError(source, "received an empty joke")
    return text


def parse_legacy_json_joke(body: bytes, source: str) -> str:
    """Extract the ``content`` field from a windows-1251 encoded JSON body.

    The upstream embeds raw CRLF pairs inside the JSON string, which is not
    valid JSON. They are rewritten into an escaped newline before parsing
    and any escaped newlines left after parsing become real newlines.

    Args:
        body: Raw response body in the legacy 8-bit code page
        source: Provider identifier for error context

    Returns:
        The trimmed joke text with real newlines

    Raises:
        DecodingError: If transcoding or JSON parsing fails
        ExtractionError: If the content field is empty
    """
    if body.startswith(UTF8_BOM):
        body = body[len(UTF8_BOM):]

    try:
        decoded = body.decode(LEGACY_ENCODING)
    except UnicodeDecodeError as e:
        raise DecodingError(source, f"cannot decode {LEGACY_ENCODING}: {e}") from e

    decoded = decoded.lstrip("\ufeff").strip()
    decoded = decoded.replace("\r\n", "\\n")
    logger.debug(f"Decoded response from {source}: {decoded[:500]}")

    data = _load_json_object(decoded, source)
    text = _string_field(data, "content").replace("\\n", "\n")
    text = finish_text(text)
    if not text:
        raise ExtractionError(source, "received an empty joke")
    return text


def unescape_script_entry(entry: str) -> str:
    """Resolve the JS quote escape, line breaks and HTML entities of an entry."""
    for old, new in SCRIPT_ENTITY_REPLACEMENTS:
        entry = entry.replace(old, new)
    return finish_text(entry)


def split_script_array(html: str, source: str) -> list[str]:
    """Return the raw entries of the JSON array literal embedded in a page.

    Raises:
        ExtractionError: If either marker is missing or no entry is found
    """
    start = html.find(SCRIPT_ARRAY_START)
    if start == -1:
        raise ExtractionError(source, "start of the joke array not found")
    start += len(SCRIPT_ARRAY_START)

    end = html.find(SCRIPT_ARRAY_END, start)
    if end == -1:
        raise ExtractionError(source, "end of the joke array not found")

    inner = html[start:end].strip()
    if inner.startswith(SCRIPT_ARRAY_QUOTE):
        inner = inner[len(SCRIPT_ARRAY_QUOTE):]
    if inner.endswith(SCRIPT_ARRAY_QUOTE):
        inner = inner[:-len(SCRIPT_ARRAY_QUOTE)]

    entries = [entry for entry in inner.split(SCRIPT_ARRAY_DELIMITER) if entry]
    if not entries:
        raise ExtractionError(source, "no jokes found in the array")
    return entries


def extract_script_array_joke(
    html: str,
    source: str,
    rng: random.Random | None = None,
) -> str:
    """Pick one joke from a JSON array literal inside inline script text.

    Args:
        html: Page markup
        source: Provider identifier for error context
        rng: Random generator used for the pick, module random if None

    Returns:
        One unescaped, trimmed entry chosen uniformly at random

    Raises:
        ExtractionError: If a marker is missing or the chosen entry is empty
    """
    entries = split_script_array(html, source)
    chooser = rng or random
    text = unescape_script_entry(chooser.choice(entries))
    if not text:
        raise ExtractionError(source, "received an empty joke")
    return text


def extract_meta_description_joke(html: str, source: str) -> str:
    """Extract the joke stored in the page's meta description.

    Raises:
        ExtractionError: If the tag or its terminator is missing, or the
            description is empty
    """
    start = html.find(META_DESCRIPTION_START)
    if start == -1:
        raise ExtractionError(source, "meta description not found")
    start += len(META_DESCRIPTION_START)

    end = html.find(META_DESCRIPTION_END, start)
    if end == -1:
        raise ExtractionError(source, "end of meta description not found")

    text = html[start:end]
    text = text.replace("\\n", "\n").replace('\\"', '"')
    text = finish_text(text)
    if not text:
        raise ExtractionError(source, "received an empty joke")
    return text


def parse_jokeapi_payload(body: bytes, source: str) -> str:
    """Extract a joke from a single or setup/delivery shaped JSON payload.

    Args:
        body: Raw response body
        source: Provider identifier for error context

    Returns:
        The joke text, or setup and delivery joined by a newline

    Raises:
        DecodingError: If the body is not a JSON object
        UpstreamError: If the payload sets its error flag
        ExtractionError: If neither shape yields a joke
    """
    data = _load_json_object(body, source)

    if data.get("error") is True:
        raise UpstreamError(source, _string_field(data, "message"))

    joke = finish_text(_string_field(data, "joke"))
    if joke:
        return joke

    setup = finish_text(_string_field(data, "setup"))
    delivery = finish_text(_string_field(data, "delivery"))
    if setup and delivery:
        return f"{setup}\n{delivery}"

    raise ExtractionError(source, "received an empty joke")
