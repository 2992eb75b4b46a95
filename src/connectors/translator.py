"""Translation connector backed by the public Google Translate endpoint."""

import logging
from typing import Any

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from src.config.settings import Settings


logger = logging.getLogger(__name__)


TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"


class TranslationError(Exception):
    """Raised when a text cannot be translated."""

    pass


def extract_translation(data: Any) -> str:
    """Join the translated segments of a translate_a/single payload.

    The payload is a nested array whose first element lists segments; the
    first item of each segment is the translated text.

    Args:
        data: Decoded JSON payload

    Returns:
        The concatenated translation, empty if the payload has no segments

    Example:
        >>> extract_translation([[["Привет. ", "Hello. "], ["Мир", "World"]]])
        'Привет. Мир'
    """
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        return ""

    parts: list[str] = []
    for segment in data[0]:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            parts.append(segment[0])
    return "".join(parts)


class Translator:
    """Translates joke text into the audience's language.

    The core treats translation as opaque: text in, text or failure out.
    Connection errors are retried once since the call is an idempotent GET.

    Attributes:
        settings: Configuration with languages and timeout
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def translate(self, text: str) -> str:
        """Translate text from the source to the target language.

        Args:
            text: Text to translate

        Returns:
            Translated text, never empty

        Raises:
            TranslationError: On network or decoding failure, or an empty
                translation
        """
        if not text.strip():
            raise TranslationError("nothing to translate")

        try:
            data = self._fetch_translation(text)
        except requests.RequestException as e:
            logger.error(f"Translation request failed: {e}")
            raise TranslationError(f"translation request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Translation response is not valid JSON: {e}")
            raise TranslationError(f"invalid translation response: {e}") from e

        translation = extract_translation(data).strip()
        if not translation:
            raise TranslationError("empty translation")
        return translation

    @retry(
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type(requests.ConnectionError),
        reraise=True,
    )
    def _fetch_translation(self, text: str) -> Any:
        """Call the translate endpoint and decode its JSON payload.

        Raises:
            requests.RequestException: On network errors after retries
            ValueError: If the body is not JSON
        """
        params = {
            "client": "gtx",
            "sl": self.settings.translate_source_lang,
            "tl": self.settings.translate_target_lang,
            "dt": "t",
            "q": text,
        }
        headers = {"User-Agent": self.settings.user_agent}

        response = requests.get(
            TRANSLATE_URL,
            params=params,
            headers=headers,
            timeout=self.settings.translate_timeout_seconds,
        )
        response.raise_for_status()
        return response.json()
