"""rzhunemogu.ru provider serving windows-1251 encoded JSON."""

import logging

from src.config.settings import Settings
from src.engines.joke_normalizer import JokeRecord, parse_legacy_json_joke
from src.engines.joke_provider import FetchContext, FetchedPage, http_get


logger = logging.getLogger(__name__)


# CType=1 selects plain jokes
RZHUNEMOGU_URL = "http://rzhunemogu.ru/RandJSON.aspx?CType=1"


class RzhunemoguProvider:
    """Provider for rzhunemogu.ru.

    The endpoint answers with JSON in the windows-1251 code page and raw
    CRLF line breaks inside the string value; the legacy JSON normalizer
    takes care of both.

    Attributes:
        name: Identifier for this source ("rzhunemogu.ru")
        is_native_language: Always True
        settings: Configuration settings for the provider
    """

    def __init__(self, settings: Settings):
        """Initialize the rzhunemogu.ru provider.

        Args:
            settings: Configuration settings including the User-Agent
        """
        self.settings = settings
        self._name = "rzhunemogu.ru"

    @property
    def name(self) -> str:
        """Return the source identifier."""
        return self._name

    @property
    def is_native_language(self) -> bool:
        return True

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        """Fetch one joke from rzhunemogu.ru.

        Args:
            ctx: Deadline and cancellation for this attempt

        Returns:
            JokeRecord flagged as native language

        Raises:
            JokeFetchError: On network, decoding or extraction failure
        """
        logger.info(f"Fetching joke from {self.name}")
        page = self._fetch_url(ctx)
        text = parse_legacy_json_joke(page.body, self.name)
        logger.info(f"Successfully fetched joke from {self.name}")
        return JokeRecord(text=text, source=self.name, is_native_language=True)

    def _fetch_url(self, ctx: FetchContext) -> FetchedPage:
        headers = {"User-Agent": self.settings.user_agent}
        return http_get(ctx, RZHUNEMOGU_URL, self.name, headers=headers)
