"""baneks.ru provider scraping the meta description of a random joke page."""

import logging

from src.config.settings import Settings
from src.engines.joke_normalizer import (
    JokeRecord,
    decode_body,
    extract_meta_description_joke,
)
from src.engines.joke_provider import FetchContext, FetchedPage, http_get


logger = logging.getLogger(__name__)


BANEKS_URL = "https://baneks.ru/random"


class BaneksProvider:
    """Provider for baneks.ru.

    Attributes:
        name: Identifier for this source ("baneks.ru")
        is_native_language: Always True
        settings: Configuration settings for the provider
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._name = "baneks.ru"

    @property
    def name(self) -> str:
        """Return the source identifier."""
        return self._name

    @property
    def is_native_language(self) -> bool:
        return True

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        """Fetch a random joke page and read the joke from its meta description.

        Raises:
            JokeFetchError: On network or extraction failure
        """
        logger.info(f"Fetching joke from {self.name}")
        page = self._fetch_url(ctx)
        content = decode_body(page.body)
        logger.debug(f"Response from {self.name} (first 500 chars): {content[:500]}")

        text = extract_meta_description_joke(content, self.name)
        logger.info(f"Successfully fetched joke from {self.name}")
        return JokeRecord(text=text, source=self.name, is_native_language=True)

    def _fetch_url(self, ctx: FetchContext) -> FetchedPage:
        headers = {"User-Agent": self.settings.user_agent}
        return http_get(ctx, BANEKS_URL, self.name, headers=headers)
