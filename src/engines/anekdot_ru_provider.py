"""anekdot.ru provider scraping the random jokes page."""

import logging
import random

from src.config.settings import Settings
from src.engines.joke_normalizer import (
    JokeRecord,
    decode_body,
    extract_script_array_joke,
)
from src.engines.joke_provider import FetchContext, FetchedPage, http_get


logger = logging.getLogger(__name__)


ANEKDOT_RU_URL = "https://www.anekdot.ru/rss/randomu.html"


class AnekdotRuProvider:
    """Provider for anekdot.ru.

    The page ships a batch of random jokes as a JSON array literal inside
    an inline script; one entry of the batch is picked at random.

    Attributes:
        name: Identifier for this source ("anekdot.ru")
        is_native_language: Always True
        settings: Configuration settings for the provider
    """

    def __init__(self, settings: Settings, rng: random.Random | None = None):
        """Initialize the anekdot.ru provider.

        Args:
            settings: Configuration settings including the User-Agent
            rng: Random generator for picking an entry, module random if None
        """
        self.settings = settings
        self._rng = rng
        self._name = "anekdot.ru"

    @property
    def name(self) -> str:
        """Return the source identifier."""
        return self._name

    @property
    def is_native_language(self) -> bool:
        return True

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        """Fetch the random page and pick one joke from it.

        Raises:
            JokeFetchError: On network or extraction failure
        """
        logger.info(f"Fetching joke from {self.name}")
        page = self._fetch_url(ctx)
        text = extract_script_array_joke(decode_body(page.body), self.name, self._rng)
        logger.info(f"Successfully fetched joke from {self.name}")
        return JokeRecord(text=text, source=self.name, is_native_language=True)

    def _fetch_url(self, ctx: FetchContext) -> FetchedPage:
        headers = {"User-Agent": self.settings.user_agent}
        return http_get(ctx, ANEKDOT_RU_URL, self.name, headers=headers)
