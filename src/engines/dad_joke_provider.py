"""icanhazdadjoke.com provider."""

import logging

from src.config.settings import Settings
from src.engines.joke_normalizer import JokeRecord, parse_plain_json_joke
from src.engines.joke_provider import FetchContext, FetchedPage, http_get


logger = logging.getLogger(__name__)


DAD_JOKE_URL = "https://icanhazdadjoke.com"


class DadJokeProvider:
    """Provider for icanhazdadjoke.com.

    The API content-negotiates on the Accept header, so JSON must be asked
    for explicitly and anything else in the response is rejected.

    Attributes:
        name: Identifier for this source ("icanhazdadjoke.com")
        is_native_language: Always False
        settings: Configuration settings for the provider
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._name = "icanhazdadjoke.com"

    @property
    def name(self) -> str:
        """Return the source identifier."""
        return self._name

    @property
    def is_native_language(self) -> bool:
        return False

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        """Fetch one dad joke.

        Raises:
            JokeFetchError: On network failure, a non-JSON content type or
                an empty joke
        """
        logger.info(f"Fetching joke from {self.name}")
        page = self._fetch_url(ctx)
        text = parse_plain_json_joke(page.body, page.content_type, self.name)
        return JokeRecord(text=text, source=self.name, is_native_language=False)

    def _fetch_url(self, ctx: FetchContext) -> FetchedPage:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        return http_get(ctx, DAD_JOKE_URL, self.name, headers=headers)
