"""jokeapi.dev provider."""

import logging

from src.config.settings import Settings
from src.engines.errors import JokeFetchError, NetworkError, UpstreamError
from src.engines.joke_normalizer import JokeRecord, parse_jokeapi_payload
from src.engines.joke_provider import FetchContext, FetchedPage, http_get


logger = logging.getLogger(__name__)


JOKEAPI_URL = "https://v2.jokeapi.dev/joke/Any?type=single"


class JokeAPIProvider:
    """Provider for jokeapi.dev.

    Although single jokes are requested, the payload may still come in the
    two-part setup/delivery shape or carry an explicit error flag. Errors
    arrive with a 4xx status, so the body is read whatever the status.

    Attributes:
        name: Identifier for this source ("jokeapi.dev")
        is_native_language: Always False
        settings: Configuration settings for the provider
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._name = "jokeapi.dev"

    @property
    def name(self) -> str:
        """Return the source identifier."""
        return self._name

    @property
    def is_native_language(self) -> bool:
        return False

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        """Fetch one joke from JokeAPI.

        Raises:
            UpstreamError: If the API reports an error
            JokeFetchError: On network, decoding or extraction failure
        """
        logger.info(f"Fetching joke from {self.name}")
        page = self._fetch_url(ctx)
        if page.status_code >= 400:
            self._raise_for_error_page(page)
        text = parse_jokeapi_payload(page.body, self.name)
        return JokeRecord(text=text, source=self.name, is_native_language=False)

    def _fetch_url(self, ctx: FetchContext) -> FetchedPage:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.settings.user_agent,
        }
        return http_get(ctx, JOKEAPI_URL, self.name, headers=headers, raise_for_status=False)

    def _raise_for_error_page(self, page: FetchedPage) -> None:
        """Raise the upstream message of an error response, or its status.

        Raises:
            UpstreamError: If the body carries the API error payload
            NetworkError: Otherwise, with the HTTP status
        """
        try:
            parse_jokeapi_payload(page.body, self.name)
        except UpstreamError:
            raise
        except JokeFetchError as e:
            raise NetworkError(self.name, f"{JOKEAPI_URL} answered with HTTP {page.status_code}") from e
        raise NetworkError(self.name, f"{JOKEAPI_URL} answered with HTTP {page.status_code}")
