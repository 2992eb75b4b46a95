"""Engines module - providers, normalization and selection."""

from src.engines.errors import (
    DecodingError,
    ExtractionError,
    JokeFetchError,
    NetworkError,
    RequestConstructionError,
    UnexpectedContentTypeError,
    UpstreamError,
)
from src.engines.joke_normalizer import JokeRecord
from src.engines.joke_provider import FetchContext, JokeProvider
from src.engines.selector import (
    ProviderRegistry,
    build_default_registry,
    select_native,
    select_weighted,
)

__all__ = [
    # Data model
    "JokeRecord",
    "FetchContext",
    "JokeProvider",
    # Selection
    "ProviderRegistry",
    "build_default_registry",
    "select_native",
    "select_weighted",
    # Exceptions
    "JokeFetchError",
    "RequestConstructionError",
    "NetworkError",
    "UnexpectedContentTypeError",
    "DecodingError",
    "ExtractionError",
    "UpstreamError",
]
