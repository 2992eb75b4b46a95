"""Provider registry and weighted provider selection.

Feature: joke-aggregator
Holds the fixed provider table with relative weights and draws one provider
per request with probability proportional to its weight.
"""

import random
from dataclasses import dataclass

from src.config.settings import Settings
from src.engines.anekdot_ru_provider import AnekdotRuProvider
from src.engines.baneks_provider import BaneksProvider
from src.engines.dad_joke_provider import DadJokeProvider
from src.engines.joke_provider import JokeProvider
from src.engines.jokeapi_provider import JokeAPIProvider
from src.engines.rzhunemogu_provider import RzhunemoguProvider


@dataclass(frozen=True)
class ProviderRegistry:
    """Immutable table of providers and their selection weights.

    The two tables are expected to have the same length; that is a
    construction invariant and is not checked here.

    Attributes:
        providers: Providers in selection order
        weights: Positive integer weight per provider
        native_index: Index of the provider used for native-only requests
    """
    providers: tuple[JokeProvider, ...]
    weights: tuple[int, ...]
    native_index: int = 0

    @property
    def total_weight(self) -> int:
        return sum(self.weights)

    @property
    def native(self) -> JokeProvider:
        """Return the provider pinned for native-language requests."""
        return self.providers[self.native_index]

    def by_name(self, name: str) -> JokeProvider:
        """Look up a provider by its source identifier.

        Raises:
            KeyError: If no provider has that name
        """
        for provider in self.providers:
            if provider.name == name:
                return provider
        raise KeyError(name)

    @property
    def names(self) -> list[str]:
        return [provider.name for provider in self.providers]


def pick_index(weights: tuple[int, ...] | list[int], draw: int) -> int:
    """Resolve a draw in [0, sum(weights)) to a provider index.

    Walks the cumulative weights and returns the first index whose
    cumulative weight exceeds the draw. Cumulative sums of positive weights
    are strictly increasing, so every draw maps to exactly one index.

    Args:
        weights: Positive integer weights
        draw: Uniform random integer in [0, sum(weights))

    Returns:
        Selected index, or 0 if the draw lies outside the table

    Example:
        >>> pick_index([3, 3, 3, 1, 1], 0)
        0
        >>> pick_index([3, 3, 3, 1, 1], 10)
        4
    """
    cumulative = 0
    for index, weight in enumerate(weights):
        cumulative += weight
        if draw < cumulative:
            return index
    return 0


def select_weighted(
    registry: ProviderRegistry,
    rng: random.Random | None = None,
) -> JokeProvider:
    """Draw one provider with probability proportional to its weight.

    Args:
        registry: Provider table to draw from
        rng: Random generator, module random if None

    Returns:
        The selected provider. Falls back to the first provider if the
        provider and weight tables differ in length.
    """
    if len(registry.providers) != len(registry.weights):
        return registry.providers[0]

    chooser = rng or random
    draw = chooser.randrange(registry.total_weight)
    return registry.providers[pick_index(registry.weights, draw)]


def select_native(registry: ProviderRegistry) -> JokeProvider:
    """Return the native-language provider, bypassing the weights."""
    return registry.native


def build_default_registry(settings: Settings) -> ProviderRegistry:
    """Build the registry of all joke sources.

    Native-language sources come first and carry the native weight; the
    English sources carry the foreign weight.

    Args:
        settings: Configuration with provider weights and User-Agent

    Returns:
        ProviderRegistry with rzhunemogu.ru pinned for native requests
    """
    native = settings.native_provider_weight
    foreign = settings.foreign_provider_weight
    return ProviderRegistry(
        providers=(
            RzhunemoguProvider(settings),
            AnekdotRuProvider(settings),
            BaneksProvider(settings),
            DadJokeProvider(settings),
            JokeAPIProvider(settings),
        ),
        weights=(native, native, native, foreign, foreign),
        native_index=0,
    )
