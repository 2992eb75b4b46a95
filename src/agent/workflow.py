"""Aggregation facade: the single entry point for fetching a joke.

Every caller (HTTP handler, bot command, CLI) goes through fetch_joke. It
picks a provider (weighted, or an explicit override), runs its fetch under a
fixed time budget and either returns the JokeRecord or propagates the
provider's failure unchanged. There is no fallback to another provider; a
failed fetch is a failed request.

Feature: joke-aggregator
"""

import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from src.engines.errors import JokeFetchError, NetworkError
from src.engines.joke_normalizer import JokeRecord
from src.engines.joke_provider import FetchContext, JokeProvider
from src.engines.observability import FetchOutcome, FetchStats, record_fetch_outcome
from src.engines.selector import ProviderRegistry, select_native, select_weighted


logger = logging.getLogger(__name__)


# Budget for one fetch, independent of any caller-supplied deadline
FETCH_TIMEOUT_SECONDS = 3.0

_executor = ThreadPoolExecutor(max_workers=16, thread_name_prefix="joke-fetch")


def fetch_joke(
    registry: ProviderRegistry,
    provider: JokeProvider | None = None,
    timeout: float = FETCH_TIMEOUT_SECONDS,
    parent: FetchContext | None = None,
    rng: random.Random | None = None,
    stats: FetchStats | None = None,
) -> JokeRecord:
    """Fetch one joke from an explicit or weighted-random provider.

    The fetch runs on a worker thread with its own FetchContext. When the
    budget runs out the context is cancelled, which makes the provider
    abandon its in-flight request, and the caller gets a NetworkError
    right away.

    Args:
        registry: Provider table used when no override is given
        provider: Explicit provider, bypassing weighted selection
        timeout: Time budget in seconds for this fetch
        parent: Optional caller context; the fetch never outlives it
        rng: Random generator for the weighted draw
        stats: Counters to record the outcome in, process-wide if None

    Returns:
        JokeRecord with non-empty text

    Raises:
        JokeFetchError: The provider's failure, unchanged, or NetworkError
            when the deadline expires
    """
    chosen = provider or select_weighted(registry, rng)
    ctx = FetchContext.with_timeout(timeout, parent)
    started = time.monotonic()

    logger.debug(f"Selected provider '{chosen.name}' with {ctx.remaining():.2f}s budget")
    future = _executor.submit(chosen.fetch, ctx)
    try:
        joke = future.result(timeout=ctx.remaining())
    except FutureTimeoutError as e:
        ctx.cancel()
        error = NetworkError(chosen.name, "context deadline exceeded")
        _record_failure(chosen.name, started, error, stats)
        raise error from e
    except JokeFetchError as e:
        _record_failure(chosen.name, started, e, stats)
        raise

    record_fetch_outcome(
        FetchOutcome(source=chosen.name, success=True, elapsed_seconds=time.monotonic() - started),
        stats,
    )
    return joke


def fetch_native_joke(
    registry: ProviderRegistry,
    timeout: float = FETCH_TIMEOUT_SECONDS,
    parent: FetchContext | None = None,
    stats: FetchStats | None = None,
) -> JokeRecord:
    """Fetch one joke from the pinned native-language provider."""
    return fetch_joke(
        registry,
        provider=select_native(registry),
        timeout=timeout,
        parent=parent,
        stats=stats,
    )


def _record_failure(
    source: str,
    started: float,
    error: JokeFetchError,
    stats: FetchStats | None,
) -> None:
    record_fetch_outcome(
        FetchOutcome(
            source=source,
            success=False,
            elapsed_seconds=time.monotonic() - started,
            error=str(error),
            error_kind=type(error).__name__,
        ),
        stats,
    )
