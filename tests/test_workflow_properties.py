"""Tests for the aggregation facade.

Feature: joke-aggregator
"""

import threading
import time

import pytest
from hypothesis import given, settings, strategies as st

from src.agent.workflow import fetch_joke, fetch_native_joke
from src.engines.errors import ExtractionError, JokeFetchError, NetworkError, UpstreamError
from src.engines.joke_normalizer import JokeRecord
from src.engines.joke_provider import FetchContext
from src.engines.observability import FetchStats
from src.engines.selector import ProviderRegistry


class MockSuccessProvider:
    """Provider that always succeeds."""

    def __init__(self, name: str, native: bool = False):
        self._name = name
        self._native = native
        self.contexts: list[FetchContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_native_language(self) -> bool:
        return self._native

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        self.contexts.append(ctx)
        return JokeRecord(text=f"joke from {self._name}", source=self._name, is_native_language=self._native)


class MockFailingProvider:
    """Provider that always raises the given error."""

    def __init__(self, name: str, error: JokeFetchError):
        self._name = name
        self.error = error

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_native_language(self) -> bool:
        return False

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        raise self.error


class MockHangingProvider:
    """Provider that never answers on its own and waits for cancellation."""

    def __init__(self, name: str = "hanging"):
        self._name = name
        self.saw_cancel = threading.Event()

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_native_language(self) -> bool:
        return False

    def fetch(self, ctx: FetchContext) -> JokeRecord:
        while not ctx.cancelled:
            time.sleep(0.01)
        self.saw_cancel.set()
        ctx.check(self._name)
        raise AssertionError("unreachable")


class FixedDraw:
    def __init__(self, value: int):
        self.value = value

    def randrange(self, stop: int) -> int:
        return self.value


def registry_of(*providers, weights=None, native_index=0) -> ProviderRegistry:
    return ProviderRegistry(
        providers=tuple(providers),
        weights=tuple(weights or [1] * len(providers)),
        native_index=native_index,
    )


class TestFacadeSelection:
    """Tests for provider override and weighted selection."""

    def test_override_bypasses_selection(self):
        weighted = MockSuccessProvider("weighted")
        override = MockSuccessProvider("override")
        registry = registry_of(weighted)

        joke = fetch_joke(registry, provider=override, stats=FetchStats())

        assert joke.source == "override"
        assert weighted.contexts == []

    def test_weighted_selection_uses_draw(self):
        first = MockSuccessProvider("first")
        second = MockSuccessProvider("second")
        registry = registry_of(first, second, weights=[3, 1])

        assert fetch_joke(registry, rng=FixedDraw(2), stats=FetchStats()).source == "first"
        assert fetch_joke(registry, rng=FixedDraw(3), stats=FetchStats()).source == "second"

    def test_native_fetch_uses_pinned_provider(self):
        english = MockSuccessProvider("english")
        russian = MockSuccessProvider("russian", native=True)
        registry = registry_of(english, russian, weights=[100, 1], native_index=1)

        joke = fetch_native_joke(registry, stats=FetchStats())

        assert joke.source == "russian"
        assert joke.is_native_language is True

    def test_provider_receives_bounded_context(self):
        provider = MockSuccessProvider("p")

        fetch_joke(registry_of(provider), timeout=2.0, stats=FetchStats())

        ctx = provider.contexts[0]
        assert 0 < ctx.remaining() <= 2.0


class TestFacadeFailures:
    """Failures SHALL propagate unchanged, without fallback."""

    @given(error=st.sampled_from([
        ExtractionError("p", "marker not found"),
        UpstreamError("p", "No matching joke found"),
        NetworkError("p", "connection refused"),
    ]))
    @settings(max_examples=10)
    def test_provider_failure_propagates_unchanged(self, error: JokeFetchError):
        provider = MockFailingProvider("p", error)

        with pytest.raises(JokeFetchError) as excinfo:
            fetch_joke(registry_of(provider), stats=FetchStats())

        assert excinfo.value is error

    def test_no_fallback_to_another_provider(self):
        failing = MockFailingProvider("failing", ExtractionError("failing", "empty"))
        healthy = MockSuccessProvider("healthy")
        registry = registry_of(failing, healthy)

        with pytest.raises(ExtractionError):
            fetch_joke(registry, rng=FixedDraw(0), stats=FetchStats())

        assert healthy.contexts == []

    def test_outcomes_are_counted(self):
        stats = FetchStats()
        failing = MockFailingProvider("failing", ExtractionError("failing", "empty"))
        healthy = MockSuccessProvider("healthy")

        fetch_joke(registry_of(healthy), stats=stats)
        with pytest.raises(ExtractionError):
            fetch_joke(registry_of(failing), stats=stats)

        assert stats.snapshot() == {
            "healthy": {"successes": 1, "failures": 0},
            "failing": {"successes": 0, "failures": 1},
        }


class TestFacadeTimeout:
    """A provider that never answers SHALL fail near the timeout."""

    def test_hanging_provider_times_out_promptly(self):
        provider = MockHangingProvider()
        started = time.monotonic()

        with pytest.raises(NetworkError, match="deadline exceeded"):
            fetch_joke(registry_of(provider), timeout=0.2, stats=FetchStats())

        elapsed = time.monotonic() - started
        assert 0.15 <= elapsed < 1.0
        assert provider.saw_cancel.wait(1.0), "provider was not told to stop"

    def test_parent_deadline_bounds_the_fetch(self):
        provider = MockHangingProvider()
        parent = FetchContext.with_timeout(0.2)
        started = time.monotonic()

        with pytest.raises(NetworkError):
            fetch_joke(registry_of(provider), timeout=5.0, parent=parent, stats=FetchStats())

        assert time.monotonic() - started < 1.0

    def test_timeout_failure_is_counted(self):
        stats = FetchStats()

        with pytest.raises(NetworkError):
            fetch_joke(registry_of(MockHangingProvider("slow")), timeout=0.1, stats=stats)

        assert stats.snapshot() == {"slow": {"successes": 0, "failures": 1}}
