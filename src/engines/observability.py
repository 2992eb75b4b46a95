"""Observability for joke fetches.

This module provides the per-fetch outcome record, the log line written for
every fetch and in-process counters of successes and failures per source.

Feature: joke-aggregator
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime


logger = logging.getLogger(__name__)


@dataclass
class FetchOutcome:
    """Outcome of a single provider fetch.

    Attributes:
        source: Provider identifier
        success: Whether a JokeRecord was produced
        elapsed_seconds: Wall time spent in the fetch
        error: Failure description if the fetch failed
        error_kind: Exception class name of the failure
        finished_at: Timestamp when the fetch finished
    """
    source: str
    success: bool
    elapsed_seconds: float
    error: str | None = None
    error_kind: str | None = None
    finished_at: datetime = field(default_factory=datetime.now)


@dataclass
class SourceCounters:
    """Success and failure counts for one source."""
    successes: int = 0
    failures: int = 0


class FetchStats:
    """Thread-safe per-source counters of fetch outcomes.

    Counts are informational only; they never influence provider selection.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, SourceCounters] = {}

    def record(self, outcome: FetchOutcome) -> None:
        with self._lock:
            counters = self._counters.setdefault(outcome.source, SourceCounters())
            if outcome.success:
                counters.successes += 1
            else:
                counters.failures += 1

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Return a copy of the counters keyed by source."""
        with self._lock:
            return {
                source: {"successes": c.successes, "failures": c.failures}
                for source, c in self._counters.items()
            }

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()


# Process-wide counters fed by the aggregation facade
fetch_stats = FetchStats()


def record_fetch_outcome(outcome: FetchOutcome, stats: FetchStats | None = None) -> None:
    """Log a fetch outcome and add it to the counters.

    Failures are logged at ERROR with the full cause; the text is meant for
    operators, not for end users.

    Args:
        outcome: Outcome to record
        stats: Counters to update, the process-wide ones if None

    Example:
        >>> record_fetch_outcome(FetchOutcome("baneks.ru", True, 0.42))
        # Logs: "Fetch from 'baneks.ru' succeeded in 0.420s"
    """
    (stats or fetch_stats).record(outcome)
    if outcome.success:
        logger.info(f"Fetch from '{outcome.source}' succeeded in {outcome.elapsed_seconds:.3f}s")
    else:
        logger.error(
            f"Fetch from '{outcome.source}' failed after {outcome.elapsed_seconds:.3f}s "
            f"({outcome.error_kind}): {outcome.error}"
        )

