"""Thread fan-out for per-member work.

Each item runs in its own future. A failing item is reported next to the
successful ones instead of aborting the batch, so one member's broken data
never sinks a group report.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

Outcome = tuple[bool, Any, Any]


class WorkerPool:
    """Run one callable over many items on a thread pool."""

    def __init__(self, max_workers: int = 8, logger: Optional[logging.Logger] = None):
        self.max_workers = max(1, max_workers)
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._counts = {"submitted": 0, "succeeded": 0, "failed": 0}

    def _record(self, key: str, n: int = 1) -> None:
        with self._lock:
            self._counts[key] += n

    def map(self, func: Callable[[Any], Any], items: list, desc: str = "Processing") -> list[Outcome]:
        """
        Apply ``func`` to every item concurrently.

        Returns:
            One ``(ok, item, result_or_exception)`` per item, in input order
        """
        if not items:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [executor.submit(func, item) for item in items]
            self._record("submitted", len(futures))

            outcomes: list[Outcome] = []
            for item, future in zip(items, futures):
                try:
                    outcomes.append((True, item, future.result()))
                    self._record("succeeded")
                except Exception as e:
                    outcomes.append((False, item, e))
                    self._record("failed")
                    self.logger.error(f"{desc}: {item} failed: {e}", exc_info=True)

        ok = sum(1 for outcome in outcomes if outcome[0])
        self.logger.info(f"{desc}: {ok}/{len(outcomes)} succeeded")
        return outcomes

    def get_stats(self) -> dict:
        """Counters across every ``map`` call on this pool."""
        with self._lock:
            return {
                "max_workers": self.max_workers,
                "total_submitted": self._counts["submitted"],
                "total_successful": self._counts["succeeded"],
                "total_failed": self._counts["failed"],
            }
