"""Worker pool for scoring submissions in parallel.

Scoring is pure and shares no state, so submissions can be recomputed
concurrently; the pool only collects per-item outcomes so one bad
submission never aborts the batch.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable


class WorkerPool:
    """ThreadPoolExecutor wrapper that records success or failure per item."""

    def __init__(self, max_workers: int = 4, logger=None):
        """
        Args:
            max_workers: Maximum number of concurrent worker threads
            logger: Optional logger instance
        """
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)
        self._stats_lock = threading.Lock()
        self.stats = {
            "max_workers": max_workers,
            "total_submitted": 0,
            "total_completed": 0,
            "total_successful": 0,
            "total_failed": 0,
        }

    def map(self, func: Callable[[Any], Any], items: list, desc: str = "Scoring") -> list:
        """
        Apply func to every item.

        Args:
            func: Worker function
            items: Items to process
            desc: Label for log lines

        Returns:
            (success, item, result_or_error) tuples in the input order
        """
        outcomes: list = [None] * len(items)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {executor.submit(func, item): i for i, item in enumerate(items)}
            with self._stats_lock:
                self.stats["total_submitted"] += len(items)

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                item = items[index]
                with self._stats_lock:
                    self.stats["total_completed"] += 1

                try:
                    result = future.result()
                except Exception as e:
                    with self._stats_lock:
                        self.stats["total_failed"] += 1
                    outcomes[index] = (False, item, e)
                    self.logger.debug(f"{desc}: failed for item {index}: {e}")
                    continue

                with self._stats_lock:
                    self.stats["total_successful"] += 1
                outcomes[index] = (True, item, result)

        self.logger.debug(
            f"{desc} complete: {self.stats['total_successful']} successful, {self.stats['total_failed']} failed"
        )
        return outcomes

    def get_stats(self) -> dict:
        """Get worker pool statistics."""
        with self._stats_lock:
            return dict(self.stats)
