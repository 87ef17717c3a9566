"""
Throttled progress reporting.

Long transfers log their running item count at most once per interval
(leading edge: the first update is reported immediately) and always once
more when the transfer finishes.
"""

import logging
import time
from typing import Callable, Optional

from .stats import BulkOperationStats

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Report progress of a bulk operation without flooding the log."""

    def __init__(
        self,
        verb: str,
        interval: float = 5.0,
        callback: Optional[Callable[[BulkOperationStats], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            verb: Past-tense action used in log lines, e.g. "Exported"
            interval: Minimum seconds between two reports
            callback: Optional user callback receiving the stats on each report
            clock: Monotonic time source
        """
        self.verb = verb
        self.interval = interval
        self.callback = callback
        self._clock = clock
        self._last_report: Optional[float] = None
        self.reports = 0

    def update(self, stats: BulkOperationStats) -> bool:
        """
        Report progress if the interval has elapsed since the last report.

        Returns:
            True if a report was emitted
        """
        now = self._clock()
        if self._last_report is not None and now - self._last_report < self.interval:
            return False
        self._last_report = now
        self._emit(stats)
        return True

    def finish(self, stats: BulkOperationStats) -> None:
        """Unconditionally report the final count."""
        self._last_report = self._clock()
        self._emit(stats)

    def _emit(self, stats: BulkOperationStats) -> None:
        self.reports += 1
        table = f" ({stats.table_name})" if stats.table_name else ""
        logger.info(f"{self.verb} {stats.items_processed} items{table}")
        if self.callback:
            self.callback(stats)
