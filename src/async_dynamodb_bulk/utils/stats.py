"""
Per-table counters for exports and imports.

The numbers end up in the completion log line, in progress callbacks and,
through as_dict(), wherever a caller wants to record them.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

_COUNTERS = ("items_processed", "pages_read", "batches_written", "unprocessed_retries")


@dataclass
class BulkOperationStats:
    """
    Counters for one table transfer.

    The scanner bumps ``pages_read``, the batch writer bumps
    ``batches_written`` and ``unprocessed_retries``, and both directions count
    ``items_processed``.
    """

    table_name: Optional[str] = None
    items_processed: int = 0
    pages_read: int = 0
    batches_written: int = 0
    unprocessed_retries: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    errors: List[Exception] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Elapsed seconds, frozen once mark_complete() ran."""
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    @property
    def items_per_second(self) -> float:
        elapsed = self.duration_seconds
        return self.items_processed / elapsed if elapsed > 0 else 0

    @property
    def is_complete(self) -> bool:
        return self.end_time is not None

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def mark_complete(self) -> None:
        """Stop the clock."""
        self.end_time = time.time()

    def summary(self) -> str:
        """
        One-line description for the completion log message, e.g.
        ``Processed 500 items | Pages: 5 | Batches: 20 | Rate: ... | Duration: ...``.

        Resends and errors are only mentioned when there were any.
        """
        text = (
            f"Processed {self.items_processed} items | Pages: {self.pages_read} | "
            f"Batches: {self.batches_written} | "
            f"Rate: {self.items_per_second:.1f} items/sec | "
            f"Duration: {self.duration_seconds:.1f} seconds"
        )
        if self.unprocessed_retries:
            text += f" | Unprocessed retries: {self.unprocessed_retries}"
        if self.errors:
            text += f" | Errors: {self.error_count}"
        return text

    def as_dict(self) -> Dict[str, Any]:
        """Counters, timings and derived rates as a plain dictionary."""
        data: Dict[str, Any] = {"table_name": self.table_name}
        data.update((name, getattr(self, name)) for name in _COUNTERS)
        data.update(
            start_time=self.start_time,
            end_time=self.end_time,
            duration_seconds=self.duration_seconds,
            items_per_second=self.items_per_second,
            error_count=self.error_count,
            is_complete=self.is_complete,
        )
        return data
