"""
Common machinery for item exporters.

An exporter owns one output file. export_items() opens it, lets the
subclass frame the content (header, one call per item, footer) and pulls
items from the source only as fast as they can be written.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

from ..exceptions import ConfigurationError
from ..utils.files import open_file
from ..utils.progress import ProgressReporter
from ..utils.stats import BulkOperationStats


class BaseExporter(ABC):
    """
    Streams items into a file.

    Subclasses implement the three framing hooks; ``self._file`` is the open
    aiofiles handle while they run.
    """

    def __init__(self, output_path: str, options: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            output_path: File to create (parent directories are created too)
            options: Format specific settings, interpreted by the subclass

        Raises:
            ConfigurationError: If output_path is empty
        """
        if not output_path:
            raise ConfigurationError("output_path cannot be empty")

        self.output_path = output_path
        self.options = options or {}
        self._file: Any = None

    @abstractmethod
    async def write_header(self) -> None:
        """Called once before the first item."""

    @abstractmethod
    async def write_item(self, item: Dict[str, Any]) -> None:
        """Called once per item, in source order."""

    @abstractmethod
    async def write_footer(self) -> None:
        """Called once after the source is exhausted."""

    async def export_items(
        self,
        items: AsyncIterator[Dict[str, Any]],
        stats: Optional[BulkOperationStats] = None,
        progress: Optional[ProgressReporter] = None,
    ) -> int:
        """
        Write every item from ``items`` to the output file.

        Each item is written before the next one is requested. If the
        source or a write fails the error propagates and whatever was
        written so far stays on disk.

        Args:
            items: Async iterator of items
            stats: Optional tracker; ``items_processed`` counts written items
            progress: Optional throttled progress reporter

        Returns:
            Number of items written
        """
        written = 0
        f = await open_file(self.output_path, mode="w", encoding="utf-8")
        async with f:
            self._file = f
            try:
                await self.write_header()
                async for item in items:
                    await self.write_item(item)
                    written += 1
                    if stats is None:
                        continue
                    stats.items_processed += 1
                    if progress is not None:
                        progress.update(stats)
                await self.write_footer()
                await f.flush()
            finally:
                self._file = None

        return written
