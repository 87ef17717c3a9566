"""
Batched, flow-controlled writes into a DynamoDB table.

A producer task turns the incoming item stream into batches of put
requests and hands them to a single consumer task through an
``asyncio.Queue`` holding at most one batch. The consumer sends one
BatchWriteItem per batch and waits for the response before taking the
next one, so:

- at most one BatchWriteItem call is in flight per import;
- batches are sent in the order they were filled;
- the producer stops reading as soon as a batch is full and resumes only
  once that batch has been written, so at most one batch of items is held
  no matter how large the input file is.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

from .config import TransferConfig
from .exceptions import ConfigurationError, UnprocessedItemsError
from .utils.aws import call_dynamodb
from .utils.progress import ProgressReporter
from .utils.stats import BulkOperationStats

logger = logging.getLogger(__name__)

WriteRequest = Dict[str, Any]

# Marks the end of the batch stream
_END = object()


class BatchWriter:
    """
    Write an item stream into a table with BatchWriteItem.

    Any failed call aborts the whole run. UnprocessedItems returned by a
    successful call are resent with exponential backoff up to
    ``config.max_unprocessed_retries`` times; if some are still left the run
    fails with UnprocessedItemsError.
    """

    def __init__(
        self, client: Any, table_name: str, config: Optional[TransferConfig] = None
    ) -> None:
        """
        Args:
            client: aiobotocore DynamoDB client
            table_name: Target table
            config: Transfer configuration (batch size, resend policy)

        Raises:
            ConfigurationError: If table_name is empty
        """
        if not table_name:
            raise ConfigurationError("table_name cannot be empty")

        self.client = client
        self.table_name = table_name
        self.config = config or TransferConfig()
        self.batch_size = self.config.batch_size

    async def write(
        self,
        items: AsyncIterator[Dict[str, Any]],
        stats: Optional[BulkOperationStats] = None,
        progress: Optional[ProgressReporter] = None,
    ) -> BulkOperationStats:
        """
        Write every item from ``items`` to the table.

        Args:
            items: Async iterator of items (attribute name to typed value)
            stats: Optional tracker to update; a new one is created otherwise
            progress: Optional throttled progress reporter

        Returns:
            The statistics for this run

        Raises:
            TransportError: If a BatchWriteItem call fails
            UnprocessedItemsError: If a batch could not be fully written
            SerializationError: If the item source fails to parse
        """
        if stats is None:
            stats = BulkOperationStats(table_name=self.table_name)

        queue: asyncio.Queue = asyncio.Queue(maxsize=1)
        producer = asyncio.create_task(self._produce(items, queue))
        consumer = asyncio.create_task(self._consume(queue, stats, progress))

        done, pending = await asyncio.wait(
            {producer, consumer}, return_when=asyncio.FIRST_EXCEPTION
        )
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        for task in (producer, consumer):
            if task in done and task.exception() is not None:
                error = task.exception()
                logger.error(f"Import into {self.table_name} failed: {error}")
                stats.errors.append(error)
                raise error

        return stats

    async def _produce(self, items: AsyncIterator[Dict[str, Any]], queue: asyncio.Queue) -> None:
        batch: List[WriteRequest] = []
        try:
            async for item in items:
                batch.append({"PutRequest": {"Item": item}})
                if len(batch) == self.batch_size:
                    await queue.put(batch)
                    # Parsing resumes only after the consumer has written the batch
                    await queue.join()
                    batch = []
        finally:
            # Release the source (e.g. the open data file) even when cancelled
            aclose = getattr(items, "aclose", None)
            if aclose is not None:
                await aclose()

        if batch:
            await queue.put(batch)
        await queue.put(_END)

    async def _consume(
        self,
        queue: asyncio.Queue,
        stats: BulkOperationStats,
        progress: Optional[ProgressReporter],
    ) -> None:
        while True:
            batch = await queue.get()
            try:
                if batch is _END:
                    return
                await self.write_batch(batch, stats)
                stats.items_processed += len(batch)
                if progress is not None:
                    progress.update(stats)
            finally:
                queue.task_done()

    async def write_batch(self, batch: List[WriteRequest], stats: BulkOperationStats) -> None:
        """
        Send one batch, resending any UnprocessedItems.

        Args:
            batch: Up to 25 write requests
            stats: Tracker for batches and resends
        """
        response = await call_dynamodb(
            self.client, "batch_write_item", RequestItems={self.table_name: batch}
        )
        stats.batches_written += 1
        logger.debug(
            f"Wrote batch {stats.batches_written} ({len(batch)} items) to {self.table_name}"
        )

        unprocessed = self._unprocessed(response)
        backoff = self.config.unprocessed_backoff
        attempts = 1
        while unprocessed:
            if attempts > self.config.max_unprocessed_retries:
                raise UnprocessedItemsError(self.table_name, unprocessed, attempts)

            logger.warning(
                f"{len(unprocessed)} of {len(batch)} items unprocessed by {self.table_name}, "
                f"resending in {backoff:.1f}s "
                f"(attempt {attempts}/{self.config.max_unprocessed_retries})"
            )
            await asyncio.sleep(backoff)
            backoff = min(self.config.max_unprocessed_backoff, backoff * 2)

            stats.unprocessed_retries += 1
            attempts += 1
            response = await call_dynamodb(
                self.client, "batch_write_item", RequestItems={self.table_name: unprocessed}
            )
            unprocessed = self._unprocessed(response)

    def _unprocessed(self, response: Dict[str, Any]) -> List[WriteRequest]:
        return (response.get("UnprocessedItems") or {}).get(self.table_name, [])
