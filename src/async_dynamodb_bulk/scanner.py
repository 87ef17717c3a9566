"""
Paginated reads.

TableScanner walks a table with Scan, following LastEvaluatedKey until a
page comes back without one. list_table_names() leaves the ListTables
cursor to the client's own paginator. Pages are requested one at a time,
in cursor order; nothing is buffered beyond the current page.
"""

import logging
from typing import Any, AsyncIterator, Dict, Optional

from .exceptions import ConfigurationError
from .utils.aws import call_dynamodb, paginate_dynamodb
from .utils.stats import BulkOperationStats

logger = logging.getLogger(__name__)


class TableScanner:
    """
    Stream every item of a table.

    The scan is not isolated: items written while it runs may or may not be
    returned. A failing page aborts the whole scan.
    """

    def __init__(self, client: Any, table_name: str, page_size: Optional[int] = None) -> None:
        """
        Args:
            client: aiobotocore DynamoDB client
            table_name: Table to scan
            page_size: Optional ``Limit`` for each Scan request

        Raises:
            ConfigurationError: If table_name is empty
        """
        if not table_name:
            raise ConfigurationError("table_name cannot be empty")

        self.client = client
        self.table_name = table_name
        self.page_size = page_size

    async def pages(
        self, stats: Optional[BulkOperationStats] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield raw Scan responses in cursor order.

        Args:
            stats: Optional tracker; ``pages_read`` is incremented per page

        Raises:
            TransportError: If any Scan request fails
        """
        params: Dict[str, Any] = {"TableName": self.table_name}
        if self.page_size:
            params["Limit"] = self.page_size

        page_number = 0
        while True:
            page = await call_dynamodb(self.client, "scan", **params)
            page_number += 1
            if stats is not None:
                stats.pages_read += 1

            cursor = page.get("LastEvaluatedKey")
            logger.debug(
                f"Scanned page {page_number} of {self.table_name}: "
                f"{len(page.get('Items', []))} items, more={cursor is not None}"
            )
            yield page

            if cursor is None:
                return
            params["ExclusiveStartKey"] = cursor

    async def scan(
        self, stats: Optional[BulkOperationStats] = None
    ) -> AsyncIterator[Dict[str, Any]]:
        """
        Yield every item of the table.

        Items are yielded in page order; within a page, in the order
        DynamoDB returned them.
        """
        async for page in self.pages(stats):
            for item in page.get("Items", []):
                yield item


async def list_table_names(client: Any) -> AsyncIterator[str]:
    """
    Yield the names of all tables visible to the client.

    Raises:
        TransportError: If any ListTables request fails
    """
    async for page in paginate_dynamodb(client, "list_tables"):
        for name in page.get("TableNames", []):
            yield name
