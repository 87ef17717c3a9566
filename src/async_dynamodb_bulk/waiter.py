"""Wait for a newly created table to become ACTIVE."""

import asyncio
import logging
from typing import Any, Optional

from .exceptions import TableNotActiveError, TransportError
from .utils.aws import call_dynamodb

logger = logging.getLogger(__name__)

ACTIVE = "ACTIVE"


async def wait_for_active(
    client: Any, table_name: str, interval: float = 1.0, max_attempts: int = 60
) -> int:
    """
    Poll DescribeTable until the table reports ACTIVE.

    A ResourceNotFoundException counts as "not ready yet" because a freshly
    created table can briefly be invisible to DescribeTable. Any other error
    is propagated unchanged.

    Args:
        client: aiobotocore DynamoDB client
        table_name: Table to watch
        interval: Seconds to sleep between polls
        max_attempts: Number of polls before giving up

    Returns:
        The number of polls it took

    Raises:
        TableNotActiveError: If the table is not ACTIVE after max_attempts polls
        TransportError: For any other DescribeTable failure
    """
    status: Optional[str] = None
    for attempt in range(1, max_attempts + 1):
        try:
            response = await call_dynamodb(client, "describe_table", TableName=table_name)
            status = response["Table"].get("TableStatus")
        except TransportError as e:
            if not e.is_resource_not_found:
                raise
            status = None

        if status == ACTIVE:
            logger.info(f"Table {table_name} is ACTIVE after {attempt} polls")
            return attempt

        logger.debug(f"Table {table_name} status {status} (poll {attempt}/{max_attempts})")
        if attempt < max_attempts:
            await asyncio.sleep(interval)

    raise TableNotActiveError(table_name, max_attempts, status)
