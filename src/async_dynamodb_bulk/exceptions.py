"""
Exception hierarchy for async-dynamodb-bulk.

Every failure raised by the library derives from AsyncDynamoDBBulkError so
callers can catch the whole family, while the concrete classes keep the
different failure kinds apart (bad options, network failures, tables that
never become ready, malformed files and partially failed batch writes).
"""

from typing import Any, Dict, List, Optional


class AsyncDynamoDBBulkError(Exception):
    """Base exception for all async-dynamodb-bulk errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(AsyncDynamoDBBulkError):
    """Raised for invalid or missing options."""


class TransportError(AsyncDynamoDBBulkError):
    """
    Raised when a call to DynamoDB fails.

    Wraps the original botocore exception in ``cause``. Throttling, permission
    errors, timeouts and validation failures all land here; none of them are
    retried by the transfer engine.
    """

    @property
    def code(self) -> Optional[str]:
        """AWS error code of the wrapped ClientError, if any."""
        response = getattr(self.cause, "response", None)
        if isinstance(response, dict):
            return response.get("Error", {}).get("Code")
        return None

    @property
    def is_resource_not_found(self) -> bool:
        """True when DynamoDB reported that the table does not exist (yet)."""
        return self.code in ("ResourceNotFoundException", "ResourceNotFound")


class TableNotActiveError(AsyncDynamoDBBulkError):
    """Raised when a table does not reach ACTIVE within the polling ceiling."""

    def __init__(self, table_name: str, attempts: int, last_status: Optional[str] = None) -> None:
        super().__init__(
            f"Table '{table_name}' did not become ACTIVE after {attempts} attempts "
            f"(last status: {last_status or 'unknown'})"
        )
        self.table_name = table_name
        self.attempts = attempts
        self.last_status = last_status


class SerializationError(AsyncDynamoDBBulkError):
    """Raised when a schema or data file cannot be parsed or encoded."""


class UnprocessedItemsError(AsyncDynamoDBBulkError):
    """
    Raised when BatchWriteItem keeps returning UnprocessedItems.

    The remaining write requests are kept on the exception so the caller can
    report or persist them.
    """

    def __init__(self, table_name: str, unprocessed: List[Dict[str, Any]], attempts: int) -> None:
        super().__init__(
            f"{len(unprocessed)} items for table '{table_name}' were still unprocessed "
            f"after {attempts} attempts"
        )
        self.table_name = table_name
        self.unprocessed = unprocessed
        self.attempts = attempts
