"""async-dynamodb-bulk - Streaming export and import of DynamoDB tables."""

from importlib.metadata import PackageNotFoundError, version

from .batch_writer import BatchWriter
from .config import TransferConfig, create_client
from .exceptions import (
    AsyncDynamoDBBulkError,
    ConfigurationError,
    SerializationError,
    TableNotActiveError,
    TransportError,
    UnprocessedItemsError,
)
from .exporters import BaseExporter, JSONExporter
from .importers import JSONItemReader
from .operators import BulkOperator
from .scanner import TableScanner, list_table_names
from .schema import normalize_schema, prepare_create_request
from .utils.stats import BulkOperationStats
from .waiter import wait_for_active

try:
    __version__ = version("async-dynamodb-bulk")
except PackageNotFoundError:
    # Package is not installed
    __version__ = "0.0.0+unknown"


__all__ = [
    "AsyncDynamoDBBulkError",
    "BaseExporter",
    "BatchWriter",
    "BulkOperationStats",
    "BulkOperator",
    "ConfigurationError",
    "JSONExporter",
    "JSONItemReader",
    "SerializationError",
    "TableNotActiveError",
    "TableScanner",
    "TransferConfig",
    "TransportError",
    "UnprocessedItemsError",
    "create_client",
    "list_table_names",
    "normalize_schema",
    "prepare_create_request",
    "wait_for_active",
    "__version__",
]
