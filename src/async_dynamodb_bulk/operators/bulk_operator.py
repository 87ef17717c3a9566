"""
BulkOperator: the facade the CLI and library users call.

One coroutine per action:
- Listing tables
- Schema export and import
- Data export and import
- Export of every table in the account/region, one table at a time
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..batch_writer import BatchWriter
from ..config import TransferConfig
from ..exceptions import ConfigurationError
from ..exporters import JSONExporter, write_schema
from ..importers import JSONItemReader, read_schema
from ..scanner import TableScanner, list_table_names
from ..schema import normalize_schema, prepare_create_request
from ..utils.aws import call_dynamodb
from ..utils.files import DATA_SUFFIX, SCHEMA_SUFFIX, default_file_name
from ..utils.progress import ProgressReporter
from ..utils.stats import BulkOperationStats
from ..waiter import wait_for_active

logger = logging.getLogger(__name__)

REQUIRED_CLIENT_METHODS = (
    "describe_table",
    "create_table",
    "scan",
    "batch_write_item",
    "get_paginator",
)


class BulkOperator:
    """
    Main operator for bulk operations on DynamoDB tables.

    Every operation runs sequentially on the caller's event loop. The "all"
    operations process one table at a time and stop at the first failure.
    """

    def __init__(self, client: Any, config: Optional[TransferConfig] = None) -> None:
        """
        Initialize BulkOperator with a DynamoDB client.

        Args:
            client: An aiobotocore DynamoDB client (see config.create_client)
            config: Transfer configuration; defaults are used when omitted

        Raises:
            ValueError: If client doesn't have required methods
        """
        missing = [name for name in REQUIRED_CLIENT_METHODS if not hasattr(client, name)]
        if missing:
            raise ValueError(
                f"Client is missing required methods: {', '.join(missing)}. "
                "Please use a DynamoDB client from aiobotocore."
            )

        self.client = client
        self.config = config or TransferConfig()

    def _progress(
        self, verb: str, callback: Optional[Callable[[BulkOperationStats], None]]
    ) -> ProgressReporter:
        return ProgressReporter(verb, interval=self.config.progress_interval, callback=callback)

    async def list_tables(self) -> List[str]:
        """
        List every table name.

        Returns:
            Table names in the order DynamoDB returned them
        """
        return [name async for name in list_table_names(self.client)]

    async def describe_table(self, table: str) -> Dict[str, Any]:
        """
        Fetch the live descriptor of a table.

        Raises:
            TransportError: If DescribeTable fails
        """
        response = await call_dynamodb(self.client, "describe_table", TableName=table)
        return response["Table"]

    async def export_schema(self, table: str, output_path: Optional[str] = None) -> str:
        """
        Export a table's descriptor to a schema file.

        Runtime fields (status, counts, ARNs, timestamps) are stripped before
        the descriptor is written, so the file is a re-creatable schema.

        Args:
            table: Table name
            output_path: Destination (default: ``<table>.dynamoschema``)

        Returns:
            The path written
        """
        path = output_path or default_file_name(table, SCHEMA_SUFFIX, self.config.output_dir)
        logger.info(f"Exporting schema of {table} to {path}")

        schema = normalize_schema(await self.describe_table(table))
        await write_schema(path, schema)
        return path

    async def export_data(
        self,
        table: str,
        output_path: Optional[str] = None,
        json_options: Optional[Dict[str, Any]] = None,
        progress_callback: Optional[Callable[[BulkOperationStats], None]] = None,
    ) -> BulkOperationStats:
        """
        Export every item of a table to a data file.

        Args:
            table: Table name
            output_path: Destination (default: ``<table>.dynamodata``)
            json_options: Options for JSONExporter (mode, pretty)
            progress_callback: Called with the stats on each progress report

        Returns:
            Export statistics including item count, duration, etc.
        """
        path = output_path or default_file_name(table, DATA_SUFFIX, self.config.output_dir)
        logger.info(f"Exporting data of {table} to {path}")

        stats = BulkOperationStats(table_name=table)
        progress = self._progress("Exported", progress_callback)
        scanner = TableScanner(self.client, table, page_size=self.config.scan_page_size)
        exporter = JSONExporter(output_path=path, options=json_options or {})

        try:
            await exporter.export_items(scanner.scan(stats), stats, progress)
        except Exception as e:
            logger.error(f"Export of {table} failed after {stats.items_processed} items: {e}")
            stats.errors.append(e)
            raise

        stats.mark_complete()
        progress.finish(stats)
        logger.info(f"Export of {table} completed: {stats.summary()}")
        return stats

    async def import_schema(
        self,
        input_path: str,
        table: Optional[str] = None,
        wait_for_active: bool = False,
    ) -> Dict[str, Any]:
        """
        Create a table from a schema file.

        Args:
            input_path: Schema file written by export_schema()
            table: Optional name overriding the file's TableName
            wait_for_active: Poll until the new table is ACTIVE

        Returns:
            The CreateTable request that was sent

        Raises:
            ConfigurationError: If no table name is known
            SerializationError: If the schema file is malformed
            TransportError: If CreateTable fails
            TableNotActiveError: If waiting times out
        """
        schema = await read_schema(input_path)
        if table:
            schema["TableName"] = table

        request = prepare_create_request(normalize_schema(schema))
        table_name = request.get("TableName")
        if not table_name:
            raise ConfigurationError(f"{input_path} has no TableName; pass a table name")
        logger.info(f"Creating table {table_name} from {input_path}")

        await call_dynamodb(self.client, "create_table", **request)

        if wait_for_active:
            await self.wait_for_active(table_name)
        return request

    async def wait_for_active(self, table: str) -> int:
        """Wait for a table to become ACTIVE using the configured poll policy."""
        return await wait_for_active(
            self.client,
            table,
            interval=self.config.poll_interval,
            max_attempts=self.config.max_polls,
        )

    async def import_data(
        self,
        table: str,
        input_path: str,
        json_options: Optional[Dict[str, Any]] = None,
        progress_callback: Optional[Callable[[BulkOperationStats], None]] = None,
    ) -> BulkOperationStats:
        """
        Write every item of a data file into a table.

        Args:
            table: Target table name
            input_path: Data file written by export_data()
            json_options: Options for JSONItemReader (mode, chunk_size)
            progress_callback: Called with the stats on each progress report

        Returns:
            Import statistics
        """
        logger.info(f"Importing data from {input_path} into {table}")

        stats = BulkOperationStats(table_name=table)
        progress = self._progress("Imported", progress_callback)
        reader = JSONItemReader(input_path, options=json_options or {})
        writer = BatchWriter(self.client, table, self.config)

        await writer.write(reader.items(), stats, progress)

        stats.mark_complete()
        progress.finish(stats)
        logger.info(f"Import into {table} completed: {stats.summary()}")
        return stats

    async def export_all_schema(self) -> List[str]:
        """
        Export the schema of every table, one table at a time.

        Returns:
            Paths written, in table order
        """
        paths = []
        for table in await self.list_tables():
            paths.append(await self.export_schema(table))
        return paths

    async def export_all_data(
        self,
        json_options: Optional[Dict[str, Any]] = None,
        progress_callback: Optional[Callable[[BulkOperationStats], None]] = None,
    ) -> List[BulkOperationStats]:
        """
        Export the data of every table, one table at a time.

        A table's export only starts after the previous one finished; the
        first failure aborts the remaining tables.

        Returns:
            Statistics per table, in table order
        """
        results = []
        for table in await self.list_tables():
            results.append(
                await self.export_data(
                    table, json_options=json_options, progress_callback=progress_callback
                )
            )
        return results
