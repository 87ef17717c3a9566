"""
Command-line interface.

Usage examples::

    async-dynamodb-bulk list-tables --region us-east-1
    async-dynamodb-bulk export-schema --region us-east-1 --table users --file users.json
    async-dynamodb-bulk export-data --region us-east-1 --table users --file users.data
    async-dynamodb-bulk import-schema --region us-east-1 --table users2 --file users.json --waitForActive
    async-dynamodb-bulk import-data --region us-east-1 --table users2 --file users.data
    async-dynamodb-bulk export-all-schema --region us-east-1
    async-dynamodb-bulk export-all-data --region us-east-1

Credentials come from the usual AWS sources (environment, ~/.aws/credentials,
instance roles); ``--profile`` selects a shared-credentials profile.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Callable, Dict, List, Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from .config import TransferConfig, create_client
from .exceptions import AsyncDynamoDBBulkError
from .operators import BulkOperator

logger = logging.getLogger(__name__)

ACTIONS = (
    "list-tables",
    "export-schema",
    "export-data",
    "import-schema",
    "import-data",
    "export-all-schema",
    "export-all-data",
)

ALIASES = {"export-table": "export-data"}

# Options each action cannot run without
REQUIRED_OPTIONS: Dict[str, List[str]] = {
    "export-schema": ["table"],
    "export-data": ["table"],
    "import-schema": ["file"],
    "import-data": ["table", "file"],
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="async-dynamodb-bulk",
        description="Export and import DynamoDB table schemas and data.",
    )
    parser.add_argument("action", choices=ACTIONS + tuple(ALIASES), help="Operation to run")
    parser.add_argument("--table", help="Table name")
    parser.add_argument("--file", help="Schema or data file to read or write")
    parser.add_argument("--region", help="AWS region")
    parser.add_argument("--profile", help="AWS shared credentials profile")
    parser.add_argument(
        "--waitForActive",
        dest="wait_for_active",
        action="store_true",
        help="After import-schema, wait until the table is ACTIVE",
    )
    parser.add_argument(
        "--maxRetries",
        dest="max_retries",
        type=int,
        help="Retry ceiling for each DynamoDB request",
    )
    parser.add_argument("--endpoint-url", help="Custom DynamoDB endpoint (e.g. DynamoDB Local)")
    parser.add_argument(
        "--output-dir", default=".", help="Directory for default export file names"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse and validate arguments.

    Exits with status 2 and a usage message when a required option for the
    chosen action is missing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    args.action = ALIASES.get(args.action, args.action)

    for option in REQUIRED_OPTIONS.get(args.action, []):
        if not getattr(args, option):
            parser.error(f"--{option} is required for {args.action}")

    if args.max_retries is not None and args.max_retries < 0:
        parser.error("--maxRetries cannot be negative")

    return args


def config_from_args(args: argparse.Namespace) -> TransferConfig:
    """Build the transfer configuration from parsed arguments."""
    return TransferConfig(
        region=args.region,
        profile=args.profile,
        max_retries=args.max_retries,
        endpoint_url=args.endpoint_url,
        output_dir=args.output_dir,
    )


async def run(
    args: argparse.Namespace,
    config: TransferConfig,
    client_factory: Optional[Callable[[TransferConfig], Any]] = None,
) -> None:
    """Dispatch the requested action."""
    client_factory = client_factory or create_client
    async with client_factory(config) as client:
        operator = BulkOperator(client, config)

        if args.action == "list-tables":
            tables = await operator.list_tables()
            print(" ".join(tables))
        elif args.action == "export-schema":
            await operator.export_schema(args.table, args.file)
        elif args.action == "export-data":
            await operator.export_data(args.table, args.file)
        elif args.action == "import-schema":
            await operator.import_schema(
                args.file, table=args.table, wait_for_active=args.wait_for_active
            )
        elif args.action == "import-data":
            await operator.import_data(args.table, args.file)
        elif args.action == "export-all-schema":
            await operator.export_all_schema()
        elif args.action == "export-all-data":
            await operator.export_all_data()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Console entry point.

    Returns:
        Process exit status
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True))],
    )

    try:
        config = config_from_args(args)
        asyncio.run(run(args, config))
    except AsyncDynamoDBBulkError as e:
        logger.error(f"{args.action} failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.error(f"{args.action} interrupted")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
