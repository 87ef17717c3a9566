"""
Client configuration for bulk transfers.

TransferConfig is built once from the parsed command-line options (or by the
library user) and handed to every collaborator explicitly. create_client()
turns it into an aiobotocore DynamoDB client.
"""

from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

from aiobotocore.config import AioConfig
from aiobotocore.session import AioSession
from botocore.exceptions import BotoCoreError

from .exceptions import ConfigurationError

# DynamoDB rejects BatchWriteItem requests with more than 25 operations
MAX_BATCH_SIZE = 25


@dataclass
class TransferConfig:
    """
    Settings shared by every bulk operation.

    Attributes:
        region: AWS region name (falls back to the environment/profile)
        profile: Shared credentials profile name
        max_retries: Retry ceiling for the underlying botocore client
        endpoint_url: Override endpoint, e.g. DynamoDB Local
        output_dir: Directory for default export file names
        batch_size: Put requests per BatchWriteItem call
        scan_page_size: Optional Scan ``Limit`` per page
        progress_interval: Minimum seconds between progress log lines
        poll_interval: Seconds between DescribeTable polls while waiting
        max_polls: DescribeTable polls before giving up on a table
        max_unprocessed_retries: Resends of UnprocessedItems per batch
        unprocessed_backoff: Initial delay before resending UnprocessedItems
        max_unprocessed_backoff: Upper bound for the resend delay
    """

    region: Optional[str] = None
    profile: Optional[str] = None
    max_retries: Optional[int] = None
    endpoint_url: Optional[str] = None
    output_dir: str = "."
    batch_size: int = MAX_BATCH_SIZE
    scan_page_size: Optional[int] = None
    progress_interval: float = 5.0
    poll_interval: float = 1.0
    max_polls: int = 60
    max_unprocessed_retries: int = 5
    unprocessed_backoff: float = 0.5
    max_unprocessed_backoff: float = 16.0

    def __post_init__(self) -> None:
        if not 1 <= self.batch_size <= MAX_BATCH_SIZE:
            raise ConfigurationError(
                f"batch_size must be between 1 and {MAX_BATCH_SIZE}, got: {self.batch_size}"
            )
        if self.max_retries is not None and self.max_retries < 0:
            raise ConfigurationError(f"max_retries cannot be negative, got: {self.max_retries}")
        if self.max_polls < 1:
            raise ConfigurationError(f"max_polls must be at least 1, got: {self.max_polls}")
        if self.scan_page_size is not None and self.scan_page_size < 1:
            raise ConfigurationError(
                f"scan_page_size must be positive, got: {self.scan_page_size}"
            )

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``AioSession.create_client``."""
        kwargs: Dict[str, Any] = {"region_name": self.region}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        if self.max_retries is not None:
            # botocore counts the initial request as an attempt
            kwargs["config"] = AioConfig(
                retries={"max_attempts": self.max_retries + 1, "mode": "standard"}
            )
        return kwargs


@asynccontextmanager
async def create_client(config: TransferConfig) -> AsyncIterator[Any]:
    """
    Create a DynamoDB client for the given configuration.

    Args:
        config: Transfer configuration

    Yields:
        An aiobotocore DynamoDB client, closed on exit

    Raises:
        ConfigurationError: If botocore cannot build the client, e.g. no
            region is configured or the profile does not exist
    """
    async with AsyncExitStack() as stack:
        try:
            session = AioSession(profile=config.profile)
            client = await stack.enter_async_context(
                session.create_client("dynamodb", **config.client_kwargs())
            )
        except BotoCoreError as e:
            raise ConfigurationError(f"Cannot create DynamoDB client: {e}", cause=e) from e
        yield client
