"""Helpers for calling the aiobotocore DynamoDB client."""

from typing import Any, AsyncIterator, Dict, Union

from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import TransportError


def _transport_error(operation: str, error: Union[ClientError, BotoCoreError]) -> TransportError:
    if isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "Unknown")
        return TransportError(f"DynamoDB {operation} failed ({code}): {error}", cause=error)
    return TransportError(f"DynamoDB {operation} failed: {error}", cause=error)


async def call_dynamodb(client: Any, operation: str, **params: Any) -> Dict[str, Any]:
    """
    Invoke a DynamoDB API operation, translating botocore failures.

    Args:
        client: aiobotocore DynamoDB client (or anything with the same coroutines)
        operation: Client method name, e.g. ``"scan"`` or ``"batch_write_item"``
        **params: Request parameters

    Returns:
        The response dictionary

    Raises:
        TransportError: If the call fails for any reason reported by botocore
    """
    method = getattr(client, operation)
    try:
        return await method(**params)
    except (ClientError, BotoCoreError) as e:
        raise _transport_error(operation, e) from e


async def paginate_dynamodb(
    client: Any, operation: str, **params: Any
) -> AsyncIterator[Dict[str, Any]]:
    """
    Yield every page of a paginated operation using the client's paginator.

    Pages are fetched one at a time as the caller iterates.

    Raises:
        TransportError: If fetching any page fails
    """
    paginator = client.get_paginator(operation)
    try:
        async for page in paginator.paginate(**params):
            yield page
    except (ClientError, BotoCoreError) as e:
        raise _transport_error(operation, e) from e
