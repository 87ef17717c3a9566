"""
Integration test configuration and fixtures.

Runs against a DynamoDB-compatible endpoint such as DynamoDB Local:

    docker run -p 8000:8000 amazon/dynamodb-local
    DYNAMODB_ENDPOINT_URL=http://localhost:8000 pytest -m integration

Tests are skipped when no endpoint is configured or it cannot be reached.
"""

import os
import socket
import time
from urllib.parse import urlparse

import pytest
import pytest_asyncio

from async_dynamodb_bulk import TransferConfig, create_client, wait_for_active


def check_endpoint_available(url):
    """Check if the DynamoDB endpoint accepts TCP connections."""
    parsed = urlparse(url)
    port = parsed.port or (443 if parsed.scheme == "https" else 80)
    try:
        with socket.create_connection((parsed.hostname, port), timeout=1):
            return True
    except OSError:
        return False


def pytest_collection_modifyitems(config, items):
    """Skip integration tests when no endpoint is reachable."""
    endpoint = os.environ.get("DYNAMODB_ENDPOINT_URL")
    if endpoint and check_endpoint_available(endpoint):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration tests require DYNAMODB_ENDPOINT_URL pointing at a running endpoint"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Transfer configuration for the local endpoint."""
    # DynamoDB Local accepts any credentials
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", os.environ.get("AWS_ACCESS_KEY_ID", "local"))
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", os.environ.get("AWS_SECRET_ACCESS_KEY", "local"))
    return TransferConfig(
        region=os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
        endpoint_url=os.environ.get("DYNAMODB_ENDPOINT_URL"),
        output_dir=str(tmp_path),
        max_retries=3,
    )


@pytest_asyncio.fixture
async def client(config):
    """Create a DynamoDB client for the test."""
    async with create_client(config) as client:
        yield client


@pytest_asyncio.fixture
async def tables_to_drop(client):
    """Collect table names created by a test and delete them afterwards."""
    names = []
    yield names
    for name in names:
        try:
            await client.delete_table(TableName=name)
        except client.exceptions.ResourceNotFoundException:
            pass


@pytest_asyncio.fixture
async def populated_table(client, tables_to_drop):
    """
    Create and populate a test table.

    Inserts 300 items, including binary and nested attributes, so exports
    span several BatchWriteItem calls.
    """
    table_name = f"test_table_{int(time.time() * 1000)}"
    await client.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "pk", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    tables_to_drop.append(table_name)
    await wait_for_active(client, table_name)

    items = [
        {
            "pk": {"S": f"item-{i:05d}"},
            "n": {"N": str(i)},
            "payload": {"B": bytes([i % 256]) * 4},
            "meta": {"M": {"tags": {"SS": [f"tag{i % 5}"]}, "even": {"BOOL": i % 2 == 0}}},
        }
        for i in range(300)
    ]
    for start in range(0, len(items), 25):
        await client.batch_write_item(
            RequestItems={
                table_name: [{"PutRequest": {"Item": item}} for item in items[start : start + 25]]
            }
        )

    return table_name
