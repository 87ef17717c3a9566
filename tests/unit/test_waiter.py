"""
Test waiting for a table to become ACTIVE.

What this tests:
---------------
1. Success on the poll that first reports ACTIVE
2. Timeout after the poll ceiling, distinct from transport errors
3. ResourceNotFoundException tolerated while the table appears
4. Other errors propagated immediately

Why this matters:
----------------
- Imports into a table that is still CREATING fail
- A stuck table must not hang the tool forever
"""

from unittest.mock import AsyncMock, patch

import pytest
from dynamodb_fakes import FakeDynamoDB, client_error

from async_dynamodb_bulk.exceptions import TableNotActiveError, TransportError
from async_dynamodb_bulk.waiter import wait_for_active


@pytest.fixture
def client():
    client = FakeDynamoDB()
    client.add_table("t")
    return client


@pytest.fixture
def mock_sleep():
    with patch("async_dynamodb_bulk.waiter.asyncio.sleep", new_callable=AsyncMock) as sleep:
        yield sleep


class TestWaitForActive:
    """Test wait_for_active()."""

    @pytest.mark.asyncio
    async def test_already_active(self, client, mock_sleep):
        """An ACTIVE table returns after one poll without sleeping."""
        attempts = await wait_for_active(client, "t")

        assert attempts == 1
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_active_on_sixtieth_poll(self, client, mock_sleep):
        """
        Test 59 CREATING polls followed by ACTIVE.

        What this tests:
        ---------------
        1. Succeeds on the 60th poll
        2. Sleeps 1 second between polls (59 times)

        Why this matters:
        ----------------
        - The ceiling is inclusive of the last poll
        """
        client.status_sequence = ["CREATING"] * 59 + ["ACTIVE"]

        attempts = await wait_for_active(client, "t", interval=1.0, max_attempts=60)

        assert attempts == 60
        assert mock_sleep.await_count == 59
        mock_sleep.assert_awaited_with(1.0)

    @pytest.mark.asyncio
    async def test_times_out_after_sixty_polls(self, client, mock_sleep):
        """
        Test 60 CREATING polls.

        What this tests:
        ---------------
        1. TableNotActiveError raised
        2. Exactly 60 DescribeTable calls
        3. Not a TransportError

        Why this matters:
        ----------------
        - Timeouts are reported distinctly from network failures
        """
        client.status_sequence = ["CREATING"] * 60

        with pytest.raises(TableNotActiveError) as exc_info:
            await wait_for_active(client, "t")

        assert not isinstance(exc_info.value, TransportError)
        assert exc_info.value.attempts == 60
        assert exc_info.value.last_status == "CREATING"
        assert client.call_names().count("describe_table") == 60

    @pytest.mark.asyncio
    async def test_not_found_counts_as_not_ready(self, mock_sleep):
        """A table not yet visible is polled again."""
        client = FakeDynamoDB()
        client.describe_table = AsyncMock(
            side_effect=[
                client_error("ResourceNotFoundException", "DescribeTable"),
                {"Table": {"TableName": "t", "TableStatus": "CREATING"}},
                {"Table": {"TableName": "t", "TableStatus": "ACTIVE"}},
            ]
        )

        assert await wait_for_active(client, "t") == 3

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_sleep):
        """Permission errors are not swallowed by polling."""
        client = FakeDynamoDB()
        client.describe_table = AsyncMock(
            side_effect=client_error("AccessDeniedException", "DescribeTable")
        )

        with pytest.raises(TransportError) as exc_info:
            await wait_for_active(client, "t")

        assert exc_info.value.code == "AccessDeniedException"
        assert client.describe_table.await_count == 1
