"""
Shared fixtures for unit tests.
"""

import sys
from pathlib import Path

import pytest

# Make the fakes module importable from every test module
sys.path.insert(0, str(Path(__file__).parent))
from dynamodb_fakes import FakeDynamoDB  # noqa: E402


@pytest.fixture
def fake_client():
    """Create an empty fake DynamoDB client."""
    return FakeDynamoDB()
