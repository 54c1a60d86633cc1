"""Shared pytest fixtures for Marina operator unit tests."""

import pytest

from tests.fixtures.object_store import InMemoryObjectStore


@pytest.fixture
def store():
    """Empty in-memory object store."""
    return InMemoryObjectStore()
