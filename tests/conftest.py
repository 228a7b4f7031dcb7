"""
Team Task Tracker Tests - Test Configuration.

Provides pytest fixtures for tracker state and an async HTTP client wired
to an in-memory store.
"""

import os

# Must be set before the app (and its settings) is imported.
os.environ["STORAGE_PATH"] = ""
os.environ["LOG_LEVEL"] = "DEBUG"

from typing import AsyncIterator  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from teamtasker.app import app  # noqa: E402
from teamtasker.dependencies import get_tracker  # noqa: E402
from teamtasker.exceptions import StorageException  # noqa: E402
from teamtasker.storage import MemoryStore  # noqa: E402
from teamtasker.tracker import TeamTracker  # noqa: E402


class ReadOnlyStore(MemoryStore):
    """Memory store that rejects every write, like a full or read-only disk."""

    def set_item(self, key: str, value: str) -> None:
        raise StorageException(key, "No space left on device")


@pytest.fixture
def store() -> MemoryStore:
    """Fresh, empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def tracker(store: MemoryStore) -> TeamTracker:
    """
    Tracker loaded from an empty store.

    Starts from the default seed data: three members and three tasks,
    task #2 completed.
    """
    tracker = TeamTracker(store)
    tracker.load()
    return tracker


@pytest.fixture
def read_only_tracker() -> TeamTracker:
    """Tracker holding the seed data whose saves always fail."""
    tracker = TeamTracker(ReadOnlyStore())
    tracker.load()
    return tracker


@pytest.fixture
def htmx_headers() -> dict:
    """Headers HTMX attaches to every request it issues."""
    return {"HX-Request": "true"}


async def _client_for(tracker: TeamTracker) -> AsyncIterator[AsyncClient]:
    app.dependency_overrides[get_tracker] = lambda: tracker
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(tracker: TeamTracker) -> AsyncIterator[AsyncClient]:
    """Client whose routes operate on the ``tracker`` fixture."""
    async for test_client in _client_for(tracker):
        yield test_client


@pytest_asyncio.fixture
async def read_only_client(read_only_tracker: TeamTracker) -> AsyncIterator[AsyncClient]:
    """Client whose routes operate on a tracker that cannot save."""
    async for test_client in _client_for(read_only_tracker):
        yield test_client
