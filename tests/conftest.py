import os

# Keep tests quiet: no log files
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("DEBUG_LOGGING", "false")

import asyncio

import httpx
import pytest

from cinesift_app import create_app
from cinesift_app.metadata.models import MediaRecord, SourceType
from cinesift_app.metadata.providers.base import BaseMetadataProvider


class StaticProvider(BaseMetadataProvider):
    """Provider returning canned records (or raising) without any network."""

    def __init__(self, provider_id, records=None, error=None, delay=0.0):
        super().__init__()
        self.id = provider_id
        self.name = provider_id
        self.records = records or []
        self.error = error
        self.delay = delay
        self.calls = 0

    async def _search(self, query):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [record.copy() for record in self.records]


def make_record(source_type=SourceType.TMDB, source_id="1", **fields):
    return MediaRecord(source_type=source_type, source_id=source_id, **fields)


def mock_client(handler):
    """AsyncClient whose requests are answered by handler(request)."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "DISABLE_RATE_LIMITING": True,
        "TMDB_ACCESS_TOKEN": None,
    })
    yield app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
