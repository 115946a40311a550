"""
Pytest configuration and fixtures for Around tests
"""

import pytest
from fastapi.testclient import TestClient

from around.config import Settings
from around.core.errors import BlobStorageError, SearchIndexError
from around.main import create_app


class FakeSearchIndex:
    """In-memory stand-in for the search index gateway."""

    def __init__(self):
        self.saved = {}
        self.queries = []
        self.results = []
        self.schema_checks = 0
        self.fail_schema = False
        self.fail_save = False
        self.fail_search = False

    async def ensure_schema(self):
        self.schema_checks += 1
        if self.fail_schema:
            raise SearchIndexError("index service unreachable")
        return False

    async def save(self, post, post_id):
        if self.fail_save:
            raise SearchIndexError("index write rejected")
        self.saved[post_id] = post

    async def search(self, lat, lon, radius):
        self.queries.append((lat, lon, radius))
        if self.fail_search:
            raise SearchIndexError("search failed")
        return list(self.results)


class FakeBlobStorage:
    """In-memory stand-in for the media storage gateway."""

    def __init__(self):
        self.objects = {}
        self.fail = False

    def upload(self, stream, bucket, object_name, content_type=None):
        if self.fail:
            raise BlobStorageError("bucket not found")
        self.objects[(bucket, object_name)] = (stream.read(), content_type)
        return f"https://media.example.com/{bucket}/{object_name}"


@pytest.fixture
def settings():
    return Settings(_env_file=None, BUCKET_NAME="test-media", ES_INDEX="post")


@pytest.fixture
def search_index():
    return FakeSearchIndex()


@pytest.fixture
def blob_storage():
    return FakeBlobStorage()


@pytest.fixture
def app(settings, search_index, blob_storage):
    return create_app(settings, search_index=search_index, blob_storage=blob_storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
