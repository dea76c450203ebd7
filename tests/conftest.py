"""
WordBank Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── memory_store: In-memory RemoteFileStore with GitHub's conflict rules
    ├── service: WordService backed by memory_store
    ├── sample_image_bytes: Fake PNG content for upload tests
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os

# Set before any wordbank import: settings and the tenacity decorator read
# these at import time
os.environ["REPO_OWNER"] = "test-owner"
os.environ["REPO_NAME"] = "test-repo"
os.environ["GITHUB_TOKEN"] = "test-token-not-real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RETRY_MAX_ATTEMPTS"] = "1"
os.environ["RETRY_MIN_WAIT"] = "0"

import hashlib
from typing import Callable, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from wordbank.exceptions import (
    RemoteConflictError,
    RemoteNotFoundError,
    RemoteUnavailableError,
)
from wordbank.services.store_base import RemoteFileStore, StoredFile
from wordbank.services.word_service import WordService


class InMemoryStore(RemoteFileStore):
    """
    Dict-backed RemoteFileStore.

    Revisions are content hashes salted with a commit counter, so every
    write yields a new revision. Conflict rules match GitHub:
        - stale revision → RemoteConflictError
        - no revision for an existing path → RemoteConflictError

    Hooks:
        after_read:     called with the path after every successful read
                        (lets a test simulate a concurrent writer)
        fail_reads / fail_writes: paths whose calls raise RemoteUnavailableError
    """

    def __init__(self):
        self.files: Dict[str, Tuple[bytes, str]] = {}
        self.commits: List[Tuple[str, str]] = []
        self.calls: List[Tuple[str, str]] = []
        self.after_read: Optional[Callable[[str], None]] = None
        self.fail_reads: set = set()
        self.fail_writes: set = set()

    def put(self, path: str, content: bytes) -> str:
        """Store content directly, as another writer would."""
        revision = hashlib.sha1(
            f"{len(self.commits)}:{path}".encode() + content
        ).hexdigest()
        self.files[path] = (content, revision)
        self.commits.append((path, "direct"))
        return revision

    def text(self, path: str) -> str:
        return self.files[path][0].decode("utf-8")

    async def read(self, path: str) -> StoredFile:
        self.calls.append(("read", path))
        if path in self.fail_reads:
            raise RemoteUnavailableError(
                message="GitHub answered 500", path=path, status=500,
                payload={"message": "Server Error"},
            )
        if path not in self.files:
            raise RemoteNotFoundError(message="Not Found", path=path, status=404)
        content, revision = self.files[path]
        if self.after_read is not None:
            self.after_read(path)
        return StoredFile(content=content, revision=revision)

    async def write(
        self,
        path: str,
        content: bytes,
        message: str,
        revision: Optional[str] = None,
    ) -> str:
        self.calls.append(("write", path))
        if path in self.fail_writes:
            raise RemoteUnavailableError(
                message="GitHub answered 500", path=path, status=500,
                payload={"message": "Server Error"},
            )
        current = self.files.get(path)
        if current is not None and revision != current[1]:
            raise RemoteConflictError(
                message="conflict", path=path, status=409,
                payload={"message": f"{path} does not match {revision}"},
            )
        if current is None and revision is not None:
            raise RemoteConflictError(message="conflict", path=path, status=409)
        new_revision = self.put(path, content)
        self.commits[-1] = (path, message)
        return new_revision


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def service(memory_store):
    """WordService with default document_path / image_dir over memory_store."""
    return WordService(store=memory_store)


@pytest.fixture
def sample_image_bytes():
    """PNG signature plus a few bytes; enough for upload tests."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest_asyncio.fixture
async def test_client(service):
    """
    HTTPX AsyncClient routed straight into the app, with WordService
    replaced by the in-memory one.
    """
    from wordbank.main import app
    from wordbank.routes.words import get_word_service

    app.dependency_overrides[get_word_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
