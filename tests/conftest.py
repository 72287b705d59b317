"""Shared pytest fixtures and an in-memory stand-in for the async MongoDB API."""

import copy
from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi.testclient import TestClient
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from blogcomments.app import App
from blogcomments.config import Config
from blogcomments.core.modules.comment.models import Comment
from blogcomments.web.server import create_fastapi_app


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, keys: list[tuple[str, int]]) -> "FakeCursor":
        # Stable sorts applied from the last key to the first
        for key, direction in reversed(keys):
            self._docs.sort(key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for doc in self._docs:
            yield copy.deepcopy(doc)


class FakeCollection:
    """Covers the subset of AsyncCollection used by the services."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[Any] = []
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise PyMongoError("connection refused")

    @staticmethod
    def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(key in doc and doc[key] == value for key, value in query.items())

    async def create_index(self, keys: Any, **_: Any) -> None:
        self._check()
        self.indexes.append(keys)

    def find(self, query: dict[str, Any]) -> FakeCursor:
        self._check()
        return FakeCursor([doc for doc in self.docs if self._matches(doc, query)])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        self._check()
        for doc in self.docs:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, doc: dict[str, Any]) -> SimpleNamespace:
        self._check()
        if any(existing["_id"] == doc["_id"] for existing in self.docs):
            raise DuplicateKeyError("duplicate key")
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        self._check()
        for doc in self.docs:
            if self._matches(doc, query):
                changes = update.get("$set", {})
                modified = any(doc.get(key) != value for key, value in changes.items())
                doc.update(changes)
                return SimpleNamespace(matched_count=1, modified_count=int(modified))
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def find_one_and_update(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
        return_document: ReturnDocument = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        self._check()
        doc = next((doc for doc in self.docs if self._matches(doc, query)), None)
        before = copy.deepcopy(doc)
        if doc is None:
            if not upsert:
                return None
            doc = dict(query)
            self.docs.append(doc)
        for key, amount in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + amount
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def config():
    return Config(database_url="mongodb://localhost:27017/blog_test", host="127.0.0.1", port=8000, debug=True)


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def comments_collection(database):
    return database.get_collection("comments")


@pytest.fixture
def app(config, database):
    return App(config, database)


@pytest.fixture
def comment_service(app):
    return app._core.services.comment


@pytest.fixture
def api(app, config):
    """HTTP client against the FastAPI app, with lifespan started."""
    with TestClient(create_fastapi_app(app, config)) as client:
        yield client


@pytest.fixture
def make_comment():
    """Build comments with increasing timestamps."""
    base = datetime(2025, 1, 1, tzinfo=UTC)

    def _make(comment_id: int, parent_id: int | None = None, **overrides: Any) -> Comment:
        values: dict[str, Any] = {
            "id": comment_id,
            "post_id": "p1",
            "parent_id": parent_id,
            "name": f"User {comment_id}",
            "message": f"Message {comment_id}",
            "device_token": f"token-{comment_id}",
            "created_at": base + timedelta(minutes=comment_id),
        }
        values.update(overrides)
        return Comment(**values)

    return _make
