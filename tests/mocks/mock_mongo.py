"""Mock MongoDB client for testing."""

import random
from typing import Any
from unittest.mock import MagicMock

from pymongo.errors import DuplicateKeyError


def _matches(document: dict[str, Any], filter_: dict[str, Any]) -> bool:
    return all(document.get(k) == v for k, v in filter_.items())


class MockMongoCollection:
    """Mock MongoDB collection.

    Supports the subset of the Motor API the repository uses, including
    upserts with $setOnInsert and unique indexes.
    """

    def __init__(self) -> None:
        self._documents: list[dict[str, Any]] = []
        self.unique_keys: list[tuple[str, ...]] = []
        self.indexes: list[Any] = []

    async def create_index(self, keys: Any, unique: bool = False) -> str:
        self.indexes.append(keys)
        if unique:
            fields = (keys,) if isinstance(keys, str) else tuple(k for k, _ in keys)
            self.unique_keys.append(fields)
        return str(keys)

    def _check_unique(self, document: dict[str, Any]) -> None:
        for fields in self.unique_keys:
            key = {f: document.get(f) for f in fields}
            if any(_matches(d, key) for d in self._documents):
                raise DuplicateKeyError(f"duplicate key: {key}")

    async def insert_one(self, document: dict[str, Any]) -> MagicMock:
        self._check_unique(document)
        self._documents.append(dict(document))
        result = MagicMock()
        result.inserted_id = document.get("id") or len(self._documents)
        return result

    async def update_one(
        self,
        filter_: dict[str, Any],
        update: dict[str, Any],
        upsert: bool = False,
    ) -> MagicMock:
        result = MagicMock()
        result.upserted_id = None
        existing = next((d for d in self._documents if _matches(d, filter_)), None)
        if existing is not None:
            result.matched_count = 1
            existing.update(update.get("$set", {}))
            return result

        result.matched_count = 0
        if upsert:
            document = {**filter_, **update.get("$setOnInsert", {}), **update.get("$set", {})}
            self._check_unique(document)
            self._documents.append(document)
            result.upserted_id = len(self._documents)
        return result

    async def find_one(self, filter_: dict[str, Any]) -> dict[str, Any] | None:
        return next((d for d in self._documents if _matches(d, filter_)), None)

    async def count_documents(
        self,
        filter_: dict[str, Any],
        limit: int = 0,
    ) -> int:
        count = sum(1 for d in self._documents if _matches(d, filter_))
        return min(count, limit) if limit else count

    def find(self, filter_: dict[str, Any] | None = None) -> "MockCursor":
        docs = [d for d in self._documents if _matches(d, filter_ or {})]
        return MockCursor(docs)

    def aggregate(self, pipeline: list[dict[str, Any]]) -> "MockCursor":
        docs = list(self._documents)
        for stage in pipeline:
            if "$sample" in stage:
                size = stage["$sample"]["size"]
                docs = random.sample(docs, min(size, len(docs)))
        return MockCursor(docs)


class MockCursor:
    """Mock MongoDB cursor."""

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, *args: Any, **kwargs: Any) -> "MockCursor":
        return self

    def limit(self, n: int) -> "MockCursor":
        self._documents = self._documents[:n]
        return self

    def __aiter__(self) -> "MockCursor":
        self._index = 0
        return self

    async def __anext__(self) -> dict[str, Any]:
        if self._index >= len(self._documents):
            raise StopAsyncIteration
        doc = self._documents[self._index]
        self._index += 1
        return doc


class MockMongoClient:
    """Mock MongoDB client for testing."""

    def __init__(self) -> None:
        self._collections: dict[str, MockMongoCollection] = {}

    def __getitem__(self, name: str) -> MockMongoCollection:
        if name not in self._collections:
            self._collections[name] = MockMongoCollection()
        return self._collections[name]

    @property
    def logs(self) -> MockMongoCollection:
        return self["logs"]

    @property
    def gifs(self) -> MockMongoCollection:
        return self["gifs"]

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def create_indexes(self) -> None:
        await self.logs.create_index("id", unique=True)
        await self.gifs.create_index([("hash", 1), ("origin_ref", 1)], unique=True)
