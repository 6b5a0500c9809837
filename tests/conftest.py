# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests. No running MongoDB is needed:
# FakeCollection / FakeMongoClient mimic the small slice of the
# pymongo and dockind.storage.MongoClient interfaces that the
# sampler and the orchestrator use.
#
# FIXTURES:
# ---------
# - tagged_documents   → 100 docs with "status" (2 values) and "id" (unique)
# - fake_collection    → factory: fake_collection(name, docs, ...)
# - fake_client        → factory: fake_client({"db": {"coll": [docs]}})
# - app_config         → AppConfig with small, deterministic settings
# - restore_root_logger (autouse) → undo setup_logging() between tests
#
# ==============================================

import logging
from typing import Any, Dict, List, Optional

import pytest
from pymongo.errors import OperationFailure

from dockind.config import AppConfig, DiscoveryConfig, SamplingConfig
from dockind.storage import filter_system_collections


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]], calls: List[Dict[str, int]]):
        self._documents = documents
        self._skip = 0
        self._limit = 0
        self._calls = calls

    def skip(self, count: int) -> "FakeCursor":
        self._skip = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    def __iter__(self):
        self._calls.append({"skip": self._skip, "limit": self._limit})
        end = self._skip + self._limit if self._limit else None
        # Hand out copies, like a real driver would
        return iter([dict(doc) for doc in self._documents[self._skip:end]])


class FakeCollection:
    def __init__(
        self,
        name: str,
        documents: List[Dict[str, Any]],
        count_error: bool = False,
        find_error: bool = False
    ):
        self.name = name
        self.documents = documents
        self.count_error = count_error
        self.find_error = find_error
        self.find_calls: List[Dict[str, int]] = []

    def count_documents(self, query: Dict[str, Any]) -> int:
        if self.count_error:
            raise OperationFailure("count not supported")
        return len(self.documents)

    def find(self, *args, **kwargs) -> FakeCursor:
        if self.find_error:
            raise OperationFailure("find failed")
        return FakeCursor(self.documents, self.find_calls)


class FakeMongoClient:
    def __init__(self, databases: Dict[str, Dict[str, Any]], version: Optional[str] = "6.0.0"):
        self.database = next(iter(databases), "test")
        self.version = version
        self.collections: Dict[str, Dict[str, FakeCollection]] = {}
        for db_name, colls in databases.items():
            self.collections[db_name] = {
                name: docs if isinstance(docs, FakeCollection) else FakeCollection(name, docs)
                for name, docs in colls.items()
            }
        self.connected = False

    def connect(self):
        self.connected = True

    def disconnect(self):
        self.connected = False

    def list_database_names(self) -> List[str]:
        return list(self.collections)

    def list_collection_names(self, database: Optional[str] = None, include_system: bool = False) -> List[str]:
        names = list(self.collections[database or self.database])
        return names if include_system else filter_system_collections(names)

    def get_collection(self, database: Optional[str], name: str) -> FakeCollection:
        return self.collections[database or self.database][name]

    def server_version(self, database: Optional[str] = None) -> Optional[str]:
        return self.version


@pytest.fixture(autouse=True)
def restore_root_logger():
    # setup_logging() replaces the root handlers; put them back after each test
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def tagged_documents() -> List[Dict[str, Any]]:
    """100 documents: "status" alternates between two values, "id" is unique."""
    return [
        {"id": i, "status": "active" if i % 2 == 0 else "closed", "name": f"user-{i}"}
        for i in range(100)
    ]


@pytest.fixture
def fake_collection():
    return FakeCollection


@pytest.fixture
def fake_client():
    return FakeMongoClient


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(
        sampling=SamplingConfig(mode="absolute", absolute_value=1000, batch_size=1000),
        discovery=DiscoveryConfig(max_workers=2),
        metadata_dir=str(tmp_path / "metadata"),
    )
