# ==============================================
# Tests for the MetadataStore
# ==============================================

import datetime

import pytest
from bson.objectid import ObjectId

from dockind.analysis import DocumentKindResult, infer_schema
from dockind.persistence import MetadataStore


@pytest.fixture
def store(tmp_path):
    return MetadataStore(str(tmp_path / "metadata"))


@pytest.fixture
def discovery():
    oid = ObjectId("507f1f77bcf86cd799439011")
    schema = infer_schema(
        [
            {"type": "a", "owner": oid, "count": 3},
            {"type": "b", "owner": oid, "created": datetime.datetime(2024, 1, 15, 10, 30)},
        ],
        collection_name="orders",
    )
    result = DocumentKindResult(
        collection_name="orders",
        candidate_fields=("type", "count"),
        chosen_field="type",
        other_fields=("owner", "created"),
    )
    return [result], {"orders": schema}


class TestMetadataStore:
    def test_creates_directory(self, tmp_path):
        MetadataStore(str(tmp_path / "nested" / "dir"))
        assert (tmp_path / "nested" / "dir").is_dir()

    def test_save_and_load_kinds(self, store, discovery):
        results, _ = discovery
        store.save_document_kinds("shop", results)

        loaded = store.load_document_kinds("shop")
        assert loaded == {"orders": results[0]}

    def test_save_and_load_schemas_with_bson_samples(self, store, discovery):
        _, schemas = discovery
        store.save_schemas("shop", schemas)

        loaded = store.load_schemas("shop")["orders"]
        assert loaded.total_docs == 2
        assert loaded.collection_name == "orders"
        assert loaded.properties["owner"].samples == (ObjectId("507f1f77bcf86cd799439011"),)
        assert loaded.properties["type"] == schemas["orders"].properties["type"]

        created = loaded.properties["created"].samples[0]
        assert created.replace(tzinfo=None) == datetime.datetime(2024, 1, 15, 10, 30)

    def test_files_are_per_database(self, store, discovery, tmp_path):
        results, schemas = discovery
        store.save_all("shop", results, schemas)

        base = tmp_path / "metadata" / "shop"
        assert (base / "document_kinds.json").exists()
        assert (base / "inferred_schemas.json").exists()
        assert (base / "state.json").exists()
        assert store.load_document_kinds("other") == {}

    def test_state(self, store, discovery):
        results, schemas = discovery
        store.save_all("shop", results, schemas)

        state = store.load_state("shop")
        assert state["database"] == "shop"
        assert state["collection_count"] == 1
        assert state["discovered_at"] is not None

    def test_missing_state_defaults(self, store):
        state = store.load_state("nothing")
        assert state["collection_count"] == 0
        assert state["discovered_at"] is None

    def test_load_all(self, store, discovery):
        results, schemas = discovery
        store.save_all("shop", results, schemas)

        kinds, loaded_schemas, state = store.load_all("shop")
        assert set(kinds) == {"orders"}
        assert set(loaded_schemas) == {"orders"}
        assert state["collection_count"] == 1

    def test_exists_and_clear(self, store, discovery):
        results, schemas = discovery
        assert not store.exists("shop")

        store.save_all("shop", results, schemas)
        assert store.exists("shop")

        store.clear("shop")
        assert not store.exists("shop")
        assert store.load_schemas("shop") == {}
