# ==============================================
# Integration Tests
# ==============================================
#
# End-to-end runs over an in-memory database: sample, strip reserved
# fields, infer, detect the document kind, partition, and persist.
#
# ==============================================

import datetime
from collections import Counter

from bson.objectid import ObjectId

from dockind.normalization import TypeDetector
from dockind.persistence import MetadataStore
from dockind.reverse_engineer import ReverseEngineer
from dockind.storage import partition_documents


def _events():
    start = datetime.datetime(2024, 1, 1)
    docs = []
    for i in range(300):
        doc = {
            "_id": ObjectId(),
            "_ts": 1700000000 + i,
            "eventType": ["click", "view", "purchase"][i % 3],
            "user": f"u{i % 57}",
            "at": start + datetime.timedelta(minutes=i),
        }
        if doc["eventType"] == "purchase":
            doc["amount"] = i * 1.5
        if i % 10 == 5:
            del doc["eventType"]
        docs.append(doc)
    return docs


def _sanitized(client, database, collection):
    # The same view of the sample the orchestrator works with
    documents = client.get_collection(database, collection).documents
    return [{k: v for k, v in doc.items() if not k.startswith("_")} for doc in documents]


class TestPipelineIntegration:
    def test_discover_then_partition(self, fake_client, app_config):
        client = fake_client({"analytics": {"events": _events()}})
        engineer = ReverseEngineer(client, app_config)

        report = engineer.discover("analytics")
        result = report.results[0]
        schema = report.schemas["events"]

        assert result.chosen_field == "eventType"
        assert "user" in result.candidate_fields
        assert "amount" in result.other_fields
        assert "at" in result.other_fields
        assert schema.properties["eventType"].doc_percent == 90
        assert not any(name.startswith("_") for name in schema.properties)

        documents = _sanitized(client, "analytics", "events")
        partitions = partition_documents("events", documents, result.chosen_field)

        assert [p.name for p in partitions] == ["click", "view", "purchase", "events"]
        assert partitions[-1].is_default
        assert len(partitions[-1]) == 30
        assert sum(len(p) for p in partitions) == schema.total_docs == 300

    def test_partitions_rebuild_the_sample(self, fake_client):
        client = fake_client({"analytics": {"events": _events()}})
        documents = _sanitized(client, "analytics", "events")
        partitions = partition_documents("events", documents, "eventType")

        merged = [doc for p in partitions for doc in p.documents]
        key = TypeDetector.value_key
        assert Counter(key(d) for d in merged) == Counter(key(d) for d in documents)

    def test_collections_data_follows_discovery(self, fake_client, app_config):
        client = fake_client({"analytics": {"events": _events()}})
        engineer = ReverseEngineer(client, app_config)

        results = engineer.get_document_kinds("analytics")
        kinds = {r.collection_name: r.chosen_field for r in results}
        buckets = {
            item.db_name: item.db_collections
            for item in engineer.get_collection_names("analytics", kinds)
        }
        data = engineer.get_collections_data("analytics", buckets, kinds)

        assert buckets == {"events": ["click", "view", "purchase"]}
        assert [p.collection_name for p in data.packages] == ["click", "view", "purchase"]
        assert all(p.doc_type == "eventType" for p in data.packages)
        assert "amount" in data.packages[2].document_template
        assert "amount" not in data.packages[0].document_template

    def test_discovery_survives_restart(self, fake_client, app_config):
        client = fake_client({"analytics": {"events": _events(), "users": [{"name": "x"}]}})
        report = ReverseEngineer(client, app_config).discover("analytics")

        MetadataStore(app_config.metadata_dir).save_all("analytics", report.results, report.schemas)

        # Fresh store instance, as after a restart
        kinds, schemas, state = MetadataStore(app_config.metadata_dir).load_all("analytics")
        assert kinds["events"] == report.results[0]
        assert kinds["users"].chosen_field == "name"
        assert schemas["events"].properties["eventType"] == report.schemas["events"].properties["eventType"]
        assert state["collection_count"] == 2
