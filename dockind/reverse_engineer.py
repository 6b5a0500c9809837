# ==============================================
# ReverseEngineer: Final Orchestrator
# ==============================================
#
# PURPOSE:
#   This is the MAIN CLASS that ties all 4 topics together for a
#   database. Users (and the CLI) interact with this class only.
#
# HOW IT CONNECTS THE 4 TOPICS (per collection):
#
#   ┌──────────────────────────────────────────────────────────┐
#   │                     ReverseEngineer                      │
#   │                                                          │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 3: STORAGE                             │        │
#   │  │  MongoClient → DocumentSampler               │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ raw documents                          │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 1: NORMALIZATION                       │        │
#   │  │  DocumentFilter (strip "_" fields)           │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ sanitized documents                    │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 2: ANALYSIS & DETECTION                │        │
#   │  │  SchemaInferrer → DocumentKindDetector       │        │
#   │  └──────────────┬───────────────────────────────┘        │
#   │                 │ DocumentKindResult                     │
#   │                 ▼                                        │
#   │  ┌──────────────────────────────────────────────┐        │
#   │  │ TOPIC 3: STORAGE: partition_documents        │        │
#   │  │ TOPIC 4: PERSISTENCE: MetadataStore (CLI)    │        │
#   │  └──────────────────────────────────────────────┘        │
#   └──────────────────────────────────────────────────────────┘
#
#   Collections are processed concurrently on a thread pool bounded by
#   discovery.max_workers. Each collection's pipeline owns its own
#   documents, schema and result.
#
# CLASS: ReverseEngineer
# ----------------------
#   Public Methods:
#   ---------------
#   - get_database_names() -> list[str]
#   - discover(database, exclude_fields=None) -> DiscoveryReport
#   - get_document_kinds(database, exclude_fields=None) -> list[DocumentKindResult]
#   - infer_collection(database, collection, sample_size=None) -> InferredSchema
#   - get_collection_names(database, document_kinds) -> list[CollectionKinds]
#   - get_collections_data(database, collections, document_kinds) -> CollectionsData
#
# DATA CLASSES:
# -------------
#   - DiscoveryReport   → results + schemas of one discovery run
#   - CollectionKinds   → distinct kind values found in one collection
#   - CollectionPackage → one logical entity ready for a consumer
#   - CollectionsData   → packages + model info
#
# ==============================================

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pymongo.errors import PyMongoError

from dockind.analysis import (
    CustomInference,
    DetectionThresholds,
    DocumentKindDetector,
    DocumentKindResult,
    InferredSchema,
    SchemaInferrer,
)
from dockind.config import AppConfig, get_config
from dockind.errors import ErrorCode, ReverseEngineeringError
from dockind.normalization import DocumentFilter
from dockind.storage import (
    DocumentSampler,
    MongoClient,
    SamplingPolicy,
    distinct_kind_values,
    partition_documents,
)

logger = logging.getLogger(__name__)

ANY_KIND = "*"


@dataclass
class DiscoveryReport:
    database: str
    results: List[DocumentKindResult] = field(default_factory=list)
    schemas: Dict[str, InferredSchema] = field(default_factory=dict)


@dataclass
class CollectionKinds:
    db_name: str
    db_collections: List[Any] = field(default_factory=list)
    is_empty: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "db_name": self.db_name,
            "db_collections": list(self.db_collections),
            "is_empty": self.is_empty,
        }


@dataclass
class CollectionPackage:
    db_name: str
    collection_name: Optional[str] = None
    documents: List[Dict[str, Any]] = field(default_factory=list)
    doc_type: Optional[str] = None
    document_template: Optional[Dict[str, Any]] = None
    empty_bucket: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "db_name": self.db_name,
            "collection_name": self.collection_name,
            "documents": self.documents,
            "doc_type": self.doc_type,
            "document_template": self.document_template,
            "empty_bucket": self.empty_bucket,
        }


@dataclass
class CollectionsData:
    packages: List[CollectionPackage] = field(default_factory=list)
    model_info: Dict[str, Any] = field(default_factory=dict)


def _kind_field_for(document_kinds: Optional[Mapping[str, Optional[str]]], collection: str) -> str:
    kind = (document_kinds or {}).get(collection) or ANY_KIND
    return "" if kind == ANY_KIND else kind


class ReverseEngineer:
    """
    Runs sampling, inference and document-kind detection over the
    collections of a database.
    """

    def __init__(self, client: MongoClient, config: Optional[AppConfig] = None):
        """
        Args:
            client: A connected MongoClient wrapper
            config: Application configuration. If None, loads from environment.
        """
        self._config = config or get_config()
        self._client = client

        discovery = self._config.discovery

        # TOPIC 3: Storage
        self._policy = SamplingPolicy.from_config(self._config.sampling)
        self._sampler = DocumentSampler(self._policy)

        # TOPIC 1: Normalization
        self._document_filter = DocumentFilter()

        # TOPIC 2: Analysis & Detection
        self._discovery_inferrer = SchemaInferrer(discovery.sample_size)
        self._profile_inferrer = SchemaInferrer(discovery.profile_sample_size)
        self._max_workers = max(1, discovery.max_workers)

    # ======================================
    # Public API
    # ======================================
    def get_database_names(self) -> List[str]:
        return self._client.list_database_names()

    def discover(self, database: str, exclude_fields: Optional[Sequence[str]] = None) -> DiscoveryReport:
        """
        Sample every collection and detect its document kind.

        Args:
            database: Database to scan
            exclude_fields: Fields never chosen as discriminator. Defaults to
                            the configured EXCLUDE_DOC_KIND list.

        Returns:
            DiscoveryReport with one result and one schema per collection
        """
        discovery = self._config.discovery
        excluded = discovery.exclude_fields if exclude_fields is None else exclude_fields
        detector = DocumentKindDetector(
            DetectionThresholds(
                probability=discovery.probability,
                excluded_fields=excluded,
            )
        )

        names = self._collection_names(database)

        def detect_one(name: str) -> Tuple[DocumentKindResult, InferredSchema]:
            documents = self._sample_sanitized(database, name)
            logger.info("Getting documents for collection '%s' (%d sampled)", name, len(documents))
            schema = self._discovery_inferrer.infer(documents, collection_name=name)
            result = detector.detect(CustomInference(collection_name=name, schema=schema))
            return result, schema

        pairs = self._map_collections(names, detect_one, ErrorCode.GET_DATA)

        report = DiscoveryReport(database=database)
        for result, schema in pairs:
            report.results.append(result)
            report.schemas[result.collection_name] = schema
        logger.info("Detected document kinds for %d collections in '%s'", len(pairs), database)
        return report

    def get_document_kinds(
        self,
        database: str,
        exclude_fields: Optional[Sequence[str]] = None
    ) -> List[DocumentKindResult]:
        return self.discover(database, exclude_fields).results

    def infer_collection(
        self,
        database: str,
        collection: str,
        sample_size: Optional[int] = None
    ) -> InferredSchema:
        """
        Profile a single collection (default 30 distinct samples per field).
        """
        inferrer = SchemaInferrer(sample_size) if sample_size else self._profile_inferrer
        documents = self._sample_sanitized(database, collection)
        return inferrer.infer(documents, collection_name=collection)

    def get_collection_names(
        self,
        database: str,
        document_kinds: Optional[Mapping[str, Optional[str]]] = None
    ) -> List[CollectionKinds]:
        """
        List collections with the distinct values of their kind field.

        Args:
            database: Database to scan
            document_kinds: collection name → kind field ("*" or missing = none)

        Returns:
            One CollectionKinds per collection
        """
        names = self._collection_names(database)

        def handle_one(name: str) -> CollectionKinds:
            documents = self._sample_sanitized(database, name)
            kind_field = _kind_field_for(document_kinds, name)
            values = distinct_kind_values(documents, kind_field) if kind_field else []
            return CollectionKinds(db_name=name, db_collections=values, is_empty=not documents)

        return self._map_collections(names, handle_one, ErrorCode.HANDLE_BUCKET)

    def get_collections_data(
        self,
        database: str,
        collections: Mapping[str, Optional[Sequence[Any]]],
        document_kinds: Optional[Mapping[str, Optional[str]]] = None
    ) -> CollectionsData:
        """
        Build collection packages for the selected collections.

        Args:
            database: Database to read from
            collections: collection name → selected kind values (None = none selected)
            document_kinds: collection name → kind field ("*" or missing = none)

        Returns:
            CollectionsData with every package and the model info
        """
        discovery = self._config.discovery
        logger.info(
            "Reverse-Engineering sampling params: %s, %s",
            self._policy.describe(),
            "keep field order" if discovery.field_inference == "field" else "alphabetical order",
        )
        logger.info("Selected collection list: %s", list(collections))

        def package_one(name: str) -> List[CollectionPackage]:
            logger.info("Loading documents for '%s'...", name)
            documents = self._sample_sanitized(database, name)
            logger.info("Documents have loaded for '%s'", name)
            return self._build_packages(
                name,
                documents,
                _kind_field_for(document_kinds, name),
                collections.get(name),
            )

        nested = self._map_collections(list(collections), package_one, ErrorCode.COLLECTION_DATA)

        return CollectionsData(
            packages=[package for packages in nested for package in packages],
            model_info={
                "db_id": database,
                "version": self._client.server_version(database),
            },
        )

    # ======================================
    # Internal helpers
    # ======================================
    def _collection_names(self, database: str) -> List[str]:
        return self._client.list_collection_names(
            database,
            include_system=self._config.discovery.include_system_collections,
        )

    def _sample_sanitized(self, database: str, name: str) -> List[Dict[str, Any]]:
        collection = self._client.get_collection(database, name)
        raw_documents = self._sampler.sample(collection)
        return self._document_filter.sanitize_batch(raw_documents)

    def _build_packages(
        self,
        name: str,
        documents: List[Dict[str, Any]],
        kind_field: str,
        kind_values: Optional[Sequence[Any]]
    ) -> List[CollectionPackage]:
        discovery = self._config.discovery
        include_empty = discovery.include_empty_collections
        keep_template = discovery.field_inference == "field"

        if kind_field and kind_values is None:
            # A kind field was chosen but no kind values were selected
            if include_empty:
                return [CollectionPackage(db_name=name, empty_bucket=True)]
            return []

        partitions = partition_documents(
            name,
            documents,
            kind_field,
            kind_values=kind_values if kind_field else None,
        )

        packages = []
        for partition in partitions:
            if not partition.documents and not include_empty:
                continue
            packages.append(
                CollectionPackage(
                    db_name=name,
                    collection_name=partition.name,
                    documents=partition.documents,
                    doc_type=kind_field or name,
                    document_template=(
                        partition.documents[0] if keep_template and partition.documents else None
                    ),
                )
            )
        return packages

    def _map_collections(
        self,
        names: List[str],
        worker: Callable[[str], Any],
        error_code: ErrorCode
    ) -> List[Any]:
        # Results come back in the order of `names`
        def guarded(name: str) -> Any:
            try:
                return worker(name)
            except ReverseEngineeringError:
                raise
            except PyMongoError as e:
                logger.error("Failed on collection '%s': %s", name, e)
                raise ReverseEngineeringError(error_code, e, cause=e) from e

        if not names:
            return []

        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(names))) as executor:
            return list(executor.map(guarded, names))
