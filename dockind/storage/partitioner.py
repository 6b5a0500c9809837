# ==============================================
# Partitioner
# ==============================================
#
# PURPOSE:
#   Takes the sampled documents of one physical collection and the
#   chosen document-kind field, and splits the documents into one
#   logical sub-collection per distinct kind value.
#
# RULES:
# ------
#   - Documents are grouped by the verbatim value of the kind field
#     (deep value equality), partitions in first-seen order.
#   - Documents lacking the field go to one default partition named
#     after the physical collection, placed last.
#   - No kind field → everything is in the default partition.
#   - kind_values given → exactly those partitions, in that order,
#     empty ones included, and no default partition.
#
# DATA CLASS: DocumentPartition
# -----------------------------
#   - name: str                 → kind value as text, or the collection name
#   - collection_name: str      → physical collection
#   - kind_field: str           → "" for the default partition
#   - kind_value: Any           → None for the default partition
#   - documents: list[dict]
#   - is_default: bool
#
# ==============================================
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence

from dockind.normalization import TypeDetector


@dataclass
class DocumentPartition:
    name: str
    collection_name: str
    kind_field: str = ""
    kind_value: Any = None
    documents: List[Dict[str, Any]] = field(default_factory=list)
    is_default: bool = False

    def __len__(self) -> int:
        return len(self.documents)


def _default_partition(collection_name: str, documents: List[Dict[str, Any]]) -> DocumentPartition:
    return DocumentPartition(
        name=collection_name,
        collection_name=collection_name,
        documents=documents,
        is_default=True,
    )


def partition_documents(
    collection_name: str,
    documents: Iterable[Dict[str, Any]],
    kind_field: Optional[str],
    kind_values: Optional[Sequence[Any]] = None
) -> List[DocumentPartition]:
    documents = list(documents)

    # No discriminator → one partition for the whole collection
    if not kind_field:
        return [_default_partition(collection_name, documents)]

    if kind_values is not None:
        return [
            DocumentPartition(
                name=str(value),
                collection_name=collection_name,
                kind_field=kind_field,
                kind_value=value,
                documents=[
                    doc for doc in documents
                    if kind_field in doc
                    and TypeDetector.value_key(doc[kind_field]) == TypeDetector.value_key(value)
                ],
            )
            for value in kind_values
        ]

    groups: Dict[Hashable, DocumentPartition] = {}
    missing: List[Dict[str, Any]] = []

    for doc in documents:
        if kind_field not in doc:
            missing.append(doc)
            continue

        value = doc[kind_field]
        key = TypeDetector.value_key(value)
        partition = groups.get(key)
        if partition is None:
            partition = DocumentPartition(
                name=str(value),
                collection_name=collection_name,
                kind_field=kind_field,
                kind_value=value,
            )
            groups[key] = partition
        partition.documents.append(doc)

    partitions = list(groups.values())
    if missing:
        partitions.append(_default_partition(collection_name, missing))
    return partitions


def distinct_kind_values(documents: Iterable[Dict[str, Any]], kind_field: str) -> List[Any]:
    # Falsy values (None, "", 0, False) never name a document kind
    seen = set()
    values = []
    for doc in documents:
        value = doc.get(kind_field)
        if not value:
            continue
        key = TypeDetector.value_key(value)
        if key in seen:
            continue
        seen.add(key)
        values.append(value)
    return values
