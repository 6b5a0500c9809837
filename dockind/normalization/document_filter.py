# ==============================================
# DocumentFilter
# ==============================================
#
# PURPOSE:
#   Turn raw sampled documents into sanitized documents by dropping
#   every top-level field whose name starts with the reserved prefix.
#
# WHY THIS CLASS EXISTS:
#   MongoDB (and Cosmos DB's Mongo API) put internal fields such as
#   "_id", "_ts", "_etag" on every document. They are identical in
#   shape across all entity types and would always look like perfect
#   discriminator candidates, so they never enter the analysis.
#
# CLASS: DocumentFilter
# ---------------------
#   - sanitize(raw_document: Mapping) -> dict
#       Return a NEW dict without reserved fields. Input is untouched.
#
#   - sanitize_batch(raw_documents: Iterable[Mapping]) -> list[dict]
#
# ==============================================

from typing import Any, Dict, Iterable, List, Mapping


class DocumentFilter:
    RESERVED_PREFIX = "_"

    def __init__(self, reserved_prefix: str = RESERVED_PREFIX):
        self.reserved_prefix = reserved_prefix

    def is_reserved(self, field_name: Any) -> bool:
        return isinstance(field_name, str) and field_name.startswith(self.reserved_prefix)

    def sanitize(self, raw_document: Mapping[str, Any]) -> Dict[str, Any]:
        if not isinstance(raw_document, Mapping):
            raise ValueError("Document must be a mapping")

        return {
            key: value
            for key, value in raw_document.items()
            if not self.is_reserved(key)
        }

    def sanitize_batch(self, raw_documents: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        return [self.sanitize(document) for document in raw_documents]
