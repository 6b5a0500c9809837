import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Tuple

from bson import json_util

from dockind.analysis import DocumentKindResult, InferredSchema

logger = logging.getLogger(__name__)


# ==============================================
# MetadataStore
# ==============================================
#
# PURPOSE:
#   Persist discovery output to disk so a later run (or another tool)
#   can read the chosen document kinds and field profiles without
#   sampling the database again.
#
# WHAT IS PERSISTED (per database):
#   1. DocumentKindResults  → Candidates / chosen kind per collection
#   2. InferredSchemas      → Field profiles per collection
#   3. State                → When discovery ran, how many collections
#
# Sample values can be BSON types (ObjectId, datetime, Decimal128),
# so everything is written with bson.json_util (Extended JSON).
#
# CLASS: MetadataStore
# --------------------
#   Constructor:
#   ------------
#   - __init__(storage_dir: str = "metadata/")
#       Create storage directory if it doesn't exist.
#
class MetadataStore:
    """
    Handles persistence of discovery metadata to disk.

    Files created:
    - metadata/<database>/document_kinds.json    → DocumentKindResults
    - metadata/<database>/inferred_schemas.json  → InferredSchemas
    - metadata/<database>/state.json             → Discovery state
    """

    KINDS_FILE = "document_kinds.json"
    SCHEMAS_FILE = "inferred_schemas.json"
    STATE_FILE = "state.json"

    def __init__(self, storage_dir: str = "metadata/"):
        """
        Initialize the metadata store.

        Args:
            storage_dir: Directory to store metadata files
        """
        self.storage_dir = Path(storage_dir)

        # Create directory if it doesn't exist
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def database_dir(self, database: str) -> Path:
        path = self.storage_dir / database
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _write(self, path: Path, payload: Any) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(json_util.dumps(payload, indent=2))

    def _read(self, path: Path) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return json_util.loads(f.read())

#   Methods:
#   --------
#   SAVING:
#   - save_document_kinds(database, results) -> None
#   - save_schemas(database, schemas) -> None
#   - save_state(database, collection_count) -> None
#   - save_all(database, results, schemas) -> None
#
    def save_document_kinds(self, database: str, results: List[DocumentKindResult]) -> None:
        """
        Save document-kind results to disk.

        Args:
            database: Database the collections belong to
            results: One DocumentKindResult per collection
        """
        path = self.database_dir(database) / self.KINDS_FILE
        self._write(path, {result.collection_name: result.to_dict() for result in results})
        logger.info("Saved %d document kind results to %s", len(results), path)

    def save_schemas(self, database: str, schemas: Dict[str, InferredSchema]) -> None:
        path = self.database_dir(database) / self.SCHEMAS_FILE
        self._write(path, {name: schema.to_dict() for name, schema in schemas.items()})
        logger.info("Saved %d inferred schemas to %s", len(schemas), path)

    def save_state(self, database: str, collection_count: int) -> None:
        path = self.database_dir(database) / self.STATE_FILE
        state = {
            "database": database,
            "collection_count": collection_count,
            "discovered_at": datetime.now(timezone.utc).isoformat(),
            "version": "1.0",
        }
        self._write(path, state)
        logger.info("Saved state (collections=%d) to %s", collection_count, path)

    def save_all(
        self,
        database: str,
        results: List[DocumentKindResult],
        schemas: Dict[str, InferredSchema]
    ) -> None:
        """
        Convenience method to save everything at once.
        """
        self.save_document_kinds(database, results)
        self.save_schemas(database, schemas)
        self.save_state(database, len(results))

#   LOADING:
#   - load_document_kinds(database) -> dict[str, DocumentKindResult]
#   - load_schemas(database) -> dict[str, InferredSchema]
#   - load_state(database) -> dict
#   - load_all(database) -> tuple
#
    def load_document_kinds(self, database: str) -> Dict[str, DocumentKindResult]:
        """
        Load document-kind results from disk.

        Returns:
            Dictionary mapping collection name -> DocumentKindResult
            Empty dict if file doesn't exist
        """
        path = self.storage_dir / database / self.KINDS_FILE
        if not path.exists():
            logger.info("No document kinds file found at %s", path)
            return {}

        data = self._read(path)
        return {name: DocumentKindResult.from_dict(item) for name, item in data.items()}

    def load_schemas(self, database: str) -> Dict[str, InferredSchema]:
        path = self.storage_dir / database / self.SCHEMAS_FILE
        if not path.exists():
            logger.info("No inferred schemas file found at %s", path)
            return {}

        data = self._read(path)
        return {name: InferredSchema.from_dict(item) for name, item in data.items()}

    def load_state(self, database: str) -> Dict[str, Any]:
        path = self.storage_dir / database / self.STATE_FILE
        if not path.exists():
            return {
                "database": database,
                "collection_count": 0,
                "discovered_at": None,
                "version": "1.0",
            }
        return self._read(path)

    def load_all(self, database: str) -> Tuple[Dict, Dict, Dict]:
        """
        Returns:
            Tuple of (document_kinds, schemas, state)
        """
        return (
            self.load_document_kinds(database),
            self.load_schemas(database),
            self.load_state(database),
        )

#   UTILITY:
#   - exists(database) -> bool
#   - clear(database) -> None
#
    def exists(self, database: str) -> bool:
        base = self.storage_dir / database
        return any(
            (base / name).exists()
            for name in (self.KINDS_FILE, self.SCHEMAS_FILE, self.STATE_FILE)
        )

    def clear(self, database: str) -> None:
        """
        Delete all metadata files for a database.
        """
        base = self.storage_dir / database
        for name in (self.KINDS_FILE, self.SCHEMAS_FILE, self.STATE_FILE):
            path = base / name
            if path.exists():
                path.unlink()
                logger.info("Deleted %s", path)
# FILE STRUCTURE:
# ---------------
#   metadata/
#   └── <database>/
#       ├── document_kinds.json    → {collection: {candidate_fields, chosen_field, ...}}
#       ├── inferred_schemas.json  → {collection: {total_docs, properties, ...}}
#       └── state.json             → {collection_count, discovered_at, ...}
#
# =============================================
