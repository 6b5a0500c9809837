# ==============================================
# MongoClient
# ==============================================
#
# PURPOSE:
#   Thin wrapper around pymongo that hands collection handles to the
#   sampler and lists databases / collections for discovery.
#
# CLASS: MongoClient
# ------------------
#   Constructor:
#   ------------
#   - __init__(host, port, user=None, password=None, database="test", tls=False)
#       Store connection params. Don't connect yet.
#
#   - from_config(config: MongoConfig) -> MongoClient  (classmethod)
#
#   Methods:
#   --------
#   - connect() / disconnect() / context manager
#   - list_database_names() -> list[str]
#   - list_collection_names(database, include_system=False) -> list[str]
#   - get_collection(database, name) -> pymongo Collection
#   - server_version(database) -> str | None
#
# FUNCTION:
# ---------
#   - filter_system_collections(names) -> list[str]
#       Drop "system." collections.
#
# ==============================================

import logging
from typing import Iterable, List, Optional
from urllib.parse import quote_plus

from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from dockind.config import MongoConfig
from dockind.errors import ErrorCode, ReverseEngineeringError

logger = logging.getLogger(__name__)

SYSTEM_COLLECTION_PREFIX = "system."


def filter_system_collections(names: Iterable[str]) -> List[str]:
    return [name for name in names if not name.startswith(SYSTEM_COLLECTION_PREFIX)]


class MongoClient:
    def __init__(
        self,
        host: str = "localhost",
        port: int = 27017,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: str = "test",
        tls: bool = False
    ):
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.tls = tls
        self.client = None  # Will hold the actual MongoDB client connection

    @classmethod
    def from_config(cls, config: MongoConfig) -> "MongoClient":
        return cls(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            tls=config.tls
        )

    def build_uri(self) -> str:
        if self.user and self.password:
            credentials = f"{quote_plus(self.user)}:{quote_plus(self.password)}@"
        else:
            credentials = ""
        return f"mongodb://{credentials}{self.host}:{self.port}/"

    def connect(self):
        # Establish connection and check it with a ping.
        try:
            self.client = PyMongoClient(self.build_uri(), tls=self.tls)
            self.client.admin.command("ping")
            logger.info("Connected to MongoDB at %s:%s", self.host, self.port)
        except ConnectionFailure as e:
            logger.error("Could not connect to MongoDB: %s", e)
            self._discard_client()
            raise ReverseEngineeringError(ErrorCode.CONNECTION, e, cause=e) from e
        except OperationFailure as e:
            logger.error("Authentication failed: %s", e)
            self._discard_client()
            raise ReverseEngineeringError(ErrorCode.CONNECTION, e, cause=e) from e

    def _discard_client(self):
        # A client whose ping failed still runs monitor threads
        if self.client:
            self.client.close()
            self.client = None

    def disconnect(self):
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB.")
            self.client = None

    def _require_client(self):
        if not self.client:
            raise ReverseEngineeringError(ErrorCode.CONNECTION, "Not connected to MongoDB.")
        return self.client

    def list_database_names(self) -> List[str]:
        client = self._require_client()
        try:
            names = client.list_database_names()
        except PyMongoError as e:
            raise ReverseEngineeringError(ErrorCode.DB_LIST, e, cause=e) from e
        logger.info("All databases list: %s", names)
        return names

    def list_collection_names(self, database: Optional[str] = None, include_system: bool = False) -> List[str]:
        client = self._require_client()
        db_name = database or self.database
        try:
            names = client[db_name].list_collection_names()
        except PyMongoError as e:
            raise ReverseEngineeringError(ErrorCode.LIST_COLLECTION, e, cause=e) from e

        if not include_system:
            names = filter_system_collections(names)
        logger.info("Collection list for database '%s': %s", db_name, names)
        return names

    def get_collection(self, database: Optional[str], name: str):
        client = self._require_client()
        return client[database or self.database][name]

    def server_version(self, database: Optional[str] = None) -> Optional[str]:
        # Some Cosmos DB tiers reject buildInfo; the version is informational only
        client = self._require_client()
        try:
            info = client[database or self.database].command("buildInfo")
        except PyMongoError as e:
            logger.warning("Could not read server version: %s", e)
            return None
        return info.get("version")

    def __enter__(self):
        # For `with MongoClient(...) as db:` usage.
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False
