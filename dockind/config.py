# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to all other modules.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 27017)
#     user: str | None   (default None)
#     password: str | None (default None)
#     database: str      (default "test")
#     tls: bool          (default False, Cosmos DB needs True)
#
# - SamplingConfig (dataclass)
#     mode: str            ("absolute" or "relative", default "absolute")
#     absolute_value: int  (default 1000 documents)
#     relative_value: float (default 10 percent)
#     batch_size: int      (default 1000 documents per page)
#
# - DiscoveryConfig (dataclass)
#     sample_size: int           (default 20, distinct samples kept per field)
#     profile_sample_size: int   (default 30, for plain schema inference)
#     probability: int           (default 90)
#     exclude_fields: list[str]  (default [])
#     include_system_collections: bool (default False)
#     include_empty_collections: bool  (default False)
#     field_inference: str       ("field" keeps a document template, default "field")
#     max_workers: int           (default 4, collections processed at once)
#
# - LoggingConfig (dataclass)
#     level: str           (default "WARNING")
#     file: str | None     (default None, no file logging)
#
# - AppConfig (dataclass)
#     mongo, sampling, discovery, logging, metadata_dir
#
# FUNCTION:
# ---------
# - get_config(reload: bool = False) -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUE_VALUES


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class MongoConfig:
    """MongoDB (or Cosmos DB Mongo API) connection configuration."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "test"
    tls: bool = False


@dataclass
class SamplingConfig:
    """How many documents to sample per collection."""
    mode: str = "absolute"
    absolute_value: int = 1000
    relative_value: float = 10
    batch_size: int = 1000

    def __post_init__(self):
        if self.mode not in ("absolute", "relative"):
            raise ValueError(f"Sampling mode must be 'absolute' or 'relative', got {self.mode!r}")
        if self.batch_size < 1:
            raise ValueError("Sampling batch size must be positive")


@dataclass
class DiscoveryConfig:
    """Document-kind discovery configuration."""
    sample_size: int = 20
    profile_sample_size: int = 30
    probability: int = 90
    exclude_fields: List[str] = field(default_factory=list)
    include_system_collections: bool = False
    include_empty_collections: bool = False
    field_inference: str = "field"
    max_workers: int = 4


@dataclass
class LoggingConfig:
    """Log level and optional rotating log file."""
    level: str = "WARNING"
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    metadata_dir: str = "metadata/"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config(reload: bool = False) -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Args:
        reload: Rebuild the configuration from the current environment

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    # Build MongoDB configuration
    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "test"),
        tls=_env_bool("MONGO_TLS", False)
    )

    # Build Sampling configuration
    sampling_config = SamplingConfig(
        mode=os.getenv("SAMPLING_MODE", "absolute"),
        absolute_value=int(os.getenv("SAMPLING_ABSOLUTE_VALUE", "1000")),
        relative_value=float(os.getenv("SAMPLING_RELATIVE_VALUE", "10")),
        batch_size=int(os.getenv("SAMPLING_BATCH_SIZE", "1000"))
    )

    # Build Discovery configuration
    discovery_config = DiscoveryConfig(
        sample_size=int(os.getenv("DISCOVERY_SAMPLE_SIZE", "20")),
        profile_sample_size=int(os.getenv("PROFILE_SAMPLE_SIZE", "30")),
        probability=int(os.getenv("DISCOVERY_PROBABILITY", "90")),
        exclude_fields=_env_list("EXCLUDE_DOC_KIND"),
        include_system_collections=_env_bool("INCLUDE_SYSTEM_COLLECTIONS", False),
        include_empty_collections=_env_bool("INCLUDE_EMPTY_COLLECTIONS", False),
        field_inference=os.getenv("FIELD_INFERENCE", "field"),
        max_workers=int(os.getenv("MAX_WORKERS", "4"))
    )

    # Build Logging configuration
    logging_config = LoggingConfig(
        level=os.getenv("LOG_LEVEL", "WARNING"),
        file=os.getenv("LOG_FILE") or None
    )

    # Build main application configuration
    _config_instance = AppConfig(
        mongo=mongo_config,
        sampling=sampling_config,
        discovery=discovery_config,
        logging=logging_config,
        metadata_dir=os.getenv("METADATA_DIR", "metadata/")
    )

    return _config_instance
