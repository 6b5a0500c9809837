# ==============================================
# Tests for Configuration Loading
# ==============================================

import pytest

from dockind import config as config_module
from dockind.config import AppConfig, SamplingConfig, get_config

ENV_VARS = [
    "MONGO_HOST", "MONGO_PORT", "MONGO_USER", "MONGO_PASSWORD", "MONGO_DATABASE", "MONGO_TLS",
    "SAMPLING_MODE", "SAMPLING_ABSOLUTE_VALUE", "SAMPLING_RELATIVE_VALUE", "SAMPLING_BATCH_SIZE",
    "DISCOVERY_SAMPLE_SIZE", "PROFILE_SAMPLE_SIZE", "DISCOVERY_PROBABILITY", "EXCLUDE_DOC_KIND",
    "INCLUDE_SYSTEM_COLLECTIONS", "INCLUDE_EMPTY_COLLECTIONS", "FIELD_INFERENCE", "MAX_WORKERS",
    "METADATA_DIR", "LOG_LEVEL", "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's local .env out of the picture
    monkeypatch.setattr(config_module, "load_dotenv", lambda **kwargs: False)
    yield
    config_module._config_instance = None


class TestGetConfig:
    def test_defaults(self):
        config = get_config(reload=True)

        assert config.mongo.host == "localhost"
        assert config.mongo.port == 27017
        assert config.mongo.user is None
        assert config.mongo.tls is False
        assert config.sampling.mode == "absolute"
        assert config.sampling.absolute_value == 1000
        assert config.discovery.sample_size == 20
        assert config.discovery.profile_sample_size == 30
        assert config.discovery.probability == 90
        assert config.discovery.exclude_fields == []
        assert config.metadata_dir == "metadata/"
        assert config.logging.level == "WARNING"
        assert config.logging.file is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MONGO_HOST", "cosmos.example.net")
        monkeypatch.setenv("MONGO_PORT", "10255")
        monkeypatch.setenv("MONGO_TLS", "true")
        monkeypatch.setenv("SAMPLING_MODE", "relative")
        monkeypatch.setenv("SAMPLING_RELATIVE_VALUE", "2.5")
        monkeypatch.setenv("DISCOVERY_PROBABILITY", "75")
        monkeypatch.setenv("EXCLUDE_DOC_KIND", "region, tenant,,")
        monkeypatch.setenv("INCLUDE_EMPTY_COLLECTIONS", "yes")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FILE", "logs/dockind.log")

        config = get_config(reload=True)

        assert config.mongo.host == "cosmos.example.net"
        assert config.mongo.port == 10255
        assert config.mongo.tls is True
        assert config.sampling.mode == "relative"
        assert config.sampling.relative_value == 2.5
        assert config.discovery.probability == 75
        assert config.discovery.exclude_fields == ["region", "tenant"]
        assert config.discovery.include_empty_collections is True
        assert config.logging.level == "DEBUG"
        assert config.logging.file == "logs/dockind.log"

    def test_singleton(self):
        assert get_config(reload=True) is get_config()

    def test_invalid_sampling_mode(self, monkeypatch):
        monkeypatch.setenv("SAMPLING_MODE", "all")
        with pytest.raises(ValueError):
            get_config(reload=True)


class TestConfigObjects:
    def test_app_config_defaults_are_independent(self):
        first, second = AppConfig(), AppConfig()
        first.discovery.exclude_fields.append("type")
        assert second.discovery.exclude_fields == []

    def test_sampling_batch_size_positive(self):
        with pytest.raises(ValueError):
            SamplingConfig(batch_size=0)
