"""
Tests for utils/config.py

AppConfig environment loading, validation and redaction.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config import (
    DEFAULT_LOCAL_PATH,
    DEFAULT_PAGE_SIZE,
    PAGE_SIZES,
    AppConfig,
    Config,
)

_ENV_VARS = (
    "FEED_API_BASE_URL", "FEED_DEVELOPER_KEY", "FEED_LOCAL_PATH",
    "FEED_TIMEOUT_SECONDS", "FEED_DEFAULT_PAGE_SIZE", "APP_PORT", "APP_HOST",
    "APP_LOG_FORMAT", "APP_CORS_ORIGINS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAppConfigDefaults:
    def test_defaults(self, clean_env):
        cfg = AppConfig.from_env()
        assert cfg.api_base_url == ""
        assert cfg.developer_key == ""
        assert cfg.local_path == DEFAULT_LOCAL_PATH
        assert cfg.timeout_seconds is None
        assert cfg.default_page_size == DEFAULT_PAGE_SIZE == 50
        assert cfg.api_port == 8000
        assert cfg.api_host == "127.0.0.1"
        assert cfg.log_format == "text"
        assert cfg.cors_origins == ["*"]
        assert cfg.remote_configured is False

    def test_page_sizes(self):
        assert PAGE_SIZES == (25, 50, 100)

    def test_default_snapshot_is_bundled(self):
        assert DEFAULT_LOCAL_PATH.name == "test-data.json"
        assert DEFAULT_LOCAL_PATH.exists()


class TestAppConfigFromEnv:
    def test_remote_settings(self, clean_env):
        clean_env.setenv("FEED_API_BASE_URL", "https://feed.example.com/")
        clean_env.setenv("FEED_DEVELOPER_KEY", "secret")
        cfg = AppConfig.from_env()
        assert cfg.api_base_url == "https://feed.example.com"
        assert cfg.developer_key == "secret"
        assert cfg.remote_configured is True

    def test_timeout(self, clean_env):
        clean_env.setenv("FEED_TIMEOUT_SECONDS", "2.5")
        assert AppConfig.from_env().timeout_seconds == 2.5

    def test_blank_timeout_means_none(self, clean_env):
        clean_env.setenv("FEED_TIMEOUT_SECONDS", "  ")
        assert AppConfig.from_env().timeout_seconds is None

    def test_page_size_override(self, clean_env):
        clean_env.setenv("FEED_DEFAULT_PAGE_SIZE", "100")
        assert AppConfig.from_env().default_page_size == 100

    def test_unsupported_page_size_rejected(self, clean_env):
        clean_env.setenv("FEED_DEFAULT_PAGE_SIZE", "30")
        with pytest.raises(ValueError, match="FEED_DEFAULT_PAGE_SIZE"):
            AppConfig.from_env()

    def test_cors_origins_split(self, clean_env):
        clean_env.setenv("APP_CORS_ORIGINS", "http://a.test, http://b.test,")
        assert AppConfig.from_env().cors_origins == ["http://a.test", "http://b.test"]

    def test_local_path(self, clean_env, tmp_path):
        clean_env.setenv("FEED_LOCAL_PATH", str(tmp_path / "feed.json"))
        assert AppConfig.from_env().local_path == tmp_path / "feed.json"


class TestConfigToDict:
    def test_redacted_dict_masks_key(self, clean_env):
        clean_env.setenv("FEED_DEVELOPER_KEY", "secret")
        cfg = AppConfig.from_env()
        assert cfg.to_dict()["developer_key"] == "secret"
        assert cfg.to_dict(redact=True)["developer_key"] == "***"

    def test_empty_key_not_masked(self, clean_env):
        assert AppConfig.from_env().to_dict(redact=True)["developer_key"] == ""

    def test_private_attrs_excluded(self):
        cfg = Config()
        cfg.visible = 1
        cfg._hidden = 2
        assert cfg.to_dict() == {"visible": 1}
