"""Tests for config loading."""

import pytest

from resume_builder.config import (
    DEFAULT_GEMINI_ENDPOINT,
    AppConfig,
    GeminiConfig,
    StorageConfig,
    load_config,
)


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.gemini.endpoint == DEFAULT_GEMINI_ENDPOINT
        assert config.gemini.max_attempts == 3
        assert config.gemini.timeout == 30.0
        assert config.rate_limit.max_requests == 10
        assert config.rate_limit.window_seconds == 60.0

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config.gemini.backoff_base == 1.0
        assert config.gemini.backoff_max == 8.0

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "gemini:\n  max_attempts: 5\nrate_limit:\n  max_requests: 2\n"
        )
        config = load_config(yaml_path)
        assert config.gemini.max_attempts == 5
        assert config.rate_limit.max_requests == 2
        # Defaults for unspecified
        assert config.rate_limit.window_seconds == 60.0

    def test_empty_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_storage_resolved_paths(self):
        storage = StorageConfig(db_path="~/r.db", usage_db_path="~/u.db")
        assert "~" not in str(storage.resolved_db_path)
        assert "~" not in str(storage.resolved_usage_db_path)

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        assert GeminiConfig().resolved_api_key == "env-key"
        assert GeminiConfig(api_key="file-key").resolved_api_key == "file-key"

    def test_api_key_missing(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert GeminiConfig().resolved_api_key is None

    def test_frozen_config(self):
        config = GeminiConfig()
        with pytest.raises(AttributeError):
            config.timeout = 5
