"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from sigbot_app.config.defaults import get_default_config
from sigbot_app.config.loader import ConfigLoader
from sigbot_app.config.validation import ConfigValidator
from sigbot_app.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Test that default configuration can be created."""
        config = get_default_config()
        assert config.filter.min_confidence == 60
        assert config.dedup.window_seconds == 3600
        assert config.breaker.threshold == 5
        assert config.breaker.cooldown_seconds == 600
        assert config.broadcast.max_attempts == 3
        assert config.schedule.interval_seconds == 5400
        assert (config.schedule.start_hour, config.schedule.end_hour, config.schedule.end_minute) == (4, 23, 30)
        assert len(config.symbols) == 50
        assert len(config.sources) == 1


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_config_loader_creation(self) -> None:
        """Test that ConfigLoader can be created."""
        loader = ConfigLoader.create()
        assert isinstance(loader.config_dir, Path)

    def test_env_config_dir(self, config_dir, monkeypatch) -> None:
        monkeypatch.setenv("SIGBOT_CONFIG_DIR", str(config_dir))
        assert ConfigLoader.create().config_dir == config_dir

    def test_defaults_only(self, config_dir) -> None:
        """Missing settings.yaml leaves defaults untouched."""
        config = ConfigLoader.create(config_dir).load()
        assert config == get_default_config()

    def test_file_overrides(self, config_dir) -> None:
        (config_dir / "settings.yaml").write_text(
            "filter:\n"
            "  min_confidence: 70\n"
            "sources:\n"
            "  - name: primary\n"
            "    url: http://localhost:9000/analyze\n"
            "  - name: secondary\n"
            "    url: http://localhost:9000/analyze-rsi\n"
            "symbols: [btcusdt, ethusdt]\n"
        )

        config = ConfigLoader.create(config_dir).load()

        assert config.filter.min_confidence == 70
        assert [s.name for s in config.sources] == ["primary", "secondary"]
        assert config.sources[1].url == "http://localhost:9000/analyze-rsi"
        assert config.symbols == ("BTCUSDT", "ETHUSDT")
        # Other defaults should remain
        assert config.dedup.window_seconds == 3600

    def test_explicit_overrides_win(self, config_dir) -> None:
        (config_dir / "settings.yaml").write_text("breaker:\n  threshold: 7\n")
        loader = ConfigLoader.create(config_dir)

        merged = loader.merge_config({"breaker": {"threshold": 9}})

        assert merged["breaker"]["threshold"] == 9
        assert merged["breaker"]["cooldown_seconds"] == 600

    def test_db_path_env_override(self, config_dir, monkeypatch) -> None:
        monkeypatch.setenv("SIGBOT_DB_PATH", "/tmp/other.db")
        config = ConfigLoader.create(config_dir).load()
        assert config.storage.db_path == "/tmp/other.db"

    def test_invalid_file_rejected(self, config_dir) -> None:
        (config_dir / "settings.yaml").write_text("filter:\n  min_confidence: 150\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(config_dir).load()

        assert exc_info.value.errors[0].field == "filter.min_confidence"

    def test_non_mapping_file_rejected(self, config_dir) -> None:
        (config_dir / "settings.yaml").write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            ConfigLoader.create(config_dir).load()

    def test_shipped_settings_are_valid(self, monkeypatch) -> None:
        """The repository's config/settings.yaml loads cleanly."""
        monkeypatch.delenv("SIGBOT_DB_PATH", raising=False)
        repo_config = Path(__file__).resolve().parents[2] / "config"
        config = ConfigLoader.create(repo_config).load()
        assert [s.name for s in config.sources] == ["ai-trading-v3", "ai-rsi"]


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self) -> None:
        merged = ConfigLoader.create(Path("/nonexistent")).merge_config()
        assert ConfigValidator.validate_config(merged) == []

    def test_unknown_key(self) -> None:
        errors = ConfigValidator.validate_unknown_keys("dedup", {"window_secs": 60})
        assert len(errors) == 1
        assert errors[0].field == "dedup.window_secs"

    @pytest.mark.parametrize("params,field", [
        ({"start_hour": 24}, "schedule.start_hour"),
        ({"end_minute": -1}, "schedule.end_minute"),
        ({"interval_seconds": 0}, "schedule.interval_seconds"),
        ({"timezone": ""}, "schedule.timezone"),
    ])
    def test_invalid_schedule(self, params, field) -> None:
        errors = ConfigValidator.validate_schedule_params(params)
        assert [e.field for e in errors] == [field]

    def test_invalid_dispatch_params(self) -> None:
        errors = ConfigValidator.validate_dispatch_params({
            "breaker": {"threshold": 0},
            "broadcast": {"backoff_seconds": -1},
            "dedup": {"window_seconds": True},
        })
        fields = {e.field for e in errors}
        assert fields == {"breaker.threshold", "broadcast.backoff_seconds", "dedup.window_seconds"}

    def test_invalid_sources(self) -> None:
        errors = ConfigValidator.validate_sources([
            {"name": "a", "url": "ftp://example.com"},
            {"name": "a"},
            {"url": "http://example.com", "retries": 3},
        ])
        fields = [e.field for e in errors]
        assert "sources[0].url" in fields
        assert "sources[1].name" in fields
        assert "sources[2].retries" in fields
        assert "sources[2].name" in fields

    def test_empty_sources(self) -> None:
        errors = ConfigValidator.validate_sources([])
        assert errors[0].field == "sources"

    def test_invalid_logging_level(self) -> None:
        merged = ConfigLoader.create(Path("/nonexistent")).merge_config({"logging": {"level": "LOUD"}})
        errors = ConfigValidator.validate_config(merged)
        assert [e.field for e in errors] == ["logging.level"]
