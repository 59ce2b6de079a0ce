"""Unit tests for fieldqc configuration management.

Tests AppConfig loading from environment variables, validation, and defaults.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from fieldqc.config import DEFAULT_VALID_ACTIONS, AppConfig, get_config, reset_config


class TestAppConfig:
    def test_defaults(self):
        """Test default configuration values."""
        config = AppConfig.from_env()

        assert config.log_level == "DEBUG"  # Set by conftest
        assert config.json_logs is False
        assert config.rules_path is None
        assert config.effective_rules_path == config.default_rules_path
        assert config.default_rules_path.name == "field_rules.yaml"
        assert config.ledger.default_author == "current_user"
        assert config.ledger.seed_confidence == 0.8
        assert config.analyzer.latency_seconds == 0.0
        assert config.analyzer.timeout_seconds == 10.0
        assert config.analyzer.valid_actions == DEFAULT_VALID_ACTIONS

    def test_overrides(self, monkeypatch, tmp_path):
        """Test every setting can be overridden from the environment."""
        monkeypatch.setenv("JSON_LOGS", "true")
        monkeypatch.setenv("FIELDQC_RULES_PATH", str(tmp_path / "rules.yaml"))
        monkeypatch.setenv("FIELDQC_DEFAULT_AUTHOR", "annotator_7")
        monkeypatch.setenv("FIELDQC_SEED_CONFIDENCE", "0.5")
        monkeypatch.setenv("FIELDQC_ANALYZER_LATENCY", "0.25")
        monkeypatch.setenv("FIELDQC_ANALYZER_TIMEOUT", "3")
        monkeypatch.setenv("FIELDQC_VALID_ACTIONS", "click, drag ,")

        config = AppConfig.from_env()

        assert config.json_logs is True
        assert config.effective_rules_path == Path(tmp_path / "rules.yaml")
        assert config.ledger.default_author == "annotator_7"
        assert config.ledger.seed_confidence == 0.5
        assert config.analyzer.latency_seconds == 0.25
        assert config.analyzer.timeout_seconds == 3.0
        assert config.analyzer.valid_actions == ("click", "drag")

    @pytest.mark.parametrize("value", ["1.5", "-0.1"])
    def test_seed_confidence_out_of_range(self, monkeypatch, value):
        """Test seed confidence outside [0, 1] raises ValueError."""
        monkeypatch.setenv("FIELDQC_SEED_CONFIDENCE", value)
        with pytest.raises(ValueError, match="FIELDQC_SEED_CONFIDENCE"):
            AppConfig.from_env()

    def test_non_positive_timeout(self, monkeypatch):
        """Test a zero analyzer timeout raises ValueError."""
        monkeypatch.setenv("FIELDQC_ANALYZER_TIMEOUT", "0")
        with pytest.raises(ValueError, match="FIELDQC_ANALYZER_TIMEOUT"):
            AppConfig.from_env()

    def test_unparseable_number(self, monkeypatch):
        """Test a non-numeric latency raises ValueError."""
        monkeypatch.setenv("FIELDQC_ANALYZER_LATENCY", "soon")
        with pytest.raises(ValueError):
            AppConfig.from_env()


class TestSingleton:
    def test_get_config_is_cached(self):
        """Test get_config returns the same instance."""
        assert get_config() is get_config()

    def test_reset_rereads_environment(self, monkeypatch):
        """Test reset_config picks up environment changes."""
        get_config()
        monkeypatch.setenv("FIELDQC_DEFAULT_AUTHOR", "someone_else")
        reset_config()
        assert get_config().ledger.default_author == "someone_else"
