"""Pytest configuration and fixtures for fieldqc tests.

Provides common fixtures for testing.
"""

from __future__ import annotations

from typing import Any

import pytest

from fieldqc.classification.classifier import FieldClassifier
from fieldqc.classification.rules import RuleTable, load_rule_table, reset_rule_table
from fieldqc.config import AnalyzerConfig, AppConfig, LedgerConfig, reset_config
from fieldqc.ledger.versions import new_context
from fieldqc.models import NodeContext


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch):
    """Set up test environment variables."""
    for name in (
        "FIELDQC_RULES_PATH",
        "FIELDQC_DEFAULT_AUTHOR",
        "FIELDQC_SEED_CONFIDENCE",
        "FIELDQC_ANALYZER_LATENCY",
        "FIELDQC_ANALYZER_TIMEOUT",
        "FIELDQC_VALID_ACTIONS",
        "JSON_LOGS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    reset_config()
    reset_rule_table()
    yield
    reset_config()
    reset_rule_table()


@pytest.fixture
def rule_table() -> RuleTable:
    """Packaged rule table."""
    return load_rule_table()


@pytest.fixture
def classifier(rule_table: RuleTable) -> FieldClassifier:
    return FieldClassifier(rule_table)


@pytest.fixture
def analyzer_config() -> AnalyzerConfig:
    return AnalyzerConfig()


@pytest.fixture
def ledger_config() -> LedgerConfig:
    return LedgerConfig(default_author="tester", seed_confidence=0.8)


@pytest.fixture
def app_config(analyzer_config: AnalyzerConfig, ledger_config: LedgerConfig) -> AppConfig:
    return AppConfig(analyzer=analyzer_config, ledger=ledger_config)


@pytest.fixture
def make_context(classifier: FieldClassifier, ledger_config: LedgerConfig):
    """Factory for freshly seeded contexts."""

    def _make(key: str, value: Any, path: tuple[str, ...] = ()) -> NodeContext:
        return new_context(
            key,
            value,
            classifier.resolve(key, value),
            path=path or (key,),
            config=ledger_config,
        )

    return _make


@pytest.fixture
def rect_context(make_context) -> NodeContext:
    return make_context("rect", {"top": 10, "left": 20, "width": 100, "height": 40})


@pytest.fixture
def sample_record() -> dict[str, Any]:
    return {
        "instruction_id": "task_001",
        "steps": [
            {
                "action": "navigate",
                "url": "https://example.com/register",
                "screenshot": "/images/step1.png",
            },
            {
                "type": "click",
                "rect": {"top": 0, "left": 0, "width": -5, "height": 10},
            },
        ],
        "metadata": {"annotator": "user_001"},
    }
