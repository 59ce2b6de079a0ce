"""fieldqc configuration management.

Loads configuration from environment variables with sensible defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_VALID_ACTIONS = (
    "click",
    "input",
    "scroll",
    "hover",
    "wait",
    "navigate",
    "select",
)


@dataclass
class AnalyzerConfig:
    """Automated analyzer behaviour."""

    latency_seconds: float = 0.0  # Emulated model latency for the stub analyzer
    timeout_seconds: float = 10.0
    valid_actions: tuple[str, ...] = DEFAULT_VALID_ACTIONS


@dataclass
class LedgerConfig:
    """Version ledger defaults."""

    default_author: str = "current_user"
    seed_confidence: float = 0.8  # Confidence of seeded and freshly edited versions


@dataclass
class AppConfig:
    """Root application configuration."""

    log_level: str = "INFO"
    json_logs: bool = False
    rules_path: Path | None = None  # None = packaged field_rules.yaml

    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Optional (with defaults):
        - LOG_LEVEL: Logging verbosity (default: "INFO")
        - JSON_LOGS: Render logs as JSON (default: "false")
        - FIELDQC_RULES_PATH: Alternate rule table YAML
        - FIELDQC_DEFAULT_AUTHOR, FIELDQC_SEED_CONFIDENCE
        - FIELDQC_ANALYZER_LATENCY, FIELDQC_ANALYZER_TIMEOUT, FIELDQC_VALID_ACTIONS

        Raises:
            ValueError: If a numeric setting does not parse or is out of range
        """
        seed_confidence = float(os.getenv("FIELDQC_SEED_CONFIDENCE", "0.8"))
        if not 0.0 <= seed_confidence <= 1.0:
            raise ValueError(
                f"FIELDQC_SEED_CONFIDENCE must be between 0 and 1, got {seed_confidence}"
            )

        timeout = float(os.getenv("FIELDQC_ANALYZER_TIMEOUT", "10"))
        if timeout <= 0:
            raise ValueError(f"FIELDQC_ANALYZER_TIMEOUT must be positive, got {timeout}")

        rules_path = os.getenv("FIELDQC_RULES_PATH")

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("JSON_LOGS", "false").lower() == "true",
            rules_path=Path(rules_path) if rules_path else None,
            analyzer=AnalyzerConfig(
                latency_seconds=float(os.getenv("FIELDQC_ANALYZER_LATENCY", "0")),
                timeout_seconds=timeout,
                valid_actions=_parse_actions(os.getenv("FIELDQC_VALID_ACTIONS")),
            ),
            ledger=LedgerConfig(
                default_author=os.getenv("FIELDQC_DEFAULT_AUTHOR", "current_user"),
                seed_confidence=seed_confidence,
            ),
        )

    @property
    def default_rules_path(self) -> Path:
        """Path to the rule table shipped with the package."""
        return Path(__file__).parent / "classification" / "field_rules.yaml"

    @property
    def effective_rules_path(self) -> Path:
        return self.rules_path or self.default_rules_path


def _parse_actions(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_VALID_ACTIONS
    actions = tuple(part.strip() for part in raw.split(",") if part.strip())
    return actions or DEFAULT_VALID_ACTIONS


# Singleton instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or create singleton AppConfig instance from environment.

    Returns:
        AppConfig: Application configuration
    """
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
