"""
Layered YAML configuration.

Files are read from the config directory in this order, later ones winning:

1. base.yaml       defaults, required
2. {env}.yaml      per-environment overrides (dev, prod)
3. secrets.yaml    the API key, gitignored

Nested mappings are merged key by key. The CMC_API_KEY environment variable,
when set, takes precedence over any api.key from the files.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List
import os
import yaml
import logging

from crypto_tracker.domain.exceptions import ConfigurationError

from .models import (
    AppConfig,
    ApiConfig,
    PortfolioFileConfig,
    DashboardConfig,
    LoggingConfig,
)


logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "CMC_API_KEY"


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """New dict with `override` laid over `base`; nested dicts merge recursively."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _positive_int(raw: Dict[str, Any], key: str, default: int) -> int:
    value = int(raw.get(key, default))
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


class ConfigManager:
    """Loads AppConfig for one environment from a config directory."""

    def __init__(self, config_dir: str | Path = "config", env: str = "dev"):
        self.config_dir = Path(config_dir)
        self.env = env
        self.config: Dict[str, Any] = {}

    def layers(self) -> List[Path]:
        """Config files in merge order (optional ones may not exist)."""
        return [
            self.config_dir / "base.yaml",
            self.config_dir / f"{self.env}.yaml",
            self.config_dir / "secrets.yaml",
        ]

    def load(self) -> AppConfig:
        """
        Read and merge all layers.

        Raises:
            ConfigurationError: If base.yaml is missing, a file is not a YAML
                mapping, or a value has the wrong type or range.
        """
        base, *optional = self.layers()
        if not base.exists():
            raise ConfigurationError(f"Base config not found: {base}")

        merged = self._read(base)
        for path in optional:
            if path.exists():
                merged = deep_merge(merged, self._read(path))
                logger.info(f"Applied config overrides from {path.name}")

        self.config = merged
        return self._build(merged)

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed YAML in {path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {path}")
        return data

    def _build(self, raw: Dict[str, Any]) -> AppConfig:
        try:
            api_raw = raw.get("api") or {}
            key = os.environ.get(API_KEY_ENV_VAR) or str(api_raw.get("key") or "")
            log_raw = raw.get("logging") or {}

            return AppConfig(
                api=ApiConfig(
                    key=key,
                    timeout_sec=float(api_raw.get("timeout_sec", 10.0)),
                ),
                refresh_interval_sec=_positive_int(raw, "refresh_interval_sec", 60),
                fear_and_greed_limit=_positive_int(raw, "fear_and_greed_limit", 30),
                portfolio=PortfolioFileConfig(
                    file=(raw.get("portfolio") or {}).get("file", "./data/portfolio.yaml"),
                ),
                dashboard=DashboardConfig(
                    poll_interval_ms=_positive_int(raw.get("dashboard") or {}, "poll_interval_ms", 100),
                ),
                logging=LoggingConfig(
                    level=str(log_raw.get("level", "INFO")).upper(),
                    dir=log_raw.get("dir", "./logs"),
                    timezone=log_raw.get("timezone", "local"),
                ),
                raw=raw,
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse config: {e}") from e
