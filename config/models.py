"""Configuration data models."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class ApiConfig:
    """CoinMarketCap API configuration."""
    key: str
    timeout_sec: float = 10.0


@dataclass
class PortfolioFileConfig:
    """Location of the persisted watchlist/portfolio file."""
    file: str


@dataclass
class DashboardConfig:
    """Dashboard configuration."""
    poll_interval_ms: int  # How often the UI drains the snapshot channel


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str
    dir: str
    timezone: str  # e.g. "UTC", "Europe/Berlin", or "local"


@dataclass
class AppConfig:
    """Complete application configuration."""
    api: ApiConfig
    refresh_interval_sec: int
    fear_and_greed_limit: int
    portfolio: PortfolioFileConfig
    dashboard: DashboardConfig
    logging: LoggingConfig
    raw: Dict[str, Any]  # Merged raw config dict
