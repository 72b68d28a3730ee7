"""
Portfolio file store (YAML format).

Loads the watchlist/portfolio at startup and writes it back after every
successful edit. Expected format:

```yaml
tokens:
  - name: bitcoin
    owned: 0.25
    avg_buy_price: 42000.0
    in_watchlist: true
    in_portfolio: true
  - name: solana
    in_watchlist: true
    in_portfolio: false
```

Missing membership flags default to true. Saves go to a temporary file in
the same directory which then replaces the original, so a reader never sees
a half-written file.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ...domain.exceptions import ConfigurationError, PersistenceError
from ...domain.interfaces.portfolio_repository import PortfolioRepository
from ...models.portfolio import PortfolioConfig, TokenEntry
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)


def _optional_amount(raw: Dict[str, Any], key: str, name: str) -> Optional[float]:
    value = raw.get(key)
    if value is None:
        return None
    amount = float(value)
    if amount < 0:
        raise ValueError(f"{key} for {name} must be >= 0")
    return amount


def _flag(raw: Dict[str, Any], key: str, name: str) -> bool:
    value = raw.get(key, True)
    if not isinstance(value, bool):
        raise ValueError(f"{key} for {name} must be true or false")
    return value


def parse_portfolio(text: str) -> PortfolioConfig:
    """
    Parse portfolio YAML.

    Raises:
        ConfigurationError: If the YAML is malformed or an entry is invalid.
    """
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed portfolio YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("Portfolio file must contain a mapping with a 'tokens' list")

    raw_tokens = data.get("tokens") or []
    if not isinstance(raw_tokens, list):
        raise ConfigurationError("'tokens' must be a list")

    tokens: List[TokenEntry] = []
    for i, raw in enumerate(raw_tokens):
        if not isinstance(raw, dict) or not str(raw.get("name") or "").strip():
            raise ConfigurationError(f"Token #{i + 1} has no name")
        name = str(raw["name"]).strip()
        try:
            tokens.append(TokenEntry(
                name=name,
                owned=_optional_amount(raw, "owned", name),
                avg_buy_price=_optional_amount(raw, "avg_buy_price", name),
                in_watchlist=_flag(raw, "in_watchlist", name),
                in_portfolio=_flag(raw, "in_portfolio", name),
            ))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid token {name}: {e}") from e

    return PortfolioConfig(tokens=tokens)


def serialize_portfolio(config: PortfolioConfig) -> str:
    """Render the portfolio as YAML, omitting unset amounts."""
    tokens = []
    for token in config.tokens:
        entry: Dict[str, Any] = {"name": token.name}
        if token.owned is not None:
            entry["owned"] = token.owned
        if token.avg_buy_price is not None:
            entry["avg_buy_price"] = token.avg_buy_price
        entry["in_watchlist"] = token.in_watchlist
        entry["in_portfolio"] = token.in_portfolio
        tokens.append(entry)
    return yaml.safe_dump({"tokens": tokens}, sort_keys=False, default_flow_style=False)


class PortfolioStore(PortfolioRepository):
    """Reads and writes the portfolio file."""

    def __init__(self, file_path: str | Path):
        """
        Args:
            file_path: Path to the portfolio YAML file.
        """
        self.file_path = Path(file_path)

    def load(self) -> PortfolioConfig:
        """
        Load the portfolio file.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        try:
            text = self.file_path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigurationError(f"Portfolio file not found: {self.file_path}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read portfolio file {self.file_path}: {e}") from e

        config = parse_portfolio(text)
        logger.info(f"Loaded {len(config.tokens)} tokens from {self.file_path}")
        return config

    def save(self, config: PortfolioConfig) -> None:
        """
        Write the portfolio file, replacing the previous version.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        text = serialize_portfolio(config)
        directory = self.file_path.parent
        tmp_path: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{self.file_path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.file_path)
            tmp_path = None
        except OSError as e:
            logger.error(f"Failed to save portfolio to {self.file_path}: {e}")
            raise PersistenceError(f"Failed to save {self.file_path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.info(f"Saved {len(config.tokens)} tokens to {self.file_path}")
