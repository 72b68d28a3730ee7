"""Portfolio configuration: the user's watchlist and holdings."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from .market_data import normalize_name


@dataclass
class TokenEntry:
    """A user-declared token, on the watchlist, in the portfolio, or both."""

    name: str
    owned: Optional[float] = None
    avg_buy_price: Optional[float] = None
    in_watchlist: bool = True
    in_portfolio: bool = True

    def __post_init__(self) -> None:
        self.name = self.name.strip()

    def is_in_portfolio(self) -> bool:
        """Portfolio views include explicit members and anything with holdings."""
        return self.in_portfolio or (self.owned is not None and self.owned > 0)

    def is_in_watchlist(self) -> bool:
        return self.in_watchlist

    def matches(self, name: str) -> bool:
        """Case-insensitive exact name match (command lookups)."""
        return self.name.lower() == name.strip().lower()

    @property
    def join_key(self) -> str:
        return normalize_name(self.name)


@dataclass
class PortfolioConfig:
    """Ordered list of token entries, owned by the application state."""

    tokens: List[TokenEntry] = field(default_factory=list)

    def find(self, name: str) -> Optional[TokenEntry]:
        for token in self.tokens:
            if token.matches(name):
                return token
        return None

    def names(self) -> Tuple[str, ...]:
        """Immutable name list handed to the refresh thread."""
        return tuple(token.name for token in self.tokens)

    def prune(self) -> int:
        """Drop entries that are neither watched nor held. Returns the count removed."""
        before = len(self.tokens)
        self.tokens = [t for t in self.tokens if t.in_watchlist or t.in_portfolio]
        return before - len(self.tokens)

    def copy(self) -> "PortfolioConfig":
        return PortfolioConfig(tokens=[replace(t) for t in self.tokens])

    def watchlist(self) -> List[TokenEntry]:
        return [t for t in self.tokens if t.is_in_watchlist()]

    def holdings(self) -> List[TokenEntry]:
        return [t for t in self.tokens if t.is_in_portfolio()]
