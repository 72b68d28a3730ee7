"""Market data models: quotes, listings, snapshots and fear & greed history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional


def normalize_name(name: str) -> str:
    """Join key shared by portfolio entries and provider listings."""
    return name.strip().lower().replace("-", " ").replace("_", " ")


@dataclass(frozen=True)
class Quote:
    """USD quote for one listing. Optional fields are None when the provider omits them."""

    price: float
    percent_change_1h: Optional[float] = None
    percent_change_24h: Optional[float] = None
    percent_change_7d: Optional[float] = None
    percent_change_30d: Optional[float] = None
    percent_change_90d: Optional[float] = None
    volume_24h: Optional[float] = None
    volume_change_24h: Optional[float] = None
    market_cap: Optional[float] = None


@dataclass(frozen=True)
class CoinListing:
    """A provider entry: display name, ticker symbol and its quote."""

    id: str
    name: str
    symbol: str
    quote: Quote

    @property
    def join_key(self) -> str:
        return normalize_name(self.name)


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Complete set of listings fetched in one refresh cycle.

    Replaced wholesale on every successful refresh, never merged. The
    listings mapping is wrapped read-only so a snapshot can cross from the
    refresh thread to the UI thread without copying.
    """

    listings: Mapping[str, CoinListing] = field(default_factory=dict)
    fetched_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "listings", MappingProxyType(dict(self.listings)))

    @classmethod
    def empty(cls) -> "MarketSnapshot":
        return cls(listings={})

    def __len__(self) -> int:
        return len(self.listings)

    def __iter__(self) -> Iterator[CoinListing]:
        return iter(self.listings.values())

    def by_join_key(self) -> Dict[str, CoinListing]:
        result: Dict[str, CoinListing] = {}
        for listing in self.listings.values():
            result.setdefault(listing.join_key, listing)
        return result


@dataclass(frozen=True)
class FearGreedPoint:
    """One day of the fear & greed index."""

    timestamp: int  # epoch seconds
    value: int
    classification: str

    @property
    def as_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp)
