"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Sequence

import pytest

from crypto_tracker.domain.exceptions import PersistenceError, PriceFetchError
from crypto_tracker.domain.interfaces import PortfolioRepository, PriceProvider
from crypto_tracker.models.market_data import CoinListing, FearGreedPoint, MarketSnapshot, Quote
from crypto_tracker.models.portfolio import PortfolioConfig, TokenEntry


def make_listing(
    id: str,
    name: str,
    symbol: str,
    price: float,
    change_24h: Optional[float] = None,
    market_cap: Optional[float] = None,
    **quote_fields,
) -> CoinListing:
    """Build a listing with a USD quote."""
    return CoinListing(
        id=id,
        name=name,
        symbol=symbol,
        quote=Quote(
            price=price,
            percent_change_24h=change_24h,
            market_cap=market_cap,
            **quote_fields,
        ),
    )


def make_snapshot(*listings: CoinListing) -> MarketSnapshot:
    return MarketSnapshot(
        listings={listing.id: listing for listing in listings},
        fetched_at=datetime(2024, 1, 1, 12, 0, 0),
    )


class FakeProvider(PriceProvider):
    """Serves a fixed snapshot, or raises when `error` is set."""

    def __init__(self, snapshot: MarketSnapshot) -> None:
        self.snapshot = snapshot
        self.error: Optional[PriceFetchError] = None
        self.calls: List[tuple] = []
        self.fear_greed: List[FearGreedPoint] = []

    def fetch_prices(self, api_key: str, token_names: Sequence[str]) -> MarketSnapshot:
        self.calls.append(tuple(token_names))
        if self.error is not None:
            raise self.error
        return self.snapshot

    def fetch_fear_greed(self, api_key: str, limit: int) -> List[FearGreedPoint]:
        if self.error is not None:
            raise self.error
        return self.fear_greed[:limit]


class FakeRepository(PortfolioRepository):
    """In-memory repository recording every save."""

    def __init__(self, config: Optional[PortfolioConfig] = None) -> None:
        self.config = config or PortfolioConfig()
        self.saved: List[PortfolioConfig] = []
        self.fail = False

    def load(self) -> PortfolioConfig:
        return self.config.copy()

    def save(self, config: PortfolioConfig) -> None:
        if self.fail:
            raise PersistenceError("disk full")
        self.saved.append(config.copy())


@pytest.fixture
def listing_factory() -> Callable[..., CoinListing]:
    return make_listing


@pytest.fixture
def snapshot_factory() -> Callable[..., MarketSnapshot]:
    return make_snapshot


@pytest.fixture
def btc() -> CoinListing:
    return make_listing(
        "1", "Bitcoin", "BTC", 50000.0,
        change_24h=2.0, market_cap=980_000_000_000.0, volume_24h=30_000_000_000.0,
    )


@pytest.fixture
def eth() -> CoinListing:
    return make_listing(
        "1027", "Ethereum", "ETH", 2500.0,
        change_24h=-1.0, market_cap=300_000_000_000.0, volume_24h=12_000_000_000.0,
    )


@pytest.fixture
def sol() -> CoinListing:
    return make_listing(
        "5426", "Solana", "SOL", 100.0,
        change_24h=None, market_cap=None,
    )


@pytest.fixture
def sample_snapshot(btc: CoinListing, eth: CoinListing, sol: CoinListing) -> MarketSnapshot:
    return make_snapshot(btc, eth, sol)


@pytest.fixture
def sample_portfolio() -> PortfolioConfig:
    """bitcoin and ethereum held, solana watched only."""
    return PortfolioConfig(tokens=[
        TokenEntry(name="bitcoin", owned=0.5, avg_buy_price=40000.0),
        TokenEntry(name="ethereum", owned=2.0, avg_buy_price=3000.0),
        TokenEntry(name="solana", in_portfolio=False),
    ])


@pytest.fixture
def fake_provider(sample_snapshot: MarketSnapshot) -> FakeProvider:
    return FakeProvider(sample_snapshot)


@pytest.fixture
def fake_repository(sample_portfolio: PortfolioConfig) -> FakeRepository:
    return FakeRepository(sample_portfolio)
