"""
Portfolio metrics - join, per-row derived values and aggregate totals.

All figures are recomputed from the current portfolio configuration and
market snapshot on every call; both inputs can change between renders so
nothing here is cached. Every ratio is defined as 0 when its denominator is
not positive, so a render never fails on an empty or zero-cost portfolio.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ...models.market_data import CoinListing, MarketSnapshot
from ...models.portfolio import PortfolioConfig, TokenEntry


@dataclass(frozen=True)
class PortfolioRow:
    """A held token joined with its listing, plus derived values."""

    token: TokenEntry
    listing: CoinListing

    @property
    def holdings(self) -> float:
        return self.token.owned or 0.0

    @property
    def avg_buy_price(self) -> float:
        return self.token.avg_buy_price or 0.0

    @property
    def current_value(self) -> float:
        return self.holdings * self.listing.quote.price

    @property
    def cost_basis(self) -> float:
        return self.holdings * self.avg_buy_price

    @property
    def profit_loss(self) -> float:
        return self.current_value - self.cost_basis

    @property
    def profit_loss_pct(self) -> float:
        cost = self.cost_basis
        if cost > 0:
            return self.profit_loss / cost * 100.0
        return 0.0

    @property
    def change_24h_value(self) -> float:
        """Value change over 24h implied by the 24h percent change."""
        pct = self.listing.quote.percent_change_24h or 0.0
        return pct * self.current_value / 100.0


@dataclass(frozen=True)
class PortfolioTotals:
    """Aggregate figures for the summary panel."""

    total_value: float = 0.0
    total_cost: float = 0.0
    total_pl: float = 0.0
    total_pl_pct: float = 0.0
    change_24h: float = 0.0
    change_24h_pct: float = 0.0
    asset_count: int = 0


@dataclass(frozen=True)
class Allocation:
    """Share of net worth held in one token."""

    symbol: str
    percent: float
    value: float


def watchlist_listings(config: PortfolioConfig, snapshot: MarketSnapshot) -> List[CoinListing]:
    """Listings that match at least one watchlist entry (snapshot order)."""
    keys = {token.join_key for token in config.watchlist()}
    return [listing for listing in snapshot if listing.join_key in keys]


def portfolio_rows(config: PortfolioConfig, snapshot: MarketSnapshot) -> List[PortfolioRow]:
    """Join portfolio entries to listings; unmatched entries are skipped."""
    by_key = snapshot.by_join_key()
    rows: List[PortfolioRow] = []
    for token in config.holdings():
        listing = by_key.get(token.join_key)
        if listing is not None:
            rows.append(PortfolioRow(token=token, listing=listing))
    return rows


def compute_totals(rows: List[PortfolioRow]) -> PortfolioTotals:
    """Net worth, cost, P/L and 24h change across all rows."""
    if not rows:
        return PortfolioTotals()

    total_value = sum(r.current_value for r in rows)
    total_cost = sum(r.cost_basis for r in rows)
    total_pl = sum(r.profit_loss for r in rows)
    change_24h = sum(r.change_24h_value for r in rows)

    return PortfolioTotals(
        total_value=total_value,
        total_cost=total_cost,
        total_pl=total_pl,
        total_pl_pct=(total_pl / total_cost * 100.0) if total_cost > 0 else 0.0,
        change_24h=change_24h,
        change_24h_pct=(change_24h / total_value * 100.0) if total_value > 0 else 0.0,
        asset_count=len(rows),
    )


def compute_allocations(rows: List[PortfolioRow]) -> List[Allocation]:
    """Per-token share of net worth, largest first."""
    total_value = sum(r.current_value for r in rows)
    allocations = [
        Allocation(
            symbol=r.listing.symbol,
            percent=(r.current_value / total_value * 100.0) if total_value > 0 else 0.0,
            value=r.current_value,
        )
        for r in rows
    ]
    allocations.sort(key=lambda a: a.percent, reverse=True)
    return allocations
