"""Tests for the join, per-row values, totals and allocations."""

from __future__ import annotations

import pytest

from crypto_tracker.domain.services.portfolio_metrics import (
    PortfolioRow,
    PortfolioTotals,
    compute_allocations,
    compute_totals,
    portfolio_rows,
    watchlist_listings,
)
from crypto_tracker.models.market_data import MarketSnapshot
from crypto_tracker.models.portfolio import PortfolioConfig, TokenEntry


class TestJoin:

    def test_watchlist_matches_by_normalized_name(self, listing_factory, snapshot_factory) -> None:
        snapshot = snapshot_factory(
            listing_factory("1", "Shiba Inu", "SHIB", 0.00001),
            listing_factory("2", "Bitcoin", "BTC", 50000.0),
        )
        config = PortfolioConfig(tokens=[TokenEntry(name="shiba-inu", in_portfolio=False)])

        rows = watchlist_listings(config, snapshot)
        assert [r.symbol for r in rows] == ["SHIB"]

    def test_unmatched_entries_are_skipped(self, sample_portfolio, sample_snapshot) -> None:
        sample_portfolio.tokens.append(TokenEntry(name="not-a-coin", owned=5.0))
        rows = portfolio_rows(sample_portfolio, sample_snapshot)
        assert [r.listing.symbol for r in rows] == ["BTC", "ETH"]

    def test_holdings_imply_portfolio_membership(self, sample_snapshot) -> None:
        config = PortfolioConfig(tokens=[TokenEntry(name="solana", owned=3.0, in_portfolio=False)])
        rows = portfolio_rows(config, sample_snapshot)
        assert len(rows) == 1

    def test_empty_snapshot(self, sample_portfolio) -> None:
        assert portfolio_rows(sample_portfolio, MarketSnapshot.empty()) == []
        assert watchlist_listings(sample_portfolio, MarketSnapshot.empty()) == []


class TestPortfolioRow:

    def test_derived_values(self, btc) -> None:
        row = PortfolioRow(token=TokenEntry(name="bitcoin", owned=0.5, avg_buy_price=40000.0), listing=btc)
        assert row.current_value == pytest.approx(25000.0)
        assert row.cost_basis == pytest.approx(20000.0)
        assert row.profit_loss == pytest.approx(5000.0)
        assert row.profit_loss_pct == pytest.approx(25.0)
        assert row.change_24h_value == pytest.approx(500.0)

    def test_missing_amounts_count_as_zero(self, btc) -> None:
        row = PortfolioRow(token=TokenEntry(name="bitcoin"), listing=btc)
        assert row.current_value == 0.0
        assert row.cost_basis == 0.0
        assert row.profit_loss_pct == 0.0

    def test_zero_cost_basis_has_zero_pct(self, btc) -> None:
        row = PortfolioRow(token=TokenEntry(name="bitcoin", owned=1.0), listing=btc)
        assert row.profit_loss == pytest.approx(50000.0)
        assert row.profit_loss_pct == 0.0


class TestTotals:

    def test_totals(self, sample_portfolio, sample_snapshot) -> None:
        totals = compute_totals(portfolio_rows(sample_portfolio, sample_snapshot))

        assert totals.total_value == pytest.approx(30000.0)
        assert totals.total_cost == pytest.approx(26000.0)
        assert totals.total_pl == pytest.approx(4000.0)
        assert totals.total_pl_pct == pytest.approx(4000.0 / 26000.0 * 100.0)
        # 2% of 25000 and -1% of 5000
        assert totals.change_24h == pytest.approx(450.0)
        assert totals.change_24h_pct == pytest.approx(1.5)
        assert totals.asset_count == 2

    def test_totals_equal_sum_of_rows(self, sample_portfolio, sample_snapshot) -> None:
        rows = portfolio_rows(sample_portfolio, sample_snapshot)
        totals = compute_totals(rows)
        assert totals.total_value == pytest.approx(sum(r.current_value for r in rows))
        assert totals.total_cost == pytest.approx(sum(r.cost_basis for r in rows))
        assert totals.total_pl == pytest.approx(totals.total_value - totals.total_cost)

    def test_empty_portfolio(self) -> None:
        assert compute_totals([]) == PortfolioTotals()

    def test_zero_net_worth_never_divides(self, btc) -> None:
        rows = [PortfolioRow(token=TokenEntry(name="bitcoin", owned=0.0), listing=btc)]
        totals = compute_totals(rows)
        assert totals.total_pl_pct == 0.0
        assert totals.change_24h_pct == 0.0
        assert compute_allocations(rows)[0].percent == 0.0


class TestAllocations:

    def test_sorted_by_share(self, sample_portfolio, sample_snapshot) -> None:
        allocations = compute_allocations(portfolio_rows(sample_portfolio, sample_snapshot))

        assert [a.symbol for a in allocations] == ["BTC", "ETH"]
        assert allocations[0].percent == pytest.approx(25000.0 / 30000.0 * 100.0)
        assert sum(a.percent for a in allocations) == pytest.approx(100.0)
        assert allocations[1].value == pytest.approx(5000.0)
