"""
Row ordering for the watchlist and portfolio tables.

Every column compares a single value. Missing values (None, NaN) never
raise: two missing values compare equal and a missing value ranks below
any present one, so the order stays consistent in both directions. The
ascending flag is applied by negating the comparator, which reverses rows
with distinct keys exactly while leaving ties in their original order.
"""

from __future__ import annotations

import math
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from ...models.market_data import CoinListing
from .portfolio_metrics import PortfolioRow

R = TypeVar("R")


class SortColumn(Enum):
    """Sortable table columns."""
    SYMBOL = "symbol"
    PRICE = "price"
    CHANGE_1H = "change_1h"
    CHANGE_24H = "change_24h"
    CHANGE_7D = "change_7d"
    CHANGE_30D = "change_30d"
    CHANGE_90D = "change_90d"
    VOLUME_24H = "volume_24h"
    VOLUME_CHANGE = "volume_change"
    MARKET_CAP = "market_cap"
    # Portfolio only
    HOLDINGS = "holdings"
    AVG_BUY = "avg_buy"
    CURRENT_VALUE = "current_value"
    COST_BASIS = "cost_basis"
    PROFIT_LOSS = "profit_loss"
    PROFIT_LOSS_PCT = "profit_loss_pct"


def compare_values(a: Any, b: Any) -> int:
    """Three-way compare with the missing-value policy."""
    a_missing = a is None or (isinstance(a, float) and math.isnan(a))
    b_missing = b is None or (isinstance(b, float) and math.isnan(b))
    if a_missing and b_missing:
        return 0
    if a_missing:
        return -1
    if b_missing:
        return 1
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


_LISTING_KEYS: Dict[SortColumn, Callable[[CoinListing], Any]] = {
    SortColumn.SYMBOL: lambda c: c.symbol,
    SortColumn.PRICE: lambda c: c.quote.price,
    SortColumn.CHANGE_1H: lambda c: c.quote.percent_change_1h,
    SortColumn.CHANGE_24H: lambda c: c.quote.percent_change_24h,
    SortColumn.CHANGE_7D: lambda c: c.quote.percent_change_7d,
    SortColumn.CHANGE_30D: lambda c: c.quote.percent_change_30d,
    SortColumn.CHANGE_90D: lambda c: c.quote.percent_change_90d,
    SortColumn.VOLUME_24H: lambda c: c.quote.volume_24h,
    SortColumn.VOLUME_CHANGE: lambda c: c.quote.volume_change_24h,
    SortColumn.MARKET_CAP: lambda c: c.quote.market_cap,
}

_PORTFOLIO_KEYS: Dict[SortColumn, Callable[[PortfolioRow], Any]] = {
    SortColumn.SYMBOL: lambda r: r.listing.symbol,
    SortColumn.PRICE: lambda r: r.listing.quote.price,
    SortColumn.HOLDINGS: lambda r: r.holdings,
    SortColumn.AVG_BUY: lambda r: r.avg_buy_price,
    SortColumn.CURRENT_VALUE: lambda r: r.current_value,
    SortColumn.COST_BASIS: lambda r: r.cost_basis,
    SortColumn.PROFIT_LOSS: lambda r: r.profit_loss,
    SortColumn.PROFIT_LOSS_PCT: lambda r: r.profit_loss_pct,
    SortColumn.CHANGE_24H: lambda r: r.listing.quote.percent_change_24h,
}


def _sorted(
    rows: Sequence[R],
    key: Optional[Callable[[R], Any]],
    ascending: bool,
) -> List[R]:
    if key is None:
        # Column has no meaning for this table: keep input order.
        return list(rows)
    sign = 1 if ascending else -1

    def cmp(a: R, b: R) -> int:
        return sign * compare_values(key(a), key(b))

    return sorted(rows, key=cmp_to_key(cmp))


def sort_listings(
    listings: Sequence[CoinListing], column: SortColumn, ascending: bool
) -> List[CoinListing]:
    """Order watchlist rows by a listing column."""
    return _sorted(listings, _LISTING_KEYS.get(column), ascending)


def sort_portfolio_rows(
    rows: Sequence[PortfolioRow], column: SortColumn, ascending: bool
) -> List[PortfolioRow]:
    """Order portfolio rows, including the derived value columns."""
    return _sorted(rows, _PORTFOLIO_KEYS.get(column), ascending)
