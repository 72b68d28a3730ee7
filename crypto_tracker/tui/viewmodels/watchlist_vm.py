"""
WatchlistViewModel - framework-agnostic watchlist table transformation.

Rows are keyed by provider id and arrive already sorted.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ...domain.services.sorting import SortColumn
from ...models.market_data import CoinListing
from ..formatters import format_market_cap, format_percent, format_price, format_volume
from .base import BaseViewModel

WATCHLIST_COLUMNS: List[Tuple[str, SortColumn]] = [
    ("Symbol", SortColumn.SYMBOL),
    ("Price", SortColumn.PRICE),
    ("Δ 1h %", SortColumn.CHANGE_1H),
    ("Δ 24h %", SortColumn.CHANGE_24H),
    ("Δ 7d %", SortColumn.CHANGE_7D),
    ("Δ 30d %", SortColumn.CHANGE_30D),
    ("Δ 90d %", SortColumn.CHANGE_90D),
    ("Volume (24h)", SortColumn.VOLUME_24H),
    ("Vol Δ 24h %", SortColumn.VOLUME_CHANGE),
    ("Market Cap", SortColumn.MARKET_CAP),
]


def column_labels(
    columns: Sequence[Tuple[str, SortColumn]],
    sort_column: Optional[SortColumn],
    ascending: bool,
) -> List[str]:
    """Header labels with an arrow on the active sort column."""
    arrow = "↑" if ascending else "↓"
    return [
        f"{label} {arrow}" if column == sort_column else label
        for label, column in columns
    ]


class WatchlistViewModel(BaseViewModel[Sequence[CoinListing]]):
    """ViewModel for the watchlist table."""

    def compute_display_data(self, data: Sequence[CoinListing]) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {}
        for listing in data:
            quote = listing.quote
            result[listing.id] = [
                f"[bold]{listing.symbol}[/]",
                format_price(quote.price),
                format_percent(quote.percent_change_1h),
                format_percent(quote.percent_change_24h),
                format_percent(quote.percent_change_7d),
                format_percent(quote.percent_change_30d),
                format_percent(quote.percent_change_90d),
                format_volume(quote.volume_24h),
                format_percent(quote.volume_change_24h),
                format_market_cap(quote.market_cap),
            ]
        return result

    def get_row_order(self, data: Sequence[CoinListing]) -> List[str]:
        return [listing.id for listing in data]
