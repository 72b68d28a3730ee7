"""PortfolioViewModel - holdings table rows with derived values."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ...domain.services.portfolio_metrics import PortfolioRow
from ...domain.services.sorting import SortColumn
from ..formatters import format_percent, format_pnl, format_price, format_quantity, format_usd
from .base import BaseViewModel

PORTFOLIO_COLUMNS: List[Tuple[str, SortColumn]] = [
    ("Symbol", SortColumn.SYMBOL),
    ("Price", SortColumn.PRICE),
    ("Holdings", SortColumn.HOLDINGS),
    ("Avg Buy", SortColumn.AVG_BUY),
    ("Current Value", SortColumn.CURRENT_VALUE),
    ("Cost Basis", SortColumn.COST_BASIS),
    ("P/L", SortColumn.PROFIT_LOSS),
    ("P/L %", SortColumn.PROFIT_LOSS_PCT),
    ("24h Change", SortColumn.CHANGE_24H),
]


class PortfolioViewModel(BaseViewModel[Sequence[PortfolioRow]]):
    """ViewModel for the portfolio table."""

    def compute_display_data(self, data: Sequence[PortfolioRow]) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {}
        for row in data:
            result[row.listing.id] = [
                f"[bold]{row.listing.symbol}[/]",
                format_price(row.listing.quote.price),
                format_quantity(row.holdings),
                format_price(row.avg_buy_price),
                format_usd(row.current_value),
                format_usd(row.cost_basis),
                format_pnl(row.profit_loss),
                format_percent(row.profit_loss_pct),
                format_percent(row.listing.quote.percent_change_24h),
            ]
        return result

    def get_row_order(self, data: Sequence[PortfolioRow]) -> List[str]:
        return [row.listing.id for row in data]
