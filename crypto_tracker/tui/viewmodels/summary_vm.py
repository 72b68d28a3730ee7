"""
SummaryViewModel - portfolio metrics and allocation bars.

Tracks which fields changed for targeted updates.
"""

from __future__ import annotations

from typing import Dict, List

from ...domain.services.portfolio_metrics import Allocation, PortfolioTotals
from ..formatters import pnl_color


def allocation_bar(percent: float, width: int = 15) -> str:
    """Filled/empty block bar for an allocation share."""
    filled = max(0, min(width, round(percent * width / 100.0)))
    return f"[cyan]{'█' * filled}[/][dim]{'░' * (width - filled)}[/]"


class SummaryViewModel:
    """ViewModel for the portfolio summary panel."""

    FIELD_IDS = [
        "net-worth",
        "profit-loss",
        "change-24h",
        "cost-basis",
        "asset-count",
        "allocations",
    ]

    def __init__(self, bar_width: int = 15) -> None:
        self._field_cache: Dict[str, str] = {}
        self.bar_width = bar_width

    def compute_display_data(
        self, totals: PortfolioTotals, allocations: List[Allocation]
    ) -> Dict[str, str]:
        pl = pnl_color(totals.total_pl)
        ch = pnl_color(totals.change_24h)
        noun = "token" if totals.asset_count == 1 else "tokens"

        if allocations:
            alloc_lines = [
                f"[bold yellow]{a.symbol:<6}[/] [cyan]{a.percent:>5.1f}%[/] "
                f"{allocation_bar(a.percent, self.bar_width)} ${round(a.value):,}"
                for a in allocations
            ]
            alloc_text = "\n".join(alloc_lines)
        else:
            alloc_text = "[dim]No holdings[/]"

        return {
            "net-worth": f"[dim]Net Worth[/]    [bold cyan]${totals.total_value:,.2f}[/]",
            "profit-loss": (
                f"[dim]Profit/Loss[/]  [bold {pl}]${totals.total_pl:,.2f}[/] "
                f"[{pl}]({totals.total_pl_pct:+.2f}%)[/]"
            ),
            "change-24h": (
                f"[dim]24h Change[/]   [bold {ch}]${totals.change_24h:,.2f}[/] "
                f"[{ch}]({totals.change_24h_pct:+.2f}%)[/]"
            ),
            "cost-basis": f"[dim]Cost Basis[/]   [bold cyan]${totals.total_cost:,.2f}[/]",
            "asset-count": f"[dim]Assets[/]       [bold cyan]{totals.asset_count}[/] [dim]{noun}[/]",
            "allocations": alloc_text,
        }

    def compute_field_updates(
        self, totals: PortfolioTotals, allocations: List[Allocation]
    ) -> Dict[str, str]:
        """Return only fields that changed."""
        new_data = self.compute_display_data(totals, allocations)
        updates = {}

        for field_id, value in new_data.items():
            if self._field_cache.get(field_id) != value:
                updates[field_id] = value

        self._field_cache = new_data
        return updates

    def invalidate(self) -> None:
        self._field_cache.clear()
