"""
Portfolio summary panel.

Displays:
- Metrics: net worth, P/L, 24h change, cost basis, asset count
- Allocation bars, largest holding first
"""

from __future__ import annotations

from typing import List

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import Static

from ...domain.services.portfolio_metrics import Allocation, PortfolioTotals
from ..viewmodels.summary_vm import SummaryViewModel


class SummaryPanel(Widget):
    """Portfolio metrics and allocation."""

    DEFAULT_CSS = """
    SummaryPanel {
        height: 12;
    }

    SummaryPanel #summary-metrics {
        width: 48;
        border: round $primary;
        padding: 0 1;
    }

    SummaryPanel #summary-allocation {
        width: 1fr;
        border: round $primary;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._vm = SummaryViewModel()

    def compose(self) -> ComposeResult:
        with Horizontal():
            with Vertical(id="summary-metrics") as metrics:
                metrics.border_title = "Portfolio Metrics"
                yield Static("", id="net-worth")
                yield Static("", id="profit-loss")
                yield Static("", id="change-24h")
                yield Static("", id="cost-basis")
                yield Static("", id="asset-count")
            with Vertical(id="summary-allocation") as allocation:
                allocation.border_title = "Portfolio Allocation"
                yield Static("", id="allocations")

    def show(self, totals: PortfolioTotals, allocations: List[Allocation]) -> None:
        for field_id, value in self._vm.compute_field_updates(totals, allocations).items():
            self.query_one(f"#{field_id}", Static).update(value)
