"""Fear & greed index panel: headline figures over a sparkline of the history."""

from __future__ import annotations

from typing import Sequence

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import Sparkline, Static

from ...models.market_data import FearGreedPoint
from ..viewmodels.fear_greed_vm import FearGreedViewModel


class FearGreedPanel(Widget):
    """Fear & greed history, fetched once at startup."""

    DEFAULT_CSS = """
    FearGreedPanel {
        height: 8;
        border: round $primary;
    }

    FearGreedPanel Sparkline {
        height: 4;
    }

    FearGreedPanel #fg-axis {
        height: 1;
    }

    FearGreedPanel #fg-first {
        width: 1fr;
        color: $text-muted;
    }

    FearGreedPanel #fg-last {
        width: auto;
        color: $text-muted;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._vm = FearGreedViewModel()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("", id="fg-title")
            yield Sparkline([], summary_function=max, id="fg-chart")
            with Horizontal(id="fg-axis"):
                yield Static("", id="fg-first")
                yield Static("", id="fg-last")

    def show(self, points: Sequence[FearGreedPoint]) -> None:
        display = self._vm.compute_display(points)
        self.query_one("#fg-title", Static).update(display.title)
        self.query_one("#fg-chart", Sparkline).data = display.series
        self.query_one("#fg-first", Static).update(display.first_label)
        self.query_one("#fg-last", Static).update(display.last_label)
