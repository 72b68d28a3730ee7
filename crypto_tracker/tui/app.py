"""
Crypto Tracker Dashboard - Textual implementation.

Terminal UI with three tabs:
- Watchlist: fear & greed history above the watched coins
- Portfolio: metrics and allocation above the holdings table
- Market: placeholder

All state lives in AppState. The app polls the SnapshotChannel on a timer,
translates keys into AppState operations and re-renders after each one.
"""

from __future__ import annotations

from typing import Optional

from rich.markup import escape
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from ..application.app_state import AppState
from ..application.snapshot_channel import SnapshotChannel
from ..application.view_state import Tab
from ..domain.exceptions import PersistenceError
from ..domain.services.portfolio_metrics import (
    compute_allocations,
    compute_totals,
    portfolio_rows,
)
from ..utils.logging_setup import get_logger
from .viewmodels.portfolio_vm import PORTFOLIO_COLUMNS, PortfolioViewModel
from .viewmodels.watchlist_vm import WATCHLIST_COLUMNS, WatchlistViewModel, column_labels
from .widgets.coin_table import CoinTable
from .widgets.fear_greed_panel import FearGreedPanel
from .widgets.header import HeaderWidget
from .widgets.summary_panel import SummaryPanel

logger = get_logger(__name__)

NORMAL_HELP = (
    "[yellow]q[/]: Quit | [yellow]↓/j[/] [yellow]↑/k[/]: Navigate | "
    "[yellow]Tab[/]: Switch View | [yellow]s[/]: Sort | [yellow]d[/]: Direction | "
    "[yellow]r[/]: Refresh | [yellow]e[/]: Edit"
)
EDIT_HELP = "[yellow]Enter[/]: Execute Command | [yellow]Esc[/]: Cancel"

# Actions that are disabled while the command line is open
_NORMAL_ACTIONS = {
    "quit",
    "select_next",
    "select_previous",
    "refresh",
    "toggle_direction",
    "cycle_sort",
    "edit",
    "next_tab",
}


class CryptoTrackerApp(App):
    """Crypto watchlist and portfolio dashboard."""

    CSS_PATH = "css/dashboard.tcss"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("j,down", "select_next", "Next", show=False),
        Binding("k,up", "select_previous", "Previous", show=False),
        Binding("r", "refresh", "Refresh"),
        Binding("d", "toggle_direction", "Direction"),
        Binding("tab", "next_tab", "Switch View", priority=True),
        Binding("s", "cycle_sort", "Sort"),
        Binding("e", "edit", "Edit"),
    ]

    def __init__(
        self,
        state: AppState,
        channel: SnapshotChannel,
        env: str = "dev",
        poll_interval_ms: int = 100,
        **kwargs,
    ):
        """
        Args:
            state: Application state machine (owned by the UI thread).
            channel: Snapshots from the refresh pipeline.
            env: Environment name shown in the header.
            poll_interval_ms: How often the channel is drained.
        """
        super().__init__(**kwargs)
        self.state = state
        self.channel = channel
        self.env = env
        self.poll_interval_ms = poll_interval_ms
        self._watchlist_vm = WatchlistViewModel()
        self._portfolio_vm = PortfolioViewModel()
        self._poll_timer = None

    def compose(self) -> ComposeResult:
        yield HeaderWidget(env=self.env, id="header")
        yield FearGreedPanel(id="fear-greed")
        yield SummaryPanel(id="summary")
        yield CoinTable(id="coins")
        yield Static("Market - Coming Soon!", id="market")
        yield Static(NORMAL_HELP, id="help")
        yield Static("", id="command-input")

    def on_mount(self) -> None:
        self._poll_timer = self.set_interval(self.poll_interval_ms / 1000, self._poll_snapshots)
        self.render_state()

    def on_unmount(self) -> None:
        if self._poll_timer:
            self._poll_timer.stop()

    def _poll_snapshots(self) -> None:
        """Apply the newest pending snapshot, if any."""
        snapshot = self.channel.try_receive()
        if snapshot is not None:
            self.state.apply_snapshot(snapshot)
            self.render_state()

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def check_action(self, action: str, parameters: tuple[object, ...]) -> Optional[bool]:
        """Disable normal-mode keys while editing so they reach the command line."""
        if self.state.is_editing and action in _NORMAL_ACTIONS:
            return False
        return True

    def on_key(self, event: events.Key) -> None:
        if not self.state.is_editing:
            return

        if event.key == "enter":
            self._submit()
        elif event.key == "escape":
            self.state.cancel_edit()
        elif event.key == "backspace":
            self.state.pop_char()
        elif event.is_printable and event.character:
            self.state.push_char(event.character)
        else:
            return
        event.stop()
        event.prevent_default()
        self.render_state()

    def _submit(self) -> None:
        try:
            self.state.submit_command()
        except PersistenceError as e:
            logger.error(f"Command error: {e}")
            self.state.last_error = f"Command error: {e}"

    def action_select_next(self) -> None:
        self.state.select_next()
        self.render_state()

    def action_select_previous(self) -> None:
        self.state.select_previous()
        self.render_state()

    def action_refresh(self) -> None:
        self.state.manual_refresh()
        self.render_state()

    def action_toggle_direction(self) -> None:
        self.state.toggle_sort_direction()
        self.render_state()

    def action_next_tab(self) -> None:
        self.state.next_tab()
        self.render_state()

    def action_cycle_sort(self) -> None:
        self.state.cycle_sort_column()
        self.render_state()

    def action_edit(self) -> None:
        self.state.enter_edit_mode()
        self.render_state()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_state(self) -> None:
        """Push the current AppState into the widgets."""
        state = self.state
        tab = state.view.tab

        self.query_one("#header", HeaderWidget).show(tab, state.last_update, state.last_error)

        fear_greed = self.query_one("#fear-greed", FearGreedPanel)
        summary = self.query_one("#summary", SummaryPanel)
        table = self.query_one("#coins", CoinTable)
        market = self.query_one("#market", Static)

        fear_greed.display = tab == Tab.WATCHLIST
        summary.display = tab == Tab.PORTFOLIO
        table.display = tab != Tab.MARKET
        market.display = tab == Tab.MARKET

        if tab == Tab.WATCHLIST:
            fear_greed.show(state.fear_greed)
            labels = column_labels(
                WATCHLIST_COLUMNS, state.view.sort_column, state.view.ascending
            )
            table.show(self._watchlist_vm, labels, state.watchlist_rows(), state.view.selected)
        elif tab == Tab.PORTFOLIO:
            # Totals and allocation are independent of the table sort
            unsorted = portfolio_rows(state.config, state.snapshot)
            summary.show(compute_totals(unsorted), compute_allocations(unsorted))
            labels = column_labels(
                PORTFOLIO_COLUMNS, state.view.sort_column, state.view.ascending
            )
            table.show(self._portfolio_vm, labels, state.portfolio_rows(), state.view.selected)

        self.query_one("#help", Static).update(EDIT_HELP if state.is_editing else NORMAL_HELP)
        command_input = self.query_one("#command-input", Static)
        command_input.display = state.is_editing
        command_input.update(f"[yellow]> {escape(state.edit_buffer)}[/]")
