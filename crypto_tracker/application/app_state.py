"""
Application state machine.

AppState is the only writer of the in-memory portfolio, the current market
snapshot and the view state. It runs on the UI thread; the refresh thread
reaches it only through the SnapshotChannel, whose snapshots the UI applies
with apply_snapshot().

Two input modes:
- NORMAL: navigation, sorting, refresh, entering edit mode
- EDITING: the command line collects characters until submit or cancel

Navigation and refresh operations are no-ops while EDITING.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..domain.exceptions import PriceFetchError
from ..domain.interfaces.portfolio_repository import PortfolioRepository
from ..domain.interfaces.price_provider import PriceProvider
from ..domain.services.command_processor import apply_command, parse_command
from ..domain.services.portfolio_metrics import (
    PortfolioRow,
    portfolio_rows,
    watchlist_listings,
)
from ..domain.services.sorting import sort_listings, sort_portfolio_rows
from ..models.market_data import CoinListing, FearGreedPoint, MarketSnapshot
from ..models.portfolio import PortfolioConfig
from ..utils.logging_setup import get_logger
from ..utils.trace_context import new_cycle
from .refresh_pipeline import RefreshPipeline
from .view_state import InputMode, Tab, ViewState

logger = get_logger(__name__)


class AppState:
    """Single aggregate of everything the dashboard shows."""

    def __init__(
        self,
        config: PortfolioConfig,
        provider: PriceProvider,
        api_key: str,
        store: PortfolioRepository,
        pipeline: Optional[RefreshPipeline] = None,
    ) -> None:
        """
        Args:
            config: Portfolio loaded at startup.
            provider: Used for synchronous refreshes (manual and after edits).
            api_key: Provider API key.
            store: Persists the portfolio after each successful command.
            pipeline: Background pipeline whose token names follow edits.
        """
        self.config = config
        self.snapshot: MarketSnapshot = MarketSnapshot.empty()
        self.last_update: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.fear_greed: List[FearGreedPoint] = []
        self.view = ViewState()
        self.input_mode = InputMode.NORMAL
        self.edit_buffer = ""

        self._provider = provider
        self._api_key = api_key
        self._store = store
        self._pipeline = pipeline

    @property
    def is_editing(self) -> bool:
        return self.input_mode == InputMode.EDITING

    # -------------------------------------------------------------------------
    # Derived rows
    # -------------------------------------------------------------------------

    def watchlist_rows(self) -> List[CoinListing]:
        column = self.view.sort_columns.get(Tab.WATCHLIST)
        listings = watchlist_listings(self.config, self.snapshot)
        if column is None:
            return listings
        return sort_listings(listings, column, self.view.ascending)

    def portfolio_rows(self) -> List[PortfolioRow]:
        column = self.view.sort_columns.get(Tab.PORTFOLIO)
        rows = portfolio_rows(self.config, self.snapshot)
        if column is None:
            return rows
        return sort_portfolio_rows(rows, column, self.view.ascending)

    def row_count(self) -> int:
        """Rows on the active tab."""
        if self.view.tab == Tab.WATCHLIST:
            return len(self.watchlist_rows())
        if self.view.tab == Tab.PORTFOLIO:
            return len(self.portfolio_rows())
        return 0

    # -------------------------------------------------------------------------
    # Edit mode
    # -------------------------------------------------------------------------

    def enter_edit_mode(self) -> None:
        if self.is_editing:
            return
        self.input_mode = InputMode.EDITING
        self.edit_buffer = ""

    def cancel_edit(self) -> None:
        self.input_mode = InputMode.NORMAL
        self.edit_buffer = ""

    def push_char(self, char: str) -> None:
        if self.is_editing:
            self.edit_buffer += char

    def pop_char(self) -> None:
        if self.is_editing:
            self.edit_buffer = self.edit_buffer[:-1]

    def submit_command(self) -> None:
        """
        Run the buffered command and return to NORMAL mode.

        An invalid command only records the message as the last error. A
        valid one mutates the portfolio, persists it, hands the new name list
        to the pipeline and refreshes prices. A failed refresh only records
        the last error; the mutation and the save stay applied.

        Raises:
            PersistenceError: If saving fails. The in-memory change is kept
                and the state is back in NORMAL mode.
        """
        if not self.is_editing:
            return

        text = self.edit_buffer
        self.input_mode = InputMode.NORMAL
        self.edit_buffer = ""

        result = parse_command(text)
        if result.is_err():
            logger.info(f"Rejected command '{text}': {result.error}")
            self.last_error = result.error
            return

        apply_command(self.config, result.value)
        self._store.save(self.config)

        if self._pipeline is not None:
            self._pipeline.update_token_names(self.config.names())

        try:
            self._refresh()
        except PriceFetchError as e:
            self.apply_fetch_error(e)
        self._clamp()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def select_next(self) -> None:
        if not self.is_editing:
            self.view.select_next(self.row_count())

    def select_previous(self) -> None:
        if not self.is_editing:
            self.view.select_previous(self.row_count())

    def next_tab(self) -> None:
        if not self.is_editing:
            self.view.next_tab()
            self._clamp()

    def cycle_sort_column(self) -> None:
        if not self.is_editing:
            self.view.cycle_sort_column()

    def toggle_sort_direction(self) -> None:
        if not self.is_editing:
            self.view.toggle_direction()

    # -------------------------------------------------------------------------
    # Data
    # -------------------------------------------------------------------------

    def manual_refresh(self) -> None:
        """Fetch synchronously; on failure keep the snapshot and record the error."""
        if self.is_editing:
            return
        try:
            self._refresh()
        except PriceFetchError as e:
            self.apply_fetch_error(e)

    def apply_snapshot(self, snapshot: MarketSnapshot) -> None:
        """Replace the snapshot wholesale and stamp the update time."""
        self.snapshot = snapshot
        self.last_update = datetime.now()
        self.last_error = None
        self._clamp()

    def apply_fetch_error(self, error: Exception) -> None:
        logger.error(f"Price refresh failed: {error}")
        self.last_error = str(error)

    def set_fear_greed(self, points: List[FearGreedPoint]) -> None:
        self.fear_greed = list(points)

    def _refresh(self) -> None:
        with new_cycle():
            snapshot = self._provider.fetch_prices(self._api_key, self.config.names())
        self.apply_snapshot(snapshot)

    def _clamp(self) -> None:
        self.view.clamp_selection(self.row_count())
