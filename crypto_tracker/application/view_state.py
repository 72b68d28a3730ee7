"""Navigation state: active tab, per-tab sort column, direction and selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from ..domain.services.sorting import SortColumn


class Tab(Enum):
    """Dashboard tabs, in cycling order."""
    WATCHLIST = "watchlist"
    PORTFOLIO = "portfolio"
    MARKET = "market"

    @property
    def title(self) -> str:
        return self.value.capitalize()

    @property
    def sort_cycle(self) -> Tuple[SortColumn, ...]:
        """Columns `s` cycles through on this tab (empty for Market)."""
        return _SORT_CYCLES[self]

    @property
    def default_sort(self) -> Optional[SortColumn]:
        return _DEFAULT_SORT[self]

    def next(self) -> "Tab":
        members = list(Tab)
        return members[(members.index(self) + 1) % len(members)]


_SORT_CYCLES: Dict[Tab, Tuple[SortColumn, ...]] = {
    Tab.WATCHLIST: (
        SortColumn.SYMBOL,
        SortColumn.PRICE,
        SortColumn.CHANGE_1H,
        SortColumn.CHANGE_24H,
        SortColumn.CHANGE_7D,
        SortColumn.CHANGE_30D,
        SortColumn.CHANGE_90D,
        SortColumn.VOLUME_24H,
        SortColumn.VOLUME_CHANGE,
        SortColumn.MARKET_CAP,
    ),
    Tab.PORTFOLIO: (
        SortColumn.SYMBOL,
        SortColumn.PRICE,
        SortColumn.HOLDINGS,
        SortColumn.AVG_BUY,
        SortColumn.CURRENT_VALUE,
        SortColumn.COST_BASIS,
        SortColumn.PROFIT_LOSS,
        SortColumn.PROFIT_LOSS_PCT,
        SortColumn.CHANGE_24H,
    ),
    Tab.MARKET: (),
}

_DEFAULT_SORT: Dict[Tab, Optional[SortColumn]] = {
    Tab.WATCHLIST: SortColumn.MARKET_CAP,
    Tab.PORTFOLIO: SortColumn.CURRENT_VALUE,
    Tab.MARKET: None,
}


class InputMode(Enum):
    NORMAL = "normal"
    EDITING = "editing"


@dataclass
class ViewState:
    """
    What the user is looking at.

    The sort direction is shared by all tabs; each tab remembers its own
    column. Selection is an index into the active tab's rows.
    """

    tab: Tab = Tab.WATCHLIST
    sort_columns: Dict[Tab, Optional[SortColumn]] = field(
        default_factory=lambda: dict(_DEFAULT_SORT)
    )
    ascending: bool = False
    selected: int = 0

    @property
    def sort_column(self) -> Optional[SortColumn]:
        return self.sort_columns.get(self.tab)

    def cycle_sort_column(self) -> None:
        cycle = self.tab.sort_cycle
        if not cycle:
            return
        current = self.sort_columns.get(self.tab)
        if current in cycle:
            self.sort_columns[self.tab] = cycle[(cycle.index(current) + 1) % len(cycle)]
        else:
            self.sort_columns[self.tab] = cycle[0]

    def toggle_direction(self) -> None:
        self.ascending = not self.ascending

    def next_tab(self) -> None:
        self.tab = self.tab.next()

    def select_next(self, row_count: int) -> None:
        if row_count <= 0:
            self.selected = 0
            return
        self.selected = (self.selected + 1) % row_count

    def select_previous(self, row_count: int) -> None:
        if row_count <= 0:
            self.selected = 0
            return
        self.selected = (self.selected - 1) % row_count

    def clamp_selection(self, row_count: int) -> None:
        if row_count <= 0:
            self.selected = 0
        elif self.selected >= row_count:
            self.selected = row_count - 1
        elif self.selected < 0:
            self.selected = 0
