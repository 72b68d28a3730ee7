"""Framework-agnostic view models for the dashboard."""

from .base import BaseViewModel, CellUpdate, RowUpdate, TableDiff
from .fear_greed_vm import FearGreedDisplay, FearGreedViewModel
from .portfolio_vm import PORTFOLIO_COLUMNS, PortfolioViewModel
from .summary_vm import SummaryViewModel, allocation_bar
from .watchlist_vm import WATCHLIST_COLUMNS, WatchlistViewModel, column_labels

__all__ = [
    "BaseViewModel",
    "CellUpdate",
    "RowUpdate",
    "TableDiff",
    "FearGreedDisplay",
    "FearGreedViewModel",
    "PORTFOLIO_COLUMNS",
    "PortfolioViewModel",
    "SummaryViewModel",
    "allocation_bar",
    "WATCHLIST_COLUMNS",
    "WatchlistViewModel",
    "column_labels",
]
