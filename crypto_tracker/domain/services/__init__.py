"""Domain services - command language, sorting and portfolio metrics."""

from .command_processor import AddCommand, Command, RemoveCommand, apply_command, parse_command
from .portfolio_metrics import (
    Allocation,
    PortfolioRow,
    PortfolioTotals,
    compute_allocations,
    compute_totals,
    portfolio_rows,
    watchlist_listings,
)
from .sorting import SortColumn, compare_values, sort_listings, sort_portfolio_rows

__all__ = [
    "AddCommand",
    "Command",
    "RemoveCommand",
    "apply_command",
    "parse_command",
    "Allocation",
    "PortfolioRow",
    "PortfolioTotals",
    "compute_allocations",
    "compute_totals",
    "portfolio_rows",
    "watchlist_listings",
    "SortColumn",
    "compare_values",
    "sort_listings",
    "sort_portfolio_rows",
]
