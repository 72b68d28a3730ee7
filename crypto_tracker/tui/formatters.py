"""
Formatting utilities for the dashboard.

Provides consistent price, volume and percent formatting across all panels.
Uses Textual markup syntax (same as Rich markup).
"""

from __future__ import annotations

NA = "N/A"


def format_price(price: float | None) -> str:
    """
    Format a USD price with precision by magnitude.

    >= 1000 gets 2 decimals, >= 1 gets 3, anything smaller 6.
    """
    if price is None:
        return NA
    if price >= 1000:
        return f"${price:.2f}"
    if price >= 1:
        return f"${price:.3f}"
    return f"${price:.6f}"


def format_large_amount(value: float | None) -> str:
    """Format volume or market cap as $x.yB / $x.yM."""
    if value is None:
        return NA
    if value >= 1_000_000_000:
        return f"${value / 1_000_000_000:.1f}B"
    return f"${value / 1_000_000:.1f}M"


format_volume = format_large_amount
format_market_cap = format_large_amount


def format_percent(value: float | None, color: bool = True) -> str:
    """Format a percent change with sign and optional color markup."""
    if value is None:
        return NA
    formatted = f"{value:+.2f}%"
    if not color:
        return formatted
    if value > 0:
        return f"[green]{formatted}[/]"
    elif value < 0:
        return f"[red]{formatted}[/]"
    return formatted


def format_quantity(value: float | None) -> str:
    """Holdings amount, trailing zeros trimmed."""
    if value is None:
        return NA
    if value == int(value):
        return f"{int(value):,}"
    return f"{value:,.8f}".rstrip("0").rstrip(".")


def format_usd(value: float) -> str:
    return f"${value:,.2f}"


def format_pnl(value: float) -> str:
    """Format P&L with color markup."""
    if value > 0:
        return f"[green]+${value:,.2f}[/]"
    elif value < 0:
        return f"[red]-${abs(value):,.2f}[/]"
    else:
        return f"[dim]${value:,.2f}[/]"


def pnl_color(value: float) -> str:
    return "green" if value >= 0 else "red"
