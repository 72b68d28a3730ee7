"""Tests for dashboard formatters."""

import pytest

from crypto_tracker.tui.formatters import (
    NA,
    format_large_amount,
    format_percent,
    format_pnl,
    format_price,
    format_quantity,
    format_usd,
)


@pytest.mark.parametrize("price, expected", [
    (50000.0, "$50000.00"),
    (1000.0, "$1000.00"),
    (2.5, "$2.500"),
    (1.0, "$1.000"),
    (0.00012345, "$0.000123"),
    (None, NA),
])
def test_format_price(price, expected):
    assert format_price(price) == expected


@pytest.mark.parametrize("value, expected", [
    (980_000_000_000.0, "$980.0B"),
    (1_500_000_000.0, "$1.5B"),
    (12_340_000.0, "$12.3M"),
    (None, NA),
])
def test_format_large_amount(value, expected):
    assert format_large_amount(value) == expected


def test_format_percent_colors():
    assert format_percent(2.0) == "[green]+2.00%[/]"
    assert format_percent(-1.234) == "[red]-1.23%[/]"
    assert format_percent(0.0) == "+0.00%"
    assert format_percent(-1.5, color=False) == "-1.50%"
    assert format_percent(None) == NA


def test_format_quantity():
    assert format_quantity(2.0) == "2"
    assert format_quantity(0.5) == "0.5"
    assert format_quantity(1234.125) == "1,234.125"
    assert format_quantity(None) == NA


def test_format_money():
    assert format_usd(1234.5) == "$1,234.50"
    assert format_pnl(10.0) == "[green]+$10.00[/]"
    assert format_pnl(-2500.0) == "[red]-$2,500.00[/]"
    assert format_pnl(0.0) == "[dim]$0.00[/]"
