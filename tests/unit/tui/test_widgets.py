"""Tests for header text helpers."""

from datetime import datetime

from crypto_tracker.application import Tab
from crypto_tracker.tui.widgets.header import build_status_text, build_tabs_text


def test_status_not_updated():
    assert build_status_text(None, None) == "Crypto Prices [dim](Not Updated Yet)[/]"


def test_status_last_update():
    text = build_status_text(datetime(2024, 1, 1, 9, 5, 7), None)
    assert text == "Crypto Prices (Last Updated: 09:05:07)"


def test_error_wins_and_is_escaped():
    text = build_status_text(datetime(2024, 1, 1), "API Error: [bad] key")
    assert text == "Crypto Prices [red](Error: API Error: \\[bad] key)[/]"


def test_active_tab_highlighted():
    text = build_tabs_text(Tab.PORTFOLIO)
    assert "[bold reverse yellow] Portfolio [/]" in text
    assert "[dim] Watchlist [/]" in text
    assert "[dim] Market [/]" in text
