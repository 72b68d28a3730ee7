"""
Header widget.

Displays the tab strip and the price status line: last update time, or the
sticky last error.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from rich.markup import escape
from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Static

from ...application.view_state import Tab


def build_tabs_text(active: Tab) -> str:
    parts = []
    for tab in Tab:
        if tab == active:
            parts.append(f"[bold reverse yellow] {tab.title} [/]")
        else:
            parts.append(f"[dim] {tab.title} [/]")
    return " ".join(parts)


def build_status_text(last_update: Optional[datetime], last_error: Optional[str]) -> str:
    """Error wins over the update time, matching the table title."""
    if last_error:
        return f"Crypto Prices [red](Error: {escape(last_error)})[/]"
    if last_update is not None:
        return f"Crypto Prices (Last Updated: {last_update:%H:%M:%S})"
    return "Crypto Prices [dim](Not Updated Yet)[/]"


class HeaderWidget(Widget):
    """Tab strip plus status line."""

    DEFAULT_CSS = """
    HeaderWidget {
        height: 3;
        background: $surface;
        border-bottom: solid $primary;
    }

    HeaderWidget #header-tabs {
        width: 100%;
        content-align: center middle;
    }

    HeaderWidget #header-status {
        width: 100%;
        content-align: center middle;
    }
    """

    def __init__(self, env: str = "dev", **kwargs):
        super().__init__(**kwargs)
        self.env = env

    def compose(self) -> ComposeResult:
        yield Static(self._tabs_line(Tab.WATCHLIST), id="header-tabs")
        yield Static(build_status_text(None, None), id="header-status")

    def _tabs_line(self, active: Tab) -> str:
        env_color = "bold red" if self.env == "prod" else "bold yellow"
        return f"[bold cyan]Crypto Tracker[/]  [{env_color}]{self.env.upper()}[/]  |  {build_tabs_text(active)}"

    def show(self, active: Tab, last_update: Optional[datetime], last_error: Optional[str]) -> None:
        self.query_one("#header-tabs", Static).update(self._tabs_line(active))
        self.query_one("#header-status", Static).update(build_status_text(last_update, last_error))
