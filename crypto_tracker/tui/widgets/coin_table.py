"""
Coin table widget shared by the watchlist and portfolio tabs.

The table is fed by a view model. Header labels change with the sort
column, which rebuilds the columns; otherwise only changed cells are
written, unless the set or order of rows changed.
"""

from __future__ import annotations

from typing import Any, List, Optional

from textual.widgets import DataTable

from ..viewmodels.base import BaseViewModel


class CoinTable(DataTable):
    """Read-only table; the app moves the cursor from AppState's selection."""

    can_focus = False

    def __init__(self, **kwargs) -> None:
        super().__init__(cursor_type="row", zebra_stripes=True, **kwargs)
        self._labels: List[str] = []
        self._vm: Optional[BaseViewModel] = None

    def show(self, vm: BaseViewModel, labels: List[str], rows: Any, selected: int) -> None:
        """
        Render rows through a view model.

        Args:
            vm: View model for the active tab.
            labels: Column header labels.
            rows: Domain rows, already sorted.
            selected: Row index to highlight.
        """
        if vm is not self._vm or labels != self._labels:
            self.clear(columns=True)
            for i, label in enumerate(labels):
                self.add_column(label, key=f"col-{i}")
            self._labels = list(labels)
            self._vm = vm
            vm.invalidate()

        if vm.full_refresh_needed(rows):
            self.clear()
            vm.invalidate()
            vm.compute_updates(rows)
            for key, values in vm.get_cached_rows():
                self.add_row(*values, key=key)
        else:
            for update in vm.compute_updates(rows).cells:
                self.update_cell(update.row_key, f"col-{update.column_index}", update.value)

        if self.row_count:
            self.move_cursor(row=min(selected, self.row_count - 1), animate=False)
