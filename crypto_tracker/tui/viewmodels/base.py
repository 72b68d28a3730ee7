"""
Table view model base.

Turns a list of domain rows into keyed display strings and remembers the
last rendering, so the table widget only rewrites cells whose text changed.
Nothing here imports Textual.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


@dataclass
class CellUpdate:
    row_key: str
    column_index: int
    value: str


@dataclass
class RowUpdate:
    row_key: str
    action: str  # "add" or "remove"
    values: Optional[List[str]] = None


@dataclass
class TableDiff:
    """What changed between two renderings of the same table."""

    rows: List[RowUpdate] = field(default_factory=list)
    cells: List[CellUpdate] = field(default_factory=list)
    order: List[str] = field(default_factory=list)


class BaseViewModel(ABC, Generic[T]):
    """Keyed, cached rendering of a table's rows."""

    def __init__(self) -> None:
        self._rendered: Dict[str, List[str]] = {}
        self._order: List[str] = []
        self._loaded = False

    @abstractmethod
    def compute_display_data(self, data: T) -> Dict[str, List[str]]:
        """Row key -> formatted cells, one per column."""

    @abstractmethod
    def get_row_order(self, data: T) -> List[str]:
        """Row keys in the order the rows arrive (already sorted)."""

    def compute_updates(self, data: T) -> TableDiff:
        """Render `data`, diff it against the cache and store it as the new cache."""
        rendered = self.compute_display_data(data)
        diff = TableDiff(order=self.get_row_order(data))

        for key in self._order:
            if key not in rendered:
                diff.rows.append(RowUpdate(row_key=key, action="remove"))

        for key, cells in rendered.items():
            previous = self._rendered.get(key)
            if previous is None:
                diff.rows.append(RowUpdate(row_key=key, action="add", values=cells))
                continue
            diff.cells.extend(
                CellUpdate(row_key=key, column_index=i, value=new)
                for i, (old, new) in enumerate(zip(previous, cells))
                if old != new
            )

        self._rendered = rendered
        self._order = list(diff.order)
        self._loaded = True
        return diff

    def full_refresh_needed(self, data: T) -> bool:
        """True before the first render and whenever the row order changes.

        DataTable cannot reorder rows in place, so a new sort order or a
        different set of coins means rebuilding the rows.
        """
        return not self._loaded or self.get_row_order(data) != self._order

    def invalidate(self) -> None:
        self._loaded = False
        self._rendered = {}
        self._order = []

    def get_cached_row_order(self) -> List[str]:
        return list(self._order)

    def get_cached_rows(self) -> List[Tuple[str, List[str]]]:
        """(key, cells) pairs of the last rendering, in display order."""
        return [(key, self._rendered[key]) for key in self._order]
