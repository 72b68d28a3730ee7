"""FearGreedViewModel - title line and chart series for the index panel."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ...models.market_data import FearGreedPoint


@dataclass(frozen=True)
class FearGreedDisplay:
    title: str
    series: List[float]  # oldest first
    first_label: str
    last_label: str


class FearGreedViewModel:
    """Summarizes the index history (held newest first)."""

    def compute_display(self, points: Sequence[FearGreedPoint]) -> FearGreedDisplay:
        if not points:
            return FearGreedDisplay(
                title="Fear & Greed Index: [dim]no data[/]",
                series=[],
                first_label="",
                last_label="",
            )

        current = points[0]
        previous = points[1].value if len(points) > 1 else current.value
        if current.value > previous:
            trend = "[green]↑[/]"
        elif current.value < previous:
            trend = "[red]↓[/]"
        else:
            trend = "→"

        values = [p.value for p in points]
        title = (
            f"Fear & Greed Index: [bold]{current.value}[/] {trend} "
            f"({current.classification}) | Min: {min(values)} | Max: {max(values)}"
        )
        return FearGreedDisplay(
            title=title,
            series=[float(v) for v in reversed(values)],
            first_label=f"{points[-1].as_datetime:%b %d}",
            last_label=f"{current.as_datetime:%b %d}",
        )
