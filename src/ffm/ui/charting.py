from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from ffm.allocation.views import SUB_LABEL, get_player_quarter_breakdown
from ffm.contracts import Allocation


class ChartAdapter(Protocol):
    def render_minutes_grid(self, allocation: Allocation, roster: Sequence[str], path: Path) -> Path: ...


def minutes_grid(allocation: Allocation, roster: Sequence[str]) -> list[list[int]]:
    """Players x quarters matrix of minutes played."""
    grid: list[list[int]] = []
    for player in roster:
        row = []
        for q in allocation.quarters:
            row.append(sum(s.minutes for s in q.slots if s.player == player))
        grid.append(row)
    return grid


@dataclass(slots=True)
class MatplotlibChartAdapter:
    """Renders off-screen with the Agg canvas; no GUI toolkit needed."""

    dpi: int = 100
    cmap: str = "Greens"

    def render_minutes_grid(self, allocation: Allocation, roster: Sequence[str], path: Path) -> Path:
        from matplotlib.backends.backend_agg import FigureCanvasAgg
        from matplotlib.figure import Figure

        grid = minutes_grid(allocation, roster)
        quarter_labels = [f"Q{q.quarter}" for q in allocation.quarters]

        fig = Figure(figsize=(1.2 * len(quarter_labels) + 2.5, 0.45 * len(roster) + 1.2), dpi=self.dpi)
        FigureCanvasAgg(fig)
        ax = fig.add_subplot(111)
        ax.imshow(grid, cmap=self.cmap, aspect="auto", vmin=0)
        ax.set_xticks(range(len(quarter_labels)), labels=quarter_labels)
        ax.set_yticks(range(len(roster)), labels=[f"{p} ({allocation.summary.get(p, 0)})" for p in roster])
        for row_idx, player in enumerate(roster):
            for col_idx, label in enumerate(get_player_quarter_breakdown(allocation, player)):
                ax.text(
                    col_idx,
                    row_idx,
                    label,
                    ha="center",
                    va="center",
                    fontsize=8,
                    color="0.45" if label == SUB_LABEL else "black",
                )
        ax.set_title("Minutes per quarter")
        fig.tight_layout()
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path)
        return path


def render_minutes_heatmap(allocation: Allocation, roster: Sequence[str], path: Path) -> Path:
    return MatplotlibChartAdapter().render_minutes_grid(allocation, roster, path)
