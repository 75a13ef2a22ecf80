from .charting import ChartAdapter, MatplotlibChartAdapter, minutes_grid, render_minutes_heatmap

__all__ = ["ChartAdapter", "MatplotlibChartAdapter", "minutes_grid", "render_minutes_heatmap"]
