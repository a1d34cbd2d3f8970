from flightlines_plot.backend import RasterChartBackend
from flightlines_plot.chart import ChartLayout, ChartTheme, LegendHitBox, compute_layout, legend_layout, render_chart
from flightlines_plot.export import save_png

__all__ = [
    "ChartLayout",
    "ChartTheme",
    "LegendHitBox",
    "RasterChartBackend",
    "compute_layout",
    "legend_layout",
    "render_chart",
    "save_png",
]
