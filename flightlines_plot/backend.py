from __future__ import annotations

import logging

import numpy as np

from flightlines_core.controller import ChartController
from flightlines_core.presentation import Presentation
from flightlines_plot.chart import DEFAULT_THEME, ChartLayout, ChartTheme, compute_layout, legend_layout, render_chart

LOGGER = logging.getLogger(__name__)


class RasterChartBackend:
    """Translates canvas-pixel pointer input into controller events and paints frames.

    Pointer motion over the plot reports the nearest sample index; motion over a
    line's hit area also reports the series as hovered. Clicks land on legend
    entries (series or group headers).
    """

    def __init__(
        self,
        controller: ChartController,
        *,
        width: int = 960,
        height: int = 540,
        theme: ChartTheme = DEFAULT_THEME,
    ) -> None:
        self.controller = controller
        self.theme = theme
        self.layout: ChartLayout = compute_layout(controller.matrix, width, height, theme=theme)
        self._line_hover: str | None = None
        self._legend_hover: str | None = None

    def render(self) -> np.ndarray:
        return render_chart(
            self.controller.matrix,
            self.controller.presentation(),
            theme=self.theme,
            layout=self.layout,
        )

    def pointer_move(self, x: int, y: int, now: float | None = None) -> Presentation | None:
        ctl = self.controller
        self._update_legend_hover(x, y)
        if not self.layout.contains(x, y):
            if self._line_hover is not None:
                self._line_hover = None
                self._sync_hover()
            if ctl.state.hover.active_index is not None:
                return ctl.pointer_leave()
            return None
        hit = self.layout.series_at(ctl.matrix, ctl.presentation(), x, y)
        if hit != self._line_hover:
            self._line_hover = hit
            self._sync_hover()
        return ctl.pointer_move(self.layout.nearest_sample_index(ctl.matrix, x), now=now)

    def pointer_leave(self) -> Presentation:
        self._line_hover = None
        self._legend_hover = None
        return self.controller.reset_hover()

    def click(self, x: int, y: int) -> Presentation | None:
        for box in legend_layout(self.layout, self.controller.presentation().legend, theme=self.theme):
            if not box.contains(x, y):
                continue
            if box.kind == "group":
                return self.controller.click_group(box.key)
            return self.controller.click_series(box.key)
        return None

    def _update_legend_hover(self, x: int, y: int) -> None:
        hovered = None
        for box in legend_layout(self.layout, self.controller.presentation().legend, theme=self.theme):
            if box.kind == "series" and box.contains(x, y):
                hovered = box.key
                break
        if hovered != self._legend_hover:
            self._legend_hover = hovered
            self._sync_hover()

    def _sync_hover(self) -> None:
        target = self._legend_hover or self._line_hover
        if target == self.controller.state.hover.hovered_code:
            return
        LOGGER.debug("hover target -> %s", target)
        if target is None:
            self.controller.series_leave()
        else:
            self.controller.series_enter(target)
