from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from flightlines_core.generator import SampleMatrix
from flightlines_core.presentation import (
    LegendGroup,
    MultiSeriesTooltip,
    Presentation,
    SeriesRenderAttributes,
    SingleSeriesTooltip,
)
from flightlines_plot.raster import (
    draw_active_point,
    draw_hline_dashed,
    draw_polyline,
    draw_text,
    draw_vline_dashed,
    fill_rect,
    hex_to_rgba,
    new_canvas,
    stroke_rect,
    text_size,
)
from flightlines_plot.raster.canvas import RGBA
from flightlines_plot.scales import (
    DataLimits,
    PlotTransform,
    build_transform,
    format_value,
    generate_nice_ticks,
    map_to_pixels,
    value_limits,
    year_ticks,
)


@dataclass(frozen=True)
class ChartTheme:
    background: RGBA = (255, 255, 255, 255)
    grid: RGBA = (221, 221, 221, 255)
    axis_text: RGBA = (102, 102, 102, 255)
    cursor: RGBA = (153, 153, 153, 255)
    tooltip_background: RGBA = (255, 255, 255, 242)
    tooltip_border: RGBA = (204, 204, 204, 255)
    tooltip_text: RGBA = (51, 51, 51, 255)
    legend_text: RGBA = (51, 51, 51, 255)
    legend_hidden: RGBA = (187, 187, 187, 255)
    font_size_px: float = 10.0
    margin_left: int = 52
    margin_right: int = 20
    margin_top: int = 8
    axis_height: int = 24
    legend_height: int = 48
    year_tick_every: int = 2


DEFAULT_THEME = ChartTheme()


@dataclass(frozen=True)
class LegendHitBox:
    kind: Literal["group", "series"]
    key: str
    rect: tuple[int, int, int, int]

    def contains(self, x: int, y: int) -> bool:
        rx, ry, rw, rh = self.rect
        return rx <= x < rx + rw and ry <= y < ry + rh


@dataclass(frozen=True)
class ChartLayout:
    width: int
    height: int
    plot_rect: tuple[int, int, int, int]
    limits: DataLimits
    transform: PlotTransform
    legend_top: int

    def to_canvas(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        x0, y0, w, h = self.plot_rect
        px, py = map_to_pixels(x, y, self.transform, w, h)
        return px + x0, py + y0

    def contains(self, x: int, y: int) -> bool:
        x0, y0, w, h = self.plot_rect
        return x0 <= x < x0 + w and y0 <= y < y0 + h

    def nearest_sample_index(self, matrix: SampleMatrix, x: int) -> int | None:
        """Index of the sample whose time is closest to canvas column `x`, or None off the plot."""

        x0, _, w, _ = self.plot_rect
        if x < x0 or x >= x0 + w or len(matrix) == 0:
            return None
        t = self.limits.xmin + (x - x0) / self.transform.sx
        return int(np.argmin(np.abs(matrix.times - t)))

    def series_at(self, matrix: SampleMatrix, presentation: Presentation, x: int, y: int) -> str | None:
        """Series whose hit area (a band `hit_width` pixels tall) covers (x, y); topmost wins ties."""

        if not self.contains(x, y):
            return None
        x0, _, _, _ = self.plot_rect
        t = self.limits.xmin + (x - x0) / self.transform.sx
        best: tuple[float, int, str] | None = None
        for attrs in presentation.attributes:
            if attrs.hidden:
                continue
            value = float(np.interp(t, matrix.times, matrix.series_values(attrs.code)))
            _, py = self.to_canvas(np.asarray([t]), np.asarray([value]))
            distance = abs(float(py[0]) - y)
            if distance > attrs.hit_width / 2.0:
                continue
            candidate = (distance, -attrs.z_order, attrs.code)
            if best is None or candidate < best:
                best = candidate
        return None if best is None else best[2]


def compute_layout(
    matrix: SampleMatrix,
    width: int,
    height: int,
    *,
    theme: ChartTheme = DEFAULT_THEME,
) -> ChartLayout:
    plot_w = width - theme.margin_left - theme.margin_right
    plot_h = height - theme.margin_top - theme.axis_height - theme.legend_height
    if plot_w <= 1 or plot_h <= 1:
        raise ValueError(f"chart size {width}x{height} leaves no room for the plot area")
    limits = value_limits(matrix.times, matrix.values)
    return ChartLayout(
        width=width,
        height=height,
        plot_rect=(theme.margin_left, theme.margin_top, plot_w, plot_h),
        limits=limits,
        transform=build_transform(limits, plot_w, plot_h),
        legend_top=theme.margin_top + plot_h + theme.axis_height,
    )


def legend_layout(
    layout: ChartLayout,
    legend: tuple[LegendGroup, ...],
    *,
    theme: ChartTheme = DEFAULT_THEME,
) -> list[LegendHitBox]:
    boxes: list[LegendHitBox] = []
    row_h = int(theme.font_size_px) + 8
    y = layout.legend_top + 4
    for group in legend:
        x = layout.plot_rect[0]
        title_w, _ = text_size(group.title, font_size_px=theme.font_size_px)
        boxes.append(LegendHitBox(kind="group", key=group.group, rect=(x, y, title_w + 8, row_h)))
        x += title_w + 16
        for item in group.items:
            label_w, _ = text_size(item.code, font_size_px=theme.font_size_px)
            item_w = 12 + 4 + label_w + 6
            boxes.append(LegendHitBox(kind="series", key=item.code, rect=(x, y, item_w, row_h)))
            x += item_w + 6
        y += row_h
    return boxes


def render_chart(
    matrix: SampleMatrix,
    presentation: Presentation,
    *,
    width: int = 960,
    height: int = 540,
    theme: ChartTheme = DEFAULT_THEME,
    layout: ChartLayout | None = None,
) -> np.ndarray:
    layout = layout or compute_layout(matrix, width, height, theme=theme)
    canvas = new_canvas(layout.width, layout.height, color=theme.background)
    _draw_grid_and_axes(canvas, layout, theme)

    if presentation.show_cursor and presentation.active_index is not None:
        px, _ = layout.to_canvas(np.asarray([matrix.time_at(presentation.active_index)]), np.asarray([0.0]))
        x0, y0, _, h = layout.plot_rect
        draw_vline_dashed(canvas, int(px[0]), y0, y0 + h - 1, theme.cursor)

    for attrs in presentation.attributes:
        if attrs.hidden or attrs.opacity <= 0:
            continue
        xs, ys = layout.to_canvas(matrix.times, matrix.series_values(attrs.code))
        draw_polyline(
            canvas,
            xs,
            ys,
            hex_to_rgba(attrs.color, attrs.opacity),
            width=max(1, int(round(attrs.stroke_width))),
            dash=attrs.dash_pattern,
        )

    if presentation.active_index is not None:
        for attrs in presentation.attributes:
            if attrs.show_active_point:
                _draw_point(canvas, layout, matrix, presentation.active_index, attrs)

    _draw_tooltip(canvas, layout, presentation, matrix, theme)
    _draw_legend(canvas, layout, presentation.legend, theme)
    return canvas


def _draw_grid_and_axes(canvas: np.ndarray, layout: ChartLayout, theme: ChartTheme) -> None:
    x0, y0, w, h = layout.plot_rect
    limits = layout.limits
    for tick in generate_nice_ticks(limits.ymin, limits.ymax, 5):
        _, py = layout.to_canvas(np.asarray([limits.xmin]), np.asarray([tick]))
        row = int(py[0])
        draw_hline_dashed(canvas, x0, x0 + w - 1, row, theme.grid)
        label = format_value(float(tick))
        lw, lh = text_size(label, font_size_px=theme.font_size_px)
        draw_text(canvas, x0 - lw - 6, row - lh // 2, label, theme.axis_text, font_size_px=theme.font_size_px)
    for tick in year_ticks(limits.xmin, limits.xmax, every=theme.year_tick_every):
        px, _ = layout.to_canvas(np.asarray([tick]), np.asarray([limits.ymin]))
        col = int(px[0])
        draw_vline_dashed(canvas, col, y0, y0 + h - 1, theme.grid)
        label = str(int(tick))
        lw, _ = text_size(label, font_size_px=theme.font_size_px)
        draw_text(canvas, col - lw // 2, y0 + h + 6, label, theme.axis_text, font_size_px=theme.font_size_px)


def _draw_point(
    canvas: np.ndarray,
    layout: ChartLayout,
    matrix: SampleMatrix,
    index: int,
    attrs: SeriesRenderAttributes,
) -> None:
    value = matrix.value(index, attrs.code)
    if value is None:
        return
    px, py = layout.to_canvas(np.asarray([matrix.time_at(index)]), np.asarray([float(value)]))
    draw_active_point(canvas, int(px[0]), int(py[0]), hex_to_rgba(attrs.color), radius=attrs.active_point_radius)


def _draw_tooltip(
    canvas: np.ndarray,
    layout: ChartLayout,
    presentation: Presentation,
    matrix: SampleMatrix,
    theme: ChartTheme,
) -> None:
    tooltip = presentation.tooltip
    if tooltip is None:
        return
    rows: list[tuple[str | None, str]] = []
    if isinstance(tooltip, SingleSeriesTooltip):
        rows.append((tooltip.color, f"{tooltip.code}  {tooltip.label}  {format_value(tooltip.value)}"))
        border = hex_to_rgba(tooltip.color)
        border_width = 2
    elif isinstance(tooltip, MultiSeriesTooltip):
        rows.append((None, tooltip.label))
        rows.extend((entry.color, f"{entry.code}  {format_value(entry.value)}") for entry in tooltip.entries)
        border = theme.tooltip_border
        border_width = 1
    else:
        raise TypeError(f"unsupported tooltip payload: {type(tooltip).__name__}")

    row_h = int(theme.font_size_px) + 6
    x0, y0, w, h = layout.plot_rect
    max_rows = max(1, (h - 16) // row_h)
    rows = rows[:max_rows]
    text_w = max(text_size(text, font_size_px=theme.font_size_px)[0] for _, text in rows)
    box_w = 12 + 12 + 8 + text_w
    box_h = 8 + row_h * len(rows)

    px, _ = layout.to_canvas(np.asarray([tooltip.time]), np.asarray([0.0]))
    bx = int(px[0]) + 12
    if bx + box_w > x0 + w:
        bx = int(px[0]) - 12 - box_w
    by = y0 + 8
    fill_rect(canvas, bx, by, box_w, box_h, theme.tooltip_background)
    stroke_rect(canvas, bx, by, box_w, box_h, border, width=border_width)
    for i, (color, text) in enumerate(rows):
        ty = by + 4 + i * row_h
        tx = bx + 12
        if color is not None:
            fill_rect(canvas, tx, ty + row_h // 2 - 2, 12, 3, hex_to_rgba(color))
            tx += 20
        draw_text(canvas, tx, ty, text, theme.tooltip_text, font_size_px=theme.font_size_px)


def _draw_legend(canvas: np.ndarray, layout: ChartLayout, legend: tuple[LegendGroup, ...], theme: ChartTheme) -> None:
    items = {item.code: item for group in legend for item in group.items}
    groups = {group.group: group for group in legend}
    for box in legend_layout(layout, legend, theme=theme):
        x, y, _, h = box.rect
        if box.kind == "group":
            group = groups[box.key]
            color = theme.legend_hidden if group.hidden else theme.legend_text
            draw_text(canvas, x, y + 2, group.title, color, font_size_px=theme.font_size_px)
            continue
        item = items[box.key]
        swatch = theme.legend_hidden if item.hidden else hex_to_rgba(item.color)
        mid = y + h // 2
        if item.dashed:
            draw_polyline(canvas, np.asarray([x, x + 11]), np.asarray([mid, mid]), swatch, width=3, dash=(3, 3))
        else:
            fill_rect(canvas, x, mid - 1, 12, 3, swatch)
        text_color = theme.legend_hidden if item.hidden else theme.legend_text
        draw_text(canvas, x + 16, y + 2, item.code, text_color, font_size_px=theme.font_size_px)
