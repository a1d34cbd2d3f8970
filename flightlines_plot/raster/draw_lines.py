from __future__ import annotations

import numpy as np

from flightlines_plot.raster.canvas import RGBA, blend_mask


def polyline_mask(
    shape: tuple[int, int],
    xs: np.ndarray,
    ys: np.ndarray,
    *,
    width: int = 1,
    dash: tuple[int, int] | None = None,
) -> np.ndarray:
    """Coverage mask for a polyline. `dash` is (on, off) in pixel steps, continued across vertices."""

    mask = np.zeros(shape, dtype=bool)
    if xs.size < 2:
        return mask
    if dash is not None and (dash[0] <= 0 or dash[1] < 0):
        raise ValueError("dash must be (on > 0, off >= 0)")
    phase = 0
    for i in range(xs.size - 1):
        phase = _segment(mask, int(xs[i]), int(ys[i]), int(xs[i + 1]), int(ys[i + 1]), width, dash, phase)
    return mask


def draw_polyline(
    dst: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    color: RGBA,
    width: int = 1,
    dash: tuple[int, int] | None = None,
) -> None:
    blend_mask(dst, polyline_mask(dst.shape[:2], xs, ys, width=width, dash=dash), color)


def draw_vline_dashed(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA, dash: tuple[int, int] = (3, 3)) -> None:
    draw_polyline(dst, np.asarray([x, x]), np.asarray([y0, y1]), color, width=1, dash=dash)


def draw_hline_dashed(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA, dash: tuple[int, int] = (3, 3)) -> None:
    draw_polyline(dst, np.asarray([x0, x1]), np.asarray([y, y]), color, width=1, dash=dash)


def _segment(
    mask: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    width: int,
    dash: tuple[int, int] | None,
    phase: int,
) -> int:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    period = None if dash is None else dash[0] + dash[1]

    while True:
        if period is None or phase % period < dash[0]:
            _brush(mask, x0, y0, width)
        if x0 == x1 and y0 == y1:
            break
        phase += 1
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return phase


def _brush(mask: np.ndarray, x: int, y: int, width: int) -> None:
    lo = max(0, width - 1) // 2
    hi = max(1, width) - lo
    ya, yb = max(0, y - lo), min(mask.shape[0], y + hi)
    xa, xb = max(0, x - lo), min(mask.shape[1], x + hi)
    if ya < yb and xa < xb:
        mask[ya:yb, xa:xb] = True
