from __future__ import annotations

import numpy as np

from flightlines_plot.raster.canvas import RGBA, blend_mask


def disc_mask(shape: tuple[int, int], cx: int, cy: int, radius: int) -> np.ndarray:
    yy, xx = np.ogrid[: shape[0], : shape[1]]
    return (xx - cx) ** 2 + (yy - cy) ** 2 <= radius * radius


def draw_active_point(
    dst: np.ndarray,
    x: int,
    y: int,
    color: RGBA,
    *,
    radius: int,
    ring_color: RGBA = (255, 255, 255, 255),
    ring_width: int = 2,
) -> None:
    """Filled dot with a contrasting ring, drawn over the series line."""

    shape = dst.shape[:2]
    blend_mask(dst, disc_mask(shape, x, y, radius + ring_width), ring_color)
    blend_mask(dst, disc_mask(shape, x, y, radius), color)
