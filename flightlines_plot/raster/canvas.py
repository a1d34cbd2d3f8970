from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def hex_to_rgba(color: str, opacity: float = 1.0) -> RGBA:
    raw = color.lstrip("#")
    if len(raw) not in (6, 8):
        raise ValueError(f"expected #RRGGBB or #RRGGBBAA color, got {color!r}")
    r, g, b = (int(raw[i : i + 2], 16) for i in (0, 2, 4))
    a = int(raw[6:8], 16) if len(raw) == 8 else 255
    alpha = int(round(a * min(1.0, max(0.0, opacity))))
    return (r, g, b, alpha)


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Composite `color` over `dst` wherever `mask` is set, once per pixel."""

    if mask.shape != dst.shape[:2]:
        raise ValueError("mask shape must match canvas height/width")
    if color[3] == 0 or not np.any(mask):
        return
    a = color[3] / 255.0
    region = dst[mask]
    rgb = np.asarray(color[:3], dtype=np.float32) * a + region[:, :3].astype(np.float32) * (1.0 - a)
    region[:, :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    region[:, 3] = 255
    dst[mask] = region


def fill_rect(dst: np.ndarray, x: int, y: int, w: int, h: int, color: RGBA) -> None:
    mask = np.zeros(dst.shape[:2], dtype=bool)
    y0, y1 = max(0, y), min(dst.shape[0], y + h)
    x0, x1 = max(0, x), min(dst.shape[1], x + w)
    if y0 >= y1 or x0 >= x1:
        return
    mask[y0:y1, x0:x1] = True
    blend_mask(dst, mask, color)


def stroke_rect(dst: np.ndarray, x: int, y: int, w: int, h: int, color: RGBA, width: int = 1) -> None:
    mask = np.zeros(dst.shape[:2], dtype=bool)
    for t in range(max(1, width)):
        ya, yb = y + t, y + h - 1 - t
        xa, xb = x + t, x + w - 1 - t
        if ya > yb or xa > xb:
            break
        _set_clipped(mask, ya, ya + 1, xa, xb + 1)
        _set_clipped(mask, yb, yb + 1, xa, xb + 1)
        _set_clipped(mask, ya, yb + 1, xa, xa + 1)
        _set_clipped(mask, ya, yb + 1, xb, xb + 1)
    blend_mask(dst, mask, color)


def _set_clipped(mask: np.ndarray, y0: int, y1: int, x0: int, x1: int) -> None:
    y0, y1 = max(0, y0), min(mask.shape[0], y1)
    x0, x1 = max(0, x0), min(mask.shape[1], x1)
    if y0 < y1 and x0 < x1:
        mask[y0:y1, x0:x1] = True
