from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


def value_limits(times: np.ndarray, values: np.ndarray, *, target_ticks: int = 5) -> DataLimits:
    """X spans the sample times; Y starts at zero and ends on a nice tick above the largest value."""

    if times.size == 0:
        raise ValueError("cannot compute limits for an empty matrix")
    xmin = float(times[0])
    xmax = float(times[-1])
    if xmin == xmax:
        xmin -= 0.5
        xmax += 0.5
    top = float(np.max(values)) if values.size else 0.0
    if top <= 0:
        top = 1.0
    ticks = generate_nice_ticks(0.0, top, target_ticks)
    return DataLimits(xmin=xmin, xmax=xmax, ymin=0.0, ymax=float(ticks[-1]))


def build_transform(limits: DataLimits, width: int, height: int) -> PlotTransform:
    if width <= 1 or height <= 1:
        raise ValueError("plot viewport width/height must be > 1")
    sx = (width - 1) / (limits.xmax - limits.xmin)
    tx = -limits.xmin * sx
    sy = (height - 1) / (limits.ymax - limits.ymin)
    ty = -limits.ymin * sy
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty)


def map_to_pixels(x: np.ndarray, y: np.ndarray, transform: PlotTransform, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    px = np.rint(np.asarray(x, dtype=np.float64) * transform.sx + transform.tx).astype(np.int32)
    py = np.rint(np.asarray(y, dtype=np.float64) * transform.sy + transform.ty).astype(np.int32)
    py = (height - 1) - py
    np.clip(px, 0, width - 1, out=px)
    np.clip(py, 0, height - 1, out=py)
    return px, py


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = math.floor(vmin / step) * step
    tick_max = math.ceil(vmax / step) * step
    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def year_ticks(xmin: float, xmax: float, *, every: int = 2) -> np.ndarray:
    if every < 1:
        raise ValueError("every must be >= 1")
    first = int(math.ceil(xmin))
    last = int(math.floor(xmax))
    if first > last:
        return np.asarray([], dtype=np.float64)
    return np.arange(first, last + 1, every, dtype=np.float64)


def format_value(value: float) -> str:
    return f"{int(round(value)):,}"


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = math.floor(math.log10(value))
    frac = value / (10**exp)
    if round_result:
        if frac < 1.5:
            nice = 1.0
        elif frac < 3.0:
            nice = 2.0
        elif frac < 7.0:
            nice = 5.0
        else:
            nice = 10.0
    else:
        if frac <= 1.0:
            nice = 1.0
        elif frac <= 2.0:
            nice = 2.0
        elif frac <= 5.0:
            nice = 5.0
        else:
            nice = 10.0
    return float(nice * (10**exp))
