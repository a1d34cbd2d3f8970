from __future__ import annotations

import math


MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def time_for(year: int, period: int, steps_per_year: int = 12) -> float:
    """Fractional-year coordinate of a 1-based period, e.g. (2020, 7) -> 2020.5."""

    if steps_per_year < 1:
        raise ValueError("steps_per_year must be >= 1")
    if not 1 <= period <= steps_per_year:
        raise ValueError("period must be in [1, steps_per_year]")
    return float(year) + (period - 1) / float(steps_per_year)


def split_time(time: float, steps_per_year: int = 12) -> tuple[int, int]:
    if steps_per_year < 1:
        raise ValueError("steps_per_year must be >= 1")
    year = int(math.floor(time))
    period = int(round((time - year) * steps_per_year)) + 1
    if period > steps_per_year:
        # Float drift right below the next integer year.
        return (year + 1, 1)
    return (year, period)


def month_of(time: float) -> int:
    """Calendar month (1-12) a fractional-year coordinate falls in, whatever the step size."""

    year = math.floor(time)
    # Tolerate float drift right below a month boundary.
    return min(12, int(math.floor((time - year) * 12 + 1e-9)) + 1)


def format_time_label(time: float, steps_per_year: int = 12) -> str:
    year, period = split_time(time, steps_per_year)
    if steps_per_year == 12:
        return f"{MONTH_NAMES[period - 1]} {year}"
    return f"{year} P{period}"
