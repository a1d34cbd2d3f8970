from __future__ import annotations


class ChartError(Exception):
    """Base error for flightlines core failures."""


class CatalogConfigError(ChartError, ValueError):
    """Raised when catalog or generator configuration cannot be honored."""


class UnknownSeriesError(ChartError, KeyError):
    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"unknown series code: {self.code!r}"


class UnknownGroupError(ChartError, KeyError):
    def __init__(self, group: str) -> None:
        super().__init__(group)
        self.group = group

    def __str__(self) -> str:
        return f"unknown series group: {self.group!r}"


class ActiveIndexError(ChartError, IndexError):
    """Raised when an active sample index falls outside the sample matrix."""
