from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from .catalog import Series, SeriesCatalog, require_group
from .config import SeriesGroup
from .errors import ActiveIndexError


@dataclass(frozen=True)
class VisibilityState:
    hidden_codes: frozenset[str] = frozenset()
    hidden_groups: frozenset[SeriesGroup] = frozenset()

    def is_visible(self, series: Series) -> bool:
        if series.group in self.hidden_groups:
            return False
        if series.code in self.hidden_codes:
            return False
        return True


@dataclass(frozen=True)
class HoverState:
    hovered_code: str | None = None
    active_index: int | None = None


def _toggled(items: frozenset, item: object) -> frozenset:
    if item in items:
        return items - {item}
    return items | {item}


class InteractionState:
    """Owns visibility and hover state for one chart.

    Each mutation swaps in a new frozen snapshot, so `visibility` and `hover`
    values handed out earlier never change underneath their holders.
    """

    def __init__(self, catalog: SeriesCatalog, sample_count: int) -> None:
        if sample_count < 0:
            raise ValueError("sample_count must be >= 0")
        self.catalog = catalog
        self.sample_count = int(sample_count)
        self._visibility = VisibilityState()
        self._hover = HoverState()

    @property
    def visibility(self) -> VisibilityState:
        return self._visibility

    @property
    def hover(self) -> HoverState:
        return self._hover

    def toggle_series(self, code: str) -> None:
        self.catalog.require(code)
        self._visibility = dataclasses.replace(
            self._visibility, hidden_codes=_toggled(self._visibility.hidden_codes, code)
        )

    def toggle_group(self, group: str) -> None:
        checked = require_group(group)
        self._visibility = dataclasses.replace(
            self._visibility, hidden_groups=_toggled(self._visibility.hidden_groups, checked)
        )

    def set_hover(self, code: str | None) -> None:
        if code is not None:
            self.catalog.require(code)
        self._hover = dataclasses.replace(self._hover, hovered_code=code)

    def check_active_index(self, index: int | None) -> int | None:
        if index is None:
            return None
        if isinstance(index, bool) or not 0 <= int(index) < self.sample_count:
            raise ActiveIndexError(f"active index {index!r} outside [0, {self.sample_count})")
        return int(index)

    def set_active_index(self, index: int | None) -> None:
        self._hover = dataclasses.replace(self._hover, active_index=self.check_active_index(index))

    def reset_hover(self) -> None:
        self._hover = HoverState()

    def is_visible(self, series: Series | str) -> bool:
        if isinstance(series, str):
            series = self.catalog.require(series)
        return self._visibility.is_visible(series)

    def visible_series(self) -> tuple[Series, ...]:
        return tuple(s for s in self.catalog if self._visibility.is_visible(s))
