from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Literal, overload

from .config import DEFAULT_CATALOG_CONFIG, SERIES_GROUPS, CatalogConfig, SeriesGroup
from .errors import CatalogConfigError, UnknownGroupError, UnknownSeriesError


StyleClass = Literal["solid", "dashed"]


@dataclass(frozen=True)
class Series:
    code: str
    name: str
    group: SeriesGroup
    color: str
    palette_index: int

    @property
    def style_class(self) -> StyleClass:
        return "solid" if self.group == "primary" else "dashed"

    @property
    def dashed(self) -> bool:
        return self.style_class == "dashed"


class SeriesCatalog(Sequence[Series]):
    """Ordered, immutable set of series; primary series come first."""

    def __init__(self, series: Sequence[Series], *, group_titles: dict[SeriesGroup, str] | None = None) -> None:
        self._series = tuple(series)
        self._index: dict[str, int] = {}
        for i, item in enumerate(self._series):
            if item.code in self._index:
                raise CatalogConfigError(f"duplicate series code: {item.code}")
            self._index[item.code] = i
        self._group_titles = dict(group_titles or {"primary": "Primary", "retired": "Retired"})

    @overload
    def __getitem__(self, index: int) -> Series: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Series, ...]: ...

    def __getitem__(self, index: int | slice) -> Series | tuple[Series, ...]:
        return self._series[index]

    def __len__(self) -> int:
        return len(self._series)

    def __iter__(self) -> Iterator[Series]:
        return iter(self._series)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._index
        return item in self._series

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(s.code for s in self._series)

    def get(self, code: str) -> Series | None:
        i = self._index.get(code)
        return None if i is None else self._series[i]

    def require(self, code: str) -> Series:
        series = self.get(code)
        if series is None:
            raise UnknownSeriesError(code)
        return series

    def index_of(self, code: str) -> int:
        try:
            return self._index[code]
        except KeyError:
            raise UnknownSeriesError(code) from None

    def in_group(self, group: SeriesGroup) -> tuple[Series, ...]:
        require_group(group)
        return tuple(s for s in self._series if s.group == group)

    def group_title(self, group: SeriesGroup) -> str:
        require_group(group)
        return self._group_titles[group]


def require_group(group: str) -> SeriesGroup:
    if group not in SERIES_GROUPS:
        raise UnknownGroupError(group)
    return group  # type: ignore[return-value]


def build_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> SeriesCatalog:
    series: list[Series] = []
    for group in SERIES_GROUPS:
        codes = config.codes_for(group)
        palette = config.palette_for(group)
        if len(codes) > len(palette):
            raise CatalogConfigError(
                f"{group} group requests {len(codes)} series but its palette only has {len(palette)} colors"
            )
        for index, code in enumerate(codes):
            series.append(
                Series(
                    code=code,
                    name=config.name_template.format(code=code),
                    group=group,
                    color=palette[index],
                    palette_index=index,
                )
            )
    titles = {group: config.title_for(group) for group in SERIES_GROUPS}
    return SeriesCatalog(series, group_titles=titles)
