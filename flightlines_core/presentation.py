from __future__ import annotations

from dataclasses import dataclass
import logging

from .catalog import Series, SeriesCatalog
from .config import DEFAULT_PRESENTATION_CONFIG, SERIES_GROUPS, PresentationConfig, SeriesGroup
from .generator import SampleMatrix
from .interaction import HoverState, VisibilityState
from .timeaxis import format_time_label

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeriesRenderAttributes:
    code: str
    color: str
    opacity: float
    stroke_width: float
    dashed: bool
    dash_pattern: tuple[int, int] | None
    hidden: bool
    show_active_point: bool
    active_point_radius: int
    hit_width: float
    z_order: int


@dataclass(frozen=True)
class SingleSeriesTooltip:
    code: str
    time: float
    value: int
    label: str
    color: str


@dataclass(frozen=True)
class TooltipEntry:
    code: str
    value: int
    color: str


@dataclass(frozen=True)
class MultiSeriesTooltip:
    time: float
    label: str
    entries: tuple[TooltipEntry, ...]


Tooltip = SingleSeriesTooltip | MultiSeriesTooltip | None


@dataclass(frozen=True)
class LegendItem:
    code: str
    color: str
    dashed: bool
    hidden: bool


@dataclass(frozen=True)
class LegendGroup:
    group: SeriesGroup
    title: str
    hidden: bool
    items: tuple[LegendItem, ...]


@dataclass(frozen=True)
class Presentation:
    single_series_mode: bool
    attributes: tuple[SeriesRenderAttributes, ...]
    tooltip: Tooltip
    legend: tuple[LegendGroup, ...]
    active_index: int | None
    show_cursor: bool

    def attributes_for(self, code: str) -> SeriesRenderAttributes:
        for attrs in self.attributes:
            if attrs.code == code:
                return attrs
        raise KeyError(code)


def line_opacity(
    series: Series,
    visibility: VisibilityState,
    hover: HoverState,
    *,
    single_series_mode: bool,
    faded_opacity: float,
) -> float:
    if not visibility.is_visible(series):
        return 0.0
    if not single_series_mode:
        return 1.0
    if hover.hovered_code is None:
        return 1.0
    if hover.hovered_code == series.code:
        return 1.0
    return faded_opacity


def z_ordered(catalog: SeriesCatalog, hovered_code: str | None) -> list[Series]:
    """Catalog order with the hovered series moved last so it paints on top."""

    return sorted(catalog, key=lambda s: s.code == hovered_code)


def show_active_point(
    series: Series,
    visibility: VisibilityState,
    hover: HoverState,
    *,
    single_series_mode: bool,
    config: PresentationConfig,
) -> bool:
    if config.point_strategy == "off" or hover.active_index is None:
        return False
    if single_series_mode:
        return hover.hovered_code == series.code and visibility.is_visible(series)
    return visibility.is_visible(series)


def resolve_tooltip(
    catalog: SeriesCatalog,
    matrix: SampleMatrix,
    visibility: VisibilityState,
    hover: HoverState,
    *,
    single_series_mode: bool,
) -> Tooltip:
    if hover.active_index is None:
        return None
    index = hover.active_index
    time = matrix.time_at(index)
    label = format_time_label(time, matrix.steps_per_year)

    if single_series_mode:
        if hover.hovered_code is None:
            return None
        series = catalog.require(hover.hovered_code)
        return SingleSeriesTooltip(
            code=series.code,
            time=time,
            value=_value_or_zero(matrix, index, series.code),
            label=label,
            color=series.color,
        )

    visible = [s for s in catalog if visibility.is_visible(s)]
    if not visible:
        return None
    return MultiSeriesTooltip(
        time=time,
        label=label,
        entries=tuple(
            TooltipEntry(code=s.code, value=_value_or_zero(matrix, index, s.code), color=s.color) for s in visible
        ),
    )


def resolve_legend(catalog: SeriesCatalog, visibility: VisibilityState) -> tuple[LegendGroup, ...]:
    groups: list[LegendGroup] = []
    for group in SERIES_GROUPS:
        members = catalog.in_group(group)
        if not members:
            continue
        group_hidden = group in visibility.hidden_groups
        groups.append(
            LegendGroup(
                group=group,
                title=catalog.group_title(group),
                hidden=group_hidden,
                items=tuple(
                    LegendItem(
                        code=s.code,
                        color=s.color,
                        dashed=s.dashed,
                        hidden=group_hidden or s.code in visibility.hidden_codes,
                    )
                    for s in members
                ),
            )
        )
    return tuple(groups)


def resolve_presentation(
    catalog: SeriesCatalog,
    matrix: SampleMatrix,
    visibility: VisibilityState,
    hover: HoverState,
    *,
    single_series_mode: bool,
    config: PresentationConfig = DEFAULT_PRESENTATION_CONFIG,
) -> Presentation:
    radius = config.single_point_radius if single_series_mode else config.classic_point_radius
    attributes: list[SeriesRenderAttributes] = []
    for z, series in enumerate(z_ordered(catalog, hover.hovered_code)):
        attributes.append(
            SeriesRenderAttributes(
                code=series.code,
                color=series.color,
                opacity=line_opacity(
                    series,
                    visibility,
                    hover,
                    single_series_mode=single_series_mode,
                    faded_opacity=config.faded_opacity,
                ),
                stroke_width=config.hover_width if series.code == hover.hovered_code else config.base_width,
                dashed=series.dashed,
                dash_pattern=config.dash_pattern if series.dashed else None,
                hidden=not visibility.is_visible(series),
                show_active_point=show_active_point(
                    series, visibility, hover, single_series_mode=single_series_mode, config=config
                ),
                active_point_radius=radius,
                hit_width=config.hit_width,
                z_order=z,
            )
        )
    return Presentation(
        single_series_mode=single_series_mode,
        attributes=tuple(attributes),
        tooltip=resolve_tooltip(catalog, matrix, visibility, hover, single_series_mode=single_series_mode),
        legend=resolve_legend(catalog, visibility),
        active_index=hover.active_index,
        show_cursor=not single_series_mode and hover.active_index is not None,
    )


def _value_or_zero(matrix: SampleMatrix, index: int, code: str) -> int:
    value = matrix.value(index, code)
    if value is None:
        LOGGER.debug("no value for %s at sample %d; showing 0", code, index)
        return 0
    return value
