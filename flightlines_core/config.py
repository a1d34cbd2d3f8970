from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import re
import tomllib
from typing import Any, Literal, Mapping

from .errors import CatalogConfigError


SeriesGroup = Literal["primary", "retired"]
SERIES_GROUPS: tuple[SeriesGroup, ...] = ("primary", "retired")
PointStrategy = Literal["mode", "off"]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

PRIMARY_PALETTE = (
    "#1f77b4",
    "#2ca02c",
    "#ff7f0e",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)
RETIRED_PALETTE = (
    "#aec7e8",
    "#98df8a",
    "#ffbb78",
    "#ff9896",
    "#c5b0d5",
    "#c49c94",
    "#f7b6d3",
    "#c7c7c7",
    "#dbdb8d",
    "#9edae5",
)


@dataclass(frozen=True)
class CatalogConfig:
    primary_codes: tuple[str, ...] = ("LX", "BA", "AF", "LH", "KL", "IB")
    retired_codes: tuple[str, ...] = ("CX", "LZ", "C3", "UL", "AA", "DL")
    primary_palette: tuple[str, ...] = PRIMARY_PALETTE
    retired_palette: tuple[str, ...] = RETIRED_PALETTE
    primary_title: str = "Operating"
    retired_title: str = "Discontinued"
    name_template: str = "Airline {code}"

    def __post_init__(self) -> None:
        for key in ("primary_palette", "retired_palette"):
            for color in getattr(self, key):
                if not isinstance(color, str) or not _HEX_COLOR.match(color):
                    raise CatalogConfigError(f"`{key}` entries must be hex colors (#RRGGBB or #RRGGBBAA): {color!r}")
        for key in ("primary_codes", "retired_codes"):
            for code in getattr(self, key):
                if not isinstance(code, str) or not code.strip():
                    raise CatalogConfigError(f"`{key}` entries must be non-empty strings")

    def codes_for(self, group: SeriesGroup) -> tuple[str, ...]:
        return self.primary_codes if group == "primary" else self.retired_codes

    def palette_for(self, group: SeriesGroup) -> tuple[str, ...]:
        return self.primary_palette if group == "primary" else self.retired_palette

    def title_for(self, group: SeriesGroup) -> str:
        return self.primary_title if group == "primary" else self.retired_title


@dataclass(frozen=True)
class TrendWindow:
    """Multiplier applied to every step whose calendar (year, month) falls inside the window."""

    multiplier: float
    year: int
    first_month: int = 1
    last_month: int = 12
    label: str = ""

    def __post_init__(self) -> None:
        if self.multiplier <= 0:
            raise ValueError("multiplier must be > 0")
        if not 1 <= self.first_month <= self.last_month <= 12:
            raise ValueError("window months must satisfy 1 <= first_month <= last_month <= 12")

    def contains(self, year: int, month: int) -> bool:
        return year == self.year and self.first_month <= month <= self.last_month


@dataclass(frozen=True)
class DecayThreshold:
    """Compounding multiplier applied on every step once the year passes `after_year`."""

    after_year: int
    multiplier: float

    def __post_init__(self) -> None:
        if self.multiplier <= 0:
            raise ValueError("multiplier must be > 0")

    def applies(self, year: int) -> bool:
        return year > self.after_year


@dataclass(frozen=True)
class GroupProfile:
    initial_range: tuple[float, float]
    band: tuple[float, float]
    windows: tuple[TrendWindow, ...] = ()
    decays: tuple[DecayThreshold, ...] = ()

    def __post_init__(self) -> None:
        lo, hi = self.initial_range
        if lo < 0 or hi < lo:
            raise ValueError("initial_range must satisfy 0 <= low <= high")
        band_lo, band_hi = self.band
        if band_lo < 0 or band_hi < band_lo:
            raise ValueError("band must satisfy 0 <= min <= max")

    def multiplier_at(self, year: int, month: int) -> float:
        out = 1.0
        for window in self.windows:
            if window.contains(year, month):
                out *= window.multiplier
        for decay in self.decays:
            if decay.applies(year):
                out *= decay.multiplier
        return out


PRIMARY_PROFILE = GroupProfile(
    initial_range=(2000.0, 4000.0),
    band=(800.0, 5500.0),
    windows=(
        TrendWindow(multiplier=0.85, year=2020, first_month=3, last_month=6, label="shock"),
        TrendWindow(multiplier=1.02, year=2021, first_month=1, last_month=12, label="recovery"),
        TrendWindow(multiplier=1.02, year=2022, first_month=1, last_month=6, label="recovery"),
    ),
)
RETIRED_PROFILE = GroupProfile(
    initial_range=(1000.0, 2500.0),
    band=(100.0, 3500.0),
    decays=(
        DecayThreshold(after_year=2015, multiplier=0.997),
        DecayThreshold(after_year=2018, multiplier=0.995),
    ),
)


@dataclass(frozen=True)
class GeneratorConfig:
    start_year: int = 2010
    end_year: int = 2024
    steps_per_year: int = 12
    max_variation: float = 0.08
    primary: GroupProfile = PRIMARY_PROFILE
    retired: GroupProfile = RETIRED_PROFILE

    def __post_init__(self) -> None:
        if self.end_year < self.start_year:
            raise ValueError("end_year must be >= start_year")
        if self.steps_per_year < 1:
            raise ValueError("steps_per_year must be >= 1")
        if not 0.0 <= self.max_variation < 1.0:
            raise ValueError("max_variation must be in [0, 1)")

    @property
    def year_count(self) -> int:
        return self.end_year - self.start_year + 1

    @property
    def sample_count(self) -> int:
        return self.year_count * self.steps_per_year

    def profile(self, group: SeriesGroup) -> GroupProfile:
        return self.primary if group == "primary" else self.retired


@dataclass(frozen=True)
class PresentationConfig:
    faded_opacity: float = 0.08
    base_width: float = 2.0
    hover_width: float = 3.0
    hit_width: float = 20.0
    dash_pattern: tuple[int, int] = (5, 5)
    point_strategy: PointStrategy = "mode"
    single_point_radius: int = 6
    classic_point_radius: int = 4
    pointer_min_interval_s: float = 0.016

    def __post_init__(self) -> None:
        if not 0.0 < self.faded_opacity < 1.0:
            raise ValueError("faded_opacity must be strictly between 0 and 1")
        if self.base_width <= 0 or self.hover_width <= 0:
            raise ValueError("line widths must be > 0")
        if self.hover_width < self.base_width:
            raise ValueError("hover_width must be >= base_width")
        if self.point_strategy not in ("mode", "off"):
            raise ValueError(f"unsupported point_strategy: {self.point_strategy}")
        if self.single_point_radius < 0 or self.classic_point_radius < 0:
            raise ValueError("point radii must be >= 0")
        if self.pointer_min_interval_s < 0:
            raise ValueError("pointer_min_interval_s must be >= 0")


@dataclass(frozen=True)
class ChartConfig:
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    presentation: PresentationConfig = field(default_factory=PresentationConfig)


DEFAULT_CATALOG_CONFIG = CatalogConfig()
DEFAULT_GENERATOR_CONFIG = GeneratorConfig()
DEFAULT_PRESENTATION_CONFIG = PresentationConfig()


def load_chart_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return parse_chart_config(raw)


def parse_chart_config(raw: Mapping[str, Any]) -> ChartConfig:
    _reject_unknown(raw, {"catalog", "generator", "presentation"}, "config")
    try:
        catalog = _parse_catalog(_table(raw, "catalog"))
        generator = _parse_generator(_table(raw, "generator"))
        presentation = _parse_presentation(_table(raw, "presentation"))
    except CatalogConfigError:
        raise
    except KeyError as exc:
        raise CatalogConfigError(f"chart config missing required field: {exc.args[0]}") from exc
    except (TypeError, ValueError) as exc:
        raise CatalogConfigError(f"invalid chart config: {exc}") from exc
    return ChartConfig(catalog=catalog, generator=generator, presentation=presentation)


def _parse_catalog(raw: Mapping[str, Any]) -> CatalogConfig:
    base = DEFAULT_CATALOG_CONFIG
    _reject_unknown(raw, {f.name for f in fields(base)}, "catalog")
    updates: dict[str, Any] = {}
    for key, value in raw.items():
        if key.endswith("_codes") or key.endswith("_palette"):
            updates[key] = _coerce_string_tuple(value, key)
        else:
            updates[key] = str(value)
    return replace(base, **updates)


def _parse_generator(raw: Mapping[str, Any]) -> GeneratorConfig:
    base = DEFAULT_GENERATOR_CONFIG
    _reject_unknown(raw, {f.name for f in fields(base)}, "generator")
    updates: dict[str, Any] = {}
    for key in ("start_year", "end_year", "steps_per_year"):
        if key in raw:
            updates[key] = int(raw[key])
    if "max_variation" in raw:
        updates["max_variation"] = float(raw["max_variation"])
    for group in ("primary", "retired"):
        if group in raw:
            updates[group] = _parse_profile(_table(raw, group), getattr(base, group), group)
    return replace(base, **updates)


def _parse_profile(raw: Mapping[str, Any], base: GroupProfile, group: str) -> GroupProfile:
    _reject_unknown(raw, {f.name for f in fields(base)}, f"generator.{group}")
    updates: dict[str, Any] = {}
    for key in ("initial_range", "band"):
        if key in raw:
            updates[key] = _coerce_pair(raw[key], key)
    if "windows" in raw:
        updates["windows"] = tuple(
            TrendWindow(
                multiplier=float(item["multiplier"]),
                year=int(item["year"]),
                first_month=int(item.get("first_month", 1)),
                last_month=int(item.get("last_month", 12)),
                label=str(item.get("label", "")),
            )
            for item in _coerce_table_list(raw["windows"], "windows")
        )
    if "decays" in raw:
        updates["decays"] = tuple(
            DecayThreshold(after_year=int(item["after_year"]), multiplier=float(item["multiplier"]))
            for item in _coerce_table_list(raw["decays"], "decays")
        )
    return replace(base, **updates)


def _parse_presentation(raw: Mapping[str, Any]) -> PresentationConfig:
    base = DEFAULT_PRESENTATION_CONFIG
    _reject_unknown(raw, {f.name for f in fields(base)}, "presentation")
    updates: dict[str, Any] = {}
    for key, value in raw.items():
        if key in ("single_point_radius", "classic_point_radius"):
            updates[key] = int(value)
        elif key == "dash_pattern":
            on, off = _coerce_pair(value, key)
            updates[key] = (int(on), int(off))
        elif key == "point_strategy":
            updates[key] = str(value)
        else:
            updates[key] = float(value)
    return replace(base, **updates)


def _table(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = raw.get(key, {})
    if not isinstance(value, Mapping):
        raise CatalogConfigError(f"`{key}` must be a table")
    return value


def _reject_unknown(raw: Mapping[str, Any], allowed: set[str], section: str) -> None:
    unknown = sorted(set(raw) - allowed)
    if unknown:
        raise CatalogConfigError(f"unknown keys in [{section}]: {', '.join(unknown)}")


def _coerce_string_tuple(value: object, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise CatalogConfigError(f"`{field_name}` must be a list of strings")
    out = []
    for item in value:
        if not isinstance(item, str):
            raise CatalogConfigError(f"`{field_name}` must be a list of strings")
        out.append(item)
    return tuple(out)


def _coerce_pair(value: object, field_name: str) -> tuple[float, float]:
    if not isinstance(value, list) or len(value) != 2:
        raise CatalogConfigError(f"`{field_name}` must be a two-element list")
    return (float(value[0]), float(value[1]))


def _coerce_table_list(value: object, field_name: str) -> list[Mapping[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        raise CatalogConfigError(f"`{field_name}` must be an array of tables")
    return value
