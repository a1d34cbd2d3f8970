from flightlines_core.catalog import Series, SeriesCatalog, build_catalog
from flightlines_core.config import (
    CatalogConfig,
    ChartConfig,
    DecayThreshold,
    GeneratorConfig,
    GroupProfile,
    PresentationConfig,
    TrendWindow,
    load_chart_config,
)
from flightlines_core.controller import ChartController, ChartEvent
from flightlines_core.errors import (
    ActiveIndexError,
    CatalogConfigError,
    ChartError,
    UnknownGroupError,
    UnknownSeriesError,
)
from flightlines_core.generator import Sample, SampleMatrix, SeriesGenerator, StepTrace, generate
from flightlines_core.interaction import HoverState, InteractionState, VisibilityState
from flightlines_core.pointer import PointerThrottle
from flightlines_core.presentation import (
    LegendGroup,
    LegendItem,
    MultiSeriesTooltip,
    Presentation,
    SeriesRenderAttributes,
    SingleSeriesTooltip,
    TooltipEntry,
    resolve_presentation,
)

__all__ = [
    "ActiveIndexError",
    "CatalogConfig",
    "CatalogConfigError",
    "ChartConfig",
    "ChartController",
    "ChartError",
    "ChartEvent",
    "DecayThreshold",
    "GeneratorConfig",
    "GroupProfile",
    "HoverState",
    "InteractionState",
    "LegendGroup",
    "LegendItem",
    "MultiSeriesTooltip",
    "PointerThrottle",
    "Presentation",
    "PresentationConfig",
    "Sample",
    "SampleMatrix",
    "Series",
    "SeriesCatalog",
    "SeriesGenerator",
    "SeriesRenderAttributes",
    "SingleSeriesTooltip",
    "StepTrace",
    "TooltipEntry",
    "TrendWindow",
    "UnknownGroupError",
    "UnknownSeriesError",
    "VisibilityState",
    "build_catalog",
    "generate",
    "load_chart_config",
    "resolve_presentation",
]
