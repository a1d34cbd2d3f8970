from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Literal, Optional

from .catalog import SeriesCatalog, build_catalog
from .config import DEFAULT_PRESENTATION_CONFIG, ChartConfig, PresentationConfig
from .generator import RandomSource, SampleMatrix, generate
from .interaction import InteractionState
from .pointer import PointerThrottle
from .presentation import Presentation, resolve_presentation

LOGGER = logging.getLogger(__name__)

ChartEventType = Literal[
    "pointer_move",
    "pointer_leave",
    "reset_hover",
    "series_enter",
    "series_leave",
    "click_series",
    "click_group",
]

PresentationListener = Callable[[Presentation], None]


@dataclass(frozen=True)
class ChartEvent:
    """Normalized pointer/click event as reported by a rendering backend."""

    event_type: ChartEventType
    index: Optional[int] = None
    code: Optional[str] = None
    group: Optional[str] = None
    timestamp: Optional[float] = None


class ChartController:
    def __init__(
        self,
        catalog: SeriesCatalog,
        matrix: SampleMatrix,
        *,
        single_series_mode: bool = True,
        config: PresentationConfig = DEFAULT_PRESENTATION_CONFIG,
        throttle: PointerThrottle | None = None,
    ) -> None:
        if matrix.codes != catalog.codes:
            raise ValueError("sample matrix columns do not match catalog order")
        self.catalog = catalog
        self.matrix = matrix
        self.config = config
        self.state = InteractionState(catalog, len(matrix))
        self.throttle = throttle or PointerThrottle(min_interval_s=config.pointer_min_interval_s)
        self._single_series_mode = bool(single_series_mode)
        self._listeners: list[PresentationListener] = []

    @classmethod
    def create(
        cls,
        config: ChartConfig | None = None,
        *,
        single_series_mode: bool = True,
        random_source: RandomSource | None = None,
    ) -> "ChartController":
        config = config or ChartConfig()
        catalog = build_catalog(config.catalog)
        matrix = generate(catalog, config.generator, random_source=random_source)
        return cls(catalog, matrix, single_series_mode=single_series_mode, config=config.presentation)

    @property
    def single_series_mode(self) -> bool:
        return self._single_series_mode

    def subscribe(self, listener: PresentationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def presentation(self) -> Presentation:
        return resolve_presentation(
            self.catalog,
            self.matrix,
            self.state.visibility,
            self.state.hover,
            single_series_mode=self._single_series_mode,
            config=self.config,
        )

    def set_single_series_mode(self, enabled: bool) -> Presentation:
        self._single_series_mode = bool(enabled)
        return self._publish()

    def pointer_move(self, index: int | None, now: float | None = None) -> Presentation | None:
        # A rejected index must not use up the rate-limit slot.
        index = self.state.check_active_index(index)
        if not self.throttle.accept(now):
            LOGGER.debug("dropped pointer move to %s (rate limited)", index)
            return None
        if index is None:
            return None
        self.state.set_active_index(index)
        return self._publish()

    def pointer_leave(self) -> Presentation:
        self.state.set_active_index(None)
        return self._publish()

    def reset_hover(self) -> Presentation:
        """Pointer left the widget: clear both the hovered series and the active index."""

        self.state.reset_hover()
        return self._publish()

    def series_enter(self, code: str) -> Presentation:
        self.state.set_hover(code)
        return self._publish()

    def series_leave(self) -> Presentation:
        self.state.set_hover(None)
        return self._publish()

    def click_series(self, code: str) -> Presentation:
        self.state.toggle_series(code)
        return self._publish()

    def click_group(self, group: str) -> Presentation:
        self.state.toggle_group(group)
        return self._publish()

    def dispatch(self, event: ChartEvent) -> Presentation | None:
        kind = event.event_type
        if kind == "pointer_move":
            return self.pointer_move(event.index, now=event.timestamp)
        if kind == "pointer_leave":
            return self.pointer_leave()
        if kind == "reset_hover":
            return self.reset_hover()
        if kind == "series_enter":
            return self.series_enter(_require_field(event.code, "code", kind))
        if kind == "series_leave":
            return self.series_leave()
        if kind == "click_series":
            return self.click_series(_require_field(event.code, "code", kind))
        if kind == "click_group":
            return self.click_group(_require_field(event.group, "group", kind))
        raise ValueError(f"unsupported chart event: {kind}")

    def _publish(self) -> Presentation:
        out = self.presentation()
        for listener in list(self._listeners):
            listener(out)
        return out


def _require_field(value: str | None, name: str, kind: str) -> str:
    if value is None:
        raise ValueError(f"{kind} event requires `{name}`")
    return value
