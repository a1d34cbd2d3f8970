from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
import logging
import math
from types import MappingProxyType
from typing import Protocol

import numpy as np

from .catalog import SeriesCatalog
from .config import DEFAULT_GENERATOR_CONFIG, GeneratorConfig
from .errors import ActiveIndexError, UnknownSeriesError
from .timeaxis import format_time_label, month_of, time_for

LOGGER = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with a uniform `random()` in [0, 1): numpy Generator, random.Random, test stubs."""

    def random(self) -> float:
        ...


@dataclass(frozen=True)
class Sample:
    index: int
    time: float
    values: Mapping[str, int]
    steps_per_year: int = 12

    def __getitem__(self, code: str) -> int:
        return self.values[code]

    def get(self, code: str, default: int | None = None) -> int | None:
        return self.values.get(code, default)

    @property
    def label(self) -> str:
        return format_time_label(self.time, self.steps_per_year)


class SampleMatrix:
    """Read-only time x series value matrix produced by a single generation pass."""

    def __init__(
        self,
        codes: Sequence[str],
        times: np.ndarray,
        values: np.ndarray,
        *,
        steps_per_year: int = 12,
    ) -> None:
        times_arr = np.array(times, dtype=np.float64, copy=True)
        values_arr = np.array(values, dtype=np.int64, copy=True)
        self._codes = tuple(codes)
        if times_arr.ndim != 1:
            raise ValueError("times must be 1-D")
        if values_arr.shape != (times_arr.size, len(self._codes)):
            raise ValueError(
                f"values shape {values_arr.shape} does not match ({times_arr.size}, {len(self._codes)})"
            )
        if times_arr.size > 1 and not np.all(np.diff(times_arr) > 0):
            raise ValueError("sample times must be strictly increasing")
        if np.any(values_arr < 0):
            raise ValueError("sample values must be non-negative")
        times_arr.flags.writeable = False
        values_arr.flags.writeable = False
        self._times = times_arr
        self._values = values_arr
        self._columns = {code: i for i, code in enumerate(self._codes)}
        self.steps_per_year = int(steps_per_year)

    def __len__(self) -> int:
        return int(self._times.size)

    def __getitem__(self, index: int) -> Sample:
        i = self._check_index(index)
        row = self._values[i]
        values = MappingProxyType({code: int(row[col]) for code, col in self._columns.items()})
        return Sample(index=i, time=float(self._times[i]), values=values, steps_per_year=self.steps_per_year)

    def __iter__(self) -> Iterator[Sample]:
        for i in range(len(self)):
            yield self[i]

    @property
    def codes(self) -> tuple[str, ...]:
        return self._codes

    @property
    def times(self) -> np.ndarray:
        return self._times

    @property
    def values(self) -> np.ndarray:
        return self._values

    def time_at(self, index: int) -> float:
        return float(self._times[self._check_index(index)])

    def value(self, index: int, code: str) -> int | None:
        col = self._columns.get(code)
        if col is None:
            return None
        return int(self._values[self._check_index(index), col])

    def series_values(self, code: str) -> np.ndarray:
        col = self._columns.get(code)
        if col is None:
            raise UnknownSeriesError(code)
        return self._values[:, col]

    def _check_index(self, index: int) -> int:
        i = int(index)
        if i < 0 or i >= len(self):
            raise ActiveIndexError(f"sample index {i} outside [0, {len(self)})")
        return i


@dataclass(frozen=True)
class StepTrace:
    """One series' path through a single generation step."""

    step: int
    code: str
    previous: float
    perturbed: float
    adjusted: float
    clamped: bool
    value: int


class SeriesGenerator:
    def __init__(
        self,
        catalog: SeriesCatalog,
        config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
        *,
        random_source: RandomSource | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config
        self._rng: RandomSource = np.random.default_rng() if random_source is None else random_source

    def generate(self, *, trace: list[StepTrace] | None = None) -> SampleMatrix:
        cfg = self.config
        profiles = [cfg.profile(series.group) for series in self.catalog]
        n_series = len(profiles)
        n_steps = cfg.sample_count

        last = np.empty(n_series, dtype=np.float64)
        for j, profile in enumerate(profiles):
            low, high = profile.initial_range
            last[j] = low + float(self._rng.random()) * (high - low)

        times = np.empty(n_steps, dtype=np.float64)
        values = np.empty((n_steps, n_series), dtype=np.int64)
        codes = self.catalog.codes
        step = 0
        for year in range(cfg.start_year, cfg.end_year + 1):
            for period in range(1, cfg.steps_per_year + 1):
                times[step] = time_for(year, period, cfg.steps_per_year)
                month = month_of(times[step])
                # Every series advances within the same step so date windows line up across series.
                for j, profile in enumerate(profiles):
                    previous = float(last[j])
                    delta = (float(self._rng.random()) - 0.5) * 2.0 * cfg.max_variation * previous
                    perturbed = previous + delta
                    adjusted = perturbed * profile.multiplier_at(year, month)
                    band_low, band_high = profile.band
                    bounded = min(band_high, max(band_low, adjusted))
                    value = _round_into_band(bounded, band_low, band_high)
                    last[j] = value
                    values[step, j] = value
                    if trace is not None:
                        trace.append(
                            StepTrace(
                                step=step,
                                code=codes[j],
                                previous=previous,
                                perturbed=perturbed,
                                adjusted=adjusted,
                                clamped=bounded != adjusted,
                                value=value,
                            )
                        )
                step += 1

        LOGGER.debug(
            "generated %d samples for %d series (%d-%d)", n_steps, n_series, cfg.start_year, cfg.end_year
        )
        return SampleMatrix(codes, times, values, steps_per_year=cfg.steps_per_year)


def generate(
    catalog: SeriesCatalog,
    config: GeneratorConfig = DEFAULT_GENERATOR_CONFIG,
    *,
    random_source: RandomSource | None = None,
    trace: list[StepTrace] | None = None,
) -> SampleMatrix:
    return SeriesGenerator(catalog, config, random_source=random_source).generate(trace=trace)


def _round_into_band(value: float, low: float, high: float) -> int:
    # Half-up rounding; values are non-negative.
    out = int(math.floor(value + 0.5))
    if out < low:
        out = int(math.ceil(low))
    if out > high:
        out = int(math.floor(high))
    return out
