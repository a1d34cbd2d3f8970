from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from flightlines_core import CatalogConfigError, GeneratorConfig, TrendWindow, load_chart_config
from flightlines_core.config import parse_chart_config
from flightlines_core.timeaxis import format_time_label, month_of, split_time, time_for


_TOML = """
[catalog]
primary_codes = ["LX", "BA"]
retired_codes = ["CX"]
retired_title = "Gone"

[generator]
start_year = 2018
end_year = 2020
max_variation = 0.05

[generator.primary]
band = [500, 6000]
windows = [
  { label = "strike", multiplier = 0.9, year = 2019, first_month = 2, last_month = 3 },
]

[generator.retired]
decays = [{ after_year = 2018, multiplier = 0.99 }]

[presentation]
faded_opacity = 0.15
point_strategy = "off"
dash_pattern = [4, 2]
"""


class ChartConfigTests(unittest.TestCase):
    def _write(self, root: Path, text: str) -> Path:
        path = root / "chart.toml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_load_chart_config_overrides_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = load_chart_config(self._write(Path(td), _TOML))
        self.assertEqual(config.catalog.primary_codes, ("LX", "BA"))
        self.assertEqual(config.catalog.retired_title, "Gone")
        self.assertEqual(config.catalog.primary_title, "Operating")
        self.assertEqual(config.generator.sample_count, 36)
        self.assertEqual(config.generator.max_variation, 0.05)
        self.assertEqual(config.generator.primary.band, (500.0, 6000.0))
        self.assertEqual(config.generator.primary.initial_range, (2000.0, 4000.0))
        self.assertEqual(
            config.generator.primary.windows,
            (TrendWindow(multiplier=0.9, year=2019, first_month=2, last_month=3, label="strike"),),
        )
        self.assertEqual(config.generator.retired.decays[0].after_year, 2018)
        self.assertEqual(config.generator.retired.band, (100.0, 3500.0))
        self.assertEqual(config.presentation.faded_opacity, 0.15)
        self.assertEqual(config.presentation.point_strategy, "off")
        self.assertEqual(config.presentation.dash_pattern, (4, 2))

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_chart_config(Path(td) / "missing.toml")

    def test_unknown_keys_are_rejected(self) -> None:
        with self.assertRaises(CatalogConfigError):
            parse_chart_config({"renderer": {}})
        with self.assertRaises(CatalogConfigError):
            parse_chart_config({"presentation": {"glow": 1.0}})

    def test_invalid_values_surface_as_config_errors(self) -> None:
        with self.assertRaises(CatalogConfigError):
            parse_chart_config({"generator": {"primary": {"band": [900, 100]}}})
        with self.assertRaises(CatalogConfigError):
            parse_chart_config({"presentation": {"faded_opacity": 0}})
        with self.assertRaises(CatalogConfigError):
            parse_chart_config({"generator": {"retired": {"decays": [{"multiplier": 0.9}]}}})
        with self.assertRaises(CatalogConfigError):
            parse_chart_config({"catalog": {"primary_codes": "LX"}})

    def test_generator_config_validation(self) -> None:
        with self.assertRaises(ValueError):
            GeneratorConfig(start_year=2020, end_year=2019)
        with self.assertRaises(ValueError):
            GeneratorConfig(max_variation=1.0)
        with self.assertRaises(ValueError):
            TrendWindow(multiplier=0.5, year=2010, first_month=4, last_month=13)
        with self.assertRaises(ValueError):
            TrendWindow(multiplier=0.5, year=2010, first_month=6, last_month=3)
        # Windows are calendar months, so any step size works with the default profiles.
        self.assertEqual(GeneratorConfig(steps_per_year=4).sample_count, 60)
        self.assertEqual(GeneratorConfig(steps_per_year=52).sample_count, 780)

    def test_group_profile_multiplier_compounds(self) -> None:
        profile = GeneratorConfig().retired
        self.assertEqual(profile.multiplier_at(2015, 6), 1.0)
        self.assertAlmostEqual(profile.multiplier_at(2016, 1), 0.997)
        self.assertAlmostEqual(profile.multiplier_at(2019, 1), 0.997 * 0.995)
        primary = GeneratorConfig().primary
        self.assertAlmostEqual(primary.multiplier_at(2020, 3), 0.85)
        self.assertEqual(primary.multiplier_at(2020, 7), 1.0)
        self.assertAlmostEqual(primary.multiplier_at(2022, 6), 1.02)
        self.assertEqual(primary.multiplier_at(2022, 7), 1.0)


class TimeAxisTests(unittest.TestCase):
    def test_time_for_and_split_round_trip_edges(self) -> None:
        self.assertEqual(time_for(2020, 1), 2020.0)
        self.assertEqual(time_for(2020, 7), 2020.5)
        self.assertEqual(split_time(2010 + 11 / 12), (2010, 12))
        self.assertEqual(split_time(2020.999999999), (2021, 1))

    def test_format_time_label(self) -> None:
        self.assertEqual(format_time_label(2020.5), "Jul 2020")
        self.assertEqual(format_time_label(2024 + 11 / 12), "Dec 2024")
        self.assertEqual(format_time_label(2020.25, steps_per_year=4), "2020 P2")

    def test_month_of_any_step_size(self) -> None:
        self.assertEqual(month_of(time_for(2020, 5, 24)), 3)
        self.assertEqual(month_of(time_for(2020, 12, 24)), 6)
        self.assertEqual(month_of(time_for(2020, 13, 24)), 7)
        self.assertEqual([month_of(time_for(2020, p, 4)) for p in range(1, 5)], [1, 4, 7, 10])
        self.assertEqual(month_of(2020.999999999), 12)

    def test_time_for_rejects_bad_period(self) -> None:
        with self.assertRaises(ValueError):
            time_for(2020, 13)


if __name__ == "__main__":
    unittest.main()
