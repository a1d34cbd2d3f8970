from __future__ import annotations

import unittest

import numpy as np

from flightlines_core import (
    ActiveIndexError,
    CatalogConfig,
    ChartConfig,
    ChartController,
    ChartEvent,
    GeneratorConfig,
    PointerThrottle,
    Presentation,
    SingleSeriesTooltip,
    build_catalog,
    generate,
)


def _controller(**kwargs) -> ChartController:
    catalog = build_catalog()
    matrix = generate(catalog, GeneratorConfig(start_year=2020, end_year=2021), random_source=np.random.default_rng(4))
    return ChartController(catalog, matrix, **kwargs)


class PointerThrottleTests(unittest.TestCase):
    def test_rejects_negative_interval(self) -> None:
        with self.assertRaises(ValueError):
            PointerThrottle(min_interval_s=-0.001)

    def test_drops_updates_inside_interval(self) -> None:
        throttle = PointerThrottle(min_interval_s=0.016)
        self.assertTrue(throttle.accept(10.0))
        self.assertFalse(throttle.accept(10.010))
        self.assertTrue(throttle.accept(10.016))
        self.assertFalse(throttle.accept(10.020))
        self.assertTrue(throttle.accept(11.0))

    def test_uses_injected_clock(self) -> None:
        now = [5.0]
        throttle = PointerThrottle(min_interval_s=0.016, clock=lambda: now[0])
        self.assertTrue(throttle.accept())
        now[0] = 5.001
        self.assertFalse(throttle.accept())
        throttle.reset()
        self.assertTrue(throttle.accept())


class ChartControllerTests(unittest.TestCase):
    def test_pointer_moves_are_rate_limited(self) -> None:
        ctl = _controller()
        first = ctl.pointer_move(3, now=1.0)
        assert first is not None
        self.assertEqual(first.active_index, 3)
        self.assertIsNone(ctl.pointer_move(4, now=1.005))
        self.assertEqual(ctl.state.hover.active_index, 3)
        later = ctl.pointer_move(5, now=1.02)
        assert later is not None
        self.assertEqual(later.active_index, 5)

    def test_pointer_leave_is_never_dropped(self) -> None:
        ctl = _controller()
        ctl.pointer_move(3, now=1.0)
        out = ctl.pointer_leave()
        self.assertIsNone(out.active_index)
        self.assertIsNone(out.tooltip)
        self.assertIsNone(ctl.state.hover.active_index)

    def test_rejected_index_does_not_consume_rate_limit_slot(self) -> None:
        ctl = _controller()
        with self.assertRaises(ActiveIndexError):
            ctl.pointer_move(10_000, now=1.0)
        out = ctl.pointer_move(5, now=1.001)
        assert out is not None
        self.assertEqual(out.active_index, 5)

    def test_reset_hover_clears_series_and_index_in_one_update(self) -> None:
        ctl = _controller()
        ctl.series_enter("BA")
        ctl.pointer_move(4, now=0.0)
        seen: list[Presentation] = []
        ctl.subscribe(seen.append)
        out = ctl.reset_hover()
        self.assertEqual(len(seen), 1)
        self.assertIsNone(out.tooltip)
        self.assertIsNone(ctl.state.hover.hovered_code)
        self.assertIsNone(ctl.state.hover.active_index)

        ctl.series_enter("LX")
        ctl.dispatch(ChartEvent(event_type="reset_hover"))
        self.assertIsNone(ctl.state.hover.hovered_code)

    def test_single_series_tooltip_follows_hover_and_pointer(self) -> None:
        ctl = _controller(single_series_mode=True)
        ctl.series_enter("LX")
        out = ctl.pointer_move(5, now=0.0)
        assert out is not None
        self.assertEqual(out.tooltip, SingleSeriesTooltip(
            code="LX",
            time=ctl.matrix[5].time,
            value=ctl.matrix[5]["LX"],
            label=ctl.matrix[5].label,
            color=ctl.catalog.require("LX").color,
        ))
        self.assertIsNone(ctl.series_leave().tooltip)

    def test_mode_switch_leaves_state_and_matrix_alone(self) -> None:
        ctl = _controller()
        ctl.click_group("retired")
        ctl.click_series("BA")
        ctl.series_enter("LX")
        ctl.pointer_move(6, now=0.0)
        visibility = ctl.state.visibility
        hover = ctl.state.hover
        values = ctl.matrix.values.copy()

        classic = ctl.set_single_series_mode(False)
        single = ctl.set_single_series_mode(True)
        again = ctl.set_single_series_mode(True)

        self.assertIs(ctl.state.visibility, visibility)
        self.assertIs(ctl.state.hover, hover)
        self.assertTrue(np.array_equal(values, ctl.matrix.values))
        self.assertEqual(single, again)
        self.assertFalse(classic.single_series_mode)
        self.assertEqual(
            [a.hidden for a in classic.attributes],
            [a.hidden for a in single.attributes],
        )

    def test_listeners_receive_every_state_change(self) -> None:
        ctl = _controller()
        seen: list[Presentation] = []
        unsubscribe = ctl.subscribe(seen.append)
        ctl.click_series("LX")
        ctl.pointer_move(1, now=0.0)
        ctl.pointer_move(2, now=0.001)
        self.assertEqual(len(seen), 2)
        unsubscribe()
        ctl.pointer_leave()
        self.assertEqual(len(seen), 2)

    def test_dispatch_routes_events(self) -> None:
        ctl = _controller()
        ctl.dispatch(ChartEvent(event_type="series_enter", code="AF"))
        ctl.dispatch(ChartEvent(event_type="pointer_move", index=8, timestamp=0.0))
        ctl.dispatch(ChartEvent(event_type="click_group", group="primary"))
        ctl.dispatch(ChartEvent(event_type="click_series", code="CX"))
        self.assertEqual(ctl.state.hover.hovered_code, "AF")
        self.assertEqual(ctl.state.hover.active_index, 8)
        self.assertFalse(ctl.state.is_visible("LX"))
        self.assertFalse(ctl.state.is_visible("CX"))
        self.assertTrue(ctl.state.is_visible("LZ"))
        ctl.dispatch(ChartEvent(event_type="pointer_leave"))
        ctl.dispatch(ChartEvent(event_type="series_leave"))
        self.assertIsNone(ctl.state.hover.active_index)
        self.assertIsNone(ctl.state.hover.hovered_code)

    def test_dispatch_requires_event_fields(self) -> None:
        ctl = _controller()
        with self.assertRaises(ValueError):
            ctl.dispatch(ChartEvent(event_type="click_series"))
        with self.assertRaises(ValueError):
            ctl.dispatch(ChartEvent(event_type="zoom"))  # type: ignore[arg-type]

    def test_matrix_must_match_catalog(self) -> None:
        catalog = build_catalog()
        other = build_catalog(CatalogConfig(primary_codes=("LX",), retired_codes=("CX",)))
        matrix = generate(other, GeneratorConfig(start_year=2010, end_year=2010), random_source=np.random.default_rng(0))
        with self.assertRaises(ValueError):
            ChartController(catalog, matrix)

    def test_create_builds_catalog_and_matrix_from_config(self) -> None:
        ctl = ChartController.create(ChartConfig(), random_source=np.random.default_rng(1))
        self.assertEqual(len(ctl.catalog), 12)
        self.assertEqual(len(ctl.matrix), 180)
        self.assertTrue(ctl.single_series_mode)
        self.assertEqual(ctl.throttle.min_interval_s, 0.016)


if __name__ == "__main__":
    unittest.main()
