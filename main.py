from __future__ import annotations

import argparse
import dataclasses
import json
import logging
from pathlib import Path
import sys

import numpy as np

from flightlines_core import ChartConfig, ChartController, load_chart_config
from flightlines_core.presentation import MultiSeriesTooltip, Presentation
from flightlines_plot import render_chart, save_png


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="flightlines")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render the chart in a given interaction state to a PNG file.")
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--width", type=int, default=960)
    render.add_argument("--height", type=int, default=540)
    _add_state_arguments(render)

    inspect = sub.add_parser("inspect", help="Print the resolved presentation (attributes, tooltip, legend) as JSON.")
    _add_state_arguments(inspect)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    config = load_chart_config(args.config) if args.config is not None else ChartConfig()
    random_source = np.random.default_rng(args.seed) if args.seed is not None else None
    controller = ChartController.create(
        config,
        single_series_mode=args.mode == "single",
        random_source=random_source,
    )
    presentation = _apply_state(controller, args)

    if args.command == "render":
        frame = render_chart(controller.matrix, presentation, width=args.width, height=args.height)
        out = save_png(frame, args.out)
        print(f"wrote {out} ({args.width}x{args.height}, {len(controller.matrix)} samples)")
        return 0

    if args.command == "inspect":
        json.dump(_presentation_payload(presentation), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    return 2


def _add_state_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="TOML chart configuration.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible sample generation.")
    parser.add_argument("--mode", choices=["single", "classic"], default="single")
    parser.add_argument("--hover", default=None, help="Series code under the pointer.")
    parser.add_argument("--active-index", type=int, default=None, help="Sample index under the pointer.")
    parser.add_argument("--hide", action="append", default=[], help="Hide a series by code (repeatable).")
    parser.add_argument("--hide-group", action="append", default=[], choices=["primary", "retired"])
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")


def _apply_state(controller: ChartController, args: argparse.Namespace) -> Presentation:
    # Flags set the hidden state; repeating one must not toggle it back.
    for group in dict.fromkeys(args.hide_group):
        controller.click_group(group)
    for code in dict.fromkeys(args.hide):
        controller.click_series(code)
    if args.hover is not None:
        controller.series_enter(args.hover)
    if args.active_index is not None:
        controller.pointer_move(args.active_index)
    return controller.presentation()


def _presentation_payload(presentation: Presentation) -> dict[str, object]:
    payload = dataclasses.asdict(presentation)
    tooltip = presentation.tooltip
    if tooltip is not None:
        payload["tooltip"]["kind"] = "multi" if isinstance(tooltip, MultiSeriesTooltip) else "single"
    return payload


if __name__ == "__main__":
    raise SystemExit(main())
