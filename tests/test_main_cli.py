from __future__ import annotations

import contextlib
import io
import json
from pathlib import Path
import tempfile
import unittest

from PIL import Image

from main import main


class MainCliTests(unittest.TestCase):
    def test_inspect_prints_resolved_presentation(self) -> None:
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            rc = main(["inspect", "--seed", "7", "--hover", "LX", "--active-index", "12", "--hide-group", "retired"])
        self.assertEqual(rc, 0)
        payload = json.loads(buf.getvalue())
        self.assertTrue(payload["single_series_mode"])
        self.assertEqual(payload["active_index"], 12)
        self.assertEqual(payload["tooltip"]["kind"], "single")
        self.assertEqual(payload["tooltip"]["code"], "LX")
        self.assertEqual(payload["tooltip"]["label"], "Jan 2011")
        hidden = sorted(a["code"] for a in payload["attributes"] if a["hidden"])
        self.assertEqual(hidden, ["AA", "C3", "CX", "DL", "LZ", "UL"])
        self.assertEqual(payload["attributes"][-1]["code"], "LX")

    def test_inspect_classic_mode_lists_every_visible_series(self) -> None:
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            main(["inspect", "--seed", "7", "--mode", "classic", "--active-index", "0", "--hide", "BA"])
        payload = json.loads(buf.getvalue())
        self.assertEqual(payload["tooltip"]["kind"], "multi")
        self.assertEqual(len(payload["tooltip"]["entries"]), 11)
        self.assertTrue(payload["show_cursor"])

    def test_repeated_hide_flags_keep_series_hidden(self) -> None:
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            main(["inspect", "--seed", "3", "--hide", "BA", "--hide", "BA", "--hide-group", "retired", "--hide-group", "retired"])
        payload = json.loads(buf.getvalue())
        hidden = {a["code"] for a in payload["attributes"] if a["hidden"]}
        self.assertEqual(hidden, {"BA", "CX", "LZ", "C3", "UL", "AA", "DL"})

    def test_render_writes_png(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "chart.png"
            with contextlib.redirect_stdout(io.StringIO()):
                rc = main(["render", "--seed", "1", "--out", str(out), "--width", "400", "--height", "260"])
            self.assertEqual(rc, 0)
            with Image.open(out) as img:
                self.assertEqual(img.size, (400, 260))

    def test_render_reads_toml_config(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            config = Path(td) / "chart.toml"
            config.write_text('[generator]\nstart_year = 2020\nend_year = 2021\n', encoding="utf-8")
            buf = io.StringIO()
            with contextlib.redirect_stdout(buf):
                main(["inspect", "--config", str(config), "--seed", "2", "--hover", "CX", "--active-index", "23"])
            payload = json.loads(buf.getvalue())
        self.assertEqual(payload["tooltip"]["label"], "Dec 2021")


if __name__ == "__main__":
    unittest.main()
