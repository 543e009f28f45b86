from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from plotti.colors import VIRIDIS, palette_by_id
from plotti.config import load_style_context, style_context_from_mapping
from plotti.style import Mode


STYLE_TOML = """
[style]
colors = ["red", "#00ff00", [0, 0, 255]]
markers = [20, 21, 22]
marker_sizes = [1.5]
line_widths = [3]
offset = 1
mode = "presentation"
font = "DejaVu Sans"
palette = 112
invert_palette = true
"""


class StyleConfigTests(unittest.TestCase):
    def test_load_style_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "style.toml"
            path.write_text(STYLE_TOML, encoding="utf-8")
            ctx = load_style_context(path)
        self.assertTrue(ctx.styles_enabled)
        self.assertEqual(ctx.table.colors, [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255)])
        self.assertEqual(ctx.table.markers, [20, 21, 22])
        self.assertEqual(ctx.table.marker_sizes, [1.5])
        self.assertEqual(ctx.table.line_widths, [3.0])
        self.assertEqual(ctx.table.offset, 1)
        self.assertIs(ctx.mode, Mode.PRESENTATION)
        self.assertEqual(ctx.label_size, 40.0)
        self.assertEqual(ctx.font, "DejaVu Sans")
        self.assertEqual(ctx.palette, list(reversed(palette_by_id(VIRIDIS))))

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_style_context("/nonexistent/style.toml")

    def test_empty_mapping_gives_defaults(self) -> None:
        ctx = style_context_from_mapping({})
        self.assertFalse(ctx.styles_enabled)
        self.assertIs(ctx.mode, Mode.AUTO)

    def test_unknown_keys_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            style_context_from_mapping({"style": {"colour": ["red"]}})

    def test_malformed_values_are_rejected(self) -> None:
        bad = [
            {"style": {"markers": "20"}},
            {"style": {"markers": [20, "x"]}},
            {"style": {"offset": 1.5}},
            {"style": {"mode": "poster"}},
            {"style": {"label_size": -1}},
            {"style": {"font": 3}},
            {"style": []},
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    style_context_from_mapping(raw)

    def test_unknown_palette_is_rejected(self) -> None:
        with self.assertLogs("plotti.style", level="ERROR"):
            with self.assertRaises(ValueError):
                style_context_from_mapping({"style": {"palette": 4242}})


if __name__ == "__main__":
    unittest.main()
