from __future__ import annotations

import unittest

from plotti.colors import (
    BIRD,
    BLACK,
    BLUE,
    RED,
    YELLOW,
    Color,
    ColorGradient,
    alice_logo,
    known_palettes,
    lookup_palette,
    palette_by_id,
    parse_color,
    purple_to_yellow,
    rainbow,
)
from plotti.errors import PaletteError, PlotDataError


class ParseColorTests(unittest.TestCase):
    def test_hex_with_and_without_alpha(self) -> None:
        self.assertEqual(parse_color("#ff8000"), (255, 128, 0, 255))
        self.assertEqual(parse_color("#ff800080"), (255, 128, 0, 128))

    def test_names_are_case_insensitive(self) -> None:
        self.assertEqual(parse_color("Red"), (255, 0, 0, 255))
        self.assertEqual(parse_color("alice_blue"), (3, 10, 140, 255))

    def test_tuples_and_color_objects(self) -> None:
        self.assertEqual(parse_color((1, 2, 3)), (1, 2, 3, 255))
        self.assertEqual(parse_color([1, 2, 3, 4]), (1, 2, 3, 4))
        self.assertEqual(parse_color(YELLOW), (255, 255, 0, 255))

    def test_invalid_values_raise(self) -> None:
        for value in ("not-a-color", "#12345", (0, 0, 300), 42):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_color(value)

    def test_module_tables_are_built_at_import(self) -> None:
        self.assertEqual(parse_color("blue"), BLUE.rgba())
        self.assertEqual(BLUE.rgba(0.5), (0, 0, 255, 128))
        self.assertEqual(Color(2.0, -1.0, 0.5).rgba(), (255, 0, 128, 255))
        self.assertEqual(len(alice_logo), 100)
        self.assertEqual(purple_to_yellow.colors()[-1], YELLOW.rgba())


class ColorGradientTests(unittest.TestCase):
    def test_endpoints_are_hit_exactly(self) -> None:
        gradient = ColorGradient(5, [RED, BLUE])
        colors = gradient.colors()
        self.assertEqual(len(gradient), 5)
        self.assertEqual(gradient.n_points, 5)
        self.assertEqual(colors[0], RED.rgba())
        self.assertEqual(colors[-1], BLUE.rgba())
        self.assertEqual(colors[2], (128, 0, 128, 255))

    def test_stops_place_the_endpoints(self) -> None:
        gradient = ColorGradient(3, [Color(0, 0, 0), Color(1, 1, 1), Color(1, 1, 1)], stops=[0.0, 0.25, 1.0])
        self.assertEqual(gradient.colors()[1], (255, 255, 255, 255))

    def test_alpha_applies_to_every_color(self) -> None:
        gradient = ColorGradient(4, [RED, BLUE], alpha=0.5)
        self.assertTrue(all(c[3] == 128 for c in gradient.colors()))

    def test_mismatched_stops_abort_with_a_diagnostic(self) -> None:
        with self.assertLogs("plotti.colors", level="ERROR"):
            with self.assertRaises(PaletteError):
                ColorGradient(10, [RED, BLUE], stops=[0.0, 0.5, 1.0])

    def test_single_endpoint_is_rejected(self) -> None:
        with self.assertRaises(PaletteError):
            ColorGradient(10, [RED])

    def test_palette_error_is_a_data_error(self) -> None:
        self.assertTrue(issubclass(PaletteError, PlotDataError))

    def test_predefined_gradients(self) -> None:
        self.assertEqual(len(rainbow), 20)
        self.assertEqual(len(alice_logo), 100)
        self.assertEqual(len(purple_to_yellow), 100)
        self.assertEqual(rainbow.colors()[0], BLUE.rgba())


class PaletteTests(unittest.TestCase):
    def test_known_palettes(self) -> None:
        self.assertEqual(known_palettes(), [51, 53, 55, 57, 112])
        for palette_id in known_palettes():
            with self.subTest(palette_id=palette_id):
                self.assertEqual(len(palette_by_id(palette_id)), 255)

    def test_unknown_palette_is_none(self) -> None:
        self.assertIsNone(palette_by_id(1))

    def test_lookup_clamps_fraction(self) -> None:
        palette = palette_by_id(BIRD)
        self.assertEqual(lookup_palette(palette, -1.0), palette[0])
        self.assertEqual(lookup_palette(palette, 2.0), palette[-1])
        self.assertEqual(lookup_palette([], 0.5), BLACK)


if __name__ == "__main__":
    unittest.main()
