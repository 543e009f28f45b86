from __future__ import annotations

import unittest

from plotti.colors import RED
from plotti.legend import legend_from_collection, legend_from_styles, legend_from_text, set_position
from plotti.primitives import Graph, Histogram1D, Legend


def _collection() -> list:
    return [
        Histogram1D("h1", "", 4, 0.0, 4.0),
        Graph("g1", [1.0, 2.0], [1.0, 2.0]),
        Histogram1D("h2", "", 4, 0.0, 4.0),
    ]


class LegendFromCollectionTests(unittest.TestCase):
    def test_rows_follow_collection_order(self) -> None:
        collection = _collection()
        legend = legend_from_collection(collection, "first\nsecond\nthird", "l p lp")
        self.assertEqual([e.label for e in legend.entries], ["first", "second", "third"])
        self.assertEqual([e.option for e in legend.entries], ["l", "p", "lp"])
        self.assertEqual([e.obj for e in legend.entries], collection[:3])

    def test_legend_is_appended_when_attached(self) -> None:
        collection = _collection()
        legend = legend_from_collection(collection, ["a", "b", "c"], ["l", "l", "l"])
        self.assertIs(collection[-1], legend)
        self.assertEqual(len(collection), 4)

    def test_detached_legend_leaves_collection_alone(self) -> None:
        collection = _collection()
        legend_from_collection(collection, "a\nb\nc", "l l l", attach=False)
        self.assertEqual(len(collection), 3)

    def test_existing_legends_and_missing_entries_are_skipped(self) -> None:
        collection = _collection()
        collection.insert(1, Legend())
        collection.insert(2, None)
        legend = legend_from_collection(collection, "a\nb", "l", title="Header", attach=False)
        self.assertEqual([e.label for e in legend.entries], ["Header", "a", "b", ""])
        self.assertIsNone(legend.entries[0].obj)
        self.assertEqual(legend.entries[2].option, "")

    def test_missing_collection_is_reported(self) -> None:
        with self.assertLogs("plotti.legend", level="ERROR"):
            self.assertIsNone(legend_from_collection(None, "a", "l"))


class OtherLegendBuilderTests(unittest.TestCase):
    def test_text_legend_drops_trailing_empty_line(self) -> None:
        legend = legend_from_text("ALICE Preliminary\npp 13 TeV\n")
        self.assertEqual([e.label for e in legend.entries], ["ALICE Preliminary", "pp 13 TeV"])
        self.assertTrue(all(e.obj is None for e in legend.entries))

    def test_style_legend_owns_its_swatches(self) -> None:
        legend = legend_from_styles("red 20 1.5\n#0000ff 21 2", "data\nmodel", "p l")
        self.assertEqual(legend.n_rows, 2)
        self.assertEqual(len(legend.owned), 2)
        first = legend.entries[0].obj
        self.assertIs(first, legend.owned[0])
        self.assertEqual(first.marker_color, RED.rgba())
        self.assertEqual(first.marker_style, 20)
        self.assertEqual(first.marker_size, 1.5)
        self.assertEqual(legend.entries[1].option, "l")

    def test_style_rows_from_tuples(self) -> None:
        legend = legend_from_styles([(RED, 22, 1.0)], ["only"], ["p"])
        self.assertEqual(legend.entries[0].obj.marker_style, 22)

    def test_malformed_style_row_raises(self) -> None:
        with self.assertRaises(ValueError):
            legend_from_styles("red 20", "x", "p")

    def test_set_position_takes_x_pair_then_y_pair(self) -> None:
        legend = legend_from_text(["row"])
        set_position(legend, 0.5, 0.9, 0.6, 0.85)
        self.assertEqual((legend.x1, legend.x2, legend.y1, legend.y2), (0.5, 0.9, 0.6, 0.85))

    def test_constructor_takes_the_same_order_as_set_position(self) -> None:
        legend = Legend(0.5, 0.9, 0.6, 0.85)
        self.assertEqual((legend.x1, legend.x2, legend.y1, legend.y2), (0.5, 0.9, 0.6, 0.85))
        moved = Legend()
        moved.set_position(0.5, 0.9, 0.6, 0.85)
        self.assertEqual((moved.x1, moved.x2, moved.y1, moved.y2), (legend.x1, legend.x2, legend.y1, legend.y2))

    def test_builders_use_the_default_box(self) -> None:
        legend = legend_from_text(["row"])
        self.assertEqual((legend.x1, legend.x2, legend.y1, legend.y2), (0.1, 0.3, 0.7, 0.9))
        self.assertLess(legend.x1, legend.x2)
        self.assertLess(legend.y1, legend.y2)


if __name__ == "__main__":
    unittest.main()
