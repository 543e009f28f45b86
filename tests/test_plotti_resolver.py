from __future__ import annotations

import unittest

from plotti.colors import BLACK, BLUE, GREEN, RED
from plotti.primitives import Function1D, Graph, Histogram1D, Legend, Line, Marker, MultiGraph
from plotti.raster import LineStyle, MarkerStyle
from plotti.resolver import StyleResolver, set_plottable_properties
from plotti.style import StyleContext


def _styled_context() -> StyleContext:
    ctx = StyleContext()
    ctx.set_style(["red", "blue", "green"], [20, 21, 22], [1.5, 2.5], [1, 2], [3.0, 4.0])
    return ctx


def _graph(name: str) -> Graph:
    return Graph(name, [1.0, 2.0, 3.0], [2.0, 4.0, 3.0])


class StyleResolverTests(unittest.TestCase):
    def test_histogram_gets_markers_lines_and_no_stats(self) -> None:
        hist = Histogram1D("h", "", 10, 0.0, 10.0)
        StyleResolver(_styled_context()).resolve(hist, 1)
        self.assertEqual(hist.marker_color, BLUE.rgba())
        self.assertEqual(hist.line_color, BLUE.rgba())
        self.assertEqual(hist.marker_style, 21)
        self.assertEqual(hist.marker_size, 2.5)
        self.assertEqual(hist.line_style, 2)
        self.assertEqual(hist.line_width, 4)
        self.assertFalse(hist.show_stats)

    def test_index_past_short_sequences_uses_defaults_for_those_only(self) -> None:
        func = Function1D("f", lambda x: x * x, 0.0, 1.0)
        StyleResolver(_styled_context()).resolve(func, 2)
        self.assertEqual(func.line_color, GREEN.rgba())
        self.assertEqual(func.marker_style, 22)
        self.assertEqual(func.marker_size, 2.0)
        self.assertEqual(func.line_style, int(LineStyle.SOLID))
        self.assertEqual(func.line_width, 2)

    def test_disabled_styles_leave_objects_untouched(self) -> None:
        hist = Histogram1D("h", "", 10, 0.0, 10.0)
        StyleResolver(StyleContext()).resolve(hist, 0)
        self.assertEqual(hist.marker_style, int(MarkerStyle.DOT))
        self.assertEqual(hist.line_color, BLACK)
        self.assertTrue(hist.show_stats)

    def test_legend_gets_context_text_style_even_when_disabled(self) -> None:
        ctx = StyleContext()
        ctx.font = "DejaVu Sans"
        ctx.label_size = 30.0
        legend = Legend()
        StyleResolver(ctx).resolve(legend, 0)
        self.assertEqual(legend.text_font, "DejaVu Sans")
        self.assertEqual(legend.text_size, 30.0)
        self.assertEqual(legend.border_size, 0)

    def test_multigraph_members_follow_consecutive_indices_until_markers_run_out(self) -> None:
        graphs = [_graph(f"g{i}") for i in range(5)]
        multi = MultiGraph("mg", graphs)
        StyleResolver(_styled_context()).resolve(multi, 1)
        self.assertEqual(graphs[0].marker_style, 21)
        self.assertEqual(graphs[0].line_color, BLUE.rgba())
        self.assertEqual(graphs[1].marker_style, 22)
        self.assertEqual(graphs[1].line_color, GREEN.rgba())
        for graph in graphs[2:]:
            self.assertEqual(graph.marker_style, int(MarkerStyle.DOT))
            self.assertEqual(graph.line_color, BLACK)

    def test_line_gets_only_line_attributes(self) -> None:
        line = Line(0.0, 1.0, 10.0, 1.0)
        StyleResolver(_styled_context()).resolve(line, 0)
        self.assertEqual(line.line_color, RED.rgba())
        self.assertEqual(line.line_width, 3)
        self.assertFalse(hasattr(line, "marker_style"))

    def test_marker_gets_only_marker_attributes(self) -> None:
        marker = Marker(1.0, 2.0)
        StyleResolver(_styled_context()).resolve(marker, 1)
        self.assertEqual(marker.marker_color, BLUE.rgba())
        self.assertEqual(marker.marker_style, 21)
        self.assertFalse(hasattr(marker, "line_color"))

    def test_unknown_kind_is_reported_without_error(self) -> None:
        with self.assertLogs("plotti.resolver", level="WARNING") as logs:
            StyleResolver(_styled_context()).resolve(object(), 0)
        self.assertIn("missing class object", logs.output[0])

    def test_set_plottable_properties_applies_one_color_and_title(self) -> None:
        graph = _graph("g")
        set_plottable_properties(graph, "red", 24, 1.2, title="points;x;y")
        self.assertEqual(graph.marker_color, RED.rgba())
        self.assertEqual(graph.line_color, RED.rgba())
        self.assertEqual(graph.marker_style, 24)
        self.assertEqual(graph.title, "points")
        self.assertEqual(graph.x_axis.title, "x")
        self.assertEqual(graph.y_axis.title, "y")


if __name__ == "__main__":
    unittest.main()
