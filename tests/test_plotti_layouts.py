from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

import numpy as np

from plotti.colors import BLACK
from plotti.layouts import HeatmapPlot, RatioPlot, SingleRatioPlot
from plotti.legend import legend_from_text
from plotti.primitives import Histogram1D, Histogram2D
from plotti.raster import LineStyle
from plotti.style import StyleContext


def _hist(name: str, values: list[float]) -> Histogram1D:
    return Histogram1D.from_values(name, values, 10, 0.0, 10.0)


def _ratio(name: str = "ratio") -> Histogram1D:
    num = _hist("num", [1.5, 2.5, 2.5, 3.5, 4.5])
    den = _hist("den", [1.5, 2.5, 3.5, 3.5, 4.5])
    out = num.clone(name)
    out.divide(den)
    return out


def _styled_context() -> StyleContext:
    ctx = StyleContext()
    ctx.set_style(["red", "blue", "green", "magenta"], [20, 21, 22, 23])
    return ctx


class RatioPlotTests(unittest.TestCase):
    def test_defaults(self) -> None:
        plot = RatioPlot([_ratio()], "x", "ratio", context=StyleContext())
        self.assertEqual((plot.width, plot.height), (1000, 600))
        self.assertEqual(
            (plot.right_margin, plot.left_margin, plot.top_margin, plot.bottom_margin),
            (0.07, 0.15, 0.07, 0.25),
        )
        self.assertEqual((plot.offset_x, plot.offset_y), (1.0, 0.8))

    def test_unity_line_is_synthesised_without_touching_the_collection(self) -> None:
        ratio = _ratio()
        collection = [ratio]
        plot = RatioPlot(collection, "x", "ratio", context=_styled_context())
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(plot.resolver, "resolve", wraps=plot.resolver.resolve) as resolve:
                plot.draw(Path(tmp) / "ratio.png")
        self.assertEqual(collection, [ratio])
        line = plot.unity_line
        self.assertIsNotNone(line)
        self.assertEqual([c.args for c in resolve.call_args_list], [(ratio, 0), (line, 1)])
        self.assertEqual(line.line_color, BLACK)
        self.assertEqual(line.line_style, int(LineStyle.LONG_DASHED))
        self.assertEqual(line.line_width, 3)
        self.assertEqual((line.y1, line.y2), (1.0, 1.0))
        self.assertEqual((line.x1, line.x2), (plot.x_low, plot.x_high))
        drawn = [obj for obj, _ in plot.canvas.pads[0].primitives]
        self.assertIs(drawn[-1], line)

    def test_upper_one_limit_caps_the_unity_line(self) -> None:
        plot = RatioPlot([_ratio()], context=StyleContext())
        plot.set_upper_one_limit(4.0)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "ratio.png")
        self.assertEqual(plot.unity_line.x2, 4.0)

    def test_unity_line_can_be_disabled(self) -> None:
        plot = RatioPlot([_ratio()], context=StyleContext())
        plot.set_unity_line(False)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "ratio.png")
        self.assertIsNone(plot.unity_line)
        self.assertEqual(len(plot.canvas.pads[0].primitives), 1)


class SingleRatioPlotTests(unittest.TestCase):
    def setUp(self) -> None:
        self.h1 = _hist("h1", [1.5, 2.5, 2.5, 3.5, 3.5, 3.5, 4.5])
        self.h2 = _hist("h2", [1.5, 2.5, 3.5, 3.5, 4.5, 4.5])
        self.ratio = _ratio()

    def _plot(self, ctx: StyleContext | None = None) -> SingleRatioPlot:
        return SingleRatioPlot(
            [self.h1, self.h2],
            [self.ratio],
            "x",
            "entries",
            "h1 / h2",
            context=ctx or StyleContext(),
        )

    def test_defaults(self) -> None:
        plot = self._plot()
        self.assertEqual((plot.width, plot.height), (1000, 1200))
        self.assertEqual(plot.bottom_margin, 0.4)
        self.assertEqual((plot.offset_x, plot.offset_y), (4.5, 1.7))
        self.assertEqual(plot.pad_fraction, 0.3)
        self.assertEqual((plot.r_low, plot.r_high), (0.8, 1.2))
        self.assertEqual(plot.options, ["SAME", "SAME", "SAME"])

    def test_ratio_styles_continue_after_the_main_collection(self) -> None:
        plot = self._plot(_styled_context())
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(plot.resolver, "resolve", wraps=plot.resolver.resolve) as resolve:
                plot.draw(Path(tmp) / "single.png")
        calls = [c.args for c in resolve.call_args_list]
        self.assertEqual(calls, [(self.h1, 0), (self.h2, 1), (self.ratio, 2), (plot.unity_line, 3)])
        self.assertEqual(self.ratio.marker_style, 22)

    def test_ratio_offset_can_be_overridden(self) -> None:
        plot = self._plot()
        plot.set_offset(0, 5)
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.object(plot.resolver, "resolve", wraps=plot.resolver.resolve) as resolve:
                plot.draw(Path(tmp) / "single.png")
        self.assertEqual([c.args[1] for c in resolve.call_args_list], [0, 1, 5, 6])

    def test_pads_share_x_and_keep_their_own_y(self) -> None:
        plot = self._plot()
        plot.set_ranges(0.0, 8.0, 0.5, 10.0)
        plot.set_log(y=True)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "single.png")
        upper, lower = plot.canvas.pads
        self.assertEqual(upper.y_low, 0.3)
        self.assertEqual(lower.y_high, 0.3)
        self.assertEqual(upper.bottom_margin, 0.0)
        self.assertEqual(lower.top_margin, 0.0)
        self.assertTrue(upper.log_y)
        self.assertFalse(lower.log_y)
        self.assertEqual(self.h1.x_axis.user_range, (0.0, 8.0))
        self.assertEqual(self.ratio.x_axis.user_range, (0.0, 8.0))
        self.assertEqual(self.ratio.y_axis.user_range, (0.8, 1.2))

    def test_upper_pad_hides_x_labels_and_title(self) -> None:
        plot = self._plot()
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "single.png")
        self.assertEqual(self.h1.x_axis.label_size, 0)
        self.assertEqual(self.h1.x_axis.title, "")
        self.assertEqual(self.ratio.x_axis.title, "x")
        self.assertEqual(self.ratio.y_axis.title, "h1 / h2")

    def test_ratio_range_is_configurable(self) -> None:
        plot = self._plot()
        plot.set_ranges(0.0, 8.0, 0.0, 5.0, 0.5, 1.5)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "single.png")
        self.assertEqual(self.ratio.y_axis.user_range, (0.5, 1.5))

    def test_split_options_address_both_collections(self) -> None:
        plot = self._plot()
        plot.set_options("HIST;E", "1;0")
        self.assertEqual(plot.options, ["SAME", "HIST", "E"])

    def test_split_options_with_bad_main_position(self) -> None:
        plot = self._plot()
        with self.assertLogs("plotti.layouts", level="ERROR"):
            plot.set_options("HIST;E", "one;0")
        self.assertEqual(plot.options, ["SAME", "SAME", "E"])

    def test_pad_fraction_outside_unit_interval_is_rejected(self) -> None:
        plot = self._plot()
        with self.assertLogs("plotti.layouts", level="ERROR"):
            plot.set_pad_fraction(1.5)
        self.assertEqual(plot.pad_fraction, 0.3)

    def test_ratio_collection_without_axes_breaks_the_plot(self) -> None:
        with self.assertLogs("plotti.plot", level="CRITICAL"):
            plot = SingleRatioPlot([self.h1], [], context=StyleContext())
        self.assertTrue(plot.broken)


class HeatmapPlotTests(unittest.TestCase):
    def _hist2d(self) -> Histogram2D:
        return Histogram2D.from_matrix("h2", np.asarray([[1.0, 2.0], [3.0, 4.0]]), [0.0, 1.0, 2.0], [0.0, 1.0, 2.0])

    def test_text_legend_is_synthesised_and_owned(self) -> None:
        hist = self._hist2d()
        plot = HeatmapPlot(hist, "ALICE\nwork in progress\n", "x", "y", "counts", context=StyleContext())
        self.assertTrue(plot.owns_legend)
        self.assertEqual(plot.collection[0], hist)
        self.assertEqual([e.label for e in plot.legend.entries], ["ALICE", "work in progress"])

    def test_given_legend_is_borrowed(self) -> None:
        legend = legend_from_text(["one"])
        plot = HeatmapPlot(self._hist2d(), legend, context=StyleContext())
        self.assertFalse(plot.owns_legend)
        self.assertIs(plot.collection[1], legend)

    def test_defaults(self) -> None:
        plot = HeatmapPlot(self._hist2d(), None, context=StyleContext())
        self.assertEqual((plot.width, plot.height), (1000, 900))
        self.assertEqual(
            (plot.right_margin, plot.left_margin, plot.top_margin, plot.bottom_margin),
            (0.2, 0.15, 0.07, 0.15),
        )
        self.assertEqual((plot.offset_x, plot.offset_y, plot.offset_z), (1.3, 1.5, 1.6))

    def test_first_element_must_be_two_dimensional(self) -> None:
        with self.assertLogs("plotti.layouts", level="CRITICAL"):
            plot = HeatmapPlot(_hist("h1", [1.0]), "text", context=StyleContext())
        self.assertTrue(plot.broken)

    def test_draw_forces_color_map_and_styles_z_axis(self) -> None:
        hist = self._hist2d()
        plot = HeatmapPlot(hist, "ALICE", "x", "y", "counts", context=StyleContext())
        plot.set_log()
        with tempfile.TemporaryDirectory() as tmp:
            out = plot.draw(Path(tmp) / "heatmap.png")
            self.assertTrue(out.exists())
            plot.draw(Path(tmp) / "again.png")
        self.assertEqual(plot.options[0], "COLZ SAME")
        pad = plot.canvas.pads[0]
        self.assertTrue(pad.log_z)
        self.assertFalse(pad.log_y)
        self.assertEqual(hist.z_axis.title, "counts")
        self.assertEqual(hist.z_axis.title_offset, 1.6)
        z_low, z_high = hist.z_axis.user_range
        self.assertAlmostEqual(z_low, 0.8)
        self.assertAlmostEqual(z_high, 4.8)
        self.assertIs(pad.frame, hist)

    def test_manual_z_range(self) -> None:
        hist = self._hist2d()
        plot = HeatmapPlot(hist, None, context=StyleContext())
        plot.set_ranges(0.0, 2.0, 0.0, 2.0, 1.0, 10.0)
        plot.set_canvas_offsets(1.0, 1.0, 2.0)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "heatmap.png")
        self.assertEqual(hist.z_axis.user_range, (1.0, 10.0))
        self.assertEqual(hist.z_axis.title_offset, 2.0)

    def test_log_z_on_a_sparse_histogram(self) -> None:
        matrix = np.zeros((4, 4))
        matrix[0, 0] = 1.0
        matrix[1, 2] = 2.0
        matrix[3, 3] = 1.5
        hist = Histogram2D.from_matrix("sparse", matrix, np.arange(5.0), np.arange(5.0))
        plot = HeatmapPlot(hist, None, context=StyleContext())
        plot.set_log()
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "sparse.png")
        self.assertTrue(plot.canvas.pads[0].log_z)
        z_low, z_high = hist.z_axis.user_range
        self.assertAlmostEqual(z_low, 0.8)
        self.assertAlmostEqual(z_high, 2.4)

    def test_manual_xy_range_still_auto_ranges_z(self) -> None:
        hist = self._hist2d()
        plot = HeatmapPlot(hist, None, context=StyleContext())
        plot.set_log()
        plot.set_ranges(0.0, 2.0, 0.0, 2.0)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "heatmap.png")
        self.assertTrue(plot.canvas.pads[0].log_z)
        z_low, z_high = hist.z_axis.user_range
        self.assertAlmostEqual(z_low, 0.8)
        self.assertAlmostEqual(z_high, 4.8)

    def test_one_manual_z_bound_keeps_the_other_automatic(self) -> None:
        hist = self._hist2d()
        plot = HeatmapPlot(hist, None, context=StyleContext())
        plot.set_ranges(0.0, 2.0, 0.0, 2.0, z_low=2.0)
        with tempfile.TemporaryDirectory() as tmp:
            plot.draw(Path(tmp) / "heatmap.png")
        z_low, z_high = hist.z_axis.user_range
        self.assertEqual(z_low, 2.0)
        self.assertAlmostEqual(z_high, 4.8)


if __name__ == "__main__":
    unittest.main()
