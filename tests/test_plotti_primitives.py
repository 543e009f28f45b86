from __future__ import annotations

import math
import unittest

import numpy as np

from plotti.canvas import Canvas, Pad
from plotti.errors import PlotDataError
from plotti.primitives import Function1D, Graph, Histogram1D, Histogram2D, Legend, MultiGraph


class Histogram1DTests(unittest.TestCase):
    def test_fill_counts_underflow_and_overflow(self) -> None:
        hist = Histogram1D("h", "", 4, 0.0, 4.0)
        hist.fill([-1.0, 0.5, 1.5, 1.5, 3.9, 4.0, 7.0])
        self.assertEqual(hist.contents.tolist(), [1.0, 2.0, 0.0, 1.0])
        self.assertEqual(hist.underflow, 1.0)
        self.assertEqual(hist.overflow, 2.0)
        self.assertEqual(hist.entries, 7.0)

    def test_bin_center_extrapolates_outside_the_axis(self) -> None:
        hist = Histogram1D("h", "", 4, 0.0, 4.0)
        self.assertEqual(hist.bin_center(0), 0.5)
        self.assertEqual(hist.bin_center(-1), -0.5)
        self.assertEqual(hist.bin_center(4), 4.5)
        self.assertEqual(hist.bin_center(5), 5.5)

    def test_errors_follow_weights(self) -> None:
        hist = Histogram1D("h", "", 2, 0.0, 2.0)
        hist.fill([1.5, 1.5])
        self.assertFalse(hist.has_sumw2)
        self.assertAlmostEqual(hist.bin_error(1), math.sqrt(2.0))
        hist.fill([0.5, 0.5], weights=[2.0, 3.0])
        self.assertTrue(hist.has_sumw2)
        self.assertEqual(hist.bin_content(0), 5.0)
        self.assertAlmostEqual(hist.bin_error(0), math.sqrt(13.0))

    def test_set_bin_error(self) -> None:
        hist = Histogram1D("h", "", 2, 0.0, 2.0)
        hist.set_bin_content(1, 9.0)
        hist.set_bin_error(1, 0.5)
        self.assertEqual(hist.bin_error(1), 0.5)
        self.assertEqual(hist.bin_error(7), 0.0)
        with self.assertRaises(PlotDataError):
            hist.set_bin_content(2, 1.0)

    def test_divide_propagates_errors(self) -> None:
        num = Histogram1D("num", "", 2, 0.0, 2.0)
        den = Histogram1D("den", "", 2, 0.0, 2.0)
        num.set_bin_content(0, 4.0)
        den.set_bin_content(0, 2.0)
        num.divide(den)
        self.assertEqual(num.contents.tolist(), [2.0, 0.0])
        self.assertAlmostEqual(num.bin_error(0), math.sqrt(3.0))
        self.assertEqual(num.bin_error(1), 0.0)

    def test_divide_rejects_different_binning(self) -> None:
        with self.assertRaises(PlotDataError):
            Histogram1D("a", "", 2, 0.0, 2.0).divide(Histogram1D("b", "", 3, 0.0, 2.0))

    def test_from_values(self) -> None:
        hist = Histogram1D.from_values("h", np.asarray([0.1, 0.2, 0.9]), 2, 0.0, 1.0, title="t;x;y")
        self.assertEqual(hist.contents.tolist(), [2.0, 1.0])
        self.assertEqual(hist.title, "t")
        self.assertEqual(hist.x_axis.title, "x")
        self.assertEqual(hist.y_axis.title, "y")

    def test_bounded_axis_clamps_user_range(self) -> None:
        hist = Histogram1D("h", "", 4, 0.0, 4.0)
        hist.x_axis.set_range_user(-5.0, 2.0)
        self.assertEqual(hist.x_axis.range(), (0.0, 2.0))
        hist.x_axis.set_range_user(5.0, 6.0)
        self.assertEqual(hist.x_axis.range(), (0.0, 2.0))

    def test_bad_binning_is_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            Histogram1D("h", "", 0, 0.0, 1.0)
        with self.assertRaises(PlotDataError):
            Histogram1D("h", "", 2, 1.0, 1.0)
        with self.assertRaises(PlotDataError):
            Histogram1D("h", edges=[0.0, 2.0, 1.0])


class Histogram2DTests(unittest.TestCase):
    def test_projections_and_z_title(self) -> None:
        hist = Histogram2D("h2", "t;x;y;z", 2, 0.0, 2.0, 3, 0.0, 3.0)
        hist.fill([0.5, 1.5, 1.5], [0.5, 2.5, 2.5])
        self.assertEqual(hist.title, "t")
        self.assertEqual(hist.z_axis.title, "z")
        self.assertEqual(hist.bin_content(1, 2), 2.0)
        self.assertEqual(hist.projection_x().contents.tolist(), [1.0, 2.0])
        self.assertEqual(hist.projection_y().contents.tolist(), [1.0, 0.0, 2.0])
        self.assertEqual(hist.projection_x().name, "h2_px")

    def test_from_matrix_checks_shape(self) -> None:
        with self.assertRaises(PlotDataError):
            Histogram2D.from_matrix("m", np.ones((2, 2)), [0.0, 1.0, 2.0], [0.0, 1.0, 2.0, 3.0])


class FunctionAndGraphTests(unittest.TestCase):
    def test_function_samples_logarithmically(self) -> None:
        func = Function1D("f", lambda x: x**2, 1.0, 100.0, npx=3)
        xs, ys = func.sample(log_x=True)
        np.testing.assert_allclose(xs, [1.0, 10.0, 100.0])
        np.testing.assert_allclose(ys, [1.0, 100.0, 10000.0])
        self.assertAlmostEqual(func.maximum(), 10000.0)

    def test_function_needs_increasing_range(self) -> None:
        with self.assertRaises(PlotDataError):
            Function1D("f", np.sin, 1.0, 1.0)

    def test_graph_rejects_mixed_errors(self) -> None:
        with self.assertRaises(PlotDataError):
            Graph("g", [1.0, 2.0], [1.0, 2.0], ey=[0.1, 0.1], eyl=[0.1, 0.1])

    def test_graph_rejects_length_mismatch(self) -> None:
        with self.assertRaises(PlotDataError):
            Graph("g", [1.0, 2.0], [1.0])

    def test_graph_errors_widen_the_maximum(self) -> None:
        graph = Graph("g", [1.0, 2.0], [1.0, 2.0], ey=[0.5, 0.5])
        self.assertTrue(graph.has_errors)
        self.assertEqual(graph.maximum(), 2.5)
        self.assertEqual(graph.minimum(), 0.5)

    def test_multigraph_only_holds_graphs(self) -> None:
        multi = MultiGraph("mg", [Graph("g", [1.0], [1.0])])
        self.assertEqual(len(multi), 1)
        with self.assertRaises(PlotDataError):
            multi.add(Histogram1D("h", "", 2, 0.0, 1.0))


class PadFrameTests(unittest.TestCase):
    def test_same_keeps_the_frame(self) -> None:
        pad = Pad("p")
        first = Histogram1D("h1", "", 2, 0.0, 1.0)
        second = Histogram1D("h2", "", 2, 0.0, 1.0)
        first.draw(pad, "")
        second.draw(pad, "SAME")
        self.assertIs(pad.frame, first)
        self.assertEqual(len(pad.primitives), 2)

    def test_histogram_without_same_replaces_the_frame(self) -> None:
        pad = Pad("p")
        Histogram1D("h1", "", 2, 0.0, 1.0).draw(pad, "")
        third = Histogram1D("h3", "", 2, 0.0, 1.0)
        third.draw(pad, "HIST")
        self.assertIs(pad.frame, third)
        self.assertEqual(pad.primitives, [(third, "HIST")])

    def test_graph_replaces_only_with_axes(self) -> None:
        pad = Pad("p")
        hist = Histogram1D("h", "", 2, 0.0, 1.0)
        graph = Graph("g", [0.5], [1.0])
        hist.draw(pad, "")
        graph.draw(pad, "P")
        self.assertIs(pad.frame, hist)
        graph.draw(pad, "AP")
        self.assertIs(pad.frame, graph)
        self.assertEqual(len(pad.primitives), 1)

    def test_legend_never_owns_the_frame(self) -> None:
        pad = Pad("p")
        Legend().draw(pad, "")
        self.assertIsNone(pad.frame)
        self.assertEqual(len(pad.primitives), 1)

    def test_geometry_is_validated(self) -> None:
        with self.assertRaises(PlotDataError):
            Pad("p", "", 0.0, 0.0, 1.5, 1.0)
        with self.assertRaises(PlotDataError):
            Canvas("c", width=1, height=100)


if __name__ == "__main__":
    unittest.main()
