"""Plottable objects drawn onto pads.

Every primitive exposes a ``kind`` tag, a ``name`` and ``draw(pad, option)``,
which only registers the object on the pad. Painting happens when the owning
canvas is rendered: the pad hands each registered primitive a painter
(:class:`plotti.canvas.PadPainter`) together with its option string.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import numpy as np

from plotti.adapters.normalize import coerce_1d, coerce_2d, coerce_optional_1d
from plotti.colors import BLACK, RGBA, WHITE, lookup_palette, parse_color
from plotti.errors import PlotDataError
from plotti.options import parse_option
from plotti.raster import (
    LineStyle,
    MarkerStyle,
    draw_markers,
    draw_polyline,
    draw_segment,
    draw_text,
    fill_rect,
    stroke_rect,
    text_size,
)
from plotti.raster.draw_text import DEFAULT_FONT_FAMILY
from plotti.scales import DataLimits, compute_limits, to_scale

if TYPE_CHECKING:
    from plotti.canvas import Pad, PadPainter


LOGGER = logging.getLogger(__name__)


class PlotKind(Enum):
    HISTOGRAM = "histogram"
    HISTOGRAM_2D = "histogram_2d"
    FUNCTION = "function"
    GRAPH = "graph"
    MULTI_GRAPH = "multi_graph"
    LINE = "line"
    MARKER = "marker"
    LEGEND = "legend"
    OTHER = "other"


AXIS_KINDS = frozenset(
    {
        PlotKind.HISTOGRAM,
        PlotKind.HISTOGRAM_2D,
        PlotKind.FUNCTION,
        PlotKind.GRAPH,
        PlotKind.MULTI_GRAPH,
    }
)
POINT_SET_KINDS = frozenset({PlotKind.GRAPH, PlotKind.MULTI_GRAPH})


def kind_of(obj: Any) -> PlotKind:
    kind = getattr(obj, "kind", None)
    return kind if isinstance(kind, PlotKind) else PlotKind.OTHER


def has_axes(obj: Any) -> bool:
    return kind_of(obj) in AXIS_KINDS


@runtime_checkable
class Plottable(Protocol):
    kind: PlotKind
    name: str

    def draw(self, pad: Pad, option: str = "") -> None: ...


class Axis:
    """One axis of a plottable: natural limits, an optional user range and its text style.

    Sizes below 1 are fractions of the pad height, sizes of 1 and above are pixels.
    """

    def __init__(self, low: float = 0.0, high: float = 1.0, title: str = "", *, bounded: bool = False) -> None:
        self.low = float(low)
        self.high = float(high)
        self.title = title
        self.bounded = bounded
        self.user_range: tuple[float, float] | None = None
        self.title_offset = 1.0
        self.title_size = 0.035
        self.title_font = DEFAULT_FONT_FAMILY
        self.label_size = 0.035
        self.label_font = DEFAULT_FONT_FAMILY
        self.label_color: RGBA = BLACK
        self.label_offset = 0.005
        self.tick_length = 0.03

    def set_title(self, title: str) -> None:
        self.title = title

    def set_range_user(self, low: float, high: float) -> None:
        low, high = float(low), float(high)
        if self.bounded:
            # binned axes cannot be zoomed outside their edges
            low = max(low, self.low)
            high = min(high, self.high)
        if high <= low:
            LOGGER.debug("ignoring empty user range [%s, %s]", low, high)
            return
        self.user_range = (low, high)

    def set_limits(self, low: float, high: float) -> None:
        self.low = float(low)
        self.high = float(high)
        self.user_range = None

    def unzoom(self) -> None:
        self.user_range = None

    def range(self) -> tuple[float, float]:
        if self.user_range is not None:
            return self.user_range
        return (self.low, self.high)

    def __repr__(self) -> str:
        return f"Axis(low={self.low}, high={self.high}, title={self.title!r}, user_range={self.user_range})"


class LineAttributes:
    line_color: RGBA = BLACK
    line_style: int = LineStyle.SOLID
    line_width: int = 1

    def set_line_color(self, color: Any) -> None:
        self.line_color = parse_color(color)

    def set_line_style(self, style: int) -> None:
        self.line_style = int(style)

    def set_line_width(self, width: float) -> None:
        self.line_width = max(0, int(round(float(width))))


class MarkerAttributes:
    marker_color: RGBA = BLACK
    marker_style: int = MarkerStyle.DOT
    marker_size: float = 1.0

    def set_marker_color(self, color: Any) -> None:
        self.marker_color = parse_color(color)

    def set_marker_style(self, style: int) -> None:
        self.marker_style = int(style)

    def set_marker_size(self, size: float) -> None:
        self.marker_size = max(0.0, float(size))


class FillAttributes:
    fill_color: RGBA | None = None

    def set_fill_color(self, color: Any) -> None:
        self.fill_color = None if color is None else parse_color(color)


class Primitive:
    kind = PlotKind.OTHER

    def __init__(self, name: str, title: str = "") -> None:
        self.name = name
        self.title = title

    def set_title(self, title: str) -> None:
        self.title = title

    def draw(self, pad: Pad, option: str = "") -> None:
        pad.add_primitive(self, option)

    def paint(self, painter: PadPainter, option: str) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class AxisPrimitive(Primitive):
    """Base for kinds that carry axes and can own a pad frame."""

    x_axis: Axis
    y_axis: Axis

    def set_title(self, title: str) -> None:
        # "title;x title;y title" also names the axes
        parts = title.split(";")
        self.title = parts[0]
        if len(parts) > 1:
            self.x_axis.set_title(parts[1])
        if len(parts) > 2:
            self.y_axis.set_title(parts[2])

    def maximum(self) -> float:
        raise NotImplementedError

    def minimum(self) -> float:
        raise NotImplementedError

    def natural_y_limits(self, log_y: bool = False) -> tuple[float, float]:
        raise NotImplementedError

    def frame_limits(self, log_y: bool = False) -> DataLimits:
        x_low, x_high = self.x_axis.range()
        if self.y_axis.user_range is not None:
            y_low, y_high = self.y_axis.user_range
        else:
            y_low, y_high = self.natural_y_limits(log_y)
        return DataLimits(xmin=x_low, xmax=x_high, ymin=y_low, ymax=y_high)


def _padded_limits(lo: float, hi: float, log_y: bool, floor_at_zero: bool) -> tuple[float, float]:
    if log_y:
        if hi <= 0:
            return (0.1, 1.0)
        lo = lo if lo > 0 else hi * 1e-3
        return (lo * 0.5, hi * 2.0)
    if floor_at_zero and lo >= 0:
        lo = 0.0
    if hi == lo:
        return (lo - 1.0, hi + 1.0)
    margin = 0.05 * (hi - lo)
    lo_out = lo if (floor_at_zero and lo == 0.0) else lo - margin
    return (lo_out, hi + margin)


class Histogram1D(LineAttributes, MarkerAttributes, FillAttributes, AxisPrimitive):
    """A binned 1-D distribution with per-bin errors (bins are 0-based)."""

    kind = PlotKind.HISTOGRAM

    def __init__(
        self,
        name: str,
        title: str = "",
        n_bins: int = 1,
        low: float = 0.0,
        high: float = 1.0,
        *,
        edges: Sequence[float] | np.ndarray | None = None,
    ) -> None:
        self.x_axis = Axis(title="", bounded=True)
        self.y_axis = Axis()
        super().__init__(name, "")
        self.edges = _bin_edges(n_bins, low, high, edges, label="x")
        self.x_axis.set_limits(float(self.edges[0]), float(self.edges[-1]))
        self.contents = np.zeros(self.edges.size - 1, dtype=np.float64)
        self._sumw2: np.ndarray | None = None
        self.underflow = 0.0
        self.overflow = 0.0
        self._entries = 0.0
        self.show_stats = True
        self.set_title(title)

    @classmethod
    def from_values(
        cls,
        name: str,
        values: Any,
        n_bins: int,
        low: float,
        high: float,
        *,
        weights: Any = None,
        title: str = "",
    ) -> Histogram1D:
        hist = cls(name, title, n_bins, low, high)
        hist.fill(values, weights)
        return hist

    @property
    def n_bins(self) -> int:
        return int(self.contents.size)

    @property
    def entries(self) -> float:
        return self._entries

    def sumw2(self) -> np.ndarray:
        """Track squared weights per bin so errors follow weighted fills."""
        if self._sumw2 is None:
            self._sumw2 = np.abs(self.contents).copy()
        return self._sumw2

    @property
    def has_sumw2(self) -> bool:
        return self._sumw2 is not None

    def fill(self, values: Any, weights: Any = None) -> None:
        x = coerce_1d(values, label="values")
        if weights is None:
            w = np.ones_like(x)
        else:
            w = coerce_1d(weights, label="weights")
            if w.size != x.size:
                raise PlotDataError(f"values and weights length mismatch: {x.size} != {w.size}")
            if self._sumw2 is None and np.any(w != 1.0):
                self.sumw2()
        finite = np.isfinite(x) & np.isfinite(w)
        x, w = x[finite], w[finite]
        idx = np.searchsorted(self.edges, x, side="right") - 1
        # the upper edge belongs to the overflow, as for any other bin edge
        under = x < self.edges[0]
        over = x >= self.edges[-1]
        inside = ~(under | over)
        self.underflow += float(np.sum(w[under]))
        self.overflow += float(np.sum(w[over]))
        np.add.at(self.contents, idx[inside], w[inside])
        if self._sumw2 is not None:
            np.add.at(self._sumw2, idx[inside], w[inside] ** 2)
        self._entries += float(x.size)

    def bin_content(self, i: int) -> float:
        if i < 0 or i >= self.n_bins:
            return 0.0
        return float(self.contents[i])

    def set_bin_content(self, i: int, value: float) -> None:
        self._check_bin(i)
        self.contents[i] = float(value)
        self._entries += 1.0

    def bin_error(self, i: int) -> float:
        if i < 0 or i >= self.n_bins:
            return 0.0
        if self._sumw2 is not None:
            return float(np.sqrt(self._sumw2[i]))
        return float(np.sqrt(abs(self.contents[i])))

    def errors(self) -> np.ndarray:
        if self._sumw2 is not None:
            return np.sqrt(self._sumw2)
        return np.sqrt(np.abs(self.contents))

    def set_bin_error(self, i: int, error: float) -> None:
        self._check_bin(i)
        self.sumw2()[i] = float(error) ** 2

    def bin_width(self, i: int) -> float:
        if i < 0:
            return float(self.edges[1] - self.edges[0])
        if i >= self.n_bins:
            return float(self.edges[-1] - self.edges[-2])
        return float(self.edges[i + 1] - self.edges[i])

    def bin_center(self, i: int) -> float:
        """Center of bin ``i``; indices outside the axis extrapolate with the edge bin width."""
        if i < 0:
            return float(self.edges[0] + (i + 0.5) * self.bin_width(-1))
        if i >= self.n_bins:
            return float(self.edges[-1] + (i - self.n_bins + 0.5) * self.bin_width(self.n_bins))
        return float(0.5 * (self.edges[i] + self.edges[i + 1]))

    def bin_centers(self) -> np.ndarray:
        return 0.5 * (self.edges[:-1] + self.edges[1:])

    def first_filled_bin(self) -> int:
        filled = np.flatnonzero(self.contents > 0)
        return int(filled[0]) if filled.size else 0

    def last_filled_bin(self) -> int:
        filled = np.flatnonzero(self.contents > 0)
        return int(filled[-1]) if filled.size else self.n_bins - 1

    def _visible_contents(self) -> np.ndarray:
        lo, hi = self.x_axis.range()
        centers = self.bin_centers()
        visible = self.contents[(centers >= lo) & (centers <= hi)]
        return visible if visible.size else self.contents

    def maximum(self) -> float:
        return float(np.max(self._visible_contents()))

    def minimum(self) -> float:
        return float(np.min(self._visible_contents()))

    def natural_y_limits(self, log_y: bool = False) -> tuple[float, float]:
        err = self.errors() if self._sumw2 is not None else np.zeros_like(self.contents)
        if log_y:
            positive = self.contents[self.contents > 0]
            lo = float(np.min(positive)) if positive.size else 0.0
            return _padded_limits(lo, float(np.max(self.contents + err)), True, True)
        return _padded_limits(float(np.min(self.contents - err)), float(np.max(self.contents + err)), False, True)

    @property
    def mean(self) -> float:
        total = float(np.sum(self.contents))
        if total == 0:
            return 0.0
        return float(np.sum(self.contents * self.bin_centers()) / total)

    @property
    def std_dev(self) -> float:
        total = float(np.sum(self.contents))
        if total == 0:
            return 0.0
        mean = self.mean
        var = float(np.sum(self.contents * (self.bin_centers() - mean) ** 2) / total)
        return float(np.sqrt(max(var, 0.0)))

    def set_stats(self, show: bool) -> None:
        self.show_stats = bool(show)

    def clone(self, name: str | None = None) -> Histogram1D:
        out = copy.deepcopy(self)
        if name is not None:
            out.name = name
        return out

    def divide(self, other: Histogram1D) -> None:
        """Bin-by-bin division with uncorrelated error propagation; empty divisors give 0."""
        if other.n_bins != self.n_bins or not np.allclose(other.edges, self.edges):
            raise PlotDataError(f"cannot divide histograms with different binning: {self.name} / {other.name}")
        a = self.contents
        b = other.contents
        ea2 = self.errors() ** 2
        eb2 = other.errors() ** 2
        nonzero = b != 0
        ratio = np.zeros_like(a)
        ratio[nonzero] = a[nonzero] / b[nonzero]
        err2 = np.zeros_like(a)
        b2 = b[nonzero] ** 2
        err2[nonzero] = (ea2[nonzero] * b2 + eb2[nonzero] * a[nonzero] ** 2) / (b2 * b2)
        self.contents = ratio
        self._sumw2 = err2

    def _check_bin(self, i: int) -> None:
        if i < 0 or i >= self.n_bins:
            raise PlotDataError(f"bin {i} out of range for {self.name} with {self.n_bins} bins")

    def paint(self, painter: PadPainter, option: str) -> None:
        opt = parse_option(option)
        centers = self.bin_centers()
        draw_errors = opt.errors or (self._sumw2 is not None and not (opt.hist or opt.line or opt.smooth or opt.markers))
        draw_step = opt.hist or not (draw_errors or opt.markers or opt.line or opt.smooth)

        if self.fill_color is not None and draw_step:
            base = painter.baseline()
            for i in range(self.n_bins):
                painter.fill_data_box(self.edges[i], base, self.edges[i + 1], self.contents[i], self.fill_color)

        if draw_step and self.line_width > 0:
            base = painter.baseline()
            xs = np.concatenate(([self.edges[0]], np.repeat(self.edges, 2)[1:-1], [self.edges[-1]]))
            ys = np.concatenate(([base], np.repeat(self.contents, 2), [base]))
            painter.polyline(xs, ys, self.line_color, self.line_width, self.line_style)

        if opt.line or opt.smooth:
            painter.polyline(centers, self.contents, self.line_color, self.line_width, self.line_style)

        if draw_errors:
            err = self.errors()
            shown = (self.contents != 0) | (err != 0)
            half = 0.5 * (self.edges[1:] - self.edges[:-1])
            painter.error_bars(
                centers[shown],
                self.contents[shown],
                half[shown],
                half[shown],
                err[shown],
                err[shown],
                self.line_color,
                self.line_width,
            )
            painter.markers(centers[shown], self.contents[shown], self.marker_color, self.marker_size, self.marker_style)
        elif opt.markers:
            painter.markers(centers, self.contents, self.marker_color, self.marker_size, self.marker_style)

        if self.show_stats and painter.is_frame(self):
            _paint_stats_box(
                painter,
                [
                    self.name,
                    f"Entries  {int(self.entries)}",
                    f"Mean  {self.mean:.4g}",
                    f"Std Dev  {self.std_dev:.4g}",
                ],
            )


class Histogram2D(LineAttributes, MarkerAttributes, FillAttributes, AxisPrimitive):
    """A binned 2-D distribution; ``contents[ix, iy]``."""

    kind = PlotKind.HISTOGRAM_2D

    def __init__(
        self,
        name: str,
        title: str = "",
        n_bins_x: int = 1,
        x_low: float = 0.0,
        x_high: float = 1.0,
        n_bins_y: int = 1,
        y_low: float = 0.0,
        y_high: float = 1.0,
        *,
        x_edges: Sequence[float] | np.ndarray | None = None,
        y_edges: Sequence[float] | np.ndarray | None = None,
    ) -> None:
        self.x_axis = Axis(bounded=True)
        self.y_axis = Axis(bounded=True)
        self.z_axis = Axis()
        super().__init__(name, "")
        self.x_edges = _bin_edges(n_bins_x, x_low, x_high, x_edges, label="x")
        self.y_edges = _bin_edges(n_bins_y, y_low, y_high, y_edges, label="y")
        self.x_axis.set_limits(float(self.x_edges[0]), float(self.x_edges[-1]))
        self.y_axis.set_limits(float(self.y_edges[0]), float(self.y_edges[-1]))
        self.contents = np.zeros((self.x_edges.size - 1, self.y_edges.size - 1), dtype=np.float64)
        self._entries = 0.0
        self.show_stats = True
        self.set_title(title)

    def set_title(self, title: str) -> None:
        parts = title.split(";")
        super().set_title(";".join(parts[:3]))
        if len(parts) > 3:
            self.z_axis.set_title(parts[3])

    @classmethod
    def from_values(
        cls,
        name: str,
        x: Any,
        y: Any,
        n_bins_x: int,
        x_low: float,
        x_high: float,
        n_bins_y: int,
        y_low: float,
        y_high: float,
        *,
        weights: Any = None,
        title: str = "",
    ) -> Histogram2D:
        hist = cls(name, title, n_bins_x, x_low, x_high, n_bins_y, y_low, y_high)
        hist.fill(x, y, weights)
        return hist

    @classmethod
    def from_matrix(
        cls,
        name: str,
        matrix: Any,
        x_edges: Sequence[float] | np.ndarray,
        y_edges: Sequence[float] | np.ndarray,
        title: str = "",
    ) -> Histogram2D:
        values = coerce_2d(matrix, label="matrix")
        hist = cls(name, title, x_edges=x_edges, y_edges=y_edges)
        if values.shape != hist.contents.shape:
            raise PlotDataError(f"matrix shape {values.shape} does not match binning {hist.contents.shape}")
        hist.contents = values.copy()
        hist._entries = float(np.count_nonzero(values))
        return hist

    @property
    def n_bins_x(self) -> int:
        return int(self.contents.shape[0])

    @property
    def n_bins_y(self) -> int:
        return int(self.contents.shape[1])

    @property
    def entries(self) -> float:
        return self._entries

    def fill(self, x: Any, y: Any, weights: Any = None) -> None:
        xv = coerce_1d(x, label="x")
        yv = coerce_1d(y, label="y")
        if xv.size != yv.size:
            raise PlotDataError(f"x and y length mismatch: {xv.size} != {yv.size}")
        w = np.ones_like(xv) if weights is None else coerce_1d(weights, label="weights")
        if w.size != xv.size:
            raise PlotDataError(f"values and weights length mismatch: {xv.size} != {w.size}")
        ix = np.searchsorted(self.x_edges, xv, side="right") - 1
        iy = np.searchsorted(self.y_edges, yv, side="right") - 1
        inside = (
            (xv >= self.x_edges[0])
            & (xv < self.x_edges[-1])
            & (yv >= self.y_edges[0])
            & (yv < self.y_edges[-1])
            & np.isfinite(w)
        )
        np.add.at(self.contents, (ix[inside], iy[inside]), w[inside])
        self._entries += float(xv.size)

    def bin_content(self, ix: int, iy: int) -> float:
        if not (0 <= ix < self.n_bins_x and 0 <= iy < self.n_bins_y):
            return 0.0
        return float(self.contents[ix, iy])

    def set_bin_content(self, ix: int, iy: int, value: float) -> None:
        if not (0 <= ix < self.n_bins_x and 0 <= iy < self.n_bins_y):
            raise PlotDataError(f"bin ({ix}, {iy}) out of range for {self.name}")
        self.contents[ix, iy] = float(value)
        self._entries += 1.0

    def projection_x(self, name: str | None = None) -> Histogram1D:
        proj = Histogram1D(name or f"{self.name}_px", edges=self.x_edges)
        proj.contents = self.contents.sum(axis=1)
        return proj

    def projection_y(self, name: str | None = None) -> Histogram1D:
        proj = Histogram1D(name or f"{self.name}_py", edges=self.y_edges)
        proj.contents = self.contents.sum(axis=0)
        return proj

    def maximum(self) -> float:
        return float(np.max(self.contents))

    def minimum(self) -> float:
        return float(np.min(self.contents))

    def natural_y_limits(self, log_y: bool = False) -> tuple[float, float]:
        return (self.y_axis.low, self.y_axis.high)

    def z_limits(self, log_z: bool = False) -> tuple[float, float]:
        if self.z_axis.user_range is not None:
            return self.z_axis.user_range
        filled = self.contents[self.contents != 0]
        if filled.size == 0:
            return (0.1, 1.0) if log_z else (0.0, 1.0)
        lo = float(np.min(filled))
        hi = float(np.max(filled))
        if log_z:
            positive = filled[filled > 0]
            if positive.size == 0:
                return (0.1, 1.0)
            return (float(np.min(positive)), float(np.max(positive)))
        lo = min(lo, 0.0)
        if hi == lo:
            hi = lo + 1.0
        return (lo, hi)

    def set_stats(self, show: bool) -> None:
        self.show_stats = bool(show)

    def clone(self, name: str | None = None) -> Histogram2D:
        out = copy.deepcopy(self)
        if name is not None:
            out.name = name
        return out

    def paint(self, painter: PadPainter, option: str) -> None:
        opt = parse_option(option)
        log_z = painter.log_z
        z_low, z_high = self.z_limits(log_z)
        if log_z and z_low <= 0:
            LOGGER.debug("%s: z range starts at %s, log z disabled", self.name, z_low)
            log_z = False
        sz_low, sz_high = to_scale(np.asarray([z_low, z_high]), log_z).tolist()
        span = (sz_high - sz_low) or 1.0
        palette = painter.palette
        peak = float(np.max(np.abs(self.contents))) or 1.0

        for ix in range(self.n_bins_x):
            for iy in range(self.n_bins_y):
                value = float(self.contents[ix, iy])
                if value == 0:
                    continue
                x0, x1 = self.x_edges[ix], self.x_edges[ix + 1]
                y0, y1 = self.y_edges[iy], self.y_edges[iy + 1]
                if opt.color_map:
                    if value < z_low:
                        continue
                    scaled = to_scale(np.asarray([value]), log_z)[0]
                    if not np.isfinite(scaled):
                        continue
                    color = lookup_palette(palette, (scaled - sz_low) / span)
                    painter.fill_data_box(x0, y0, x1, y1, color)
                else:
                    # box mode: cell area proportional to content
                    shrink = 0.5 * (1.0 - abs(value) / peak)
                    dx = (x1 - x0) * shrink
                    dy = (y1 - y0) * shrink
                    painter.fill_data_box(x0 + dx, y0 + dy, x1 - dx, y1 - dy, self.marker_color)

        if opt.palette_axis:
            painter.palette_bar(self.z_axis, z_low, z_high, log_z)

        if self.show_stats and painter.is_frame(self):
            total = float(np.sum(self.contents)) or 1.0
            xc = 0.5 * (self.x_edges[:-1] + self.x_edges[1:])
            yc = 0.5 * (self.y_edges[:-1] + self.y_edges[1:])
            mean_x = float(np.sum(self.contents.sum(axis=1) * xc) / total)
            mean_y = float(np.sum(self.contents.sum(axis=0) * yc) / total)
            _paint_stats_box(
                painter,
                [
                    self.name,
                    f"Entries  {int(self.entries)}",
                    f"Mean x  {mean_x:.4g}",
                    f"Mean y  {mean_y:.4g}",
                ],
            )


class Function1D(LineAttributes, MarkerAttributes, AxisPrimitive):
    """An analytic curve ``func(x)`` on ``[low, high]``, sampled at ``npx`` points when drawn."""

    kind = PlotKind.FUNCTION

    def __init__(
        self,
        name: str,
        func: Callable[[np.ndarray], Any],
        low: float,
        high: float,
        *,
        npx: int = 100,
        title: str = "",
    ) -> None:
        if not high > low:
            raise PlotDataError(f"function range must be increasing: [{low}, {high}]")
        self.x_axis = Axis(low, high)
        self.y_axis = Axis()
        super().__init__(name, "")
        self.func = func
        self.npx = max(2, int(npx))
        self.set_title(title)

    def set_npx(self, npx: int) -> None:
        self.npx = max(2, int(npx))

    def __call__(self, x: Any) -> np.ndarray:
        return self.evaluate(np.asarray(x, dtype=np.float64))

    def evaluate(self, xs: np.ndarray) -> np.ndarray:
        ys = np.asarray(self.func(xs), dtype=np.float64)
        if ys.shape != xs.shape:
            ys = np.broadcast_to(ys, xs.shape).astype(np.float64)
        return ys

    def sample(self, log_x: bool = False) -> tuple[np.ndarray, np.ndarray]:
        lo, hi = self.x_axis.range()
        if log_x and lo > 0:
            xs = np.geomspace(lo, hi, self.npx)
        else:
            xs = np.linspace(lo, hi, self.npx)
        return xs, self.evaluate(xs)

    def maximum(self) -> float:
        _, ys = self.sample()
        finite = ys[np.isfinite(ys)]
        return float(np.max(finite)) if finite.size else 0.0

    def minimum(self) -> float:
        _, ys = self.sample()
        finite = ys[np.isfinite(ys)]
        return float(np.min(finite)) if finite.size else 0.0

    def natural_y_limits(self, log_y: bool = False) -> tuple[float, float]:
        _, ys = self.sample()
        finite = ys[np.isfinite(ys)]
        if finite.size == 0:
            return (0.0, 1.0)
        if log_y:
            positive = finite[finite > 0]
            lo = float(np.min(positive)) if positive.size else 0.0
            return _padded_limits(lo, float(np.max(finite)), True, False)
        return _padded_limits(float(np.min(finite)), float(np.max(finite)), False, False)

    def paint(self, painter: PadPainter, option: str) -> None:
        opt = parse_option(option)
        frame_low, frame_high = painter.limits.xmin, painter.limits.xmax
        lo, hi = self.x_axis.range()
        lo, hi = max(lo, min(frame_low, frame_high)), min(hi, max(frame_low, frame_high))
        if hi <= lo:
            return
        if painter.log_x and lo > 0:
            xs = np.geomspace(lo, hi, self.npx)
        else:
            xs = np.linspace(lo, hi, self.npx)
        ys = self.evaluate(xs)
        painter.polyline(xs, ys, self.line_color, self.line_width, self.line_style)
        if opt.markers:
            painter.markers(xs, ys, self.marker_color, self.marker_size, self.marker_style)


class Graph(LineAttributes, MarkerAttributes, FillAttributes, AxisPrimitive):
    """A point-set with optional symmetric (``ex``, ``ey``) or asymmetric errors."""

    kind = PlotKind.GRAPH

    def __init__(
        self,
        name: str,
        x: Any,
        y: Any,
        ex: Any = None,
        ey: Any = None,
        *,
        exl: Any = None,
        exh: Any = None,
        eyl: Any = None,
        eyh: Any = None,
        title: str = "",
    ) -> None:
        self.x = coerce_1d(x, label="x")
        self.y = coerce_1d(y, label="y")
        if self.x.shape != self.y.shape:
            raise PlotDataError(f"x and y length mismatch: {self.x.size} != {self.y.size}")
        if (ex is not None or ey is not None) and any(v is not None for v in (exl, exh, eyl, eyh)):
            raise PlotDataError("use either symmetric (ex, ey) or asymmetric (exl, exh, eyl, eyh) errors")
        n = self.x.size
        sym_ex = coerce_optional_1d(ex, label="ex", size=n)
        sym_ey = coerce_optional_1d(ey, label="ey", size=n)
        self.exl = sym_ex if sym_ex is not None else coerce_optional_1d(exl, label="exl", size=n)
        self.exh = sym_ex if sym_ex is not None else coerce_optional_1d(exh, label="exh", size=n)
        self.eyl = sym_ey if sym_ey is not None else coerce_optional_1d(eyl, label="eyl", size=n)
        self.eyh = sym_ey if sym_ey is not None else coerce_optional_1d(eyh, label="eyh", size=n)
        self.x_axis = Axis()
        self.y_axis = Axis()
        super().__init__(name, "")
        self._reset_limits()
        self.set_title(title)

    @property
    def n_points(self) -> int:
        return int(self.x.size)

    @property
    def has_errors(self) -> bool:
        return any(e is not None for e in (self.exl, self.exh, self.eyl, self.eyh))

    def _err(self, values: np.ndarray | None) -> np.ndarray:
        return values if values is not None else np.zeros_like(self.x)

    def _reset_limits(self) -> None:
        if self.x.size == 0:
            self.x_axis.set_limits(0.0, 1.0)
            return
        lo_x = self.x - self._err(self.exl)
        hi_x = self.x + self._err(self.exh)
        xs = np.concatenate((lo_x, hi_x))
        ys = np.concatenate((self.y - self._err(self.eyl), self.y + self._err(self.eyh)))
        limits = compute_limits(xs, ys, np.isfinite(xs) & np.isfinite(ys), y_buffer_ratio=0.1, x_buffer_ratio=0.1)
        self.x_axis.set_limits(limits.xmin, limits.xmax)
        self.y_axis.set_limits(limits.ymin, limits.ymax)

    def points(self) -> Iterator[tuple[float, float]]:
        return iter(zip(self.x.tolist(), self.y.tolist(), strict=True))

    def maximum(self) -> float:
        values = self.y + self._err(self.eyh)
        finite = values[np.isfinite(values)]
        return float(np.max(finite)) if finite.size else 0.0

    def minimum(self) -> float:
        values = self.y - self._err(self.eyl)
        finite = values[np.isfinite(values)]
        return float(np.min(finite)) if finite.size else 0.0

    def natural_y_limits(self, log_y: bool = False) -> tuple[float, float]:
        if log_y:
            values = self.y - self._err(self.eyl)
            positive = values[values > 0]
            lo = float(np.min(positive)) if positive.size else 0.0
            return _padded_limits(lo, self.maximum(), True, False)
        return (self.y_axis.low, self.y_axis.high)

    def paint(self, painter: PadPainter, option: str) -> None:
        opt = parse_option(option)
        draw_line = opt.line or opt.smooth
        draw_points = opt.markers
        if not (draw_line or draw_points):
            draw_line = draw_points = True
        if self.has_errors:
            painter.error_bars(
                self.x,
                self.y,
                self._err(self.exl),
                self._err(self.exh),
                self._err(self.eyl),
                self._err(self.eyh),
                self.line_color,
                self.line_width,
            )
        if draw_line:
            order = np.argsort(self.x, kind="stable") if opt.smooth else np.arange(self.x.size)
            painter.polyline(self.x[order], self.y[order], self.line_color, self.line_width, self.line_style)
        if draw_points:
            painter.markers(self.x, self.y, self.marker_color, self.marker_size, self.marker_style)


class MultiGraph(AxisPrimitive):
    """An ordered overlay of graphs sharing one set of axes."""

    kind = PlotKind.MULTI_GRAPH

    def __init__(self, name: str, graphs: Iterable[Graph] = (), title: str = "") -> None:
        self.x_axis = Axis()
        self.y_axis = Axis()
        super().__init__(name, "")
        self.graphs: list[Graph] = []
        for graph in graphs:
            self.add(graph)
        self.set_title(title)

    def add(self, graph: Graph) -> None:
        if kind_of(graph) is not PlotKind.GRAPH:
            raise PlotDataError(f"a multigraph only holds graphs, got {type(graph).__name__}")
        self.graphs.append(graph)
        self._reset_limits()

    def __iter__(self) -> Iterator[Graph]:
        return iter(self.graphs)

    def __len__(self) -> int:
        return len(self.graphs)

    def _reset_limits(self) -> None:
        x_low = min(g.x_axis.low for g in self.graphs)
        x_high = max(g.x_axis.high for g in self.graphs)
        y_low = min(g.y_axis.low for g in self.graphs)
        y_high = max(g.y_axis.high for g in self.graphs)
        self.x_axis.low, self.x_axis.high = x_low, x_high
        self.y_axis.low, self.y_axis.high = y_low, y_high

    def maximum(self) -> float:
        return max((g.maximum() for g in self.graphs), default=0.0)

    def minimum(self) -> float:
        return min((g.minimum() for g in self.graphs), default=0.0)

    def natural_y_limits(self, log_y: bool = False) -> tuple[float, float]:
        if not self.graphs:
            return (0.0, 1.0)
        limits = [g.natural_y_limits(log_y) for g in self.graphs]
        return (min(lo for lo, _ in limits), max(hi for _, hi in limits))

    def paint(self, painter: PadPainter, option: str) -> None:
        # axes belong to the multigraph, not to its members
        member_option = option.upper().replace("A", "")
        for graph in self.graphs:
            graph.paint(painter, member_option)


class Line(LineAttributes, Primitive):
    """A reference segment in user coordinates, or in pad NDC when ``ndc`` is set."""

    kind = PlotKind.LINE

    def __init__(self, x1: float, y1: float, x2: float, y2: float, *, ndc: bool = False, name: str = "line") -> None:
        super().__init__(name)
        self.x1, self.y1, self.x2, self.y2 = float(x1), float(y1), float(x2), float(y2)
        self.ndc = ndc

    def paint(self, painter: PadPainter, option: str) -> None:
        if self.line_width <= 0:
            return
        if self.ndc:
            x0, y0 = painter.ndc_to_pixels(self.x1, self.y1)
            x1, y1 = painter.ndc_to_pixels(self.x2, self.y2)
            draw_segment(painter.overlay, x0, y0, x1, y1, self.line_color, self.line_width, self.line_style)
            return
        painter.polyline(
            np.asarray([self.x1, self.x2]),
            np.asarray([self.y1, self.y2]),
            self.line_color,
            self.line_width,
            self.line_style,
        )


class Marker(MarkerAttributes, Primitive):
    kind = PlotKind.MARKER

    def __init__(self, x: float, y: float, *, name: str = "marker") -> None:
        super().__init__(name)
        self.x, self.y = float(x), float(y)

    def paint(self, painter: PadPainter, option: str) -> None:
        painter.markers(np.asarray([self.x]), np.asarray([self.y]), self.marker_color, self.marker_size, self.marker_style)


@dataclass
class LegendEntry:
    obj: Any
    label: str
    option: str = ""


class Legend(Primitive):
    """A legend box in pad NDC: an optional header row then one row per entry.

    Entry options combine ``l`` (line), ``p`` (marker), ``f`` (fill) and ``e``
    (error bar); an empty option renders the label alone.
    """

    kind = PlotKind.LEGEND

    def __init__(
        self,
        x1: float = 0.1,
        x2: float = 0.3,
        y1: float = 0.7,
        y2: float = 0.9,
        header: str = "",
        *,
        name: str = "legend",
    ) -> None:
        super().__init__(name)
        self.set_position(x1, x2, y1, y2)
        self.entries: list[LegendEntry] = []
        if header:
            self.set_header(header)
        self.text_font = DEFAULT_FONT_FAMILY
        self.text_size = 0.0
        self.text_color: RGBA = BLACK
        self.border_size = 1
        self.fill_color: RGBA | None = WHITE
        self.owned: list[Any] = []

    def set_header(self, header: str) -> None:
        self.entries.insert(0, LegendEntry(None, header, ""))

    def add_entry(self, obj: Any, label: str, option: str = "lpf") -> LegendEntry:
        entry = LegendEntry(obj, label, option)
        self.entries.append(entry)
        return entry

    @property
    def n_rows(self) -> int:
        return len(self.entries)

    def set_position(self, x1: float, x2: float, y1: float, y2: float) -> None:
        self.x1, self.x2, self.y1, self.y2 = float(x1), float(x2), float(y1), float(y2)

    def set_text_font(self, font: str) -> None:
        self.text_font = font

    def set_text_size(self, size: float) -> None:
        self.text_size = float(size)

    def set_border_size(self, size: int) -> None:
        self.border_size = max(0, int(size))

    def set_fill_color(self, color: Any) -> None:
        self.fill_color = None if color is None else parse_color(color)

    def clone(self, name: str | None = None) -> Legend:
        """Copy the box and rows; entries keep referring to the same objects."""
        out = copy.copy(self)
        out.entries = [LegendEntry(e.obj, e.label, e.option) for e in self.entries]
        out.owned = list(self.owned)
        if name is not None:
            out.name = name
        return out

    def paint(self, painter: PadPainter, option: str) -> None:
        x_a, y_a = painter.ndc_to_pixels(min(self.x1, self.x2), max(self.y1, self.y2))
        x_b, y_b = painter.ndc_to_pixels(max(self.x1, self.x2), min(self.y1, self.y2))
        dst = painter.overlay
        if self.fill_color is not None:
            fill_rect(dst, x_a, y_a, x_b, y_b, self.fill_color)
        if self.border_size > 0:
            stroke_rect(dst, x_a, y_a, x_b, y_b, BLACK, self.border_size)
        if not self.entries:
            return

        row_h = max(1.0, (y_b - y_a) / len(self.entries))
        size_px = painter.text_px(self.text_size) if self.text_size > 0 else row_h * 0.75
        swatch_w = max(4, int(round((x_b - x_a) * 0.25)))
        for row, entry in enumerate(self.entries):
            cy = int(round(y_a + (row + 0.5) * row_h))
            opt = entry.option.lower()
            if entry.obj is not None:
                _paint_legend_swatch(painter, entry.obj, opt, x_a, cy, swatch_w, row_h)
            _, th = text_size(entry.label or " ", font_family=self.text_font, font_size_px=size_px)
            draw_text(
                dst,
                x_a + swatch_w + 2,
                cy - th // 2,
                entry.label,
                self.text_color,
                font_family=self.text_font,
                font_size_px=size_px,
            )


def _paint_legend_swatch(painter: PadPainter, obj: Any, opt: str, x0: int, cy: int, width: int, row_h: float) -> None:
    dst = painter.overlay
    pad_x = max(2, width // 6)
    left, right = x0 + pad_x, x0 + width - pad_x
    cx = (left + right) // 2
    half_h = max(2, int(row_h * 0.3))
    if "f" in opt and getattr(obj, "fill_color", None) is not None:
        fill_rect(dst, left, cy - half_h, right, cy + half_h, obj.fill_color)
    if "l" in opt and getattr(obj, "line_width", 0) > 0:
        draw_segment(dst, left, cy, right, cy, obj.line_color, obj.line_width, obj.line_style)
    if "e" in opt and getattr(obj, "line_width", 0) > 0:
        draw_segment(dst, cx, cy - half_h, cx, cy + half_h, obj.line_color, obj.line_width)
    if "p" in opt and hasattr(obj, "marker_style") and obj.marker_size > 0:
        draw_markers(dst, np.asarray([cx]), np.asarray([cy]), obj.marker_color, obj.marker_size, obj.marker_style)


def _paint_stats_box(painter: PadPainter, lines: list[str]) -> None:
    x_a, y_a = painter.ndc_to_pixels(0.78, 0.995)
    x_b, y_b = painter.ndc_to_pixels(0.98, 0.835)
    dst = painter.overlay
    fill_rect(dst, x_a, y_a, x_b, y_b, WHITE)
    stroke_rect(dst, x_a, y_a, x_b, y_b, BLACK, 1)
    row_h = (y_b - y_a) / max(1, len(lines))
    size_px = row_h * 0.7
    for row, line in enumerate(lines):
        _, th = text_size(line, font_family=DEFAULT_FONT_FAMILY, font_size_px=size_px)
        y = int(round(y_a + (row + 0.5) * row_h)) - th // 2
        draw_text(dst, x_a + 6, y, line, BLACK, font_family=DEFAULT_FONT_FAMILY, font_size_px=size_px)


def _bin_edges(
    n_bins: int,
    low: float,
    high: float,
    edges: Sequence[float] | np.ndarray | None,
    *,
    label: str,
) -> np.ndarray:
    if edges is not None:
        out = coerce_1d(edges, label=f"{label} edges")
        if out.size < 2:
            raise PlotDataError(f"{label} edges need at least two values")
        if not np.all(np.isfinite(out)) or np.any(np.diff(out) <= 0):
            raise PlotDataError(f"{label} edges must be finite and strictly increasing")
        return out
    if int(n_bins) < 1:
        raise PlotDataError(f"{label} axis needs at least one bin, got {n_bins}")
    if not (np.isfinite(low) and np.isfinite(high)) or high <= low:
        raise PlotDataError(f"{label} axis range must be increasing: [{low}, {high}]")
    return np.linspace(float(low), float(high), int(n_bins) + 1)


__all__ = [
    "AXIS_KINDS",
    "Axis",
    "AxisPrimitive",
    "Function1D",
    "Graph",
    "Histogram1D",
    "Histogram2D",
    "Legend",
    "LegendEntry",
    "Line",
    "Marker",
    "MultiGraph",
    "POINT_SET_KINDS",
    "PlotKind",
    "Plottable",
    "Primitive",
    "has_axes",
    "kind_of",
]
