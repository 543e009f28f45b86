"""The four layout variants: square, ratio, single ratio and heatmap."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from plotti.canvas import Canvas, Pad
from plotti.colors import BLACK
from plotti.legend import legend_from_text
from plotti.options import force_color_map
from plotti.plot import Plot
from plotti.primitives import Legend, Line, PlotKind, kind_of
from plotti.ranges import AxisRanges, auto_range_2d
from plotti.raster import LineStyle
from plotti.resolver import set_line_properties
from plotti.style import StyleContext


LOGGER = logging.getLogger(__name__)

UNITY_LINE_STYLE = int(LineStyle.LONG_DASHED)
UNITY_LINE_WIDTH = 3.0
DEFAULT_RATIO_RANGE = (0.8, 1.2)


def _first(collection: Sequence[Any] | None) -> Any:
    if not collection:
        return None
    return collection[0]


class SquarePlot(Plot):
    """One pad on a square canvas."""

    banner = "Square Canvas"

    def __init__(
        self,
        collection: Sequence[Any],
        x_title: str = "",
        y_title: str = "",
        *,
        context: StyleContext | None = None,
    ) -> None:
        super().__init__(x_title, y_title, context=context)
        self.collection = collection
        self._ensure_axes(_first(collection), "main collection")
        self.width, self.height = 1000, 1000
        self.right_margin, self.left_margin, self.top_margin, self.bottom_margin = 0.07, 0.15, 0.07, 0.15
        self.offset_x, self.offset_y = 1.3, 1.5
        self.options = ["SAME"] * len(collection or ())

    def _compose(self, canvas: Canvas) -> None:
        first = self.collection[0]
        ranges = self._resolve_ranges(first)
        pad = Pad("main_pad", "Distribution", 0.0, 0.0, 1.0, 1.0)
        self._set_up_pad(pad, self.log_x, self.log_y, ranges)
        self._set_up_style(first, self.x_title, self.y_title, ranges)
        canvas.add_pad(pad)
        self._draw_collection(pad, self.collection, self.context.table.offset)


class RatioPlot(Plot):
    """One wide pad whose collection is followed by a dashed line at y = 1."""

    banner = "Ratio Canvas"

    def __init__(
        self,
        collection: Sequence[Any],
        x_title: str = "",
        y_title: str = "",
        *,
        context: StyleContext | None = None,
    ) -> None:
        super().__init__(x_title, y_title, context=context)
        self.collection = collection
        self._ensure_axes(_first(collection), "main collection")
        self.width, self.height = 1000, 600
        self.right_margin, self.left_margin, self.top_margin, self.bottom_margin = 0.07, 0.15, 0.07, 0.25
        self.offset_x, self.offset_y = 1.0, 0.8
        self.options = ["SAME"] * len(collection or ())
        self.one_up: float | None = None
        self.unity_line_enabled = True
        self.unity_line: Line | None = None

    def set_upper_one_limit(self, up: float | None) -> None:
        """Stop the unity line at ``up`` instead of the upper x range."""
        self.one_up = None if up is None else float(up)
        self._touch()

    def set_unity_line(self, enabled: bool = True) -> None:
        self.unity_line_enabled = bool(enabled)
        self._touch()

    def _compose(self, canvas: Canvas) -> None:
        first = self.collection[0]
        ranges = self._resolve_ranges(first)
        pad = Pad("main_pad", "Ratio", 0.0, 0.0, 1.0, 1.0)
        self._set_up_pad(pad, self.log_x, self.log_y, ranges)
        self._set_up_style(first, self.x_title, self.y_title, ranges)
        canvas.add_pad(pad)
        self._draw_ratio_collection(pad, self.collection, ranges, self.context.table.offset)

    def _draw_ratio_collection(
        self,
        pad: Pad,
        collection: Sequence[Any],
        ranges: AxisRanges,
        index_offset: int,
        option_offset: int = 0,
    ) -> None:
        items = list(collection)
        self.unity_line = None
        if self.unity_line_enabled:
            x_high = self.one_up if self.one_up else ranges.x_high
            self.unity_line = Line(ranges.x_low, 1.0, x_high, 1.0, name="unity_line")
            items.append(self.unity_line)
        self._draw_collection(pad, items, index_offset, option_offset)
        if self.unity_line is not None:
            # the unity line keeps its own look whatever the table says
            set_line_properties(self.unity_line, BLACK, UNITY_LINE_STYLE, UNITY_LINE_WIDTH)


class SingleRatioPlot(RatioPlot):
    """A main pad stacked over a ratio pad that shares its x range.

    The ratio collection resolves styles right after the main collection
    unless :meth:`set_offset` gives it its own offset.
    """

    banner = "Single Ratio Canvas"

    def __init__(
        self,
        main: Sequence[Any],
        ratio: Sequence[Any],
        x_title: str = "",
        y_title: str = "",
        ratio_title: str = "",
        *,
        context: StyleContext | None = None,
    ) -> None:
        super().__init__(main, x_title, y_title, context=context)
        self.ratio = ratio
        self._ensure_axes(_first(ratio), "ratio collection")
        self.ratio_title = ratio_title
        self.width, self.height = 1000, 1200
        self.right_margin, self.left_margin, self.top_margin, self.bottom_margin = 0.07, 0.15, 0.07, 0.4
        self.offset_x, self.offset_y = 4.5, 1.7
        self.pad_fraction = 0.3
        self.r_low, self.r_high = DEFAULT_RATIO_RANGE
        self.ratio_offset: int | None = None
        self.options = ["SAME"] * (len(main or ()) + len(ratio or ()))

    @property
    def main(self) -> Sequence[Any]:
        return self.collection

    def set_pad_fraction(self, fraction: float) -> None:
        if not 0.0 < fraction < 1.0:
            LOGGER.error("pad fraction must lie in (0, 1), got %s", fraction)
            return
        self.pad_fraction = float(fraction)
        self._touch()

    def set_offset(self, offset: int, ratio_offset: int | None = None) -> None:
        super().set_offset(offset)
        self.ratio_offset = None if ratio_offset is None else int(ratio_offset)

    def set_ranges(
        self,
        x_low: float,
        x_high: float,
        y_low: float,
        y_high: float,
        r_low: float | None = None,
        r_high: float | None = None,
    ) -> None:
        super().set_ranges(x_low, x_high, y_low, y_high)
        if r_low is not None:
            self.r_low = float(r_low)
        if r_high is not None:
            self.r_high = float(r_high)

    def set_options(
        self,
        options: str | Sequence[str],
        positions: str | Sequence[int] | None = None,
        offset: int = 0,
    ) -> None:
        """Like :meth:`Plot.set_options`; ``"main;ratio"`` strings address both collections.

        The main half sets a single option at its position, the ratio half is
        handled as newline options at positions counted from the end of the
        main collection.
        """
        if not (isinstance(options, str) and isinstance(positions, str) and ";" in options):
            super().set_options(options, positions, offset)
            return
        main_option, _, ratio_options = options.partition(";")
        main_position, _, ratio_positions = positions.partition(";")
        if main_option and main_position.strip():
            try:
                main_index = int(main_position)
            except ValueError:
                LOGGER.error("set_options: position %r is not an integer, option %s skipped", main_position, main_option)
            else:
                self.set_option(main_option, main_index)
        super().set_options(ratio_options, ratio_positions, len(self.main))

    def _compose(self, canvas: Canvas) -> None:
        first = self.main[0]
        ranges = self._resolve_ranges(first)
        upper = Pad("main_pad", "Distribution", 0.0, self.pad_fraction, 1.0, 1.0)
        self._set_up_pad(upper, self.log_x, self.log_y, ranges)
        upper.set_margins(bottom=0.0)
        self._set_up_style(first, "", self.y_title, ranges)
        first.x_axis.label_size = 0
        first.x_axis.label_color = canvas.background
        canvas.add_pad(upper)

        ratio_ranges = AxisRanges(ranges.x_low, ranges.x_high, self.r_low, self.r_high)
        lower = Pad("ratio_pad", "Ratio", 0.0, 0.0, 1.0, self.pad_fraction)
        self._set_up_pad(lower, self.log_x, False, ratio_ranges)
        lower.set_margins(top=0.0)
        self._set_up_style(self.ratio[0], self.x_title, self.ratio_title, ratio_ranges)
        canvas.add_pad(lower)

        self._draw_collection(upper, self.main, self.context.table.offset)
        ratio_offset = self.ratio_offset if self.ratio_offset is not None else len(self.main)
        self._draw_ratio_collection(lower, self.ratio, ratio_ranges, ratio_offset, len(self.main))


class HeatmapPlot(Plot):
    """A 2-D histogram drawn as a color map with its palette bar, plus a legend."""

    banner = "Heatmap Canvas"

    def __init__(
        self,
        hist2d: Any,
        legend: Legend | str | Sequence[str] | None = None,
        x_title: str = "",
        y_title: str = "",
        z_title: str = "",
        *,
        context: StyleContext | None = None,
    ) -> None:
        super().__init__(x_title, y_title, context=context)
        self.z_title = z_title
        if legend is None or isinstance(legend, Legend):
            self.legend = legend
            self.owns_legend = False
        else:
            self.legend = legend_from_text(legend)
            self.owns_legend = True
        self.collection: list[Any] = [hist2d] if self.legend is None else [hist2d, self.legend]

        if self._ensure_axes(hist2d, "heatmap collection") and kind_of(hist2d) is not PlotKind.HISTOGRAM_2D:
            LOGGER.critical("first entry in heatmap collection must be a 2-D histogram, got %s", type(hist2d).__name__)
            self._broken = True

        self.width, self.height = 1000, 900
        self.right_margin, self.left_margin, self.top_margin, self.bottom_margin = 0.2, 0.15, 0.07, 0.15
        self.offset_x, self.offset_y, self.offset_z = 1.3, 1.5, 1.6
        self.log_z = False
        self.z_low: float | None = None
        self.z_high: float | None = None
        self.options = ["SAME"] * len(self.collection)

    def set_canvas_offsets(self, x: float, y: float, z: float | None = None) -> None:
        super().set_canvas_offsets(x, y)
        if z is not None:
            self.offset_z = float(z)

    def set_log(self, x: bool = False, y: bool = False, z: bool = True) -> None:
        super().set_log(x, y)
        self.log_z = bool(z)

    def set_ranges(
        self,
        x_low: float,
        x_high: float,
        y_low: float,
        y_high: float,
        z_low: float | None = None,
        z_high: float | None = None,
    ) -> None:
        super().set_ranges(x_low, x_high, y_low, y_high)
        self.z_low = None if z_low is None else float(z_low)
        self.z_high = None if z_high is None else float(z_high)

    def _resolve_ranges(self, first: Any) -> AxisRanges:
        ranges = super()._resolve_ranges(first)
        z_low, z_high = ranges.z_low, ranges.z_high
        if z_low is None or z_high is None:
            # manual x/y ranges leave z to the contents
            auto = auto_range_2d(first)
            z_low, z_high = auto.z_low, auto.z_high
        if self.z_low is not None:
            z_low = self.z_low
        if self.z_high is not None:
            z_high = self.z_high
        return AxisRanges(ranges.x_low, ranges.x_high, ranges.y_low, ranges.y_high, z_low, z_high)

    def _compose(self, canvas: Canvas) -> None:
        hist = self.collection[0]
        self.options[0] = force_color_map(self.options[0])
        ranges = self._resolve_ranges(hist)
        pad = Pad("main_pad", "Heatmap", 0.0, 0.0, 1.0, 1.0)
        self._set_up_pad(pad, self.log_x, self.log_y, ranges)
        if self.log_z:
            if ranges.z_low is not None and ranges.z_low > 0:
                pad.log_z = True
            else:
                LOGGER.warning("set_log: z range must be above zero, logarithm not set")
        self._set_up_style(hist, self.x_title, self.y_title, ranges)
        self._set_z_style(hist, ranges)
        canvas.add_pad(pad)
        self._draw_collection(pad, self.collection, self.context.table.offset)

    def _set_z_style(self, hist: Any, ranges: AxisRanges) -> None:
        axis = hist.z_axis
        axis.set_title(self.z_title)
        axis.title_offset = self.offset_z
        axis.title_size = self.context.label_size
        axis.title_font = self.context.font
        axis.label_size = self.context.label_size
        axis.label_font = self.context.font
        if ranges.z_low is not None and ranges.z_high is not None:
            axis.set_range_user(ranges.z_low, ranges.z_high)
