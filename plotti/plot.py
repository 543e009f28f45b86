"""Shared layout state and drawing pipeline of every plot variant.

A plot keeps non-owning references to the caller's collections. ``draw`` runs
the same pipeline for every variant: banner, broken gate, canvas creation,
variant composition (``_compose``), then canvas update and save.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from plotti.canvas import Canvas, Pad
from plotti.colors import ColorGradient
from plotti.options import strip_overlay
from plotti.primitives import POINT_SET_KINDS, PlotKind, has_axes, kind_of
from plotti.ranges import AxisRanges, auto_range, auto_range_2d, natural_ranges
from plotti.resolver import StyleResolver
from plotti.style import Mode, StyleContext


LOGGER = logging.getLogger(__name__)

BANNER_RULE = "-" * 29
DEFAULT_TICK_LENGTH = 0.03
DEFAULT_OPTION = "SAME"


class PlotState(Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    DRAWN = "drawn"
    BROKEN = "broken"


class Plot:
    """Base of the layout variants.

    Subclasses set their canvas geometry and option table in ``__init__`` and
    implement ``_compose`` to build pads and draw their collections.
    """

    banner = "Canvas"
    canvas_title = "PLOT"

    def __init__(self, x_title: str = "", y_title: str = "", *, context: StyleContext | None = None) -> None:
        self.context = context if context is not None else StyleContext.shared()
        self.resolver = StyleResolver(self.context)
        self.x_title = x_title
        self.y_title = y_title

        self.width = 0
        self.height = 0
        self.right_margin = 0.0
        self.left_margin = 0.0
        self.top_margin = 0.0
        self.bottom_margin = 0.0
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.log_x = False
        self.log_y = False

        self.x_low = 0.0
        self.x_high = 100.0
        self.y_low = 0.0
        self.y_high = 100.0
        self.manual_ranges = False

        self.options: list[str] = []
        self.canvas: Canvas | None = None
        self._broken = False
        self._configured = False
        self._drawn = False

    @property
    def broken(self) -> bool:
        return self._broken

    @property
    def state(self) -> PlotState:
        if self._broken:
            return PlotState.BROKEN
        if self._drawn:
            return PlotState.DRAWN
        if self._configured:
            return PlotState.CONFIGURED
        return PlotState.UNCONFIGURED

    def _touch(self) -> None:
        self._configured = True

    # -- configuration -------------------------------------------------------

    def set_canvas_dimensions(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self._touch()

    def set_canvas_margins(self, right: float, left: float, top: float, bottom: float) -> None:
        self.right_margin = float(right)
        self.left_margin = float(left)
        self.top_margin = float(top)
        self.bottom_margin = float(bottom)
        self._touch()

    def set_canvas_offsets(self, x: float, y: float) -> None:
        self.offset_x = float(x)
        self.offset_y = float(y)
        self._touch()

    def set_log(self, x: bool = False, y: bool = True) -> None:
        self.log_x = bool(x)
        self.log_y = bool(y)
        self._touch()

    def set_ranges(self, x_low: float, x_high: float, y_low: float, y_high: float) -> None:
        self.x_low = float(x_low)
        self.x_high = float(x_high)
        self.y_low = float(y_low)
        self.y_high = float(y_high)
        self.manual_ranges = True
        self._touch()

    def set_offset(self, offset: int) -> None:
        self.context.set_offset(offset)
        self._touch()

    def set_mode(self, mode: Mode | str) -> None:
        self.context.set_mode(mode)
        self._touch()

    def set_style(
        self,
        colors: Sequence[Any],
        markers: Sequence[int],
        sizes: Sequence[float] = (),
        line_styles: Sequence[int] = (),
        line_widths: Sequence[float] = (),
    ) -> None:
        self.context.set_style(colors, markers, sizes, line_styles, line_widths)
        self._touch()

    def set_palette(self, palette: int | ColorGradient | Sequence[Any], invert: bool = False) -> None:
        self.context.set_palette(palette, invert)
        self._touch()

    def set_options(
        self,
        options: str | Sequence[str],
        positions: str | Sequence[int] | None = None,
        offset: int = 0,
    ) -> None:
        """Assign draw options.

        - a single string: that option for every position;
        - a sequence of strings: the whole option table;
        - newline-separated options with whitespace-separated ``positions``:
          each option at its position shifted by ``offset``.
        """
        self._touch()
        if positions is None:
            if isinstance(options, str):
                self.options = [options] * len(self.options)
            else:
                self.options = [str(option) for option in options]
            return

        option_list = options.split("\n") if isinstance(options, str) else list(options)
        position_list = positions.split() if isinstance(positions, str) else list(positions)
        for option, position in zip(option_list, position_list):
            if not option or position == "":
                break
            try:
                index = int(position)
            except (TypeError, ValueError):
                LOGGER.error("set_options: position %r is not an integer, option %s skipped", position, option)
                continue
            self.set_option(option, index + offset)
            LOGGER.info("- %s %s", option, position)

    def set_option(self, option: str, position: int) -> None:
        if 0 <= position < len(self.options):
            self.options[position] = option
        else:
            LOGGER.error("set_option: position %d is out of range (%d options)", position, len(self.options))
        self._touch()

    # -- drawing -------------------------------------------------------------

    def draw(self, outname: str | Path) -> Path | None:
        """Render the plot and write it to ``outname``; ``None`` when the plot is broken."""
        LOGGER.info(BANNER_RULE)
        LOGGER.info("     Plot %s:", self.banner)
        LOGGER.info(BANNER_RULE)
        if self._broken:
            LOGGER.error("due to one or more fatal errors %s will not be drawn", outname)
            return None

        canvas = Canvas("canvas", self.canvas_title, self.width, self.height)
        self.canvas = canvas
        self._compose(canvas)
        canvas.update()
        path = canvas.save(outname)
        self._drawn = True
        return path

    def _compose(self, canvas: Canvas) -> None:
        raise NotImplementedError

    def _ensure_axes(self, first: Any, collection_name: str = "") -> bool:
        if first is None:
            LOGGER.critical("first entry in %s doesn't exist", collection_name or "collection")
            self._broken = True
            return False
        if not has_axes(first):
            LOGGER.critical("first entry in %s must have axes, got %s", collection_name or "collection", type(first).__name__)
            self._broken = True
            return False
        return True

    def _resolve_ranges(self, first: Any) -> AxisRanges:
        if self.manual_ranges:
            return AxisRanges(self.x_low, self.x_high, self.y_low, self.y_high)
        kind = kind_of(first)
        if kind is PlotKind.HISTOGRAM:
            ranges = auto_range(first)
        elif kind is PlotKind.HISTOGRAM_2D:
            ranges = auto_range_2d(first)
        else:
            ranges = natural_ranges(first)
        self.x_low, self.x_high = ranges.x_low, ranges.x_high
        self.y_low, self.y_high = ranges.y_low, ranges.y_high
        return ranges

    def _set_up_pad(self, pad: Pad, log_x: bool, log_y: bool, ranges: AxisRanges) -> None:
        pad.set_fill_color(None)
        pad.set_margins(self.right_margin, self.left_margin, self.top_margin, self.bottom_margin)
        pad.tick_x = True
        pad.tick_y = True
        if log_x:
            if ranges.x_low > 0:
                pad.log_x = True
            else:
                LOGGER.warning("set_log: x range must be above zero, logarithm not set")
        if log_y:
            if ranges.y_low > 0:
                pad.log_y = True
            else:
                LOGGER.warning("set_log: y range must be above zero, logarithm not set")
        pad.set_palette(self.context.palette)

    def _set_canvas_style(self, first: Any) -> None:
        for axis, offset in ((first.x_axis, self.offset_x), (first.y_axis, self.offset_y)):
            axis.title_offset = offset
            axis.tick_length = DEFAULT_TICK_LENGTH
            axis.title_size = self.context.label_size
            axis.title_font = self.context.font
            axis.label_font = self.context.font
            axis.label_size = self.context.label_size

    def _set_pad_style(self, first: Any, x_title: str, y_title: str, ranges: AxisRanges) -> None:
        if kind_of(first) is PlotKind.GRAPH:
            first.x_axis.set_limits(ranges.x_low, ranges.x_high)
        else:
            first.x_axis.set_range_user(ranges.x_low, ranges.x_high)
        first.y_axis.set_range_user(ranges.y_low, ranges.y_high)
        first.x_axis.set_title(x_title)
        first.y_axis.set_title(y_title)

    def _set_up_style(self, first: Any, x_title: str, y_title: str, ranges: AxisRanges) -> None:
        self._set_pad_style(first, x_title, y_title, ranges)
        self._set_canvas_style(first)

    def _option_for(self, position: int) -> str:
        if 0 <= position < len(self.options):
            return self.options[position]
        LOGGER.debug("no option at position %d, using %s", position, DEFAULT_OPTION)
        return DEFAULT_OPTION

    def _draw_collection(
        self,
        pad: Pad,
        collection: Sequence[Any],
        index_offset: int = 0,
        option_offset: int = 0,
    ) -> None:
        for position, obj in enumerate(collection):
            if obj is None:
                LOGGER.error("plot object no %d is broken, will be skipped", position)
                continue
            if not callable(getattr(obj, "draw", None)):
                LOGGER.error("plot object no %d (%s) cannot be drawn, will be skipped", position, type(obj).__name__)
                continue
            option = self._option_for(position + option_offset)
            if kind_of(obj) in POINT_SET_KINDS:
                option = strip_overlay(option)
            LOGGER.info(" -> draw %s: %s as %s", type(obj).__name__, getattr(obj, "name", ""), option)
            self.resolver.resolve(obj, position + index_offset)
            obj.draw(pad, option)
