from __future__ import annotations

import logging
from typing import Any

from plotti.primitives import PlotKind, kind_of
from plotti.style import (
    DEFAULT_LINE_STYLE,
    DEFAULT_LINE_WIDTH,
    DEFAULT_MARKER_SIZE,
    ResolvedStyle,
    StyleContext,
)


LOGGER = logging.getLogger(__name__)

_PLOTTABLE_KINDS = frozenset({PlotKind.HISTOGRAM, PlotKind.HISTOGRAM_2D, PlotKind.FUNCTION, PlotKind.GRAPH})


def set_line_properties(obj: Any, color: Any, style: int = DEFAULT_LINE_STYLE, width: float = DEFAULT_LINE_WIDTH) -> None:
    obj.set_line_style(style)
    obj.set_line_width(width)
    obj.set_line_color(color)


def set_marker_properties(obj: Any, color: Any, style: int, size: float = DEFAULT_MARKER_SIZE) -> None:
    obj.set_marker_color(color)
    obj.set_marker_style(style)
    obj.set_marker_size(size)


def set_plottable_properties(
    obj: Any,
    color: Any,
    marker: int,
    size: float = DEFAULT_MARKER_SIZE,
    line_style: int = DEFAULT_LINE_STYLE,
    line_width: float = DEFAULT_LINE_WIDTH,
    title: str | None = None,
) -> None:
    """Apply one color to markers and lines of ``obj``; ``title`` replaces the title when given."""
    if title is not None:
        obj.set_title(title)
    set_marker_properties(obj, color, marker, size)
    set_line_properties(obj, color, line_style, line_width)


class StyleResolver:
    """Applies the context's style table to objects by draw index."""

    def __init__(self, context: StyleContext) -> None:
        self.context = context

    def resolve(self, obj: Any, index: int) -> None:
        kind = kind_of(obj)
        if kind is PlotKind.LEGEND:
            obj.set_text_font(self.context.font)
            obj.set_text_size(self.context.label_size)
            obj.set_border_size(0)
            return

        if not self.context.styles_enabled:
            return

        table = self.context.table
        if kind in _PLOTTABLE_KINDS:
            _apply(obj, table.lookup(index))
            if kind in (PlotKind.HISTOGRAM, PlotKind.HISTOGRAM_2D):
                obj.set_stats(False)
        elif kind is PlotKind.MULTI_GRAPH:
            for graph in obj.graphs:
                if graph is None:
                    continue
                if index >= len(table.markers):
                    break
                _apply(graph, table.lookup(index))
                index += 1
        elif kind is PlotKind.LINE:
            style = table.lookup(index)
            set_line_properties(obj, style.color, style.line_style, style.line_width)
        elif kind is PlotKind.MARKER:
            style = table.lookup(index)
            set_marker_properties(obj, style.color, style.marker, style.marker_size)
        else:
            LOGGER.warning("missing class %s", type(obj).__name__)


def _apply(obj: Any, style: ResolvedStyle) -> None:
    set_plottable_properties(obj, style.color, style.marker, style.marker_size, style.line_style, style.line_width)
