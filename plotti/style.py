"""Index-addressed style tables and the context that carries them between plots."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from plotti.colors import BLACK, DEFAULT_PALETTE, RGBA, ColorGradient, palette_by_id, parse_color
from plotti.raster import LineStyle, MarkerStyle
from plotti.raster.draw_text import DEFAULT_FONT_FAMILY


LOGGER = logging.getLogger(__name__)

DEFAULT_COLOR: RGBA = BLACK
DEFAULT_MARKER = int(MarkerStyle.FULL_CIRCLE)
DEFAULT_MARKER_SIZE = 2.0
DEFAULT_LINE_STYLE = int(LineStyle.SOLID)
DEFAULT_LINE_WIDTH = 2.0
DEFAULT_LABEL_SIZE = 28.0


class Mode(Enum):
    PRESENTATION = "presentation"
    THESIS = "thesis"
    AUTO = "auto"


MODE_LABEL_SIZES = {
    Mode.PRESENTATION: 40.0,
    Mode.THESIS: 30.0,
}


@dataclass(frozen=True)
class ResolvedStyle:
    color: RGBA
    marker: int
    marker_size: float
    line_style: int
    line_width: float


@dataclass
class StyleTable:
    """Five independent, index-aligned style sequences plus a draw-position offset.

    Each attribute falls back to its own default when the index is outside its
    sequence, so a short ``marker_sizes`` list does not hide the colors.
    """

    colors: list[RGBA] = field(default_factory=list)
    markers: list[int] = field(default_factory=list)
    marker_sizes: list[float] = field(default_factory=list)
    line_styles: list[int] = field(default_factory=list)
    line_widths: list[float] = field(default_factory=list)
    offset: int = 0

    def lookup(self, index: int) -> ResolvedStyle:
        return ResolvedStyle(
            color=_at(self.colors, index, DEFAULT_COLOR),
            marker=_at(self.markers, index, DEFAULT_MARKER),
            marker_size=_at(self.marker_sizes, index, DEFAULT_MARKER_SIZE),
            line_style=_at(self.line_styles, index, DEFAULT_LINE_STYLE),
            line_width=_at(self.line_widths, index, DEFAULT_LINE_WIDTH),
        )

    def clear(self) -> None:
        self.colors.clear()
        self.markers.clear()
        self.marker_sizes.clear()
        self.line_styles.clear()
        self.line_widths.clear()
        self.offset = 0


def _at(values: Sequence[Any], index: int, default: Any) -> Any:
    if 0 <= index < len(values):
        return values[index]
    return default


@dataclass
class StyleContext:
    """Everything a plot reads when styling its objects.

    Plots built without an explicit context share :meth:`shared`, so a style set
    through one plot is seen by the next one.
    """

    table: StyleTable = field(default_factory=StyleTable)
    styles_enabled: bool = False
    font: str = DEFAULT_FONT_FAMILY
    label_size: float = DEFAULT_LABEL_SIZE
    mode: Mode = Mode.AUTO
    palette_id: int | None = DEFAULT_PALETTE
    palette_base: list[RGBA] = field(default_factory=lambda: palette_by_id(DEFAULT_PALETTE) or [])
    palette_inverted: bool = False

    @classmethod
    def shared(cls) -> StyleContext:
        return _SHARED

    @property
    def palette(self) -> list[RGBA]:
        if self.palette_inverted:
            return list(reversed(self.palette_base))
        return list(self.palette_base)

    def set_style(
        self,
        colors: Sequence[Any],
        markers: Sequence[int],
        sizes: Sequence[float] = (),
        line_styles: Sequence[int] = (),
        line_widths: Sequence[float] = (),
    ) -> None:
        self.table.colors = [parse_color(c) for c in colors]
        self.table.markers = [int(m) for m in markers]
        self.table.marker_sizes = [float(s) for s in sizes]
        self.table.line_styles = [int(s) for s in line_styles]
        self.table.line_widths = [float(w) for w in line_widths]
        self.styles_enabled = True

    def set_offset(self, offset: int) -> None:
        self.table.offset = int(offset)

    def set_mode(self, mode: Mode | str) -> None:
        mode = Mode(mode) if isinstance(mode, str) else mode
        self.mode = mode
        if mode in MODE_LABEL_SIZES:
            self.label_size = MODE_LABEL_SIZES[mode]

    def set_palette(self, palette: int | ColorGradient | Sequence[Any], invert: bool = False) -> bool:
        """Select the color-map palette; returns ``False`` when a numbered palette is unknown."""
        if isinstance(palette, ColorGradient):
            self.palette_base = palette.colors()
            self.palette_id = None
        elif isinstance(palette, int):
            colors = palette_by_id(palette)
            if colors is None:
                LOGGER.error("unknown palette %d, keeping the current palette", palette)
                return False
            self.palette_base = colors
            self.palette_id = palette
        else:
            colors = [parse_color(c) for c in palette]
            if not colors:
                LOGGER.error("empty palette, keeping the current palette")
                return False
            self.palette_base = colors
            self.palette_id = None
        self.palette_inverted = bool(invert)
        return True

    def reset(self) -> None:
        fresh = StyleContext()
        self.table = fresh.table
        self.styles_enabled = fresh.styles_enabled
        self.font = fresh.font
        self.label_size = fresh.label_size
        self.mode = fresh.mode
        self.palette_id = fresh.palette_id
        self.palette_base = fresh.palette_base
        self.palette_inverted = fresh.palette_inverted


_SHARED = StyleContext()
