from plotti.canvas import Canvas, Pad
from plotti.colors import Color, ColorGradient, alice_logo, parse_color, purple_to_yellow, rainbow
from plotti.config import load_style_context
from plotti.errors import PaletteError, PlotDataError
from plotti.layouts import HeatmapPlot, RatioPlot, SingleRatioPlot, SquarePlot
from plotti.legend import legend_from_collection, legend_from_styles, legend_from_text, set_position
from plotti.plot import Plot, PlotState
from plotti.primitives import (
    Function1D,
    Graph,
    Histogram1D,
    Histogram2D,
    Legend,
    Line,
    Marker,
    MultiGraph,
    PlotKind,
)
from plotti.ranges import AxisRanges, auto_range
from plotti.style import Mode, StyleContext, StyleTable

__all__ = [
    "AxisRanges",
    "Canvas",
    "Color",
    "ColorGradient",
    "Function1D",
    "Graph",
    "HeatmapPlot",
    "Histogram1D",
    "Histogram2D",
    "Legend",
    "Line",
    "Marker",
    "Mode",
    "MultiGraph",
    "Pad",
    "PaletteError",
    "Plot",
    "PlotDataError",
    "PlotKind",
    "PlotState",
    "RatioPlot",
    "SingleRatioPlot",
    "SquarePlot",
    "StyleContext",
    "StyleTable",
    "alice_logo",
    "auto_range",
    "legend_from_collection",
    "legend_from_styles",
    "legend_from_text",
    "load_style_context",
    "parse_color",
    "purple_to_yellow",
    "rainbow",
    "set_position",
]
