from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when plottable input data or an output target is malformed."""


class PaletteError(PlotDataError):
    """Raised when a color gradient cannot be generated from its endpoints."""
