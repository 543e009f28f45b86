"""Axis ranges derived from the first element of a collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from plotti.primitives import Histogram1D, Histogram2D


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisRanges:
    x_low: float
    x_high: float
    y_low: float
    y_high: float
    z_low: float | None = None
    z_high: float | None = None


def _upper(value: float) -> float:
    return value * 1.2 if value > 0 else value * 0.8


def _lower(value: float) -> float:
    return value * 0.8 if value > 0 else value * 1.2


def _x_range(hist: Histogram1D) -> tuple[float, float]:
    # one bin beyond the filled region on each side
    return hist.bin_center(hist.first_filled_bin() - 1), hist.bin_center(hist.last_filled_bin() + 1)


def auto_range(hist: Histogram1D) -> AxisRanges:
    """Ranges for a 1-D histogram: 20% headroom in y, x trimmed to the filled bins.

    A maximum of 100 and a minimum of 10 give a y range of (8, 120); negative
    extremes scale the other way, so (-50, -5) gives (-60, -4).
    """
    x_low, x_high = _x_range(hist)
    return AxisRanges(
        x_low=x_low,
        x_high=x_high,
        y_low=_lower(hist.minimum()),
        y_high=_upper(hist.maximum()),
    )


def auto_range_2d(hist: Histogram2D) -> AxisRanges:
    """Like :func:`auto_range` on both projections; z follows the filled cells only."""
    x_low, x_high = _x_range(hist.projection_x())
    y_low, y_high = _x_range(hist.projection_y())
    filled = hist.contents[hist.contents != 0]
    cells = filled if filled.size else hist.contents
    return AxisRanges(
        x_low=x_low,
        x_high=x_high,
        y_low=y_low,
        y_high=y_high,
        z_low=_lower(float(np.min(cells))),
        z_high=_upper(float(np.max(cells))),
    )


def natural_ranges(obj: Any) -> AxisRanges:
    """The object's own extent, used where no auto-ranging rule exists."""
    # TODO: derive headroom-style ranges for functions and graphs once their sampling is settled
    limits = obj.frame_limits()
    LOGGER.debug("using natural ranges for %s: %s", getattr(obj, "name", obj), limits)
    return AxisRanges(x_low=limits.xmin, x_high=limits.xmax, y_low=limits.ymin, y_high=limits.ymax)
