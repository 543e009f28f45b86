from __future__ import annotations

from enum import IntEnum
from functools import lru_cache

import numpy as np

from plotti.raster.canvas import RGBA, blend_mask


class MarkerStyle(IntEnum):
    """Marker shapes, numbered as in ROOT's ``TAttMarker``."""

    DOT = 1
    PLUS = 2
    STAR = 3
    CIRCLE = 4
    MULTIPLY = 5
    FULL_CIRCLE = 20
    FULL_SQUARE = 21
    FULL_TRIANGLE_UP = 22
    FULL_TRIANGLE_DOWN = 23
    OPEN_CIRCLE = 24
    OPEN_SQUARE = 25
    OPEN_TRIANGLE_UP = 26
    OPEN_DIAMOND = 27
    OPEN_CROSS = 28
    FULL_STAR = 29
    OPEN_STAR = 30
    OPEN_TRIANGLE_DOWN = 32
    FULL_DIAMOND = 33
    FULL_CROSS = 34


# ROOT draws a size-1 marker roughly 8 px across
PIXELS_PER_MARKER_SIZE = 8.0


def marker_radius(size: float) -> int:
    return max(1, int(round(float(size) * PIXELS_PER_MARKER_SIZE * 0.5)))


def draw_markers(
    dst: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    color: RGBA,
    size: float = 1.0,
    style: int = MarkerStyle.FULL_CIRCLE,
) -> None:
    mask = marker_mask(int(style), marker_radius(size))
    radius = mask.shape[0] // 2
    for x, y in zip(xs.tolist(), ys.tolist(), strict=False):
        blend_mask(dst, int(x) - radius, int(y) - radius, mask, color)


@lru_cache(maxsize=256)
def marker_mask(style: int, radius: int) -> np.ndarray:
    n = 2 * radius + 1
    yy, xx = np.mgrid[-radius : radius + 1, -radius : radius + 1].astype(np.float64)
    r = float(radius)
    ring = max(1.0, r * 0.25)
    disk = xx**2 + yy**2 <= (r + 0.25) ** 2
    box = np.ones((n, n), dtype=bool)
    up = (yy >= -r) & (np.abs(xx) <= (yy + r) * 0.5 + 0.5)
    down = (yy <= r) & (np.abs(xx) <= (r - yy) * 0.5 + 0.5)
    diamond = np.abs(xx) + np.abs(yy) <= r + 0.25
    plus = (np.abs(xx) <= ring * 0.5) | (np.abs(yy) <= ring * 0.5)
    cross = (np.abs(xx - yy) <= ring * 0.7) | (np.abs(xx + yy) <= ring * 0.7)
    star = (plus | cross) & disk

    if style == MarkerStyle.DOT:
        out = xx**2 + yy**2 <= 1.0
    elif style == MarkerStyle.PLUS:
        out = plus
    elif style in (MarkerStyle.STAR, MarkerStyle.FULL_STAR):
        out = star
    elif style == MarkerStyle.OPEN_STAR:
        out = star & ~_shrink(star)
    elif style in (MarkerStyle.CIRCLE, MarkerStyle.OPEN_CIRCLE):
        out = disk & (xx**2 + yy**2 >= (r - ring) ** 2)
    elif style == MarkerStyle.MULTIPLY:
        out = cross & disk
    elif style == MarkerStyle.FULL_SQUARE:
        out = box
    elif style == MarkerStyle.OPEN_SQUARE:
        out = box & ((np.abs(xx) > r - ring) | (np.abs(yy) > r - ring))
    elif style == MarkerStyle.FULL_TRIANGLE_UP:
        out = up
    elif style == MarkerStyle.OPEN_TRIANGLE_UP:
        out = up & ~_shrink(up)
    elif style == MarkerStyle.FULL_TRIANGLE_DOWN:
        out = down
    elif style == MarkerStyle.OPEN_TRIANGLE_DOWN:
        out = down & ~_shrink(down)
    elif style == MarkerStyle.FULL_DIAMOND:
        out = diamond
    elif style == MarkerStyle.OPEN_DIAMOND:
        out = diamond & (np.abs(xx) + np.abs(yy) >= r - ring)
    elif style == MarkerStyle.FULL_CROSS:
        out = (np.abs(xx) <= r / 3.0) | (np.abs(yy) <= r / 3.0)
    elif style == MarkerStyle.OPEN_CROSS:
        full = (np.abs(xx) <= r / 3.0) | (np.abs(yy) <= r / 3.0)
        out = full & ~_shrink(full)
    else:
        out = disk
    return np.ascontiguousarray(out)


def _shrink(mask: np.ndarray) -> np.ndarray:
    # one-pixel erosion, used to hollow out filled shapes
    out = mask.copy()
    out[1:, :] &= mask[:-1, :]
    out[:-1, :] &= mask[1:, :]
    out[:, 1:] &= mask[:, :-1]
    out[:, :-1] &= mask[:, 1:]
    out[0, :] = False
    out[-1, :] = False
    out[:, 0] = False
    out[:, -1] = False
    return out
