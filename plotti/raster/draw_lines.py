from __future__ import annotations

from enum import IntEnum

import numpy as np

from plotti.raster.canvas import RGBA, fill_rect


class LineStyle(IntEnum):
    """Line styles, numbered as in ROOT's ``TAttLine``."""

    SOLID = 1
    DASHED = 2
    DOTTED = 3
    DASH_DOT = 4
    DASH_DOT_DOT = 5
    DASH_TRIPLE_DOT = 6
    SHORT_DASHED = 7
    DASH_DOUBLE_DOT = 8
    LONG_DASHED = 9
    LONG_DASH_DOT = 10


# on/off run lengths in pixels, applied cumulatively along a polyline
DASH_PATTERNS: dict[int, tuple[int, ...]] = {
    LineStyle.DASHED: (12, 8),
    LineStyle.DOTTED: (2, 6),
    LineStyle.DASH_DOT: (12, 6, 2, 6),
    LineStyle.DASH_DOT_DOT: (16, 6, 2, 6, 2, 6),
    LineStyle.DASH_TRIPLE_DOT: (16, 6, 2, 6, 2, 6, 2, 6),
    LineStyle.SHORT_DASHED: (8, 8),
    LineStyle.DASH_DOUBLE_DOT: (16, 8, 2, 8, 2, 8),
    LineStyle.LONG_DASHED: (32, 8),
    LineStyle.LONG_DASH_DOT: (32, 8, 2, 8),
}


def dash_pattern(style: int) -> tuple[int, ...] | None:
    return DASH_PATTERNS.get(int(style))


def draw_polyline(
    dst: np.ndarray,
    xs: np.ndarray,
    ys: np.ndarray,
    color: RGBA,
    width: int = 1,
    style: int = LineStyle.SOLID,
) -> None:
    if xs.size < 2:
        return
    pattern = dash_pattern(style)
    travelled = 0
    for i in range(xs.size - 1):
        travelled = _draw_line_segment(
            dst,
            int(xs[i]),
            int(ys[i]),
            int(xs[i + 1]),
            int(ys[i + 1]),
            color=color,
            width=width,
            pattern=pattern,
            travelled=travelled,
        )


def draw_segment(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    color: RGBA,
    width: int = 1,
    style: int = LineStyle.SOLID,
) -> None:
    _draw_line_segment(dst, x0, y0, x1, y1, color=color, width=width, pattern=dash_pattern(style), travelled=0)


def _draw_line_segment(
    dst: np.ndarray,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    *,
    color: RGBA,
    width: int,
    pattern: tuple[int, ...] | None,
    travelled: int,
) -> int:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    period = sum(pattern) if pattern else 0

    while True:
        if pattern is None or _pattern_on(pattern, period, travelled):
            _draw_square_brush(dst, x0, y0, color=color, width=width)
        if x0 == x1 and y0 == y1:
            break
        travelled += 1
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return travelled


def _pattern_on(pattern: tuple[int, ...], period: int, travelled: int) -> bool:
    pos = travelled % period
    for i, run in enumerate(pattern):
        if pos < run:
            return i % 2 == 0
        pos -= run
    return True


def _draw_square_brush(dst: np.ndarray, x: int, y: int, color: RGBA, width: int) -> None:
    radius = max(0, width // 2)
    fill_rect(dst, x - radius, y - radius, x - radius + max(1, width) - 1, y - radius + max(1, width) - 1, color)
