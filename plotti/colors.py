"""Colors, color gradients and the numbered palettes used for color maps."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from plotti.errors import PaletteError


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

_HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


def _channel(value: float) -> int:
    return int(round(min(1.0, max(0.0, float(value))) * 255.0))


@dataclass(frozen=True)
class Color:
    """An RGB color with channels in ``[0, 1]``."""

    r: float
    g: float
    b: float

    def rgba(self, alpha: float = 1.0) -> RGBA:
        return (
            _channel(self.r),
            _channel(self.g),
            _channel(self.b),
            _channel(alpha),
        )


BLUE = Color(0.00, 0.00, 1.00)
GREEN = Color(0.00, 1.00, 0.00)
RED = Color(1.00, 0.00, 0.00)
CYAN = Color(0.00, 1.00, 1.00)
YELLOW = Color(1.00, 1.00, 0.00)
MAGENTA = Color(1.00, 0.00, 1.00)
PURPLE = Color(0.40, 0.00, 0.60)

ALICE_RED = Color(0.851, 0.027, 0.094)
ALICE_BLUE = Color(0.012, 0.039, 0.549)
ALICE_GREY = Color(0.169, 0.220, 0.251)
ALICE_ORANGE = Color(0.949, 0.475, 0.059)
ALICE_ROSERED = Color(0.749, 0.255, 0.255)

BLACK: RGBA = (0, 0, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
GRAY: RGBA = (204, 204, 204, 255)
DARK_GRAY: RGBA = (64, 64, 64, 255)
TRANSPARENT: RGBA = (0, 0, 0, 0)

NAMED_COLORS: dict[str, RGBA] = {
    "black": BLACK,
    "white": WHITE,
    "gray": GRAY,
    "grey": GRAY,
    "dark_gray": DARK_GRAY,
    "dark_grey": DARK_GRAY,
    "transparent": TRANSPARENT,
    "blue": BLUE.rgba(),
    "green": GREEN.rgba(),
    "red": RED.rgba(),
    "cyan": CYAN.rgba(),
    "yellow": YELLOW.rgba(),
    "magenta": MAGENTA.rgba(),
    "purple": PURPLE.rgba(),
    "alice_red": ALICE_RED.rgba(),
    "alice_blue": ALICE_BLUE.rgba(),
    "alice_grey": ALICE_GREY.rgba(),
    "alice_orange": ALICE_ORANGE.rgba(),
    "alice_rosered": ALICE_ROSERED.rgba(),
}


def parse_color(value: Any) -> RGBA:
    """Accept ``#RRGGBB[AA]``, a color name, a :class:`Color` or an RGB(A) tuple of ints."""
    if isinstance(value, Color):
        return value.rgba()
    if isinstance(value, str):
        text = value.strip()
        if _HEX_COLOR_RE.match(text):
            r = int(text[1:3], 16)
            g = int(text[3:5], 16)
            b = int(text[5:7], 16)
            a = int(text[7:9], 16) if len(text) == 9 else 255
            return (r, g, b, a)
        named = NAMED_COLORS.get(text.lower())
        if named is None:
            raise ValueError(f"unknown color: {value!r}")
        return named
    if isinstance(value, Sequence) and len(value) in (3, 4):
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f"color channels must be in 0..255: {value!r}")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise ValueError(f"unsupported color value: {value!r}")


class ColorGradient:
    """Piecewise-linear gradient of ``n_points`` colors through ``endpoints``.

    ``stops`` places each endpoint in ``[0, 1]``; when omitted the endpoints are
    spread evenly. A stops list whose length differs from the endpoints raises
    :class:`PaletteError`.
    """

    def __init__(
        self,
        n_points: int,
        endpoints: Sequence[Color],
        stops: Sequence[float] | None = None,
        alpha: float = 1.0,
    ) -> None:
        if n_points < 1:
            raise PaletteError("a color gradient needs at least one point")
        if len(endpoints) < 2:
            raise PaletteError("a color gradient needs at least two endpoints")
        if not stops:
            positions = np.linspace(0.0, 1.0, len(endpoints))
        elif len(stops) != len(endpoints):
            LOGGER.error("number of stops (%d) does not match number of colors (%d)", len(stops), len(endpoints))
            raise PaletteError(
                f"number of stops ({len(stops)}) does not match number of colors ({len(endpoints)})"
            )
        else:
            positions = np.asarray(stops, dtype=np.float64)
            if np.any(np.diff(positions) < 0):
                raise PaletteError("gradient stops must be non-decreasing")

        self._n_points = int(n_points)
        self._alpha = float(alpha)
        samples = np.linspace(float(positions[0]), float(positions[-1]), self._n_points)
        channels = np.asarray([(c.r, c.g, c.b) for c in endpoints], dtype=np.float64)
        rgb = np.stack([np.interp(samples, positions, channels[:, i]) for i in range(3)], axis=1)
        self._colors: list[RGBA] = [Color(*row).rgba(self._alpha) for row in rgb.tolist()]

    @property
    def n_points(self) -> int:
        return self._n_points

    def colors(self) -> list[RGBA]:
        return list(self._colors)

    def __len__(self) -> int:
        return self._n_points

    def __repr__(self) -> str:
        return f"ColorGradient(n_points={self._n_points}, alpha={self._alpha})"


def lookup_palette(palette: Sequence[RGBA], fraction: float) -> RGBA:
    """Pick the palette color for ``fraction`` in ``[0, 1]`` (clamped)."""
    if not palette:
        return BLACK
    f = min(1.0, max(0.0, float(fraction)))
    return palette[min(len(palette) - 1, int(f * len(palette)))]


rainbow = ColorGradient(20, [BLUE, CYAN, GREEN, YELLOW, RED, MAGENTA])
alice_logo = ColorGradient(100, [ALICE_GREY, ALICE_BLUE, ALICE_RED, ALICE_ROSERED, ALICE_ORANGE])
purple_to_yellow = ColorGradient(100, [PURPLE, YELLOW])

DEEP_SEA = 51
DARK_BODY_RADIATOR = 53
RAIN_BOW = 55
BIRD = 57
VIRIDIS = 112

_PALETTE_POINTS = 255

# (stops, red, green, blue)
_PALETTE_TABLES: dict[int, tuple[tuple[float, ...], tuple[float, ...], tuple[float, ...], tuple[float, ...]]] = {
    DEEP_SEA: (
        (0.00, 0.34, 0.61, 0.84, 1.00),
        (0.00, 0.09, 0.18, 0.09, 0.00),
        (0.01, 0.02, 0.39, 0.68, 0.97),
        (0.17, 0.39, 0.62, 0.79, 0.97),
    ),
    DARK_BODY_RADIATOR: (
        (0.00, 0.25, 0.50, 0.75, 1.00),
        (0.00, 0.50, 1.00, 1.00, 1.00),
        (0.00, 0.00, 0.55, 1.00, 1.00),
        (0.00, 0.00, 0.00, 0.00, 1.00),
    ),
    RAIN_BOW: (
        (0.00, 0.20, 0.40, 0.60, 0.80, 1.00),
        (0.18, 0.00, 0.00, 0.75, 1.00, 0.80),
        (0.00, 0.30, 0.80, 0.90, 0.55, 0.00),
        (0.50, 1.00, 0.55, 0.00, 0.00, 0.00),
    ),
    BIRD: (
        (0.0000, 0.1250, 0.2500, 0.3750, 0.5000, 0.6250, 0.7500, 0.8750, 1.0000),
        (0.2082, 0.0592, 0.0780, 0.0232, 0.1802, 0.5301, 0.8186, 0.9956, 0.9764),
        (0.1664, 0.3599, 0.5041, 0.6419, 0.7178, 0.7492, 0.7328, 0.7862, 0.9832),
        (0.5293, 0.8684, 0.8385, 0.7914, 0.6425, 0.4662, 0.3499, 0.1968, 0.0539),
    ),
    VIRIDIS: (
        (0.0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0),
        (0.267, 0.283, 0.254, 0.207, 0.164, 0.128, 0.135, 0.267, 0.478, 0.741, 0.993),
        (0.005, 0.141, 0.265, 0.372, 0.471, 0.567, 0.659, 0.749, 0.821, 0.873, 0.906),
        (0.329, 0.458, 0.530, 0.553, 0.558, 0.551, 0.518, 0.441, 0.318, 0.150, 0.144),
    ),
}

DEFAULT_PALETTE = BIRD


def palette_by_id(palette_id: int) -> list[RGBA] | None:
    """Colors of a numbered palette, or ``None`` when the number is unknown."""
    table = _PALETTE_TABLES.get(int(palette_id))
    if table is None:
        return None
    stops, red, green, blue = table
    endpoints = [Color(r, g, b) for r, g, b in zip(red, green, blue, strict=True)]
    return ColorGradient(_PALETTE_POINTS, endpoints, stops).colors()


def known_palettes() -> list[int]:
    return sorted(_PALETTE_TABLES)
