"""ROOT-style draw option strings (``"SAME"``, ``"AP"``, ``"HIST"``, ``"COLZ"`` ...)."""

from __future__ import annotations

import re
from dataclasses import dataclass


_SAME_RE = re.compile(r"same", re.IGNORECASE)
_COL_RE = re.compile(r"colz?", re.IGNORECASE)


@dataclass(frozen=True)
class DrawOption:
    same: bool = False
    axes: bool = False
    hist: bool = False
    errors: bool = False
    markers: bool = False
    line: bool = False
    smooth: bool = False
    color_map: bool = False
    palette_axis: bool = False


def parse_option(text: str | None) -> DrawOption:
    raw = (text or "").upper()
    same = "SAME" in raw
    rest = _SAME_RE.sub(" ", raw)

    color_map = False
    palette_axis = False
    match = _COL_RE.search(rest)
    if match is not None:
        color_map = True
        palette_axis = match.group(0).upper() == "COLZ"
        rest = rest[: match.start()] + " " + rest[match.end() :]

    hist = "HIST" in rest
    rest = rest.replace("HIST", " ")

    return DrawOption(
        same=same,
        axes="A" in rest,
        hist=hist,
        errors="E" in rest,
        markers="P" in rest,
        line="L" in rest,
        smooth="C" in rest,
        color_map=color_map,
        palette_axis=palette_axis,
    )


def strip_overlay(text: str | None) -> str:
    """Remove every ``SAME`` token (any case) and trim surrounding whitespace."""
    return _SAME_RE.sub("", text or "").strip()


def force_color_map(text: str | None) -> str:
    """Return ``text`` with its color-map token replaced by ``COLZ``."""
    rest = _COL_RE.sub("", text or "").strip()
    return f"COLZ {rest}".strip()
