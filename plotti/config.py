"""Style context from a TOML file.

Example::

    [style]
    colors = ["#1f77b4", "red", [0, 128, 0]]
    markers = [20, 21, 22]
    marker_sizes = [2.0]
    line_widths = [2, 3]
    mode = "presentation"
    palette = 57
    invert_palette = false
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

from plotti.style import Mode, StyleContext


_KNOWN_KEYS = frozenset(
    {
        "colors",
        "markers",
        "marker_sizes",
        "line_styles",
        "line_widths",
        "offset",
        "mode",
        "font",
        "label_size",
        "palette",
        "invert_palette",
    }
)


def load_style_context(path: str | Path) -> StyleContext:
    style_path = Path(path)
    if not style_path.exists():
        raise FileNotFoundError(f"style file not found: {style_path}")
    with style_path.open("rb") as f:
        raw = tomllib.load(f)
    return style_context_from_mapping(raw)


def style_context_from_mapping(raw: Mapping[str, Any]) -> StyleContext:
    style = raw.get("style", {})
    if not isinstance(style, Mapping):
        raise ValueError("[style] must be a table")
    unknown = sorted(set(style) - _KNOWN_KEYS)
    if unknown:
        raise ValueError(f"unknown style keys: {', '.join(unknown)}")

    context = StyleContext()
    if "colors" in style or "markers" in style:
        context.set_style(
            _coerce_list(style.get("colors", []), "colors"),
            [int(v) for v in _coerce_numbers(style.get("markers", []), "markers")],
            _coerce_numbers(style.get("marker_sizes", []), "marker_sizes"),
            [int(v) for v in _coerce_numbers(style.get("line_styles", []), "line_styles")],
            _coerce_numbers(style.get("line_widths", []), "line_widths"),
        )
    if "offset" in style:
        offset = style["offset"]
        if not isinstance(offset, int) or isinstance(offset, bool):
            raise ValueError("offset must be an integer")
        context.set_offset(offset)
    if "font" in style:
        if not isinstance(style["font"], str):
            raise ValueError("font must be a string")
        context.font = style["font"]
    if "mode" in style:
        try:
            context.set_mode(Mode(str(style["mode"]).lower()))
        except ValueError as exc:
            raise ValueError(f"unknown mode: {style['mode']!r}") from exc
    if "label_size" in style:
        context.label_size = _coerce_positive(style["label_size"], "label_size")
    if "palette" in style:
        invert = bool(style.get("invert_palette", False))
        if not context.set_palette(style["palette"], invert):
            raise ValueError(f"unknown palette: {style['palette']!r}")
    elif "invert_palette" in style:
        context.palette_inverted = bool(style["invert_palette"])
    return context


def _coerce_list(value: object, field_name: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be a list")
    return list(value)


def _coerce_numbers(value: object, field_name: str) -> list[float]:
    out: list[float] = []
    for item in _coerce_list(value, field_name):
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            raise ValueError(f"{field_name} entries must be numbers")
        out.append(float(item))
    return out


def _coerce_positive(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"{field_name} must be a positive number")
    return float(value)
