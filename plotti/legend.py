"""Legend builders: from a drawn collection, from plain text, or from explicit style rows."""

from __future__ import annotations

import logging
from collections.abc import MutableSequence, Sequence
from typing import Any

from plotti.primitives import Histogram1D, Legend, PlotKind, kind_of
from plotti.resolver import set_plottable_properties


LOGGER = logging.getLogger(__name__)

DEFAULT_BOX = (0.1, 0.3, 0.7, 0.9)


def _split_labels(labels: str | Sequence[str]) -> list[str]:
    if isinstance(labels, str):
        return [line.strip() for line in labels.split("\n")]
    return [str(label) for label in labels]


def _split_options(options: str | Sequence[str]) -> list[str]:
    if isinstance(options, str):
        return options.split()
    return [str(option) for option in options]


def legend_from_collection(
    collection: Sequence[Any] | None,
    labels: str | Sequence[str],
    options: str | Sequence[str],
    title: str = "",
    attach: bool = True,
) -> Legend | None:
    """One legend row per drawable member of ``collection``, legends excluded.

    ``labels`` is newline-delimited (or a sequence) and ``options`` whitespace
    delimited (or a sequence); missing labels or options read as empty. With
    ``attach`` the legend is appended to the collection so it is drawn with it.
    """
    if collection is None:
        LOGGER.error("cannot build a legend from a missing collection")
        return None

    legend = Legend(*DEFAULT_BOX)
    if title:
        legend.set_header(title)
    label_list = _split_labels(labels)
    option_list = _split_options(options)
    row = 0
    for obj in collection:
        if obj is None or kind_of(obj) is PlotKind.LEGEND:
            continue
        label = label_list[row] if row < len(label_list) else ""
        option = option_list[row] if row < len(option_list) else ""
        legend.add_entry(obj, label, option)
        row += 1

    if attach:
        if isinstance(collection, MutableSequence):
            collection.append(legend)
        else:
            LOGGER.warning("collection of type %s is immutable, legend not attached", type(collection).__name__)
    return legend


def legend_from_text(lines: str | Sequence[str]) -> Legend:
    """A legend made of text rows only; a trailing empty line is dropped."""
    rows = _split_labels(lines)
    if rows and rows[-1] == "":
        rows.pop()
    legend = Legend(*DEFAULT_BOX)
    for row in rows:
        legend.add_entry(None, row, "")
    return legend


def legend_from_styles(
    styles: str | Sequence[tuple[Any, int, float]],
    labels: str | Sequence[str],
    options: str | Sequence[str],
) -> Legend:
    """Rows whose swatches come from ``(color, marker, size)`` styles instead of drawn objects.

    A string holds one ``"color marker size"`` row per line. The swatch objects
    are owned by the returned legend.
    """
    rows = _parse_style_rows(styles)
    label_list = _split_labels(labels)
    option_list = _split_options(options)
    legend = Legend(*DEFAULT_BOX)
    for i, (color, marker, size) in enumerate(rows):
        swatch = Histogram1D(f"{legend.name}_swatch_{i}")
        set_plottable_properties(swatch, color, marker, size)
        legend.owned.append(swatch)
        label = label_list[i] if i < len(label_list) else ""
        option = option_list[i] if i < len(option_list) else ""
        legend.add_entry(swatch, label, option)
    return legend


def _parse_style_rows(styles: str | Sequence[tuple[Any, int, float]]) -> list[tuple[Any, int, float]]:
    if not isinstance(styles, str):
        return [(color, int(marker), float(size)) for color, marker, size in styles]
    rows: list[tuple[Any, int, float]] = []
    for line in styles.splitlines():
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) != 3:
            raise ValueError(f"style row must read 'color marker size': {line!r}")
        rows.append((tokens[0], int(tokens[1]), float(tokens[2])))
    return rows


def set_position(legend: Legend, x1: float, x2: float, y1: float, y2: float) -> None:
    """Move ``legend`` to the pad NDC box spanned by ``x1..x2`` and ``y1..y2``."""
    legend.set_position(x1, x2, y1, y2)
