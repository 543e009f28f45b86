from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from plotti import (
    HeatmapPlot,
    Histogram1D,
    Histogram2D,
    SingleRatioPlot,
    SquarePlot,
    legend_from_collection,
    legend_from_text,
    set_position,
)
from plotti.colors import BLACK, DARK_GRAY
from plotti.raster import MarkerStyle


def _gaussian_histogram(name: str, rng: np.random.Generator) -> Histogram1D:
    hist = Histogram1D(name, "", 100, -3.0, 3.0)
    hist.sumw2()
    hist.fill(rng.normal(size=10000))
    return hist


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    out_dir = Path(__file__).resolve().parent / "out"
    out_dir.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(7)

    black = _gaussian_histogram("black", rng)
    white = _gaussian_histogram("white", rng)
    grey = black.clone("grey")
    grey.divide(white)

    main_collection: list = [black, white]
    ratio_collection: list = [grey]

    legend = legend_from_collection(main_collection, "Black Histo\nWhite Histo\n", "lp lp")
    legend_copy = legend.clone("legend_copy")
    info = legend_from_text("Black and White Histogram\nExample\n")
    main_collection.append(info)

    colors = [BLACK, BLACK, DARK_GRAY]
    markers = [MarkerStyle.FULL_CIRCLE, MarkerStyle.OPEN_CIRCLE, MarkerStyle.FULL_CIRCLE]
    sizes = [2.0, 2.0, 2.0]

    set_position(info, 0.2, 0.3, 0.85, 0.75)
    set_position(legend, 0.43, 0.6, 0.2, 0.32)
    legend_copy.set_position(0.43, 0.6, 0.05, 0.22)

    square = SquarePlot(main_collection, "x", "count")
    square.set_style(colors, markers, sizes)
    square.set_mode("presentation")
    square.set_ranges(-3, 3, 0.1, 400)
    print(f"wrote {square.draw(out_dir / 'Square.png')}")

    # the ratio plot gets its own placement of the same legend rows
    main_collection[main_collection.index(legend)] = legend_copy

    ratio = SingleRatioPlot(main_collection, ratio_collection, "x", "count", "ratio")
    ratio.set_offset(0, 2)
    ratio.set_ranges(-3, 3, -10, 400, 0.5, 3.2)
    print(f"wrote {ratio.draw(out_dir / 'Ratio.png')}")

    correlated = Histogram2D("correlated", "", 40, -3.0, 3.0, 40, -3.0, 3.0)
    xs = rng.normal(size=20000)
    correlated.fill(xs, 0.6 * xs + 0.8 * rng.normal(size=xs.size))
    heatmap = HeatmapPlot(correlated, "Correlated Gaussians\n", "x", "y", "entries")
    heatmap.set_ranges(-3, 3, -3, 3, 1, 500)
    heatmap.set_log(z=True)
    print(f"wrote {heatmap.draw(out_dir / 'Heatmap.png')}")


if __name__ == "__main__":
    main()
