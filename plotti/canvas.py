"""Canvas and pads: retained primitives rendered to an RGBA image and saved through Pillow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

import numpy as np
from PIL import Image

from plotti.colors import BLACK, DEFAULT_PALETTE, RGBA, TRANSPARENT, WHITE, lookup_palette, palette_by_id
from plotti.errors import PlotDataError
from plotti.options import parse_option
from plotti.primitives import POINT_SET_KINDS, Axis, has_axes, kind_of
from plotti.raster import (
    blit,
    blit_region,
    draw_hline,
    draw_markers,
    draw_polyline,
    draw_segment,
    draw_text,
    draw_vline,
    fill_rect,
    new_canvas,
    stroke_rect,
    text_size,
)
from plotti.scales import (
    DataLimits,
    PlotTransform,
    build_transform,
    format_ticks_for_axis,
    generate_log_ticks,
    generate_nice_ticks,
    map_to_pixels,
    ticks_within,
    to_scale,
)


LOGGER = logging.getLogger(__name__)

FRAME_LINE_WIDTH = 2
# formats Pillow cannot store with an alpha channel
_OPAQUE_FORMATS = {"JPEG", "BMP", "PDF", "EPS", "PPM", "PCX"}


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    runs: list[tuple[int, int]] = []
    start = int(idx[0])
    prev = int(idx[0])
    for v in idx[1:]:
        iv = int(v)
        if iv == prev + 1:
            prev = iv
            continue
        runs.append((start, prev + 1))
        start = iv
        prev = iv
    runs.append((start, prev + 1))
    return runs


class Pad:
    """A rectangular sub-area of a canvas, in canvas NDC, holding drawn primitives.

    The first axis-bearing primitive becomes the pad frame: its axes define the
    coordinate system, ticks, labels and titles. A histogram or function drawn
    without ``SAME``, or a graph drawn with ``A``, replaces the frame and clears
    what was drawn before.
    """

    def __init__(
        self,
        name: str,
        title: str = "",
        x_low: float = 0.0,
        y_low: float = 0.0,
        x_high: float = 1.0,
        y_high: float = 1.0,
    ) -> None:
        if not (0.0 <= x_low < x_high <= 1.0 and 0.0 <= y_low < y_high <= 1.0):
            raise PlotDataError(f"pad {name} must lie inside the canvas: ({x_low}, {y_low}, {x_high}, {y_high})")
        self.name = name
        self.title = title
        self.x_low, self.y_low, self.x_high, self.y_high = x_low, y_low, x_high, y_high
        self.left_margin = 0.1
        self.right_margin = 0.1
        self.top_margin = 0.1
        self.bottom_margin = 0.1
        self.fill_color: RGBA | None = WHITE
        self.tick_x = False
        self.tick_y = False
        self.log_x = False
        self.log_y = False
        self.log_z = False
        self.palette: list[RGBA] = palette_by_id(DEFAULT_PALETTE) or []
        self.primitives: list[tuple[Any, str]] = []
        self.frame: Any = None

    def set_margins(
        self,
        right: float | None = None,
        left: float | None = None,
        top: float | None = None,
        bottom: float | None = None,
    ) -> None:
        if right is not None:
            self.right_margin = float(right)
        if left is not None:
            self.left_margin = float(left)
        if top is not None:
            self.top_margin = float(top)
        if bottom is not None:
            self.bottom_margin = float(bottom)

    def set_fill_color(self, color: RGBA | None) -> None:
        self.fill_color = color

    def set_palette(self, colors: Sequence[RGBA]) -> None:
        self.palette = list(colors)

    def add_primitive(self, obj: Any, option: str = "") -> None:
        if has_axes(obj):
            opt = parse_option(option)
            kind = kind_of(obj)
            replaces = opt.axes if kind in POINT_SET_KINDS else not opt.same
            if replaces and self.primitives:
                LOGGER.debug("pad %s: %s replaces the frame", self.name, getattr(obj, "name", obj))
                self.primitives.clear()
                self.frame = None
            if self.frame is None:
                self.frame = obj
        self.primitives.append((obj, option))

    def clear(self) -> None:
        self.primitives.clear()
        self.frame = None

    def pixel_rect(self, width: int, height: int) -> tuple[int, int, int, int]:
        x0 = int(round(self.x_low * width))
        x1 = int(round(self.x_high * width))
        y0 = int(round((1.0 - self.y_high) * height))
        y1 = int(round((1.0 - self.y_low) * height))
        return (x0, y0, max(1, x1 - x0), max(1, y1 - y0))

    def plot_rect(self, width: int, height: int) -> tuple[int, int, int, int]:
        x, y, w, h = self.pixel_rect(width, height)
        left = int(round(self.left_margin * w))
        right = int(round(self.right_margin * w))
        top = int(round(self.top_margin * h))
        bottom = int(round(self.bottom_margin * h))
        return (x + left, y + top, max(2, w - left - right), max(2, h - top - bottom))

    def paint(self, image: np.ndarray) -> None:
        height, width = image.shape[:2]
        pad_rect = self.pixel_rect(width, height)
        plot_rect = self.plot_rect(width, height)
        if self.fill_color is not None:
            x, y, w, h = pad_rect
            fill_rect(image, x, y, x + w - 1, y + h - 1, self.fill_color)

        limits, log_x, log_y = self._resolve_frame()
        painter = PadPainter(
            pad=self,
            width=width,
            height=height,
            pad_rect=pad_rect,
            plot_rect=plot_rect,
            limits=limits,
            log_x=log_x,
            log_y=log_y,
        )
        for obj, option in self.primitives:
            obj.paint(painter, option)

        blit_region(image, painter.data, plot_rect)
        if self.frame is not None:
            self._paint_axes(image, painter)
        blit(image, painter.overlay)

    def _resolve_frame(self) -> tuple[DataLimits, bool, bool]:
        if self.frame is None:
            return DataLimits(xmin=0.0, xmax=1.0, ymin=0.0, ymax=1.0), False, False
        limits = self.frame.frame_limits(log_y=self.log_y)
        log_x = self.log_x and limits.xmin > 0
        log_y = self.log_y and limits.ymin > 0
        if self.log_x and not log_x:
            LOGGER.debug("pad %s: x range starts at %s, drawing linear x", self.name, limits.xmin)
        if self.log_y and not log_y:
            LOGGER.debug("pad %s: y range starts at %s, drawing linear y", self.name, limits.ymin)
        if limits.xmax <= limits.xmin or limits.ymax <= limits.ymin:
            LOGGER.debug("pad %s: degenerate frame limits %s", self.name, limits)
            limits = DataLimits(
                xmin=limits.xmin,
                xmax=limits.xmin + 1.0 if limits.xmax <= limits.xmin else limits.xmax,
                ymin=limits.ymin,
                ymax=limits.ymin + 1.0 if limits.ymax <= limits.ymin else limits.ymax,
            )
        return limits, log_x, log_y

    def _paint_axes(self, image: np.ndarray, painter: PadPainter) -> None:
        frame = self.frame
        x0, y0, w, h = painter.plot_rect
        x1, y1 = x0 + w - 1, y0 + h - 1
        _, _, _, pad_h = painter.pad_rect
        limits = painter.limits
        stroke_rect(image, x0, y0, x1, y1, BLACK, FRAME_LINE_WIDTH)

        x_axis: Axis = frame.x_axis
        y_axis: Axis = frame.y_axis
        tick_x = _axis_ticks(limits.xmin, limits.xmax, painter.log_x, max(5, w // 120))
        tick_y = _axis_ticks(limits.ymin, limits.ymax, painter.log_y, max(4, h // 140))
        x_labels = format_ticks_for_axis(tick_x, log=painter.log_x)
        y_labels = format_ticks_for_axis(tick_y, log=painter.log_y)
        px_ticks, _, _ = painter.to_pixels(tick_x, np.full(tick_x.shape, limits.ymin))
        _, py_ticks, _ = painter.to_pixels(np.full(tick_y.shape, limits.xmin), tick_y)

        x_tick_len = int(round(x_axis.tick_length * h))
        y_tick_len = int(round(y_axis.tick_length * w))
        for px in px_ticks.tolist():
            draw_vline(image, px, y1 - x_tick_len, y1, BLACK)
            if self.tick_x:
                draw_vline(image, px, y0, y0 + x_tick_len, BLACK)
        for py in py_ticks.tolist():
            draw_hline(image, x0, x0 + y_tick_len, py, BLACK)
            if self.tick_y:
                draw_hline(image, x1 - y_tick_len, x1, py, BLACK)

        x_label_px = painter.text_px(x_axis.label_size)
        y_label_px = painter.text_px(y_axis.label_size)
        x_gap = int(round(x_axis.label_offset * pad_h)) + 4
        y_gap = int(round(y_axis.label_offset * pad_h)) + 6
        label_h = 0
        if x_label_px > 0:
            for px, label in zip(px_ticks.tolist(), x_labels, strict=False):
                tw, th = text_size(label, font_family=x_axis.label_font, font_size_px=x_label_px)
                label_h = max(label_h, th)
                draw_text(image, px - tw // 2, y1 + x_gap, label, x_axis.label_color,
                          font_family=x_axis.label_font, font_size_px=x_label_px)
        label_w = 0
        if y_label_px > 0:
            for py, label in zip(py_ticks.tolist(), y_labels, strict=False):
                tw, th = text_size(label, font_family=y_axis.label_font, font_size_px=y_label_px)
                label_w = max(label_w, tw)
                draw_text(image, x0 - y_gap - tw, py - th // 2, label, y_axis.label_color,
                          font_family=y_axis.label_font, font_size_px=y_label_px)

        if x_axis.title:
            title_px = painter.text_px(x_axis.title_size)
            tw, _ = text_size(x_axis.title, font_family=x_axis.title_font, font_size_px=title_px)
            top = y1 + x_gap + max(label_h, int(x_label_px)) + int(round((x_axis.title_offset - 1.0) * title_px * 0.35)) + 4
            draw_text(image, x1 - tw, top, x_axis.title, BLACK, font_family=x_axis.title_font, font_size_px=title_px)
        if y_axis.title:
            title_px = painter.text_px(y_axis.title_size)
            tw, _ = text_size(y_axis.title, font_family=y_axis.title_font, font_size_px=title_px, rotate_deg=90)
            right = x0 - y_gap - label_w - int(round((y_axis.title_offset - 1.0) * title_px * 0.35)) - 6
            draw_text(image, right - tw, y0, y_axis.title, BLACK,
                      font_family=y_axis.title_font, font_size_px=title_px, rotate_deg=90)

        title = getattr(frame, "title", "")
        if title:
            title_px = painter.text_px(0.05)
            tw, th = text_size(title, font_family=x_axis.title_font, font_size_px=title_px)
            pad_x, pad_y, pad_w, _ = painter.pad_rect
            draw_text(image, pad_x + (pad_w - tw) // 2, max(pad_y, y0 - th - 6), title, BLACK,
                      font_family=x_axis.title_font, font_size_px=title_px)


def _axis_ticks(vmin: float, vmax: float, log: bool, target: int) -> np.ndarray:
    if log:
        return generate_log_ticks(vmin, vmax)
    return ticks_within(generate_nice_ticks(vmin, vmax, target), vmin, vmax)


class PadPainter:
    """Drawing surface handed to primitives while a pad renders.

    Data is drawn on a full-canvas transparent layer that is later blitted
    through the plot rectangle; legends, statistics boxes and palette bars go
    on an unclipped overlay.
    """

    def __init__(
        self,
        *,
        pad: Pad,
        width: int,
        height: int,
        pad_rect: tuple[int, int, int, int],
        plot_rect: tuple[int, int, int, int],
        limits: DataLimits,
        log_x: bool,
        log_y: bool,
    ) -> None:
        self.pad = pad
        self.pad_rect = pad_rect
        self.plot_rect = plot_rect
        self.limits = limits
        self.log_x = log_x
        self.log_y = log_y
        self.log_z = pad.log_z
        self.palette = pad.palette
        self.data = new_canvas(width, height, color=TRANSPARENT)
        self.overlay = new_canvas(width, height, color=TRANSPARENT)
        _, _, w, h = plot_rect
        self.transform: PlotTransform = build_transform(limits, w, h, log_x=log_x, log_y=log_y)

    def is_frame(self, obj: Any) -> bool:
        return self.pad.frame is obj

    def to_pixels(self, x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Canvas pixel coordinates plus a mask of points drawable on this pad's scales."""
        xs = np.asarray(x, dtype=np.float64)
        ys = np.asarray(y, dtype=np.float64)
        valid = np.isfinite(to_scale(xs, self.log_x)) & np.isfinite(to_scale(ys, self.log_y))
        x0, y0, w, h = self.plot_rect
        px, py = map_to_pixels(xs, ys, self.transform, w, h)
        return px + x0, py + y0, valid

    def ndc_to_pixels(self, u: float, v: float) -> tuple[int, int]:
        x, y, w, h = self.pad_rect
        return (int(round(x + u * w)), int(round(y + (1.0 - v) * h)))

    def text_px(self, size: float) -> float:
        if size <= 0:
            return 0.0
        if size >= 1:
            return float(size)
        return float(size) * self.pad_rect[3]

    def baseline(self) -> float:
        if self.log_y:
            return self.limits.ymin
        return min(max(0.0, self.limits.ymin), self.limits.ymax)

    def polyline(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int, style: int) -> None:
        if width <= 0:
            return
        px, py, valid = self.to_pixels(xs, ys)
        for start, end in _contiguous_true_runs(valid):
            if end - start < 2:
                continue
            draw_polyline(self.data, px[start:end], py[start:end], color=color, width=width, style=style)

    def markers(self, xs: np.ndarray, ys: np.ndarray, color: RGBA, size: float, style: int) -> None:
        if size <= 0 or np.asarray(xs).size == 0:
            return
        px, py, valid = self.to_pixels(xs, ys)
        if not np.any(valid):
            return
        draw_markers(self.data, px[valid], py[valid], color=color, size=size, style=style)

    def error_bars(
        self,
        xs: np.ndarray,
        ys: np.ndarray,
        exl: np.ndarray,
        exh: np.ndarray,
        eyl: np.ndarray,
        eyh: np.ndarray,
        color: RGBA,
        width: int,
    ) -> None:
        if width <= 0:
            return
        lx, cy, valid_l = self.to_pixels(xs - exl, ys)
        hx, _, valid_h = self.to_pixels(xs + exh, ys)
        cx, ly, valid_ly = self.to_pixels(xs, ys - eyl)
        _, hy, valid_hy = self.to_pixels(xs, ys + eyh)
        centre_ok = self.to_pixels(xs, ys)[2]
        for i in np.flatnonzero(centre_ok).tolist():
            if valid_l[i] and valid_h[i] and lx[i] != hx[i]:
                draw_segment(self.data, int(lx[i]), int(cy[i]), int(hx[i]), int(cy[i]), color, width)
            low_y = int(ly[i]) if valid_ly[i] else self.plot_rect[1] + self.plot_rect[3]
            high_y = int(hy[i]) if valid_hy[i] else int(cy[i])
            if low_y != high_y:
                draw_segment(self.data, int(cx[i]), low_y, int(cx[i]), high_y, color, width)

    def fill_data_box(self, x0: float, y0: float, x1: float, y1: float, color: RGBA) -> None:
        if self.log_y:
            # boxes reaching non-positive values start at the bottom of a log pad
            y0 = max(y0, self.limits.ymin)
            y1 = max(y1, self.limits.ymin)
        px, py, valid = self.to_pixels(np.asarray([x0, x1]), np.asarray([y0, y1]))
        if not np.all(valid):
            return
        fill_rect(self.data, int(px[0]), int(py[0]), int(px[1]), int(py[1]), color)

    def palette_bar(self, axis: Axis, z_low: float, z_high: float, log_z: bool) -> None:
        x0, y0, w, h = self.plot_rect
        pad_x, _, pad_w, pad_h = self.pad_rect
        bar_x0 = x0 + w + int(round(0.01 * pad_w))
        bar_x1 = bar_x0 + max(6, int(round(0.04 * pad_w)))
        y1 = y0 + h - 1
        for yy in range(y0, y1 + 1):
            fraction = (y1 - yy) / max(1, y1 - y0)
            draw_hline(self.overlay, bar_x0, bar_x1, yy, lookup_palette(self.palette, fraction))
        stroke_rect(self.overlay, bar_x0, y0, bar_x1, y1, BLACK, 1)

        if z_high <= z_low:
            return
        ticks = _axis_ticks(z_low, z_high, log_z, max(4, h // 140))
        labels = format_ticks_for_axis(ticks, log=log_z)
        scaled = to_scale(ticks, log_z)
        s_low, s_high = to_scale(np.asarray([z_low, z_high]), log_z).tolist()
        label_px = self.text_px(axis.label_size)
        label_w = 0
        tick_len = max(2, int(round(axis.tick_length * (bar_x1 - bar_x0) * 4)))
        for value, label in zip(scaled.tolist(), labels, strict=False):
            yy = int(round(y1 - (value - s_low) / (s_high - s_low) * (y1 - y0)))
            draw_hline(self.overlay, bar_x1 - tick_len, bar_x1, yy, BLACK)
            if label_px <= 0:
                continue
            tw, th = text_size(label, font_family=axis.label_font, font_size_px=label_px)
            label_w = max(label_w, tw)
            draw_text(self.overlay, bar_x1 + 4, yy - th // 2, label, axis.label_color,
                      font_family=axis.label_font, font_size_px=label_px)
        if axis.title:
            title_px = self.text_px(axis.title_size)
            tw, _ = text_size(axis.title, font_family=axis.title_font, font_size_px=title_px, rotate_deg=90)
            left = bar_x1 + 8 + label_w + int(round((axis.title_offset - 1.0) * title_px * 0.35))
            left = min(left, pad_x + pad_w - tw - 1)
            draw_text(self.overlay, left, y0, axis.title, BLACK,
                      font_family=axis.title_font, font_size_px=title_px, rotate_deg=90)


class Canvas:
    """The output image: a background plus pads painted in insertion order."""

    def __init__(
        self,
        name: str,
        title: str = "",
        width: int = 1000,
        height: int = 1000,
        background: RGBA = WHITE,
    ) -> None:
        if width <= 1 or height <= 1:
            raise PlotDataError(f"canvas {name} is too small: {width}x{height}")
        self.name = name
        self.title = title
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self.pads: list[Pad] = []
        self._image: np.ndarray | None = None

    def add_pad(self, pad: Pad) -> Pad:
        self.pads.append(pad)
        self._image = None
        return pad

    def update(self) -> np.ndarray:
        image = new_canvas(self.width, self.height, color=self.background)
        for pad in self.pads:
            pad.paint(image)
        self._image = image
        return image

    def to_rgba(self) -> np.ndarray:
        if self._image is None:
            return self.update()
        return self._image

    def save(self, path: str | Path) -> Path:
        """Write the canvas to ``path``; the file extension picks the image format."""
        out = Path(path)
        fmt = Image.registered_extensions().get(out.suffix.lower())
        if fmt is None or fmt not in Image.SAVE:
            raise PlotDataError(f"unsupported output format: {out.suffix or out.name!r}")
        image = Image.fromarray(self.to_rgba())
        if fmt in _OPAQUE_FORMATS:
            image = image.convert("RGB")
        out.parent.mkdir(parents=True, exist_ok=True)
        image.save(out, format=fmt)
        LOGGER.info("canvas %s saved to %s", self.name, out)
        return out
