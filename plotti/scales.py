from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import numpy as np


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float
    log_x: bool = False
    log_y: bool = False


def compute_limits(
    x: np.ndarray,
    y: np.ndarray,
    mask: np.ndarray,
    y_buffer_ratio: float = 0.05,
    x_buffer_ratio: float = 0.0,
) -> DataLimits:
    vx = x[mask]
    vy = y[mask]
    if vx.size == 0:
        return DataLimits(xmin=0.0, xmax=1.0, ymin=0.0, ymax=1.0)
    xmin = float(np.min(vx))
    xmax = float(np.max(vx))
    ymin = float(np.min(vy))
    ymax = float(np.max(vy))

    if ymin == ymax:
        delta = max(1.0, abs(ymin) * y_buffer_ratio)
        ymin -= delta
        ymax += delta
    else:
        pad = (ymax - ymin) * y_buffer_ratio
        ymin -= pad
        ymax += pad

    if xmin == xmax:
        xmin -= 1.0
        xmax += 1.0
    else:
        pad = (xmax - xmin) * x_buffer_ratio
        xmin -= pad
        xmax += pad

    return DataLimits(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)


def to_scale(values: np.ndarray, log: bool) -> np.ndarray:
    """Project values into axis space: ``log10`` on log axes, non-positive values become NaN."""
    arr = np.asarray(values, dtype=np.float64)
    if not log:
        return arr
    out = np.full(arr.shape, np.nan, dtype=np.float64)
    positive = arr > 0
    out[positive] = np.log10(arr[positive])
    return out


def build_transform(
    limits: DataLimits,
    width: int,
    height: int,
    *,
    log_x: bool = False,
    log_y: bool = False,
) -> PlotTransform:
    if width <= 1 or height <= 1:
        raise ValueError("plot viewport width/height must be > 1")
    if log_x and limits.xmin <= 0:
        raise ValueError("log x axis needs a positive lower limit")
    if log_y and limits.ymin <= 0:
        raise ValueError("log y axis needs a positive lower limit")
    x0, x1 = to_scale(np.asarray([limits.xmin, limits.xmax]), log_x).tolist()
    y0, y1 = to_scale(np.asarray([limits.ymin, limits.ymax]), log_y).tolist()
    if x1 == x0 or y1 == y0:
        raise ValueError("plot limits must span a non-zero range")
    sx = (width - 1) / (x1 - x0)
    tx = -x0 * sx
    sy = (height - 1) / (y1 - y0)
    ty = -y0 * sy
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty, log_x=log_x, log_y=log_y)


def map_to_pixels(
    x: np.ndarray,
    y: np.ndarray,
    transform: PlotTransform,
    width: int,
    height: int,
) -> tuple[np.ndarray, np.ndarray]:
    """Map data coordinates to viewport pixels.

    Points outside the viewport keep their direction but are clamped to a band of
    one viewport around it, so segments leaving the plot stay straight once clipped.
    Callers drop non-finite inputs (including non-positive values on log axes).
    """
    fx = to_scale(x, transform.log_x) * transform.sx + transform.tx
    fy = to_scale(y, transform.log_y) * transform.sy + transform.ty
    np.clip(fx, -width, 2 * width, out=fx)
    np.clip(fy, -height, 2 * height, out=fy)
    px = np.rint(np.nan_to_num(fx)).astype(np.int32)
    py = (height - 1) - np.rint(np.nan_to_num(fy)).astype(np.int32)
    return px, py


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)

    span = _nice_number(vmax - vmin, round_result=False)
    step = _nice_number(span / max(target - 1, 1), round_result=True)
    tick_min = np.floor(vmin / step) * step
    tick_max = np.ceil(vmax / step) * step

    ticks = np.arange(tick_min, tick_max + 0.5 * step, step, dtype=np.float64)
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks = np.rint(ticks / step) * step
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def generate_log_ticks(vmin: float, vmax: float) -> np.ndarray:
    """Decade ticks inside ``[vmin, vmax]``; 2x and 5x subdivisions when fewer than two decades fit."""
    if vmin <= 0 or vmax <= vmin:
        raise ValueError("log ticks need 0 < vmin < vmax")
    lo = int(np.floor(np.log10(vmin)))
    hi = int(np.ceil(np.log10(vmax)))
    decades = np.asarray([10.0**k for k in range(lo, hi + 1)], dtype=np.float64)
    inside = decades[(decades >= vmin * (1 - 1e-12)) & (decades <= vmax * (1 + 1e-12))]
    if inside.size >= 2:
        return inside
    dense = np.asarray([m * d for d in decades for m in (1.0, 2.0, 5.0)], dtype=np.float64)
    return dense[(dense >= vmin * (1 - 1e-12)) & (dense <= vmax * (1 + 1e-12))]


def ticks_within(ticks: np.ndarray, vmin: float, vmax: float) -> np.ndarray:
    span = abs(vmax - vmin)
    eps = span * 1e-9
    return ticks[(ticks >= min(vmin, vmax) - eps) & (ticks <= max(vmin, vmax) + eps)]


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    decimals = _decimals_from_step(step) if step is not None else 6
    if abs_v != 0 and (abs_v >= 1e6 or (step is not None and abs(step) < 1e-4) or abs_v < 1e-6):
        return f"{value:.4e}"

    d = Decimal(str(value))
    quant = Decimal("1").scaleb(-decimals)
    try:
        q = d.quantize(quant)
    except InvalidOperation:
        q = d
    out = format(q, "f")
    # Only trim trailing zeros for fractional values (preserve integer zeros like 30, 40).
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_log_tick(value: float) -> str:
    exponent = np.log10(value)
    if abs(exponent) <= 3:
        return format_tick(value, step=value)
    mantissa = value / 10.0 ** np.floor(exponent)
    if np.isclose(mantissa, 1.0):
        return f"1e{int(np.floor(exponent)):+d}"
    return f"{value:.0e}"


def format_ticks_for_axis(ticks: np.ndarray, *, log: bool = False) -> list[str]:
    if ticks.size == 0:
        return []
    if log:
        return [format_log_tick(float(v)) for v in ticks]
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _nice_number(value: float, *, round_result: bool) -> float:
    exp = np.floor(np.log10(value))
    frac = value / (10**exp)

    if round_result:
        if frac < 1.5:
            nice_frac = 1.0
        elif frac < 3.0:
            nice_frac = 2.0
        elif frac < 7.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0
    else:
        if frac <= 1.0:
            nice_frac = 1.0
        elif frac <= 2.0:
            nice_frac = 2.0
        elif frac <= 5.0:
            nice_frac = 5.0
        else:
            nice_frac = 10.0

    return float(nice_frac * (10**exp))


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)
