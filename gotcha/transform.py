"""
transform.py
--------------------
Forward-mapped affine transforms: rotation about the image center and
uniform scaling.

Every source pixel is pushed through the matrix and copied to where it
lands; destination pixels nothing lands on keep the background fill. No
resampling is done, so rotated glyphs show small gaps and overlaps along
their edges.
"""

from __future__ import annotations

import math

import numpy as np

from .canvas import Canvas
from .constants import DEFAULT_BACKGROUND, WIDE_FACTOR, WIDE_ROTATION_RANGES, Color
from .utils import _round_half, _round_half_array


def needs_wide_canvas(degrees: int) -> bool:
    """True when a rotation by *degrees* would clip the corners of a tall cell."""
    deg = degrees % 360
    return any(lo <= deg < hi for lo, hi in WIDE_ROTATION_RANGES)


def _source_grid(canvas: Canvas) -> tuple[np.ndarray, np.ndarray]:
    """Local pixel coordinates in column-major order (x outer, y inner)."""
    xs, ys = np.meshgrid(
        np.arange(canvas.width), np.arange(canvas.height), indexing="ij"
    )
    return xs.ravel(), ys.ravel()


def rotate(canvas: Canvas, degrees: int, background: Color | None = None) -> Canvas:
    """Rotate *canvas* by *degrees* about its center.

    Returns the input unchanged for multiples of 360. Otherwise the result
    is centered on the origin and is 1.3x wider for near-vertical angles.
    """
    if degrees % 360 == 0:
        return canvas
    bg = background if background is not None else DEFAULT_BACKGROUND

    theta = math.radians(-(degrees % 360))
    rot = np.array([
        [math.cos(theta), -math.sin(theta)],
        [math.sin(theta), math.cos(theta)],
    ])

    w, h = canvas.width, canvas.height
    wide = WIDE_FACTOR if needs_wide_canvas(degrees) else 1.0
    half_w = _round_half(w * wide / 2)
    out = Canvas.from_bounds(-half_w, -(h // 2), half_w, h // 2, background=bg)

    xs, ys = _source_grid(canvas)
    centered = np.stack([xs - w // 2, ys - h // 2]).astype(np.float64)
    # truncate toward zero
    dst = (rot @ centered).astype(np.int64)
    out.set_many(dst[0], dst[1], canvas.pix[ys, xs])
    return out


def scale(canvas: Canvas, factor: float, background: Color | None = None) -> Canvas:
    """Scale *canvas* uniformly by *factor* (negative factors clamp to 0).

    Returns the input unchanged when factor is within 0.001 of 1. When
    magnifying, each source pixel is stamped as a square of side
    round(factor / 0.5) to cover the holes forward mapping leaves.
    """
    if abs(factor - 1.0) < 0.001:
        return canvas
    factor = max(0.0, float(factor))
    bg = background if background is not None else DEFAULT_BACKGROUND

    out = Canvas(
        _round_half(canvas.width * factor),
        _round_half(canvas.height * factor),
        background=bg,
    )
    if out.width == 0 or out.height == 0:
        return out

    side = _round_half(factor / 0.5) if factor > 1.0 else 1
    lo = -(side // 2)
    offsets = np.array(
        [(ox, oy) for ox in range(lo, lo + side) for oy in range(lo, lo + side)],
        dtype=np.int64,
    )

    xs, ys = _source_grid(canvas)
    sx = _round_half_array(xs * factor)
    sy = _round_half_array(ys * factor)
    # one stamp per source pixel, kept in source order
    all_x = (sx[:, None] + offsets[None, :, 0]).ravel()
    all_y = (sy[:, None] + offsets[None, :, 1]).ravel()
    colors = np.repeat(canvas.pix[ys, xs], len(offsets), axis=0)
    out.set_many(all_x, all_y, colors)
    return out
