"""
raster.py
--------------------
Integer rasterization primitives: Bresenham lines and midpoint circles.

The *_points functions return pixel coordinates in drawing order; the
draw_* functions write them to a canvas in one vectorized, clipped call.
"""

from __future__ import annotations

import numpy as np

from .canvas import Canvas
from .constants import Color


def line_points(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    """Bresenham's line from (x0, y0) to (x1, y1), both ends included.

    Works in every octant; yields max(|dx|, |dy|) + 1 points forming an
    8-connected path.
    """
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    points = []
    while True:
        points.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return points


def circle_points(cx: int, cy: int, r: int) -> list[tuple[int, int]]:
    """Midpoint circle of radius *r* around (cx, cy).

    Every step emits its eight octant reflections, so points may repeat
    where octants meet. r == 0 is the center pixel; negative r is empty.
    """
    if r < 0:
        return []
    x, y = r, 0
    d = 1 - r
    points = []
    while x >= y:
        points.extend((
            (cx + x, cy + y), (cx + y, cy + x),
            (cx - y, cy + x), (cx - x, cy + y),
            (cx - x, cy - y), (cx - y, cy - x),
            (cx + y, cy - x), (cx + x, cy - y),
        ))
        y += 1
        if d < 0:
            d += 2 * y + 1
        else:
            x -= 1
            d += 2 * (y - x) + 1
    return points


def _plot(canvas: Canvas, points: list[tuple[int, int]], color: Color) -> None:
    if not points:
        return
    pts = np.asarray(points, dtype=np.int64)
    canvas.set_many(pts[:, 0], pts[:, 1], color)


def draw_line(canvas: Canvas, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
    _plot(canvas, line_points(x0, y0, x1, y1), color)


def draw_circle(canvas: Canvas, cx: int, cy: int, r: int, color: Color) -> None:
    _plot(canvas, circle_points(cx, cy, r), color)


def draw_rings(
    canvas: Canvas, cx: int, cy: int, outer: int, inner: int, color: Color
) -> None:
    """Rings of every radius from *outer* down to *inner*, inclusive."""
    points = []
    for rr in range(outer, inner - 1, -1):
        points.extend(circle_points(cx, cy, rr))
    _plot(canvas, points, color)


def draw_disk(canvas: Canvas, cx: int, cy: int, r: int, color: Color) -> None:
    """Filled disk built from successive rings, radius r down to 0."""
    draw_rings(canvas, cx, cy, r, 0, color)
