"""
canvas.py
--------------------
Mutable RGBA pixel buffer with fixed, possibly offset, bounds.

Pixels are stored as a numpy uint8 array (H, W, 4) holding
alpha-premultiplied RGBA, so a color channel never exceeds its alpha.
Coordinates are absolute: a canvas with origin (-12, -25) and size 24x50
covers x in [-12, 12) and y in [-25, 25). Writes outside the bounds are
dropped silently.

composite_over() is the only blending primitive: every layer merge in the
engine (fuzzer overlays, glyph placement) goes through it.
"""

from __future__ import annotations

import base64
import io
import threading

import numpy as np
from PIL import Image

from .constants import TRANSPARENT, Color


class Canvas:
    """Rectangular premultiplied-RGBA pixel grid."""

    def __init__(
        self,
        width: int,
        height: int,
        origin: tuple[int, int] = (0, 0),
        background: Color | None = None,
    ) -> None:
        self.min_x, self.min_y = int(origin[0]), int(origin[1])
        self.pix = np.zeros((max(0, int(height)), max(0, int(width)), 4), dtype=np.uint8)
        # Guards whole-canvas blends when several tasks share this canvas
        self.lock = threading.Lock()
        if background is not None:
            self.fill(background)

    @classmethod
    def from_bounds(
        cls, x0: int, y0: int, x1: int, y1: int, background: Color | None = None
    ) -> Canvas:
        """Build a canvas covering [x0, x1) x [y0, y1)."""
        return cls(x1 - x0, y1 - y0, origin=(x0, y0), background=background)

    @classmethod
    def from_image(cls, img: Image.Image) -> Canvas:
        """Import a Pillow image of any mode, premultiplying its alpha."""
        rgba = img.convert("RGBA").convert("RGBa")
        w, h = rgba.size
        canvas = cls(w, h)
        canvas.pix = np.frombuffer(rgba.tobytes(), dtype=np.uint8).reshape(h, w, 4).copy()
        return canvas

    # Geometry

    @property
    def width(self) -> int:
        return self.pix.shape[1]

    @property
    def height(self) -> int:
        return self.pix.shape[0]

    @property
    def max_x(self) -> int:
        return self.min_x + self.width

    @property
    def max_y(self) -> int:
        return self.min_y + self.height

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """(min_x, min_y, max_x, max_y), max exclusive."""
        return self.min_x, self.min_y, self.max_x, self.max_y

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y

    # Pixel access

    def at(self, x: int, y: int) -> Color:
        """Return the pixel at (x, y), transparent when outside the bounds."""
        if not self.contains(x, y):
            return TRANSPARENT
        r, g, b, a = self.pix[y - self.min_y, x - self.min_x]
        return int(r), int(g), int(b), int(a)

    def set(self, x: int, y: int, color: Color) -> None:
        if self.contains(x, y):
            self.pix[y - self.min_y, x - self.min_x] = color

    def set_many(self, xs, ys, colors) -> None:
        """Vectorized set(); *colors* is one color or an (N, 4) array.

        Points are written in order, so a later duplicate wins.
        """
        xs = np.asarray(xs, dtype=np.int64).ravel()
        ys = np.asarray(ys, dtype=np.int64).ravel()
        keep = (
            (xs >= self.min_x) & (xs < self.max_x)
            & (ys >= self.min_y) & (ys < self.max_y)
        )
        if not keep.any():
            return
        values = np.asarray(colors, dtype=np.uint8)
        if values.ndim == 2:
            values = values[keep]
        self.pix[ys[keep] - self.min_y, xs[keep] - self.min_x] = values

    def fill(self, color: Color) -> None:
        """Replace every pixel with *color*."""
        self.pix[...] = color

    def copy(self) -> Canvas:
        dup = Canvas(0, 0, origin=(self.min_x, self.min_y))
        dup.pix = self.pix.copy()
        return dup

    def crop(self, x0: int, y0: int, x1: int, y1: int) -> Canvas:
        """Copy the [x0, x1) x [y0, y1) region into a new zero-origin canvas.

        Parts of the region outside this canvas come back transparent.
        """
        out = Canvas(x1 - x0, y1 - y0, origin=(x0, y0))
        paste(out, self)
        out.min_x, out.min_y = 0, 0
        return out

    # Export

    def to_image(self) -> Image.Image:
        """Return a straight-alpha Pillow RGBA image of this canvas."""
        if self.width == 0 or self.height == 0:
            return Image.new("RGBA", (self.width, self.height))
        premul = Image.frombytes("RGBa", (self.width, self.height), self.pix.tobytes())
        return premul.convert("RGBA")

    def encode_png(self) -> bytes:
        buf = io.BytesIO()
        self.to_image().save(buf, format="PNG")
        return buf.getvalue()

    def to_base64(self) -> str:
        return base64.b64encode(self.encode_png()).decode("ascii")

    def __repr__(self) -> str:
        return f"Canvas(bounds={self.bounds})"


def new_canvas(width: int, height: int, background: Color | None = None) -> Canvas:
    """Zero-origin canvas, transparent unless *background* is given."""
    return Canvas(width, height, background=background)


def _overlap(
    dst: Canvas, src: Canvas, at: tuple[int, int] | None
) -> tuple[slice, slice, slice, slice] | None:
    """Return (dst_rows, dst_cols, src_rows, src_cols) for placing *src* on *dst*."""
    ox, oy = (src.min_x, src.min_y) if at is None else (int(at[0]), int(at[1]))
    x0, y0 = max(ox, dst.min_x), max(oy, dst.min_y)
    x1, y1 = min(ox + src.width, dst.max_x), min(oy + src.height, dst.max_y)
    if x0 >= x1 or y0 >= y1:
        return None
    return (
        slice(y0 - dst.min_y, y1 - dst.min_y),
        slice(x0 - dst.min_x, x1 - dst.min_x),
        slice(y0 - oy, y1 - oy),
        slice(x0 - ox, x1 - ox),
    )


def composite_over(dst: Canvas, src: Canvas, at: tuple[int, int] | None = None) -> None:
    """Blend *src* onto *dst* using source-over.

    *at* is where src's min corner lands on dst; by default src is placed at
    its own absolute bounds. Fully transparent source pixels leave dst as is.
    """
    view = _overlap(dst, src, at)
    if view is None:
        return
    d_rows, d_cols, s_rows, s_cols = view
    s = src.pix[s_rows, s_cols].astype(np.uint16)
    d = dst.pix[d_rows, d_cols]
    alpha = s[..., 3:4]
    out = s + (d.astype(np.uint16) * (255 - alpha) + 127) // 255
    out = np.where(alpha == 0, d, np.minimum(out, 255))
    d[...] = out.astype(np.uint8)


def paste(dst: Canvas, src: Canvas, at: tuple[int, int] | None = None) -> None:
    """Copy *src* onto *dst*, replacing the covered pixels."""
    view = _overlap(dst, src, at)
    if view is None:
        return
    d_rows, d_cols, s_rows, s_cols = view
    dst.pix[d_rows, d_cols] = src.pix[s_rows, s_cols]
