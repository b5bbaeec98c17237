"""
fuzzers.py
--------------------
Randomized overlay effects that make the rendered text harder to OCR.

Each factory resolves a FuzzOptions snapshot once and returns a Fuzzer:
a closure that takes the text canvas, draws its shapes on a private
scratch canvas with the same bounds, then blends the scratch canvas over
the text canvas in one locked step.

Effects:
  - random_lines        round(noise*100) lines between random points
  - random_circles      round(noise*10) filled disks
  - concentric_circles  round(noise*20) two-color ring stacks
  - bands               1px lines per intercept, stripes `thickness` tall
  - accurate_bands      full-thickness bands measured perpendicular to the slope
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

import numpy as np

from .canvas import Canvas, composite_over
from .constants import DEFAULT_COLOR1, DEFAULT_COLOR2, SLOPE_LIMIT, Color
from .exceptions import OptionsError
from .options import FuzzOptions
from .raster import draw_disk, draw_line, draw_rings
from .utils import _round_half

Fuzzer = Callable[[Canvas], None]
FuzzFactory = Callable[..., Fuzzer]


# Helpers

def _scratch(img: Canvas) -> Canvas:
    return Canvas.from_bounds(*img.bounds)


def _merge(img: Canvas, layer: Canvas) -> None:
    with img.lock:
        composite_over(img, layer)


def _is_empty(img: Canvas) -> bool:
    return img.width == 0 or img.height == 0


def _point(rng: np.random.Generator, img: Canvas) -> tuple[int, int]:
    return (
        int(rng.integers(img.min_x, img.max_x)),
        int(rng.integers(img.min_y, img.max_y)),
    )


def _slope(opts: FuzzOptions, rng: np.random.Generator) -> float:
    if opts.slope is not None:
        return opts.slope
    return float(rng.uniform(-SLOPE_LIMIT, SLOPE_LIMIT))


# Line equations in image space, where y grows downward: y = b - m*x

def line_y(m: float, x: int, b: float) -> int:
    # ties round up so line_y(m, x, b + 1) == line_y(m, x, b) + 1
    return math.floor(b - m * x + 0.5)


def intercept_range(img: Canvas, m: float) -> tuple[int, int]:
    """Smallest and largest intercepts of slope-*m* lines crossing *img*."""
    corners = [
        y + m * x
        for x in (img.min_x, img.max_x - 1)
        for y in (img.min_y, img.max_y - 1)
    ]
    return math.floor(min(corners)), math.ceil(max(corners))


# Noise

def random_lines(options: FuzzOptions | Mapping | None = None, **overrides) -> Fuzzer:
    """Random single-color lines; reads noise and color1."""
    opts = FuzzOptions.resolve(options, **overrides)
    col = opts.color1 or DEFAULT_COLOR1
    count = _round_half(opts.noise * 100)

    def fuzz(img: Canvas) -> None:
        if _is_empty(img) or count == 0:
            return
        rng = opts.rng()
        lines = _scratch(img)
        for _ in range(count):
            x0, y0 = _point(rng, img)
            x1, y1 = _point(rng, img)
            draw_line(lines, x0, y0, x1, y1, col)
        _merge(img, lines)

    return fuzz


def random_circles(options: FuzzOptions | Mapping | None = None, **overrides) -> Fuzzer:
    """Random filled disks; a random gray per call when color1 is unset."""
    opts = FuzzOptions.resolve(options, **overrides)
    count = _round_half(opts.noise * 10)

    def fuzz(img: Canvas) -> None:
        if _is_empty(img) or count == 0:
            return
        rng = opts.rng()
        col: Color
        if opts.color1 is not None:
            col = opts.color1
        else:
            k = int(rng.integers(0, 128))
            col = (k, k, k, k)
        circles = _scratch(img)
        for _ in range(count):
            r = int(rng.integers(0, img.height))
            cx, cy = _point(rng, img)
            draw_disk(circles, cx, cy, r, col)
        _merge(img, circles)

    return fuzz


def concentric_circles(options: FuzzOptions | Mapping | None = None, **overrides) -> Fuzzer:
    """Bullseye stacks alternating color1/color2 every `thickness` radii."""
    opts = FuzzOptions.resolve(options, **overrides)
    col1 = opts.color1 or DEFAULT_COLOR1
    col2 = opts.color2 or DEFAULT_COLOR2
    thickness = opts.thickness
    count = _round_half(opts.noise * 20)

    def fuzz(img: Canvas) -> None:
        if _is_empty(img) or count == 0:
            return
        rng = opts.rng()
        circles = _scratch(img)
        for _ in range(count):
            r = int(rng.integers(0, img.height))
            cx, cy = _point(rng, img)
            first = True
            for j in range(r, -1, -thickness):
                draw_rings(circles, cx, cy, j, j - thickness, col1 if first else col2)
                first = not first
        _merge(img, circles)

    return fuzz


# Bands

def bands(options: FuzzOptions | Mapping | None = None, **overrides) -> Fuzzer:
    """Parallel stripes of alternating color, `thickness` pixels tall.

    One Bresenham line per integer intercept, so consecutive lines touch
    and the stripes tile the canvas without gaps.
    """
    opts = FuzzOptions.resolve(options, **overrides)
    col1 = opts.color1 or DEFAULT_COLOR1
    col2 = opts.color2 or DEFAULT_COLOR2
    thickness = opts.thickness

    def fuzz(img: Canvas) -> None:
        if _is_empty(img):
            return
        m = _slope(opts, opts.rng())
        layer = _scratch(img)
        b_min, b_max = intercept_range(img, m)
        x0, x1 = img.min_x - thickness, img.max_x
        # spare lines on each side absorb endpoint rounding
        for b in range(b_min - 2, b_max + 3):
            col = col1 if ((b - b_min) // thickness) % 2 == 0 else col2
            draw_line(layer, x0, line_y(m, x0, b), x1, line_y(m, x1, b), col)
        _merge(img, layer)

    return fuzz


def accurate_bands(options: FuzzOptions | Mapping | None = None, **overrides) -> Fuzzer:
    """Bands whose thickness is measured perpendicular to the stripe.

    Every intercept offset inside a band is evaluated with the line
    equation at every column. About 1.5x the CPU of bands() and far more
    memory.
    """
    opts = FuzzOptions.resolve(options, **overrides)
    col1 = opts.color1 or DEFAULT_COLOR1
    col2 = opts.color2 or DEFAULT_COLOR2
    thickness = opts.thickness

    def fuzz(img: Canvas) -> None:
        if _is_empty(img):
            return
        m = _slope(opts, opts.rng())
        layer = _scratch(img)
        b_min, b_max = intercept_range(img, m)
        # vertical extent of a band `thickness` wide across the stripe
        extent = thickness * math.sqrt(1.0 + m * m)
        offsets = np.arange(math.ceil(extent), dtype=np.float64)
        xs = np.arange(img.min_x - thickness, img.max_x + 1, dtype=np.int64)

        k = 0
        start = float(b_min)
        while start <= b_max:
            ys = np.floor(start + offsets[:, None] - m * xs[None, :] + 0.5).astype(np.int64)
            grid_x = np.broadcast_to(xs, ys.shape)
            layer.set_many(grid_x, ys, col1 if k % 2 == 0 else col2)
            k += 1
            start = b_min + k * extent
        _merge(img, layer)

    return fuzz


# Registry

FUZZERS: dict[str, FuzzFactory] = {
    "bands":              bands,
    "accurate_bands":     accurate_bands,
    "random_lines":       random_lines,
    "random_circles":     random_circles,
    "concentric_circles": concentric_circles,
}

# One-letter names accepted on the command line
ALIASES: dict[str, str] = {
    "b": "bands",
    "a": "accurate_bands",
    "l": "random_lines",
    "r": "random_circles",
    "c": "concentric_circles",
}

# Combinations picked when no fuzzer is requested
RANDOM_PAIRS: list[tuple[str, str]] = [
    ("bands", "random_lines"),
    ("bands", "concentric_circles"),
    ("random_lines", "concentric_circles"),
    ("random_lines", "random_circles"),
    ("random_circles", "concentric_circles"),
]


def lookup(name: str) -> FuzzFactory:
    """Return the factory registered as *name* or its one-letter alias."""
    key = name.strip().lower()
    key = ALIASES.get(key, key)
    try:
        return FUZZERS[key]
    except KeyError:
        raise OptionsError(f"unknown fuzzer {name!r}") from None


def make_fuzzers(factories: list[FuzzFactory], options: FuzzOptions) -> list[Fuzzer]:
    """Instantiate *factories* with *options*, one independent seed each.

    A seeded run hands every fuzzer its own child seed of options.seed, so
    the fuzzers never replay the same random stream.
    """
    if options.seed is None:
        return [factory(options) for factory in factories]
    children = np.random.SeedSequence(options.seed).spawn(len(factories))
    return [
        factory(options, seed=int(child.generate_state(1)[0]))
        for factory, child in zip(factories, children)
    ]


def random_pair(rng: np.random.Generator | None = None) -> list[FuzzFactory]:
    """Pick one of RANDOM_PAIRS at random."""
    if rng is None:
        rng = np.random.default_rng()
    pair = RANDOM_PAIRS[int(rng.integers(0, len(RANDOM_PAIRS)))]
    return [FUZZERS[name] for name in pair]
