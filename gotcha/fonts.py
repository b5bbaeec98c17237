"""
fonts.py
--------------------
Glyph atlas and text layout for the monospaced captcha font.

The sprite sheet is a grid of 24x50 cells walked in CHARSET order, one row
per run of characters ending in a ROW_BREAKS character. The built-in sheet
is rasterized with Pillow's bundled default font; an external PNG laid
out the same way can be supplied through FontOptions.sheet_path.

inconsolata() resolves FontOptions once and returns the font drawer the
pipeline calls with the challenge text. Each wrapped line is laid out by
its own worker; glyphs are scaled, rotated and blended at the cursor.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .canvas import Canvas, composite_over, new_canvas
from .constants import (
    CHARSET,
    GLYPH_HEIGHT,
    GLYPH_WIDTH,
    RANDOM_ROTATION_RANGE,
    ROW_BREAKS,
    SHEET_FONT_SIZE,
    VARIANT_COLORS,
    WIDE_FACTOR,
    Color,
    FontVariant,
)
from .exceptions import GlyphAtlasError
from .options import FontOptions
from .transform import needs_wide_canvas, rotate, scale

log = logging.getLogger(__name__)

FontDrawer = Callable[[str], Canvas]

Rect = tuple[int, int, int, int]


@dataclass(frozen=True, slots=True)
class Glyph:
    """One character cell: where it sits in the sheet and its finished tile."""

    rune: str
    source: Rect
    tile: Canvas


@dataclass(frozen=True, slots=True)
class TextLayout:
    """Wrapped lines plus the character length of the longest one."""

    lines: tuple[str, ...]
    longest: int


# Sprite sheet

def sheet_layout(charset: str = CHARSET) -> dict[str, Rect]:
    """Map each character to its (x0, y0, x1, y1) cell in the sheet."""
    cells: dict[str, Rect] = {}
    x = y = 0
    for ch in charset:
        cells[ch] = (x, y, x + GLYPH_WIDTH, y + GLYPH_HEIGHT)
        if ch in ROW_BREAKS:
            x = 0
            y += GLYPH_HEIGHT
        else:
            x += GLYPH_WIDTH
    return cells


def render_sprite_sheet(variant: FontVariant) -> Image.Image:
    """Rasterize CHARSET into an RGBA sprite sheet for *variant*."""
    fg, bg = VARIANT_COLORS[variant]
    cells = sheet_layout()
    width = max(c[2] for c in cells.values())
    height = max(c[3] for c in cells.values())
    try:
        font = ImageFont.load_default(size=SHEET_FONT_SIZE)
    except (OSError, ImportError) as exc:
        raise GlyphAtlasError(f"cannot load sheet font: {exc}") from exc

    sheet = Image.new("RGBA", (width, height), bg)
    for ch, (x0, y0, _, _) in cells.items():
        # one image per cell so wide glyphs never bleed into a neighbour
        cell = Image.new("RGBA", (GLYPH_WIDTH, GLYPH_HEIGHT), bg)
        ImageDraw.Draw(cell).text(
            (GLYPH_WIDTH / 2, GLYPH_HEIGHT / 2), ch, fill=fg, font=font, anchor="mm"
        )
        sheet.paste(cell, (x0, y0))
    return sheet


def load_sprite_sheet(variant: FontVariant, sheet_path: Path | None = None) -> Canvas:
    """Decode the sprite sheet for *variant* into a canvas.

    Raises GlyphAtlasError when the sheet cannot be read or decoded.
    """
    if sheet_path is None:
        return Canvas.from_image(render_sprite_sheet(variant))
    try:
        with Image.open(sheet_path) as img:
            img.load()
            return Canvas.from_image(img)
    except OSError as exc:
        raise GlyphAtlasError(f"cannot decode sprite sheet {sheet_path}: {exc}") from exc


def build_glyphs(variant: FontVariant, sheet_path: Path | None = None) -> dict[str, Glyph]:
    """Cut every CHARSET cell out of the sheet and paint it over the variant background."""
    sheet = load_sprite_sheet(variant, sheet_path)
    bg = VARIANT_COLORS[variant][1]
    glyphs: dict[str, Glyph] = {}
    for ch, rect in sheet_layout().items():
        tile = new_canvas(GLYPH_WIDTH, GLYPH_HEIGHT, background=bg)
        composite_over(tile, sheet.crop(*rect))
        glyphs[ch] = Glyph(rune=ch, source=rect, tile=tile)
    return glyphs


class GlyphAtlas:
    """Lazily built rune → Glyph map, cached for the last requested sheet.

    Reads of a cached map take no lock; a build, and any rebuild for a
    different variant or sheet, runs under the lock so concurrent first
    uses build once.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: tuple[tuple[FontVariant, str | None], Mapping[str, Glyph]] | None = None
        self.builds = 0

    def get(
        self, variant: FontVariant | str, sheet_path: Path | str | None = None
    ) -> Mapping[str, Glyph]:
        """Return the glyph map for *variant*, building it if it isn't cached."""
        key = (FontVariant(variant), str(sheet_path) if sheet_path is not None else None)
        state = self._state
        if state is not None and state[0] == key:
            return state[1]
        with self._lock:
            state = self._state
            if state is not None and state[0] == key:
                return state[1]
            log.debug("building glyph atlas for %s (sheet=%s)", key[0].value, key[1])
            glyphs = build_glyphs(key[0], Path(key[1]) if key[1] else None)
            self._state = (key, MappingProxyType(glyphs))
            self.builds += 1
            return self._state[1]

    @property
    def variant(self) -> FontVariant | None:
        state = self._state
        return state[0][0] if state is not None else None


ATLAS = GlyphAtlas()


# Layout

def wrap_lines(text: str, width: int) -> TextLayout:
    """Break *text* at the first space at or past *width* characters, or at newlines.

    Tabs become two spaces first and each line is stripped. Text with no
    break point comes back as a single line.
    """
    text = text.replace("\t", "  ")
    width = max(1, width)
    lines: list[str] = []
    start = 0
    for j, ch in enumerate(text):
        if ch == "\n" or (ch == " " and j - start >= width):
            lines.append(text[start:j].strip())
            start = j + 1
    tail = text[start:].strip()
    if tail or not lines:
        lines.append(tail)
    return TextLayout(lines=tuple(lines), longest=max(len(line) for line in lines))


def _recolor(tile: Canvas, old: Color, new: Color) -> Canvas:
    """Copy of *tile* with every pixel equal to *old* replaced by *new*."""
    if old == new:
        return tile
    out = tile.copy()
    out.pix[(tile.pix == old).all(axis=-1)] = new
    return out


def _draw_line(
    img: Canvas,
    line: str,
    ypos: int,
    glyphs: Mapping[str, Glyph],
    opts: FontOptions,
    rng: np.random.Generator,
) -> None:
    bg = opts.background_color
    sheet_bg = VARIANT_COLORS[opts.variant][1]
    xpos = 0
    for ch in line:
        glyph = glyphs.get(ch)
        if glyph is None:
            log.warning("unknown character %r (U+%04X)", ch, ord(ch))
            xpos += int(GLYPH_WIDTH * opts.scale)
            continue
        if opts.random_rotation:
            degrees = int(rng.integers(*RANDOM_ROTATION_RANGE))
        else:
            degrees = opts.rotation
        tile = _recolor(glyph.tile, sheet_bg, bg)
        placed = rotate(scale(tile, opts.scale, bg), degrees, bg)
        with img.lock:
            composite_over(img, placed, at=(xpos, ypos))
        xpos += placed.width


def inconsolata(
    options: FontOptions | Mapping | None = None,
    atlas: GlyphAtlas | None = None,
    **overrides,
) -> FontDrawer:
    """Return a font drawer for the monospaced captcha font.

    The atlas is fetched here, so a broken sprite sheet fails now rather
    than on the first draw.
    """
    opts = FontOptions.resolve(options, **overrides)
    glyphs = (atlas or ATLAS).get(opts.variant, opts.sheet_path)
    wide = 1.0
    if not opts.random_rotation and needs_wide_canvas(opts.rotation):
        wide = WIDE_FACTOR
    row_height = int(GLYPH_HEIGHT * opts.scale)

    def draw(text: str) -> Canvas:
        layout = wrap_lines(text, opts.line_break)
        img = new_canvas(
            int(GLYPH_WIDTH * layout.longest * opts.scale * wide),
            int(GLYPH_HEIGHT * len(layout.lines) * opts.scale),
            background=opts.background_color,
        )
        rng = opts.rng()
        seeds = rng.integers(0, 2**32, len(layout.lines))
        line_rngs = [np.random.default_rng(int(s)) for s in seeds]

        with ThreadPoolExecutor(max_workers=len(layout.lines)) as pool:
            futures: list[Future[None]] = [
                pool.submit(_draw_line, img, line, i * row_height, glyphs, opts, line_rngs[i])
                for i, line in enumerate(layout.lines)
            ]
            for fut in futures:
                fut.result()
        return img

    return draw
