"""
constants.py
--------------------
Shared constants for the captcha drawing engine:
  - default colors (premultiplied RGBA)
  - glyph cell geometry
  - the ordered glyph character set and its sprite sheet row breaks
  - font variant table
"""

from enum import StrEnum

Color = tuple[int, int, int, int]

TRANSPARENT: Color = (0, 0, 0, 0)

# Fill used by rotate/scale when no background is configured
DEFAULT_BACKGROUND: Color = (192, 192, 192, 255)

# Fuzzer fallbacks
DEFAULT_COLOR1: Color = (192, 192, 192, 192)
DEFAULT_COLOR2: Color = (128, 128, 128, 128)
DEFAULT_NOISE = 0.5
DEFAULT_THICKNESS = 10
SLOPE_LIMIT = 2.0

# Glyph geometry

GLYPH_WIDTH = 24
GLYPH_HEIGHT = 50
DEFAULT_LINE_BREAK = 18

# Random glyph rotation, degrees, [min, max)
RANDOM_ROTATION_RANGE: tuple[int, int] = (-35, 40)

# Rotations in these ranges need a wider canvas to avoid clipping corners
WIDE_ROTATION_RANGES: tuple[tuple[int, int], ...] = ((55, 125), (235, 305))
WIDE_FACTOR = 1.3

# Sprite sheet layout

CHARSET: str = (
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789`~!@#$%^&*(){}[]"
    "'\"<>,./=¿?+-_\\|;:‘’“”¡¢£€"
    "¥Š§š×÷‹›→←↑↓ÀÁÂÃÄÅÆÇÈÉÊËÌÍ"
    "ÎÏÐÑÒÓÔÕÖØÙÚÛÜÝÞßàáâãäåæçè"
    "éêëìíîïðñòóôõöøùúûüýþÿĄĽŚŞ"
    "ŤŹŻŔĂĹĆČĘĚĎŃŇŐŘŮűłąăčďęľĺń"
    "ňőřśşůŜĸŋΑαΒβΔδΕεΦφΓγΗηΙιΘ"
    "θΚκΛλΜμΝνΟοΠπΧχΡρΣσΤτΥυΩωΞ"
    "ξΨψΖζ "
)

# Last character of each visual row in the sheet
ROW_BREAKS: frozenset[str] = frozenset("zZ]€ÍèŞńΘΞ")


class FontVariant(StrEnum):
    GRAY = "gray"
    BLACK = "black"
    INVERTED = "inverted"


# variant → (foreground, background)
VARIANT_COLORS: dict[FontVariant, tuple[Color, Color]] = {
    FontVariant.GRAY:     ((64, 64, 64, 255),    (192, 192, 192, 255)),
    FontVariant.BLACK:    ((0, 0, 0, 255),       (255, 255, 255, 255)),
    FontVariant.INVERTED: ((255, 255, 255, 255), (0, 0, 0, 255)),
}

# Point size used to rasterize the built-in sheet into 24x50 cells
SHEET_FONT_SIZE = 28
