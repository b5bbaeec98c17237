"""
Custom exceptions for the captcha drawing engine.
"""

from __future__ import annotations


class DrawError(Exception):
    """Base exception for drawing errors."""

    pass


class GlyphAtlasError(DrawError):
    """The glyph sprite sheet could not be loaded or decoded."""

    pass


class OptionsError(DrawError, ValueError):
    """A configuration value could not be interpreted."""

    pass
