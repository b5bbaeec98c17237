"""
gotcha package - distorted-text captcha image engine.

Public API:
    canvas     - RGBA pixel buffer and source-over compositing
    constants  - Shared defaults, glyph charset and font variants
    exceptions - Error hierarchy
    fonts      - Glyph atlas, line wrapping and the Inconsolata font drawer
    fuzzers    - Randomized overlay effects
    options    - Typed font and fuzzer configuration
    pipeline   - gen(): text + fuzzers → canvas
    raster     - Bresenham line and midpoint circle primitives
    transform  - Rotation and scaling
    utils      - Clamping and rounding helpers
"""

from . import (
    canvas,
    constants,
    exceptions,
    fonts,
    fuzzers,
    options,
    pipeline,
    raster,
    transform,
    utils,
)

__all__ = [
    "canvas",
    "constants",
    "exceptions",
    "fonts",
    "fuzzers",
    "options",
    "pipeline",
    "raster",
    "transform",
    "utils",
]
