"""options.py - Pydantic v2 configuration records for fonts and fuzzers.

Both records are immutable snapshots built once per call. Unknown keys are
ignored, absent keys take their defaults and out-of-range numbers are
clamped instead of rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_LINE_BREAK,
    DEFAULT_NOISE,
    DEFAULT_THICKNESS,
    SLOPE_LIMIT,
    VARIANT_COLORS,
    Color,
    FontVariant,
)
from .exceptions import OptionsError
from .utils import _clamp


def parse_color(value: Any) -> Color | None:
    """Coerce "r,g,b[,a]" strings and 3/4-sequences into a premultiplied color.

    Alpha defaults to 255. Channels are clamped to 0..255 and color
    channels to the alpha value.
    """
    if value is None:
        return None
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
        try:
            channels = [int(p) for p in parts]
        except ValueError as exc:
            raise OptionsError(f"invalid color {value!r}") from exc
    else:
        try:
            channels = [int(c) for c in value]
        except (TypeError, ValueError) as exc:
            raise OptionsError(f"invalid color {value!r}") from exc
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise OptionsError(f"color needs 3 or 4 channels, got {value!r}")
    r, g, b, a = (int(_clamp(c, 0, 255)) for c in channels)
    return min(r, a), min(g, a), min(b, a), a


class _Options(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def resolve(cls, options: Any = None, **overrides: Any):
        """Build a snapshot from another snapshot, a mapping, or None, plus overrides."""
        if isinstance(options, cls) and not overrides:
            return options
        if options is None:
            data: dict[str, Any] = {}
        elif isinstance(options, BaseModel):
            data = options.model_dump()
        elif isinstance(options, Mapping):
            data = dict(options)
        else:
            raise OptionsError(f"cannot build {cls.__name__} from {type(options).__name__}")
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(data)

    def rng(self) -> np.random.Generator:
        """Random generator seeded from *seed* (fresh entropy when unset)."""
        return np.random.default_rng(getattr(self, "seed", None))


class FuzzOptions(_Options):
    """Settings shared by the fuzzer factories."""

    color1: Color | None = Field(default=None, description="Primary overlay color")
    color2: Color | None = Field(default=None, description="Secondary overlay color")
    noise: float = Field(default=DEFAULT_NOISE, description="Noise level in [0, 1]")
    thickness: int = Field(default=DEFAULT_THICKNESS, description="Band thickness, px")
    slope: float | None = Field(
        default=None, description="Band slope in [-2, 2]; random when unset"
    )
    seed: int | None = Field(default=None, description="Random seed")

    @field_validator("color1", "color2", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> Color | None:
        return parse_color(value)

    @field_validator("noise")
    @classmethod
    def _clamp_noise(cls, value: float) -> float:
        return _clamp(value, 0.0, 1.0)

    @field_validator("thickness")
    @classmethod
    def _clamp_thickness(cls, value: int) -> int:
        return max(1, value)

    @field_validator("slope")
    @classmethod
    def _clamp_slope(cls, value: float | None) -> float | None:
        if value is None:
            return None
        return _clamp(value, -SLOPE_LIMIT, SLOPE_LIMIT)


class FontOptions(_Options):
    """Settings for the glyph font drawer."""

    variant: FontVariant = Field(default=FontVariant.GRAY, description="Sprite sheet variant")
    scale: float = Field(default=1.0, description="Glyph scale factor")
    rotation: int = Field(
        default=0, description="Fixed glyph rotation, degrees; ignored when random_rotation"
    )
    random_rotation: bool = Field(default=True, description="Rotate each glyph at random")
    line_break: int = Field(default=DEFAULT_LINE_BREAK, description="Wrap width, characters")
    background: Color | None = Field(
        default=None, description="Background color; the variant's when unset"
    )
    sheet_path: Path | None = Field(default=None, description="External sprite sheet PNG")
    seed: int | None = Field(default=None, description="Random seed for glyph rotation")

    @field_validator("background", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> Color | None:
        return parse_color(value)

    @field_validator("scale")
    @classmethod
    def _clamp_scale(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("line_break")
    @classmethod
    def _clamp_line_break(cls, value: int) -> int:
        return max(1, value)

    @property
    def background_color(self) -> Color:
        if self.background is not None:
            return self.background
        return VARIANT_COLORS[self.variant][1]
