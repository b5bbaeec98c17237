"""Tests for gotcha/options module."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gotcha.constants import FontVariant
from gotcha.exceptions import OptionsError
from gotcha.options import FontOptions, FuzzOptions, parse_color


class TestParseColor:
    """Test cases for parse_color."""

    def test_string_with_alpha(self) -> None:
        assert parse_color("128,0,0,128") == (128, 0, 0, 128)

    def test_alpha_defaults_to_opaque(self) -> None:
        assert parse_color("10, 20, 30") == (10, 20, 30, 255)

    def test_sequence(self) -> None:
        assert parse_color([1, 2, 3, 4]) == (1, 2, 3, 4)

    def test_channels_clamped_and_premultiplied(self) -> None:
        assert parse_color((300, 100, -5, 64)) == (64, 64, 0, 64)

    def test_none(self) -> None:
        assert parse_color(None) is None

    @pytest.mark.parametrize("value", ["red", "1,2", "1,2,3,4,5", 7])
    def test_invalid(self, value) -> None:
        with pytest.raises(OptionsError):
            parse_color(value)


class TestFuzzOptions:
    """Test cases for FuzzOptions."""

    def test_defaults(self) -> None:
        opts = FuzzOptions()
        assert opts.noise == 0.5
        assert opts.thickness == 10
        assert opts.slope is None
        assert opts.color1 is None
        assert opts.color2 is None

    @pytest.mark.parametrize("noise, expected", [(-1.0, 0.0), (0.3, 0.3), (4.0, 1.0)])
    def test_noise_clamped(self, noise: float, expected: float) -> None:
        assert FuzzOptions(noise=noise).noise == expected

    @pytest.mark.parametrize("slope, expected", [(-9.0, -2.0), (0.0, 0.0), (2.5, 2.0)])
    def test_slope_clamped(self, slope: float, expected: float) -> None:
        assert FuzzOptions(slope=slope).slope == expected

    def test_thickness_at_least_one(self) -> None:
        assert FuzzOptions(thickness=0).thickness == 1

    def test_unknown_keys_ignored(self) -> None:
        opts = FuzzOptions.model_validate({"noise": 0.2, "bogus": True})
        assert opts.noise == 0.2

    def test_color_strings_accepted(self) -> None:
        opts = FuzzOptions(color1="128,0,0,128")
        assert opts.color1 == (128, 0, 0, 128)

    def test_bad_color_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FuzzOptions(color1="not,a,color")

    def test_is_immutable(self) -> None:
        opts = FuzzOptions()
        with pytest.raises(ValidationError):
            opts.noise = 0.9

    def test_resolve_merges_overrides(self) -> None:
        base = FuzzOptions(noise=0.2, thickness=4)
        opts = FuzzOptions.resolve(base, thickness=7)
        assert opts.noise == 0.2
        assert opts.thickness == 7
        assert base.thickness == 4

    def test_resolve_returns_same_snapshot(self) -> None:
        base = FuzzOptions()
        assert FuzzOptions.resolve(base) is base

    def test_resolve_from_mapping(self) -> None:
        assert FuzzOptions.resolve({"slope": 1.5}).slope == 1.5

    def test_resolve_rejects_other_types(self) -> None:
        with pytest.raises(OptionsError):
            FuzzOptions.resolve(42)

    def test_seeded_rng_is_reproducible(self) -> None:
        opts = FuzzOptions(seed=3)
        assert opts.rng().integers(0, 10**9) == opts.rng().integers(0, 10**9)


class TestFontOptions:
    """Test cases for FontOptions."""

    def test_defaults(self) -> None:
        opts = FontOptions()
        assert opts.variant is FontVariant.GRAY
        assert opts.scale == 1.0
        assert opts.random_rotation is True
        assert opts.line_break == 18

    @pytest.mark.parametrize("variant, background", [
        ("gray", (192, 192, 192, 255)),
        ("black", (255, 255, 255, 255)),
        ("inverted", (0, 0, 0, 255)),
    ])
    def test_variant_background(self, variant: str, background: tuple) -> None:
        assert FontOptions(variant=variant).background_color == background

    def test_background_override(self) -> None:
        opts = FontOptions(variant="black", background="1,2,3")
        assert opts.background_color == (1, 2, 3, 255)

    def test_negative_scale_clamped(self) -> None:
        assert FontOptions(scale=-1.0).scale == 0.0

    def test_unknown_variant_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FontOptions(variant="comic-sans")
