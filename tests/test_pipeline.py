"""Tests for gotcha/pipeline module."""

from __future__ import annotations

import base64

import numpy as np
import pytest

from gotcha.canvas import Canvas
from gotcha.constants import DEFAULT_COLOR1, DEFAULT_COLOR2
from gotcha.fonts import GlyphAtlas, inconsolata
from gotcha.fuzzers import (
    accurate_bands,
    bands,
    concentric_circles,
    random_circles,
    random_lines,
)
from gotcha.options import FuzzOptions
from gotcha.pipeline import gen, gen_base64, gen_png


class TestGen:
    """Test cases for the composition pipeline."""

    def test_without_fuzzers_returns_drawn_canvas(self, test_font_drawer) -> None:
        captcha = gen("AB", test_font_drawer)
        assert captcha.size == (48, 50)
        assert not captcha.pix.any()

    def test_flat_bands_end_to_end(self, test_font_drawer) -> None:
        captcha = gen("AB", test_font_drawer, bands(FuzzOptions(thickness=10, slope=0.0)))
        assert captcha.bounds == (0, 0, 48, 50)
        for y in range(50):
            expected = DEFAULT_COLOR1 if (y // 10) % 2 == 0 else DEFAULT_COLOR2
            assert captcha.at(0, y) == expected
            assert captcha.at(47, y) == expected

    def test_five_fuzzers_keep_bounds(self, test_font_drawer) -> None:
        opts = FuzzOptions(noise=0.6, thickness=4)
        for _ in range(10):
            captcha = gen(
                "AB",
                test_font_drawer,
                random_lines(opts),
                random_circles(opts),
                concentric_circles(opts),
                bands(opts),
                accurate_bands(opts),
            )
            assert captcha.bounds == (0, 0, 48, 50)
            assert (captcha.pix[..., 3] > 0).all()

    def test_fuzzer_errors_propagate(self, test_font_drawer) -> None:
        def broken(img: Canvas) -> None:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            gen("AB", test_font_drawer, random_lines(noise=0.1), broken)

    def test_with_font_drawer(self) -> None:
        draw = inconsolata(random_rotation=False, atlas=GlyphAtlas())
        base = draw("Candy")
        captcha = gen("Candy", draw, random_lines(), concentric_circles(), bands())
        assert captcha.bounds == base.bounds
        assert (captcha.pix[..., 3] == 255).all()

    def test_order_independent_bounds(self, test_font_drawer) -> None:
        fuzzers = [random_lines(), random_circles(), bands(), accurate_bands(), concentric_circles()]
        rng = np.random.default_rng(7)
        for _ in range(5):
            order = rng.permutation(len(fuzzers))
            captcha = gen("AB", test_font_drawer, *(fuzzers[i] for i in order))
            assert captcha.bounds == (0, 0, 48, 50)


class TestEncoding:
    """Test cases for the encoded outputs."""

    def test_gen_png(self, test_font_drawer) -> None:
        assert gen_png("AB", test_font_drawer, bands()).startswith(b"\x89PNG")

    def test_gen_base64(self, test_font_drawer) -> None:
        data = base64.b64decode(gen_base64("AB", test_font_drawer, random_lines()))
        assert data.startswith(b"\x89PNG")
