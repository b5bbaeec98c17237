"""Pytest configuration and shared fixtures for the gotcha captcha engine."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add the repository root to the path for imports
REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(REPO_ROOT))

from gotcha.canvas import Canvas  # noqa: E402
from gotcha.fonts import GlyphAtlas  # noqa: E402


@pytest.fixture
def repo_root() -> Path:
    """Return the repository root path."""
    return REPO_ROOT


@pytest.fixture
def blank_canvas() -> Canvas:
    """A transparent 48x50 canvas, the size of two glyph cells."""
    return Canvas(48, 50)


@pytest.fixture
def test_font_drawer():
    """Font drawer that ignores the text and returns a transparent 48x50 canvas."""

    def draw(text: str) -> Canvas:
        return Canvas(48, 50)

    return draw


@pytest.fixture
def atlas() -> GlyphAtlas:
    """A fresh, empty glyph atlas."""
    return GlyphAtlas()
