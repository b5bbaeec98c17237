"""
pipeline.py
--------------------
Composition pipeline: draw the text, run every fuzzer on its own worker,
join, return the canvas.

Fuzzers share the text canvas but only touch it in their final, locked
blend, so the order in which overlays land varies between runs while the
canvas bounds never do.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from .canvas import Canvas
from .fonts import FontDrawer
from .fuzzers import Fuzzer


def gen(text: str, font_drawer: FontDrawer, *fuzzers: Fuzzer) -> Canvas:
    """Render *text* with *font_drawer* and apply *fuzzers* concurrently.

    Exceptions raised by a fuzzer propagate once every fuzzer has finished.
    """
    captcha = font_drawer(text)
    if not fuzzers:
        return captcha
    with ThreadPoolExecutor(max_workers=len(fuzzers)) as pool:
        futures: list[Future[None]] = [pool.submit(fuzz, captcha) for fuzz in fuzzers]
        for fut in futures:
            fut.result()
    return captcha


def gen_png(text: str, font_drawer: FontDrawer, *fuzzers: Fuzzer) -> bytes:
    """gen(), encoded as PNG bytes."""
    return gen(text, font_drawer, *fuzzers).encode_png()


def gen_base64(text: str, font_drawer: FontDrawer, *fuzzers: Fuzzer) -> str:
    """gen(), encoded as a base64 PNG string."""
    return gen(text, font_drawer, *fuzzers).to_base64()
