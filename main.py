#!/usr/bin/env python3
"""main.py - CLI entry point for the gotcha captcha engine.

Usage:
    python main.py <command> [options]

Commands:
    draw      - Draw text onto a distorted captcha image
    help      - Show this help message

Examples:
    python main.py draw "Candy shop!"
    python main.py draw "Candy shop!" -f b,l --noise 0.8 -o candy.png
    python main.py draw "x + 3 = 7" --variant inverted --font-scale 1.5 --base64
    python main.py help
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _configure_logging(args: argparse.Namespace) -> None:
    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def cmd_draw(args: argparse.Namespace) -> int:
    """Render TEXT with the requested fuzzers and write or print the image."""
    from gotcha.exceptions import DrawError
    from gotcha.fonts import inconsolata
    from gotcha.fuzzers import lookup, make_fuzzers, random_pair
    from gotcha.options import FontOptions, FuzzOptions
    from gotcha.pipeline import gen

    try:
        font_opts = FontOptions.resolve(
            variant=args.variant,
            scale=args.font_scale,
            rotation=args.font_rotation,
            random_rotation=args.font_rotation is None,
            line_break=args.line_break,
            background=args.background,
            sheet_path=args.sheet,
            seed=args.seed,
        )
        fuzz_opts = FuzzOptions.resolve(
            color1=args.color,
            color2=args.fg_color,
            noise=args.noise,
            thickness=args.thickness,
            slope=args.slope,
            seed=args.seed,
        )
        if args.fuzzers:
            factories = [lookup(name) for name in args.fuzzers.split(",") if name.strip()]
        else:
            factories = random_pair(fuzz_opts.rng())
        captcha = gen(
            args.text,
            inconsolata(font_opts),
            *make_fuzzers(factories, fuzz_opts),
        )
    except (DrawError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.base64:
        print(captcha.to_base64())
        return 0

    out = Path(args.outfile)
    out.write_bytes(captcha.encode_png())
    logging.getLogger(__name__).info(
        "wrote %dx%d captcha to %s", captcha.width, captcha.height, out
    )
    return 0


def cmd_help(args: argparse.Namespace) -> int:
    """Show help message."""
    parser.print_help()
    return 0


def main(argv: list[str] | None = None) -> int:
    global parser

    parser = argparse.ArgumentParser(
        description="gotcha captcha engine CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py draw "Candy shop!"
  python main.py draw "Candy shop!" -f b,c --thickness 20 --slope 1.0
  python main.py draw "abc" -f a --color 128,0,0,128 --fg-color 0,0,128,128
  python main.py help
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Errors only")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # draw subcommand
    draw_parser = subparsers.add_parser("draw", help="Draw some text onto an image")
    draw_parser.add_argument("text", help="Text to draw")
    draw_parser.add_argument(
        "-f",
        "--fuzzers",
        default=None,
        metavar="LIST",
        help="Comma separated fuzzers: [b]ands, [a]ccurate bands, random [l]ines, "
        "[r]andom circles, [c]oncentric circles. Default: a random pair",
    )
    draw_parser.add_argument(
        "--color", default=None, metavar="R,G,B[,A]", help="Color for every fuzzer"
    )
    draw_parser.add_argument(
        "--fg-color",
        default=None,
        metavar="R,G,B[,A]",
        help="Secondary color for bands and concentric circles",
    )
    draw_parser.add_argument(
        "--noise", type=float, default=0.5, help="Noise for lines and circles (default: 0.5)"
    )
    draw_parser.add_argument(
        "--thickness", type=int, default=10, help="Band and ring thickness, px (default: 10)"
    )
    draw_parser.add_argument(
        "--slope", type=float, default=None, help="Band slope in [-2, 2]. Random if unset"
    )
    draw_parser.add_argument(
        "--font-rotation",
        type=int,
        default=None,
        metavar="DEG",
        help="Rotate every glyph by DEG. Random per glyph if unset",
    )
    draw_parser.add_argument(
        "--font-scale", type=float, default=1.0, help="Scale glyphs by this value"
    )
    draw_parser.add_argument(
        "--variant",
        choices=["gray", "black", "inverted"],
        default="gray",
        help="Font variant (default: gray)",
    )
    draw_parser.add_argument(
        "--line-break", type=int, default=18, metavar="N", help="Wrap width in characters"
    )
    draw_parser.add_argument(
        "--background", default=None, metavar="R,G,B[,A]", help="Canvas background color"
    )
    draw_parser.add_argument(
        "--sheet", default=None, metavar="PNG", help="External glyph sprite sheet"
    )
    draw_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    draw_parser.add_argument(
        "-o", "--outfile", default="captcha.png", help="Output PNG (default: captcha.png)"
    )
    draw_parser.add_argument(
        "--base64", action="store_true", help="Print a base64 PNG instead of writing a file"
    )

    # help subcommand
    subparsers.add_parser("help", help="Show this help message")

    args = parser.parse_args(argv)
    _configure_logging(args)

    if args.command == "draw":
        return cmd_draw(args)
    return cmd_help(args)


if __name__ == "__main__":
    sys.exit(main())
