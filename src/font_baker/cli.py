"""Command line entry point for baking a font atlas."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .errors import FontBakerError, UsageError
from .extract_glyphs import read_sequences
from .pipeline import bake_to_file
from .render_page import load_render_context


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="font-baker",
        description="Bake glyph sequences into a single-bitmap font atlas.",
    )
    parser.add_argument("family", help="Font family name or path to a font file.")
    parser.add_argument("font_size", type=float, help="Font size in pixels.")
    parser.add_argument("padding", type=float, help="Padding around every glyph, in pixels.")
    parser.add_argument("output", type=Path, help="Where to write the compressed font.")
    parser.add_argument(
        "glyph_files",
        type=Path,
        nargs="*",
        help="Text files with one glyph sequence per non-empty line.",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Zstandard compression level (default: $FONT_BAKER_ZSTD_LEVEL or 19).",
    )
    parser.add_argument(
        "--preview",
        type=Path,
        default=os.environ.get("FONT_BAKER_PREVIEW"),
        help="Also save the atlas as a PNG for inspection.",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    try:
        sequences = read_sequences(args.glyph_files)
        print(f"Font family: {args.family}")
        print(f"Font size: {args.font_size}")
        print(f"Padding: {args.padding}")
        context = load_render_context(args.family, args.font_size)
        bake_to_file(
            context,
            args.font_size,
            args.padding,
            sequences,
            args.output,
            level=args.level,
            preview_path=args.preview,
        )
    except (FontBakerError, OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
