"""Row packing of measured glyphs into a single atlas."""

from __future__ import annotations

import math
from typing import Iterator, List, Sequence, Tuple

from .extract_glyphs import GlyphMetrics

# (row top y, x offset of each glyph in the row)
Row = Tuple[float, List[float]]
Layout = List[Row]


def optimal_width(glyphs: Sequence[GlyphMetrics]) -> int:
    """Pick a row width that makes a roughly square atlas."""
    if not glyphs:
        raise ValueError("cannot size an atlas with no glyphs")
    widest = max(glyph.width for glyph in glyphs)
    return math.ceil(widest * math.sqrt(len(glyphs)))


def build_layout(glyphs: Sequence[GlyphMetrics], line_width: float, padding: float) -> Layout:
    """Greedily pack glyphs left to right, wrapping rows at ``line_width``.

    A glyph wider than the row is never split; it starts a fresh row and
    overflows it.
    """
    layout: Layout = [(padding, [])]
    row_max = 0.0
    off = padding
    line: List[float] = []
    for glyph in glyphs:
        if off + glyph.width + padding > line_width and line:
            layout[-1] = (layout[-1][0], line)
            layout.append((layout[-1][0] + row_max, []))
            row_max = 0.0
            off = padding
            line = []
        line.append(off)
        off += glyph.width + padding
        row_max = max(row_max, glyph.height + padding)
    if line:
        layout[-1] = (layout[-1][0], line)
    else:
        layout.pop()
    return layout


def iter_positions(layout: Layout) -> Iterator[Tuple[float, float]]:
    """Yield ``(x, y)`` for every packed glyph in input order."""
    for top, offsets in layout:
        for x in offsets:
            yield x, top


def atlas_height(glyphs: Sequence[GlyphMetrics], layout: Layout, padding: float) -> int:
    if not layout:
        raise ValueError("cannot size an atlas with no rows")
    last_top, last_offsets = layout[-1]
    last_row = glyphs[len(glyphs) - len(last_offsets):]
    return math.ceil(last_top + max(glyph.height + padding for glyph in last_row))


def atlas_width(glyphs: Sequence[GlyphMetrics], layout: Layout, line_width: int) -> int:
    """Row width, widened when an oversized glyph overflows its row."""
    right = max(
        (x + glyph.width for glyph, (x, _) in zip(glyphs, iter_positions(layout))),
        default=0.0,
    )
    return max(line_width, math.ceil(right))
