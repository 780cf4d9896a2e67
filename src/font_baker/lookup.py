"""Two-tier glyph lookup: a direct table for single code units and a map
for longer sequences, keyed by their first two UTF-16 code units."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .errors import EncodingOverflow
from .extract_glyphs import GlyphMetrics
from .layout import Layout, iter_positions

MAP16_SIZE = 0x10000
# sequences at least this many code units long go to dict32
DICT32_MIN_UNITS = 4

Key32 = Tuple[int, int]


@dataclass(frozen=True)
class Glyph:
    pos: Tuple[int, int] = (0, 0)
    size: Tuple[int, int] = (0, 0)
    offset: Tuple[int, int] = (0, 0)

    @property
    def is_empty(self) -> bool:
        return self.size == (0, 0)


EMPTY_GLYPH = Glyph()


class FlatGlyph(NamedTuple):
    sequence: str
    x: int
    y: int
    width: int
    height: int
    render_x: int
    render_y: int


def utf16_units(sequence: str) -> Tuple[int, ...]:
    data = sequence.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(data) // 2}H", data)


def tier_key(sequence: str) -> Tuple[str, int | Key32]:
    """Return ``("map16", index)`` or ``("dict32", (unit0, unit1))``.

    Sequences shorter than four code units are indexed by their first unit
    only; the remaining units are ignored.
    """
    units = utf16_units(sequence)
    if not units:
        raise EncodingOverflow("empty glyph sequence has no code units")
    if len(units) < DICT32_MIN_UNITS:
        return "map16", units[0]
    return "dict32", (units[0], units[1])


def _trunc(value: float) -> int:
    return int(math.trunc(value))


def _saturate_i8(value: float) -> int:
    """Truncate toward zero and clamp to the signed byte range."""
    return max(-0x80, min(0x7F, _trunc(value)))


def _check_range(name: str, sequence: str, values: Sequence[int], low: int, high: int) -> None:
    for value in values:
        if not low <= value <= high:
            raise EncodingOverflow(
                f"{name} {tuple(values)} of glyph {sequence!r} is outside {low}..{high}"
            )


def flatten_layout(glyphs: Sequence[GlyphMetrics], layout: Layout) -> List[FlatGlyph]:
    positions = list(iter_positions(layout))
    if len(positions) != len(glyphs):
        raise ValueError(
            f"layout holds {len(positions)} positions for {len(glyphs)} glyphs"
        )
    return [
        FlatGlyph(
            sequence=glyph.sequence,
            x=_trunc(x),
            y=_trunc(y),
            width=_trunc(glyph.width),
            height=_trunc(glyph.height),
            render_x=_saturate_i8(-glyph.ink_offset[0]),
            render_y=_saturate_i8(-glyph.ink_offset[1]),
        )
        for glyph, (x, y) in zip(glyphs, positions)
    ]


def encode_glyph(flat: FlatGlyph, font_size: float) -> Glyph:
    size = (flat.width, flat.height)
    _check_range("size", flat.sequence, size, 0, 0xFF)
    offset = (
        _saturate_i8(-_saturate_i8(flat.render_x)),
        _saturate_i8(_saturate_i8(font_size) - _saturate_i8(flat.render_y)),
    )
    pos = (flat.x, flat.y)
    _check_range("position", flat.sequence, pos, 0, 0xFFFFFFFF)
    return Glyph(pos=pos, size=size, offset=offset)


@dataclass
class BakedFont:
    bitmap: bytes
    width: int
    map16: List[Glyph] = field(default_factory=lambda: [EMPTY_GLYPH] * MAP16_SIZE)
    dict32: Dict[Key32, Glyph] = field(default_factory=dict)

    @property
    def height(self) -> int:
        return len(self.bitmap) // self.width if self.width else 0

    def insert(self, sequence: str, glyph: Glyph) -> None:
        tier, key = tier_key(sequence)
        if tier == "map16":
            self.map16[key] = glyph
        else:
            self.dict32[key] = glyph

    def lookup(self, sequence: str) -> Optional[Glyph]:
        tier, key = tier_key(sequence)
        if tier == "map16":
            glyph = self.map16[key]
            return None if glyph.is_empty else glyph
        return self.dict32.get(key)

    def map16_count(self) -> int:
        return sum(1 for glyph in self.map16 if glyph.size[0] != 0)


def build_lookup(
    flattened: Sequence[FlatGlyph],
    font_size: float,
    bitmap: bytes = b"",
    width: int = 0,
) -> BakedFont:
    font = BakedFont(bitmap=bitmap, width=width)
    for flat in flattened:
        font.insert(flat.sequence, encode_glyph(flat, font_size))
    font.dict32 = dict(sorted(font.dict32.items()))
    print(f"Glyph count (map16): {font.map16_count()}")
    print(f"Glyph count (dict32): {len(font.dict32)}")
    return font
