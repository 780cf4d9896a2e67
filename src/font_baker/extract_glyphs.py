from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple

from .backend import RenderBackend


@dataclass(frozen=True)
class GlyphMetrics:
    sequence: str
    ink_offset: Tuple[float, float]
    size: Tuple[float, float]

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]


def iter_sequences(text: str) -> Iterator[str]:
    """Yield one glyph sequence per non-empty line.

    Only a line feed, optionally preceded by a carriage return, ends a
    line. Other Unicode line separators stay part of the glyph sequence.
    """
    for line in text.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line:
            yield line


def read_sequences(paths: Iterable[Path]) -> List[str]:
    sequences: List[str] = []
    for path in paths:
        print(f"Reading file: {path}")
        with open(path, encoding="utf-8", newline="") as f:
            sequences.extend(iter_sequences(f.read()))
    return sequences


def measure_glyph(sequence: str, context: RenderBackend, padding: float = 0.0) -> GlyphMetrics:
    advance, (ink_x, ink_y, _, ink_height) = context.measure(sequence)
    return GlyphMetrics(
        sequence=sequence,
        ink_offset=(ink_x - padding, ink_y - padding),
        size=(advance + padding * 2.0, ink_height + padding * 2.0),
    )


def build_glyph_metrics(
    sequences: Sequence[str],
    context: RenderBackend,
    padding: float = 0.0,
) -> List[GlyphMetrics]:
    return [measure_glyph(seq, context, padding) for seq in sequences]
