from __future__ import annotations

from typing import Dict, List, Tuple

import pytest
from PIL import Image, ImageDraw

from font_baker.extract_glyphs import GlyphMetrics


class FakeContext:
    """Render context with fixed per-character metrics.

    Each character advances ``advance`` pixels (or its entry in ``widths``);
    the ink box sits ``ink_x`` right of the pen and ``-ink_y`` above the
    baseline.  Drawing fills the ink box so the bitmap is checkable.
    """

    def __init__(
        self,
        advance: float = 10.0,
        widths: Dict[str, float] | None = None,
        ink_x: float = 1.0,
        ink_y: float = -10.0,
        ink_height: float = 12.0,
    ) -> None:
        self.advance = advance
        self.widths = widths or {}
        self.ink_x = ink_x
        self.ink_y = ink_y
        self.ink_height = ink_height
        self.draws: List[Tuple[str, Tuple[float, float]]] = []

    def measure(self, sequence):
        advance = sum(self.widths.get(ch, self.advance) for ch in sequence)
        ink_width = max(advance - 2 * self.ink_x, 0.0)
        return advance, (self.ink_x, self.ink_y, ink_width, self.ink_height)

    def new_surface(self, width, height):
        return Image.new("L", (width, height), color=0)

    def draw_text_at(self, surface, sequence, origin):
        self.draws.append((sequence, origin))
        advance, (ix, iy, iw, ih) = self.measure(sequence)
        left = origin[0] + ix
        top = origin[1] + iy
        ImageDraw.Draw(surface).rectangle(
            [left, top, left + iw - 1, top + ih - 1], fill=255
        )

    def snapshot_alpha(self, surface):
        return surface.tobytes()


@pytest.fixture
def fake_context():
    return FakeContext()


def glyph(seq: str, width: float, height: float, ink=(0.0, 0.0)) -> GlyphMetrics:
    return GlyphMetrics(sequence=seq, ink_offset=ink, size=(width, height))


@pytest.fixture
def make_glyph():
    return glyph
