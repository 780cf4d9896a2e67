from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from .backend import InkRect, RenderBackend
from .errors import ResourceNotFound
from .extract_glyphs import GlyphMetrics
from .layout import Layout, iter_positions


@dataclass(frozen=True)
class RenderContext:
    """Pillow backend: one font used for both measuring and drawing."""

    font: ImageFont.FreeTypeFont

    def measure(self, sequence: str) -> Tuple[float, InkRect]:
        advance = self.font.getlength(sequence)
        left, top, right, bottom = self.font.getbbox(sequence, anchor="ls")
        return advance, (left, top, right - left, bottom - top)

    def new_surface(self, width: int, height: int) -> Image.Image:
        return Image.new("L", (width, height), color=0)

    def draw_text_at(self, surface: Image.Image, sequence: str, origin: Tuple[float, float]) -> None:
        draw = ImageDraw.Draw(surface)
        draw.text(origin, sequence, font=self.font, fill=255, anchor="ls")

    def snapshot_alpha(self, surface: Image.Image) -> bytes:
        return surface.tobytes()


def _fc_match(pattern: str) -> Tuple[str, str] | None:
    try:
        res = subprocess.run(
            ["fc-match", "-f", "%{family}\n%{file}\n", pattern],
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        return None
    lines = (res.stdout or "").strip().splitlines()
    if res.returncode != 0 or len(lines) < 2:
        return None
    return lines[0].strip(), lines[1].strip()


def fc_escape(value: str) -> str:
    """Escape characters that are syntax in a fontconfig pattern."""
    for ch in ("\\", "-", ":", ","):
        value = value.replace(ch, "\\" + ch)
    return value


def find_font_file(family: str, style: str = "Regular") -> Path:
    """Resolve a font family name (or a font file path) to a font file.

    fontconfig substitutes a fallback for unknown families; that counts as
    not found.
    """
    candidate = Path(family).expanduser()
    if candidate.is_file():
        return candidate

    match = _fc_match(f"{fc_escape(family)}:style={fc_escape(style)}")
    if match is None:
        raise ResourceNotFound(f"unable to query system fonts for family {family!r}")
    families, file_path = match
    known = {name.strip().lower() for name in families.split(",")}
    if family.strip().lower() not in known or not Path(file_path).is_file():
        raise ResourceNotFound(f"font family {family!r} ({style}) not found")
    return Path(file_path)


def load_render_context(family: str, font_size: float) -> RenderContext:
    font_path = find_font_file(family)
    font = ImageFont.truetype(str(font_path), font_size)
    return RenderContext(font=font)


def draw_origin(glyph: GlyphMetrics, x: float, y: float) -> Tuple[float, float]:
    """Backend origin that puts the glyph's ink top-left at ``(x, y)``."""
    return x - glyph.ink_offset[0], y - glyph.ink_offset[1]


def render_atlas(
    glyphs: Sequence[GlyphMetrics],
    layout: Layout,
    width: int,
    height: int,
    context: RenderBackend,
) -> Any:
    surface = context.new_surface(width, height)
    for glyph, (x, y) in zip(glyphs, iter_positions(layout)):
        context.draw_text_at(surface, glyph.sequence, draw_origin(glyph, x, y))
    return surface


def save_preview(surface: Image.Image, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    surface.save(output_path)
    return output_path
