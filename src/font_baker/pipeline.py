"""Run the whole bake: measure, pack, render, encode, write."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Sequence

from .backend import RenderBackend
from .extract_glyphs import GlyphMetrics, build_glyph_metrics
from .layout import Layout, atlas_height, atlas_width, build_layout, optimal_width
from .lookup import BakedFont, build_lookup, flatten_layout
from .render_page import render_atlas, save_preview
from .serialize import write_font


@dataclass
class BakeResult:
    font: BakedFont
    glyphs: List[GlyphMetrics]
    layout: Layout
    surface: Any  # PIL.Image.Image for the Pillow context

    @property
    def height(self) -> int:
        return self.font.height


def bake_font(
    context: RenderBackend,
    font_size: float,
    padding: float,
    sequences: Sequence[str],
) -> BakeResult:
    if not sequences:
        raise ValueError("no glyph sequences to bake")

    glyphs = build_glyph_metrics(sequences, context, 0.0)
    line_width = optimal_width(glyphs)
    layout = build_layout(glyphs, line_width, padding)
    width = atlas_width(glyphs, layout, line_width)
    height = atlas_height(glyphs, layout, padding)
    print(f"Atlas: {width}x{height} px, {len(layout)} rows")

    surface = render_atlas(glyphs, layout, width, height, context)
    bitmap = context.snapshot_alpha(surface)

    font = build_lookup(flatten_layout(glyphs, layout), font_size, bitmap=bitmap, width=width)
    return BakeResult(font=font, glyphs=glyphs, layout=layout, surface=surface)


def bake_to_file(
    context: RenderBackend,
    font_size: float,
    padding: float,
    sequences: Sequence[str],
    output_path: Path,
    level: int | None = None,
    preview_path: Path | None = None,
) -> BakeResult:
    result = bake_font(context, font_size, padding, sequences)
    write_font(result.font, Path(output_path), level)
    print(f"Wrote font to {output_path}")
    if preview_path is not None:
        save_preview(result.surface, Path(preview_path))
        print(f"Wrote preview to {preview_path}")
    return result
