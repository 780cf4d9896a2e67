import pytest

from font_baker.errors import EncodingOverflow
from font_baker.layout import build_layout
from font_baker.lookup import (
    EMPTY_GLYPH,
    MAP16_SIZE,
    FlatGlyph,
    Glyph,
    build_lookup,
    encode_glyph,
    flatten_layout,
    tier_key,
    utf16_units,
)


def flat(seq, x=0, y=0, w=10, h=12, rx=-1, ry=10):
    return FlatGlyph(seq, x, y, w, h, rx, ry)


@pytest.mark.parametrize(
    "seq, expected",
    [
        ("A", ("map16", 0x41)),
        ("ABC", ("map16", 0x41)),
        ("\U0001F600", ("map16", 0xD83D)),
        ("ABCD", ("dict32", (0x41, 0x42))),
        ("\U0001F44D\U0001F3FD", ("dict32", (0xD83D, 0xDC4D))),
    ],
)
def test_tier_key(seq, expected):
    assert tier_key(seq) == expected


def test_two_unit_sequence_uses_first_unit_only():
    assert utf16_units("AB") == (0x41, 0x42)
    assert tier_key("AB") == ("map16", 0x41)


def test_empty_sequence_is_rejected():
    with pytest.raises(EncodingOverflow):
        tier_key("")


def test_encode_glyph_offsets():
    glyph = encode_glyph(flat("A", x=2, y=3), font_size=32)
    assert glyph == Glyph(pos=(2, 3), size=(10, 12), offset=(1, 22))


@pytest.mark.parametrize("w, h", [(256, 10), (10, 300), (-1, 10)])
def test_encode_glyph_rejects_oversized(w, h):
    with pytest.raises(EncodingOverflow):
        encode_glyph(flat("A", w=w, h=h), font_size=32)


@pytest.mark.parametrize(
    "rx, ry, font_size, expected",
    [
        (-1, -20, 120, (1, 127)),
        (-128, 10, 32, (127, 22)),
        (0, 20, 150, (0, 107)),
        (5, -100, 32, (-5, 127)),
        (0, 127, 0, (0, -127)),
    ],
)
def test_encode_glyph_saturates_offsets(rx, ry, font_size, expected):
    assert encode_glyph(flat("A", rx=rx, ry=ry), font_size=font_size).offset == expected


def test_flatten_layout_saturates_ink_offset(make_glyph):
    glyphs = [make_glyph("a", 10, 10, ink=(-300.0, 200.5))]
    flattened = flatten_layout(glyphs, build_layout(glyphs, 30, 2))
    assert (flattened[0].render_x, flattened[0].render_y) == (127, -128)


def test_flatten_layout_keeps_input_order(make_glyph):
    glyphs = [make_glyph(s, 10.7, 12.2, ink=(1.5, -9.9)) for s in "abcd"]
    layout = build_layout(glyphs, 30, 2)
    flattened = flatten_layout(glyphs, layout)
    assert [f.sequence for f in flattened] == list("abcd")
    assert flattened[0] == FlatGlyph("a", 2, 2, 10, 12, -1, 9)
    assert (flattened[2].x, flattened[2].y) == (2, 16)


def test_flatten_layout_rejects_mismatch(make_glyph):
    glyphs = [make_glyph("a", 10, 10), make_glyph("b", 10, 10)]
    with pytest.raises(ValueError):
        flatten_layout(glyphs, [(2, [2])])


def test_build_lookup_tiers(capsys):
    seqs = ["a", "\U0001F600", "\U0001F44D\U0001F3FD", "ABCD"]
    font = build_lookup([flat(s, x=i * 12) for i, s in enumerate(seqs)], font_size=32)

    assert len(font.map16) == MAP16_SIZE
    assert font.map16_count() == 2
    assert len(font.dict32) == 2
    for i, seq in enumerate(seqs):
        assert font.lookup(seq).pos == (i * 12, 0)

    out = capsys.readouterr().out
    assert "Glyph count (map16): 2" in out
    assert "Glyph count (dict32): 2" in out


def test_build_lookup_overlapping_first_unit():
    font = build_lookup(
        [flat("A", x=0), flat("B", x=12), flat("AB", x=24)], font_size=32
    )
    assert font.map16[0x41].pos == (24, 0)
    assert font.map16[0x42].pos == (12, 0)
    assert font.dict32 == {}
    assert font.lookup("AB") == font.lookup("A")


def test_missing_glyph_is_empty_slot():
    font = build_lookup([flat("A")], font_size=32)
    assert font.map16[0x5A] == EMPTY_GLYPH
    assert font.map16[0x5A].size == (0, 0)
    assert font.lookup("Z") is None
    assert font.lookup("WXYZ") is None


def test_dict32_is_sorted_by_key():
    font = build_lookup([flat("ZZZZ"), flat("AAAA"), flat("MMMM")], font_size=32)
    assert list(font.dict32) == [(0x41, 0x41), (0x4D, 0x4D), (0x5A, 0x5A)]
