"""Binary encoding of a baked font.

Integers wider than a byte are LEB128 varints, ``u8``/``i8`` are single
bytes, and every variable-length collection carries a varint length prefix.
The encoded buffer is compressed with Zstandard.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Tuple

import zstandard

from .lookup import MAP16_SIZE, BakedFont, Glyph, Key32

DEFAULT_LEVEL = 19


class _Writer:
    def __init__(self) -> None:
        self.buf = bytearray()

    def varint(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"varint cannot encode negative value {value}")
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                self.buf.append(byte | 0x80)
            else:
                self.buf.append(byte)
                return

    def u8(self, value: int) -> None:
        self.buf.append(value & 0xFF)

    def i8(self, value: int) -> None:
        self.buf.append(value & 0xFF)

    def raw(self, data: bytes) -> None:
        self.varint(len(data))
        self.buf.extend(data)

    def glyph(self, glyph: Glyph) -> None:
        self.varint(glyph.pos[0])
        self.varint(glyph.pos[1])
        self.u8(glyph.size[0])
        self.u8(glyph.size[1])
        self.i8(glyph.offset[0])
        self.i8(glyph.offset[1])


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def _take(self, count: int) -> bytes:
        end = self.pos + count
        if end > len(self.data):
            raise ValueError(f"truncated font data at offset {self.pos}")
        chunk = self.data[self.pos:end]
        self.pos = end
        return chunk

    def varint(self, max_bits: int = 32) -> int:
        value = 0
        shift = 0
        while True:
            byte = self._take(1)[0]
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7
            if shift > max_bits:
                raise ValueError(f"varint too long at offset {self.pos}")
        if value >> max_bits:
            raise ValueError(f"varint overflows u{max_bits} at offset {self.pos}")
        return value

    def u8(self) -> int:
        return self._take(1)[0]

    def i8(self) -> int:
        value = self._take(1)[0]
        return value - 0x100 if value & 0x80 else value

    def raw(self) -> bytes:
        return self._take(self.varint())

    def glyph(self) -> Glyph:
        pos = (self.varint(), self.varint())
        size = (self.u8(), self.u8())
        offset = (self.i8(), self.i8())
        return Glyph(pos=pos, size=size, offset=offset)


def encode_font(font: BakedFont) -> bytes:
    if len(font.map16) != MAP16_SIZE:
        raise ValueError(f"map16 must hold {MAP16_SIZE} glyphs, got {len(font.map16)}")
    writer = _Writer()
    writer.raw(bytes(font.bitmap))
    writer.varint(font.width)
    writer.varint(len(font.map16))
    for glyph in font.map16:
        writer.glyph(glyph)
    writer.varint(len(font.dict32))
    for (first, second), glyph in sorted(font.dict32.items()):
        writer.varint(first)
        writer.varint(second)
        writer.glyph(glyph)
    return bytes(writer.buf)


def decode_font(data: bytes) -> BakedFont:
    reader = _Reader(data)
    bitmap = reader.raw()
    width = reader.varint()
    count = reader.varint()
    map16: List[Glyph] = [reader.glyph() for _ in range(count)]
    dict32: Dict[Key32, Glyph] = {}
    for _ in range(reader.varint()):
        key: Tuple[int, int] = (reader.varint(16), reader.varint(16))
        dict32[key] = reader.glyph()
    if reader.pos != len(data):
        raise ValueError(f"{len(data) - reader.pos} trailing bytes after font data")
    return BakedFont(bitmap=bitmap, width=width, map16=map16, dict32=dict32)


def compression_level() -> int:
    return int(os.environ.get("FONT_BAKER_ZSTD_LEVEL", DEFAULT_LEVEL))


def compress(data: bytes, level: int | None = None) -> bytes:
    if level is None:
        level = compression_level()
    return zstandard.ZstdCompressor(level=level).compress(data)


def decompress(data: bytes) -> bytes:
    return zstandard.ZstdDecompressor().decompressobj().decompress(data)


def pack_font(font: BakedFont, level: int | None = None) -> bytes:
    if level is None:
        level = compression_level()
    data = encode_font(font)
    print(f"Font size (uncompressed): {len(data)}")
    packed = compress(data, level)
    print(f"Font size (Zstd@{level} compressed): {len(packed)}")
    return packed


def write_font(font: BakedFont, output_path: Path, level: int | None = None) -> Path:
    packed = pack_font(font, level)
    output_path = Path(output_path)
    output_path.write_bytes(packed)
    return output_path


def read_font(path: Path) -> BakedFont:
    return decode_font(decompress(Path(path).read_bytes()))
