"""String, font-metric and byte helpers."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class FontDescItem:
    """One key/value entry of a font descriptor."""

    key: str
    val: str


class PaintStyle(str, enum.Enum):
    """Path painting operators."""

    DRAW = "S"
    FILL = "f"
    DRAW_FILL = "B"


def parse_style(style: str) -> PaintStyle:
    """Map "F", "FD"/"DF" or anything else to a painting operator."""
    if style == "F":
        return PaintStyle.FILL
    if style in ("FD", "DF"):
        return PaintStyle.DRAW_FILL
    return PaintStyle.DRAW


def string_width(text: str, font_size: float, widths: Mapping[int, int]) -> float:
    """Width of ``text`` from per-byte character widths in 1/1000 em."""
    total = sum(widths.get(byte, 0) for byte in text.encode("utf-8"))
    return total * (float(font_size) / 1000.0)


def create_embedded_font_subset_name(name: str) -> str:
    """Replace spaces and slashes, which a PDF font name cannot hold."""
    return name.replace(" ", "+").replace("/", "+")


def _two_bytes(data: bytes, offset: int) -> int:
    chunk = data[offset:offset + 2]
    if offset < 0 or len(chunk) != 2:
        raise ValueError(f"cannot read 2 bytes at offset {offset}")
    return int.from_bytes(chunk, "big")


def read_ushort(data: bytes, offset: int) -> int:
    """Big-endian unsigned 16-bit value at ``offset``."""
    return _two_bytes(data, offset)


def read_short(data: bytes, offset: int) -> int:
    """Big-endian signed 16-bit value at ``offset``."""
    value = _two_bytes(data, offset)
    return value - 65536 if value >= 0x8000 else value


def to_byte(chr: str) -> int:
    """First byte of the UTF-8 encoding of ``chr``."""
    return chr.encode("utf-8")[0]