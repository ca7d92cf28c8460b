"""Small value types shared by the TrueType parser."""

from __future__ import annotations

from dataclasses import dataclass, field


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0.0:
        return int(value - 0.5)
    return int(value + 0.5)


@dataclass
class TableDirectoryEntry:
    """One entry of the font's table directory."""

    checksum: int = 0
    offset: int = 0
    length: int = 0

    def padded_length(self) -> int:
        """Length rounded up to a multiple of four bytes."""
        return (self.length + 3) & ~3


class KernValue(dict):
    """Kerning values for one left glyph, keyed by the right glyph."""

    def value_by_right(self, right: int) -> int | None:
        """Return the kerning value for ``right``, or None if there is none."""
        return self.get(right)


@dataclass
class KernTable:
    """Contents of a ``kern`` table: left glyph -> KernValue."""

    version: int = 0
    n_tables: int = 0
    kerning: dict[int, KernValue] = field(default_factory=dict)


@dataclass
class FontMap:
    """One code point of an encoding map."""

    uv: int = -1
    name: str = ".notdef"