"""Insertion-ordered map from characters to glyph indexes."""

from __future__ import annotations


class CharacterToGlyphIndex:
    """Characters mapped to glyph indexes, remembering insertion order."""

    def __init__(self) -> None:
        self._positions: dict[str, int] = {}
        self._keys: list[str] = []
        self._values: list[int] = []

    def set(self, char: str, glyph: int) -> None:
        """Append ``char`` with ``glyph``; a repeated char points at its newest entry."""
        self._positions[char] = len(self._keys)
        self._keys.append(char)
        self._values.append(glyph)

    def index(self, char: str) -> int | None:
        """Position of ``char`` in insertion order, or None if absent."""
        return self._positions.get(char)

    def value(self, char: str) -> int | None:
        """Glyph index of ``char``, or None if absent."""
        position = self._positions.get(char)
        if position is None:
            return None
        return self._values[position]

    def keys(self) -> list[str]:
        return list(self._keys)

    def values(self) -> list[int]:
        return list(self._values)

    def __contains__(self, char: object) -> bool:
        return char in self._positions

    def __len__(self) -> int:
        return len(self._keys)