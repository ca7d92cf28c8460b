"""Options that control how a TrueType font is embedded."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KernOverride = Callable[[str, str, int, int, int], int]
"""Hook returning a custom kerning value.

Called with the left and right characters, their glyph indexes and the
kerning value found in the font.
"""

SUBSTITUTE_CHAR = " "


def default_glyph_substitute(char: str) -> str:
    """Replace a character the font cannot show with a space."""
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    return SUBSTITUTE_CHAR


@dataclass
class TtfOption:
    """How a font is loaded and what happens with characters it lacks."""

    use_kerning: bool = False
    style: int = 0
    on_glyph_not_found: Callable[[str], None] | None = None
    on_glyph_not_found_substitute: Callable[[str], str] | None = default_glyph_substitute