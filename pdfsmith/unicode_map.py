"""ToUnicode CMap stream of a subset font."""

from __future__ import annotations

from typing import BinaryIO

from pdfsmith.protection import PDFProtection, rc4
from pdfsmith.subset_font import SubsetFont

_PREFIX = (
    "/CIDInit /ProcSet findresource begin\n"
    "12 dict begin\n"
    "begincmap\n"
    "/CIDSystemInfo << /Registry (Adobe)/Ordering (UCS)/Supplement 0>> def\n"
    "/CMapName /Adobe-Identity-UCS def /CMapType 2 def\n"
)
_SUFFIX = "endcmap CMapName currentdict /CMap defineresource pop end end"


class UnicodeMap:
    """Maps the glyphs of a subset font back to the characters they show."""

    obj_type = "Unicode"

    def __init__(self, subset_font: SubsetFont, protection: PDFProtection | None = None) -> None:
        self.subset_font = subset_font
        self.protection = protection

    def _cmap(self) -> bytes:
        mapping = self.subset_font.character_to_glyph_index
        pairs: list[tuple[int, str]] = []
        low, high = 65536, -1
        for char in mapping.keys():
            glyph = mapping.value(char)
            low = min(low, glyph)
            high = max(high, glyph)
            pairs.append((glyph, char))
        first_char: dict[int, str] = {}
        for glyph, char in pairs:
            first_char.setdefault(glyph, char)

        parts = [
            _PREFIX,
            "1 begincodespacerange\n",
            f"<{low:04X}><{high:04X}>\n",
            "endcodespacerange\n",
            f"{len(pairs)} beginbfrange\n",
        ]
        parts.extend(
            f"<{glyph:04X}><{glyph:04X}><{ord(first_char[glyph]):04X}>\n" for glyph, _ in pairs
        )
        parts.append("endbfrange\n")
        parts.append(_SUFFIX)
        parts.append("\n")
        return "".join(parts).encode("latin-1")

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the CMap stream for object number ``obj_id``."""
        body = self._cmap()
        out.write(f"<<\n/Length {len(body)}\n>>\nstream\n".encode("latin-1"))
        if self.protection is not None:
            out.write(rc4(self.protection.object_key(obj_id), body))
        else:
            out.write(body)
        out.write(b"endstream\n")