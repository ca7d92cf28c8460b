"""Font descriptor of an embedded subset font."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from pdfsmith.strhelper import create_embedded_font_subset_name
from pdfsmith.subset_font import SubsetFont
from pdfsmith.ttf.tables import round_half_away


def design_units_to_pdf(value: int, units_per_em: int) -> int:
    """Convert font design units to 1/1000 em."""
    return round_half_away(value * 1000.0 / units_per_em)


@dataclass
class SubfontDescriptor:
    """The /FontDescriptor dictionary for a subset font."""

    subset_font: SubsetFont
    index_obj_pdf_dictionary: int = 0

    obj_type = "SubFontDescriptor"

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the descriptor for object number ``obj_id``."""
        ttfp = self.subset_font.ttfp
        upem = ttfp.units_per_em

        def pdf(value: int) -> int:
            return design_units_to_pdf(value, upem)

        name = create_embedded_font_subset_name(self.subset_font.family)
        text = (
            "<<\n"
            "/Type /FontDescriptor\n"
            f"/Ascent {pdf(ttfp.ascender())}\n"
            f"/CapHeight {pdf(ttfp.cap_height)}\n"
            f"/Descent {pdf(ttfp.descender())}\n"
            f"/Flags {ttfp.flag()}\n"
            f"/FontBBox [{pdf(ttfp.x_min)} {pdf(ttfp.y_min)} "
            f"{pdf(ttfp.x_max)} {pdf(ttfp.y_max)}]\n"
            f"/FontFile2 {self.index_obj_pdf_dictionary + 1} 0 R\n"
            f"/FontName /{name}\n"
            f"/ItalicAngle {ttfp.italic_angle}\n"
            "/StemV 0\n"
            f"/XHeight {pdf(ttfp.x_height())}\n"
            ">>\n"
        )
        out.write(text.encode("latin-1"))