"""Type0 font object that embeds only the glyphs a document uses."""

from __future__ import annotations

import dataclasses
import os
from typing import BinaryIO

from pdfsmith.glyph_map import CharacterToGlyphIndex
from pdfsmith.strhelper import create_embedded_font_subset_name
from pdfsmith.ttf.parser import TTFParser
from pdfsmith.ttf.tables import KernValue
from pdfsmith.ttf_option import KernOverride, TtfOption, default_glyph_substitute


class CharNotFoundError(LookupError):
    """The character has not been added to the font."""

    def __init__(self, char: str) -> None:
        super().__init__(f"char not found: {char!r}")
        self.char = char


class GlyphNotFoundError(LookupError):
    """The font file does not contain a glyph for the character."""

    def __init__(self, char: str) -> None:
        super().__init__(f"glyph not found: {char!r}")
        self.char = char


class SubsetFont:
    """A TrueType font and the characters of it that are in use."""

    obj_type = "SubsetFont"

    def __init__(self, family: str = "", option: TtfOption | None = None) -> None:
        self.family = family
        self.option = option if option is not None else TtfOption()
        self.character_to_glyph_index = CharacterToGlyphIndex()
        self.count_of_font = 0
        self.index_obj_cid_font = 0
        self.index_obj_unicode_map = 0
        self.kern_override: KernOverride | None = None
        self.ttfp = TTFParser(use_kerning=self.option.use_kerning)

    @property
    def option(self) -> TtfOption:
        return self._option

    @option.setter
    def option(self, option: TtfOption) -> None:
        if option.on_glyph_not_found_substitute is None:
            option = dataclasses.replace(
                option, on_glyph_not_found_substitute=default_glyph_substitute
            )
        self._option = option

    # -- loading ------------------------------------------------------

    def set_ttf_path(self, path: str | os.PathLike) -> None:
        """Load the font file at ``path``."""
        self.ttfp.use_kerning = self.option.use_kerning
        self.ttfp.parse_file(path)

    def set_ttf_stream(self, stream: BinaryIO) -> None:
        """Load the font from a binary stream."""
        self.ttfp.use_kerning = self.option.use_kerning
        self.ttfp.parse_stream(stream)

    def set_ttf_data(self, data: bytes) -> None:
        """Load the font from bytes."""
        self.ttfp.use_kerning = self.option.use_kerning
        self.ttfp.parse_data(data)

    # -- characters ---------------------------------------------------

    def add_chars(self, text: str) -> str:
        """Register the characters of ``text``; return the text as it will be shown.

        Characters without a glyph are passed to the not-found hook and
        replaced by the substitute character.
        """
        shown: list[str] = []
        for char in text:
            if char in self.character_to_glyph_index:
                shown.append(char)
                continue
            try:
                glyph = self.char_code_to_glyph_index(char)
            except GlyphNotFoundError:
                if self.option.on_glyph_not_found is not None:
                    self.option.on_glyph_not_found(char)
                already, replacement, replacement_glyph = self._substitute(char)
                if not already:
                    self.character_to_glyph_index.set(replacement, replacement_glyph)
                shown.append(replacement)
                continue
            self.character_to_glyph_index.set(char, glyph)
            shown.append(char)
        return "".join(shown)

    def _substitute(self, missing: str) -> tuple[bool, str, int]:
        substitute = self.option.on_glyph_not_found_substitute
        if substitute is None:
            return False, missing, 0
        replacement = substitute(missing)
        if replacement in self.character_to_glyph_index:
            return True, replacement, 0
        try:
            glyph = self.char_code_to_glyph_index(replacement)
        except GlyphNotFoundError:
            return False, replacement, 0
        return False, replacement, glyph

    def char_index(self, char: str) -> int:
        """Glyph index of an added character."""
        glyph = self.character_to_glyph_index.value(char)
        if glyph is None:
            raise CharNotFoundError(char)
        return glyph

    def char_width(self, char: str) -> int:
        """Width in 1/1000 em of an added character."""
        glyph = self.character_to_glyph_index.value(char)
        if glyph is None:
            raise CharNotFoundError(char)
        return self.glyph_index_to_pdf_width(glyph)

    def char_code_to_glyph_index(self, char: str) -> int:
        """Look up the glyph of ``char`` in the font's character map."""
        if ord(char) <= 0xFFFF:
            return self._glyph_format4(char)
        return self._glyph_format12(char)

    def _glyph_format12(self, char: str) -> int:
        value = ord(char)
        for group in self.ttfp.grouping_tables:
            if group.start_char_code <= value <= group.end_char_code:
                return value - group.start_char_code + group.glyph_id
        raise GlyphNotFoundError(char)

    def _glyph_format4(self, char: str) -> int:
        value = ord(char)
        ttfp = self.ttfp
        seg_count = ttfp.seg_count
        seg = next(
            (i for i, end in enumerate(ttfp.end_count[:seg_count]) if value <= end),
            None,
        )
        if seg is None or value < ttfp.start_count[seg]:
            raise GlyphNotFoundError(char)
        delta = ttfp.id_delta[seg]
        range_offset = ttfp.id_range_offset[seg]
        if range_offset == 0:
            return (value + delta) & 0xFFFF
        idx = range_offset // 2 + (value - ttfp.start_count[seg]) - (seg_count - seg)
        if not 0 <= idx < len(ttfp.glyph_id_array):
            raise GlyphNotFoundError(char)
        glyph = ttfp.glyph_id_array[idx]
        if glyph == 0:
            return 0
        return (glyph + delta) & 0xFFFF

    def glyph_index_to_pdf_width(self, glyph_index: int) -> int:
        """Advance width of a glyph in 1/1000 em."""
        hmetrics = self.ttfp.number_of_hmetrics
        if glyph_index >= hmetrics:
            glyph_index = hmetrics - 1
        width = self.ttfp.widths[glyph_index]
        units_per_em = self.ttfp.units_per_em
        if units_per_em == 1000:
            return width
        return width * 1000 // units_per_em

    def kern_value_by_left(self, left: int) -> KernValue | None:
        """Kerning pairs starting with glyph ``left``, if kerning is used."""
        if not self.option.use_kerning:
            return None
        kern = self.ttfp.kern
        if kern is None:
            return None
        return kern.kerning.get(left)

    # -- metrics ------------------------------------------------------

    @property
    def underline_thickness(self) -> int:
        return self.ttfp.underline_thickness

    @property
    def underline_position(self) -> int:
        return self.ttfp.underline_position

    @property
    def ascender(self) -> int:
        return self.ttfp.ascender()

    @property
    def descender(self) -> int:
        return self.ttfp.descender()

    def _scale(self, value: int, font_size: float) -> float:
        return value / self.ttfp.units_per_em * font_size

    def underline_thickness_px(self, font_size: float) -> float:
        return self._scale(self.ttfp.underline_thickness, font_size)

    def underline_position_px(self, font_size: float) -> float:
        return self._scale(self.ttfp.underline_position, font_size)

    def ascender_px(self, font_size: float) -> float:
        return self._scale(self.ttfp.ascender(), font_size)

    def descender_px(self, font_size: float) -> float:
        return self._scale(self.ttfp.descender(), font_size)

    # -- output -------------------------------------------------------

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the font dictionary for object number ``obj_id``."""
        text = (
            "<<\n"
            f"/BaseFont /{create_embedded_font_subset_name(self.family)}\n"
            f"/DescendantFonts [{self.index_obj_cid_font + 1} 0 R]\n"
            "/Encoding /Identity-H\n"
            "/Subtype /Type0\n"
            f"/ToUnicode {self.index_obj_unicode_map + 1} 0 R\n"
            "/Type /Font\n"
            ">>\n"
        )
        out.write(text.encode("latin-1"))