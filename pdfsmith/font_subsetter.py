"""Embedded TrueType subset (the FontFile2 stream) of a subset font."""

from __future__ import annotations

import dataclasses
import zlib
from dataclasses import dataclass
from typing import BinaryIO

from pdfsmith.protection import PDFProtection, rc4
from pdfsmith.strhelper import read_short, read_ushort
from pdfsmith.subset_font import SubsetFont
from pdfsmith.ttf.tables import TableDirectoryEntry

ENTRY_SELECTORS = (
    0, 0, 1, 1, 2, 2,
    2, 2, 3, 3, 3, 3,
    3, 3, 3, 3, 4, 4,
    4, 4, 4, 4, 4, 4,
    4, 4, 4, 4, 4, 4, 4,
)

SUBSET_TABLES = ("cvt ", "fpgm", "glyf", "head", "hhea", "hmtx", "loca", "maxp", "prep")

_ARG_1_AND_2_ARE_WORDS = 1
_HAS_SCALE = 8
_MORE_COMPONENTS = 32
_X_AND_Y_SCALE = 64
_TWO_BY_TWO = 128


def checksum(data: bytes) -> int:
    """TrueType table checksum: the sum of big-endian 32-bit words, modulo 2**32."""
    if len(data) % 4:
        raise ValueError("checksum data length must be a multiple of 4")
    sums = [sum(data[lane::4]) for lane in range(4)]
    return ((sums[0] << 24) + (sums[1] << 16) + (sums[2] << 8) + sums[3]) & 0xFFFFFFFF


class _Buffer:
    """Byte buffer that can be written at any position, growing as needed."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.pos = 0

    def write(self, chunk: bytes) -> None:
        end = self.pos + len(chunk)
        if end > len(self.data):
            self.data.extend(bytes(end - len(self.data)))
        self.data[self.pos:end] = chunk
        self.pos = end

    def u16(self, value: int) -> None:
        self.write((value & 0xFFFF).to_bytes(2, "big"))

    def u32(self, value: int) -> None:
        self.write((value & 0xFFFFFFFF).to_bytes(4, "big"))


def _slice(data: bytes, start: int, count: int) -> bytes:
    chunk = bytes(data[start:start + count])
    return chunk + bytes(count - len(chunk))


@dataclass
class PdfDictionary:
    """Builds and writes a TrueType font holding only the glyphs in use."""

    subset_font: SubsetFont
    protection: PDFProtection | None = None

    obj_type = "PdfDictionary"

    def glyph_offset(self, glyph: int) -> int:
        """Offset in the font data of ``glyph`` within the glyf table."""
        ttfp = self.subset_font.ttfp
        glyf = ttfp.tables.get("glyf", TableDirectoryEntry())
        return glyf.offset + ttfp.loca_table[glyph]

    def _glyph_data(self, glyph: int) -> bytes:
        start = self.glyph_offset(glyph)
        end = self.glyph_offset(glyph + 1)
        return bytes(self.subset_font.ttfp.font_data[start:end])

    def _glyph_size(self, glyph: int) -> int:
        return self.glyph_offset(glyph + 1) - self.glyph_offset(glyph)

    def add_composite_glyphs(self, glyphs: list[int], glyph: int) -> None:
        """Append to ``glyphs`` the components of ``glyph`` if it is composite."""
        start = self.glyph_offset(glyph)
        if start == self.glyph_offset(glyph + 1):
            return
        data = self.subset_font.ttfp.font_data
        if read_short(data, start) >= 0:
            return
        offset = start + 2 + 8
        while True:
            flags = read_ushort(data, offset)
            component = read_ushort(data, offset + 2)
            offset += 4
            if component not in glyphs:
                glyphs.append(component)
            if not flags & _MORE_COMPONENTS:
                return
            step = 4 if flags & _ARG_1_AND_2_ARE_WORDS else 2
            if flags & _HAS_SCALE:
                step += 2
            elif flags & _X_AND_Y_SCALE:
                step += 4
            if flags & _TWO_BY_TWO:
                step += 8
            offset += step

    def _complete_glyph_closure(self) -> list[int]:
        values = self.subset_font.character_to_glyph_index.values()
        glyphs = list(values)
        if 0 not in glyphs:
            glyphs.append(0)
        for glyph in values:
            self.add_composite_glyphs(glyphs, glyph)
        return glyphs

    def _glyf_and_loca(self) -> tuple[bytes, list[int]]:
        ttfp = self.subset_font.ttfp
        wanted = sorted(set(self._complete_glyph_closure()))
        size = sum(self._glyph_size(glyph) for glyph in wanted)
        table = bytearray(TableDirectoryEntry(length=size).padded_length())
        wanted_set = set(wanted)
        loca: list[int] = []
        offset = 0
        for glyph in range(ttfp.num_glyphs):
            loca.append(offset)
            if glyph in wanted_set:
                data = self._glyph_data(glyph)
                table[offset:offset + len(data)] = data
                offset += len(data)
        loca.append(offset)
        return bytes(table), loca

    def _loca_bytes(self, loca: list[int], entry: TableDirectoryEntry) -> bytes:
        if self.subset_font.ttfp.is_short_index:
            entry.length = len(loca) * 2
            body = b"".join(((value // 2) & 0xFFFF).to_bytes(2, "big") for value in loca)
        else:
            entry.length = len(loca) * 4
            body = b"".join((value & 0xFFFFFFFF).to_bytes(4, "big") for value in loca)
        return _slice(body, 0, entry.padded_length())

    def make_font(self) -> bytes:
        """Assemble the subset TrueType font."""
        ttfp = self.subset_font.ttfp
        tables = {
            tag: dataclasses.replace(ttfp.tables.get(tag, TableDirectoryEntry()))
            for tag in SUBSET_TABLES
        }
        count = len(tables)
        selector = ENTRY_SELECTORS[count]
        glyph_table, loca = self._glyf_and_loca()

        buff = _Buffer()
        buff.u32(0x00010000)
        buff.u16(count)
        buff.u16((1 << selector) * 16)
        buff.u16(selector)
        buff.u16((count - (1 << selector)) * 16)

        table_position = 12 + 16 * count
        for idx, tag in enumerate(sorted(tables)):
            entry = tables[tag]
            offset = table_position
            buff.pos = table_position
            if tag == "glyf":
                entry.length = len(glyph_table)
                entry.checksum = checksum(glyph_table)
                buff.write(_slice(glyph_table, 0, entry.padded_length()))
            elif tag == "loca":
                data = self._loca_bytes(loca, entry)
                entry.checksum = checksum(data)
                buff.write(data)
            else:
                buff.write(_slice(ttfp.font_data, entry.offset, entry.padded_length()))
            table_position = buff.pos

            buff.pos = idx * 16 + 12
            buff.write(tag.encode("latin-1"))
            buff.u32(entry.checksum)
            buff.u32(offset)
            buff.u32(entry.length)
        return bytes(buff.data)

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the compressed font stream for object number ``obj_id``."""
        font = self.make_font()
        compressed = zlib.compress(font)
        header = (
            f"<</Length {len(compressed)}\n"
            "/Filter /FlateDecode\n"
            f"/Length1 {len(font)}\n"
            ">>\n"
            "stream\n"
        )
        out.write(header.encode("latin-1"))
        if self.protection is not None:
            out.write(rc4(self.protection.object_key(obj_id), compressed))
        else:
            out.write(compressed)
        out.write(b"\nendstream\n")