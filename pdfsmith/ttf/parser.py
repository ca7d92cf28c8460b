"""TrueType font parser: reads the tables needed to embed and subset a font."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import BinaryIO

from pdfsmith.ttf.tables import KernTable, KernValue, TableDirectoryEntry

SYMBOLIC = 1 << 2
NONSYMBOLIC = 1 << 5

_TRUETYPE_VERSION = b"\x00\x01\x00\x00"
_HEAD_MAGIC = 0x5F0F3CF5


class TTFError(ValueError):
    """The font data is malformed or uses an unsupported feature."""


class TableNotFoundError(TTFError):
    """A required table is missing from the font."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"table not found: {tag!r}")
        self.tag = tag


@dataclass(frozen=True)
class CmapGroup:
    """One sequential map group of a format 12 ``cmap`` subtable."""

    start_char_code: int
    end_char_code: int
    glyph_id: int


class _Reader:
    """Big-endian reader over an in-memory font."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.pos = 0

    def seek(self, pos: int) -> None:
        if pos < 0:
            raise TTFError(f"negative position {pos}")
        self.pos = pos

    def skip(self, count: int) -> None:
        self.seek(self.pos + count)

    def read(self, count: int) -> bytes:
        chunk = self._data[self.pos:self.pos + count]
        if len(chunk) != count:
            raise TTFError("file out of length")
        self.pos += count
        return chunk

    def ushort(self) -> int:
        return int.from_bytes(self.read(2), "big")

    def short(self) -> int:
        value = self.ushort()
        return value - 65536 if value >= 0x8000 else value

    def ulong(self) -> int:
        return int.from_bytes(self.read(4), "big")


class TTFParser:
    """Parsed metrics, character map, glyph locations and kerning of a TrueType font."""

    def __init__(self, use_kerning: bool = False) -> None:
        self.use_kerning = use_kerning
        self._reset()

    def _reset(self) -> None:
        self.tables: dict[str, TableDirectoryEntry] = {}
        # head
        self.units_per_em = 0
        self.x_min = 0
        self.y_min = 0
        self.x_max = 0
        self.y_max = 0
        self.index_to_loc_format = 0
        # hhea
        self.number_of_hmetrics = 0
        self.hhea_ascender = 0
        self.hhea_descender = 0
        # maxp / hmtx / cmap / name
        self.num_glyphs = 0
        self.widths: list[int] = []
        self.chars: dict[int, int] = {}
        self.postscript_name = ""
        # OS/2
        self.os2_version = 0
        self.embeddable = False
        self.bold = False
        self.typo_ascender = 0
        self.typo_descender = 0
        self.typo_line_gap = 0
        self.us_win_ascent = 0
        self.us_win_descent = 0
        self.cap_height = 0
        self.sx_height = 0
        # post
        self.italic_angle = 0
        self.underline_position = 0
        self.underline_thickness = 0
        self.is_fixed_pitch = False
        # cmap format 4 and loca
        self.is_short_index = False
        self.loca_table: list[int] = []
        self.seg_count = 0
        self.start_count: list[int] = []
        self.end_count: list[int] = []
        self.id_range_offset: list[int] = []
        self.id_delta: list[int] = []
        self.glyph_id_array: list[int] = []
        self.symbol = False
        # cmap format 12
        self.grouping_tables: list[CmapGroup] = []
        self.font_data = b""
        self.kern: KernTable | None = None

    # -- entry points -------------------------------------------------

    def parse_file(self, path: str | os.PathLike) -> None:
        """Parse the font stored at ``path``."""
        with open(path, "rb") as fh:
            data = fh.read()
        self.parse_data(data)

    def parse_stream(self, stream: BinaryIO) -> None:
        """Parse everything read from ``stream``."""
        self.parse_data(stream.read())

    def parse_data(self, data: bytes) -> None:
        """Parse a complete TrueType font held in memory."""
        data = bytes(data)
        self._reset()
        reader = _Reader(data)
        if reader.read(4) != _TRUETYPE_VERSION:
            raise TTFError("Unrecognized file (font) format")
        num_tables = reader.ushort()
        reader.skip(3 * 2)
        for _ in range(num_tables):
            tag = reader.read(4).decode("latin-1")
            checksum = reader.ulong()
            offset = reader.ulong()
            length = reader.ulong()
            self.tables[tag] = TableDirectoryEntry(checksum, offset, length)

        self._parse_head(reader)
        self._parse_hhea(reader)
        self._parse_maxp(reader)
        self._parse_hmtx(reader)
        self._parse_cmap(reader)
        self._parse_name(reader)
        self._parse_os2(reader)
        self._parse_post(reader)
        self._parse_loca(reader)
        if self.use_kerning:
            self._parse_kern(reader)
        self.font_data = data

    # -- derived metrics ----------------------------------------------

    def ascender(self) -> int:
        if self.typo_ascender == 0:
            return self.hhea_ascender
        return self.us_win_ascent

    def descender(self) -> int:
        if self.typo_descender == 0:
            return self.hhea_descender
        descender = self.us_win_descent
        if self.hhea_descender < 0:
            descender = -descender
        return descender

    def x_height(self) -> int:
        if self.os2_version >= 2 and self.sx_height != 0:
            return self.sx_height
        return int(0.66 * self.hhea_ascender)

    def flag(self) -> int:
        return SYMBOLIC if self.symbol else NONSYMBOLIC

    # -- tables -------------------------------------------------------

    def _seek(self, reader: _Reader, tag: str) -> None:
        table = self.tables.get(tag)
        if table is None:
            raise TableNotFoundError(tag)
        reader.seek(table.offset)

    def _seek_if_present(self, reader: _Reader, tag: str) -> None:
        table = self.tables.get(tag)
        if table is not None:
            reader.seek(table.offset)

    def _parse_head(self, reader: _Reader) -> None:
        self._seek(reader, "head")
        reader.skip(3 * 4)
        if reader.ulong() != _HEAD_MAGIC:
            raise TTFError("Incorrect magic number")
        reader.skip(2)
        self.units_per_em = reader.ushort()
        reader.skip(2 * 8)
        self.x_min = reader.short()
        self.y_min = reader.short()
        self.x_max = reader.short()
        self.y_max = reader.short()
        reader.skip(2 * 3)
        self.index_to_loc_format = reader.short()

    def _parse_hhea(self, reader: _Reader) -> None:
        self._seek(reader, "hhea")
        reader.skip(4)
        self.hhea_ascender = reader.short()
        self.hhea_descender = reader.short()
        reader.skip(13 * 2)
        self.number_of_hmetrics = reader.ushort()

    def _parse_maxp(self, reader: _Reader) -> None:
        self._seek(reader, "maxp")
        reader.skip(4)
        self.num_glyphs = reader.ushort()

    def _parse_hmtx(self, reader: _Reader) -> None:
        self._seek_if_present(reader, "hmtx")
        widths = []
        for _ in range(self.number_of_hmetrics):
            widths.append(reader.ushort())
            reader.skip(2)
        if self.number_of_hmetrics < self.num_glyphs:
            if not widths:
                raise TTFError("no horizontal metrics to pad widths with")
            widths.extend([widths[-1]] * (self.num_glyphs - len(widths)))
        self.widths = widths

    def _parse_cmap(self, reader: _Reader) -> None:
        self._seek_if_present(reader, "cmap")
        reader.skip(2)
        num_tables = reader.ushort()
        offset31 = 0
        for _ in range(num_tables):
            platform_id = reader.ushort()
            encoding_id = reader.ushort()
            offset = reader.ulong()
            self.symbol = False
            if platform_id == 3 and encoding_id == 1:
                offset31 = offset
        if offset31 == 0:
            raise TTFError("No Unicode encoding found")

        cmap_offset = self.tables.get("cmap", TableDirectoryEntry()).offset
        reader.seek(cmap_offset + offset31)
        if reader.ushort() != 4:
            raise TTFError("Unexpected subtable format")
        length = reader.ushort()
        reader.skip(2)
        seg_count = reader.ushort() // 2
        self.seg_count = seg_count
        reader.skip(3 * 2)
        glyph_count_bytes = length - (16 + 8 * seg_count)
        if glyph_count_bytes < 0:
            raise TTFError("file out of length")
        glyph_count = glyph_count_bytes // 2

        self.end_count = [reader.ushort() for _ in range(seg_count)]
        reader.skip(2)
        self.start_count = [reader.ushort() for _ in range(seg_count)]
        self.id_delta = [reader.ushort() for _ in range(seg_count)]
        range_offset_pos = reader.pos
        self.id_range_offset = [reader.ushort() for _ in range(seg_count)]
        self.glyph_id_array = [reader.ushort() for _ in range(glyph_count)]

        chars: dict[int, int] = {}
        segments = zip(self.start_count, self.end_count, self.id_delta, self.id_range_offset)
        for seg, (first, last, delta, range_offset) in enumerate(segments):
            if range_offset > 0:
                reader.seek(range_offset_pos + 2 * seg + range_offset)
            for code in range(first, last + 1):
                if code == 0xFFFF:
                    break
                if range_offset > 0:
                    gid = reader.ushort()
                    if gid > 0:
                        gid += delta
                else:
                    gid = code + delta
                if gid >= 65536:
                    gid -= 65536
                if gid > 0:
                    chars[code] = gid
        self.chars = chars

        self._parse_cmap_format12(reader)

    def _parse_cmap_format12(self, reader: _Reader) -> bool:
        self._seek_if_present(reader, "cmap")
        reader.skip(2)
        num_tables = reader.ushort()
        records = [(reader.ushort(), reader.ushort(), reader.ulong()) for _ in range(num_tables)]
        offset = next((off for pid, eid, off in records if pid == 3 and eid == 10), None)
        if offset is None:
            return False

        cmap_offset = self.tables.get("cmap", TableDirectoryEntry()).offset
        reader.seek(cmap_offset + offset)
        if reader.ushort() != 12:
            raise TTFError("format != 12")
        if reader.ushort() != 0:
            raise TTFError("reserved != 0")
        reader.skip(4)
        reader.skip(4)
        n_groups = reader.ulong()
        for _ in range(n_groups):
            start = reader.ulong()
            end = reader.ulong()
            glyph = reader.ulong()
            self.grouping_tables.append(CmapGroup(start, end, glyph))
        return True

    def _parse_name(self, reader: _Reader) -> None:
        self._seek(reader, "name")
        table_offset = reader.pos
        self.postscript_name = ""
        reader.skip(2)
        count = reader.ushort()
        string_offset = reader.ushort()
        for _ in range(count):
            reader.skip(3 * 2)
            name_id = reader.ushort()
            length = reader.ushort()
            offset = reader.ushort()
            if name_id == 6:
                reader.seek(table_offset + string_offset + offset)
                raw = reader.read(length).replace(b"\x00", b"")
                self.postscript_name = raw.decode("latin-1").replace("0", "")
                break
        if self.postscript_name == "":
            raise TTFError("PostScript name not found")

    def _parse_os2(self, reader: _Reader) -> None:
        self._seek(reader, "OS/2")
        version = reader.ushort()
        self.os2_version = version
        reader.skip(3 * 2)
        fs_type = reader.ushort()
        self.embeddable = fs_type != 2 and (fs_type & 0x200) == 0
        reader.skip(11 * 2 + 10 + 4 * 4 + 4)
        fs_selection = reader.ushort()
        self.bold = (fs_selection & 32) != 0
        reader.skip(2 * 2)
        self.typo_ascender = reader.short()
        self.typo_descender = reader.short()
        self.typo_line_gap = reader.short()
        self.us_win_ascent = reader.ushort()
        self.us_win_descent = reader.ushort()
        if version >= 2:
            reader.skip(2 * 4)
            self.sx_height = reader.short()
            self.cap_height = reader.short()
        else:
            self.cap_height = self.hhea_ascender

    def _parse_post(self, reader: _Reader) -> None:
        self._seek(reader, "post")
        reader.skip(4)
        self.italic_angle = reader.short()
        reader.skip(2)
        self.underline_position = reader.short()
        self.underline_thickness = reader.short()
        self.is_fixed_pitch = reader.ulong() != 0

    def _parse_loca(self, reader: _Reader) -> None:
        self.is_short_index = self.index_to_loc_format == 0
        self._seek(reader, "loca")
        length = self.tables["loca"].length
        if self.is_short_index:
            self.loca_table = [reader.ushort() * 2 for _ in range(length // 2)]
        else:
            self.loca_table = [reader.ulong() for _ in range(length // 4)]

    def _parse_kern(self, reader: _Reader) -> None:
        self.kern = None
        if "kern" not in self.tables:
            return
        self._seek(reader, "kern")
        kern = KernTable()
        self.kern = kern
        kern.version = reader.ushort()
        kern.n_tables = reader.ushort()
        for _ in range(kern.n_tables):
            reader.skip(2 + 2)
            coverage = reader.ushort()
            kind = coverage & 0xF0
            kern.kerning = {}
            if kind != 0:
                raise TTFError(f"not support kerning format {kind}")
            self._parse_kern_format0(reader, kern)

    @staticmethod
    def _parse_kern_format0(reader: _Reader, kern: KernTable) -> None:
        n_pairs = reader.ushort()
        reader.skip(2 + 2 + 2)
        for _ in range(n_pairs):
            left = reader.ushort()
            right = reader.ushort()
            value = reader.short()
            kern.kerning.setdefault(left, KernValue())[right] = value