import io
import struct

import pytest

from pdfsmith.subset_font import CharNotFoundError, GlyphNotFoundError, SubsetFont
from pdfsmith.ttf.parser import CmapGroup, TTFError
from pdfsmith.ttf_option import TtfOption


def build_font(units_per_em=1000, widths=(500, 600, 700), num_glyphs=4, kern_pairs=None):
    head = bytearray(54)
    struct.pack_into(">I", head, 12, 0x5F0F3CF5)
    struct.pack_into(">H", head, 18, units_per_em)
    struct.pack_into(">hhhh", head, 36, -50, -200, 950, 900)
    struct.pack_into(">h", head, 50, 0)

    hhea = bytearray(36)
    struct.pack_into(">hh", hhea, 4, 800, -200)
    struct.pack_into(">H", hhea, 34, len(widths))

    maxp = struct.pack(">IH", 0x00005000, num_glyphs)
    hmtx = b"".join(struct.pack(">Hh", w, 0) for w in widths)

    sub = (
        struct.pack(">HHHHHHH", 4, 32, 0, 4, 4, 1, 0)
        + struct.pack(">HH", 67, 0xFFFF)
        + struct.pack(">H", 0)
        + struct.pack(">HH", 65, 0xFFFF)
        + struct.pack(">HH", (1 - 65) & 0xFFFF, 1)
        + struct.pack(">HH", 0, 0)
    )
    cmap = struct.pack(">HH", 0, 1) + struct.pack(">HHI", 3, 1, 12) + sub

    ps_name = b"TestFont"
    name = struct.pack(">HHH", 0, 1, 18) + struct.pack(
        ">HHHHHH", 3, 1, 0x409, 6, len(ps_name), 0
    ) + ps_name

    os2 = bytearray(78)

    post = bytearray(16)
    struct.pack_into(">hh", post, 8, -100, 50)

    loca = bytes(2 * (num_glyphs + 1))

    tables = {
        "head": bytes(head),
        "hhea": bytes(hhea),
        "maxp": maxp,
        "hmtx": hmtx,
        "cmap": cmap,
        "name": name,
        "OS/2": bytes(os2),
        "post": bytes(post),
        "loca": loca,
    }
    if kern_pairs:
        pairs = b"".join(struct.pack(">HHh", l, r, v) for l, r, v in kern_pairs)
        subtable = struct.pack(">HHHHHHH", 0, 14 + len(pairs), 1, len(kern_pairs), 0, 0, 0) + pairs
        tables["kern"] = struct.pack(">HH", 0, 1) + subtable

    offset = 12 + 16 * len(tables)
    directory = b""
    body = b""
    for tag, data in tables.items():
        padded = data + bytes(-len(data) % 4)
        directory += tag.encode("latin-1") + struct.pack(">III", 0, offset, len(data))
        body += padded
        offset += len(padded)
    return struct.pack(">IHHHH", 0x00010000, len(tables), 0, 0, 0) + directory + body


@pytest.fixture
def font():
    f = SubsetFont("Test Font")
    f.set_ttf_data(build_font())
    return f


def test_glyph_lookup(font):
    assert font.char_code_to_glyph_index("A") == 1
    assert font.char_code_to_glyph_index("C") == 3


def test_missing_glyph_raises(font):
    with pytest.raises(GlyphNotFoundError):
        font.char_code_to_glyph_index("Z")
    with pytest.raises(GlyphNotFoundError):
        font.char_code_to_glyph_index("\U0001F600")


def test_format12_groups(font):
    font.ttfp.grouping_tables = [CmapGroup(0x1F600, 0x1F60F, 10)]
    assert font.char_code_to_glyph_index("\U0001F601") == 11


def test_add_chars_registers(font):
    assert font.add_chars("ABA") == "ABA"
    assert font.character_to_glyph_index.keys() == ["A", "B"]
    assert font.char_index("B") == 2


def test_add_chars_substitutes_missing(font):
    seen = []
    font.option = TtfOption(on_glyph_not_found=seen.append)
    assert font.add_chars("AZ") == "A "
    assert seen == ["Z"]
    assert font.char_index(" ") == 0
    assert "Z" not in font.character_to_glyph_index


def test_custom_substitute(font):
    font.option = TtfOption(on_glyph_not_found_substitute=lambda c: "A")
    assert font.add_chars("Z") == "A"
    assert font.char_index("A") == 1
    assert font.add_chars("Y") == "A"
    assert len(font.character_to_glyph_index) == 1


def test_option_without_substitute_gets_default():
    f = SubsetFont("X", TtfOption(on_glyph_not_found_substitute=None))
    assert f.option.on_glyph_not_found_substitute("q") == " "


def test_char_index_not_added(font):
    with pytest.raises(CharNotFoundError):
        font.char_index("A")
    with pytest.raises(CharNotFoundError):
        font.char_width("A")


def test_widths(font):
    font.add_chars("AC")
    assert font.char_width("A") == 600
    assert font.glyph_index_to_pdf_width(0) == 500
    assert font.glyph_index_to_pdf_width(3) == font.glyph_index_to_pdf_width(2)


def test_width_scaled_by_units_per_em():
    f = SubsetFont("X")
    f.set_ttf_data(build_font(units_per_em=2000, widths=(1000,)))
    assert f.glyph_index_to_pdf_width(0) == 500


def test_metrics_px(font):
    assert font.ascender_px(1000) == pytest.approx(800)
    assert font.descender_px(1000) == pytest.approx(-200)
    assert font.underline_position_px(1000) == pytest.approx(-100)
    assert font.underline_thickness_px(1000) == pytest.approx(50)
    assert font.underline_thickness == 50


def test_kerning_used():
    f = SubsetFont("X", TtfOption(use_kerning=True))
    f.set_ttf_data(build_font(kern_pairs=[(1, 2, -80)]))
    assert f.kern_value_by_left(1).value_by_right(2) == -80
    assert f.kern_value_by_left(3) is None


def test_kerning_disabled():
    f = SubsetFont("X")
    f.set_ttf_data(build_font(kern_pairs=[(1, 2, -80)]))
    assert f.kern_value_by_left(1) is None


def test_bad_data():
    with pytest.raises(TTFError):
        SubsetFont("X").set_ttf_data(b"junk data here")


def test_load_from_path_and_stream(tmp_path):
    path = tmp_path / "font.ttf"
    path.write_bytes(build_font())
    by_path = SubsetFont("X")
    by_path.set_ttf_path(path)
    by_stream = SubsetFont("X")
    by_stream.set_ttf_stream(io.BytesIO(build_font()))
    assert by_path.ttfp.postscript_name == "TestFont"
    assert by_stream.ttfp.postscript_name == "TestFont"


def test_write(font):
    font.index_obj_cid_font = 4
    font.index_obj_unicode_map = 6
    out = io.BytesIO()
    font.write(out, 1)
    text = out.getvalue().decode()
    assert "/BaseFont /Test+Font\n" in text
    assert "/DescendantFonts [5 0 R]\n" in text
    assert "/ToUnicode 7 0 R\n" in text
    assert text.startswith("<<\n") and text.endswith("/Type /Font\n>>\n")