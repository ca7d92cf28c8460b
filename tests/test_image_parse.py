import io
import struct
import zlib

import pytest

from pdfsmith.image_parse import (
    ImageFormatError,
    ImageInfo,
    has_smask,
    image_rect_to_wh,
    is_colspace_indexed,
    parse_image,
    parse_image_path,
    write_image_props,
    write_mask_image_props,
)

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _chunk(kind, body):
    return struct.pack(">I", len(body)) + kind + body + struct.pack(">I", zlib.crc32(kind + body))


def make_png(width, height, bit_depth, color_type, raw, extra=(), interlace=0):
    ihdr = struct.pack(">IIBBBBB", width, height, bit_depth, color_type, 0, 0, interlace)
    return (
        PNG_MAGIC
        + _chunk(b"IHDR", ihdr)
        + b"".join(extra)
        + _chunk(b"IDAT", zlib.compress(raw))
        + _chunk(b"IEND", b"")
    )


def make_jpeg(components, jfif=True, adobe_transform=None, ids=None, width=40, height=30):
    out = b"\xff\xd8"
    if jfif:
        app0 = b"JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        out += b"\xff\xe0" + struct.pack(">H", len(app0) + 2) + app0
    if adobe_transform is not None:
        app14 = b"Adobe\x00\x64\x00\x00\x00\x00" + bytes([adobe_transform])
        out += b"\xff\xee" + struct.pack(">H", len(app14) + 2) + app14
    if ids is None:
        ids = bytes(range(1, components + 1))
    sof = struct.pack(">BHHB", 8, height, width, components)
    sof += b"".join(bytes([cid, 0x11, 0]) for cid in ids)
    out += b"\xff\xc0" + struct.pack(">H", len(sof) + 2) + sof
    out += b"\xff\xda\x00\x08\x01\x01\x00\x00\x3f\x00" + b"\x00\x00" + b"\xff\xd9"
    return out


def _written(func, *args):
    out = io.BytesIO()
    func(out, *args)
    return out.getvalue().decode("latin-1")


# Cases carried over from the source's image tests, with images built in place.


def test_jpeg_ycbcr():
    raw = make_jpeg(3)
    info = parse_image(raw)
    assert info.format_name == "jpeg"
    assert info.colspace == "DeviceRGB"
    assert info.bits_per_component == "8"
    assert info.filter == "DCTDecode"
    assert (info.w, info.h) == (40, 30)
    assert info.data == raw


def test_jpeg_gray_mode():
    assert parse_image(make_jpeg(1)).colspace == "DeviceGray"


def test_jpeg_cmyk():
    info = parse_image(make_jpeg(4, jfif=False, adobe_transform=2))
    assert info.colspace == "DeviceCMYK"


def test_jpeg_rgb_model_not_supported():
    with pytest.raises(ImageFormatError, match="color model not support"):
        parse_image(make_jpeg(3, jfif=False, adobe_transform=0))
    with pytest.raises(ImageFormatError):
        parse_image(make_jpeg(3, jfif=False, ids=b"RGB"))


def test_jpeg_unsupported_precision():
    raw = bytearray(make_jpeg(1))
    sof = raw.index(b"\xff\xc0")
    raw[sof + 4] = 12
    with pytest.raises(ImageFormatError):
        parse_image(bytes(raw))


def test_png_rgb():
    raw = b"\x00" + b"\x01\x02\x03\x04\x05\x06"
    png = make_png(2, 1, 8, 2, raw)
    info = parse_image(png)
    assert info.format_name == "png"
    assert info.colspace == "DeviceRGB"
    assert info.filter == "FlateDecode"
    assert info.bits_per_component == "8"
    assert info.decode_parms == "/Predictor 15 /Colors  3 /BitsPerComponent 8 /Columns 2"
    assert zlib.decompress(info.data) == raw
    assert not has_smask(info)


def test_png_parse_twice_is_stable():
    raw = b"\x00" + bytes(6)
    png = make_png(2, 1, 8, 2, raw)
    first = parse_image(png)
    second = parse_image(png)
    assert first == second
    assert (first.w, first.h) == (2, 1)
    assert zlib.decompress(second.data) == raw


def test_png_rgba_transparency_split():
    rows = b"\x00" + b"\x0a\x0b\x0c\xff\x0d\x0e\x0f\x80" + b"\x01" + b"\x10\x11\x12\x00\x13\x14\x15\x40"
    info = parse_image(make_png(2, 2, 8, 6, rows))
    assert info.colspace == "DeviceRGB"
    assert zlib.decompress(info.data) == (
        b"\x00\x0a\x0b\x0c\x0d\x0e\x0f" + b"\x01\x10\x11\x12\x13\x14\x15"
    )
    assert zlib.decompress(info.smask) == b"\x00\xff\x80\x01\x00\x40"
    assert has_smask(info)


def test_png_gray_alpha_leaves_data_empty():
    info = parse_image(make_png(1, 1, 8, 4, b"\x00\x7f\xff"))
    assert info.colspace == "DeviceGray"
    assert info.data == b""
    assert info.smask == b""


def test_png_indexed_with_transparency():
    palette = _chunk(b"PLTE", b"\xff\x00\x00\x00\xff\x00")
    trns = _chunk(b"tRNS", b"\xff\x00")
    info = parse_image(make_png(1, 1, 8, 3, b"\x00\x01", extra=(palette, trns)))
    assert info.colspace == "Indexed"
    assert is_colspace_indexed(info)
    assert info.pal == b"\xff\x00\x00\x00\xff\x00"
    assert info.trns == b"\x01"


def test_png_gray_and_rgb_transparency():
    gray = parse_image(make_png(1, 1, 8, 0, b"\x00\x05", extra=(_chunk(b"tRNS", b"\x00\x05"),)))
    assert gray.trns == b"\x05"
    rgb = parse_image(
        make_png(1, 1, 8, 2, b"\x00\x01\x02\x03", extra=(_chunk(b"tRNS", b"\x00\x01\x00\x02\x00\x03"),))
    )
    assert rgb.trns == b"\x01\x02\x03"


def test_png_missing_palette():
    with pytest.raises(ImageFormatError, match="Missing palette"):
        parse_image(make_png(1, 1, 8, 3, b"\x00\x00"))


def test_png_16_bit_rejected():
    with pytest.raises(ImageFormatError, match="16-bit"):
        parse_image(make_png(1, 1, 16, 0, b"\x00\x00\x00"))


def test_png_interlaced_rejected():
    with pytest.raises(ImageFormatError, match="Interlacing"):
        parse_image(make_png(1, 1, 8, 0, b"\x00\x00", interlace=1))


def test_unknown_format():
    with pytest.raises(ImageFormatError):
        parse_image(b"GIF89a not supported here")


def test_parse_image_path_and_stream(tmp_path):
    png = make_png(2, 1, 8, 2, b"\x00" + bytes(6))
    path = tmp_path / "img.png"
    path.write_bytes(png)
    assert parse_image_path(path) == parse_image(io.BytesIO(png))


def test_write_image_props_rgb():
    info = parse_image(make_png(2, 1, 8, 2, b"\x00" + bytes(6)))
    text = _written(write_image_props, info, False)
    assert text == (
        "<<\n\t/Type /XObject\n\t/Subtype /Image\n\t/Width 2\n\t/Height 1\n"
        "\t/ColorSpace /DeviceRGB\n\t/BitsPerComponent 8\n\t/Filter /FlateDecode\n"
        "\t/DecodeParms <</Predictor 15 /Colors  3 /BitsPerComponent 8 /Columns 2>>\n"
    )


def test_write_image_props_cmyk_decode():
    info = parse_image(make_jpeg(4, jfif=False, adobe_transform=2))
    text = _written(write_image_props, info, False)
    assert "\t/ColorSpace /DeviceCMYK\n\t/Decode [1 0 1 0 1 0 1 0]\n" in text
    assert "\t/Filter /DCTDecode\n" in text
    assert "DecodeParms" not in text


def test_write_image_props_indexed_mask_and_smask():
    info = ImageInfo(
        w=1, h=1, colspace="Indexed", bits_per_component="8",
        pal=b"\x00" * 6, device_rgb_obj_id=4, trns=b"\x02", smask=b"x", smask_obj_id=9,
    )
    text = _written(write_image_props, info, False)
    assert "\t/ColorSpace [/Indexed /DeviceRGB 1 5 0 R]\n" in text
    assert "\t/Mask [\t\t2 \t\t2 \t]\n" in text
    assert "\t/SMask 10 0 R\n" in text
    splitted = _written(write_image_props, info, True)
    assert "Mask" not in splitted.replace("/Image", "")


def test_write_mask_image_props():
    info = ImageInfo(w=7, h=3, colspace="DeviceRGB", bits_per_component="8", filter="FlateDecode")
    text = _written(write_mask_image_props, info)
    assert "\t/ColorSpace /DeviceGray\n" in text
    assert text.endswith(
        "\t/DecodeParms <<\n\t\t/Predictor 15\n\t\t/Colors 1\n"
        "\t\t/BitsPerComponent 8\n\t\t/Columns 7\n\t>>\n"
    )


def test_image_rect_to_wh():
    assert image_rect_to_wh(128, 256) == (72.0, 144.0)
    w, h = image_rect_to_wh(1, 100)
    assert w == 0.0
    assert h > 0