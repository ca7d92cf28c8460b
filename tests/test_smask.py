import io

from pdfsmith.image_parse import ImageInfo
from pdfsmith.protection import PDFProtection, Permission, rc4
from pdfsmith.smask import SMask, SMaskMap, SMaskOptions, SMaskSubtype


def _stream_body(value):
    start = value.index(b">>\nstream\n") + len(b">>\nstream\n")
    return value[start:]


def test_cache_key_format():
    assert SMaskOptions(5, SMaskSubtype.ALPHA).cache_key() == "S_/Alpha;G_5_0_R"
    assert "/Luminosity" in SMaskOptions(5, SMaskSubtype.LUMINOSITY).cache_key()


def test_map_find_and_save():
    cache = SMaskMap()
    options = SMaskOptions(3, SMaskSubtype.LUMINOSITY)
    assert cache.find(options) is None
    mask = SMask(s=SMaskSubtype.LUMINOSITY.value, transparency_xobject_group_index=3)
    assert cache.save(options.cache_key(), mask) is mask
    assert cache.find(options) is mask
    assert cache.find(SMaskOptions(4, SMaskSubtype.LUMINOSITY)) is None


def test_write_group_mask():
    mask = SMask(s="/Alpha", transparency_xobject_group_index=7)
    out = io.BytesIO()
    mask.write(out, 1)
    text = out.getvalue().decode()
    assert text.startswith("<<\n\t/Type /Mask\n\t/S /Alpha\n")
    assert f"\t/G {mask.transparency_xobject_group_index + 1} 0 R\n" in text
    assert "stream" not in text


def test_write_image_mask_plain():
    info = ImageInfo(w=2, h=2, colspace="DeviceGray", bits_per_component="8", filter="FlateDecode")
    mask = SMask(info=info, data=b"alpha-bytes")
    out = io.BytesIO()
    mask.write(out, 1)
    value = out.getvalue()
    assert value.startswith(b"<<\n\t/Type /XObject\n\t/Subtype /Image\n")
    assert f"/Length {len(mask.data)}\n>>\n".encode() in value
    assert _stream_body(value) == b"alpha-bytes\nendstream\n"


def test_write_image_mask_encrypted_round_trip():
    protection = PDFProtection()
    protection.set_protection(Permission.PRINT, b"password", b"secret")
    info = ImageInfo(w=2, h=2, colspace="DeviceGray", bits_per_component="8")
    mask = SMask(info=info, data=b"alpha-bytes", protection=protection)
    out = io.BytesIO()
    mask.write(out, 6)
    body = _stream_body(out.getvalue())
    suffix = b"\n\nendstream\n"
    assert body.endswith(suffix)
    encrypted = body[: -len(suffix)]
    assert encrypted != mask.data
    assert rc4(protection.object_key(6), encrypted) == mask.data