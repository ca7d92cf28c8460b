"""Reading JPEG and PNG images into the form a PDF image XObject needs."""

from __future__ import annotations

import os
import zlib
from dataclasses import dataclass
from typing import BinaryIO, NamedTuple

DEVICE_GRAY = "DeviceGray"

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_PNG_IHDR = b"IHDR"
_JPEG_MAGIC = b"\xff\xd8"

_PNG_COLSPACES = {0: "DeviceGray", 4: "DeviceGray", 2: "DeviceRGB", 6: "DeviceRGB", 3: "Indexed"}
_JPEG_COLSPACES = {"ycbcr": "DeviceRGB", "gray": "DeviceGray", "cmyk": "DeviceCMYK"}

_SOF_SUPPORTED = {0xC0, 0xC1, 0xC2}
_SOF_UNSUPPORTED = {0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF}


class ImageFormatError(ValueError):
    """The image is malformed or uses a feature that is not supported."""


@dataclass
class ImageInfo:
    """Everything needed to write an image as a PDF XObject."""

    w: int = 0
    h: int = 0
    format_name: str = ""
    colspace: str = ""
    bits_per_component: str = ""
    filter: str = ""
    decode_parms: str = ""
    trns: bytes = b""
    smask: bytes = b""
    smask_obj_id: int = 0
    pal: bytes = b""
    device_rgb_obj_id: int = 0
    data: bytes = b""


class _ImageConfig(NamedTuple):
    format_name: str
    width: int
    height: int
    color_model: str | None


# -- format detection -------------------------------------------------


def _read_frame(segment: bytes) -> tuple[int, int, bytes]:
    if len(segment) < 6:
        raise ImageFormatError("invalid JPEG format: SOF has wrong length")
    if segment[0] != 8:
        raise ImageFormatError("unsupported JPEG feature: precision")
    height = int.from_bytes(segment[1:3], "big")
    width = int.from_bytes(segment[3:5], "big")
    count = segment[5]
    if count not in (1, 3, 4):
        raise ImageFormatError("unsupported JPEG feature: number of components")
    if len(segment) != 6 + 3 * count:
        raise ImageFormatError("invalid JPEG format: SOF has wrong length")
    return width, height, bytes(segment[6::3])


def _jpeg_config(data: bytes) -> _ImageConfig:
    pos = len(_JPEG_MAGIC)
    jfif = False
    adobe_transform: int | None = None
    frame: tuple[int, int, bytes] | None = None
    size = len(data)
    while pos < size:
        if data[pos] != 0xFF:
            raise ImageFormatError("invalid JPEG format: missing 0xff marker start")
        while pos < size and data[pos] == 0xFF:
            pos += 1
        if pos >= size:
            break
        marker = data[pos]
        pos += 1
        if marker in (0xD9, 0xDA):
            break
        if 0xD0 <= marker <= 0xD7 or marker == 0x01:
            continue
        if pos + 2 > size:
            break
        length = int.from_bytes(data[pos:pos + 2], "big")
        if length < 2:
            raise ImageFormatError("invalid JPEG format: short segment length")
        segment = data[pos + 2:pos + length]
        if len(segment) != length - 2:
            raise ImageFormatError("unexpected end of JPEG data")
        pos += length
        if marker in _SOF_SUPPORTED:
            frame = _read_frame(segment)
            if jfif:
                break
        elif marker in _SOF_UNSUPPORTED:
            raise ImageFormatError("unsupported JPEG feature: SOF type")
        elif marker == 0xE0 and segment.startswith(b"JFIF\x00"):
            jfif = True
        elif marker == 0xEE and segment.startswith(b"Adobe") and len(segment) >= 12:
            adobe_transform = segment[11]

    if frame is None:
        raise ImageFormatError("invalid JPEG format: missing SOF marker")
    width, height, ids = frame
    if len(ids) == 1:
        model = "gray"
    elif len(ids) == 4:
        model = "cmyk"
    elif not jfif and (adobe_transform == 0 or ids == b"RGB"):
        model = "rgb"
    else:
        model = "ycbcr"
    return _ImageConfig("jpeg", width, height, model)


def _png_config(data: bytes) -> _ImageConfig:
    if len(data) < 24 or data[12:16] != _PNG_IHDR:
        raise ImageFormatError("invalid PNG format: missing IHDR chunk")
    width = int.from_bytes(data[16:20], "big")
    height = int.from_bytes(data[20:24], "big")
    return _ImageConfig("png", width, height, None)


def _image_config(data: bytes) -> _ImageConfig:
    """Format name and dimensions of a JPEG or PNG image."""
    if data.startswith(_PNG_MAGIC):
        return _png_config(data)
    if data.startswith(_JPEG_MAGIC):
        return _jpeg_config(data)
    raise ImageFormatError("image: unknown format")


# -- parsing -----------------------------------------------------------


class _PngReader:
    """Sequential reader; a short read is padded with zero bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.pos = 0

    def read(self, count: int) -> bytes:
        if self.pos >= len(self._data):
            raise ImageFormatError("unexpected end of PNG data")
        chunk = self._data[self.pos:self.pos + count]
        self.pos += len(chunk)
        return chunk + bytes(count - len(chunk))

    def skip(self, count: int) -> None:
        self.pos += count

    def byte(self) -> int:
        return self.read(1)[0]

    def uint(self) -> int:
        return int.from_bytes(self.read(4), "big")

    def int(self) -> int:
        value = self.uint()
        return value - 65536 if value >= 0x8000 else value


def _split_alpha(raw: bytes, width: int, height: int) -> tuple[bytes, bytes]:
    stride = 4 * width
    if stride < 0 or height < 0 or (1 + stride) * height > len(raw):
        raise ImageFormatError("PNG image data too short")
    color = bytearray()
    alpha = bytearray()
    for row in range(height):
        start = (1 + stride) * row
        color.append(raw[start])
        alpha.append(raw[start])
        line = raw[start + 1:start + 1 + stride]
        for px in range(0, len(line), 4):
            color += line[px:px + 3]
        alpha += line[3::4]
    return bytes(color), bytes(alpha)


def _parse_png(raw: bytes, info: ImageInfo) -> None:
    reader = _PngReader(raw)
    if reader.read(8) != _PNG_MAGIC:
        raise ImageFormatError("Not a PNG file")
    reader.skip(4)
    if reader.read(4) != _PNG_IHDR:
        raise ImageFormatError("Incorrect PNG file")
    width = reader.int()
    height = reader.int()
    bpc = reader.byte()
    if bpc > 8:
        raise ImageFormatError("16-bit depth not supported")
    color_type = reader.byte()
    colspace = _PNG_COLSPACES.get(color_type)
    if colspace is None:
        raise ImageFormatError("Unknown color type")
    if reader.byte() != 0:
        raise ImageFormatError("Unknown compression method")
    if reader.byte() != 0:
        raise ImageFormatError("Unknown filter method")
    if reader.byte() != 0:
        raise ImageFormatError("Interlacing not supported")
    reader.skip(4)

    pal = b""
    trns = b""
    idat = bytearray()
    while True:
        size = reader.uint()
        kind = reader.read(4)
        if kind == b"PLTE":
            pal = reader.read(size)
            reader.skip(4)
        elif kind == b"tRNS":
            chunk = reader.read(size)
            if color_type == 0:
                if len(chunk) < 2:
                    raise ImageFormatError("tRNS chunk too short")
                trns = bytes([chunk[1]])
            elif color_type == 2:
                if len(chunk) < 6:
                    raise ImageFormatError("tRNS chunk too short")
                trns = bytes([chunk[1], chunk[3], chunk[5]])
            else:
                zero = chunk.find(b"\x00")
                if zero >= 0:
                    trns = bytes([zero & 0xFF])
            reader.skip(4)
        elif kind == b"IDAT":
            idat += reader.read(size)
            reader.skip(4)
        elif kind == b"IEND":
            break
        else:
            reader.skip(size + 4)
        if size <= 0:
            break

    info.trns = trns
    info.pal = pal
    if colspace == "Indexed" and not pal.strip():
        raise ImageFormatError("Missing palette")

    info.w = width
    info.h = height
    info.colspace = colspace
    info.bits_per_component = str(bpc)
    info.filter = "FlateDecode"
    colors = 3 if colspace == "DeviceRGB" else 1
    info.decode_parms = (
        f"/Predictor 15 /Colors  {colors} /BitsPerComponent {info.bits_per_component} /Columns {width}"
    )

    if color_type < 4:
        info.data = bytes(idat)
        return
    try:
        pixels = zlib.decompress(bytes(idat))
    except zlib.error as exc:
        raise ImageFormatError(f"cannot decompress PNG data: {exc}") from exc
    if color_type == 6:
        color, alpha = _split_alpha(pixels, width, height)
        info.smask = zlib.compress(alpha, 1)
        info.data = zlib.compress(color, 1)


def parse_image(data: bytes | bytearray | BinaryIO) -> ImageInfo:
    """Parse a JPEG or PNG image given as bytes or a binary stream."""
    raw = bytes(data.read()) if hasattr(data, "read") else bytes(data)
    config = _image_config(raw)
    info = ImageInfo(format_name=config.format_name)
    if config.format_name == "jpeg":
        colspace = _JPEG_COLSPACES.get(config.color_model or "")
        if colspace is None:
            raise ImageFormatError("color model not support")
        info.colspace = colspace
        info.bits_per_component = "8"
        info.filter = "DCTDecode"
        info.w = config.width
        info.h = config.height
        info.data = raw
    else:
        _parse_png(raw, info)
    return info


def parse_image_path(path: str | os.PathLike) -> ImageInfo:
    """Parse the JPEG or PNG image stored at ``path``."""
    with open(path, "rb") as fh:
        return parse_image(fh.read())


# -- writing -----------------------------------------------------------


def is_colspace_indexed(info: ImageInfo) -> bool:
    return info.colspace == "Indexed"


def has_smask(info: ImageInfo) -> bool:
    return bool(info.smask)


def _emit(out: BinaryIO, text: str) -> None:
    out.write(text.encode("latin-1"))


def _write_base_props(out: BinaryIO, info: ImageInfo, colspace: str) -> None:
    lines = [
        "<<\n",
        "\t/Type /XObject\n",
        "\t/Subtype /Image\n",
        f"\t/Width {info.w}\n",
        f"\t/Height {info.h}\n",
    ]
    if is_colspace_indexed(info):
        size = len(info.pal) // 3 - 1
        lines.append(
            f"\t/ColorSpace [/Indexed /DeviceRGB {size} {info.device_rgb_obj_id + 1} 0 R]\n"
        )
    else:
        lines.append(f"\t/ColorSpace /{colspace}\n")
        if info.colspace == "DeviceCMYK":
            lines.append("\t/Decode [1 0 1 0 1 0 1 0]\n")
    lines.append(f"\t/BitsPerComponent {info.bits_per_component}\n")
    if info.filter.strip():
        lines.append(f"\t/Filter /{info.filter}\n")
    _emit(out, "".join(lines))


def write_mask_image_props(out: BinaryIO, info: ImageInfo) -> None:
    """Write the dictionary entries of the soft mask of ``info``."""
    _write_base_props(out, info, DEVICE_GRAY)
    _emit(
        out,
        "\t/DecodeParms <<\n"
        "\t\t/Predictor 15\n"
        "\t\t/Colors 1\n"
        "\t\t/BitsPerComponent 8\n"
        f"\t\t/Columns {info.w}\n"
        "\t>>\n",
    )


def write_image_props(out: BinaryIO, info: ImageInfo, splitted_mask: bool) -> None:
    """Write the dictionary entries of the image ``info``."""
    _write_base_props(out, info, info.colspace)
    if info.decode_parms.strip():
        _emit(out, f"\t/DecodeParms <<{info.decode_parms}>>\n")
    if splitted_mask:
        return
    if info.trns:
        entries = "".join(f"\t\t{value} \t\t{value} " for value in info.trns)
        _emit(out, f"\t/Mask [{entries}\t]\n")
    if has_smask(info):
        _emit(out, f"\t/SMask {info.smask_obj_id + 1} 0 R\n")


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def image_rect_to_wh(width: int, height: int) -> tuple[float, float]:
    """Size in points of an image of ``width`` x ``height`` pixels."""
    w = _trunc_div(-width * 72, -128)
    h = _trunc_div(-height * 72, -128)
    if w == 0:
        w = _trunc_div(h * width, height)
    if h == 0:
        h = _trunc_div(w * height, width)
    return float(w), float(h)