"""Image XObjects."""

from __future__ import annotations

import os
from typing import BinaryIO

from pdfsmith.geometry import Rect
from pdfsmith.image_parse import (
    ImageInfo,
    _image_config,
    image_rect_to_wh,
    parse_image,
    write_image_props,
    write_mask_image_props,
)
from pdfsmith.protection import PDFProtection, rc4
from pdfsmith.smask import SMask


class ImageObj:
    """An image, or its soft mask when ``is_mask`` is set."""

    obj_type = "Image"

    def __init__(
        self,
        is_mask: bool = False,
        splitted_mask: bool = False,
        protection: PDFProtection | None = None,
    ) -> None:
        self.is_mask = is_mask
        self.splitted_mask = splitted_mask
        self.protection = protection
        self.info = ImageInfo()
        self._raw: bytes | None = None

    def set_image_path(self, path: str | os.PathLike) -> None:
        """Load the image bytes from ``path``."""
        with open(path, "rb") as fh:
            self.set_image(fh)

    def set_image(self, reader: BinaryIO) -> None:
        """Load the image bytes from a binary stream."""
        self._raw = bytes(reader.read())

    def _require_raw(self) -> bytes:
        if self._raw is None:
            raise ValueError("no image data has been set")
        return self._raw

    def get_rect(self) -> Rect:
        """Size of the image in points."""
        config = _image_config(self._require_raw())
        w, h = image_rect_to_wh(config.width, config.height)
        return Rect(w=w, h=h)

    def parse(self) -> None:
        """Parse the loaded image bytes into ``info``."""
        self.info = parse_image(self._require_raw())

    def create_smask(self) -> SMask:
        """Soft mask object carrying this image's alpha channel."""
        info = ImageInfo(
            w=self.info.w,
            h=self.info.h,
            colspace="DeviceGray",
            bits_per_component="8",
            filter=self.info.filter,
            decode_parms=(
                f"/Predictor 15 /Colors 1 /BitsPerComponent 8 /Columns {self.info.w}"
            ),
        )
        return SMask(info=info, data=self.info.smask, protection=self.protection)

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the object body for object number ``obj_id``."""
        if self.is_mask:
            data = self.info.smask
            write_mask_image_props(out, self.info)
        else:
            data = self.info.data
            write_image_props(out, self.info, self.splitted_mask)
        out.write(f"\t/Length {len(data)}\n>>\n".encode("latin-1"))
        out.write(b"stream\n")
        if self.protection is not None:
            out.write(rc4(self.protection.object_key(obj_id), data))
            out.write(b"\n")
        else:
            out.write(data)
        out.write(b"\nendstream\n")