"""Image data with an identity used for de-duplication."""

from __future__ import annotations

import hashlib
import io
import os
from typing import BinaryIO


class ImageHolder:
    """Readable image bytes with an ``id``."""

    def __init__(self, id: str, data: bytes) -> None:
        self.id = id
        self._buffer = io.BytesIO(data)

    def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)


def image_holder_from_bytes(data: bytes) -> ImageHolder:
    """Holder whose id is the MD5 hex digest of ``data``."""
    data = bytes(data)
    return ImageHolder(hashlib.md5(data).hexdigest(), data)


def image_holder_from_path(path: str | os.PathLike) -> ImageHolder:
    """Holder whose id is the path it was read from."""
    with open(path, "rb") as fh:
        data = fh.read()
    return ImageHolder(os.fspath(path), data)


def image_holder_from_reader(reader: BinaryIO) -> ImageHolder:
    """Holder over everything read from ``reader``, identified by MD5."""
    return image_holder_from_bytes(reader.read())