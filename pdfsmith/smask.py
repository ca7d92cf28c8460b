"""Soft masks: image alpha channels and transparency-group masks."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import BinaryIO

from pdfsmith.image_parse import ImageInfo, write_image_props
from pdfsmith.protection import PDFProtection, rc4


class SMaskSubtype(str, enum.Enum):
    """How a mask's values are derived from its group."""

    ALPHA = "/Alpha"
    LUMINOSITY = "/Luminosity"


@dataclass(frozen=True)
class SMaskOptions:
    """What identifies a soft mask built from a transparency group."""

    transparency_xobject_group_index: int = 0
    subtype: SMaskSubtype | str = SMaskSubtype.ALPHA

    def cache_key(self) -> str:
        subtype = self.subtype.value if isinstance(self.subtype, SMaskSubtype) else self.subtype
        return f"S_{subtype};G_{self.transparency_xobject_group_index}_0_R"


@dataclass
class SMask:
    """A soft mask object: either image alpha data or a group mask."""

    info: ImageInfo = field(default_factory=ImageInfo)
    data: bytes = b""
    protection: PDFProtection | None = None
    index: int = 0
    transparency_xobject_group_index: int = 0
    s: str = ""

    obj_type = "Mask"

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the object body for object number ``obj_id``."""
        if self.transparency_xobject_group_index != 0:
            text = (
                "<<\n"
                "\t/Type /Mask\n"
                f"\t/S {self.s}\n"
                f"\t/G {self.transparency_xobject_group_index + 1} 0 R\n"
                ">>\n"
            )
            out.write(text.encode("latin-1"))
            return

        write_image_props(out, self.info, False)
        out.write(f"/Length {len(self.data)}\n>>\n".encode("latin-1"))
        out.write(b"stream\n")
        if self.protection is not None:
            out.write(rc4(self.protection.object_key(obj_id), self.data))
            out.write(b"\n")
        else:
            out.write(self.data)
        out.write(b"\nendstream\n")


class SMaskMap:
    """Thread-safe cache of soft masks by key."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[str, SMask] = {}

    def find(self, options: SMaskOptions) -> SMask | None:
        with self._lock:
            return self._table.get(options.cache_key())

    def save(self, key: str, smask: SMask) -> SMask:
        with self._lock:
            self._table[key] = smask
        return smask