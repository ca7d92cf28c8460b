"""Structural PDF objects: resources, pages, page tree and document info."""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import BinaryIO

from pdfsmith.geometry import Rect
from pdfsmith.page_sizes import PageOption
from pdfsmith.protection import PDFProtection, rc4


def _emit(out: BinaryIO, text: str) -> None:
    out.write(text.encode("latin-1"))


@dataclass
class RelateFont:
    """A font resource: name number ``/F<n>`` and the object holding it."""

    family: str
    count_of_font: int
    index_of_obj: int
    style: int = 0


class RelateFonts(list):
    """The fonts a document uses."""

    def contains_family(self, family: str) -> bool:
        return any(font.family == family for font in self)

    def contains_family_and_style(self, family: str, style: int) -> bool:
        return any(font.family == family and font.style == style for font in self)


@dataclass
class ProcSet:
    """The shared resource dictionary of all pages."""

    relates: RelateFonts = field(default_factory=RelateFonts)
    relate_xobjs: list[int] = field(default_factory=list)
    ext_gstates: list[int] = field(default_factory=list)
    imported_template_ids: dict[str, int] = field(default_factory=dict)

    obj_type = "ProcSet"

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the resource dictionary."""
        lines = ["<<\n", "\t/ProcSet [/PDF /Text /ImageB /ImageC /ImageI]\n", "\t/Font <<\n"]
        lines += [
            f"\t\t/F{font.count_of_font + 1} {font.index_of_obj + 1} 0 R\n"
            for font in self.relates
        ]
        lines.append("\t>>\n")
        lines.append("\t/XObject <<\n")
        lines += [f"\t\t/I{index + 1} {index + 1} 0 R\n" for index in self.relate_xobjs]
        lines += [
            f"\t\t{name} {ref} 0 R\n" for name, ref in self.imported_template_ids.items()
        ]
        lines.append("\t>>\n")
        lines.append("\t/ExtGState <<\n")
        lines += [f"\t\t/GS{index + 1} {index + 1} 0 R\n" for index in self.ext_gstates]
        lines.append("\t>>\n")
        lines.append(">>\n")
        _emit(out, "".join(lines))


@dataclass
class ImportedObj:
    """An object body taken over verbatim from another document."""

    data: str = ""

    obj_type = "Imported"

    def write(self, out: BinaryIO, obj_id: int) -> None:
        _emit(out, self.data)


@dataclass
class PdfInfo:
    """Document information dictionary entries."""

    title: str = ""
    author: str = ""
    subject: str = ""
    creator: str = ""
    producer: str = ""
    creation_date: datetime.datetime | None = None


@dataclass
class Pages:
    """The root of the page tree."""

    page_size: Rect
    page_count: int = 0
    kids: str = ""

    obj_type = "Pages"

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the page tree dictionary; ``kids`` is e.g. ``3 0 R``."""
        _emit(
            out,
            "<<\n"
            f"  /Type /{self.obj_type}\n"
            f"  /MediaBox [ 0 0 {self.page_size.w:.2f} {self.page_size.h:.2f} ]\n"
            f"  /Count {self.page_count}\n"
            f"  /Kids [ {self.kids} ]\n"
            ">>\n",
        )


@dataclass
class Anchor:
    """A named link target: page index and height on it."""

    page: int
    y: float


@dataclass
class LinkOption:
    """A link area; goes to ``url`` if set, otherwise to the named ``anchor``."""

    x: float
    y: float
    w: float
    h: float
    url: str = ""
    anchor: str = ""


def _escape_url(url: bytes) -> bytes:
    return (
        url.replace(b"\\", b"\\\\")
        .replace(b"(", b"\\(")
        .replace(b")", b"\\)")
        .replace(b"\r", b"\\r")
    )


class Page:
    """A single page object."""

    obj_type = "Page"

    def __init__(
        self,
        contents: str = "",
        resources_relate: str = "",
        page_option: PageOption | None = None,
        links: list[LinkOption] | None = None,
        protection: PDFProtection | None = None,
        anchors: Mapping[str, Anchor] | None = None,
    ) -> None:
        self.contents = contents
        self.resources_relate = resources_relate
        self.page_option = page_option if page_option is not None else PageOption()
        self.links = links if links is not None else []
        self.protection = protection
        self.anchors = anchors if anchors is not None else {}

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the page dictionary for object number ``obj_id``."""
        _emit(
            out,
            "<<\n"
            f"  /Type /{self.obj_type}\n"
            "  /Parent 2 0 R\n"
            f"  /Resources {self.resources_relate}\n",
        )
        if self.links:
            out.write(b"  /Annots [")
            for link in self.links:
                if link.url:
                    self._write_external_link(out, link, obj_id)
                else:
                    self._write_internal_link(out, link)
            out.write(b"]\n")
        _emit(out, f"  /Contents {self.contents}\n")
        option = self.page_option
        if not option.is_empty():
            size = option.page_size
            _emit(out, f" /MediaBox [ 0 0 {size.w:.2f} {size.h:.2f} ]\n")
        if option.is_trim_box_set():
            left, top, right, bottom = option.trim_box
            _emit(out, f" /TrimBox [ {left:.2f} {top:.2f} {right:.2f} {bottom:.2f} ]\n")
        out.write(b">>\n")

    @staticmethod
    def _rect(link: LinkOption) -> str:
        return (
            f"{link.x:.2f} {link.y:.2f} {link.x + link.w:.2f} {link.y - link.h:.2f}"
        )

    def _write_external_link(self, out: BinaryIO, link: LinkOption, obj_id: int) -> None:
        url = link.url.encode("utf-8")
        if self.protection is not None:
            url = rc4(self.protection.object_key(obj_id), url)
        out.write(
            f"<</Type /Annot /Subtype /Link /Rect [{self._rect(link)}] "
            "/Border [0 0 0] /A <</S /URI /URI (".encode("latin-1")
        )
        out.write(_escape_url(url))
        out.write(b")>>>>")

    def _write_internal_link(self, out: BinaryIO, link: LinkOption) -> None:
        anchor = self.anchors.get(link.anchor)
        if anchor is None:
            return
        _emit(
            out,
            f"<</Type /Annot /Subtype /Link /Rect [{self._rect(link)}] "
            f"/Border [0 0 0] /Dest [{anchor.page + 1} 0 R /XYZ 0 {anchor.y:.2f} null]>>",
        )