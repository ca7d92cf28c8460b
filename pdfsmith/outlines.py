"""Document outline (bookmarks)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import BinaryIO


def _utf16_hex(text: str) -> str:
    return text.encode("utf-16-be").hex().upper()


@dataclass
class Outline:
    """One bookmark entry; references are object numbers, -1 or 0 for none."""

    title: str
    dest: int
    parent: int = 0
    prev: int = -1
    next: int = -1
    first: int = 0
    last: int = 0
    height: float = 0.0
    index: int = 0

    obj_type = "Outline"

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the outline item dictionary."""
        lines = ["<<\n", f"  /Parent {self.parent} 0 R\n"]
        if self.prev >= 0:
            lines.append(f"  /Prev {self.prev} 0 R\n")
        if self.next >= 0:
            lines.append(f"  /Next {self.next} 0 R\n")
        if self.first > 0:
            lines.append(f"  /First {self.first} 0 R\n")
        if self.last > 0:
            lines.append(f"  /Last {self.last} 0 R\n")
        lines.append(f"  /Dest [ {self.dest} 0 R /XYZ 90 {self.height:f} 0 ]\n")
        lines.append(f"  /Title <FEFF{_utf16_hex(self.title)}>\n")
        lines.append(">>\n")
        out.write("".join(lines).encode("latin-1"))


class Outlines:
    """The outline dictionary: a flat, linked list of top-level bookmarks."""

    obj_type = "Outlines"

    def __init__(self, add_obj: Callable[[object], int]) -> None:
        """``add_obj`` registers an object and returns its zero-based index."""
        self._add_obj = add_obj
        self.index = 0
        self.first = -1
        self.last = -1
        self.count = 0
        self._last_obj: Outline | None = None

    def _append(self, outline: Outline) -> None:
        self.last = self._add_obj(outline) + 1
        if self.first <= 0:
            self.first = self.last
        if self._last_obj is not None:
            self._last_obj.next = self.last
        self._last_obj = outline
        self.count += 1

    def add_outline(self, dest: int, title: str) -> Outline:
        """Add a bookmark pointing at page object ``dest``."""
        outline = Outline(title=title, dest=dest, parent=self.index, prev=self.last, next=-1)
        self._append(outline)
        return outline

    def add_outline_with_position(self, dest: int, title: str, y: float) -> Outline:
        """Add a bookmark pointing at height ``y`` of page object ``dest``."""
        outline = Outline(
            title=title, dest=dest, parent=self.index, prev=self.last, next=-1, height=y
        )
        self._append(outline)
        outline.index = self.last
        return outline

    def write(self, out: BinaryIO, obj_id: int) -> None:
        """Write the outline dictionary."""
        lines = ["<<\n", f"\t/Type /{self.obj_type}\n", f"\t/Count {self.count}\n"]
        if self.first >= 0:
            lines.append(f"\t/First {self.first} 0 R\n")
        if self.last >= 0:
            lines.append(f"\t/Last {self.last} 0 R\n")
        lines.append(">>\n")
        out.write("".join(lines).encode("latin-1"))


@dataclass
class OutlineNode:
    """A bookmark together with its child bookmarks."""

    obj: Outline
    children: list[OutlineNode] = field(default_factory=list)

    def parse(self) -> None:
        """Link the children to each other and to this node, recursively."""
        if not self.children:
            return
        last = len(self.children) - 1
        for i, child in enumerate(self.children):
            if i == 0:
                self.obj.first = child.obj.index
                child.obj.prev = -1
            if i == last:
                self.obj.last = child.obj.index
                child.obj.next = -1
            if i != 0:
                child.obj.prev = self.children[i - 1].obj.index
            if i != last:
                child.obj.next = self.children[i + 1].obj.index
            child.obj.parent = self.obj.index
            child.parse()


def parse_outline_nodes(nodes: list[OutlineNode]) -> None:
    """Link top-level nodes in order and parse each subtree."""
    last = len(nodes) - 1
    for i, node in enumerate(nodes):
        if i == 0:
            node.obj.prev = -1
        node.obj.next = -1 if i == last else nodes[i + 1].obj.index
        node.parse()