"""Standard page sizes and per-page options."""

from __future__ import annotations

from dataclasses import dataclass

from pdfsmith.geometry import Rect

UNIT_PT = 1
"""Unit marker for sizes given in points."""


def _points(w: float, h: float) -> Rect:
    return Rect(w=w, h=h, unit_override=UNIT_PT)


PAGE_SIZE_LETTER = _points(612, 792)
PAGE_SIZE_LETTER_SMALL = _points(612, 792)
PAGE_SIZE_TABLOID = _points(792, 1224)
PAGE_SIZE_LEDGER = _points(1224, 792)
PAGE_SIZE_LEGAL = _points(612, 1008)
PAGE_SIZE_STATEMENT = _points(396, 612)
PAGE_SIZE_EXECUTIVE = _points(540, 720)
PAGE_SIZE_A0 = _points(2384, 3371)
PAGE_SIZE_A1 = _points(1685, 2384)
PAGE_SIZE_A2 = _points(1190, 1684)
PAGE_SIZE_A3 = _points(842, 1190)
PAGE_SIZE_A4 = _points(595, 842)
PAGE_SIZE_A4_LANDSCAPE = _points(842, 595)
PAGE_SIZE_A4_SMALL = _points(595, 842)
PAGE_SIZE_A5 = _points(420, 595)
PAGE_SIZE_B4 = _points(729, 1032)
PAGE_SIZE_B5 = _points(516, 729)
PAGE_SIZE_FOLIO = _points(612, 936)
PAGE_SIZE_QUARTO = _points(610, 780)
PAGE_SIZE_10X14 = _points(720, 1008)


@dataclass
class PageOption:
    """Size and trim box of one page.

    ``trim_box`` is a ``(left, top, right, bottom)`` tuple or None.
    """

    trim_box: tuple[float, float, float, float] | None = None
    page_size: Rect | None = None

    def is_empty(self) -> bool:
        """True when no page size is set."""
        return self.page_size is None

    def is_trim_box_set(self) -> bool:
        """True when a trim box with at least one non-zero side is set."""
        if self.trim_box is None:
            return False
        return any(value != 0 for value in self.trim_box)