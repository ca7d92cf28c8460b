import dataclasses

from pdfsmith.geometry import Point, Rect


def test_rect_fields_and_equality():
    rect = Rect(595, 842)
    assert rect.w == 595
    assert rect.h == 842
    assert rect.unit_override is None
    assert rect == Rect(595, 842)


def test_rect_orientation_matters():
    portrait = Rect(595, 842)
    landscape = Rect(842, 595)
    assert portrait != landscape
    assert (landscape.w, landscape.h) == (portrait.h, portrait.w)


def test_rect_replace_keeps_other_fields():
    rect = Rect(612, 792, unit_override=1)
    wider = dataclasses.replace(rect, w=1224)
    assert wider.w == 1224
    assert wider.h == 792
    assert wider.unit_override == 1
    assert rect.w == 612


def test_point_defaults_and_values():
    assert Point() == Point(0.0, 0.0)
    point = Point(1.5, 2.5)
    assert (point.x, point.y) == (1.5, 2.5)