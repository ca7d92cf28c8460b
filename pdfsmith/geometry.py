"""Basic two-dimensional shapes."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Rect:
    """A rectangle given by its width and height.

    ``unit_override`` pins the unit the size is expressed in, whatever unit
    the document uses; None leaves the document's unit in charge.
    """

    w: float = 0.0
    h: float = 0.0
    unit_override: int | None = None


@dataclass
class Point:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0