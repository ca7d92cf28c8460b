"""Transparency (alpha and blend mode) settings and their cache."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass

DEFAULT_ALPHA_VALUE = 1


class BlendMode(str, enum.Enum):
    """PDF blend modes."""

    HUE = "/Hue"
    COLOR = "/Color"
    NORMAL = "/Normal"
    DARKEN = "/Darken"
    SCREEN = "/Screen"
    OVERLAY = "/Overlay"
    LIGHTEN = "/Lighten"
    MULTIPLY = "/Multiply"
    EXCLUSION = "/Exclusion"
    COLOR_BURN = "/ColorBurn"
    HARD_LIGHT = "/HardLight"
    SOFT_LIGHT = "/SoftLight"
    DIFFERENCE = "/Difference"
    SATURATION = "/Saturation"
    LUMINOSITY = "/Luminosity"
    COLOR_DODGE = "/ColorDodge"


def blend_mode_from_string(value: str) -> BlendMode:
    """Parse a blend mode name; an empty string means normal."""
    if value == "":
        return BlendMode.NORMAL
    try:
        return BlendMode(value)
    except ValueError:
        raise ValueError("blend mode is unknown") from None


@dataclass
class Transparency:
    """An alpha value with a blend mode."""

    alpha: float
    blend_mode: BlendMode | str = BlendMode.NORMAL
    ext_gstate_index: int = 0

    def __post_init__(self) -> None:
        if self.alpha < 0.0 or self.alpha > 1.0:
            raise ValueError(f"alpha value is out of range (0.0 - 1.0): {self.alpha:.3f}")
        if not isinstance(self.blend_mode, BlendMode):
            self.blend_mode = blend_mode_from_string(self.blend_mode)

    def cache_key(self) -> str:
        return f"{self.alpha:.3f}_{self.blend_mode.value}"


class TransparencyMap:
    """Thread-safe cache of transparencies by their key."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._table: dict[str, Transparency] = {}

    def find(self, transparency: Transparency) -> Transparency | None:
        with self._lock:
            return self._table.get(transparency.cache_key())

    def save(self, transparency: Transparency) -> Transparency:
        with self._lock:
            self._table[transparency.cache_key()] = transparency
        return transparency