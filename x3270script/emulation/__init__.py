"""Decoding of ReadBuffer() output into an addressable screen model."""

from .attributes import FieldAttributes, FieldColor, FieldFlags, FieldIntensity
from .coordinates import Coordinates
from .display_buffer import DisplayBuffer, Position, PositionType

__all__ = [
    "Coordinates",
    "DisplayBuffer",
    "FieldAttributes",
    "FieldColor",
    "FieldFlags",
    "FieldIntensity",
    "Position",
    "PositionType",
]
