"""Small geometric and colour helpers shared by the renderer."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass

__all__ = ["Point", "distance", "create_color", "update_radian", "deg_to_rad"]

_TWO_PI = 2 * math.pi


@dataclass(slots=True)
class Point:
    """A position on the map plane, in map cells."""

    x: float = 0.0
    y: float = 0.0


def _f32(value: float) -> float:
    """Round a double to single precision."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points, at single precision."""
    dx = _f32(p2.x - p1.x)
    dy = _f32(p2.y - p1.y)
    sx = _f32(dx * dx)
    sy = _f32(dy * dy)
    return _f32(math.sqrt(_f32(sx + sy)))


def create_color(transparency: int, r: int, g: int, b: int) -> int:
    """Pack alpha and RGB channels into a signed 32-bit pixel value."""
    value = ((transparency << 24) | (r << 16) | (g << 8) | b) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def update_radian(radian: float, inc: float) -> float:
    """Add ``inc`` to an angle and wrap it back once into [0, 2*pi]."""
    radian += inc
    if radian > _TWO_PI:
        radian -= _TWO_PI
    elif radian < 0:
        radian += _TWO_PI
    return radian


def deg_to_rad(degree: float) -> float:
    """Convert degrees to radians."""
    return (degree * math.pi) / 180.0