"""Scene objects and their model matrices."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Sequence

__all__ = [
    "ObjFlags",
    "Object",
    "to_rad",
    "to_deg",
    "quat_rotate",
    "make_object",
    "load_object",
]

Matrix = tuple[tuple[float, float, float, float], ...]


def to_rad(degrees: float) -> float:
    return degrees * math.pi / 180.0


def to_deg(radians: float) -> float:
    return radians * 180.0 / math.pi


class ObjFlags(enum.IntFlag):
    """Which parts of an object go into its matrix."""

    POS = 1
    ROT = 2
    SCALE = 4
    ALL = POS | ROT | SCALE


@dataclass
class Object:
    """Position, scale and rotation quaternion (x, y, z, w)."""

    position: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    scale: list[float] = field(default_factory=lambda: [1.0, 1.0, 1.0])
    rotation: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0, 1.0])

    @property
    def x(self) -> float:
        return self.position[0]

    @x.setter
    def x(self, value: float) -> None:
        self.position[0] = value

    @property
    def y(self) -> float:
        return self.position[1]

    @y.setter
    def y(self, value: float) -> None:
        self.position[1] = value

    @property
    def z(self) -> float:
        return self.position[2]

    @z.setter
    def z(self, value: float) -> None:
        self.position[2] = value


def make_object() -> Object:
    """A new object at the origin, unit scale, no rotation."""
    return Object()


def quat_rotate(angle: float, axis: Sequence[float]) -> tuple[float, float, float, float]:
    """Quaternion rotating by ``angle`` radians about ``axis``."""
    length = math.sqrt(sum(a * a for a in axis))
    if length == 0:
        raise ValueError("rotation axis must be non-zero")
    s = math.sin(angle / 2)
    x, y, z = (a / length * s for a in axis)
    return (x, y, z, math.cos(angle / 2))


def _identity() -> list[list[float]]:
    return [[1.0 if c == r else 0.0 for r in range(4)] for c in range(4)]


def _mul(a: list[list[float]], b: list[list[float]]) -> list[list[float]]:
    return [[sum(a[k][r] * b[c][k] for k in range(4)) for r in range(4)] for c in range(4)]


def _from_quat(q: Sequence[float]) -> list[list[float]]:
    b, c, d, a = q
    a2, b2, c2, d2 = a * a, b * b, c * c, d * d
    return [
        [a2 + b2 - c2 - d2, 2 * (b * c + a * d), 2 * (b * d - a * c), 0.0],
        [2 * (b * c - a * d), a2 - b2 + c2 - d2, 2 * (c * d + a * b), 0.0],
        [2 * (b * d + a * c), 2 * (c * d - a * b), a2 - b2 - c2 + d2, 0.0],
        [0.0, 0.0, 0.0, 1.0],
    ]


def load_object(obj: Object, flags: ObjFlags = ObjFlags.ALL) -> Matrix:
    """Column-major 4x4 model matrix: ``m[column][row]``."""
    matrix = _identity()
    if flags & ObjFlags.POS:
        matrix[3][0:3] = list(obj.position)
    if flags & ObjFlags.ROT:
        matrix = _mul(matrix, _from_quat(obj.rotation))
    if flags & ObjFlags.SCALE:
        scale = _identity()
        for i in range(3):
            scale[i] = [v * obj.scale[i] for v in scale[i]]
        matrix = _mul(matrix, scale)
    return tuple(tuple(col) for col in matrix)