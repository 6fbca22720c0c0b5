from __future__ import annotations

import math
from typing import Any

from .errors import DegenerateArcError

Point3D = tuple[float, float, float]
Vector3D = tuple[float, float, float]

ORIGIN: Point3D = (0.0, 0.0, 0.0)

_COLLINEAR_EPS = 1.0e-12


def point3(value: Any) -> Point3D:
    if value is None:
        return ORIGIN
    if isinstance(value, dict):
        return (float(value["x"]), float(value["y"]), float(value.get("z", 0.0)))
    if isinstance(value, (list, tuple)):
        if len(value) >= 3:
            return (float(value[0]), float(value[1]), float(value[2]))
        if len(value) >= 2:
            return (float(value[0]), float(value[1]), 0.0)
    # ezdxf Vec3 and similar expose x/y/z attributes
    if hasattr(value, "x") and hasattr(value, "y"):
        return (float(value.x), float(value.y), float(getattr(value, "z", 0.0)))
    raise ValueError(f"invalid point value: {value!r}")


def add(point: Point3D, offset: Vector3D) -> Point3D:
    return (point[0] + offset[0], point[1] + offset[1], point[2] + offset[2])


def subtract(point: Point3D, origin: Point3D) -> Point3D:
    return (point[0] - origin[0], point[1] - origin[1], point[2] - origin[2])


def length(vector: Vector3D) -> float:
    return math.sqrt(vector[0] * vector[0] + vector[1] * vector[1] + vector[2] * vector[2])


def normalize(vector: Vector3D) -> Vector3D:
    size = length(vector)
    if size <= _COLLINEAR_EPS:
        raise ValueError(f"cannot normalize zero-length vector: {vector!r}")
    return (vector[0] / size, vector[1] / size, vector[2] / size)


def scale(vector: Vector3D, factor: float) -> Vector3D:
    return (vector[0] * factor, vector[1] * factor, vector[2] * factor)


def normalize_angle(angle: float) -> float:
    """Fold an angle in radians into ``[0, 2*pi)``."""
    folded = math.fmod(angle, math.tau)
    if folded < 0.0:
        folded += math.tau
    if folded >= math.tau:
        folded = 0.0
    return folded


def angle_on_ccw_sweep(angle: float, start: float, end: float) -> bool:
    sweep = normalize_angle(end - start)
    return normalize_angle(angle - start) <= sweep


def circle_from_points(
    p1: tuple[float, float],
    p2: tuple[float, float],
    p3: tuple[float, float],
) -> tuple[tuple[float, float], float]:
    """Return ``(center, radius)`` of the circle through three XY points.

    Raises ``DegenerateArcError`` when the points are coincident or
    collinear, since no finite circle passes through them.
    """
    ax, ay = p1
    bx, by = p2
    cx, cy = p3
    det = 2.0 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    span = max(abs(bx - ax), abs(by - ay), abs(cx - ax), abs(cy - ay), 1.0)
    if abs(det) <= _COLLINEAR_EPS * span * span:
        raise DegenerateArcError(f"points are collinear: {p1!r}, {p2!r}, {p3!r}")
    a2 = ax * ax + ay * ay
    b2 = bx * bx + by * by
    c2 = cx * cx + cy * cy
    ux = (a2 * (by - cy) + b2 * (cy - ay) + c2 * (ay - by)) / det
    uy = (a2 * (cx - bx) + b2 * (ax - cx) + c2 * (bx - ax)) / det
    return (ux, uy), math.hypot(ax - ux, ay - uy)
