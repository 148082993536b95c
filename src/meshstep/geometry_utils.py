"""Vector helpers shared by the B-Rep builder."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Tuple

from meshstep.errors import InvalidGeometryError

Vec3 = Tuple[float, float, float]

EPSILON = 1e-6

X_AXIS: Vec3 = (1.0, 0.0, 0.0)
Y_AXIS: Vec3 = (0.0, 1.0, 0.0)
Z_AXIS: Vec3 = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space."""

    v0: Vec3
    v1: Vec3
    v2: Vec3

    @property
    def normal(self) -> Vec3:
        return face_normal(self.v0, self.v1, self.v2)


def to_vec3(point_like: Any) -> Vec3:
    """Return the XYZ components of a point-like value as a float tuple.

    Accepts sequences with at least three components or objects exposing
    ``x``, ``y`` and ``z`` attributes.
    """

    if all(hasattr(point_like, attr) for attr in ('x', 'y', 'z')):
        coords = (point_like.x, point_like.y, point_like.z)
    else:
        try:
            if len(point_like) < 3:
                raise InvalidGeometryError("value must have at least three components")
        except TypeError as exc:
            raise InvalidGeometryError(f"not a point: {point_like!r}") from exc
        coords = (point_like[0], point_like[1], point_like[2])
    try:
        vec = (float(coords[0]), float(coords[1]), float(coords[2]))
    except (TypeError, ValueError) as exc:
        raise InvalidGeometryError(f"non-numeric coordinate in {point_like!r}") from exc
    if not all(math.isfinite(c) for c in vec):
        raise InvalidGeometryError(f"non-finite coordinate in {vec!r}")
    return vec


def edge_vector(a: Vec3, b: Vec3) -> Vec3:
    """Return ``b - a``."""

    return (b[0] - a[0], b[1] - a[1], b[2] - a[2])


def cross(u: Vec3, v: Vec3) -> Vec3:
    return (
        u[1] * v[2] - u[2] * v[1],
        u[2] * v[0] - u[0] * v[2],
        u[0] * v[1] - u[1] * v[0],
    )


def dot(u: Vec3, v: Vec3) -> float:
    return u[0] * v[0] + u[1] * v[1] + u[2] * v[2]


def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))


def normalize(v: Vec3) -> Vec3:
    """Return ``v`` scaled to unit length.

    Vectors shorter than :data:`EPSILON` are returned unchanged instead of
    being divided by a vanishing length; callers that need a unit vector in
    that case must check :func:`length` first.
    """

    mag = length(v)
    if mag < EPSILON:
        return v
    return (v[0] / mag, v[1] / mag, v[2] / mag)


def is_degenerate(v0: Vec3, v1: Vec3, v2: Vec3) -> bool:
    """Return ``True`` if the triangle's edge vectors are parallel or empty.

    The test is relative to the edge lengths (the sine of the corner angle
    at ``v0``), so small but well-formed facets are not degenerate.
    """

    e1 = edge_vector(v0, v1)
    e2 = edge_vector(v0, v2)
    return length(cross(e1, e2)) <= EPSILON * length(e1) * length(e2)


def _unit(v: Vec3) -> Vec3:
    mag = length(v)
    return (v[0] / mag, v[1] / mag, v[2] / mag)


def face_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3:
    """Return the unit normal of a counter-clockwise triangle.

    Degenerate triangles get ``+Z`` so every face still carries a valid
    direction.  Every other triangle keeps its own normal, however small.
    """

    if is_degenerate(v0, v1, v2):
        return Z_AXIS
    return _unit(cross(edge_vector(v0, v1), edge_vector(v0, v2)))


def edge_direction(a: Vec3, b: Vec3) -> Vec3:
    """Unit direction from ``a`` to ``b``; ``+X`` for a zero-length edge."""

    d = edge_vector(a, b)
    if length(d) == 0.0:
        return X_AXIS
    return _unit(d)


def reference_direction(normal: Vec3) -> Vec3:
    """Return a unit vector orthogonal to ``normal``.

    Prefers the X axis with its ``normal`` component removed, falling back to
    the Y axis when the normal is parallel to X.
    """

    candidate = _reject(X_AXIS, normal)
    if length(candidate) < EPSILON:
        candidate = _reject(Y_AXIS, normal)
    return normalize(candidate)


def _reject(axis: Vec3, normal: Vec3) -> Vec3:
    k = dot(axis, normal)
    return (axis[0] - k * normal[0],
            axis[1] - k * normal[1],
            axis[2] - k * normal[2])


__all__ = [
    'EPSILON',
    'Triangle',
    'Vec3',
    'X_AXIS',
    'Y_AXIS',
    'Z_AXIS',
    'cross',
    'dot',
    'edge_direction',
    'edge_vector',
    'face_normal',
    'is_degenerate',
    'length',
    'normalize',
    'reference_direction',
    'to_vec3',
]
