"""Indexed triangle meshes and triangle-source adapters.

A *triangle source* is anything the encoder can read triangles from: an
object exposing ``enumerate_triangles(visit)`` that calls
``visit(p0, p1, p2)`` once per triangle, or a plain iterable of
:class:`~meshstep.geometry_utils.Triangle` values or ``(p0, p1, p2)``
triples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, List, Sequence, Tuple

from meshstep.errors import InvalidGeometryError
from meshstep.geometry_utils import Triangle, Vec3, to_vec3

Visitor = Callable[[Vec3, Vec3, Vec3], Any]


@dataclass
class TriangleMesh:
    """Vertex list plus triangles given as vertex index triples."""

    vertices: List[Vec3] = field(default_factory=list)
    triangles: List[Tuple[int, int, int]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.vertices = [to_vec3(v) for v in self.vertices]
        triangles = self.triangles
        self.triangles = []
        for tri in triangles:
            self.add_triangle(*tri)

    def add_vertex(self, point_like: Any) -> int:
        self.vertices.append(to_vec3(point_like))
        return len(self.vertices) - 1

    def add_triangle(self, i0: int, i1: int, i2: int) -> int:
        count = len(self.vertices)
        indices = (int(i0), int(i1), int(i2))
        for idx in indices:
            if not 0 <= idx < count:
                raise InvalidGeometryError(
                    f"vertex index {idx} out of range for {count} vertices"
                )
        self.triangles.append(indices)
        return len(self.triangles) - 1

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    def enumerate_triangles(self, visit: Visitor) -> None:
        """Call ``visit(p0, p1, p2)`` for each triangle in insertion order."""

        verts = self.vertices
        for i0, i1, i2 in self.triangles:
            visit(verts[i0], verts[i1], verts[i2])

    @classmethod
    def from_triangles(cls, triangles: Iterable[Any]) -> "TriangleMesh":
        """Build a triangle-soup mesh: three fresh vertices per triangle."""

        mesh = cls()
        for tri in iter_triangles(triangles):
            base = len(mesh.vertices)
            mesh.vertices.extend((tri.v0, tri.v1, tri.v2))
            mesh.triangles.append((base, base + 1, base + 2))
        return mesh


def as_triangle(item: Any) -> Triangle:
    if isinstance(item, Triangle):
        return item
    try:
        corners: Sequence[Any] = tuple(item)
    except TypeError as exc:
        raise InvalidGeometryError(f"not a triangle: {item!r}") from exc
    if len(corners) != 3:
        raise InvalidGeometryError(f"triangle needs 3 corners, got {len(corners)}")
    return Triangle(to_vec3(corners[0]), to_vec3(corners[1]), to_vec3(corners[2]))


def iter_triangles(source: Any) -> Iterator[Triangle]:
    """Yield :class:`Triangle` values from any triangle source."""

    enumerate_triangles = getattr(source, 'enumerate_triangles', None)
    if callable(enumerate_triangles):
        collected: List[Triangle] = []
        enumerate_triangles(lambda p0, p1, p2: collected.append(as_triangle((p0, p1, p2))))
        yield from collected
        return
    for item in source:
        yield as_triangle(item)


__all__ = ['TriangleMesh', 'Visitor', 'as_triangle', 'iter_triangles']
