"""Exact-value vertex interning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator

from meshstep.entities import EntityGraph, EntityKind, EntityRef
from meshstep.geometry_utils import Vec3, to_vec3


@dataclass(frozen=True)
class VertexHandle:
    coords: Vec3
    point: EntityRef
    vertex: EntityRef


class VertexTable:
    """Map distinct coordinate triples to one ``CARTESIAN_POINT`` each.

    Keys are the exact float coordinates.  Two corners that differ in the
    last bit are distinct vertices; no snapping is applied.
    """

    def __init__(self, graph: EntityGraph) -> None:
        self._graph = graph
        self._handles: Dict[Vec3, VertexHandle] = {}

    def intern(self, point_like: Any) -> VertexHandle:
        coords = to_vec3(point_like)
        handle = self._handles.get(coords)
        if handle is None:
            point = self._graph.add(EntityKind.CARTESIAN_POINT, '', coords)
            vertex = self._graph.add(EntityKind.VERTEX_POINT, '', point)
            handle = VertexHandle(coords, point, vertex)
            self._handles[coords] = handle
        return handle

    def __contains__(self, point_like: Any) -> bool:
        return to_vec3(point_like) in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[VertexHandle]:
        # dicts preserve insertion order
        return iter(self._handles.values())


__all__ = ['VertexHandle', 'VertexTable']
