"""Faceted B-Rep entity graph construction.

Every triangle becomes a planar ``ADVANCED_FACE`` bounded by three straight
edges; all faces go into a single ``CLOSED_SHELL`` of one
``MANIFOLD_SOLID_BREP``.  Edges are not shared between faces, only the
corner points are.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Tuple

from meshstep.config import ExportOptions
from meshstep.entities import (
    DERIVED,
    UNSET,
    EntityGraph,
    EntityKind,
    EntityRef,
    Enumeration,
    Typed,
)
from meshstep.errors import StepExportError
from meshstep.geometry_utils import (
    Vec3,
    edge_direction,
    edge_vector,
    face_normal,
    is_degenerate,
    length,
    reference_direction,
)
from meshstep.mesh import iter_triangles
from meshstep.vertices import VertexHandle, VertexTable

logger = logging.getLogger(__name__)

APPLICATION = 'configuration controlled 3D designs of mechanical parts and assemblies'

K = EntityKind


@dataclass(frozen=True)
class FaceRecord:
    """Entities derived from one input triangle."""

    index: int
    corners: Tuple[VertexHandle, VertexHandle, VertexHandle]
    normal: Vec3
    face: EntityRef
    degenerate: bool = False


@dataclass
class BuildResult:
    graph: EntityGraph
    faces: List[FaceRecord]
    vertex_count: int
    shell: EntityRef
    solid: EntityRef
    product: EntityRef
    warnings: List[str] = field(default_factory=list)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    @property
    def degenerate_faces(self) -> List[int]:
        return [rec.index for rec in self.faces if rec.degenerate]


class BrepBuilder:
    """Single-use builder: feed triangles, then call :meth:`finish` once.

    :meth:`add_triangle` has the ``visit(p0, p1, p2)`` signature, so a mesh
    can drive the builder directly through ``mesh.enumerate_triangles``.
    """

    def __init__(self, options: Optional[ExportOptions] = None) -> None:
        self.options = options or ExportOptions()
        self.graph = EntityGraph()
        self.vertices = VertexTable(self.graph)
        self._faces: List[FaceRecord] = []
        self._result: Optional[BuildResult] = None

    def add_triangle(self, p0: Any, p1: Any, p2: Any) -> EntityRef:
        if self._result is not None:
            raise StepExportError('builder already finished')
        corners = (self.vertices.intern(p0),
                   self.vertices.intern(p1),
                   self.vertices.intern(p2))
        c0, c1, c2 = corners
        index = len(self._faces)
        degenerate = is_degenerate(c0.coords, c1.coords, c2.coords)
        normal = face_normal(c0.coords, c1.coords, c2.coords)
        if degenerate:
            logger.warning("triangle %d is degenerate, using fallback normal %r",
                           index, normal)

        edges = tuple(self._add_edge(a, b) for a, b in ((c0, c1), (c1, c2), (c2, c0)))
        loop = self.graph.add(K.EDGE_LOOP, '', edges)
        bound = self.graph.add(K.FACE_OUTER_BOUND, '', loop, True)

        axis = self.graph.add(K.DIRECTION, '', normal)
        ref_dir = self.graph.add(K.DIRECTION, '', reference_direction(normal))
        placement = self.graph.add(K.AXIS2_PLACEMENT_3D, '', c0.point, axis, ref_dir)
        plane = self.graph.add(K.PLANE, '', placement)
        face = self.graph.add(K.ADVANCED_FACE, '', (bound,), plane, True)

        self._faces.append(FaceRecord(index, corners, normal, face, degenerate))
        return face

    def _add_edge(self, start: VertexHandle, end: VertexHandle) -> EntityRef:
        direction = self.graph.add(K.DIRECTION, '', edge_direction(start.coords, end.coords))
        magnitude = length(edge_vector(start.coords, end.coords))
        vector = self.graph.add(K.VECTOR, '', direction, magnitude)
        line = self.graph.add(K.LINE, '', start.point, vector)
        curve = self.graph.add(K.EDGE_CURVE, '', start.vertex, end.vertex, line, True)
        return self.graph.add(K.ORIENTED_EDGE, '', DERIVED, DERIVED, curve, True)

    def add_triangles(self, triangles: Iterable[Any]) -> int:
        count = 0
        for tri in iter_triangles(triangles):
            self.add_triangle(tri.v0, tri.v1, tri.v2)
            count += 1
        return count

    def feed(self, source: Any) -> None:
        """Consume a callback-driven mesh or an iterable of triangles."""

        enumerate_triangles = getattr(source, 'enumerate_triangles', None)
        if callable(enumerate_triangles):
            enumerate_triangles(self.add_triangle)
        else:
            self.add_triangles(source)

    def finish(self) -> BuildResult:
        """Close the shell, add the product structure and seal the graph."""

        if self._result is not None:
            return self._result
        name = self.options.name
        warnings: List[str] = []
        if not self._faces:
            logger.warning("no triangles supplied, writing an empty closed shell")
            warnings.append('empty input: shell has no faces')
        degenerate = [rec.index for rec in self._faces if rec.degenerate]
        if degenerate:
            warnings.append(f'degenerate triangles: {degenerate}')

        shell = self.graph.add(K.CLOSED_SHELL, '', tuple(rec.face for rec in self._faces))
        solid = self.graph.add(K.MANIFOLD_SOLID_BREP, name, shell)
        product, shape = self._add_product(name)
        context = self._add_representation_context()
        representation = self.graph.add(
            K.ADVANCED_BREP_SHAPE_REPRESENTATION, name, (solid,), context
        )
        self.graph.add(K.SHAPE_DEFINITION_REPRESENTATION, shape, representation)
        self.graph.seal()

        logger.debug("built %d entities: %d faces, %d vertices",
                     len(self.graph), len(self._faces), len(self.vertices))
        self._result = BuildResult(
            graph=self.graph,
            faces=list(self._faces),
            vertex_count=len(self.vertices),
            shell=shell,
            solid=solid,
            product=product,
            warnings=warnings,
        )
        return self._result

    def _add_product(self, name: str) -> Tuple[EntityRef, EntityRef]:
        g = self.graph
        app = g.add(K.APPLICATION_CONTEXT, APPLICATION)
        product_context = g.add(K.PRODUCT_CONTEXT, '', app, 'mechanical')
        product = g.add(K.PRODUCT, name, name, '', (product_context,))
        formation = g.add(K.PRODUCT_DEFINITION_FORMATION, '', '', product)
        definition_context = g.add(K.PRODUCT_DEFINITION_CONTEXT, 'part definition', app, 'design')
        definition = g.add(K.PRODUCT_DEFINITION, 'design', '', formation, definition_context)
        shape = g.add(K.PRODUCT_DEFINITION_SHAPE, '', '', definition)
        return product, shape

    def _add_representation_context(self) -> EntityRef:
        g = self.graph
        prefix = self.options.length_unit
        length_unit = g.add_complex([
            ('LENGTH_UNIT', ()),
            ('NAMED_UNIT', (DERIVED,)),
            ('SI_UNIT', (Enumeration(prefix) if prefix else UNSET, Enumeration('METRE'))),
        ])
        angle_unit = g.add_complex([
            ('NAMED_UNIT', (DERIVED,)),
            ('PLANE_ANGLE_UNIT', ()),
            ('SI_UNIT', (UNSET, Enumeration('RADIAN'))),
        ])
        solid_angle_unit = g.add_complex([
            ('NAMED_UNIT', (DERIVED,)),
            ('SI_UNIT', (UNSET, Enumeration('STERADIAN'))),
            ('SOLID_ANGLE_UNIT', ()),
        ])
        uncertainty = g.add(
            K.UNCERTAINTY_MEASURE_WITH_UNIT,
            Typed('LENGTH_MEASURE', float(self.options.uncertainty)),
            length_unit,
            'distance_accuracy_value',
            'confusion accuracy',
        )
        return g.add_complex([
            ('GEOMETRIC_REPRESENTATION_CONTEXT', (3,)),
            ('GLOBAL_UNCERTAINTY_ASSIGNED_CONTEXT', ((uncertainty,),)),
            ('GLOBAL_UNIT_ASSIGNED_CONTEXT', ((length_unit, angle_unit, solid_angle_unit),)),
            ('REPRESENTATION_CONTEXT', ('', '3D')),
        ])


def build_graph(source: Any, options: Optional[ExportOptions] = None) -> BuildResult:
    """Build and seal the entity graph for ``source`` in one pass."""

    builder = BrepBuilder(options)
    builder.feed(source)
    return builder.finish()


__all__ = ['APPLICATION', 'BrepBuilder', 'BuildResult', 'FaceRecord', 'build_graph']
