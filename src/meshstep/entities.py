"""In-memory STEP entity graph.

Entities are appended to an arena and refer to each other through
:class:`EntityRef` values that hold an arena position, never a numeric STEP
id.  Ids are only assigned by :mod:`meshstep.serializer` once the graph has
been sealed, so the text ``#n`` of a reference cannot be guessed or used
before every entity exists.

Field values are plain Python objects:

=====================  ===========================
Python value           STEP parameter
=====================  ===========================
``str``                ``'text'``
``float``              ``1.5``, ``1.E-06``
``int``                ``3``
``bool``               ``.T.`` / ``.F.``
``Enumeration('X')``   ``.X.``
``UNSET``              ``$``
``DERIVED``            ``*``
``Typed('K', v)``      ``K(v)``
``tuple`` / ``list``   ``(a,b,c)``
``EntityRef``          ``#n``
=====================  ===========================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, List, Sequence, Tuple, Union

from meshstep.errors import StepExportError, UnresolvedReferenceError


class EntityKind(Enum):
    """STEP entity types emitted by the encoder, with their field arity."""

    CARTESIAN_POINT = ('CARTESIAN_POINT', 2)
    VERTEX_POINT = ('VERTEX_POINT', 2)
    DIRECTION = ('DIRECTION', 2)
    VECTOR = ('VECTOR', 3)
    LINE = ('LINE', 3)
    EDGE_CURVE = ('EDGE_CURVE', 5)
    ORIENTED_EDGE = ('ORIENTED_EDGE', 5)
    EDGE_LOOP = ('EDGE_LOOP', 2)
    FACE_OUTER_BOUND = ('FACE_OUTER_BOUND', 3)
    AXIS2_PLACEMENT_3D = ('AXIS2_PLACEMENT_3D', 4)
    PLANE = ('PLANE', 2)
    ADVANCED_FACE = ('ADVANCED_FACE', 4)
    CLOSED_SHELL = ('CLOSED_SHELL', 2)
    MANIFOLD_SOLID_BREP = ('MANIFOLD_SOLID_BREP', 2)
    APPLICATION_CONTEXT = ('APPLICATION_CONTEXT', 1)
    PRODUCT_CONTEXT = ('PRODUCT_CONTEXT', 3)
    PRODUCT = ('PRODUCT', 4)
    PRODUCT_DEFINITION_FORMATION = ('PRODUCT_DEFINITION_FORMATION', 3)
    PRODUCT_DEFINITION_CONTEXT = ('PRODUCT_DEFINITION_CONTEXT', 3)
    PRODUCT_DEFINITION = ('PRODUCT_DEFINITION', 4)
    PRODUCT_DEFINITION_SHAPE = ('PRODUCT_DEFINITION_SHAPE', 3)
    UNCERTAINTY_MEASURE_WITH_UNIT = ('UNCERTAINTY_MEASURE_WITH_UNIT', 4)
    ADVANCED_BREP_SHAPE_REPRESENTATION = ('ADVANCED_BREP_SHAPE_REPRESENTATION', 3)
    SHAPE_DEFINITION_REPRESENTATION = ('SHAPE_DEFINITION_REPRESENTATION', 2)

    def __init__(self, keyword: str, arity: int) -> None:
        self.keyword = keyword
        self.arity = arity


@dataclass(frozen=True)
class EntityRef:
    """Reference to another entity by its position in the graph."""

    index: int


@dataclass(frozen=True)
class Enumeration:
    name: str


@dataclass(frozen=True)
class Typed:
    """Typed parameter such as ``LENGTH_MEASURE(1.E-06)``."""

    keyword: str
    value: Any


class Token:
    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return self.text


UNSET = Token('$')
DERIVED = Token('*')


@dataclass(frozen=True)
class Entity:
    kind: EntityKind
    fields: Tuple[Any, ...]

    @property
    def keyword(self) -> str:
        return self.kind.keyword


@dataclass(frozen=True)
class ComplexEntity:
    """External-mapping instance made of several partial entity records.

    Parts are kept in alphabetical keyword order, as ISO 10303-21 requires.
    """

    parts: Tuple[Tuple[str, Tuple[Any, ...]], ...]

    @property
    def keyword(self) -> str:
        return ' '.join(keyword for keyword, _ in self.parts)

    @property
    def fields(self) -> Tuple[Any, ...]:
        return tuple(value for _, values in self.parts for value in values)


AnyEntity = Union[Entity, ComplexEntity]


def iter_refs(value: Any) -> Iterator[EntityRef]:
    """Yield every :class:`EntityRef` nested in a field value."""

    if isinstance(value, EntityRef):
        yield value
    elif isinstance(value, Typed):
        yield from iter_refs(value.value)
    elif isinstance(value, (tuple, list)):
        for item in value:
            yield from iter_refs(item)


class EntityGraph:
    """Append-only arena of STEP entities.

    A reference can only be stored in a field once the entity it names has
    been added, so every stored reference resolves.  :meth:`seal` freezes the
    graph; ids are assigned from a sealed graph only.
    """

    def __init__(self) -> None:
        self._entities: List[AnyEntity] = []
        self._sealed = False

    def add(self, kind: EntityKind, *fields: Any) -> EntityRef:
        if len(fields) != kind.arity:
            raise TypeError(
                f"{kind.keyword} takes {kind.arity} fields, got {len(fields)}"
            )
        return self._append(Entity(kind, tuple(fields)))

    def add_complex(self, parts: Iterable[Tuple[str, Sequence[Any]]]) -> EntityRef:
        ordered = tuple(sorted(((kw, tuple(values)) for kw, values in parts),
                               key=lambda part: part[0]))
        if not ordered:
            raise TypeError('complex entity needs at least one part')
        return self._append(ComplexEntity(ordered))

    def _append(self, entity: AnyEntity) -> EntityRef:
        if self._sealed:
            raise StepExportError('cannot add entities to a sealed graph')
        for ref in iter_refs(entity.fields):
            if not 0 <= ref.index < len(self._entities):
                raise UnresolvedReferenceError(
                    f"{entity.keyword} refers to missing entity at position {ref.index}"
                )
        self._entities.append(entity)
        return EntityRef(len(self._entities) - 1)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def count(self, kind: EntityKind) -> int:
        return sum(1 for e in self._entities
                   if isinstance(e, Entity) and e.kind is kind)

    def __getitem__(self, ref: EntityRef) -> AnyEntity:
        return self._entities[ref.index]

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[AnyEntity]:
        return iter(self._entities)


__all__ = [
    'AnyEntity',
    'ComplexEntity',
    'DERIVED',
    'Entity',
    'EntityGraph',
    'EntityKind',
    'EntityRef',
    'Enumeration',
    'Token',
    'Typed',
    'UNSET',
    'iter_refs',
]
