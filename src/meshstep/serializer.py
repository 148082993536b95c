"""Id assignment and ISO 10303-21 rendering of a sealed entity graph."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, List, Sequence

from meshstep.entities import (
    AnyEntity,
    ComplexEntity,
    EntityGraph,
    EntityRef,
    Enumeration,
    Token,
    Typed,
)
from meshstep.errors import UnresolvedReferenceError

logger = logging.getLogger(__name__)


def resolve_ids(graph: EntityGraph) -> List[int]:
    """Return the STEP id of every entity, indexed by arena position.

    Ids follow creation order and form the gapless range ``1..N``.
    """

    if not graph.sealed:
        raise UnresolvedReferenceError('entity ids requested before the graph was sealed')
    return list(range(1, len(graph) + 1))


def format_real(value: float) -> str:
    """Render a float as a STEP ``REAL`` that round-trips exactly.

    >>> format_real(1.0), format_real(1e-06), format_real(-0.0)
    ('1.0', '1.E-06', '0.0')
    """

    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"cannot encode non-finite value {value!r} as a STEP REAL")
    if value == 0.0:
        return '0.0'
    text = repr(value)
    if 'e' in text:
        mantissa, exponent = text.split('e')
        if '.' not in mantissa:
            mantissa += '.'
        return f"{mantissa}E{exponent}"
    return text


# characters outside the printable ASCII range must be written as control directives
_NON_PRINTABLE = re.compile(r'[^\x20-\x7e]+')
_ASTRAL = re.compile('([\U00010000-\U0010ffff]+)')


def _encode_run(match: re.Match) -> str:
    parts = []
    for chunk in _ASTRAL.split(match.group(0)):
        if not chunk:
            continue
        if ord(chunk[0]) > 0xFFFF:
            parts.append('\\X4\\' + ''.join(f'{ord(c):08X}' for c in chunk) + '\\X0\\')
        else:
            parts.append('\\X2\\' + ''.join(f'{ord(c):04X}' for c in chunk) + '\\X0\\')
    return ''.join(parts)


def format_string(text: str) -> str:
    """Quote ``text`` as a STEP ``STRING``.

    Apostrophes and backslashes are doubled; every run of non-ASCII or
    control characters becomes a ``\\X2\\`` (UCS-2) or ``\\X4\\`` (UCS-4)
    hex block closed by ``\\X0\\``.

    >>> print(format_string("Müller's"))
    'M\\X2\\00FC\\X0\\ller''s'
    """

    escaped = text.replace('\\', '\\\\').replace("'", "''")
    return "'" + _NON_PRINTABLE.sub(_encode_run, escaped) + "'"


def format_value(value: Any, ids: Sequence[int]) -> str:
    # bool is an int subclass, so it goes first
    if isinstance(value, bool):
        return '.T.' if value else '.F.'
    if isinstance(value, EntityRef):
        if not 0 <= value.index < len(ids):
            raise UnresolvedReferenceError(f"no entity at position {value.index}")
        return f"#{ids[value.index]}"
    if isinstance(value, str):
        return format_string(value)
    if isinstance(value, float):
        return format_real(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Enumeration):
        return f".{value.name}."
    if isinstance(value, Token):
        return value.text
    if isinstance(value, Typed):
        return f"{value.keyword}({format_value(value.value, ids)})"
    if isinstance(value, (tuple, list)):
        return '(' + ','.join(format_value(item, ids) for item in value) + ')'
    raise TypeError(f"unsupported STEP field value: {value!r}")


def _format_fields(fields: Sequence[Any], ids: Sequence[int]) -> str:
    return ','.join(format_value(value, ids) for value in fields)


def render_entity(entity: AnyEntity, entity_id: int, ids: Sequence[int]) -> str:
    """Render one entity instance as a single ``#id = ...;`` line."""

    if isinstance(entity, ComplexEntity):
        parts = ' '.join(f"{keyword}({_format_fields(values, ids)})"
                         for keyword, values in entity.parts)
        return f"#{entity_id} = ( {parts} );"
    return f"#{entity_id} = {entity.keyword}({_format_fields(entity.fields, ids)});"


def render_entities(graph: EntityGraph) -> List[str]:
    """Render every entity of a sealed graph, in id order."""

    ids = resolve_ids(graph)
    lines = [render_entity(entity, ids[pos], ids) for pos, entity in enumerate(graph)]
    logger.debug("rendered %d entity lines", len(lines))
    return lines


__all__ = [
    'format_real',
    'format_string',
    'format_value',
    'render_entities',
    'render_entity',
    'resolve_ids',
]
