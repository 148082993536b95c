"""STEP export entry points.

:func:`export_step` is a pure function of the triangle sequence: it builds
the entity graph, assigns ids, renders the data section and wraps it in the
exchange-structure header and trailer.  Only :func:`write_step` and
:meth:`ExportedFile.save` touch the filesystem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, TextIO, Union

from meshstep.builder import build_graph
from meshstep.config import ExportOptions
from meshstep.document import assemble, render_header
from meshstep.errors import StepExportError
from meshstep.serializer import render_entities

logger = logging.getLogger(__name__)

STEP_EXTENSIONS = ('step', 'stp')


class FileFormat(Enum):
    TEXT = 'text'
    BINARY = 'binary'


@dataclass
class ExportedFile:
    """A named export artifact held in memory."""

    name: str
    content: Union[str, bytes] = ''

    def save(self, directory: Path | str) -> Path:
        target = Path(directory) / self.name
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(self.content, bytes):
            target.write_bytes(self.content)
        else:
            target.write_text(self.content, encoding='utf-8')
        logger.info("wrote %s", target)
        return target


@dataclass
class StepExport:
    """Result of one export call."""

    text: str
    face_count: int
    vertex_count: int
    entity_count: int
    degenerate_faces: List[int] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return not self.warnings


def export_step(source: Any, options: Optional[ExportOptions] = None) -> StepExport:
    """Encode ``source`` as a STEP document.

    ``source`` is either an object exposing ``enumerate_triangles(visit)``
    or an iterable of triangles, each a :class:`~meshstep.geometry_utils.Triangle`
    or a ``(p0, p1, p2)`` triple of points.  Degenerate triangles and empty
    input do not raise; they are reported in :attr:`StepExport.warnings`.
    """

    options = options or ExportOptions()
    result = build_graph(source, options)
    text = assemble(render_header(options), render_entities(result.graph))
    logger.info("exported %d faces (%d vertices, %d entities) as %s",
                result.face_count, result.vertex_count, len(result.graph),
                options.file_name)
    return StepExport(
        text=text,
        face_count=result.face_count,
        vertex_count=result.vertex_count,
        entity_count=len(result.graph),
        degenerate_faces=result.degenerate_faces,
        warnings=list(result.warnings),
    )


def export_step_text(source: Any, options: Optional[ExportOptions] = None) -> str:
    return export_step(source, options).text


def write_step(source: Any,
               path_or_file,
               options: Optional[ExportOptions] = None) -> StepExport:
    """Export ``source`` and write it to a path or an open text stream."""

    export = export_step(source, options)
    close_stream = False
    if hasattr(path_or_file, 'write'):
        stream: TextIO = path_or_file
    else:
        stream = open(path_or_file, 'w', encoding='utf-8')
        close_stream = True

    try:
        stream.write(export.text)
    finally:
        if close_stream:
            stream.close()
    return export


class StepExporter:
    """Exporter producing a single ``model.step`` text artifact."""

    def __init__(self, options: Optional[ExportOptions] = None) -> None:
        self.options = options or ExportOptions()

    def can_export(self, format: FileFormat, extension: str) -> bool:
        return format is FileFormat.TEXT and extension.lower().lstrip('.') in STEP_EXTENSIONS

    def export(self, model: Any, format: FileFormat = FileFormat.TEXT) -> List[ExportedFile]:
        if format is not FileFormat.TEXT:
            raise StepExportError(f"STEP export only supports text output, not {format.value}")
        export = export_step(model, self.options)
        return [ExportedFile(self.options.file_name, export.text)]


__all__ = [
    'ExportedFile',
    'FileFormat',
    'STEP_EXTENSIONS',
    'StepExport',
    'StepExporter',
    'export_step',
    'export_step_text',
    'write_step',
]
