# -*- coding: utf-8 -*-
"""Encode triangle meshes as faceted ISO 10303-21 (STEP) B-Rep solids."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("meshstep")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from meshstep.config import ExportOptions  # noqa: E402
from meshstep.errors import (  # noqa: E402
    ConfigError,
    InvalidGeometryError,
    StepExportError,
    UnresolvedReferenceError,
)
from meshstep.exporter import (  # noqa: E402
    ExportedFile,
    FileFormat,
    StepExport,
    StepExporter,
    export_step,
    export_step_text,
    write_step,
)
from meshstep.mesh import TriangleMesh  # noqa: E402

__all__ = [
    '__version__',
    'ConfigError',
    'ExportOptions',
    'ExportedFile',
    'FileFormat',
    'InvalidGeometryError',
    'StepExport',
    'StepExportError',
    'StepExporter',
    'TriangleMesh',
    'UnresolvedReferenceError',
    'export_step',
    'export_step_text',
    'write_step',
]
