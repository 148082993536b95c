"""Exceptions raised by the STEP encoder."""

from __future__ import annotations


class StepExportError(Exception):
    """Base class for every error raised by :mod:`meshstep`."""


class InvalidGeometryError(StepExportError, ValueError):
    """Input coordinates or mesh indices that cannot be encoded."""


class UnresolvedReferenceError(StepExportError):
    """An entity reference was rendered or validated outside a sealed graph.

    Reaching this means the encoder itself is broken; the builder never
    hands out a reference to an entity that does not exist.
    """


class ConfigError(StepExportError, ValueError):
    """Malformed export configuration."""


__all__ = [
    'StepExportError',
    'InvalidGeometryError',
    'UnresolvedReferenceError',
    'ConfigError',
]
