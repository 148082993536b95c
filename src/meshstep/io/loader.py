"""Load mesh files from disk as :class:`~meshstep.mesh.TriangleMesh`."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from meshstep.errors import InvalidGeometryError
from meshstep.io.stl import read_stl
from meshstep.mesh import TriangleMesh

logger = logging.getLogger(__name__)


def mesh_from_arrays(vertices, faces) -> TriangleMesh:
    """Build a mesh from an ``(n, 3)`` vertex array and ``(m, 3)`` face array."""

    verts = np.asarray(vertices, dtype=float).reshape(-1, 3)
    tris = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    if not np.isfinite(verts).all():
        raise InvalidGeometryError('mesh contains non-finite vertex coordinates')
    return TriangleMesh(
        vertices=[tuple(v) for v in verts.tolist()],
        triangles=[tuple(f) for f in tris.tolist()],
    )


def load_mesh(path: Path | str) -> TriangleMesh:
    """Load ``path`` keeping vertex order and coordinates untouched.

    STL files are read directly; every other format goes through trimesh
    with processing disabled so no vertices are merged or reordered.
    """

    mesh_path = Path(path)
    if not mesh_path.exists():
        raise FileNotFoundError(f"mesh not found: {mesh_path}")
    if mesh_path.suffix.lower() == '.stl':
        mesh = read_stl(mesh_path)
    else:
        import trimesh  # imported lazily, only needed for non-STL formats

        try:
            loaded = trimesh.load(str(mesh_path), force='mesh', process=False)
        except Exception as exc:  # pragma: no cover - depends on trimesh loaders
            raise InvalidGeometryError(f"failed to load {mesh_path}: {exc}") from exc
        if not isinstance(loaded, trimesh.Trimesh):
            raise InvalidGeometryError(f"{mesh_path} does not contain a triangle mesh")
        mesh = mesh_from_arrays(loaded.vertices, loaded.faces)
    logger.info("loaded %s: %d vertices, %d triangles",
                mesh_path, len(mesh.vertices), mesh.triangle_count)
    return mesh


__all__ = ['load_mesh', 'mesh_from_arrays']
