"""Mesh input for the STEP encoder."""

from .loader import load_mesh, mesh_from_arrays
from .stl import read_stl

__all__ = ['load_mesh', 'mesh_from_arrays', 'read_stl']
