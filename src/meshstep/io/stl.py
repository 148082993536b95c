"""STL reading into :class:`~meshstep.mesh.TriangleMesh` triangle soups."""

from __future__ import annotations

import re
import struct
from typing import List

from meshstep.errors import InvalidGeometryError
from meshstep.geometry_utils import Triangle
from meshstep.mesh import TriangleMesh

_HEADER_SIZE = 80
_STRUCT_TRIANGLE = struct.Struct('<12fH')

_NUMBER = r'([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)'
_VERTEX = r'vertex\s+' + r'\s+'.join([_NUMBER] * 3) + r'\s+'
_FACET_PATTERN = re.compile(
    r'facet\s+normal\s+\S+\s+\S+\s+\S+\s+'
    r'outer\s+loop\s+'
    + _VERTEX * 3
    + r'endloop\s+endfacet',
    re.IGNORECASE,
)


def _is_binary_stl(data: bytes) -> bool:
    """Determine if STL data is binary format.

    Binary STL has 80-byte header + 4-byte count, then 50 bytes per triangle.
    ASCII STL starts with 'solid' keyword.
    """
    if len(data) < 84:
        return False

    header = data[:_HEADER_SIZE].decode('ascii', errors='ignore').strip().lower()
    if not header.startswith('solid'):
        return True
    # 'solid' may just be the start of a binary header
    tri_count = struct.unpack('<I', data[80:84])[0]
    if len(data) != 84 + tri_count * 50:
        return False
    rest = data[84:min(200, len(data))]
    return not (b'facet' in rest or b'vertex' in rest)


def _parse_binary_stl(data: bytes) -> List[Triangle]:
    tri_count = struct.unpack('<I', data[80:84])[0]
    if len(data) < 84 + tri_count * 50:
        raise InvalidGeometryError(
            f"truncated binary STL: {tri_count} triangles declared, "
            f"{(len(data) - 84) // 50} present"
        )
    triangles = []
    offset = 84
    for _ in range(tri_count):
        values = _STRUCT_TRIANGLE.unpack_from(data, offset)
        triangles.append(Triangle(v0=(values[3], values[4], values[5]),
                                  v1=(values[6], values[7], values[8]),
                                  v2=(values[9], values[10], values[11])))
        offset += 50
    return triangles


def _parse_ascii_stl(text: str) -> List[Triangle]:
    triangles = []
    for match in _FACET_PATTERN.finditer(text):
        vals = [float(g) for g in match.groups()]
        triangles.append(Triangle(v0=(vals[0], vals[1], vals[2]),
                                  v1=(vals[3], vals[4], vals[5]),
                                  v2=(vals[6], vals[7], vals[8])))
    return triangles


def read_stl(path_or_file) -> TriangleMesh:
    """Read an STL file as a triangle soup.

    Facet normals stored in the file are ignored; corners are kept exactly
    as stored so the STEP encoder sees the original coordinates.

    Parameters
    ----------
    path_or_file : str or path-like or file-like
        Path to STL file, or an open binary file object.

    Returns
    -------
    TriangleMesh
        Three vertices per facet, facets in file order.
    """
    if hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()

    if _is_binary_stl(data):
        triangles = _parse_binary_stl(data)
    else:
        triangles = _parse_ascii_stl(data.decode('utf-8', errors='replace'))
    return TriangleMesh.from_triangles(triangles)


__all__ = ['read_stl']
