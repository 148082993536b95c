import pytest

from meshstep.errors import InvalidGeometryError
from meshstep.geometry_utils import Triangle
from meshstep.mesh import TriangleMesh, as_triangle, iter_triangles


def _square_mesh():
    return TriangleMesh(
        vertices=[(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)],
        triangles=[(0, 1, 2), (0, 2, 3)],
    )


def test_enumerate_triangles_visits_in_order():
    seen = []
    _square_mesh().enumerate_triangles(lambda p0, p1, p2: seen.append((p0, p1, p2)))
    assert seen == [
        ((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)),
        ((0.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)),
    ]


def test_add_vertex_and_triangle():
    mesh = TriangleMesh()
    a = mesh.add_vertex((0, 0, 0))
    b = mesh.add_vertex((1, 0, 0))
    c = mesh.add_vertex((0, 1, 0))
    assert mesh.add_triangle(a, b, c) == 0
    assert mesh.triangle_count == 1


def test_bad_index_rejected():
    with pytest.raises(InvalidGeometryError):
        TriangleMesh(vertices=[(0, 0, 0)], triangles=[(0, 1, 2)])
    mesh = _square_mesh()
    with pytest.raises(InvalidGeometryError):
        mesh.add_triangle(0, 1, -1)


def test_from_triangles_builds_soup():
    mesh = TriangleMesh.from_triangles([((0, 0, 0), (1, 0, 0), (0, 1, 0))] * 2)
    assert len(mesh.vertices) == 6
    assert mesh.triangles == [(0, 1, 2), (3, 4, 5)]


def test_iter_triangles_from_callback_and_iterable():
    from_mesh = list(iter_triangles(_square_mesh()))
    assert len(from_mesh) == 2
    assert all(isinstance(t, Triangle) for t in from_mesh)
    from_list = list(iter_triangles([(t.v0, t.v1, t.v2) for t in from_mesh]))
    assert from_list == from_mesh


def test_as_triangle_validation():
    tri = Triangle((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert as_triangle(tri) is tri
    with pytest.raises(InvalidGeometryError):
        as_triangle(5)
    with pytest.raises(InvalidGeometryError):
        as_triangle([(0, 0, 0)] * 4)
