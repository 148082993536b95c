import math

import pytest

from meshstep.errors import InvalidGeometryError
from meshstep.geometry_utils import (
    EPSILON,
    Triangle,
    X_AXIS,
    Y_AXIS,
    Z_AXIS,
    cross,
    dot,
    edge_direction,
    edge_vector,
    face_normal,
    is_degenerate,
    length,
    normalize,
    reference_direction,
    to_vec3,
)


class _Coord:
    def __init__(self, x, y, z):
        self.x = x
        self.y = y
        self.z = z


def test_to_vec3_accepts_sequences_and_attribute_points():
    assert to_vec3([1, 2, 3, 1]) == (1.0, 2.0, 3.0)
    assert to_vec3(_Coord(1, -2, 0.5)) == (1.0, -2.0, 0.5)
    assert all(isinstance(c, float) for c in to_vec3((1, 2, 3)))


@pytest.mark.parametrize('bad', [(1.0, 2.0), 7, None])
def test_to_vec3_rejects_non_points(bad):
    with pytest.raises(InvalidGeometryError):
        to_vec3(bad)


def test_to_vec3_rejects_non_finite():
    with pytest.raises(InvalidGeometryError):
        to_vec3((0.0, math.nan, 0.0))
    with pytest.raises(InvalidGeometryError):
        to_vec3((math.inf, 0.0, 0.0))


def test_edge_vector_and_cross():
    assert edge_vector((1, 2, 3), (4, 6, 8)) == (3, 4, 5)
    assert cross(X_AXIS, Y_AXIS) == Z_AXIS
    assert cross(Y_AXIS, X_AXIS) == (0.0, 0.0, -1.0)
    assert dot((1, 2, 3), (4, 5, 6)) == 32


def test_normalize_unit_length():
    n = normalize((3.0, 4.0, 0.0))
    assert n == pytest.approx((0.6, 0.8, 0.0))
    assert length(n) == pytest.approx(1.0)


def test_normalize_short_vector_unchanged():
    tiny = (EPSILON / 10, 0.0, 0.0)
    assert normalize(tiny) == tiny
    assert normalize((0.0, 0.0, 0.0)) == (0.0, 0.0, 0.0)


def test_face_normal_counter_clockwise():
    assert face_normal((0, 0, 0), (1, 0, 0), (0, 1, 0)) == (0.0, 0.0, 1.0)
    assert face_normal((0, 0, 0), (0, 1, 0), (1, 0, 0)) == (0.0, 0.0, -1.0)


def test_face_normal_degenerate_fallback():
    for tri in [((0, 0, 0), (0, 0, 0), (1, 0, 0)),
                ((0, 0, 0), (1, 1, 1), (2, 2, 2)),
                ((5, 5, 5), (5, 5, 5), (5, 5, 5))]:
        assert is_degenerate(*tri)
        n = face_normal(*tri)
        assert n == Z_AXIS
        assert not any(math.isnan(c) for c in n)


def test_face_normal_small_triangles_keep_orientation():
    assert face_normal((0, 0, 0), (0, 5e-4, 0), (5e-4, 0, 0)) == pytest.approx((0.0, 0.0, -1.0))
    assert face_normal((0, 0, 0), (5e-4, 0, 0), (0, 5e-4, 0)) == pytest.approx((0.0, 0.0, 1.0))
    assert not is_degenerate((0, 0, 0), (0, 5e-4, 0), (5e-4, 0, 0))
    assert face_normal((1e-9, 0, 0), (1e-9, 1e-9, 0), (1e-9, 0, 1e-9)) == pytest.approx(X_AXIS)


def test_degeneracy_is_independent_of_scale():
    for scale in (1e-6, 1.0, 1e6):
        assert not is_degenerate((0, 0, 0), (scale, 0, 0), (0, scale, 0))
        assert is_degenerate((0, 0, 0), (scale, scale, 0), (2 * scale, 2 * scale, 0))


def test_triangle_normal_property():
    tri = Triangle((0.0, 0.0, 0.0), (0.0, 2.0, 0.0), (0.0, 0.0, 2.0))
    assert tri.normal == pytest.approx((1.0, 0.0, 0.0))
    assert not is_degenerate(tri.v0, tri.v1, tri.v2)


def test_edge_direction():
    assert edge_direction((1, 1, 1), (1, 1, 4)) == pytest.approx((0.0, 0.0, 1.0))
    assert edge_direction((2, 2, 2), (2, 2, 2)) == X_AXIS


@pytest.mark.parametrize('normal', [
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 0.0),
    (-1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    normalize((1.0, 1.0, 1.0)),
    normalize((1.0, 1e-9, 0.0)),
])
def test_reference_direction_is_orthogonal_unit(normal):
    ref = reference_direction(normal)
    assert length(ref) == pytest.approx(1.0)
    assert abs(dot(ref, normal)) < 1e-9


def test_reference_direction_keeps_x_when_possible():
    assert reference_direction(Z_AXIS) == X_AXIS
    assert reference_direction(X_AXIS) == Y_AXIS


def test_edge_direction_short_edge_is_normalized():
    assert edge_direction((0, 0, 0), (0, 2e-7, 0)) == pytest.approx(Y_AXIS)
