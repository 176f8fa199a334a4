"""Unit tests for points, circumcircles and predicates (delaunay2d/geometry.py)."""

import math
from fractions import Fraction

import numpy as np
import pytest

from delaunay2d.geometry import (
    Point,
    circumcircle,
    in_circle_fast,
    incircle,
    is_inside_square,
    orient2d,
)


def exact_orientation(a, b, c) -> int:
    ax, ay, bx, by, cx, cy = (Fraction(v) for v in (*a, *b, *c))
    det = (ax - cx) * (by - cy) - (ay - cy) * (bx - cx)
    return (det > 0) - (det < 0)


def exact_incircle(a, b, c, d) -> int:
    rows = []
    dx0, dy0 = d
    for px, py in (a, b, c):
        dx = Fraction(px) - Fraction(dx0)
        dy = Fraction(py) - Fraction(dy0)
        rows.append((dx, dy, dx * dx + dy * dy))
    (a0, a1, a2), (b0, b1, b2), (c0, c1, c2) = rows
    det = (
        a0 * (b1 * c2 - b2 * c1)
        - a1 * (b0 * c2 - b2 * c0)
        + a2 * (b0 * c1 - b1 * c0)
    )
    return (det > 0) - (det < 0)


class TestPoint:
    def test_arithmetic(self):
        assert Point(1.0, 2.0) + Point(3.0, 5.0) == Point(4.0, 7.0)
        assert Point(1.0, 2.0) - Point(3.0, 5.0) == Point(-2.0, -3.0)

    def test_mag_is_squared(self):
        assert Point(3.0, 4.0).mag() == 25.0

    def test_unpacking(self):
        x, y = Point(1.5, -2.0)
        assert (x, y) == (1.5, -2.0)

    def test_of(self):
        p = Point(1.0, 2.0)
        assert Point.of(p) is p
        assert Point.of((1, 2)) == p
        assert Point.of(np.array([1.0, 2.0])) == p
        assert isinstance(Point.of(np.array([1.0, 2.0])).x, float)

    def test_is_finite(self):
        assert Point(1.0, 2.0).is_finite()
        assert not Point(math.nan, 2.0).is_finite()
        assert not Point(1.0, math.inf).is_finite()

    def test_numpy_scalars_become_floats(self):
        p = Point(*np.array([1.5, -2.0]))
        assert type(p.x) is float and type(p.y) is float
        assert Point(np.float32(0.5), np.int64(3)) == Point(0.5, 3.0)

    def test_points_are_immutable(self):
        p = Point(1.0, 2.0)
        with pytest.raises(AttributeError):
            p.x = 3.0  # type: ignore[misc]


class TestCircumcircle:
    def test_right_triangle(self):
        center, r_sq = circumcircle(Point(0, 0), Point(10, 0), Point(0, 10))
        assert center == Point(5.0, 5.0)
        assert r_sq == 50.0

    def test_equilateral(self):
        h = 10 * math.sqrt(3) / 2
        center, r_sq = circumcircle(Point(0, 0), Point(10, 0), Point(5, h))
        assert center.x == pytest.approx(5.0)
        assert center.y == pytest.approx(h / 3)
        assert r_sq == pytest.approx(100 / 3)

    def test_vertices_lie_on_circle(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            a, b, c = (Point(*rng.uniform(-100, 100, 2)) for _ in range(3))
            center, r_sq = circumcircle(a, b, c)
            for p in (a, b, c):
                assert (p - center).mag() == pytest.approx(r_sq, rel=1e-6)

    def test_rotation_gives_same_circle(self):
        a, b, c = Point(13, 12), Point(18, 19), Point(21, 5)
        c1, r1 = circumcircle(a, b, c)
        c2, r2 = circumcircle(b, c, a)
        assert c1.x == pytest.approx(c2.x)
        assert c1.y == pytest.approx(c2.y)
        assert r1 == pytest.approx(r2)

    def test_collinear_is_not_finite(self):
        center, r_sq = circumcircle(Point(0, 0), Point(5, 0), Point(10, 0))
        assert not math.isfinite(r_sq)
        assert not center.is_finite()

    def test_coincident_is_not_finite(self):
        _, r_sq = circumcircle(Point(1, 1), Point(1, 1), Point(3, 2))
        assert not math.isfinite(r_sq)


class TestInCircleFast:
    def test_inside_on_outside(self):
        center = Point(0.0, 0.0)
        assert in_circle_fast(center, 1.0, Point(0.5, 0.0))
        assert in_circle_fast(center, 1.0, Point(1.0, 0.0))
        assert not in_circle_fast(center, 1.0, Point(1.1, 0.0))


class TestOrient2d:
    def test_counterclockwise(self):
        assert orient2d(Point(0, 0), Point(1, 0), Point(0, 1)) == 1

    def test_clockwise(self):
        assert orient2d(Point(0, 0), Point(0, 1), Point(1, 0)) == -1

    def test_collinear(self):
        assert orient2d(Point(0, 0), Point(1, 1), Point(2, 2)) == 0
        assert orient2d(Point(0.1, 0.1), Point(0.2, 0.2), Point(0.3, 0.3)) == 0

    def test_coincident(self):
        assert orient2d(Point(1, 1), Point(1, 1), Point(1, 1)) == 0

    def test_nearly_collinear_matches_exact(self):
        """Shewchuk's classic grid of perturbations around a collinear triple."""
        ulp = math.ulp(0.5)
        b, c = Point(12.0, 12.0), Point(24.0, 24.0)
        for i in range(16):
            for j in range(16):
                a = Point(0.5 + i * ulp, 0.5 + j * ulp)
                assert orient2d(a, b, c) == exact_orientation(a, b, c), (i, j)


class TestIncircle:
    def test_numpy_coordinates(self):
        a, b, c, d = (Point(*row) for row in np.array([[0, 0], [1, 0], [0, 1], [0.2, 0.2]]))
        assert incircle(a, b, c, d) == 1
        assert orient2d(a, b, c) == 1

    def test_unit_square(self):
        a, b, c = Point(0, 0), Point(1, 0), Point(1, 1)
        assert incircle(a, b, c, Point(0.5, 0.5)) == 1
        assert incircle(a, b, c, Point(0, 1)) == 0
        assert incircle(a, b, c, Point(2, 2)) == -1

    def test_clockwise_triangle_flips_sign(self):
        a, b, c = Point(0, 0), Point(1, 1), Point(1, 0)
        assert incircle(a, b, c, Point(0.5, 0.5)) == -1

    def test_near_cocircular_matches_exact(self):
        ulp = math.ulp(1.0)
        a, b, c = Point(1.0, 0.0), Point(0.0, 1.0), Point(-1.0, 0.0)
        for k in range(-8, 9):
            d = Point(0.0, -1.0 + k * ulp)
            assert incircle(a, b, c, d) == exact_incircle(a, b, c, d), k

    def test_random_points_match_exact(self):
        rng = np.random.default_rng(3)
        for _ in range(50):
            a, b, c, d = (Point(*rng.uniform(-1, 1, 2)) for _ in range(4))
            assert incircle(a, b, c, d) == exact_incircle(a, b, c, d)


class TestBoundingSquare:
    def test_strictly_inside(self):
        center = Point(0.0, 0.0)
        assert is_inside_square(center, 10.0, Point(9.99, -9.99))
        assert not is_inside_square(center, 10.0, Point(10.0, 0.0))
        assert not is_inside_square(center, 10.0, Point(0.0, -10.5))

    def test_nan_is_outside(self):
        assert not is_inside_square(Point(0.0, 0.0), 10.0, Point(math.nan, 0.0))

