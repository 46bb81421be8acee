"""Tests for the Vector2D value type."""

import math

import pytest

from vector import Vector2D


class TestArithmetic:

    def test_add_and_subtract(self):
        a = Vector2D(1, 2)
        b = Vector2D(3, -5)
        assert a.add(b) == Vector2D(4, -3)
        assert a.subtract(b) == Vector2D(-2, 7)
        assert a + b == a.add(b)
        assert a - b == a.subtract(b)

    def test_scale_and_operators(self):
        v = Vector2D(1.5, -2)
        assert v.scale(2) == Vector2D(3, -4)
        assert v * 2 == Vector2D(3, -4)
        assert 2 * v == Vector2D(3, -4)
        assert -v == Vector2D(-1.5, 2)
        assert v.reversed() == -v

    def test_dot(self):
        assert Vector2D(1, 2).dot(Vector2D(3, 4)) == 11.0
        assert Vector2D(1, 0).dot(Vector2D(0, 1)) == 0.0

    def test_operations_do_not_mutate(self):
        v = Vector2D(3, 4)
        v.add(Vector2D(1, 1))
        v.scale(10)
        v.normalized()
        assert v == Vector2D(3, 4)

    def test_is_immutable(self):
        v = Vector2D(1, 2)
        with pytest.raises(AttributeError):
            v.x = 5

    def test_components_are_floats(self):
        v = Vector2D(1, 2)
        assert isinstance(v.x, float) and isinstance(v.y, float)
        assert tuple(v) == (1.0, 2.0)
        assert v.as_tuple() == (1.0, 2.0)

    def test_adding_a_non_vector_fails(self):
        with pytest.raises(TypeError):
            Vector2D(1, 2) + (1, 2)


class TestMagnitude:

    @pytest.mark.parametrize("x, y", [(3, 4), (0, 0), (-1.5, 2.25), (1e-200, 1e-200), (-7, 0)])
    def test_magnitude_matches_formula(self, x, y):
        v = Vector2D(x, y)
        assert v.magnitude() == math.sqrt(x * x + y * y)
        assert v.magnitude() >= 0.0

    def test_magnitude_follows_new_values(self):
        v = Vector2D(3, 4)
        w = v + Vector2D(3, 4)
        assert v.magnitude() == 5.0
        assert w.magnitude() == 10.0

    def test_distance_to(self):
        assert Vector2D(1, 1).distance_to(Vector2D(4, 5)) == 5.0
        assert Vector2D(2, 2).distance_to(Vector2D(2, 2)) == 0.0


class TestZeroLength:

    def test_normalized(self):
        n = Vector2D(3, 4).normalized()
        assert n.x == pytest.approx(0.6)
        assert n.y == pytest.approx(0.8)
        assert n.magnitude() == pytest.approx(1.0)

    def test_normalized_zero_is_zero(self):
        n = Vector2D(0, 0).normalized()
        assert n == Vector2D.zero()
        assert n.is_finite()

    def test_with_magnitude(self):
        v = Vector2D(3, 4).with_magnitude(10)
        assert v.x == pytest.approx(6.0)
        assert v.y == pytest.approx(8.0)

    def test_with_magnitude_negative_flips(self):
        v = Vector2D(0, 2).with_magnitude(-3)
        assert v == Vector2D(0, -3)

    def test_with_magnitude_of_zero_points_along_x(self):
        assert Vector2D.zero().with_magnitude(4.5) == Vector2D(4.5, 0)
        assert Vector2D.zero().with_magnitude(0) == Vector2D.zero()

    def test_is_finite(self):
        assert Vector2D(1, 2).is_finite()
        assert not Vector2D(math.inf, 0).is_finite()
        assert not Vector2D(0, math.nan).is_finite()
