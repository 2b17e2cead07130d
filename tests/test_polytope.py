"""Exact Newton polytope facts and the balance point."""

from fractions import Fraction

import pytest

from copositivity_discriminants import InputError, LatticePolytope
from copositivity_discriminants.polytope import affine_dimension, balance_matrix, balance_point

SQUARE = [[0, 0], [2, 0], [0, 2], [2, 2]]
TRIANGLE = [[0, 0], [3, 0], [0, 3]]


class TestLatticePolytope:
    def test_dimension(self):
        assert affine_dimension(SQUARE) == 2
        assert affine_dimension([[0, 0], [1, 1], [2, 2]]) == 1
        assert affine_dimension([[5, 5]]) == 0
        assert LatticePolytope(SQUARE).is_fulldimensional
        assert not LatticePolytope([[0, 0], [1, 1], [2, 2]]).is_fulldimensional

    def test_square_facets(self):
        normals, offsets = LatticePolytope(SQUARE).facets
        found = {(tuple(int(v) for v in a), int(b)) for a, b in zip(normals, offsets)}
        assert found == {((1, 0), 2), ((-1, 0), 0), ((0, 1), 2), ((0, -1), 0)}

    def test_facets_need_full_dimension(self):
        with pytest.raises(ValueError):
            LatticePolytope([[0, 0], [1, 1], [2, 2]]).facets

    def test_interior_and_boundary(self):
        square = LatticePolytope(SQUARE)
        assert square.is_interior_lattice_point([1, 1])
        assert not square.is_interior_lattice_point([1, 0])
        assert square.on_boundary([1, 0])
        assert square.on_boundary([2, 2])
        assert not square.on_boundary([1, 1])
        assert not square.on_boundary([3, 1])
        assert not square.is_interior_lattice_point([1.5, 1])

    def test_interior_lattice_points(self):
        assert list(LatticePolytope(TRIANGLE).interior_lattice_points()) == [(1, 1)]
        assert list(LatticePolytope([[0, 0], [2, 0], [0, 2]]).interior_lattice_points()) == []
        assert list(LatticePolytope([[0], [4]]).interior_lattice_points()) == [(1,), (2,), (3,)]

    def test_interior_points_match_membership(self):
        pentagon = LatticePolytope([[0, 0], [4, 0], [5, 3], [2, 5], [-1, 3]])
        points = set(pentagon.interior_lattice_points())
        for x in range(-2, 7):
            for y in range(-1, 7):
                assert ((x, y) in points) == pentagon.is_interior_lattice_point([x, y])

    def test_simplex_in_four_dimensions(self):
        exps = [[40, 0, 0, 0], [0, 40, 0, 0], [0, 0, 40, 0], [0, 0, 0, 40], [0, 0, 0, 0]]
        newton = LatticePolytope(exps)
        assert newton.is_fulldimensional
        assert len(newton.facets[0]) == 5
        assert newton.is_interior_lattice_point([1, 1, 1, 1])
        assert not newton.is_interior_lattice_point([0, 1, 1, 1])
        assert not newton.is_interior_lattice_point([10, 10, 10, 10])


class TestBalancePoint:
    def test_matrix(self):
        A = balance_matrix(TRIANGLE, [1, 1])
        assert A.tolist() == [[1, 1, 1, -1], [0, 3, 0, -1], [0, 0, 3, -1]]

    def test_triangle(self):
        assert balance_point(TRIANGLE, [1, 1]) == (Fraction(1, 3),) * 3 + (Fraction(1),)

    def test_weights_are_barycentric(self):
        positive = [[40, 0, 0, 0], [0, 40, 0, 0], [0, 0, 40, 0], [0, 0, 0, 40], [0, 0, 0, 0]]
        y = balance_point(positive, [1, 1, 1, 1])
        assert y == (Fraction(1, 40),) * 4 + (Fraction(9, 10), Fraction(1))
        assert sum(y[:-1]) == 1

    def test_boundary_point_has_no_positive_weights(self):
        with pytest.raises(InputError):
            balance_point([[0, 0], [2, 0], [0, 2]], [1, 1])
