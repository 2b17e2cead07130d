"""Exact lattice polytopes: Newton polytopes and the balance polyhedron.

Facet hyperplanes are found by qhull and then recomputed exactly as integer
normals, so every containment decision below is made in integer arithmetic.
"""
from __future__ import annotations

import math
from fractions import Fraction
from functools import reduce

import numpy as np
import sympy as sp
from scipy.optimize import linprog
from scipy.spatial import ConvexHull, QhullError

from .errors import InputError


def affine_dimension(points):
    """Dimension of the affine hull of the rows of points (-1 if empty)."""
    points = np.asarray(points, dtype=np.int64)
    if len(points) == 0:
        return -1
    diffs = points[1:] - points[0]
    if len(diffs) == 0:
        return 0
    return sp.Matrix(diffs.tolist()).rank()


def _primitive(vector):
    """Scale a rational vector to the primitive integer vector on the same ray."""
    lcm = reduce(sp.ilcm, [sp.Rational(v).q for v in vector], 1)
    ints = [int(sp.Rational(v) * lcm) for v in vector]
    g = reduce(math.gcd, ints, 0)
    return [v // g for v in ints] if g else ints


class LatticePolytope:
    """Convex hull of a finite set of integer points."""

    def __init__(self, points):
        self.points = np.atleast_2d(np.asarray(points, dtype=np.int64))
        self.ambient_dim = self.points.shape[1]
        self.dim = affine_dimension(self.points)
        self._facets = None

    @property
    def is_fulldimensional(self):
        return self.dim == self.ambient_dim

    @property
    def facets(self):
        """Integer H-representation (normals, offsets): normals @ p <= offsets."""
        if self._facets is None:
            if not self.is_fulldimensional:
                raise ValueError(f"{self.dim}-dimensional polytope in R^{self.ambient_dim} has no facet description")
            self._facets = self._exact_facets()
        return self._facets

    def _exact_facets(self):
        n = self.ambient_dim
        if n == 1:
            lo, hi = int(self.points.min()), int(self.points.max())
            return np.array([[1], [-1]], dtype=np.int64), np.array([hi, -lo], dtype=np.int64)

        try:
            hull = ConvexHull(self.points.astype(float))
        except QhullError as e:
            raise ValueError(f"qhull failed on a full-dimensional point set: {e}") from e

        found = {}
        for simplex in hull.simplices:
            rows = [[int(v) for v in self.points[i]] + [-1] for i in simplex]
            kernel = sp.Matrix(rows).nullspace()
            if len(kernel) != 1:
                continue
            vec = _primitive(list(kernel[0]))
            normal, offset = vec[:n], vec[n]
            values = self.points @ np.array(normal, dtype=np.int64)
            if np.all(values <= offset):
                pass
            elif np.all(values >= offset):
                normal, offset = [-v for v in normal], -offset
            else:
                raise ValueError(f"qhull facet {list(simplex)} is not a supporting hyperplane")
            found[tuple(normal) + (offset,)] = None

        keys = list(found)
        normals = np.array([k[:n] for k in keys], dtype=np.int64)
        offsets = np.array([k[n] for k in keys], dtype=np.int64)
        return normals, offsets

    def contains_strictly(self, point):
        normals, offsets = self.facets
        point = np.asarray(point, dtype=np.int64)
        return bool(np.all(normals @ point < offsets))

    def on_boundary(self, point):
        normals, offsets = self.facets
        values = normals @ np.asarray(point, dtype=np.int64)
        return bool(np.all(values <= offsets) and np.any(values == offsets))

    def is_interior_lattice_point(self, point):
        """Exact membership test against interior_lattice_points()."""
        point = np.asarray(point)
        if not np.all(np.equal(np.mod(point, 1), 0)):
            return False
        return self.contains_strictly(point.astype(np.int64))

    def interior_lattice_points(self):
        """Yield the integer points strictly inside the polytope.

        Sweeps the bounding box one slab of the first coordinate at a time;
        boundary values of any coordinate lie on a supporting hyperplane and
        are skipped.
        """
        normals, offsets = self.facets
        lo = self.points.min(axis=0)
        hi = self.points.max(axis=0)
        n = self.ambient_dim
        if n == 1:
            for x in range(int(lo[0]) + 1, int(hi[0])):
                yield (x,)
            return

        axes = [np.arange(lo[i] + 1, hi[i], dtype=np.int64) for i in range(1, n)]
        if any(len(a) == 0 for a in axes):
            return
        grid = np.stack(np.meshgrid(*axes, indexing="ij"), axis=-1).reshape(-1, n - 1)
        for x0 in range(int(lo[0]) + 1, int(hi[0])):
            slab = np.column_stack([np.full(len(grid), x0, dtype=np.int64), grid])
            inside = np.all(slab @ normals.T < offsets, axis=1)
            for p in slab[inside]:
                yield tuple(int(v) for v in p)

    def __repr__(self):
        return f"LatticePolytope({len(self.points)} points, dim={self.dim}, ambient_dim={self.ambient_dim})"


def balance_matrix(positive, negative):
    """Lifted exponent matrix [[1 ... 1, -1], [A+, -b]] of shape (n+1, m+1)."""
    positive = np.atleast_2d(np.asarray(positive, dtype=np.int64))
    negative = np.asarray(negative, dtype=np.int64)
    lifted = np.vstack([np.ones(len(positive), dtype=np.int64), positive.T])
    column = -np.concatenate([[1], negative])
    return np.column_stack([lifted, column])


def balance_point(positive, negative):
    """Strictly positive rational point of {y >= 0 : A y = 0}.

    A is balance_matrix(positive, negative).  The point is normalized so the
    negative slot equals 1; the positive slots are then barycentric weights of
    the negative exponent over the positive support.
    """
    A = balance_matrix(positive, negative)
    rows, cols = A.shape
    res = linprog(
        np.ones(cols), A_eq=A, b_eq=np.zeros(rows), bounds=[(1, None)] * cols, method="highs"
    )
    if res.status != 0:
        raise InputError(
            f"balance polyhedron has no strictly positive point: {list(negative)} is not interior to the positive support"
        )

    Am = sp.Matrix(A.tolist())
    gram = Am * Am.T
    if gram.rank() < rows:
        raise InputError("positive support is not full-dimensional")
    y = sp.Matrix([sp.Rational(float(v)) for v in res.x])
    y = y - Am.T * gram.LUsolve(Am * y)
    if any(v <= 0 for v in y):
        raise InputError("balance polyhedron has no strictly positive point")
    y = y / y[cols - 1]
    return tuple(Fraction(int(v.p), int(v.q)) for v in y)
