"""Enumeration of all regular triangulations of a point configuration.

A height vector w on the points induces the regular subdivision whose cells
are the projections of the lower faces of the lifted points (p_i, w_i).  For a
simplex sigma and a point j outside it, the folding form

    g_{sigma,j}(w) = w_j - sum_i lambda_i(j) w_{sigma_i}

(lambda(j) = barycentric coordinates of p_j with respect to sigma) measures
how far the lifted p_j sits above the hyperplane through the lifted sigma.

The heights inducing a fixed triangulation T form an open cone C(T) (a
chamber of the secondary fan).  The lifting is convex iff it is convex across
every interior ridge, so C(T) is cut out by the local folding forms alone: one
per interior ridge (the apex of the neighbouring cell over this cell) and one
per unused point (over a cell containing it).  Each facet of C(T) lies on the
hyperplane of a circuit, and the triangulation across it is the flip of T on
that circuit.  All regular triangulations are reached breadth first.

Exact arithmetic uses Fraction throughout.  qhull proposes the first
triangulation and scipy's LP solver finds points on the walls; both answers
are checked exactly before use.
"""
from __future__ import annotations

import logging
import random
from collections import deque
from fractions import Fraction
from itertools import combinations
from time import monotonic

import numpy as np
from scipy.optimize import linprog
from scipy.spatial import ConvexHull, QhullError

from .errors import EnumerationLimitError, EnumerationTimeoutError
from .polytope import LatticePolytope, affine_dimension

logger = logging.getLogger(__name__)

# Wall detection threshold for the LP slack, and how often the crossing step halves.
WALL_SLACK = 1e-9
MAX_CROSSING_HALVINGS = 96


def _invert(M):
    """Gauss-Jordan inverse of a square Fraction matrix, None if singular."""
    n = len(M)
    A = [list(row) + [Fraction(int(i == j)) for j in range(n)] for i, row in enumerate(M)]
    for col in range(n):
        pivot = next((r for r in range(col, n) if A[r][col] != 0), None)
        if pivot is None:
            return None
        A[col], A[pivot] = A[pivot], A[col]
        inv_p = 1 / A[col][col]
        A[col] = [v * inv_p for v in A[col]]
        for r in range(n):
            if r != col and A[r][col] != 0:
                f = A[r][col]
                A[r] = [a - f * b for a, b in zip(A[r], A[col])]
    return [row[n:] for row in A]


def _dot(g, w):
    return sum(a * b for a, b in zip(g, w))


def barycentric_inverse(vertices):
    """Float inverse of [V^T; 1] for an (n+1) x n vertex array."""
    vertices = np.asarray(vertices, dtype=float)
    k = len(vertices)
    return np.linalg.inv(np.vstack([vertices.T, np.ones(k)]))


def barycentric_coordinates(inverse, point):
    return inverse @ np.append(np.asarray(point, dtype=float), 1.0)


def _ridges(cells):
    """Map each ridge of the cells to its (cell, opposite vertex) pairs."""
    ridges = {}
    for sigma in sorted(cells):
        for a in sigma:
            ridges.setdefault(tuple(i for i in sigma if i != a), []).append((sigma, a))
    return ridges


class _Chambers:
    """Secondary-fan chambers of a full-dimensional point configuration."""

    def __init__(self, points):
        self.points = [tuple(int(v) for v in p) for p in points]
        self.m = len(self.points)
        self.n = len(self.points[0])
        self._inverses = {}
        normals, offsets = LatticePolytope(points).facets
        self._facets = [(tuple(int(v) for v in a), int(b)) for a, b in zip(normals, offsets)]

    def inverse(self, sigma):
        if sigma not in self._inverses:
            M = [[Fraction(self.points[i][r]) for i in sigma] for r in range(self.n)]
            M.append([Fraction(1)] * (self.n + 1))
            self._inverses[sigma] = _invert(M)
        return self._inverses[sigma]

    def barycentric(self, sigma, j):
        rhs = [Fraction(v) for v in self.points[j]] + [Fraction(1)]
        return [_dot(row, rhs) for row in self.inverse(sigma)]

    def height_above(self, sigma, j, w):
        return w[j] - _dot(self.barycentric(sigma, j), [w[s] for s in sigma])

    def form(self, sigma, j):
        """g_{sigma,j} as a dense vector, scaled so its first nonzero entry is +-1."""
        g = [Fraction(0)] * self.m
        g[j] = Fraction(1)
        for l, s in zip(self.barycentric(sigma, j), sigma):
            g[s] -= l
        lead = next(abs(v) for v in g if v != 0)
        return tuple(v / lead for v in g)

    def subdivision(self, w):
        """Cells of the regular subdivision at w by scanning every simplex.

        Returns None if the subdivision is not a triangulation.
        """
        cells = []
        for sigma in combinations(range(self.m), self.n + 1):
            if self.inverse(sigma) is None:
                continue
            values = [self.height_above(sigma, j, w) for j in range(self.m) if j not in sigma]
            if any(v < 0 for v in values):
                continue
            if any(v == 0 for v in values):
                return None
            cells.append(sigma)
        return frozenset(cells)

    def _on_hull_boundary(self, ridge):
        return any(all(_dot(normal, self.points[i]) == offset for i in ridge) for normal, offset in self._facets)

    def lower_hull(self, w):
        """Regular triangulation at w from qhull, or None if it fails the exact check.

        Every cell must lie strictly below all other lifted points, and every
        ridge seen by only one cell must lie on the boundary of the hull.
        """
        heights = np.array([float(v) for v in w])
        coords = np.array(self.points, dtype=float)
        scale = max(1.0, float(np.ptp(coords, axis=0).max()))
        heights = (heights - heights.min()) / (np.ptp(heights) or 1.0) * scale
        try:
            hull = ConvexHull(np.column_stack([coords, heights]))
        except (QhullError, ValueError):
            return None
        cells = {
            tuple(sorted(int(i) for i in simplex))
            for simplex, eq in zip(hull.simplices, hull.equations)
            if eq[self.n] < -1e-9
        }
        if not cells:
            return None
        for sigma in cells:
            if self.inverse(sigma) is None:
                return None
            if any(self.height_above(sigma, j, w) <= 0 for j in range(self.m) if j not in sigma):
                return None
        for ridge, sides in _ridges(cells).items():
            if len(sides) > 2 or (len(sides) == 1 and not self._on_hull_boundary(ridge)):
                return None
        return frozenset(cells)

    def initial(self, seed):
        rng = random.Random(seed)
        for _ in range(100):
            w = [Fraction(rng.randint(1, 10**9)) for _ in range(self.m)]
            cells = self.lower_hull(w)
            if cells is None:
                logger.debug("qhull lower hull failed the exact check; scanning all simplices")
                cells = self.subdivision(w)
            if cells is not None:
                return cells
        raise RuntimeError("could not find a generic height vector")

    def _containing(self, cells, j):
        for sigma in sorted(cells):
            if all(l >= 0 for l in self.barycentric(sigma, j)):
                return sigma
        raise RuntimeError(f"point {j} is not covered by the triangulation")

    def walls(self, cells):
        """Distinct local folding forms of a triangulation; C(T) is where all are positive."""
        found = {}
        for sides in _ridges(cells).values():
            if len(sides) == 2:
                (sigma, _), (_, apex) = sides
                found.setdefault(self.form(sigma, apex), None)
        used = {i for sigma in cells for i in sigma}
        for j in range(self.m):
            if j not in used:
                found.setdefault(self.form(self._containing(cells, j), j), None)
        return list(found)

    @staticmethod
    def flip(cells, wall):
        """Flip on the circuit of wall, from the side where wall is positive."""
        positive = {i for i, v in enumerate(wall) if v > 0}
        negative = {i for i, v in enumerate(wall) if v < 0}
        circuit = positive | negative
        removed, links = set(), set()
        for sigma in cells:
            for z in positive:
                face = circuit - {z}
                if face <= set(sigma):
                    removed.add(sigma)
                    links.add(tuple(sorted(set(sigma) - face)))
        added = {tuple(sorted((circuit - {z}) | set(link))) for z in negative for link in links}
        return frozenset((set(cells) - removed) | added)

    def _wall_point(self, wall, others):
        """Exact point in the relative interior of the wall, None if wall is not a facet."""
        m = self.m
        c = np.zeros(m + 1)
        c[-1] = -1.0
        A_eq = np.array([[float(v) for v in wall] + [0.0]])
        A_ub = np.array([[-float(v) for v in g] + [1.0] for g in others]) if others else None
        b_ub = np.zeros(len(others)) if others else None
        res = linprog(c, A_ub=A_ub, b_ub=b_ub, A_eq=A_eq, b_eq=[0.0],
                      bounds=[(-1, 1)] * m + [(None, 1)], method="highs")
        if res.status != 0 or -res.fun <= WALL_SLACK:
            return None
        w = [Fraction(float(v)) for v in res.x[:m]]
        scale = _dot(wall, w) / _dot(wall, wall)
        w = [x - scale * a for x, a in zip(w, wall)]
        if any(_dot(g, w) <= 0 for g in others):
            logger.debug("wall point lost strict feasibility after snapping; slack %g", -res.fun)
            return None
        return w

    def neighbours(self, cells):
        """Triangulations across each facet of the chamber of cells."""
        ineqs = self.walls(cells)
        for k, wall in enumerate(ineqs):
            others = ineqs[:k] + ineqs[k + 1:]
            w = self._wall_point(wall, others)
            if w is None:
                continue
            other = self.flip(cells, wall)
            other_walls = self.walls(other)
            eps = Fraction(1, 8)
            for _ in range(MAX_CROSSING_HALVINGS):
                across = [x - eps * a for x, a in zip(w, wall)]
                if all(_dot(g, across) > 0 for g in other_walls):
                    yield other
                    break
                eps /= 2
            else:
                raise RuntimeError(f"flip across wall {k} of a chamber with {len(cells)} cells is not regular")


def _as_cells(cells):
    return tuple(sorted(tuple(sorted(sigma)) for sigma in cells))


def regular_triangulations(points, max_triangulations=None, seed=0, time_budget=None):
    """Lazily yield every regular triangulation of a full-dimensional point set.

    Each triangulation is a sorted tuple of maximal simplices, each a sorted
    tuple of row indices into points.  The sequence is finite and its order is
    fixed by seed; calling again restarts it.  Raises EnumerationLimitError
    before yielding more than max_triangulations of them, and
    EnumerationTimeoutError once time_budget seconds have passed.
    """
    points = np.atleast_2d(np.asarray(points, dtype=np.int64))
    if affine_dimension(points) != points.shape[1]:
        raise ValueError("regular triangulations need a full-dimensional point set")

    started = monotonic()
    fan = _Chambers(points)
    start = fan.initial(seed)
    seen = {start}
    queue = deque([start])
    count = 0
    while queue:
        cells = queue.popleft()
        count += 1
        if max_triangulations is not None and count > max_triangulations:
            raise EnumerationLimitError(max_triangulations)
        if time_budget is not None and monotonic() - started > time_budget:
            raise EnumerationTimeoutError(time_budget)
        yield _as_cells(cells)
        for other in fan.neighbours(cells):
            if other not in seen:
                seen.add(other)
                queue.append(other)
    logger.debug("enumerated %d regular triangulations of %d points", count, len(points))
