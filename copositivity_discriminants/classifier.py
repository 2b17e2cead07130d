"""Is a signed support nonseparable?

The support (A+, A-) is nonseparable when, for every regular triangulation of
A+, every maximal simplex sigma satisfies one of

    1. sigma contains no point of A-,
    2. sigma contains all points of A-,
    3. sigma contains some points of A-, and those all lie on a common facet
       of sigma (they share a zero barycentric coordinate).

Negative exponents must additionally be interior lattice points of conv(A+),
which must be full-dimensional.  Containment uses barycentric coordinates
with a tolerance; both degenerate cases fail closed.
"""
from __future__ import annotations

import logging

import numpy as np

from .errors import EnumerationLimitError, EnumerationTimeoutError
from .options import CheckOptions
from .polytope import LatticePolytope
from .support import split_support
from .triangulations import barycentric_coordinates, barycentric_inverse, regular_triangulations

logger = logging.getLogger(__name__)


def simplex_separates(vertices, negatives, tol=1e-9):
    """True if the simplex splits A- without a common facet (case 3 fails)."""
    vertices = np.asarray(vertices, dtype=float)
    k = len(vertices)
    lifted = np.vstack([vertices.T, np.ones(k)])
    if np.linalg.matrix_rank(lifted) < k:
        return False
    inverse = barycentric_inverse(vertices)

    contained = []
    for b in negatives:
        lam = barycentric_coordinates(inverse, b)
        if np.all(lam >= -tol):
            contained.append(lam)
    if not contained or len(contained) == len(negatives):
        return False

    common = set(range(k))
    for lam in contained:
        common &= {i for i in range(k) if abs(lam[i]) <= tol}
    return not common


def signed_support_is_nonseparable(positive, negative, tol=1e-9, verbose=True, max_triangulations=None,
                                   time_budget=None):
    positive = np.asarray(positive, dtype=np.int64)
    negative = np.asarray(negative, dtype=np.int64)
    if positive.size == 0:
        return False
    positive = np.atleast_2d(positive)
    negative = negative.reshape(-1, positive.shape[1])

    hull = LatticePolytope(positive)
    if not hull.is_fulldimensional:
        if verbose:
            logger.warning("Convex hull of positive exponents is not full dimensional.")
        return False

    outside = [b for b in negative if not hull.is_interior_lattice_point(b)]
    if outside:
        if verbose:
            if all(hull.on_boundary(b) for b in outside):
                logger.info("The signed support has negative terms on the boundary.")
            else:
                logger.info("The signed support has negative terms outside the hull of the positive exponents.")
        return False

    try:
        for number, cells in enumerate(regular_triangulations(positive, max_triangulations, time_budget=time_budget), 1):
            for sigma in cells:
                if simplex_separates(positive[list(sigma)], negative, tol):
                    logger.debug("triangulation %d separates the negatives in simplex %s", number, sigma)
                    return False
    except (EnumerationLimitError, EnumerationTimeoutError) as e:
        if verbose:
            logger.warning("Giving up on the nonseparability check: %s", e)
        return False
    return True


def nonseparable_support(p, tol=None, verbose=None, *, split=split_support, max_triangulations=None, time_budget=None,
                         options=None):
    """Decide whether the signed support of p is nonseparable.

    split maps the polynomial to (A+, A-) exponent arrays; the default splits
    a sympy polynomial by coefficient sign.  Arguments left as None come from
    options (tol=1e-9, verbose=True by default).  Returns False on degenerate
    supports (non-full-dimensional A+, negatives not strictly interior) and
    when more than max_triangulations regular triangulations exist or their
    enumeration takes longer than time_budget seconds.
    """
    options = options or CheckOptions()
    positive, negative = split(p)
    return signed_support_is_nonseparable(
        positive,
        negative,
        tol=options.tol if tol is None else tol,
        verbose=options.verbose if verbose is None else verbose,
        max_triangulations=options.max_triangulations if max_triangulations is None else max_triangulations,
        time_budget=options.time_budget if time_budget is None else time_budget,
    )
