"""Certified-homotopy copositivity check.

Validate -> build -> solve & certify -> decide, in one pass.  The solver is
injected; by default HomotopyContinuation.jl is used through juliacall.
"""
from __future__ import annotations

import logging

from .decision import Method, decide
from .errors import InputError
from .homotopy import build_general_system, build_nonseparable_homotopy
from .options import CheckOptions
from .polytope import LatticePolytope
from .support import SignedSupport

logger = logging.getLogger(__name__)


def validate_support(support):
    """Check the Newton polytope preconditions and return the polytope."""
    newton = LatticePolytope(support.exponents)
    if not newton.is_fulldimensional:
        raise InputError(
            f"non-full-dimensional support: Newton polytope has dimension {newton.dim} in R^{newton.ambient_dim}"
        )

    negatives = support.negative_exponents
    if len(negatives) == 0:
        raise InputError("polynomial must have at least one term with negative coefficient")

    interior = frozenset(newton.interior_lattice_points())
    logger.debug("%d interior lattice points in %r", len(interior), newton)
    for b in negatives:
        if tuple(int(v) for v in b) not in interior:
            raise InputError(
                f"negative term on or outside Newton-polytope interior: exponent {[int(v) for v in b]}"
            )
    return newton


def _default_solver():
    from .julia_oracle import JuliaCertifiedSolver

    return JuliaCertifiedSolver()


def check_copositivity(f, nonseparable=False, *, solver=None, options=None, variables=None):
    """Decide copositivity of f by certified homotopy continuation.

    The negative part of f is scaled by a new unknown t and all isolated
    solutions of [f_t, x_i df_t/dx_i] are certified.  f is copositive iff the
    smallest positive t among them is at least 1; when the certified box of
    that t contains 1 the answer is Copositivity.UNKNOWN.

    nonseparable=True tracks a single path from a barycentric start system
    instead of solving from scratch.  Raises InputError if f has no negative
    term, its Newton polytope is not full-dimensional, or a negative exponent
    is not an interior lattice point of it.
    """
    options = options or CheckOptions()
    support = SignedSupport.from_polynomial(f, variables)
    validate_support(support)
    solver = solver or _default_solver()

    if not nonseparable:
        method = Method.GENERAL
        system = build_general_system(support)
        logger.debug("general homotopy: %d unknowns, %d terms", len(system.variables), len(support.coefficients))
        solutions = solver.solve(system, seed=options.seed)
    else:
        method = Method.NONSEPARABLE
        homotopy = build_nonseparable_homotopy(support)
        logger.debug("nonseparable homotopy: start parameters %s", homotopy.start_parameters)
        solutions = solver.solve(
            homotopy.system,
            [homotopy.start_solution],
            start_parameters=homotopy.start_parameters,
            target_parameters=homotopy.target_parameters,
            seed=options.seed,
        )
        system = homotopy.target_system()

    if len(solutions) == 0:
        logger.warning("%s homotopy returned no solutions; reporting no positive critical point", method.value)
        certificates = ()
    else:
        certificates = solver.certify(system, solutions)

    return decide(certificates, method, system=system, prefer_refined=options.prefer_refined_interval)
