"""Augmented critical-point systems of the deformation f_t.

f_t(x) = sum_{a in A+} c_a x^a + t * sum_{b in A-} c_b x^b, and

    F(t, x) = [f_t, x_1 df_t/dx_1, ..., x_n df_t/dx_n]

in the unknowns (t, x_1, ..., x_n).  Isolated positive solutions of F are the
points where the deformation first touches zero on the open orthant.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import sympy as sp

from .errors import InputError
from .polytope import balance_point


def _fresh_symbol(name, taken):
    names = {str(s) for s in taken}
    while name in names:
        name += "_"
    return sp.Symbol(name)


def _fresh_symbols(prefix, count, taken):
    names = {str(s) for s in taken}
    while any(f"{prefix}{i}" in names for i in range(count)):
        prefix += "_"
    return tuple(sp.Symbol(f"{prefix}{i}") for i in range(count))


def critical_equations(f_t, variables):
    return tuple([sp.expand(f_t)] + [sp.expand(x * sp.diff(f_t, x)) for x in variables])


@dataclass(frozen=True)
class HomotopySystem:
    equations: tuple
    variables: tuple       # deformation parameter first
    parameters: tuple = ()

    @property
    def t(self):
        return self.variables[0]

    def specialize(self, values):
        """Fix every parameter; the result has no parameters left."""
        if len(values) != len(self.parameters):
            raise ValueError(f"expected {len(self.parameters)} parameter values, got {len(values)}")
        subs = {p: sp.sympify(v) for p, v in zip(self.parameters, values)}
        return HomotopySystem(tuple(sp.expand(eq.subs(subs)) for eq in self.equations), self.variables)

    def terms(self):
        """Per equation: monomial exponents over (variables, parameters) and float coefficients."""
        gens = self.variables + self.parameters
        out = []
        for eq in self.equations:
            poly = sp.Poly(eq, *gens)
            monoms = [list(m) for m, _ in poly.terms()]
            coeffs = [float(c) for _, c in poly.terms()]
            out.append((monoms, coeffs))
        return out

    def evaluate(self, point, parameters=()):
        subs = dict(zip(self.variables, point))
        subs.update(zip(self.parameters, parameters))
        return np.array([complex(sp.N(eq.subs(subs))) for eq in self.equations])


def build_general_system(support):
    t = _fresh_symbol("t", support.variables)
    positive = sum((c * support.monomial(a) for c, a in zip(support.positive_coefficients, support.positive_exponents)),
                   sp.Integer(0))
    negative = sum((c * support.monomial(b) for c, b in zip(support.negative_coefficients, support.negative_exponents)),
                   sp.Integer(0))
    f_t = positive + t * negative
    return HomotopySystem(critical_equations(f_t, support.variables), (t,) + support.variables)


@dataclass(frozen=True, eq=False)
class NonseparableHomotopy:
    """Coefficient-parameter homotopy with a known start solution.

    The start parameters put barycentric weights on A+ and the negated weight
    on the first negative term only; at those coefficients the all-ones point
    solves F.  Tracking moves the coefficients to their true values
    (positive terms first, then negative terms).
    """

    system: HomotopySystem
    start_parameters: np.ndarray
    target_parameters: np.ndarray
    start_solution: np.ndarray
    weights: tuple   # exact balance point, negative slot last

    def target_system(self):
        return self.system.specialize(self.target_parameters.tolist())


def build_nonseparable_homotopy(support):
    negative_exponents = support.negative_exponents
    if len(negative_exponents) == 0:
        raise InputError("nonseparable homotopy needs at least one negative term")

    positive_exponents = support.positive_exponents
    weights = balance_point(positive_exponents, negative_exponents[0])
    num_pos, num_neg = len(positive_exponents), len(negative_exponents)

    start = np.zeros(num_pos + num_neg)
    start[:num_pos] = [float(w) for w in weights[:num_pos]]
    start[num_pos] = -float(weights[-1])
    target = np.array([float(c) for c in support.positive_coefficients + support.negative_coefficients])

    t = _fresh_symbol("t", support.variables)
    p = _fresh_symbols("p", num_pos + num_neg, support.variables + (t,))
    f_t = (sum((p[j] * support.monomial(a) for j, a in enumerate(positive_exponents)), sp.Integer(0))
           + t * sum((p[num_pos + j] * support.monomial(b) for j, b in enumerate(negative_exponents)), sp.Integer(0)))
    system = HomotopySystem(critical_equations(f_t, support.variables), (t,) + support.variables, p)

    return NonseparableHomotopy(
        system=system,
        start_parameters=start,
        target_parameters=target,
        start_solution=np.ones(support.dimension + 1),
        weights=weights,
    )
