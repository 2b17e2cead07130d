"""Signed supports of real polynomials.

A polynomial f = sum c_a x^a is split into the exponents with positive
coefficients (A+) and those with negative coefficients (A-).  Exponents are
kept as integer numpy rows in a fixed variable order; coefficients stay as
sympy numbers so exact input survives until the system is handed to the solver.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import sympy as sp

from .errors import InputError


def polynomial_variables(f):
    """Free symbols of f in a stable order (sympy's default sort key)."""
    return tuple(sorted(sp.sympify(f).free_symbols, key=sp.default_sort_key))


def as_poly(f, variables=None):
    if isinstance(f, sp.Poly):
        if variables is None:
            return f
        f = f.as_expr()
    expr = sp.sympify(f)
    if variables is None:
        variables = polynomial_variables(expr)
    if not variables:
        raise InputError("polynomial has no variables")
    try:
        return sp.Poly(expr, *variables)
    except sp.PolynomialError as e:
        raise InputError(f"not a polynomial in {variables}: {expr}") from e


@dataclass(frozen=True)
class SignedSupport:
    variables: tuple
    exponents: np.ndarray  # (terms, n) ints
    coefficients: tuple    # sympy numbers, one per row of exponents

    @classmethod
    def from_polynomial(cls, f, variables=None):
        poly = as_poly(f, variables)
        if poly.is_zero:
            raise InputError("zero polynomial has no support")
        terms = poly.terms()
        exps, coeffs = [], []
        for monom, c in terms:
            if not c.is_number or c.is_real is False:
                raise InputError(f"coefficient {c} of monomial {monom} is not a real number")
            exps.append(monom)
            coeffs.append(c)
        return cls(tuple(poly.gens), np.array(exps, dtype=np.int64), tuple(coeffs))

    @property
    def dimension(self):
        return len(self.variables)

    @property
    def negative_mask(self):
        return np.array([bool(c < 0) for c in self.coefficients], dtype=bool)

    @property
    def positive_exponents(self):
        return self.exponents[~self.negative_mask]

    @property
    def negative_exponents(self):
        return self.exponents[self.negative_mask]

    @property
    def positive_coefficients(self):
        return tuple(c for c, neg in zip(self.coefficients, self.negative_mask) if not neg)

    @property
    def negative_coefficients(self):
        return tuple(c for c, neg in zip(self.coefficients, self.negative_mask) if neg)

    def monomial(self, exponent):
        return sp.Mul(*[v**int(e) for v, e in zip(self.variables, exponent)])


def split_support(f, variables=None):
    """Return (A+, A-) as integer arrays with one exponent vector per row."""
    support = SignedSupport.from_polynomial(f, variables)
    return support.positive_exponents, support.negative_exponents
