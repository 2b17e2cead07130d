"""Certified solutions and the solver strategy the decision procedure consumes."""
from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Protocol, Sequence, runtime_checkable

import numpy as np

# Arb prints balls as "[mid +/- rad]", "[+/- rad]" (zero midpoint) or an exact number.
_ARB_BALL = re.compile(r"^\[\s*(?P<mid>[^\s\]]*)\s*\+/-\s*(?P<rad>[^\s\]]+)\s*\]$")


def arb_bounds(text):
    """Exact rational (lo, hi) of an Arb ball printed by Arblib.

    Raises ValueError for balls that are not finite ("nan", "[+/- inf]").
    """
    text = text.strip()
    m = _ARB_BALL.match(text)
    try:
        if m is None:
            value = Fraction(text)
            return value, value
        mid = Fraction(m.group("mid") or "0")
        rad = Fraction(m.group("rad"))
    except ValueError as e:
        raise ValueError(f"not a finite Arb ball: {text!r}") from e
    return mid - rad, mid + rad


@dataclass(frozen=True)
class ComplexInterval:
    """Closed rectangle [re_lo, re_hi] x [im_lo, im_hi] with rational corners."""

    re_lo: Fraction
    re_hi: Fraction
    im_lo: Fraction = Fraction(0)
    im_hi: Fraction = Fraction(0)

    def __post_init__(self):
        for name in ("re_lo", "re_hi", "im_lo", "im_hi"):
            object.__setattr__(self, name, Fraction(getattr(self, name)))
        if self.re_lo > self.re_hi or self.im_lo > self.im_hi:
            raise ValueError(f"empty interval {self}")

    @classmethod
    def from_arb(cls, real_text, imag_text):
        re_lo, re_hi = arb_bounds(real_text)
        im_lo, im_hi = arb_bounds(imag_text)
        return cls(re_lo, re_hi, im_lo, im_hi)

    def contains(self, z):
        z = complex(z)
        re, im = Fraction(z.real), Fraction(z.imag)
        return self.re_lo <= re <= self.re_hi and self.im_lo <= im <= self.im_hi

    def __str__(self):
        return f"[{float(self.re_lo)!r}, {float(self.re_hi)!r}] + [{float(self.im_lo)!r}, {float(self.im_hi)!r}]i"


@dataclass(frozen=True)
class SolutionCertificate:
    """One certified (or failed) solution of the augmented system.

    solution_candidate is the numeric approximation, t first.  interval is the
    certified box from the first certification step; refined_interval is the
    tighter box after the Krawczyk refinement when the solver produced one.
    """

    solution_candidate: tuple
    is_positive: bool
    certified: bool = True
    interval: Optional[tuple] = None
    refined_interval: Optional[tuple] = None

    @property
    def t_midpoint(self):
        return complex(self.solution_candidate[0])

    def t_interval(self, prefer_refined=True):
        box = self.refined_interval if prefer_refined and self.refined_interval is not None else self.interval
        return None if box is None else box[0]


@runtime_checkable
class CertifiedSolver(Protocol):
    """Numeric solve & certify oracle.

    solve() without start data computes all isolated solutions of a system
    without parameters.  With start_solutions it tracks them from
    start_parameters to target_parameters.  certify() returns one certificate
    per input solution, against a system without parameters.
    """

    def solve(self, system, start_solutions=None, *, start_parameters=None,
              target_parameters=None, seed=None) -> list[np.ndarray]: ...

    def certify(self, system, solutions: Sequence[np.ndarray]) -> list[SolutionCertificate]: ...
