import numpy as np
import pytest
import sympy as sp

from copositivity_discriminants import ComplexInterval, SolutionCertificate


class ScriptedSolver:
    """CertifiedSolver that replays fixed solutions and certificates."""

    def __init__(self, solutions=(), certificates=(), error=None):
        self.error = error
        self.solutions = [np.asarray(s, dtype=complex) for s in solutions]
        self.certificates = list(certificates)
        self.solve_calls = []
        self.certify_calls = []

    def solve(self, system, start_solutions=None, *, start_parameters=None, target_parameters=None, seed=None):
        self.solve_calls.append({
            "system": system,
            "start_solutions": start_solutions,
            "start_parameters": start_parameters,
            "target_parameters": target_parameters,
            "seed": seed,
        })
        if self.error is not None:
            raise self.error
        return list(self.solutions)

    def certify(self, system, solutions):
        self.certify_calls.append((system, list(solutions)))
        return list(self.certificates)


def make_certificate(t, *xs, positive=True, interval=None, refined=None, certified=True):
    """Certificate whose t box is interval=(lo, hi) and optional imaginary bounds."""
    candidate = (complex(t),) + tuple(complex(x) for x in (xs or (1.0,)))
    box = None if interval is None else (ComplexInterval(*interval),)
    refined_box = None if refined is None else (ComplexInterval(*refined),)
    return SolutionCertificate(candidate, positive, certified, interval=box, refined_interval=refined_box)


@pytest.fixture
def scripted_solver():
    return ScriptedSolver


@pytest.fixture
def certificate():
    return make_certificate


@pytest.fixture
def xy():
    return sp.symbols("x y")


SCENARIO_C = (sp.Rational(10, 9) ** sp.Rational(9, 10)) * sp.Integer(40) ** sp.Rational(1, 10)


@pytest.fixture
def scenario():
    """f = x1^40 + ... + x4^40 - scale * c * x1 x2 x3 x4 + 1."""

    def build(scale=1):
        x = sp.symbols("x1:5")
        c = sp.Float(sp.N(scale * SCENARIO_C, 30), 30)
        return sum(v**40 for v in x) - c * sp.Mul(*x) + 1, x

    return build
