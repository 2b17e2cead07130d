"""End-to-end copositivity checks against a scripted solver."""

import logging

import numpy as np
import pytest

from copositivity_discriminants import (
    CheckOptions,
    Copositivity,
    InputError,
    LatticePolytope,
    Method,
    OracleFailure,
    SignedSupport,
    check_copositivity,
    validate_support,
)


@pytest.fixture
def quartic(xy):
    x, y = xy
    return x**4 + y**4 - 3 * x * y + 1


class TestValidation:
    @pytest.mark.parametrize(
        "make, message",
        [
            (lambda x, y: x**2 * y**2 - x * y + 1, "non-full-dimensional"),
            (lambda x, y: x**2 + y**2 + 1, "at least one term with negative coefficient"),
            (lambda x, y: x**2 + y**2 + 1 - x * y, "on or outside Newton-polytope interior"),
            (lambda x, y: x**4 + y**4 - 1, "on or outside Newton-polytope interior"),
        ],
    )
    def test_rejected_before_solving(self, xy, scripted_solver, make, message):
        solver = scripted_solver()
        with pytest.raises(InputError, match=message):
            check_copositivity(make(*xy), solver=solver)
        with pytest.raises(InputError, match=message):
            check_copositivity(make(*xy), True, solver=solver)
        assert solver.solve_calls == []
        assert solver.certify_calls == []

    def test_full_dimension_is_checked_first(self, xy):
        x, y = xy
        with pytest.raises(InputError, match="non-full-dimensional"):
            validate_support(SignedSupport.from_polynomial(x**2 * y**2 + x * y + 1))

    def test_error_names_the_exponent(self, xy):
        x, y = xy
        with pytest.raises(InputError, match=r"\[1, 1\]"):
            validate_support(SignedSupport.from_polynomial(x**2 + y**2 + 1 - x * y))

    def test_input_error_is_a_value_error(self, xy):
        x, y = xy
        with pytest.raises(ValueError):
            check_copositivity(x**2 + y**2 + 1)

    def test_valid_support_returns_newton_polytope(self, quartic):
        newton = validate_support(SignedSupport.from_polynomial(quartic))
        assert newton.is_interior_lattice_point([1, 1])


class TestGeneralMethod:
    def test_flow(self, quartic, scripted_solver, certificate):
        solver = scripted_solver(
            solutions=[[1.2, 1.0, 1.0], [0.5 + 1j, 1.0, -1.0]],
            certificates=[certificate(1.2, 1.0, 1.0, interval=(1.19, 1.21)), certificate(0.5, positive=False)],
        )
        result = check_copositivity(quartic, solver=solver)
        assert result.copositive is Copositivity.TRUE
        assert result.method is Method.GENERAL
        assert result.t_min == 1.2

        (call,) = solver.solve_calls
        assert call["start_solutions"] is None
        assert call["seed"] == CheckOptions().seed
        assert len(call["system"].variables) == 3
        (certified_system, solutions) = solver.certify_calls[0]
        assert certified_system is call["system"]
        assert len(solutions) == 2
        assert result.system is certified_system

    def test_seed_is_forwarded(self, quartic, scripted_solver):
        solver = scripted_solver()
        check_copositivity(quartic, solver=solver, options=CheckOptions(seed=7))
        assert solver.solve_calls[0]["seed"] == 7

    def test_no_solutions(self, quartic, scripted_solver, caplog):
        solver = scripted_solver()
        with caplog.at_level(logging.WARNING, logger="copositivity_discriminants.check"):
            result = check_copositivity(quartic, solver=solver)
        assert result.copositive is Copositivity.FALSE
        assert np.isnan(result.t_min)
        assert solver.certify_calls == []
        assert "no solutions" in caplog.text

    def test_unknown(self, quartic, scripted_solver, certificate):
        solver = scripted_solver([[1.0, 1.0, 1.0]], [certificate(1.0, 1.0, 1.0, interval=(0.99, 1.01))])
        assert check_copositivity(quartic, solver=solver).copositive is Copositivity.UNKNOWN

    def test_refined_interval_option(self, quartic, scripted_solver, certificate):
        certs = [certificate(1.02, 1.0, 1.0, interval=(0.9, 1.1), refined=(1.01, 1.03))]
        solver = scripted_solver([[1.02, 1.0, 1.0]], certs)
        assert check_copositivity(quartic, solver=solver).copositive is Copositivity.TRUE
        coarse = CheckOptions(prefer_refined_interval=False)
        assert check_copositivity(quartic, solver=solver, options=coarse).copositive is Copositivity.UNKNOWN

    def test_deterministic(self, quartic, scripted_solver, certificate):
        solver = scripted_solver([[0.8, 1.0, 1.0]], [certificate(0.8, 1.0, 1.0, interval=(0.79, 0.81))])
        first = check_copositivity(quartic, solver=solver)
        second = check_copositivity(quartic, solver=solver)
        assert (first.copositive, first.method, first.t_min) == (second.copositive, second.method, second.t_min)
        assert first.copositive is Copositivity.FALSE


class TestNonseparableMethod:
    def test_flow(self, quartic, scripted_solver, certificate):
        solver = scripted_solver([[1.1, 1.0, 1.0]], [certificate(1.1, 1.0, 1.0, interval=(1.05, 1.15))])
        result = check_copositivity(quartic, nonseparable=True, solver=solver)
        assert result.method is Method.NONSEPARABLE
        assert result.copositive is Copositivity.TRUE

        (call,) = solver.solve_calls
        assert [s.tolist() for s in call["start_solutions"]] == [[1.0, 1.0, 1.0]]
        assert call["start_parameters"].tolist() == [0.25, 0.25, 0.5, -1.0]
        assert call["target_parameters"].tolist() == [1.0, 1.0, 1.0, -3.0]
        assert len(call["system"].parameters) == 4

        (certified_system, _) = solver.certify_calls[0]
        assert certified_system.parameters == ()
        assert certified_system.variables == call["system"].variables

    def test_no_solutions(self, quartic, scripted_solver):
        result = check_copositivity(quartic, nonseparable=True, solver=scripted_solver())
        assert result.copositive is Copositivity.FALSE
        assert result.method is Method.NONSEPARABLE


class TestOracleFailure:
    @pytest.mark.parametrize("nonseparable", [False, True])
    def test_propagates(self, quartic, scripted_solver, nonseparable):
        solver = scripted_solver(error=OracleFailure("HomotopyContinuation solve failed: boom"))
        with pytest.raises(OracleFailure, match="boom"):
            check_copositivity(quartic, nonseparable, solver=solver)
        assert solver.certify_calls == []


class TestInteriorLatticePoints:
    def test_negative_exponents_are_checked_against_the_enumeration(self, xy, monkeypatch):
        x, y = xy
        f = x**4 + y**4 - 3 * x * y + 1
        monkeypatch.setattr(LatticePolytope, "interior_lattice_points", lambda self: iter([(2, 1)]))
        with pytest.raises(InputError, match=r"\[1, 1\]"):
            validate_support(SignedSupport.from_polynomial(f))
