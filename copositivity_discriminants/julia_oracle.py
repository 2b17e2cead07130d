"""HomotopyContinuation.jl as the certified solver, driven through juliacall.

Systems cross the language boundary as plain exponent / coefficient vectors
and are rebuilt on the Julia side.  Certified boxes come back as the strings
Arblib prints for each ball and are read into exact rational bounds, so no
rounding happens between Arb and the decision procedure.

Needs `juliacall` and, in the Julia environment it uses, the packages
HomotopyContinuation and Arblib.
"""
from __future__ import annotations

import logging

import numpy as np

from .certificates import ComplexInterval, SolutionCertificate
from .errors import OracleFailure

logger = logging.getLogger(__name__)


_JULIA_DEFINE_SNIPPET = r"""
function _copos_system(var_names, param_names, exps, coeffs)
    vars = [Variable(Symbol(s)) for s in var_names]
    params = [Variable(Symbol(s)) for s in param_names]
    unknowns = [vars; params]
    k = length(unknowns)
    eqs = Expression[]
    for (E, c) in zip(exps, coeffs)
        M = reshape(E, k, length(c))
        push!(eqs, sum(c[j] * prod(unknowns .^ M[:, j]) for j in eachindex(c)))
    end
    isempty(params) ? System(eqs; variables = vars) : System(eqs; variables = vars, parameters = params)
end

function _copos_solve(F, seed)
    res = solve(F; seed = UInt32(seed), show_progress = false)
    [ComplexF64.(s) for s in solutions(res)]
end

function _copos_track(F, starts, p0, p1, seed)
    res = solve(F, starts; start_parameters = p0, target_parameters = p1,
                seed = UInt32(seed), show_progress = false)
    [ComplexF64.(s) for s in solutions(res)]
end

function _copos_box(X)
    X === nothing && return nothing
    (re = [string(Arblib.real(X[i])) for i in 1:length(X)],
     im = [string(Arblib.imag(X[i])) for i in 1:length(X)])
end

function _copos_certify(F, sols)
    C = certify(F, sols; show_progress = false)
    out = Any[]
    for c in certificates(C)
        refined = c isa HomotopyContinuation.ExtendedSolutionCertificate ?
            HomotopyContinuation.certified_solution_interval_after_krawczyk(c) : nothing
        push!(out, (
            candidate = ComplexF64.(solution_candidate(c)),
            certified = HomotopyContinuation.is_certified(c),
            positive = HomotopyContinuation.is_positive(c),
            interval = _copos_box(HomotopyContinuation.certified_solution_interval(c)),
            refined = _copos_box(refined),
        ))
    end
    out
end
"""


def _box(jbox):
    if jbox is None:
        return None
    try:
        return tuple(ComplexInterval.from_arb(str(re), str(im)) for re, im in zip(jbox.re, jbox.im))
    except ValueError as e:
        raise OracleFailure(f"certified box is not finite: {e}") from e


class JuliaCertifiedSolver:
    """CertifiedSolver backed by HomotopyContinuation.solve and certify."""

    def __init__(self, jl=None):
        self._jl = jl
        self._initialized = False

    @property
    def jl(self):
        if self._jl is None:
            try:
                from juliacall import Main
            except ImportError as e:
                raise OracleFailure("juliacall is not installed; install the 'julia' extra") from e
            self._jl = Main
        if not self._initialized:
            self._initialize(self._jl)
        return self._jl

    def _initialize(self, jl):
        # `using` and the definitions go in separate evals: macros resolve at parse time.
        if not bool(jl.seval("isdefined(Main, :__COPOS_INIT__)")):
            try:
                jl.seval("using HomotopyContinuation, Arblib")
            except Exception as e:
                raise OracleFailure(f"could not load HomotopyContinuation and Arblib in Julia: {e}") from e
            jl.seval(_JULIA_DEFINE_SNIPPET)
            jl.seval("const __COPOS_INIT__ = true")
        self._initialized = True

    def _system(self, system):
        jl = self.jl
        exps, coeffs = [], []
        for monoms, cs in system.terms():
            exps.append([int(e) for monom in monoms for e in monom])
            coeffs.append([float(c) for c in cs])
        return jl._copos_system(
            jl.Vector[jl.String]([str(v) for v in system.variables]),
            jl.Vector[jl.String]([str(p) for p in system.parameters]),
            jl.Vector[jl.Vector[jl.Int]](exps),
            jl.Vector[jl.Vector[jl.Float64]](coeffs),
        )

    def _call(self, what, fn, *args):
        try:
            return fn(*args)
        except OracleFailure:
            raise
        except Exception as e:
            raise OracleFailure(f"HomotopyContinuation {what} failed: {e}") from e

    def solve(self, system, start_solutions=None, *, start_parameters=None, target_parameters=None, seed=None):
        jl = self.jl
        F = self._system(system)
        seed = 0 if seed is None else int(seed)
        if start_solutions is None:
            logger.debug("solving %d equations from scratch", len(system.equations))
            out = self._call("solve", jl._copos_solve, F, seed)
        else:
            starts = [[complex(z) for z in s] for s in start_solutions]
            logger.debug("tracking %d start solutions over %d parameters", len(starts), len(system.parameters))
            out = self._call(
                "parameter continuation",
                jl._copos_track,
                F,
                jl.Vector[jl.Vector[jl.ComplexF64]](starts),
                jl.Vector[jl.Float64]([float(v) for v in start_parameters]),
                jl.Vector[jl.Float64]([float(v) for v in target_parameters]),
                seed,
            )
        return [np.array([complex(z) for z in s]) for s in out]

    def certify(self, system, solutions):
        if system.parameters:
            raise ValueError("certify needs a system without parameters; specialize it first")
        jl = self.jl
        F = self._system(system)
        sols = jl.Vector[jl.Vector[jl.ComplexF64]]([[complex(z) for z in s] for s in solutions])
        out = self._call("certify", jl._copos_certify, F, sols)
        return [
            SolutionCertificate(
                solution_candidate=tuple(complex(z) for z in entry.candidate),
                is_positive=bool(entry.positive),
                certified=bool(entry.certified),
                interval=_box(entry.interval) if entry.certified else None,
                refined_interval=_box(entry.refined) if entry.certified else None,
            )
            for entry in out
        ]
