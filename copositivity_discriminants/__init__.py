"""Certified copositivity checks for polynomials with a signed support."""

from .certificates import CertifiedSolver, ComplexInterval, SolutionCertificate
from .check import check_copositivity, validate_support
from .classifier import nonseparable_support, signed_support_is_nonseparable
from .decision import Copositivity, CopositivityResult, Method, decide
from .errors import EnumerationLimitError, EnumerationTimeoutError, InputError, OracleFailure
from .homotopy import HomotopySystem, build_general_system, build_nonseparable_homotopy
from .options import CheckOptions
from .polytope import LatticePolytope
from .support import SignedSupport, split_support
from .triangulations import regular_triangulations

__version__ = "0.1.0"

__all__ = [
    "CertifiedSolver",
    "CheckOptions",
    "ComplexInterval",
    "Copositivity",
    "CopositivityResult",
    "EnumerationLimitError",
    "EnumerationTimeoutError",
    "HomotopySystem",
    "InputError",
    "LatticePolytope",
    "Method",
    "OracleFailure",
    "SignedSupport",
    "SolutionCertificate",
    "build_general_system",
    "build_nonseparable_homotopy",
    "check_copositivity",
    "decide",
    "nonseparable_support",
    "regular_triangulations",
    "signed_support_is_nonseparable",
    "split_support",
    "validate_support",
]
