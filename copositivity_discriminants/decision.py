"""Tri-state copositivity decision from a set of solution certificates."""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Optional

from .certificates import ComplexInterval

logger = logging.getLogger(__name__)


class Copositivity(enum.Enum):
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    def __bool__(self):
        raise TypeError("Copositivity has three outcomes; compare against Copositivity.TRUE, FALSE or UNKNOWN")

    @classmethod
    def from_bool(cls, value):
        return cls.TRUE if value else cls.FALSE


class Method(enum.Enum):
    GENERAL = "general"
    NONSEPARABLE = "nonseparable"


@dataclass(frozen=True)
class CopositivityResult:
    copositive: Copositivity
    method: Method
    t_min: float                      # real midpoint of the minimal positive t, nan if none
    positive_certificates: tuple = ()
    certified_interval_t_min: Optional[ComplexInterval] = None
    system: object = None             # the fixed system that was certified
    certificates: tuple = ()          # every certificate the solver returned

    @property
    def positive_certificate_count(self):
        return len(self.positive_certificates)

    def __str__(self):
        return (f"copositive={self.copositive.value} method={self.method.value} t_min={self.t_min!r} "
                f"positive={self.positive_certificate_count} interval={self.certified_interval_t_min}")


def selection_key(certificate):
    """Smallest real t midpoint; ties by real, then imaginary parts of x."""
    z = certificate.solution_candidate
    rest = [complex(v) for v in z[1:]]
    return (complex(z[0]).real, tuple(v.real for v in rest), tuple(v.imag for v in rest))


def decide(certificates, method, system=None, prefer_refined=True):
    certificates = tuple(certificates)
    positive = tuple(c for c in certificates if c.is_positive and c.certified)

    if not positive:
        logger.debug("%s: no positive certificate among %d", method.value, len(certificates))
        return CopositivityResult(
            copositive=Copositivity.FALSE,
            method=method,
            t_min=math.nan,
            system=system,
            certificates=certificates,
        )

    # min() keeps the first of equal keys, i.e. solver order
    best = min(positive, key=selection_key)
    t_min = best.t_midpoint.real
    interval = best.t_interval(prefer_refined)

    if interval is not None and interval.contains(1):
        copositive = Copositivity.UNKNOWN
    else:
        copositive = Copositivity.from_bool(t_min >= 1)
    logger.debug("%s: t_min=%r interval=%s -> %s", method.value, t_min, interval, copositive.value)

    return CopositivityResult(
        copositive=copositive,
        method=method,
        t_min=t_min,
        positive_certificates=positive,
        certified_interval_t_min=interval,
        system=system,
        certificates=certificates,
    )
