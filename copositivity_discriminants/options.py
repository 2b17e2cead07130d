from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

# Seed used for parameter continuation unless the caller picks another one.
DEFAULT_SEED = 0x68A5C2C6


@dataclass(frozen=True)
class CheckOptions:
    """Knobs shared by the classifier and the decision procedure.

    tol: barycentric tolerance for simplex containment.
    seed: forwarded to the solver so repeated calls track the same paths.
    max_triangulations: bound on regular triangulations visited by the classifier.
    time_budget: seconds the classifier may spend enumerating triangulations (None = no limit).
    prefer_refined_interval: use the post-Krawczyk box for t when the solver has one.
    verbose: log the classifier's fail-closed branches.
    """

    tol: float = 1e-9
    seed: int = DEFAULT_SEED
    max_triangulations: int = 10_000
    time_budget: Optional[float] = 300.0
    prefer_refined_interval: bool = True
    verbose: bool = True

    def __post_init__(self):
        if not self.tol >= 0:
            raise ValueError(f"tol must be nonnegative, got {self.tol}")
        if self.max_triangulations < 1:
            raise ValueError(f"max_triangulations must be positive, got {self.max_triangulations}")
        if self.time_budget is not None and not self.time_budget > 0:
            raise ValueError(f"time_budget must be positive or None, got {self.time_budget}")

    def with_overrides(self, **changes) -> CheckOptions:
        return replace(self, **changes)
