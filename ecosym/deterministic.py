"""Deterministic growth models: exponential and logistic, in both time bases.

Shared assumptions:
  - constant (or density-dependent, for logistic) birth and death rates
  - no genetic, age or size structure
  - no time lags
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ecosym.base import CapacityModel, ContinuousModel, DiscreteModel, as_timespan
from ecosym.types import ModelKind


# ═══════════════════════════════════════════════════════════════════════
# EXPONENTIAL
# ═══════════════════════════════════════════════════════════════════════

class ContinuousExponential(ContinuousModel):
    """N(t) = N0 * exp(r t), overlapping generations."""

    KIND = ModelKind.CONTINUOUS_EXPONENTIAL
    PARAMETERS = ('N0', 'b', 'd')

    def __init__(self, N0: float = 100, b: float = 0.11, d: float = 0.1):
        super().__init__(N0, b, d)

    def population(self, t: float) -> float:
        try:
            return self.N0 * math.exp(self.r * t)
        except OverflowError:
            return math.inf if self.N0 > 0 else 0.0


class DiscreteExponential(DiscreteModel):
    """N(t) = N0 * lambda^t, non-overlapping generations.

    The trajectory is evaluated in closed form at each time point rather
    than by iterating the recurrence, so uneven spacing is harmless here.
    """

    KIND = ModelKind.DISCRETE_EXPONENTIAL
    PARAMETERS = ('N0', 'b', 'd')

    def __init__(self, N0: float = 100, b: float = 0.11, d: float = 0.1):
        super().__init__(N0, b, d)

    def population(self, t: float) -> float:
        if self.lambda_ <= 0:
            # deaths outnumber survivors plus births: nothing left after t = 0
            return self.N0 if t == 0 else 0.0
        try:
            return self.N0 * self.lambda_ ** t
        except OverflowError:
            return math.inf if self.N0 > 0 else 0.0

    def population_next(self, prev_pop: float, timestep: float) -> float:
        if self.lambda_ <= 0:
            return prev_pop if timestep == 0 else 0.0
        return prev_pop * self.lambda_ ** timestep

    def apply_to_timespan(self, times: Sequence[float], strict: bool = False) -> np.ndarray:
        t = as_timespan(times)
        return np.array([self.population(ti) for ti in t], dtype=np.float64)


# ═══════════════════════════════════════════════════════════════════════
# LOGISTIC
# ═══════════════════════════════════════════════════════════════════════

class ContinuousLogistic(CapacityModel):
    """Standard logistic solution approaching a fixed carrying capacity K.

    With r < 0 and N0 > K the solution diverges and turns negative; from
    that point the population is extinct for the rest of the evaluation.
    """

    KIND = ModelKind.CONTINUOUS_LOGISTIC
    PARAMETERS = ('K', 'N0', 'b', 'd')

    def __init__(self, K: float = 150, N0: float = 100, b: float = 0.11, d: float = 0.1):
        self.K = K
        super().__init__(N0, b, d)

    def capacity(self, t: float) -> float:
        return self.K


class DiscreteLogistic(DiscreteModel):
    """Discrete logistic map N' = N + r N (1 - N / K), clamped at zero.

    The step length does not enter the map. Large r (b - d above ~2)
    gives period doubling and chaos, which is expected behaviour.
    """

    KIND = ModelKind.DISCRETE_LOGISTIC
    PARAMETERS = ('K', 'N0', 'b', 'd')

    def __init__(self, K: float = 150, N0: float = 100, b: float = 0.11, d: float = 0.1):
        self.K = K
        super().__init__(N0, b, d)

    def population_next(self, prev_pop: float, timestep: float) -> float:
        next_pop = prev_pop + self.r * prev_pop * (1 - prev_pop / self.K)
        return max(0.0, next_pop)
