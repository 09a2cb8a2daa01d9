"""Abstract contracts for the population-model family.

Two generative primitives, one shared capability set:

  ContinuousModel:  population(t)                   closed form in absolute time
  DiscreteModel:    population_next(prev, timestep) recurrence from N0

Both expose apply_to_timespan(), doubling_time(), parameters(), clone(),
update() and refresh(). Concrete variants must implement their primitive
(instantiation fails otherwise) and declare PARAMETERS, the positional
constructor order that also defines the descriptor list.

Parameter assignment is validated eagerly: `model.K = 0` raises
InvalidParameterError immediately. Derived coefficients (r, lambda_)
are only recomputed by refresh(), or by update() which calls it.
"""

from __future__ import annotations

import logging
import math
import numbers
from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ecosym.errors import InvalidInputError, InvalidParameterError
from ecosym.timeseries import is_evenly_spaced
from ecosym.types import ModelKind, ParameterDescriptor, PopulationState

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# PARAMETER DOMAINS
# ═══════════════════════════════════════════════════════════════════════

# name → (lower bound, bound inclusive); None = any finite real
PARAMETER_DOMAINS: Dict[str, Optional[Tuple[float, bool]]] = {
    'N0':      (0.0, True),    # initial population
    'b':       (0.0, True),    # birth rate
    'd':       (0.0, True),    # death rate
    'K':       (0.0, False),   # carrying capacity (divisor in logistic form)
    'r_mean':  None,           # mean net growth rate (may be negative)
    'r_stdev': (0.0, True),
    'K_mean':  (0.0, False),
    'K_stdev': (0.0, True),
    'K_amp':   (0.0, True),
    'K_len':   (0.0, False),   # period length (divisor)
}


def validate_parameter(name: str, value) -> float:
    """Check a parameter value against its domain and return it as float.

    Raises:
        InvalidParameterError: If the name is unknown, the value is not a
            finite real number, or it lies outside the domain.
    """
    if name not in PARAMETER_DOMAINS:
        raise InvalidParameterError(f"unknown parameter '{name}'")
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidParameterError(
            f"{name} must be a real number, got {type(value).__name__} {value!r}"
        )
    value = float(value)
    if not math.isfinite(value):
        raise InvalidParameterError(f"{name} must be finite, got {value}")

    domain = PARAMETER_DOMAINS[name]
    if domain is not None:
        lower, inclusive = domain
        if value < lower or (value == lower and not inclusive):
            op = '>=' if inclusive else '>'
            raise InvalidParameterError(f"{name} must be {op} {lower}, got {value}")
    return value


def as_timespan(times: Sequence[float]) -> np.ndarray:
    """Convert a time sequence to a 1-D float64 array.

    Raises:
        InvalidInputError: If times is not a flat sequence of finite reals.
    """
    try:
        t = np.asarray(times, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"time points must be real numbers: {exc}") from exc
    if t.ndim != 1:
        raise InvalidInputError(f"time points must be 1-D, got shape {t.shape}")
    if not np.all(np.isfinite(t)):
        raise InvalidInputError("time points must be finite")
    return t


# ═══════════════════════════════════════════════════════════════════════
# SHARED CONTRACT
# ═══════════════════════════════════════════════════════════════════════

class PopulationModel(ABC):
    """Capability set shared by continuous and discrete models."""

    KIND: ClassVar[ModelKind]
    PARAMETERS: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, N0: float = 100, b: float = 0.11, d: float = 0.1):
        if not self.PARAMETERS:
            raise TypeError(f"{type(self).__name__} does not declare PARAMETERS")
        self.N0 = N0
        self.b = b
        self.d = d
        self.refresh()

    def __setattr__(self, name, value):
        if name in type(self).PARAMETERS:
            value = validate_parameter(name, value)
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        args = ', '.join(f"{p.name}={p.value!r}" for p in self.parameters())
        return f"{type(self).__name__}({args})"

    def refresh(self) -> None:
        """Recompute derived coefficients after a parameter edit."""
        self.r = self.b - self.d

    def update(self, **params) -> None:
        """Validate and assign several parameters, then refresh().

        All values are checked before any is assigned, so a failed update
        leaves the model unchanged.

        Raises:
            InvalidParameterError: On an unknown or out-of-domain parameter.
        """
        for name in params:
            if name not in self.PARAMETERS:
                raise InvalidParameterError(
                    f"{type(self).__name__} has no parameter '{name}'"
                )
        checked = {name: validate_parameter(name, v) for name, v in params.items()}
        for name, value in checked.items():
            setattr(self, name, value)
        self.refresh()

    def parameters(self) -> List[ParameterDescriptor]:
        """Editable parameters in constructor order."""
        return [ParameterDescriptor(name, getattr(self, name)) for name in self.PARAMETERS]

    def parameter_values(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in self.PARAMETERS}

    def clone(self) -> 'PopulationModel':
        """New independent instance built from the current parameter values."""
        return type(self)(**self.parameter_values())

    def doubling_time(self) -> float:
        """ln(2) / r; math.inf when the population is not growing (r <= 0)."""
        if self.r <= 0:
            return math.inf
        return math.log(2) / self.r

    @abstractmethod
    def apply_to_timespan(self, times: Sequence[float]) -> np.ndarray:
        """Population at every point of an ordered time sequence."""


# ═══════════════════════════════════════════════════════════════════════
# CONTINUOUS-TIME
# ═══════════════════════════════════════════════════════════════════════

class ContinuousModel(PopulationModel):
    """Growth as a closed-form function of absolute time."""

    @abstractmethod
    def population(self, t: float) -> float:
        """Population at time t."""

    def apply_to_timespan(self, times: Sequence[float]) -> np.ndarray:
        t = as_timespan(times)
        return np.array([self.population(ti) for ti in t], dtype=np.float64)


# ═══════════════════════════════════════════════════════════════════════
# DISCRETE-TIME
# ═══════════════════════════════════════════════════════════════════════

class DiscreteModel(PopulationModel):
    """Growth as a recurrence N(t + dt) = f(N(t), dt) advanced from N0.

    lambda_ = r + 1 is the finite rate of increase per step.
    """

    def refresh(self) -> None:
        super().refresh()
        self.lambda_ = self.r + 1

    @abstractmethod
    def population_next(self, prev_pop: float, timestep: float) -> float:
        """Population one step of length timestep after prev_pop."""

    def apply_to_timespan(
        self,
        times: Sequence[float],
        strict: bool = False,
    ) -> np.ndarray:
        """Iterate population_next() from N0 across the time points.

        The step length is times[1] - times[0] (0 for a single point) and
        is reused for every transition.

        Args:
            times: Ordered, evenly spaced time points.
            strict: If True, reject unevenly spaced time points instead of
                using the first interval throughout.

        Raises:
            InvalidInputError: If times is empty or malformed, or strict
                is set and the spacing is not uniform.
        """
        t = as_timespan(times)
        if t.size == 0:
            raise InvalidInputError(
                f"{type(self).__name__}.apply_to_timespan needs at least one time point"
            )
        evenly = is_evenly_spaced(t)
        if not evenly:
            if strict:
                raise InvalidInputError("time points are not evenly spaced")
            logger.warning(
                "%s: uneven time points, using first interval %g for every step",
                type(self).__name__, t[1] - t[0],
            )

        pops = np.zeros(t.size, dtype=np.float64)
        pops[0] = self.N0
        timestep = float(t[1] - t[0]) if t.size > 1 else 0.0
        for i in range(1, t.size):
            pops[i] = self.population_next(pops[i - 1], timestep)
        return pops


# ═══════════════════════════════════════════════════════════════════════
# CAPACITY-LIMITED (LOGISTIC FAMILY)
# ═══════════════════════════════════════════════════════════════════════

def logistic_population(t: float, K: float, N0: float, r: float) -> float:
    """Closed-form logistic solution K / (1 + ((K - N0) / N0) * exp(-r t)).

    A zero initial population stays at zero. When exp(-r t) overflows the
    limit is returned: 0 if the solution decays toward zero, -inf if it has
    already diverged through zero (N0 > K > 0).
    """
    if N0 == 0:
        return 0.0
    try:
        decay = math.exp(-r * t)
    except OverflowError:
        if K == N0:
            return K
        return 0.0 if (K - N0) * K > 0 else -math.inf
    return K / (1 + ((K - N0) / N0) * decay)


class CapacityModel(ContinuousModel):
    """Logistic growth toward a capacity that may vary with time.

    population(t) is a plain logistic evaluation at capacity(t), clamped at
    zero. Per-evaluation state lives only in apply_to_timespan(), which
    resets it on entry:
      capacity_history: capacity used at each evaluated time point
      state:            ALIVE until a computed population would be negative,
                        then EXTINCT (population 0) for the rest of the span
    """

    def __init__(self, N0: float = 100, b: float = 0.11, d: float = 0.1):
        self.capacity_history: List[float] = []
        self.state = PopulationState.ALIVE
        super().__init__(N0, b, d)

    @property
    def extinct(self) -> bool:
        return self.state == PopulationState.EXTINCT

    @abstractmethod
    def capacity(self, t: float) -> float:
        """Carrying capacity in effect at time t."""

    def reset(self) -> None:
        """Clear capacity history and return to the ALIVE state."""
        self.capacity_history = []
        self.state = PopulationState.ALIVE

    def _logistic_at(self, t: float, K: float) -> float:
        try:
            return logistic_population(t, K, self.N0, self.r)
        except ZeroDivisionError:
            # logistic denominator vanished: the solution diverged through zero
            return -math.inf

    def population(self, t: float) -> float:
        return max(0.0, self._logistic_at(t, self.capacity(t)))

    def apply_to_timespan(self, times: Sequence[float]) -> np.ndarray:
        t = as_timespan(times)
        self.reset()
        pops = np.zeros(t.size, dtype=np.float64)
        for i, ti in enumerate(t):
            K = self.capacity(ti)
            self.capacity_history.append(K)
            if self.extinct:
                continue
            value = self._logistic_at(ti, K)
            if value < 0:
                logger.debug("%s extinct at t=%g (K=%g)", type(self).__name__, ti, K)
                self.state = PopulationState.EXTINCT
                continue
            pops[i] = value
        return pops
