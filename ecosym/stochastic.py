"""Stochastic and time-varying-capacity growth models.

  EnvironmentalStochasticity:  per-step net rate drawn from N(r_mean, r_stdev)
  DemographicStochasticity:    whole-number birth/death events per step
  StochasticCapacity:          logistic growth, K drawn from N(K_mean, K_stdev)
                               at every time point
  PeriodicCapacity:            logistic growth, K oscillating with period K_len

Randomness comes from an injected source (see ecosym.rng); pass a seeded
RandomSource to make trajectories reproducible.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from ecosym.base import CapacityModel, DiscreteModel
from ecosym.rng import GaussianSource, RandomSource
from ecosym.types import ModelKind

logger = logging.getLogger(__name__)


class _RandomDraws:
    """Holds the injected random source and carries it through clone()."""

    rng: GaussianSource

    def _init_rng(self, rng: Optional[GaussianSource]) -> None:
        self.rng = RandomSource() if rng is None else rng

    def clone(self, rng: Optional[GaussianSource] = None):
        """New instance with the same parameters.

        The clone draws from the same random stream unless rng is given.
        Capacity history and extinction state are never shared.
        """
        return type(self)(
            **self.parameter_values(),
            rng=self.rng if rng is None else rng,
        )


# ═══════════════════════════════════════════════════════════════════════
# DISCRETE-TIME STOCHASTIC
# ═══════════════════════════════════════════════════════════════════════

class EnvironmentalStochasticity(_RandomDraws, DiscreteModel):
    """Net growth rate fluctuates about a mean from step to step.

    N' = N + N * r_rand * timestep,  r_rand ~ N(r_mean, r_stdev), clamped at 0.
    """

    KIND = ModelKind.ENVIRONMENTAL_STOCHASTICITY
    PARAMETERS = ('r_mean', 'r_stdev', 'N0', 'b', 'd')

    def __init__(
        self,
        r_mean: float = 0.01,
        r_stdev: float = 0.05,
        N0: float = 100,
        b: float = 0.11,
        d: float = 0.1,
        *,
        rng: Optional[GaussianSource] = None,
    ):
        self.r_mean = r_mean
        self.r_stdev = r_stdev
        self._init_rng(rng)
        super().__init__(N0, b, d)

    def population_next(self, prev_pop: float, timestep: float) -> float:
        r_rand = self.rng.gaussian(self.r_mean, self.r_stdev)
        return max(0.0, prev_pop + prev_pop * r_rand * timestep)


class DemographicStochasticity(_RandomDraws, DiscreteModel):
    """Discrete, stochastic birth and death events.

    Each step:
      1. expected = (b + d) * N * timestep events
      2. count = floor(expected), plus one with probability frac(expected)
      3. each event, left to right, is a birth with probability b / (b + d),
         otherwise a death
    The result is clamped at zero.
    """

    KIND = ModelKind.DEMOGRAPHIC_STOCHASTICITY
    PARAMETERS = ('N0', 'b', 'd')

    def __init__(
        self,
        N0: float = 100,
        b: float = 0.11,
        d: float = 0.1,
        *,
        rng: Optional[GaussianSource] = None,
    ):
        self._init_rng(rng)
        super().__init__(N0, b, d)

    def refresh(self) -> None:
        super().refresh()
        self.event_rate = self.b + self.d

    @property
    def birth_probability(self) -> float:
        if self.event_rate == 0:
            return 0.0
        return self.b / self.event_rate

    def draw_event_count(self, expected_events: float) -> int:
        """Round expected_events to a whole count by a Bernoulli trial.

        Rounds up with probability equal to the fractional remainder, so
        the count's mean equals expected_events.
        """
        n = math.floor(expected_events)
        remainder = expected_events - n
        if self.rng.random() < remainder:
            n += 1
        return n

    def population_next(self, prev_pop: float, timestep: float) -> float:
        if self.event_rate == 0:
            return prev_pop
        n_events = self.draw_event_count(self.event_rate * prev_pop * timestep)
        p_birth = self.birth_probability

        next_pop = prev_pop
        events = []
        for _ in range(n_events):
            if self.rng.random() < p_birth:
                next_pop += 1
                events.append('B')
            else:
                next_pop -= 1
                events.append('D')
        logger.debug("events: %s", ''.join(events))
        return max(0.0, next_pop)


# ═══════════════════════════════════════════════════════════════════════
# VARIABLE CAPACITY
# ═══════════════════════════════════════════════════════════════════════

class StochasticCapacity(_RandomDraws, CapacityModel):
    """Logistic growth with K ~ N(K_mean, K_stdev) redrawn at every time point."""

    KIND = ModelKind.STOCHASTIC_CAPACITY
    PARAMETERS = ('K_mean', 'K_stdev', 'N0', 'b', 'd')

    def __init__(
        self,
        K_mean: float = 150,
        K_stdev: float = 10,
        N0: float = 100,
        b: float = 0.11,
        d: float = 0.1,
        *,
        rng: Optional[GaussianSource] = None,
    ):
        self.K_mean = K_mean
        self.K_stdev = K_stdev
        self._init_rng(rng)
        super().__init__(N0, b, d)

    def capacity(self, t: float) -> float:
        return self.rng.gaussian(self.K_mean, self.K_stdev)


class PeriodicCapacity(CapacityModel):
    """Logistic growth with K(t) = K_mean + K_amp * cos(2 pi t / K_len).

    K_amp >= K_mean is accepted: the capacity then reaches zero or goes
    negative in the trough of each cycle, and the population goes extinct
    once the logistic value turns negative.
    """

    KIND = ModelKind.PERIODIC_CAPACITY
    PARAMETERS = ('K_mean', 'K_amp', 'K_len', 'N0', 'b', 'd')

    def __init__(
        self,
        K_mean: float = 150,
        K_amp: float = 25,
        K_len: float = 100,
        N0: float = 100,
        b: float = 0.11,
        d: float = 0.1,
    ):
        self.K_mean = K_mean
        self.K_amp = K_amp
        self.K_len = K_len
        super().__init__(N0, b, d)

    def capacity(self, t: float) -> float:
        return self.K_mean + self.K_amp * math.cos(2 * math.pi * t / self.K_len)
