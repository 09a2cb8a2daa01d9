"""Tests for ecosym.deterministic — exponential and logistic growth."""

import math

import numpy as np
import pytest

from ecosym.base import logistic_population
from ecosym.deterministic import (
    ContinuousExponential,
    ContinuousLogistic,
    DiscreteExponential,
    DiscreteLogistic,
)
from ecosym.timeseries import time_range
from ecosym.types import PopulationState


# ── Exponential ──────────────────────────────────────────────────────

class TestContinuousExponential:
    def test_initial_population_exact(self):
        assert ContinuousExponential().population(0) == 100.0
        assert ContinuousExponential(N0=37.5).population(0) == 37.5

    def test_semigroup_property(self):
        model = ContinuousExponential()
        for t1, t2 in [(0, 10), (5, 20), (37.5, 62.5), (100, 100)]:
            assert model.population(t1 + t2) == pytest.approx(
                model.population(t1) * math.exp(model.r * t2), rel=1e-12
            )

    def test_doubling(self):
        model = ContinuousExponential()
        assert model.population(model.doubling_time()) == pytest.approx(200.0)

    def test_trajectory_matches_population(self):
        model = ContinuousExponential()
        times = time_range(0, 101, 10)
        np.testing.assert_allclose(
            model.apply_to_timespan(times), [model.population(t) for t in times]
        )

    def test_uneven_times_allowed(self):
        pops = ContinuousExponential().apply_to_timespan([0, 1, 7, 50])
        assert len(pops) == 4
        assert np.all(np.diff(pops) > 0)

    def test_decline(self):
        pops = ContinuousExponential(b=0.1, d=0.2).apply_to_timespan(time_range(0, 50, 5))
        assert np.all(np.diff(pops) < 0)
        assert np.all(pops > 0)

    def test_overflow_gives_infinity(self):
        pops = ContinuousExponential(N0=100, b=2.0, d=0.0).apply_to_timespan(
            time_range(0, 501, 20)
        )
        assert len(pops) == 26
        assert pops[0] == 100.0
        assert np.all(np.isfinite(pops[:17]))
        assert np.isinf(pops[-1])

    def test_overflow_with_zero_population(self):
        assert ContinuousExponential(N0=0, b=2.0, d=0.0).population(1000) == 0.0


class TestDiscreteExponential:
    def test_powers_of_lambda(self):
        model = DiscreteExponential()
        pops = model.apply_to_timespan(time_range(0, 20))
        for i, p in enumerate(pops):
            assert p == pytest.approx(100 * model.lambda_ ** i)

    def test_evaluated_at_time_points(self):
        """Closed form at each time point, not one step per element."""
        model = DiscreteExponential(N0=10, b=1.0, d=0.0)
        np.testing.assert_allclose(model.apply_to_timespan([0, 2, 5]), [10, 40, 320])

    def test_recurrence_agrees_with_closed_form(self):
        model = DiscreteExponential()
        for t in range(10):
            assert model.population_next(model.population(t), 1) == pytest.approx(
                model.population(t + 1)
            )

    def test_total_loss_in_one_step(self):
        model = DiscreteExponential(N0=100, b=0.0, d=1.5)
        assert model.lambda_ < 0
        np.testing.assert_array_equal(model.apply_to_timespan([0, 1, 2]), [100, 0, 0])
        assert model.population_next(100, 1) == 0.0

    def test_length_preserved(self):
        assert len(DiscreteExponential().apply_to_timespan(time_range(0, 101, 10))) == 11

    def test_overflow_gives_infinity(self):
        model = DiscreteExponential(N0=100, b=2.0, d=0.0)
        assert model.population(1000) == math.inf


# ── Logistic ─────────────────────────────────────────────────────────

class TestContinuousLogistic:
    def test_initial_population_exact(self):
        assert ContinuousLogistic(K=150, N0=100, b=0.11, d=0.1).population(0) == 100.0

    def test_approaches_capacity(self):
        model = ContinuousLogistic(K=150, N0=100, b=0.11, d=0.1)
        assert model.population(5000) == pytest.approx(150.0, rel=1e-9)

    def test_monotonic_below_capacity(self):
        pops = ContinuousLogistic().apply_to_timespan(time_range(0, 501, 20))
        assert np.all(np.diff(pops) > 0)
        assert np.all(pops <= 150.0)

    def test_decreases_toward_capacity_from_above(self):
        pops = ContinuousLogistic(150, 200).apply_to_timespan(time_range(0, 501, 20))
        assert pops[0] == 200.0
        assert np.all(np.diff(pops) < 0)
        assert np.all(pops >= 150.0)

    def test_zero_initial_population(self):
        pops = ContinuousLogistic(N0=0).apply_to_timespan(time_range(0, 100, 10))
        np.testing.assert_array_equal(pops, np.zeros(10))

    def test_capacity_history_is_constant(self):
        model = ContinuousLogistic(K=120)
        model.apply_to_timespan(time_range(0, 5))
        assert model.capacity_history == [120.0] * 5

    def test_divergent_solution_goes_extinct(self):
        """r < 0 with N0 > K: the denominator crosses zero near t = 6.93."""
        model = ContinuousLogistic(K=100, N0=200, b=0.0, d=0.1)
        pops = model.apply_to_timespan(time_range(0, 20))
        assert np.all(pops[:7] > 0)
        np.testing.assert_array_equal(pops[7:], np.zeros(13))
        assert model.state == PopulationState.EXTINCT

    def test_extinction_resets_between_evaluations(self):
        model = ContinuousLogistic(K=100, N0=200, b=0.0, d=0.1)
        model.apply_to_timespan(time_range(0, 20))
        assert model.extinct
        pops = model.apply_to_timespan([0, 1, 2])
        assert not model.extinct
        assert np.all(pops > 0)

    def test_long_decline_reaches_zero(self):
        """exp(-r t) overflows late in the span; the limit is zero, not extinction."""
        model = ContinuousLogistic(K=150, N0=100, b=0.0, d=1.0)
        pops = model.apply_to_timespan(time_range(0, 1001, 20))
        assert len(pops) == 51
        assert pops[0] == pytest.approx(100.0)
        assert pops[-1] == 0.0
        assert np.all(np.diff(pops) <= 0)
        assert not model.extinct

    def test_overflow_after_divergence_is_extinction(self):
        model = ContinuousLogistic(K=100, N0=200, b=0.0, d=1.0)
        pops = model.apply_to_timespan([0, 1000])
        np.testing.assert_array_equal(pops, [200.0, 0.0])
        assert model.extinct

    def test_population_ignores_evaluation_state(self):
        model = ContinuousLogistic(K=100, N0=200, b=0.0, d=0.1)
        model.apply_to_timespan(time_range(0, 20))
        assert model.extinct
        assert model.population(0) == 200.0
        assert len(model.capacity_history) == 20


class TestLogisticLimit:
    def test_decay_limit(self):
        assert logistic_population(1000, 150, 100, -1.0) == 0.0

    def test_divergent_limit(self):
        assert logistic_population(1000, 100, 200, -1.0) == -math.inf

    def test_at_capacity(self):
        assert logistic_population(1000, 100, 100, -1.0) == 100


class TestDiscreteLogistic:
    def test_first_value_is_N0(self):
        assert DiscreteLogistic().apply_to_timespan(time_range(0, 501, 20))[0] == 100.0

    def test_logistic_map_step(self):
        model = DiscreteLogistic(K=500, N0=200, b=3.52, d=1.0)
        assert model.population_next(200, 20) == pytest.approx(200 + 2.52 * 200 * 0.6)

    def test_step_length_does_not_enter(self):
        model = DiscreteLogistic()
        assert model.population_next(100, 1) == model.population_next(100, 20)

    def test_converges_to_capacity(self):
        pops = DiscreteLogistic(K=150, N0=100, b=0.11, d=0.1).apply_to_timespan(time_range(0, 2000))
        assert pops[-1] == pytest.approx(150.0, abs=1e-3)

    def test_chaotic_regime_oscillates(self):
        model = DiscreteLogistic(K=500, N0=200, b=3.52, d=1.0)
        pops = model.apply_to_timespan(time_range(0, 501, 20))
        diffs = np.diff(pops)
        assert np.any(diffs > 0) and np.any(diffs < 0)
        assert np.all(pops >= 0)

    def test_overshoot_clamped_at_zero(self):
        model = DiscreteLogistic(K=100, N0=400, b=1.0, d=0.0)
        np.testing.assert_array_equal(model.apply_to_timespan([0, 1, 2]), [400, 0, 0])

    def test_never_negative_across_growth_rates(self):
        times = time_range(0, 200)
        for b in (1.5, 2.8, 3.25, 3.52, 4.5):
            pops = DiscreteLogistic(K=500, N0=200, b=b, d=1.0).apply_to_timespan(times)
            assert np.all(pops >= 0)
            assert len(pops) == len(times)
