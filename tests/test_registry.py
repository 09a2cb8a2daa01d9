"""Tests for ecosym.registry and ecosym.types — model lookup and defaults."""

import pytest

from ecosym.base import ContinuousModel, DiscreteModel
from ecosym.errors import InvalidParameterError
from ecosym.registry import MODEL_REGISTRY, STOCHASTIC_KINDS, create_model, resolve_kind
from ecosym.rng import RandomSource
from ecosym.stochastic import DemographicStochasticity
from ecosym.types import (
    DEFAULT_PARAMETERS,
    ModelKind,
    ParameterDescriptor,
    PopulationState,
)


class TestModelKind:
    def test_every_kind_registered(self):
        assert set(MODEL_REGISTRY) == set(ModelKind)
        assert len(ModelKind) == 8

    def test_string_values(self):
        assert ModelKind('discrete_logistic') is ModelKind.DISCRETE_LOGISTIC
        assert ModelKind.PERIODIC_CAPACITY == 'periodic_capacity'

    def test_time_base(self):
        continuous = {k for k, cls in MODEL_REGISTRY.items() if issubclass(cls, ContinuousModel)}
        discrete = {k for k, cls in MODEL_REGISTRY.items() if issubclass(cls, DiscreteModel)}
        assert continuous == {
            ModelKind.CONTINUOUS_EXPONENTIAL,
            ModelKind.CONTINUOUS_LOGISTIC,
            ModelKind.STOCHASTIC_CAPACITY,
            ModelKind.PERIODIC_CAPACITY,
        }
        assert discrete == set(ModelKind) - continuous


class TestPopulationState:
    def test_values(self):
        assert PopulationState.ALIVE == 0
        assert PopulationState.EXTINCT == 1


class TestParameterDescriptor:
    def test_as_tuple(self):
        assert ParameterDescriptor('K', 150.0).as_tuple() == ('K', 150.0)

    def test_frozen(self):
        p = ParameterDescriptor('K', 150.0)
        with pytest.raises(AttributeError):
            p.value = 1.0


class TestDefaults:
    @pytest.mark.parametrize("kind", list(ModelKind))
    def test_constructor_defaults_match_table(self, kind):
        model = create_model(kind)
        assert model.parameter_values() == dict(DEFAULT_PARAMETERS[kind])

    @pytest.mark.parametrize("kind", list(ModelKind))
    def test_descriptor_order_matches_table(self, kind):
        model = MODEL_REGISTRY[kind]() if kind not in STOCHASTIC_KINDS else create_model(kind)
        assert [p.name for p in model.parameters()] == [n for n, _ in DEFAULT_PARAMETERS[kind]]

    @pytest.mark.parametrize("kind", list(ModelKind))
    def test_common_parameters_present(self, kind):
        names = MODEL_REGISTRY[kind].PARAMETERS
        assert {'N0', 'b', 'd'} <= set(names)


class TestCreateModel:
    def test_by_string(self):
        model = create_model('continuous_logistic', {'K': 300})
        assert model.K == 300.0
        assert model.N0 == 100.0

    def test_stochastic_gets_rng(self):
        src = RandomSource(1)
        model = create_model(ModelKind.DEMOGRAPHIC_STOCHASTICITY, rng=src)
        assert isinstance(model, DemographicStochasticity)
        assert model.rng is src

    def test_rng_ignored_for_deterministic(self):
        model = create_model('periodic_capacity', rng=RandomSource(1))
        assert not hasattr(model, 'rng')

    def test_unknown_kind(self):
        with pytest.raises(InvalidParameterError, match="unknown model kind"):
            create_model('gompertz')

    def test_unknown_parameter(self):
        with pytest.raises(InvalidParameterError, match="no parameter"):
            create_model('continuous_exponential', {'K': 10})

    def test_out_of_domain_parameter(self):
        with pytest.raises(InvalidParameterError):
            create_model('stochastic_capacity', {'K_stdev': -1})

    def test_resolve_kind_passthrough(self):
        assert resolve_kind(ModelKind.DISCRETE_EXPONENTIAL) is ModelKind.DISCRETE_EXPONENTIAL
