"""Model lookup by kind name, for configuration files and front-ends."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Type, Union

from ecosym.base import PopulationModel
from ecosym.deterministic import (
    ContinuousExponential,
    ContinuousLogistic,
    DiscreteExponential,
    DiscreteLogistic,
)
from ecosym.errors import InvalidParameterError
from ecosym.rng import GaussianSource
from ecosym.stochastic import (
    DemographicStochasticity,
    EnvironmentalStochasticity,
    PeriodicCapacity,
    StochasticCapacity,
)
from ecosym.types import ModelKind


MODEL_REGISTRY: Dict[ModelKind, Type[PopulationModel]] = {
    cls.KIND: cls
    for cls in (
        ContinuousExponential,
        DiscreteExponential,
        ContinuousLogistic,
        DiscreteLogistic,
        EnvironmentalStochasticity,
        DemographicStochasticity,
        StochasticCapacity,
        PeriodicCapacity,
    )
}

# Models whose constructor takes an injected random source
STOCHASTIC_KINDS = frozenset({
    ModelKind.ENVIRONMENTAL_STOCHASTICITY,
    ModelKind.DEMOGRAPHIC_STOCHASTICITY,
    ModelKind.STOCHASTIC_CAPACITY,
})


def resolve_kind(kind: Union[str, ModelKind]) -> ModelKind:
    """Map a kind name to a ModelKind.

    Raises:
        InvalidParameterError: If the name is not a registered kind.
    """
    try:
        return ModelKind(kind)
    except ValueError:
        valid = sorted(k.value for k in ModelKind)
        raise InvalidParameterError(
            f"unknown model kind '{kind}', expected one of {valid}"
        ) from None


def create_model(
    kind: Union[str, ModelKind],
    params: Optional[Mapping[str, float]] = None,
    rng: Optional[GaussianSource] = None,
) -> PopulationModel:
    """Construct a model by kind name; omitted parameters take their defaults.

    Args:
        kind: ModelKind or its string value, e.g. 'discrete_logistic'.
        params: Parameter values keyed by descriptor name.
        rng: Random source for stochastic kinds (ignored otherwise).

    Raises:
        InvalidParameterError: Unknown kind, unknown parameter name, or
            out-of-domain value.
    """
    kind = resolve_kind(kind)
    cls = MODEL_REGISTRY[kind]
    params = dict(params or {})

    unknown = set(params) - set(cls.PARAMETERS)
    if unknown:
        raise InvalidParameterError(
            f"{cls.__name__} has no parameter(s) {sorted(unknown)}; "
            f"expected a subset of {list(cls.PARAMETERS)}"
        )
    if kind in STOCHASTIC_KINDS:
        return cls(**params, rng=rng)
    return cls(**params)
