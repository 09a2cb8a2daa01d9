"""ecosym: population growth under classic ecological models.

A small library of growth models producing population trajectories over
an ordered span of time points:
  - Exponential growth, continuous (N0 e^rt) and discrete (N0 lambda^t)
  - Logistic growth, continuous (closed form) and discrete (logistic map)
  - Environmental stochasticity (Gaussian per-step growth rate)
  - Demographic stochasticity (whole-number birth/death events)
  - Stochastic and periodic carrying capacity, with extinction tracking
"""

from ecosym.base import CapacityModel, ContinuousModel, DiscreteModel, PopulationModel
from ecosym.deterministic import (
    ContinuousExponential,
    ContinuousLogistic,
    DiscreteExponential,
    DiscreteLogistic,
)
from ecosym.errors import EcosymError, InvalidInputError, InvalidParameterError
from ecosym.registry import MODEL_REGISTRY, create_model
from ecosym.rng import RandomSource, spawn_sources
from ecosym.stochastic import (
    DemographicStochasticity,
    EnvironmentalStochasticity,
    PeriodicCapacity,
    StochasticCapacity,
)
from ecosym.timeseries import ensemble_mean, time_range, trajectory_mean
from ecosym.types import ModelKind, ParameterDescriptor, PopulationState

__version__ = "0.1.0"
