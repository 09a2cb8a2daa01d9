"""Core data types for ecosym.

  - ModelKind: registry names for every concrete growth model
  - PopulationState: per-evaluation extinction state of capacity models
  - ParameterDescriptor: (name, value) pair handed to editing front-ends
  - DEFAULT_PARAMETERS: constructor defaults per model kind
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Tuple


# ═══════════════════════════════════════════════════════════════════════
# ENUMERATIONS
# ═══════════════════════════════════════════════════════════════════════

class ModelKind(str, Enum):
    """Registry names for the concrete model family.

    Continuous-time:  CONTINUOUS_EXPONENTIAL, CONTINUOUS_LOGISTIC,
                      STOCHASTIC_CAPACITY, PERIODIC_CAPACITY
    Discrete-time:    DISCRETE_EXPONENTIAL, DISCRETE_LOGISTIC,
                      ENVIRONMENTAL_STOCHASTICITY, DEMOGRAPHIC_STOCHASTICITY
    """
    CONTINUOUS_EXPONENTIAL      = 'continuous_exponential'
    DISCRETE_EXPONENTIAL        = 'discrete_exponential'
    CONTINUOUS_LOGISTIC         = 'continuous_logistic'
    DISCRETE_LOGISTIC           = 'discrete_logistic'
    ENVIRONMENTAL_STOCHASTICITY = 'environmental_stochasticity'
    DEMOGRAPHIC_STOCHASTICITY   = 'demographic_stochasticity'
    STOCHASTIC_CAPACITY         = 'stochastic_capacity'
    PERIODIC_CAPACITY           = 'periodic_capacity'


class PopulationState(IntEnum):
    """Extinction state of a capacity model within one evaluation.

    ALIVE → EXTINCT the first time a computed population would be negative.
    EXTINCT is terminal until the next apply_to_timespan() call.
    """
    ALIVE   = 0
    EXTINCT = 1


# ═══════════════════════════════════════════════════════════════════════
# PARAMETER DESCRIPTORS
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ParameterDescriptor:
    """One externally editable model parameter."""
    name: str
    value: float

    def as_tuple(self) -> Tuple[str, float]:
        return (self.name, self.value)


# Constructor defaults, in positional order
DEFAULT_PARAMETERS: Dict[ModelKind, Tuple[Tuple[str, float], ...]] = {
    ModelKind.CONTINUOUS_EXPONENTIAL: (
        ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.DISCRETE_EXPONENTIAL: (
        ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.CONTINUOUS_LOGISTIC: (
        ('K', 150.0), ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.DISCRETE_LOGISTIC: (
        ('K', 150.0), ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.ENVIRONMENTAL_STOCHASTICITY: (
        ('r_mean', 0.01), ('r_stdev', 0.05),
        ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.DEMOGRAPHIC_STOCHASTICITY: (
        ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.STOCHASTIC_CAPACITY: (
        ('K_mean', 150.0), ('K_stdev', 10.0),
        ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
    ModelKind.PERIODIC_CAPACITY: (
        ('K_mean', 150.0), ('K_amp', 25.0), ('K_len', 100.0),
        ('N0', 100.0), ('b', 0.11), ('d', 0.1),
    ),
}
