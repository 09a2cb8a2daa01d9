"""Trajectory runs over one or many configured models.

  run_model:       one model, one trajectory
  run_models:      several models over a shared time axis
  run_ensemble:    one model, many independent replicates
  run_from_config: everything an EcosymConfig describes

Results carry plain NumPy arrays; SimulationResult.to_dict() turns them
into JSON-serialisable lists for plotting front-ends.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from ecosym.base import CapacityModel, DiscreteModel, PopulationModel, as_timespan
from ecosym.config import EcosymConfig
from ecosym.errors import InvalidInputError
from ecosym.registry import STOCHASTIC_KINDS, create_model
from ecosym.rng import RandomSource, spawn_sources
from ecosym.timeseries import ensemble_mean, ensemble_summary
from ecosym.utils import timer

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════
# RESULT CONTAINERS
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class ModelRun:
    """Trajectory (or ensemble mean trajectory) for one model."""
    label: str
    kind: str
    parameters: Dict[str, float]
    trajectory: np.ndarray
    capacity_history: Optional[np.ndarray] = None  # capacity models only
    extinct: bool = False
    n_replicates: int = 1
    # Ensemble statistics (n_replicates > 1): mean/std/min/max/extinct_fraction
    summary: Optional[Dict[str, np.ndarray]] = None

    @property
    def final_population(self) -> float:
        """Last trajectory value; NaN for an empty time span."""
        if self.trajectory.size == 0:
            return math.nan
        return float(self.trajectory[-1])

    def to_dict(self) -> dict:
        out = {
            'label': self.label,
            'kind': self.kind,
            'parameters': dict(self.parameters),
            'trajectory': self.trajectory.tolist(),
            'extinct': self.extinct,
            'n_replicates': self.n_replicates,
        }
        if self.capacity_history is not None:
            out['capacity_history'] = self.capacity_history.tolist()
        if self.summary is not None:
            out['summary'] = {k: v.tolist() for k, v in self.summary.items()}
        return out


@dataclass
class SimulationResult:
    """Shared time axis plus one ModelRun per model."""
    times: np.ndarray
    runs: List[ModelRun] = field(default_factory=list)
    seed: Optional[int] = None

    def __getitem__(self, label: str) -> ModelRun:
        for run in self.runs:
            if run.label == label:
                return run
        raise KeyError(f"No run labelled '{label}'")

    @property
    def labels(self) -> List[str]:
        return [run.label for run in self.runs]

    def to_dict(self) -> dict:
        return {
            'times': self.times.tolist(),
            'seed': self.seed,
            'runs': [run.to_dict() for run in self.runs],
        }


# ═══════════════════════════════════════════════════════════════════════
# RUNNERS
# ═══════════════════════════════════════════════════════════════════════

def _evaluate(model: PopulationModel, times: np.ndarray, strict: bool) -> np.ndarray:
    if isinstance(model, DiscreteModel):
        return model.apply_to_timespan(times, strict=strict)
    return model.apply_to_timespan(times)


def _replicate(model: PopulationModel, rng: Optional[RandomSource]) -> PopulationModel:
    if rng is not None and model.KIND in STOCHASTIC_KINDS:
        return model.clone(rng=rng)
    return model.clone()


def run_model(
    model: PopulationModel,
    times: Sequence[float],
    label: Optional[str] = None,
    strict: bool = False,
) -> ModelRun:
    """Evaluate one model over times.

    Args:
        model: Any concrete model.
        times: Ordered time points.
        label: Run label (defaults to the model kind).
        strict: Reject uneven spacing for discrete models.
    """
    t = as_timespan(times)
    trajectory = _evaluate(model, t, strict)

    capacity_history = None
    extinct = False
    if isinstance(model, CapacityModel):
        capacity_history = np.asarray(model.capacity_history, dtype=np.float64)
        extinct = model.extinct

    run = ModelRun(
        label=label or model.KIND.value,
        kind=model.KIND.value,
        parameters=model.parameter_values(),
        trajectory=trajectory,
        capacity_history=capacity_history,
        extinct=extinct,
    )
    if t.size == 0:
        logger.info("%s: empty time span", run.label)
        return run
    logger.info(
        "%s: N(%g) = %.4g -> N(%g) = %.4g%s",
        run.label, t[0], trajectory[0], t[-1], trajectory[-1],
        " (extinct)" if extinct else "",
    )
    return run


def run_models(
    models: Sequence[PopulationModel],
    times: Sequence[float],
    labels: Optional[Sequence[str]] = None,
    strict: bool = False,
) -> SimulationResult:
    """Evaluate several models over one shared time axis.

    Raises:
        InvalidInputError: If labels is given with the wrong length.
    """
    t = as_timespan(times)
    if labels is not None and len(labels) != len(models):
        raise InvalidInputError(
            f"got {len(labels)} labels for {len(models)} models"
        )
    runs = [
        run_model(model, t, label=None if labels is None else labels[i], strict=strict)
        for i, model in enumerate(models)
    ]
    return SimulationResult(times=t, runs=runs)


def run_ensemble(
    model: PopulationModel,
    times: Sequence[float],
    n_replicates: int,
    master_seed: Union[int, np.random.SeedSequence] = 0,
    strict: bool = False,
) -> np.ndarray:
    """Evaluate independent replicates of a model.

    Each replicate is a clone; stochastic kinds get their own random
    stream from spawn_sources(master_seed, n_replicates), so the ensemble
    is reproducible and the template model's stream is left untouched.

    Returns:
        Array of shape (n_replicates, len(times)).

    Raises:
        InvalidInputError: If n_replicates < 1.
    """
    if n_replicates < 1:
        raise InvalidInputError(f"n_replicates must be >= 1, got {n_replicates}")
    t = as_timespan(times)
    sources = spawn_sources(master_seed, n_replicates)
    out = np.empty((n_replicates, t.size), dtype=np.float64)
    for i, src in enumerate(sources):
        out[i] = _evaluate(_replicate(model, src), t, strict)
    return out


def run_from_config(config: EcosymConfig) -> SimulationResult:
    """Build every configured model and evaluate it over the configured span.

    Each model gets its own child seed of simulation.seed. With
    n_replicates > 1 every model is run as an ensemble and the reported
    trajectory is the ensemble mean.
    """
    sim = config.simulation
    times = config.timespan()
    model_seeds = np.random.SeedSequence(sim.seed).spawn(len(config.models))

    runs = []
    with timer(f"{len(config.models)} models x {sim.n_replicates} replicates"):
        for spec, seed in zip(config.models, model_seeds):
            model = create_model(spec.kind, spec.params, rng=RandomSource(seed))
            if sim.n_replicates == 1:
                runs.append(run_model(model, times, label=spec.name,
                                      strict=sim.strict_spacing))
                continue

            replicates = run_ensemble(model, times, sim.n_replicates,
                                      master_seed=seed, strict=sim.strict_spacing)
            mean = ensemble_mean(replicates)
            summary = ensemble_summary(replicates)
            runs.append(ModelRun(
                label=spec.name,
                kind=model.KIND.value,
                parameters=model.parameter_values(),
                trajectory=mean,
                extinct=bool(summary['extinct_fraction'][-1] == 1.0),
                n_replicates=sim.n_replicates,
                summary=summary,
            ))
            logger.info(
                "%s: ensemble of %d, mean N(%g) = %.4g, extinct fraction %.2f",
                spec.name, sim.n_replicates, times[-1], mean[-1],
                summary['extinct_fraction'][-1],
            )

    return SimulationResult(times=as_timespan(times), runs=runs, seed=sim.seed)
