"""Time-axis construction and trajectory aggregation helpers."""

from __future__ import annotations

import math
from typing import Dict, Sequence

import numpy as np

from ecosym.errors import InvalidInputError


def time_range(start: float, stop: float, step: float = 1) -> np.ndarray:
    """Evenly spaced time points from start (included) to stop (excluded).

    Point count is ceil((stop - start) / step); a non-positive count gives
    an empty array.

    Example:
        >>> time_range(0, 201, 20).tolist()
        [0, 20, 40, 60, 80, 100, 120, 140, 160, 180, 200]

    Raises:
        InvalidInputError: If step is zero.
    """
    if step == 0:
        raise InvalidInputError("time_range step must be non-zero")
    n = max(0, math.ceil((stop - start) / step))
    return start + np.arange(n) * step


def is_evenly_spaced(times: Sequence[float], rtol: float = 1e-9) -> bool:
    """True if consecutive time points share one interval (within rtol)."""
    t = np.asarray(times, dtype=np.float64)
    if t.size < 3:
        return True
    diffs = np.diff(t)
    return bool(np.allclose(diffs, diffs[0], rtol=rtol, atol=0.0))


def trajectory_mean(trajectory: Sequence[float]) -> float:
    """Mean population over a single trajectory.

    Raises:
        InvalidInputError: If the trajectory is empty.
    """
    arr = np.asarray(trajectory, dtype=np.float64)
    if arr.size == 0:
        raise InvalidInputError("cannot average an empty trajectory")
    return float(arr.mean())


def ensemble_mean(trajectories: Sequence[Sequence[float]]) -> np.ndarray:
    """Pointwise mean across replicate trajectories of equal length.

    Raises:
        InvalidInputError: If there are no replicates or lengths differ.
    """
    arr = _as_ensemble(trajectories)
    return arr.mean(axis=0)


def ensemble_summary(trajectories: Sequence[Sequence[float]]) -> Dict[str, np.ndarray]:
    """Pointwise mean, std, min, max and extinct fraction across replicates."""
    arr = _as_ensemble(trajectories)
    return {
        'mean': arr.mean(axis=0),
        'std': arr.std(axis=0),
        'min': arr.min(axis=0),
        'max': arr.max(axis=0),
        'extinct_fraction': (arr <= 0.0).mean(axis=0),
    }


def _as_ensemble(trajectories: Sequence[Sequence[float]]) -> np.ndarray:
    if len(trajectories) == 0:
        raise InvalidInputError("ensemble has no replicates")
    lengths = {len(t) for t in trajectories}
    if len(lengths) != 1:
        raise InvalidInputError(
            f"replicate trajectories differ in length: {sorted(lengths)}"
        )
    return np.asarray(trajectories, dtype=np.float64)
