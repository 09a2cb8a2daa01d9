"""Seeded random sources for reproducible stochastic trajectories.

Wraps a NumPy PCG64 Generator and adds the Box–Muller Gaussian draw used
by the stochastic models. Independent streams for ensembles come from
SeedSequence spawning:
  - Statistical independence between replicate streams
  - Bit-exact replay with the same master seed
  - Adding replicates doesn't change earlier replicates' streams
"""

from __future__ import annotations

import math
from typing import Dict, List, Optional, Protocol, Union

import numpy as np


class GaussianSource(Protocol):
    """Anything the stochastic models can draw from."""

    def random(self) -> float: ...

    def uniform(self) -> float: ...

    def gaussian(self, mean: float = 0.0, stdev: float = 1.0) -> float: ...


class RandomSource:
    """Uniform, Bernoulli and Gaussian draws from one PCG64 stream.

    Args:
        seed: Integer seed, SeedSequence, or None for OS entropy.
        generator: Existing Generator to wrap (overrides seed).

    Example:
        >>> src = RandomSource(42)
        >>> src.gaussian(0.01, 0.05)  # reproducible
    """

    def __init__(
        self,
        seed: Union[int, np.random.SeedSequence, None] = None,
        generator: Optional[np.random.Generator] = None,
    ):
        if generator is None:
            generator = np.random.Generator(np.random.PCG64(seed))
        self.generator = generator

    def random(self) -> float:
        """Uniform draw on [0, 1)."""
        return float(self.generator.random())

    def uniform(self) -> float:
        """Uniform draw on the open interval (0, 1); exact zeros are redrawn."""
        u = 0.0
        while u == 0.0:
            u = self.random()
        return u

    def bernoulli(self, p: float) -> bool:
        """True with probability p."""
        return self.random() < p

    def gaussian(self, mean: float = 0.0, stdev: float = 1.0) -> float:
        """One normal sample via the Box–Muller transform."""
        u1 = self.uniform()
        u2 = self.uniform()
        z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        return mean + z * stdev

    # ── checkpointing ────────────────────────────────────────────────

    def snapshot(self) -> dict:
        """Capture the bit-generator state (restorable with restore())."""
        return self.generator.bit_generator.state

    def restore(self, state: dict) -> None:
        self.generator.bit_generator.state = state


def spawn_sources(
    master_seed: Union[int, np.random.SeedSequence],
    n_streams: int,
) -> List[RandomSource]:
    """Create independent RandomSource streams from one master seed.

    Uses SeedSequence spawning so streams never overlap and stream i is
    identical no matter how many streams are requested.

    Args:
        master_seed: Master seed (non-negative integer) or a SeedSequence
            to spawn from.
        n_streams: Number of streams to create.

    Returns:
        List of n_streams RandomSource instances.

    Raises:
        ValueError: If master_seed or n_streams is negative.
    """
    if isinstance(master_seed, np.random.SeedSequence):
        ss = master_seed
    elif master_seed < 0:
        raise ValueError(f"master_seed must be non-negative, got {master_seed}")
    else:
        ss = np.random.SeedSequence(master_seed)
    if n_streams < 0:
        raise ValueError(f"n_streams must be non-negative, got {n_streams}")
    return [RandomSource(child) for child in ss.spawn(n_streams)]


def snapshot_state(sources: Dict[str, RandomSource]) -> Dict[str, dict]:
    """Capture the state of a named set of sources for checkpointing."""
    return {name: src.snapshot() for name, src in sources.items()}


def restore_state(
    sources: Dict[str, RandomSource],
    states: Dict[str, dict],
) -> None:
    """Restore a named set of sources from snapshot_state() output.

    Raises:
        KeyError: If a stream in states doesn't exist in sources.
    """
    for name, state in states.items():
        if name not in sources:
            raise KeyError(f"Cannot restore RNG state for unknown stream '{name}'")
        sources[name].restore(state)
