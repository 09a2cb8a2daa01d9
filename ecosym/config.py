"""Configuration system for ecosym runs.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → override.yaml → dict overrides (e.g. from the command line)

Top-level keys:
  simulation: time axis, seed, replicate count
  logging:    level and optional log file
  models:     list of {kind, label, params} entries
"""

from __future__ import annotations

import dataclasses
import logging
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ecosym.base import validate_parameter
from ecosym.errors import InvalidParameterError
from ecosym.registry import MODEL_REGISTRY, resolve_kind
from ecosym.timeseries import time_range
from ecosym.types import DEFAULT_PARAMETERS, ModelKind


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationSection:
    """Time axis and replication control."""
    seed: int = 42
    t_start: float = 0.0
    t_stop: float = 201.0         # excluded
    t_step: float = 20.0
    n_replicates: int = 1         # >1 runs stochastic kinds as an ensemble
    strict_spacing: bool = False  # discrete models reject uneven time points


@dataclass
class LoggingSection:
    """Logging output for scripts (library code never configures handlers)."""
    level: str = 'INFO'
    log_file: Optional[str] = None


@dataclass
class ModelSpec:
    """One configured model instance."""
    kind: str = ModelKind.CONTINUOUS_EXPONENTIAL.value
    label: Optional[str] = None
    params: Dict[str, float] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.label or self.kind


@dataclass
class EcosymConfig:
    """Complete run configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    logging: LoggingSection = field(default_factory=LoggingSection)
    models: List[ModelSpec] = field(default_factory=list)

    def timespan(self):
        s = self.simulation
        return time_range(s.t_start, s.t_stop, s.t_step)


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values (including the models list) are replaced
    - Keys in override but not base are added

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> EcosymConfig:
    """Convert a merged YAML dict to an EcosymConfig."""
    sections = {}
    section_map = {
        'simulation': SimulationSection,
        'logging': LoggingSection,
    }
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()

    models = []
    for entry in data.get('models') or []:
        if not isinstance(entry, dict):
            raise ValueError(f"models entries must be mappings, got {entry!r}")
        entry = dict(entry)  # don't mutate original
        entry['params'] = dict(entry.get('params') or {})
        models.append(_dict_to_section(ModelSpec, entry))
    sections['models'] = models

    return EcosymConfig(**sections)


def validate_config(config: EcosymConfig) -> None:
    """Validate configuration constraints.

    Raises:
        ValueError: On an invalid simulation or logging setting.
        InvalidParameterError: On an unknown model kind or parameter, or an
            out-of-domain parameter value (also a ValueError).
    """
    sim = config.simulation
    if isinstance(sim.seed, bool) or not isinstance(sim.seed, int):
        raise ValueError(f"simulation.seed must be an integer, got {sim.seed!r}")
    if sim.seed < 0:
        raise ValueError("simulation.seed must be non-negative")
    if sim.t_step == 0:
        raise ValueError("simulation.t_step must be non-zero")
    if len(config.timespan()) == 0:
        raise ValueError(
            f"simulation time span is empty: t_start={sim.t_start}, "
            f"t_stop={sim.t_stop}, t_step={sim.t_step}"
        )
    if sim.n_replicates < 1:
        raise ValueError(
            f"simulation.n_replicates must be >= 1, got {sim.n_replicates}"
        )
    if sim.t_step < 0:
        warnings.warn(
            f"simulation.t_step is negative ({sim.t_step}); time points descend "
            f"and discrete models will step with a negative interval.",
            UserWarning,
            stacklevel=2,
        )

    level = config.logging.level
    if not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ValueError(f"logging.level '{level}' is not a logging level")

    labels = set()
    for i, spec in enumerate(config.models):
        kind = resolve_kind(spec.kind)
        cls = MODEL_REGISTRY[kind]
        for name, value in spec.params.items():
            if name not in cls.PARAMETERS:
                raise InvalidParameterError(
                    f"models[{i}] ({spec.kind}) has no parameter '{name}'; "
                    f"expected a subset of {list(cls.PARAMETERS)}"
                )
            validate_parameter(name, value)
        if spec.name in labels:
            raise ValueError(f"models[{i}]: duplicate label '{spec.name}'")
        labels.add(spec.name)


def _read_yaml(path: Path) -> Dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(
    base_path: Union[str, Path],
    override_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict] = None,
) -> EcosymConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → override file → dict overrides.
    Each layer overrides only the fields it specifies; a models list in a
    later layer replaces the earlier list wholesale.

    Raises:
        FileNotFoundError: If base_path or override_path doesn't exist.
        ValueError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")
    config_dict = _read_yaml(base_path)

    if override_path is not None:
        override_path = Path(override_path)
        if not override_path.exists():
            raise FileNotFoundError(f"Override file not found: {override_path}")
        deep_merge(config_dict, _read_yaml(override_path))

    if overrides is not None:
        deep_merge(config_dict, overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> EcosymConfig:
    """Return an EcosymConfig with one default-parameter model of each kind."""
    config = EcosymConfig(models=[
        ModelSpec(kind=kind.value, params=dict(DEFAULT_PARAMETERS[kind]))
        for kind in ModelKind
    ])
    validate_config(config)
    return config
