#!/usr/bin/env python3
"""Run the models described in a YAML configuration and save trajectories.

Loads the config (optionally merged with an override file and --set
values), evaluates every model over the configured time span, logs a
one-line summary per model, and writes the full result as JSON.

Usage:
    python scripts/run_models.py configs/example.yaml
    python scripts/run_models.py configs/example.yaml -o results/run.json
    python scripts/run_models.py configs/example.yaml --replicates 200 --seed 7
    python scripts/run_models.py configs/example.yaml --set simulation.t_step=1

References:
    - ecosym/config.py: load_config, EcosymConfig
    - ecosym/simulate.py: run_from_config, SimulationResult
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

import yaml

# ── Project imports ──────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from ecosym.config import load_config
from ecosym.logging_config import setup_logging
from ecosym.simulate import run_from_config
from ecosym.utils import config_hash


def parse_set_overrides(assignments: List[str]) -> Dict[str, Any]:
    """Turn ['simulation.t_step=1', ...] into a nested override dict.

    Values are parsed as YAML scalars, so numbers and booleans keep their type.
    """
    overrides: Dict[str, Any] = {}
    for item in assignments:
        if '=' not in item:
            raise ValueError(f"--set expects key.path=value, got '{item}'")
        path, raw = item.split('=', 1)
        keys = path.split('.')
        node = overrides
        for key in keys[:-1]:
            node = node.setdefault(key, {})
        node[keys[-1]] = yaml.safe_load(raw)
    return overrides


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('config', type=Path, help="Base YAML configuration")
    parser.add_argument('--override', type=Path, default=None,
                        help="YAML file merged over the base config")
    parser.add_argument('--set', dest='assignments', action='append', default=[],
                        metavar='KEY=VALUE', help="Override a single config value")
    parser.add_argument('--seed', type=int, default=None,
                        help="Shortcut for --set simulation.seed=N")
    parser.add_argument('--replicates', type=int, default=None,
                        help="Shortcut for --set simulation.n_replicates=N")
    parser.add_argument('-o', '--output', type=Path, default=None,
                        help="Write JSON results here (default: results/<config name>.json)")
    args = parser.parse_args(argv)

    overrides = parse_set_overrides(args.assignments)
    if args.seed is not None:
        overrides.setdefault('simulation', {})['seed'] = args.seed
    if args.replicates is not None:
        overrides.setdefault('simulation', {})['n_replicates'] = args.replicates

    config = load_config(args.config, args.override, overrides or None)
    setup_logging(config.logging.level, config.logging.log_file)

    result = run_from_config(config)
    payload = result.to_dict()
    payload['config_hash'] = config_hash(args.config.read_text())

    output = args.output or PROJECT_ROOT / 'results' / f"{args.config.stem}.json"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(payload, indent=2))
    logging.getLogger("ecosym").info("Wrote %s", output)
    return 0


if __name__ == '__main__':
    sys.exit(main())
