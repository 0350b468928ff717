from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

# Real-world plans sit closer to 5%, but the synthetic maps have few, coarse
# precincts and a tight margin leaves almost no valid partitions.
POPULATION_MARGIN = 0.2

DEFAULT_MAX_ATTEMPTS = 50_000


# ----------------------------
# Config
# ----------------------------
@dataclass
class PlanConfig:
    num_districts: int = 5
    population_margin: float = POPULATION_MARGIN
    gap_threshold: int = 7
    favor_rep: bool = False

    # None = retry forever
    max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS
    # naive search: attempts per inner random plan; None = same as max_attempts
    plan_attempts: Optional[int] = None
    seed: Optional[int] = None
    verbose: bool = False


def params_from_cfg(cfg: dict, algo: str | None = None) -> PlanConfig:
    """
    Build a PlanConfig from a nested config dict.

    Keys are read from ``cfg["run"]``; ``cfg["algo"][algo]`` (when given)
    overrides them for one generator.
    """
    p = PlanConfig()
    run_cfg = cfg.get("run", {}) or {}
    algo_cfg = ((cfg.get("algo", {}) or {}).get(algo, {}) or {}) if algo else {}

    def pick(key, default):
        return algo_cfg.get(key, run_cfg.get(key, default))

    p.num_districts = int(pick("num_districts", p.num_districts))
    p.population_margin = float(pick("population_margin", p.population_margin))
    p.gap_threshold = int(pick("gap_threshold", p.gap_threshold))

    favor = pick("favor", None)
    if favor is not None:
        favor = str(favor).lower().strip()
        if favor not in {"dem", "rep"}:
            raise ValueError(f"favor must be 'dem' or 'rep', got {favor!r}")
        p.favor_rep = favor == "rep"
    else:
        p.favor_rep = bool(pick("favor_rep", p.favor_rep))

    max_attempts = pick("max_attempts", p.max_attempts)
    p.max_attempts = None if max_attempts is None else int(max_attempts)

    plan_attempts = pick("plan_attempts", p.plan_attempts)
    p.plan_attempts = None if plan_attempts is None else int(plan_attempts)

    seed = pick("seed", p.seed)
    p.seed = None if seed is None else int(seed)

    p.verbose = bool(pick("verbose", p.verbose))
    return p


def load_config(path: str | Path) -> dict:
    path = Path(path)
    with path.open("r") as f:
        cfg = yaml.safe_load(f)
    return cfg or {}
