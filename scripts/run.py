"""
Generate a plan over one of the built-in maps and print its district table.

example usage from repo root:
python3 scripts/run.py --config config.yaml --algo gerrymander --map grid --favor rep
"""
from __future__ import annotations

import argparse
from pathlib import Path

from gerrymander.algos import greedy_gerrymander, random_plan
from gerrymander.algos.efficiency_gap import district_stats, efficiency_gap
from gerrymander.config import load_config, params_from_cfg
from gerrymander.data.sample_maps import SAMPLE_MAPS


def _resolve_config_path(config_arg: str) -> Path:
    repo_root = Path(__file__).resolve().parents[1]  # scripts/.. = repo root
    p = Path(config_arg).expanduser()
    if not p.is_absolute():
        p = (repo_root / p).resolve()
    return p


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", type=str, default="config.yaml")
    ap.add_argument("--algo", choices=["random", "gerrymander", "naive"], default=None)
    ap.add_argument("--map", choices=sorted(SAMPLE_MAPS), default=None)
    ap.add_argument("--favor", choices=["dem", "rep"], default=None)
    args = ap.parse_args()

    cfg = load_config(_resolve_config_path(args.config))
    run_cfg = cfg.setdefault("run", {})
    if args.favor:
        run_cfg["favor"] = args.favor

    algo = args.algo or run_cfg.get("algo", "random")
    map_name = args.map or run_cfg.get("map", "grid")
    if map_name not in SAMPLE_MAPS:
        raise ValueError(f"Unknown map: {map_name}")

    graph = SAMPLE_MAPS[map_name]()
    print(f"1) loaded map '{map_name}': {graph.size()} precincts, population {graph.total_population()}")

    print(f"2) running {algo}...")
    if algo == "random":
        plan = random_plan.run(graph, cfg)
    elif algo == "naive":
        plan = random_plan.run_naive(graph, cfg)
    elif algo == "gerrymander":
        plan = greedy_gerrymander.run(graph, cfg, threshold=run_cfg.get("require_threshold"))
    else:
        raise ValueError(f"Unknown algo: {algo}")

    params = params_from_cfg(cfg, algo)
    print("3) district stats")
    print(district_stats(graph, plan).to_string(index=False))
    print(f"   efficiency gap = {efficiency_gap(graph, plan, params.population_margin)}%")


if __name__ == "__main__":
    main()
