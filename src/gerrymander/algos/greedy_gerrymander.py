# src/gerrymander/algos/greedy_gerrymander.py
#
# Goal: plans skewed toward one party.
# - Seed each district at a random open precinct (same seeding as random_plan)
# - Grow greedily: from the frontier of open neighbours take the precinct that
#   most increases the opponent's wasted votes relative to our own
# - Stop once the district population passes the mean or the frontier dries up
# - Retry whole plans until one validates (and, optionally, beats a gap threshold)
#
# Entry point:
#   gerrymander(graph, num_districts, favor_rep, ...) -> plan
#   run(graph, cfg)
#
from __future__ import annotations

import random
from typing import List, Optional, Set

from gerrymander.algos.efficiency_gap import is_gerrymandered, party_advantage
from gerrymander.algos.random_plan import (
    accepts_plan,
    check_district_count,
    partition_by_growth,
    search,
)
from gerrymander.algos.validation import Plan
from gerrymander.config import DEFAULT_MAX_ATTEMPTS, POPULATION_MARGIN, params_from_cfg
from gerrymander.data.precinct_graph import PrecinctGraph


def _grow_greedy_district(
    graph: PrecinctGraph,
    seed: int,
    target: int,
    unassigned: Set[int],
    favor_rep: bool,
    rng: random.Random,
) -> List[int]:
    dem_arr, rep_arr, pop_arr = graph.dem, graph.rep, graph.pop

    district: List[int] = []
    dem = rep = pop = 0
    frontier: Set[int] = set()

    cur = seed
    while True:
        district.append(cur)
        dem += int(dem_arr[cur])
        rep += int(rep_arr[cur])
        pop += int(pop_arr[cur])
        unassigned.discard(cur)

        frontier.update(graph.neighbors(cur))
        frontier &= unassigned

        if pop > target or not frontier:
            return district

        # score every open neighbour by what the district would look like with it
        best: List[int] = []
        best_score = None
        for v in sorted(frontier):
            score = party_advantage(dem + int(dem_arr[v]), rep + int(rep_arr[v]), favor_rep)
            if best_score is None or score > best_score:
                best_score = score
                best = [v]
            elif score == best_score:
                best.append(v)

        cur = rng.choice(best)


def gerrymander(
    graph: PrecinctGraph,
    num_districts: int,
    favor_rep: bool,
    *,
    threshold: Optional[int] = None,
    margin: float = POPULATION_MARGIN,
    max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
    verbose: bool = False,
) -> Plan:
    """
    Valid plan grown greedily in favour of one party.

    favor_rep: True builds districts that waste democratic votes, False the reverse.
    threshold: when set, keep searching until the Efficiency Gap also exceeds it.
    """
    check_district_count(num_districts)
    if rng is None:
        rng = random.Random()

    def grow(seed: int, target: int, unassigned: Set[int]) -> List[int]:
        return _grow_greedy_district(graph, seed, target, unassigned, favor_rep, rng)

    valid = accepts_plan(graph, num_districts, margin)
    if threshold is None:
        accept = valid
    else:
        def accept(plan: Plan) -> bool:
            return valid(plan) and is_gerrymandered(graph, plan, threshold, margin)

    if verbose:
        party = "rep" if favor_rep else "dem"
        print(f"[gerrymander] favoring '{party}' across {num_districts} districts", flush=True)

    return search(
        "gerrymander",
        attempt=lambda: partition_by_growth(graph, num_districts, grow, rng),
        accept=accept,
        max_attempts=max_attempts,
        verbose=verbose,
    )


# ----------------------------
# Public entry point
# ----------------------------
def run(graph: PrecinctGraph, cfg: dict, threshold: Optional[int] = None) -> Plan:
    params = params_from_cfg(cfg, "gerrymander")
    return gerrymander(
        graph,
        params.num_districts,
        params.favor_rep,
        threshold=threshold,
        margin=params.population_margin,
        max_attempts=params.max_attempts,
        rng=random.Random(params.seed),
        verbose=params.verbose,
    )
