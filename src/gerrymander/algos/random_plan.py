# src/gerrymander/algos/random_plan.py
#
# Random valid plans by generate-and-test:
# - seed districts at uniformly random unassigned precincts
# - grow each one by randomized depth-first expansion up to the mean population
# - throw the whole plan away and start over until it validates
#
# The depth-first growth makes snaking districts, so random plans are often
# already fairly skewed; naive_gerrymander leans on that by sampling random
# plans until one crosses an Efficiency Gap threshold.
#
# Entry points:
#   random_plan(graph, num_districts, ...) -> plan
#   naive_gerrymander(graph, num_districts, threshold, ...) -> plan
#   run(graph, cfg) / run_naive(graph, cfg)
#
from __future__ import annotations

import random
from typing import Callable, List, Optional, Set

from gerrymander.algos.efficiency_gap import is_gerrymandered
from gerrymander.algos.validation import Plan, is_valid
from gerrymander.config import DEFAULT_MAX_ATTEMPTS, POPULATION_MARGIN, params_from_cfg
from gerrymander.data.precinct_graph import PrecinctGraph
from gerrymander.errors import DistrictCountError, SearchExhaustedError

# grow(seed, target_pop, unassigned) -> district indices; must remove what it takes from unassigned
GrowFn = Callable[[int, int, Set[int]], List[int]]


# ----------------------------
# Shared generate-and-test plumbing
# ----------------------------
def check_district_count(num_districts: int) -> None:
    if num_districts < 1:
        raise DistrictCountError(f"num_districts must be >= 1, got {num_districts}")


def partition_by_growth(graph: PrecinctGraph, num_districts: int, grow: GrowFn, rng: random.Random) -> Plan:
    """
    One full partition attempt.

    Seeds are drawn uniformly from an index list; picks that were already
    swallowed by an earlier district are discarded. Runs until every precinct
    belongs to some district, so the result may hold more (or fewer)
    districts than requested.
    """
    target = graph.total_population() // num_districts
    unassigned = set(range(graph.size()))
    order = list(range(graph.size()))
    districts: List[List[int]] = []

    while unassigned:
        pick = rng.randrange(len(order))
        seed = order[pick]
        if seed in unassigned:
            districts.append(grow(seed, target, unassigned))
        order[pick] = order[-1]
        order.pop()

    return frozenset(frozenset(graph.id_at(i) for i in d) for d in districts)


def search(
    what: str,
    attempt: Callable[[], Plan],
    accept: Callable[[Plan], bool],
    max_attempts: Optional[int],
    verbose: bool = False,
) -> Plan:
    """Call ``attempt`` until ``accept`` passes. ``max_attempts=None`` never gives up."""
    attempts = 0
    while max_attempts is None or attempts < max_attempts:
        attempts += 1
        plan = attempt()
        if accept(plan):
            if verbose:
                print(f"[{what}] accepted plan after {attempts} attempts", flush=True)
            return plan
        if verbose and attempts % 1000 == 0:
            print(f"[{what}] attempt={attempts} still searching", flush=True)

    if verbose:
        print(f"[{what}] giving up after {attempts} attempts", flush=True)
    raise SearchExhaustedError(what, attempts)


def accepts_plan(graph: PrecinctGraph, num_districts: int, margin: float) -> Callable[[Plan], bool]:
    def accept(plan: Plan) -> bool:
        return len(plan) == num_districts and is_valid(graph, plan, margin)

    return accept


# ----------------------------
# Random growth
# ----------------------------
def _grow_random_district(
    graph: PrecinctGraph,
    seed: int,
    target: int,
    unassigned: Set[int],
    rng: random.Random,
) -> List[int]:
    """
    Randomized DFS from ``seed``: step into a random unassigned neighbour,
    backtrack when stuck, stop once the district reaches ``target``.
    """
    pop_arr = graph.pop
    district: List[int] = []
    pop = 0
    stack: List[List[int]] = []

    def take(i: int) -> None:
        nonlocal pop
        district.append(i)
        pop += int(pop_arr[i])
        unassigned.discard(i)
        nbrs = list(graph.neighbors(i))
        rng.shuffle(nbrs)
        stack.append(nbrs)

    take(seed)
    while stack and pop < target:
        nbrs = stack[-1]
        if not nbrs:
            stack.pop()
            continue
        v = nbrs.pop()
        if v in unassigned:
            take(v)

    return district


def random_plan(
    graph: PrecinctGraph,
    num_districts: int,
    *,
    margin: float = POPULATION_MARGIN,
    max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
    verbose: bool = False,
) -> Plan:
    """A random plan with exactly ``num_districts`` districts that passes ``is_valid``."""
    check_district_count(num_districts)
    if rng is None:
        rng = random.Random()

    def grow(seed: int, target: int, unassigned: Set[int]) -> List[int]:
        return _grow_random_district(graph, seed, target, unassigned, rng)

    return search(
        "random_plan",
        attempt=lambda: partition_by_growth(graph, num_districts, grow, rng),
        accept=accepts_plan(graph, num_districts, margin),
        max_attempts=max_attempts,
        verbose=verbose,
    )


def naive_gerrymander(
    graph: PrecinctGraph,
    num_districts: int,
    threshold: int,
    *,
    margin: float = POPULATION_MARGIN,
    max_attempts: Optional[int] = DEFAULT_MAX_ATTEMPTS,
    plan_attempts: Optional[int] = None,
    rng: Optional[random.Random] = None,
    verbose: bool = False,
) -> Plan:
    """
    Sample random plans until one has an Efficiency Gap above ``threshold``.

    ``max_attempts`` bounds the number of random plans drawn; ``plan_attempts``
    bounds the attempts spent producing each one (defaults to ``max_attempts``).
    Worst case is ``max_attempts * plan_attempts`` partition attempts, so pass a
    smaller ``plan_attempts`` when a tight overall bound matters. An inner
    random plan that runs out raises ``SearchExhaustedError`` straight away.
    """
    check_district_count(num_districts)
    if rng is None:
        rng = random.Random()
    if plan_attempts is None:
        plan_attempts = max_attempts

    return search(
        "naive_gerrymander",
        attempt=lambda: random_plan(graph, num_districts, margin=margin, max_attempts=plan_attempts, rng=rng),
        accept=lambda plan: is_gerrymandered(graph, plan, threshold, margin),
        max_attempts=max_attempts,
        verbose=verbose,
    )


# ----------------------------
# Public entry points
# ----------------------------
def run(graph: PrecinctGraph, cfg: dict) -> Plan:
    params = params_from_cfg(cfg, "random")
    return random_plan(
        graph,
        params.num_districts,
        margin=params.population_margin,
        max_attempts=params.max_attempts,
        rng=random.Random(params.seed),
        verbose=params.verbose,
    )


def run_naive(graph: PrecinctGraph, cfg: dict) -> Plan:
    params = params_from_cfg(cfg, "naive")
    return naive_gerrymander(
        graph,
        params.num_districts,
        params.gap_threshold,
        margin=params.population_margin,
        max_attempts=params.max_attempts,
        plan_attempts=params.plan_attempts,
        rng=random.Random(params.seed),
        verbose=params.verbose,
    )
