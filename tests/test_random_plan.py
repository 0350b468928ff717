import random

import pytest

from gerrymander.algos.efficiency_gap import is_gerrymandered
from gerrymander.algos.random_plan import (
    naive_gerrymander,
    partition_by_growth,
    random_plan,
    run,
    run_naive,
    search,
)
from gerrymander.algos.validation import is_valid
from gerrymander.config import POPULATION_MARGIN
from gerrymander.data.precinct_graph import PrecinctGraph
from gerrymander.errors import DistrictCountError, SearchExhaustedError


def _covers(graph, plan):
    ids = [pid for d in plan for pid in d]
    return len(ids) == len(set(ids)) == graph.size() and set(ids) == graph.id_set()


def test_random_plan_grid_is_valid(grid, rng):
    plan = random_plan(grid, 5, rng=rng)
    assert len(plan) == 5
    assert is_valid(grid, plan, POPULATION_MARGIN)
    assert _covers(grid, plan)


def test_random_plan_two_districts(grid, rng):
    plan = random_plan(grid, 2, rng=rng)
    assert len(plan) == 2
    assert is_valid(grid, plan)


def test_random_plan_tx(tx, rng):
    plan = random_plan(tx, 3, rng=rng)
    assert len(plan) == 3
    assert is_valid(tx, plan, POPULATION_MARGIN)


def test_random_plan_single_district(tx):
    plan = random_plan(tx, 1)
    assert plan == frozenset({frozenset(tx.ids())})


def test_random_plan_is_reproducible(grid):
    a = random_plan(grid, 5, rng=random.Random(11))
    b = random_plan(grid, 5, rng=random.Random(11))
    assert a == b


def test_partition_covers_every_precinct(grid, rng):
    def grow(seed, target, unassigned):
        unassigned.discard(seed)
        return [seed]

    plan = partition_by_growth(grid, 5, grow, rng)
    assert len(plan) == 50
    assert _covers(grid, plan)


def test_bad_district_count(grid):
    with pytest.raises(DistrictCountError):
        random_plan(grid, 0)
    with pytest.raises(ValueError):
        naive_gerrymander(grid, -1, 7)


def test_infeasible_request_exhausts(tx, rng):
    # 7 precincts cannot make 8 districts
    with pytest.raises(SearchExhaustedError) as exc:
        random_plan(tx, 8, max_attempts=25, rng=rng)
    assert exc.value.attempts == 25


def test_empty_graph_exhausts():
    with pytest.raises(SearchExhaustedError):
        random_plan(PrecinctGraph(), 2, max_attempts=3)


def test_search_stops_on_first_accept():
    calls = []

    def attempt():
        calls.append(1)
        return frozenset({frozenset({len(calls)})})

    plan = search("test", attempt, lambda p: len(calls) == 3, max_attempts=10)
    assert plan == frozenset({frozenset({3})})
    assert len(calls) == 3


def test_naive_gerrymander_grid(grid, rng):
    plan = naive_gerrymander(grid, 5, 15, rng=rng)
    assert is_valid(grid, plan)
    assert is_gerrymandered(grid, plan, 15)


def test_naive_gerrymander_two_districts(grid, rng):
    plan = naive_gerrymander(grid, 2, 17, rng=rng)
    assert len(plan) == 2
    assert is_gerrymandered(grid, plan, 17)


def test_naive_gerrymander_unreachable_threshold(grid, rng):
    with pytest.raises(SearchExhaustedError):
        naive_gerrymander(grid, 2, 100, max_attempts=5, rng=rng)


def test_run_reads_config(grid):
    cfg = {"run": {"num_districts": 2, "seed": 3}, "algo": {"random": {"num_districts": 5}}}
    plan = run(grid, cfg)
    assert len(plan) == 5
    assert plan == run(grid, cfg)


def test_naive_gerrymander_tx(tx):
    plan = naive_gerrymander(tx, 3, 7, rng=random.Random(0))
    assert len(plan) == 3
    assert is_valid(tx, plan)
    assert is_gerrymandered(tx, plan, 7)


def test_naive_gerrymander_inner_budget(tx):
    # 7 precincts cannot make 8 districts; the first inner random plan gives up
    with pytest.raises(SearchExhaustedError) as exc:
        naive_gerrymander(tx, 8, 7, max_attempts=100, plan_attempts=4)
    assert exc.value.attempts == 4
    assert str(exc.value).startswith("random_plan:")


def test_run_naive_reads_config(grid):
    cfg = {"run": {"num_districts": 2, "gap_threshold": 17, "seed": 4, "plan_attempts": 50_000}}
    plan = run_naive(grid, cfg)
    assert len(plan) == 2
    assert is_gerrymandered(grid, plan, 17)
