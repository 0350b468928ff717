import pytest

from gerrymander.algos.efficiency_gap import (
    dem_wasted,
    district_stats,
    efficiency_gap,
    is_gerrymandered,
    party_advantage,
    rep_wasted,
    wasted_votes,
)
from gerrymander.algos.validation import to_plan
from gerrymander.config import POPULATION_MARGIN
from gerrymander.data.precinct_graph import PrecinctGraph
from gerrymander.data.sample_maps import cracked_plan, grid_map
from gerrymander.errors import InvalidPlanError


def test_wasted_votes_winner_and_loser():
    assert wasted_votes(60, 40) == (19, 40)
    assert wasted_votes(40, 60) == (40, 19)
    assert dem_wasted(60, 40) == 19
    assert rep_wasted(60, 40) == 40


def test_wasted_votes_tie_goes_to_rep():
    assert wasted_votes(5, 5) == (5, -1)


def test_wasted_votes_can_go_negative():
    assert wasted_votes(0, 0) == (0, -1)
    assert wasted_votes(1, 0) == (0, 0)


def test_swapping_parties_swaps_waste():
    for dem, rep in [(7, 3), (120, 80), (4, 6), (0, 9)]:
        dw, rw = wasted_votes(dem, rep)
        assert wasted_votes(rep, dem) == (rw, dw)


def test_party_advantage_direction():
    # a rep-won district wastes more dem votes
    assert party_advantage(4, 6, favor_rep=True) == 4 - 1
    assert party_advantage(4, 6, favor_rep=False) == 1 - 4


def test_cracked_plan_gap(grid):
    # every district is 4 dem / 6 rep: dem waste 4, rep waste 1
    plan = cracked_plan()
    assert efficiency_gap(grid, plan) == 30
    assert is_gerrymandered(grid, plan, 7)
    assert not is_gerrymandered(grid, plan, 30)


def test_gap_is_party_symmetric():
    plan = cracked_plan()
    dem_heavy = grid_map(dem_cols=2)
    rep_heavy = grid_map(dem_cols=3)
    # 3 dem columns is the 2 dem column map with the parties swapped
    assert efficiency_gap(dem_heavy, plan) == efficiency_gap(rep_heavy, plan)


def test_invalid_plan_has_no_gap(tx):
    bad_plan = to_plan([{50001, 50005}])
    with pytest.raises(InvalidPlanError):
        efficiency_gap(tx, bad_plan, POPULATION_MARGIN)
    assert not is_gerrymandered(tx, bad_plan, -100)


def test_tx_plan_gap(tx):
    plan = to_plan([{50001, 50002, 50004}, {50003, 50005}, {50006, 50007}])
    # waste: (532, 965), (702, 1049), (172, 1011) over 6273 votes
    assert efficiency_gap(tx, plan) == 25


def test_zero_votes_is_invalid():
    graph = PrecinctGraph()
    graph.add_precinct(1, 0, 0, 10, {2})
    graph.add_precinct(2, 0, 0, 10, {1})
    with pytest.raises(InvalidPlanError):
        efficiency_gap(graph, [{1}, {2}])


def test_district_stats(grid):
    df = district_stats(grid, cracked_plan())
    assert len(df) == 5
    assert df["pop"].tolist() == [10] * 5
    assert df["dem_votes"].sum() == 20
    assert set(df["winner"]) == {"GOP"}
    assert df["dem_wasted"].tolist() == [4] * 5
    assert df["rep_wasted"].tolist() == [1] * 5
    assert df["margin_pct"].tolist() == [-20.0] * 5
