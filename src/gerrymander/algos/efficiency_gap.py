# src/gerrymander/algos/efficiency_gap.py
#
# Efficiency Gap:
#
#   100 * |dem_wasted - rep_wasted| / total_votes
#
# Wasted votes are every vote for the losing side plus the winner's votes
# beyond the one-vote winning margin.
# https://www.quantamagazine.org/the-mathematics-behind-gerrymandering-20170404/
#
from __future__ import annotations

from typing import Iterable, Tuple

import pandas as pd

from gerrymander.algos.validation import check_plan, district_indices
from gerrymander.config import POPULATION_MARGIN
from gerrymander.data.precinct_graph import PrecinctGraph
from gerrymander.errors import InvalidPlanError


# ----------------------------
# Wasted votes
# ----------------------------
def dem_wasted(dem: int, rep: int) -> int:
    if dem > rep:
        return dem - rep - 1
    return dem


def rep_wasted(dem: int, rep: int) -> int:
    if dem > rep:
        return rep
    return rep - dem - 1


def wasted_votes(dem: int, rep: int) -> Tuple[int, int]:
    """(dem_wasted, rep_wasted). Either side can go negative for near-empty districts."""
    return dem_wasted(dem, rep), rep_wasted(dem, rep)


def party_advantage(dem: int, rep: int, favor_rep: bool) -> int:
    """Wasted-vote surplus of the party being disadvantaged; larger is better for the favoured party."""
    dw, rw = wasted_votes(dem, rep)
    return dw - rw if favor_rep else rw - dw


# ----------------------------
# Plan score
# ----------------------------
def efficiency_gap(
    graph: PrecinctGraph,
    plan: Iterable[Iterable[int]],
    margin: float = POPULATION_MARGIN,
) -> int:
    """
    Efficiency Gap of ``plan`` as a whole percentage, truncated.

    Raises InvalidPlanError if the plan fails validation (or no votes were cast),
    so an invalid plan never yields a number.
    """
    districts = [list(d) for d in plan]
    report = check_plan(graph, districts, margin)
    if not report.ok:
        raise InvalidPlanError("; ".join(report.problems()))

    dem_waste = 0
    rep_waste = 0
    total_votes = 0
    for district in districts:
        demo = graph.totals(district_indices(graph, district))
        dw, rw = wasted_votes(demo.dem, demo.rep)
        dem_waste += dw
        rep_waste += rw
        total_votes += demo.votes

    if total_votes == 0:
        raise InvalidPlanError("plan has no votes cast")

    return 100 * abs(dem_waste - rep_waste) // total_votes


def is_gerrymandered(
    graph: PrecinctGraph,
    plan: Iterable[Iterable[int]],
    threshold: int,
    margin: float = POPULATION_MARGIN,
) -> bool:
    """True if ``plan`` is valid and its Efficiency Gap exceeds ``threshold``. Invalid plans are never gerrymandered."""
    try:
        return efficiency_gap(graph, plan, margin) > threshold
    except InvalidPlanError:
        return False


# ----------------------------
# Reporting
# ----------------------------
def district_stats(graph: PrecinctGraph, plan: Iterable[Iterable[int]]) -> pd.DataFrame:
    """Per-district totals, winner and wasted votes. Does not validate the plan."""
    rows = []
    for d, district in enumerate(sorted((sorted(x) for x in plan), key=lambda x: x[0] if x else 0)):
        demo = graph.totals(district_indices(graph, district))
        dw, rw = wasted_votes(demo.dem, demo.rep)
        rows.append(
            {
                "district": d,
                "precincts": len(district),
                "dem_votes": demo.dem,
                "rep_votes": demo.rep,
                "pop": demo.pop,
                "dem_wasted": dw,
                "rep_wasted": rw,
            }
        )

    columns = ["district", "precincts", "dem_votes", "rep_votes", "pop", "dem_wasted", "rep_wasted"]
    df = pd.DataFrame(rows, columns=columns)
    df["winner"] = ["Dem" if d > r else "GOP" for d, r in zip(df["dem_votes"], df["rep_votes"])]
    df["margin"] = df["dem_votes"] - df["rep_votes"]
    df["margin_pct"] = df["margin"] / (df["dem_votes"] + df["rep_votes"]).replace(0, 1) * 100
    return df
