from __future__ import annotations

from typing import FrozenSet, Set

from gerrymander.data.precinct_graph import Precinct, PrecinctGraph


def grid_adjacency(id: int, rows: int = 10, cols: int = 5) -> Set[int]:
    """4-neighbour ids of ``id`` in a row-major rows x cols grid."""
    adj = set()
    if id >= cols:
        adj.add(id - cols)
    if id % cols > 0:
        adj.add(id - 1)
    if id % cols < cols - 1:
        adj.add(id + 1)
    if id < (rows - 1) * cols:
        adj.add(id + cols)
    return adj


def grid_map(rows: int = 10, cols: int = 5, dem_cols: int = 2) -> PrecinctGraph:
    """
    Unit-population grid (the 10x5 map from the usual infographics).

    Each precinct casts a single vote: democratic in the first ``dem_cols``
    columns, republican elsewhere.
    """
    graph = PrecinctGraph()
    for i in range(rows * cols):
        is_dem = i % cols < dem_cols
        graph.add(Precinct(i, int(is_dem), int(not is_dem), 1, frozenset(grid_adjacency(i, rows, cols))))
    return graph


def tx_sample_map() -> PrecinctGraph:
    # vaguely based on a small area in TX; adjacency kept as surveyed (not symmetric)
    graph = PrecinctGraph()
    graph.add_precinct(50001, 121, 162, 636, {50002, 50007})
    graph.add_precinct(50002, 1011, 351, 2837, {50001, 50003, 50004})
    graph.add_precinct(50003, 234, 1141, 2527, {50002, 50005})
    graph.add_precinct(50004, 366, 452, 1223, {50002, 50005})
    graph.add_precinct(50005, 468, 611, 2168, {50002, 50004, 50003, 50006})
    graph.add_precinct(50006, 51, 275, 619, {50002, 50005, 50007})
    graph.add_precinct(50007, 121, 909, 2918, {50001, 50006})
    return graph


def cracked_plan(rows: int = 10, cols: int = 5, districts: int = 5) -> FrozenSet[FrozenSet[int]]:
    """Split the grid into ``districts`` runs of consecutive ids."""
    n = rows * cols
    per = n // districts
    return frozenset(
        frozenset(range(d * per, n if d == districts - 1 else (d + 1) * per))
        for d in range(districts)
    )


SAMPLE_MAPS = {
    "grid": grid_map,
    "tx": tx_sample_map,
}
