# src/gerrymander/algos/validation.py
#
# Plan validity:
# - every district is contiguous on the precinct adjacency graph
# - every district population sits within mean * (1 +/- margin)
# - every precinct is covered by exactly one district
#
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Set

from gerrymander.config import POPULATION_MARGIN
from gerrymander.data.precinct_graph import PrecinctGraph

District = FrozenSet[int]
Plan = FrozenSet[District]


# ----------------------------
# Contiguity
# ----------------------------
def _connected(graph: PrecinctGraph, members: Set[int]) -> bool:
    """Index-space check; ``members`` is a scratch copy and is emptied as nodes are reached."""
    if not members:
        return False

    stack = [members.pop()]
    while stack:
        u = stack.pop()
        for v in graph.neighbors(u):
            if v in members:
                members.remove(v)
                stack.append(v)
    return not members


def district_indices(graph: PrecinctGraph, district: Iterable[int]) -> List[int]:
    return [graph.index_of(pid) for pid in district]


def is_contiguous(graph: PrecinctGraph, district: Iterable[int]) -> bool:
    """True if the precincts in ``district`` form one connected piece. Empty districts are not contiguous."""
    return _connected(graph, set(district_indices(graph, district)))


# ----------------------------
# Plan check
# ----------------------------
@dataclass
class PlanCheck:
    num_districts: int
    mean: int = 0
    lower: float = 0.0
    upper: float = 0.0
    district_pops: List[int] = field(default_factory=list)
    discontiguous: List[int] = field(default_factory=list)
    out_of_bounds: List[int] = field(default_factory=list)
    missing: Set[int] = field(default_factory=set)
    duplicated: Set[int] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        return (
            self.num_districts > 0
            and not self.discontiguous
            and not self.out_of_bounds
            and not self.missing
            and not self.duplicated
        )

    def problems(self) -> List[str]:
        if self.num_districts == 0:
            return ["plan has no districts"]
        out = []
        for d in self.discontiguous:
            out.append(f"district {d} is not contiguous")
        for d in self.out_of_bounds:
            out.append(
                f"district {d} population {self.district_pops[d]} outside "
                f"[{self.lower:.1f}, {self.upper:.1f}]"
            )
        if self.missing:
            out.append(f"precincts not assigned: {sorted(self.missing)}")
        if self.duplicated:
            out.append(f"precincts assigned more than once: {sorted(self.duplicated)}")
        return out


def check_plan(
    graph: PrecinctGraph,
    plan: Iterable[Iterable[int]],
    margin: float = POPULATION_MARGIN,
) -> PlanCheck:
    """
    Run every validity test on ``plan`` and report what failed.

    Districts are numbered by their position in iteration order of ``plan``.
    Unknown precinct ids raise PrecinctNotFoundError.
    """
    districts = [list(d) for d in plan]
    report = PlanCheck(num_districts=len(districts))
    if not districts:
        return report

    report.mean = graph.total_population() // len(districts)
    report.lower = report.mean * (1 - margin)
    report.upper = report.mean * (1 + margin)

    seen: Set[int] = set()
    for d, district in enumerate(districts):
        idx = district_indices(graph, district)

        for i in idx:
            if i in seen:
                report.duplicated.add(graph.id_at(i))
            seen.add(i)

        if not _connected(graph, set(idx)):
            report.discontiguous.append(d)

        pop = graph.totals(set(idx)).pop
        report.district_pops.append(pop)
        if pop > report.upper or pop < report.lower:
            report.out_of_bounds.append(d)

    report.missing = {graph.id_at(i) for i in range(graph.size()) if i not in seen}
    return report


def is_valid(
    graph: PrecinctGraph,
    plan: Iterable[Iterable[int]],
    margin: float = POPULATION_MARGIN,
) -> bool:
    return check_plan(graph, plan, margin).ok


def to_plan(districts: Iterable[Iterable[int]]) -> Plan:
    return frozenset(frozenset(d) for d in districts)
