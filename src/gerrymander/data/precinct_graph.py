from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

import numpy as np

from gerrymander.errors import PrecinctNotFoundError


@dataclass(frozen=True)
class Demographic:
    dem: int
    rep: int
    pop: int

    def __add__(self, other: "Demographic") -> "Demographic":
        return Demographic(self.dem + other.dem, self.rep + other.rep, self.pop + other.pop)

    @property
    def votes(self) -> int:
        return self.dem + self.rep


@dataclass(frozen=True)
class Precinct:
    """One precinct: vote counts, population and the ids it borders."""

    id: int
    dem: int
    rep: int
    pop: int
    adjacent: FrozenSet[int] = field(default_factory=frozenset)

    def __post_init__(self):
        for name in ("dem", "rep", "pop"):
            if getattr(self, name) < 0:
                raise ValueError(f"precinct {self.id}: {name} must be >= 0, got {getattr(self, name)}")
        # accept any iterable of ids
        object.__setattr__(self, "adjacent", frozenset(int(a) for a in self.adjacent))

    @property
    def demographic(self) -> Demographic:
        return Demographic(self.dem, self.rep, self.pop)


class PrecinctGraph:
    """
    Adjacency graph of precincts.

    Precincts live in a flat arena in insertion order; the algorithms work on
    arena indices and only translate back to precinct ids at the edges.

      id -> index -> Precinct -> adjacent ids

    Adjacency is stored exactly as inserted. ``adjacent``/``are_adjacent``
    answer in the inserted direction and only for ids both in the graph;
    ``neighbors`` (used for traversal) is the undirected closure.
    """

    def __init__(self, precincts: Iterable[Precinct] = ()):
        self._precincts: List[Precinct] = []
        self._id_to_idx: Dict[int, int] = {}
        self._total_pop = 0

        # derived, rebuilt lazily after an insertion
        self._adj_idx: Optional[List[List[int]]] = None
        self._arrays: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None

        for p in precincts:
            self.add(p)

    # ----------------------------
    # Insertion
    # ----------------------------
    def add(self, precinct: Precinct) -> bool:
        if precinct.id in self._id_to_idx:
            return False

        self._id_to_idx[precinct.id] = len(self._precincts)
        self._precincts.append(precinct)
        self._total_pop += precinct.pop

        self._adj_idx = None
        self._arrays = None
        return True

    def add_precinct(self, id: int, dem: int, rep: int, pop: int, adjacent: Iterable[int] = ()) -> bool:
        return self.add(Precinct(id, dem, rep, pop, frozenset(adjacent)))

    # ----------------------------
    # Aggregates
    # ----------------------------
    def size(self) -> int:
        return len(self._precincts)

    def __len__(self) -> int:
        return len(self._precincts)

    def is_empty(self) -> bool:
        return self.size() == 0

    def total_population(self) -> int:
        return self._total_pop

    def ids(self) -> List[int]:
        return [p.id for p in self._precincts]

    def id_set(self) -> Set[int]:
        return set(self._id_to_idx)

    # ----------------------------
    # Lookups
    # ----------------------------
    def contains(self, id: int) -> bool:
        return id in self._id_to_idx

    def __contains__(self, id: object) -> bool:
        return id in self._id_to_idx

    def _get(self, id: int) -> Precinct:
        idx = self._id_to_idx.get(id)
        if idx is None:
            raise PrecinctNotFoundError(id)
        return self._precincts[idx]

    def precinct(self, id: int) -> Precinct:
        return self._get(id)

    def demographic(self, id: int) -> Demographic:
        return self._get(id).demographic

    def adjacent(self, id: int) -> FrozenSet[int]:
        return self._get(id).adjacent

    def are_adjacent(self, id: int, other: int) -> bool:
        idx = self._id_to_idx.get(id)
        if idx is None:
            return False
        return other in self._precincts[idx].adjacent and other in self._id_to_idx

    def asymmetric_pairs(self) -> List[Tuple[int, int]]:
        """(a, b) pairs where a lists b as a neighbour but b, present in the graph, does not list a."""
        out = []
        for p in self._precincts:
            for b in sorted(p.adjacent):
                other = self._id_to_idx.get(b)
                if other is not None and p.id not in self._precincts[other].adjacent:
                    out.append((p.id, b))
        return out

    # ----------------------------
    # Arena (index space)
    # ----------------------------
    def index_of(self, id: int) -> int:
        idx = self._id_to_idx.get(id)
        if idx is None:
            raise PrecinctNotFoundError(id)
        return idx

    def id_at(self, idx: int) -> int:
        return self._precincts[idx].id

    def neighbors(self, idx: int) -> List[int]:
        if self._adj_idx is None:
            self._adj_idx = self._build_adj_idx()
        return self._adj_idx[idx]

    def _build_adj_idx(self) -> List[List[int]]:
        # symmetric closure; ids that never made it into the graph are dropped
        nbrs: List[Set[int]] = [set() for _ in self._precincts]
        for i, p in enumerate(self._precincts):
            for v in p.adjacent:
                j = self._id_to_idx.get(v)
                if j is not None and j != i:
                    nbrs[i].add(j)
                    nbrs[j].add(i)
        return [sorted(s) for s in nbrs]

    def _build_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        dem = np.array([p.dem for p in self._precincts], dtype=np.int64)
        rep = np.array([p.rep for p in self._precincts], dtype=np.int64)
        pop = np.array([p.pop for p in self._precincts], dtype=np.int64)
        return dem, rep, pop

    @property
    def dem(self) -> np.ndarray:
        if self._arrays is None:
            self._arrays = self._build_arrays()
        return self._arrays[0]

    @property
    def rep(self) -> np.ndarray:
        if self._arrays is None:
            self._arrays = self._build_arrays()
        return self._arrays[1]

    @property
    def pop(self) -> np.ndarray:
        if self._arrays is None:
            self._arrays = self._build_arrays()
        return self._arrays[2]

    def totals(self, indices: Iterable[int]) -> Demographic:
        idx = np.fromiter(indices, dtype=np.int64)
        if idx.size == 0:
            return Demographic(0, 0, 0)
        return Demographic(
            int(self.dem[idx].sum()),
            int(self.rep[idx].sum()),
            int(self.pop[idx].sum()),
        )

    def __repr__(self) -> str:
        return f"PrecinctGraph(size={self.size()}, total_population={self._total_pop})"
