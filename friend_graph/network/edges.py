"""
Undirected, deduplicated edge registry with adjacency bookkeeping.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Set, Tuple


Pair = Tuple[int, int]


def canonical_pair(i: int, j: int) -> Pair:
    """Order a node pair as (min, max)."""
    return (i, j) if i < j else (j, i)


def as_edge_date(when) -> date:
    """Normalize an edge date; a datetime is truncated to its day."""
    if isinstance(when, datetime):
        return when.date()
    if isinstance(when, date):
        return when
    raise TypeError(f"edge date must be a date, got {type(when).__name__}")


@dataclass
class Edge:
    """
    A connection between two friends.

    Endpoints are stored in canonical order (a < b). earliest_date is the
    earliest date any shared group between the two was recorded with.
    """
    a: int
    b: int
    earliest_date: date

    @property
    def pair(self) -> Pair:
        return (self.a, self.b)

    def touches(self, index: int) -> bool:
        return self.a == index or self.b == index

    def other(self, index: int) -> int:
        """The endpoint opposite to index."""
        return self.b if index == self.a else self.a


class EdgeIndex:
    """
    Edge list plus two derived lookups:

    - a pair index mapping (a, b) to the edge's list position;
    - adjacency sets mapping each node index to its neighbors.

    Both are kept exactly in sync with the edge list after every call.
    """

    def __init__(self):
        self._edges: List[Edge] = []
        self._pair_index: Dict[Pair, int] = {}
        self._adjacency: Dict[int, Set[int]] = {}

    def add_or_update(self, i: int, j: int, when: date) -> Edge:
        """
        Insert the edge i-j, or lower its date to `when` if it is earlier.
        """
        if i == j:
            raise ValueError(f"cannot connect node {i} to itself")
        when = as_edge_date(when)

        pair = canonical_pair(i, j)
        position = self._pair_index.get(pair)
        if position is not None:
            edge = self._edges[position]
            if when < edge.earliest_date:
                edge.earliest_date = when
            return edge

        edge = Edge(pair[0], pair[1], when)
        self._pair_index[pair] = len(self._edges)
        self._edges.append(edge)
        self._adjacency.setdefault(pair[0], set()).add(pair[1])
        self._adjacency.setdefault(pair[1], set()).add(pair[0])
        return edge

    def get(self, i: int, j: int) -> Optional[Edge]:
        position = self._pair_index.get(canonical_pair(i, j))
        if position is None:
            return None
        return self._edges[position]

    def connected(self, i: int, j: int) -> bool:
        return j in self._adjacency.get(i, ())

    def neighbors(self, index: int) -> Set[int]:
        return set(self._adjacency.get(index, ()))

    def degree(self, index: int) -> int:
        """Number of direct connections; 0 for isolated or unknown indices."""
        return len(self._adjacency.get(index, ()))

    def remove_incident(self, index: int) -> List[Pair]:
        """
        Remove every edge touching index.

        Returns the removed pairs in storage order. The pair index and the
        adjacency sets are rebuilt from the surviving edges.
        """
        removed: List[Pair] = []
        kept: List[Edge] = []
        for edge in self._edges:
            if edge.touches(index):
                removed.append(edge.pair)
            else:
                kept.append(edge)

        if removed:
            self._edges = kept
            self._rebuild()
        return removed

    def _rebuild(self) -> None:
        """Recompute the pair index and adjacency from the edge list."""
        self._pair_index = {}
        self._adjacency = {}
        for position, edge in enumerate(self._edges):
            self._pair_index[edge.pair] = position
            self._adjacency.setdefault(edge.a, set()).add(edge.b)
            self._adjacency.setdefault(edge.b, set()).add(edge.a)

    @property
    def edges(self) -> List[Edge]:
        """All edges in storage order."""
        return list(self._edges)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __iter__(self):
        return iter(list(self._edges))

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"EdgeIndex(edges={len(self._edges)})"
