"""
Friend graph: the public facade over node storage, edges and layout.

Friends are nodes, shared friend groups become cliques of dated edges,
and positions are advanced by a force simulation each tick.
"""

from datetime import date
from typing import Iterable, List, Optional, Set, Tuple
import logging

from ..errors import NameCollision
from ..simulation.forces import ForceConfig, ForceSimulator
from ..vector import Vec2
from .edges import Edge, EdgeIndex, as_edge_date
from .nodes import Node, NodeStore, check_name

logger = logging.getLogger(__name__)


class FriendGraph:
    """
    An undirected friend graph with a force-directed layout.

    Supports:
    - Adding friend groups (every pair in a group gets an edge)
    - Renaming, moving and deleting friends with stable indices
    - Degree lookup
    - Advancing the layout simulation
    """

    def __init__(
        self,
        config: Optional[ForceConfig] = None,
        enforce_unique_names: bool = False,
    ):
        self._nodes = NodeStore()
        self._edges = EdgeIndex()
        self._simulator = ForceSimulator(config)
        self.enforce_unique_names = enforce_unique_names

    @property
    def config(self) -> ForceConfig:
        """Force constants used by update()."""
        return self._simulator.config

    @config.setter
    def config(self, value: ForceConfig) -> None:
        if not isinstance(value, ForceConfig):
            raise TypeError(f"expected ForceConfig, got {type(value).__name__}")
        self._simulator.config = value

    # Nodes

    def get_or_create(self, name: str) -> int:
        """Index of the live node with this name, creating it if needed."""
        live_before = self._nodes.live_count
        index = self._nodes.get_or_create(name)
        if self._nodes.live_count > live_before:
            logger.debug("Created node %d (%s)", index, name)
        return index

    def is_free(self, index: int) -> bool:
        """Whether index is a deleted slot. Raises OutOfRangeIndex if out of range."""
        return self._nodes.is_free(index)

    def node(self, index: int) -> Node:
        return self._nodes.get(index)

    def nodes(self) -> List[Tuple[int, Node]]:
        """All live (index, node) pairs in index order."""
        return list(self._nodes)

    def find(self, name: str) -> Optional[int]:
        return self._nodes.find(name)

    def rename(self, index: int, new_name: str) -> None:
        """
        Rename a node.

        Names are not checked for uniqueness unless the graph was created
        with enforce_unique_names=True.
        """
        node = self._nodes.get(index, "rename")
        check_name(new_name)
        if self.enforce_unique_names and new_name != node.name:
            holder = self._nodes.find(new_name)
            if holder is not None and holder != index:
                raise NameCollision(new_name, holder)
        self._nodes.rename(index, new_name)

    def position(self, index: int) -> Vec2:
        return self._nodes.get(index).position

    def set_position(self, index: int, x: float, y: float) -> None:
        """Place a node directly, e.g. while it is being dragged."""
        self._nodes.set_position(index, Vec2(float(x), float(y)))

    def set_image(self, index: int, image: Optional[str]) -> None:
        self._nodes.set_image(index, image)

    def delete_node(self, index: int) -> List[Tuple[int, int]]:
        """
        Delete a node and its edges, freeing the index for reuse.

        Returns the removed (a, b) pairs; empty if the slot was already free.
        """
        if self._nodes.is_free(index):
            return []
        removed = self._nodes.delete(index, self._edges)
        logger.debug("Deleted node %d, removed %d edges", index, len(removed))
        return removed

    @property
    def node_count(self) -> int:
        """Number of live nodes."""
        return self._nodes.live_count

    @property
    def slot_count(self) -> int:
        """Number of slots, including free ones."""
        return len(self._nodes)

    # Edges

    def add_or_update_edge(self, i: int, j: int, when: date) -> Edge:
        """Connect two live nodes, keeping the earliest date for the pair."""
        self._nodes.get(i, "connect")
        self._nodes.get(j, "connect")
        return self._edges.add_or_update(i, j, as_edge_date(when))

    def add_friend_group(self, names: Iterable[str], when: date) -> List[int]:
        """
        Add a group of friends who all know each other since `when`.

        Every name is resolved to a node (created if new) and every pair
        of distinct nodes in the group is connected. Returns the indices
        in the order of `names`.
        """
        names = list(names)
        if not names:
            raise ValueError("a friend group needs at least one name")
        for name in names:
            check_name(name)
        when = as_edge_date(when)

        indices = [self.get_or_create(name) for name in names]

        for a in range(len(indices)):
            for b in range(a + 1, len(indices)):
                if indices[a] != indices[b]:
                    self._edges.add_or_update(indices[a], indices[b], when)

        return indices

    def degree(self, index: int) -> int:
        """Number of direct connections; 0 for a deleted slot."""
        self._nodes.check_index(index)
        return self._edges.degree(index)

    def neighbors(self, index: int) -> Set[int]:
        self._nodes.check_index(index)
        return self._edges.neighbors(index)

    def edge_between(self, i: int, j: int) -> Optional[Edge]:
        self._nodes.check_index(i)
        self._nodes.check_index(j)
        return self._edges.get(i, j)

    @property
    def edges(self) -> List[Edge]:
        """All edges in storage order."""
        return self._edges.edges

    @property
    def edge_count(self) -> int:
        return self._edges.edge_count

    # Layout

    def update(self, dt: float) -> None:
        """Advance the layout simulation by dt seconds."""
        for index, position in self._simulator.step(self._nodes, self._edges, dt).items():
            self._nodes.set_position(index, position)

    def __repr__(self) -> str:
        return f"FriendGraph(nodes={self.node_count}, edges={self.edge_count})"
