"""
Slot-based node storage for the friend graph.

Node indices are stable: an index names the same friend until that
friend is deleted. Freed slots are reused lowest-index first before
the storage grows.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, TYPE_CHECKING
import heapq

from ..errors import OutOfRangeIndex, OperationOnFreedIndex
from ..vector import Vec2

if TYPE_CHECKING:
    from .edges import EdgeIndex


@dataclass
class Node:
    """
    One friend in the graph.

    The image is an opaque handle (URL, data URL, file path) that is
    only carried along for renderers.
    """
    name: str
    image: Optional[str] = None
    position: Vec2 = field(default_factory=Vec2)


def check_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("node name must be a non-empty string")
    return name


class NodeStore:
    """
    Indexed container of nodes with tombstoned, reusable slots.

    A slot is either a live Node or None. Free indices are kept in a
    min-heap so the lowest one is handed out first.
    """

    def __init__(self):
        self._slots: List[Optional[Node]] = []
        self._free: List[int] = []

    def __len__(self) -> int:
        """Number of slots, live or free."""
        return len(self._slots)

    def __iter__(self) -> Iterator[Tuple[int, Node]]:
        """Iterate over (index, node) for live slots in index order."""
        for index, node in enumerate(self._slots):
            if node is not None:
                yield index, node

    @property
    def live_count(self) -> int:
        return len(self._slots) - len(self._free)

    def live_indices(self) -> List[int]:
        return [index for index, _ in self]

    def check_index(self, index: int) -> None:
        """Raise OutOfRangeIndex unless index addresses an existing slot."""
        if (
            isinstance(index, bool)
            or not isinstance(index, int)
            or not 0 <= index < len(self._slots)
        ):
            raise OutOfRangeIndex(index, len(self._slots))

    def is_free(self, index: int) -> bool:
        self.check_index(index)
        return self._slots[index] is None

    def get(self, index: int, operation: str = "access") -> Node:
        """Return the live node at index."""
        self.check_index(index)
        node = self._slots[index]
        if node is None:
            raise OperationOnFreedIndex(index, operation)
        return node

    def find(self, name: str) -> Optional[int]:
        """Index of the first live node with this name, or None."""
        for index, node in self:
            if node.name == name:
                return index
        return None

    def get_or_create(self, name: str) -> int:
        """
        Resolve a name to a node index, creating the node if needed.

        New nodes start at the origin and take the lowest free slot,
        or a new slot at the end when none is free.
        """
        check_name(name)
        existing = self.find(name)
        if existing is not None:
            return existing

        node = Node(name)
        if self._free:
            index = heapq.heappop(self._free)
            self._slots[index] = node
        else:
            index = len(self._slots)
            self._slots.append(node)
        return index

    def rename(self, index: int, new_name: str) -> None:
        """Overwrite a node's name. Uniqueness is not checked here."""
        check_name(new_name)
        self.get(index, "rename").name = new_name

    def set_position(self, index: int, position: Vec2) -> None:
        self.get(index, "move").position = position

    def set_image(self, index: int, image: Optional[str]) -> None:
        self.get(index, "set image of").image = image

    def delete(self, index: int, edges: "EdgeIndex") -> List[Tuple[int, int]]:
        """
        Delete a node and every edge touching it.

        Returns the removed (a, b) endpoint pairs so renderers can drop
        the matching visuals. Deleting a free slot is a no-op.
        """
        if self.is_free(index):
            return []

        removed = edges.remove_incident(index)
        self._slots[index] = None
        heapq.heappush(self._free, index)
        return removed

    def __repr__(self) -> str:
        return f"NodeStore(slots={len(self._slots)}, live={self.live_count})"
