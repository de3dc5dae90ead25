"""
Errors raised by the friend graph core.

Every operation validates its input before mutating anything, so a raised
error always leaves the graph in its previous consistent state.
"""


class FriendGraphError(Exception):
    """Base class for all friend graph errors."""


class OutOfRangeIndex(FriendGraphError, IndexError):
    """A node index outside the current slot storage."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"node index {index} out of range (slots: {size})")


class OperationOnFreedIndex(FriendGraphError, LookupError):
    """An operation that needs a live node was given a deleted slot."""

    def __init__(self, index: int, operation: str = "access"):
        self.index = index
        self.operation = operation
        super().__init__(f"cannot {operation} node {index}: slot is free")


class NameCollision(FriendGraphError, ValueError):
    """A rename would give two live nodes the same name."""

    def __init__(self, name: str, holder: int):
        self.name = name
        self.holder = holder
        super().__init__(f"name {name!r} is already used by node {holder}")
