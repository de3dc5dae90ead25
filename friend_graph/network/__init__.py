"""Network module - Friend graph storage and edges."""

from ..vector import Vec2
from .nodes import Node, NodeStore
from .edges import Edge, EdgeIndex
from .graph import FriendGraph

__all__ = [
    "Vec2",
    "Node",
    "NodeStore",
    "Edge",
    "EdgeIndex",
    "FriendGraph",
]
