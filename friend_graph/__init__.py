"""
FriendGraph

A small social graph of friends and the friend groups they share,
laid out in 2D by a force-directed simulation.

Friends are nodes with stable, reusable indices; every shared group
adds a clique of undirected edges dated with the earliest year the
two friends were known to be connected.
"""

__version__ = "0.1.0"
