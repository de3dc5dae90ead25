"""Tests for network modules."""

import pytest
from datetime import date, datetime

from friend_graph.errors import (
    FriendGraphError,
    NameCollision,
    OperationOnFreedIndex,
    OutOfRangeIndex,
)
from friend_graph.network.edges import Edge, EdgeIndex, canonical_pair
from friend_graph.network.graph import FriendGraph
from friend_graph.network.nodes import NodeStore
from friend_graph.vector import Vec2


D2015 = date(2015, 1, 1)
D2018 = date(2018, 1, 1)
D2020 = date(2020, 1, 1)


class TestNodeStore:
    """Tests for NodeStore class."""

    @pytest.fixture
    def store(self):
        return NodeStore()

    def test_get_or_create_appends(self, store):
        assert store.get_or_create("A") == 0
        assert store.get_or_create("B") == 1
        assert store.get_or_create("A") == 0
        assert len(store) == 2
        assert store.live_count == 2

    def test_new_node_starts_at_origin(self, store):
        index = store.get_or_create("A")
        node = store.get(index)

        assert node.position == Vec2(0.0, 0.0)
        assert node.image is None

    def test_blank_name_rejected(self, store):
        with pytest.raises(ValueError):
            store.get_or_create("   ")
        assert len(store) == 0

    def test_delete_reuses_lowest_free_slot(self, store):
        for name in "ABCDE":
            store.get_or_create(name)
        edges = EdgeIndex()

        store.delete(3, edges)
        store.delete(1, edges)

        assert store.get_or_create("X") == 1
        assert store.get_or_create("Y") == 3
        assert store.get_or_create("Z") == 5

    def test_iteration_skips_free_slots(self, store):
        for name in "ABC":
            store.get_or_create(name)
        store.delete(1, EdgeIndex())

        assert [index for index, _ in store] == [0, 2]
        assert store.live_indices() == [0, 2]
        assert store.live_count == 2

    def test_is_free_out_of_range(self, store):
        store.get_or_create("A")

        with pytest.raises(OutOfRangeIndex):
            store.is_free(1)
        with pytest.raises(OutOfRangeIndex):
            store.is_free(-1)
        with pytest.raises(OutOfRangeIndex):
            store.is_free(True)
        with pytest.raises(OutOfRangeIndex):
            store.is_free(False)

    def test_get_free_slot_raises(self, store):
        store.get_or_create("A")
        store.delete(0, EdgeIndex())

        with pytest.raises(OperationOnFreedIndex):
            store.get(0)

    def test_delete_free_slot_is_noop(self, store):
        store.get_or_create("A")
        edges = EdgeIndex()

        store.delete(0, edges)
        assert store.delete(0, edges) == []
        assert store.get_or_create("B") == 0


class TestEdgeIndex:
    """Tests for EdgeIndex class."""

    @pytest.fixture
    def edges(self):
        return EdgeIndex()

    def test_canonical_pair(self):
        assert canonical_pair(3, 1) == (1, 3)
        assert canonical_pair(1, 3) == (1, 3)

    def test_add_stores_canonical_order(self, edges):
        edge = edges.add_or_update(5, 2, D2020)

        assert edge.pair == (2, 5)
        assert edges.get(5, 2) is edge
        assert edges.get(2, 5) is edge

    def test_earliest_date_kept(self, edges):
        edges.add_or_update(0, 1, D2020)
        edges.add_or_update(1, 0, D2015)
        edges.add_or_update(0, 1, D2018)

        assert edges.edge_count == 1
        assert edges.get(0, 1).earliest_date == D2015

    def test_self_edge_rejected(self, edges):
        with pytest.raises(ValueError):
            edges.add_or_update(2, 2, D2020)
        assert edges.edge_count == 0

    def test_adjacency(self, edges):
        edges.add_or_update(0, 1, D2020)
        edges.add_or_update(0, 2, D2020)

        assert edges.connected(0, 1)
        assert edges.connected(1, 0)
        assert not edges.connected(1, 2)
        assert edges.neighbors(0) == {1, 2}
        assert edges.degree(0) == 2
        assert edges.degree(7) == 0

    def test_remove_incident_in_storage_order(self, edges):
        edges.add_or_update(0, 1, D2020)
        edges.add_or_update(2, 0, D2020)
        edges.add_or_update(1, 2, D2020)
        edges.add_or_update(2, 3, D2020)

        removed = edges.remove_incident(2)

        assert removed == [(0, 2), (1, 2), (2, 3)]
        assert [e.pair for e in edges.edges] == [(0, 1)]
        assert edges.degree(2) == 0
        assert edges.degree(3) == 0
        assert edges.neighbors(1) == {0}

    def test_pair_index_valid_after_removal(self, edges):
        edges.add_or_update(0, 1, D2020)
        edges.add_or_update(1, 2, D2020)
        edges.add_or_update(2, 3, D2020)

        edges.remove_incident(0)
        edges.add_or_update(3, 2, D2015)

        assert edges.edge_count == 2
        assert edges.get(2, 3).earliest_date == D2015
        assert edges.get(1, 2).earliest_date == D2020

    def test_edge_other_endpoint(self):
        edge = Edge(1, 4, D2020)

        assert edge.other(1) == 4
        assert edge.other(4) == 1
        assert edge.touches(4)
        assert not edge.touches(2)


class TestFriendGraph:
    """Tests for FriendGraph class."""

    @pytest.fixture
    def graph(self):
        return FriendGraph()

    def test_index_stability(self, graph):
        a = graph.get_or_create("A")
        for name in ["B", "C", "D"]:
            graph.get_or_create(name)
        graph.delete_node(graph.find("C"))
        graph.get_or_create("E")
        graph.delete_node(graph.find("B"))

        assert graph.get_or_create("A") == a
        assert graph.get_or_create("D") == 3

    def test_slot_reuse(self, graph):
        graph.add_friend_group(["A", "B", "C"], D2020)

        graph.delete_node(1)

        assert graph.is_free(1)
        assert graph.get_or_create("D") == 1
        assert not graph.is_free(1)
        assert graph.get_or_create("E") == 3

    def test_reused_slot_has_no_edges(self, graph):
        graph.add_friend_group(["A", "B", "C"], D2020)
        graph.delete_node(1)

        index = graph.get_or_create("D")

        assert graph.degree(index) == 0
        assert graph.node(index).name == "D"
        assert graph.node(index).position == Vec2()

    def test_edge_dedup_earliest_date(self, graph):
        graph.add_friend_group(["A", "B"], D2020)
        graph.add_friend_group(["A", "B"], D2015)

        assert graph.edge_count == 1
        assert graph.edge_between(0, 1).earliest_date == D2015

    def test_later_date_does_not_replace(self, graph):
        graph.add_friend_group(["A", "B"], D2015)
        graph.add_friend_group(["B", "A"], D2020)

        assert graph.edge_count == 1
        assert graph.edge_between(1, 0).earliest_date == D2015

    def test_clique_completeness(self, graph):
        indices = graph.add_friend_group(["A", "B", "C"], D2020)

        assert indices == [0, 1, 2]
        assert graph.edge_count == 3
        assert {e.pair for e in graph.edges} == {(0, 1), (0, 2), (1, 2)}
        assert all(e.earliest_date == D2020 for e in graph.edges)

    def test_groups_share_existing_nodes(self, graph):
        graph.add_friend_group(["A", "B"], D2020)
        graph.add_friend_group(["B", "C"], D2018)

        assert graph.node_count == 3
        assert graph.degree(graph.find("B")) == 2
        assert graph.edge_between(0, 2) is None

    def test_single_name_group(self, graph):
        indices = graph.add_friend_group(["A"], D2020)

        assert indices == [0]
        assert graph.node_count == 1
        assert graph.edge_count == 0

    def test_repeated_name_in_group(self, graph):
        indices = graph.add_friend_group(["A", "A", "B"], D2020)

        assert indices == [0, 0, 1]
        assert graph.edge_count == 1
        assert graph.degree(0) == 1
        assert 0 not in graph.neighbors(0)

    def test_empty_group_rejected(self, graph):
        with pytest.raises(ValueError):
            graph.add_friend_group([], D2020)

    def test_rejected_group_leaves_graph_unchanged(self, graph):
        graph.add_friend_group(["A", "B"], D2020)

        with pytest.raises(ValueError):
            graph.add_friend_group(["C", " ", "D"], D2015)

        assert graph.node_count == 2
        assert graph.edge_count == 1
        assert graph.find("C") is None
        assert graph.edge_between(0, 1).earliest_date == D2020

    def test_datetime_group_date_is_truncated(self, graph):
        graph.add_friend_group(["A", "B"], D2020)
        graph.add_friend_group(["C", "A", "B"], datetime(2015, 1, 1, 12, 30))

        assert graph.edge_count == 3
        assert graph.edge_between(0, 1).earliest_date == D2015
        assert graph.edge_between(2, 0).earliest_date == D2015
        assert type(graph.edge_between(2, 0).earliest_date) is date

    def test_invalid_group_date_leaves_graph_unchanged(self, graph):
        graph.add_friend_group(["A", "B"], D2020)

        with pytest.raises(TypeError):
            graph.add_friend_group(["C", "A", "B"], 2015)
        with pytest.raises(TypeError):
            graph.add_or_update_edge(0, 1, "2015-01-01")

        assert graph.node_count == 2
        assert graph.edge_count == 1
        assert graph.find("C") is None
        assert graph.edge_between(0, 1).earliest_date == D2020

    def test_symmetric_degree(self, graph):
        graph.add_friend_group(["A", "B", "C"], D2020)
        graph.add_friend_group(["C", "D"], D2020)

        assert graph.degree(0) == 2
        assert graph.degree(2) == 3
        assert graph.degree(3) == 1

        before = graph.degree(2)
        graph.delete_node(3)
        assert graph.degree(2) == before - 1

    def test_deletion_completeness(self, graph):
        graph.add_friend_group(["A", "B", "C"], D2020)
        graph.add_friend_group(["C", "D"], D2018)

        removed = graph.delete_node(2)

        assert removed == [(0, 2), (1, 2), (2, 3)]
        assert all(not e.touches(2) for e in graph.edges)
        assert graph.degree(0) == 1
        assert graph.degree(1) == 1
        assert graph.degree(3) == 0
        assert graph.degree(2) == 0
        assert 2 not in graph.neighbors(0)

    def test_delete_free_node_returns_empty(self, graph):
        graph.add_friend_group(["A", "B"], D2020)
        graph.delete_node(0)

        assert graph.delete_node(0) == []
        assert graph.edge_count == 0

    def test_out_of_range_index(self, graph):
        graph.get_or_create("A")

        for call in (
            lambda: graph.is_free(5),
            lambda: graph.degree(5),
            lambda: graph.delete_node(5),
            lambda: graph.rename(5, "X"),
            lambda: graph.set_position(5, 1.0, 2.0),
            lambda: graph.is_free(-1),
            lambda: graph.edge_between(0, 99),
            lambda: graph.edge_between(99, 0),
            lambda: graph.neighbors(5),
            lambda: graph.node(5),
            lambda: graph.position(5),
            lambda: graph.set_image(5, "x.png"),
            lambda: graph.add_or_update_edge(0, 5, D2020),
            lambda: graph.degree(True),
        ):
            with pytest.raises(OutOfRangeIndex):
                call()

    def test_out_of_range_is_index_error(self, graph):
        with pytest.raises(IndexError):
            graph.degree(0)
        with pytest.raises(FriendGraphError):
            graph.degree(0)

    def test_operations_on_freed_index(self, graph):
        graph.add_friend_group(["A", "B"], D2020)
        graph.delete_node(0)

        with pytest.raises(OperationOnFreedIndex):
            graph.rename(0, "X")
        with pytest.raises(OperationOnFreedIndex):
            graph.set_position(0, 1.0, 1.0)
        with pytest.raises(OperationOnFreedIndex):
            graph.set_image(0, "a.png")
        with pytest.raises(OperationOnFreedIndex):
            graph.add_or_update_edge(0, 1, D2020)
        assert graph.degree(0) == 0

    def test_rename_allows_duplicates_by_default(self, graph):
        graph.add_friend_group(["A", "B"], D2020)

        graph.rename(1, "A")

        assert graph.node(1).name == "A"
        # The lowest index wins when names collide.
        assert graph.get_or_create("A") == 0

    def test_rename_enforced_uniqueness(self):
        graph = FriendGraph(enforce_unique_names=True)
        graph.add_friend_group(["A", "B"], D2020)

        with pytest.raises(NameCollision):
            graph.rename(1, "A")
        assert graph.node(1).name == "B"

        graph.rename(1, "B")
        graph.rename(1, "C")
        assert graph.find("C") == 1

    def test_rename_blank_rejected(self, graph):
        graph.get_or_create("A")

        with pytest.raises(ValueError):
            graph.rename(0, "")
        assert graph.node(0).name == "A"

    def test_set_position_and_image(self, graph):
        index = graph.get_or_create("A")

        graph.set_position(index, 12, -3.5)
        graph.set_image(index, "data:image/jpeg;base64,AAAA")

        assert graph.position(index) == Vec2(12.0, -3.5)
        assert graph.node(index).image == "data:image/jpeg;base64,AAAA"

    def test_add_or_update_edge_validates(self, graph):
        graph.add_friend_group(["A", "B"], D2020)

        with pytest.raises(ValueError):
            graph.add_or_update_edge(1, 1, D2020)
        with pytest.raises(OutOfRangeIndex):
            graph.add_or_update_edge(0, 9, D2020)

        graph.add_or_update_edge(1, 0, D2015)
        assert graph.edge_between(0, 1).earliest_date == D2015

    def test_counts_and_repr(self, graph):
        graph.add_friend_group(["A", "B", "C"], D2020)
        graph.delete_node(0)

        assert graph.node_count == 2
        assert graph.slot_count == 3
        assert graph.edge_count == 1
        assert repr(graph) == "FriendGraph(nodes=2, edges=1)"
