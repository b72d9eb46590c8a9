"""Tests for casegraph.graph.store — immutable adjacency index."""

import networkx as nx
import pytest

from casegraph.graph.models import Connection, ConnectionType, Entity, EntityType
from casegraph.graph.store import GraphStore


def _entity(eid: str) -> Entity:
    return Entity(eid, eid.upper(), EntityType.PERSON)


class TestConstruction:
    def test_counts(self, cycle5):
        assert len(cycle5) == 5
        assert cycle5.entity_count == 5
        assert cycle5.connection_count == 5
        assert "A" in cycle5
        assert "Z" not in cycle5

    def test_duplicate_id_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            GraphStore([_entity("a"), _entity("a")], [])

    def test_dangling_connection_skipped(self):
        store = GraphStore([_entity("a")], [Connection("a", "ghost", ConnectionType.OTHER)])
        assert store.connection_count == 0
        assert store.neighbors("a") == []

    def test_empty_store(self):
        store = GraphStore([], [])
        assert store.entity_count == 0
        assert store.all_entities() == []
        assert store.to_networkx().number_of_nodes() == 0


class TestLookup:
    def test_insertion_order_preserved(self, cycle5):
        assert cycle5.entity_ids() == ["A", "B", "C", "D", "E"]
        assert cycle5.index_of("D") == 3

    def test_index_of_unknown_raises(self, cycle5):
        with pytest.raises(KeyError):
            cycle5.index_of("Z")

    def test_get_entity(self, cycle5):
        assert cycle5.get_entity("A").name == "A"
        assert cycle5.get_entity("Z") is None

    def test_neighbors_undirected(self, cycle5):
        # A-E was recorded as A -> E; E still sees A
        assert [other for _, other in cycle5.neighbors("E")] == ["A", "D"]

    def test_neighbors_ordered_by_store_index(self, build_store):
        store = build_store([("a", "d"), ("a", "b"), ("a", "c")], nodes=["a", "b", "c", "d"])
        assert [other for _, other in store.neighbors("a")] == ["b", "c", "d"]

    def test_parallel_connections_listed_in_connection_order(self):
        a, b = _entity("a"), _entity("b")
        store = GraphStore([a, b], [
            Connection("a", "b", ConnectionType.FAMILY, "Sibling"),
            Connection("b", "a", ConnectionType.LEGAL, "Co-accused"),
        ])
        assert [c.relationship for c, _ in store.neighbors("a")] == ["Sibling", "Co-accused"]
        assert store.neighbor_ids("a") == ["b"]
        assert store.degree("a") == 1

    def test_unknown_entity_has_no_neighbors(self, cycle5):
        assert cycle5.neighbors("Z") == []
        assert cycle5.degree("Z") == 0

    def test_neighbors_returns_copy(self, cycle5):
        cycle5.neighbors("A").clear()
        assert len(cycle5.neighbors("A")) == 2

    def test_self_loop_listed_once(self):
        store = GraphStore([_entity("a")], [Connection("a", "a", ConnectionType.OTHER)])
        assert len(store.neighbors("a")) == 1
        assert store.degree("a") == 0


class TestDerivedViews:
    def test_networkx_collapses_parallel_edges(self):
        store = GraphStore([_entity("a"), _entity("b")], [
            Connection("a", "b", ConnectionType.FAMILY, "Sibling", 0.9),
            Connection("b", "a", ConnectionType.LEGAL, "Co-accused", 0.3),
        ])
        graph = store.to_networkx()
        assert graph.number_of_edges() == 1
        assert graph["a"]["b"]["strength"] == 0.9
        assert graph["a"]["b"]["count"] == 2

    def test_networkx_graph_is_frozen(self, cycle5):
        graph = cycle5.to_networkx()
        with pytest.raises(nx.NetworkXError):
            graph.add_node("Z")
        assert list(graph.nodes) == ["A", "B", "C", "D", "E"]

    def test_subgraph_keeps_order_and_internal_edges(self, cycle5):
        sub = cycle5.subgraph(["D", "A", "B"])
        assert sub.entity_ids() == ["A", "B", "D"]
        assert sub.connection_count == 1
        assert sub is not cycle5

    def test_repr(self, cycle5):
        assert repr(cycle5) == "<GraphStore entities=5 connections=5>"
