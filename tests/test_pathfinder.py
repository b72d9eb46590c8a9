"""Tests for casegraph.graph.pathfinder — BFS shortest connection."""

import pytest

from casegraph.graph.pathfinder import (
    InvalidPathQuery,
    PathNotFound,
    PathResult,
    shortest_path,
)


class TestShortestPath:
    def test_cycle_tie_prefers_earliest_neighbor(self, cycle5):
        result = shortest_path(cycle5, "A", "D")
        assert isinstance(result, PathResult)
        assert result.path == ["A", "E", "D"]
        assert result.length == 2

    def test_reverse_direction(self, cycle5):
        result = shortest_path(cycle5, "D", "A")
        assert result.path == ["D", "E", "A"]

    def test_adjacent(self, cycle5):
        result = shortest_path(cycle5, "A", "B")
        assert result.path == ["A", "B"]
        assert result.length == 1
        assert result.connections[0].relationship == "A-B"

    def test_connections_follow_path(self, cycle5):
        result = shortest_path(cycle5, "A", "D")
        assert [c.relationship for c in result.connections] == ["A-E", "D-E"]
        assert result.source_id == "A"
        assert result.target_id == "D"

    @pytest.mark.parametrize("nodes,expected", [
        (["A", "B", "C", "D"], ["A", "B", "D"]),
        (["A", "C", "B", "D"], ["A", "C", "D"]),
    ])
    def test_tie_break_follows_insertion_order(self, build_store, nodes, expected):
        store = build_store([("A", "B"), ("B", "D"), ("A", "C"), ("C", "D")], nodes=nodes)
        assert shortest_path(store, "A", "D").path == expected

    def test_deterministic_across_calls(self, cycle5):
        paths = {tuple(shortest_path(cycle5, "B", "E").path) for _ in range(5)}
        assert len(paths) == 1

    def test_disconnected(self, build_store):
        store = build_store([("a", "b"), ("c", "d")])
        result = shortest_path(store, "a", "d")
        assert isinstance(result, PathNotFound)
        assert result.reason == "disconnected"
        assert not result

    def test_unknown_entity(self, cycle5):
        result = shortest_path(cycle5, "A", "nobody")
        assert isinstance(result, PathNotFound)
        assert result.reason == "unknown_entity"

    def test_same_entity_rejected(self, cycle5):
        with pytest.raises(InvalidPathQuery):
            shortest_path(cycle5, "A", "A")

    def test_invalid_query_is_value_error(self, cycle5):
        with pytest.raises(ValueError):
            shortest_path(cycle5, "B", "B")

    def test_found_path_is_truthy(self, cycle5):
        assert shortest_path(cycle5, "A", "C")


@pytest.mark.parametrize("fixture", ["cycle5", "barbell"])
def test_path_length_symmetric(request, fixture):
    store = request.getfixturevalue(fixture)
    ids = store.entity_ids()
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            assert shortest_path(store, a, b).length == shortest_path(store, b, a).length


def test_single_node_graph(build_store):
    store = build_store([], nodes=["solo"])
    result = shortest_path(store, "solo", "other")
    assert result.reason == "unknown_entity"
