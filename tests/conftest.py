"""Shared graph builders for the casegraph test suite."""

import pytest

from casegraph.graph.models import Connection, ConnectionType, Entity, EntityType
from casegraph.graph.store import GraphStore


def make_store(edges, nodes=None, **conn_kw) -> GraphStore:
    """Build a store from ``(a, b)`` pairs. Node order follows ``nodes``
    when given, otherwise first appearance in ``edges``."""
    if nodes is None:
        nodes = []
        for a, b in edges:
            for n in (a, b):
                if n not in nodes:
                    nodes.append(n)
    entities = [Entity(n, n.upper(), EntityType.PERSON) for n in nodes]
    connections = [
        Connection(a, b, conn_kw.get("type", ConnectionType.PROFESSIONAL), f"{a}-{b}",
                   conn_kw.get("strength", 0.5))
        for a, b in edges
    ]
    return GraphStore(entities, connections)


@pytest.fixture
def cycle5():
    """A-B-C-D-E-A, inserted A..E."""
    return make_store(
        [("A", "B"), ("B", "C"), ("C", "D"), ("D", "E"), ("A", "E")],
        nodes=["A", "B", "C", "D", "E"],
    )


@pytest.fixture
def barbell():
    """Two triangles {a,b,c} and {d,e,f} joined by the bridge c-d."""
    return make_store([
        ("a", "b"), ("a", "c"), ("b", "c"),
        ("d", "e"), ("d", "f"), ("e", "f"),
        ("c", "d"),
    ], nodes=["a", "b", "c", "d", "e", "f"])


@pytest.fixture
def star():
    """Hub h with four leaves."""
    return make_store([("h", "l1"), ("h", "l2"), ("h", "l3"), ("h", "l4")])


@pytest.fixture
def build_store():
    return make_store
