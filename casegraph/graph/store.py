"""Immutable adjacency index over a merged entity/connection set.

A ``GraphStore`` is built once per merge cycle and never mutated; a new
store is constructed whenever either source changes. Construction is
O(V + E), neighbour lookup is a dict access.

Neighbour order is deterministic: neighbours of a node are listed by the
insertion index of the other endpoint, then by connection order. Every
traversal in the engine relies on this to break ties reproducibly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import cached_property
from types import MappingProxyType

import networkx as nx

from casegraph.graph.merger import MergeResult
from casegraph.graph.models import Connection, Entity


class GraphStore:
    """Read-only undirected view of the merged case graph.

    Parameters
    ----------
    entities:
        Entities in insertion order. Ids must be unique.
    connections:
        Connections whose endpoints are all present in ``entities``.
        Dangling connections are skipped (the merger already drops them).
    """

    def __init__(
        self,
        entities: Iterable[Entity],
        connections: Iterable[Connection],
    ) -> None:
        entity_map: dict[str, Entity] = {}
        for entity in entities:
            if entity.id in entity_map:
                raise ValueError(f"Duplicate entity id {entity.id!r}")
            entity_map[entity.id] = entity

        self._entities = MappingProxyType(entity_map)
        self._index = MappingProxyType({eid: i for i, eid in enumerate(entity_map)})
        self._connections = tuple(
            c for c in connections
            if c.source in entity_map and c.target in entity_map
        )

        adjacency: dict[str, list[tuple[int, int, Connection, str]]] = {
            eid: [] for eid in entity_map
        }
        for order, conn in enumerate(self._connections):
            adjacency[conn.source].append((self._index[conn.target], order, conn, conn.target))
            if conn.source != conn.target:
                adjacency[conn.target].append((self._index[conn.source], order, conn, conn.source))

        self._adjacency = MappingProxyType({
            eid: tuple((conn, other) for _, _, conn, other in sorted(entries, key=lambda e: e[:2]))
            for eid, entries in adjacency.items()
        })

    @classmethod
    def from_merge(cls, result: MergeResult) -> GraphStore:
        return cls(result.entities, result.connections)

    # -- Lookup ----------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def has_entity(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def get_entity(self, entity_id: str) -> Entity | None:
        return self._entities.get(entity_id)

    def index_of(self, entity_id: str) -> int:
        """Insertion position of an entity; raises KeyError if unknown."""
        return self._index[entity_id]

    def neighbors(self, entity_id: str) -> list[tuple[Connection, str]]:
        """Connections touching ``entity_id`` paired with the opposite endpoint.

        Unknown ids yield an empty list.
        """
        return list(self._adjacency.get(entity_id, ()))

    def neighbor_ids(self, entity_id: str) -> list[str]:
        """Distinct neighbour ids in store order."""
        seen: dict[str, None] = {}
        for _, other in self._adjacency.get(entity_id, ()):
            if other != entity_id:
                seen.setdefault(other, None)
        return list(seen)

    def degree(self, entity_id: str) -> int:
        """Number of distinct neighbours."""
        return len(self.neighbor_ids(entity_id))

    def all_entities(self) -> list[Entity]:
        return list(self._entities.values())

    def all_connections(self) -> list[Connection]:
        return list(self._connections)

    def entity_ids(self) -> list[str]:
        return list(self._entities)

    @property
    def entity_count(self) -> int:
        return len(self._entities)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # -- Derived views ---------------------------------------------------------

    @cached_property
    def _simple_graph(self) -> nx.Graph:
        graph = nx.Graph()
        for eid, entity in self._entities.items():
            graph.add_node(eid, name=entity.name, type=entity.type.value)
        for conn in self._connections:
            if conn.source == conn.target:
                continue
            if graph.has_edge(conn.source, conn.target):
                data = graph[conn.source][conn.target]
                data["strength"] = max(data["strength"], conn.strength)
                data["count"] += 1
            else:
                graph.add_edge(conn.source, conn.target, strength=conn.strength, count=1)
        return nx.freeze(graph)

    def to_networkx(self) -> nx.Graph:
        """Frozen undirected simple graph; parallel connections collapse to one edge.

        Nodes are added in store order. Self-loops are left out.
        """
        return self._simple_graph

    def subgraph(self, entity_ids: Iterable[str]) -> GraphStore:
        """New store restricted to ``entity_ids``, keeping store order."""
        keep = set(entity_ids)
        return GraphStore(
            [e for e in self._entities.values() if e.id in keep],
            [c for c in self._connections if c.source in keep and c.target in keep],
        )

    def __repr__(self) -> str:
        return f"<GraphStore entities={self.entity_count} connections={self.connection_count}>"
