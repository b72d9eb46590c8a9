"""Shortest connection path between two entities.

Cost is hop count, not connection strength: the question an investigator
asks is "how many introductions apart are these two actors", so the
search is a plain breadth-first search over the undirected graph.

Neighbours are expanded in ``GraphStore`` order, which makes the result
deterministic when several shortest paths exist: the path through the
earliest-inserted entities is returned.

Complexity is O(V + E) per query.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Literal

from casegraph.graph.models import Connection
from casegraph.graph.store import GraphStore


class InvalidPathQuery(ValueError):
    """Raised when source and target are the same entity."""


@dataclass(frozen=True)
class PathResult:
    """A shortest path, source to target inclusive."""

    path: list[str]
    connections: list[Connection] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.path) - 1

    @property
    def source_id(self) -> str:
        return self.path[0]

    @property
    def target_id(self) -> str:
        return self.path[-1]

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class PathNotFound:
    """No path exists, or one of the endpoints is not in the graph."""

    source_id: str
    target_id: str
    reason: Literal["unknown_entity", "disconnected"]

    def __bool__(self) -> bool:
        return False


def shortest_path(
    store: GraphStore,
    source_id: str,
    target_id: str,
) -> PathResult | PathNotFound:
    """Breadth-first shortest path between two entities.

    Raises
    ------
    InvalidPathQuery
        If ``source_id == target_id``. A zero-hop path is not a meaningful
        answer and callers are expected to check for it first.
    """
    if source_id == target_id:
        raise InvalidPathQuery(f"Source and target are the same entity: {source_id!r}")

    if not store.has_entity(source_id) or not store.has_entity(target_id):
        return PathNotFound(source_id, target_id, "unknown_entity")

    parent: dict[str, tuple[str, Connection] | None] = {source_id: None}
    queue: deque[str] = deque([source_id])

    while queue:
        current = queue.popleft()
        if current == target_id:
            break
        for conn, neighbor in store.neighbors(current):
            if neighbor not in parent:
                parent[neighbor] = (current, conn)
                queue.append(neighbor)

    if target_id not in parent:
        return PathNotFound(source_id, target_id, "disconnected")

    path: list[str] = [target_id]
    hops: list[Connection] = []
    step = parent[target_id]
    while step is not None:
        previous, conn = step
        path.append(previous)
        hops.append(conn)
        step = parent[previous]

    path.reverse()
    hops.reverse()
    return PathResult(path=path, connections=hops)
