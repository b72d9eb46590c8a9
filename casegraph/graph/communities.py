"""Community (faction) detection.

Starts from connected components, which are never merged, then refines
large components Girvan-Newman style: the highest edge-betweenness edge
inside a community is removed repeatedly until the community falls
apart. A split is kept only when every piece has at least ``min_size``
members and whole-graph modularity improves by more than
``modularity_threshold``. Each round applies the single best split; the
loop ends when no split qualifies.

Ties between edges with equal betweenness are broken by the endpoints'
insertion order in the ``GraphStore``: the edge whose (lower index,
higher index) pair is smallest is removed first. Together with the
ordering rules below this makes the partition, ids and colours fully
reproducible.

Worst case is roughly O(V * E^2) per accepted split; acceptable for
investigation-sized graphs.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass
from typing import Callable

import networkx as nx

from casegraph.graph.models import ConnectionType, EntityCategory, EntityType
from casegraph.graph.store import GraphStore

logger = logging.getLogger(__name__)

COMMUNITY_COLORS: tuple[str, ...] = (
    "#8B5CF6",
    "#3B82F6",
    "#22C55E",
    "#F97316",
    "#EC4899",
    "#14B8A6",
    "#06B6D4",
    "#F43F5E",
    "#84CC16",
    "#FB923C",
)


@dataclass(frozen=True)
class Community:
    id: int
    members: list[str]
    color: str
    name: str = "Entity Cluster"
    density: int = 0  # percent of possible internal links present
    key_entity: str | None = None

    @property
    def size(self) -> int:
        return len(self.members)


def _pair_rank(store: GraphStore, u: str, v: str) -> tuple[int, int]:
    i, j = store.index_of(u), store.index_of(v)
    return (i, j) if i <= j else (j, i)


def _most_central_edge(store: GraphStore) -> Callable[[nx.Graph], tuple[str, str]]:
    def pick(graph: nx.Graph) -> tuple[str, str]:
        scores = nx.edge_betweenness_centrality(graph, normalized=False)
        top = max(scores.values())
        tied = [
            edge for edge, score in scores.items()
            if math.isclose(score, top, rel_tol=1e-9, abs_tol=1e-12)
        ]
        return min(tied, key=lambda edge: _pair_rank(store, *edge))

    return pick


def _in_store_order(store: GraphStore, members) -> list[str]:
    return sorted(members, key=store.index_of)


def _split_community(store: GraphStore, members: list[str]) -> list[list[str]] | None:
    """Remove top-betweenness edges until ``members`` disconnects."""
    sub = nx.Graph(store.to_networkx().subgraph(members))
    if sub.number_of_edges() == 0:
        return None
    pieces = next(nx.community.girvan_newman(sub, most_valuable_edge=_most_central_edge(store)), None)
    if pieces is None or len(pieces) < 2:
        return None
    ordered = [_in_store_order(store, p) for p in pieces]
    ordered.sort(key=lambda p: store.index_of(p[0]))
    return ordered


def partition_graph(
    store: GraphStore,
    min_size: int = 2,
    modularity_threshold: float = 1e-4,
) -> list[list[str]]:
    """Partition entity ids into communities (unordered list of member lists)."""
    if min_size < 1:
        raise ValueError("min_size must be at least 1")

    graph = store.to_networkx()
    partition = [
        _in_store_order(store, component)
        for component in nx.connected_components(graph)
    ]
    partition.sort(key=lambda members: store.index_of(members[0]))

    if graph.number_of_edges() == 0:
        return partition

    current = nx.community.modularity(graph, partition)
    while True:
        best: tuple[float, list[list[str]]] | None = None
        for idx, members in enumerate(partition):
            if len(members) < 2 * min_size:
                continue
            pieces = _split_community(store, members)
            if pieces is None or any(len(p) < min_size for p in pieces):
                continue
            candidate = partition[:idx] + pieces + partition[idx + 1:]
            gain = nx.community.modularity(graph, candidate) - current
            if gain > modularity_threshold and (best is None or gain > best[0]):
                best = (gain, candidate)

        if best is None:
            break
        gain, partition = best
        current += gain
        logger.debug("Accepted community split (modularity gain %.4f)", gain)

    return partition


def _cluster_name(store: GraphStore, members: list[str]) -> str:
    member_set = set(members)
    entities = [store.get_entity(m) for m in members]

    type_counts: Counter[ConnectionType] = Counter(
        c.type for c in store.all_connections()
        if c.source in member_set and c.target in member_set
    )
    dominant = type_counts.most_common(1)[0][0] if type_counts else None

    categories = Counter(e.display_category for e in entities)
    has_agency = any(e.type is EntityType.AGENCY for e in entities)
    has_org = any(e.type is EntityType.ORGANIZATION for e in entities)

    if dominant is ConnectionType.FAMILY:
        return "Family Network"
    if dominant is ConnectionType.ADVERSARIAL and categories[EntityCategory.ANTAGONIST] > 2:
        return "Conspiracy Network"
    if has_agency and categories[EntityCategory.OFFICIAL] > 2:
        return "Institutional Network"
    if has_org:
        return "Business Network"
    if dominant is ConnectionType.LEGAL:
        return "Legal Proceedings"
    if dominant is ConnectionType.PROFESSIONAL:
        return "Professional Network"
    return "Entity Cluster"


def _density(store: GraphStore, members: list[str]) -> int:
    n = len(members)
    possible = n * (n - 1) / 2
    if possible == 0:
        return 0
    internal = store.to_networkx().subgraph(members).number_of_edges()
    return round(internal / possible * 100)


def _key_entity(store: GraphStore, members: list[str]) -> str:
    weight = {m: sum(conn.strength for conn, _ in store.neighbors(m)) for m in members}
    # max() keeps the first of equal weights, i.e. the earliest inserted
    return max(members, key=lambda m: weight[m])


def detect_communities(
    store: GraphStore,
    min_size: int = 2,
    modularity_threshold: float = 1e-4,
) -> list[Community]:
    """Every entity in exactly one community; isolated entities are singletons.

    Communities are ordered by size (largest first), then by the insertion
    index of their earliest member. ``id`` is the position in that order
    and ``color`` cycles ``COMMUNITY_COLORS``.
    """
    if len(store) == 0:
        return []

    partition = partition_graph(store, min_size, modularity_threshold)
    partition.sort(key=lambda members: (-len(members), store.index_of(members[0])))

    communities = [
        Community(
            id=i,
            members=members,
            color=COMMUNITY_COLORS[i % len(COMMUNITY_COLORS)],
            name=_cluster_name(store, members),
            density=_density(store, members),
            key_entity=_key_entity(store, members),
        )
        for i, members in enumerate(partition)
    ]
    logger.debug("Detected %d communities over %d entities", len(communities), len(store))
    return communities
