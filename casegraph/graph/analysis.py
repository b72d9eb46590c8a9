"""Investigative interpretation of graph analysis results.

Wraps the path finder, centrality engine and community detector with
explanations suitable for the link-analysis and ranking panels. The
numbers come straight from the underlying pure functions; this layer
only attaches names, roles and human-readable context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

from casegraph.graph.centrality import CentralityResult, compute_centrality, rank_centrality
from casegraph.graph.communities import Community, detect_communities
from casegraph.graph.models import Provenance
from casegraph.graph.pathfinder import PathNotFound, PathResult, shortest_path
from casegraph.graph.store import GraphStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class ConnectionPath:
    """Shortest path with display context."""
    result: PathResult
    path_entities: list[dict[str, str]]
    relationships: list[str]
    inferred_hops: int
    explanation: str


@dataclass
class KeyActor:
    """Entity ranked by structural importance."""
    entity_id: str
    name: str
    category: str
    degree: int
    betweenness: float
    normalized_score: float
    explanation: str


@dataclass
class EntityProfile:
    """Neighbourhood summary for a single entity."""
    entity_id: str
    name: str
    source: str
    confidence: float
    degree: int
    relationships: list[dict[str, Any]] = field(default_factory=list)
    community_id: int | None = None


class CaseGraphAnalysis:
    """Run the analysis suite over one ``GraphStore`` snapshot.

    Parameters
    ----------
    store:
        The merged case graph.
    degree_weight, betweenness_weight:
        Weights for the combined centrality score.
    community_min_size, modularity_threshold:
        Community refinement parameters.
    """

    def __init__(
        self,
        store: GraphStore,
        degree_weight: float = 0.4,
        betweenness_weight: float = 0.6,
        community_min_size: int = 2,
        modularity_threshold: float = 1e-4,
    ) -> None:
        self._store = store
        self._degree_weight = degree_weight
        self._betweenness_weight = betweenness_weight
        self._community_min_size = community_min_size
        self._modularity_threshold = modularity_threshold

    @property
    def store(self) -> GraphStore:
        return self._store

    def _node_info(self, entity_id: str) -> dict[str, str]:
        entity = self._store.get_entity(entity_id)
        if entity is None:
            return {"id": entity_id, "name": entity_id, "type": "unknown"}
        return {"id": entity_id, "name": entity.name, "type": entity.type.value}

    # -- Paths -----------------------------------------------------------------

    def find_connection(self, source_id: str, target_id: str) -> ConnectionPath | PathNotFound:
        """Shortest introduction chain between two entities, explained."""
        outcome = shortest_path(self._store, source_id, target_id)
        if isinstance(outcome, PathNotFound):
            return outcome

        entities = [self._node_info(eid) for eid in outcome.path]
        relationships = [c.relationship or c.type.value for c in outcome.connections]
        inferred = sum(1 for c in outcome.connections if c.is_inferred)

        intermediaries = [e["name"] for e in entities[1:-1]]
        explanation = (
            f"{entities[0]['name']} and {entities[-1]['name']} are "
            f"{outcome.length} hop(s) apart"
        )
        if intermediaries:
            explanation += f" via {' -> '.join(intermediaries)}"
        explanation += "."
        if inferred:
            explanation += (
                f" {inferred} of the links are AI-inferred and should be verified "
                f"against source documents."
            )

        return ConnectionPath(
            result=outcome,
            path_entities=entities,
            relationships=relationships,
            inferred_hops=inferred,
            explanation=explanation,
        )

    # -- Centrality ------------------------------------------------------------

    def centrality(self) -> list[CentralityResult]:
        return compute_centrality(
            self._store,
            degree_weight=self._degree_weight,
            betweenness_weight=self._betweenness_weight,
        )

    def find_key_actors(self, top_n: int = 10) -> list[KeyActor]:
        """Top entities by combined centrality score."""
        ranked = rank_centrality(self.centrality())[:top_n]

        results = []
        for rank, item in enumerate(ranked, start=1):
            if item.normalized_score == 0:
                break
            entity = self._store.get_entity(item.entity_id)
            explanation = (
                f"{entity.name} ranks #{rank} with {item.degree} direct connection(s) "
                f"and betweenness {item.betweenness:.2f}."
            )
            if item.betweenness > 0 and item.normalized_score >= 0.5:
                explanation += " Lies on many shortest paths between other actors."

            results.append(KeyActor(
                entity_id=item.entity_id,
                name=entity.name,
                category=entity.display_category.value,
                degree=item.degree,
                betweenness=item.betweenness,
                normalized_score=item.normalized_score,
                explanation=explanation,
            ))
        return results

    # -- Communities -----------------------------------------------------------

    def find_communities(self) -> list[Community]:
        return detect_communities(
            self._store,
            min_size=self._community_min_size,
            modularity_threshold=self._modularity_threshold,
        )

    # -- Entity profile --------------------------------------------------------

    def explain_entity(self, entity_id: str) -> EntityProfile | None:
        """Neighbourhood of one entity; ``None`` if it is not in the graph."""
        entity = self._store.get_entity(entity_id)
        if entity is None:
            return None

        relationships = [
            {
                "other_id": other,
                "other_name": self._node_info(other)["name"],
                "type": conn.type.value,
                "relationship": conn.relationship,
                "strength": conn.strength,
                "is_inferred": conn.is_inferred,
            }
            for conn, other in self._store.neighbors(entity_id)
        ]
        community_id = next(
            (c.id for c in self.find_communities() if entity_id in c.members),
            None,
        )
        return EntityProfile(
            entity_id=entity_id,
            name=entity.name,
            source=entity.source.value,
            confidence=entity.confidence,
            degree=self._store.degree(entity_id),
            relationships=relationships,
            community_id=community_id,
        )

    # -- Summary statistics ----------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """High-level graph statistics."""
        graph = self._store.to_networkx()
        components = list(nx.connected_components(graph))
        entities = self._store.all_entities()
        connections = self._store.all_connections()

        stats: dict[str, Any] = {
            "entity_count": self._store.entity_count,
            "connection_count": self._store.connection_count,
            "density": nx.density(graph) if len(graph) > 1 else 0.0,
            "connected_components": len(components),
            "largest_component_size": max((len(c) for c in components), default=0),
            "ai_entity_count": sum(1 for e in entities if e.source is Provenance.AI_EXTRACTED),
            "inferred_connection_count": sum(1 for c in connections if c.is_inferred),
        }

        type_counts: dict[str, int] = {}
        for e in entities:
            type_counts[e.type.value] = type_counts.get(e.type.value, 0) + 1
        stats["entity_type_distribution"] = type_counts

        category_counts: dict[str, int] = {}
        for e in entities:
            key = e.display_category.value
            category_counts[key] = category_counts.get(key, 0) + 1
        stats["category_distribution"] = category_counts

        connection_counts: dict[str, int] = {}
        for c in connections:
            connection_counts[c.type.value] = connection_counts.get(c.type.value, 0) + 1
        stats["connection_type_distribution"] = connection_counts

        if components:
            largest = max(components, key=len)
            if len(largest) > 1:
                stats["diameter"] = nx.diameter(graph.subgraph(largest))
            else:
                stats["diameter"] = 0

        return stats
