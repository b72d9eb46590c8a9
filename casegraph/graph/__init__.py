"""casegraph entity/relationship graph engine.

Merges the curated seed dataset with AI-extracted entities and
relationships into one graph and answers investigative queries over it:
shortest connection paths, centrality ranking, community detection and
date-window filtering.

Usage::

    from casegraph.graph import GraphEngine

    engine = GraphEngine(case_id="case-harbor")
    result = engine.build(extracted_entities, extracted_relationships)

    path = shortest_path(result.store, "amara-vos", "registry")
    ranking = rank_centrality(compute_centrality(result.store))
    communities = detect_communities(result.store)
"""

from casegraph.graph.models import Connection, Entity, TimelineEvent
from casegraph.graph.merger import merge, MergeResult, MergeStats
from casegraph.graph.store import GraphStore
from casegraph.graph.pathfinder import shortest_path, PathResult, PathNotFound, InvalidPathQuery
from casegraph.graph.centrality import compute_centrality, rank_centrality, CentralityResult
from casegraph.graph.communities import detect_communities, Community
from casegraph.graph.temporal import filter_by_date_range
from casegraph.graph.engine import GraphEngine, GraphResult

__all__ = [
    "Connection",
    "Entity",
    "TimelineEvent",
    "merge",
    "MergeResult",
    "MergeStats",
    "GraphStore",
    "shortest_path",
    "PathResult",
    "PathNotFound",
    "InvalidPathQuery",
    "compute_centrality",
    "rank_centrality",
    "CentralityResult",
    "detect_communities",
    "Community",
    "filter_by_date_range",
    "GraphEngine",
    "GraphResult",
]
