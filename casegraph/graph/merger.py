"""Merge curated seed data with AI-extracted entities into one graph.

The static dataset is hand-curated and authoritative; the extraction
pipeline is noisy. The merger keeps both, side by side, with provenance
intact:

- Identity is (source, id). Names are never used to unify entities, so
  an extracted "Acme Ltd" and a curated "Acme Ltd" stay two nodes unless
  an upstream alias mapping rewrites the ids.
- Connections whose endpoints do not resolve are dropped and counted.
  Extraction regularly names people it never emits as entities, so this
  is an expected condition, not an error.
- Connections are de-duplicated by key, which makes re-merging the same
  extraction batch a no-op.

Complexity is O(V + E).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from casegraph.graph.models import Connection, Entity, Provenance

logger = logging.getLogger(__name__)


@dataclass
class MergeStats:
    """Diagnostics from a merge cycle."""

    static_entities: int = 0
    ai_entities: int = 0
    duplicate_entities: int = 0
    provenance_mismatches: int = 0
    static_connections: int = 0
    inferred_connections: int = 0
    duplicate_connections: int = 0
    dropped_connections: int = 0
    dropped_connection_keys: list[tuple[str, str, str, str]] = field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        return {
            "static_entities": self.static_entities,
            "ai_entities": self.ai_entities,
            "duplicate_entities": self.duplicate_entities,
            "provenance_mismatches": self.provenance_mismatches,
            "static_connections": self.static_connections,
            "inferred_connections": self.inferred_connections,
            "duplicate_connections": self.duplicate_connections,
            "dropped_connections": self.dropped_connections,
        }


@dataclass
class MergeResult:
    entities: list[Entity]
    connections: list[Connection]
    stats: MergeStats


def _collect_entities(
    records: Iterable[Entity],
    expected: Provenance,
    seen: dict[tuple[Provenance, str], Entity],
    out: list[Entity],
    stats: MergeStats,
) -> None:
    for entity in records:
        if entity.source is not expected:
            stats.provenance_mismatches += 1
            logger.warning(
                "Entity %s has provenance %s but was supplied as %s; skipped",
                entity.id, entity.source.value, expected.value,
            )
            continue
        identity = (entity.source, entity.id)
        if identity in seen:
            stats.duplicate_entities += 1
            continue
        seen[identity] = entity
        out.append(entity)
        if expected is Provenance.STATIC:
            stats.static_entities += 1
        else:
            stats.ai_entities += 1


def _collect_connections(
    records: Iterable[Connection],
    inferred: bool,
    known_ids: set[str],
    seen_keys: set[tuple[bool, tuple[str, str, str, str]]],
    out: list[Connection],
    stats: MergeStats,
) -> None:
    for conn in records:
        if conn.is_inferred != inferred:
            # Static connections are never inferred; AI ones always are
            conn = Connection(
                source=conn.source,
                target=conn.target,
                type=conn.type,
                relationship=conn.relationship,
                strength=conn.strength,
                is_inferred=inferred,
                confidence=conn.confidence if inferred else 1.0,
                case_id=conn.case_id,
            )

        if conn.source not in known_ids or conn.target not in known_ids:
            stats.dropped_connections += 1
            stats.dropped_connection_keys.append(conn.key)
            logger.debug(
                "Dropping connection %s -> %s (%s): unresolved endpoint",
                conn.source, conn.target, conn.relationship,
            )
            continue

        identity = (inferred, conn.key)
        if identity in seen_keys:
            stats.duplicate_connections += 1
            continue
        seen_keys.add(identity)
        out.append(conn)
        if inferred:
            stats.inferred_connections += 1
        else:
            stats.static_connections += 1


def merge(
    static_entities: Iterable[Entity],
    static_connections: Iterable[Connection],
    ai_entities: Iterable[Entity] = (),
    ai_connections: Iterable[Connection] = (),
) -> MergeResult:
    """Combine static and AI-extracted records into one entity/connection set.

    Output order is static entities then AI entities, each in input
    order; connections likewise. The function has no side effects other
    than logging.
    """
    stats = MergeStats()
    seen: dict[tuple[Provenance, str], Entity] = {}
    entities: list[Entity] = []

    _collect_entities(static_entities, Provenance.STATIC, seen, entities, stats)
    _collect_entities(ai_entities, Provenance.AI_EXTRACTED, seen, entities, stats)

    known_ids = {e.id for e in entities}
    seen_keys: set[tuple[bool, tuple[str, str, str, str]]] = set()
    connections: list[Connection] = []

    _collect_connections(static_connections, False, known_ids, seen_keys, connections, stats)
    _collect_connections(ai_connections, True, known_ids, seen_keys, connections, stats)

    if stats.dropped_connections:
        logger.info(
            "Merge dropped %d connection(s) with unresolved endpoints",
            stats.dropped_connections,
        )

    return MergeResult(entities=entities, connections=connections, stats=stats)


class EntityMerger:
    """Merge cycle with optional case scoping.

    Parameters
    ----------
    case_id:
        When set, records tagged with a different case are left out.
        Records without a case tag are shared and always kept.
    """

    def __init__(self, case_id: str | None = None) -> None:
        self._case_id = case_id

    def _in_scope(self, record: Entity | Connection) -> bool:
        return self._case_id is None or record.case_id in (None, self._case_id)

    def merge(
        self,
        static_entities: Iterable[Entity],
        static_connections: Iterable[Connection],
        ai_entities: Iterable[Entity] = (),
        ai_connections: Iterable[Connection] = (),
    ) -> MergeResult:
        result = merge(
            [e for e in static_entities if self._in_scope(e)],
            [c for c in static_connections if self._in_scope(c)],
            [e for e in ai_entities if self._in_scope(e)],
            [c for c in ai_connections if self._in_scope(c)],
        )
        logger.info(
            "Merged graph for case %s: %d entities (%d AI), %d connections "
            "(%d inferred, %d dropped)",
            self._case_id or "<all>",
            len(result.entities), result.stats.ai_entities,
            len(result.connections), result.stats.inferred_connections,
            result.stats.dropped_connections,
        )
        return result
