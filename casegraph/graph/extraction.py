"""Adapter for AI document-extraction output.

The extraction pipeline runs upstream and hands over loosely-typed
records: entities with an extraction-side type label, optional role and
description, the events they were mentioned in, and optionally explicit
relationships with a confidence. This module validates those records and
converts them into graph ``Entity`` / ``Connection`` values.

Confidence and strength are consumed as given (only clamped); no
confidence formula is assumed.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import BaseModel, Field, ValidationError, field_validator

from casegraph.graph.models import (
    AI_ID_PREFIX,
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
    Provenance,
    TimelineEvent,
    clamp_unit,
)
from casegraph.graph.temporal import involves, parse_date

logger = logging.getLogger(__name__)

# Extraction-side type labels -> graph entity types
EXTRACTED_TYPE_MAP: dict[str, EntityType] = {
    "Person": EntityType.PERSON,
    "Organization": EntityType.ORGANIZATION,
    "Official Body": EntityType.AGENCY,
    "Legal Entity": EntityType.LEGAL_ENTITY,
    "Evidence": EntityType.EVIDENCE_ARTIFACT,
}

# Keyword groups checked in order; first match wins
CATEGORY_KEYWORDS: list[tuple[EntityCategory, tuple[str, ...]]] = [
    (EntityCategory.PROTAGONIST, ("victim", "acquit", "target")),
    (EntityCategory.ANTAGONIST, ("accus", "compla", "corrupt", "illeg")),
    (EntityCategory.OFFICIAL, ("judge", "court", "fir", "agency")),
]


class ExtractedEntityRecord(BaseModel):
    """Entity as emitted by the extraction pipeline."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    entity_type: str = "Person"
    role: str | None = None
    description: str | None = None
    category: str | None = None
    confidence: float = 0.5
    related_event_ids: list[str] = Field(default_factory=list)
    source_upload_id: str | None = None
    case_id: str | None = None

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float:
        if v is None:
            return 0.5
        return clamp_unit(v)

    @field_validator("related_event_ids", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> list[str]:
        return v or []


class ExtractedRelationshipRecord(BaseModel):
    """Relationship asserted by the extraction pipeline.

    Endpoints may be raw extraction ids (namespaced on conversion) or
    ids of static entities.
    """

    source: str = Field(min_length=1)
    target: str = Field(min_length=1)
    type: str = "other"
    relationship: str = ""
    strength: float = 0.5
    confidence: float = 0.5
    case_id: str | None = None

    @field_validator("strength", "confidence", mode="before")
    @classmethod
    def _clamp(cls, v: Any) -> float:
        if v is None:
            return 0.5
        return clamp_unit(v)


class ExtractedEventRecord(BaseModel):
    """Dated event as emitted by the extraction pipeline."""

    id: str = Field(min_length=1)
    date: dt.date | None = None
    category: str = ""
    description: str = ""
    individuals: str = ""
    case_id: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _lenient_date(cls, v: Any) -> dt.date | None:
        # "unknown", "" and similar placeholders mean undated
        try:
            return parse_date(v)
        except ValueError:
            return None

    def to_event(self) -> TimelineEvent:
        return TimelineEvent(
            id=self.id,
            date=self.date,
            description=self.description,
            category=self.category,
            individuals=self.individuals,
            case_id=self.case_id,
        )


@dataclass
class ExtractionBatch:
    """Converted output of one extraction run."""

    entities: list[Entity] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)
    invalid_records: int = 0


def _record_label(raw: Any) -> Any:
    return raw.get("id") if isinstance(raw, dict) else raw


def namespaced_id(raw_id: str) -> str:
    """Prefix an extraction id so it can never collide with a static id."""
    if raw_id.startswith(AI_ID_PREFIX):
        return raw_id
    return f"{AI_ID_PREFIX}{raw_id}"


def map_entity_type(label: str) -> EntityType:
    """Map an extraction type label; unknown labels fall back to person."""
    if label in EXTRACTED_TYPE_MAP:
        return EXTRACTED_TYPE_MAP[label]
    try:
        return EntityType.parse(label)
    except ValueError:
        logger.debug("Unknown extracted entity type %r, defaulting to person", label)
        return EntityType.PERSON


def infer_category(role: str | None, description: str | None) -> EntityCategory:
    text = f"{role or ''} {description or ''}".lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in text for k in keywords):
            return category
    return EntityCategory.NEUTRAL


def to_entity(record: ExtractedEntityRecord) -> Entity:
    category = (
        EntityCategory.parse(record.category)
        if record.category
        else infer_category(record.role, record.description)
    )
    return Entity(
        id=namespaced_id(record.id),
        name=record.name.strip(),
        type=map_entity_type(record.entity_type),
        source=Provenance.AI_EXTRACTED,
        category=category,
        role=record.role,
        description=record.description,
        confidence=record.confidence,
        case_id=record.case_id,
        related_event_ids=tuple(record.related_event_ids),
        source_upload_id=record.source_upload_id,
    )


def to_connection(
    record: ExtractedRelationshipRecord,
    extracted_ids: set[str],
) -> Connection:
    """Convert a relationship, namespacing endpoints that refer to extracted entities."""

    def resolve(endpoint: str) -> str:
        if endpoint in extracted_ids:
            return namespaced_id(endpoint)
        return endpoint

    try:
        conn_type = ConnectionType.parse(record.type)
    except ValueError:
        conn_type = ConnectionType.OTHER

    return Connection(
        source=resolve(record.source),
        target=resolve(record.target),
        type=conn_type,
        relationship=record.relationship,
        strength=record.strength,
        is_inferred=True,
        confidence=record.confidence,
        case_id=record.case_id,
    )


def parse_extraction(
    entity_records: Iterable[dict[str, Any]],
    relationship_records: Iterable[dict[str, Any]] = (),
) -> ExtractionBatch:
    """Validate and convert raw extraction records.

    Records that fail validation are skipped and counted; one bad record
    from a noisy extraction run must not discard the whole batch.
    """
    batch = ExtractionBatch()
    raw_ids: set[str] = set()

    for raw in entity_records:
        try:
            record = ExtractedEntityRecord.model_validate(raw)
            entity = to_entity(record)
        except (ValidationError, ValueError) as exc:
            batch.invalid_records += 1
            logger.warning("Skipping invalid extracted entity %r: %s", _record_label(raw), exc)
            continue
        raw_ids.add(record.id)
        batch.entities.append(entity)

    for raw in relationship_records:
        try:
            record = ExtractedRelationshipRecord.model_validate(raw)
        except ValidationError as exc:
            batch.invalid_records += 1
            logger.warning("Skipping invalid extracted relationship: %s", exc)
            continue
        batch.connections.append(to_connection(record, raw_ids))

    logger.info(
        "Parsed extraction batch: %d entities, %d relationships (%d invalid records)",
        len(batch.entities), len(batch.connections), batch.invalid_records,
    )
    return batch


def infer_co_mention_connections(
    entities: Iterable[Entity],
    events: Iterable[TimelineEvent],
    strength: float = 0.4,
    existing: Iterable[Connection] = (),
) -> list[Connection]:
    """Link entities that are mentioned together in the same event.

    An entity counts as mentioned when the event lists it explicitly in
    ``entity_ids``, when the entity lists the event in
    ``related_event_ids``, or when its full, first or last name appears in
    the event's ``individuals`` text. Each unordered pair is linked once,
    by the first event that mentions both. Pairs already joined by one of
    the ``existing`` connections, in either direction, are not linked again.
    """
    entity_list = list(entities)
    seen_pairs: set[frozenset[str]] = {frozenset((c.source, c.target)) for c in existing}
    connections: list[Connection] = []

    for event in events:
        mentioned = [e.id for e in entity_list if involves(event, e)]

        for i, source in enumerate(mentioned):
            for target in mentioned[i + 1:]:
                pair = frozenset((source, target))
                if pair in seen_pairs:
                    continue
                seen_pairs.add(pair)
                label = event.description[:30]
                connections.append(Connection(
                    source=source,
                    target=target,
                    type=ConnectionType.LEGAL,
                    relationship=f"Mentioned in: {label}" if label else "Co-mentioned",
                    strength=strength,
                    is_inferred=True,
                    confidence=strength,
                    case_id=event.case_id,
                ))

    logger.debug("Inferred %d co-mention connections", len(connections))
    return connections


def parse_events(records: Iterable[dict[str, Any]]) -> list[TimelineEvent]:
    """Validate extracted events; invalid records are skipped with a warning."""
    events: list[TimelineEvent] = []
    for raw in records:
        try:
            events.append(ExtractedEventRecord.model_validate(raw).to_event())
        except ValidationError as exc:
            logger.warning("Skipping invalid extracted event %r: %s", _record_label(raw), exc)
    return events
