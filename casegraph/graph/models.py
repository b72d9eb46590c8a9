"""Core data model for the case entity graph.

Entities are the nodes of an investigation (people, organisations,
agencies, legal entities, evidence artifacts); connections are the typed,
weighted edges between them. Both carry provenance: either the curated
static dataset or the AI document-extraction pipeline.

Categorical fields use closed enums backed by exhaustive lookup tables,
so an unrecognised value fails at parse time instead of silently falling
through to a default colour.
"""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, field

# Every AI-extracted entity id starts with this prefix. Static ids never do.
AI_ID_PREFIX = "ai-"


def clamp_unit(value: float) -> float:
    """Clamp a score into [0, 1]."""
    return min(1.0, max(0.0, float(value)))


class _ParseableEnum(str, enum.Enum):
    """String enum with a strict, case-insensitive parser."""

    @classmethod
    def parse(cls, value: str | _ParseableEnum) -> _ParseableEnum:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-").replace(" ", "-")
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown {cls.__name__} value: {value!r}")


class EntityType(_ParseableEnum):
    PERSON = "person"
    ORGANIZATION = "organization"
    AGENCY = "agency"
    LEGAL_ENTITY = "legal-entity"
    EVIDENCE_ARTIFACT = "evidence-artifact"


class EntityCategory(_ParseableEnum):
    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    OFFICIAL = "official"
    NEUTRAL = "neutral"


class ConnectionType(_ParseableEnum):
    FAMILY = "family"
    PROFESSIONAL = "professional"
    ADVERSARIAL = "adversarial"
    LEGAL = "legal"
    OFFICIAL = "official"
    OTHER = "other"


class Provenance(_ParseableEnum):
    STATIC = "static"
    AI_EXTRACTED = "ai-extracted"


class RiskLevel(_ParseableEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ---------------------------------------------------------------------------
# Display tables: exhaustive over their enums
# ---------------------------------------------------------------------------

ENTITY_TYPE_COLORS: dict[EntityType, str] = {
    EntityType.PERSON: "#4A90D9",
    EntityType.ORGANIZATION: "#E67E22",
    EntityType.AGENCY: "#9B59B6",
    EntityType.LEGAL_ENTITY: "#E74C3C",
    EntityType.EVIDENCE_ARTIFACT: "#95A5A6",
}

CATEGORY_COLORS: dict[EntityCategory, str] = {
    EntityCategory.PROTAGONIST: "#2ECC71",
    EntityCategory.ANTAGONIST: "#E74C3C",
    EntityCategory.OFFICIAL: "#3498DB",
    EntityCategory.NEUTRAL: "#95A5A6",
}

CATEGORY_RISK_LEVELS: dict[EntityCategory, RiskLevel] = {
    EntityCategory.ANTAGONIST: RiskLevel.CRITICAL,
    EntityCategory.OFFICIAL: RiskLevel.MEDIUM,
    EntityCategory.PROTAGONIST: RiskLevel.LOW,
    EntityCategory.NEUTRAL: RiskLevel.LOW,
}

CONNECTION_TYPE_COLORS: dict[ConnectionType, str] = {
    ConnectionType.FAMILY: "#F39C12",
    ConnectionType.PROFESSIONAL: "#3498DB",
    ConnectionType.ADVERSARIAL: "#E74C3C",
    ConnectionType.LEGAL: "#9B59B6",
    ConnectionType.OFFICIAL: "#1ABC9C",
    ConnectionType.OTHER: "#BDC3C7",
}


def _check_exhaustive(table: dict, enum_cls: type[enum.Enum]) -> None:
    missing = set(enum_cls) - set(table)
    if missing:
        raise RuntimeError(
            f"Mapping for {enum_cls.__name__} is missing: "
            + ", ".join(sorted(m.value for m in missing))
        )


_check_exhaustive(ENTITY_TYPE_COLORS, EntityType)
_check_exhaustive(CATEGORY_COLORS, EntityCategory)
_check_exhaustive(CATEGORY_RISK_LEVELS, EntityCategory)
_check_exhaustive(CONNECTION_TYPE_COLORS, ConnectionType)


# ---------------------------------------------------------------------------
# Entities and connections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Entity:
    """A node in the investigative graph.

    ``category`` is optional; ``display_category`` resolves an unset
    category to ``NEUTRAL`` for colouring and risk mapping.
    """

    id: str
    name: str
    type: EntityType
    source: Provenance = Provenance.STATIC
    category: EntityCategory | None = None
    role: str | None = None
    description: str | None = None
    confidence: float = 1.0
    case_id: str | None = None
    related_event_ids: tuple[str, ...] = ()
    source_upload_id: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Entity id must be non-empty")
        object.__setattr__(self, "type", EntityType.parse(self.type))
        object.__setattr__(self, "source", Provenance.parse(self.source))
        if self.category is not None:
            object.__setattr__(self, "category", EntityCategory.parse(self.category))
        object.__setattr__(self, "related_event_ids", tuple(self.related_event_ids))

        if self.source is Provenance.STATIC:
            if self.id.startswith(AI_ID_PREFIX):
                raise ValueError(
                    f"Static entity id {self.id!r} uses the reserved {AI_ID_PREFIX!r} prefix"
                )
            object.__setattr__(self, "confidence", 1.0)
        else:
            if not self.id.startswith(AI_ID_PREFIX):
                raise ValueError(
                    f"AI-extracted entity id {self.id!r} must start with {AI_ID_PREFIX!r}"
                )
            object.__setattr__(self, "confidence", clamp_unit(self.confidence))

    @property
    def is_ai_extracted(self) -> bool:
        return self.source is Provenance.AI_EXTRACTED

    @property
    def display_category(self) -> EntityCategory:
        return self.category if self.category is not None else EntityCategory.NEUTRAL

    @property
    def risk_level(self) -> RiskLevel:
        return CATEGORY_RISK_LEVELS[self.display_category]

    @property
    def color(self) -> str:
        return CATEGORY_COLORS[self.display_category]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "category": self.category.value if self.category else None,
            "display_category": self.display_category.value,
            "role": self.role,
            "description": self.description,
            "source": self.source.value,
            "confidence": self.confidence,
            "case_id": self.case_id,
        }


@dataclass(frozen=True)
class Connection:
    """An edge between two entities.

    ``source``/``target`` keep the direction the relationship was recorded
    in; analysis treats every connection as undirected.
    """

    source: str
    target: str
    type: ConnectionType
    relationship: str = ""
    strength: float = 0.5
    is_inferred: bool = False
    confidence: float = 1.0
    case_id: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", ConnectionType.parse(self.type))
        object.__setattr__(self, "strength", clamp_unit(self.strength))
        object.__setattr__(self, "confidence", clamp_unit(self.confidence))

    @property
    def key(self) -> tuple[str, str, str, str]:
        """Identity used for de-duplication."""
        return (self.source, self.target, self.type.value, self.relationship)

    @property
    def color(self) -> str:
        return CONNECTION_TYPE_COLORS[self.type]

    def other_end(self, entity_id: str) -> str:
        if entity_id == self.source:
            return self.target
        if entity_id == self.target:
            return self.source
        raise ValueError(f"{entity_id!r} is not an endpoint of {self.key}")

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
            "relationship": self.relationship,
            "strength": self.strength,
            "is_inferred": self.is_inferred,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class TimelineEvent:
    """A dated case event used for temporal filtering."""

    id: str
    date: dt.date | None
    description: str = ""
    category: str = ""
    individuals: str = ""
    case_id: str | None = None
    entity_ids: tuple[str, ...] = field(default_factory=tuple)
