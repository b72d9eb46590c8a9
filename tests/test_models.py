"""Tests for casegraph.graph.models — entity/connection invariants and lookup tables."""

import pytest

from casegraph.graph.models import (
    AI_ID_PREFIX,
    CATEGORY_COLORS,
    CATEGORY_RISK_LEVELS,
    CONNECTION_TYPE_COLORS,
    ENTITY_TYPE_COLORS,
    Connection,
    ConnectionType,
    Entity,
    EntityCategory,
    EntityType,
    Provenance,
    RiskLevel,
    clamp_unit,
)


class TestEntity:
    def test_static_entity_defaults(self):
        e = Entity("fia", "Bureau", EntityType.AGENCY)
        assert e.source is Provenance.STATIC
        assert e.confidence == 1.0
        assert e.category is None
        assert not e.is_ai_extracted

    def test_static_confidence_is_always_one(self):
        e = Entity("fia", "Bureau", EntityType.AGENCY, confidence=0.3)
        assert e.confidence == 1.0

    def test_ai_entity_requires_prefix(self):
        with pytest.raises(ValueError, match="must start with"):
            Entity("x1", "Someone", EntityType.PERSON, source=Provenance.AI_EXTRACTED)

    def test_static_entity_cannot_use_ai_prefix(self):
        with pytest.raises(ValueError, match="reserved"):
            Entity(f"{AI_ID_PREFIX}x1", "Someone", EntityType.PERSON)

    def test_empty_id_rejected(self):
        with pytest.raises(ValueError):
            Entity("", "Nobody", EntityType.PERSON)

    def test_ai_confidence_clamped(self):
        high = Entity("ai-1", "A", EntityType.PERSON, source=Provenance.AI_EXTRACTED, confidence=1.7)
        low = Entity("ai-2", "B", EntityType.PERSON, source=Provenance.AI_EXTRACTED, confidence=-0.2)
        kept = Entity("ai-3", "C", EntityType.PERSON, source=Provenance.AI_EXTRACTED, confidence=0.42)
        assert high.confidence == 1.0
        assert low.confidence == 0.0
        assert kept.confidence == 0.42

    def test_string_values_are_parsed(self):
        e = Entity("x", "X", "legal-entity", source="static", category="antagonist")
        assert e.type is EntityType.LEGAL_ENTITY
        assert e.category is EntityCategory.ANTAGONIST

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError, match="EntityType"):
            Entity("x", "X", "spaceship")

    def test_unset_category_displays_as_neutral(self):
        e = Entity("x", "X", EntityType.PERSON)
        assert e.display_category is EntityCategory.NEUTRAL
        assert e.color == CATEGORY_COLORS[EntityCategory.NEUTRAL]
        assert e.risk_level is RiskLevel.LOW

    def test_antagonist_is_critical_risk(self):
        e = Entity("x", "X", EntityType.PERSON, category=EntityCategory.ANTAGONIST)
        assert e.risk_level is RiskLevel.CRITICAL

    def test_to_dict(self):
        e = Entity("x", "X", EntityType.PERSON, role="Judge")
        data = e.to_dict()
        assert data["type"] == "person"
        assert data["category"] is None
        assert data["display_category"] == "neutral"
        assert data["source"] == "static"


class TestConnection:
    def test_strength_and_confidence_clamped(self):
        c = Connection("a", "b", ConnectionType.FAMILY, strength=4.0, confidence=-1)
        assert c.strength == 1.0
        assert c.confidence == 0.0

    def test_key_identity(self):
        c1 = Connection("a", "b", "legal", "Filed complaint", 0.3)
        c2 = Connection("a", "b", "legal", "Filed complaint", 0.9)
        assert c1.key == c2.key
        assert c1.key == ("a", "b", "legal", "Filed complaint")

    def test_other_end(self):
        c = Connection("a", "b", ConnectionType.OTHER)
        assert c.other_end("a") == "b"
        assert c.other_end("b") == "a"
        with pytest.raises(ValueError):
            c.other_end("z")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            Connection("a", "b", "romantic")


class TestLookupTables:
    @pytest.mark.parametrize("table,enum_cls", [
        (ENTITY_TYPE_COLORS, EntityType),
        (CATEGORY_COLORS, EntityCategory),
        (CATEGORY_RISK_LEVELS, EntityCategory),
        (CONNECTION_TYPE_COLORS, ConnectionType),
    ])
    def test_tables_are_exhaustive(self, table, enum_cls):
        assert set(table) == set(enum_cls)

    def test_parse_is_case_insensitive(self):
        assert EntityType.parse("Legal Entity") is EntityType.LEGAL_ENTITY
        assert ConnectionType.parse("FAMILY") is ConnectionType.FAMILY
        assert Provenance.parse("ai_extracted") is Provenance.AI_EXTRACTED


def test_clamp_unit():
    assert clamp_unit(-3) == 0.0
    assert clamp_unit(0.25) == 0.25
    assert clamp_unit(9) == 1.0
