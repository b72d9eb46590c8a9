"""Tests for casegraph.graph.temporal — date-window filtering."""

import datetime as dt

import pytest

from casegraph.graph.models import Connection, ConnectionType, Entity, EntityType, TimelineEvent
from casegraph.graph.store import GraphStore
from casegraph.graph.temporal import (
    filter_by_date_range,
    index_events_by_entity,
    involves,
    parse_date,
)


def _person(eid: str, name: str, **kw) -> Entity:
    return Entity(eid, name, EntityType.PERSON, **kw)


@pytest.fixture
def timeline_store():
    entities = [
        _person("early", "Early Bird"),
        _person("late", "Late Comer"),
        _person("both", "Two Dates"),
        _person("undated", "No Events"),
    ]
    connections = [
        Connection("early", "late", ConnectionType.PROFESSIONAL),
        Connection("late", "both", ConnectionType.FAMILY),
        Connection("both", "undated", ConnectionType.OTHER),
    ]
    events = {
        "early": [dt.date(2015, 3, 1)],
        "late": ["2020-07-15"],
        "both": [dt.date(2014, 1, 1), dt.datetime(2021, 2, 2, 9, 30)],
    }
    return GraphStore(entities, connections), events


class TestParseDate:
    @pytest.mark.parametrize("value,expected", [
        ("2019-06-15", dt.date(2019, 6, 15)),
        ("2019-06-15T10:00:00", dt.date(2019, 6, 15)),
        (dt.datetime(2019, 6, 15, 23, 59), dt.date(2019, 6, 15)),
        (dt.date(2019, 6, 15), dt.date(2019, 6, 15)),
        (None, None),
        ("", None),
    ])
    def test_accepted_forms(self, value, expected):
        assert parse_date(value) == expected

    def test_garbage_rejected(self):
        with pytest.raises(ValueError, match="Unparseable"):
            parse_date("sometime in spring")


class TestFilterByDateRange:
    def test_open_bounds_return_same_store(self, timeline_store):
        store, events = timeline_store
        assert filter_by_date_range(store, events) is store

    def test_window_keeps_active_and_undated(self, timeline_store):
        store, events = timeline_store
        window = filter_by_date_range(store, events, "2015-01-01", "2016-12-31")
        assert window.entity_ids() == ["early", "undated"]
        assert window.connection_count == 0

    def test_any_event_in_window_suffices(self, timeline_store):
        store, events = timeline_store
        window = filter_by_date_range(store, events, start="2020-01-01")
        assert window.entity_ids() == ["late", "both", "undated"]
        assert window.connection_count == 2

    def test_bounds_inclusive(self, timeline_store):
        store, events = timeline_store
        window = filter_by_date_range(store, events, "2015-03-01", "2015-03-01")
        assert "early" in window

    def test_open_start(self, timeline_store):
        store, events = timeline_store
        window = filter_by_date_range(store, events, end=dt.date(2014, 12, 31))
        assert window.entity_ids() == ["both", "undated"]

    def test_inverted_range_rejected(self, timeline_store):
        store, events = timeline_store
        with pytest.raises(ValueError, match="after"):
            filter_by_date_range(store, events, "2020-01-01", "2019-01-01")

    def test_input_store_unchanged(self, timeline_store):
        store, events = timeline_store
        filter_by_date_range(store, events, "2015-01-01", "2015-12-31")
        assert store.entity_count == 4
        assert store.connection_count == 3

    def test_connection_with_own_events(self, timeline_store):
        store, events = timeline_store
        connection_events = {("late", "both"): ["2010-01-01"]}
        window = filter_by_date_range(
            store, events, start="2020-01-01", events_by_connection=connection_events,
        )
        # Both endpoints survive but the link itself predates the window
        assert ("late", "both") not in {(c.source, c.target) for c in window.all_connections()}
        assert window.connection_count == 1

    def test_undated_events_count_as_undated(self, timeline_store):
        store, _ = timeline_store
        undated = TimelineEvent("ev-x", None, "Unknown date")
        window = filter_by_date_range(store, {"early": [undated]}, "2030-01-01")
        assert "early" in window


class TestEventIndex:
    def test_name_mention(self):
        event = TimelineEvent("ev1", dt.date(2017, 1, 1), individuals="Amara Vos (CEO)")
        assert involves(event, _person("vos", "Amara Vos"))

    def test_last_name_token(self):
        event = TimelineEvent("ev1", dt.date(2017, 1, 1), individuals="Pieter Okafor")
        assert involves(event, _person("ruben", "Ruben Okafor"))

    def test_explicit_ids(self):
        event = TimelineEvent("ev1", None, entity_ids=("bdc",))
        assert involves(event, Entity("bdc", "Bureau", EntityType.AGENCY))

    def test_related_event_ids(self):
        event = TimelineEvent("ev7", None)
        assert involves(event, _person("p", "Someone", related_event_ids=("ev7",)))

    def test_no_match(self):
        event = TimelineEvent("ev1", None, individuals="Jonas Hale")
        assert not involves(event, _person("p", "Amara Vos"))

    def test_index(self):
        people = [_person("vos", "Amara Vos"), _person("hale", "Jonas Hale")]
        events = [
            TimelineEvent("ev1", dt.date(2017, 1, 1), individuals="Amara Vos"),
            TimelineEvent("ev2", dt.date(2018, 1, 1), individuals="amara vos, judge"),
        ]
        index = index_events_by_entity(people, events)
        assert [ev.id for ev in index["vos"]] == ["ev1", "ev2"]
        assert "hale" not in index
