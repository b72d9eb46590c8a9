"""Restrict the case graph to a date window.

An entity stays in the window when at least one of its associated events
is dated inside ``[start, end]``. Entities without any dated event are
kept: absence of temporal evidence is not treated as evidence of absence
(``UNDATED_POLICY``). The same rule applies to connections that have
their own events; otherwise a connection survives when both endpoints do.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable, Mapping, Sequence

from casegraph.graph.models import Entity, TimelineEvent
from casegraph.graph.store import GraphStore

logger = logging.getLogger(__name__)

UNDATED_POLICY = "include"

DateLike = dt.date | dt.datetime | str


def parse_date(value: DateLike | None) -> dt.date | None:
    """Coerce a date, datetime or ISO string ("2019-06-15", "2019-06-15T10:00:00")."""
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Unparseable date: {value!r}") from exc


def _event_date(event: TimelineEvent | DateLike | None) -> dt.date | None:
    if isinstance(event, TimelineEvent):
        return event.date
    return parse_date(event)


def _in_window(
    events: Sequence[TimelineEvent | DateLike] | None,
    start: dt.date | None,
    end: dt.date | None,
) -> bool:
    dates = [d for d in (_event_date(e) for e in events or ()) if d is not None]
    if not dates:
        return UNDATED_POLICY == "include"
    return any(
        (start is None or d >= start) and (end is None or d <= end)
        for d in dates
    )


def filter_by_date_range(
    store: GraphStore,
    events_by_entity: Mapping[str, Sequence[TimelineEvent | DateLike]],
    start: DateLike | None = None,
    end: DateLike | None = None,
    events_by_connection: Mapping[tuple[str, str], Sequence[TimelineEvent | DateLike]] | None = None,
) -> GraphStore:
    """Return a new store holding only what was active within the window.

    With both bounds open the input store itself is returned.
    ``events_by_connection`` is keyed by ``(source, target)`` as recorded
    on the connection.
    """
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None and end_date is None:
        return store
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError(f"Start date {start_date} is after end date {end_date}")

    kept_entities = [
        e for e in store.all_entities()
        if _in_window(events_by_entity.get(e.id), start_date, end_date)
    ]
    kept_ids = {e.id for e in kept_entities}
    connection_events = events_by_connection or {}

    kept_connections = [
        c for c in store.all_connections()
        if c.source in kept_ids
        and c.target in kept_ids
        and _in_window(connection_events.get((c.source, c.target)), start_date, end_date)
    ]

    logger.debug(
        "Date filter %s..%s kept %d/%d entities, %d/%d connections",
        start_date, end_date,
        len(kept_entities), store.entity_count,
        len(kept_connections), store.connection_count,
    )
    return GraphStore(kept_entities, kept_connections)


def involves(event: TimelineEvent, entity: Entity) -> bool:
    """Whether ``event`` involves ``entity`` (explicit link or name mention)."""
    if entity.id in event.entity_ids or event.id in entity.related_event_ids:
        return True
    individuals = event.individuals.lower()
    parts = entity.name.lower().split()
    if not individuals or not parts:
        return False
    return " ".join(parts) in individuals or parts[0] in individuals or parts[-1] in individuals


def index_events_by_entity(
    entities: Iterable[Entity],
    events: Iterable[TimelineEvent],
) -> dict[str, list[TimelineEvent]]:
    """Associate events with the entities they involve.

    An event involves an entity when it lists the entity id explicitly,
    when the entity lists the event id among its related events, or when
    the entity's full, first or last name appears in the event's
    ``individuals`` text (case-insensitive). Entities with no matching
    event are absent from the result.
    """
    entity_list = list(entities)
    index: dict[str, list[TimelineEvent]] = {}
    for event in events:
        for entity in entity_list:
            if involves(event, entity):
                index.setdefault(entity.id, []).append(event)
    return index
