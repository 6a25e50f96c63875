"""Session aggregate: the shape consumers fold parser events into."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from .channel import Channel
from .models import (
    HSU,
    End,
    Event,
    Expedition,
    Fault,
    GatherItem,
    Gatherable,
    ItemIdentifier,
    Reset,
    Rundown,
    Seeds,
    Start,
    Uncategorized,
    UnknownItem,
    Zone,
    ZoneFound,
    ZoneKey,
)

logger = logging.getLogger(__name__)

Overflow = GatherItem | ItemIdentifier | UnknownItem


@dataclass(frozen=True, slots=True)
class Session:
    """Everything known about one game session."""

    seeds: Seeds | None = None
    rundown: Rundown | None = None
    tier: str | None = None
    expedition: int | None = None
    zones: tuple[Zone, ...] = ()
    items: Mapping[Zone, tuple[GatherItem, ...]] = field(default_factory=dict)
    uncategorized: tuple[Overflow, ...] = ()

    @property
    def title(self) -> str | None:
        """Short expedition name, e.g. 'R8C2'."""
        if self.rundown is None or self.tier is None or self.expedition is None:
            return None
        if self.rundown is Rundown.TUTORIAL:
            return self.rundown.label
        return f"{self.rundown.label}{self.tier}{self.expedition}"

    @property
    def empty(self) -> bool:
        return self == Session()

    def find_zone(self, key: ZoneKey) -> Zone | None:
        for zone in self.zones:
            if zone.alias != key.alias:
                continue
            if key.dimension is None or zone.dimension == key.dimension:
                return zone
        return None

    def items_in(self, zone: Zone) -> tuple[GatherItem, ...]:
        return self.items.get(zone, ())


def _place(session: Session, event: Gatherable) -> Session:
    zone = session.find_zone(event.zone) if event.zone is not None else None
    if zone is None:
        if event.zone is not None:
            logger.debug("No zone for %s; %s goes to uncategorized", event.zone, event.item)
        return replace(session, uncategorized=session.uncategorized + (event.item,))

    zones = session.zones
    items = dict(session.items)
    if isinstance(event.item, HSU) and event.item.area is not None and zone.area is None:
        filled = replace(zone, area=event.item.area)
        zones = tuple(filled if z is zone else z for z in zones)
        placed = items.pop(zone, ())
        items[filled] = placed
        zone = filled

    items[zone] = items.get(zone, ()) + (event.item,)
    return replace(session, zones=zones, items=items)


def apply(session: Session, event: Event) -> Session:
    """Fold one event into the session, returning a new session."""
    if isinstance(event, Reset):
        return Session()
    if isinstance(event, Seeds):
        return replace(session, seeds=event)
    if isinstance(event, Expedition):
        return replace(session, rundown=event.rundown, tier=event.tier, expedition=event.index)
    if isinstance(event, ZoneFound):
        zone = event.zone
        if session.find_zone(ZoneKey(zone.alias, zone.dimension)) is not None:
            logger.debug("Ignoring duplicate zone %s", zone)
            return session
        return replace(session, zones=session.zones + (zone,))
    if isinstance(event, Gatherable):
        return _place(session, event)
    if isinstance(event, Uncategorized):
        return replace(
            session,
            uncategorized=session.uncategorized + (event.identifier,) * event.count,
        )
    return session


def replay(events: Iterable[Event], session: Session | None = None) -> Session:
    """Fold an ordered event log, starting from a cleared session by default."""
    out = session if session is not None else Session()
    for event in events:
        out = apply(out, event)
    return out


class SessionTracker:
    """Consumer-side state: the current session plus pipeline health."""

    def __init__(self) -> None:
        self.session = Session()
        self.fault: str | None = None
        self.in_level = False
        self.events_applied = 0
        self.last_event_at: datetime | None = None

    @property
    def status(self) -> str:
        if self.in_level:
            return "in_level"
        if self.session.seeds is None:
            return "waiting"
        return "in_session"

    def apply(self, event: Event) -> None:
        if isinstance(event, Fault):
            if self.fault is None:
                logger.error("Pipeline fault: %s", event.message)
            self.fault = event.message
        elif isinstance(event, Start):
            self.in_level = True
        elif isinstance(event, (End, Reset)):
            self.in_level = False

        self.session = apply(self.session, event)
        self.events_applied += 1
        self.last_event_at = datetime.now(UTC)

    async def follow(self, events: Channel[Event]) -> None:
        """Apply events until the channel closes."""
        async for event in events:
            self.apply(event)
