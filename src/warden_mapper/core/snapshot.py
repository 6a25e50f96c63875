"""JSON-friendly views of the session aggregate."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from .models import GatherItem, ItemIdentifier, UnknownItem, Zone, item_kind
from .session import Overflow, Session, SessionTracker


class SeedsModel(BaseModel):
    build: int
    host: int
    session: int


class ZoneModel(BaseModel):
    alias: int = Field(description="Zone number as shown in game, e.g. 49 for ZONE_49.")
    local: int = Field(description="Zone index local to its layer.")
    dimension: str
    layer: str
    area: str | None = Field(default=None, description="Area letter, when known.")
    label: str = Field(description="Display label, e.g. 'ZONE_49 MainLayer Reality'.")


class ItemModel(BaseModel):
    kind: str = Field(description="Item type name, e.g. 'Key', 'ID', 'Cell'.")
    fields: dict[str, Any] = Field(default_factory=dict)


class ZoneItemsModel(BaseModel):
    zone: ZoneModel
    items: list[ItemModel] = Field(default_factory=list)


class SessionSnapshot(BaseModel):
    status: Literal["waiting", "in_session", "in_level"]
    title: str | None = None
    rundown: str | None = None
    tier: str | None = None
    expedition: int | None = None
    seeds: SeedsModel | None = None
    zones: list[ZoneItemsModel] = Field(default_factory=list)
    uncategorized: list[ItemModel] = Field(default_factory=list)
    fault: str | None = Field(default=None, description="First pipeline fault, if any.")
    events_applied: int = 0
    last_event_at: datetime | None = None


def zone_model(zone: Zone) -> ZoneModel:
    return ZoneModel(
        alias=zone.alias,
        local=zone.local,
        dimension=zone.dimension,
        layer=zone.layer,
        area=zone.area,
        label=str(zone),
    )


def item_model(item: GatherItem | Overflow) -> ItemModel:
    if isinstance(item, ItemIdentifier):
        return ItemModel(kind=item_kind(item), fields={"code": int(item)})
    if isinstance(item, UnknownItem):
        return ItemModel(kind=item_kind(item), fields={"code": item.code})
    fields = asdict(item) if is_dataclass(item) else {}
    return ItemModel(kind=item_kind(item), fields=fields)


def zone_items_model(session: Session, zone: Zone) -> ZoneItemsModel:
    return ZoneItemsModel(
        zone=zone_model(zone),
        items=[item_model(i) for i in session.items_in(zone)],
    )


def snapshot_session(tracker: SessionTracker) -> SessionSnapshot:
    """Build a serializable snapshot of the tracker's current state."""
    session = tracker.session
    seeds = None
    if session.seeds is not None:
        seeds = SeedsModel(
            build=session.seeds.build,
            host=session.seeds.host,
            session=session.seeds.session,
        )
    return SessionSnapshot(
        status=tracker.status,
        title=session.title,
        rundown=session.rundown.label if session.rundown is not None else None,
        tier=session.tier,
        expedition=session.expedition,
        seeds=seeds,
        zones=[zone_items_model(session, z) for z in session.zones],
        uncategorized=[item_model(i) for i in session.uncategorized],
        fault=tracker.fault,
        events_applied=tracker.events_applied,
        last_event_at=tracker.last_event_at,
    )
