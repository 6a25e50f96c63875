"""Core data models for session reconstruction.

Values tied to game codes (rundown ids, item type bytes) are a contract against
one fixed game build; unknown codes always resolve to a fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path


class Rundown(IntEnum):
    """Rundown selected for the session, keyed by the build's numeric code."""

    MODDED = 0
    R7 = 31
    R1 = 32
    R2 = 33
    R3 = 34
    R8 = 35
    R4 = 37
    R5 = 38
    TUTORIAL = 39
    R6 = 41

    @classmethod
    def _missing_(cls, value: object) -> Rundown:
        return cls.MODDED

    @property
    def label(self) -> str:
        if self is Rundown.MODDED:
            return "Modded"
        if self is Rundown.TUTORIAL:
            return "Tutorial"
        return self.name


# Tiers where the R8 build already reports the user-facing expedition number.
_R8_UNSHIFTED_TIERS = frozenset({"A", "C", "D", "E"})


def correct_expedition_index(rundown: Rundown, tier: str, raw_index: int) -> int:
    """Convert the log's zero-based expedition index to the displayed number."""
    if rundown is Rundown.R8 and tier in _R8_UNSHIFTED_TIERS and raw_index == 2:
        return raw_index
    return raw_index + 1


@dataclass(frozen=True, slots=True)
class Zone:
    """One generated sub-area of the level."""

    alias: int
    local: int
    dimension: str
    layer: str
    area: str | None = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"ZONE_{self.alias} {self.layer} {self.dimension}"


@dataclass(frozen=True, slots=True)
class ZoneKey:
    """Lookup key for a zone; dimension is None when the log does not carry it."""

    alias: int
    dimension: str | None = None


class ItemIdentifier(IntEnum):
    """Item type byte used by the objective distribution messages."""

    ID = 128
    PD = 129
    CELL = 131
    FOG_TURBINE = 133
    NEONATE = 137
    CRYO = 148
    GLP1 = 149
    OSIP = 150
    DATASPHERE = 151
    PLANT_SAMPLE = 153
    HISEC = 154
    MWP = 164
    DATA_CUBE_R8 = 165
    DATA_CUBE = 168
    GLP2 = 169
    CARGO = 176


@dataclass(frozen=True, slots=True)
class UnknownItem:
    """Item type byte with no mapping in this build."""

    code: int


def classify_item(code: int) -> ItemIdentifier | UnknownItem:
    """Map a raw item code, folding both data cube codes into one."""
    try:
        identifier = ItemIdentifier(code)
    except ValueError:
        return UnknownItem(code)
    if identifier is ItemIdentifier.DATA_CUBE_R8:
        return ItemIdentifier.DATA_CUBE
    return identifier


# --- Gatherable items -------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Key:
    name: str
    dimension: str
    zone_alias: int
    correlation_id: int


@dataclass(frozen=True, slots=True)
class BulkheadKey:
    name: str


@dataclass(frozen=True, slots=True)
class HSU:
    area_id: int
    area: str | None = None


@dataclass(frozen=True, slots=True)
class Generator:
    name: str
    item_idx: int
    idx: int


@dataclass(frozen=True, slots=True)
class SeededItem:
    """Container-carried item identified by its spawn seed."""

    container: str
    seed: int


@dataclass(frozen=True, slots=True)
class ID(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class PD(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class GLP1(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class OSIP(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class PlantSample(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class DataCube(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class GLP2(SeededItem):
    pass


@dataclass(frozen=True, slots=True)
class Seeded(SeededItem):
    """Seeded container whose item type could not be resolved."""


@dataclass(frozen=True, slots=True)
class NamedItem:
    name: str


@dataclass(frozen=True, slots=True)
class FogTurbine(NamedItem):
    pass


@dataclass(frozen=True, slots=True)
class Neonate(NamedItem):
    pass


@dataclass(frozen=True, slots=True)
class Cryo(NamedItem):
    pass


@dataclass(frozen=True, slots=True)
class HiSec(NamedItem):
    pass


@dataclass(frozen=True, slots=True)
class Cargo(NamedItem):
    pass


@dataclass(frozen=True, slots=True)
class Cell:
    spawn_zone_idx: int


@dataclass(frozen=True, slots=True)
class Datasphere:
    spawn_zone_idx: int


GatherItem = (
    Key
    | BulkheadKey
    | HSU
    | Generator
    | ID
    | PD
    | GLP1
    | OSIP
    | PlantSample
    | DataCube
    | GLP2
    | Seeded
    | FogTurbine
    | Neonate
    | Cryo
    | HiSec
    | Cargo
    | Cell
    | Datasphere
)

_SEEDED_TYPES: dict[ItemIdentifier, type[SeededItem]] = {
    ItemIdentifier.ID: ID,
    ItemIdentifier.PD: PD,
    ItemIdentifier.GLP1: GLP1,
    ItemIdentifier.OSIP: OSIP,
    ItemIdentifier.PLANT_SAMPLE: PlantSample,
    ItemIdentifier.DATA_CUBE: DataCube,
    ItemIdentifier.GLP2: GLP2,
}

SEEDED_IDENTIFIERS = frozenset(_SEEDED_TYPES)

_INDEXED_TYPES: dict[ItemIdentifier, type[Cell] | type[Datasphere]] = {
    ItemIdentifier.CELL: Cell,
    ItemIdentifier.DATASPHERE: Datasphere,
}

INDEXED_IDENTIFIERS = frozenset(_INDEXED_TYPES)


def seeded_item(
    identifier: ItemIdentifier | UnknownItem, container: str, seed: int
) -> SeededItem:
    """Build the typed seeded item, or the untyped fallback."""
    cls = _SEEDED_TYPES.get(identifier) if isinstance(identifier, ItemIdentifier) else None
    if cls is None:
        return Seeded(container, seed)
    return cls(container, seed)


def indexed_item(identifier: ItemIdentifier, spawn_zone_idx: int) -> Cell | Datasphere:
    return _INDEXED_TYPES[identifier](spawn_zone_idx)


def item_kind(item: GatherItem | ItemIdentifier | UnknownItem) -> str:
    if isinstance(item, ItemIdentifier):
        return item.name
    if isinstance(item, UnknownItem):
        return "Unknown"
    return type(item).__name__


# --- Events -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Seeds:
    build: int
    host: int
    session: int


@dataclass(frozen=True, slots=True)
class Expedition:
    rundown: Rundown
    tier: str
    index: int


@dataclass(frozen=True, slots=True)
class ZoneFound:
    zone: Zone


@dataclass(frozen=True, slots=True)
class Gatherable:
    zone: ZoneKey | None
    item: GatherItem


@dataclass(frozen=True, slots=True)
class Uncategorized:
    identifier: ItemIdentifier | UnknownItem
    count: int


@dataclass(frozen=True, slots=True)
class Reset:
    pass


@dataclass(frozen=True, slots=True)
class Start:
    pass


@dataclass(frozen=True, slots=True)
class Split:
    pass


@dataclass(frozen=True, slots=True)
class End:
    pass


@dataclass(frozen=True, slots=True)
class Fault:
    """Fatal pipeline error, reported once to the consumer."""

    message: str


Event = (
    Seeds
    | Expedition
    | ZoneFound
    | Gatherable
    | Uncategorized
    | Reset
    | Start
    | Split
    | End
    | Fault
)


# --- Tailer protocol --------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OpenLog:
    path: Path


@dataclass(frozen=True, slots=True)
class StopTail:
    pass


TailCommand = OpenLog | StopTail


@dataclass(frozen=True, slots=True)
class Content:
    text: str


@dataclass(frozen=True, slots=True)
class NewFile:
    path: Path


@dataclass(frozen=True, slots=True)
class Stopped:
    pass


@dataclass(frozen=True, slots=True)
class TailFault:
    message: str


TailMessage = Content | NewFile | Stopped | TailFault
