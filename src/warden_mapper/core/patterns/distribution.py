"""Item placement rules from the Distribution and FunctionMarkers batches."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .base import CaptureError, RegexRule, to_u32


@dataclass(frozen=True, slots=True)
class KeyPlacement:
    name: str
    dimension: str
    local: int
    zone_alias: int
    correlation_id: int


@dataclass(frozen=True, slots=True)
class KeyItemDistribution(RegexRule):
    """'CreateKeyItemDistribution ... PublicName: KEY ... DimensionIndex: D LocalIndex: Zone_L'
    paired with the next 'TryGetExisting...' line (zone alias and ri).

    Lines in between are skipped, but never another key line.
    """

    _re = re.compile(
        r"^.*?PublicName:\s(?P<key>\w+).*?"
        r"DimensionIndex:\s(?P<dim>\w+)\sLocalIndex:\s\w+?_(?P<local>\d+).*\n"
        r"(?:(?!.*?PublicName:).*\n)*?"
        r".*?TryGetExisting.*?ZONE(?P<alias>\d+).*?\bri:\s(?P<ri>\d+).*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> KeyPlacement:
        return KeyPlacement(
            name=m.group("key"),
            dimension=m.group("dim"),
            local=to_u32(m.group("local"), "key local index"),
            zone_alias=to_u32(m.group("alias"), "key zone alias"),
            correlation_id=to_u32(m.group("ri"), "key ri"),
        )


@dataclass(frozen=True, slots=True)
class ObjectivePlacement:
    zone_alias: int
    spawn_index: int
    item_code: int


@dataclass(frozen=True, slots=True)
class ObjectiveDistribution(RegexRule):
    """'SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE<alias> ...
    spawnZoneIndex: I' followed by '... itemID: <code>'.
    """

    _re = re.compile(
        r"^.*?zone\sZONE(?P<alias>\d+).*?Index:\s(?P<idx>\d+).*\n"
        r".*?itemID:\s(?P<item>\d+).*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> ObjectivePlacement:
        return ObjectivePlacement(
            zone_alias=to_u32(m.group("alias"), "objective zone alias"),
            spawn_index=to_u32(m.group("idx"), "objective spawn index"),
            item_code=to_u32(m.group("item"), "itemID"),
        )


@dataclass(frozen=True, slots=True)
class HsuPlacement:
    zone_alias: int
    area_id: int
    area: str


@dataclass(frozen=True, slots=True)
class HsuDistribution(RegexRule):
    """HydroStatisUnit line: '... zone: <alias>, Area: <id>_Area <letter>'."""

    _re = re.compile(
        r"^(?=.*HydroStatisUnit).*?zone:\s(?P<alias>\d+),\s"
        r"Area:\s(?P<id>\d+)_\w+?\s(?P<area>\w+).*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> HsuPlacement:
        return HsuPlacement(
            zone_alias=to_u32(m.group("alias"), "HSU zone alias"),
            area_id=to_u32(m.group("id"), "HSU area id"),
            area=m.group("area")[0].upper(),
        )


@dataclass(frozen=True, slots=True)
class PickupSpawn:
    container: str
    seed: int


@dataclass(frozen=True, slots=True)
class GenericSmallPickup(RegexRule):
    """'Spawning Personnel ... Key: <container>', then a 'seed: N' line and a
    'PersonnelPickup_Core.' line.
    """

    _re = re.compile(
        r"^.*?Spawning\sPersonnel.*?Key:\s(?P<container>\w+).*"
        r"(?:\n.*?seed:\s(?P<seed>\d+).*\n.*?PersonnelPickup_Core\..*)?$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> PickupSpawn:
        if m.group("seed") is None:
            raise CaptureError(f"pickup {m.group('container')} has no seed line")
        return PickupSpawn(
            container=m.group("container"),
            seed=to_u32(m.group("seed"), "pickup seed"),
        )


@dataclass(frozen=True, slots=True)
class GeneratorSighting:
    collection: int
    name: str


@dataclass(frozen=True, slots=True)
class GeneratorStatus(RegexRule):
    """'LG_PowerGenerator_Graphics.OnSyncStatusChanged ... Collection <id> ... <NAME_N>'."""

    _re = re.compile(
        r"^.*?LG_PowerGenerator_Graphics\.OnSyncStatusChanged.*?"
        r"Collection\s(?P<id>\d+)\s.*?\s(?P<name>[A-Za-z]\w*?_\d+)\b.*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> GeneratorSighting:
        return GeneratorSighting(
            collection=to_u32(m.group("id"), "generator collection"),
            name=m.group("name"),
        )
