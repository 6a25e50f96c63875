from __future__ import annotations

import logging

import pytest

from warden_mapper.core.models import (
    HSU,
    BulkheadKey,
    Cell,
    DataCube,
    End,
    Expedition,
    Gatherable,
    Generator,
    ItemIdentifier,
    Key,
    PlantSample,
    Reset,
    Rundown,
    Seeded,
    Seeds,
    Start,
    Uncategorized,
    UnknownItem,
    Zone,
    ZoneFound,
    ZoneKey,
)
from warden_mapper.core.parser import LogParser, ParserState

GSM = "<color=#C84800>GAMESTATEMANAGER CHANGE STATE FROM : {old} TO: {new}</color> "
SEEDS = "Builder.Build, buildSeed: {0} hostIDSeed: {1} sessionSeed: {2}"


def _lines(*lines: str) -> str:
    return "\n".join(lines) + "\n"


def _zone(alias: int, local: int) -> Zone:
    return Zone(alias, local, "Reality", "MainLayer")


EXPECTED_SESSION = [
    Seeds(1234, 5678, 91011),
    Expedition(Rundown.R8, "C", 2),
    ZoneFound(_zone(10, 0)),
    ZoneFound(_zone(11, 1)),
    ZoneFound(_zone(12, 2)),
    Gatherable(ZoneKey(11, "Reality"), Key("KEY_WHITE_584", "Reality", 11, 54)),
    Gatherable(ZoneKey(11), Cell(2)),
    Gatherable(ZoneKey(12), HSU(3, "C")),
    Uncategorized(ItemIdentifier.CRYO, 1),
    Gatherable(ZoneKey(12), PlantSample("StorageLocker_14", 4242)),
    Gatherable(ZoneKey(10), DataCube("ResourceBox_2", 777)),
    Gatherable(None, Seeded("ResourceBox_9", 31337)),
    Start(),
    Gatherable(None, Generator("GENERATOR_412", 3, 0)),
    End(),
    Reset(),
]


def test_full_session(session_log: str) -> None:
    parser = LogParser()

    assert parser.feed(session_log) == EXPECTED_SESSION
    assert parser.state is ParserState.AWAIT_SEEDS
    assert parser.buffered == 0


def test_output_does_not_depend_on_chunking(session_log: str) -> None:
    parser = LogParser()
    events = []
    for ch in session_log:
        events.extend(parser.feed(ch))

    assert events == EXPECTED_SESSION


def test_uneven_chunks(session_log: str) -> None:
    parser = LogParser()
    events = []
    step = 97
    for i in range(0, len(session_log), step):
        events.extend(parser.feed(session_log[i : i + step]))

    assert events == EXPECTED_SESSION


def test_crlf_line_endings(session_log: str) -> None:
    parser = LogParser()

    assert parser.feed(session_log.replace("\n", "\r\n")) == EXPECTED_SESSION


def test_partial_line_is_held_back() -> None:
    parser = LogParser()

    assert parser.feed("00:00:01 - " + SEEDS.format(1, 2, 3)) == []
    assert parser.feed("\n") == [Seeds(1, 2, 3)]
    assert parser.state is ParserState.AWAIT_SESSION_SELECT


def test_empty_feed_is_noop() -> None:
    parser = LogParser()

    assert parser.feed("") == []
    assert parser.state is ParserState.AWAIT_SEEDS


@pytest.mark.parametrize(
    ("selector", "expected"),
    [
        ("Local_35_TierC_2", Expedition(Rundown.R8, "C", 2)),
        ("Local_35_TierA_2", Expedition(Rundown.R8, "A", 2)),
        ("Local_35_TierB_2", Expedition(Rundown.R8, "B", 3)),
        ("Local_35_TierC_1", Expedition(Rundown.R8, "C", 2)),
        ("Local_32_TierA_0", Expedition(Rundown.R1, "A", 1)),
        ("Local_41_TierE_2", Expedition(Rundown.R6, "E", 3)),
    ],
)
def test_expedition_index_correction(selector: str, expected: Expedition) -> None:
    parser = LogParser()
    text = _lines(SEEDS.format(1, 2, 3), f"SelectActiveExpedition : Selected! Local {selector}")

    assert parser.feed(text) == [Seeds(1, 2, 3), expected]


def test_unknown_rundown_is_modded(caplog: pytest.LogCaptureFixture) -> None:
    parser = LogParser()
    text = _lines(SEEDS.format(1, 2, 3), "SelectActiveExpedition : Local_99_TierD_0")

    with caplog.at_level(logging.INFO, logger="warden_mapper.core.parser"):
        events = parser.feed(text)

    assert events[-1] == Expedition(Rundown.MODDED, "D", 1)
    assert "Unknown rundown code 99" in caplog.text


def test_malformed_seed_is_skipped() -> None:
    parser = LogParser()
    text = _lines(
        SEEDS.format(99999999999, 2, 3),
        SEEDS.format(4, 5, 6),
    )

    assert parser.feed(text) == [Seeds(4, 5, 6)]


def test_reset_mid_session_starts_over() -> None:
    parser = LogParser()
    text = _lines(
        SEEDS.format(1, 2, 3),
        "SelectActiveExpedition : Local_32_TierA_0",
        "Next Batch: SetupFloor",
        GSM.format(old="Generating", new="NoLobby"),
        SEEDS.format(7, 8, 9),
    )

    assert parser.feed(text) == [
        Seeds(1, 2, 3),
        Expedition(Rundown.R1, "A", 1),
        Reset(),
        Seeds(7, 8, 9),
    ]
    assert parser.state is ParserState.AWAIT_SESSION_SELECT


def test_application_quit_resets() -> None:
    parser = LogParser()
    text = _lines(SEEDS.format(1, 2, 3), "Application.OnApplicationQuit")

    assert parser.feed(text) == [Seeds(1, 2, 3), Reset()]


def test_lobby_before_seeds_is_not_a_reset() -> None:
    parser = LogParser()

    assert parser.feed(_lines(GSM.format(old="Startup", new="Lobby"))) == []


def test_explicit_reset_drops_buffer() -> None:
    parser = LogParser()
    parser.feed(_lines(SEEDS.format(1, 2, 3)) + "partial")

    parser.reset()

    assert parser.state is ParserState.AWAIT_SEEDS
    assert parser.buffered == 0


def test_incomplete_setup_floor_waits() -> None:
    parser = LogParser()
    head = _lines(
        SEEDS.format(1, 2, 3),
        "SelectActiveExpedition : Local_32_TierA_0",
        "Next Batch: SetupFloor",
        "LG_Floor.CreateZone, Alias: 5 zoneAliasStart: 5 aliasOffset: Zone_0",
        "<b>Zone Created</b> (New Game Object) in Reality MainLayer",
    )

    assert len(parser.feed(head)) == 2
    assert parser.state is ParserState.AWAIT_ZONE_GENERATION

    events = parser.feed(_lines("Last Batch: SetupFloor"))

    assert events == [ZoneFound(Zone(5, 0, "Reality", "MainLayer"))]
    assert parser.state is ParserState.AWAIT_ITEM_GENERATION


def test_build_done_skips_missing_batches() -> None:
    parser = LogParser()
    text = _lines(
        SEEDS.format(1, 2, 3),
        "SelectActiveExpedition : Local_32_TierA_0",
        "Next Batch: SetupFloor",
        "BUILDER : BuildDone",
        GSM.format(old="ReadyToStartLevel", new="InLevel"),
    )

    assert parser.feed(text)[-1] == Start()
    assert parser.state is ParserState.LEVEL_FINISH


def _item_session(*distribution: str, markers: tuple[str, ...] = ()) -> str:
    return _lines(
        SEEDS.format(1, 2, 3),
        "SelectActiveExpedition : Local_32_TierA_0",
        "Next Batch: SetupFloor",
        "Last Batch: SetupFloor",
        "Next Batch: Distribution",
        *distribution,
        "Last Batch: Distribution",
        "Next Batch: FunctionMarkers",
        *markers,
        "Last Batch: FunctionMarkers",
    )


def _objective(alias: int, idx: int, code: int) -> tuple[str, str]:
    return (
        f"SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE{alias} spawnZoneIndex: {idx}",
        f"DistributeGatherRetrieveItems, creating dist to spawn itemID: {code} for chainIndex: 0",
    )


def _pickup(container: str, seed: int) -> tuple[str, str, str]:
    return (
        f"Spawning Personnel ID pickup Key: {container}",
        f"PersonnelID seed: {seed}",
        "PersonnelPickup_Core.Setup done",
    )


def test_bulkhead_key() -> None:
    parser = LogParser()
    text = _item_session(
        "CreateKeyItemDistribution, keyItem: PublicName: BULKHEAD_KEY_112 placementData: DimensionIndex: Reality LocalIndex: Zone_3 Weights",
        "TryGetExistingGenericFunctionDistributionForSession, foundDist in zone: ZONE99 ri: 7",
    )

    events = parser.feed(text)

    assert Gatherable(ZoneKey(99, "Reality"), BulkheadKey("BULKHEAD_KEY_112")) in events


def test_key_pairs_with_next_lookup_only() -> None:
    parser = LogParser()
    text = _item_session(
        "CreateKeyItemDistribution, keyItem: PublicName: KEY_RED_1 placementData: DimensionIndex: Reality LocalIndex: Zone_0 W",
        "CreateKeyItemDistribution, keyItem: PublicName: KEY_BLUE_2 placementData: DimensionIndex: Reality LocalIndex: Zone_1 W",
        "TryGetExistingGenericFunctionDistributionForSession, foundDist in zone: ZONE20 ri: 3",
    )

    keys = [e.item for e in parser.feed(text) if isinstance(e, Gatherable)]

    assert keys == [Key("KEY_BLUE_2", "Reality", 20, 3)]


def test_unknown_and_unpaired_objectives_are_uncategorized() -> None:
    parser = LogParser()
    text = _item_session(
        *_objective(5, 0, 250),
        *_objective(6, 0, 250),
        *_objective(7, 1, 128),
        *_objective(7, 2, 164),
    )

    events = parser.feed(text)

    assert [e for e in events if isinstance(e, Uncategorized)] == [
        Uncategorized(UnknownItem(250), 2),
        Uncategorized(ItemIdentifier.MWP, 1),
        Uncategorized(ItemIdentifier.ID, 1),
    ]


def test_hsu_in_function_markers() -> None:
    parser = LogParser()
    text = _item_session(
        markers=(
            *_pickup("ResourceBox_1", 5),
            "LG_PopulateFunctionMarkers HydroStatisUnit in zone: 12, Area: 3_Area C",
        ),
    )

    gathered = [e for e in parser.feed(text) if isinstance(e, Gatherable)]

    assert gathered == [
        Gatherable(None, Seeded("ResourceBox_1", 5)),
        Gatherable(ZoneKey(12), HSU(3, "C")),
    ]


def test_pickup_without_queued_objective_is_seeded() -> None:
    parser = LogParser()
    text = _item_session(markers=_pickup("ResourceBox_1", 5))

    events = parser.feed(text)

    assert Gatherable(None, Seeded("ResourceBox_1", 5)) in events


def test_pickup_without_seed_is_skipped() -> None:
    parser = LogParser()
    text = _item_session(
        *_objective(3, 0, 128),
        markers=("Spawning Personnel ID pickup Key: Locker_1", *_pickup("Locker_2", 11)),
    )

    events = parser.feed(text)
    gathered = [e for e in events if isinstance(e, Gatherable)]

    assert len(gathered) == 1
    assert gathered[0].zone == ZoneKey(3)
    assert gathered[0].item.container == "Locker_2"


def test_data_cube_codes_share_a_type() -> None:
    parser = LogParser()
    text = _item_session(
        *_objective(1, 0, 165),
        *_objective(2, 0, 168),
        markers=(*_pickup("A_1", 1), *_pickup("B_2", 2)),
    )

    items = [e.item for e in parser.feed(text) if isinstance(e, Gatherable)]

    assert items == [DataCube("A_1", 1), DataCube("B_2", 2)]


def test_generators_are_numbered_per_session() -> None:
    parser = LogParser()
    text = _item_session() + _lines(
        "BUILDER : BuildDone",
        GSM.format(old="ReadyToStartLevel", new="InLevel"),
        "LG_PowerGenerator_Graphics.OnSyncStatusChanged Collection 4 status: Off GEN_2",
        "LG_PowerGenerator_Graphics.OnSyncStatusChanged Collection 1 status: Off GEN_7",
        "LG_PowerGenerator_Graphics.OnSyncStatusChanged Collection 4 status: On GEN_2",
    )

    gens = [e.item for e in parser.feed(text) if isinstance(e, Gatherable)]

    assert gens == [Generator("GEN_2", 4, 0), Generator("GEN_7", 1, 1)]


def test_finish_without_start_is_ignored() -> None:
    parser = LogParser()
    text = _item_session() + _lines(
        "BUILDER : BuildDone",
        GSM.format(old="Generating", new="ExpeditionFail"),
    )

    events = parser.feed(text)

    assert End() not in events
    assert parser.state is ParserState.AWAIT_ELEVATOR_OR_FINISH


class _EverythingInZoneOne:
    def observe(self, objective) -> None:
        pass

    def classify(self, container: str, seed: int):
        return ZoneKey(1), Seeded(container, seed)

    def drain(self) -> list:
        return []

    def reset(self) -> None:
        pass


def test_custom_classifier() -> None:
    parser = LogParser(classifier_factory=_EverythingInZoneOne)
    text = _item_session(*_objective(3, 0, 128), markers=_pickup("Box_1", 9))

    events = parser.feed(text)

    assert Gatherable(ZoneKey(1), Seeded("Box_1", 9)) in events
    assert not [e for e in events if isinstance(e, Uncategorized)]
