from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

GSM = "<color=#C84800>GAMESTATEMANAGER CHANGE STATE FROM : {old} TO: {new}</color> "

SESSION_LINES = [
    "00:00:01.000 - " + GSM.format(old="Startup", new="Lobby"),
    "00:00:02.000 - <color=purple>Builder.Build, buildSeed: 1234 hostIDSeed: 5678 sessionSeed: 91011</color>",
    "00:00:02.050 - " + GSM.format(old="Lobby", new="Generating"),
    "00:00:02.100 - SelectActiveExpedition : Selected! Local Local_35_TierC_2 rundownKey: Local_35",
    "00:00:03.000 - <color=green>Next Batch: SetupFloor</color>",
    "00:00:03.100 - <color=#C84800>LG_Floor.CreateZone, Alias: 10 with BuildFromZoneAlias10 zoneAliasStart: 10 aliasOffset: Zone_0</color>",
    "00:00:03.110 - <b>Zone Created</b> (New Game Object) in Reality MainLayer with seed 1",
    "00:00:03.200 - <color=#C84800>LG_Floor.CreateZone, Alias: 11 with BuildFromZoneAlias10 zoneAliasStart: 10 aliasOffset: Zone_1</color>",
    "00:00:03.210 - <b>Zone Created</b> (New Game Object) in Reality MainLayer with seed 2",
    "00:00:03.300 - <color=#C84800>LG_Floor.CreateZone, Alias: 12 with BuildFromZoneAlias10 zoneAliasStart: 10 aliasOffset: Zone_2</color>",
    "00:00:03.310 - <b>Zone Created</b> (New Game Object) in Reality MainLayer with seed 3",
    "00:00:03.900 - <color=green>Last Batch: SetupFloor</color>",
    "00:00:04.000 - <color=green>Next Batch: Distribution</color>",
    "00:00:04.100 - <color=purple>CreateKeyItemDistribution, keyItem: PublicName: KEY_WHITE_584 SpawnedItem: KeyItemPickup_Core(Clone)_GateKeyItem:KEY_WHITE_584_terminalKey: KEY_WHITE_584 (KeyItemPickup_Core) placementData: DimensionIndex: Reality LocalIndex: Zone_1 ZonePlacementWeights, Start: 0 Middle: 2500 End: 10000</color>",
    "00:00:04.105 - LG_DistributionJobs, queued 3 jobs",
    "00:00:04.110 - <color=#C84800>TryGetExistingGenericFunctionDistributionForSession, foundDist in zone: ZONE11 function: ResourceContainerWeak available: 58 randomValue: 0.8431178 ri: 54 had weight: 10001</color>",
    "00:00:04.200 - <color=#C84800>LG_Distribute_WardenObjective.SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE12 spawnZones[placementDataIndex].Count: 1 spawnZoneIndex: 0 spawnedInZoneCount: 1</color>",
    "00:00:04.210 - <color=#C84800>LG_Distribute_WardenObjective.DistributeGatherRetrieveItems, creating dist to spawn itemID: 153 for chainIndex: 0</color>",
    "00:00:04.300 - <color=#C84800>LG_Distribute_WardenObjective.SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE10 spawnZones[placementDataIndex].Count: 1 spawnZoneIndex: 1 spawnedInZoneCount: 1</color>",
    "00:00:04.310 - <color=#C84800>LG_Distribute_WardenObjective.DistributeGatherRetrieveItems, creating dist to spawn itemID: 165 for chainIndex: 0</color>",
    "00:00:04.400 - <color=#C84800>LG_Distribute_WardenObjective.SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE11 spawnZones[placementDataIndex].Count: 1 spawnZoneIndex: 2 spawnedInZoneCount: 1</color>",
    "00:00:04.410 - <color=#C84800>LG_Distribute_WardenObjective.DistributeGatherRetrieveItems, creating dist to spawn itemID: 131 for chainIndex: 0</color>",
    "00:00:04.500 - <color=#C84800>LG_Distribute_WardenObjective.SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE11 spawnZones[placementDataIndex].Count: 1 spawnZoneIndex: 0 spawnedInZoneCount: 2</color>",
    "00:00:04.510 - <color=#C84800>LG_Distribute_WardenObjective.DistributeGatherRetrieveItems, creating dist to spawn itemID: 148 for chainIndex: 0</color>",
    "00:00:04.600 - <color=#C84800>LG_PopulateFunctionMarkers HydroStatisUnit in zone: 12, Area: 3_Area C</color>",
    "00:00:04.900 - <color=green>Last Batch: Distribution</color>",
    "00:00:05.000 - <color=green>Next Batch: FunctionMarkers</color>",
    "00:00:05.100 - <color=#00FF00>Spawning Personnel ID pickup Key: StorageLocker_14</color>",
    "00:00:05.110 - PersonnelID seed: 4242",
    "00:00:05.120 - <color=#00FF00>PersonnelPickup_Core.Setup done</color>",
    "00:00:05.200 - <color=#00FF00>Spawning Personnel ID pickup Key: ResourceBox_2</color>",
    "00:00:05.210 - PersonnelID seed: 777",
    "00:00:05.220 - <color=#00FF00>PersonnelPickup_Core.Setup done</color>",
    "00:00:05.300 - <color=#00FF00>Spawning Personnel ID pickup Key: ResourceBox_9</color>",
    "00:00:05.310 - PersonnelID seed: 31337",
    "00:00:05.320 - <color=#00FF00>PersonnelPickup_Core.Setup done</color>",
    "00:00:05.900 - <color=green>Last Batch: FunctionMarkers</color>",
    "00:00:06.000 - BUILDER : BuildDone",
    "00:00:09.000 - " + GSM.format(old="ReadyToStartLevel", new="InLevel"),
    "00:01:10.000 - LG_PowerGenerator_Graphics.OnSyncStatusChanged Collection 3 status: PowerOn GENERATOR_412",
    "00:01:15.000 - LG_PowerGenerator_Graphics.OnSyncStatusChanged Collection 3 status: Charging GENERATOR_412",
    "00:20:00.000 - " + GSM.format(old="InLevel", new="ExpeditionSuccess"),
    "00:20:30.000 - " + GSM.format(old="ExpeditionSuccess", new="Lobby"),
]


@pytest.fixture
def session_log() -> str:
    """One complete session, from lobby through success and back to lobby."""
    return "\n".join(SESSION_LINES) + "\n"


@pytest.fixture
def write_session_log(session_log: str) -> Callable[[Path], Path]:
    def _write(path: Path) -> Path:
        path.write_text(session_log, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    path = tmp_path / "GTFO"
    path.mkdir()
    return path
