"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from warden_mapper.core.config import LOG_DIR_ENV, MARKER_ENV, POLL_MS_ENV, resolve_config
from warden_mapper.core.patterns import RESET_STATES
from warden_mapper.core.snapshot import SessionSnapshot

SAMPLE_SESSION_LOG = """\
00:00:01.000 - <color=#C84800>GAMESTATEMANAGER CHANGE STATE FROM : Startup TO: Lobby</color> 
00:00:02.000 - <color=purple>Builder.Build, buildSeed: 1234 hostIDSeed: 5678 sessionSeed: 91011</color>
00:00:02.100 - SelectActiveExpedition : Selected! Local Local_35_TierC_2 rundownKey: Local_35
00:00:03.000 - <color=green>Next Batch: SetupFloor</color>
00:00:03.100 - <color=#C84800>LG_Floor.CreateZone, Alias: 10 with BuildFromZoneAlias10 zoneAliasStart: 10 aliasOffset: Zone_0</color>
00:00:03.110 - <b>Zone Created</b> (New Game Object) in Reality MainLayer with seed 1
00:00:03.200 - <color=#C84800>LG_Floor.CreateZone, Alias: 11 with BuildFromZoneAlias11 zoneAliasStart: 11 aliasOffset: Zone_1</color>
00:00:03.210 - <b>Zone Created</b> (New Game Object) in Reality MainLayer with seed 2
00:00:03.900 - <color=green>Last Batch: SetupFloor</color>
00:00:04.000 - <color=green>Next Batch: Distribution</color>
00:00:04.100 - <color=purple>CreateKeyItemDistribution, keyItem: PublicName: KEY_WHITE_584 SpawnedItem: KeyItemPickup_Core placementData: DimensionIndex: Reality LocalIndex: Zone_1 ZonePlacementWeights</color>
00:00:04.110 - <color=yellow>TryGetExistingGenericFunctionDistributionForSession, foundDist in zone: ZONE11 function: ResourceContainerWeak available: 12 randomValue: 0.8431178 ri: 54 had weight: 10001</color>
00:00:04.200 - <color=#FF00FF>LG_Distribute_WardenObjective.SelectZoneFromPlacementAndKeepTrackOnCount, creating dist in zone ZONE10 spawnZones[placementDataIndex].Count: 1 spawnZoneIndex: 0 spawnedInZoneCount: 1</color>
00:00:04.210 - <color=#C84800>LG_Distribute_WardenObjective.DistributeGatherRetrieveItems, creating dist to spawn itemID: 129 for chainIndex: 0</color>
00:00:04.900 - <color=green>Last Batch: Distribution</color>
00:00:05.000 - <color=green>Next Batch: FunctionMarkers</color>
00:00:05.100 - <color=#00FF00>Spawning Personnel ID pickup Key: StorageLocker_14</color>
00:00:05.110 - PersonnelID seed: 4242
00:00:05.120 - <color=#00FF00>PersonnelPickup_Core.Setup done</color>
00:00:05.900 - <color=green>Last Batch: FunctionMarkers</color>
00:00:06.000 - BUILDER : BuildDone
00:00:09.000 - <color=#C84800>GAMESTATEMANAGER CHANGE STATE FROM : ReadyToStartLevel TO: InLevel</color> 
"""


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://warden-mapper/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs and tools."""
        cfg = resolve_config()
        return (
            "Tools:\n"
            "- current_session: seeds, expedition and items per zone\n"
            "- zone_items(alias, dimension?): items placed in one zone\n"
            "- open_log(path): tail a specific log file\n"
            "\nResources:\n"
            "- app://warden-mapper/help\n"
            "- app://warden-mapper/config\n"
            "- app://warden-mapper/schemas/session-snapshot\n"
            "- app://warden-mapper/examples/session-log\n"
            f"\nWatching: {cfg.log_dir} (files containing {cfg.marker!r})\n"
            f"Override with {LOG_DIR_ENV}, {MARKER_ENV} and {POLL_MS_ENV}.\n"
        )

    @mcp.resource("app://warden-mapper/examples/session-log")
    def sample_log() -> str:
        """Return a trimmed session log that reconstructs one expedition."""
        return SAMPLE_SESSION_LOG

    @mcp.resource("app://warden-mapper/config")
    def config_resource() -> dict[str, Any]:
        """Return the effective configuration."""
        cfg = resolve_config()
        return {
            "log_dir": str(cfg.log_dir),
            "marker": cfg.marker,
            "tail_interval": cfg.tail_interval,
            "parse_interval": cfg.parse_interval,
            "encoding": cfg.encoding,
            "reset_states": list(RESET_STATES),
        }

    @mcp.resource("app://warden-mapper/schemas/session-snapshot")
    def session_schema() -> dict[str, Any]:
        """Return the JSON schema for session snapshots."""
        return SessionSnapshot.model_json_schema()
