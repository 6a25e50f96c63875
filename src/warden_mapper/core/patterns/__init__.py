"""Log pattern rules and the shared catalog.

Each rule wraps one compiled expression that extracts named fields from one or
more lines of the game's network-status log.
"""

from __future__ import annotations

from .base import BatchBounds, BatchSpan, CaptureError, line_end, to_u32
from .catalog import PatternCatalog, default_catalog
from .distribution import (
    GenericSmallPickup,
    GeneratorSighting,
    GeneratorStatus,
    HsuDistribution,
    HsuPlacement,
    KeyItemDistribution,
    KeyPlacement,
    ObjectiveDistribution,
    ObjectivePlacement,
    PickupSpawn,
)
from .floor import ZoneCreated
from .session import (
    FINISH_STATES,
    IN_LEVEL_STATE,
    RESET_STATES,
    BuildDone,
    BuilderSeeds,
    ExpeditionSelect,
    ExpeditionSelection,
    GameStateChange,
    ResetTrigger,
)

__all__ = [
    "FINISH_STATES",
    "IN_LEVEL_STATE",
    "RESET_STATES",
    "BatchBounds",
    "BatchSpan",
    "BuildDone",
    "BuilderSeeds",
    "CaptureError",
    "ExpeditionSelect",
    "ExpeditionSelection",
    "GameStateChange",
    "GenericSmallPickup",
    "GeneratorSighting",
    "GeneratorStatus",
    "HsuDistribution",
    "HsuPlacement",
    "KeyItemDistribution",
    "KeyPlacement",
    "ObjectiveDistribution",
    "ObjectivePlacement",
    "PatternCatalog",
    "PickupSpawn",
    "ResetTrigger",
    "ZoneCreated",
    "default_catalog",
    "line_end",
    "to_u32",
]
