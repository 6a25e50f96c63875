"""The shared, read-only rule registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cache

from .base import BatchBounds
from .distribution import (
    GenericSmallPickup,
    GeneratorStatus,
    HsuDistribution,
    KeyItemDistribution,
    ObjectiveDistribution,
)
from .floor import ZoneCreated
from .session import BuildDone, BuilderSeeds, ExpeditionSelect, GameStateChange, ResetTrigger


@dataclass(frozen=True, slots=True)
class PatternCatalog:
    """Every rule the parser applies, grouped by life-cycle phase."""

    seeds: BuilderSeeds = field(default_factory=BuilderSeeds)
    expedition: ExpeditionSelect = field(default_factory=ExpeditionSelect)

    setup_floor: BatchBounds = field(default_factory=lambda: BatchBounds.named("SetupFloor"))
    zone: ZoneCreated = field(default_factory=ZoneCreated)

    distribution: BatchBounds = field(default_factory=lambda: BatchBounds.named("Distribution"))
    function_markers: BatchBounds = field(
        default_factory=lambda: BatchBounds.named("FunctionMarkers")
    )
    key_item: KeyItemDistribution = field(default_factory=KeyItemDistribution)
    objective: ObjectiveDistribution = field(default_factory=ObjectiveDistribution)
    hsu: HsuDistribution = field(default_factory=HsuDistribution)
    pickup: GenericSmallPickup = field(default_factory=GenericSmallPickup)

    build_done: BuildDone = field(default_factory=BuildDone)
    game_state: GameStateChange = field(default_factory=GameStateChange)
    generator: GeneratorStatus = field(default_factory=GeneratorStatus)
    reset_trigger: ResetTrigger = field(default_factory=ResetTrigger)


@cache
def default_catalog() -> PatternCatalog:
    """Process-wide catalog, built on first use."""
    return PatternCatalog()
