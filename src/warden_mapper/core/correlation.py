"""Pairing of distribution-phase objectives with function-marker pickups.

The log never links an objective item code to the container that ends up
carrying it. Objectives are announced in the Distribution batch, containers
(with their seeds) in the later FunctionMarkers batch, and nothing guarantees
the two orders agree. The default strategy pairs them positionally.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from .models import (
    GatherItem,
    ItemIdentifier,
    Seeded,
    UnknownItem,
    ZoneKey,
    seeded_item,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueuedObjective:
    identifier: ItemIdentifier | UnknownItem
    zone_alias: int
    spawn_index: int


class ContainerClassifier(Protocol):
    """Strategy interface: decide which item the next seeded container carries."""

    def observe(self, objective: QueuedObjective) -> None:
        """Record a seeded objective announced during distribution."""
        ...

    def classify(self, container: str, seed: int) -> tuple[ZoneKey | None, GatherItem]:
        """Resolve a spawned container into a typed item and, if known, its zone."""
        ...

    def drain(self) -> list[QueuedObjective]:
        """Return and forget objectives that no container claimed."""
        ...

    def reset(self) -> None:
        """Forget everything (new session)."""
        ...


class PositionalQueueClassifier:
    """First announced objective goes to the first spawned container."""

    def __init__(self) -> None:
        self._queue: deque[QueuedObjective] = deque()

    def observe(self, objective: QueuedObjective) -> None:
        self._queue.append(objective)

    def classify(self, container: str, seed: int) -> tuple[ZoneKey | None, GatherItem]:
        if not self._queue:
            return None, Seeded(container, seed)

        objective = self._queue.popleft()
        item = seeded_item(objective.identifier, container, seed)
        if isinstance(item, Seeded):
            logger.debug("Queued objective %s is not a seeded item type", objective.identifier)
            return None, item
        return ZoneKey(objective.zone_alias), item

    def drain(self) -> list[QueuedObjective]:
        leftovers = list(self._queue)
        self._queue.clear()
        return leftovers

    def reset(self) -> None:
        self._queue.clear()
