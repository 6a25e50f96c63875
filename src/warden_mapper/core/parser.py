"""Incremental session parser.

Turns an arbitrarily chunked stream of log text into ordered session events.
The parser owns a growing text buffer and a cursor; each life-cycle state
scans only the complete lines after the cursor, so the same text yields the
same events however it was split into deltas.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Callable
from enum import Enum

from .correlation import ContainerClassifier, PositionalQueueClassifier, QueuedObjective
from .models import (
    INDEXED_IDENTIFIERS,
    SEEDED_IDENTIFIERS,
    BulkheadKey,
    End,
    Event,
    Expedition,
    Gatherable,
    Generator,
    HSU,
    ItemIdentifier,
    Key,
    Reset,
    Rundown,
    Start,
    Uncategorized,
    UnknownItem,
    ZoneFound,
    ZoneKey,
    classify_item,
    correct_expedition_index,
    indexed_item,
)
from .patterns import (
    FINISH_STATES,
    IN_LEVEL_STATE,
    CaptureError,
    PatternCatalog,
    default_catalog,
    line_end,
)

logger = logging.getLogger(__name__)

BULKHEAD_PREFIX = "BULKHEAD"


class ParserState(str, Enum):
    """Forward-only life-cycle of one session."""

    AWAIT_SEEDS = "await_seeds"
    AWAIT_SESSION_SELECT = "await_session_select"
    AWAIT_ZONE_GENERATION = "await_zone_generation"
    AWAIT_ITEM_GENERATION = "await_item_generation"
    AWAIT_ELEVATOR_OR_FINISH = "await_elevator_or_finish"
    LEVEL_FINISH = "level_finish"


class LogParser:
    """Stateful parser for one log file incarnation.

    ``feed`` never blocks and never raises on bad input: malformed captures
    are logged and skipped.
    """

    def __init__(
        self,
        *,
        catalog: PatternCatalog | None = None,
        classifier_factory: Callable[[], ContainerClassifier] = PositionalQueueClassifier,
    ) -> None:
        self._catalog = catalog or default_catalog()
        self._classifier = classifier_factory()
        self._buffer = ""
        self._cursor = 0
        self._state = ParserState.AWAIT_SEEDS
        self._generators: dict[str, int] = {}

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def buffered(self) -> int:
        """Characters held for the current session."""
        return len(self._buffer)

    def reset(self) -> None:
        """Drop all session state (new file or explicit reset)."""
        self._buffer = ""
        self._cursor = 0
        self._enter_new_session()

    def feed(self, text: str) -> list[Event]:
        """Append a delta and return the events it completes, in file order."""
        if text:
            self._buffer += text
        return self._advance()

    # --- driver -------------------------------------------------------------

    def _enter_new_session(self) -> None:
        self._state = ParserState.AWAIT_SEEDS
        self._classifier.reset()
        self._generators.clear()

    def _advance(self) -> list[Event]:
        events: list[Event] = []
        while True:
            end = self._buffer.rfind("\n") + 1
            if end <= self._cursor:
                break

            trigger: re.Match[str] | None = None
            if self._state is not ParserState.AWAIT_SEEDS:
                trigger = self._catalog.reset_trigger.search(self._buffer, self._cursor, end)
            limit = trigger.start() if trigger is not None else end

            if self._step(limit, events):
                continue

            if trigger is not None:
                logger.info("Session ended (%s)", trigger.group(0).strip()[:120])
                events.append(Reset())
                self._buffer = self._buffer[line_end(self._buffer, trigger.end()) :]
                self._cursor = 0
                self._enter_new_session()
                continue
            break
        return events

    def _step(self, limit: int, events: list[Event]) -> bool:
        """Run the current state on [cursor, limit). True when it should run again."""
        if self._state is ParserState.AWAIT_SEEDS:
            return self._await_seeds(limit, events)
        if self._state is ParserState.AWAIT_SESSION_SELECT:
            return self._await_session_select(limit, events)
        if self._state is ParserState.AWAIT_ZONE_GENERATION:
            return self._await_zone_generation(limit, events)
        if self._state is ParserState.AWAIT_ITEM_GENERATION:
            return self._await_item_generation(limit, events)
        return self._in_level(limit, events)

    # --- states -------------------------------------------------------------

    def _await_seeds(self, limit: int, events: list[Event]) -> bool:
        rule = self._catalog.seeds
        m = rule.search(self._buffer, self._cursor, limit)
        if m is None:
            self._cursor = limit
            return False

        self._cursor = line_end(self._buffer, m.end())
        try:
            seeds = rule.extract(m)
        except CaptureError as e:
            logger.warning("Skipping builder seeds line: %s", e)
            return True

        events.append(seeds)
        self._state = ParserState.AWAIT_SESSION_SELECT
        return True

    def _await_session_select(self, limit: int, events: list[Event]) -> bool:
        rule = self._catalog.expedition
        m = rule.search(self._buffer, self._cursor, limit)
        if m is None:
            self._cursor = limit
            return False

        self._cursor = line_end(self._buffer, m.end())
        try:
            selection = rule.extract(m)
        except CaptureError as e:
            logger.warning("Skipping expedition selection line: %s", e)
            return True

        rundown = Rundown(selection.rundown_code)
        if rundown is Rundown.MODDED and selection.rundown_code != Rundown.MODDED:
            logger.info("Unknown rundown code %s, treating as modded", selection.rundown_code)
        index = correct_expedition_index(rundown, selection.tier, selection.raw_index)
        events.append(Expedition(rundown=rundown, tier=selection.tier, index=index))
        self._state = ParserState.AWAIT_ZONE_GENERATION
        return True

    def _await_zone_generation(self, limit: int, events: list[Event]) -> bool:
        span = self._catalog.setup_floor.locate(self._buffer, self._cursor, limit)
        if span is None or not span.complete:
            if self._build_finished_early(limit, "SetupFloor"):
                return True
            self._cursor = span.opened_at if span is not None else limit
            return False

        rule = self._catalog.zone
        for m in rule.finditer(self._buffer, span.body_start, span.body_end):
            try:
                events.append(ZoneFound(rule.extract(m)))
            except CaptureError as e:
                logger.warning("Skipping zone stanza: %s", e)

        self._cursor = span.resume_at
        self._state = ParserState.AWAIT_ITEM_GENERATION
        return True

    def _await_item_generation(self, limit: int, events: list[Event]) -> bool:
        distribution = self._catalog.distribution.locate(self._buffer, self._cursor, limit)
        markers = None
        if distribution is not None and distribution.complete:
            markers = self._catalog.function_markers.locate(
                self._buffer, distribution.resume_at, limit
            )

        if markers is None or not markers.complete:
            if self._build_finished_early(limit, "Distribution/FunctionMarkers"):
                return True
            self._cursor = distribution.opened_at if distribution is not None else limit
            return False

        events.extend(self._distribute(distribution.body_start, distribution.body_end))
        events.extend(self._spawn_pickups(markers.body_start, markers.body_end))

        self._cursor = markers.resume_at
        self._state = ParserState.AWAIT_ELEVATOR_OR_FINISH
        return True

    def _in_level(self, limit: int, events: list[Event]) -> bool:
        found: list[tuple[int, Event | str]] = []
        for m in self._catalog.game_state.finditer(self._buffer, self._cursor, limit):
            found.append((m.start(), self._catalog.game_state.extract(m)))
        for m in self._catalog.generator.finditer(self._buffer, self._cursor, limit):
            try:
                sighting = self._catalog.generator.extract(m)
            except CaptureError as e:
                logger.warning("Skipping generator line: %s", e)
                continue
            if sighting.name in self._generators:
                continue
            idx = len(self._generators)
            self._generators[sighting.name] = idx
            found.append((m.start(), Gatherable(None, Generator(sighting.name, sighting.collection, idx))))

        found.sort(key=lambda pair: pair[0])
        for _, entry in found:
            if not isinstance(entry, str):
                events.append(entry)
            elif entry == IN_LEVEL_STATE and self._state is ParserState.AWAIT_ELEVATOR_OR_FINISH:
                events.append(Start())
                self._state = ParserState.LEVEL_FINISH
            elif entry in FINISH_STATES and self._state is ParserState.LEVEL_FINISH:
                events.append(End())

        self._cursor = limit
        return False

    def _build_finished_early(self, limit: int, waiting_for: str) -> bool:
        done = self._catalog.build_done.search(self._buffer, self._cursor, limit)
        if done is None:
            return False
        logger.warning("Level build finished before %s batch completed; skipping ahead", waiting_for)
        self._cursor = line_end(self._buffer, done.end())
        self._state = ParserState.AWAIT_ELEVATOR_OR_FINISH
        return True

    # --- batch bodies -------------------------------------------------------

    def _distribute(self, start: int, stop: int) -> list[Event]:
        cat = self._catalog
        placed: list[tuple[int, Event]] = []
        counts: Counter[ItemIdentifier | UnknownItem] = Counter()

        for m in cat.key_item.finditer(self._buffer, start, stop):
            try:
                key = cat.key_item.extract(m)
            except CaptureError as e:
                logger.warning("Skipping key distribution: %s", e)
                continue
            if key.name.startswith(BULKHEAD_PREFIX):
                item = BulkheadKey(key.name)
            else:
                item = Key(key.name, key.dimension, key.zone_alias, key.correlation_id)
            placed.append((m.start(), Gatherable(ZoneKey(key.zone_alias, key.dimension), item)))

        placed.extend(self._place_hsus(start, stop))

        for m in cat.objective.finditer(self._buffer, start, stop):
            try:
                objective = cat.objective.extract(m)
            except CaptureError as e:
                logger.warning("Skipping objective distribution: %s", e)
                continue
            identifier = classify_item(objective.item_code)
            if identifier in SEEDED_IDENTIFIERS:
                self._classifier.observe(
                    QueuedObjective(identifier, objective.zone_alias, objective.spawn_index)
                )
            elif identifier in INDEXED_IDENTIFIERS:
                item = indexed_item(identifier, objective.spawn_index)
                placed.append((m.start(), Gatherable(ZoneKey(objective.zone_alias), item)))
            else:
                counts[identifier] += 1

        placed.sort(key=lambda pair: pair[0])
        events: list[Event] = [event for _, event in placed]
        events.extend(Uncategorized(identifier, n) for identifier, n in counts.items())
        return events

    def _place_hsus(self, start: int, stop: int) -> list[tuple[int, Event]]:
        # HSU lines can land in either batch body.
        rule = self._catalog.hsu
        placed: list[tuple[int, Event]] = []
        for m in rule.finditer(self._buffer, start, stop):
            try:
                hsu = rule.extract(m)
            except CaptureError as e:
                logger.warning("Skipping HSU distribution: %s", e)
                continue
            placed.append((m.start(), Gatherable(ZoneKey(hsu.zone_alias), HSU(hsu.area_id, hsu.area))))
        return placed

    def _spawn_pickups(self, start: int, stop: int) -> list[Event]:
        rule = self._catalog.pickup
        placed = self._place_hsus(start, stop)
        for m in rule.finditer(self._buffer, start, stop):
            try:
                pickup = rule.extract(m)
            except CaptureError as e:
                logger.warning("Skipping pickup: %s", e)
                continue
            zone, item = self._classifier.classify(pickup.container, pickup.seed)
            placed.append((m.start(), Gatherable(zone, item)))

        placed.sort(key=lambda pair: pair[0])
        events: list[Event] = [event for _, event in placed]

        leftovers: Counter[ItemIdentifier | UnknownItem] = Counter(
            objective.identifier for objective in self._classifier.drain()
        )
        if leftovers:
            logger.debug("%d distributed objectives had no container", sum(leftovers.values()))
        events.extend(Uncategorized(identifier, n) for identifier, n in leftovers.items())
        return events

