"""Session-level rules: seeds, expedition selection and game-state changes."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models import Seeds
from .base import CaptureError, RegexRule, to_u32

RESET_STATES: tuple[str, ...] = ("Lobby", "NoLobby", "Offline")
FINISH_STATES: tuple[str, ...] = ("ExpeditionSuccess", "ExpeditionFail", "ExpeditionAbort")
IN_LEVEL_STATE = "InLevel"


@dataclass(frozen=True, slots=True)
class BuilderSeeds(RegexRule):
    """'Builder.Build ... buildSeed: B hostIDSeed: H sessionSeed: S'."""

    _re = re.compile(
        r"^.*?Builder\.Build\b.*?buildSeed:\s(?P<build>\d+)\s"
        r"hostIDSeed:\s(?P<host>\d+)\s"
        r"sessionSeed:\s(?P<session>\d+).*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> Seeds:
        return Seeds(
            build=to_u32(m.group("build"), "buildSeed"),
            host=to_u32(m.group("host"), "hostIDSeed"),
            session=to_u32(m.group("session"), "sessionSeed"),
        )


@dataclass(frozen=True, slots=True)
class ExpeditionSelection:
    rundown_code: int
    tier: str
    raw_index: int


@dataclass(frozen=True, slots=True)
class ExpeditionSelect(RegexRule):
    """'SelectActiveExpedition : ... Local_<rundown>_Tier<letter>_<index>'."""

    _re = re.compile(
        r"^.*?SelectActiveExpedition\s:.*?"
        r"Local_(?P<rundown>\d+)_Tier(?P<tier>\w)_(?P<exp>\d+).*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> ExpeditionSelection:
        tier = m.group("tier")
        if not tier.isalpha():
            raise CaptureError(f"tier is not a letter: {tier!r}")
        return ExpeditionSelection(
            rundown_code=to_u32(m.group("rundown"), "rundown"),
            tier=tier.upper(),
            raw_index=to_u32(m.group("exp"), "expedition index"),
        )


@dataclass(frozen=True, slots=True)
class BuildDone(RegexRule):
    """End of level building."""

    _re = re.compile(r"^.*?BUILDER\s:\sBuildDone\b.*$", re.MULTILINE)


@dataclass(frozen=True, slots=True)
class GameStateChange(RegexRule):
    """'GAMESTATEMANAGER ... TO: <state></color>'; captures the new state."""

    _re = re.compile(r"^.*GAMESTATEMANAGER.*\s(?P<new_state>\w+)<.*$", re.MULTILINE)

    def extract(self, m: re.Match[str]) -> str:
        return m.group("new_state")


@dataclass(frozen=True, slots=True)
class ResetTrigger(RegexRule):
    """First line that ends the current session.

    Either a game-state change into one of ``states`` or an application quit.
    """

    states: Sequence[str] = RESET_STATES
    _re: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        alternatives = "|".join(re.escape(s) for s in self.states)
        pattern = re.compile(
            rf"^(?:.*GAMESTATEMANAGER.*\s(?:{alternatives})<|.*?OnApplicationQuit\b).*$",
            re.MULTILINE,
        )
        object.__setattr__(self, "_re", pattern)
