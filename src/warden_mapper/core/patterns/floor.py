"""Zone creation stanzas from the SetupFloor batch."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import Zone
from .base import RegexRule, to_u32


@dataclass(frozen=True, slots=True)
class ZoneCreated(RegexRule):
    """Two adjacent lines: 'LG_Floor.CreateZone, Alias: N ... aliasOffset: Zone_L'
    followed by '<b>Zone Created</b> ... in <Dimension> <Layer>'.
    """

    _re = re.compile(
        r"^.*?Alias:\s(?P<alias>\d+).*?aliasOffset:\s\w+?_(?P<local>\d+).*\n"
        r".*?Zone\sCreated.*?\sin\s(?P<dim>\w+)\s(?P<layer>\w+).*$",
        re.MULTILINE,
    )

    def extract(self, m: re.Match[str]) -> Zone:
        return Zone(
            alias=to_u32(m.group("alias"), "zone alias"),
            local=to_u32(m.group("local"), "zone local index"),
            dimension=m.group("dim"),
            layer=m.group("layer"),
        )
