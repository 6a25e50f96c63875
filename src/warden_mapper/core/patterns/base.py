"""Shared regex rule helpers and batch marker location."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

U32_MAX = 0xFFFFFFFF


class CaptureError(ValueError):
    """A pattern matched but one of its captured fields could not be converted."""


def to_u32(value: str | None, field: str) -> int:
    """Convert a captured digit run to an unsigned 32-bit integer."""
    if value is None:
        raise CaptureError(f"{field} missing")
    try:
        number = int(value)
    except ValueError as e:
        raise CaptureError(f"{field} is not a number: {value!r}") from e
    if number < 0 or number > U32_MAX:
        raise CaptureError(f"{field} out of range: {value}")
    return number


class RegexRule:
    """Mixin for rules backed by a single class-level compiled pattern."""

    __slots__ = ()

    _re: re.Pattern[str]

    def search(self, text: str, pos: int, endpos: int) -> re.Match[str] | None:
        return self._re.search(text, pos, endpos)

    def finditer(self, text: str, pos: int, endpos: int) -> Iterator[re.Match[str]]:
        return self._re.finditer(text, pos, endpos)


def line_end(text: str, pos: int) -> int:
    """Offset just past the newline that ends the line containing ``pos``."""
    nl = text.find("\n", pos)
    return len(text) if nl == -1 else nl + 1


@dataclass(frozen=True, slots=True)
class BatchSpan:
    """Location of one batch in the buffer.

    ``body_end`` and ``resume_at`` are None while the closing marker has not
    arrived yet.
    """

    opened_at: int
    body_start: int
    body_end: int | None = None
    resume_at: int | None = None

    @property
    def complete(self) -> bool:
        return self.body_end is not None


@dataclass(frozen=True, slots=True)
class BatchBounds:
    """Start/end markers of a named builder batch ("Next Batch: X" ... "Last Batch: X")."""

    name: str
    start: re.Pattern[str]
    end: re.Pattern[str]

    @classmethod
    def named(cls, name: str) -> BatchBounds:
        escaped = re.escape(name)
        return cls(
            name=name,
            start=re.compile(rf"^.*?Next\sBatch:\s{escaped}\b.*$", re.MULTILINE),
            end=re.compile(rf"^.*?Last\sBatch:\s{escaped}\b.*$", re.MULTILINE),
        )

    def locate(self, text: str, pos: int, endpos: int) -> BatchSpan | None:
        """Find the first batch opening at or after ``pos``."""
        opened = self.start.search(text, pos, endpos)
        if opened is None:
            return None
        body_start = line_end(text, opened.end())
        closed = self.end.search(text, body_start, endpos)
        if closed is None:
            return BatchSpan(opened_at=opened.start(), body_start=body_start)
        return BatchSpan(
            opened_at=opened.start(),
            body_start=body_start,
            body_end=closed.start(),
            resume_at=line_end(text, closed.end()),
        )
