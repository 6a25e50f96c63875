"""Log file tailer.

Owns the single open handle on the active log and turns appended bytes into
text deltas on a fixed poll interval.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
from pathlib import Path
from typing import Any

import aiofiles

from .channel import Channel, ChannelClosed
from .models import Content, NewFile, OpenLog, StopTail, Stopped, TailCommand, TailFault, TailMessage

logger = logging.getLogger(__name__)


class Tailer:
    """Reads everything appended to the current file since the previous tick."""

    def __init__(
        self,
        commands: Channel[TailCommand],
        deltas: Channel[TailMessage],
        *,
        interval: float = 0.25,
        encoding: str = "utf-8",
        decode_errors: str = "replace",
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._commands = commands
        self._deltas = deltas
        self._interval = interval
        self._encoding = encoding
        self._decode_errors = decode_errors
        self._file: Any = None
        self._path: Path | None = None
        self._decoder = self._new_decoder()

    @property
    def path(self) -> Path | None:
        return self._path

    def _new_decoder(self) -> codecs.IncrementalDecoder:
        return codecs.getincrementaldecoder(self._encoding)(errors=self._decode_errors)

    async def run(self) -> None:
        """Tick loop; returns after ``StopTail``, a closed command channel or an open failure."""
        try:
            while True:
                if not await self._handle_commands():
                    break
                await self._read()
                await asyncio.sleep(self._interval)
        except ChannelClosed:
            logger.debug("Delta channel closed; tailer stopping")
        finally:
            await self._close()
            # Nothing reads commands past this point.
            self._commands.close()
            if not self._deltas.closed:
                self._deltas.send(Stopped())

    async def _handle_commands(self) -> bool:
        while True:
            try:
                cmd = self._commands.try_recv()
            except ChannelClosed:
                logger.debug("Tail command channel was disconnected")
                return False
            if cmd is None:
                return True
            if isinstance(cmd, StopTail):
                logger.info("Tail got stop command")
                return False
            if isinstance(cmd, OpenLog) and not await self._open(cmd.path):
                return False

    async def _open(self, path: Path) -> bool:
        await self._close()
        try:
            self._file = await aiofiles.open(path, mode="rb")
        except OSError as e:
            logger.error("Unable to open log file %s: %s", path, e)
            self._deltas.send(TailFault(f"Unable to open log file {path}: {e}"))
            return False

        self._path = Path(path)
        self._decoder = self._new_decoder()
        logger.info("Tailing %s", path)
        self._deltas.send(NewFile(self._path))
        return True

    async def _read(self) -> None:
        if self._file is None:
            return
        try:
            chunk = await self._file.read()
        except OSError as e:
            logger.warning("Log file %s became unreadable: %s", self._path, e)
            await self._close()
            return

        if not chunk:
            return
        text = self._decoder.decode(chunk)
        if text:
            self._deltas.send(Content(text))

    async def _close(self) -> None:
        if self._file is None:
            return
        f, self._file = self._file, None
        try:
            await f.close()
        except OSError as e:
            logger.debug("Error closing %s: %s", self._path, e)
