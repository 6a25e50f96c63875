"""Tail → parse pipeline with a scoped shutdown.

Three channels connect the stages:
- commands: consumer/watcher → tailer (``OpenLog``, ``StopTail``)
- deltas: tailer → parser (``Content``, ``NewFile``, ``TailFault``, ``Stopped``)
- events: parser → consumer (parser events, ``Reset`` on file switch, ``Fault``)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from .channel import Channel, ChannelClosed
from .config import MapperConfig, resolve_config
from .models import (
    Content,
    Event,
    Fault,
    NewFile,
    OpenLog,
    Reset,
    StopTail,
    Stopped,
    TailCommand,
    TailFault,
    TailMessage,
)
from .parser import LogParser
from .tail import Tailer
from .watcher import DirectoryWatcher

logger = logging.getLogger(__name__)


class PipelineStopped(RuntimeError):
    """The tailer is gone, so commands can no longer be delivered."""


def _handle(message: TailMessage, parser: LogParser, events: Channel[Event]) -> bool:
    """Apply one tail message. Returns False once the tailer has stopped."""
    if isinstance(message, Content):
        for event in parser.feed(message.text):
            events.send(event)
    elif isinstance(message, NewFile):
        logger.info("Switched to %s; resetting parser", message.path)
        parser.reset()
        events.send(Reset())
    elif isinstance(message, TailFault):
        events.send(Fault(message.message))
    elif isinstance(message, Stopped):
        logger.debug("Tailer stopped")
        return False
    return True


async def pump(
    deltas: Channel[TailMessage],
    events: Channel[Event],
    *,
    parser: LogParser,
    interval: float = 0.2,
) -> None:
    """Parser loop: drain pending deltas each tick and forward the events."""
    try:
        while True:
            while True:
                message = deltas.try_recv()
                if message is None:
                    break
                if not _handle(message, parser, events):
                    return
            await asyncio.sleep(interval)
    except ChannelClosed:
        logger.debug("Pipeline channel closed; parser stopping")
    finally:
        events.close()


@dataclass(slots=True)
class Pipeline:
    """Handle yielded by :func:`open_pipeline`."""

    config: MapperConfig
    commands: Channel[TailCommand]
    events: Channel[Event]
    watcher: DirectoryWatcher | None = None

    def open(self, path: str | Path) -> None:
        """Point the tailer at ``path``; the parser resets on the switch.

        Raises ``PipelineStopped`` once the tailer has exited.
        """
        try:
            self.commands.send(OpenLog(Path(path)))
        except ChannelClosed as e:
            raise PipelineStopped("Log tailer has stopped; no further files can be opened.") from e


async def _join(task: asyncio.Task[None], timeout: float) -> None:
    try:
        await asyncio.wait_for(asyncio.shield(task), timeout)
    except TimeoutError:
        logger.warning("Task %r did not stop within %.1fs; cancelling", task.get_name(), timeout)
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass


@asynccontextmanager
async def open_pipeline(
    config: MapperConfig | None = None,
    *,
    watch: bool = True,
    parser: LogParser | None = None,
) -> AsyncIterator[Pipeline]:
    """Run the tailer and parser for the lifetime of the ``async with`` block.

    With ``watch=True`` the configured log directory is scanned for the newest
    session log and watched for new ones. On exit the watcher is stopped,
    ``StopTail`` is sent, and both tasks are awaited.
    """
    cfg = config if config is not None else resolve_config()
    commands: Channel[TailCommand] = Channel()
    deltas: Channel[TailMessage] = Channel()
    events: Channel[Event] = Channel()

    tailer = Tailer(
        commands,
        deltas,
        interval=cfg.tail_interval,
        encoding=cfg.encoding,
        decode_errors=cfg.decode_errors,
    )
    tail_task = asyncio.create_task(tailer.run(), name="tail file reader")
    parse_task = asyncio.create_task(
        pump(deltas, events, parser=parser or LogParser(), interval=cfg.parse_interval),
        name="log parser",
    )

    pipeline = Pipeline(config=cfg, commands=commands, events=events)
    try:
        if watch:
            watcher = DirectoryWatcher(
                cfg.log_dir, commands, marker=cfg.marker, loop=asyncio.get_running_loop()
            )
            try:
                await asyncio.to_thread(watcher.start)
            except FileNotFoundError as e:
                logger.error("Not watching for session logs: %s", e)
                events.send(Fault(str(e)))
            else:
                pipeline.watcher = watcher
        yield pipeline
    finally:
        if pipeline.watcher is not None:
            await asyncio.to_thread(pipeline.watcher.stop)
        if not commands.closed:
            commands.send(StopTail())
            commands.close()
        await _join(tail_task, cfg.shutdown_timeout)
        await _join(parse_task, cfg.shutdown_timeout)
        logger.debug("Pipeline shut down")
