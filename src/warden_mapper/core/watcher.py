"""Directory watcher that points the tailer at the newest session log."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .channel import Channel, ChannelClosed
from .models import OpenLog, TailCommand

logger = logging.getLogger(__name__)


def find_latest_log(directory: str | Path, marker: str) -> Path | None:
    """Most recently modified file in ``directory`` whose name contains ``marker``."""
    path = Path(directory)
    if not path.is_dir():
        raise FileNotFoundError(f"Log directory not found: {path}")

    latest: Path | None = None
    latest_mtime = -1.0
    for entry in path.iterdir():
        if marker not in entry.name:
            continue
        try:
            if not entry.is_file():
                continue
            mtime = entry.stat().st_mtime
        except OSError:
            continue
        if mtime > latest_mtime:
            latest, latest_mtime = entry, mtime
    return latest


def _as_path(raw: str | bytes) -> Path:
    return Path(os.fsdecode(raw))


class SessionLogHandler(FileSystemEventHandler):
    """Calls ``on_match`` for each created (or moved-in) file matching ``marker``."""

    def __init__(self, marker: str, on_match: Callable[[Path], None]) -> None:
        super().__init__()
        self._marker = marker
        self._on_match = on_match

    def _dispatch_path(self, path: Path) -> None:
        if self._marker in path.name:
            self._on_match(path)

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._dispatch_path(_as_path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._dispatch_path(_as_path(event.dest_path))


class DirectoryWatcher:
    """Sends ``OpenLog`` commands for the active session log.

    Every send hops onto the event loop that owns ``commands``. Pass ``loop``
    when ``start`` runs in a worker thread.
    """

    def __init__(
        self,
        directory: str | Path,
        commands: Channel[TailCommand],
        *,
        marker: str,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._directory = Path(directory)
        self._commands = commands
        self._marker = marker
        self._loop = loop
        self._observer: Observer | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> Path | None:
        """Scan once, then watch. Returns the file found by the scan, if any."""
        if self._observer is not None:
            raise RuntimeError("watcher already started")
        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        latest = find_latest_log(self._directory, self._marker)
        if latest is not None:
            logger.info("Found existing session log %s", latest)
            self._loop.call_soon_threadsafe(self._send, latest)

        handler = SessionLogHandler(self._marker, self._on_created)
        observer = Observer()
        observer.schedule(handler, str(self._directory), recursive=False)
        observer.start()
        self._observer = observer
        logger.debug("Watching %s for *%s* files", self._directory, self._marker)
        return latest

    def stop(self, timeout: float = 2.0) -> None:
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout)

    def _on_created(self, path: Path) -> None:
        # Observer thread.
        logger.info("New session log %s", path)
        self._loop.call_soon_threadsafe(self._send, path)

    def _send(self, path: Path) -> None:
        try:
            self._commands.send(OpenLog(path))
        except ChannelClosed:
            logger.debug("Tail command channel closed; dropping %s", path)
