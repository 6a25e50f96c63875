from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from warden_mapper.core.config import MIN_POLL_MS, MapperConfig, configure_logging, resolve_config
from warden_mapper.core.models import (
    End,
    Event,
    Expedition,
    Fault,
    Gatherable,
    Reset,
    Seeds,
    Split,
    Start,
    Uncategorized,
    ZoneFound,
    item_kind,
)
from warden_mapper.core.pipeline import open_pipeline


def _poll_ms(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError("poll interval must be an integer (milliseconds)") from e
    if value < MIN_POLL_MS:
        raise argparse.ArgumentTypeError(f"poll interval must be >= {MIN_POLL_MS} ms")
    return value


def format_event(event: Event) -> str:
    """One human-readable line per event."""
    if isinstance(event, Reset):
        return "-- reset --"
    if isinstance(event, Seeds):
        return f"seeds build={event.build} host={event.host} session={event.session}"
    if isinstance(event, Expedition):
        return f"expedition {event.rundown.label} {event.tier}{event.index}"
    if isinstance(event, ZoneFound):
        z = event.zone
        return f"zone {z} local={z.local}"
    if isinstance(event, Gatherable):
        where = "?"
        if event.zone is not None:
            where = f"ZONE_{event.zone.alias}"
            if event.zone.dimension:
                where += f" {event.zone.dimension}"
        return f"item {item_kind(event.item)} in {where}: {event.item}"
    if isinstance(event, Uncategorized):
        return f"uncategorized {item_kind(event.identifier)} x{event.count}"
    if isinstance(event, Start):
        return "level start"
    if isinstance(event, Split):
        return "split"
    if isinstance(event, End):
        return "level end"
    if isinstance(event, Fault):
        return f"fault: {event.message}"
    return repr(event)


async def _run(cfg: MapperConfig, file: Path | None) -> int:
    faulted = False
    async with open_pipeline(cfg, watch=file is None) as pipeline:
        if file is not None:
            pipeline.open(file)
        async for event in pipeline.events:
            if isinstance(event, Fault):
                print(f"Error: {event.message}", file=sys.stderr)
                faulted = True
                break
            print(format_event(event), flush=True)
    return 1 if faulted else 0


def main() -> None:
    p = argparse.ArgumentParser(description="Follow GTFO session logs and print what the level contains.")
    p.add_argument("--log-dir", type=Path, default=None, help="Directory with the game's session logs")
    p.add_argument("--file", type=Path, default=None, help="Tail this file instead of watching the log directory")
    p.add_argument("--poll-ms", type=_poll_ms, default=None, help=f"Tail/parse tick in ms (>= {MIN_POLL_MS})")
    args = p.parse_args()

    configure_logging()
    try:
        cfg = resolve_config()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.log_dir is not None:
        cfg = replace(cfg, log_dir=args.log_dir.expanduser())
    if args.poll_ms is not None:
        seconds = args.poll_ms / 1000
        cfg = replace(cfg, tail_interval=seconds, parse_interval=seconds)

    file = args.file.expanduser() if args.file is not None else None
    if file is not None and not file.is_file():
        print(f"File not found: {file}", file=sys.stderr)
        raise SystemExit(2)

    try:
        code = asyncio.run(_run(cfg, file))
    except KeyboardInterrupt:
        code = 0
    raise SystemExit(code)


if __name__ == "__main__":
    main()
