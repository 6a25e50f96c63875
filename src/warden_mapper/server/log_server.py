"""MCP server entrypoint (stdio transport).

This module wires together:
- Lifespan: the tail → parse pipeline and a session tracker following it
- Tools: query the live session, point the tailer at a specific file
- Resources: help text, a sample session log, schemas and configuration

Run locally (stdio):
    python -m warden_mapper.server.log_server
"""

import asyncio
import logging
import sys
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from warden_mapper.core.config import configure_logging
from warden_mapper.core.pipeline import Pipeline, open_pipeline
from warden_mapper.core.session import SessionTracker
from warden_mapper.resources.registry import register_resources
from warden_mapper.tools.session import open_log_impl, session_snapshot_impl, zone_items_impl

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    tracker: SessionTracker
    pipeline: Pipeline


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    """Run the pipeline for as long as the server is up."""
    tracker = SessionTracker()
    follower: asyncio.Task[None] | None = None
    try:
        async with open_pipeline() as pipeline:
            follower = asyncio.create_task(tracker.follow(pipeline.events), name="session tracker")
            yield AppContext(tracker=tracker, pipeline=pipeline)
    finally:
        # The event channel is closed once the pipeline has shut down.
        if follower is not None:
            await follower


mcp = FastMCP("warden-mapper", json_response=True, lifespan=app_lifespan)

register_resources(mcp)


def _app(ctx: Context) -> AppContext:
    return ctx.request_context.lifespan_context


@mcp.tool()
def current_session(ctx: Context) -> dict[str, Any]:
    """Return the current session: seeds, expedition, zones with their items.

    Returns
    -------
    dict:
        SessionSnapshot as JSON (see app://warden-mapper/schemas/session-snapshot).
        ``status`` is one of "waiting", "in_session", "in_level".
    """
    return session_snapshot_impl(_app(ctx).tracker)


@mcp.tool()
def zone_items(alias: int, ctx: Context, dimension: str | None = None) -> dict[str, Any]:
    """Return the items placed in one zone of the current session.

    Parameters
    ----------
    alias:
        Zone number as shown in game (49 for ZONE_49).
    dimension:
        Optional dimension name (e.g. "Reality", "Dimension_1" or just "1").
        When omitted, the first zone with that alias is used.
    """
    return zone_items_impl(_app(ctx).tracker, alias=alias, dimension=dimension)


@mcp.tool()
def open_log(path: str, ctx: Context) -> dict[str, Any]:
    """Tail a specific log file instead of the newest one in the log directory.

    The current session is cleared and rebuilt from the file's contents.
    """
    return open_log_impl(_app(ctx).pipeline, path=path)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    _ = argv or sys.argv[1:]
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
