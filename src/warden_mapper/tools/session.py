"""MCP tool implementations.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from warden_mapper.core.models import ZoneKey
from warden_mapper.core.pipeline import Pipeline
from warden_mapper.core.session import SessionTracker
from warden_mapper.core.snapshot import snapshot_session, zone_items_model

DIMENSION_PREFIX = "Dimension_"


def _normalize_dimension(dimension: str | None) -> str | None:
    """Accept 'Reality', 'Dimension_1' or a bare '1'."""
    if dimension is None:
        return None
    d = dimension.strip()
    if not d:
        return None
    if d.isdigit():
        return f"{DIMENSION_PREFIX}{d}"
    return d


def session_snapshot_impl(tracker: SessionTracker) -> dict[str, Any]:
    """Implementation for the `current_session` MCP tool."""
    return snapshot_session(tracker).model_dump(mode="json")


def zone_items_impl(
    tracker: SessionTracker,
    *,
    alias: int,
    dimension: str | None = None,
) -> dict[str, Any]:
    """Implementation for the `zone_items` MCP tool.

    Raises ValueError when no such zone has been seen in the current session.
    """
    if alias < 0:
        raise ValueError("alias must be >= 0")
    key = ZoneKey(alias, _normalize_dimension(dimension))
    session = tracker.session
    zone = session.find_zone(key)
    if zone is None:
        where = f" in {key.dimension}" if key.dimension else ""
        raise ValueError(f"Zone {alias}{where} not found in the current session.")
    return zone_items_model(session, zone).model_dump(mode="json")


def open_log_impl(pipeline: Pipeline, *, path: str) -> dict[str, Any]:
    """Implementation for the `open_log` MCP tool.

    Raises PipelineStopped when the tailer has already exited after a fault.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        raise FileNotFoundError(f"File not found: {p}")
    resolved = p.resolve()
    pipeline.open(resolved)
    return {"opened": str(resolved)}
