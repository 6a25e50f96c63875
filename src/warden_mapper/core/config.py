"""Runtime configuration and logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

LOG_DIR_ENV = "WARDEN_MAPPER_LOG_DIR"
MARKER_ENV = "WARDEN_MAPPER_MARKER"
POLL_MS_ENV = "WARDEN_MAPPER_POLL_MS"
LOG_LEVEL_ENV = "WARDEN_MAPPER_LOG_LEVEL"

DEFAULT_MARKER = "NETSTATUS"
MIN_POLL_MS = 10


def default_log_dir() -> Path:
    """Directory the game writes its per-session logs to."""
    return Path.home() / "AppData" / "LocalLow" / "10 Chambers Collective" / "GTFO"


@dataclass(frozen=True, slots=True)
class MapperConfig:
    log_dir: Path = field(default_factory=default_log_dir)
    # Substring identifying the session's network-status log file.
    marker: str = DEFAULT_MARKER
    tail_interval: float = 0.25
    parse_interval: float = 0.2
    encoding: str = "utf-8"
    decode_errors: str = "replace"
    shutdown_timeout: float = 5.0


def resolve_config(cfg: MapperConfig | None = None) -> MapperConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = MapperConfig()

    log_dir = os.getenv(LOG_DIR_ENV)
    if log_dir:
        cfg = replace(cfg, log_dir=Path(log_dir).expanduser())

    marker = os.getenv(MARKER_ENV)
    if marker is not None:
        if not marker.strip():
            raise ValueError(f"{MARKER_ENV} must not be empty")
        cfg = replace(cfg, marker=marker.strip())

    poll = os.getenv(POLL_MS_ENV)
    if poll is None or poll == "":
        return cfg

    try:
        value = int(poll)
    except ValueError as exc:
        raise ValueError(f"{POLL_MS_ENV} must be an integer") from exc
    if value < MIN_POLL_MS:
        raise ValueError(f"{POLL_MS_ENV} must be >= {MIN_POLL_MS}")

    seconds = value / 1000
    return replace(cfg, tail_interval=seconds, parse_interval=seconds)


def configure_logging() -> None:
    """Configure a reasonable default logging setup.

    Logs go to stderr so they never mix with CLI output or the stdio transport.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
