"""Workspace root, settings, timezone and path helpers for DayBlocks."""

from __future__ import annotations

import logging
import os
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dayblocks.clock import SystemClock
from dayblocks.fileio import read_yaml, write_yaml_atomic
from dayblocks.models import Settings

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Get the workspace root directory (holds blocks.json and settings.yaml)."""
    return Path(
        os.environ.get("DAYBLOCKS_ROOT", str(Path.home() / "dayblocks"))
    ).expanduser().resolve()


def load_settings(root: Path | None = None) -> Settings:
    """Load settings.yaml, falling back to defaults for anything missing."""
    if root is None:
        root = workspace_root()
    try:
        return Settings.from_dict(read_yaml(settings_path(root)))
    except Exception as e:
        logger.warning("Ignoring unreadable settings at %s: %s", settings_path(root), e)
        return Settings()


def get_user_timezone(root: Path | None = None) -> tzinfo | None:
    """Timezone from settings.yaml; None means the system's local date."""
    name = load_settings(root).timezone
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using local time", name)
        return None


def system_clock(root: Path | None = None) -> SystemClock:
    """Clock reading the local calendar date in the configured timezone."""
    return SystemClock(get_user_timezone(root))


def today_str(root: Path | None = None) -> str:
    """Get today's date string (YYYY-MM-DD) as a local calendar date."""
    return system_clock(root).today()


# ── Path helpers ──────────────────────────────────────────────

def blocks_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "blocks.json"


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "settings.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


def log_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "dayblocks.log"


def init_workspace(root: Path | None = None) -> Path:
    """Create the workspace directory and a default settings.yaml if missing."""
    if root is None:
        root = workspace_root()
    root.mkdir(parents=True, exist_ok=True)
    path = settings_path(root)
    if not path.exists():
        write_yaml_atomic(path, Settings().to_dict())
    return root
