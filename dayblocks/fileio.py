"""File helpers for the DayBlocks workspace.

Every write goes through ``atomic_write``: the content lands in a hidden
sibling of the target, is flushed to disk under an exclusive flock and then
replaces the target in one step. Readers therefore see either the old file or
the new one, never a half-written snapshot.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml


def read_text(path: Path) -> str:
    """File contents, or "" when the file does not exist."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def read_json(path: Path) -> Any:
    """Decoded JSON document, or None when the file is missing or blank.

    Parse errors propagate; callers decide whether a bad file is fatal.
    """
    text = read_text(path)
    return json.loads(text) if text.strip() else None


def read_yaml(path: Path) -> dict[str, Any]:
    """YAML mapping from path; anything other than a mapping reads as {}."""
    text = read_text(path)
    loaded = yaml.safe_load(text) if text.strip() else None
    return loaded if isinstance(loaded, dict) else {}


def atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, staged = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fcntl.flock(handle, fcntl.LOCK_EX)
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        # Closing the handle releases the lock.
        os.replace(staged, path)
    except BaseException:
        Path(staged).unlink(missing_ok=True)
        raise


def write_json_atomic(path: Path, data: Any) -> None:
    atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def write_yaml_atomic(path: Path, data: dict[str, Any]) -> None:
    atomic_write(path, yaml.safe_dump(data, allow_unicode=True, sort_keys=False))


def quarantine(path: Path) -> Path | None:
    """Move an unreadable file aside to <name>.corrupt. Returns the new path."""
    if not path.exists():
        return None
    target = path.with_name(path.name + ".corrupt")
    os.replace(path, target)
    return target
