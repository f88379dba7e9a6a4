"""Lifecycle hooks for DayBlocks.

Hooks run shell commands when blocks change. Configured via hooks.yaml in
the workspace root:

    on_block_completed:
      - notify-send "Block done"
      - command: ./sync.sh
        timeout: 10

Hook points:
- on_block_added, on_block_completed, on_block_deleted
- post_recurrence

Hooks run synchronously inside the block operation that fired them, after
the change is saved. An entry without its own timeout gets DEFAULT_TIMEOUT
seconds so a stuck command cannot stall the app for long.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from dayblocks.fileio import read_yaml
from dayblocks.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)


VALID_HOOK_POINTS = {
    "on_block_added",
    "on_block_completed",
    "on_block_deleted",
    "post_recurrence",
}

DEFAULT_TIMEOUT = 5


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks configuration from hooks.yaml."""
    if root is None:
        root = workspace_root()
    path = hooks_config_path(root)
    if not path.exists():
        return {}
    try:
        return read_yaml(path)
    except Exception as e:
        logger.warning("Ignoring unreadable hooks config %s: %s", path, e)
        return {}


def _parse_entry(hook: Any) -> tuple[str, float] | None:
    """(command, timeout) for a hooks.yaml entry, or None if it is unusable."""
    if isinstance(hook, str):
        command, timeout = hook, DEFAULT_TIMEOUT
    elif isinstance(hook, dict):
        command, timeout = hook.get("command", ""), hook.get("timeout", DEFAULT_TIMEOUT)
    else:
        return None
    if not command:
        return None
    try:
        return str(command), float(timeout)
    except (TypeError, ValueError):
        return str(command), DEFAULT_TIMEOUT


def _run_one(command: str, timeout: float, payload: str, root: Path) -> dict[str, Any]:
    try:
        proc = subprocess.run(
            command,
            shell=True,
            input=payload,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(root),
        )
    except subprocess.TimeoutExpired:
        logger.warning("Hook %r timed out after %ss", command, timeout)
        return {"exit_code": -1, "error": f"Hook timed out after {timeout:g}s"}
    except OSError as e:
        logger.warning("Hook %r failed to start: %s", command, e)
        return {"exit_code": -1, "error": str(e)}

    if proc.returncode != 0:
        logger.warning("Hook %r exited with %d", command, proc.returncode)
    # Cap captured output
    return {
        "exit_code": proc.returncode,
        "stdout": proc.stdout[:4096],
        "stderr": proc.stderr[:4096],
    }


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for *hook_point*.

    The context, plus the hook point name, is sent to each command as JSON
    on stdin. Failures and timeouts are reported in the returned result
    dicts and never raised.
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.debug("Unknown hook point %s", hook_point)
        return []

    if root is None:
        root = workspace_root()

    entries = load_hooks_config(root).get(hook_point) or []
    if not isinstance(entries, list):
        return []

    payload = json.dumps({"hook_point": hook_point, **context}, ensure_ascii=False)
    results = []
    for entry in entries:
        parsed = _parse_entry(entry)
        if parsed is None:
            continue
        command, timeout = parsed
        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        result.update(_run_one(command, timeout, payload, root))
        results.append(result)
    return results
