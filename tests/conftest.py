"""Shared test fixtures for DayBlocks tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml

from dayblocks.clock import FixedClock
from dayblocks.models import Block
from dayblocks.session import DayBlocks


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and a small history."""
    root = tmp_path / "workspace"
    root.mkdir(parents=True)

    settings = {
        "default_category": "Work",
    }
    (root / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    snapshot = {
        "version": 1,
        "blocks": [
            {"id": "run-1", "title": "Run", "completed": True, "category": "Health",
             "date": "2024-01-01", "isRecurring": True, "order": 0},
            {"id": "email-1", "title": "Answer email", "completed": True, "category": "Work",
             "date": "2024-01-01", "isRecurring": False, "order": 1},
        ],
    }
    (root / "blocks.json").write_text(json.dumps(snapshot, indent=2), encoding="utf-8")

    os.environ["DAYBLOCKS_ROOT"] = str(root)
    yield root
    if "DAYBLOCKS_ROOT" in os.environ:
        del os.environ["DAYBLOCKS_ROOT"]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock("2024-01-02")


@pytest.fixture
def session(workspace: Path, clock: FixedClock) -> DayBlocks:
    return DayBlocks(workspace, clock=clock)


def make_block(id: str, date: str, order: int = 0, **kwargs) -> Block:
    """Shorthand for building blocks in tests."""
    kwargs.setdefault("title", f"Block {id}")
    return Block(id=id, date=date, order=order, **kwargs)
