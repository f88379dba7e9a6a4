"""Tests for dayblocks/workspace.py and dayblocks/fileio.py."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
import yaml

from dayblocks.fileio import quarantine, read_json, read_yaml, write_json_atomic
from dayblocks.workspace import (
    blocks_path,
    get_user_timezone,
    init_workspace,
    load_settings,
    today_str,
    workspace_root,
)


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()
    assert blocks_path() == workspace.resolve() / "blocks.json"


def test_timezone_from_settings(workspace):
    (workspace / "settings.yaml").write_text(yaml.dump({"timezone": "Asia/Tokyo"}), encoding="utf-8")
    assert get_user_timezone(workspace) == ZoneInfo("Asia/Tokyo")
    assert today_str(workspace) == datetime.now(ZoneInfo("Asia/Tokyo")).date().isoformat()


def test_unknown_timezone_falls_back_to_local(workspace):
    (workspace / "settings.yaml").write_text(yaml.dump({"timezone": "Mars/Olympus"}), encoding="utf-8")
    assert get_user_timezone(workspace) is None


def test_no_timezone_uses_local_date(workspace):
    assert get_user_timezone(workspace) is None
    assert today_str(workspace) == datetime.now().date().isoformat()


def test_unreadable_settings_use_defaults(workspace):
    (workspace / "settings.yaml").write_text("default_category: [", encoding="utf-8")
    assert load_settings(workspace).default_category == "Work"


def test_init_workspace_writes_default_settings(tmp_path):
    root = init_workspace(tmp_path / "fresh")
    data = read_yaml(root / "settings.yaml")
    assert data["default_category"] == "Work"


def test_init_workspace_keeps_existing_settings(workspace):
    (workspace / "settings.yaml").write_text(yaml.dump({"default_category": "Skill"}), encoding="utf-8")
    init_workspace(workspace)
    assert load_settings(workspace).default_category == "Skill"


def test_read_json_missing_and_blank(tmp_path):
    assert read_json(tmp_path / "nope.json") is None
    (tmp_path / "blank.json").write_text("  \n", encoding="utf-8")
    assert read_json(tmp_path / "blank.json") is None


def test_write_json_atomic_leaves_no_temp_files(tmp_path):
    path = tmp_path / "nested" / "data.json"
    write_json_atomic(path, {"blocks": []})
    assert read_json(path) == {"blocks": []}
    assert [p.name for p in path.parent.iterdir()] == ["data.json"]


def test_quarantine(tmp_path):
    path = tmp_path / "blocks.json"
    assert quarantine(path) is None
    path.write_text("garbage", encoding="utf-8")
    moved = quarantine(path)
    assert moved.name == "blocks.json.corrupt"
    assert not path.exists()


def test_atomic_write_failure_keeps_previous_file(tmp_path, monkeypatch):
    path = tmp_path / "blocks.json"
    write_json_atomic(path, {"blocks": ["old"]})

    def refuse(src, dst):
        raise OSError("read-only filesystem")

    monkeypatch.setattr("dayblocks.fileio.os.replace", refuse)
    with pytest.raises(OSError):
        write_json_atomic(path, {"blocks": ["new"]})
    monkeypatch.undo()

    assert read_json(path) == {"blocks": ["old"]}
    assert [p.name for p in tmp_path.iterdir()] == ["blocks.json"]
