"""Typed dataclasses for the DayBlocks data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Any


CATEGORIES = ("Work", "Health", "Skill", "Personal")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


# ── Blocks ────────────────────────────────────────────────────


@dataclass
class Block:
    """One task record for one calendar day.

    A block with ``is_recurring`` set doubles as a template: the recurrence
    pass clones it onto every new day. ``template_id`` links generated
    instances back to the record that started the series.
    """

    id: str = ""
    title: str = ""
    completed: bool = False
    category: str = "Work"
    date: str = ""  # ISO date, no time component
    is_recurring: bool = False
    order: int = 0
    template_id: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Block:
        """Build a Block from a snapshot record.

        Raises ValueError/TypeError on records that cannot be interpreted,
        so a corrupt snapshot is detected rather than half-loaded.
        """
        if not isinstance(d, dict):
            raise TypeError(f"Block record must be an object, got {type(d).__name__}")
        if "id" not in d or d["id"] is None:
            raise ValueError("Block record is missing its id")
        day = str(d.get("date", ""))
        if date.fromisoformat(day).isoformat() != day:
            raise ValueError(f"Block date must be YYYY-MM-DD, got {day!r}")
        order = int(d.get("order", 0) or 0)
        template_id = d.get("templateId", d.get("template_id"))
        return cls(
            id=str(d["id"]),
            title=str(d.get("title", "")),
            completed=_as_bool(d.get("completed", False)),
            category=str(d.get("category", "Work")),
            date=day,
            is_recurring=_as_bool(d.get("isRecurring", d.get("is_recurring", False))),
            order=max(0, order),
            template_id=str(template_id) if template_id is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "category": self.category,
            "date": self.date,
            "isRecurring": self.is_recurring,
            "order": self.order,
        }
        if self.template_id is not None:
            d["templateId"] = self.template_id
        return d

    def series_key(self) -> str:
        """Identity of the logical recurring task this record belongs to."""
        return self.template_id or self.id

    def copy(self, **changes: Any) -> Block:
        return replace(self, **changes)


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str | None = None  # None -> system local date
    default_category: str = "Work"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        category = str(d.get("default_category", "Work"))
        if category not in CATEGORIES:
            category = "Work"
        tz = d.get("timezone")
        return cls(
            timezone=str(tz) if tz else None,
            default_category=category,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.timezone:
            d["timezone"] = self.timezone
        d["default_category"] = self.default_category
        return d


# ── Metrics ───────────────────────────────────────────────────


@dataclass
class DayCount:
    """One bar of the weekly histogram."""

    date: str = ""
    completed: int = 0

    @property
    def label(self) -> str:
        return self.date[5:]  # MM-DD

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.date, "label": self.label, "completed": self.completed}
