"""The DayBlocks session: one user's block list, wired for a host app.

A presentation layer creates one ``DayBlocks`` and calls its methods; it
never touches the store or the engines directly. Each call first checks the
clock so a session left open past midnight rolls into the new day and runs
the recurrence pass exactly once for it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from dayblocks import metrics, ordering
from dayblocks.clock import FixedClock, SystemClock
from dayblocks.hooks import run_hooks
from dayblocks.models import CATEGORIES, Block, DayCount, Settings
from dayblocks.recurrence import propagate
from dayblocks.store import BlockStore
from dayblocks.workspace import blocks_path, load_settings, system_clock

logger = logging.getLogger(__name__)


def validate_new_block(title: str, category: str) -> list[str]:
    """Validate user input for a new block and return errors (empty if valid)."""
    errors = []
    if not (title or "").strip():
        errors.append("Title must not be empty")
    if category not in CATEGORIES:
        errors.append(f"Invalid category: {category}")
    return errors


class DayBlocks:
    """Session facade over the block store, recurrence, ordering and metrics.

    With a *root* the session persists to ``<root>/blocks.json`` and reads
    settings and hooks from the same directory. Without one it needs an
    explicit *store* and runs with default settings and no hooks.
    """

    def __init__(
        self,
        root: Path | None = None,
        store: BlockStore | None = None,
        clock: SystemClock | FixedClock | None = None,
        settings: Settings | None = None,
    ) -> None:
        if root is None and store is None:
            raise ValueError("DayBlocks needs a workspace root or a store")
        self.root = root
        self.settings = settings or (load_settings(root) if root else Settings())
        self.store = store if store is not None else BlockStore(blocks_path(root))
        self.clock = clock or (system_clock(root) if root else SystemClock())
        self._propagated_for: str | None = None

    # -------------------- day handling --------------------

    def today(self) -> str:
        """Today's date; runs the recurrence pass on the first sight of a day."""
        day = self.clock.today()
        if day != self._propagated_for:
            self.run_recurrence(day)
        return day

    def run_recurrence(self, day: str | None = None) -> list[Block]:
        """Generate today's recurring instances (no-op once satisfied)."""
        if day is None:
            day = self.clock.today()
        added = propagate(self.store, day)
        self._propagated_for = day
        if added:
            self._hook("post_recurrence", {"date": day, "blocks": [b.to_dict() for b in added]})
        return added

    def _hook(self, hook_point: str, context: dict[str, Any]) -> None:
        if self.root is not None:
            run_hooks(hook_point, context, self.root)

    # -------------------- mutations --------------------

    def add_block(
        self, title: str, category: str | None = None, is_recurring: bool = False
    ) -> tuple[Block | None, list[str]]:
        """Append a block to today's list. Returns (block, errors)."""
        if category is None:
            category = self.settings.default_category
        errors = validate_new_block(title, category)
        if errors:
            logger.info("Block not added: %s", "; ".join(errors))
            return None, errors

        day = self.today()
        block = Block(
            id=self.store.new_id(),
            title=title,
            completed=False,
            category=category,
            date=day,
            is_recurring=bool(is_recurring),
            order=ordering.append(self.store.get_all(), day),
        )
        block = self.store.insert(block)
        logger.debug("Added block %s on %s", block.id, day)
        self._hook("on_block_added", {"block": block.to_dict()})
        return block, []

    def toggle_completed(self, block_id: str) -> Block | None:
        """Flip a block's completed flag. None if the block does not exist."""
        self.today()
        updated = self.store.update(block_id, lambda b: b.copy(completed=not b.completed))
        if updated is None:
            logger.info("Toggle ignored, no block %s", block_id)
            return None
        if updated.completed:
            self._hook("on_block_completed", {"block": updated.to_dict()})
        return updated

    def delete_block(self, block_id: str, stop_recurring: bool = False) -> bool:
        """Delete a block. False if it does not exist.

        Deleting one instance of a recurring task leaves the series running.
        With *stop_recurring* every record of the series loses its recurring
        flag too, so no further days are generated.
        """
        self.today()
        target = self.store.get(block_id)
        if target is None:
            logger.info("Delete ignored, no block %s", block_id)
            return False

        key = target.series_key()

        def change(blocks: list[Block]) -> list[Block]:
            kept = [b for b in blocks if b.id != block_id]
            if stop_recurring and target.is_recurring:
                kept = [
                    b.copy(is_recurring=False) if b.is_recurring and b.series_key() == key else b
                    for b in kept
                ]
            return ordering.normalize(kept, target.date)

        self.store.transact(change)
        self._hook("on_block_deleted", {"block": target.to_dict(), "stop_recurring": stop_recurring})
        return True

    def reorder(self, moved_id: str, target_id: str) -> bool:
        """Move a block into another block's slot in today's list."""
        return self.store.reorder(self.today(), moved_id, target_id)

    # -------------------- reads --------------------

    def todays_blocks(self) -> list[Block]:
        return self.store.on_date(self.today())

    def progress(self) -> int:
        return metrics.progress(self.store.get_all(), self.today())

    def streak(self) -> int:
        return metrics.streak(self.store.get_all(), self.today(), metrics.STREAK_LOOKBACK_DAYS)

    def weekly_histogram(self) -> list[DayCount]:
        self.today()
        return metrics.weekly_histogram(
            self.store.get_all(), self.clock.trailing(metrics.WEEK_DAYS)
        )

    def summary(self) -> dict[str, Any]:
        """Everything a dashboard shows, as plain data."""
        day = self.today()
        return {
            "date": day,
            "blocks": [b.to_dict() for b in self.todays_blocks()],
            "progress": self.progress(),
            "streak": self.streak(),
            "weekly": [d.to_dict() for d in self.weekly_histogram()],
        }
