"""Durable block collection for DayBlocks.

The store is the only writer of block records. Every change goes through
``transact``, which applies the change to a working copy, checks the
collection invariants (unique ids, dense per-day order) and then swaps the
copy in and writes the whole snapshot to disk. A failed check leaves the
in-memory state and the file untouched.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Callable

from dayblocks import ordering
from dayblocks.fileio import quarantine, read_json, write_json_atomic
from dayblocks.models import Block

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def new_block_id() -> str:
    return uuid.uuid4().hex


# ── Snapshot codec ────────────────────────────────────────────


def decode_snapshot(data: Any) -> list[Block]:
    """Turn a parsed snapshot into blocks.

    Accepts ``{"version": 1, "blocks": [...]}`` or a bare list of block
    records. Raises ValueError/TypeError for anything else.
    """
    if data is None:
        return []
    if isinstance(data, dict):
        records = data.get("blocks")
        if records is None:
            records = []
    else:
        records = data
    if not isinstance(records, list):
        raise TypeError(f"Snapshot blocks must be a list, got {type(records).__name__}")
    return [Block.from_dict(r) for r in records]


def encode_snapshot(blocks: list[Block]) -> dict[str, Any]:
    return {"version": SNAPSHOT_VERSION, "blocks": [b.to_dict() for b in blocks]}


def _dedupe_ids(blocks: list[Block], id_factory: Callable[[], str]) -> list[Block]:
    seen: set[str] = set()
    result = []
    for b in blocks:
        if b.id in seen:
            fresh = id_factory()
            logger.warning("Duplicate block id %s in snapshot, reassigned to %s", b.id, fresh)
            b = b.copy(id=fresh)
        seen.add(b.id)
        result.append(b)
    return result


# ── Store ─────────────────────────────────────────────────────


class BlockStore:
    """All block records across all dates, persisted as one JSON snapshot.

    With ``path=None`` the store lives in memory only.
    """

    def __init__(
        self,
        path: Path | None = None,
        id_factory: Callable[[], str] = new_block_id,
    ) -> None:
        self.path = path
        self._new_id = id_factory
        self._blocks: list[Block] = self._load()

    # -------------------- persistence --------------------

    def _load(self) -> list[Block]:
        if self.path is None:
            return []
        try:
            blocks = decode_snapshot(read_json(self.path))
        except (OSError, ValueError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Snapshot %s is unreadable (%s); starting empty", self.path, e)
            try:
                moved = quarantine(self.path)
                if moved:
                    logger.warning("Kept unreadable snapshot as %s", moved)
            except OSError as qe:
                logger.warning("Could not move unreadable snapshot aside: %s", qe)
            return []
        blocks = _dedupe_ids(blocks, self._new_id)
        repaired = ordering.normalize(blocks)
        if repaired != blocks:
            logger.info("Repaired block ordering while loading %s", self.path)
        logger.debug("Loaded %d blocks from %s", len(repaired), self.path)
        return repaired

    def _persist(self, blocks: list[Block]) -> None:
        if self.path is None:
            return
        write_json_atomic(self.path, encode_snapshot(blocks))

    def reload(self) -> None:
        self._blocks = self._load()

    # -------------------- queries --------------------

    def get_all(self) -> list[Block]:
        """Copies of every block, in storage order."""
        return [b.copy() for b in self._blocks]

    def get(self, block_id: str) -> Block | None:
        for b in self._blocks:
            if b.id == block_id:
                return b.copy()
        return None

    def on_date(self, day: str) -> list[Block]:
        """Copies of *day*'s blocks in display order."""
        return [b.copy() for b in ordering.partition(self._blocks, day)]

    def new_id(self) -> str:
        existing = {b.id for b in self._blocks}
        while True:
            candidate = self._new_id()
            if candidate not in existing:
                return candidate

    def __len__(self) -> int:
        return len(self._blocks)

    # -------------------- writes --------------------

    def transact(self, change: Callable[[list[Block]], list[Block]]) -> list[Block]:
        """Apply *change* to a working copy, validate, commit, persist.

        Raises ValueError if the result breaks an invariant. The snapshot
        is written before the in-memory list is replaced, so a failed write
        (OSError) leaves memory and disk both at the previous state.
        """
        result = change(self.get_all())
        ids = [b.id for b in result]
        if len(ids) != len(set(ids)):
            raise ValueError("Block ids must be unique")
        if any(not b.id for b in result):
            raise ValueError("Every block needs an id")
        if not ordering.is_dense(result):
            raise ValueError("Block order must be dense within each date")
        self._persist(result)
        self._blocks = result
        return self.get_all()

    def insert(self, block: Block) -> Block:
        return self.insert_many([block])[0]

    def insert_many(self, new_blocks: list[Block]) -> list[Block]:
        """Insert several blocks as one write. Blocks without an id get one.

        Each block keeps its requested order when that slot is free; blocks
        competing for a slot land after the ones already there.
        """
        prepared = []
        taken = {b.id for b in self._blocks}
        for b in new_blocks:
            if not b.id:
                b = b.copy(id=self.new_id())
            if b.id in taken:
                raise ValueError(f"Block id already exists: {b.id}")
            taken.add(b.id)
            prepared.append(b.copy())
        days = {b.date for b in prepared}

        def change(blocks: list[Block]) -> list[Block]:
            blocks = blocks + prepared
            for d in sorted(days):
                blocks = ordering.normalize(blocks, d)
            return blocks

        committed = {b.id: b for b in self.transact(change)}
        return [committed[b.id] for b in prepared]

    def update(self, block_id: str, mutation: Callable[[Block], Block]) -> Block | None:
        """Replace one block with ``mutation(block)``.

        Identity, date and order are owned by the store and the ordering
        functions; a mutation that changes them raises ValueError.
        """
        current = self.get(block_id)
        if current is None:
            return None
        updated = mutation(current.copy())
        if (updated.id, updated.date, updated.order) != (current.id, current.date, current.order):
            raise ValueError("update() cannot change id, date or order")

        self.transact(lambda blocks: [updated if b.id == block_id else b for b in blocks])
        return updated.copy()

    def remove(self, block_id: str) -> Block | None:
        """Delete a block and close the gap it leaves in its day's order."""
        current = self.get(block_id)
        if current is None:
            return None
        self.transact(
            lambda blocks: ordering.normalize(
                [b for b in blocks if b.id != block_id], current.date
            )
        )
        return current

    def reorder(self, day: str, moved_id: str, target_id: str) -> bool:
        """Drag *moved_id* onto *target_id*'s slot within *day*."""
        blocks, changed = ordering.reorder(self.get_all(), day, moved_id, target_id)
        if changed:
            self.transact(lambda _: blocks)
        return changed
