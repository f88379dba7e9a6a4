"""Per-day manual ordering of blocks.

Every date partition keeps ``order`` values dense: 0..n-1, each used once.
Functions here are pure over lists of Block and return new Block objects
for anything they renumber; callers decide when to persist.
"""

from __future__ import annotations

import logging

from dayblocks.models import Block

logger = logging.getLogger(__name__)


def partition(blocks: list[Block], day: str) -> list[Block]:
    """Blocks dated *day*, sorted by display order.

    Ties keep their position in *blocks* (sort is stable).
    """
    return sorted((b for b in blocks if b.date == day), key=lambda b: b.order)


def append(blocks: list[Block], day: str) -> int:
    """Order value for a block added at the end of *day*'s list."""
    return sum(1 for b in blocks if b.date == day)


def _renumber(blocks: list[Block], day: str, sequence: list[Block]) -> list[Block]:
    """Replace *day*'s blocks with *sequence*, numbered by position."""
    new_orders = {b.id: i for i, b in enumerate(sequence)}
    result = []
    for b in blocks:
        if b.date == day and b.order != new_orders[b.id]:
            result.append(b.copy(order=new_orders[b.id]))
        else:
            result.append(b)
    return result


def normalize(blocks: list[Block], day: str | None = None) -> list[Block]:
    """Repair order density for one date, or for every date when *day* is None.

    Relative order is preserved; gaps close and duplicate values are broken
    by position in *blocks*.
    """
    days = [day] if day is not None else sorted({b.date for b in blocks})
    for d in days:
        blocks = _renumber(blocks, d, partition(blocks, d))
    return blocks


def reorder(
    blocks: list[Block], day: str, moved_id: str, target_id: str
) -> tuple[list[Block], bool]:
    """Move *moved_id* to the slot held by *target_id* within *day*.

    Items between the two shift by one. Returns (blocks, changed); unknown
    ids, ids outside *day* and moved == target leave *blocks* untouched.
    """
    if moved_id == target_id:
        return blocks, False

    items = partition(blocks, day)
    ids = [b.id for b in items]
    if moved_id not in ids or target_id not in ids:
        logger.info("Reorder %s -> %s rejected: not both on %s", moved_id, target_id, day)
        return blocks, False

    old_index = ids.index(moved_id)
    new_index = ids.index(target_id)
    moved = items.pop(old_index)
    items.insert(new_index, moved)
    return _renumber(blocks, day, items), True


def is_dense(blocks: list[Block]) -> bool:
    """True when every date partition holds orders 0..n-1 exactly once."""
    by_day: dict[str, list[int]] = {}
    for b in blocks:
        by_day.setdefault(b.date, []).append(b.order)
    return all(sorted(orders) == list(range(len(orders))) for orders in by_day.values())
