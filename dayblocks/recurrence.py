"""Daily regeneration of recurring blocks.

A recurring block carries on into every day the app sees. When a new day is
observed, each recurring series that has no instance dated today gets one
fresh, unchecked copy appended to today's list.

Series identity: a recurring block either started a series (its own id is
the key) or was generated from one (``template_id`` holds the key). Only the
newest record of each series is cloned, so a task that has recurred for ten
days still yields a single instance today.
"""

from __future__ import annotations

import logging

from dayblocks import ordering
from dayblocks.models import Block
from dayblocks.store import BlockStore

logger = logging.getLogger(__name__)


def has_recurring_today(blocks: list[Block], today: str) -> bool:
    return any(b.is_recurring and b.date == today for b in blocks)


def latest_per_series(blocks: list[Block], today: str) -> list[Block]:
    """Newest recurring record of each series, excluding *today*.

    Returned in order of each series' first appearance in *blocks*.
    """
    latest: dict[str, Block] = {}
    for b in blocks:
        if not b.is_recurring or b.date == today:
            continue
        key = b.series_key()
        if key not in latest or b.date >= latest[key].date:
            latest[key] = b
    return list(latest.values())


def plan_instances(blocks: list[Block], today: str, new_id) -> list[Block]:
    """Blocks the recurrence pass would add for *today* (pure).

    Empty when today already has a recurring instance: the pass has run.
    """
    if has_recurring_today(blocks, today):
        return []

    templates = latest_per_series(blocks, today)
    start = ordering.append(blocks, today)
    return [
        Block(
            id=new_id(),
            title=t.title,
            completed=False,
            category=t.category,
            date=today,
            is_recurring=True,
            order=start + i,
            template_id=t.series_key(),
        )
        for i, t in enumerate(templates)
    ]


def propagate(store: BlockStore, today: str) -> list[Block]:
    """Materialize today's recurring instances. Returns the blocks added.

    Running it again for the same *today* adds nothing.
    """
    blocks = store.get_all()
    planned = plan_instances(blocks, today, store.new_id)
    if not planned:
        logger.debug("Recurrence for %s already satisfied", today)
        return []
    added = store.insert_many(planned)
    logger.info("Generated %d recurring block(s) for %s", len(added), today)
    return added
