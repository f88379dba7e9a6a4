"""Derived metrics: today's progress, consistency streak, weekly histogram.

All three are recomputed from a snapshot of blocks on demand; nothing here
is persisted.
"""

from __future__ import annotations

import math

from dayblocks.clock import previous_day
from dayblocks.models import Block, DayCount

STREAK_LOOKBACK_DAYS = 365
WEEK_DAYS = 7


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def progress(blocks: list[Block], today: str) -> int:
    """Percent of today's blocks that are completed, rounded; 0 with none."""
    todays = [b for b in blocks if b.date == today]
    if not todays:
        return 0
    done = sum(1 for b in todays if b.completed)
    return _round_half_up(done / len(todays) * 100)


def completed_days(blocks: list[Block]) -> set[str]:
    """Dates that have at least one completed block."""
    return {b.date for b in blocks if b.completed}


def streak(blocks: list[Block], today: str, lookback: int = STREAK_LOOKBACK_DAYS) -> int:
    """Consecutive days, ending today, with at least one completed block.

    Today counts too: until something is checked off today the streak is 0.
    """
    done_days = completed_days(blocks)
    count = 0
    day = today
    for _ in range(lookback):
        if day not in done_days:
            break
        count += 1
        day = previous_day(day)
    return count


def weekly_histogram(blocks: list[Block], dates: list[str]) -> list[DayCount]:
    """Completed-block count for each of *dates*, in the order given."""
    counts: dict[str, int] = {}
    for b in blocks:
        if b.completed:
            counts[b.date] = counts.get(b.date, 0) + 1
    return [DayCount(date=d, completed=counts.get(d, 0)) for d in dates]
