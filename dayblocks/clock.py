"""Calendar adapters that tell the engine what "today" is.

The engine never reads the wall clock itself; it asks a clock object, so
tests can pin the date with FixedClock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo


def trailing_dates(today: str, n: int) -> list[str]:
    """The n ISO dates ending at *today*, oldest first."""
    end = date.fromisoformat(today)
    return [(end - timedelta(days=n - 1 - i)).isoformat() for i in range(n)]


def previous_day(day: str) -> str:
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()


class SystemClock:
    """Local calendar date, optionally pinned to an IANA timezone."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self.tz = tz

    def today(self) -> str:
        if self.tz is None:
            return datetime.now().date().isoformat()
        return datetime.now(self.tz).date().isoformat()

    def trailing(self, n: int) -> list[str]:
        return trailing_dates(self.today(), n)


class FixedClock:
    """A clock that always reports the same day until told otherwise."""

    def __init__(self, day: str) -> None:
        date.fromisoformat(day)
        self.day = day

    def today(self) -> str:
        return self.day

    def trailing(self, n: int) -> list[str]:
        return trailing_dates(self.day, n)

    def advance(self, days: int = 1) -> str:
        self.day = (date.fromisoformat(self.day) + timedelta(days=days)).isoformat()
        return self.day
