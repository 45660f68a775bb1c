"""Injectable clock.

Projection and alert timestamps never read the system time directly; they
receive a Clock so tests can pin "today" to any date.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta, tzinfo


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Production clock returning the actual system time.

    ``today()`` is the calendar date in ``tz``, which defaults to UTC. Around
    midnight that can differ from the German date, so callers that decide
    tax-year membership should pass ``ZoneInfo("Europe/Berlin")``.
    """

    def __init__(self, tz: tzinfo = UTC) -> None:
        self.tz = tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """Clock pinned to a given instant, for tests and replays."""

    def __init__(self, fixed: datetime | date | None = None):
        if fixed is None:
            fixed = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        elif not isinstance(fixed, datetime):
            fixed = datetime(fixed.year, fixed.month, fixed.day, 12, 0, tzinfo=UTC)
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed

    def set(self, fixed: datetime | date) -> None:
        if not isinstance(fixed, datetime):
            fixed = datetime(fixed.year, fixed.month, fixed.day, 12, 0, tzinfo=UTC)
        self._fixed = fixed

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self._fixed = self._fixed + timedelta(days=days, hours=hours)
