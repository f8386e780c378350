"""
Wall-clock access for scheduling and presence decisions.

Services never call datetime.now() themselves; they receive a clock so that
tests can pin "now" to a fixed instant.
"""
from datetime import datetime, timedelta


class ReviewClock:
    """Supplies the current local time."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(ReviewClock):
    """Clock frozen at a given instant; advance() moves it forward."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current
