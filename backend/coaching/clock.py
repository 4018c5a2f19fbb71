"""Time providers.

Services never read the wall clock directly; they take a clock so that
"today" can be pinned in tests.
"""
import datetime

from django.utils import timezone


class SystemClock:
    def now(self) -> datetime.datetime:
        return timezone.now()

    def today(self) -> datetime.date:
        return timezone.localdate()


class FixedClock:
    def __init__(self, now: datetime.datetime):
        if timezone.is_naive(now):
            now = timezone.make_aware(now)
        self._now = now

    @classmethod
    def on(cls, day: datetime.date, hour: int = 12):
        return cls(datetime.datetime(day.year, day.month, day.day, hour))

    def now(self) -> datetime.datetime:
        return self._now

    def today(self) -> datetime.date:
        return timezone.localdate(self._now)


system_clock = SystemClock()
