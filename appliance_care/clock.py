"""Clock abstraction so "today" is injected rather than read globally"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Union


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        pass

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in the host's local timezone"""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock(Clock):
    """Clock pinned to a single instant, used by tests and replays"""

    def __init__(self, instant: Union[date, datetime]):
        if not isinstance(instant, datetime):
            instant = datetime(instant.year, instant.month, instant.day)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant
