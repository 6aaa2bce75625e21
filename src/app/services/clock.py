from abc import ABC, abstractmethod
from datetime import datetime

from src.domain.base import utcnow


class Clock(ABC):
    """Source of "now" for every expiry decision"""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as naive UTC"""
        pass


class SystemClock(Clock):
    def now(self) -> datetime:
        return utcnow()
