from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class WindowHit:
    """Outcome of counting one request against a fixed window"""

    allowed: bool
    count: int
    window_start: float


class RateWindowStore(ABC):
    """
    Short-TTL storage for fixed-window counters.

    ``hit`` must be atomic per key and must let a window's state expire no
    later than ``window_seconds`` after the window started.
    """

    @abstractmethod
    async def hit(self, key: str, limit: int, window_seconds: int, now: float) -> WindowHit:
        """
        Count a request.

        - No window, or the window elapsed: start a new one with count=1, allow
        - count >= limit: deny without incrementing
        - Otherwise: increment and allow
        """
        pass

    async def close(self) -> None:
        """Release connections held by the store"""
        return None
