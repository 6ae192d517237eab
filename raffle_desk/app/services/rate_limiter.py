"""
Fixed-window rate limiting per (identity, action class).
"""

import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from raffle_desk.app.services.rate_window_store import RateWindowStore
from raffle_desk.domain.entities import RateClass


@dataclass(frozen=True)
class RateLimitRule:
    requests: int
    window_seconds: int


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    remaining: int = 0
    retry_after: Optional[int] = None


DEFAULT_RULES: Dict[RateClass, RateLimitRule] = {
    RateClass.read: RateLimitRule(requests=100, window_seconds=60),
    RateClass.write: RateLimitRule(requests=30, window_seconds=60),
    RateClass.search: RateLimitRule(requests=20, window_seconds=60),
    RateClass.auth: RateLimitRule(requests=10, window_seconds=60),
}


def rules_from_config(raw: Optional[Mapping[str, Mapping[str, int]]]) -> Dict[RateClass, RateLimitRule]:
    """Build rules from the RATE_LIMITS config mapping, falling back to defaults per class."""
    rules = dict(DEFAULT_RULES)
    for name, rule in (raw or {}).items():
        rules[RateClass(name)] = RateLimitRule(
            requests=int(rule["requests"]),
            window_seconds=int(rule["window_seconds"]),
        )
    return rules


class RateLimiter:
    """
    Counts requests per (identity, class) in fixed windows.

    Business Rules:
    - Each class has its own limit and window length
    - A denied request does not consume quota
    - retry_after is the whole seconds until the current window ends
    """

    def __init__(
        self,
        store: RateWindowStore,
        rules: Optional[Dict[RateClass, RateLimitRule]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.rules = rules or dict(DEFAULT_RULES)
        self.clock = clock

    @staticmethod
    def _key(identity: str, rate_class: RateClass) -> str:
        return f"rate:{rate_class.value}:{identity}"

    async def check(self, identity: str, rate_class: RateClass) -> RateDecision:
        rule = self.rules[rate_class]
        now = self.clock()
        hit = await self.store.hit(
            self._key(identity, rate_class), rule.requests, rule.window_seconds, now
        )

        if not hit.allowed:
            retry_after = math.ceil(hit.window_start + rule.window_seconds - now)
            return RateDecision(allowed=False, remaining=0, retry_after=max(1, retry_after))

        return RateDecision(allowed=True, remaining=max(0, rule.requests - hit.count))
