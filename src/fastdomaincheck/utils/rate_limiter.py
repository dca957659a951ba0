"""Pacing policies applied between domain checks."""

import time
from typing import Callable


class FixedDelayLimiter:
    """Sleep a fixed amount after every check."""
    
    def __init__(self, delay: float = 0.3, sleep: Callable[[float], None] = time.sleep):
        if delay < 0:
            raise ValueError('delay must be non-negative')
        self.delay = delay
        self._sleep = sleep
    
    def wait(self):
        if self.delay > 0:
            self._sleep(self.delay)


class TokenBucketLimiter:
    """Token bucket allowing short bursts while capping the sustained rate.
    
    Args:
        rate: Tokens added per second (sustained checks per second)
        capacity: Maximum burst size
    """
    
    def __init__(
        self,
        rate: float = 1 / 0.3,
        capacity: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        if rate <= 0:
            raise ValueError('rate must be positive')
        if capacity < 1:
            raise ValueError('capacity must be at least 1')
        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(capacity)
        self._last_refill = clock()
    
    def _refill(self):
        now = self._clock()
        elapsed = now - self._last_refill
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._last_refill = now
    
    def wait(self):
        """Consume one token, sleeping until one is available."""
        self._refill()
        if self._tokens < 1:
            self._sleep((1 - self._tokens) / self.rate)
            self._refill()
        self._tokens = max(0.0, self._tokens - 1)
