"""Pacing of subscription batches sent to the feed."""

import time
from abc import ABC, abstractmethod
from typing import Callable

from ..config.defaults import SubscriptionParams


class Pacer(ABC):
    """Decides when the next subscription batch may be sent."""

    @abstractmethod
    def acquire(self) -> None:
        """Block until one batch may be sent."""
        pass


class NoPacing(Pacer):
    """Sends batches back to back."""

    def acquire(self) -> None:
        return None


class TokenBucketPacer(Pacer):
    """
    Token bucket limiting the rate of subscription batches.

    The bucket starts full; each batch takes one token and tokens refill at
    `rate` per second up to `capacity`.
    """

    def __init__(
        self,
        rate: float,
        capacity: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep
    ):
        if rate <= 0:
            raise ValueError("rate must be positive")
        if capacity < 1:
            raise ValueError("capacity must be at least 1")

        self.rate = rate
        self.capacity = capacity
        self._clock = clock
        self._sleep = sleep
        self.tokens = float(capacity)
        self.last_update = clock()

    def acquire(self) -> None:
        now = self._clock()
        elapsed = now - self.last_update

        self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
        self.last_update = now

        if self.tokens >= 1:
            self.tokens -= 1
            return

        wait_time = (1 - self.tokens) / self.rate
        self._sleep(wait_time)
        self.tokens = 0.0
        self.last_update = self._clock()


def create_pacer(params: SubscriptionParams) -> Pacer:
    """Build the pacer selected by the subscription parameters."""
    if params.pacing == "none":
        return NoPacing()
    return TokenBucketPacer(rate=params.batches_per_second, capacity=params.burst)
