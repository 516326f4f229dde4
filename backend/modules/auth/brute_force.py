"""
Brute-force protection for login.

Counts failed authentication attempts per key (a client IP, or a username /
account number) and imposes a Fibonacci back-off once the free retries are
used up. Counters live in process memory, which is enough for a single
instance; several instances would need a shared store.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .exceptions import TooManyAttemptsError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BruteForceCounter:
    """Failure history for one key."""

    count: int
    first_failure: datetime
    last_failure: datetime
    next_allowed: Optional[datetime] = None


class BruteForceLimiter:
    """
    Per-key failed-attempt limiter with Fibonacci back-off.

    After ``free_retries`` failures, each further failure pushes the next
    allowed attempt out by the next delay in ``min_wait, 2*min_wait,
    3*min_wait, 5*min_wait, ...``, capped at ``max_wait``. ``free_retries``
    is the number of failures tolerated; the attempt after them already
    waits. A counter is dropped once ``lifetime`` passes without a new
    failure, either when its key is next seen or by the periodic sweep in
    ``record_failure``.
    """

    def __init__(
        self,
        free_retries: int = 3,
        min_wait: timedelta = timedelta(minutes=5),
        max_wait: timedelta = timedelta(hours=1),
        lifetime: timedelta = timedelta(hours=24),
        message: str = "Too many failed attempts. Please try again later.",
        clock: Callable[[], datetime] = _utcnow,
    ):
        if free_retries < 0:
            raise ValueError("free_retries cannot be negative")
        if min_wait <= timedelta(0) or max_wait < min_wait:
            raise ValueError("Need 0 < min_wait <= max_wait")

        self.free_retries = free_retries
        self.min_wait = min_wait
        self.max_wait = max_wait
        self.lifetime = lifetime
        self.message = message
        self._clock = clock
        self._delays = self._build_delays(min_wait, max_wait)
        self._counters: dict[str, BruteForceCounter] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @staticmethod
    def _build_delays(min_wait: timedelta, max_wait: timedelta) -> list[timedelta]:
        delays = [min_wait]
        while delays[-1] < max_wait:
            previous = delays[-2] if len(delays) > 1 else min_wait
            delays.append(delays[-1] + previous)
        delays[-1] = max_wait
        return delays

    def _delay_for(self, count: int) -> Optional[timedelta]:
        if count < self.free_retries:
            return None
        index = min(count - self.free_retries, len(self._delays) - 1)
        return self._delays[index]

    def _live_counter(self, key: str, now: datetime) -> Optional[BruteForceCounter]:
        counter = self._counters.get(key)
        if counter is not None and now - counter.last_failure > self.lifetime:
            del self._counters[key]
            return None
        return counter

    def _sweep(self, now: datetime) -> None:
        """Drop expired counters, at most once per ``min_wait``. Caller holds the lock."""
        if now - self._last_sweep < self.min_wait:
            return
        expired = [
            key for key, counter in self._counters.items()
            if now - counter.last_failure > self.lifetime
        ]
        for key in expired:
            del self._counters[key]
        self._last_sweep = now
        if expired:
            logger.debug(f"Dropped {len(expired)} expired brute-force counters")

    def __len__(self) -> int:
        with self._lock:
            return len(self._counters)

    def check(self, key: str) -> None:
        """
        Reject the attempt if the key is still locked out.

        Raises:
            TooManyAttemptsError: carrying the next valid request date
        """
        now = self._clock()
        with self._lock:
            counter = self._live_counter(key, now)
            next_allowed = counter.next_allowed if counter else None

        if next_allowed is not None and now < next_allowed:
            logger.warning(f"Brute-force lockout in effect until {next_allowed.isoformat()}")
            raise TooManyAttemptsError(self.message, next_allowed, key=key)

    def record_failure(self, key: str) -> BruteForceCounter:
        """Count a failed attempt and recompute the next allowed time."""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            counter = self._live_counter(key, now)
            if counter is None:
                counter = BruteForceCounter(count=0, first_failure=now, last_failure=now)
                self._counters[key] = counter

            counter.count += 1
            counter.last_failure = now
            delay = self._delay_for(counter.count)
            counter.next_allowed = now + delay if delay else None
            return BruteForceCounter(**vars(counter))

    def reset(self, key: str) -> None:
        """Forget a key's failures, e.g. after a successful login."""
        with self._lock:
            self._counters.pop(key, None)

    def get(self, key: str) -> Optional[BruteForceCounter]:
        """Snapshot of a key's counter, or None if it has none."""
        with self._lock:
            counter = self._live_counter(key, self._clock())
            return BruteForceCounter(**vars(counter)) if counter else None
