"""
Fixed Window Rate Limiter

Counts attempts per identifier (e.g. ``"login:203.0.113.7"``) inside
discrete, non-overlapping time windows.

Key features:
- Per-identifier state: OPEN while count < limit, BLOCKED until the window resets
- Atomic check-and-increment via a lock shared by all identifiers
- Injectable clock for deterministic tests
- Probabilistic sweep of expired entries instead of a background task

Known limitation: because windows are fixed, a client can land up to
2x the limit in a short burst straddling a window boundary. This is
accepted behaviour of the algorithm, not a bug.

Note: state is in-memory and per-process. It does not survive a restart
and is not shared between multiple server instances.
"""

import logging
import math
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """
    Raised when an identifier has used up its attempts for the current window.

    Attributes:
        identifier: Key that was rate limited
        retry_after_seconds: Whole seconds until the window resets (>= 1)
    """

    def __init__(self, identifier: str, retry_after_seconds: int):
        self.identifier = identifier
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"Rate limit exceeded. Try again in {retry_after_seconds} seconds."
        )


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of an accepted attempt."""
    limit: int
    remaining: int
    reset_at: float


@dataclass
class RateLimitEntry:
    """Counter for a single identifier."""
    count: int
    window_reset_at: float


class FixedWindowRateLimiter:
    """
    Fixed window counter keyed by an arbitrary string.

    Each identifier gets a window that starts on its first attempt and
    lasts ``window_seconds``. Attempts inside the window are counted;
    once ``limit`` have been accepted, further attempts are rejected
    until the window has elapsed.

    Attributes:
        clock: Callable returning the current time in seconds
        cleanup_probability: Chance per attempt of sweeping expired entries

    Example:
        limiter = FixedWindowRateLimiter()
        try:
            result = limiter.attempt("login:10.0.0.1", limit=5, window_seconds=60)
        except RateLimitExceeded as exc:
            print(f"retry in {exc.retry_after_seconds}s")
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        cleanup_probability: float = 0.01,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the limiter.

        Args:
            clock: Time source in seconds (default: time.monotonic)
            cleanup_probability: Chance in [0, 1] that an attempt triggers
                a sweep of expired entries (default: 0.01)
            rng: Random source used for the sweep decision
        """
        if not 0.0 <= cleanup_probability <= 1.0:
            raise ValueError("Cleanup probability must be between 0 and 1")

        self.clock = clock
        self.cleanup_probability = cleanup_probability
        self._rng = rng or random.Random()
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def attempt(
        self,
        identifier: str,
        limit: int,
        window_seconds: float,
    ) -> RateLimitResult:
        """
        Record one attempt for ``identifier``.

        Args:
            identifier: Key to count against (e.g. ``"login:<ip>"``)
            limit: Maximum accepted attempts per window
            window_seconds: Window length in seconds

        Returns:
            RateLimitResult with the attempts remaining in this window

        Raises:
            RateLimitExceeded: If ``limit`` attempts were already accepted
            ValueError: If limit < 1 or window_seconds <= 0
        """
        if limit < 1:
            raise ValueError("Limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("Window must be positive")

        with self._lock:
            now = self.clock()
            entry = self._entries.get(identifier)

            if entry is None or now > entry.window_reset_at:
                entry = RateLimitEntry(count=0, window_reset_at=now + window_seconds)
                self._entries[identifier] = entry

            if entry.count >= limit:
                retry_after = max(1, math.ceil(entry.window_reset_at - now))
                raise RateLimitExceeded(identifier, retry_after)

            entry.count += 1
            result = RateLimitResult(
                limit=limit,
                remaining=limit - entry.count,
                reset_at=entry.window_reset_at,
            )

            if self.cleanup_probability and self._rng.random() < self.cleanup_probability:
                self._purge_expired_locked(now)

        return result

    def purge_expired(self) -> int:
        """
        Evict every entry whose window has elapsed.

        Returns:
            Number of entries removed
        """
        with self._lock:
            return self._purge_expired_locked(self.clock())

    def _purge_expired_locked(self, now: float) -> int:
        expired = [
            key for key, entry in self._entries.items()
            if now > entry.window_reset_at
        ]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug(
                "Purged expired rate limit entries",
                extra={"count": len(expired), "tracked": len(self._entries)},
            )
        return len(expired)

    def reset(self, identifier: Optional[str] = None) -> None:
        """
        Forget one identifier, or all of them.

        Useful for testing or manual unblocking.
        """
        with self._lock:
            if identifier is None:
                self._entries.clear()
            else:
                self._entries.pop(identifier, None)

    def __len__(self) -> int:
        return len(self._entries)
