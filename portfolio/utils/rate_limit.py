import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class AdmissionRecord:
    count: int
    reset_at: float


class RateLimiter:
    """
    Fixed-window, in-memory rate limiter keyed by client identity (usually the IP).

    Best-effort only: state lives in this process and is lost on restart.
    Stale identities are swept once per window and the map never holds more
    than ``max_entries`` identities (least recently seen go first).
    """
    def __init__(
        self,
        limit: int = 20,
        window_seconds: float = 60.0,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._store: "OrderedDict[str, AdmissionRecord]" = OrderedDict()
        self._lock = threading.Lock()
        self._next_sweep = clock() + window_seconds

    def is_allowed(self, identity: str) -> bool:
        """Returns True if the identity may proceed, False if rate limited."""
        identity = identity or "unknown"

        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)

            record = self._store.get(identity)

            # First request, or the window has expired: start a fresh window
            if record is None or now > record.reset_at:
                self._store[identity] = AdmissionRecord(count=1, reset_at=now + self.window_seconds)
                self._store.move_to_end(identity)
                self._evict_overflow()
                return True

            self._store.move_to_end(identity)
            if record.count < self.limit:
                record.count += 1
                return True

            return False

    def retry_after(self, identity: str) -> int:
        """Seconds until the identity's current window resets (at least 1)."""
        with self._lock:
            record = self._store.get(identity or "unknown")
            if record is None:
                return 1
            return max(1, int(record.reset_at - self._clock() + 0.999))

    def get_record(self, identity: str) -> Optional[AdmissionRecord]:
        with self._lock:
            record = self._store.get(identity)
            return AdmissionRecord(record.count, record.reset_at) if record else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _sweep(self, now: float) -> None:
        stale = [key for key, record in self._store.items() if now > record.reset_at]
        for key in stale:
            del self._store[key]
        self._next_sweep = now + self.window_seconds

    def _evict_overflow(self) -> None:
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)
