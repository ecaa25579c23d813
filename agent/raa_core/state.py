"""
Shared state cells: ActivityClock, IdleState, RunFlag.

The clock is the only value written from outside its owner. Writers
(pynput threads, callers of IdleMonitor.update_activity) and the idle
loop (reader) may race; a stale read delays a transition by at most one
poll interval, which is the accepted precision of idle detection.
"""

import enum
import time
import threading


class IdleState(enum.Enum):
    ACTIVE = "active"
    IDLE = "idle"


class ActivityClock:
    """Thread-safe "last activity" instant on the monotonic clock."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._last_activity = clock()

    def touch(self, now=None):
        """Mark that real user input just happened."""
        ts = self._clock() if now is None else now
        with self._lock:
            self._last_activity = ts

    @property
    def last_activity(self) -> float:
        with self._lock:
            return self._last_activity

    def idle_seconds(self, now=None) -> float:
        """Seconds since last activity, never negative."""
        ts = self._clock() if now is None else now
        return max(0.0, ts - self.last_activity)

    def now(self) -> float:
        return self._clock()


class RunFlag:
    """Cooperative stop flag. wait() doubles as an interruptible sleep."""

    def __init__(self):
        self._stopped = threading.Event()
        self._stopped.set()

    @property
    def running(self) -> bool:
        return not self._stopped.is_set()

    def start(self):
        self._stopped.clear()

    def stop(self):
        self._stopped.set()

    def wait(self, timeout):
        """Sleep up to timeout seconds. Returns True if stop was requested."""
        return self._stopped.wait(timeout)
