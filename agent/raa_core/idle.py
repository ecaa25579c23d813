"""
IdleMonitor — edge-triggered Active/Idle state machine.

The activity clock is sampled once per poll interval (60s by default,
independent of the threshold). A notification fires only when the state
changes, so a long idle stretch yields one "System Idle" and the input
that ends it yields one "System Active". Detection lags real input by at
most one poll interval.
"""

import threading

from .config import log
from .constants import IDLE_MINUTES_DEFAULT, IDLE_POLL_SEC
from .dispatcher import EventCategory
from .state import ActivityClock, IdleState, RunFlag


def _minutes(seconds):
    return int(seconds // 60)


class IdleMonitor:

    def __init__(self, dispatcher, idle_minutes=IDLE_MINUTES_DEFAULT,
                 poll_interval=IDLE_POLL_SEC, activity_clock=None):
        if idle_minutes <= 0:
            raise ValueError("idle_minutes must be positive")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._dispatcher = dispatcher
        self.idle_threshold = idle_minutes * 60
        self.poll_interval = poll_interval
        self.activity = activity_clock or ActivityClock()
        self._run_flag = RunFlag()
        self._state = IdleState.ACTIVE
        self._idle_started_at = None
        self._thread = None

    @property
    def state(self):
        return self._state

    @property
    def running(self):
        return self._run_flag.running

    # ── Activity input (any thread) ─────────────────────────────

    def update_activity(self):
        """Record user activity. The next poll tick observes it."""
        self.activity.touch()

    # ── One poll tick ───────────────────────────────────────────

    def check(self, now=None):
        """Evaluate the transition rule once. Returns the new state on a transition, else None."""
        if now is None:
            now = self.activity.now()
        last_activity = self.activity.last_activity
        elapsed = max(0.0, now - last_activity)

        if elapsed >= self.idle_threshold and self._state is IdleState.ACTIVE:
            self._state = IdleState.IDLE
            self._idle_started_at = last_activity
            minutes = _minutes(elapsed)
            log.info("System idle for %d minutes", minutes)
            self._dispatcher.safe_send(
                EventCategory.IDLE,
                "System Idle",
                f"System has been idle for {minutes} minutes",
                [("Idle Time", f"{minutes} minutes")],
            )
            return self._state

        if elapsed < self.idle_threshold and self._state is IdleState.IDLE:
            self._state = IdleState.ACTIVE
            started = self._idle_started_at if self._idle_started_at is not None else last_activity
            minutes = _minutes(max(0.0, last_activity - started))
            self._idle_started_at = None
            log.info("System returned from idle state (idle %d minutes)", minutes)
            self._dispatcher.safe_send(
                EventCategory.IDLE,
                "System Active",
                "System has returned from idle state",
                [("Was Idle For", f"{minutes} minutes")],
            )
            return self._state

        return None

    # ── Poll loop ───────────────────────────────────────────────

    def run(self):
        """Blocking poll loop. Returns once stop() is observed."""
        log.info("Idle monitor started (threshold=%ds, poll=%ss)",
                 self.idle_threshold, self.poll_interval)
        while self._run_flag.running:
            if self._run_flag.wait(self.poll_interval):
                break
            try:
                self.check()
            except Exception as e:
                log.error("Idle monitor tick error: %s", e, exc_info=True)
        log.info("Idle monitor stopped")

    def start(self):
        if self._thread and self._thread.is_alive():
            return self._thread
        self._run_flag.start()
        self._thread = threading.Thread(target=self.run, name="raa-idle", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self):
        self._run_flag.stop()

    def join(self, timeout=None):
        if self._thread:
            self._thread.join(timeout)
