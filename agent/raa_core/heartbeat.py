"""
Heartbeat scheduler — "every N minutes" on wall-clock boundaries.

Fires at second 0 of each UTC minute that is a multiple of N within the
hour (cron "0 */N * * * *" evaluated in UTC, so DST shifts never repeat
or skip a boundary). Intervals of 60 minutes or more fire every N
minutes counted from the Unix epoch. A failed delivery is logged and the
schedule carries on.
"""

import time
import threading
from datetime import datetime, timedelta, timezone

from .config import log
from .constants import PING_INTERVAL_DEFAULT
from .dispatcher import EventCategory
from .state import RunFlag
from . import sysinfo


def next_fire_time(now, interval_minutes):
    """Epoch seconds of the first schedule boundary strictly after now."""
    if interval_minutes >= 60:
        step = interval_minutes * 60
        return float((int(now) // step + 1) * step)

    dt = datetime.fromtimestamp(now, timezone.utc).replace(second=0, microsecond=0) + timedelta(minutes=1)
    while dt.minute % interval_minutes != 0:
        dt += timedelta(minutes=1)
    return dt.timestamp()


class HeartbeatScheduler:

    def __init__(self, dispatcher, interval_minutes=PING_INTERVAL_DEFAULT,
                 info_provider=sysinfo.get_system_info, clock=time.time, wait=None):
        if interval_minutes < 1:
            raise ValueError("interval_minutes must be at least 1")
        self._dispatcher = dispatcher
        self.interval_minutes = interval_minutes
        self._info_provider = info_provider
        self._clock = clock
        self._run_flag = RunFlag()
        self._wait = wait or self._run_flag.wait
        self._thread = None
        self.fired = 0

    @property
    def running(self):
        return self._run_flag.running

    def fire(self):
        """Send one heartbeat. Returns True on delivery; never raises."""
        self.fired += 1
        try:
            fields = self._info_provider()
        except Exception as e:
            log.warning("System snapshot failed: %s", e)
            fields = []
        try:
            return self._dispatcher.safe_send(
                EventCategory.SYSTEM,
                "Heartbeat",
                "Regular system heartbeat check-in",
                fields,
            )
        except Exception as e:
            log.error("Failed to send heartbeat: %s", e, exc_info=True)
            return False

    def run(self):
        """Blocking schedule loop. Returns once stop() is requested."""
        log.info("Heartbeat scheduled to run every %d minutes", self.interval_minutes)
        last_target = None
        while self._run_flag.running:
            now = self._clock()
            # A boundary is never fired twice, even if the clock steps back
            base = now if last_target is None else max(now, last_target)
            target = next_fire_time(base, self.interval_minutes)
            last_target = target
            if self._wait(max(0.0, target - now)):
                break
            self.fire()
        log.info("Heartbeat scheduler stopped")

    def start(self):
        if self._thread and self._thread.is_alive():
            return self._thread
        self._run_flag.start()
        self._thread = threading.Thread(target=self.run, name="raa-heartbeat", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self):
        self._run_flag.stop()

    def join(self, timeout=None):
        if self._thread:
            self._thread.join(timeout)
