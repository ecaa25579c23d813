"""
AgentApp — wires the dispatcher to every trigger and keeps them running.

Background threads, none of which talk to each other:
  raa-idle        — IdleMonitor poll loop                  (every 60s)
  raa-heartbeat   — HeartbeatScheduler                     (every N min)
  watchdog / raa-drives — HotplugWatcher volume source     (event driven)
  pynput listeners — feed IdleMonitor.update_activity()

The boot notification is sent once, on the calling thread, before the
loops start. A hotplug setup failure disables only that trigger.
"""

import threading

from .constants import (
    AGENT_VERSION, IDLE_MINUTES_DEFAULT, PING_INTERVAL_DEFAULT, SHUTDOWN_JOIN_SEC,
)
from .config import log, safe_print
from .dispatcher import Dispatcher
from .errors import WatcherSetupError
from .boot import send_boot_notification
from .heartbeat import HeartbeatScheduler
from .hotplug import HotplugWatcher
from .idle import IdleMonitor
from .listeners import InputListeners


class AgentApp:

    def __init__(self, config, dispatcher=None, volume_source=None, listen_input=True):
        self._config = config
        self.dispatcher = dispatcher or Dispatcher.from_config(config)
        self.idle = IdleMonitor(
            self.dispatcher,
            idle_minutes=config.get("idle_minutes", IDLE_MINUTES_DEFAULT),
        )
        self.heartbeat = HeartbeatScheduler(
            self.dispatcher,
            interval_minutes=config.get("ping_interval", PING_INTERVAL_DEFAULT),
        )
        self.hotplug = HotplugWatcher(self.dispatcher, source=volume_source)
        self._listeners = InputListeners(self.idle.update_activity) if listen_input else None
        self._hotplug_active = False
        self._stop = threading.Event()

    def start(self):
        """Send the boot notification and start every trigger. Non-blocking."""
        send_boot_notification(self.dispatcher)

        self.heartbeat.start()

        try:
            self.hotplug.start()
            self._hotplug_active = True
        except WatcherSetupError as e:
            log.error("USB monitoring disabled: %s", e)

        self.idle.start()
        if self._listeners is not None:
            self._listeners.start()

        log.info(
            "v%s started (device=%s, ping=%dmin, idle=%dmin, usb=%s)",
            AGENT_VERSION, self.dispatcher.device_name,
            self.heartbeat.interval_minutes, self.idle.idle_threshold // 60,
            "on" if self._hotplug_active else "off",
        )

    def run(self):
        """Start the agent and block until stop() is called."""
        self.start()
        safe_print("Service running.\n")
        try:
            while not self._stop.wait(1.0):
                pass
        finally:
            self.shutdown()

    def stop(self):
        self._stop.set()

    def shutdown(self):
        if self._listeners is not None:
            self._listeners.stop()
        self.idle.stop()
        self.heartbeat.stop()
        if self._hotplug_active:
            try:
                self.hotplug.stop()
            except Exception as e:
                log.warning("Hotplug watcher stop failed: %s", e)
            self._hotplug_active = False
        # Triggers may still be mid-send; the session closes only after they exit
        self.idle.join(SHUTDOWN_JOIN_SEC)
        self.heartbeat.join(SHUTDOWN_JOIN_SEC)
        self.dispatcher.close()
        log.info("AgentApp shut down.")
