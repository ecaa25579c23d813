"""
Hotplug watcher — removable media attach/detach → USB notifications.

Volume sources are picked per platform at startup:
  macOS   → watchdog observer on /Volumes
  Linux   → psutil mount table scan for /run/media, /media, /mnt
  Windows → psutil scan of removable drive letters

Each source calls back with (kind, paths). Every Created/Removed event
produces one notification attempt; nothing is deduplicated.
"""

import os
import sys
import enum
import threading

import psutil
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import log
from .constants import MACOS_VOLUMES_DIR, LINUX_MEDIA_PREFIXES, DRIVE_POLL_SEC
from .dispatcher import EventCategory
from .errors import WatcherSetupError


class VolumeEventKind(enum.Enum):
    CREATED = "created"
    REMOVED = "removed"
    OTHER = "other"


_ACTIONS = {
    VolumeEventKind.CREATED: "Connected",
    VolumeEventKind.REMOVED: "Disconnected",
}


# ─── watchdog source (macOS) ─────────────────────────────────────

class _VolumeEventHandler(FileSystemEventHandler):
    """Forwards watchdog events on the mount root as (kind, paths)."""

    def __init__(self, callback):
        super().__init__()
        self._callback = callback

    def on_any_event(self, event):
        if event.event_type == "created":
            kind = VolumeEventKind.CREATED
        elif event.event_type == "deleted":
            kind = VolumeEventKind.REMOVED
        else:
            kind = VolumeEventKind.OTHER

        paths = [os.fsdecode(event.src_path)]
        dest = getattr(event, "dest_path", "")
        if dest:
            paths.append(os.fsdecode(dest))

        try:
            self._callback(kind, paths)
        except Exception as e:
            log.error("Volume event handler error: %s", e, exc_info=True)


class WatchdogVolumeSource:
    """Non-recursive watch on the directory where volumes get mounted."""

    def __init__(self, path):
        self.path = path
        self._observer = None

    def subscribe(self, callback):
        if not self.path or not os.path.isdir(self.path):
            raise WatcherSetupError(f"Volume directory not found: {self.path}")
        observer = Observer()
        try:
            observer.schedule(_VolumeEventHandler(callback), self.path, recursive=False)
            observer.daemon = True
            observer.start()
        except OSError as e:
            raise WatcherSetupError(f"Cannot watch {self.path}: {e}") from e
        self._observer = observer
        log.info("Watching %s for volume changes", self.path)

    def stop(self):
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None


# ─── Mount table polling (Windows / Linux) ───────────────────────

def is_removable_drive(partition):
    """Windows: psutil flags removable drive letters in opts."""
    return "removable" in (partition.opts or "")


def is_media_mount(partition):
    """Linux: udisks and manual mounts land under /run/media, /media or /mnt."""
    return partition.mountpoint.startswith(LINUX_MEDIA_PREFIXES)


class DrivePollingSource:
    """Diffs psutil's mounted partitions every few seconds.

    Reads the mount table on every poll, so per-user mount roots that only
    appear on first insertion (/run/media/<user>, /media/<user>) are covered.
    """

    def __init__(self, interval=DRIVE_POLL_SEC, partitions=None, predicate=is_removable_drive):
        self.interval = interval
        self._partitions = partitions or (lambda: psutil.disk_partitions(all=False))
        self._predicate = predicate
        self._stop = threading.Event()
        self._thread = None
        self._known = set()

    def subscribe(self, callback):
        try:
            self._known = self._mounts()
        except (OSError, psutil.Error) as e:
            raise WatcherSetupError(f"Cannot enumerate drives: {e}") from e

        self._stop.clear()
        self._thread = threading.Thread(
            target=self._poll, args=(callback,), name="raa-drives", daemon=True,
        )
        self._thread.start()
        log.info("Polling mounted media every %ss (%d present)",
                 self.interval, len(self._known))

    def _mounts(self):
        return {p.mountpoint for p in self._partitions() if self._predicate(p)}

    def poll_once(self, callback):
        current = self._mounts()
        for mount in sorted(current - self._known):
            callback(VolumeEventKind.CREATED, [mount])
        for mount in sorted(self._known - current):
            callback(VolumeEventKind.REMOVED, [mount])
        self._known = current

    def _poll(self, callback):
        while not self._stop.wait(self.interval):
            try:
                self.poll_once(callback)
            except Exception as e:
                log.error("Drive poll error: %s", e, exc_info=True)

    def stop(self):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None


# ─── Platform selection ──────────────────────────────────────────

def select_volume_source(platform=None):
    platform = platform or sys.platform
    if platform == "darwin":
        return WatchdogVolumeSource(MACOS_VOLUMES_DIR)
    if platform == "win32":
        return DrivePollingSource()
    return DrivePollingSource(predicate=is_media_mount)


# ─── Watcher ─────────────────────────────────────────────────────

class HotplugWatcher:

    def __init__(self, dispatcher, source=None):
        self._dispatcher = dispatcher
        self._source = source

    def handle_event(self, kind, paths):
        """Map one raw event to a notification. Returns the send result, None if ignored."""
        action = _ACTIONS.get(kind)
        if action is None:
            return None

        device = ", ".join(str(p) for p in paths)
        log.info("USB device %s: %s", action.lower(), device)
        return self._dispatcher.safe_send(
            EventCategory.USB,
            f"USB Device {action}",
            f"USB device has been {action.lower()}",
            [("Action", action), ("Device", device)],
        )

    def start(self):
        """Subscribe to the volume source. Raises WatcherSetupError."""
        if self._source is None:
            self._source = select_volume_source()
        self._source.subscribe(self.handle_event)

    def stop(self):
        if self._source is not None:
            self._source.stop()
