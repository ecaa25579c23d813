from types import SimpleNamespace

import pytest
from watchdog.events import DirCreatedEvent, DirDeletedEvent, DirModifiedEvent, DirMovedEvent

from raa_core.dispatcher import EventCategory
from raa_core.errors import WatcherSetupError
from raa_core.hotplug import (
    DrivePollingSource, HotplugWatcher, VolumeEventKind, WatchdogVolumeSource,
    _VolumeEventHandler, is_media_mount, select_volume_source,
)


def test_created_event_sends_connected(dispatcher):
    watcher = HotplugWatcher(dispatcher, source=object())

    assert watcher.handle_event(VolumeEventKind.CREATED, ["/Volumes/USB1"]) is True

    sent = dispatcher.sends[0]
    assert sent.category is EventCategory.USB
    assert sent.title == "USB Device Connected"
    assert sent.message == "USB device has been connected"
    assert ("Device", "/Volumes/USB1") in sent.fields
    assert ("Action", "Connected") in sent.fields


def test_removed_event_sends_disconnected(dispatcher):
    HotplugWatcher(dispatcher).handle_event(VolumeEventKind.REMOVED, ["/media/alex/STICK"])
    sent = dispatcher.sends[0]
    assert sent.title == "USB Device Disconnected"
    assert sent.fields == [("Action", "Disconnected"), ("Device", "/media/alex/STICK")]


def test_other_events_are_ignored(dispatcher):
    assert HotplugWatcher(dispatcher).handle_event(VolumeEventKind.OTHER, ["/Volumes/USB1"]) is None
    assert dispatcher.sends == []


def test_repeated_events_are_not_deduplicated(dispatcher):
    watcher = HotplugWatcher(dispatcher)
    for _ in range(3):
        watcher.handle_event(VolumeEventKind.CREATED, ["/Volumes/USB1"])
    assert len(dispatcher.sends) == 3


def test_multiple_paths_are_listed(dispatcher):
    HotplugWatcher(dispatcher).handle_event(VolumeEventKind.CREATED, ["E:\\", "F:\\"])
    assert ("Device", "E:\\, F:\\") in dispatcher.sends[0].fields


def test_failed_dispatch_does_not_stop_watcher(failing_dispatcher):
    watcher = HotplugWatcher(failing_dispatcher)
    assert watcher.handle_event(VolumeEventKind.CREATED, ["/Volumes/A"]) is False
    assert watcher.handle_event(VolumeEventKind.REMOVED, ["/Volumes/A"]) is False
    assert len(failing_dispatcher.sends) == 2


@pytest.mark.parametrize("event,kind", [
    (DirCreatedEvent("/Volumes/USB1"), VolumeEventKind.CREATED),
    (DirDeletedEvent("/Volumes/USB1"), VolumeEventKind.REMOVED),
    (DirModifiedEvent("/Volumes"), VolumeEventKind.OTHER),
    (DirMovedEvent("/Volumes/A", "/Volumes/B"), VolumeEventKind.OTHER),
])
def test_watchdog_events_map_to_kinds(event, kind):
    received = []
    _VolumeEventHandler(lambda k, paths: received.append((k, paths))).dispatch(event)
    assert received[0][0] is kind
    assert received[0][1][0] == event.src_path


def test_watchdog_source_missing_dir_fails_setup(tmp_path):
    source = WatchdogVolumeSource(str(tmp_path / "nope"))
    with pytest.raises(WatcherSetupError):
        source.subscribe(lambda kind, paths: None)


def test_watcher_start_propagates_setup_error(dispatcher, tmp_path):
    watcher = HotplugWatcher(dispatcher, source=WatchdogVolumeSource(str(tmp_path / "nope")))
    with pytest.raises(WatcherSetupError):
        watcher.start()


def partition(mountpoint, opts):
    return SimpleNamespace(mountpoint=mountpoint, opts=opts)


def test_drive_polling_reports_attach_and_detach():
    drives = [partition("C:\\", "rw,fixed")]
    source = DrivePollingSource(interval=3600, partitions=lambda: list(drives))
    events = []
    callback = lambda kind, paths: events.append((kind, paths))

    source.subscribe(callback)
    try:
        drives.append(partition("E:\\", "rw,removable"))
        source.poll_once(callback)
        source.poll_once(callback)
        drives.pop()
        source.poll_once(callback)
    finally:
        source.stop()

    assert events == [
        (VolumeEventKind.CREATED, ["E:\\"]),
        (VolumeEventKind.REMOVED, ["E:\\"]),
    ]


def test_drive_polling_setup_failure():
    def broken():
        raise OSError("access denied")

    with pytest.raises(WatcherSetupError):
        DrivePollingSource(partitions=broken).subscribe(lambda kind, paths: None)


def test_select_volume_source_by_platform():
    mac = select_volume_source("darwin")
    assert isinstance(mac, WatchdogVolumeSource)
    assert mac.path == "/Volumes"
    assert isinstance(select_volume_source("win32"), DrivePollingSource)
    linux = select_volume_source("linux")
    assert isinstance(linux, DrivePollingSource)
    assert linux._predicate is is_media_mount


def test_linux_polling_sees_user_mount_root_created_after_start():
    # No /media/alex or /run/media/alex exists yet when the source subscribes
    mounts = [partition("/", "rw"), partition("/boot", "rw")]
    source = DrivePollingSource(interval=3600, partitions=lambda: list(mounts),
                                predicate=is_media_mount)
    events = []
    callback = lambda kind, paths: events.append((kind, paths))

    source.subscribe(callback)
    try:
        mounts.append(partition("/run/media/alex/STICK", "rw,nosuid,nodev"))
        source.poll_once(callback)
        mounts.append(partition("/media/alex/CARD", "rw"))
        source.poll_once(callback)
        mounts[:] = [m for m in mounts if m.mountpoint != "/run/media/alex/STICK"]
        source.poll_once(callback)
    finally:
        source.stop()

    assert events == [
        (VolumeEventKind.CREATED, ["/run/media/alex/STICK"]),
        (VolumeEventKind.CREATED, ["/media/alex/CARD"]),
        (VolumeEventKind.REMOVED, ["/run/media/alex/STICK"]),
    ]


@pytest.mark.parametrize("mountpoint,expected", [
    ("/run/media/alex/STICK", True),
    ("/media/alex/CARD", True),
    ("/mnt/usb", True),
    ("/", False),
    ("/boot/efi", False),
    ("/media", False),
    ("/mnt", False),
])
def test_is_media_mount(mountpoint, expected):
    assert is_media_mount(partition(mountpoint, "rw")) is expected
