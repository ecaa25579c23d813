"""
Boot notifier — one "System Started" notification at process start.
"""

from .config import log
from .dispatcher import EventCategory
from . import sysinfo


def send_boot_notification(dispatcher, info_provider=sysinfo.get_boot_info):
    """Returns True if the notification was delivered. Never raises on dispatch errors."""
    try:
        fields = info_provider()
    except Exception as e:
        log.warning("Boot snapshot failed: %s", e)
        fields = []

    ok = dispatcher.safe_send(
        EventCategory.SYSTEM,
        "System Started",
        "The system has been started or RAA has been launched.",
        fields,
    )
    if ok:
        log.info("Boot notification sent")
    return ok
