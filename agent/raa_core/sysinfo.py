"""
Point-in-time system snapshot as ordered (name, value) fields.
"""

import time
import socket
import platform

import psutil


def _os_name():
    system = platform.system()
    if system == "Darwin":
        return "macOS"
    if system == "Linux":
        try:
            release = platform.freedesktop_os_release()
            return release.get("NAME") or "Linux"
        except OSError:
            return "Linux"
    return system or "Unknown"


def _os_version():
    system = platform.system()
    if system == "Darwin":
        return platform.mac_ver()[0] or "Unknown"
    if system == "Windows":
        return platform.version() or "Unknown"
    if system == "Linux":
        try:
            release = platform.freedesktop_os_release()
            return release.get("VERSION_ID") or release.get("VERSION") or "Unknown"
        except OSError:
            return "Unknown"
    return platform.version() or "Unknown"


def _hostname():
    try:
        return socket.gethostname() or "Unknown"
    except OSError:
        return "Unknown"


def uptime_seconds():
    return max(0, int(time.time() - psutil.boot_time()))


def get_system_info():
    """Heartbeat snapshot: OS, version, kernel, host, memory, CPUs."""
    mem = psutil.virtual_memory()
    return [
        ("OS", _os_name()),
        ("OS Version", _os_version()),
        ("Kernel", platform.release() or "Unknown"),
        ("Hostname", _hostname()),
        ("Total Memory", f"{mem.total // (1024 * 1024)} MB"),
        ("Used Memory", f"{mem.used // (1024 * 1024)} MB"),
        ("CPU Count", str(psutil.cpu_count() or 0)),
    ]


def get_boot_info():
    """Startup snapshot: OS with version, kernel, host, uptime."""
    return [
        ("OS", f"{_os_name()} {_os_version()}"),
        ("Kernel", platform.release() or "Unknown"),
        ("Host", _hostname()),
        ("Uptime", f"{uptime_seconds()} seconds"),
    ]
