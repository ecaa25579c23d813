"""
Background service shims, one per OS, chosen by platform detection.

Every variant exposes install / uninstall / start / stop / is_installed /
is_running. The agent core never depends on them; only the CLI does.
"""

import sys

from .linux import LinuxService
from .macos import MacOsService
from .windows import WindowsService


def agent_program_args():
    """Command line the service manager should launch."""
    if getattr(sys, "frozen", False):
        return [sys.executable, "run"]
    return [sys.executable, "-m", "raa_core", "run"]


def get_service(name, display_name, description, program_args=None, platform=None):
    program_args = program_args or agent_program_args()
    platform = platform or sys.platform
    if platform == "win32":
        return WindowsService(name, display_name, description, program_args)
    if platform == "darwin":
        return MacOsService(name, display_name, description, program_args)
    return LinuxService(name, display_name, description, program_args)
