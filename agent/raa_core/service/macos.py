"""
macOS LaunchAgent: ~/Library/LaunchAgents/com.<name>.plist via launchctl.
"""

import plistlib
from pathlib import Path

from ..config import log
from .common import run_command


class MacOsService:

    def __init__(self, name, display_name, description, program_args, home=None):
        self.name = name
        self.display_name = display_name
        self.description = description
        self.program_args = [str(a) for a in program_args]
        self._home = Path(home) if home else Path.home()

    @property
    def label(self):
        return f"com.{self.name}"

    @property
    def plist_path(self):
        return self._home / "Library" / "LaunchAgents" / f"{self.label}.plist"

    def plist_content(self):
        log_path = str(self._home / "Library" / "Logs" / f"{self.name}.log")
        return {
            "Label": self.label,
            "ProgramArguments": self.program_args,
            "RunAtLoad": True,
            "KeepAlive": True,
            "StandardErrorPath": log_path,
            "StandardOutPath": log_path,
        }

    def install(self):
        self.plist_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.plist_path, "wb") as f:
            plistlib.dump(self.plist_content(), f)
        run_command(["launchctl", "load", "-w", str(self.plist_path)])
        log.info("Installed macOS service: %s", self.name)

    def uninstall(self):
        if self.plist_path.exists():
            result = run_command(["launchctl", "unload", "-w", str(self.plist_path)], check=False)
            if result.returncode != 0:
                log.warning("Failed to unload service with launchctl")
            self.plist_path.unlink()
        log.info("Uninstalled macOS service: %s", self.name)

    def start(self):
        run_command(["launchctl", "start", self.label])
        log.info("Started macOS service: %s", self.name)

    def stop(self):
        run_command(["launchctl", "stop", self.label])
        log.info("Stopped macOS service: %s", self.name)

    def is_installed(self):
        return self.plist_path.exists()

    def is_running(self):
        result = run_command(["launchctl", "list"], check=False)
        for line in (result.stdout or "").splitlines():
            parts = line.split()
            # columns: PID Status Label; PID is "-" when loaded but not running
            if parts and parts[-1] == self.label:
                return parts[0] != "-"
        return False
