"""
Linux systemd user unit: ~/.config/systemd/user/<name>.service via systemctl --user.
"""

import os
import shlex
from pathlib import Path

from ..config import log
from .common import run_command


class LinuxService:

    def __init__(self, name, display_name, description, program_args, home=None):
        self.name = name
        self.display_name = display_name
        self.description = description
        self.program_args = [str(a) for a in program_args]
        if home:
            self._config_home = Path(home) / ".config"
        else:
            xdg = os.environ.get("XDG_CONFIG_HOME")
            self._config_home = Path(xdg) if xdg else Path.home() / ".config"

    @property
    def unit_name(self):
        return f"{self.name}.service"

    @property
    def unit_path(self):
        return self._config_home / "systemd" / "user" / self.unit_name

    def unit_content(self):
        exec_start = " ".join(shlex.quote(a) for a in self.program_args)
        return (
            "[Unit]\n"
            f"Description={self.display_name} - {self.description}\n"
            "After=network-online.target\n"
            "\n"
            "[Service]\n"
            "Type=simple\n"
            f"ExecStart={exec_start}\n"
            "Restart=always\n"
            "RestartSec=10\n"
            "\n"
            "[Install]\n"
            "WantedBy=default.target\n"
        )

    def _systemctl(self, *args, check=True):
        return run_command(["systemctl", "--user", *args], check=check)

    def install(self):
        self.unit_path.parent.mkdir(parents=True, exist_ok=True)
        self.unit_path.write_text(self.unit_content(), encoding="utf-8")
        self._systemctl("daemon-reload")
        self._systemctl("enable", "--now", self.unit_name)
        log.info("Installed systemd user service: %s", self.name)

    def uninstall(self):
        if self.unit_path.exists():
            result = self._systemctl("disable", "--now", self.unit_name, check=False)
            if result.returncode != 0:
                log.warning("Failed to disable service with systemctl")
            self.unit_path.unlink()
            self._systemctl("daemon-reload", check=False)
        log.info("Uninstalled systemd user service: %s", self.name)

    def start(self):
        self._systemctl("start", self.unit_name)
        log.info("Started systemd user service: %s", self.name)

    def stop(self):
        self._systemctl("stop", self.unit_name)
        log.info("Stopped systemd user service: %s", self.name)

    def is_installed(self):
        return self.unit_path.exists()

    def is_running(self):
        result = self._systemctl("is-active", self.unit_name, check=False)
        return (result.stdout or "").strip() == "active"
