"""
Windows: Task Scheduler entry that starts the agent on user logon.
"""

import subprocess

from ..config import log
from .common import run_command


class WindowsService:

    def __init__(self, name, display_name, description, program_args):
        self.name = name
        self.display_name = display_name
        self.description = description
        self.program_args = [str(a) for a in program_args]

    @property
    def task_name(self):
        return self.display_name or self.name

    def task_command(self):
        return subprocess.list2cmdline(self.program_args)

    def install(self):
        # Replace any stale task with the same name
        run_command(["schtasks", "/Delete", "/TN", self.task_name, "/F"], check=False)
        run_command([
            "schtasks", "/Create",
            "/TN", self.task_name,
            "/TR", self.task_command(),
            "/SC", "ONLOGON",
            "/RL", "LIMITED",
            "/F",
            "/DELAY", "0000:15",
        ])
        log.info("Task Scheduler entry created: %s", self.task_name)

    def uninstall(self):
        if self.is_installed():
            run_command(["schtasks", "/Delete", "/TN", self.task_name, "/F"])
        log.info("Task Scheduler entry removed: %s", self.task_name)

    def start(self):
        run_command(["schtasks", "/Run", "/TN", self.task_name])
        log.info("Started task: %s", self.task_name)

    def stop(self):
        run_command(["schtasks", "/End", "/TN", self.task_name])
        log.info("Stopped task: %s", self.task_name)

    def is_installed(self):
        result = run_command(["schtasks", "/Query", "/TN", self.task_name], check=False)
        return result.returncode == 0

    def is_running(self):
        result = run_command(
            ["schtasks", "/Query", "/TN", self.task_name, "/FO", "LIST"], check=False,
        )
        if result.returncode != 0:
            return False
        for line in (result.stdout or "").splitlines():
            key, _, value = line.partition(":")
            if key.strip().lower() == "status":
                return value.strip().lower() == "running"
        return False
