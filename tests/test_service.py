import plistlib
import subprocess
from types import SimpleNamespace

import pytest

from raa_core import service
from raa_core.errors import ServiceError
from raa_core.service import LinuxService, MacOsService, WindowsService, get_service
from raa_core.service import common

ARGS = ["/usr/bin/python3", "-m", "raa_core", "run"]


class CommandRecorder:
    def __init__(self, outputs=None):
        self.calls = []
        self.outputs = outputs or {}

    def __call__(self, cmd, check=True, timeout=15):
        self.calls.append(list(cmd))
        returncode, stdout = self.outputs.get(tuple(cmd), (0, ""))
        return SimpleNamespace(returncode=returncode, stdout=stdout, stderr="")


@pytest.fixture
def recorder(monkeypatch):
    rec = CommandRecorder()
    for module in ("macos", "linux", "windows"):
        monkeypatch.setattr(f"raa_core.service.{module}.run_command", rec)
    return rec


def test_get_service_selects_by_platform():
    assert isinstance(get_service("raa", "RAA", "d", ARGS, platform="darwin"), MacOsService)
    assert isinstance(get_service("raa", "RAA", "d", ARGS, platform="win32"), WindowsService)
    assert isinstance(get_service("raa", "RAA", "d", ARGS, platform="linux"), LinuxService)


def test_agent_program_args_runs_module():
    args = service.agent_program_args()
    assert args[-1] == "run"


def test_macos_install_writes_plist_and_loads(tmp_path, recorder):
    svc = MacOsService("raa-agent", "RAA", "d", ARGS, home=tmp_path)
    svc.install()

    plist_path = tmp_path / "Library" / "LaunchAgents" / "com.raa-agent.plist"
    with open(plist_path, "rb") as f:
        plist = plistlib.load(f)
    assert plist["Label"] == "com.raa-agent"
    assert plist["ProgramArguments"] == ARGS
    assert plist["RunAtLoad"] is True
    assert plist["KeepAlive"] is True
    assert plist["StandardOutPath"].endswith("Library/Logs/raa-agent.log")
    assert recorder.calls == [["launchctl", "load", "-w", str(plist_path)]]
    assert svc.is_installed()


def test_macos_uninstall_removes_plist(tmp_path, recorder):
    svc = MacOsService("raa-agent", "RAA", "d", ARGS, home=tmp_path)
    svc.install()
    svc.uninstall()
    assert not svc.is_installed()
    assert recorder.calls[-1][:3] == ["launchctl", "unload", "-w"]


def test_macos_is_running_parses_launchctl_list(tmp_path, monkeypatch):
    listing = "PID\tStatus\tLabel\n512\t0\tcom.raa-agent\n-\t0\tcom.other\n"
    rec = CommandRecorder({("launchctl", "list"): (0, listing)})
    monkeypatch.setattr("raa_core.service.macos.run_command", rec)
    assert MacOsService("raa-agent", "RAA", "d", ARGS, home=tmp_path).is_running()
    assert not MacOsService("other", "RAA", "d", ARGS, home=tmp_path).is_running()


def test_linux_install_writes_unit_and_enables(tmp_path, recorder):
    svc = LinuxService("raa-agent", "Remote Activity Agent", "webhooks", ARGS, home=tmp_path)
    svc.install()

    unit = (tmp_path / ".config" / "systemd" / "user" / "raa-agent.service").read_text()
    assert "ExecStart=/usr/bin/python3 -m raa_core run" in unit
    assert "Restart=always" in unit
    assert "WantedBy=default.target" in unit
    assert recorder.calls == [
        ["systemctl", "--user", "daemon-reload"],
        ["systemctl", "--user", "enable", "--now", "raa-agent.service"],
    ]


def test_linux_is_running(tmp_path, monkeypatch):
    cmd = ("systemctl", "--user", "is-active", "raa-agent.service")
    monkeypatch.setattr("raa_core.service.linux.run_command",
                        CommandRecorder({cmd: (0, "active\n")}))
    assert LinuxService("raa-agent", "RAA", "d", ARGS, home=tmp_path).is_running()
    monkeypatch.setattr("raa_core.service.linux.run_command",
                        CommandRecorder({cmd: (3, "inactive\n")}))
    assert not LinuxService("raa-agent", "RAA", "d", ARGS, home=tmp_path).is_running()


def test_windows_install_creates_logon_task(recorder):
    svc = WindowsService("raa-agent", "Remote Activity Agent", "d", ["C:\\RAA\\raa.exe", "run"])
    svc.install()
    create = recorder.calls[-1]
    assert create[:4] == ["schtasks", "/Create", "/TN", "Remote Activity Agent"]
    assert create[create.index("/TR") + 1] == "C:\\RAA\\raa.exe run"
    assert create[create.index("/SC") + 1] == "ONLOGON"


def test_windows_is_running_reads_status(monkeypatch):
    query = ("schtasks", "/Query", "/TN", "RAA", "/FO", "LIST")
    monkeypatch.setattr("raa_core.service.windows.run_command",
                        CommandRecorder({query: (0, "TaskName: \\RAA\nStatus: Running\n")}))
    assert WindowsService("raa-agent", "RAA", "d", ARGS).is_running()


def test_run_command_raises_on_failure(monkeypatch):
    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="not loaded")

    monkeypatch.setattr(common.subprocess, "run", fake_run)
    with pytest.raises(ServiceError, match="not loaded"):
        common.run_command(["launchctl", "start", "com.raa"])
    assert common.run_command(["launchctl", "start", "com.raa"], check=False).returncode == 1


def test_run_command_missing_binary(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(common.subprocess, "run", fake_run)
    with pytest.raises(ServiceError):
        common.run_command(["schtasks", "/Query"])
