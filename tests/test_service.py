import plistlib
import subprocess

import pytest

from bittrex_notifier.errors import ServiceError
from bittrex_notifier.service import ServiceManager


class FakeSystemctl:
    """模拟 systemctl / launchctl，记录调用并按需返回运行状态。"""

    def __init__(self, running=False, fail_on=None):
        self.calls = []
        self.running = running
        self.fail_on = fail_on

    def __call__(self, args, **kwargs):
        self.calls.append(args)
        if self.fail_on and self.fail_on in args:
            return subprocess.CompletedProcess(args, 1, "", "unit failed")
        if "is-active" in args:
            return subprocess.CompletedProcess(args, 0 if self.running else 3, "active\n" if self.running else "inactive\n", "")
        if args[:2] == ["launchctl", "list"]:
            return subprocess.CompletedProcess(args, 0 if self.running else 113, "", "")
        return subprocess.CompletedProcess(args, 0, "", "")


@pytest.fixture
def linux_manager(tmp_path):
    return ServiceManager(platform="linux", home=tmp_path, exec_args=["/usr/bin/python3", "-m", "bittrex_notifier"])


def test_systemd_unit_content(linux_manager):
    unit = linux_manager.render_unit().decode()
    assert "ExecStart=/usr/bin/python3 -m bittrex_notifier" in unit
    assert "WantedBy=default.target" in unit
    assert linux_manager.unit_path.name == "bittrex_notifier.service"


def test_exec_args_with_spaces_are_quoted(tmp_path):
    manager = ServiceManager(platform="linux", home=tmp_path, exec_args=["/opt/my app/python", "-m", "x"])
    assert 'ExecStart="/opt/my app/python" -m x' in manager.render_unit().decode()


def test_install_writes_unit_and_enables(linux_manager, monkeypatch):
    fake = FakeSystemctl()
    monkeypatch.setattr(subprocess, "run", fake)

    status = linux_manager.install()

    assert "[  OK  ]" in status
    assert linux_manager.unit_path.exists()
    assert ["systemctl", "--user", "enable", "bittrex_notifier"] in fake.calls


def test_install_twice_fails(linux_manager, monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeSystemctl())
    linux_manager.install()
    with pytest.raises(ServiceError):
        linux_manager.install()


def test_commands_require_installation(linux_manager, monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeSystemctl())
    for command in ("remove", "start", "stop", "status"):
        with pytest.raises(ServiceError):
            getattr(linux_manager, command)()


def test_start_stop_status(linux_manager, monkeypatch):
    fake = FakeSystemctl()
    monkeypatch.setattr(subprocess, "run", fake)
    linux_manager.install()

    assert linux_manager.status().endswith("is stopped")
    linux_manager.start()
    assert ["systemctl", "--user", "start", "bittrex_notifier"] in fake.calls

    fake.running = True
    assert linux_manager.status().endswith("is running...")
    with pytest.raises(ServiceError):
        linux_manager.start()
    linux_manager.stop()
    assert ["systemctl", "--user", "stop", "bittrex_notifier"] in fake.calls


def test_control_failure_raises(linux_manager, monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeSystemctl(fail_on="enable"))
    with pytest.raises(ServiceError, match="unit failed"):
        linux_manager.install()


def test_remove_deletes_unit(linux_manager, monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeSystemctl())
    linux_manager.install()
    linux_manager.remove()
    assert not linux_manager.unit_path.exists()


def test_launchd_plist(tmp_path, monkeypatch):
    fake = FakeSystemctl()
    monkeypatch.setattr(subprocess, "run", fake)
    manager = ServiceManager(platform="darwin", home=tmp_path, exec_args=["/usr/bin/python3", "-m", "bittrex_notifier"])

    manager.install()
    plist = plistlib.loads(manager.unit_path.read_bytes())

    assert manager.unit_path.parent.name == "LaunchAgents"
    assert plist["Label"] == "com.bittrex_notifier"
    assert plist["ProgramArguments"] == ["/usr/bin/python3", "-m", "bittrex_notifier"]
    manager.start()
    assert ["launchctl", "load", str(manager.unit_path)] in fake.calls


def test_unsupported_platform(tmp_path):
    with pytest.raises(ServiceError):
        ServiceManager(platform="win32", home=tmp_path)
