"""
后台服务管理：install / remove / start / stop / status。

- Linux：systemd 用户级 unit（~/.config/systemd/user/{name}.service），systemctl --user 控制
- macOS：launchd agent（~/Library/LaunchAgents/{name}.plist），launchctl 控制
"""

import plistlib
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .config import SERVICE_DESCRIPTION, SERVICE_NAME
from .errors import ServiceError

SYSTEMD_UNIT_TEMPLATE = """[Unit]
Description={description}
After=network-online.target

[Service]
Type=simple
ExecStart={exec_start}
Restart=on-failure

[Install]
WantedBy=default.target
"""


def default_exec_args() -> List[str]:
    return [sys.executable, "-m", "bittrex_notifier"]


def _quote_exec_arg(arg: str) -> str:
    if not arg or any(ch in arg for ch in ' \t"\\'):
        escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return arg


class ServiceManager:
    def __init__(
        self,
        name: str = SERVICE_NAME,
        description: str = SERVICE_DESCRIPTION,
        exec_args: Optional[Sequence[str]] = None,
        platform: Optional[str] = None,
        home: Optional[Path] = None,
    ) -> None:
        self.name = name
        self.description = description
        self.exec_args = list(exec_args) if exec_args else default_exec_args()
        self.platform = platform or sys.platform
        self.home = home or Path.home()
        if not (self.platform.startswith("linux") or self.platform == "darwin"):
            raise ServiceError(f"不支持的平台：{self.platform}")

    @property
    def is_launchd(self) -> bool:
        return self.platform == "darwin"

    @property
    def label(self) -> str:
        return f"com.{self.name}" if self.is_launchd else self.name

    @property
    def unit_path(self) -> Path:
        if self.is_launchd:
            return self.home / "Library" / "LaunchAgents" / f"{self.label}.plist"
        return self.home / ".config" / "systemd" / "user" / f"{self.name}.service"

    def render_unit(self) -> bytes:
        if self.is_launchd:
            return plistlib.dumps(
                {
                    "Label": self.label,
                    "ProgramArguments": self.exec_args,
                    "KeepAlive": True,
                    "RunAtLoad": False,
                    "StandardErrorPath": f"/tmp/{self.name}.err",
                    "StandardOutPath": f"/tmp/{self.name}.log",
                }
            )
        exec_start = " ".join(_quote_exec_arg(arg) for arg in self.exec_args)
        return SYSTEMD_UNIT_TEMPLATE.format(
            description=self.description, exec_start=exec_start
        ).encode("utf-8")

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(list(args), capture_output=True, text=True, timeout=30)
        except (OSError, subprocess.SubprocessError) as exc:
            raise ServiceError(f"{args[0]} 调用失败：{exc}") from exc

    def _control(self, *args: str) -> subprocess.CompletedProcess:
        completed = self._run(*args)
        if completed.returncode != 0:
            message = (completed.stderr or completed.stdout).strip()
            raise ServiceError(f"{' '.join(args)} 失败：{message}")
        return completed

    def _require_installed(self) -> None:
        if not self.unit_path.exists():
            raise ServiceError("服务尚未安装")

    def _is_running(self) -> bool:
        if self.is_launchd:
            return self._run("launchctl", "list", self.label).returncode == 0
        completed = self._run("systemctl", "--user", "is-active", self.name)
        return completed.stdout.strip() == "active"

    def install(self) -> str:
        if self.unit_path.exists():
            raise ServiceError("服务已安装")
        self.unit_path.parent.mkdir(parents=True, exist_ok=True)
        self.unit_path.write_bytes(self.render_unit())
        if not self.is_launchd:
            self._control("systemctl", "--user", "daemon-reload")
            self._control("systemctl", "--user", "enable", self.name)
        return f"Install {self.description}:\t\t\t[  OK  ]"

    def remove(self) -> str:
        self._require_installed()
        if self._is_running():
            self.stop()
        if not self.is_launchd:
            self._control("systemctl", "--user", "disable", self.name)
        self.unit_path.unlink()
        if not self.is_launchd:
            self._control("systemctl", "--user", "daemon-reload")
        return f"Removing {self.description}:\t\t\t[  OK  ]"

    def start(self) -> str:
        self._require_installed()
        if self._is_running():
            raise ServiceError("服务已在运行")
        if self.is_launchd:
            self._control("launchctl", "load", str(self.unit_path))
        else:
            self._control("systemctl", "--user", "start", self.name)
        return f"Starting {self.description}:\t\t\t[  OK  ]"

    def stop(self) -> str:
        self._require_installed()
        if not self._is_running():
            raise ServiceError("服务未运行")
        if self.is_launchd:
            self._control("launchctl", "unload", str(self.unit_path))
        else:
            self._control("systemctl", "--user", "stop", self.name)
        return f"Stopping {self.description}:\t\t\t[  OK  ]"

    def status(self) -> str:
        self._require_installed()
        if self._is_running():
            return f"{self.description} is running..."
        return f"{self.description} is stopped"
