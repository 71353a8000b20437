from __future__ import annotations

import signal
from typing import TYPE_CHECKING, Iterator

import psutil

import settings

from .errors import CollaboratorFailure, ProcessNotOwned
from .lifecycle import require_booted
from .models import ProcessInfo

if TYPE_CHECKING:
    from .collaborators import HostSignaller
    from .device import DeviceHandle


def owned_by(info: ProcessInfo, device_id: str) -> bool:
    """A process belongs to a device iff that device launched it."""
    return info.device_id == device_id


class ProcessRegistry:
    """Processes known to have been launched by one device."""

    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        self._procs: dict[int, ProcessInfo] = {}

    def register(self, info: ProcessInfo) -> None:
        if not owned_by(info, self.device_id):
            raise ProcessNotOwned(info.pid, self.device_id, info.device_id)
        self._procs[info.pid] = info

    def unregister(self, pid: int) -> ProcessInfo | None:
        return self._procs.pop(pid, None)

    def get(self, pid: int) -> ProcessInfo | None:
        return self._procs.get(pid)

    def processes(self) -> list[ProcessInfo]:
        return list(self._procs.values())

    def clear(self) -> None:
        self._procs.clear()

    def owns(self, info: ProcessInfo, device_id: str | None = None) -> bool:
        return owned_by(info, device_id or self.device_id)

    def __contains__(self, pid: int) -> bool:
        return pid in self._procs

    def __len__(self) -> int:
        return len(self._procs)


# ---- Host lookup ----
def _safe(call, default=None):
    try:
        return call()
    except (psutil.AccessDenied, psutil.ZombieProcess, psutil.NoSuchProcess):
        return default


def _info_from_psutil(p: psutil.Process) -> ProcessInfo | None:
    env = _safe(p.environ, {}) or {}
    device_id = env.get(settings.SIM_DEVICE_ENV_KEY)
    if not device_id:
        return None
    return ProcessInfo(
        pid=p.pid,
        ppid=_safe(p.ppid, 0) or 0,
        device_id=device_id,
        name=_safe(p.name, "") or "",
    )


def process_info_from_host(pid: int) -> ProcessInfo | None:
    """
    Describe a live host process, or None if it was not launched inside a
    simulator (or cannot be inspected).
    """
    try:
        p = psutil.Process(pid)
    except psutil.Error as e:
        print("Error looking up process", pid, e)
        return None
    return _info_from_psutil(p)


def iter_host_processes() -> Iterator[ProcessInfo]:
    for p in psutil.process_iter():
        info = _info_from_psutil(p)
        if info is not None:
            yield info


def scan_host(device_id: str) -> list[ProcessInfo]:
    """All host processes whose launching device is ``device_id``."""
    return [info for info in iter_host_processes() if owned_by(info, device_id)]


# ---- Signal delivery ----
def signal_process(
    device: "DeviceHandle",
    info: ProcessInfo,
    signo: int,
    signaller: "HostSignaller",
) -> None:
    if not owned_by(info, device.id):
        raise ProcessNotOwned(info.pid, device.id, info.device_id)
    require_booted(device.state, "signal a process")

    print(f"Sending signal {signo} to {info.pid} ({info.name}) on {device.id}")
    try:
        signaller.deliver_signal(info.pid, signo)
    except Exception as e:
        print("Error delivering signal", e)
        raise CollaboratorFailure(e) from e


def kill_process(
    device: "DeviceHandle", info: ProcessInfo, signaller: "HostSignaller"
) -> None:
    signal_process(device, info, signal.SIGKILL, signaller)
    device.registry.unregister(info.pid)
