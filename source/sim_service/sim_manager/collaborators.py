"""
External subsystems the interactions delegate effectful work to.

Each collaborator reports failure by raising; interactions wrap whatever is
raised in ``CollaboratorFailure``. The default implementations drive
``simctl`` and the simulator host application through subprocesses.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Protocol

import settings

from .models import SimProc

if TYPE_CHECKING:
    from .device import DeviceHandle


class Provisioner(Protocol):
    def start_device(
        self, device_id: str, args: list[str], direct_launch: bool = False
    ) -> SimProc: ...

    def terminate_device(self, device_id: str, proc: SimProc | None = None) -> None: ...


class HostSignaller(Protocol):
    def deliver_signal(self, pid: int, signo: int) -> None: ...


class URLOpener(Protocol):
    def open_url(self, device_id: str, url: str) -> None: ...


class RecordingSession(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


RecorderFactory = Callable[["DeviceHandle"], RecordingSession]


def _simctl(*args: str) -> list[str]:
    return [settings.SIMCTL_BIN, "simctl", *args]


def sim_workdir(device_id: str) -> str:
    wd = os.path.join(settings.SIM_BASE_DIR, "sims", device_id)
    os.makedirs(wd, exist_ok=True)
    return wd


def _tail(path: str, lines: int = 120) -> str:
    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            return "".join(f.readlines()[-lines:])
    except OSError as e:
        print("Error reading the diagnostic", e)
        return ""


class SimulatorAppProvisioner:
    """
    Boots devices either through the simulator host application (the
    default) or directly with ``simctl boot``, then blocks on
    ``simctl bootstatus`` until the device reports booted.
    """

    def _wait_booted(self, device_id: str) -> None:
        timeout = int(settings.SIM_BOOT_TIMEOUT_S or 120)
        subprocess.run(
            _simctl("bootstatus", device_id, "-b"),
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )

    def start_device(
        self, device_id: str, args: list[str], direct_launch: bool = False
    ) -> SimProc:
        print("Starting simulator...", device_id)
        if direct_launch:
            subprocess.run(
                _simctl("boot", device_id), capture_output=True, text=True, check=True
            )
            self._wait_booted(device_id)
            return SimProc(device_id=device_id, args=list(args))

        console_log = os.path.join(sim_workdir(device_id), "console.log")
        cmd = [settings.SIM_HOST_BIN, *args]
        with open(console_log, "ab") as log:
            proc = subprocess.Popen(
                cmd,
                stdout=log,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        print("Process executed", proc)

        try:
            self._wait_booted(device_id)
        except Exception as e:
            print("Error waiting for boot", e)
            print("=== console.log (tail) ===\n", _tail(console_log))
            if proc.poll() is None:
                proc.kill()
            raise
        return SimProc(
            device_id=device_id,
            args=cmd,
            pid=proc.pid,
            proc=proc,
            console_log=console_log,
        )

    @staticmethod
    def _kill_by_popen(proc: SimProc) -> None:
        p = proc.proc
        if p is None or p.poll() is not None:
            return
        p.terminate()
        try:
            p.wait(timeout=5)
        except subprocess.TimeoutExpired:
            p.kill()

    def terminate_device(self, device_id: str, proc: SimProc | None = None) -> None:
        print("Shutting down simulator...", device_id)
        subprocess.run(
            _simctl("shutdown", device_id),
            capture_output=True,
            text=True,
            check=True,
            timeout=int(settings.SIM_SHUTDOWN_TIMEOUT_S or 30),
        )
        if proc is not None:
            self._kill_by_popen(proc)


class OsSignaller:
    def deliver_signal(self, pid: int, signo: int) -> None:
        os.kill(pid, signo)


class SimctlURLOpener:
    def open_url(self, device_id: str, url: str) -> None:
        print("Opening url", url, "on", device_id)
        subprocess.run(
            _simctl("openurl", device_id, url),
            capture_output=True,
            text=True,
            check=True,
        )


def _default_recorder_factory() -> RecorderFactory:
    from .recording import video_recorder_factory

    return video_recorder_factory


@dataclass
class Collaborators:
    provisioner: Provisioner = field(default_factory=SimulatorAppProvisioner)
    signaller: HostSignaller = field(default_factory=OsSignaller)
    url_opener: URLOpener = field(default_factory=SimctlURLOpener)
    recorder_factory: RecorderFactory | None = field(
        default_factory=_default_recorder_factory
    )
