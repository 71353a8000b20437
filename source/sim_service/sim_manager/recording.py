from __future__ import annotations

import os
import signal
import subprocess
from typing import TYPE_CHECKING, Any

import settings

from .collaborators import sim_workdir

if TYPE_CHECKING:
    from .device import DeviceHandle


class SimctlVideoRecording:
    """
    Records the device display with ``simctl io recordVideo``.

    ``start`` while recording and ``stop`` while stopped are no-ops.
    """

    def __init__(self, device_id: str, path: str) -> None:
        self.device_id = device_id
        self.path = path
        self._proc: subprocess.Popen[Any] | None = None

    @property
    def recording(self) -> bool:
        return self._proc is not None and self._proc.poll() is None

    def start(self) -> None:
        if self.recording:
            return
        cmd = [
            settings.SIMCTL_BIN,
            "simctl",
            "io",
            self.device_id,
            "recordVideo",
            "--force",
            self.path,
        ]
        print("Starting video recording", cmd)
        self._proc = subprocess.Popen(
            cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE
        )

    def stop(self) -> None:
        if not self.recording:
            self._proc = None
            return
        p = self._proc
        assert p is not None
        # recordVideo finalizes the file on SIGINT
        p.send_signal(signal.SIGINT)
        try:
            p.wait(timeout=10)
        except subprocess.TimeoutExpired:
            print("recordVideo did not exit, killing it")
            p.kill()
        self._proc = None
        print("Video recording stored at", self.path)


def video_recorder_factory(device: "DeviceHandle") -> SimctlVideoRecording:
    return SimctlVideoRecording(
        device.id, os.path.join(sim_workdir(device.id), "video.mp4")
    )
