from __future__ import annotations

from typing import TYPE_CHECKING

from .collaborators import HostSignaller, Provisioner, RecorderFactory, URLOpener
from .errors import CollaboratorFailure, RecordingUnavailable, ShutdownIncomplete
from .interaction import Interaction
from .launch_args import simulator_app_args
from .lifecycle import LifecycleEvent, require_booted, transition
from .models import LaunchConfiguration, LaunchOption, ProcessInfo
from .registry import kill_process as _kill_process
from .registry import signal_process

if TYPE_CHECKING:
    from .device import DeviceHandle


def boot(
    provisioner: Provisioner,
    configuration: LaunchConfiguration | None = None,
    recorder_factory: RecorderFactory | None = None,
    device_set_path: str | None = None,
) -> Interaction:
    config = configuration or LaunchConfiguration()

    def _boot(device: "DeviceHandle") -> None:
        booting = transition(device.state, LifecycleEvent.boot_requested)
        args = simulator_app_args(config, device.id, device_set_path)

        device.set_state(booting)
        try:
            proc = provisioner.start_device(
                device.id, args, direct_launch=config.has(LaunchOption.direct_launch)
            )
        except Exception as e:
            print("Error booting simulator", device.id, e)
            device.set_state(
                transition(device.state, LifecycleEvent.boot_failed),
                error_reason=str(e),
            )
            raise CollaboratorFailure(e) from e

        device.proc = proc
        device.set_state(transition(booting, LifecycleEvent.boot_succeeded))

        if (
            config.has(LaunchOption.record_video)
            and recorder_factory is not None
            and device.recording is None
        ):
            try:
                device.recording = recorder_factory(device)
            except Exception as e:
                print("Could not attach a video recorder", device.id, e)

    return Interaction("boot", _boot)


def shutdown(provisioner: Provisioner) -> Interaction:
    def _shutdown(device: "DeviceHandle") -> None:
        shutting_down = transition(device.state, LifecycleEvent.shutdown_requested)
        device.set_state(shutting_down)
        try:
            provisioner.terminate_device(device.id, device.proc)
        except Exception as e:
            print("Error shutting down simulator", device.id, e)
            device.error_reason = f"shutdown incomplete: {e}"
            raise ShutdownIncomplete(
                e, f"Simulator {device.id} left shutting down: {e}"
            ) from e

        if device.recording is not None:
            try:
                device.recording.stop()
            except Exception as e:
                print("Error stopping recording on shutdown", e)
        device.registry.clear()
        device.proc = None
        device.set_state(transition(shutting_down, LifecycleEvent.shutdown_succeeded))

    return Interaction("shutdown", _shutdown)


def open_url(url_opener: URLOpener, url: str) -> Interaction:
    def _open_url(device: "DeviceHandle") -> None:
        require_booted(device.state, "open a URL")
        try:
            url_opener.open_url(device.id, url)
        except Exception as e:
            raise CollaboratorFailure(e) from e

    return Interaction(f"open_url {url}", _open_url)


def signal(signaller: HostSignaller, signo: int, process: ProcessInfo) -> Interaction:
    def _signal(device: "DeviceHandle") -> None:
        signal_process(device, process, signo, signaller)

    return Interaction(f"signal {signo} {process.pid}", _signal)


def kill_process(signaller: HostSignaller, process: ProcessInfo) -> Interaction:
    def _kill(device: "DeviceHandle") -> None:
        _kill_process(device, process, signaller)

    return Interaction(f"kill {process.pid}", _kill)


def _recording(device: "DeviceHandle", action: str):
    if device.recording is None:
        raise RecordingUnavailable(f"Simulator {device.id} has no video recorder")
    require_booted(device.state, f"{action} recording")
    return device.recording


def start_recording_video() -> Interaction:
    def _start(device: "DeviceHandle") -> None:
        session = _recording(device, "start")
        try:
            session.start()
        except Exception as e:
            raise CollaboratorFailure(e) from e

    return Interaction("start_recording_video", _start)


def stop_recording_video() -> Interaction:
    def _stop(device: "DeviceHandle") -> None:
        session = _recording(device, "stop")
        try:
            session.stop()
        except Exception as e:
            raise CollaboratorFailure(e) from e

    return Interaction("stop_recording_video", _stop)
