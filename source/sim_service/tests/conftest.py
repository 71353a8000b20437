# conftest.py
import sys
import time
import pathlib

import pytest

# ----------------------
# Path setup: ensure sim_service root is importable as top-level
# so imports like `import settings` resolve to sim_service/settings.py
# ----------------------
_THIS_DIR = pathlib.Path(__file__).resolve().parent
_PKG_ROOT = _THIS_DIR.parent  # sim_service/
if str(_PKG_ROOT) not in sys.path:
    sys.path.insert(0, str(_PKG_ROOT))

# After adjusting sys.path, import project modules
import settings  # noqa: E402
from sim_manager.collaborators import Collaborators  # noqa: E402
from sim_manager.device import DeviceHandle  # noqa: E402
from sim_manager.models import LifecycleState, SimProc  # noqa: E402


# ----------------------
# Test Utilities / Fakes
# ----------------------
class FakeProvisioner:
    def __init__(self, start_error=None, terminate_error=None):
        self.start_error = start_error
        self.terminate_error = terminate_error
        self.started: list[tuple[str, list[str], bool]] = []
        self.terminated: list[str] = []

    def start_device(self, device_id, args, direct_launch=False):
        self.started.append((device_id, list(args), direct_launch))
        if self.start_error is not None:
            raise self.start_error
        return SimProc(device_id=device_id, args=list(args), pid=4242)

    def terminate_device(self, device_id, proc=None):
        self.terminated.append(device_id)
        if self.terminate_error is not None:
            raise self.terminate_error


class FakeSignaller:
    def __init__(self, error=None):
        self.error = error
        self.delivered: list[tuple[int, int]] = []

    def deliver_signal(self, pid, signo):
        if self.error is not None:
            raise self.error
        self.delivered.append((pid, signo))


class FakeURLOpener:
    def __init__(self, error=None):
        self.error = error
        self.opened: list[tuple[str, str]] = []

    def open_url(self, device_id, url):
        if self.error is not None:
            raise self.error
        self.opened.append((device_id, url))


class FakeRecording:
    def __init__(self):
        self.recording = False
        self.starts = 0
        self.stops = 0

    def start(self):
        if self.recording:
            return
        self.recording = True
        self.starts += 1

    def stop(self):
        if not self.recording:
            return
        self.recording = False
        self.stops += 1


class InMemoryStore:
    def __init__(self):
        self._data: dict[str, DeviceHandle] = {}
        self.puts: list[tuple[str, LifecycleState]] = []

    def put(self, device: DeviceHandle) -> None:
        device.updated_at = time.time()
        self._data[device.id] = device
        self.puts.append((device.id, device.state))

    def get(self, device_id: str) -> DeviceHandle:
        if device_id not in self._data:
            raise KeyError(device_id)
        return self._data[device_id]

    def all(self) -> dict[str, DeviceHandle]:
        return dict(self._data)


# ----------------------
# Shared Fixtures
# ----------------------
@pytest.fixture(autouse=True)
def sim_settings(tmp_path, monkeypatch):
    base_dir = tmp_path / "sim_data"
    base_dir.mkdir()
    monkeypatch.setattr(settings, "SIM_BASE_DIR", str(base_dir), raising=False)
    monkeypatch.setattr(
        settings, "SIM_DEVICE_SET_PATH", str(tmp_path / "Devices"), raising=False
    )
    monkeypatch.setattr(settings, "SIMCTL_BIN", "xcrun", raising=False)
    monkeypatch.setattr(settings, "SIM_HOST_BIN", "/sim/Simulator", raising=False)
    monkeypatch.setattr(settings, "SIM_DEVICE_ENV_KEY", "SIMULATOR_UDID", raising=False)
    monkeypatch.setattr(settings, "AUTH_TOKEN", "testtoken", raising=False)
    return str(base_dir)


@pytest.fixture
def provisioner():
    return FakeProvisioner()


@pytest.fixture
def signaller():
    return FakeSignaller()


@pytest.fixture
def url_opener():
    return FakeURLOpener()


@pytest.fixture
def collaborators(provisioner, signaller, url_opener):
    return Collaborators(
        provisioner=provisioner,
        signaller=signaller,
        url_opener=url_opener,
        recorder_factory=lambda device: FakeRecording(),
    )


@pytest.fixture
def device(tmp_path):
    data_dir = tmp_path / "Devices" / "SIM-1" / "data"
    return DeviceHandle(
        id="SIM-1",
        name="iPhone 6",
        state=LifecycleState.shut_down,
        data_dir=str(data_dir),
    )


@pytest.fixture
def booted_device(device):
    device.state = LifecycleState.booted
    device.proc = SimProc(device_id=device.id, pid=4242)
    return device
