import os
from pathlib import Path
from dotenv import load_dotenv

_ = load_dotenv()

BASE_DIR = Path(__file__).resolve().parent
SIM_BASE_DIR = os.environ.get("SIM_BASE_DIR", os.path.join(BASE_DIR, "sim_data"))

# Default CoreSimulator device set; per-device data lives in <set>/<udid>/data
SIM_DEVICE_SET_PATH = os.environ.get(
    "SIM_DEVICE_SET_PATH",
    os.path.expanduser("~/Library/Developer/CoreSimulator/Devices"),
)

SIM_HOST_BIN = os.environ.get(
    "SIM_HOST_BIN",
    "/Applications/Xcode.app/Contents/Developer/Applications/"
    "Simulator.app/Contents/MacOS/Simulator",
)
SIMCTL_BIN = os.environ.get("SIMCTL_BIN", "xcrun")

SIM_BOOT_TIMEOUT_S = int(os.environ.get("SIM_BOOT_TIMEOUT_S", "120"))
SIM_SHUTDOWN_TIMEOUT_S = int(os.environ.get("SIM_SHUTDOWN_TIMEOUT_S", "30"))

# Environment variable CoreSimulator sets on every process launched inside a device
SIM_DEVICE_ENV_KEY = os.environ.get("SIM_DEVICE_ENV_KEY", "SIMULATOR_UDID")

NODE_NAME = os.environ.get("NODE_NAME", "local-node")

REDIS_URL: str = os.environ.get("REDIS_URL", "redis://redis:6379/1")
REDIS_PREFIX: str = os.environ.get("REDIS_PREFIX", "simservice")

AUTH_TOKEN: str = os.environ.get("AUTH_TOKEN", "")
