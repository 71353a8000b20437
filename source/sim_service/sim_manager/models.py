from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LifecycleState(str, Enum):
    unknown = "unknown"
    shut_down = "shut_down"
    booting = "booting"
    booted = "booted"
    shutting_down = "shutting_down"


class LaunchOption(str, Enum):
    # Boot through CoreSimulator directly instead of the Simulator host app
    direct_launch = "direct_launch"
    record_video = "record_video"
    disconnect_hardware_keyboard = "disconnect_hardware_keyboard"


class LaunchConfiguration(BaseModel):
    """
    Declarative boot parameters for a simulator.

    Values are checked structurally when compiled into host arguments,
    not on construction, so a bad locale surfaces as a failed boot.
    """

    model_config = ConfigDict(frozen=True)

    locale: str | None = Field(None, description="Locale identifier, e.g. en_US")
    scale: float | None = Field(None, description="Window scale, 0.25 to 1.0")
    environment: dict[str, str] = Field(
        default_factory=dict, description="Boot environment variables"
    )
    options: frozenset[LaunchOption] = Field(default_factory=frozenset)

    def has(self, option: LaunchOption) -> bool:
        return option in self.options


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    ppid: int
    device_id: str
    name: str = ""


@dataclass(frozen=True)
class SimulatorApplication:
    bundle_id: str
    name: str = ""
    path: str = ""


@dataclass
class SimProc:
    """
    Handle to a running simulator host process, as returned by a provisioner.
    """

    device_id: str
    args: list[str] = field(default_factory=list)
    pid: int | None = None
    proc: subprocess.Popen[Any] | None = None
    console_log: str | None = None
