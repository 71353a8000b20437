from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import settings

from .models import LifecycleState, SimProc
from .registry import ProcessRegistry

if TYPE_CHECKING:
    from .collaborators import RecordingSession


@dataclass
class DeviceHandle:
    """
    One simulator instance, owned by the caller.

    Pipelines borrow the handle while they run; ``state`` is only ever
    changed by interactions, one assignment per transition.
    """

    id: str
    name: str = ""
    state: LifecycleState = LifecycleState.unknown
    data_dir: str | None = None
    registry: ProcessRegistry | None = None
    recording: "RecordingSession | None" = None
    proc: SimProc | None = None
    error_reason: str | None = None
    updated_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.registry is None:
            self.registry = ProcessRegistry(self.id)
        if self.data_dir is None:
            self.data_dir = os.path.join(settings.SIM_DEVICE_SET_PATH, self.id, "data")

    def set_state(self, state: LifecycleState, error_reason: str | None = None) -> None:
        print(f"Simulator {self.id}: {self.state.value} -> {state.value}")
        self.state = state
        self.error_reason = error_reason
        self.updated_at = time.time()

    @property
    def is_booted(self) -> bool:
        return self.state == LifecycleState.booted
