from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from sim_manager.models import LifecycleState

if TYPE_CHECKING:
    from sim_manager.device import DeviceHandle


class ProcessOut(BaseModel):
    pid: int
    ppid: int
    name: str


class DeviceOut(BaseModel):
    id: str
    name: str
    state: LifecycleState
    node: str
    pid: int | None = None
    processes: list[ProcessOut] = []
    error_reason: str | None = None
    needs_attention: bool = False
    updated_at: float

    @staticmethod
    def from_device(device: "DeviceHandle", node: str) -> "DeviceOut":
        return DeviceOut(
            id=device.id,
            name=device.name,
            state=device.state,
            node=node,
            pid=device.proc.pid if device.proc else None,
            processes=[
                ProcessOut(pid=p.pid, ppid=p.ppid, name=p.name)
                for p in device.registry.processes()
            ],
            error_reason=device.error_reason,
            # A failed shutdown leaves the device here until someone retries
            needs_attention=device.state == LifecycleState.shutting_down,
            updated_at=device.updated_at,
        )
