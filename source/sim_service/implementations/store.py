import json
import time
from dataclasses import asdict

import psutil
from redis.client import Redis

from sim_manager.device import DeviceHandle
from sim_manager.errors import ProcessNotOwned
from sim_manager.models import LifecycleState, ProcessInfo, SimProc


class RedisStore:
    """
    Snapshots of device handles for display. Live handles stay with the
    caller; what comes back from ``get`` is a detached copy.
    """

    def __init__(
        self,
        url: str | None = None,
        namespace: str = "simservice",
    ) -> None:
        if not url:
            return

        self.r: Redis = Redis.from_url(
            url,
            decode_responses=True,
        )
        self.ns: str = namespace
        self.ids_key: str = f"{self.ns}:devices"

    # ---- Keys ----
    def _key(self, device_id: str) -> str:
        return f"{self.ns}:device:{device_id}"

    # ---- (de)Serialization ----
    def _to_dict(self, device: DeviceHandle) -> dict[str, object]:
        pid = device.proc.pid if device.proc else None
        return {
            "id": device.id,
            "name": device.name,
            "state": device.state.value,
            "data_dir": device.data_dir,
            "pid": (None if pid is None else int(pid)),
            "processes": [asdict(p) for p in device.registry.processes()],
            "error_reason": device.error_reason,
            "updated_at": float(device.updated_at),
        }

    def _from_dict(self, d: dict[str, object]) -> DeviceHandle:
        pid = d.get("pid")
        device = DeviceHandle(
            id=str(d["id"]),
            name=str(d.get("name") or ""),
            state=LifecycleState(str(d["state"])),
            data_dir=(None if d.get("data_dir") is None else str(d["data_dir"])),
            error_reason=(
                None if d.get("error_reason") is None else str(d["error_reason"])
            ),
            updated_at=float(str(d["updated_at"])),
        )
        if pid not in (None, ""):
            device.proc = SimProc(device_id=device.id, pid=int(str(pid)))
        for p in d.get("processes") or []:
            device.registry.register(ProcessInfo(**p))
        return device

    # ---- Liveness ----
    @staticmethod
    def _host_alive(pid: int | None) -> bool:
        if not pid:
            return False
        try:
            return psutil.pid_exists(int(pid))
        except Exception:
            return False

    def _reconcile(self, device: DeviceHandle) -> DeviceHandle:
        pid = device.proc.pid if device.proc else None
        if device.is_booted and pid and not self._host_alive(pid):
            device.error_reason = f"reconciled: host process {pid} not running"
        return device

    # ---- API ----
    def put(self, device: DeviceHandle) -> None:
        device.updated_at = time.time()
        data = self._to_dict(device)
        key = self._key(device.id)
        p = self.r.pipeline()
        p.set(key, json.dumps(data, ensure_ascii=False, separators=(",", ":")))
        p.sadd(self.ids_key, device.id)
        p.execute()

    def get(self, device_id: str) -> DeviceHandle:
        s = self.r.get(self._key(device_id))
        if s is None:
            raise KeyError(device_id)
        # pyrefly: ignore  # bad-argument-type
        device = self._from_dict(json.loads(s))
        return self._reconcile(device)

    def all(self) -> dict[str, DeviceHandle]:
        ids = self.r.smembers(self.ids_key)
        if not ids:
            return {}
        p = self.r.pipeline()
        # pyrefly: ignore  # no-matching-overload
        ordered = sorted(ids)
        for i in ordered:
            p.get(self._key(i))
        vals = p.execute()
        out: dict[str, DeviceHandle] = {}
        for i, s in zip(ordered, vals):
            if not s:
                continue
            try:
                out[i] = self._reconcile(self._from_dict(json.loads(s)))
            except (ValueError, KeyError, TypeError, ProcessNotOwned) as e:
                print("Error decoding simulator", i, e)
                continue
        return out

    def remove(self, device_id: str) -> None:
        p = self.r.pipeline()
        p.delete(self._key(device_id))
        p.srem(self.ids_key, device_id)
        p.execute()
