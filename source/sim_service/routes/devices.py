from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

import settings
from implementations import RedisStore
from models import DeviceOut
from security import verify_bearer_token


store = RedisStore(settings.REDIS_URL, settings.REDIS_PREFIX)

devices_router = APIRouter(
    prefix="/devices", dependencies=[Depends(verify_bearer_token)]
)


# ---- Read-only state ----
@devices_router.get("/", response_model=list[DeviceOut])
async def list_devices() -> list[DeviceOut]:
    return [
        DeviceOut.from_device(d, settings.NODE_NAME) for d in store.all().values()
    ]


@devices_router.get("/{device_id}", response_model=DeviceOut)
async def get_device(device_id: str) -> DeviceOut:
    try:
        device = store.get(device_id)
    except KeyError as e:
        raise HTTPException(404, "Simulator not found") from e
    return DeviceOut.from_device(device, settings.NODE_NAME)
