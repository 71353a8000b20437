from __future__ import annotations

import os

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

import settings
from routes import devices_router


app = FastAPI(title="sim-service", version="0.1.0")


@app.get("/health")
async def health():
    return JSONResponse({"ok": "True"})


app.include_router(devices_router)

# ===== Entrypoint =====
if __name__ == "__main__":
    os.makedirs(os.path.join(settings.SIM_BASE_DIR, "sims"), exist_ok=True)
    uvicorn.run("main:app", host="0.0.0.0", port=8080, reload=False)
