"""
Health check endpoints.

Provides:
- /health: plain liveness message
- /health/live: Liveness probe (process is up)
- /health/ready: Readiness probe (provider credential configured)

Neither probe calls the provider; readiness never reveals the credential.
"""

import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from config import Config
from inference import InferenceClient

from .dependencies import get_inference_client

router = APIRouter(tags=["health"])

_START_TIME = time.time()


@router.get("/health")
async def health():
    return {"message": "Server is healthy"}


@router.get("/health/live")
async def health_live():
    """Liveness probe."""
    return {"status": "alive", "uptime_seconds": round(time.time() - _START_TIME, 1)}


@router.get("/health/ready")
async def health_ready(client: InferenceClient = Depends(get_inference_client)):
    """Readiness probe."""
    checks = {
        "provider": client.adapter.name,
        "credential_configured": client.credential_present(),
        "config_valid": Config.validate(),
    }
    ready = checks["credential_configured"] and checks["config_valid"]
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "not_ready", **checks},
    )
