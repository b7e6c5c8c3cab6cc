# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints."""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from student_hub import __version__
from student_hub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""

    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    store: ComponentHealth


async def check_store(request: Request) -> ComponentHealth:
    """Ping the document store."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        return ComponentHealth(status="unhealthy", message="Store not initialized")
    start = time.time()
    try:
        ok = await store.ping()
    except Exception as e:
        logger.error("Store health check failed: %s", e)
        return ComponentHealth(status="unhealthy", message=str(e))
    latency = (time.time() - start) * 1000
    if not ok:
        return ComponentHealth(status="unhealthy", latency_ms=round(latency, 2))
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Report service status and store connectivity."""
    store = await check_store(request)
    return HealthResponse(
        status="healthy" if store.status == "healthy" else "degraded",
        timestamp=utc_now(),
        version=__version__,
        environment=request.app.state.settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        store=store,
    )
