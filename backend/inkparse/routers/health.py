"""Health endpoint (also the keep-alive ping target)."""
from __future__ import annotations

import time
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Request

from ..config import Settings
from ..deps import get_app_settings
from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Liveness probe endpoint. Always 200."""
    return HealthResponse(
        status="ok",
        model=settings.OPENAI_MODEL,
        uptimeSeconds=round(time.monotonic() - request.app.state.started_at, 1),
        time=datetime.now(timezone.utc).isoformat(),
    )
