"""Runtime config endpoint for frontend consumption."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..config import Settings
from ..deps import get_app_settings
from ..models import ClientConfig

router = APIRouter(tags=["config"])


@router.get("/config", response_model=ClientConfig)
async def get_config(settings: Settings = Depends(get_app_settings)) -> ClientConfig:
    """Expose non-sensitive runtime limits."""
    return ClientConfig(
        model=settings.OPENAI_MODEL,
        maxImages=settings.MAX_IMAGES,
        maxBodyMb=settings.MAX_BODY_MB,
        defaultImageMime=settings.DEFAULT_IMAGE_MIME,
    )
