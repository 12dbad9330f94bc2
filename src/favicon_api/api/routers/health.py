"""Service status endpoint."""

import os
from pathlib import Path

from fastapi import APIRouter, Depends

from favicon_api.api.routers.favicon import get_service
from favicon_api.orchestration import FaviconService
from favicon_api.version import __version__

router = APIRouter()


def cache_writable(directory: Path) -> bool:
    """Whether cache files can be created under ``directory``."""
    # The directory is created on first write, so check the nearest existing ancestor
    target = directory
    while not target.exists() and target != target.parent:
        target = target.parent
    return target.is_dir() and os.access(target, os.W_OK | os.X_OK)


@router.get("/health")
async def health_check(service: FaviconService = Depends(get_service)) -> dict:
    """
    Report whether favicons can be served and cached.

    ``status`` is ``degraded`` when caching is on but the cache directory
    cannot be written, so any request that misses the cache fails on store.
    """
    settings = service.settings
    writable = cache_writable(settings.cache_dir) if service.caching_enabled else None
    return {
        "status": "degraded" if writable is False else "healthy",
        "version": __version__,
        "caching": service.caching_enabled,
        "cache_writable": writable,
        "expire_seconds": settings.expire_seconds,
    }
