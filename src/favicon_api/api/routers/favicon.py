"""Favicon endpoint."""

import time
from email.utils import formatdate

from fastapi import APIRouter, Depends, Query, Request, Response

from favicon_api.core.exceptions import InvalidURLError
from favicon_api.core.logging import get_logger
from favicon_api.orchestration import FaviconService

router = APIRouter()
logger = get_logger("api.favicon")

CLIENT_MAX_AGE = 86400


def get_service(request: Request) -> FaviconService:
    """Service built during application startup."""
    return request.app.state.service


def favicon_headers(cache_type: str | None = None) -> dict[str, str]:
    """Response headers for favicon bytes."""
    headers = {
        "X-Robots-Tag": "noindex, nofollow",
        "Cache-Control": f"public, max-age={CLIENT_MAX_AGE}",
        "Expires": formatdate(time.time() + CLIENT_MAX_AGE, usegmt=True),
    }
    if cache_type:
        headers["X-Cache-Type"] = cache_type
    return headers


@router.get("/")
async def get_favicon(
    url: str | None = Query(default=None, examples=["example.com"]),
    refresh: str | None = Query(default=None, description="'true' bypasses the cache"),
    service: FaviconService = Depends(get_service),
) -> Response:
    """
    Return the favicon for ``url``.

    Responds 400 with an empty body when ``url`` is missing or unusable, and
    500 with an empty body on any internal failure.
    """
    if url is None or not url.strip():
        return Response(status_code=400)

    try:
        result = await service.get_favicon(url, refresh=refresh == "true")
    except InvalidURLError as e:
        logger.info("invalid_url", url=url, error=e.message)
        return Response(status_code=400)
    except Exception:
        logger.exception("favicon_request_failed", url=url)
        return Response(status_code=500)

    return Response(
        content=result.content,
        media_type="image/x-icon",
        headers=favicon_headers(result.cache_type),
    )
