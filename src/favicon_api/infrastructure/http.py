"""Bounded HTTP fetcher with manual redirect following and image checks."""

import asyncio
from io import BytesIO
from typing import Any

import httpx
from PIL import Image

from favicon_api.core.config import Settings, get_settings
from favicon_api.core.exceptions import (
    FetchError,
    NotAnImageError,
    TooManyRedirectsError,
)
from favicon_api.core.logging import get_logger
from favicon_api.core.urls import resolve_link
from favicon_api.models import FetchResult, FetchStatus

REDIRECT_STATUS_CODES = frozenset({301, 302, 303, 307, 308})


def looks_like_image(content: bytes, content_type: str | None) -> bool:
    """Check that the content type is ``image/*`` and the body decodes."""
    primary = (content_type or "").split(";", 1)[0].split("/", 1)[0].strip().lower()
    if primary != "image" or not content:
        return False

    # Pillow has no SVG decoder
    if b"<svg" in content[:1000].lower():
        return True

    try:
        with Image.open(BytesIO(content)) as image:
            return image.width > 0 and image.height > 0
    except (OSError, ValueError, Image.DecompressionBombError):
        return False


class HTTPFetcher:
    """
    Async HTTP fetcher for favicon resolution.

    Every request asks for the first ``max_fetch_bytes`` of the resource and
    disables connection reuse. TLS certificates are not verified, so sites
    with broken certificates still resolve.

    Use as an async context manager:

        async with HTTPFetcher() as fetcher:
            result = await fetcher.fetch("http://example.com/favicon.ico", is_image=True)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = get_logger("http_fetcher")
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPFetcher":
        settings = self.settings
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.total_timeout, connect=settings.connect_timeout),
            follow_redirects=False,
            max_redirects=settings.max_redirects,
            verify=False,
            limits=httpx.Limits(max_keepalive_connections=0),
            headers={
                "User-Agent": settings.user_agent,
                "Range": f"bytes=0-{settings.max_fetch_bytes}",
                "Connection": "close",
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, is_image: bool = False) -> FetchResult:
        """
        Fetch a URL, following redirects up to the configured hop limit.

        Never raises for network problems: failures come back as a result
        with ``status=FAIL`` and an error code.

        Args:
            url: Absolute URL to fetch
            is_image: Require an ``image/*`` content type and a decodable body

        Returns:
            FetchResult with the body and the effective URL.
        """
        if not self._client:
            raise RuntimeError("Fetcher not initialized. Use async with.")

        try:
            return await asyncio.wait_for(
                self._fetch(self._client, url, is_image),
                timeout=self.settings.total_timeout,
            )
        except FetchError as e:
            self.logger.debug("fetch_failed", url=url, error=e.code, reason=e.message)
            return FetchResult(effective_url=e.url or url, error=e.code)
        except httpx.TooManyRedirects:
            self.logger.debug("fetch_failed", url=url, error=TooManyRedirectsError.code)
            return FetchResult(effective_url=url, error=TooManyRedirectsError.code)
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, asyncio.TimeoutError) as e:
            self.logger.debug(
                "fetch_failed",
                url=url,
                error=FetchError.code,
                reason=str(e) or type(e).__name__,
            )
            return FetchResult(effective_url=url, error=FetchError.code)

    async def _fetch(
        self, client: httpx.AsyncClient, url: str, is_image: bool
    ) -> FetchResult:
        manual = self.settings.manual_redirects
        final_url = await self.follow_redirects(url) if manual else url

        request = client.build_request("GET", final_url)
        response = await client.send(request, stream=True, follow_redirects=not manual)
        try:
            content = await self._read_capped(response)
        finally:
            await response.aclose()

        effective_url = str(response.url)
        content_type = response.headers.get("content-type")
        self.logger.debug(
            "fetch_completed",
            url=effective_url,
            status_code=response.status_code,
            size=len(content),
        )

        if not 200 <= response.status_code <= 399:
            return FetchResult(
                effective_url=effective_url,
                status_code=response.status_code,
                content_type=content_type,
                error=FetchError.code,
            )

        if is_image and not looks_like_image(content, content_type):
            raise NotAnImageError(
                f"Not an image: {effective_url}",
                url=effective_url,
                details={"content_type": content_type},
            )

        return FetchResult(
            status=FetchStatus.OK,
            content=content,
            effective_url=effective_url,
            status_code=response.status_code,
            content_type=content_type,
        )

    async def follow_redirects(self, url: str) -> str:
        """
        Probe ``url`` hop by hop with HEAD requests and return the final URL.

        Raises:
            TooManyRedirectsError: If more than ``max_redirects`` hops are needed.
            FetchError: If a redirect carries no usable Location.
        """
        if not self._client:
            raise RuntimeError("Fetcher not initialized. Use async with.")

        max_redirects = self.settings.max_redirects
        current = url

        for hop in range(max_redirects + 1):
            response = await self._client.head(current)
            if response.status_code not in REDIRECT_STATUS_CODES:
                return current
            if hop == max_redirects:
                break

            location = response.headers.get("location")
            if not location:
                raise FetchError(f"Redirect without Location header: {current}", url=current)

            target = resolve_link(location, current)
            if target is None:
                raise FetchError(f"Cannot resolve redirect target: {location}", url=current)

            self.logger.debug("redirect", source=current, target=target)
            current = target

        raise TooManyRedirectsError(
            f"Too many redirects (limit {max_redirects})",
            url=current,
            details={"max_redirects": max_redirects},
        )

    async def _read_capped(self, response: httpx.Response) -> bytes:
        limit = self.settings.max_fetch_bytes + 1
        chunks: list[bytes] = []
        size = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size >= limit:
                break
        return b"".join(chunks)[:limit]
