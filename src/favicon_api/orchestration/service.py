"""Favicon service tying the cache, resolver and default icon together."""

from pathlib import Path

from favicon_api.core.config import Settings, get_settings, rotate_hash_key
from favicon_api.core.exceptions import ConfigurationError
from favicon_api.core.interfaces import ICache
from favicon_api.core.logging import get_logger
from favicon_api.core.urls import normalize_url
from favicon_api.infrastructure.cache import DiskCache, content_digest
from favicon_api.models import FaviconResponse
from favicon_api.resolver import FaviconResolver

CACHE_TYPE_IO = "IO"


def load_default_icon(path: Path | None) -> bytes:
    """Read the configured default icon, failing hard if it is unusable."""
    if path is None:
        raise ConfigurationError("DEFAULT_ICON_PATH is not set")
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read default icon: {e}",
            details={"path": str(path)},
        ) from e
    if not data:
        raise ConfigurationError("Default icon is empty", details={"path": str(path)})
    return data


class FaviconService:
    """Serves favicons from the disk cache, resolving them on a miss."""

    def __init__(
        self,
        settings: Settings | None = None,
        resolver: FaviconResolver | None = None,
        cache: ICache | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger = get_logger("favicon_service")
        self.default_icon = load_default_icon(self.settings.default_icon_path)
        self.default_digest = content_digest(self.default_icon)
        self.resolver = resolver or FaviconResolver(self.settings)
        self.cache = cache or DiskCache(self.settings.cache_dir, self.settings.get_hash_key())

    @property
    def caching_enabled(self) -> bool:
        return self.settings.expire_seconds > 0

    async def get_favicon(self, url: str, refresh: bool = False) -> FaviconResponse:
        """
        Get the favicon for a URL.

        A fresh cache entry is returned unless ``refresh`` is set or caching
        is disabled. Otherwise the resolver runs, the default icon stands in
        when nothing is found, and the result is written back to the cache.

        Raises:
            InvalidURLError: If the URL has no extractable host.
            CacheIOError: If the result cannot be stored.
        """
        origin = normalize_url(url)

        if self.caching_enabled and not refresh:
            cached = await self.cache.get(
                origin, self.default_digest, self.settings.expire_seconds
            )
            if cached is not None:
                self.logger.debug("served_from_cache", origin=origin.url)
                return FaviconResponse(
                    content=cached,
                    cache_type=CACHE_TYPE_IO,
                    is_default=content_digest(cached) == self.default_digest,
                )

        outcome = await self.resolver.resolve(origin)
        if outcome.content is not None:
            response = FaviconResponse(content=outcome.content, strategy=outcome.strategy)
        else:
            response = FaviconResponse(content=self.default_icon, is_default=True)

        if self.caching_enabled:
            await self.cache.set(origin, response.content)

        return response


def create_service(settings: Settings | None = None) -> FaviconService:
    """Build a service, rotating an insecure hash key first."""
    settings = settings or get_settings()
    rotated = rotate_hash_key(settings)
    if rotated is not settings:
        get_logger("favicon_service").warning(
            "hash_key_rotated", env_file=str(settings.env_file)
        )
    return FaviconService(rotated)
