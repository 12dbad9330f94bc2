"""Infrastructure layer."""

from favicon_api.infrastructure.http import HTTPFetcher
from favicon_api.infrastructure.cache import DiskCache

__all__ = ["HTTPFetcher", "DiskCache"]
