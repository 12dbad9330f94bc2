"""Core module - configuration, logging, URLs and exceptions."""

from favicon_api.core.config import Settings, get_settings, rotate_hash_key
from favicon_api.core.exceptions import (
    FaviconError,
    InvalidURLError,
    FetchError,
    TooManyRedirectsError,
    NotAnImageError,
    CacheIOError,
    ConfigurationError,
)

__all__ = [
    "Settings",
    "get_settings",
    "rotate_hash_key",
    "FaviconError",
    "InvalidURLError",
    "FetchError",
    "TooManyRedirectsError",
    "NotAnImageError",
    "CacheIOError",
    "ConfigurationError",
]
