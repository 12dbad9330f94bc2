"""Custom exceptions for favicon-api."""


class FaviconError(Exception):
    """Base exception for all favicon-api errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidURLError(FaviconError):
    """Raised when an input URL cannot be normalized to an origin."""

    pass


class FetchError(FaviconError):
    """Raised when an outbound HTTP fetch fails."""

    code = "fetch_failed"

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class TooManyRedirectsError(FetchError):
    """Raised when a redirect chain exceeds the hop limit."""

    code = "too_many_redirects"


class NotAnImageError(FetchError):
    """Raised when a response body fails image validation."""

    code = "not_an_image"


class CacheIOError(FaviconError):
    """Raised when the cache directory or a cache file cannot be written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path


class ConfigurationError(FaviconError):
    """Raised when configuration is missing or invalid."""

    pass
