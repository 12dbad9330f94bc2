"""favicon-api - locate and cache website favicons."""

from favicon_api.version import __version__

__all__ = ["__version__"]
