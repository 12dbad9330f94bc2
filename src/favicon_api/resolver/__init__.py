"""Favicon fallback chain."""

from favicon_api.resolver.base import BaseStrategy
from favicon_api.resolver.context import ResolutionContext
from favicon_api.resolver.resolver import FaviconResolver
from favicon_api.resolver.strategies import (
    ExternalAPIStrategy,
    FileMapStrategy,
    HTMLLinkStrategy,
    RedirectedRootIcoStrategy,
    RootIcoStrategy,
    build_default_strategies,
    find_icon_href,
)

__all__ = [
    "BaseStrategy",
    "ResolutionContext",
    "FaviconResolver",
    "ExternalAPIStrategy",
    "FileMapStrategy",
    "HTMLLinkStrategy",
    "RedirectedRootIcoStrategy",
    "RootIcoStrategy",
    "build_default_strategies",
    "find_icon_href",
]
