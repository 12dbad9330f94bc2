"""Abstract interfaces for resolution strategies and the favicon cache."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from favicon_api.models import Origin

if TYPE_CHECKING:
    from favicon_api.resolver.context import ResolutionContext


class IStrategy(ABC):
    """One step of the favicon fallback chain."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name, reported as provenance."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description."""
        ...

    @abstractmethod
    async def attempt(self, context: "ResolutionContext") -> bytes | None:
        """Try to produce favicon bytes, or None to fall through."""
        ...


class ICache(ABC):
    """Favicon cache interface."""

    @abstractmethod
    async def get(self, origin: Origin, default_digest: str, ttl: int) -> bytes | None:
        """Get fresh cached bytes for an origin."""
        ...

    @abstractmethod
    async def set(self, origin: Origin, content: bytes) -> None:
        """Store bytes for an origin."""
        ...
