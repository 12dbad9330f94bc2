"""Base strategy class."""

from abc import abstractmethod

from favicon_api.core.interfaces import IStrategy
from favicon_api.core.logging import get_logger
from favicon_api.resolver.context import ResolutionContext


class BaseStrategy(IStrategy):
    """Base class for all fallback chain steps."""

    def __init__(self) -> None:
        self.logger = get_logger(f"strategy.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description."""
        ...

    @abstractmethod
    async def attempt(self, context: ResolutionContext) -> bytes | None:
        """Try to produce favicon bytes."""
        ...

    async def fetch_image(self, context: ResolutionContext, url: str) -> bytes | None:
        """Fetch ``url`` as an image, returning the body only on success."""
        result = await context.fetcher.fetch(url, is_image=True)
        if result.ok:
            return result.content
        self.logger.debug("image_rejected", url=url, error=result.error)
        return None
