"""Favicon resolver driving the fallback chain."""

import time

import httpx

from favicon_api.core.config import Settings, get_settings
from favicon_api.core.logging import get_logger
from favicon_api.infrastructure.http import HTTPFetcher
from favicon_api.models import Origin, ResolutionOutcome
from favicon_api.resolver.base import BaseStrategy
from favicon_api.resolver.context import ResolutionContext
from favicon_api.resolver.strategies import build_default_strategies


class FaviconResolver:
    """Tries each strategy in order and stops at the first one with bytes."""

    def __init__(
        self,
        settings: Settings | None = None,
        strategies: list[BaseStrategy] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.strategies = (
            strategies if strategies is not None else build_default_strategies(self.settings)
        )
        self.logger = get_logger("resolver")
        self._transport = transport

    async def resolve(self, origin: Origin) -> ResolutionOutcome:
        """Resolve the favicon for an origin, or a not-found outcome."""
        start_time = time.time()
        self.logger.info("resolution_started", origin=origin.url)

        async with HTTPFetcher(self.settings, transport=self._transport) as fetcher:
            context = ResolutionContext(origin, fetcher)

            for strategy in self.strategies:
                try:
                    content = await strategy.attempt(context)
                except Exception as e:
                    self.logger.warning(
                        "strategy_error",
                        strategy=strategy.name,
                        origin=origin.url,
                        error=str(e),
                    )
                    continue

                if content:
                    duration = time.time() - start_time
                    self.logger.info(
                        "favicon_found",
                        origin=origin.url,
                        strategy=strategy.name,
                        size=len(content),
                        duration=duration,
                    )
                    return ResolutionOutcome(
                        content=content,
                        strategy=strategy.name,
                        duration=duration,
                    )

                self.logger.debug("strategy_failed", strategy=strategy.name, origin=origin.url)

        duration = time.time() - start_time
        self.logger.info("favicon_not_found", origin=origin.url, duration=duration)
        return ResolutionOutcome(duration=duration)
