"""Per-request state shared by resolution strategies."""

from favicon_api.infrastructure.http import HTTPFetcher
from favicon_api.models import FetchResult, Origin


class ResolutionContext:
    """Origin being resolved plus lazily fetched page state."""

    def __init__(self, origin: Origin, fetcher: HTTPFetcher) -> None:
        self.origin = origin
        self.fetcher = fetcher
        self._page: FetchResult | None = None

    async def get_page(self) -> FetchResult:
        """Fetch the origin's page once and reuse the result."""
        if self._page is None:
            self._page = await self.fetcher.fetch(self.origin.url)
        return self._page
