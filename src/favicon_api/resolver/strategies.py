"""Fallback chain steps, in the order they are tried."""

import asyncio
import html
import re
from pathlib import Path
from urllib.parse import quote

from favicon_api.core.config import Settings
from favicon_api.core.exceptions import InvalidURLError
from favicon_api.core.urls import normalize_url, resolve_link
from favicon_api.resolver.base import BaseStrategy
from favicon_api.resolver.context import ResolutionContext

# <link ... rel="icon|shortcut icon|apple-touch-icon" ...>
ICON_LINK_PATTERN = re.compile(
    r"""<link[^>]+rel=["'](?:icon|shortcut icon|apple-touch-icon)["'][^>]*>""",
    re.IGNORECASE,
)
HREF_PATTERN = re.compile(r"""href=["'](.*?)["']""", re.IGNORECASE)


def find_icon_href(document: str) -> str | None:
    """Return the href of the first icon ``<link>`` tag, if any."""
    document = document.replace("\n", "").replace("\r", "")
    tag = ICON_LINK_PATTERN.search(document)
    if not tag:
        return None
    href = HREF_PATTERN.search(tag.group(0))
    if not href:
        return None
    value = html.unescape(href.group(1).strip())
    return value or None


class FileMapStrategy(BaseStrategy):
    """Serve a local file for hosts matching an operator-configured pattern."""

    def __init__(self, file_map: dict[str, Path]) -> None:
        self.file_map = dict(file_map)
        super().__init__()

    @property
    def name(self) -> str:
        return "file_map"

    @property
    def description(self) -> str:
        return "Local file mapped to the host pattern"

    async def attempt(self, context: ResolutionContext) -> bytes | None:
        target = context.origin.url
        for pattern, path in self.file_map.items():
            try:
                matched = re.search(pattern, target, re.IGNORECASE)
            except re.error as e:
                self.logger.warning("file_map_bad_pattern", pattern=pattern, error=str(e))
                continue
            if not matched:
                continue

            # First matching rule wins, even if its file is unreadable
            try:
                data = await asyncio.to_thread(Path(path).read_bytes)
            except OSError as e:
                self.logger.warning("file_map_unreadable", path=str(path), error=str(e))
                return None
            return data or None
        return None


class HTMLLinkStrategy(BaseStrategy):
    """Follow the icon ``<link>`` declared in the site's HTML."""

    @property
    def name(self) -> str:
        return "html"

    @property
    def description(self) -> str:
        return "Icon link declared in the page head"

    async def attempt(self, context: ResolutionContext) -> bytes | None:
        page = await context.get_page()
        if not page.ok:
            return None

        href = find_icon_href(page.content.decode("utf-8", errors="replace"))
        if not href:
            self.logger.debug("icon_link_missing", url=page.effective_url)
            return None

        icon_url = resolve_link(href, page.effective_url)
        if not icon_url:
            return None
        return await self.fetch_image(context, icon_url)


class RootIcoStrategy(BaseStrategy):
    """Try ``/favicon.ico`` at the origin."""

    @property
    def name(self) -> str:
        return "root_ico"

    @property
    def description(self) -> str:
        return "favicon.ico at the site root"

    async def attempt(self, context: ResolutionContext) -> bytes | None:
        return await self.fetch_image(context, context.origin.join("favicon.ico"))


class RedirectedRootIcoStrategy(BaseStrategy):
    """Try ``/favicon.ico`` on the origin the page redirected to."""

    @property
    def name(self) -> str:
        return "redirected_root_ico"

    @property
    def description(self) -> str:
        return "favicon.ico at the root of the redirect target"

    async def attempt(self, context: ResolutionContext) -> bytes | None:
        page = await context.get_page()
        try:
            redirected = normalize_url(page.effective_url)
        except InvalidURLError:
            return None

        if redirected == context.origin:
            return None

        self.logger.debug("origin_redirected", source=context.origin.url, target=redirected.url)
        return await self.fetch_image(context, redirected.join("favicon.ico"))


class ExternalAPIStrategy(BaseStrategy):
    """
    Delegate to a third-party favicon service.

    ``template`` may use ``{url}`` (URL-encoded origin) and ``{host}``. The
    body is accepted as-is on any successful response, without image checks.
    """

    def __init__(self, name: str, template: str, description: str = "") -> None:
        self._name = name
        self._description = description or f"External favicon service ({name})"
        self.template = template
        super().__init__()

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    async def attempt(self, context: ResolutionContext) -> bytes | None:
        if not self.template:
            return None

        origin = context.origin
        url = self.template.format(url=quote(origin.url, safe=""), host=origin.host)
        result = await context.fetcher.fetch(url)
        if result.ok and result.content:
            return result.content
        return None


def build_default_strategies(settings: Settings) -> list[BaseStrategy]:
    """Fallback chain in resolution order."""
    return [
        FileMapStrategy(settings.file_map),
        HTMLLinkStrategy(),
        RootIcoStrategy(),
        RedirectedRootIcoStrategy(),
        ExternalAPIStrategy(
            "url_api",
            settings.url_api_template,
            "Favicon-by-URL service",
        ),
        ExternalAPIStrategy(
            "host_api",
            settings.host_api_template,
            "Favicon-by-hostname service",
        ),
    ]
