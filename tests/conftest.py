"""Pytest configuration and fixtures."""

from io import BytesIO
from pathlib import Path

import httpx
import pytest
from PIL import Image

from favicon_api.core.config import Settings
from favicon_api.models import ResolutionOutcome


def make_image(fmt: str = "PNG", color: tuple = (255, 0, 0, 255)) -> bytes:
    """Encode a small solid image."""
    buffer = BytesIO()
    Image.new("RGBA", (16, 16), color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeWeb:
    """Route table for httpx.MockTransport, keyed by scheme, netloc and path."""

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, dict[str, str], bytes]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        url: str,
        status: int = 200,
        content: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.routes[url] = (status, headers or {}, content)

    def redirect(self, url: str, location: str, status: int = 302) -> None:
        self.add(url, status=status, headers={"Location": location})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        netloc = request.url.netloc.decode("ascii")
        key = f"{request.url.scheme}://{netloc}{request.url.path}"
        status, headers, content = self.routes.get(key, (404, {}, b"Not Found"))
        return httpx.Response(status, headers=headers, content=content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def urls(self, method: str | None = None) -> list[str]:
        return [
            str(r.url) for r in self.requests if method is None or r.method == method
        ]


class StubResolver:
    """Resolver returning a fixed outcome and counting calls."""

    def __init__(self, content: bytes | None = None, strategy: str | None = None) -> None:
        self.outcome = ResolutionOutcome(content=content, strategy=strategy)
        self.calls = 0

    async def resolve(self, origin):
        self.calls += 1
        return self.outcome


@pytest.fixture
def png_bytes() -> bytes:
    """16x16 PNG image."""
    return make_image("PNG")


@pytest.fixture
def ico_bytes() -> bytes:
    """16x16 ICO image."""
    return make_image("ICO", color=(0, 0, 255, 255))


@pytest.fixture
def default_icon(tmp_path: Path) -> Path:
    """Default icon written to disk."""
    path = tmp_path / "default.png"
    path.write_bytes(make_image("PNG", color=(128, 128, 128, 255)))
    return path


@pytest.fixture
def settings(tmp_path: Path, default_icon: Path) -> Settings:
    """Settings isolated from the environment and pointing at tmp_path."""
    return Settings(
        _env_file=None,
        cache_dir=tmp_path / "cache",
        hash_key="test-secret-key",
        default_icon_path=default_icon,
        env_file=tmp_path / ".env",
        url_api_template="http://api1.test/favicon?url={url}",
        host_api_template="http://api2.test/favicon/{host}",
        log_format="text",
    )


@pytest.fixture
def web() -> FakeWeb:
    """Empty fake web; unknown URLs answer 404."""
    return FakeWeb()
