"""Origin value type."""

from pydantic import ConfigDict, Field

from favicon_api.models.base import BaseSchema


class Origin(BaseSchema):
    """Canonical scheme, host and port of a site, independent of path.

    Build instances with ``favicon_api.core.urls.normalize_url``.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="forbid",
        frozen=True,
    )

    scheme: str = Field(default="http", min_length=1)
    host: str = Field(min_length=1)
    port: int | None = Field(default=None, ge=0, le=65535)

    @property
    def url(self) -> str:
        """Render as ``scheme://host[:port]``."""
        # IPv6 literals need brackets
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"

    def join(self, path: str) -> str:
        """Append an absolute path to the origin."""
        return f"{self.url}/{path.lstrip('/')}"

    def __str__(self) -> str:
        return self.url
