"""Favicon resolution models."""

from pydantic import Field

from favicon_api.models.base import BaseSchema


class ResolutionOutcome(BaseSchema):
    """Favicon bytes plus the strategy that produced them."""

    content: bytes | None = None
    strategy: str | None = None
    duration: float | None = None

    @property
    def found(self) -> bool:
        return self.content is not None


class FaviconResponse(BaseSchema):
    """Bytes ready to be served, with provenance."""

    content: bytes
    cache_type: str | None = Field(
        default=None,
        description="Set when the bytes came from the disk cache",
    )
    strategy: str | None = None
    is_default: bool = False
