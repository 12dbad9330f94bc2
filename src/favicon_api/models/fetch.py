"""HTTP fetch result models."""

from pydantic import Field

from favicon_api.models.base import BaseSchema, FetchStatus


class FetchResult(BaseSchema):
    """Outcome of one HTTP attempt, after any redirect chain."""

    status: FetchStatus = FetchStatus.FAIL
    content: bytes = b""
    effective_url: str
    status_code: int | None = None
    content_type: str | None = None
    error: str | None = Field(
        default=None,
        description="Short failure code: fetch_failed, too_many_redirects, not_an_image",
    )

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.OK
