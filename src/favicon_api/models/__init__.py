"""Pydantic data models for favicon-api."""

from favicon_api.models.base import BaseSchema, FetchStatus
from favicon_api.models.origin import Origin
from favicon_api.models.fetch import FetchResult
from favicon_api.models.resolution import ResolutionOutcome, FaviconResponse

__all__ = [
    "BaseSchema",
    "FetchStatus",
    "Origin",
    "FetchResult",
    "ResolutionOutcome",
    "FaviconResponse",
]
