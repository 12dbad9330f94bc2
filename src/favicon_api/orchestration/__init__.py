"""Request orchestration."""

from favicon_api.orchestration.service import FaviconService, create_service

__all__ = ["FaviconService", "create_service"]
