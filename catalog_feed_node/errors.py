"""Failures raised (or returned) by feed configuration detection."""
from __future__ import annotations


class FeedDetectionError(Exception):
    """Base class for every detection failure."""


class MissingCatalogId(FeedDetectionError):
    """No catalog is connected, most probably the integration is not set up."""

    def __init__(self, message: str = "No catalog ID"):
        super().__init__(message)


class NoFeedConfigured(FeedDetectionError):
    """The catalog exists but has no feed configuration."""

    def __init__(self, catalog_id: str):
        self.catalog_id = catalog_id
        super().__init__(f"No feed nodes for catalog {catalog_id}")


class FetchFailed(FeedDetectionError):
    """A Graph API read did not answer with HTTP 200.

    `status_code` is 0 when the request never produced a response.
    """

    def __init__(self, step: str, status_code: int, detail: str | None = None):
        self.step = step
        self.status_code = status_code
        self.detail = detail
        message = f"{step} failed with status {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
