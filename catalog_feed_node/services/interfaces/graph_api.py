from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GraphResponse:
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200 and self.error is None


class FeedGraphApi(ABC):

    @abstractmethod
    def read_feeds(self, catalog_id: str) -> GraphResponse:
        pass

    @abstractmethod
    def read_feed_metadata(self, feed_id: str) -> GraphResponse:
        pass

    @abstractmethod
    def read_upload_metadata(self, upload_id: str) -> GraphResponse:
        pass

    @abstractmethod
    def read_feed_information(self, feed_id: str) -> GraphResponse:
        pass
