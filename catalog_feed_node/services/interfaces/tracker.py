from abc import ABC, abstractmethod
from typing import Any


class FeedConfigTracker(ABC):

    @abstractmethod
    def track_facebook_feed_config(self, info: dict[str, Any]):
        pass
