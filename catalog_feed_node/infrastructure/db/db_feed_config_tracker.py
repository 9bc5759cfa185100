from __future__ import annotations

from typing import Any

from catalog_feed_node.services.interfaces.options_store import OptionsStore
from catalog_feed_node.services.interfaces.tracker import FeedConfigTracker

FEED_CONFIG_TRACKER_OPTION = "wc_facebook_feed_config_tracker_info"


class DBFeedConfigTracker(FeedConfigTracker):
    """
    Keeps the latest feed config snapshot in the options store,
    where the usage tracker picks it up on its next send.
    """

    def __init__(self, options: OptionsStore):
        self._options = options

    def track_facebook_feed_config(self, info: dict[str, Any]) -> None:
        self._options.update_option(FEED_CONFIG_TRACKER_OPTION, info)

    def get_latest(self) -> dict[str, Any] | None:
        return self._options.get_option(FEED_CONFIG_TRACKER_OPTION)
