"""Detection worker: refreshes the feed config tracker info on the daily heartbeat."""
from __future__ import annotations

import asyncio
import logging

from catalog_feed_node.config.runtime import RuntimeSettings
from catalog_feed_node.feed.detection import FeedConfigurationDetection
from catalog_feed_node.feed.integration import Integration
from catalog_feed_node.infrastructure.db import DBFeedConfigTracker, DBOptionsStore
from catalog_feed_node.infrastructure.http.graph_api_http_client import GraphApiHttpClient
from catalog_feed_node.scheduling.heartbeat import DAILY, DEFAULT_INTERVALS, Heartbeat
from catalog_feed_node.services.interfaces.options_store import OptionsStore
from catalog_feed_node.utils.logging_config import setup_logging


def build_heartbeat(settings: RuntimeSettings, options: OptionsStore | None = None) -> Heartbeat:
    intervals = dict(DEFAULT_INTERVALS)
    intervals[DAILY] = settings.heartbeat_daily_seconds
    return Heartbeat(intervals=intervals, options=options)


def build_detection(
    settings: RuntimeSettings,
    options: OptionsStore,
    heartbeat: Heartbeat,
) -> FeedConfigurationDetection:
    return FeedConfigurationDetection(
        graph_api=GraphApiHttpClient.from_settings(settings),
        integration=lambda: Integration.from_options(options, settings.site_url),
        tracker=DBFeedConfigTracker(options),
        logger=logging.getLogger("catalog_feed_node.feed"),
        scheduler=heartbeat,
    )


async def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("catalog feed detection worker bootstrap")

    from catalog_feed_node.infrastructure.db.init_db import create_session

    settings = RuntimeSettings.from_env()
    options = DBOptionsStore(create_session())
    heartbeat = build_heartbeat(settings, options)
    build_detection(settings, options, heartbeat)

    await heartbeat.run()


if __name__ == "__main__":
    asyncio.run(main())
