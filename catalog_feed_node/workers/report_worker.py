from __future__ import annotations

import logging
from typing import Annotated, Any, Generator

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, status
from pydantic import BaseModel
from sqlmodel import Session

from catalog_feed_node.config.runtime import RuntimeSettings
from catalog_feed_node.errors import FetchFailed
from catalog_feed_node.feed.detection import FeedConfigurationDetection
from catalog_feed_node.feed.integration import Integration
from catalog_feed_node.feed.progress import FEED_GENERATION_LIMIT, feed_generation_status
from catalog_feed_node.infrastructure.db import DBFeedConfigTracker, DBOptionsStore
from catalog_feed_node.infrastructure.http.graph_api_http_client import GraphApiHttpClient
from catalog_feed_node.services.interfaces.options_store import OptionsStore
from catalog_feed_node.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Catalog Feed Report Worker")

SETTINGS = RuntimeSettings.from_env()


class FeedStatusResponse(BaseModel):
    total: int
    page: int
    start: float | None = None
    end: float | None = None
    done: bool
    generation_in_progress: bool
    generation_progress: int
    duration_minutes: float | None = None
    next_scheduled_at: str | None = None


class FeedValidityResponse(BaseModel):
    valid: bool


def get_db_session() -> Generator[Session, Any, None]:
    from catalog_feed_node.infrastructure.db.init_db import create_session

    with create_session() as session:
        yield session


def get_options_store(
    session_db: Annotated[Session, Depends(get_db_session)]
) -> OptionsStore:
    return DBOptionsStore(session_db)


def get_tracker(
    options: Annotated[OptionsStore, Depends(get_options_store)]
) -> DBFeedConfigTracker:
    return DBFeedConfigTracker(options)


def get_detection(
    options: Annotated[OptionsStore, Depends(get_options_store)],
    tracker: Annotated[DBFeedConfigTracker, Depends(get_tracker)],
) -> FeedConfigurationDetection:
    return FeedConfigurationDetection(
        graph_api=GraphApiHttpClient.from_settings(SETTINGS),
        integration=lambda: Integration.from_options(options, SETTINGS.site_url),
        tracker=tracker,
    )


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/feed-status", response_model=FeedStatusResponse)
def get_feed_status(
    options: Annotated[OptionsStore, Depends(get_options_store)],
) -> dict[str, Any]:
    """Progress of the feed file generation, shown on the Feed Status screen.

    The next run comes from the heartbeat schedule stored in the options.
    """
    return feed_generation_status(options, page_size=FEED_GENERATION_LIMIT).to_dict()


@app.get("/feed-config/validity", response_model=FeedValidityResponse)
def get_feed_config_validity(
    detection: Annotated[FeedConfigurationDetection, Depends(get_detection)],
) -> dict[str, bool]:
    try:
        valid = detection.has_valid_feed_config()
    except FetchFailed as exc:
        logger.warning("feed config validity check failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"step": exc.step, "status_code": exc.status_code, "message": str(exc)},
        )
    return {"valid": valid}


@app.get("/feed-config/tracker-info")
def get_feed_config_tracker_info(
    tracker: Annotated[DBFeedConfigTracker, Depends(get_tracker)],
) -> dict[str, Any]:
    info = tracker.get_latest()
    if info is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No feed configuration tracked yet")
    return info


def main() -> None:
    setup_logging()
    logger.info("catalog feed report worker bootstrap")
    uvicorn.run(app, host="0.0.0.0", port=SETTINGS.report_port)


if __name__ == "__main__":
    main()
