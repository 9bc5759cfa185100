"""Progress of the feed file generation job, as shown on the Feed Status screen."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from catalog_feed_node.entities.feed import FeedGenerationState
from catalog_feed_node.scheduling.heartbeat import stored_next_run
from catalog_feed_node.services.interfaces.options_store import OptionsStore
from catalog_feed_node.services.interfaces.scheduler import PeriodicTaskRegistry

RUNNING_FEED_SETTINGS = "wc_facebook_feed_generation_running_settings"
FEED_SCHEDULE_ACTION = "wc_facebook_feed_generation_scheduled_action"
FEED_GENERATION_LIMIT = 500


def generation_progress(state: FeedGenerationState | None, page_size: int = FEED_GENERATION_LIMIT) -> int:
    if state is None or state.total == 0:
        return 0
    return math.floor(state.page * page_size / state.total * 100)


@dataclass
class FeedGenerationStatus:
    total: int
    page: int
    start: float | None
    end: float | None
    done: bool
    generation_in_progress: bool
    generation_progress: int
    duration_minutes: float | None
    next_scheduled_at: datetime | None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["next_scheduled_at"] = self.next_scheduled_at.isoformat() if self.next_scheduled_at else None
        return payload


def read_generation_state(options: OptionsStore) -> FeedGenerationState | None:
    return FeedGenerationState.from_option(options.get_option(RUNNING_FEED_SETTINGS, {}))


def feed_generation_status(
    options: OptionsStore,
    scheduler: PeriodicTaskRegistry | None = None,
    page_size: int = FEED_GENERATION_LIMIT,
) -> FeedGenerationStatus:
    stored = read_generation_state(options)
    state = stored or FeedGenerationState()

    # Without an in-process scheduler, read what the scheduling process stored.
    if scheduler is not None:
        next_scheduled_at = scheduler.next_run(FEED_SCHEDULE_ACTION)
    else:
        next_scheduled_at = stored_next_run(options, FEED_SCHEDULE_ACTION)

    duration = None
    if state.done and state.start is not None and state.end is not None:
        duration = (state.end - state.start) / 60

    return FeedGenerationStatus(
        total=state.total,
        page=state.page,
        start=state.start,
        end=state.end,
        done=state.done,
        generation_in_progress=stored is not None and not stored.done,
        generation_progress=generation_progress(state, page_size),
        duration_minutes=duration,
        next_scheduled_at=next_scheduled_at,
    )
