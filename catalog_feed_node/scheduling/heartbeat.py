"""Periodic hooks, run from an asyncio loop."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from catalog_feed_node.services.interfaces.options_store import OptionsStore
from catalog_feed_node.services.interfaces.scheduler import PeriodicTaskRegistry

HOURLY = "facebook_for_woocommerce_hourly_heartbeat"
DAILY = "facebook_for_woocommerce_daily_heartbeat"

DEFAULT_INTERVALS: dict[str, int] = {
    HOURLY: 3600,
    DAILY: 24 * 3600,
}

# Next run of every hook, keyed by hook name, as ISO 8601 strings.
# Lets other processes (the report worker) see when a hook fires next.
HEARTBEAT_SCHEDULE_OPTION = "catalog_feed_node_heartbeat_schedule"


def stored_next_run(options: OptionsStore, hook: str) -> datetime | None:
    schedule = options.get_option(HEARTBEAT_SCHEDULE_OPTION, {})
    if not isinstance(schedule, dict):
        return None
    value = schedule.get(hook)
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


class Heartbeat(PeriodicTaskRegistry):
    def __init__(
        self,
        intervals: dict[str, int] | None = None,
        clock: Callable[[], datetime] | None = None,
        options: OptionsStore | None = None,
    ):
        self.intervals = dict(intervals or DEFAULT_INTERVALS)
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.options = options
        self.logger = logging.getLogger(__name__)
        self.stop_event = asyncio.Event()
        self._callbacks: dict[str, list[Callable[[], None]]] = {}
        self._next_run: dict[str, datetime] = {}

    def add_hook(self, hook: str, interval_seconds: int) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"heartbeat interval must be positive, got {interval_seconds} for {hook}")
        self.intervals[hook] = interval_seconds

    def register(self, hook: str, callback: Callable[[], None]) -> None:
        if hook not in self.intervals:
            raise ValueError(f"unknown heartbeat hook: {hook}, only {sorted(self.intervals)} are supported")
        self._callbacks.setdefault(hook, []).append(callback)
        if hook not in self._next_run:
            self._schedule(hook, self.clock())

    def next_run(self, hook: str) -> datetime | None:
        return self._next_run.get(hook)

    def tick(self) -> list[str]:
        """Fire every hook that is due and return their names."""
        now = self.clock()
        fired = []
        for hook, due in list(self._next_run.items()):
            if due > now:
                continue
            for callback in self._callbacks.get(hook, []):
                try:
                    callback()
                except Exception as exc:
                    self.logger.exception("heartbeat %s callback error: %s", hook, exc)
            self._schedule(hook, now + timedelta(seconds=self.intervals[hook]))
            fired.append(hook)
        return fired

    def seconds_until_next(self) -> float:
        if not self._next_run:
            return float(min(self.intervals.values()))
        soonest = min(self._next_run.values())
        return max(0.0, (soonest - self.clock()).total_seconds())

    def _schedule(self, hook: str, when: datetime) -> None:
        self._next_run[hook] = when
        if self.options is None:
            return
        try:
            schedule = self.options.get_option(HEARTBEAT_SCHEDULE_OPTION, {})
            schedule = dict(schedule) if isinstance(schedule, dict) else {}
            schedule[hook] = when.isoformat()
            self.options.update_option(HEARTBEAT_SCHEDULE_OPTION, schedule)
        except Exception as exc:
            self.logger.warning("heartbeat could not store next run of %s: %s", hook, exc)

    async def run(self) -> None:
        self.logger.info("heartbeat started (hooks=%s)", sorted(self._callbacks))
        while not self.stop_event.is_set():
            # Callbacks do blocking HTTP reads.
            await asyncio.to_thread(self.tick)
            try:
                await asyncio.wait_for(self.stop_event.wait(), timeout=self.seconds_until_next())
            except asyncio.TimeoutError:
                pass

    async def shutdown(self) -> None:
        self.stop_event.set()
