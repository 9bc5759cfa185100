"""Detects which product feed configuration is active for the connected catalog."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from catalog_feed_node.entities.feed import (
    FeedConfig,
    FeedUpload,
    TrackerInfo,
    ValidationResult,
    format_tracker_time,
    parse_graph_time,
)
from catalog_feed_node.errors import FetchFailed, MissingCatalogId, NoFeedConfigured
from catalog_feed_node.feed.integration import Integration
from catalog_feed_node.result import Err, Ok, Result, unwrap
from catalog_feed_node.scheduling.heartbeat import DAILY
from catalog_feed_node.services.interfaces.graph_api import FeedGraphApi, GraphResponse
from catalog_feed_node.services.interfaces.scheduler import PeriodicTaskRegistry
from catalog_feed_node.services.interfaces.tracker import FeedConfigTracker

# Weekly feed cadence plus slack for missed runs.
RECENT_UPLOAD_WINDOW = timedelta(weeks=3)

# Schedules are stored under two keys:
# `schedule` replaces the whole catalog (deletes included),
# `update_schedule` only appends new or updated products.
SCHEDULE_KEYS = (("schedule", "schedule"), ("update_schedule", "update-schedule"))


def bool_to_string(value: bool) -> str:
    return "yes" if value else "no"


class FeedConfigurationDetection:
    def __init__(
        self,
        graph_api: FeedGraphApi,
        integration: Callable[[], Integration],
        tracker: FeedConfigTracker,
        logger: logging.Logger | None = None,
        scheduler: PeriodicTaskRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.graph_api = graph_api
        self.integration = integration
        self.tracker = tracker
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        if scheduler is not None:
            scheduler.register(DAILY, self.track_data_source_feed_tracker_info)

    # ── telemetry ──

    def track_data_source_feed_tracker_info(self) -> None:
        """Collect the active feed settings and hand them to the tracker.

        Telemetry is best effort: nothing raised here reaches the caller.
        """
        result = self.get_data_source_feed_tracker_info()
        if isinstance(result, Err):
            self.logger.warning("Unable to detect valid feed configuration: %s", result.error)
            return

        try:
            self.tracker.track_facebook_feed_config(result.value)
        except Exception as exc:
            self.logger.warning("Unable to store feed configuration tracker info: %s", exc)

    def get_data_source_feed_tracker_info(self) -> Result[TrackerInfo]:
        integration = self.integration()
        info: TrackerInfo = {"site-feed-id": integration.feed_id}

        # No catalog id, most probably there is no valid connection.
        if not integration.product_catalog_id:
            return Err(MissingCatalogId())

        nodes = self._get_feed_nodes_for_catalog(integration.product_catalog_id)
        if isinstance(nodes, Err):
            return nodes

        info["feed-count"] = len(nodes.value)
        if not nodes.value:
            return Err(NoFeedConfigured(integration.product_catalog_id))

        selected = self.select_active_feed(nodes.value, integration.feed_id)
        if isinstance(selected, Err):
            return selected

        active_feed = selected.value
        if active_feed is None:
            self.logger.info("No feed of catalog %s has an upload yet", integration.product_catalog_id)
            return Ok(info)

        info["active-feed"] = self._summarize_feed(active_feed)

        if active_feed.latest_upload is not None:
            upload = self._summarize_upload(active_feed.latest_upload, integration)
            if isinstance(upload, Err):
                return upload
            info["active-feed"]["latest-upload"] = upload.value

        return Ok(info)

    def select_active_feed(self, nodes: list[dict[str, Any]], feed_id: str) -> Result[FeedConfig | None]:
        """Pick the feed whose settings are tracked.

        The feed matching `feed_id` wins, otherwise the one with the most
        recent upload start. Earlier feeds win ties.
        """
        active_feed: FeedConfig | None = None
        for node in nodes:
            node_id = str(node.get("id", ""))
            metadata = self._get_feed_metadata(node_id)
            if isinstance(metadata, Err):
                return metadata

            feed = FeedConfig(id=node_id, raw=metadata.value)
            if feed_id and node_id == feed_id:
                return Ok(feed)

            upload_time = feed.latest_upload_time
            if upload_time is None:
                continue
            if active_feed is None or upload_time > active_feed.latest_upload_time:
                active_feed = feed

        return Ok(active_feed)

    def _summarize_feed(self, feed: FeedConfig) -> dict[str, Any]:
        summary: dict[str, Any] = {"feed-id": feed.id}

        created_time = parse_graph_time(feed.raw.get("created_time"))
        if created_time is not None:
            summary["created-time"] = format_tracker_time(created_time)
        if "product_count" in feed.raw:
            summary["product-count"] = feed.raw["product_count"]

        for key, label in SCHEDULE_KEYS:
            schedule = feed.raw.get(key)
            if not isinstance(schedule, dict):
                continue
            summary[label] = {}
            if "interval" in schedule:
                summary[label]["interval"] = schedule["interval"]
            if "interval_count" in schedule:
                summary[label]["interval-count"] = schedule["interval_count"]

        return summary

    def _summarize_upload(self, latest_upload: dict[str, Any], integration: Integration) -> Result[dict[str, Any]]:
        summary: dict[str, Any] = {}

        end_time = parse_graph_time(latest_upload.get("end_time"))
        if end_time is not None:
            summary["end-time"] = format_tracker_time(end_time)

        upload_id = latest_upload.get("id")
        if not upload_id:
            return Ok(summary)

        metadata = self._get_feed_upload_metadata(str(upload_id))
        if isinstance(metadata, Err):
            return metadata

        upload = FeedUpload.from_graph({**metadata.value, "id": upload_id})
        for label, value in (
            ("error-count", upload.error_count),
            ("warning-count", upload.warning_count),
            ("num-detected-items", upload.num_detected_items),
            ("num-persisted-items", upload.num_persisted_items),
        ):
            if value is not None:
                summary[label] = value

        # A feed uploading from another URL is most likely left over from another integration.
        summary["url-matches-site-endpoint"] = bool_to_string(upload.url == integration.feed_data_url)
        return Ok(summary)

    # ── validity ──

    def has_valid_feed_config(self) -> bool:
        """True when the site's feed, or any feed of its catalog, is working.

        Raises the underlying `FeedDetectionError` when a Graph API read fails.
        """
        return unwrap(self.check_feed_config())

    def check_feed_config(self) -> Result[bool]:
        integration = self.integration()

        valid = self.is_feed_config_valid(integration.feed_id)
        if isinstance(valid, Err) or valid.value:
            return valid

        if not integration.product_catalog_id:
            return Ok(False)

        nodes = self._get_feed_nodes_for_catalog(integration.product_catalog_id)
        if isinstance(nodes, Err):
            return nodes

        for node in nodes.value:
            node_id = str(node.get("id", ""))
            if node_id == integration.feed_id:
                continue
            valid = self.is_feed_config_valid(node_id)
            if isinstance(valid, Err) or valid.value:
                return valid

        return Ok(False)

    def is_feed_config_valid(self, feed_id: str) -> Result[bool]:
        validation = self.validate_feed_config(feed_id)
        if isinstance(validation, Err):
            return validation
        return Ok(validation.value is not None and validation.value.is_valid)

    def validate_feed_config(self, feed_id: str) -> Result[ValidationResult | None]:
        if not feed_id:
            return Ok(None)

        information = self._get_feed_information(feed_id)
        if isinstance(information, Err):
            return information

        integration = self.integration()
        validation = ValidationResult(
            has_recent_upload=self.feed_has_recent_uploads(information.value),
            uses_correct_url=self.feed_is_using_correct_url(information.value, integration.feed_data_url),
            has_correct_schedule=self.feed_has_correct_schedule(information.value),
        )
        self.logger.debug("Feed %s validation: %s", feed_id, validation)
        return Ok(validation)

    def feed_has_recent_uploads(self, information: dict[str, Any]) -> bool:
        uploads = information.get("uploads")
        data = uploads.get("data") if isinstance(uploads, dict) else None
        if not data:
            return False

        now = self.clock()
        for upload in data:
            if not isinstance(upload, dict):
                continue
            end_time = parse_graph_time(upload.get("end_time"))
            if end_time is None:
                continue
            if end_time + RECENT_UPLOAD_WINDOW > now:
                return True
        return False

    @staticmethod
    def feed_is_using_correct_url(information: dict[str, Any], expected_url: str) -> bool:
        url = information.get("url")
        if url is None and isinstance(information.get("schedule"), dict):
            url = information["schedule"].get("url")
        return url == expected_url

    @staticmethod
    def feed_has_correct_schedule(information: dict[str, Any]) -> bool:
        schedules = [information[key] for key, _ in SCHEDULE_KEYS if information.get(key) is not None]
        if not schedules:
            return False
        return all(isinstance(schedule, dict) and bool(schedule.get("interval")) for schedule in schedules)

    # ── Graph API reads ──

    def _get_feed_nodes_for_catalog(self, catalog_id: str) -> Result[list[dict[str, Any]]]:
        body = self._read("read_feeds", self.graph_api.read_feeds(catalog_id))
        if isinstance(body, Err):
            return body
        data = body.value.get("data")
        return Ok([node for node in data if isinstance(node, dict)] if isinstance(data, list) else [])

    def _get_feed_information(self, feed_id: str) -> Result[dict[str, Any]]:
        return self._read("read_feed_information", self.graph_api.read_feed_information(feed_id))

    def _get_feed_metadata(self, feed_id: str) -> Result[dict[str, Any]]:
        return self._read("read_feed_metadata", self.graph_api.read_feed_metadata(feed_id))

    def _get_feed_upload_metadata(self, upload_id: str) -> Result[dict[str, Any]]:
        return self._read("read_upload_metadata", self.graph_api.read_upload_metadata(upload_id))

    def _read(self, step: str, response: GraphResponse) -> Result[dict[str, Any]]:
        if not response.ok:
            return Err(FetchFailed(step, response.status_code, response.error))
        return Ok(response.body)
