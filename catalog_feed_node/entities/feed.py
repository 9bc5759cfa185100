from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

# Graph API timestamps look like 2021-03-10T10:00:00+0000
GRAPH_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
TRACKER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

TrackerInfo = dict[str, Any]


def parse_graph_time(value: str | None) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.strptime(value, GRAPH_TIME_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_tracker_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(TRACKER_TIME_FORMAT)


@dataclass
class FeedConfig:
    """A feed configuration node as returned by the Graph API."""
    id: str
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def latest_upload(self) -> dict[str, Any] | None:
        upload = self.raw.get("latest_upload")
        return upload if isinstance(upload, dict) else None

    @property
    def latest_upload_time(self) -> datetime | None:
        upload = self.latest_upload
        if upload is None:
            return None
        return parse_graph_time(upload.get("start_time"))


@dataclass
class FeedUpload:
    id: str
    start_time: datetime | None = None
    end_time: datetime | None = None
    error_count: int | None = None
    warning_count: int | None = None
    num_detected_items: int | None = None
    num_persisted_items: int | None = None
    url: str | None = None

    @classmethod
    def from_graph(cls, payload: dict[str, Any]) -> "FeedUpload":
        return cls(
            id=str(payload.get("id", "")),
            start_time=parse_graph_time(payload.get("start_time")),
            end_time=parse_graph_time(payload.get("end_time")),
            error_count=payload.get("error_count"),
            warning_count=payload.get("warning_count"),
            num_detected_items=payload.get("num_detected_items"),
            num_persisted_items=payload.get("num_persisted_items"),
            url=payload.get("url"),
        )


@dataclass(frozen=True)
class ValidationResult:
    has_recent_upload: bool
    uses_correct_url: bool
    has_correct_schedule: bool

    @property
    def is_valid(self) -> bool:
        return self.has_recent_upload and self.uses_correct_url and self.has_correct_schedule


@dataclass
class FeedGenerationState:
    """Running feed file generation job, as persisted by the generator."""
    total: int = 0
    page: int = 0
    start: float | None = None
    end: float | None = None
    done: bool = False

    @classmethod
    def from_option(cls, value: Any) -> "FeedGenerationState | None":
        if not isinstance(value, dict) or not value:
            return None
        return cls(
            total=int(value.get("total") or 0),
            page=int(value.get("page") or 0),
            start=value.get("start"),
            end=value.get("end"),
            done=bool(value.get("done", False)),
        )
