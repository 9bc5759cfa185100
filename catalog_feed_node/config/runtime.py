from __future__ import annotations

from dataclasses import dataclass
import os


def database_url() -> str:
    explicit = os.getenv("DATABASE_URL", "").strip()
    if explicit:
        return explicit
    user = os.getenv("POSTGRES_USER", "catalog")
    password = os.getenv("POSTGRES_PASSWORD", "catalog")
    host = os.getenv("POSTGRES_HOST", "postgres")
    port = os.getenv("POSTGRES_PORT", "5432")
    db = os.getenv("POSTGRES_DB", "catalog")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"


@dataclass(frozen=True)
class RuntimeSettings:
    graph_api_url: str
    graph_api_version: str
    graph_api_access_token: str
    graph_api_timeout_seconds: float
    site_url: str
    heartbeat_daily_seconds: int
    report_port: int

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        return cls(
            graph_api_url=os.getenv("GRAPH_API_URL", "https://graph.facebook.com").rstrip("/"),
            graph_api_version=os.getenv("GRAPH_API_VERSION", "v12.0").strip("/"),
            graph_api_access_token=os.getenv("GRAPH_API_ACCESS_TOKEN", ""),
            graph_api_timeout_seconds=float(os.getenv("GRAPH_API_TIMEOUT_SECONDS", "10")),
            site_url=os.getenv("SITE_URL", "http://localhost"),
            heartbeat_daily_seconds=int(os.getenv("HEARTBEAT_DAILY_SECONDS", str(24 * 3600))),
            report_port=int(os.getenv("REPORT_PORT", "8000")),
        )
