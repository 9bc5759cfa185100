import logging
from typing import Any

import requests

from catalog_feed_node.config.runtime import RuntimeSettings
from catalog_feed_node.services.interfaces.graph_api import FeedGraphApi, GraphResponse

# from https://developers.facebook.com/docs/marketing-api/reference/product-feed/
FEED_INFORMATION_FIELDS = "id,name,url,schedule,update_schedule,uploads"
FEED_METADATA_FIELDS = "created_time,latest_upload,product_count,schedule,update_schedule"
UPLOAD_METADATA_FIELDS = "error_count,warning_count,num_detected_items,num_persisted_items,url"


class GraphApiHttpClient(FeedGraphApi):

    def __init__(self, access_token: str, url="https://graph.facebook.com", version="v12.0", timeout=10):
        self.access_token = access_token
        self.url = url.rstrip("/")
        self.version = version.strip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(__spec__.name if __spec__ else __name__)

    @classmethod
    def from_settings(cls, settings: RuntimeSettings) -> "GraphApiHttpClient":
        return cls(
            access_token=settings.graph_api_access_token,
            url=settings.graph_api_url,
            version=settings.graph_api_version,
            timeout=settings.graph_api_timeout_seconds,
        )

    def read_feeds(self, catalog_id: str) -> GraphResponse:
        return self._get(f"{catalog_id}/product_feeds")

    def read_feed_information(self, feed_id: str) -> GraphResponse:
        return self._get(feed_id, {"fields": FEED_INFORMATION_FIELDS})

    def read_feed_metadata(self, feed_id: str) -> GraphResponse:
        return self._get(feed_id, {"fields": FEED_METADATA_FIELDS})

    def read_upload_metadata(self, upload_id: str) -> GraphResponse:
        return self._get(upload_id, {"fields": UPLOAD_METADATA_FIELDS})

    def build_url(self, path: str) -> str:
        return f"{self.url}/{self.version}/{path}"

    def _get(self, path: str, params: dict[str, Any] | None = None) -> GraphResponse:
        url = self.build_url(path)
        self.logger.debug(f"GET {url} params={params}")

        try:
            response = requests.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.logger.error(f"Graph API request to {url} failed: {e}")
            return GraphResponse(status_code=0, error=str(e))

        try:
            body = response.json()
        except ValueError:
            return GraphResponse(status_code=response.status_code, error="response body is not JSON")

        if not isinstance(body, dict):
            return GraphResponse(status_code=response.status_code, error=f"unexpected body: {body!r}")

        if response.status_code != 200:
            error = body.get("error")
            message = error.get("message") if isinstance(error, dict) else None
            return GraphResponse(status_code=response.status_code, body=body, error=message)

        return GraphResponse(status_code=200, body=body)
