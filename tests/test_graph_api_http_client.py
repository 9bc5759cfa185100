from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

import requests

from catalog_feed_node.config.runtime import RuntimeSettings
from catalog_feed_node.infrastructure.http.graph_api_http_client import (
    FEED_INFORMATION_FIELDS,
    FEED_METADATA_FIELDS,
    UPLOAD_METADATA_FIELDS,
    GraphApiHttpClient,
)

_GET = "catalog_feed_node.infrastructure.http.graph_api_http_client.requests.get"


def _response(status_code: int, body=None, json_error: Exception | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


class TestGraphApiHttpClient(unittest.TestCase):
    def setUp(self):
        self.client = GraphApiHttpClient(access_token="token", url="https://graph.example/", version="v12.0", timeout=3)

    @patch(_GET)
    def test_read_feeds_hits_catalog_product_feeds(self, get):
        get.return_value = _response(200, {"data": [{"id": "f1"}]})

        response = self.client.read_feeds("cat1")

        self.assertTrue(response.ok)
        self.assertEqual(response.body, {"data": [{"id": "f1"}]})
        get.assert_called_once_with(
            "https://graph.example/v12.0/cat1/product_feeds",
            params=None,
            headers={"Authorization": "Bearer token"},
            timeout=3,
        )

    @patch(_GET)
    def test_reads_request_their_fields(self, get):
        get.return_value = _response(200, {})

        self.client.read_feed_information("f1")
        self.client.read_feed_metadata("f1")
        self.client.read_upload_metadata("u1")

        params = [call.kwargs["params"] for call in get.call_args_list]
        self.assertEqual(
            params,
            [
                {"fields": FEED_INFORMATION_FIELDS},
                {"fields": FEED_METADATA_FIELDS},
                {"fields": UPLOAD_METADATA_FIELDS},
            ],
        )
        self.assertEqual(get.call_args_list[2].args[0], "https://graph.example/v12.0/u1")

    @patch(_GET)
    def test_error_status_keeps_graph_message(self, get):
        get.return_value = _response(400, {"error": {"message": "Invalid OAuth access token.", "code": 190}})

        response = self.client.read_feed_metadata("f1")

        self.assertFalse(response.ok)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.error, "Invalid OAuth access token.")

    @patch(_GET)
    def test_transport_error_is_status_zero(self, get):
        get.side_effect = requests.ConnectionError("connection refused")

        response = self.client.read_feeds("cat1")

        self.assertFalse(response.ok)
        self.assertEqual(response.status_code, 0)
        self.assertIn("connection refused", response.error)

    @patch(_GET)
    def test_non_json_body_is_not_ok(self, get):
        get.return_value = _response(200, json_error=ValueError("Expecting value"))

        response = self.client.read_feed_information("f1")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.ok)

    def test_from_settings(self):
        settings = RuntimeSettings(
            graph_api_url="https://graph.facebook.com",
            graph_api_version="v13.0",
            graph_api_access_token="abc",
            graph_api_timeout_seconds=5.0,
            site_url="https://shop.example",
            heartbeat_daily_seconds=86400,
            report_port=8000,
        )
        client = GraphApiHttpClient.from_settings(settings)

        self.assertEqual(client.build_url("f1"), "https://graph.facebook.com/v13.0/f1")
        self.assertEqual(client.timeout, 5.0)


if __name__ == "__main__":
    unittest.main()
