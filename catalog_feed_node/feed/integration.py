"""Connection settings the plugin keeps in its options."""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

from catalog_feed_node.services.interfaces.options_store import OptionsStore

OPTION_PRODUCT_CATALOG_ID = "wc_facebook_product_catalog_id"
OPTION_FEED_ID = "wc_facebook_feed_id"
OPTION_FEED_URL_SECRET = "wc_facebook_feed_url_secret"

FEED_DATA_API_ACTION = "wc_facebook_get_feed_data"


def feed_data_url(site_url: str, secret: str) -> str:
    """URL Facebook fetches the feed file from."""
    query = urlencode({"wc-api": FEED_DATA_API_ACTION, "secret": secret})
    return f"{site_url.rstrip('/')}/?{query}"


@dataclass(frozen=True)
class Integration:
    product_catalog_id: str
    feed_id: str
    feed_data_url: str

    @classmethod
    def from_options(cls, options: OptionsStore, site_url: str) -> "Integration":
        return cls(
            product_catalog_id=str(options.get_option(OPTION_PRODUCT_CATALOG_ID, "") or ""),
            feed_id=str(options.get_option(OPTION_FEED_ID, "") or ""),
            feed_data_url=feed_data_url(site_url, str(options.get_option(OPTION_FEED_URL_SECRET, "") or "")),
        )
