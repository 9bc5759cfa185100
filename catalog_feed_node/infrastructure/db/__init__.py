from .db_feed_config_tracker import DBFeedConfigTracker, FEED_CONFIG_TRACKER_OPTION
from .db_options_store import DBOptionsStore
from .db_tables import OptionRow
