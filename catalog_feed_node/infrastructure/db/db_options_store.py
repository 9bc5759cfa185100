from __future__ import annotations

from typing import Any

from sqlmodel import Session

from catalog_feed_node.infrastructure.db.db_tables import OptionRow, utc_now
from catalog_feed_node.services.interfaces.options_store import OptionsStore


class DBOptionsStore(OptionsStore):
    """Key/value options, one row per key with a JSON value."""

    def __init__(self, session: Session):
        self._session = session

    def get_option(self, key: str, default: Any = None) -> Any:
        row = self._session.get(OptionRow, key)
        if row is None or row.value is None:
            return default
        return row.value

    def update_option(self, key: str, value: Any) -> None:
        existing = self._session.get(OptionRow, key)

        if existing is None:
            self._session.add(OptionRow(key=key, value=value))
        else:
            existing.value = value
            existing.updated_at = utc_now()
            self._session.add(existing)

        self._session.commit()
