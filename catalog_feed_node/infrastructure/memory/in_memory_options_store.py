import copy
from typing import Any, Dict

from catalog_feed_node.services.interfaces.options_store import OptionsStore


class InMemoryOptionsStore(OptionsStore):
    def __init__(self, options: Dict[str, Any] | None = None):
        # In-memory storage
        self._storage: Dict[str, Any] = dict(options or {})

    def get_option(self, key: str, default: Any = None) -> Any:
        """Return a copy so callers cannot mutate stored values."""
        if key not in self._storage:
            return default
        return copy.deepcopy(self._storage[key])

    def update_option(self, key: str, value: Any):
        self._storage[key] = copy.deepcopy(value)

    def clear(self):
        """Clear all options (only for testing)."""
        self._storage.clear()
