from abc import ABC, abstractmethod
from typing import Any


class OptionsStore(ABC):

    @abstractmethod
    def get_option(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def update_option(self, key: str, value: Any):
        pass
