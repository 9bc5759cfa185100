from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional


class PeriodicTaskRegistry(ABC):

    @abstractmethod
    def register(self, hook: str, callback: Callable[[], None]):
        pass

    @abstractmethod
    def next_run(self, hook: str) -> Optional[datetime]:
        pass
