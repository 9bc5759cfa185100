from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from catalog_feed_node.errors import FeedDetectionError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: FeedDetectionError


Result = Ok[T] | Err


def unwrap(result: Result[T]) -> T:
    """Return the success value or raise the carried failure."""
    if isinstance(result, Err):
        raise result.error
    return result.value
