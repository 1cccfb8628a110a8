"""Result envelope returned by the instance loader."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """A validated value plus how its factory produced it.

    Attributes:
        value: The validated value
        was_async: True when the factory returned an awaitable, False when it
            returned the value directly, None for constructors (never awaited)
    """

    value: T
    was_async: bool | None = None


__all__ = ["LoadResult"]
