# invaders_server/models/entity_list.py
"""Bounded, insertion-ordered entity container."""

from collections import deque
from typing import Callable, Deque, Generic, Iterable, Iterator, List, TypeVar

T = TypeVar("T")


class EntityList(Generic[T]):
    """Ordered container with a hard capacity.

    Appending past capacity evicts the oldest entries first, so every spawn
    path shares the same backpressure policy.
    """

    def __init__(self, capacity: int, items: Iterable[T] = ()):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._items: Deque[T] = deque(items, maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._items.maxlen

    def append(self, item: T) -> None:
        """Add an entity, evicting the oldest one if the list is full."""
        self._items.append(item)

    def extend(self, items: Iterable[T]) -> None:
        self._items.extend(items)

    def remove(self, item: T) -> None:
        """Remove a specific entity (by identity)."""
        for index, existing in enumerate(self._items):
            if existing is item:
                del self._items[index]
                return
        raise ValueError("entity not in list")

    def retain(self, keep: Callable[[T], bool]) -> None:
        """Keep only entities for which keep() is true, preserving order.

        keep() may have side effects; it is called exactly once per entity.
        """
        survivors = [item for item in self._items if keep(item)]
        self._items.clear()
        self._items.extend(survivors)

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> List[T]:
        """A list copy, safe to iterate while the container is mutated."""
        return list(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __repr__(self) -> str:
        return f"EntityList(capacity={self.capacity}, items={list(self._items)!r})"
