"""A table of semantic actions indexed in the order they were added."""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class SemanticActionTable(Generic[T]):
    """Stores rule actions and hands out their indices."""

    def __init__(self) -> None:
        self._table: list[T] = []

    def add(self, action: T) -> int:
        """Store ``action`` and return its index."""
        self._table.append(action)
        return len(self._table) - 1

    def __iter__(self) -> Iterator[tuple[int, T]]:
        """Yield ``(index, action)`` pairs in insertion order."""
        return iter(enumerate(self._table))

    def __len__(self) -> int:
        return len(self._table)