"""Maps of inclusive, non-overlapping integer ranges with merge-on-overlap insertion."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Generic, Iterable, Iterator, TypeVar

A = TypeVar("A")
B = TypeVar("B")


@dataclass(frozen=True)
class Range(Generic[A]):
    """An inclusive range ``start..=end`` of code points carrying a value."""

    start: int
    end: int
    value: A

    def contains(self, char: str | int) -> bool:
        """Whether the character (or code point) falls inside this range."""
        code = ord(char) if isinstance(char, str) else char
        return self.start <= code <= self.end


class RangeMap(Generic[A]):
    """A sorted collection of non-overlapping inclusive ranges.

    Inserting a range that overlaps existing ones splits them, and the
    overlapping parts get a value built by the given ``merge`` function,
    called as ``merge(existing_value, new_value)``.
    """

    def __init__(self) -> None:
        self._ranges: list[Range[A]] = []

    @classmethod
    def from_sorted(cls, ranges: Iterable[Range[A]]) -> RangeMap[A]:
        """Build a map from ranges that are already sorted and non-overlapping."""
        items = list(ranges)
        for first, second in zip(items, items[1:]):
            if not first.end < second.start:
                raise ValueError(
                    f"ranges are not sorted and disjoint: {first!r}, {second!r}"
                )
        range_map: RangeMap[A] = cls()
        range_map._ranges = items
        return range_map

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[Range[A]]:
        return iter(self._ranges)

    def __repr__(self) -> str:
        return f"RangeMap({self._ranges!r})"

    def map(self, func: Callable[[A], B]) -> RangeMap[B]:
        """Return a new map with the same ranges and ``func`` applied to each value."""
        return RangeMap.from_sorted(
            Range(rng.start, rng.end, func(rng.value)) for rng in self._ranges
        )

    def insert(
        self, start: int, end: int, value: A, merge: Callable[[A, A], A]
    ) -> None:
        """Insert the inclusive range ``start..=end``. O(number of ranges)."""
        new_ranges: list[Range[A]] = []
        old_iter = iter(self._ranges)

        for rng in old_iter:
            if rng.end < start:
                new_ranges.append(rng)
                continue

            if rng.start > end:
                new_ranges.append(Range(start, end, value))
                new_ranges.append(rng)
                new_ranges.extend(old_iter)
                self._ranges = new_ranges
                return

            overlap_start = max(start, rng.start)
            overlap_end = min(end, rng.end)

            # Part before the overlap: comes from either the new or the old range.
            if start < overlap_start:
                new_ranges.append(Range(start, overlap_start - 1, value))
            elif rng.start < overlap_start:
                new_ranges.append(Range(rng.start, overlap_start - 1, rng.value))

            new_ranges.append(
                Range(overlap_start, overlap_end, merge(rng.value, value))
            )

            # Part after the overlap.
            if rng.end > overlap_end:
                new_ranges.append(Range(overlap_end + 1, rng.end, rng.value))
            elif end > overlap_end:
                # The rest of the new range may overlap further ranges.
                start = overlap_end + 1
                continue

            new_ranges.extend(old_iter)
            self._ranges = new_ranges
            return

        if not new_ranges or new_ranges[-1].end < start:
            new_ranges.append(Range(start, end, value))

        self._ranges = new_ranges

    def insert_ranges(
        self, ranges: Iterable[Range[A]], merge: Callable[[A, A], A]
    ) -> None:
        """Insert sorted, non-overlapping ranges. O(N + M)."""
        new_ranges: list[Range[A]] = []
        iter1 = iter(self._ranges)
        iter2 = iter(ranges)
        range1 = next(iter1, None)
        range2 = next(iter2, None)

        while range1 is not None and range2 is not None:
            if range1.end < range2.start:
                new_ranges.append(range1)
                range1 = next(iter1, None)
            elif range2.end < range1.start:
                new_ranges.append(range2)
                range2 = next(iter2, None)
            else:
                overlap_start = max(range1.start, range2.start)
                overlap_end = min(range1.end, range2.end)

                if range1.start < range2.start:
                    new_ranges.append(
                        Range(range1.start, overlap_start - 1, range1.value)
                    )
                    range1 = replace(range1, start=overlap_start)
                elif range1.start > range2.start:
                    new_ranges.append(
                        Range(range2.start, overlap_start - 1, range2.value)
                    )
                    range2 = replace(range2, start=overlap_start)
                else:
                    new_ranges.append(
                        Range(
                            overlap_start,
                            overlap_end,
                            merge(range1.value, range2.value),
                        )
                    )
                    if range1.end < range2.end:
                        range1 = next(iter1, None)
                        range2 = replace(range2, start=overlap_end + 1)
                    elif range1.end > range2.end:
                        range2 = next(iter2, None)
                        range1 = replace(range1, start=overlap_end + 1)
                    else:
                        range1 = next(iter1, None)
                        range2 = next(iter2, None)

        if range1 is not None:
            new_ranges.append(range1)
            new_ranges.extend(iter1)
        elif range2 is not None:
            new_ranges.append(range2)
            new_ranges.extend(iter2)

        self._ranges = new_ranges

    def remove_ranges(self, other: Iterable[Range[object]]) -> None:
        """Remove every point covered by the sorted ranges of ``other``. O(N + M)."""
        new_ranges: list[Range[A]] = []
        old_iter = iter(self._ranges)
        removed_iter = iter(other)
        old = next(old_iter, None)
        removed = next(removed_iter, None)

        while old is not None and removed is not None:
            if old.end < removed.start:
                new_ranges.append(old)
                old = next(old_iter, None)
            elif removed.end < old.start:
                removed = next(removed_iter, None)
            else:
                overlap_start = max(old.start, removed.start)
                overlap_end = min(old.end, removed.end)

                if overlap_start == old.start:
                    if overlap_end >= old.end:
                        # The whole old range is removed.
                        old = next(old_iter, None)
                    else:
                        old = replace(old, start=overlap_end + 1)
                        removed = next(removed_iter, None)
                elif overlap_end == old.end:
                    new_ranges.append(Range(old.start, overlap_start - 1, old.value))
                    old = next(old_iter, None)
                else:
                    new_ranges.append(Range(old.start, overlap_start - 1, old.value))
                    old = replace(old, start=overlap_end + 1)

        if old is not None:
            new_ranges.append(old)
            new_ranges.extend(old_iter)

        self._ranges = new_ranges