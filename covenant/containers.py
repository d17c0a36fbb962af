"""
SortedSet: the backing container of sorted-set options.

Elements are kept in natural ascending order (numbers by value, strings
lexicographically) in a plain list searched with bisect. Duplicates collapse
as in any set, and equality follows the Set ABC, so a SortedSet compares equal
to a builtin set holding the same elements.
"""
from bisect import bisect_left
from collections.abc import MutableSet
from typing import Generic, TypeVar

_T = TypeVar("_T")


class SortedSet(MutableSet, Generic[_T]):
    __slots__ = ("_items",)

    def __init__(self, iterable=(), /):
        self._items = []
        for item in iterable:
            self.add(item)

    def _locate(self, value):
        index = bisect_left(self._items, value)
        return index, index < len(self._items) and self._items[index] == value

    def __contains__(self, value):
        try:
            return self._locate(value)[1]
        except TypeError:
            # incomparable with the stored elements, so it cannot be one of them
            return False

    def __iter__(self):
        return iter(self._items)

    def __reversed__(self):
        return reversed(self._items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def add(self, value):
        index, present = self._locate(value)
        if not present:
            self._items.insert(index, value)

    def discard(self, value):
        index, present = self._locate(value)
        if present:
            del self._items[index]

    @classmethod
    def _from_iterable(cls, iterable):
        return cls(iterable)

    def __repr__(self):
        return f"{type(self).__name__}({self._items!r})"

    def __rich_repr__(self):
        yield self._items


__all__ = (
    "SortedSet",
)
