"""
VariableMap: the append-ordered multimap produced by a parse.

Keys are canonical keys (after alias resolution); the same key may appear any
number of times, once per occurrence on the command line. Values are either
the `empty` sentinel (present without payload) or the converted payload.

Equality compares, key by key, the sequence of values recorded under that
key; the interleaving of different keys does not matter.
"""
from collections.abc import Iterable

from .sentinels import empty


class VariableMap:
    __slots__ = ("_entries",)

    def __init__(self, entries=(), /):
        if isinstance(entries, VariableMap):
            entries = entries.items()
        self._entries = []
        self.extend(entries)

    def add(self, key, value=empty, /):
        if not isinstance(key, str):
            raise TypeError("variable-map keys must be strings")
        self._entries.append((key, value))

    def extend(self, entries, /):
        if not isinstance(entries, Iterable):
            raise TypeError("variable-map entries must be an iterable of pairs")
        for key, value in entries:
            self.add(key, value)

    def count(self, key, /):
        return sum(1 for other, _ in self._entries if other == key)

    def getall(self, key, /):
        return [value for other, value in self._entries if other == key]

    def get(self, key, default=None, /):
        """
        return the first value recorded under key, or default.
        """
        for other, value in self._entries:
            if other == key:
                return value
        return default

    def keys(self):
        return list(dict.fromkeys(key for key, _ in self._entries))

    def values(self):
        return [value for _, value in self._entries]

    def items(self):
        return list(self._entries)

    def copy(self):
        return VariableMap(self._entries)

    def __getitem__(self, key):
        if key not in self:
            raise KeyError(key)
        return self.getall(key)

    def __contains__(self, key):
        return any(other == key for other, _ in self._entries)

    def __iter__(self):
        return (key for key, _ in self._entries)

    def __len__(self):
        return len(self._entries)

    def __bool__(self):
        return bool(self._entries)

    def __eq__(self, other):
        if not isinstance(other, VariableMap):
            return NotImplemented
        return len(self) == len(other) and all(self.getall(key) == other.getall(key) for key in self.keys())

    __hash__ = None

    def __rich_repr__(self):
        for key, value in self._entries:
            yield key, value

    def __repr__(self):
        return "variable-map(%s)" % ", ".join("%r: %r" % entry for entry in self._entries)


__all__ = (
    "VariableMap",
)
