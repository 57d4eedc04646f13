"""A byte-bounded least-recently-used cache."""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Optional, Sized

EvictionCallback = Callable[[str, Sized], None]


def _key_size(key: str) -> int:
    return len(key.encode("utf-8"))


class LruCache:
    """LRU cache whose capacity is measured in bytes of keys plus values.

    A ``max_bytes`` of zero means the cache is unbounded. Values must
    support ``len()``, which is taken as their size in bytes.
    """

    def __init__(self, max_bytes: int = 0, on_evicted: Optional[EvictionCallback] = None):
        self.max_bytes = max_bytes
        self.nbytes = 0
        self.on_evicted = on_evicted
        # Oldest entries at the front, most recently used at the end.
        self._entries: "OrderedDict[str, Sized]" = OrderedDict()

    def get(self, key: str) -> Optional[Sized]:
        """Return the value for ``key`` and mark it as recently used, or None."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def remove_oldest(self) -> None:
        """Evict the least recently used entry, if any."""
        if not self._entries:
            return
        key, value = self._entries.popitem(last=False)
        self.nbytes -= _key_size(key) + len(value)
        if self.on_evicted is not None:
            self.on_evicted(key, value)

    def add(self, key: str, value: Sized) -> None:
        """Insert or replace ``key`` and evict old entries beyond capacity."""
        if key in self._entries:
            old = self._entries[key]
            self._entries.move_to_end(key)
            self.nbytes += len(value) - len(old)
            self._entries[key] = value
        else:
            self._entries[key] = value
            self.nbytes += len(value) + _key_size(key)

        while self.max_bytes != 0 and self.max_bytes < self.nbytes:
            self.remove_oldest()

    def __len__(self) -> int:
        return len(self._entries)