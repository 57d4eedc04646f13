"""Consistent hashing with virtual nodes."""

from __future__ import annotations

import bisect
import logging
import zlib
from typing import Callable, Dict, List, Optional

HashFn = Callable[[bytes], int]

_log = logging.getLogger(__name__)


class HashRing:
    """Maps keys onto real nodes through ``replicas`` virtual nodes each."""

    def __init__(self, replicas: int, hash_fn: Optional[HashFn] = None):
        self.replicas = replicas
        self._hash: HashFn = hash_fn if hash_fn is not None else zlib.crc32
        self._keys: List[int] = []
        self._hash_map: Dict[int, str] = {}

    def add(self, *args: str) -> None:
        """Add real nodes to the ring."""
        for key in args:
            for i in range(self.replicas):
                h = int(self._hash(f"{i}{key}".encode("utf-8")))
                self._keys.append(h)
                self._hash_map[h] = key
        self._keys.sort()

    def get(self, key: str) -> str:
        """Return the node responsible for ``key``, or "" on an empty ring."""
        if not self._keys:
            return ""
        h = int(self._hash(key.encode("utf-8")))
        index = bisect.bisect_left(self._keys, h)
        node = self._hash_map.get(self._keys[index % len(self._keys)])
        if node is None:
            _log.warning("key :%s not found", key)
            return ""
        return node