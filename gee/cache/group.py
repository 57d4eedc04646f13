"""Cache groups: named namespaces that load, cache and share values."""

from __future__ import annotations

import abc
import logging
import threading
from typing import Callable, Dict, Optional

from gee.cache.byteview import ByteView
from gee.cache.lru import LruCache
from gee.cache.singleflight import SingleFlight

Getter = Callable[[str], bytes]

_log = logging.getLogger(__name__)


class PeerGetter(abc.ABC):
    """Fetches cached values from a remote peer."""

    @abc.abstractmethod
    def get(self, group: str, key: str) -> bytes:
        """Return the value of ``key`` in ``group`` held by the peer."""


class PeerPicker(abc.ABC):
    """Chooses the peer that owns a key."""

    @abc.abstractmethod
    def pick_peer(self, key: str) -> Optional[PeerGetter]:
        """Return the peer owning ``key``, or None when it is held locally."""


class _Cache:
    """A thread-safe LRU cache created on first use."""

    def __init__(self, cache_bytes: int):
        self._lock = threading.Lock()
        self._lru: Optional[LruCache] = None
        self._cache_bytes = cache_bytes

    def add(self, key: str, value: ByteView) -> None:
        with self._lock:
            if self._lru is None:
                self._lru = LruCache(self._cache_bytes)
            self._lru.add(key, value)

    def get(self, key: str) -> Optional[ByteView]:
        with self._lock:
            if self._lru is None:
                return None
            return self._lru.get(key)


_groups_lock = threading.Lock()
_groups: Dict[str, "Group"] = {}


class Group:
    """A cache namespace that falls back to peers and then to ``getter``.

    ``getter`` is called with a key and returns its bytes, raising when
    the key cannot be loaded.
    """

    def __init__(self, name: str, cache_bytes: int, getter: Getter):
        if getter is None:
            raise ValueError("getter is nil")
        self.name = name
        self._getter = getter
        self._main_cache = _Cache(cache_bytes)
        self._peers: Optional[PeerPicker] = None
        self._loader = SingleFlight()
        with _groups_lock:
            _groups[name] = self

    def get(self, key: str) -> ByteView:
        """Return the value for ``key`` from the cache, a peer or the getter."""
        if key == "":
            raise ValueError("key is empty")
        cached = self._main_cache.get(key)
        if cached is not None:
            return cached
        return self.load(key)

    def register_peers(self, peers: PeerPicker) -> None:
        """Attach the peer picker; allowed only once."""
        if self._peers is not None:
            raise RuntimeError("RegisterPeers called more than once")
        self._peers = peers

    def load(self, key: str) -> ByteView:
        """Load ``key`` once even when many callers ask for it at the same time."""
        return self._loader.do(key, lambda: self._load_once(key))

    def _load_once(self, key: str) -> ByteView:
        if self._peers is not None:
            peer = self._peers.pick_peer(key)
            if peer is not None:
                try:
                    return self._get_from_peer(peer, key)
                except Exception as exc:
                    _log.warning("[Cache] Failed to get from peer %s", exc)
        return self._get_locally(key)

    def _get_from_peer(self, peer: PeerGetter, key: str) -> ByteView:
        return ByteView(peer.get(self.name, key))

    def _get_locally(self, key: str) -> ByteView:
        value = ByteView(self._getter(key))
        self._main_cache.add(key, value)
        return value


def get_group(name: str) -> Optional[Group]:
    """Return the group created under ``name``, or None."""
    with _groups_lock:
        return _groups.get(name)