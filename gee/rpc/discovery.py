"""Server discovery: a fixed list, or one refreshed from a registry."""

from __future__ import annotations

import abc
import enum
import logging
import random
import threading
import time
import urllib.request
from typing import List, Optional, Sequence

from gee.rpc.register import RPC_HEADER, RPC_SPLIT

_log = logging.getLogger(__name__)

DEFAULT_UPDATE_TIMEOUT = 10.0
_MAX_INT32 = 2**31 - 1


class SelectMode(enum.IntEnum):
    """How one server is chosen among the known ones."""

    RANDOM = 0
    ROUND_ROBIN = 1


class Discovery(abc.ABC):
    """Knows the available servers and picks one of them."""

    @abc.abstractmethod
    def refresh(self) -> None:
        """Reload the server list from its source."""

    @abc.abstractmethod
    def update(self, servers: Sequence[str]) -> None:
        """Replace the server list."""

    @abc.abstractmethod
    def get(self, mode: SelectMode) -> str:
        """Return one server chosen with ``mode``."""

    @abc.abstractmethod
    def get_all(self) -> List[str]:
        """Return every known server."""


class MultiServersDiscovery(Discovery):
    """Discovery over a list of servers given by the caller."""

    def __init__(self, servers: Sequence[str] = ()):
        self._lock = threading.Lock()
        self._servers: List[str] = list(servers)
        self._rand = random.Random()
        self._index = self._rand.randrange(_MAX_INT32 - 1)

    def refresh(self) -> None:
        return None

    def update(self, servers: Sequence[str]) -> None:
        with self._lock:
            self._servers = list(servers)

    def get(self, mode: SelectMode = SelectMode.RANDOM) -> str:
        """Pick a server; raise LookupError when there is none."""
        try:
            mode = SelectMode(mode)
        except ValueError:
            raise ValueError("rpc discovery no supported select mode") from None
        with self._lock:
            count = len(self._servers)
            if count == 0:
                raise LookupError("rpc discovery no available servers")
            if mode is SelectMode.RANDOM:
                return self._servers[self._rand.randrange(count)]
            server = self._servers[self._index % count]
            self._index = (self._index + 1) % count
            return server

    def get_all(self) -> List[str]:
        with self._lock:
            return list(self._servers)


class RegistryDiscovery(MultiServersDiscovery):
    """Discovery that reloads its servers from a registry URL when they are stale.

    The list is reused for ``timeout`` seconds after each update; zero
    means the default of ten seconds.
    """

    def __init__(self, registry: str, timeout: float = 0):
        super().__init__([])
        self.registry = registry
        self.timeout = timeout or DEFAULT_UPDATE_TIMEOUT
        self._last_update: Optional[float] = None

    def update(self, servers: Sequence[str]) -> None:
        with self._lock:
            self._servers = list(servers)
            self._last_update = time.monotonic()

    def refresh(self) -> None:
        """Fetch the server list unless it is still fresh; raise OSError on failure."""
        with self._lock:
            if (
                self._last_update is not None
                and self._last_update + self.timeout > time.monotonic()
            ):
                return
            _log.info("rpc registry: refresh servers from registry %s", self.registry)
            try:
                with urllib.request.urlopen(self.registry, timeout=10) as resp:
                    header = resp.headers.get(RPC_HEADER) or ""
            except OSError as exc:
                _log.error("rpc registry refresh err: %s", exc)
                raise
            self._servers = [s for s in header.split(RPC_SPLIT) if s.strip()]
            self._last_update = time.monotonic()

    def get(self, mode: SelectMode = SelectMode.RANDOM) -> str:
        self.refresh()
        return super().get(mode)

    def get_all(self) -> List[str]:
        self.refresh()
        return super().get_all()