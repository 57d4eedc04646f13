"""A registry where RPC servers announce themselves with heartbeats."""

from __future__ import annotations

import logging
import threading
import time
import urllib.request
from http import HTTPStatus
from typing import Any, Dict, Iterable, List, Optional
from wsgiref.simple_server import make_server

_log = logging.getLogger(__name__)

DEFAULT_PATH = "/rpc/register"
DEFAULT_TIMEOUT = 5 * 60.0
RPC_HEADER = "X-Rpc-Server"
RPC_SPLIT = ","

_ENVIRON_HEADER = "HTTP_" + RPC_HEADER.upper().replace("-", "_")


def _status_line(code: int) -> str:
    return f"{code} {HTTPStatus(code).phrase}"


class Registry:
    """Keeps the servers that sent a heartbeat within the last ``timeout`` seconds.

    A timeout of zero keeps every server forever. The registry is a WSGI
    application: GET lists the live servers in the ``X-Rpc-Server``
    header, POST with that header records a heartbeat.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout
        self._lock = threading.Lock()
        self._servers: Dict[str, float] = {}

    def put_server(self, addr: str) -> None:
        """Record a heartbeat from ``addr``."""
        with self._lock:
            self._servers[addr] = time.monotonic()

    def alive_servers(self) -> List[str]:
        """Return the live servers, sorted, dropping the ones that timed out."""
        now = time.monotonic()
        with self._lock:
            alive = []
            for addr, start in list(self._servers.items()):
                if self.timeout == 0 or start + self.timeout > now:
                    alive.append(addr)
                else:
                    del self._servers[addr]
        return sorted(alive)

    def __call__(self, environ: Dict[str, Any], start_response) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        headers: List[tuple] = []
        if method == "GET":
            code = 200
            headers.append((RPC_HEADER, RPC_SPLIT.join(self.alive_servers())))
        elif method == "POST":
            addr = environ.get(_ENVIRON_HEADER, "")
            if addr:
                self.put_server(addr)
                code = 200
            else:
                code = 500
        else:
            code = 405
        start_response(_status_line(code), headers)
        return [b""]

    def serve(self, addr: str) -> None:
        """Serve the registry at ``DEFAULT_PATH`` on ``addr`` ("host:port") until interrupted."""

        def app(environ: Dict[str, Any], start_response) -> Iterable[bytes]:
            if environ.get("PATH_INFO", "") != DEFAULT_PATH:
                start_response(_status_line(404), [("Content-Type", "text/plain")])
                return [b"404 page not found\n"]
            return self(environ, start_response)

        host, _, port = addr.rpartition(":")
        _log.info("rpc register path: %s", DEFAULT_PATH)
        with make_server(host, int(port), app) as server:
            server.serve_forever()


DEFAULT_REGISTRY = Registry(DEFAULT_TIMEOUT)


def send_heartbeat(registry: str, addr: str) -> None:
    """POST one heartbeat for ``addr`` to the registry URL; raise OSError on failure."""
    _log.info("%s send heart beat to register %s", addr, registry)
    request = urllib.request.Request(
        registry, data=b"", method="POST", headers={RPC_HEADER: addr}
    )
    try:
        with urllib.request.urlopen(request, timeout=10):
            pass
    except OSError as exc:
        _log.error("rpc server heart beat err: %s", exc)
        raise


def heartbeat(registry: str, addr: str, duration: Optional[float] = 0) -> threading.Event:
    """Send a heartbeat now and then every ``duration`` seconds in the background.

    A zero duration means one minute less than the registry's default
    timeout. The background loop ends at the first failed heartbeat or
    when the returned event is set.
    """
    if not duration:
        duration = DEFAULT_TIMEOUT - 60.0
    send_heartbeat(registry, addr)
    stop = threading.Event()

    def loop() -> None:
        while not stop.wait(duration):
            try:
                send_heartbeat(registry, addr)
            except OSError:
                return

    threading.Thread(target=loop, daemon=True).start()
    return stop