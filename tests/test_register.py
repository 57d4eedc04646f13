import threading
import time
from wsgiref.simple_server import WSGIRequestHandler, make_server

import pytest

from gee.rpc.register import (
    RPC_HEADER,
    RPC_SPLIT,
    Registry,
    heartbeat,
    send_heartbeat,
)


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, *args):
        pass


@pytest.fixture
def live_registry():
    registry = Registry(0)
    server = make_server("127.0.0.1", 0, registry, handler_class=_QuietHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    url = f"http://127.0.0.1:{server.server_port}/rpc/register"
    yield registry, url
    server.shutdown()
    server.server_close()


def _request(registry, method, header=None):
    environ = {"REQUEST_METHOD": method, "PATH_INFO": "/rpc/register"}
    if header is not None:
        environ["HTTP_X_RPC_SERVER"] = header
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(registry(environ, start_response))
    return captured["status"], captured["headers"], body


def test_alive_servers_sorted():
    registry = Registry()
    for addr in ("tcp@b", "tcp@a", "tcp@c"):
        registry.put_server(addr)
    assert registry.alive_servers() == ["tcp@a", "tcp@b", "tcp@c"]


def test_put_server_twice_keeps_one_entry():
    registry = Registry()
    registry.put_server("tcp@a")
    registry.put_server("tcp@a")
    assert registry.alive_servers() == ["tcp@a"]


def test_expired_servers_are_dropped():
    registry = Registry(0.05)
    registry.put_server("tcp@old")
    time.sleep(0.1)
    registry.put_server("tcp@new")
    assert registry.alive_servers() == ["tcp@new"]


def test_zero_timeout_keeps_servers():
    registry = Registry(0)
    registry.put_server("tcp@a")
    time.sleep(0.02)
    assert registry.alive_servers() == ["tcp@a"]


def test_get_lists_servers_in_header():
    registry = Registry()
    registry.put_server("tcp@b")
    registry.put_server("tcp@a")
    status, headers, _ = _request(registry, "GET")
    assert status.startswith("200")
    assert headers[RPC_HEADER].split(RPC_SPLIT) == ["tcp@a", "tcp@b"]


def test_post_records_server():
    registry = Registry()
    status, _, _ = _request(registry, "POST", "tcp@x")
    assert status.startswith("200")
    assert registry.alive_servers() == ["tcp@x"]


def test_post_without_header_is_error():
    registry = Registry()
    status, _, _ = _request(registry, "POST")
    assert status.startswith("500")
    assert registry.alive_servers() == []


def test_other_method_not_allowed():
    registry = Registry()
    status, _, _ = _request(registry, "PUT", "tcp@x")
    assert status.startswith("405")
    assert registry.alive_servers() == []


def test_send_heartbeat_over_http(live_registry):
    registry, url = live_registry
    send_heartbeat(url, "tcp@127.0.0.1:1")
    assert registry.alive_servers() == ["tcp@127.0.0.1:1"]


def test_heartbeat_registers_and_repeats(live_registry):
    registry, url = live_registry
    stop = heartbeat(url, "tcp@h", 0.05)
    try:
        assert registry.alive_servers() == ["tcp@h"]
        with registry._lock:
            first = registry._servers["tcp@h"]
        time.sleep(0.2)
        with registry._lock:
            later = registry._servers["tcp@h"]
        assert later > first
    finally:
        stop.set()


def test_heartbeat_to_unreachable_registry_raises():
    with pytest.raises(OSError):
        send_heartbeat("http://127.0.0.1:1/rpc/register", "tcp@x")