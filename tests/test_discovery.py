import threading
from wsgiref.simple_server import WSGIRequestHandler, make_server

import pytest

from gee.rpc.discovery import MultiServersDiscovery, RegistryDiscovery, SelectMode
from gee.rpc.register import Registry


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, *args):
        pass


@pytest.fixture
def live_registry():
    registry = Registry(0)
    server = make_server("127.0.0.1", 0, registry, handler_class=_QuietHandler)
    threading.Thread(target=server.serve_forever, daemon=True).start()
    yield registry, f"http://127.0.0.1:{server.server_port}/rpc/register"
    server.shutdown()
    server.server_close()


SERVERS = ["tcp@a", "tcp@b", "tcp@c"]


def test_empty_discovery_raises():
    discovery = MultiServersDiscovery([])
    with pytest.raises(LookupError):
        discovery.get(SelectMode.RANDOM)


def test_random_returns_known_server():
    discovery = MultiServersDiscovery(SERVERS)
    picks = {discovery.get(SelectMode.RANDOM) for _ in range(20)}
    assert picks <= set(SERVERS)


def test_round_robin_cycles_through_all():
    discovery = MultiServersDiscovery(SERVERS)
    picks = [discovery.get(SelectMode.ROUND_ROBIN) for _ in range(len(SERVERS) + 1)]
    assert sorted(picks[: len(SERVERS)]) == sorted(SERVERS)
    assert picks[len(SERVERS)] == picks[0]


def test_unsupported_mode_raises():
    discovery = MultiServersDiscovery(SERVERS)
    with pytest.raises(ValueError):
        discovery.get(7)


def test_get_all_returns_copy():
    discovery = MultiServersDiscovery(SERVERS)
    servers = discovery.get_all()
    servers.append("tcp@z")
    assert discovery.get_all() == SERVERS


def test_update_replaces_servers():
    discovery = MultiServersDiscovery(SERVERS)
    discovery.update(["tcp@x"])
    assert discovery.get_all() == ["tcp@x"]
    assert discovery.get(SelectMode.ROUND_ROBIN) == "tcp@x"


def test_registry_discovery_fetches_servers(live_registry):
    registry, url = live_registry
    registry.put_server("tcp@b")
    registry.put_server("tcp@a")
    discovery = RegistryDiscovery(url, 0)
    assert discovery.get_all() == ["tcp@a", "tcp@b"]
    assert discovery.get(SelectMode.RANDOM) in {"tcp@a", "tcp@b"}


def test_registry_discovery_caches_until_timeout(live_registry):
    registry, url = live_registry
    registry.put_server("tcp@a")
    discovery = RegistryDiscovery(url, 60)
    assert discovery.get_all() == ["tcp@a"]
    registry.put_server("tcp@b")
    assert discovery.get_all() == ["tcp@a"]


def test_registry_discovery_empty_registry(live_registry):
    _, url = live_registry
    discovery = RegistryDiscovery(url, 0)
    assert discovery.get_all() == []
    with pytest.raises(LookupError):
        discovery.get(SelectMode.ROUND_ROBIN)


def test_registry_discovery_update_skips_refresh():
    discovery = RegistryDiscovery("http://127.0.0.1:1/rpc/register", 60)
    discovery.update(["tcp@x"])
    assert discovery.get_all() == ["tcp@x"]


def test_registry_discovery_unreachable_raises():
    discovery = RegistryDiscovery("http://127.0.0.1:1/rpc/register", 0)
    with pytest.raises(OSError):
        discovery.get_all()