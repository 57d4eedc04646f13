import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from gee.cache.byteview import ByteView
from gee.cache.group import Group, PeerGetter, PeerPicker, get_group

BASE = {"key1": "value1", "key2": "value2", "key3": "value3"}


def _counting_getter(counts):
    def getter(key):
        if key in BASE:
            counts[key] = counts.get(key, 0) + 1
            return BASE[key].encode()
        raise KeyError(f"{key} not found")

    return getter


class _StaticPeer(PeerGetter):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def get(self, group, key):
        self.calls.append((group, key))
        if self.fail:
            raise ConnectionError("peer down")
        return b"remote:" + key.encode()


class _Picker(PeerPicker):
    def __init__(self, peer):
        self.peer = peer

    def pick_peer(self, key):
        return self.peer


def test_getter_callable_returns_key_bytes():
    group = Group("echo", 64, lambda key: key.encode())
    view = group.get("key")
    assert view == ByteView(b"key")
    assert view.byte_slice() == b"key"


def test_group_loads_each_key_once():
    counts = {}
    group = Group("scores-once", 2 << 5, _counting_getter(counts))
    for key, value in BASE.items():
        assert str(group.get(key)) == value
        assert str(group.get(key)) == value
        assert counts[key] == 1
    assert str(group.get("key1")) == "value1"
    assert counts["key1"] == 1


def test_missing_key_raises_getter_error():
    group = Group("scores-missing", 2 << 5, _counting_getter({}))
    with pytest.raises(KeyError, match="key6 not found"):
        group.get("key6")


def test_empty_key_rejected():
    group = Group("scores-empty", 64, lambda key: b"x")
    with pytest.raises(ValueError, match="key is empty"):
        group.get("")


def test_missing_getter_rejected():
    with pytest.raises(ValueError):
        Group("no-getter", 64, None)


def test_get_group_returns_registered_group():
    group = Group("scores-lookup", 64, lambda key: b"x")
    assert get_group("scores-lookup") is group
    assert get_group("never-created") is None


def test_eviction_forces_reload():
    counts = {}

    def getter(key):
        counts[key] = counts.get(key, 0) + 1
        return b"123456789"

    group = Group("tiny", 10, getter)
    first = group.get("a")
    second = group.get("b")
    again = group.get("a")
    assert first.byte_slice() == b"123456789"
    assert second.byte_slice() == b"123456789"
    assert again.byte_slice() == b"123456789"
    assert counts == {"a": 2, "b": 1}


def test_peer_value_is_used():
    counts = {}
    group = Group("with-peer", 64, _counting_getter(counts))
    peer = _StaticPeer()
    group.register_peers(_Picker(peer))
    assert group.get("key1").byte_slice() == b"remote:key1"
    assert peer.calls == [("with-peer", "key1")]
    assert counts == {}


def test_peer_failure_falls_back_to_getter():
    counts = {}
    group = Group("peer-fails", 64, _counting_getter(counts))
    group.register_peers(_Picker(_StaticPeer(fail=True)))
    assert str(group.get("key2")) == "value2"
    assert counts == {"key2": 1}


def test_no_peer_picked_uses_getter():
    counts = {}
    group = Group("peer-local", 64, _counting_getter(counts))
    group.register_peers(_Picker(None))
    assert str(group.get("key3")) == "value3"
    assert counts == {"key3": 1}


def test_register_peers_twice_raises():
    group = Group("peer-twice", 64, lambda key: b"x")
    group.register_peers(_Picker(None))
    with pytest.raises(RuntimeError, match="more than once"):
        group.register_peers(_Picker(None))


def test_concurrent_gets_share_one_load():
    counts = {}
    lock = threading.Lock()

    def slow_getter(key):
        with lock:
            counts[key] = counts.get(key, 0) + 1
        time.sleep(0.3)
        return b"slow"

    group = Group("concurrent", 64, slow_getter)
    with ThreadPoolExecutor(max_workers=5) as pool:
        views = list(pool.map(lambda _: group.get("k"), range(5)))

    assert [view.byte_slice() for view in views] == [b"slow"] * 5
    assert group.get("k").byte_slice() == b"slow"
    assert counts == {"k": 1}