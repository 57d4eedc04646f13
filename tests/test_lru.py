from gee.cache.lru import LruCache


def test_get_hit_and_miss():
    lru = LruCache(0, None)
    lru.add("a", "a")
    assert lru.get("a") == "a"
    assert lru.get("b") is None


def test_remove_evicts_oldest():
    k1, k2, k3 = "k1", "k2", "k3"
    val1, val2, val3 = "val1", "val2", "val3"
    cap = len(k1 + val1 + k2 + val2)
    lru = LruCache(cap, None)
    lru.add(k1, val1)
    lru.add(k2, val2)
    lru.add(k3, val3)
    assert lru.get(k1) is None
    assert lru.get(k2) == val2
    assert lru.get(k3) == val3
    assert len(lru) == 2


def test_on_evicted_called_with_evicted_entry():
    evicted = []
    k1, k2, k3 = "k1", "k2", "k3"
    val1, val2, val3 = "val1", "val2", "val3"
    cap = len(k1 + val1 + k2 + val2)
    lru = LruCache(cap, lambda key, value: evicted.append((key, value)))
    lru.add(k1, val1)
    lru.add(k2, val2)
    lru.add(k3, val3)
    assert evicted == [(k1, val1)]


def test_get_refreshes_recency():
    cap = len("k1val1k2val2")
    lru = LruCache(cap, None)
    lru.add("k1", "val1")
    lru.add("k2", "val2")
    lru.get("k1")
    lru.add("k3", "val3")
    assert lru.get("k2") is None
    assert lru.get("k1") == "val1"


def test_update_existing_key_adjusts_size():
    lru = LruCache(0, None)
    lru.add("k", "ab")
    assert lru.nbytes == len("k") + len("ab")
    lru.add("k", "abcd")
    assert lru.nbytes == len("k") + len("abcd")
    assert len(lru) == 1
    assert lru.get("k") == "abcd"


def test_unbounded_when_max_bytes_zero():
    lru = LruCache(0, None)
    for i in range(100):
        lru.add(str(i), "x" * 10)
    assert len(lru) == 100


def test_remove_oldest_on_empty_is_harmless():
    lru = LruCache(10, None)
    lru.remove_oldest()
    assert len(lru) == 0
    assert lru.nbytes == 0