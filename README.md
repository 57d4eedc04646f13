# gee

A collection of small, readable building blocks written in plain Python:

- `gee.web` – a minimal WSGI web framework with a trie-based router,
  route groups, middleware, static files and Jinja2 templates.
- `gee.cache` – an in-process cache with byte-bounded LRU eviction,
  consistent hashing for picking peers, and single-flight loading so that
  concurrent misses for the same key reach the data source only once.
- `gee.orm` – a tiny object-relational mapper over SQLite with a clause
  builder, table management, hooks and transactions.
- `gee.rpc` – the pieces around an RPC system: a length-prefixed JSON
  message codec, a server registry kept alive by heartbeats, and server
  discovery with random or round-robin selection.
- `gee.leetcode` – a handful of classic algorithm solutions.

The only runtime dependency is `jinja2`, used for HTML templates.

Install with the test extra to run the tests:

```
pip install .[test]
pytest
```

## Web

```python
from gee.web.engine import Engine

app = Engine()

def hello(ctx):
    ctx.string(200, "hello %s, you're at %s\n", ctx.param("name"), ctx.path)

app.get("/hello/:name", hello)

v1 = app.group("/v1")
v1.get("/ping", lambda ctx: ctx.json(200, {"message": "pong"}))

app.static("/assets", "./static")
app.run(":9999")
```

`Engine` is a WSGI application, so it can also be handed to any WSGI
server; `Engine.run(addr)` serves it with the standard library's
`wsgiref` server.

Routes support named parameters (`/hello/:name`) and catch-all parameters
(`/assets/*filepath`); unmatched paths answer `404 NOT FOUND <path>`.
`RouterGroup.use(...)` adds middleware that runs for every request whose
path starts with the group's prefix. `default()` returns an engine that
already uses the `logger()` and `recovery()` middleware; `recovery()`
turns an exception raised by a later handler into a
`500 {"message": "Internal Server Error"}` response.

A handler receives a `Context` with `query`, `post_form` and `param` for
reading the request, and `string`, `json`, `html`, `data`, `render`,
`status`, `set_header`, `fail` and `next` for answering it. For
templates, call `set_func_map` (optional) and then `load_html_glob`;
files are named by their file name and rendered with
`ctx.render(code, name, data)`.

## Cache

```python
from gee.cache.group import Group

scores = {"Tom": "630", "Jack": "589", "Sam": "567"}

def load(key):
    if key in scores:
        return scores[key].encode()
    raise KeyError(f"{key} is not found")

group = Group("scores", 2 << 10, load)
print(str(group.get("Tom")))   # 630
```

Values are held as immutable `ByteView`s in an `LruCache` bounded by the
number of bytes of keys and values (zero means unbounded). Groups are
registered by name and can be looked up again with `get_group(name)`.
`SingleFlight` makes concurrent loads of one key share a single call.

`HashRing` maps keys to nodes through virtual replicas (CRC-32 by
default). A group can be given a `PeerPicker` through `register_peers`;
when the picker returns a `PeerGetter` for a key, the group asks that
peer first and falls back to its own getter if the peer fails.

The package defines only these peer interfaces: it has no network
transport for peers and no cache server program.

## ORM

```python
from dataclasses import dataclass, field
from gee.orm.engine import Engine

@dataclass
class User:
    Name: str = field(metadata={"geeorm": "PRIMARY KEY"})
    Age: int = 0

with Engine("sqlite3", "gee.db") as engine:
    session = engine.new_session().model(User)
    session.drop_table()
    session.create_table()
    session.insert(User("Tom", 18), User("Sam", 25))
    print(session.where("Name = ?", "Tom").first(User))
```

Models are dataclasses; a field's `metadata["geeorm"]` is its column
constraint. `Session` offers `insert`, `find`, `first` (raises
`LookupError` when nothing matches), `update`, `delete` and `count`,
chained with `where`, `order_by` and `limit`, plus `raw` SQL. A model may
define hook methods named after `Hook` members, such as `before_insert`
or `after_query`, each taking the session.

`Engine.transaction(fn)` runs `fn(session)` inside a transaction,
committing on success and rolling back and re-raising when it raises.
Only the `sqlite3` driver is available. `gee.orm.log.set_level(Level.ERROR)`
silences the info messages the ORM prints to standard output.

## RPC

```python
from gee.rpc.register import Registry, heartbeat
from gee.rpc.discovery import RegistryDiscovery, MultiServersDiscovery, SelectMode

# In one process: the registry, served at /rpc/register.
Registry().serve("localhost:9999")

# In each server process: announce the server now and then periodically.
stop = heartbeat("http://localhost:9999/rpc/register", "tcp@127.0.0.1:8001", 0)

# In a caller: find servers.
discovery = RegistryDiscovery("http://localhost:9999/rpc/register")
print(discovery.get(SelectMode.ROUND_ROBIN))

fixed = MultiServersDiscovery(["tcp@127.0.0.1:8001", "tcp@127.0.0.1:8002"])
print(fixed.get_all())
```

`Registry` is a WSGI application: `GET` lists the live servers in the
`X-Rpc-Server` header, `POST` with that header records a heartbeat, and
servers silent for longer than the timeout (five minutes by default) are
dropped. `RegistryDiscovery` reuses the list it fetched for ten seconds
by default.

`gee.rpc.codec` frames messages as a 4-byte big-endian length followed by
UTF-8 JSON: `new_codec(CodecType.JSON, conn)` returns a `StreamCodec`
that reads and writes `Header`/body pairs on a socket or binary stream.
`CodecType.GOB` is named but not supported; asking for it raises
`ValueError`.

What the package does not do: it has no RPC server, no RPC client, no
service registration of Python objects and no load-balancing client.
The codec, registry and discovery are the parts available for building
them.

## Algorithms

```python
from gee.leetcode.two_sum import two_sum
from gee.leetcode.median import find_median_sorted_arrays
from gee.leetcode.longest_substring import length_of_longest_substring_window
from gee.leetcode.add_two import ListNode, add_two_numbers

two_sum([1, 5, 6, 8], 11)                         # [1, 2]
find_median_sorted_arrays([1, 3, 4, 9], [2, 8])   # 3.5
length_of_longest_substring_window("abcabcbb")    # 3
list(add_two_numbers(ListNode.from_iterable([2, 4, 3]),
                     ListNode.from_iterable([5, 6, 4])))   # [7, 0, 8]
```

`length_of_longest_substring_bitset` and `length_of_longest_substring_hash`
solve the same problem with other sliding-window strategies.