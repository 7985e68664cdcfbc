# rediskit

Building blocks for a Redis client: reply values, conversion of replies
into Python types, turning Python values into command arguments, parsing
of stream command replies, Lua script invocations and command pipelines.

## Installing

    pip install rediskit

Install with the `test` extra (`pip install rediskit[test]`) to run the
test suite with pytest.

## Reply values (`rediskit.value`)

A server reply is a `Value`, one of the frozen dataclasses `Nil`, `Int`,
`Data`, `Bulk`, `Status` and `Okay`. `Data` accepts `bytes` or `str`
(stored as UTF-8 bytes); `Bulk` takes any iterable of values and can be
iterated and measured with `len`.

```python
from rediskit.value import Bulk, Data, Nil

reply = Bulk([Data(b"0"), Bulk([Data(b"a"), Data(b"b")])])
reply.looks_like_cursor()                              # True
Nil().as_sequence()                                    # ()
list(Bulk([Data(b"k"), Data(b"v")]).as_map_iter())     # [(Data(b"k"), Data(b"v"))]
str(Bulk([Data(b"x")]))                                # bulk(string-data('"x"'))
```

`as_map_iter` pairs items up in order and drops a trailing unpaired item.

## Errors (`rediskit.errors`)

`RedisError` is an `Exception` carrying a `kind` (an `ErrorKind`), a
`description` and an optional `detail`. It offers `code()` (such as
`"ERR"`, `"MOVED"` or the code of an extension error), `category()`,
`is_io_error()`, `is_cluster_error()`, `is_connection_refusal()`,
`is_timeout()`, `is_connection_dropped()` and `redirect_node()`, which
returns `(address, slot)` for `MOVED` and `ASK` errors.

`make_extension_error(code, detail)` builds an error for a server error
code the library does not know; `make_io_error(error)` wraps an `OSError`.

## Converting replies (`rediskit.convert`)

`from_redis_value(value, target)` turns a reply into the type named by
`target`: `int`, `float`, `str`, `bool`, `bytes`, `Value` (or a specific
value class), `list[...]`, `dict[...]`, `set[...]`, `frozenset[...]`,
`tuple[...]`, `Optional[...]`, or any class with a `from_redis_value`
class method. A reply that does not fit raises `RedisError` with kind
`ErrorKind.TYPE_ERROR`.

```python
from typing import Optional

from rediskit.convert import InfoDict, from_redis_value
from rediskit.value import Bulk, Data, Nil, Status

from_redis_value(Data(b"42"), int)                          # 42
from_redis_value(Data(b"1"), list[bool])                    # [True]
from_redis_value(Nil(), Optional[str])                      # None
from_redis_value(Bulk([Data(b"a"), Data(b"1")]), dict[str, int])  # {"a": 1}

info = from_redis_value(Status("# comment\nrole:master\n"), InfoDict)
info.get("role", str)                                       # "master"
```

`InfoDict` is a read-only mapping of the `key:value` lines of an INFO
reply; `get(key, target)` converts a value and returns `None` when the
key is missing or does not convert, and `find(key)` returns the raw value.

## Building arguments (`rediskit.args`)

```python
from rediskit.args import describe_numeric_behavior, is_single_arg, to_redis_args

to_redis_args(("key", 42, 1.5))          # [b"key", b"42", b"1.5"]
to_redis_args({"a": 1})                  # [b"a", b"1"]
to_redis_args(None)                      # []
is_single_arg([b"a", b"b"])              # False
describe_numeric_behavior(2.0)           # NumericBehavior.NUMBER_IS_FLOAT
```

Booleans become `b"1"`/`b"0"`, sequences and sets give one argument per
item, and any object with a `to_redis_args()` method is expanded through
it. `Expiry` describes a key's expiry (`Expiry.ex`, `px`, `exat`, `pxat`,
`persist`) and `NumericBehavior` says how an argument acts in a numeric
context.

## Streams (`rediskit.streams`)

Option builders produce command arguments:

```python
from rediskit.streams import StreamClaimOptions, StreamMaxlen, StreamReadOptions

StreamReadOptions().count(10).group("grp", "alice").to_redis_args()
# [b"COUNT", b"10", b"GROUP", b"grp", b"alice"]
StreamClaimOptions().idle(1000).with_justid().to_redis_args()
# [b"IDLE", b"1000", b"JUSTID"]
StreamMaxlen.approximate(100).to_redis_args()
# [b"MAXLEN", b"~", b"100"]
```

Reply classes parse the server's answers through their
`from_redis_value` class methods: `StreamReadReply`, `StreamRangeReply`,
`StreamClaimReply`, `StreamPendingReply` (whose `data` is `None` when
nothing is pending; `count()` gives the number), `StreamPendingCountReply`,
`StreamInfoStreamReply`, `StreamInfoConsumersReply` and
`StreamInfoGroupsReply`. Entries are `StreamId` objects with an `id`, a
`map` of fields and `get(key, target)` for converted field access.

## Scripts (`rediskit.script`)

```python
from rediskit.script import Script

script = Script("return redis.call('GET', KEYS[1])")
script.hash                              # SHA1 of the code, in hex
script.key("k1").arg("x").eval_args()    # [b"EVALSHA", <sha1>, b"1", b"k1", b"x"]
script.prepare_invoke().load_args()      # [b"SCRIPT", b"LOAD", <code>]
```

## Pipelines (`rediskit.pipeline`)

```python
from rediskit.pipeline import Pipeline
from rediskit.value import Bulk, Data, Okay

pipe = Pipeline().atomic()
pipe.cmd("SET").arg("key_1").arg(42).ignore()
pipe.cmd("GET").arg("key_1")
list(pipe)            # [[b"SET", b"key_1", b"42"], [b"GET", b"key_1"]]

pipe.make_pipeline_results([Okay(), Data(b"42")])            # Bulk((Data(b"42"),))
pipe.transaction_results([Okay(), Bulk([Okay(), Data(b"42")])])
```

`transaction_results` looks only at the last reply (the one to EXEC): a
`Nil` is returned as is, a `Bulk` is filtered like a plain pipeline, and
anything else raises `RedisError` with kind `ErrorKind.RESPONSE_ERROR`.
`arg` on an empty pipeline raises `IndexError`; `clear()` empties it for
reuse.

## What the package does not do

The package does no I/O. It opens no connections, has no client object,
does not encode commands into the wire protocol or parse replies off the
wire, and does not send pipelines or scripts anywhere: it prepares the
arguments of commands and interprets reply values that a caller has
already obtained.