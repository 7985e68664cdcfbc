"""Argument builders and reply types for the stream commands."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from .args import to_redis_args
from .convert import from_redis_value
from .errors import ErrorKind, RedisError, make_io_error
from .value import Bulk, Data, Int, Value

__all__ = [
    "StreamMaxlen",
    "StreamClaimOptions",
    "StreamReadOptions",
    "StreamId",
    "StreamKey",
    "StreamReadReply",
    "StreamRangeReply",
    "StreamClaimReply",
    "StreamPendingData",
    "StreamPendingReply",
    "StreamPendingId",
    "StreamPendingCountReply",
    "StreamInfoConsumer",
    "StreamInfoGroup",
    "StreamInfoStreamReply",
    "StreamInfoConsumersReply",
    "StreamInfoGroupsReply",
]

_USIZE_MASK = 0xFFFF_FFFF_FFFF_FFFF
_USIZE_RE = re.compile(r"\A\+?[0-9]+\Z")


def _parse_usize(text: str) -> int:
    """Parse an unsigned count, falling back to 0 on anything invalid."""
    if not _USIZE_RE.match(text):
        return 0
    number = int(text)
    return number if number <= _USIZE_MASK else 0


@dataclass(frozen=True)
class StreamMaxlen:
    """``MAXLEN [=|~] <count>``: an exact or approximate stream length cap."""

    operator: str
    count: int

    def __post_init__(self) -> None:
        if self.operator not in ("=", "~"):
            raise ValueError(f"unknown MAXLEN operator: {self.operator!r}")

    @classmethod
    def equals(cls, count: int) -> StreamMaxlen:
        """Cap the stream at exactly ``count`` entries."""
        return cls("=", count)

    @classmethod
    def approximate(cls, count: int) -> StreamMaxlen:
        """Cap the stream at roughly ``count`` entries."""
        return cls("~", count)

    def to_redis_args(self) -> list[bytes]:
        """The command arguments for this option."""
        return [b"MAXLEN", self.operator.encode("ascii"), *to_redis_args(self.count)]


@dataclass
class StreamClaimOptions:
    """Options for the XCLAIM command."""

    idle_ms: int | None = None
    time_ms: int | None = None
    retry_count: int | None = None
    force: bool = False
    justid: bool = False

    def idle(self, ms: int) -> StreamClaimOptions:
        """Set ``IDLE <milliseconds>``."""
        self.idle_ms = ms
        return self

    def time(self, ms_time: int) -> StreamClaimOptions:
        """Set ``TIME <Unix epoch milliseconds>``."""
        self.time_ms = ms_time
        return self

    def retry(self, count: int) -> StreamClaimOptions:
        """Set ``RETRYCOUNT <count>``."""
        self.retry_count = count
        return self

    def with_force(self) -> StreamClaimOptions:
        """Set ``FORCE``."""
        self.force = True
        return self

    def with_justid(self) -> StreamClaimOptions:
        """Set ``JUSTID``; the reply then holds only ids."""
        self.justid = True
        return self

    def to_redis_args(self) -> list[bytes]:
        """The command arguments for these options."""
        out: list[bytes] = []
        if self.idle_ms is not None:
            out += [b"IDLE", str(self.idle_ms).encode("ascii")]
        if self.time_ms is not None:
            out += [b"TIME", str(self.time_ms).encode("ascii")]
        if self.retry_count is not None:
            out += [b"RETRYCOUNT", str(self.retry_count).encode("ascii")]
        if self.force:
            out.append(b"FORCE")
        if self.justid:
            out.append(b"JUSTID")
        return out


@dataclass
class StreamReadOptions:
    """Options for XREAD, or XREADGROUP once a group is set."""

    block_ms: int | None = None
    max_count: int | None = None
    no_ack: bool = False
    group_args: tuple[list[bytes], list[bytes]] | None = None

    def read_only(self) -> bool:
        """True unless reading as part of a consumer group."""
        return self.group_args is None

    def noack(self) -> StreamReadOptions:
        """Skip adding messages to the pending entries list."""
        self.no_ack = True
        return self

    def block(self, ms: int) -> StreamReadOptions:
        """Set the block time in milliseconds."""
        self.block_ms = ms
        return self

    def count(self, n: int) -> StreamReadOptions:
        """Set the maximum number of entries per stream."""
        self.max_count = n
        return self

    def group(self, group_name: Any, consumer_name: Any) -> StreamReadOptions:
        """Read as ``consumer_name`` of the consumer group ``group_name``."""
        self.group_args = (to_redis_args(group_name), to_redis_args(consumer_name))
        return self

    def to_redis_args(self) -> list[bytes]:
        """The command arguments for these options."""
        out: list[bytes] = []
        if self.block_ms is not None:
            out += [b"BLOCK", str(self.block_ms).encode("ascii")]
        if self.max_count is not None:
            out += [b"COUNT", str(self.max_count).encode("ascii")]
        if self.group_args is not None:
            # NOACK only exists for XREADGROUP.
            if self.no_ack:
                out.append(b"NOACK")
            out.append(b"GROUP")
            group_name, consumer_name = self.group_args
            out += group_name
            out += consumer_name
        return out


@dataclass
class StreamId:
    """A stream entry: its id and its field/value pairs."""

    id: str = ""
    map: dict[str, Value] = field(default_factory=dict)

    @classmethod
    def _from_bulk_value(cls, value: Value) -> StreamId:
        entry = cls()
        if isinstance(value, Bulk):
            items = value.items
            if len(items) > 0:
                entry.id = from_redis_value(items[0], str)
            if len(items) > 1:
                entry.map = from_redis_value(items[1], dict[str, Value])
        return entry

    def get(self, key: str, target: Any = str) -> Any:
        """The field ``key`` converted to ``target``, or None."""
        found = self.map.get(key)
        if found is None:
            return None
        try:
            return from_redis_value(found, target)
        except RedisError:
            return None

    def __contains__(self, key: object) -> bool:
        return key in self.map

    def __len__(self) -> int:
        return len(self.map)


def _entries(rows: list[dict[str, dict[str, Value]]]) -> list[StreamId]:
    return [StreamId(id=entry_id, map=fields) for row in rows for entry_id, fields in row.items()]


@dataclass
class StreamKey:
    """A stream key and the entries read from it."""

    key: str = ""
    ids: list[StreamId] = field(default_factory=list)


@dataclass
class StreamReadReply:
    """Reply of XREAD and XREADGROUP."""

    keys: list[StreamKey] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamReadReply:
        """Parse an XREAD reply."""
        rows = from_redis_value(value, list[dict[str, list[dict[str, dict[str, Value]]]]])
        keys = [
            StreamKey(key=key, ids=_entries(entries))
            for row in rows
            for key, entries in row.items()
        ]
        return cls(keys=keys)


@dataclass
class StreamRangeReply:
    """Reply of XRANGE and XREVRANGE."""

    ids: list[StreamId] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamRangeReply:
        """Parse an XRANGE reply."""
        return cls(ids=_entries(from_redis_value(value, list[dict[str, dict[str, Value]]])))


@dataclass
class StreamClaimReply:
    """Reply of XCLAIM."""

    ids: list[StreamId] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamClaimReply:
        """Parse an XCLAIM reply."""
        return cls(ids=_entries(from_redis_value(value, list[dict[str, dict[str, Value]]])))


@dataclass
class StreamInfoConsumer:
    """A consumer of a consumer group."""

    name: str = ""
    pending: int = 0
    idle: int = 0


@dataclass
class StreamPendingData:
    """Summary of pending messages when there are any."""

    count: int = 0
    start_id: str = ""
    end_id: str = ""
    consumers: list[StreamInfoConsumer] = field(default_factory=list)


@dataclass
class StreamPendingReply:
    """Reply of XPENDING in its summary form; ``data`` is None when empty."""

    data: StreamPendingData | None = None

    def count(self) -> int:
        """How many pending messages the reply reports."""
        return 0 if self.data is None else self.data.count

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamPendingReply:
        """Parse an XPENDING summary reply."""
        count, start, end, consumer_data = from_redis_value(
            value,
            tuple[int, Optional[str], Optional[str], list[Optional[tuple[str, str]]]],
        )
        if count == 0:
            return cls()
        if start is None:
            raise make_io_error(OSError("IllegalState: Non-zero pending expects start id"))
        if end is None:
            raise make_io_error(OSError("IllegalState: Non-zero pending expects end id"))
        consumers = [
            StreamInfoConsumer(name=name, pending=_parse_usize(pending))
            for name, pending in (pair for pair in consumer_data if pair is not None)
        ]
        return cls(
            StreamPendingData(count=count, start_id=start, end_id=end, consumers=consumers)
        )


@dataclass
class StreamPendingId:
    """A pending message from the extended XPENDING form."""

    id: str = ""
    consumer: str = ""
    last_delivered_ms: int = 0
    times_delivered: int = 0


def _utf8(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise RedisError(ErrorKind.TYPE_ERROR, "Cannot convert from UTF-8") from None


@dataclass
class StreamPendingCountReply:
    """Reply of XPENDING with a count, optionally for one consumer."""

    ids: list[StreamPendingId] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamPendingCountReply:
        """Parse an extended XPENDING reply."""
        if not isinstance(value, Bulk):
            raise RedisError(ErrorKind.TYPE_ERROR, "Cannot parse redis data (1)")
        reply = cls()
        for outer in value.items:
            if not isinstance(outer, Bulk):
                raise RedisError(ErrorKind.TYPE_ERROR, "Cannot parse redis data (2)")
            match outer.items:
                case (Data() as id_data, Data() as consumer_data, Int() as last, Int() as times):
                    reply.ids.append(
                        StreamPendingId(
                            id=_utf8(id_data.value),
                            consumer=_utf8(consumer_data.value),
                            last_delivered_ms=last.value & _USIZE_MASK,
                            times_delivered=times.value & _USIZE_MASK,
                        )
                    )
                case _:
                    raise RedisError(ErrorKind.TYPE_ERROR, "Cannot parse redis data (3)")
        return reply


@dataclass
class StreamInfoStreamReply:
    """Reply of XINFO STREAM."""

    last_generated_id: str = ""
    radix_tree_keys: int = 0
    groups: int = 0
    length: int = 0
    first_entry: StreamId = field(default_factory=StreamId)
    last_entry: StreamId = field(default_factory=StreamId)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamInfoStreamReply:
        """Parse an XINFO STREAM reply."""
        info = from_redis_value(value, dict[str, Value])
        reply = cls()
        if "last-generated-id" in info:
            reply.last_generated_id = from_redis_value(info["last-generated-id"], str)
        if "radix-tree-nodes" in info:
            reply.radix_tree_keys = from_redis_value(info["radix-tree-nodes"], int)
        if "groups" in info:
            reply.groups = from_redis_value(info["groups"], int)
        if "length" in info:
            reply.length = from_redis_value(info["length"], int)
        if "first-entry" in info:
            reply.first_entry = StreamId._from_bulk_value(info["first-entry"])
        if "last-entry" in info:
            reply.last_entry = StreamId._from_bulk_value(info["last-entry"])
        return reply


@dataclass
class StreamInfoConsumersReply:
    """Reply of XINFO CONSUMERS."""

    consumers: list[StreamInfoConsumer] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamInfoConsumersReply:
        """Parse an XINFO CONSUMERS reply."""
        reply = cls()
        for info in from_redis_value(value, list[dict[str, Value]]):
            consumer = StreamInfoConsumer()
            if "name" in info:
                consumer.name = from_redis_value(info["name"], str)
            if "pending" in info:
                consumer.pending = from_redis_value(info["pending"], int)
            if "idle" in info:
                consumer.idle = from_redis_value(info["idle"], int)
            reply.consumers.append(consumer)
        return reply


@dataclass
class StreamInfoGroup:
    """A consumer group of a stream."""

    name: str = ""
    consumers: int = 0
    pending: int = 0
    last_delivered_id: str = ""


@dataclass
class StreamInfoGroupsReply:
    """Reply of XINFO GROUPS."""

    groups: list[StreamInfoGroup] = field(default_factory=list)

    @classmethod
    def from_redis_value(cls, value: Value) -> StreamInfoGroupsReply:
        """Parse an XINFO GROUPS reply."""
        reply = cls()
        for info in from_redis_value(value, list[dict[str, Value]]):
            group = StreamInfoGroup()
            if "name" in info:
                group.name = from_redis_value(info["name"], str)
            if "pending" in info:
                group.pending = from_redis_value(info["pending"], int)
            if "consumers" in info:
                group.consumers = from_redis_value(info["consumers"], int)
            if "last-delivered-id" in info:
                group.last_delivered_id = from_redis_value(info["last-delivered-id"], str)
            reply.groups.append(group)
        return reply