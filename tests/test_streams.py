import pytest

from rediskit.args import to_redis_args
from rediskit.convert import from_redis_value
from rediskit.errors import ErrorKind, RedisError
from rediskit.streams import (
    StreamClaimOptions,
    StreamClaimReply,
    StreamId,
    StreamInfoConsumersReply,
    StreamInfoGroupsReply,
    StreamInfoStreamReply,
    StreamMaxlen,
    StreamPendingCountReply,
    StreamPendingReply,
    StreamRangeReply,
    StreamReadOptions,
    StreamReadReply,
)
from rediskit.value import Bulk, Data, Int, Nil, Status


def _entry(entry_id, *pairs):
    return Bulk([Data(entry_id), Bulk([Data(p) for p in pairs])])


def test_maxlen_equals_args():
    assert StreamMaxlen.equals(5).to_redis_args() == [b"MAXLEN", b"=", b"5"]


def test_maxlen_approx_through_generic_args():
    assert to_redis_args(StreamMaxlen.approximate(7)) == [b"MAXLEN", b"~", b"7"]


def test_maxlen_rejects_unknown_operator():
    with pytest.raises(ValueError):
        StreamMaxlen(">", 3)


def test_claim_options_empty():
    assert StreamClaimOptions().to_redis_args() == []


def test_claim_options_all():
    opts = StreamClaimOptions().idle(100).time(200).retry(3).with_force().with_justid()
    assert opts.to_redis_args() == [
        b"IDLE", b"100", b"TIME", b"200", b"RETRYCOUNT", b"3", b"FORCE", b"JUSTID",
    ]


def test_read_options_block_count():
    opts = StreamReadOptions().block(10).count(2)
    assert opts.read_only() is True
    assert opts.to_redis_args() == [b"BLOCK", b"10", b"COUNT", b"2"]


def test_read_options_noack_needs_group():
    assert StreamReadOptions().noack().to_redis_args() == []


def test_read_options_group_with_noack():
    opts = StreamReadOptions().noack().group("g1", "c1")
    assert opts.read_only() is False
    assert opts.to_redis_args() == [b"NOACK", b"GROUP", b"g1", b"c1"]


def test_range_reply():
    value = Bulk([_entry("1-0", "a", "x"), _entry("2-0", "b", "y")])
    reply = StreamRangeReply.from_redis_value(value)
    assert [e.id for e in reply.ids] == ["1-0", "2-0"]
    assert reply.ids[0].map == {"a": Data("x")}
    assert reply.ids[1].get("b") == "y"


def test_claim_reply_via_from_redis_value():
    value = Bulk([_entry("3-1", "n", "9")])
    reply = from_redis_value(value, StreamClaimReply)
    assert reply.ids[0].id == "3-1"
    assert reply.ids[0].get("n", int) == 9


def test_read_reply():
    value = Bulk([
        Bulk([Data("s1"), Bulk([_entry("1-0", "f", "v")])]),
        Bulk([Data("s2"), Bulk([])]),
    ])
    reply = StreamReadReply.from_redis_value(value)
    assert [k.key for k in reply.keys] == ["s1", "s2"]
    assert reply.keys[0].ids[0].id == "1-0"
    assert reply.keys[0].ids[0].get("f") == "v"
    assert reply.keys[1].ids == []


def test_stream_id_get_missing_and_bad():
    entry = StreamId(id="1-0", map={"f": Data("abc")})
    assert entry.get("missing") is None
    assert entry.get("f", int) is None
    assert "f" in entry
    assert len(entry) == 1


def test_pending_reply_empty():
    reply = StreamPendingReply.from_redis_value(Bulk([Int(0), Nil(), Nil(), Nil()]))
    assert reply.count() == 0
    assert reply.data is None


def test_pending_reply_data():
    value = Bulk([
        Int(2),
        Data("1-0"),
        Data("2-0"),
        Bulk([Bulk([Data("alice"), Data("2")])]),
    ])
    reply = StreamPendingReply.from_redis_value(value)
    assert reply.count() == 2
    assert reply.data.start_id == "1-0"
    assert reply.data.end_id == "2-0"
    assert [(c.name, c.pending) for c in reply.data.consumers] == [("alice", 2)]


def test_pending_reply_bad_pending_count_defaults_to_zero():
    value = Bulk([Int(1), Data("1-0"), Data("1-0"), Bulk([Bulk([Data("bob"), Data("x")])])])
    reply = StreamPendingReply.from_redis_value(value)
    assert reply.data.consumers[0].pending == 0


def test_pending_reply_missing_start_id():
    with pytest.raises(RedisError) as info:
        StreamPendingReply.from_redis_value(Bulk([Int(1), Nil(), Data("1-0"), Bulk([])]))
    assert info.value.is_io_error()
    assert str(info.value) == "IllegalState: Non-zero pending expects start id"


def test_pending_reply_missing_end_id():
    with pytest.raises(RedisError) as info:
        StreamPendingReply.from_redis_value(Bulk([Int(1), Data("1-0"), Nil(), Bulk([])]))
    assert str(info.value) == "IllegalState: Non-zero pending expects end id"


def test_pending_count_reply():
    value = Bulk([Bulk([Data("1-0"), Data("alice"), Int(150), Int(3)])])
    reply = StreamPendingCountReply.from_redis_value(value)
    assert len(reply.ids) == 1
    pid = reply.ids[0]
    assert (pid.id, pid.consumer, pid.last_delivered_ms, pid.times_delivered) == (
        "1-0", "alice", 150, 3,
    )


@pytest.mark.parametrize(
    "value, message",
    [
        (Status("x"), "Cannot parse redis data (1)"),
        (Bulk([Int(1)]), "Cannot parse redis data (2)"),
        (Bulk([Bulk([Data("1-0"), Data("a"), Int(1)])]), "Cannot parse redis data (3)"),
    ],
)
def test_pending_count_reply_errors(value, message):
    with pytest.raises(RedisError) as info:
        StreamPendingCountReply.from_redis_value(value)
    assert info.value.kind is ErrorKind.TYPE_ERROR
    assert str(info.value) == message


def test_info_stream_reply():
    value = Bulk([
        Data("length"), Int(2),
        Data("radix-tree-nodes"), Int(4),
        Data("groups"), Int(1),
        Data("last-generated-id"), Data("2-0"),
        Data("first-entry"), _entry("1-0", "a", "x"),
        Data("last-entry"), _entry("2-0", "b", "y"),
    ])
    reply = StreamInfoStreamReply.from_redis_value(value)
    assert (reply.length, reply.radix_tree_keys, reply.groups) == (2, 4, 1)
    assert reply.last_generated_id == "2-0"
    assert reply.first_entry.id == "1-0"
    assert reply.last_entry.get("b") == "y"


def test_info_stream_reply_defaults():
    reply = StreamInfoStreamReply.from_redis_value(Bulk([]))
    assert reply.length == 0
    assert reply.first_entry == StreamId()


def test_info_consumers_reply():
    value = Bulk([
        Bulk([Data("name"), Data("alice"), Data("pending"), Int(1), Data("idle"), Int(9)]),
        Bulk([Data("name"), Data("bob")]),
    ])
    reply = StreamInfoConsumersReply.from_redis_value(value)
    assert [(c.name, c.pending, c.idle) for c in reply.consumers] == [
        ("alice", 1, 9), ("bob", 0, 0),
    ]


def test_info_groups_reply():
    value = Bulk([
        Bulk([
            Data("name"), Data("g1"),
            Data("consumers"), Int(2),
            Data("pending"), Int(5),
            Data("last-delivered-id"), Data("7-0"),
        ]),
    ])
    reply = StreamInfoGroupsReply.from_redis_value(value)
    group = reply.groups[0]
    assert (group.name, group.consumers, group.pending, group.last_delivered_id) == (
        "g1", 2, 5, "7-0",
    )


def test_info_groups_reply_wrong_type():
    with pytest.raises(RedisError) as info:
        StreamInfoGroupsReply.from_redis_value(Int(3))
    assert info.value.kind is ErrorKind.TYPE_ERROR