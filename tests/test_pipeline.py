import pytest

from rediskit.errors import ErrorKind, RedisError
from rediskit.pipeline import Pipeline
from rediskit.value import Bulk, Data, Int, Nil, Okay, Status


def _sample():
    return (
        Pipeline()
        .cmd("SET").arg("key_1").arg(42).ignore()
        .cmd("SET").arg("key_2").arg(43).ignore()
        .cmd("MGET").arg(["key_1", "key_2"])
    )


def test_commands_are_built():
    pipe = _sample()
    assert pipe.commands == [
        [b"SET", b"key_1", b"42"],
        [b"SET", b"key_2", b"43"],
        [b"MGET", b"key_1", b"key_2"],
    ]
    assert len(pipe) == 3
    assert list(pipe) == pipe.commands


def test_ignored_indices():
    assert _sample().ignored_commands == {0, 1}


def test_atomic_sets_mode():
    pipe = Pipeline()
    assert pipe.transaction_mode is False
    assert pipe.atomic() is pipe
    assert pipe.transaction_mode is True


def test_add_command_takes_arguments():
    pipe = Pipeline().add_command(["GET", "k"])
    assert pipe.commands == [[b"GET", b"k"]]


def test_arg_on_empty_pipeline_raises():
    with pytest.raises(IndexError):
        Pipeline().arg("x")


def test_ignore_on_empty_pipeline_is_noop():
    pipe = Pipeline().ignore()
    assert pipe.ignored_commands == set()


def test_clear_resets_everything():
    pipe = _sample()
    pipe.clear()
    assert pipe.commands == []
    assert pipe.ignored_commands == set()


def test_make_pipeline_results_skips_ignored():
    pipe = _sample()
    mget = Bulk([Data(b"42"), Data(b"43")])
    assert pipe.make_pipeline_results([Okay(), Okay(), mget]) == Bulk([mget])


def test_make_pipeline_results_without_ignored():
    pipe = Pipeline().cmd("GET").arg("a").cmd("GET").arg("b")
    replies = [Data(b"1"), Nil()]
    assert pipe.make_pipeline_results(replies) == Bulk(replies)


def test_transaction_results_use_exec_reply():
    pipe = _sample().atomic()
    mget = Bulk([Data(b"42"), Data(b"43")])
    responses = [
        Okay(),
        Status("QUEUED"),
        Status("QUEUED"),
        Status("QUEUED"),
        Bulk([Okay(), Okay(), mget]),
    ]
    assert pipe.transaction_results(responses) == Bulk([mget])


def test_transaction_results_nil_when_aborted():
    assert _sample().transaction_results([Okay(), Nil()]) == Nil()


@pytest.mark.parametrize("responses", [[], [Int(1)], [Okay()]])
def test_transaction_results_invalid(responses):
    with pytest.raises(RedisError) as info:
        _sample().transaction_results(responses)
    assert info.value.kind is ErrorKind.RESPONSE_ERROR
    assert str(info.value) == "Invalid response when parsing multi response"