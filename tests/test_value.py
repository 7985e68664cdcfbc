import pytest

from rediskit.value import Bulk, Data, Int, Nil, Okay, Status


@pytest.mark.parametrize(
    "value, expected",
    [
        (Bulk([Data(b"0"), Bulk([])]), True),
        (Bulk([Data(b"17"), Bulk([Data(b"a"), Data(b"b")])]), True),
        (Bulk([Int(0), Bulk([])]), False),
        (Bulk([Data(b"0"), Data(b"x")]), False),
        (Bulk([Data(b"0")]), False),
        (Bulk([Data(b"0"), Bulk([]), Nil()]), False),
        (Data(b"0"), False),
        (Nil(), False),
    ],
)
def test_looks_like_cursor(value, expected):
    assert value.looks_like_cursor() is expected


def test_as_sequence_of_bulk_returns_items():
    items = [Int(1), Data(b"a")]
    assert Bulk(items).as_sequence() == tuple(items)


def test_as_sequence_of_nil_is_empty():
    assert Nil().as_sequence() == ()


@pytest.mark.parametrize("value", [Int(1), Data(b"x"), Status("s"), Okay()])
def test_as_sequence_of_scalars_is_none(value):
    assert value.as_sequence() is None


def test_as_map_iter_pairs_items():
    bulk = Bulk([Data(b"a"), Int(1), Data(b"b"), Int(2)])
    assert list(bulk.as_map_iter()) == [(Data(b"a"), Int(1)), (Data(b"b"), Int(2))]


def test_as_map_iter_drops_trailing_item():
    bulk = Bulk([Data(b"a"), Int(1), Data(b"b")])
    assert list(bulk.as_map_iter()) == [(Data(b"a"), Int(1))]


@pytest.mark.parametrize("value", [Nil(), Int(3), Data(b"x"), Status("x"), Okay()])
def test_as_map_iter_of_non_bulk_is_none(value):
    assert value.as_map_iter() is None


def test_equality_and_hashing():
    assert Bulk([Int(1), Data(b"a")]) == Bulk((Int(1), Data(b"a")))
    assert Nil() == Nil()
    assert Okay() != Status("OK")
    assert Int(1) != Data(b"1")
    assert len({Nil(), Nil(), Okay()}) == 2


def test_data_accepts_str_and_bytearray():
    assert Data("42") == Data(b"42")
    assert Data(bytearray(b"ab")).value == b"ab"


def test_bulk_len_and_iter():
    bulk = Bulk([Int(1), Int(2), Int(3)])
    assert len(bulk) == 3
    assert list(bulk) == [Int(1), Int(2), Int(3)]


def test_str_forms():
    assert str(Nil()) == "nil"
    assert str(Okay()) == "ok"
    assert str(Int(7)).startswith("int(")
    assert "7" in str(Int(7))
    assert str(Data(b"\xff\x00")).startswith("binary-data(")
    assert str(Data(b"foo")).startswith("string-data(")
    assert "foo" in str(Data(b"foo"))
    assert str(Bulk([Nil(), Okay()])) == f"bulk({Nil()}, {Okay()})"
    assert str(Status("up")).startswith("status(")