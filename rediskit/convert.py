"""Conversion of reply values into ordinary Python types."""

from __future__ import annotations

import re
import types
import typing
from collections.abc import Iterator, Mapping
from typing import Any

from .errors import ErrorKind, RedisError
from .value import Bulk, Data, Int, Nil, Okay, Status, Value

__all__ = ["InfoDict", "from_redis_value"]

_INT_RE = re.compile(r"\A[+-]?[0-9]+\Z")
_FLOAT_RE = re.compile(
    r"\A[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)\Z",
    re.IGNORECASE,
)


def _invalid(value: Any, detail: str) -> RedisError:
    if isinstance(value, Value):
        shown = str(value)
    else:
        shown = "[" + ", ".join(str(item) for item in value) + "]"
    return RedisError(
        ErrorKind.TYPE_ERROR,
        "Response was of incompatible type",
        f'"{detail}" (response was {shown})',
    )


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise RedisError(ErrorKind.TYPE_ERROR, "Invalid UTF-8") from None


def _to_number(value: Value, target: type, pattern: re.Pattern[str]) -> Any:
    if isinstance(value, Int):
        return target(value.value)
    if isinstance(value, Status):
        text = value.value
    elif isinstance(value, Data):
        text = _decode(value.value)
    else:
        raise _invalid(value, "Response type not convertible to numeric.")
    if not pattern.match(text):
        raise _invalid(value, "Could not convert from string.")
    return target(text)


def _to_bool(value: Value) -> bool:
    if isinstance(value, Nil):
        return False
    if isinstance(value, Int):
        return value.value != 0
    if isinstance(value, Okay):
        return True
    if isinstance(value, Status):
        if value.value in ("1", "0"):
            return value.value == "1"
        raise _invalid(value, "Response status not valid boolean")
    if isinstance(value, Data):
        if value.value in (b"1", b"0"):
            return value.value == b"1"
        raise _invalid(value, "Response type not bool compatible.")
    raise _invalid(value, "Response type not bool compatible.")


def _to_str(value: Value) -> str:
    if isinstance(value, Data):
        return _decode(value.value)
    if isinstance(value, Okay):
        return "OK"
    if isinstance(value, Status):
        return value.value
    raise _invalid(value, "Response type not string compatible.")


def _to_bytes(value: Value) -> bytes:
    if isinstance(value, Data):
        return value.value
    if isinstance(value, Bulk):
        return bytes(_to_number(item, int, _INT_RE) for item in value.items)
    if isinstance(value, Nil):
        return b""
    raise _invalid(value, "Response type not vector compatible.")


def _tuple_args(target: Any) -> tuple[Any, ...] | None:
    if target is tuple:
        return None
    if typing.get_origin(target) is tuple:
        return typing.get_args(target)
    return None


def _to_tuple(value: Value, args: tuple[Any, ...]) -> tuple[Any, ...]:
    if not isinstance(value, Bulk):
        raise _invalid(value, "Not a bulk response")
    if len(value.items) != len(args):
        raise _invalid(value, "Bulk response of wrong dimension")
    return tuple(from_redis_value(item, t) for item, t in zip(value.items, args))


def _to_list(value: Value, item_type: Any) -> list[Any]:
    if isinstance(value, Data):
        try:
            return [from_redis_value(value, item_type)]
        except RedisError:
            name = getattr(item_type, "__name__", str(item_type))
            raise _invalid(value, f"Conversion to list[{name}] failed.") from None
    if isinstance(value, Nil):
        return []
    if not isinstance(value, Bulk):
        raise _invalid(value, "Response type not vector compatible.")
    items = value.items
    tuple_args = _tuple_args(item_type)
    if tuple_args:
        width = len(tuple_args)
        if len(items) % width != 0:
            raise _invalid(items, "Bulk response of wrong dimension")
        chunks = zip(*[iter(items)] * width)
        return [
            tuple(from_redis_value(item, t) for item, t in zip(chunk, tuple_args))
            for chunk in chunks
        ]
    return [from_redis_value(item, item_type) for item in items]


def _to_dict(value: Value, key_type: Any, value_type: Any) -> dict[Any, Any]:
    if isinstance(value, Nil):
        return {}
    pairs = value.as_map_iter()
    if pairs is None:
        raise _invalid(value, "Response type not hashmap compatible")
    return {
        from_redis_value(k, key_type): from_redis_value(v, value_type) for k, v in pairs
    }


def _to_set(value: Value, item_type: Any, factory: type) -> Any:
    items = value.as_sequence()
    if items is None:
        raise _invalid(value, "Response type not hashset compatible")
    return factory(from_redis_value(item, item_type) for item in items)


def from_redis_value(value: Value, target: Any) -> Any:
    """Convert a reply value into the type described by ``target``.

    ``target`` may be a plain type (int, float, str, bytes, bool, Value,
    InfoDict, None), a parametrised container (list[...], dict[...],
    set[...], frozenset[...], tuple[...]), an optional type, or any class
    with a ``from_redis_value`` classmethod.
    """
    if target is Any or target is Value:
        return value
    if target is None or target is type(None):
        return None

    origin = typing.get_origin(target)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(target) if a is not type(None)]
        if len(args) != 1 or len(args) == len(typing.get_args(target)):
            raise TypeError(f"unsupported conversion target: {target!r}")
        if isinstance(value, Nil):
            return None
        return from_redis_value(value, args[0])

    if origin is not None:
        args = typing.get_args(target)
        if origin is list:
            return _to_list(value, args[0] if args else Any)
        if origin is dict:
            key_type, value_type = args if args else (Any, Any)
            return _to_dict(value, key_type, value_type)
        if origin in (set, frozenset):
            return _to_set(value, args[0] if args else Any, origin)
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return tuple(_to_list(value, args[0]))
            return _to_tuple(value, args)
        raise TypeError(f"unsupported conversion target: {target!r}")

    if target is bool:
        return _to_bool(value)
    if target is int:
        return _to_number(value, int, _INT_RE)
    if target is float:
        return _to_number(value, float, _FLOAT_RE)
    if target is str:
        return _to_str(value)
    if target is bytes:
        return _to_bytes(value)
    if target is list:
        return _to_list(value, Any)
    if target is dict:
        return _to_dict(value, Any, Any)
    if target in (set, frozenset):
        return _to_set(value, Any, target)
    if isinstance(target, type) and issubclass(target, Value):
        if isinstance(value, target):
            return value
        raise _invalid(value, f"Response is not {target.__name__}.")
    converter = getattr(target, "from_redis_value", None)
    if callable(converter):
        return converter(value)
    raise TypeError(f"unsupported conversion target: {target!r}")


class InfoDict(Mapping[str, Value]):
    """Key/value data from the INFO command.

    Each line is a ``key:value`` pair; empty lines and lines starting with
    ``#`` are skipped.
    """

    def __init__(self, text: str) -> None:
        self._map: dict[str, Value] = {}
        for line in text.split("\n"):
            line = line.removesuffix("\r")
            if not line or line.startswith("#"):
                continue
            key, sep, rest = line.partition(":")
            if not sep:
                continue
            self._map[key] = Status(rest)

    @classmethod
    def from_redis_value(cls, value: Value) -> InfoDict:
        """Build an info dictionary from a string reply."""
        return cls(_to_str(value))

    def __getitem__(self, key: str) -> Value:
        return self._map[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._map)

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"InfoDict({self._map!r})"

    def get(self, key: str, target: Any = str) -> Any:  # type: ignore[override]
        """The value for ``key`` converted to ``target``, or None."""
        found = self.find(key)
        if found is None:
            return None
        try:
            return from_redis_value(found, target)
        except RedisError:
            return None

    def find(self, key: str) -> Value | None:
        """The raw value for ``key``, or None."""
        return self._map.get(key)