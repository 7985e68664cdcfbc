"""Low-level values as they come back from the server."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

__all__ = ["Value", "Nil", "Int", "Data", "Bulk", "Status", "Okay"]


def _debug_str(text: str) -> str:
    """Quote a string the way a debug dump shows it."""
    out = ['"']
    for ch in text:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\0":
            out.append("\\0")
        elif not ch.isprintable():
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


class Value:
    """Base class of every reply value.

    Error replies are split off before a value is built, so a value only
    holds the remaining reply types.
    """

    __slots__ = ()

    def looks_like_cursor(self) -> bool:
        """True if this is a two-item bulk of cursor data and a bulk."""
        if not isinstance(self, Bulk) or len(self.items) != 2:
            return False
        first, second = self.items
        return isinstance(first, Data) and isinstance(second, Bulk)

    def as_sequence(self) -> tuple[Value, ...] | None:
        """The items if this value can be read as a sequence, else None."""
        if isinstance(self, Bulk):
            return self.items
        if isinstance(self, Nil):
            return ()
        return None

    def as_map_iter(self) -> Iterator[tuple[Value, Value]] | None:
        """Key/value pairs if this value can be read as a map, else None.

        A trailing unpaired item is dropped.
        """
        if not isinstance(self, Bulk):
            return None
        it = iter(self.items)
        return zip(it, it)


@dataclass(frozen=True)
class Nil(Value):
    """A nil reply."""

    def __str__(self) -> str:
        return "nil"


@dataclass(frozen=True)
class Int(Value):
    """An integer reply."""

    value: int

    def __str__(self) -> str:
        return f"int({self.value})"


@dataclass(frozen=True)
class Data(Value):
    """Arbitrary binary data."""

    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.encode("utf-8"))
        else:
            object.__setattr__(self, "value", bytes(self.value))

    def __str__(self) -> str:
        try:
            text = self.value.decode("utf-8")
        except UnicodeDecodeError:
            return f"binary-data({list(self.value)})"
        return f"string-data('{_debug_str(text)}')"


@dataclass(frozen=True)
class Bulk(Value):
    """A bulk reply holding nested values."""

    items: tuple[Value, ...] = field(default=())

    def __init__(self, items: Iterable[Value] = ()) -> None:
        object.__setattr__(self, "items", tuple(items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __str__(self) -> str:
        return "bulk(" + ", ".join(str(item) for item in self.items) + ")"


@dataclass(frozen=True)
class Status(Value):
    """A status reply."""

    value: str

    def __str__(self) -> str:
        return f"status({_debug_str(self.value)})"


@dataclass(frozen=True)
class Okay(Value):
    """A status reply of exactly "OK"."""

    def __str__(self) -> str:
        return "ok"