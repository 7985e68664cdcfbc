"""Conversion of Python values into command arguments."""

from __future__ import annotations

import math
from collections.abc import Mapping, Set
from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = [
    "NumericBehavior",
    "Expiry",
    "to_redis_args",
    "is_single_arg",
    "describe_numeric_behavior",
]


class NumericBehavior(Enum):
    """How an argument behaves in a numeric context."""

    NON_NUMERIC = "NonNumeric"
    NUMBER_IS_INTEGER = "NumberIsInteger"
    NUMBER_IS_FLOAT = "NumberIsFloat"


_EXPIRY_KINDS = ("EX", "PX", "EXAT", "PXAT", "PERSIST")


@dataclass(frozen=True)
class Expiry:
    """An expiry setting for a key.

    ``EX`` and ``PX`` are relative times in seconds and milliseconds,
    ``EXAT`` and ``PXAT`` absolute Unix times in seconds and milliseconds,
    and ``PERSIST`` removes the time to live.
    """

    kind: str
    amount: int | None = None

    def __post_init__(self) -> None:
        if self.kind not in _EXPIRY_KINDS:
            raise ValueError(f"unknown expiry kind: {self.kind!r}")
        if self.kind == "PERSIST":
            if self.amount is not None:
                raise ValueError("PERSIST takes no amount")
            return
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"{self.kind} needs an integer amount")
        if self.amount < 0:
            raise ValueError(f"{self.kind} amount must not be negative")

    @classmethod
    def ex(cls, seconds: int) -> Expiry:
        """Expire after ``seconds`` seconds."""
        return cls("EX", seconds)

    @classmethod
    def px(cls, milliseconds: int) -> Expiry:
        """Expire after ``milliseconds`` milliseconds."""
        return cls("PX", milliseconds)

    @classmethod
    def exat(cls, timestamp: int) -> Expiry:
        """Expire at a Unix time given in seconds."""
        return cls("EXAT", timestamp)

    @classmethod
    def pxat(cls, timestamp: int) -> Expiry:
        """Expire at a Unix time given in milliseconds."""
        return cls("PXAT", timestamp)

    @classmethod
    def persist(cls) -> Expiry:
        """Remove the time to live."""
        return cls("PERSIST")


def _format_float(number: float) -> str:
    """Shortest round-tripping text for a float, in the wire's style."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number == 0:
        return "-0.0" if math.copysign(1.0, number) < 0 else "0.0"
    sign = "-" if number < 0 else ""
    mantissa, _, exp_text = repr(abs(number)).partition("e")
    int_part, _, frac_part = mantissa.partition(".")
    digits = int_part + frac_part
    point = len(int_part) + (int(exp_text) if exp_text else 0)
    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    length = len(digits)
    kk = point
    k = kk - length
    if 0 <= k and kk <= 16:
        body = digits + "0" * k + ".0"
    elif 0 < kk <= 16:
        body = digits[:kk] + "." + digits[kk:]
    elif -5 < kk <= 0:
        body = "0." + "0" * (-kk) + digits
    elif length == 1:
        body = f"{digits}e{kk - 1}"
    else:
        body = f"{digits[0]}.{digits[1:]}e{kk - 1}"
    return sign + body


def _write(value: Any, out: list[bytes]) -> None:
    if value is None:
        return
    if isinstance(value, (bytes, bytearray, memoryview)):
        out.append(bytes(value))
    elif isinstance(value, str):
        out.append(value.encode("utf-8"))
    elif isinstance(value, bool):
        out.append(b"1" if value else b"0")
    elif isinstance(value, int):
        out.append(str(value).encode("ascii"))
    elif isinstance(value, float):
        out.append(_format_float(value).encode("ascii"))
    elif isinstance(value, Mapping):
        for key, item in value.items():
            if not (is_single_arg(key) and is_single_arg(item)):
                raise ValueError("map keys and values must each be a single argument")
            _write(key, out)
            _write(item, out)
    elif isinstance(value, (list, tuple, Set)):
        for item in value:
            _write(item, out)
    else:
        converter = getattr(value, "to_redis_args", None)
        if not callable(converter):
            raise TypeError(
                f"cannot convert {type(value).__name__} into command arguments"
            )
        out.extend(bytes(arg) for arg in converter())


def to_redis_args(value: Any) -> list[bytes]:
    """Convert ``value`` into a list of command arguments.

    Scalars give one argument, ``None`` gives none, sequences and sets give
    one per item and mappings give key and value in turn.
    """
    out: list[bytes] = []
    _write(value, out)
    return out


def is_single_arg(value: Any) -> bool:
    """True if ``value`` converts into exactly one argument."""
    if value is None:
        return False
    if isinstance(value, (bytes, bytearray, memoryview, str, int, float)):
        return True
    if isinstance(value, tuple):
        return len(value) == 1
    if isinstance(value, list):
        return len(value) == 1 and is_single_arg(value[0])
    if isinstance(value, (Mapping, Set)):
        return len(value) <= 1
    check = getattr(value, "is_single_arg", None)
    if callable(check):
        return bool(check())
    return True


def describe_numeric_behavior(value: Any) -> NumericBehavior:
    """How ``value`` behaves in a numeric context."""
    if isinstance(value, bool) or value is None:
        return NumericBehavior.NON_NUMERIC
    if isinstance(value, int):
        return NumericBehavior.NUMBER_IS_INTEGER
    if isinstance(value, float):
        return NumericBehavior.NUMBER_IS_FLOAT
    describe = getattr(value, "describe_numeric_behavior", None)
    if callable(describe):
        return describe()
    return NumericBehavior.NON_NUMERIC