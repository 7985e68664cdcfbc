"""Lua scripts that are called by their SHA1 hash."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any

from .args import to_redis_args

__all__ = ["Script", "ScriptInvocation"]


@dataclass(frozen=True)
class Script:
    """A Lua script and its SHA1 hash.

    The script is immutable and can be shared; arguments and keys are
    collected on a ``ScriptInvocation``.
    """

    code: str
    hash: str = field(init=False)

    def __post_init__(self) -> None:
        digest = hashlib.sha1(self.code.encode("utf-8")).hexdigest()
        object.__setattr__(self, "hash", digest)

    def key(self, key: Any) -> ScriptInvocation:
        """Start an invocation with ``key`` filled in."""
        return ScriptInvocation(self, keys=to_redis_args(key))

    def arg(self, arg: Any) -> ScriptInvocation:
        """Start an invocation with ``arg`` filled in."""
        return ScriptInvocation(self, args=to_redis_args(arg))

    def prepare_invoke(self) -> ScriptInvocation:
        """Start an empty invocation."""
        return ScriptInvocation(self)


@dataclass
class ScriptInvocation:
    """The keys and arguments for one call of a script."""

    script: Script
    args: list[bytes] = field(default_factory=list)
    keys: list[bytes] = field(default_factory=list)

    def arg(self, arg: Any) -> ScriptInvocation:
        """Add a regular argument; it becomes ``ARGV[i]`` in the script."""
        self.args.extend(to_redis_args(arg))
        return self

    def key(self, key: Any) -> ScriptInvocation:
        """Add a key; it becomes ``KEYS[i]`` in the script."""
        self.keys.extend(to_redis_args(key))
        return self

    def eval_args(self) -> list[bytes]:
        """The EVALSHA command that runs the script by its hash."""
        return [
            b"EVALSHA",
            self.script.hash.encode("ascii"),
            *to_redis_args(len(self.keys)),
            *self.keys,
            *self.args,
        ]

    def load_args(self) -> list[bytes]:
        """The SCRIPT LOAD command that uploads the script."""
        return [b"SCRIPT", b"LOAD", self.script.code.encode("utf-8")]