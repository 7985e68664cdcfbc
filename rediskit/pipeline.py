"""Command pipelines, optionally wrapped in MULTI/EXEC."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .args import to_redis_args
from .errors import ErrorKind, RedisError
from .value import Bulk, Nil, Value

__all__ = ["Pipeline"]


class Pipeline:
    """A sequence of commands sent to the server in one go.

    Each command is a list of argument byte strings. Commands marked with
    ``ignore`` are dropped from the results.
    """

    def __init__(self) -> None:
        self.commands: list[list[bytes]] = []
        self.transaction_mode = False
        self.ignored_commands: set[int] = set()

    def __iter__(self) -> Iterator[list[bytes]]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def atomic(self) -> Pipeline:
        """Enclose the whole pipeline in MULTI/EXEC."""
        self.transaction_mode = True
        return self

    def add_command(self, command: Any) -> Pipeline:
        """Append a complete command given as its arguments."""
        self.commands.append(to_redis_args(command))
        return self

    def cmd(self, name: str) -> Pipeline:
        """Start a new command."""
        return self.add_command(name)

    def arg(self, value: Any) -> Pipeline:
        """Add an argument to the last command started."""
        if not self.commands:
            raise IndexError("No command on stack")
        self.commands[-1].extend(to_redis_args(value))
        return self

    def ignore(self) -> Pipeline:
        """Drop the last command's reply from the results."""
        if self.commands:
            self.ignored_commands.add(len(self.commands) - 1)
        return self

    def clear(self) -> None:
        """Remove every command so the pipeline can be reused."""
        self.commands.clear()
        self.ignored_commands.clear()

    def make_pipeline_results(self, responses: list[Value]) -> Bulk:
        """The replies of the commands that are not ignored."""
        return Bulk(
            reply
            for index, reply in enumerate(responses)
            if index not in self.ignored_commands
        )

    def transaction_results(self, responses: list[Value]) -> Value:
        """The results of an atomic pipeline from its replies.

        Only the last reply, the one to EXEC, is used: nil if the
        transaction was aborted, otherwise the filtered replies.
        """
        last = responses[-1] if responses else None
        if isinstance(last, Nil):
            return last
        if isinstance(last, Bulk):
            return self.make_pipeline_results(list(last.items))
        raise RedisError(
            ErrorKind.RESPONSE_ERROR, "Invalid response when parsing multi response"
        )