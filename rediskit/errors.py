"""Error kinds and the library's error type."""

from __future__ import annotations

import os
from enum import Enum

__all__ = ["ErrorKind", "RedisError", "make_extension_error", "make_io_error"]


class ErrorKind(Enum):
    """Every kind of error the library reports."""

    RESPONSE_ERROR = "ResponseError"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    TYPE_ERROR = "TypeError"
    EXEC_ABORT_ERROR = "ExecAbortError"
    BUSY_LOADING_ERROR = "BusyLoadingError"
    NO_SCRIPT_ERROR = "NoScriptError"
    INVALID_CLIENT_CONFIG = "InvalidClientConfig"
    MOVED = "Moved"
    ASK = "Ask"
    TRY_AGAIN = "TryAgain"
    CLUSTER_DOWN = "ClusterDown"
    CROSS_SLOT = "CrossSlot"
    MASTER_DOWN = "MasterDown"
    IO_ERROR = "IoError"
    CLIENT_ERROR = "ClientError"
    EXTENSION_ERROR = "ExtensionError"
    READ_ONLY = "ReadOnly"


_CODES = {
    ErrorKind.RESPONSE_ERROR: "ERR",
    ErrorKind.EXEC_ABORT_ERROR: "EXECABORT",
    ErrorKind.BUSY_LOADING_ERROR: "LOADING",
    ErrorKind.NO_SCRIPT_ERROR: "NOSCRIPT",
    ErrorKind.MOVED: "MOVED",
    ErrorKind.ASK: "ASK",
    ErrorKind.TRY_AGAIN: "TRYAGAIN",
    ErrorKind.CLUSTER_DOWN: "CLUSTERDOWN",
    ErrorKind.CROSS_SLOT: "CROSSSLOT",
    ErrorKind.MASTER_DOWN: "MASTERDOWN",
    ErrorKind.READ_ONLY: "READONLY",
}

_CATEGORIES = {
    ErrorKind.RESPONSE_ERROR: "response error",
    ErrorKind.AUTHENTICATION_FAILED: "authentication failed",
    ErrorKind.TYPE_ERROR: "type error",
    ErrorKind.EXEC_ABORT_ERROR: "script execution aborted",
    ErrorKind.BUSY_LOADING_ERROR: "busy loading",
    ErrorKind.NO_SCRIPT_ERROR: "no script",
    ErrorKind.INVALID_CLIENT_CONFIG: "invalid client config",
    ErrorKind.MOVED: "key moved",
    ErrorKind.ASK: "key moved (ask)",
    ErrorKind.TRY_AGAIN: "try again",
    ErrorKind.CLUSTER_DOWN: "cluster down",
    ErrorKind.CROSS_SLOT: "cross-slot",
    ErrorKind.MASTER_DOWN: "master down",
    ErrorKind.IO_ERROR: "I/O error",
    ErrorKind.EXTENSION_ERROR: "extension error",
    ErrorKind.CLIENT_ERROR: "client error",
    ErrorKind.READ_ONLY: "read-only",
}

_CLUSTER_KINDS = frozenset(
    {ErrorKind.MOVED, ErrorKind.ASK, ErrorKind.TRY_AGAIN, ErrorKind.CLUSTER_DOWN}
)

_U16_MAX = 0xFFFF


class RedisError(Exception):
    """An error raised by the library or signalled by the server."""

    def __init__(
        self, kind: ErrorKind, description: str, detail: str | None = None
    ) -> None:
        super().__init__(description if detail is None else f"{description}: {detail}")
        self.kind = kind
        self.description = description
        self.detail = detail
        self.io_error: OSError | None = None
        self._extension_code: str | None = None

    def __str__(self) -> str:
        if self.io_error is not None:
            return str(self.io_error)
        if self._extension_code is not None:
            return f"{self._extension_code}: {self.detail}"
        if self.detail is None:
            return self.description
        return f"{self.description}: {self.detail}"

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RedisError):
            return NotImplemented
        if self.io_error is not None or other.io_error is not None:
            return False
        if self._extension_code is not None or other._extension_code is not None:
            return self._extension_code == other._extension_code
        return self.kind == other.kind and (self.detail is None) == (other.detail is None)

    def __hash__(self) -> int:
        return hash((self.kind, self._extension_code))

    def code(self) -> str | None:
        """The raw error code, if there is one."""
        if self.kind in _CODES:
            return _CODES[self.kind]
        return self._extension_code

    def category(self) -> str:
        """The name of the error category, for display."""
        return _CATEGORIES[self.kind]

    def is_io_error(self) -> bool:
        """True if the failure came from I/O."""
        return self.io_error is not None

    def is_cluster_error(self) -> bool:
        """True if this is a cluster redirection or availability error."""
        return self.kind in _CLUSTER_KINDS

    def is_connection_refusal(self) -> bool:
        """True if the connection was refused.

        A missing unix socket file counts as a refusal on POSIX systems.
        """
        err = self.io_error
        if err is None:
            return False
        if isinstance(err, ConnectionRefusedError):
            return True
        return isinstance(err, FileNotFoundError) and os.name == "posix"

    def is_timeout(self) -> bool:
        """True if the failure was an I/O time-out."""
        return isinstance(self.io_error, (TimeoutError, BlockingIOError))

    def is_connection_dropped(self) -> bool:
        """True if the connection was dropped."""
        return isinstance(self.io_error, (BrokenPipeError, ConnectionResetError))

    def redirect_node(self) -> tuple[str, int] | None:
        """The (address, slot) a MOVED or ASK error points to."""
        if self.kind not in (ErrorKind.ASK, ErrorKind.MOVED) or self.detail is None:
            return None
        parts = self.detail.split()
        if len(parts) < 2:
            return None
        slot_text = parts[0].removeprefix("+")
        if not slot_text.isascii() or not slot_text.isdigit():
            return None
        slot = int(slot_text)
        if slot > _U16_MAX:
            return None
        return parts[1], slot


def make_extension_error(code: str, detail: str | None = None) -> RedisError:
    """Build an error for a server error code the library does not know."""
    text = detail if detail is not None else "Unknown extension error encountered"
    err = RedisError(ErrorKind.EXTENSION_ERROR, "extension error", text)
    err._extension_code = code
    return err


def make_io_error(error: OSError) -> RedisError:
    """Wrap an operating-system error."""
    err = RedisError(ErrorKind.IO_ERROR, str(error))
    err.io_error = error
    err.__cause__ = error
    return err