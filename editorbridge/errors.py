"""Error types raised by the editor bridge."""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for editor bridge failures."""


class OutOfRange(BridgeError, IndexError):
    """Cursor position does not exist in the given text."""


class MalformedLocation(BridgeError, ValueError):
    """Tool output line is not a ``path:line:column`` record."""


class SpawnError(BridgeError):
    """External executable could not be started."""


class ExecutionError(BridgeError):
    """External executable exited non-zero or its pipes failed."""

    def __init__(self, message: str, *, output: bytes = b"", returncode: int | None = None) -> None:
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class ToolTimeoutError(BridgeError, TimeoutError):
    """External executable exceeded its deadline and was killed."""

    def __init__(self, message: str, *, output: bytes = b"") -> None:
        super().__init__(message)
        self.output = output


class SessionClosed(BridgeError):
    """No live channel is registered for a session, or writing to it failed."""


class TransportError(BridgeError):
    """Channel read failed for a reason other than a clean disconnect."""


class PersistenceError(BridgeError):
    """Edited buffer could not be written to disk."""


__all__ = [
    "BridgeError",
    "ExecutionError",
    "MalformedLocation",
    "OutOfRange",
    "PersistenceError",
    "SessionClosed",
    "SpawnError",
    "ToolTimeoutError",
    "TransportError",
]
