"""Blocking subprocess invocation of external analysis tools."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from ..errors import ExecutionError, SpawnError, ToolTimeoutError
from ..logging import get_logger

LOGGER = get_logger(__name__)

_INHERITED_ENV = ("PATH", "SYSTEMROOT") if sys.platform == "win32" else ("PATH",)


@dataclass(slots=True)
class ToolInvocation:
    executable: str
    args: Sequence[str] = ()
    working_dir: str | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    stdin_payload: bytes | None = None
    combined_output: bool = False
    timeout: float | None = None

    @property
    def command(self) -> list[str]:
        return [self.executable, *self.args]


@dataclass(slots=True)
class ToolResult:
    stdout: bytes
    returncode: int

    @property
    def text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")


def build_environment(overrides: Mapping[str, str]) -> dict[str, str]:
    """Return the search path from the caller's environment plus overrides."""
    env = {name: os.environ[name] for name in _INHERITED_ENV if name in os.environ}
    env.update(overrides)
    return env


def invoke(invocation: ToolInvocation) -> ToolResult:
    """Run a tool to completion and return its captured output.

    The payload is handed to ``subprocess.run`` which writes it and closes
    stdin while draining output concurrently, so tools that wait for EOF get
    it without filling a bounded pipe. A non-zero exit raises
    :class:`ExecutionError` with whatever was captured.
    """
    command = invocation.command
    LOGGER.debug("Running tool: %s (cwd=%s)", " ".join(command), invocation.working_dir or ".")
    try:
        completed = subprocess.run(
            command,
            input=invocation.stdin_payload,
            stdin=None if invocation.stdin_payload is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if invocation.combined_output else subprocess.PIPE,
            cwd=invocation.working_dir,
            env=build_environment(invocation.env),
            timeout=invocation.timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        LOGGER.error("Tool %s timed out after %ss", invocation.executable, invocation.timeout)
        raise ToolTimeoutError(
            f"{invocation.executable} exceeded {invocation.timeout}s", output=exc.stdout or b""
        ) from exc
    except OSError as exc:
        LOGGER.error("Unable to start %s: %s", invocation.executable, exc)
        raise SpawnError(f"cannot start {invocation.executable}: {exc}") from exc

    stdout = completed.stdout or b""
    if completed.stderr:
        LOGGER.debug("%s stderr:\n%s", invocation.executable, completed.stderr.decode("utf-8", errors="replace"))
    if completed.returncode != 0:
        LOGGER.error("Tool %s failed with exit code %s", invocation.executable, completed.returncode)
        raise ExecutionError(
            f"{invocation.executable} exited with status {completed.returncode}",
            output=stdout,
            returncode=completed.returncode,
        )
    return ToolResult(stdout=stdout, returncode=completed.returncode)


__all__ = ["ToolInvocation", "ToolResult", "build_environment", "invoke"]
