"""Shared behaviour for external tool wrappers."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Mapping, Sequence

from ..logging import get_logger
from .invocation import ToolInvocation, ToolResult, invoke

LOGGER = get_logger(__name__)


def resolve_executable(name: str, tool_dir: str | Path | None = None) -> str:
    """Locate a tool in the configured tool directory, then on PATH."""
    if tool_dir:
        suffix = ".exe" if sys.platform == "win32" else ""
        candidate = Path(tool_dir) / f"{name}{suffix}"
        if candidate.exists():
            return str(candidate)
    found = shutil.which(name)
    if found:
        return found
    LOGGER.warning("Tool '%s' not found in %s or on PATH", name, tool_dir or "tool dir")
    return name


class ExternalTool:
    """Base wrapper binding an executable to a default deadline."""

    def __init__(self, executable: str, *, timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def run(
        self,
        args: Sequence[str],
        *,
        stdin_payload: bytes | None = None,
        working_dir: str | Path | None = None,
        env: Mapping[str, str] | None = None,
        combined_output: bool = False,
    ) -> ToolResult:
        return invoke(
            ToolInvocation(
                executable=self.executable,
                args=list(args),
                working_dir=str(working_dir) if working_dir is not None else None,
                env=dict(env or {}),
                stdin_payload=stdin_payload,
                combined_output=combined_output,
                timeout=self.timeout,
            )
        )


__all__ = ["ExternalTool", "resolve_executable"]
