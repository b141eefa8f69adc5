"""Wrapper around the cursor type-query tool (ide_stub)."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from ..logging import get_logger
from ..paths import platform_identifiers, split_source_path
from .base import ExternalTool

LOGGER = get_logger(__name__)


class QueryMode(str, Enum):
    INFO = "info"
    DEFINITION = "def"
    USAGES = "use"


class QueryTool(ExternalTool):
    """Invoke ``<tool> type -cursor <file>:<offset> -<mode> .`` in the file's directory."""

    def __init__(self, executable: str, *, timeout: float | None = None, goroot: str | None = None) -> None:
        super().__init__(executable, timeout=timeout)
        self.goroot = goroot

    def environment(self, workspace: str) -> dict[str, str]:
        goos, goarch = platform_identifiers()
        env = {"GOPATH": workspace, "GOOS": goos, "GOARCH": goarch}
        if self.goroot:
            env["GOROOT"] = self.goroot
        return env

    def query(self, file_path: str | Path, offset: int, mode: QueryMode, workspace: str) -> str:
        """Return the trimmed combined output of one cursor query."""
        directory, filename = split_source_path(file_path)
        result = self.run(
            ["type", "-cursor", f"{filename}:{offset}", f"-{mode.value}", "."],
            working_dir=directory,
            env=self.environment(workspace),
            combined_output=True,
        )
        return result.text.strip()


__all__ = ["QueryMode", "QueryTool"]
